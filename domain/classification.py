"""Threshold tables that turn a computed metric into a label.

A table is an ordered list of cut points. Bins are ``[lower, upper)`` with the
first bin open below and the last bin open above, so every finite value lands
in exactly one bin. Gender and age only pick the table; the lookup is the same
for all of them.
"""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from domain.entities import Gender
from domain.errors import InvalidInputError, NotComputable, UnknownMetricError


@dataclass(frozen=True)
class ThresholdTable:
    cuts: Tuple[float, ...]
    labels: Tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.labels) != len(self.cuts) + 1:
            raise ValueError("a table needs exactly one more label than cut points")
        if any(b <= a for a, b in zip(self.cuts, self.cuts[1:])):
            raise ValueError("cut points must be strictly increasing")

    @classmethod
    def of(cls, first_label: str, *bins: Tuple[float, str]) -> "ThresholdTable":
        """``of("Low", (10, "Normal"), (20, "High"))`` -> <10 Low, [10,20) Normal, >=20 High."""
        return cls(cuts=tuple(c for c, _ in bins), labels=(first_label,) + tuple(lbl for _, lbl in bins))

    def bins(self) -> List[Tuple[float, float, str]]:
        lowers = (-math.inf,) + self.cuts
        uppers = self.cuts + (math.inf,)
        return list(zip(lowers, uppers, self.labels))

    def lookup(self, value: float) -> str:
        return self.labels[bisect.bisect_right(self.cuts, value)]


@dataclass(frozen=True)
class AgeBand:
    min_age: float | None
    table: ThresholdTable


def _by_age(bands: Sequence[AgeBand]) -> Callable[[float | None], ThresholdTable]:
    def select(age: float | None) -> ThresholdTable:
        if age is None:
            raise NotComputable("classification", "age is required")
        chosen = None
        for band in bands:
            if band.min_age is None or age >= band.min_age:
                chosen = band.table
        if chosen is None:
            raise NotComputable("classification", f"no reference values for age {age:g}")
        return chosen

    return select


# --- Tables -----------------------------------------------------------------

# WHO (1995)
BMI = ThresholdTable.of(
    "Underweight",
    (18.5, "Normal"),
    (25.0, "Overweight"),
    (30.0, "Obesity class I"),
    (35.0, "Obesity class II"),
    (40.0, "Obesity class III"),
)

# ACSM Guidelines, 10th ed.
BODY_FAT = {
    Gender.MALE: ThresholdTable.of("Essential", (6, "Athletic"), (14, "Fitness"), (18, "Acceptable"), (25, "Obese")),
    Gender.FEMALE: ThresholdTable.of("Essential", (14, "Athletic"), (21, "Fitness"), (25, "Acceptable"), (32, "Obese")),
}


def _whr(low: float, moderate: float, high: float) -> ThresholdTable:
    return ThresholdTable.of("Low", (low, "Moderate"), (moderate, "High"), (high, "Very high"))


# WHO (2008) expert consultation, bands <40, 40-59, 60+
WAIST_HIP = {
    Gender.MALE: _by_age([
        AgeBand(None, _whr(0.83, 0.89, 0.94)),
        AgeBand(40, _whr(0.84, 0.91, 0.96)),
        AgeBand(60, _whr(0.88, 0.95, 1.00)),
    ]),
    Gender.FEMALE: _by_age([
        AgeBand(None, _whr(0.71, 0.78, 0.82)),
        AgeBand(40, _whr(0.72, 0.79, 0.84)),
        AgeBand(60, _whr(0.73, 0.80, 0.87)),
    ]),
}


def _cmb(very_low: float) -> ThresholdTable:
    # Frisancho bins are 4 cm wide
    return ThresholdTable.of(
        "Very low",
        (very_low, "Low"),
        (very_low + 4, "Adequate"),
        (very_low + 8, "High"),
        (very_low + 12, "Very high"),
    )


# Frisancho (1981); no reference below 20 years
CMB = {
    Gender.MALE: _by_age([AgeBand(20, _cmb(20.0)), AgeBand(30, _cmb(19.5)), AgeBand(40, _cmb(19.0)), AgeBand(50, _cmb(18.5))]),
    Gender.FEMALE: _by_age([AgeBand(20, _cmb(15.0)), AgeBand(30, _cmb(14.5)), AgeBand(40, _cmb(14.0)), AgeBand(50, _cmb(13.5))]),
}

# skeletal muscle, percent of body weight
MUSCLE_MASS = {
    Gender.MALE: ThresholdTable.of("Low", (40, "Normal"), (45, "High")),
    Gender.FEMALE: ThresholdTable.of("Low", (30, "Normal"), (35, "High")),
}

# bioimpedance device rating
VISCERAL_FAT = ThresholdTable.of("Normal", (10, "High"), (15, "Very high"))


TableSelector = Callable[[Gender, "float | None"], ThresholdTable]


def _split(tables: Dict[Gender, object]) -> TableSelector:
    def select(gender: Gender, age: float | None) -> ThresholdTable:
        # OTHER uses the default (non-male) table
        entry = tables[Gender.MALE if gender is Gender.MALE else Gender.FEMALE]
        return entry if isinstance(entry, ThresholdTable) else entry(age)  # type: ignore[operator]

    return select


def _single(table: ThresholdTable) -> TableSelector:
    return lambda gender, age: table


METRICS: Dict[str, TableSelector] = {
    "bmi": _single(BMI),
    "body_fat": _split(BODY_FAT),
    "waist_hip_ratio": _split(WAIST_HIP),
    "cmb": _split(CMB),
    "muscle_mass": _split(MUSCLE_MASS),
    "visceral_fat": _single(VISCERAL_FAT),
}


def table_for(metric: str, gender: Gender | str | None = None, age: float | None = None) -> ThresholdTable:
    try:
        selector = METRICS[metric]
    except KeyError:
        raise UnknownMetricError(f"unknown metric: {metric!r}") from None
    if gender is None:
        gender = Gender.OTHER
    elif not isinstance(gender, Gender):
        gender = Gender.parse(gender)
    try:
        return selector(gender, age)
    except NotComputable as exc:
        raise NotComputable(metric, exc.message) from None


def classify(metric: str, value: float | None, gender: Gender | str | None = None, age: float | None = None) -> str:
    if value is None:
        raise NotComputable(metric, f"{metric} has no value")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{metric} must be a number") from None
    if not math.isfinite(number):
        raise NotComputable(metric, f"{metric} is not a finite number")
    return table_for(metric, gender, age).lookup(number)
