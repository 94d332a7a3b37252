"""Skinfold body-density formulas.

Each formula is a plain record: which genders it was validated for, the age
range per gender, the skinfold sites summed per gender and the coefficients
per gender. ``evaluate`` is shared; adding a formula means adding a record to
``FORMULAS``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Mapping, Tuple

import structlog

from domain.calculations import body_fat_from_density, density_from_body_fat_siri
from domain.entities import Gender, Skinfolds
from domain.errors import NotComputable, UnknownFormulaError, UnsupportedFormulaApplication


log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AgeRange:
    min: float
    max: float

    def __contains__(self, age: float) -> bool:
        return self.min <= age <= self.max


@dataclass(frozen=True)
class DensityEquation:
    """density = intercept + linear*S + quadratic*S^2 + log10_coef*log10(S) + age_coef*age"""

    intercept: float
    linear: float = 0.0
    quadratic: float = 0.0
    log10_coef: float = 0.0
    age_coef: float = 0.0

    def density(self, total: float, age: float) -> float:
        value = self.intercept + self.linear * total + self.quadratic * total * total + self.age_coef * age
        if self.log10_coef:
            value += self.log10_coef * math.log10(total)
        return value


@dataclass(frozen=True)
class FatPercentEquation:
    """Formulas published as %fat; density is recovered with inverse Siri."""

    intercept: float
    slope: float

    def body_fat(self, total: float, age: float) -> float:
        return self.slope * total + self.intercept

    def density(self, total: float, age: float) -> float:
        bf = self.body_fat(total, age)
        if not 0 < bf < 100:
            return math.nan
        return density_from_body_fat_siri(bf)


Equation = DensityEquation | FatPercentEquation


@dataclass(frozen=True)
class FormulaDescriptor:
    id: str
    name: str
    reference: str
    age_ranges: Mapping[Gender, AgeRange]
    required_skinfolds: Mapping[Gender, Tuple[str, ...]]
    equations: Mapping[Gender, Equation]

    @property
    def genders(self) -> Tuple[Gender, ...]:
        return tuple(self.equations)

    def check_applicable(self, gender: Gender, age: float) -> None:
        if gender not in self.equations:
            raise UnsupportedFormulaApplication(
                f"{self.name} is not defined for gender {gender.value}", reason="gender"
            )
        rng = self.age_ranges[gender]
        if age not in rng:
            raise UnsupportedFormulaApplication(
                f"{self.name} is valid for ages {rng.min:g} to {rng.max:g}", reason="age"
            )

    def skinfold_sum(self, skinfolds: Skinfolds, gender: Gender) -> float:
        sites = self.required_skinfolds[gender]
        missing = [s for s in sites if skinfolds.get(s) <= 0]
        if missing:
            raise NotComputable("body_density", f"missing skinfolds: {', '.join(missing)}")
        return sum(skinfolds.get(s) for s in sites)

    def evaluate(self, total: float, age: float, gender: Gender) -> float:
        if total <= 0:
            raise NotComputable("body_density", "skinfold sum must be positive")
        density = self.equations[gender].density(total, age)
        if not math.isfinite(density) or density <= 0:
            raise NotComputable("body_density", f"{self.name} produced an invalid density")
        return density

    def body_fat(self, density: float, total: float, age: float, gender: Gender, equation: str = "siri") -> float:
        """%fat for an evaluated formula.

        Formulas published as %fat report their own value; the rest go
        through the selected density conversion.
        """
        eq = self.equations[gender]
        if isinstance(eq, FatPercentEquation):
            return eq.body_fat(total, age)
        return body_fat_from_density(density, equation)

    def calculate(self, skinfolds: Skinfolds, gender: Gender, age: float) -> float:
        self.check_applicable(gender, age)
        return self.evaluate(self.skinfold_sum(skinfolds, gender), age, gender)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "reference": self.reference,
            "genders": [g.value for g in self.genders],
            "age_ranges": {g.value: {"min": r.min, "max": r.max} for g, r in self.age_ranges.items()},
            "required_skinfolds": {g.value: list(s) for g, s in self.required_skinfolds.items()},
        }


def _both(value):
    return {Gender.MALE: value, Gender.FEMALE: value}


M, F = Gender.MALE, Gender.FEMALE

_POLLOCK7_SITES = (
    "thoracic",
    "axillary_median",
    "tricipital",
    "subscapular",
    "abdominal",
    "suprailiac",
    "thigh",
)

FORMULAS: Dict[str, FormulaDescriptor] = {
    f.id: f
    for f in (
        FormulaDescriptor(
            id="pollock3",
            name="Pollock 3 skinfolds (1980)",
            reference=(
                "Pollock, Schmidt & Jackson (1980), Compr Ther 6(9):12-27 (men); "
                "Jackson, Pollock & Ward (1980), Med Sci Sports Exerc 12(3):175-182 (women)"
            ),
            age_ranges=_both(AgeRange(18, 61)),
            required_skinfolds={
                M: ("thoracic", "abdominal", "thigh"),
                F: ("tricipital", "suprailiac", "thigh"),
            },
            equations={
                M: DensityEquation(1.10938, linear=-0.0008267, quadratic=0.0000016, age_coef=-0.0002574),
                F: DensityEquation(1.0994921, linear=-0.0009929, quadratic=0.0000023, age_coef=-0.0001392),
            },
        ),
        FormulaDescriptor(
            id="pollock7",
            name="Pollock 7 skinfolds (1978/1980)",
            reference=(
                "Jackson & Pollock (1978), Br J Nutr 40(3):497-504 (men); "
                "Jackson, Pollock & Ward (1980), Med Sci Sports Exerc 12(3):175-182 (women)"
            ),
            age_ranges=_both(AgeRange(18, 61)),
            required_skinfolds=_both(_POLLOCK7_SITES),
            equations={
                M: DensityEquation(1.112, linear=-0.00043499, quadratic=0.00000055, age_coef=-0.00028826),
                F: DensityEquation(1.097, linear=-0.00046971, quadratic=0.00000056, age_coef=-0.00012828),
            },
        ),
        FormulaDescriptor(
            id="guedes",
            name="Guedes (1994)",
            reference="Guedes DP (1994). Composicao corporal: principios, tecnicas e aplicacoes. Londrina: APEF.",
            age_ranges=_both(AgeRange(18, 60)),
            required_skinfolds={
                M: ("tricipital", "suprailiac", "abdominal"),
                F: ("subscapular", "suprailiac", "thigh"),
            },
            equations={
                M: DensityEquation(1.1714, log10_coef=-0.0671),
                F: DensityEquation(1.1665, log10_coef=-0.07063),
            },
        ),
        FormulaDescriptor(
            id="durnin",
            name="Durnin & Womersley (1974)",
            reference="Durnin & Womersley (1974), Br J Nutr 32(1):77-97.",
            age_ranges=_both(AgeRange(17, 72)),
            required_skinfolds=_both(("tricipital", "subscapular", "bicipital", "suprailiac")),
            equations={
                M: DensityEquation(1.1765, log10_coef=-0.0744),
                F: DensityEquation(1.1567, log10_coef=-0.0717),
            },
        ),
        FormulaDescriptor(
            id="petroski",
            name="Petroski (1995/1996)",
            reference=(
                "Petroski EL (1995), PhD thesis, UFSM (men); "
                "Petroski & Pires-Neto (1996), Rev Bras Ativ Fis Saude 1(2):65-73 (women)"
            ),
            age_ranges={M: AgeRange(20, 39.9), F: AgeRange(18, 51)},
            required_skinfolds={
                M: ("subscapular", "tricipital", "suprailiac", "calf"),
                F: ("axillary_median", "suprailiac", "thigh", "calf"),
            },
            equations={
                M: DensityEquation(1.10726863, linear=-0.00081201, quadratic=0.00000212, age_coef=-0.00041761),
                F: DensityEquation(1.1954713, log10_coef=-0.07513507, age_coef=-0.00041072),
            },
        ),
        FormulaDescriptor(
            id="faulkner",
            name="Faulkner (1968)",
            reference="Faulkner JA (1968). Physiology of swimming and diving. In: Falls HB, Exercise Physiology.",
            age_ranges=_both(AgeRange(18, 60)),
            required_skinfolds=_both(("tricipital", "subscapular", "abdominal", "suprailiac")),
            equations=_both(FatPercentEquation(intercept=5.783, slope=0.153)),
        ),
    )
}


def list_formulas() -> list[FormulaDescriptor]:
    return list(FORMULAS.values())


def get_formula(formula_id: str) -> FormulaDescriptor:
    try:
        return FORMULAS[formula_id]
    except KeyError:
        raise UnknownFormulaError(f"unknown formula: {formula_id!r}") from None


def resolve(formula_id: str, gender: Gender, age: float) -> FormulaDescriptor:
    formula = get_formula(formula_id)
    try:
        formula.check_applicable(gender, age)
    except UnsupportedFormulaApplication as exc:
        log.info("formula_rejected", formula=formula_id, gender=gender.value, age=age, reason=exc.reason)
        raise
    return formula
