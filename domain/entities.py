from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from datetime import date
from enum import Enum
from typing import List

from domain.errors import InvalidInputError


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: "str | Gender") -> "Gender":
        if isinstance(value, Gender):
            return value
        raw = str(value).strip().upper()
        aliases = {"MALE": "M", "FEMALE": "F", "O": "OTHER"}
        try:
            return cls(aliases.get(raw, raw))
        except ValueError:
            raise InvalidInputError(f"unknown gender: {value!r}") from None


def age_on(birth_date: date, on_date: date | None = None) -> int:
    """Whole years between ``birth_date`` and ``on_date`` (today by default)."""
    on_date = on_date or date.today()
    years = on_date.year - birth_date.year
    if (on_date.month, on_date.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


@dataclass(frozen=True)
class SubjectContext:
    gender: Gender
    age: int

    @classmethod
    def from_birth_date(cls, gender: str | Gender, birth_date: date, on_date: date | None = None) -> "SubjectContext":
        return cls(gender=Gender.parse(gender), age=age_on(birth_date, on_date))


def _check_non_negative(group: str, obj: object) -> None:
    for f in fields(obj):  # type: ignore[arg-type]
        value = getattr(obj, f.name)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise InvalidInputError(f"{group}.{f.name} must be a finite number")
        if value < 0:
            raise InvalidInputError(f"{group}.{f.name} must be non-negative")


@dataclass
class Skinfolds:
    # mm
    tricipital: float | None = None
    bicipital: float | None = None
    abdominal: float | None = None
    subscapular: float | None = None
    axillary_median: float | None = None
    thigh: float | None = None
    thoracic: float | None = None
    suprailiac: float | None = None
    calf: float | None = None
    supraspinal: float | None = None

    def get(self, site: str) -> float:
        value = getattr(self, site)
        return float(value) if value else 0.0

    def any_present(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))


@dataclass
class Circumferences:
    # cm
    neck: float | None = None
    shoulder: float | None = None
    chest: float | None = None
    waist: float | None = None
    abdomen: float | None = None
    hip: float | None = None
    relaxed_arm: float | None = None
    contracted_arm: float | None = None
    forearm: float | None = None
    proximal_thigh: float | None = None
    medial_thigh: float | None = None
    distal_thigh: float | None = None
    calf: float | None = None


@dataclass
class BoneDiameters:
    # cm
    humerus: float | None = None
    wrist: float | None = None
    femur: float | None = None


@dataclass
class Bioimpedance:
    fat_percentage: float | None = None
    fat_mass: float | None = None
    muscle_mass_percentage: float | None = None
    muscle_mass: float | None = None
    fat_free_mass: float | None = None
    bone_mass: float | None = None
    visceral_fat: float | None = None
    body_water: float | None = None
    metabolic_age: float | None = None

    def any_present(self) -> bool:
        return any(getattr(self, f.name) is not None for f in fields(self))


@dataclass
class MeasurementInput:
    weight_kg: float
    height_cm: float | None = None
    circumferences: Circumferences = field(default_factory=Circumferences)
    skinfolds: Skinfolds = field(default_factory=Skinfolds)
    bone_diameters: BoneDiameters = field(default_factory=BoneDiameters)
    bioimpedance: Bioimpedance = field(default_factory=Bioimpedance)

    def validate(self) -> None:
        if isinstance(self.weight_kg, bool) or not isinstance(self.weight_kg, (int, float)) or not math.isfinite(self.weight_kg):
            raise InvalidInputError("weight_kg must be a finite number")
        if self.weight_kg < 0:
            raise InvalidInputError("weight_kg must be non-negative")
        if self.height_cm is not None:
            if isinstance(self.height_cm, bool) or not isinstance(self.height_cm, (int, float)) or not math.isfinite(self.height_cm):
                raise InvalidInputError("height_cm must be a finite number")
            if self.height_cm <= 0:
                raise InvalidInputError("height_cm must be positive")
        _check_non_negative("circumferences", self.circumferences)
        _check_non_negative("skinfolds", self.skinfolds)
        _check_non_negative("bone_diameters", self.bone_diameters)
        _check_non_negative("bioimpedance", self.bioimpedance)


@dataclass
class FoodLine:
    """One food on a meal.

    Nutrient values are per 100 g; ``unit_weight_g`` is the weight of one
    ``unit`` (1 for g/ml, the household-measure weight otherwise).
    """

    name: str
    amount: float
    unit: str = "g"
    unit_weight_g: float = 1.0
    kcal_per_100g: float | None = None
    protein_per_100g: float = 0.0
    carbs_per_100g: float = 0.0
    fat_per_100g: float = 0.0
    food_id: str | None = None

    @property
    def multiplier(self) -> float:
        return self.amount * self.unit_weight_g / 100.0

    @property
    def weight_g(self) -> float:
        return self.amount * self.unit_weight_g


@dataclass
class Meal:
    name: str
    lines: List[FoodLine] = field(default_factory=list)
    active_for_calculation: bool = True
    time: str | None = None


@dataclass
class MealPlan:
    meals: List[Meal] = field(default_factory=list)
    name: str | None = None
