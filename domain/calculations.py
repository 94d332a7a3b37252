from __future__ import annotations

import math
from dataclasses import dataclass

from domain.entities import Gender
from domain.errors import InvalidInputError, NotComputable


# WHO "normal weight" bracket used for the ideal weight range
IDEAL_BMI_MIN = 18.5
IDEAL_BMI_MAX = 24.9

# Matiegka residual fraction of total weight
RESIDUAL_FRACTION = {Gender.MALE: 0.24}
RESIDUAL_FRACTION_DEFAULT = 0.21

ACTIVITY_FACTORS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "athletic": 1.9,
}

INJURY_FACTORS = {
    "healthy": 1.0,
    "simple_surgery": 1.2,
    "moderate_trauma": 1.35,
    "severe_infection": 1.5,
}

# share of total energy per macro
MACRO_ENERGY_SPLIT = {"protein": 0.25, "fat": 0.30, "carb": 0.45}
KCAL_PER_G = {"protein": 4.0, "fat": 9.0, "carb": 4.0}


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _require_positive(metric: str, **values: float | None) -> None:
    for name, value in values.items():
        if value is None or not math.isfinite(value) or value <= 0:
            raise NotComputable(metric, f"{metric} needs a positive {name}")


# --- Weights and measures ---------------------------------------------------


def bmi(weight_kg: float, height_cm: float | None) -> float:
    _require_positive("bmi", weight=weight_kg, height=height_cm)
    height_m = height_cm / 100.0  # type: ignore[operator]
    return weight_kg / (height_m * height_m)


def ideal_weight_range(height_cm: float | None) -> tuple[float, float]:
    _require_positive("ideal_weight_range", height=height_cm)
    height_m = height_cm / 100.0  # type: ignore[operator]
    return (
        round(IDEAL_BMI_MIN * height_m * height_m, 1),
        round(IDEAL_BMI_MAX * height_m * height_m, 1),
    )


def waist_hip_ratio(waist_cm: float | None, hip_cm: float | None) -> float:
    _require_positive("waist_hip_ratio", waist=waist_cm, hip=hip_cm)
    return waist_cm / hip_cm  # type: ignore[operator]


def cmb(relaxed_arm_cm: float | None, tricipital_mm: float | None) -> float:
    """Corrected mid-arm muscle circumference (Frisancho, 1981)."""
    _require_positive("cmb", relaxed_arm=relaxed_arm_cm, tricipital=tricipital_mm)
    return relaxed_arm_cm - math.pi * (tricipital_mm / 10.0)  # type: ignore[operator]


# --- Body composition -------------------------------------------------------


def body_fat_siri(density: float) -> float:
    _require_positive("body_fat_percentage", density=density)
    return (4.95 / density - 4.5) * 100.0


def body_fat_brozek(density: float) -> float:
    _require_positive("body_fat_percentage", density=density)
    return (4.57 / density - 4.142) * 100.0


def density_from_body_fat_siri(bf_percent: float) -> float:
    return 4.95 / (bf_percent / 100.0 + 4.5)


BODY_FAT_EQUATIONS = {
    "siri": body_fat_siri,
    "brozek": body_fat_brozek,
}


def body_fat_from_density(density: float, equation: str = "siri") -> float:
    try:
        convert = BODY_FAT_EQUATIONS[equation.lower().strip()]
    except KeyError:
        raise InvalidInputError(f"unknown body fat equation: {equation!r}") from None
    return convert(density)


def fat_mass(weight_kg: float, bf_percent: float) -> float:
    return weight_kg * (bf_percent / 100.0)


def residual_weight(weight_kg: float, gender: Gender) -> float:
    return weight_kg * RESIDUAL_FRACTION.get(gender, RESIDUAL_FRACTION_DEFAULT)


def bone_mass(height_cm: float | None, wrist_cm: float | None, femur_cm: float | None) -> float:
    _require_positive("bone_mass", height=height_cm, wrist=wrist_cm, femur=femur_cm)
    return height_cm * 0.01 * wrist_cm * femur_cm * 0.18  # type: ignore[operator]


def muscle_mass(weight_kg: float, fat_mass_kg: float, bone_mass_kg: float, residual_kg: float) -> float:
    return weight_kg - fat_mass_kg - bone_mass_kg - residual_kg


def estimate_lbm_from_bf(weight_kg: float, bf_percent: float) -> float:
    bf = clamp(bf_percent, 3.0, 65.0) / 100.0
    return max(0.0, weight_kg * (1.0 - bf))


# --- Energy -----------------------------------------------------------------


def bmr_harris_benedict(gender: Gender, age: int, height_cm: float, weight_kg: float) -> float:
    if gender is Gender.MALE:
        return 66.5 + 13.75 * weight_kg + 5.003 * height_cm - 6.775 * age
    return 655.1 + 9.563 * weight_kg + 1.85 * height_cm - 4.676 * age


_FAO_WHO_BANDS = {
    # (upper age exclusive, slope, intercept)
    Gender.MALE: [(3, 60.9, -54), (10, 22.7, 495), (18, 17.5, 651), (30, 15.3, 679), (60, 11.6, 879), (None, 13.5, 487)],
    Gender.FEMALE: [(3, 61.0, -51), (10, 22.5, 499), (18, 12.2, 746), (30, 14.7, 496), (60, 8.7, 829), (None, 10.5, 596)],
}


def bmr_fao_who(gender: Gender, age: int, height_cm: float, weight_kg: float) -> float:
    bands = _FAO_WHO_BANDS[Gender.MALE if gender is Gender.MALE else Gender.FEMALE]
    for upper, slope, intercept in bands:
        if upper is None or age < upper:
            return slope * weight_kg + intercept
    raise AssertionError("unreachable")  # pragma: no cover


def bmr_iom_eer(gender: Gender, age: int, height_cm: float, weight_kg: float) -> float:
    if gender is Gender.MALE:
        if age < 18:
            return 88.5 - 61.9 * age + 26.7 * weight_kg + 903 * height_cm / 100
        return 662 - 9.53 * age + 15.91 * weight_kg + 539.6 * height_cm / 100
    if age < 18:
        return 135.3 - 30.8 * age + 10 * weight_kg + 934 * height_cm / 100
    return 354 - 6.91 * age + 9.36 * weight_kg + 726 * height_cm / 100


def bmr_mifflin(gender: Gender, age: int, height_cm: float, weight_kg: float) -> float:
    if gender is Gender.MALE:
        return 10 * weight_kg + 6.25 * height_cm - 5 * age + 5
    return 10 * weight_kg + 6.25 * height_cm - 5 * age - 161


def bmr_mifflin_modified(gender: Gender, age: int, height_cm: float, weight_kg: float) -> float:
    return bmr_mifflin(gender, age, height_cm, weight_kg) - 0.5 * weight_kg


def bmr_katch_mcardle(lean_mass_kg: float) -> float:
    return 370 + 21.6 * lean_mass_kg


BMR_FORMULAS = {
    "harris_benedict_1984": bmr_harris_benedict,
    "fao_who_2004": bmr_fao_who,
    "iom_eer_2005": bmr_iom_eer,
    "mifflin_st_jeor_1990": bmr_mifflin,
    "mifflin_st_jeor_modified_1980": bmr_mifflin_modified,
}


def resolve_factor(value: float | str, table: dict[str, float], kind: str) -> float:
    """Named factor from ``table`` or a plain number, numeric strings included."""
    if isinstance(value, str):
        key = value.lower().strip()
        if key in table:
            return table[key]
        try:
            value = float(key)
        except ValueError:
            raise InvalidInputError(f"unknown {kind}: {value!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidInputError(f"{kind} must be positive")
    return float(value)


def total_energy_expenditure(
    bmr: float,
    activity_factor: float,
    injury_factor: float = 1.0,
    *,
    met_kcal: float = 0.0,
    goal_adjustment_kcal: float = 0.0,
    pregnancy_kcal: float = 0.0,
) -> float:
    return bmr * activity_factor * injury_factor + met_kcal + goal_adjustment_kcal + pregnancy_kcal


@dataclass
class MacroTargets:
    kcal: float
    protein_g: float
    fat_g: float
    carb_g: float


def distribute_macros(target_kcal: float) -> MacroTargets:
    return MacroTargets(
        kcal=target_kcal,
        protein_g=target_kcal * MACRO_ENERGY_SPLIT["protein"] / KCAL_PER_G["protein"],
        fat_g=target_kcal * MACRO_ENERGY_SPLIT["fat"] / KCAL_PER_G["fat"],
        carb_g=target_kcal * MACRO_ENERGY_SPLIT["carb"] / KCAL_PER_G["carb"],
    )


def macro_energy_percentages(protein_g: float, fat_g: float, carb_g: float, total_kcal: float) -> dict[str, float]:
    if total_kcal <= 0:
        return {"protein": 0.0, "fat": 0.0, "carb": 0.0}
    return {
        "protein": protein_g * KCAL_PER_G["protein"] / total_kcal * 100.0,
        "fat": fat_g * KCAL_PER_G["fat"] / total_kcal * 100.0,
        "carb": carb_g * KCAL_PER_G["carb"] / total_kcal * 100.0,
    }
