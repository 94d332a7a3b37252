from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Literal


@dataclass
class NutrientTotals:
    kcal: float = 0.0
    protein_g: float = 0.0
    carb_g: float = 0.0
    fat_g: float = 0.0
    weight_g: float = 0.0

    def __add__(self, other: "NutrientTotals") -> "NutrientTotals":
        if not isinstance(other, NutrientTotals):
            return NotImplemented
        return NutrientTotals(
            kcal=self.kcal + other.kcal,
            protein_g=self.protein_g + other.protein_g,
            carb_g=self.carb_g + other.carb_g,
            fat_g=self.fat_g + other.fat_g,
            weight_g=self.weight_g + other.weight_g,
        )

    def __radd__(self, other: object) -> "NutrientTotals":
        # lets sum() start from 0
        if other == 0:
            return self
        return NotImplemented  # type: ignore[return-value]


@dataclass
class MealTotals:
    name: str
    active_for_calculation: bool
    totals: NutrientTotals


@dataclass
class PlanTotals:
    daily: NutrientTotals
    all_meals: NutrientTotals
    meals: List[MealTotals] = field(default_factory=list)


@dataclass
class Adherence:
    current: float
    target: float
    percentage: float
    status: Literal["within", "above", "below"]
    severity: Literal["success", "warning", "error"]


@dataclass
class FormulaError:
    code: str
    message: str


@dataclass
class AssessmentResult:
    # weights and measures
    current_weight_kg: float | None = None
    current_height_cm: float | None = None
    bmi: float | None = None
    bmi_classification: str | None = None
    ideal_weight_min_kg: float | None = None
    ideal_weight_max_kg: float | None = None
    waist_hip_ratio: float | None = None
    waist_hip_risk: str | None = None
    cmb_cm: float | None = None
    cmb_classification: str | None = None

    # skinfolds and bone diameters
    formula_id: str | None = None
    reference_used: str | None = None
    skinfolds_sum_mm: float | None = None
    body_density: float | None = None
    body_fat_percentage: float | None = None
    body_fat_classification: str | None = None
    ideal_fat_range: tuple[float, float] | None = None
    fat_mass_kg: float | None = None
    fat_free_mass_kg: float | None = None
    residual_weight_kg: float | None = None
    bone_mass_kg: float | None = None
    muscle_mass_kg: float | None = None

    # bioimpedance
    bio_body_fat_percentage: float | None = None
    bio_body_fat_classification: str | None = None
    bio_ideal_fat_range: tuple[float, float] | None = None
    bio_muscle_mass_percentage: float | None = None
    bio_muscle_mass_classification: str | None = None
    bio_muscle_mass_kg: float | None = None
    bio_body_water_percentage: float | None = None
    bio_bone_mass_kg: float | None = None
    bio_fat_mass_kg: float | None = None
    bio_fat_free_mass_kg: float | None = None
    bio_visceral_fat: float | None = None
    bio_visceral_fat_classification: str | None = None
    bio_metabolic_age: float | None = None

    not_computable: Dict[str, str] = field(default_factory=dict)
    formula_error: FormulaError | None = None

    def to_dict(self) -> dict:
        return asdict(self)

    def to_display(self) -> Dict[str, str]:
        """Formatted strings for the assessment screen; blank when missing."""

        def fmt(value: float | None, pattern: str) -> str:
            return "" if value is None else pattern.format(value)

        def fmt_range(rng: tuple[float, float] | None, unit: str) -> str:
            return "" if rng is None else f"{rng[0]:g}{unit} to {rng[1]:g}{unit}"

        ideal_weight = ""
        if self.ideal_weight_min_kg is not None and self.ideal_weight_max_kg is not None:
            ideal_weight = f"{self.ideal_weight_min_kg:.1f} to {self.ideal_weight_max_kg:.1f} kg"

        return {
            "current_weight": fmt(self.current_weight_kg, "{:.1f} kg"),
            "current_height": fmt(self.current_height_cm, "{:.1f} cm"),
            "bmi": fmt(self.bmi, "{:.1f}"),
            "bmi_classification": self.bmi_classification or "",
            "ideal_weight_range": ideal_weight,
            "waist_hip_ratio": fmt(self.waist_hip_ratio, "{:.2f}"),
            "waist_hip_risk": self.waist_hip_risk or "",
            "cmb": fmt(self.cmb_cm, "{:.1f} cm"),
            "cmb_classification": self.cmb_classification or "",
            "reference_used": self.reference_used or "",
            "skinfolds_sum": fmt(self.skinfolds_sum_mm, "{:.1f} mm"),
            "body_density": fmt(self.body_density, "{:.4f}"),
            "body_fat_percentage": fmt(self.body_fat_percentage, "{:.1f}%"),
            "body_fat_classification": self.body_fat_classification or "",
            "ideal_fat_percentage": fmt_range(self.ideal_fat_range, "%"),
            "fat_mass": fmt(self.fat_mass_kg, "{:.1f} kg"),
            "fat_free_mass": fmt(self.fat_free_mass_kg, "{:.1f} kg"),
            "residual_weight": fmt(self.residual_weight_kg, "{:.1f} kg"),
            "bone_mass": fmt(self.bone_mass_kg, "{:.1f} kg"),
            "muscle_mass": fmt(self.muscle_mass_kg, "{:.1f} kg"),
            "bio_body_fat_percentage": fmt(self.bio_body_fat_percentage, "{:g}%"),
            "bio_body_fat_classification": self.bio_body_fat_classification or "",
            "bio_ideal_fat_percentage": fmt_range(self.bio_ideal_fat_range, "%"),
            "bio_muscle_mass_percentage": fmt(self.bio_muscle_mass_percentage, "{:.1f}%"),
            "bio_muscle_mass_classification": self.bio_muscle_mass_classification or "",
            "bio_muscle_mass": fmt(self.bio_muscle_mass_kg, "{:g} kg"),
            "bio_body_water": fmt(self.bio_body_water_percentage, "{:g}%"),
            "bio_bone_mass": fmt(self.bio_bone_mass_kg, "{:g} kg"),
            "bio_fat_mass": fmt(self.bio_fat_mass_kg, "{:g} kg"),
            "bio_fat_free_mass": fmt(self.bio_fat_free_mass_kg, "{:g} kg"),
            "bio_visceral_fat": fmt(self.bio_visceral_fat, "{:g}"),
            "bio_visceral_fat_classification": self.bio_visceral_fat_classification or "",
            "bio_metabolic_age": fmt(self.bio_metabolic_age, "{:g} years"),
        }
