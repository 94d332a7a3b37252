from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from domain.entities import (
    Bioimpedance,
    BoneDiameters,
    Circumferences,
    FoodLine,
    Meal,
    MealPlan,
    MeasurementInput,
    Skinfolds,
)


GenderLiteral = Literal["M", "F", "OTHER"]


class APIResponse(BaseModel):
    ok: bool = True
    data: dict | None = None
    error: dict | None = None


class SkinfoldsSchema(BaseModel):
    tricipital: float | None = Field(None, ge=0)
    bicipital: float | None = Field(None, ge=0)
    abdominal: float | None = Field(None, ge=0)
    subscapular: float | None = Field(None, ge=0)
    axillary_median: float | None = Field(None, ge=0)
    thigh: float | None = Field(None, ge=0)
    thoracic: float | None = Field(None, ge=0)
    suprailiac: float | None = Field(None, ge=0)
    calf: float | None = Field(None, ge=0)
    supraspinal: float | None = Field(None, ge=0)


class CircumferencesSchema(BaseModel):
    neck: float | None = Field(None, ge=0)
    shoulder: float | None = Field(None, ge=0)
    chest: float | None = Field(None, ge=0)
    waist: float | None = Field(None, ge=0)
    abdomen: float | None = Field(None, ge=0)
    hip: float | None = Field(None, ge=0)
    relaxed_arm: float | None = Field(None, ge=0)
    contracted_arm: float | None = Field(None, ge=0)
    forearm: float | None = Field(None, ge=0)
    proximal_thigh: float | None = Field(None, ge=0)
    medial_thigh: float | None = Field(None, ge=0)
    distal_thigh: float | None = Field(None, ge=0)
    calf: float | None = Field(None, ge=0)


class BoneDiametersSchema(BaseModel):
    humerus: float | None = Field(None, ge=0)
    wrist: float | None = Field(None, ge=0)
    femur: float | None = Field(None, ge=0)


class BioimpedanceSchema(BaseModel):
    fat_percentage: float | None = Field(None, ge=0, le=100)
    fat_mass: float | None = Field(None, ge=0)
    muscle_mass_percentage: float | None = Field(None, ge=0, le=100)
    muscle_mass: float | None = Field(None, ge=0)
    fat_free_mass: float | None = Field(None, ge=0)
    bone_mass: float | None = Field(None, ge=0)
    visceral_fat: float | None = Field(None, ge=0)
    body_water: float | None = Field(None, ge=0, le=100)
    metabolic_age: float | None = Field(None, ge=0)


class AssessmentInput(BaseModel):
    gender: GenderLiteral = Field(..., examples=["M"])
    age: int = Field(..., ge=0, le=120, examples=[30])
    weight_kg: float = Field(..., ge=0, examples=[70])
    height_cm: float | None = Field(None, gt=0, examples=[175])
    formula_id: str | None = Field(None, examples=["pollock3"])
    body_fat_equation: Literal["siri", "brozek"] | None = None
    circumferences: CircumferencesSchema = Field(default_factory=CircumferencesSchema)
    skinfolds: SkinfoldsSchema = Field(default_factory=SkinfoldsSchema)
    bone_diameters: BoneDiametersSchema = Field(default_factory=BoneDiametersSchema)
    bioimpedance: BioimpedanceSchema = Field(default_factory=BioimpedanceSchema)

    def to_measurement(self) -> MeasurementInput:
        return MeasurementInput(
            weight_kg=self.weight_kg,
            height_cm=self.height_cm,
            circumferences=Circumferences(**self.circumferences.model_dump()),
            skinfolds=Skinfolds(**self.skinfolds.model_dump()),
            bone_diameters=BoneDiameters(**self.bone_diameters.model_dump()),
            bioimpedance=Bioimpedance(**self.bioimpedance.model_dump()),
        )


class FoodLineIn(BaseModel):
    food_id: str | None = None
    name: str
    amount: float = Field(..., ge=0)
    unit: str = "g"
    unit_weight_g: float = Field(1.0, ge=0)
    kcal_per_100g: float | None = Field(None, ge=0)
    protein_per_100g: float = Field(0.0, ge=0)
    carbs_per_100g: float = Field(0.0, ge=0)
    fat_per_100g: float = Field(0.0, ge=0)


class MealIn(BaseModel):
    name: str
    time: str | None = None
    active_for_calculation: bool = True
    lines: list[FoodLineIn] = Field(default_factory=list)


class MealPlanIn(BaseModel):
    name: str | None = None
    meals: list[MealIn]

    def to_plan(self) -> MealPlan:
        return MealPlan(
            name=self.name,
            meals=[
                Meal(
                    name=m.name,
                    time=m.time,
                    active_for_calculation=m.active_for_calculation,
                    lines=[FoodLine(**line.model_dump()) for line in m.lines],
                )
                for m in self.meals
            ],
        )


class NutrientTargetSchema(BaseModel):
    kcal: float = Field(..., ge=0)
    protein_g: float | None = Field(None, ge=0)
    carb_g: float | None = Field(None, ge=0)
    fat_g: float | None = Field(None, ge=0)


class CompareInput(BaseModel):
    plan: MealPlanIn
    target: NutrientTargetSchema


class EnergyPlanInputSchema(BaseModel):
    formula: Literal[
        "harris_benedict_1984",
        "fao_who_2004",
        "iom_eer_2005",
        "mifflin_st_jeor_1990",
        "mifflin_st_jeor_modified_1980",
        "katch_mcardle",
    ] = Field(..., examples=["mifflin_st_jeor_1990"])
    gender: GenderLiteral = Field(..., examples=["F"])
    age: int = Field(..., ge=0, le=120, examples=[30])
    height_cm: float = Field(..., gt=0, le=250, examples=[165])
    weight_kg: float = Field(..., gt=0, le=400, examples=[60])
    activity_factor: float | str = Field(1.2, examples=["moderate"])
    injury_factor: float | str = Field(1.0, examples=["healthy"])
    met_kcal: float = 0.0
    goal_adjustment_kcal: float = 0.0
    pregnancy_kcal: float = Field(0.0, ge=0)
    fat_free_mass_kg: float | None = Field(None, gt=0)
    bf_percent: float | None = Field(None, ge=0, le=100)
