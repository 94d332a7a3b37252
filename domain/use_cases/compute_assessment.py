from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import structlog

from core.config import settings
from domain import calculations as calc
from domain import formulas
from domain.classification import classify
from domain.dtos import AssessmentResult, FormulaError
from domain.entities import Gender, MeasurementInput, SubjectContext
from domain.errors import InvalidInputError, NotComputable, UnsupportedFormulaApplication


log = structlog.get_logger(__name__)

# reference ranges shown next to the computed body fat
IDEAL_FAT_SKINFOLD = {Gender.MALE: (10.0, 18.0)}
IDEAL_FAT_SKINFOLD_DEFAULT = (18.0, 25.0)
IDEAL_FAT_BIOIMPEDANCE = {Gender.MALE: (12.0, 18.0)}
IDEAL_FAT_BIOIMPEDANCE_DEFAULT = (18.0, 25.0)


class _Collector:
    """Records ``NotComputable`` per metric on the result instead of raising."""

    def __init__(self, result: AssessmentResult) -> None:
        self.result = result

    @contextmanager
    def metric(self, name: str) -> Iterator[None]:
        try:
            yield
        except NotComputable as exc:
            self.result.not_computable[name] = exc.message


def compute_assessment(
    measurement: MeasurementInput,
    context: SubjectContext,
    formula_id: str | None = None,
    *,
    body_fat_equation: str | None = None,
) -> AssessmentResult:
    measurement.validate()
    if context.age < 0:
        raise InvalidInputError("age must be non-negative")
    formula_id = formula_id or settings.default_skinfold_formula
    body_fat_equation = body_fat_equation or settings.body_fat_equation
    formulas.get_formula(formula_id)

    gender, age = context.gender, context.age
    weight = float(measurement.weight_kg)
    height = measurement.height_cm
    result = AssessmentResult()
    col = _Collector(result)

    # 1) weights and measures
    if weight > 0:
        result.current_weight_kg = weight
    if height:
        result.current_height_cm = float(height)

    with col.metric("bmi"):
        result.bmi = calc.bmi(weight, height)
        result.bmi_classification = classify("bmi", result.bmi, gender, age)
    with col.metric("ideal_weight_range"):
        result.ideal_weight_min_kg, result.ideal_weight_max_kg = calc.ideal_weight_range(height)

    circ = measurement.circumferences
    with col.metric("waist_hip_ratio"):
        result.waist_hip_ratio = calc.waist_hip_ratio(circ.waist, circ.hip)
        result.waist_hip_risk = classify("waist_hip_ratio", result.waist_hip_ratio, gender, age)
    with col.metric("cmb"):
        result.cmb_cm = calc.cmb(circ.relaxed_arm, measurement.skinfolds.tricipital)
        result.cmb_classification = classify("cmb", result.cmb_cm, gender, age)

    # 2) skinfolds
    if measurement.skinfolds.any_present():
        _skinfold_block(measurement, gender, age, formula_id, body_fat_equation, result, col)

    # 3) bioimpedance
    if measurement.bioimpedance.any_present():
        _bioimpedance_block(measurement, gender, age, result, col)

    log.info(
        "assessment_computed",
        formula=formula_id,
        not_computable=len(result.not_computable),
        formula_error=result.formula_error.code if result.formula_error else None,
    )
    return result


def _skinfold_block(
    measurement: MeasurementInput,
    gender: Gender,
    age: int,
    formula_id: str,
    body_fat_equation: str,
    result: AssessmentResult,
    col: _Collector,
) -> None:
    try:
        formula = formulas.resolve(formula_id, gender, age)
    except UnsupportedFormulaApplication as exc:
        result.formula_error = FormulaError(code=exc.code, message=exc.message)
        return

    result.formula_id = formula.id
    weight = float(measurement.weight_kg)
    with col.metric("body_density"):
        total = formula.skinfold_sum(measurement.skinfolds, gender)
        density = formula.evaluate(total, age, gender)
        result.skinfolds_sum_mm = total
        result.body_density = density
        result.reference_used = formula.name
        result.body_fat_percentage = formula.body_fat(density, total, age, gender, body_fat_equation)
        result.ideal_fat_range = IDEAL_FAT_SKINFOLD.get(gender, IDEAL_FAT_SKINFOLD_DEFAULT)

    if result.body_fat_percentage is None:
        return

    with col.metric("body_fat_classification"):
        result.body_fat_classification = classify("body_fat", result.body_fat_percentage, gender, age)

    if weight <= 0:
        result.not_computable["fat_mass"] = "fat_mass needs a positive weight"
        return

    fat = calc.fat_mass(weight, result.body_fat_percentage)
    residual = calc.residual_weight(weight, gender)
    result.fat_mass_kg = fat
    result.fat_free_mass_kg = weight - fat
    result.residual_weight_kg = residual

    bones = measurement.bone_diameters
    with col.metric("bone_mass"):
        result.bone_mass_kg = calc.bone_mass(measurement.height_cm, bones.wrist, bones.femur)
        result.muscle_mass_kg = calc.muscle_mass(weight, fat, result.bone_mass_kg, residual)


def _bioimpedance_block(
    measurement: MeasurementInput,
    gender: Gender,
    age: int,
    result: AssessmentResult,
    col: _Collector,
) -> None:
    bio = measurement.bioimpedance
    weight = float(measurement.weight_kg)

    if bio.fat_percentage is not None:
        result.bio_body_fat_percentage = bio.fat_percentage
        result.bio_ideal_fat_range = IDEAL_FAT_BIOIMPEDANCE.get(gender, IDEAL_FAT_BIOIMPEDANCE_DEFAULT)
        with col.metric("bio_body_fat_classification"):
            result.bio_body_fat_classification = classify("body_fat", bio.fat_percentage, gender, age)

    result.bio_muscle_mass_kg = bio.muscle_mass
    result.bio_body_water_percentage = bio.body_water
    result.bio_bone_mass_kg = bio.bone_mass
    result.bio_fat_mass_kg = bio.fat_mass
    result.bio_fat_free_mass_kg = bio.fat_free_mass
    result.bio_metabolic_age = bio.metabolic_age

    muscle_pct = bio.muscle_mass_percentage
    if muscle_pct is None and bio.muscle_mass is not None and weight > 0:
        muscle_pct = bio.muscle_mass / weight * 100.0
    if muscle_pct is not None:
        result.bio_muscle_mass_percentage = muscle_pct
        with col.metric("bio_muscle_mass_classification"):
            result.bio_muscle_mass_classification = classify("muscle_mass", muscle_pct, gender, age)

    if bio.visceral_fat is not None:
        result.bio_visceral_fat = bio.visceral_fat
        with col.metric("bio_visceral_fat_classification"):
            result.bio_visceral_fat_classification = classify("visceral_fat", bio.visceral_fat, gender, age)
