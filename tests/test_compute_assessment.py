"""Tests for the assessment calculator."""

from __future__ import annotations

import math

import pytest

from domain.entities import (
    Bioimpedance,
    Circumferences,
    Gender,
    MeasurementInput,
    Skinfolds,
    SubjectContext,
)
from domain.errors import InvalidInputError, UnknownFormulaError
from domain.use_cases import compute_assessment


def _pollock3_male_density(total: float, age: int) -> float:
    return 1.10938 - 0.0008267 * total + 0.0000016 * total**2 - 0.0002574 * age


class TestWeightsAndMeasures:
    def test_basic_metrics(self, full_measurement: MeasurementInput, male_30: SubjectContext) -> None:
        result = compute_assessment(full_measurement, male_30)
        assert result.bmi == pytest.approx(70 / 1.75**2)
        assert result.bmi_classification == "Normal"
        assert (result.ideal_weight_min_kg, result.ideal_weight_max_kg) == (56.7, 76.3)
        assert result.waist_hip_ratio == pytest.approx(0.8)
        assert result.waist_hip_risk == "Low"
        assert result.cmb_cm == pytest.approx(30 - math.pi)
        assert result.cmb_classification == "Adequate"
        assert result.not_computable == {}

    def test_missing_height_keeps_other_metrics(self, male_30: SubjectContext) -> None:
        measurement = MeasurementInput(weight_kg=70, circumferences=Circumferences(waist=80, hip=100))
        result = compute_assessment(measurement, male_30)
        assert result.bmi is None
        assert "bmi" in result.not_computable
        assert "ideal_weight_range" in result.not_computable
        assert result.waist_hip_ratio == pytest.approx(0.8)

    def test_cmb_not_computable_for_minors(self) -> None:
        measurement = MeasurementInput(
            weight_kg=55,
            height_cm=165,
            circumferences=Circumferences(relaxed_arm=25),
            skinfolds=Skinfolds(tricipital=8),
        )
        result = compute_assessment(measurement, SubjectContext(Gender.MALE, 16))
        assert result.cmb_cm == pytest.approx(25 - 0.8 * math.pi)
        assert result.cmb_classification is None
        assert "cmb" in result.not_computable


class TestSkinfoldBlock:
    def test_pollock3_male(self, full_measurement: MeasurementInput, male_30: SubjectContext) -> None:
        result = compute_assessment(full_measurement, male_30, "pollock3")
        density = _pollock3_male_density(37, 30)
        bf = (4.95 / density - 4.5) * 100
        fat = 70 * bf / 100
        bone = 1.75 * 5.8 * 9.6 * 0.18

        assert result.formula_id == "pollock3"
        assert result.skinfolds_sum_mm == pytest.approx(37)
        assert result.body_density == pytest.approx(density)
        assert result.body_fat_percentage == pytest.approx(bf)
        assert result.body_fat_classification == "Athletic"
        assert result.ideal_fat_range == (10.0, 18.0)
        assert result.fat_mass_kg == pytest.approx(fat)
        assert result.fat_free_mass_kg == pytest.approx(70 - fat)
        assert result.residual_weight_kg == pytest.approx(70 * 0.24)
        assert result.bone_mass_kg == pytest.approx(bone)
        assert result.muscle_mass_kg == pytest.approx(70 - fat - bone - 70 * 0.24)
        assert result.formula_error is None

    def test_default_formula(self, full_measurement: MeasurementInput, male_30: SubjectContext) -> None:
        assert compute_assessment(full_measurement, male_30).formula_id == "pollock3"

    def test_brozek(self, full_measurement: MeasurementInput, male_30: SubjectContext) -> None:
        result = compute_assessment(full_measurement, male_30, body_fat_equation="brozek")
        density = _pollock3_male_density(37, 30)
        assert result.body_fat_percentage == pytest.approx((4.57 / density - 4.142) * 100)

    @pytest.mark.parametrize("equation", ["siri", "brozek"])
    def test_faulkner_reports_published_body_fat(self, equation: str, male_30: SubjectContext) -> None:
        measurement = MeasurementInput(
            weight_kg=70,
            height_cm=175,
            skinfolds=Skinfolds(tricipital=10, subscapular=12, abdominal=15, suprailiac=13),
        )
        result = compute_assessment(measurement, male_30, "faulkner", body_fat_equation=equation)
        assert result.body_fat_percentage == pytest.approx(0.153 * 50 + 5.783)
        assert result.fat_mass_kg == pytest.approx(70 * (0.153 * 50 + 5.783) / 100)

    def test_unsupported_age_is_reported_not_raised(self) -> None:
        measurement = MeasurementInput(
            weight_kg=60,
            height_cm=160,
            skinfolds=Skinfolds(axillary_median=10, suprailiac=15, thigh=25, calf=10),
        )
        result = compute_assessment(measurement, SubjectContext(Gender.FEMALE, 60), "petroski")
        assert result.formula_error is not None
        assert result.formula_error.code == "E_UNSUPPORTED_FORMULA"
        assert result.body_density is None
        assert result.body_fat_percentage is None
        assert result.bmi is not None

    def test_other_gender_is_reported(self, full_measurement: MeasurementInput) -> None:
        result = compute_assessment(full_measurement, SubjectContext(Gender.OTHER, 30))
        assert result.formula_error is not None
        assert result.fat_mass_kg is None
        assert result.bmi_classification == "Normal"

    def test_missing_site(self, male_30: SubjectContext) -> None:
        measurement = MeasurementInput(weight_kg=70, height_cm=175, skinfolds=Skinfolds(thoracic=10))
        result = compute_assessment(measurement, male_30)
        assert "body_density" in result.not_computable
        assert result.body_fat_percentage is None
        assert result.fat_mass_kg is None

    def test_bone_mass_needs_diameters(self, pollock3_male_skinfolds: Skinfolds, male_30: SubjectContext) -> None:
        measurement = MeasurementInput(weight_kg=70, height_cm=175, skinfolds=pollock3_male_skinfolds)
        result = compute_assessment(measurement, male_30)
        assert result.fat_mass_kg is not None
        assert result.bone_mass_kg is None
        assert result.muscle_mass_kg is None
        assert "bone_mass" in result.not_computable

    def test_unknown_formula_raises(self, male_30: SubjectContext) -> None:
        with pytest.raises(UnknownFormulaError):
            compute_assessment(MeasurementInput(weight_kg=70), male_30, "nope")


class TestBioimpedanceBlock:
    def test_values_and_classifications(self, bioimpedance_measurement: MeasurementInput, male_30: SubjectContext) -> None:
        result = compute_assessment(bioimpedance_measurement, male_30)
        assert result.bio_body_fat_percentage == 22
        assert result.bio_body_fat_classification == "Acceptable"
        assert result.bio_ideal_fat_range == (12.0, 18.0)
        assert result.bio_muscle_mass_percentage == pytest.approx(30 / 70 * 100)
        assert result.bio_muscle_mass_classification == "Normal"
        assert result.bio_visceral_fat_classification == "High"
        assert result.bio_body_water_percentage == 55
        assert result.bio_metabolic_age == 34

    def test_skinfold_block_skipped_without_skinfolds(
        self, bioimpedance_measurement: MeasurementInput, male_30: SubjectContext
    ) -> None:
        result = compute_assessment(bioimpedance_measurement, male_30)
        assert result.body_density is None
        assert "body_density" not in result.not_computable
        assert result.formula_error is None

    def test_declared_muscle_percentage_wins(self, male_30: SubjectContext) -> None:
        measurement = MeasurementInput(
            weight_kg=70, bioimpedance=Bioimpedance(muscle_mass=30, muscle_mass_percentage=46)
        )
        result = compute_assessment(measurement, male_30)
        assert result.bio_muscle_mass_percentage == 46
        assert result.bio_muscle_mass_classification == "High"


class TestDisplay:
    def test_missing_values_are_blank(self, male_30: SubjectContext) -> None:
        display = compute_assessment(MeasurementInput(weight_kg=70), male_30).to_display()
        assert display["current_weight"] == "70.0 kg"
        assert display["bmi"] == ""
        assert display["body_density"] == ""
        assert display["bio_visceral_fat"] == ""

    def test_formatting(self, full_measurement: MeasurementInput, male_30: SubjectContext) -> None:
        display = compute_assessment(full_measurement, male_30).to_display()
        assert display["bmi"] == "22.9"
        assert display["ideal_weight_range"] == "56.7 to 76.3 kg"
        assert display["ideal_fat_percentage"] == "10% to 18%"
        assert display["body_density"] == f"{_pollock3_male_density(37, 30):.4f}"


class TestInvalidInput:
    @pytest.mark.parametrize(
        "measurement",
        [
            MeasurementInput(weight_kg=-1),
            MeasurementInput(weight_kg=70, height_cm=0),
            MeasurementInput(weight_kg=math.nan),
            MeasurementInput(weight_kg=math.inf),
            MeasurementInput(weight_kg=70, height_cm=math.inf),
            MeasurementInput(weight_kg=70, skinfolds=Skinfolds(thigh=math.inf)),
            MeasurementInput(weight_kg=70, skinfolds=Skinfolds(thigh=-3)),
            MeasurementInput(weight_kg=70, circumferences=Circumferences(waist="80")),  # type: ignore[arg-type]
        ],
    )
    def test_rejected(self, measurement: MeasurementInput, male_30: SubjectContext) -> None:
        with pytest.raises(InvalidInputError):
            compute_assessment(measurement, male_30)

    def test_negative_age(self) -> None:
        with pytest.raises(InvalidInputError):
            compute_assessment(MeasurementInput(weight_kg=70), SubjectContext(Gender.MALE, -1))
