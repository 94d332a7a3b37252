"""Tests for the energy plan calculator."""

from __future__ import annotations

import pytest

from domain.entities import Gender
from domain.errors import InvalidInputError
from domain.use_cases import EnergyPlanInput, calculate_energy_plan


def _input(**overrides) -> EnergyPlanInput:
    data = dict(formula="mifflin_st_jeor_1990", gender=Gender.FEMALE, age=30, height_cm=165, weight_kg=60)
    data.update(overrides)
    return EnergyPlanInput(**data)


class TestCalculateEnergyPlan:
    def test_mifflin_with_named_activity(self) -> None:
        out = calculate_energy_plan(_input(activity_factor="moderate"))
        assert out.bmr_kcal == pytest.approx(1320.25)
        assert out.activity_factor == 1.55
        assert out.tee_kcal == pytest.approx(1320.25 * 1.55)
        assert out.macros.kcal == pytest.approx(out.tee_kcal)

    def test_adjustments_are_added_after_factors(self) -> None:
        out = calculate_energy_plan(
            _input(activity_factor=1.5, injury_factor="simple_surgery", goal_adjustment_kcal=-300, pregnancy_kcal=340)
        )
        assert out.injury_factor == 1.2
        assert out.tee_kcal == pytest.approx(1320.25 * 1.5 * 1.2 - 300 + 340)

    def test_other_gender_uses_default_branch(self) -> None:
        other = calculate_energy_plan(_input(gender=Gender.OTHER))
        female = calculate_energy_plan(_input())
        assert other.bmr_kcal == pytest.approx(female.bmr_kcal)

    def test_modified_mifflin(self) -> None:
        out = calculate_energy_plan(_input(formula="mifflin_st_jeor_modified_1980"))
        assert out.bmr_kcal == pytest.approx(1320.25 - 30)

    def test_katch_mcardle_from_fat_free_mass(self) -> None:
        out = calculate_energy_plan(_input(formula="katch_mcardle", fat_free_mass_kg=60))
        assert out.bmr_kcal == pytest.approx(1666.0)

    def test_katch_mcardle_from_body_fat(self) -> None:
        out = calculate_energy_plan(_input(formula="katch_mcardle", weight_kg=80, bf_percent=20))
        assert out.bmr_kcal == pytest.approx(370 + 21.6 * 64)

    def test_katch_mcardle_needs_lean_mass(self) -> None:
        with pytest.raises(InvalidInputError):
            calculate_energy_plan(_input(formula="katch_mcardle"))

    def test_unknown_formula(self) -> None:
        with pytest.raises(InvalidInputError):
            calculate_energy_plan(_input(formula="cunningham"))

    def test_invalid_body_values(self) -> None:
        with pytest.raises(InvalidInputError):
            calculate_energy_plan(_input(weight_kg=0))
