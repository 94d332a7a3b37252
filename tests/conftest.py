"""Shared fixtures for the calculation tests."""

from __future__ import annotations

import pytest

from domain.entities import (
    Bioimpedance,
    BoneDiameters,
    Circumferences,
    FoodLine,
    Gender,
    Meal,
    MeasurementInput,
    Skinfolds,
    SubjectContext,
)


@pytest.fixture
def male_30() -> SubjectContext:
    return SubjectContext(gender=Gender.MALE, age=30)


@pytest.fixture
def female_30() -> SubjectContext:
    return SubjectContext(gender=Gender.FEMALE, age=30)


@pytest.fixture
def pollock3_male_skinfolds() -> Skinfolds:
    return Skinfolds(thoracic=10, abdominal=15, thigh=12)


@pytest.fixture
def full_measurement(pollock3_male_skinfolds: Skinfolds) -> MeasurementInput:
    pollock3_male_skinfolds.tricipital = 10
    return MeasurementInput(
        weight_kg=70,
        height_cm=175,
        circumferences=Circumferences(waist=80, hip=100, relaxed_arm=30),
        skinfolds=pollock3_male_skinfolds,
        bone_diameters=BoneDiameters(wrist=5.8, femur=9.6),
    )


@pytest.fixture
def bioimpedance_measurement() -> MeasurementInput:
    return MeasurementInput(
        weight_kg=70,
        height_cm=175,
        bioimpedance=Bioimpedance(
            fat_percentage=22,
            muscle_mass=30,
            visceral_fat=12,
            body_water=55,
            bone_mass=3.1,
            metabolic_age=34,
        ),
    )


@pytest.fixture
def breakfast() -> Meal:
    return Meal(
        name="Breakfast",
        lines=[
            FoodLine(name="Item A", amount=100, kcal_per_100g=50),
            FoodLine(name="Item B", amount=200, kcal_per_100g=25),
        ],
    )
