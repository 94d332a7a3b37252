from __future__ import annotations

from dataclasses import dataclass

import structlog

from domain.calculations import (
    ACTIVITY_FACTORS,
    BMR_FORMULAS,
    INJURY_FACTORS,
    MacroTargets,
    bmr_katch_mcardle,
    distribute_macros,
    estimate_lbm_from_bf,
    resolve_factor,
    total_energy_expenditure,
)
from domain.entities import Gender
from domain.errors import InvalidInputError


log = structlog.get_logger(__name__)

KATCH_MCARDLE = "katch_mcardle"


@dataclass
class EnergyPlanInput:
    formula: str  # harris_benedict_1984|fao_who_2004|iom_eer_2005|mifflin_st_jeor_1990|mifflin_st_jeor_modified_1980|katch_mcardle
    gender: Gender
    age: int
    height_cm: float
    weight_kg: float
    activity_factor: float | str = 1.2
    injury_factor: float | str = 1.0
    met_kcal: float = 0.0
    goal_adjustment_kcal: float = 0.0
    pregnancy_kcal: float = 0.0
    fat_free_mass_kg: float | None = None
    bf_percent: float | None = None


@dataclass
class EnergyPlanResult:
    formula: str
    bmr_kcal: float
    activity_factor: float
    injury_factor: float
    tee_kcal: float
    macros: MacroTargets


def calculate_energy_plan(inp: EnergyPlanInput) -> EnergyPlanResult:
    if inp.weight_kg <= 0 or inp.height_cm <= 0 or inp.age < 0:
        raise InvalidInputError("weight, height and age must be positive")

    # 1) BMR
    formula = inp.formula.lower().strip()
    if formula == KATCH_MCARDLE:
        lbm = inp.fat_free_mass_kg
        if lbm is None and inp.bf_percent is not None:
            lbm = estimate_lbm_from_bf(inp.weight_kg, inp.bf_percent)
        if lbm is None:
            raise InvalidInputError("katch_mcardle needs fat_free_mass_kg or bf_percent")
        bmr = bmr_katch_mcardle(lbm)
    else:
        try:
            bmr_fn = BMR_FORMULAS[formula]
        except KeyError:
            raise InvalidInputError(f"unknown energy formula: {inp.formula!r}") from None
        bmr = bmr_fn(inp.gender, inp.age, inp.height_cm, inp.weight_kg)

    # 2) total energy expenditure
    activity = resolve_factor(inp.activity_factor, ACTIVITY_FACTORS, "activity factor")
    injury = resolve_factor(inp.injury_factor, INJURY_FACTORS, "injury factor")
    tee = total_energy_expenditure(
        bmr,
        activity,
        injury,
        met_kcal=inp.met_kcal,
        goal_adjustment_kcal=inp.goal_adjustment_kcal,
        pregnancy_kcal=inp.pregnancy_kcal,
    )

    # 3) macro targets
    macros = distribute_macros(tee)
    log.info("energy_plan_calculated", formula=formula, bmr=round(bmr, 1), tee=round(tee, 1))
    return EnergyPlanResult(
        formula=formula,
        bmr_kcal=bmr,
        activity_factor=activity,
        injury_factor=injury,
        tee_kcal=tee,
        macros=macros,
    )
