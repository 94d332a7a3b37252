from __future__ import annotations

from typing import Dict, Iterable

import structlog

from domain.calculations import KCAL_PER_G, MacroTargets, distribute_macros, macro_energy_percentages
from domain.dtos import Adherence, MealTotals, NutrientTotals, PlanTotals
from domain.entities import FoodLine, Meal, MealPlan
from domain.errors import InvalidInputError, NotComputable


log = structlog.get_logger(__name__)

# |deviation| bands in percent
WITHIN_BAND = 5.0
WARNING_BAND = 10.0

NUTRIENTS = ("kcal", "protein_g", "carb_g", "fat_g")


def line_totals(line: FoodLine) -> NutrientTotals:
    if line.amount < 0 or line.unit_weight_g < 0:
        raise InvalidInputError(f"{line.name}: amount must be non-negative")
    m = line.multiplier
    protein = line.protein_per_100g * m
    carb = line.carbs_per_100g * m
    fat = line.fat_per_100g * m
    if line.kcal_per_100g is not None:
        kcal = line.kcal_per_100g * m
    else:
        kcal = protein * KCAL_PER_G["protein"] + carb * KCAL_PER_G["carb"] + fat * KCAL_PER_G["fat"]
    return NutrientTotals(kcal=kcal, protein_g=protein, carb_g=carb, fat_g=fat, weight_g=line.weight_g)


def aggregate_meal(lines: Iterable[FoodLine]) -> NutrientTotals:
    return sum((line_totals(line) for line in lines), NutrientTotals())


def aggregate_plan(meals: Iterable[Meal]) -> PlanTotals:
    per_meal = [
        MealTotals(name=m.name, active_for_calculation=m.active_for_calculation, totals=aggregate_meal(m.lines))
        for m in meals
    ]
    daily = sum((mt.totals for mt in per_meal if mt.active_for_calculation), NutrientTotals())
    all_meals = sum((mt.totals for mt in per_meal), NutrientTotals())
    return PlanTotals(daily=daily, all_meals=all_meals, meals=per_meal)


def aggregate_plan_nutrients(plan: MealPlan) -> PlanTotals:
    totals = aggregate_plan(plan.meals)
    log.info("plan_aggregated", meals=len(plan.meals), kcal=round(totals.daily.kcal, 1))
    return totals


def adherence(current: float, target: float) -> Adherence:
    if not target or target <= 0:
        raise NotComputable("adherence", "target must be positive")
    deviation = (current - target) / target * 100.0
    if deviation > WITHIN_BAND:
        status = "above"
    elif deviation < -WITHIN_BAND:
        status = "below"
    else:
        status = "within"
    magnitude = abs(deviation)
    if magnitude <= WITHIN_BAND:
        severity = "success"
    elif magnitude <= WARNING_BAND:
        severity = "warning"
    else:
        severity = "error"
    return Adherence(current=current, target=target, percentage=deviation, status=status, severity=severity)


def compare_to_target(current: NutrientTotals, target: MacroTargets | NutrientTotals) -> Dict[str, Adherence | None]:
    """Deviation per nutrient; ``None`` where the target has nothing to compare against."""
    out: Dict[str, Adherence | None] = {}
    for nutrient in NUTRIENTS:
        try:
            out[nutrient] = adherence(getattr(current, nutrient), getattr(target, nutrient))
        except NotComputable:
            out[nutrient] = None
    return out


def macro_targets(kcal: float) -> MacroTargets:
    return distribute_macros(kcal)


def macro_percentages(totals: NutrientTotals) -> Dict[str, float]:
    return macro_energy_percentages(totals.protein_g, totals.fat_g, totals.carb_g, totals.kcal)
