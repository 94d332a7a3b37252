from domain.use_cases.aggregate_nutrients import (
    aggregate_meal,
    aggregate_plan,
    aggregate_plan_nutrients,
    compare_to_target,
    macro_percentages,
    macro_targets,
)
from domain.use_cases.calculate_energy_plan import (
    EnergyPlanInput,
    EnergyPlanResult,
    calculate_energy_plan,
)
from domain.use_cases.compute_assessment import compute_assessment

__all__ = [
    "EnergyPlanInput",
    "EnergyPlanResult",
    "aggregate_meal",
    "aggregate_plan",
    "aggregate_plan_nutrients",
    "calculate_energy_plan",
    "compare_to_target",
    "compute_assessment",
    "macro_percentages",
    "macro_targets",
]
