from __future__ import annotations

from dataclasses import asdict

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.logging import configure_logging
from domain.calculations import MacroTargets
from domain.entities import Gender, SubjectContext
from domain.errors import DomainError
from domain.formulas import list_formulas
from domain.use_cases import (
    EnergyPlanInput,
    aggregate_plan_nutrients,
    calculate_energy_plan,
    compare_to_target,
    compute_assessment,
    macro_percentages,
    macro_targets,
)
from .schemas import (
    APIResponse,
    AssessmentInput,
    CompareInput,
    EnergyPlanInputSchema,
    MealPlanIn,
)


def _bad_request(exc: DomainError) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": exc.code, "message": exc.message})


def create_app() -> FastAPI:
    configure_logging(settings.log_level, json_output=settings.app_env != "development")
    app = FastAPI(title="Nutri Practice Calculations API", version="0.1.0")
    log = structlog.get_logger("api")
    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/formulas", response_model=APIResponse)
    def formulas() -> APIResponse:
        return APIResponse(ok=True, data={"items": [f.to_dict() for f in list_formulas()]})

    @app.post("/api/assessments/compute", response_model=APIResponse)
    def assessment_compute(payload: AssessmentInput, request: Request) -> APIResponse:
        context = SubjectContext(gender=Gender.parse(payload.gender), age=payload.age)
        try:
            result = compute_assessment(
                payload.to_measurement(),
                context,
                payload.formula_id,
                body_fat_equation=payload.body_fat_equation,
            )
        except DomainError as exc:
            log.warning("assessment_rejected", code=exc.code, message=exc.message)
            raise _bad_request(exc)
        xtrace = request.headers.get("X-Trace-Id")
        if xtrace:
            log.bind(trace_id=xtrace).info("assessment_done", not_computable=list(result.not_computable))
        return APIResponse(ok=True, data={"result": result.to_dict(), "display": result.to_display()})

    @app.post("/api/meal-plans/aggregate", response_model=APIResponse)
    def meal_plan_aggregate(payload: MealPlanIn) -> APIResponse:
        try:
            totals = aggregate_plan_nutrients(payload.to_plan())
        except DomainError as exc:
            raise _bad_request(exc)
        return APIResponse(
            ok=True,
            data={
                "daily": asdict(totals.daily),
                "all_meals": asdict(totals.all_meals),
                "meals": [asdict(m) for m in totals.meals],
                "macro_percentages": macro_percentages(totals.daily),
            },
        )

    @app.post("/api/meal-plans/compare", response_model=APIResponse)
    def meal_plan_compare(payload: CompareInput) -> APIResponse:
        try:
            totals = aggregate_plan_nutrients(payload.plan.to_plan())
        except DomainError as exc:
            raise _bad_request(exc)
        # macros not given explicitly follow the default energy split
        defaults = macro_targets(payload.target.kcal)
        target = MacroTargets(
            kcal=payload.target.kcal,
            protein_g=payload.target.protein_g if payload.target.protein_g is not None else defaults.protein_g,
            carb_g=payload.target.carb_g if payload.target.carb_g is not None else defaults.carb_g,
            fat_g=payload.target.fat_g if payload.target.fat_g is not None else defaults.fat_g,
        )
        comparison = compare_to_target(totals.daily, target)
        return APIResponse(
            ok=True,
            data={
                "daily": asdict(totals.daily),
                "target": asdict(target),
                "comparison": {k: (asdict(v) if v is not None else None) for k, v in comparison.items()},
            },
        )

    @app.post("/api/energy-plans/calculate", response_model=APIResponse)
    def energy_plan_calculate(payload: EnergyPlanInputSchema) -> APIResponse:
        inp = EnergyPlanInput(**{**payload.model_dump(), "gender": Gender.parse(payload.gender)})
        try:
            out = calculate_energy_plan(inp)
        except DomainError as exc:
            raise _bad_request(exc)
        return APIResponse(ok=True, data=asdict(out))

    return app


app = create_app()
