"""API endpoints for the plan catalog."""

from datetime import date
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query

from enrollment_gateway.application.services import PlanService
from enrollment_gateway.core.dependencies import get_plan_service
from enrollment_gateway.presentation.schemas import (
    ErrorResponseSchema,
    PlanListResponseSchema,
    PlanSchema,
    ScheduleResponseSchema,
)

plan_router = APIRouter(prefix="/plans")


@plan_router.get(
    "",
    response_model=PlanListResponseSchema,
    summary="List Plans",
    description="Returns every tuition plan in the catalog. Amounts are in kobo.",
)
async def list_plans(
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
) -> PlanListResponseSchema:
    plans = plan_service.list_plans()
    return PlanListResponseSchema(
        plans=[PlanSchema.model_validate(plan) for plan in plans],
    )


@plan_router.get(
    "/{plan_id}/schedule",
    response_model=ScheduleResponseSchema,
    summary="Preview Installment Schedule",
    description="""
    Preview the installments a plan produces from a start date.

    Installment i (0-indexed) falls i * interval_months calendar months
    after the start date, clamped to month end.
    """,
    responses={
        200: {"description": "Schedule computed"},
        400: {"model": ErrorResponseSchema, "description": "Unknown plan"},
    },
)
async def get_schedule(
    plan_id: Annotated[str, Path(description="Catalog plan id")],
    plan_service: Annotated[PlanService, Depends(get_plan_service)],
    start_date: Annotated[
        Optional[date],
        Query(description="Due date of installment 1 (defaults to today)"),
    ] = None,
) -> ScheduleResponseSchema:
    response = plan_service.get_schedule(plan_id, start_date)
    return ScheduleResponseSchema.model_validate(response)
