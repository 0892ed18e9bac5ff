"""Cohort API endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from enrollment_gateway.application.dto import CohortResponse
from enrollment_gateway.application.services import CohortService
from enrollment_gateway.core.dependencies import get_cohort_service
from enrollment_gateway.presentation.schemas import CohortResponseSchema, ErrorResponseSchema

cohort_router = APIRouter(prefix="/cohorts")


@cohort_router.get(
    "/next",
    response_model=CohortResponseSchema,
    summary="Next Cohort",
    description="The batch the next paid learner would join, from a fresh paid count.",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid capacity"},
        401: {"model": ErrorResponseSchema, "description": "Not signed in"},
    },
)
async def get_next_cohort(
    cohort_service: Annotated[CohortService, Depends(get_cohort_service)],
    capacity: Annotated[
        Optional[int],
        Query(description="Batch size override; defaults to the configured capacity"),
    ] = None,
) -> CohortResponseSchema:
    assignment = await cohort_service.assign_next_cohort(capacity)
    return CohortResponseSchema.model_validate(CohortResponse.from_entity(assignment))
