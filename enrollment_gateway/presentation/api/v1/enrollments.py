"""Enrollment API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from enrollment_gateway.application.dto import EnrollmentResponse
from enrollment_gateway.application.services import EnrollmentService
from enrollment_gateway.core.dependencies import get_enrollment_service
from enrollment_gateway.presentation.schemas import (
    EnrollmentResponseSchema,
    ErrorResponseSchema,
    PlanSelectionResponseSchema,
    SelectPlanRequestSchema,
)

enrollment_router = APIRouter(
    prefix="/enrollments",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Not signed in"},
    },
)


@enrollment_router.post(
    "",
    response_model=EnrollmentResponseSchema,
    status_code=201,
    summary="Enroll",
    description="Create an enrollment for the signed-in user.",
    responses={
        409: {"model": ErrorResponseSchema, "description": "Already enrolled"},
    },
)
async def create_enrollment(
    enrollment_service: Annotated[EnrollmentService, Depends(get_enrollment_service)],
) -> EnrollmentResponseSchema:
    response = await enrollment_service.create()
    return EnrollmentResponseSchema.model_validate(response)


@enrollment_router.get(
    "/me",
    response_model=EnrollmentResponseSchema,
    summary="Get My Enrollment",
    description="Returns the signed-in user's enrollment, including batch name once paid.",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Not enrolled"},
    },
)
async def get_my_enrollment(
    enrollment_service: Annotated[EnrollmentService, Depends(get_enrollment_service)],
) -> EnrollmentResponseSchema:
    enrollment = await enrollment_service.get_mine()
    return EnrollmentResponseSchema.model_validate(EnrollmentResponse.from_entity(enrollment))


@enrollment_router.put(
    "/me/plan",
    response_model=PlanSelectionResponseSchema,
    summary="Select Plan",
    description="""
    Select a tuition plan.

    Schedules installments 2..N as payment dues; installment 1 is paid
    at purchase. Re-selecting the current plan is a no-op. Switching
    plans after paying or with dues outstanding is refused.
    """,
    responses={
        400: {"model": ErrorResponseSchema, "description": "Unknown plan"},
        404: {"model": ErrorResponseSchema, "description": "Not enrolled"},
        409: {"model": ErrorResponseSchema, "description": "Plan change not allowed"},
    },
)
async def select_plan(
    request: SelectPlanRequestSchema,
    enrollment_service: Annotated[EnrollmentService, Depends(get_enrollment_service)],
) -> PlanSelectionResponseSchema:
    response = await enrollment_service.select_plan(request.plan_id, request.start_date)
    return PlanSelectionResponseSchema.model_validate(response)
