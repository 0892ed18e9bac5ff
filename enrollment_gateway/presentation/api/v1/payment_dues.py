"""Payment-due ledger API endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path

from enrollment_gateway.application.dto import PaymentDueResponse
from enrollment_gateway.application.services import EnrollmentService, LedgerService
from enrollment_gateway.core.dependencies import get_enrollment_service, get_ledger_service
from enrollment_gateway.presentation.schemas import (
    ErrorResponseSchema,
    PaymentDueListResponseSchema,
    PaymentDueSchema,
)

payment_due_router = APIRouter(
    prefix="/payment-dues",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Not signed in"},
        404: {"model": ErrorResponseSchema, "description": "Not enrolled"},
    },
)


async def _list_dues(
    enrollment_service: EnrollmentService,
    ledger_service: LedgerService,
    pending_only: bool,
) -> PaymentDueListResponseSchema:
    enrollment = await enrollment_service.get_mine()
    dues = await ledger_service.list_for_enrollment(enrollment.id, pending_only=pending_only)
    return PaymentDueListResponseSchema(
        enrollment_id=str(enrollment.id),
        dues=[PaymentDueSchema.model_validate(due) for due in dues],
    )


@payment_due_router.get(
    "",
    response_model=PaymentDueListResponseSchema,
    summary="List My Payment Dues",
    description="""
    Every scheduled installment for the signed-in learner, ordered by due date.

    Status is reported as overdue for pending dues past their due date.
    Each due carries whether its payment window is open.
    """,
)
async def list_payment_dues(
    enrollment_service: Annotated[EnrollmentService, Depends(get_enrollment_service)],
    ledger_service: Annotated[LedgerService, Depends(get_ledger_service)],
) -> PaymentDueListResponseSchema:
    return await _list_dues(enrollment_service, ledger_service, pending_only=False)


@payment_due_router.get(
    "/pending",
    response_model=PaymentDueListResponseSchema,
    summary="List My Pending Payment Dues",
    description="Pending installments (overdue included), ordered by due date.",
)
async def list_pending_payment_dues(
    enrollment_service: Annotated[EnrollmentService, Depends(get_enrollment_service)],
    ledger_service: Annotated[LedgerService, Depends(get_ledger_service)],
) -> PaymentDueListResponseSchema:
    return await _list_dues(enrollment_service, ledger_service, pending_only=True)


@payment_due_router.post(
    "/{due_id}/cancel",
    response_model=PaymentDueSchema,
    summary="Cancel A Payment Due",
    description="""
    Cancel one of the signed-in learner's pending installments.

    Dues that are already paid or cancelled cannot be cancelled again.
    Dues belonging to another learner are reported as not found.
    """,
    responses={
        409: {"model": ErrorResponseSchema, "description": "Due is no longer pending"},
    },
)
async def cancel_payment_due(
    due_id: Annotated[UUID, Path(description="Payment due identifier")],
    enrollment_service: Annotated[EnrollmentService, Depends(get_enrollment_service)],
    ledger_service: Annotated[LedgerService, Depends(get_ledger_service)],
) -> PaymentDueSchema:
    enrollment = await enrollment_service.get_mine()
    due = await ledger_service.cancel(due_id, enrollment_id=enrollment.id)

    today = date.today()
    return PaymentDueSchema.model_validate(
        PaymentDueResponse.from_entity(due, ledger_service.is_payable_now(due, today), today)
    )
