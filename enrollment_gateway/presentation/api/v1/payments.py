"""Payment API endpoints, including the gateway redirect target."""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from enrollment_gateway.application.services import PaymentService, PaymentVerificationService
from enrollment_gateway.core.dependencies import get_payment_service, get_verification_service
from enrollment_gateway.domain.entities import GatewayCallback
from enrollment_gateway.domain.exceptions import InvalidCallbackException
from enrollment_gateway.presentation.schemas import (
    ErrorResponseSchema,
    PaymentListResponseSchema,
    PaymentSchema,
    VerificationResponseSchema,
)

payment_router = APIRouter(
    prefix="/payments",
    responses={
        401: {"model": ErrorResponseSchema, "description": "Not signed in"},
        404: {"model": ErrorResponseSchema, "description": "Not enrolled"},
    },
)


def _parse_int(name: str, value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        parsed = int(value)
    except ValueError:
        raise InvalidCallbackException(f"{name} must be an integer, got {value!r}")
    if parsed < 0:
        raise InvalidCallbackException(f"{name} must not be negative")
    return parsed


def parse_callback(
    reference: Optional[str],
    status: Optional[str],
    plan_id: Optional[str],
    plan_name: Optional[str],
    amount: Optional[str],
    currency: Optional[str],
    plan_discount: Optional[str],
    due_id: Optional[str],
) -> GatewayCallback:
    """
    Build a GatewayCallback from raw redirect parameters.

    Raises:
        InvalidCallbackException: If a numeric or id parameter is malformed
    """
    parsed_due_id = None
    if due_id:
        try:
            parsed_due_id = UUID(due_id)
        except ValueError:
            raise InvalidCallbackException(f"dueId is not a valid id: {due_id!r}")

    return GatewayCallback(
        reference=reference,
        status=status.strip().lower() if status else None,
        plan_id=plan_id,
        plan_name=plan_name,
        amount=_parse_int("amount", amount),
        currency=currency.upper() if currency else None,
        plan_discount=_parse_int("planDiscount", plan_discount),
        due_id=parsed_due_id,
    )


@payment_router.get(
    "/verify",
    response_model=VerificationResponseSchema,
    summary="Verify Payment",
    description="""
    Gateway redirect target.

    Confirms the payment, assigns a cohort on the first payment, records
    the payment once per reference and settles the scheduled installment
    named by dueId. Repeated callbacks for the same reference are no-ops.
    """,
    responses={
        200: {"description": "Verification finished (success or failed)"},
        400: {"model": ErrorResponseSchema, "description": "Malformed callback"},
        503: {"model": ErrorResponseSchema, "description": "Gateway or store unavailable"},
    },
)
async def verify_payment(
    verification_service: Annotated[
        PaymentVerificationService, Depends(get_verification_service)
    ],
    reference: Annotated[Optional[str], Query(max_length=255)] = None,
    status: Annotated[Optional[str], Query(max_length=50)] = None,
    plan_id: Annotated[Optional[str], Query(alias="planId", max_length=64)] = None,
    plan_name: Annotated[Optional[str], Query(alias="planName", max_length=255)] = None,
    amount: Annotated[Optional[str], Query(description="Amount in kobo")] = None,
    currency: Annotated[Optional[str], Query(max_length=3)] = None,
    plan_discount: Annotated[Optional[str], Query(alias="planDiscount")] = None,
    due_id: Annotated[Optional[str], Query(alias="dueId")] = None,
) -> VerificationResponseSchema:
    callback = parse_callback(
        reference=reference,
        status=status,
        plan_id=plan_id,
        plan_name=plan_name,
        amount=amount,
        currency=currency,
        plan_discount=plan_discount,
        due_id=due_id,
    )
    response = await verification_service.verify(callback)
    return VerificationResponseSchema.model_validate(response)


@payment_router.get(
    "",
    response_model=PaymentListResponseSchema,
    summary="List My Payments",
    description="The signed-in learner's payments, newest first.",
)
async def list_payments(
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
    limit: Annotated[
        int,
        Query(ge=1, le=100, description="Maximum number of payments to return"),
    ] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> PaymentListResponseSchema:
    payments = await payment_service.list_payments(limit=limit, offset=offset)
    return PaymentListResponseSchema(
        payments=[PaymentSchema.model_validate(payment) for payment in payments],
    )
