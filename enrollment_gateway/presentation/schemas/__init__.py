"""Pydantic schemas for API request/response validation."""

from .enrollment import (
    CohortResponseSchema,
    EnrollmentResponseSchema,
    PlanSelectionResponseSchema,
    SelectPlanRequestSchema,
)
from .ledger import PaymentDueListResponseSchema, PaymentDueSchema
from .payment import PaymentListResponseSchema, PaymentSchema, VerificationResponseSchema
from .plan import InstallmentSchema, PlanListResponseSchema, PlanSchema, ScheduleResponseSchema
from .error import ErrorResponseSchema

__all__ = [
    "CohortResponseSchema",
    "EnrollmentResponseSchema",
    "PlanSelectionResponseSchema",
    "SelectPlanRequestSchema",
    "PaymentDueListResponseSchema",
    "PaymentDueSchema",
    "PaymentListResponseSchema",
    "PaymentSchema",
    "VerificationResponseSchema",
    "InstallmentSchema",
    "PlanListResponseSchema",
    "PlanSchema",
    "ScheduleResponseSchema",
    "ErrorResponseSchema",
]
