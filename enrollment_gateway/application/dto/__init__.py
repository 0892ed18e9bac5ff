"""Data Transfer Objects for application layer."""

from .enrollment import CohortResponse, EnrollmentResponse, PlanSelectionResponse
from .ledger import PaymentDueResponse
from .payment import PaymentResponse, VerificationResponse
from .plan import InstallmentDTO, PlanResponse, ScheduleResponse

__all__ = [
    "CohortResponse",
    "EnrollmentResponse",
    "PlanSelectionResponse",
    "PaymentDueResponse",
    "PaymentResponse",
    "VerificationResponse",
    "InstallmentDTO",
    "PlanResponse",
    "ScheduleResponse",
]
