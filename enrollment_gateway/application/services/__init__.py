"""Application services (use cases)."""

from .cohort_service import CohortService
from .enrollment_service import EnrollmentService
from .identity import require_current_user
from .ledger_service import LedgerService
from .payment_service import PaymentService
from .plan_service import PlanService
from .verification_registry import VerificationRegistry
from .verification_service import (
    PaymentVerificationService,
    STEP_COHORT_ASSIGNMENT,
    STEP_LEDGER_UPDATE,
    STEP_PAYMENT_RECORD,
)

__all__ = [
    "CohortService",
    "EnrollmentService",
    "require_current_user",
    "LedgerService",
    "PaymentService",
    "PlanService",
    "VerificationRegistry",
    "PaymentVerificationService",
    "STEP_COHORT_ASSIGNMENT",
    "STEP_LEDGER_UPDATE",
    "STEP_PAYMENT_RECORD",
]
