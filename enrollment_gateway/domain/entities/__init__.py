"""Domain Entities - Core business objects."""

from .cohort import CohortAssignment
from .enrollment import Enrollment
from .identity import CurrentUser
from .payment import Payment
from .payment_due import PaymentDue, PaymentDueStatus, PaymentWindow
from .plan import Plan, Installment
from .verification import (
    GatewayCallback,
    GatewayTransaction,
    PaymentVerification,
    VerificationStatus,
    REASON_DECLINED,
    REASON_MISSING_REFERENCE,
    REASON_REFERENCE_IN_USE,
)

__all__ = [
    "CohortAssignment",
    "Enrollment",
    "CurrentUser",
    "Payment",
    "PaymentDue",
    "PaymentDueStatus",
    "PaymentWindow",
    "Plan",
    "Installment",
    "GatewayCallback",
    "GatewayTransaction",
    "PaymentVerification",
    "VerificationStatus",
    "REASON_DECLINED",
    "REASON_MISSING_REFERENCE",
    "REASON_REFERENCE_IN_USE",
]
