"""Data transfer objects for payment and verification operations."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class PaymentResponse:
    """Response data for a recorded payment."""

    payment_id: str
    reference: str
    amount: int
    currency: str
    plan_id: Optional[str]
    plan_name: Optional[str]
    installment_ordinal: Optional[int]
    paid_at: str

    @classmethod
    def from_entity(cls, payment) -> "PaymentResponse":
        return cls(
            payment_id=str(payment.id),
            reference=payment.reference,
            amount=payment.amount,
            currency=payment.currency,
            plan_id=payment.plan_id,
            plan_name=payment.plan_name,
            installment_ordinal=payment.installment_ordinal,
            paid_at=payment.paid_at.isoformat() + "Z",
        )


@dataclass(frozen=True)
class VerificationResponse:
    """
    Outcome of a gateway callback as shown to the learner.

    ``reason`` is set only on failure. ``incomplete_steps`` names
    post-payment steps that did not complete and need a re-run.
    """

    reference: Optional[str]
    status: str
    reason: Optional[str] = None
    payment: Optional[Dict[str, Any]] = None
    batch_name: Optional[str] = None
    incomplete_steps: List[str] = field(default_factory=list)

    @classmethod
    def from_verification(cls, attempt) -> "VerificationResponse":
        payload = dict(attempt.data) if attempt.data else None
        batch_name = payload.pop("batch_name", None) if payload else None
        return cls(
            reference=attempt.reference,
            status=attempt.status.value,
            reason=attempt.error or None,
            payment=payload,
            batch_name=batch_name,
            incomplete_steps=list(attempt.incomplete_steps),
        )
