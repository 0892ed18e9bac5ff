"""Payment entity representing one completed money movement."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4


@dataclass(frozen=True)
class Payment:
    """
    Immutable record of a successful payment.

    ``reference`` is the gateway transaction id and the natural
    idempotency key: at most one Payment exists per reference.
    ``installment_ordinal`` is None for a single full payment.
    """

    enrollment_id: UUID
    reference: str
    amount: int
    plan_id: Optional[str]
    currency: str = "NGN"
    plan_name: Optional[str] = None
    plan_discount: Optional[int] = None
    installment_ordinal: Optional[int] = None
    paid_at: datetime = field(default_factory=datetime.utcnow)
    id: UUID = field(default_factory=uuid4)

    def to_dict(self) -> dict:
        return {
            "payment_id": str(self.id),
            "enrollment_id": str(self.enrollment_id),
            "reference": self.reference,
            "amount": self.amount,
            "currency": self.currency,
            "plan_id": self.plan_id,
            "plan_name": self.plan_name,
            "installment_ordinal": self.installment_ordinal,
            "paid_at": self.paid_at.isoformat() + "Z",
        }
