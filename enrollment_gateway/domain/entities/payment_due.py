"""Payment-due ledger entities."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class PaymentDueStatus(str, Enum):
    """
    Lifecycle of a scheduled installment.

    OVERDUE is never stored: it is derived from PENDING and the due date.
    """

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


@dataclass
class PaymentDue:
    """A scheduled installment obligation for an enrollment."""

    enrollment_id: UUID
    plan_id: str
    installment_number: int
    total_installments: int
    due_amount: int
    due_date: date
    id: UUID = field(default_factory=uuid4)
    status: PaymentDueStatus = PaymentDueStatus.PENDING
    paid_amount: int = 0
    paid_date: Optional[datetime] = None
    payment_reference: Optional[str] = None
    notes: str = ""
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_pending(self) -> bool:
        return self.status == PaymentDueStatus.PENDING

    def is_overdue(self, today: date) -> bool:
        return self.is_pending and self.due_date < today

    def effective_status(self, today: date) -> PaymentDueStatus:
        """Stored status, with PENDING reported as OVERDUE once past due."""
        if self.is_overdue(today):
            return PaymentDueStatus.OVERDUE
        return self.status

    def to_dict(self, today: date | None = None) -> dict:
        status = self.effective_status(today) if today else self.status
        return {
            "due_id": str(self.id),
            "enrollment_id": str(self.enrollment_id),
            "plan_id": self.plan_id,
            "installment_number": self.installment_number,
            "total_installments": self.total_installments,
            "due_amount": self.due_amount,
            "due_date": self.due_date.isoformat(),
            "status": status.value,
            "paid_amount": self.paid_amount,
            "paid_date": self.paid_date.isoformat() + "Z" if self.paid_date else None,
            "payment_reference": self.payment_reference,
        }


@dataclass(frozen=True)
class PaymentWindow:
    """
    Whether an installment may be paid now.

    ``days_until_open`` is 0 when the window is open.
    """

    is_open: bool
    days_until_open: int = 0

    def __bool__(self) -> bool:
        return self.is_open
