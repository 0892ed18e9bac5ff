"""Data transfer objects for payment-due ledger operations."""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class PaymentDueResponse:
    """A scheduled installment with its effective status and payment window."""

    due_id: str
    plan_id: str
    installment_number: int
    total_installments: int
    due_amount: int
    due_date: str
    status: str
    paid_amount: int
    paid_date: Optional[str]
    payment_reference: Optional[str]
    notes: str
    is_payable: bool
    days_until_open: int

    @classmethod
    def from_entity(cls, due, window, today: date) -> "PaymentDueResponse":
        return cls(
            due_id=str(due.id),
            plan_id=due.plan_id,
            installment_number=due.installment_number,
            total_installments=due.total_installments,
            due_amount=due.due_amount,
            due_date=due.due_date.isoformat(),
            status=due.effective_status(today).value,
            paid_amount=due.paid_amount,
            paid_date=due.paid_date.isoformat() + "Z" if due.paid_date else None,
            payment_reference=due.payment_reference,
            notes=due.notes,
            is_payable=window.is_open,
            days_until_open=window.days_until_open,
        )
