"""Tuition plan and scheduled installment entities."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Plan:
    """
    A catalog-defined tuition plan.

    All amounts are in the minor currency unit (kobo).
    """

    id: str
    name: str
    total_amount: int
    installment_count: int
    first_installment_amount: int
    subsequent_installment_amount: int
    interval_months: int
    currency: str = "NGN"
    discount_percent: int = 0

    @property
    def has_installments(self) -> bool:
        return self.installment_count > 1

    @property
    def scheduled_total(self) -> int:
        """Sum of all installment amounts as the schedule would produce them."""
        return (
            self.first_installment_amount
            + (self.installment_count - 1) * self.subsequent_installment_amount
        )

    def installment_amount(self, ordinal: int) -> int:
        """Amount of the 1-indexed installment ``ordinal``."""
        if ordinal < 1 or ordinal > self.installment_count:
            raise ValueError(
                f"Installment {ordinal} is outside 1..{self.installment_count} for {self.id}"
            )
        return self.first_installment_amount if ordinal == 1 else self.subsequent_installment_amount

    def to_dict(self) -> dict:
        return {
            "plan_id": self.id,
            "name": self.name,
            "total_amount": self.total_amount,
            "installment_count": self.installment_count,
            "first_installment_amount": self.first_installment_amount,
            "subsequent_installment_amount": self.subsequent_installment_amount,
            "interval_months": self.interval_months,
            "currency": self.currency,
            "discount_percent": self.discount_percent,
        }


@dataclass(frozen=True)
class Installment:
    """A single scheduled payment within a plan."""

    ordinal: int
    amount: int
    due_date: date
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "installment_number": self.ordinal,
            "amount": self.amount,
            "due_date": self.due_date.isoformat(),
            "description": self.description,
        }
