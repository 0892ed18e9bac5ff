"""Data transfer objects for plan catalog operations."""

from dataclasses import dataclass
from datetime import date
from typing import List


@dataclass(frozen=True)
class InstallmentDTO:
    """Single installment within a schedule response."""
    installment_number: int
    amount: int
    due_date: str
    description: str


@dataclass(frozen=True)
class PlanResponse:
    """Response data for a catalog plan."""

    plan_id: str
    name: str
    total_amount: int
    installment_count: int
    first_installment_amount: int
    subsequent_installment_amount: int
    interval_months: int
    currency: str
    discount_percent: int

    @classmethod
    def from_entity(cls, plan) -> "PlanResponse":
        return cls(
            plan_id=plan.id,
            name=plan.name,
            total_amount=plan.total_amount,
            installment_count=plan.installment_count,
            first_installment_amount=plan.first_installment_amount,
            subsequent_installment_amount=plan.subsequent_installment_amount,
            interval_months=plan.interval_months,
            currency=plan.currency,
            discount_percent=plan.discount_percent,
        )


@dataclass(frozen=True)
class ScheduleResponse:
    """A plan's installment schedule from a given start date."""

    plan_id: str
    start_date: str
    total_amount: int
    installments: List[InstallmentDTO]

    @classmethod
    def from_schedule(cls, plan, start_date: date, installments: list) -> "ScheduleResponse":
        return cls(
            plan_id=plan.id,
            start_date=start_date.isoformat(),
            total_amount=sum(inst.amount for inst in installments),
            installments=[
                InstallmentDTO(
                    installment_number=inst.ordinal,
                    amount=inst.amount,
                    due_date=inst.due_date.isoformat(),
                    description=inst.description,
                )
                for inst in installments
            ],
        )
