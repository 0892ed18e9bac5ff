"""
Installment Scheduler.

Splits a plan into dated installments and turns the schedule into
payment-due records. Everything here is pure: the same plan and start
date always yield the same schedule, which keeps retries idempotent.

Due dates use calendar-month arithmetic. Installment ``i`` (0-indexed)
falls ``i * interval_months`` months after the start date, clamped to
the last day of shorter months (Jan 31 + 1 month -> Feb 28/29).
"""

from datetime import date
from typing import Iterable, List
from uuid import UUID

from dateutil.relativedelta import relativedelta

from enrollment_gateway.domain.entities import Installment, PaymentDue, Plan


def add_months(start: date, months: int) -> date:
    """Shift a date by whole calendar months."""
    return start + relativedelta(months=months)


def describe_installment(plan: Plan, ordinal: int) -> str:
    if ordinal == 1:
        if plan.has_installments:
            return f"Initial payment for {plan.name}"
        return f"Full payment ({plan.name})"
    return f"Installment {ordinal} of {plan.installment_count}"


def installment_due_date(plan: Plan, start_date: date, ordinal: int) -> date:
    """
    Due date of the 1-indexed installment ``ordinal``.

    Raises:
        ValueError: If ordinal is outside 1..installment_count
    """
    if ordinal < 1 or ordinal > plan.installment_count:
        raise ValueError(
            f"Installment {ordinal} is outside 1..{plan.installment_count} for {plan.id}"
        )
    return add_months(start_date, (ordinal - 1) * plan.interval_months)


def schedule(plan: Plan, start_date: date) -> List[Installment]:
    """
    Produce the installment schedule for a plan.

    A single-installment plan yields one installment due on the start
    date. Otherwise the first installment carries the first amount and
    the rest carry the subsequent amount.

    Args:
        plan: A catalog plan
        start_date: Date the first installment falls due

    Returns:
        Installments ordered by ordinal
    """
    return [
        Installment(
            ordinal=ordinal,
            amount=plan.installment_amount(ordinal),
            due_date=installment_due_date(plan, start_date, ordinal),
            description=describe_installment(plan, ordinal),
        )
        for ordinal in range(1, plan.installment_count + 1)
    ]


def materialize_dues(
    plan: Plan,
    start_date: date,
    enrollment_id: UUID,
    skip_first: bool = False,
) -> List[PaymentDue]:
    """
    Map a plan's schedule to pending payment dues.

    Args:
        plan: A catalog plan
        start_date: Date the first installment falls due
        enrollment_id: Enrollment the dues belong to
        skip_first: Omit installment 1 when it is paid inline at purchase

    Returns:
        Pending dues ready to be persisted
    """
    installments = schedule(plan, start_date)
    if skip_first:
        installments = installments[1:]

    return [
        PaymentDue(
            enrollment_id=enrollment_id,
            plan_id=plan.id,
            installment_number=installment.ordinal,
            total_installments=plan.installment_count,
            due_amount=installment.amount,
            due_date=installment.due_date,
            notes=installment.description,
        )
        for installment in installments
    ]


def check_installment_numbers(dues: Iterable[PaymentDue]) -> None:
    """
    Verify dues for one enrollment and plan form a contiguous run.

    The run must end at ``total_installments`` with no duplicates; it
    may start after 1 when the first installment was paid inline.

    Raises:
        ValueError: If the numbers are duplicated, gapped or mixed across plans
    """
    dues = list(dues)
    if not dues:
        return

    keys = {(due.enrollment_id, due.plan_id, due.total_installments) for due in dues}
    if len(keys) != 1:
        raise ValueError("Dues span more than one enrollment, plan or installment count")

    numbers = sorted(due.installment_number for due in dues)
    if len(set(numbers)) != len(numbers):
        raise ValueError(f"Duplicate installment numbers: {numbers}")

    total = dues[0].total_installments
    expected = list(range(total - len(numbers) + 1, total + 1))
    if numbers != expected or numbers[0] < 1:
        raise ValueError(f"Installment numbers {numbers} are not a contiguous run ending at {total}")
