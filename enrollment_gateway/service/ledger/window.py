"""
Payment Window rules for scheduled installments.

An installment becomes payable a fixed number of days before its due
date and stays payable for as long as it is pending, including after
it has become overdue.
"""

from datetime import date, datetime, timedelta
from typing import Union

from enrollment_gateway.domain.entities import PaymentDue, PaymentWindow

DEFAULT_WINDOW_DAYS = 10


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def window_open_date(due_date: date, window_days: int = DEFAULT_WINDOW_DAYS) -> date:
    return due_date - timedelta(days=window_days)


def payment_window(
    due: PaymentDue,
    now: Union[date, datetime],
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> PaymentWindow:
    """
    Decide whether a due may be paid at ``now``.

    Only the calendar date of ``now`` is considered. Paid and cancelled
    dues are never payable.

    Args:
        due: The scheduled installment
        now: Current date or datetime
        window_days: Days before the due date the window opens

    Returns:
        PaymentWindow with days_until_open > 0 while still closed
    """
    if not due.is_pending:
        return PaymentWindow(is_open=False, days_until_open=0)

    today = _as_date(now)
    if due.is_overdue(today):
        return PaymentWindow(is_open=True)

    opens_on = window_open_date(due.due_date, window_days)
    if today >= opens_on:
        return PaymentWindow(is_open=True)

    return PaymentWindow(is_open=False, days_until_open=(opens_on - today).days)
