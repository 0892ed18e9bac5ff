"""
Payment-Due Ledger rules for the Enrollment Gateway
"""

from .window import DEFAULT_WINDOW_DAYS, payment_window, window_open_date

__all__ = [
    "DEFAULT_WINDOW_DAYS",
    "payment_window",
    "window_open_date",
]
