"""
Installment Scheduling for the Enrollment Gateway
"""

from .installments import (
    add_months,
    check_installment_numbers,
    describe_installment,
    installment_due_date,
    materialize_dues,
    schedule,
)

__all__ = [
    "add_months",
    "check_installment_numbers",
    "describe_installment",
    "installment_due_date",
    "materialize_dues",
    "schedule",
]
