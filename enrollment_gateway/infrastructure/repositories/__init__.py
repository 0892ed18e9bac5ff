"""Repository implementations."""

from .base import SqlAlchemyRepository
from .enrollment_repository import PostgresEnrollmentRepository
from .payment_repository import PostgresPaymentRepository
from .payment_due_repository import PostgresPaymentDueRepository

__all__ = [
    "SqlAlchemyRepository",
    "PostgresEnrollmentRepository",
    "PostgresPaymentRepository",
    "PostgresPaymentDueRepository",
]
