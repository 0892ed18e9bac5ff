"""Database infrastructure."""

from .connection import get_db_session, DatabaseSessionManager, db_manager
from .models import Base, EnrollmentModel, PaymentModel, PaymentDueModel

__all__ = [
    "get_db_session",
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "EnrollmentModel",
    "PaymentModel",
    "PaymentDueModel",
]
