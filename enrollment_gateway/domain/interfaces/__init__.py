"""
Domain Interfaces (Ports)
"""

from .repositories import (
    TransactionalRepository,
    EnrollmentRepository,
    PaymentRepository,
    PaymentDueRepository,
)
from .clients import PaymentGatewayClient, IdentityProvider
from .locks import CohortLock

__all__ = [
    "TransactionalRepository",
    "EnrollmentRepository",
    "PaymentRepository",
    "PaymentDueRepository",
    "PaymentGatewayClient",
    "IdentityProvider",
    "CohortLock",
]
