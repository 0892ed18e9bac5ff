"""Domain Exceptions - Business rule violations and domain errors."""

from .base import (
    DomainException,
    ValidationException,
    ConflictException,
    TransientException,
    NotFoundException,
    UnauthorizedException,
)
from .plan import (
    PlanNotFoundException,
    CatalogIntegrityException,
    PlanChangeNotAllowedException,
)
from .cohort import InvalidCapacityException
from .ledger import (
    PaymentDueNotFoundException,
    AlreadyPaidException,
    AmountMismatchException,
)
from .enrollment import EnrollmentNotFoundException, EnrollmentExistsException
from .payment import (
    DuplicatePaymentReferenceException,
    InvalidCallbackException,
    GatewayUnavailableException,
    RecordStoreUnavailableException,
)

__all__ = [
    "DomainException",
    "ValidationException",
    "ConflictException",
    "TransientException",
    "NotFoundException",
    "UnauthorizedException",
    "PlanNotFoundException",
    "CatalogIntegrityException",
    "PlanChangeNotAllowedException",
    "InvalidCapacityException",
    "PaymentDueNotFoundException",
    "AlreadyPaidException",
    "AmountMismatchException",
    "EnrollmentNotFoundException",
    "EnrollmentExistsException",
    "DuplicatePaymentReferenceException",
    "InvalidCallbackException",
    "GatewayUnavailableException",
    "RecordStoreUnavailableException",
]
