"""Base domain exceptions and error families."""


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Domain exceptions represent business rule violations or
    domain-specific error conditions.
    """

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationException(DomainException):
    """Malformed input. Surfaced to the caller, never retried."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, code=code)


class ConflictException(DomainException):
    """
    The record already reflects a different or final state.

    Callers may treat a conflict as a no-op success when it is a
    harmless replay of an operation that already took effect.
    """

    def __init__(self, message: str, code: str = "CONFLICT"):
        super().__init__(message=message, code=code)


class TransientException(DomainException):
    """I/O failure against the record store or gateway. Safe to retry."""

    def __init__(self, message: str, code: str = "TRANSIENT_ERROR"):
        super().__init__(message=message, code=code)


class NotFoundException(DomainException):
    """A referenced record does not exist."""

    def __init__(self, message: str, code: str = "NOT_FOUND"):
        super().__init__(message=message, code=code)


class UnauthorizedException(DomainException):
    """No authenticated caller. Fails closed with no partial effects."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message=message, code="UNAUTHORIZED")
