"""Payment and gateway exceptions."""

from .base import ConflictException, TransientException, ValidationException


class DuplicatePaymentReferenceException(ConflictException):
    """Raised when a payment with the same gateway reference exists."""

    def __init__(self, reference: str):
        super().__init__(
            message=f"Payment reference already recorded: {reference}",
            code="DUPLICATE_PAYMENT_REFERENCE",
        )
        self.reference = reference


class InvalidCallbackException(ValidationException):
    """Raised when a gateway callback carries unusable parameters."""

    def __init__(self, message: str):
        super().__init__(message=message, code="INVALID_CALLBACK")


class GatewayUnavailableException(TransientException):
    """Raised when the payment gateway cannot be reached."""

    def __init__(self, message: str = "Payment gateway unavailable", status_code: int | None = None):
        super().__init__(message=message, code="GATEWAY_UNAVAILABLE")
        self.status_code = status_code


class RecordStoreUnavailableException(TransientException):
    """Raised when the record store fails an operation."""

    def __init__(self, operation: str, detail: str = ""):
        super().__init__(
            message=f"Record store failed during {operation}",
            code="RECORD_STORE_UNAVAILABLE",
        )
        self.operation = operation
        self.detail = detail
