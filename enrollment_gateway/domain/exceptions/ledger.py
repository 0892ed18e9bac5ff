"""Payment-due ledger exceptions."""

from .base import ConflictException, NotFoundException, ValidationException


class PaymentDueNotFoundException(NotFoundException):
    """Raised when a payment due cannot be found."""

    def __init__(self, due_id: str):
        super().__init__(
            message=f"Payment due not found: {due_id}",
            code="PAYMENT_DUE_NOT_FOUND",
        )
        self.due_id = due_id


class AlreadyPaidException(ConflictException):
    """Raised when a payment due is no longer pending."""

    def __init__(self, due_id: str, status: str):
        super().__init__(
            message=f"Payment due {due_id} is already {status}",
            code="ALREADY_PAID",
        )
        self.due_id = due_id
        self.status = status


class AmountMismatchException(ValidationException):
    """Raised when the amount paid differs from the amount due."""

    def __init__(self, expected: int, received: int):
        super().__init__(
            message=f"Amount mismatch: expected {expected}, received {received}",
            code="AMOUNT_MISMATCH",
        )
        self.expected = expected
        self.received = received
