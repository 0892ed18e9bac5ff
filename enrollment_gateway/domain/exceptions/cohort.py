"""Cohort assignment exceptions."""

from .base import ValidationException


class InvalidCapacityException(ValidationException):
    """Raised when a cohort capacity is not a positive integer."""

    def __init__(self, capacity: int):
        super().__init__(
            message=f"Cohort capacity must be a positive integer, got {capacity}",
            code="INVALID_CAPACITY",
        )
        self.capacity = capacity
