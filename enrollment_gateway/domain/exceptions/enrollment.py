"""Enrollment exceptions."""

from .base import ConflictException, NotFoundException


class EnrollmentNotFoundException(NotFoundException):
    """Raised when the caller has no enrollment."""

    def __init__(self, key: str):
        super().__init__(
            message=f"Enrollment not found: {key}",
            code="ENROLLMENT_NOT_FOUND",
        )
        self.key = key


class EnrollmentExistsException(ConflictException):
    """Raised when a user already has an enrollment."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User {user_id} is already enrolled",
            code="ENROLLMENT_EXISTS",
        )
        self.user_id = user_id
