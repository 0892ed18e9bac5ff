"""Repository interfaces for the record store."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from enrollment_gateway.domain.entities import Enrollment, Payment, PaymentDue


class TransactionalRepository(ABC):
    """
    Repositories sharing one unit of work.

    Committing through any repository makes every pending write
    visible to other workers.
    """

    @abstractmethod
    async def commit(self) -> None:
        """Commit pending writes."""
        ...

    @abstractmethod
    async def rollback(self) -> None:
        """Discard pending writes."""
        ...


class EnrollmentRepository(TransactionalRepository):
    """
    Abstract repository for Enrollment persistence.

    Implementations may use PostgreSQL, in-memory storage, etc.
    """

    @abstractmethod
    async def save(self, enrollment: Enrollment) -> Enrollment:
        """
        Persist a new enrollment.

        Args:
            enrollment: The enrollment to save

        Returns:
            The saved enrollment
        """
        ...

    @abstractmethod
    async def get_by_id(self, enrollment_id: UUID) -> Optional[Enrollment]:
        """
        Retrieve an enrollment by ID, always re-reading the store.

        Args:
            enrollment_id: The enrollment's unique identifier

        Returns:
            The enrollment if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_by_user_id(self, user_id: str) -> Optional[Enrollment]:
        """
        Retrieve the enrollment owned by a user.

        Args:
            user_id: The user's identifier

        Returns:
            The enrollment if found, None otherwise
        """
        ...

    @abstractmethod
    async def count_paid(self, exclude_id: Optional[UUID] = None) -> int:
        """
        Count enrollments with ``is_payment_done`` set.

        Never served from a cache.

        Args:
            exclude_id: Enrollment to leave out of the count

        Returns:
            Number of paid enrollments
        """
        ...

    @abstractmethod
    async def update_plan(self, enrollment_id: UUID, plan_id: str) -> Enrollment:
        """
        Record the plan a learner selected.

        Returns:
            The updated enrollment
        """
        ...

    @abstractmethod
    async def mark_payment_done(self, enrollment_id: UUID) -> None:
        """Set ``is_payment_done`` without touching the batch name."""
        ...

    @abstractmethod
    async def assign_batch(self, enrollment_id: UUID, batch_name: str) -> bool:
        """
        Set the batch name and payment flag if no batch is assigned yet.

        Returns:
            True if this call assigned the batch, False if one was
            already present
        """
        ...


class PaymentRepository(TransactionalRepository):
    """
    Abstract repository for Payment persistence.

    The store enforces uniqueness of ``Payment.reference``.
    """

    @abstractmethod
    async def save(self, payment: Payment) -> Payment:
        """
        Persist a payment.

        Raises:
            DuplicatePaymentReferenceException: If the reference exists
        """
        ...

    @abstractmethod
    async def get_by_reference(self, reference: str) -> Optional[Payment]:
        """Retrieve a payment by its gateway reference."""
        ...

    @abstractmethod
    async def get_by_enrollment_id(
        self,
        enrollment_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Payment]:
        """
        Retrieve payments for an enrollment.

        Returns:
            Payments ordered by paid_at descending
        """
        ...


class PaymentDueRepository(TransactionalRepository):
    """Abstract repository for PaymentDue persistence."""

    @abstractmethod
    async def save_all(self, dues: List[PaymentDue]) -> List[PaymentDue]:
        """Persist a batch of newly scheduled dues."""
        ...

    @abstractmethod
    async def get_by_id(self, due_id: UUID) -> Optional[PaymentDue]:
        """Retrieve a payment due by ID."""
        ...

    @abstractmethod
    async def get_by_enrollment_id(
        self,
        enrollment_id: UUID,
        pending_only: bool = False,
    ) -> List[PaymentDue]:
        """
        Retrieve dues for an enrollment.

        Returns:
            Dues ordered by due_date, then installment_number, ascending
        """
        ...

    @abstractmethod
    async def mark_paid_if_pending(
        self,
        due_id: UUID,
        paid_amount: int,
        reference: str,
        paid_date: datetime,
    ) -> bool:
        """
        Transition a due from pending to paid in a single conditional write.

        Returns:
            True if the due was pending and is now paid
        """
        ...

    @abstractmethod
    async def cancel_if_pending(self, due_id: UUID) -> bool:
        """
        Transition a due from pending to cancelled.

        Returns:
            True if the due was pending and is now cancelled
        """
        ...
