"""Cohort service - assigns paid learners to batches."""

from uuid import UUID

import structlog

from enrollment_gateway.core.config import settings
from enrollment_gateway.core.metrics import record_cohort_assignment
from enrollment_gateway.domain.entities import CohortAssignment
from enrollment_gateway.domain.exceptions import EnrollmentNotFoundException
from enrollment_gateway.domain.interfaces import (
    CohortLock,
    EnrollmentRepository,
    IdentityProvider,
)
from enrollment_gateway.service.cohort import compute_next_cohort, validate_capacity

from .identity import require_current_user

logger = structlog.get_logger(__name__)


class CohortService:
    """
    Application service for cohort assignment.

    The read-count, compute, write sequence runs inside the cohort
    lock and is committed before the lock is released, so the next
    assignment always counts this one.
    """

    def __init__(
        self,
        enrollment_repository: EnrollmentRepository,
        cohort_lock: CohortLock,
        identity: IdentityProvider,
        capacity: int | None = None,
    ):
        self._enrollment_repo = enrollment_repository
        self._lock = cohort_lock
        self._identity = identity
        self._capacity = settings.batch_capacity if capacity is None else capacity

    async def assign_next_cohort(self, capacity: int | None = None) -> CohortAssignment:
        """
        Preview the cohort the next paid learner would join.

        Args:
            capacity: Batch size override; defaults to the configured size

        Returns:
            CohortAssignment computed from a fresh paid count

        Raises:
            UnauthorizedException: If no one is signed in
            InvalidCapacityException: If capacity is not positive
        """
        await require_current_user(self._identity)
        capacity = self._capacity if capacity is None else capacity
        validate_capacity(capacity)

        paid_count = await self._enrollment_repo.count_paid()
        return compute_next_cohort(paid_count, capacity)

    async def assign(self, enrollment_id: UUID) -> str:
        """
        Assign an enrollment to a batch exactly once.

        Args:
            enrollment_id: The enrollment being confirmed as paid

        Returns:
            The enrollment's batch name, new or previously assigned

        Raises:
            UnauthorizedException: If no one is signed in
            InvalidCapacityException: If the configured capacity is invalid
            EnrollmentNotFoundException: If the enrollment does not exist
        """
        await require_current_user(self._identity)
        validate_capacity(self._capacity)

        log = logger.bind(enrollment_id=str(enrollment_id))

        async with self._lock.hold():
            try:
                enrollment = await self._enrollment_repo.get_by_id(enrollment_id)
                if enrollment is None:
                    raise EnrollmentNotFoundException(str(enrollment_id))

                if enrollment.has_cohort:
                    if not enrollment.is_payment_done:
                        await self._enrollment_repo.mark_payment_done(enrollment_id)
                    # the advisory lock is transaction-scoped; end it here too
                    await self._enrollment_repo.commit()
                    log.info("cohort_already_assigned", batch_name=enrollment.batch_name)
                    return enrollment.batch_name

                paid_count = await self._enrollment_repo.count_paid(exclude_id=enrollment_id)
                assignment = compute_next_cohort(paid_count, self._capacity)

                assigned = await self._enrollment_repo.assign_batch(
                    enrollment_id, assignment.batch_name
                )
                await self._enrollment_repo.commit()
            except Exception:
                await self._enrollment_repo.rollback()
                raise

        if not assigned:
            # Another writer got there first; its batch stands
            current = await self._enrollment_repo.get_by_id(enrollment_id)
            log.warning("cohort_assignment_lost_race", batch_name=current.batch_name)
            return current.batch_name

        record_cohort_assignment(assignment.batch_number)
        log.info(
            "cohort_assigned",
            batch_name=assignment.batch_name,
            paid_before=paid_count,
        )
        return assignment.batch_name
