"""PostgreSQL implementation of EnrollmentRepository."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from enrollment_gateway.domain.entities import Enrollment
from enrollment_gateway.domain.exceptions import (
    EnrollmentExistsException,
    EnrollmentNotFoundException,
)
from enrollment_gateway.domain.interfaces import EnrollmentRepository
from enrollment_gateway.infrastructure.database.models import EnrollmentModel

from .base import SqlAlchemyRepository, naive_utc


class PostgresEnrollmentRepository(SqlAlchemyRepository, EnrollmentRepository):
    """
    PostgreSQL implementation of the Enrollment repository.

    Reads always refresh from the database so cohort assignment never
    acts on an identity-map copy loaded earlier in the request.
    """

    async def save(self, enrollment: Enrollment) -> Enrollment:
        """Persist a new enrollment."""
        model = EnrollmentModel(
            id=str(enrollment.id),
            user_id=enrollment.user_id,
            plan_id=enrollment.plan_id,
            is_payment_done=enrollment.is_payment_done,
            batch_name=enrollment.batch_name,
            created_at=enrollment.created_at,
            updated_at=enrollment.updated_at,
        )

        self._session.add(model)
        try:
            async with self._store_operation("save_enrollment"):
                await self._session.flush()
        except IntegrityError:
            await self._session.rollback()
            raise EnrollmentExistsException(enrollment.user_id)

        return enrollment

    async def get_by_id(self, enrollment_id: UUID) -> Optional[Enrollment]:
        """Retrieve an enrollment by ID."""
        stmt = (
            select(EnrollmentModel)
            .where(EnrollmentModel.id == str(enrollment_id))
            .execution_options(populate_existing=True)
        )
        async with self._store_operation("get_enrollment"):
            result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def get_by_user_id(self, user_id: str) -> Optional[Enrollment]:
        """Retrieve the enrollment owned by a user."""
        stmt = (
            select(EnrollmentModel)
            .where(EnrollmentModel.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        async with self._store_operation("get_enrollment"):
            result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def count_paid(self, exclude_id: Optional[UUID] = None) -> int:
        """Count paid enrollments straight from the table."""
        stmt = select(func.count()).select_from(EnrollmentModel).where(
            EnrollmentModel.is_payment_done.is_(True)
        )
        if exclude_id is not None:
            stmt = stmt.where(EnrollmentModel.id != str(exclude_id))

        async with self._store_operation("count_paid"):
            result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def update_plan(self, enrollment_id: UUID, plan_id: str) -> Enrollment:
        """Record the selected plan."""
        stmt = (
            update(EnrollmentModel)
            .where(EnrollmentModel.id == str(enrollment_id))
            .values(plan_id=plan_id, updated_at=datetime.utcnow())
        )
        async with self._store_operation("update_plan"):
            result = await self._session.execute(stmt)
        if result.rowcount == 0:
            raise EnrollmentNotFoundException(str(enrollment_id))

        enrollment = await self.get_by_id(enrollment_id)
        return enrollment

    async def mark_payment_done(self, enrollment_id: UUID) -> None:
        """Set the payment flag, leaving any batch untouched."""
        stmt = (
            update(EnrollmentModel)
            .where(EnrollmentModel.id == str(enrollment_id))
            .values(is_payment_done=True, updated_at=datetime.utcnow())
        )
        async with self._store_operation("mark_payment_done"):
            result = await self._session.execute(stmt)
        if result.rowcount == 0:
            raise EnrollmentNotFoundException(str(enrollment_id))

    async def assign_batch(self, enrollment_id: UUID, batch_name: str) -> bool:
        """Write the batch only where none is set yet."""
        stmt = (
            update(EnrollmentModel)
            .where(
                EnrollmentModel.id == str(enrollment_id),
                EnrollmentModel.batch_name.is_(None),
            )
            .values(
                batch_name=batch_name,
                is_payment_done=True,
                updated_at=datetime.utcnow(),
            )
        )
        async with self._store_operation("assign_batch"):
            result = await self._session.execute(stmt)
        return result.rowcount > 0

    def _to_entity(self, model: EnrollmentModel) -> Enrollment:
        """Convert database model to domain entity."""
        return Enrollment(
            id=UUID(model.id),
            user_id=model.user_id,
            plan_id=model.plan_id,
            is_payment_done=model.is_payment_done,
            batch_name=model.batch_name,
            created_at=naive_utc(model.created_at),
            updated_at=naive_utc(model.updated_at),
        )
