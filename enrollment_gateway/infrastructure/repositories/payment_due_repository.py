"""PostgreSQL implementation of PaymentDueRepository."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from enrollment_gateway.domain.entities import PaymentDue, PaymentDueStatus
from enrollment_gateway.domain.exceptions import ConflictException
from enrollment_gateway.domain.interfaces import PaymentDueRepository
from enrollment_gateway.infrastructure.database.models import PaymentDueModel

from .base import SqlAlchemyRepository, naive_utc


class PostgresPaymentDueRepository(SqlAlchemyRepository, PaymentDueRepository):
    """
    PostgreSQL implementation of the PaymentDue repository.

    Status transitions are conditional UPDATEs guarded on
    ``status = 'pending'``, so two replays of the same payment can
    never both settle a due.
    """

    async def save_all(self, dues: List[PaymentDue]) -> List[PaymentDue]:
        """Persist newly scheduled dues."""
        models = [
            PaymentDueModel(
                id=str(due.id),
                enrollment_id=str(due.enrollment_id),
                plan_id=due.plan_id,
                installment_number=due.installment_number,
                total_installments=due.total_installments,
                due_amount=due.due_amount,
                due_date=due.due_date,
                status=due.status.value,
                paid_amount=due.paid_amount,
                paid_date=due.paid_date,
                payment_reference=due.payment_reference,
                notes=due.notes,
                created_at=due.created_at,
            )
            for due in dues
        ]

        self._session.add_all(models)
        try:
            async with self._store_operation("save_dues"):
                await self._session.flush()
        except IntegrityError:
            await self._session.rollback()
            raise ConflictException(
                message="Installments already scheduled for this plan",
                code="DUPLICATE_INSTALLMENT",
            )

        return dues

    async def get_by_id(self, due_id: UUID) -> Optional[PaymentDue]:
        """Retrieve a payment due by ID."""
        stmt = (
            select(PaymentDueModel)
            .where(PaymentDueModel.id == str(due_id))
            .execution_options(populate_existing=True)
        )
        async with self._store_operation("get_due"):
            result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def get_by_enrollment_id(
        self,
        enrollment_id: UUID,
        pending_only: bool = False,
    ) -> List[PaymentDue]:
        """Retrieve dues in due-date order."""
        stmt = (
            select(PaymentDueModel)
            .where(PaymentDueModel.enrollment_id == str(enrollment_id))
            .order_by(
                PaymentDueModel.due_date.asc(),
                PaymentDueModel.installment_number.asc(),
            )
            .execution_options(populate_existing=True)
        )
        if pending_only:
            stmt = stmt.where(PaymentDueModel.status == PaymentDueStatus.PENDING.value)

        async with self._store_operation("list_dues"):
            result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._to_entity(model) for model in models]

    async def mark_paid_if_pending(
        self,
        due_id: UUID,
        paid_amount: int,
        reference: str,
        paid_date: datetime,
    ) -> bool:
        """Settle a pending due in one guarded write."""
        stmt = (
            update(PaymentDueModel)
            .where(
                PaymentDueModel.id == str(due_id),
                PaymentDueModel.status == PaymentDueStatus.PENDING.value,
            )
            .values(
                status=PaymentDueStatus.PAID.value,
                paid_amount=paid_amount,
                paid_date=paid_date,
                payment_reference=reference,
            )
        )
        async with self._store_operation("mark_due_paid"):
            result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def cancel_if_pending(self, due_id: UUID) -> bool:
        """Cancel a pending due in one guarded write."""
        stmt = (
            update(PaymentDueModel)
            .where(
                PaymentDueModel.id == str(due_id),
                PaymentDueModel.status == PaymentDueStatus.PENDING.value,
            )
            .values(status=PaymentDueStatus.CANCELLED.value)
        )
        async with self._store_operation("cancel_due"):
            result = await self._session.execute(stmt)
        return result.rowcount > 0

    def _to_entity(self, model: PaymentDueModel) -> PaymentDue:
        """Convert database model to domain entity."""
        return PaymentDue(
            id=UUID(model.id),
            enrollment_id=UUID(model.enrollment_id),
            plan_id=model.plan_id,
            installment_number=model.installment_number,
            total_installments=model.total_installments,
            due_amount=model.due_amount,
            due_date=model.due_date,
            status=PaymentDueStatus(model.status),
            paid_amount=model.paid_amount,
            paid_date=naive_utc(model.paid_date),
            payment_reference=model.payment_reference,
            notes=model.notes,
            created_at=naive_utc(model.created_at),
        )
