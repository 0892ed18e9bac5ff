"""PostgreSQL implementation of PaymentRepository."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from enrollment_gateway.domain.entities import Payment
from enrollment_gateway.domain.exceptions import DuplicatePaymentReferenceException
from enrollment_gateway.domain.interfaces import PaymentRepository
from enrollment_gateway.infrastructure.database.models import PaymentModel

from .base import SqlAlchemyRepository, naive_utc


class PostgresPaymentRepository(SqlAlchemyRepository, PaymentRepository):
    """
    PostgreSQL implementation of the Payment repository.

    The unique index on ``reference`` is what makes confirmation
    idempotent across processes.
    """

    async def save(self, payment: Payment) -> Payment:
        """Persist a payment, mapping a reference collision to a typed error."""
        model = PaymentModel(
            id=str(payment.id),
            enrollment_id=str(payment.enrollment_id),
            reference=payment.reference,
            amount=payment.amount,
            currency=payment.currency,
            plan_id=payment.plan_id,
            plan_name=payment.plan_name,
            plan_discount=payment.plan_discount,
            installment_ordinal=payment.installment_ordinal,
            paid_at=payment.paid_at,
        )

        self._session.add(model)
        try:
            async with self._store_operation("save_payment"):
                await self._session.flush()
        except IntegrityError:
            await self._session.rollback()
            raise DuplicatePaymentReferenceException(payment.reference)

        return payment

    async def get_by_reference(self, reference: str) -> Optional[Payment]:
        """Retrieve a payment by gateway reference."""
        stmt = select(PaymentModel).where(PaymentModel.reference == reference)
        async with self._store_operation("get_payment"):
            result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def get_by_enrollment_id(
        self,
        enrollment_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Payment]:
        """Retrieve payments for an enrollment, newest first."""
        stmt = (
            select(PaymentModel)
            .where(PaymentModel.enrollment_id == str(enrollment_id))
            .order_by(PaymentModel.paid_at.desc())
            .limit(limit)
            .offset(offset)
        )
        async with self._store_operation("list_payments"):
            result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._to_entity(model) for model in models]

    def _to_entity(self, model: PaymentModel) -> Payment:
        """Convert database model to domain entity."""
        return Payment(
            id=UUID(model.id),
            enrollment_id=UUID(model.enrollment_id),
            reference=model.reference,
            amount=model.amount,
            currency=model.currency,
            plan_id=model.plan_id,
            plan_name=model.plan_name,
            plan_discount=model.plan_discount,
            installment_ordinal=model.installment_ordinal,
            paid_at=naive_utc(model.paid_at),
        )
