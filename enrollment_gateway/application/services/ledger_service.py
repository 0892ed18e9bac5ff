"""Ledger service - lifecycle of scheduled installments."""

from dataclasses import replace
from datetime import date, datetime
from typing import List, Optional, Union
from uuid import UUID

import structlog

from enrollment_gateway.core.config import settings
from enrollment_gateway.core.metrics import record_installment_paid
from enrollment_gateway.domain.entities import PaymentDue, PaymentDueStatus, PaymentWindow
from enrollment_gateway.domain.exceptions import (
    AlreadyPaidException,
    AmountMismatchException,
    PaymentDueNotFoundException,
)
from enrollment_gateway.domain.interfaces import IdentityProvider, PaymentDueRepository
from enrollment_gateway.application.dto import PaymentDueResponse
from enrollment_gateway.service.ledger import payment_window

from .identity import require_current_user

logger = structlog.get_logger(__name__)


class LedgerService:
    """
    Application service for the payment-due ledger.

    Only PENDING, PAID and CANCELLED are stored. OVERDUE is derived
    from the due date whenever a due is read.
    """

    def __init__(
        self,
        payment_due_repository: PaymentDueRepository,
        identity: IdentityProvider,
        window_days: int | None = None,
    ):
        self._due_repo = payment_due_repository
        self._identity = identity
        self._window_days = settings.payment_window_days if window_days is None else window_days

    async def list_pending(self, enrollment_id: UUID) -> List[PaymentDue]:
        """
        Pending dues for an enrollment, overdue ones included.

        Returns:
            Dues ordered by due_date, then installment_number
        """
        return await self._due_repo.get_by_enrollment_id(enrollment_id, pending_only=True)

    async def list_for_enrollment(
        self,
        enrollment_id: UUID,
        pending_only: bool = False,
        today: Optional[date] = None,
    ) -> List[PaymentDueResponse]:
        """Every due for an enrollment with its effective status and window."""
        today = today or date.today()
        dues = await self._due_repo.get_by_enrollment_id(enrollment_id, pending_only=pending_only)
        return [
            PaymentDueResponse.from_entity(due, self.is_payable_now(due, today), today)
            for due in dues
        ]

    def is_payable_now(
        self,
        due: PaymentDue,
        now: Union[date, datetime, None] = None,
    ) -> PaymentWindow:
        """Whether ``due`` may be paid at ``now`` (defaults to today)."""
        return payment_window(due, now or date.today(), self._window_days)

    async def mark_paid(
        self,
        due_id: UUID,
        amount_paid: int,
        reference: str,
        paid_date: Optional[datetime] = None,
        enrollment_id: Optional[UUID] = None,
    ) -> PaymentDue:
        """
        Settle a pending due.

        The final write is conditional on the due still being pending,
        so a concurrent replay of the same payment loses cleanly.

        Args:
            due_id: The due being settled
            amount_paid: Amount received, in kobo
            reference: Gateway reference of the payment
            paid_date: When the payment was made (defaults to now)
            enrollment_id: When given, the due must belong to this enrollment

        Returns:
            The due as stored after the update

        Raises:
            UnauthorizedException: If no one is signed in
            PaymentDueNotFoundException: If the due does not exist or belongs
                to another enrollment
            AlreadyPaidException: If the due is not pending
            AmountMismatchException: If amount_paid differs from the amount due
        """
        await require_current_user(self._identity)
        paid_date = paid_date or datetime.utcnow()

        log = logger.bind(due_id=str(due_id), reference=reference)

        due = await self._get_owned(due_id, enrollment_id)

        if not due.is_pending:
            log.info("due_already_settled", status=due.status.value)
            raise AlreadyPaidException(str(due_id), due.status.value)

        if amount_paid != due.due_amount:
            log.warning("due_amount_mismatch", expected=due.due_amount, received=amount_paid)
            raise AmountMismatchException(due.due_amount, amount_paid)

        updated = await self._due_repo.mark_paid_if_pending(
            due_id, amount_paid, reference, paid_date
        )
        if not updated:
            # settled by a concurrent replay between the read and the write
            await self._due_repo.rollback()
            current = await self._due_repo.get_by_id(due_id)
            status = current.status.value if current else PaymentDueStatus.PAID.value
            log.info("due_already_settled", status=status)
            raise AlreadyPaidException(str(due_id), status)
        await self._due_repo.commit()

        record_installment_paid(due.plan_id)
        log.info(
            "installment_paid",
            installment_number=due.installment_number,
            total_installments=due.total_installments,
        )

        return replace(
            due,
            status=PaymentDueStatus.PAID,
            paid_amount=amount_paid,
            paid_date=paid_date,
            payment_reference=reference,
        )

    async def cancel(self, due_id: UUID, enrollment_id: Optional[UUID] = None) -> PaymentDue:
        """
        Cancel a pending due.

        Raises:
            UnauthorizedException: If no one is signed in
            PaymentDueNotFoundException: If the due does not exist or belongs
                to another enrollment
            AlreadyPaidException: If the due is no longer pending
        """
        await require_current_user(self._identity)

        due = await self._get_owned(due_id, enrollment_id)

        if not await self._due_repo.cancel_if_pending(due_id):
            await self._due_repo.rollback()
            current = await self._due_repo.get_by_id(due_id)
            raise AlreadyPaidException(str(due_id), (current or due).status.value)
        await self._due_repo.commit()

        logger.info("due_cancelled", due_id=str(due_id))
        return replace(due, status=PaymentDueStatus.CANCELLED)

    async def _get_owned(self, due_id: UUID, enrollment_id: Optional[UUID]) -> PaymentDue:
        """Load a due, hiding dues that belong to another enrollment."""
        due = await self._due_repo.get_by_id(due_id)
        if due is None:
            raise PaymentDueNotFoundException(str(due_id))

        if enrollment_id is not None and due.enrollment_id != enrollment_id:
            logger.warning(
                "due_not_owned",
                due_id=str(due_id),
                enrollment_id=str(enrollment_id),
            )
            raise PaymentDueNotFoundException(str(due_id))

        return due
