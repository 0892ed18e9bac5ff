"""Enrollment service - enrollment creation and plan selection."""

from datetime import date
from typing import Optional

import structlog

from enrollment_gateway.domain.entities import Enrollment
from enrollment_gateway.domain.exceptions import (
    EnrollmentExistsException,
    EnrollmentNotFoundException,
    PlanChangeNotAllowedException,
)
from enrollment_gateway.domain.interfaces import (
    EnrollmentRepository,
    IdentityProvider,
    PaymentDueRepository,
)
from enrollment_gateway.application.dto import EnrollmentResponse, PlanSelectionResponse
from enrollment_gateway.service.catalog import PlanCatalog
from enrollment_gateway.service.scheduling import check_installment_numbers, materialize_dues

from .identity import require_current_user
from .ledger_service import LedgerService

logger = structlog.get_logger(__name__)


class EnrollmentService:
    """
    Application service for a learner's own enrollment.

    Selecting a plan pre-populates the ledger with installments 2..N;
    installment 1 is paid inline at purchase through verification.
    """

    def __init__(
        self,
        enrollment_repository: EnrollmentRepository,
        payment_due_repository: PaymentDueRepository,
        ledger_service: LedgerService,
        catalog: PlanCatalog,
        identity: IdentityProvider,
    ):
        self._enrollment_repo = enrollment_repository
        self._due_repo = payment_due_repository
        self._ledger = ledger_service
        self._catalog = catalog
        self._identity = identity

    async def create(self) -> EnrollmentResponse:
        """
        Enroll the current user.

        Raises:
            UnauthorizedException: If no one is signed in
            EnrollmentExistsException: If the user is already enrolled
        """
        user = await require_current_user(self._identity)

        if await self._enrollment_repo.get_by_user_id(user.id) is not None:
            raise EnrollmentExistsException(user.id)

        enrollment = await self._enrollment_repo.save(Enrollment(user_id=user.id))
        await self._enrollment_repo.commit()

        logger.info("enrollment_created", enrollment_id=str(enrollment.id), user_id=user.id)
        return EnrollmentResponse.from_entity(enrollment)

    async def get_mine(self) -> Enrollment:
        """
        The current user's enrollment.

        Raises:
            UnauthorizedException: If no one is signed in
            EnrollmentNotFoundException: If the user has not enrolled
        """
        user = await require_current_user(self._identity)
        enrollment = await self._enrollment_repo.get_by_user_id(user.id)
        if enrollment is None:
            raise EnrollmentNotFoundException(user.id)
        return enrollment

    async def select_plan(
        self,
        plan_id: str,
        start_date: Optional[date] = None,
    ) -> PlanSelectionResponse:
        """
        Record the learner's plan and schedule its deferred installments.

        Re-selecting the current plan changes nothing. Switching plans
        is refused once a payment was made or dues are outstanding.

        Args:
            plan_id: Catalog plan id
            start_date: Due date of installment 1 (defaults to today)

        Returns:
            PlanSelectionResponse with the enrollment and its dues

        Raises:
            UnauthorizedException: If no one is signed in
            PlanNotFoundException: If the plan id is unknown
            EnrollmentNotFoundException: If the user has not enrolled
            PlanChangeNotAllowedException: If the switch is not allowed
        """
        plan = self._catalog.get(plan_id)
        enrollment = await self.get_mine()

        log = logger.bind(enrollment_id=str(enrollment.id), plan_id=plan.id)

        if enrollment.plan_id == plan.id:
            log.info("plan_reselected")
            return PlanSelectionResponse(
                enrollment=EnrollmentResponse.from_entity(enrollment),
                dues=await self._ledger.list_for_enrollment(enrollment.id),
            )

        if enrollment.plan_id is not None:
            outstanding = await self._due_repo.get_by_enrollment_id(
                enrollment.id, pending_only=True
            )
            if enrollment.is_payment_done or outstanding:
                log.warning(
                    "plan_change_refused",
                    current_plan_id=enrollment.plan_id,
                    outstanding=len(outstanding),
                )
                raise PlanChangeNotAllowedException(enrollment.plan_id, plan.id)

        dues = materialize_dues(plan, start_date or date.today(), enrollment.id, skip_first=True)
        check_installment_numbers(dues)

        try:
            enrollment = await self._enrollment_repo.update_plan(enrollment.id, plan.id)
            if dues:
                await self._due_repo.save_all(dues)
            await self._enrollment_repo.commit()
        except Exception:
            await self._enrollment_repo.rollback()
            raise

        log.info("plan_selected", dues_scheduled=len(dues))
        return PlanSelectionResponse(
            enrollment=EnrollmentResponse.from_entity(enrollment),
            dues=await self._ledger.list_for_enrollment(enrollment.id),
        )
