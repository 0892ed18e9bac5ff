"""Verification service - reconciles gateway callbacks into durable records."""

from datetime import datetime
from typing import Optional

import structlog

from enrollment_gateway.core.metrics import (
    record_store_step_failure,
    record_verification,
    track_verification_latency,
)
from enrollment_gateway.domain.entities import (
    CurrentUser,
    Enrollment,
    GatewayCallback,
    GatewayTransaction,
    Payment,
    PaymentDue,
    PaymentVerification,
    REASON_DECLINED,
    REASON_MISSING_REFERENCE,
    REASON_REFERENCE_IN_USE,
)
from enrollment_gateway.domain.exceptions import (
    AlreadyPaidException,
    DomainException,
    DuplicatePaymentReferenceException,
    EnrollmentNotFoundException,
    InvalidCallbackException,
)
from enrollment_gateway.domain.interfaces import (
    EnrollmentRepository,
    IdentityProvider,
    PaymentDueRepository,
    PaymentGatewayClient,
    PaymentRepository,
)
from enrollment_gateway.application.dto import VerificationResponse
from enrollment_gateway.service.catalog import PlanCatalog

from .cohort_service import CohortService
from .identity import require_current_user
from .ledger_service import LedgerService
from .verification_registry import VerificationRegistry

logger = structlog.get_logger(__name__)

STEP_COHORT_ASSIGNMENT = "cohort_assignment"
STEP_PAYMENT_RECORD = "payment_record"
STEP_LEDGER_UPDATE = "ledger_update"


class PaymentVerificationService:
    """
    Application service for the payment verification use case.

    Drives one attempt per reference through idle -> processing ->
    success/failed. On success it runs three steps, each committed on
    its own: cohort assignment, payment record, ledger update. A failed
    step is logged and reported in ``incomplete_steps``; earlier steps
    are kept so an operator can re-run the missing one.
    """

    def __init__(
        self,
        enrollment_repository: EnrollmentRepository,
        payment_repository: PaymentRepository,
        payment_due_repository: PaymentDueRepository,
        cohort_service: CohortService,
        ledger_service: LedgerService,
        catalog: PlanCatalog,
        identity: IdentityProvider,
        registry: VerificationRegistry,
        gateway_client: Optional[PaymentGatewayClient] = None,
    ):
        self._enrollment_repo = enrollment_repository
        self._payment_repo = payment_repository
        self._due_repo = payment_due_repository
        self._cohorts = cohort_service
        self._ledger = ledger_service
        self._catalog = catalog
        self._identity = identity
        self._registry = registry
        self._gateway = gateway_client

    async def verify(self, callback: GatewayCallback) -> VerificationResponse:
        """
        Process a gateway callback.

        Args:
            callback: Parameters the gateway redirected back with

        Returns:
            VerificationResponse with the attempt's outcome

        Raises:
            UnauthorizedException: If no one is signed in
            EnrollmentNotFoundException: If the caller has not enrolled
            GatewayUnavailableException: If the gateway could not confirm
                the reference; nothing is remembered and a retry is safe
        """
        user = await require_current_user(self._identity)

        with track_verification_latency():
            attempt = await self._run(user, callback)

        return VerificationResponse.from_verification(attempt)

    async def _run(self, user: CurrentUser, callback: GatewayCallback) -> PaymentVerification:
        log = logger.bind(reference=callback.reference, user_id=user.id)

        if not callback.has_reference:
            attempt = PaymentVerification(reference=None)
            attempt.start()
            attempt.fail(REASON_MISSING_REFERENCE)
            record_verification("failed")
            log.info("verification_failed", reason=REASON_MISSING_REFERENCE)
            return attempt

        reference = callback.reference.strip()
        attempt = self._registry.get_or_create(user.id, reference)
        if not attempt.start():
            record_verification("replay")
            log.info("verification_replayed", status=attempt.status.value)
            return attempt

        try:
            await self._process(attempt, user, callback, log)
        except Exception:
            # Forget the attempt so the next callback starts from idle
            self._registry.discard(user.id, reference)
            raise

        return attempt

    async def _process(
        self,
        attempt: PaymentVerification,
        user: CurrentUser,
        callback: GatewayCallback,
        log,
    ) -> None:
        reference = attempt.reference

        if callback.is_declined:
            attempt.fail(REASON_DECLINED)
            record_verification("failed")
            log.info("verification_failed", reason=REASON_DECLINED, gateway_status=callback.status)
            return

        enrollment = await self._enrollment_repo.get_by_user_id(user.id)
        if enrollment is None:
            raise EnrollmentNotFoundException(user.id)

        # A reference credits exactly one enrollment
        recorded = await self._payment_repo.get_by_reference(reference)
        if recorded is not None and recorded.enrollment_id != enrollment.id:
            attempt.fail(REASON_REFERENCE_IN_USE)
            record_verification("failed")
            log.warning(
                "verification_failed",
                reason=REASON_REFERENCE_IN_USE,
                enrollment_id=str(enrollment.id),
            )
            return

        transaction = None
        if self._gateway is not None:
            transaction = await self._gateway.verify_transaction(reference)
            if not transaction.is_successful:
                attempt.fail(REASON_DECLINED)
                record_verification("failed")
                log.info(
                    "verification_failed",
                    reason=REASON_DECLINED,
                    gateway_status=transaction.status,
                )
                return

        due = await self._load_due(callback, enrollment, log)
        payment = self._build_payment(enrollment, callback, transaction, due)

        incomplete_steps = []
        log = log.bind(enrollment_id=str(enrollment.id))

        # Step 1: payment flag and cohort
        batch_name = enrollment.batch_name
        try:
            batch_name = await self._cohorts.assign(enrollment.id)
        except DomainException as e:
            incomplete_steps.append(STEP_COHORT_ASSIGNMENT)
            record_store_step_failure(STEP_COHORT_ASSIGNMENT)
            log.error("verification_step_failed", step=STEP_COHORT_ASSIGNMENT, error=e.message)

        # Step 2: payment record, unique by reference
        try:
            payment = await self._record_payment(payment, log)
        except DomainException as e:
            incomplete_steps.append(STEP_PAYMENT_RECORD)
            record_store_step_failure(STEP_PAYMENT_RECORD)
            log.error("verification_step_failed", step=STEP_PAYMENT_RECORD, error=e.message)

        # Step 3: settle the scheduled installment
        if callback.due_id:
            try:
                await self._ledger.mark_paid(
                    callback.due_id,
                    payment.amount,
                    reference,
                    payment.paid_at,
                    enrollment_id=enrollment.id,
                )
            except AlreadyPaidException:
                log.info("ledger_update_replayed", due_id=str(callback.due_id))
            except DomainException as e:
                incomplete_steps.append(STEP_LEDGER_UPDATE)
                record_store_step_failure(STEP_LEDGER_UPDATE)
                log.error(
                    "verification_step_failed",
                    step=STEP_LEDGER_UPDATE,
                    due_id=str(callback.due_id),
                    error=e.message,
                )

        payload = payment.to_dict()
        payload["batch_name"] = batch_name
        attempt.succeed(payload, incomplete_steps)

        record_verification("success")
        log.info(
            "verification_succeeded",
            amount=payment.amount,
            batch_name=batch_name,
            incomplete_steps=incomplete_steps,
        )

    async def _record_payment(self, payment: Payment, log) -> Payment:
        """Insert the payment, or return the one already stored for its reference."""
        existing = await self._payment_repo.get_by_reference(payment.reference)
        if existing is not None:
            log.info("payment_replayed", payment_id=str(existing.id))
            return existing

        try:
            await self._payment_repo.save(payment)
            await self._payment_repo.commit()
        except DuplicatePaymentReferenceException:
            # Lost a race with a concurrent confirmation of the same reference
            existing = await self._payment_repo.get_by_reference(payment.reference)
            if existing is not None and existing.enrollment_id != payment.enrollment_id:
                raise
            log.info("payment_replayed", payment_id=str(existing.id) if existing else None)
            return existing or payment

        log.info("payment_recorded", payment_id=str(payment.id))
        return payment

    async def _load_due(
        self,
        callback: GatewayCallback,
        enrollment: Enrollment,
        log,
    ) -> Optional[PaymentDue]:
        """The callback's payment due, or None when unknown or owned by someone else."""
        if not callback.due_id:
            return None

        due = await self._due_repo.get_by_id(callback.due_id)
        if due is not None and due.enrollment_id != enrollment.id:
            log.warning("due_not_owned", due_id=str(callback.due_id))
            return None
        return due

    def _build_payment(
        self,
        enrollment: Enrollment,
        callback: GatewayCallback,
        transaction: Optional[GatewayTransaction],
        due: Optional[PaymentDue],
    ) -> Payment:
        plan_id = (callback.plan_id or enrollment.plan_id or "").strip().lower() or None
        plan = self._catalog.get(plan_id) if plan_id in self._catalog else None

        amount = None
        if transaction is not None and transaction.amount is not None:
            amount = transaction.amount
        elif callback.amount is not None:
            amount = callback.amount
        elif due is not None:
            amount = due.due_amount
        elif plan is not None:
            amount = plan.first_installment_amount
        if amount is None:
            raise InvalidCallbackException("Payment amount is missing")

        if due is not None:
            ordinal = due.installment_number
        elif plan is not None and plan.has_installments:
            ordinal = 1
        else:
            ordinal = None

        currency = (transaction.currency if transaction else None) or callback.currency
        if currency is None:
            currency = plan.currency if plan else "NGN"

        return Payment(
            enrollment_id=enrollment.id,
            reference=callback.reference.strip(),
            amount=amount,
            currency=currency,
            plan_id=plan_id,
            plan_name=callback.plan_name or (plan.name if plan else None),
            plan_discount=(
                callback.plan_discount
                if callback.plan_discount is not None
                else (plan.discount_percent if plan else None)
            ),
            installment_ordinal=ordinal,
            paid_at=datetime.utcnow(),
        )
