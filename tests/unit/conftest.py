"""
Fixtures for unit tests.

Provides:
- In-memory repositories implementing the domain interfaces
- Mock identity provider and payment gateway client
- Services wired against the in-memory fakes
"""

import asyncio
import json
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

import pytest

from enrollment_gateway.application.services import (
    CohortService,
    EnrollmentService,
    LedgerService,
    PaymentService,
    PaymentVerificationService,
    VerificationRegistry,
)
from enrollment_gateway.domain.entities import (
    CurrentUser,
    Enrollment,
    GatewayTransaction,
    Payment,
    PaymentDue,
    PaymentDueStatus,
)
from enrollment_gateway.domain.exceptions import (
    ConflictException,
    DuplicatePaymentReferenceException,
    EnrollmentExistsException,
    EnrollmentNotFoundException,
    GatewayUnavailableException,
    RecordStoreUnavailableException,
)
from enrollment_gateway.domain.interfaces import (
    EnrollmentRepository,
    IdentityProvider,
    PaymentDueRepository,
    PaymentGatewayClient,
    PaymentRepository,
)
from enrollment_gateway.infrastructure.locks import AdvisoryCohortLock
from enrollment_gateway.service.catalog import DEFAULT_PLANS, CatalogSettings, load_catalog


# =============================================================================
# In-Memory Repositories
# =============================================================================

class InMemoryEnrollmentRepository(EnrollmentRepository):
    """
    Enrollment store backed by a dict.

    Reads hand out copies, like a fresh database read would. Counting
    and writing yield to the event loop so concurrent callers interleave.
    """

    def __init__(self):
        self.enrollments: Dict[UUID, Enrollment] = {}
        self.commits = 0
        self.rollbacks = 0
        self.fail_on_assign = False

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    async def save(self, enrollment: Enrollment) -> Enrollment:
        if any(e.user_id == enrollment.user_id for e in self.enrollments.values()):
            raise EnrollmentExistsException(enrollment.user_id)
        self.enrollments[enrollment.id] = replace(enrollment)
        return enrollment

    async def get_by_id(self, enrollment_id: UUID) -> Optional[Enrollment]:
        enrollment = self.enrollments.get(enrollment_id)
        return replace(enrollment) if enrollment else None

    async def get_by_user_id(self, user_id: str) -> Optional[Enrollment]:
        for enrollment in self.enrollments.values():
            if enrollment.user_id == user_id:
                return replace(enrollment)
        return None

    async def count_paid(self, exclude_id: Optional[UUID] = None) -> int:
        await asyncio.sleep(0)
        return sum(
            1
            for e in self.enrollments.values()
            if e.is_payment_done and e.id != exclude_id
        )

    async def update_plan(self, enrollment_id: UUID, plan_id: str) -> Enrollment:
        if enrollment_id not in self.enrollments:
            raise EnrollmentNotFoundException(str(enrollment_id))
        self.enrollments[enrollment_id].plan_id = plan_id
        return replace(self.enrollments[enrollment_id])

    async def mark_payment_done(self, enrollment_id: UUID) -> None:
        self.enrollments[enrollment_id].is_payment_done = True

    async def assign_batch(self, enrollment_id: UUID, batch_name: str) -> bool:
        await asyncio.sleep(0)
        if self.fail_on_assign:
            raise RecordStoreUnavailableException("assign_batch")
        enrollment = self.enrollments[enrollment_id]
        if enrollment.batch_name is not None:
            return False
        enrollment.batch_name = batch_name
        enrollment.is_payment_done = True
        return True

    def add(self, user_id: str, **kwargs) -> Enrollment:
        """Seed an enrollment directly."""
        enrollment = Enrollment(user_id=user_id, **kwargs)
        self.enrollments[enrollment.id] = enrollment
        return replace(enrollment)


class InMemoryPaymentRepository(PaymentRepository):
    """Payment store enforcing one payment per reference."""

    def __init__(self):
        self.payments: Dict[str, Payment] = {}
        self.fail_on_save = False

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass

    async def save(self, payment: Payment) -> Payment:
        if self.fail_on_save:
            raise RecordStoreUnavailableException("save_payment")
        if payment.reference in self.payments:
            raise DuplicatePaymentReferenceException(payment.reference)
        self.payments[payment.reference] = payment
        return payment

    async def get_by_reference(self, reference: str) -> Optional[Payment]:
        return self.payments.get(reference)

    async def get_by_enrollment_id(
        self,
        enrollment_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Payment]:
        payments = sorted(
            (p for p in self.payments.values() if p.enrollment_id == enrollment_id),
            key=lambda p: p.paid_at,
            reverse=True,
        )
        return payments[offset:offset + limit]


class InMemoryPaymentDueRepository(PaymentDueRepository):
    """Payment-due store with guarded status transitions."""

    def __init__(self):
        self.dues: Dict[UUID, PaymentDue] = {}
        self.rollbacks = 0

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        self.rollbacks += 1

    async def save_all(self, dues: List[PaymentDue]) -> List[PaymentDue]:
        existing = {
            (d.enrollment_id, d.plan_id, d.installment_number) for d in self.dues.values()
        }
        for due in dues:
            if (due.enrollment_id, due.plan_id, due.installment_number) in existing:
                raise ConflictException(
                    message="Installments already scheduled for this plan",
                    code="DUPLICATE_INSTALLMENT",
                )
        for due in dues:
            self.dues[due.id] = replace(due)
        return dues

    async def get_by_id(self, due_id: UUID) -> Optional[PaymentDue]:
        due = self.dues.get(due_id)
        return replace(due) if due else None

    async def get_by_enrollment_id(
        self,
        enrollment_id: UUID,
        pending_only: bool = False,
    ) -> List[PaymentDue]:
        dues = [
            replace(d)
            for d in self.dues.values()
            if d.enrollment_id == enrollment_id and (not pending_only or d.is_pending)
        ]
        return sorted(dues, key=lambda d: (d.due_date, d.installment_number))

    async def mark_paid_if_pending(
        self,
        due_id: UUID,
        paid_amount: int,
        reference: str,
        paid_date: datetime,
    ) -> bool:
        due = self.dues.get(due_id)
        if due is None or not due.is_pending:
            return False
        due.status = PaymentDueStatus.PAID
        due.paid_amount = paid_amount
        due.payment_reference = reference
        due.paid_date = paid_date
        return True

    async def cancel_if_pending(self, due_id: UUID) -> bool:
        due = self.dues.get(due_id)
        if due is None or not due.is_pending:
            return False
        due.status = PaymentDueStatus.CANCELLED
        return True


# =============================================================================
# Mock Collaborators
# =============================================================================

class MockIdentityProvider(IdentityProvider):
    """Identity provider returning a fixed caller."""

    def __init__(self, user: Optional[CurrentUser] = None):
        self.user = user

    async def current_user(self) -> Optional[CurrentUser]:
        return self.user


class MockPaymentGatewayClient(PaymentGatewayClient):
    """Gateway client that answers from a fixed status and tracks calls."""

    def __init__(
        self,
        status: str = "success",
        amount: Optional[int] = None,
        currency: Optional[str] = "NGN",
        fail_mode: bool = False,
    ):
        self.status = status
        self.amount = amount
        self.currency = currency
        self.fail_mode = fail_mode
        self.calls: List[str] = []

    async def verify_transaction(self, reference: str) -> GatewayTransaction:
        self.calls.append(reference)
        if self.fail_mode:
            raise GatewayUnavailableException(status_code=502)
        return GatewayTransaction(
            reference=reference,
            status=self.status,
            amount=self.amount,
            currency=self.currency,
        )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def catalog():
    """The default Gold/Silver/Bronze catalog, independent of the environment."""
    return load_catalog(CatalogSettings(plans_json=json.dumps(DEFAULT_PLANS)))


@pytest.fixture
def current_user() -> CurrentUser:
    return CurrentUser(id="learner_1", credential="token-1")


@pytest.fixture
def identity(current_user) -> MockIdentityProvider:
    return MockIdentityProvider(current_user)


@pytest.fixture
def anonymous() -> MockIdentityProvider:
    return MockIdentityProvider(None)


@pytest.fixture
def enrollment_repo() -> InMemoryEnrollmentRepository:
    return InMemoryEnrollmentRepository()


@pytest.fixture
def payment_repo() -> InMemoryPaymentRepository:
    return InMemoryPaymentRepository()


@pytest.fixture
def due_repo() -> InMemoryPaymentDueRepository:
    return InMemoryPaymentDueRepository()


@pytest.fixture
def gateway_client() -> MockPaymentGatewayClient:
    return MockPaymentGatewayClient()


@pytest.fixture
def registry() -> VerificationRegistry:
    return VerificationRegistry(max_size=100)


@pytest.fixture
def cohort_service(enrollment_repo, identity) -> CohortService:
    return CohortService(
        enrollment_repository=enrollment_repo,
        cohort_lock=AdvisoryCohortLock(),
        identity=identity,
        capacity=20,
    )


@pytest.fixture
def ledger_service(due_repo, identity) -> LedgerService:
    return LedgerService(payment_due_repository=due_repo, identity=identity, window_days=10)


@pytest.fixture
def enrollment_service(enrollment_repo, due_repo, ledger_service, catalog, identity):
    return EnrollmentService(
        enrollment_repository=enrollment_repo,
        payment_due_repository=due_repo,
        ledger_service=ledger_service,
        catalog=catalog,
        identity=identity,
    )


@pytest.fixture
def payment_service(payment_repo, enrollment_repo, identity) -> PaymentService:
    return PaymentService(
        payment_repository=payment_repo,
        enrollment_repository=enrollment_repo,
        identity=identity,
    )


@pytest.fixture
def verification_service(
    enrollment_repo,
    payment_repo,
    due_repo,
    cohort_service,
    ledger_service,
    catalog,
    identity,
    registry,
    gateway_client,
) -> PaymentVerificationService:
    return PaymentVerificationService(
        enrollment_repository=enrollment_repo,
        payment_repository=payment_repo,
        payment_due_repository=due_repo,
        cohort_service=cohort_service,
        ledger_service=ledger_service,
        catalog=catalog,
        identity=identity,
        registry=registry,
        gateway_client=gateway_client,
    )
