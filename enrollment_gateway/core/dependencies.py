"""Dependency injection for FastAPI."""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from enrollment_gateway.core.config import settings
from enrollment_gateway.infrastructure.database import get_db_session
from enrollment_gateway.infrastructure.repositories import (
    PostgresEnrollmentRepository,
    PostgresPaymentRepository,
    PostgresPaymentDueRepository,
)
from enrollment_gateway.infrastructure.clients import HttpPaystackClient
from enrollment_gateway.infrastructure.identity import RequestIdentityProvider
from enrollment_gateway.infrastructure.locks import AdvisoryCohortLock
from enrollment_gateway.domain.interfaces import (
    CohortLock,
    EnrollmentRepository,
    IdentityProvider,
    PaymentDueRepository,
    PaymentGatewayClient,
    PaymentRepository,
)
from enrollment_gateway.application.services import (
    CohortService,
    EnrollmentService,
    LedgerService,
    PaymentService,
    PaymentVerificationService,
    PlanService,
    VerificationRegistry,
)
from enrollment_gateway.service.catalog import PlanCatalog, get_plan_catalog


# Repository dependencies
async def get_enrollment_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> EnrollmentRepository:
    """Get an EnrollmentRepository instance."""
    return PostgresEnrollmentRepository(session)


async def get_payment_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PaymentRepository:
    """Get a PaymentRepository instance."""
    return PostgresPaymentRepository(session)


async def get_payment_due_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PaymentDueRepository:
    """Get a PaymentDueRepository instance."""
    return PostgresPaymentDueRepository(session)


async def get_cohort_lock(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> CohortLock:
    """Get the cohort lock bound to the request's transaction."""
    return AdvisoryCohortLock(session)


# Collaborator dependencies
def get_identity_provider(request: Request) -> IdentityProvider:
    """Get the identity provider for the current request."""
    return RequestIdentityProvider(request.headers)


def get_gateway_client() -> Optional[PaymentGatewayClient]:
    """Get a gateway client, or None when server-side verification is off."""
    if not settings.gateway_verify_enabled:
        return None
    return HttpPaystackClient()


def get_catalog() -> PlanCatalog:
    """Get the process-wide plan catalog."""
    return get_plan_catalog()


@lru_cache
def get_verification_registry() -> VerificationRegistry:
    """Get the process-wide verification registry."""
    return VerificationRegistry()


# Service dependencies
async def get_cohort_service(
    enrollment_repo: Annotated[EnrollmentRepository, Depends(get_enrollment_repository)],
    cohort_lock: Annotated[CohortLock, Depends(get_cohort_lock)],
    identity: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> CohortService:
    """Get a CohortService instance."""
    return CohortService(
        enrollment_repository=enrollment_repo,
        cohort_lock=cohort_lock,
        identity=identity,
    )


async def get_ledger_service(
    due_repo: Annotated[PaymentDueRepository, Depends(get_payment_due_repository)],
    identity: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> LedgerService:
    """Get a LedgerService instance."""
    return LedgerService(payment_due_repository=due_repo, identity=identity)


async def get_enrollment_service(
    enrollment_repo: Annotated[EnrollmentRepository, Depends(get_enrollment_repository)],
    due_repo: Annotated[PaymentDueRepository, Depends(get_payment_due_repository)],
    ledger_service: Annotated[LedgerService, Depends(get_ledger_service)],
    catalog: Annotated[PlanCatalog, Depends(get_catalog)],
    identity: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> EnrollmentService:
    """Get an EnrollmentService instance."""
    return EnrollmentService(
        enrollment_repository=enrollment_repo,
        payment_due_repository=due_repo,
        ledger_service=ledger_service,
        catalog=catalog,
        identity=identity,
    )


async def get_payment_service(
    payment_repo: Annotated[PaymentRepository, Depends(get_payment_repository)],
    enrollment_repo: Annotated[EnrollmentRepository, Depends(get_enrollment_repository)],
    identity: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> PaymentService:
    """Get a PaymentService instance."""
    return PaymentService(
        payment_repository=payment_repo,
        enrollment_repository=enrollment_repo,
        identity=identity,
    )


async def get_verification_service(
    enrollment_repo: Annotated[EnrollmentRepository, Depends(get_enrollment_repository)],
    payment_repo: Annotated[PaymentRepository, Depends(get_payment_repository)],
    due_repo: Annotated[PaymentDueRepository, Depends(get_payment_due_repository)],
    cohort_service: Annotated[CohortService, Depends(get_cohort_service)],
    ledger_service: Annotated[LedgerService, Depends(get_ledger_service)],
    catalog: Annotated[PlanCatalog, Depends(get_catalog)],
    identity: Annotated[IdentityProvider, Depends(get_identity_provider)],
    registry: Annotated[VerificationRegistry, Depends(get_verification_registry)],
    gateway_client: Annotated[Optional[PaymentGatewayClient], Depends(get_gateway_client)],
) -> PaymentVerificationService:
    """Get a PaymentVerificationService instance with all dependencies."""
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


def get_plan_service(
    catalog: Annotated[PlanCatalog, Depends(get_catalog)],
) -> PlanService:
    """Get a PlanService instance."""
    return PlanService(catalog=catalog)
