"""Payment service - payment history for the current learner."""

from typing import List

import structlog

from enrollment_gateway.domain.exceptions import EnrollmentNotFoundException
from enrollment_gateway.domain.interfaces import (
    EnrollmentRepository,
    IdentityProvider,
    PaymentRepository,
)
from enrollment_gateway.application.dto import PaymentResponse

from .identity import require_current_user

logger = structlog.get_logger(__name__)


class PaymentService:
    """Application service for recorded payments."""

    def __init__(
        self,
        payment_repository: PaymentRepository,
        enrollment_repository: EnrollmentRepository,
        identity: IdentityProvider,
    ):
        self._payment_repo = payment_repository
        self._enrollment_repo = enrollment_repository
        self._identity = identity

    async def list_payments(self, limit: int = 50, offset: int = 0) -> List[PaymentResponse]:
        """
        The current learner's payments, newest first.

        Raises:
            UnauthorizedException: If no one is signed in
            EnrollmentNotFoundException: If the user has not enrolled
        """
        user = await require_current_user(self._identity)
        enrollment = await self._enrollment_repo.get_by_user_id(user.id)
        if enrollment is None:
            raise EnrollmentNotFoundException(user.id)

        payments = await self._payment_repo.get_by_enrollment_id(
            enrollment.id, limit=limit, offset=offset
        )
        logger.info("payments_retrieved", user_id=user.id, count=len(payments))

        return [PaymentResponse.from_entity(payment) for payment in payments]
