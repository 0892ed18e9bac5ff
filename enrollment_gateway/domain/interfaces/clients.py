"""External collaborator interfaces."""

from abc import ABC, abstractmethod
from typing import Optional

from enrollment_gateway.domain.entities import CurrentUser, GatewayTransaction


class PaymentGatewayClient(ABC):
    """
    Abstract client for the payment gateway.

    Card details are collected out-of-process; the service only
    confirms transactions by reference.
    """

    @abstractmethod
    async def verify_transaction(self, reference: str) -> GatewayTransaction:
        """
        Fetch the gateway's record of a transaction.

        Args:
            reference: The gateway transaction reference

        Returns:
            The transaction as the gateway reports it

        Raises:
            GatewayUnavailableException: If the gateway cannot be reached
        """
        ...


class IdentityProvider(ABC):
    """
    Abstract identity/session provider.

    Credential issuance happens elsewhere; the service only reads
    who the caller is.
    """

    @abstractmethod
    async def current_user(self) -> Optional[CurrentUser]:
        """
        Resolve the authenticated caller.

        Returns:
            The caller, or None when no one is signed in
        """
        ...
