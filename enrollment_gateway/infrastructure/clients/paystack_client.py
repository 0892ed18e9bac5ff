"""HTTP implementation of PaymentGatewayClient for Paystack-style gateways."""

import asyncio
from typing import Any, Dict

import httpx
import structlog

from enrollment_gateway.core.config import settings
from enrollment_gateway.core.metrics import (
    track_gateway_verify_latency,
    record_gateway_verify_success,
    record_gateway_verify_failure,
)
from enrollment_gateway.domain.entities import GatewayTransaction
from enrollment_gateway.domain.exceptions import GatewayUnavailableException
from enrollment_gateway.domain.interfaces import PaymentGatewayClient

logger = structlog.get_logger(__name__)

NOT_FOUND_STATUS = "not_found"


class HttpPaystackClient(PaymentGatewayClient):
    """
    HTTP client for the payment gateway's verify endpoint.

    Confirms a transaction by reference with retry logic and
    exponential backoff. 4xx answers are definitive and not retried.
    """

    def __init__(
        self,
        base_url: str | None = None,
        secret_key: str | None = None,
        timeout: float | None = None,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = (base_url or settings.gateway_api_url).rstrip("/")
        self._secret_key = secret_key if secret_key is not None else settings.gateway_secret_key
        self._timeout = timeout or settings.gateway_timeout
        self._max_retries = max_retries
        self._transport = transport

    async def verify_transaction(self, reference: str) -> GatewayTransaction:
        """
        Fetch the gateway's record of a transaction.

        Implements retry logic with exponential backoff.
        """
        url = f"{self._base_url}/transaction/verify/{reference}"
        headers = {"Authorization": f"Bearer {self._secret_key}"}

        last_exception = None

        for attempt in range(self._max_retries):
            try:
                with track_gateway_verify_latency():
                    async with httpx.AsyncClient(
                        timeout=self._timeout, transport=self._transport
                    ) as client:
                        response = await client.get(url, headers=headers)

                if response.status_code in (400, 404):
                    record_gateway_verify_failure("declined")
                    logger.info("gateway_reference_unknown", reference=reference)
                    return GatewayTransaction(reference=reference, status=NOT_FOUND_STATUS)

                if response.status_code >= 400:
                    record_gateway_verify_failure("error")
                    last_exception = GatewayUnavailableException(
                        message=f"Gateway error: HTTP {response.status_code}",
                        status_code=response.status_code,
                    )
                    logger.warning(
                        "gateway_verify_error",
                        reference=reference,
                        status_code=response.status_code,
                        attempt=attempt + 1,
                        max_retries=self._max_retries,
                    )
                else:
                    record_gateway_verify_success()
                    return self._parse_transaction(reference, response.json())

            except httpx.TimeoutException:
                record_gateway_verify_failure("timeout")
                last_exception = GatewayUnavailableException("Gateway verify timed out")
                logger.warning(
                    "gateway_verify_timeout",
                    reference=reference,
                    attempt=attempt + 1,
                    max_retries=self._max_retries,
                )
            except httpx.HTTPError as e:
                record_gateway_verify_failure("error")
                last_exception = GatewayUnavailableException(f"Gateway unreachable: {e}")
                logger.error(
                    "gateway_verify_transport_error",
                    reference=reference,
                    attempt=attempt + 1,
                    error=str(e),
                )

            # Exponential backoff
            if attempt < self._max_retries - 1:
                await asyncio.sleep(2**attempt * 0.1)

        raise last_exception or GatewayUnavailableException()

    def _parse_transaction(self, reference: str, body: Dict[str, Any]) -> GatewayTransaction:
        """Parse the verify response envelope into a GatewayTransaction."""
        data = body.get("data") or {}
        amount = data.get("amount")

        return GatewayTransaction(
            reference=data.get("reference") or reference,
            status=str(data.get("status") or "unknown").lower(),
            amount=int(amount) if amount is not None else None,
            currency=data.get("currency"),
        )
