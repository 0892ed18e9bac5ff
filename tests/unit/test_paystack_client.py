"""
Unit tests for the payment gateway HTTP client and the header identity provider.

The gateway is simulated with httpx.MockTransport; backoff sleeps are
patched out so retries run instantly.
"""

import httpx
import pytest
from starlette.datastructures import Headers

from enrollment_gateway.domain.exceptions import GatewayUnavailableException
from enrollment_gateway.infrastructure.clients.paystack_client import (
    NOT_FOUND_STATUS,
    HttpPaystackClient,
)
from enrollment_gateway.infrastructure.identity import RequestIdentityProvider


def verify_body(reference: str, status: str = "success", amount: int = 50_000_000) -> dict:
    return {
        "status": True,
        "message": "Verification successful",
        "data": {
            "reference": reference,
            "status": status,
            "amount": amount,
            "currency": "NGN",
        },
    }


class ScriptedGateway:
    """Answers each request with the next scripted response."""

    def __init__(self, *responses):
        self._responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(gateway: ScriptedGateway) -> HttpPaystackClient:
    return HttpPaystackClient(
        base_url="https://gateway.test/",
        secret_key="sk_test",
        timeout=1.0,
        transport=httpx.MockTransport(gateway),
    )


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    async def instant(_delay):
        return None

    monkeypatch.setattr(
        "enrollment_gateway.infrastructure.clients.paystack_client.asyncio.sleep", instant
    )


# =============================================================================
# Gateway Client
# =============================================================================

class TestVerifyTransaction:
    """Tests for HttpPaystackClient.verify_transaction."""

    @pytest.mark.asyncio
    async def test_success_is_parsed(self):
        gateway = ScriptedGateway(httpx.Response(200, json=verify_body("T100")))

        transaction = await make_client(gateway).verify_transaction("T100")

        assert transaction.reference == "T100"
        assert transaction.status == "success"
        assert transaction.amount == 50_000_000
        assert transaction.currency == "NGN"

        request = gateway.requests[0]
        assert request.url == "https://gateway.test/transaction/verify/T100"
        assert request.headers["authorization"] == "Bearer sk_test"

    @pytest.mark.asyncio
    async def test_status_is_lowercased(self):
        gateway = ScriptedGateway(
            httpx.Response(200, json=verify_body("T100", status="FAILED"))
        )

        transaction = await make_client(gateway).verify_transaction("T100")

        assert transaction.status == "failed"

    @pytest.mark.asyncio
    async def test_missing_data_defaults_to_unknown(self):
        gateway = ScriptedGateway(httpx.Response(200, json={"status": False}))

        transaction = await make_client(gateway).verify_transaction("T100")

        assert transaction.reference == "T100"
        assert transaction.status == "unknown"
        assert transaction.amount is None

    @pytest.mark.parametrize("status_code", [400, 404])
    @pytest.mark.asyncio
    async def test_unknown_reference_is_not_retried(self, status_code: int):
        gateway = ScriptedGateway(httpx.Response(status_code, json={"status": False}))

        transaction = await make_client(gateway).verify_transaction("T404")

        assert transaction.status == NOT_FOUND_STATUS
        assert len(gateway.requests) == 1

    @pytest.mark.asyncio
    async def test_server_errors_exhaust_retries(self):
        gateway = ScriptedGateway(*(httpx.Response(500) for _ in range(3)))

        with pytest.raises(GatewayUnavailableException):
            await make_client(gateway).verify_transaction("T100")

        assert len(gateway.requests) == 3

    @pytest.mark.asyncio
    async def test_recovers_after_server_error(self):
        gateway = ScriptedGateway(
            httpx.Response(502),
            httpx.Response(200, json=verify_body("T100")),
        )

        transaction = await make_client(gateway).verify_transaction("T100")

        assert transaction.status == "success"
        assert len(gateway.requests) == 2

    @pytest.mark.asyncio
    async def test_connection_errors_become_unavailable(self):
        gateway = ScriptedGateway(
            *(httpx.ConnectError("connection refused") for _ in range(3))
        )

        with pytest.raises(GatewayUnavailableException):
            await make_client(gateway).verify_transaction("T100")

        assert len(gateway.requests) == 3

    @pytest.mark.asyncio
    async def test_timeout_then_success(self):
        gateway = ScriptedGateway(
            httpx.ReadTimeout("timed out"),
            httpx.Response(200, json=verify_body("T100")),
        )

        transaction = await make_client(gateway).verify_transaction("T100")

        assert transaction.status == "success"


# =============================================================================
# Identity
# =============================================================================

class TestRequestIdentityProvider:
    """Tests for resolving the caller from request headers."""

    @pytest.mark.asyncio
    async def test_bearer_and_user_id(self):
        provider = RequestIdentityProvider(
            Headers({"Authorization": "Bearer token-1", "X-User-ID": "learner_1"})
        )

        user = await provider.current_user()

        assert user.id == "learner_1"
        assert user.credential == "token-1"

    @pytest.mark.parametrize(
        "headers",
        [
            {},
            {"X-User-ID": "learner_1"},
            {"Authorization": "Bearer token-1"},
            {"Authorization": "Basic abc", "X-User-ID": "learner_1"},
            {"Authorization": "Bearer ", "X-User-ID": "learner_1"},
        ],
    )
    @pytest.mark.asyncio
    async def test_incomplete_headers_are_anonymous(self, headers: dict):
        provider = RequestIdentityProvider(Headers(headers))

        assert await provider.current_user() is None
