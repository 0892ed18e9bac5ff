"""
Integration tests for resilience and error handling.

These tests verify:
1. Payment gateway outages return 503 and leave nothing behind
2. A retry after an outage succeeds
3. Record store failures surface as 503 without internal details
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from enrollment_gateway.infrastructure.repositories import PostgresEnrollmentRepository
from tests.integration.conftest import MockPaymentGatewayClient, auth_headers


async def enroll(client: AsyncClient, user_id: str) -> None:
    headers = auth_headers(user_id)
    await client.post("/v1/enrollments", headers=headers)
    await client.put("/v1/enrollments/me/plan", json={"plan_id": "gold"}, headers=headers)


# =============================================================================
# Gateway Failure Tests
# =============================================================================

class TestGatewayFailure:
    """Tests for handling payment gateway outages."""

    @pytest.mark.asyncio
    async def test_gateway_outage_returns_503(
        self,
        client_with_failing_gateway: AsyncClient,
    ):
        """
        When the gateway cannot confirm a payment, the service returns 503.

        The learner's enrollment is untouched and nothing is recorded.
        """
        headers = auth_headers("learner_1")
        await enroll(client_with_failing_gateway, "learner_1")

        response = await client_with_failing_gateway.get(
            "/v1/payments/verify",
            params={"reference": "T100", "status": "success"},
            headers=headers,
        )

        assert response.status_code == 503
        assert response.headers["retry-after"] == "1"
        data = response.json()
        assert data["error"] == "GATEWAY_UNAVAILABLE"
        assert data["message"] == "Service temporarily unavailable. Please try again."

        enrollment = await client_with_failing_gateway.get("/v1/enrollments/me", headers=headers)
        assert enrollment.json()["is_payment_done"] is False
        assert enrollment.json()["batch_name"] is None

        payments = await client_with_failing_gateway.get("/v1/payments", headers=headers)
        assert payments.json()["payments"] == []

    @pytest.mark.asyncio
    async def test_retry_after_outage_succeeds(
        self,
        client: AsyncClient,
        mock_gateway_client: MockPaymentGatewayClient,
    ):
        """The failed attempt is not remembered, so the same reference can be retried."""
        headers = auth_headers("learner_1")
        await enroll(client, "learner_1")
        params = {"reference": "T100", "status": "success"}

        mock_gateway_client.fail_mode = True
        failed = await client.get("/v1/payments/verify", params=params, headers=headers)
        assert failed.status_code == 503

        mock_gateway_client.fail_mode = False
        retried = await client.get("/v1/payments/verify", params=params, headers=headers)

        assert retried.status_code == 200
        assert retried.json()["status"] == "success"
        assert retried.json()["batch_name"] == "Batch 1"
        assert mock_gateway_client.calls == ["T100", "T100"]


# =============================================================================
# Record Store Failure Tests
# =============================================================================

class TestRecordStoreFailure:
    """Tests for handling database failures."""

    @pytest.mark.asyncio
    async def test_store_outage_returns_503(
        self,
        client: AsyncClient,
        monkeypatch,
    ):
        """Driver errors become a generic 503 with no database detail."""

        async def broken_get_by_user_id(self, user_id):
            async with self._store_operation("get_enrollment"):
                raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr(
            PostgresEnrollmentRepository, "get_by_user_id", broken_get_by_user_id
        )

        response = await client.get("/v1/enrollments/me", headers=auth_headers("learner_1"))

        assert response.status_code == 503
        data = response.json()
        assert data["error"] == "RECORD_STORE_UNAVAILABLE"
        assert "connection refused" not in data["message"]
