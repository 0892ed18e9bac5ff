"""
Fixtures for integration tests.

Provides:
- Test client for FastAPI app
- Mock payment gateway client
- In-memory database for testing
- Auth headers for signed-in learners
"""

from typing import AsyncGenerator, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from enrollment_gateway.main import app
from enrollment_gateway.application.services import VerificationRegistry
from enrollment_gateway.core.dependencies import (
    get_gateway_client,
    get_verification_registry,
)
from enrollment_gateway.domain.entities import GatewayTransaction
from enrollment_gateway.domain.exceptions import GatewayUnavailableException
from enrollment_gateway.domain.interfaces import PaymentGatewayClient
from enrollment_gateway.infrastructure.database import Base, get_db_session


# =============================================================================
# Mock Clients
# =============================================================================

class MockPaymentGatewayClient(PaymentGatewayClient):
    """Mock gateway client that confirms references from a fixed table."""

    def __init__(self, fail_mode: bool = False, declined: Optional[set] = None):
        self.fail_mode = fail_mode
        self.declined = declined or set()
        self.amounts: Dict[str, int] = {}
        self.calls: List[str] = []

    async def verify_transaction(self, reference: str) -> GatewayTransaction:
        """Return the transaction or raise based on mode."""
        self.calls.append(reference)

        if self.fail_mode:
            raise GatewayUnavailableException(
                message="Payment gateway unavailable",
                status_code=502,
            )

        if reference in self.declined:
            return GatewayTransaction(reference=reference, status="failed")

        return GatewayTransaction(
            reference=reference,
            status="success",
            amount=self.amounts.get(reference),
            currency="NGN",
        )


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def test_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


# =============================================================================
# Mock Client Fixtures
# =============================================================================

@pytest.fixture
def mock_gateway_client() -> MockPaymentGatewayClient:
    """Create a mock gateway client."""
    return MockPaymentGatewayClient()


@pytest.fixture
def failing_gateway_client() -> MockPaymentGatewayClient:
    """Create a gateway client that is always unreachable."""
    return MockPaymentGatewayClient(fail_mode=True)


# =============================================================================
# App Client Fixtures
# =============================================================================

async def _make_client(
    session_factory: async_sessionmaker,
    gateway_client: Optional[PaymentGatewayClient],
) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db_session():
        async with session_factory() as session:
            yield session
            await session.commit()

    registry = VerificationRegistry(max_size=100)

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_gateway_client] = lambda: gateway_client
    app.dependency_overrides[get_verification_registry] = lambda: registry

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker,
    mock_gateway_client: MockPaymentGatewayClient,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with mocked dependencies.

    This client:
    - Uses an in-memory SQLite database, one session per request
    - Mocks the payment gateway client
    - Starts with an empty verification registry
    """
    async for ac in _make_client(session_factory, mock_gateway_client):
        yield ac


@pytest_asyncio.fixture
async def client_with_failing_gateway(
    session_factory: async_sessionmaker,
    failing_gateway_client: MockPaymentGatewayClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client where the payment gateway is unreachable."""
    async for ac in _make_client(session_factory, failing_gateway_client):
        yield ac


@pytest_asyncio.fixture
async def client_without_gateway(
    session_factory: async_sessionmaker,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with server-side verification turned off."""
    async for ac in _make_client(session_factory, None):
        yield ac


# =============================================================================
# Helper Fixtures
# =============================================================================

def auth_headers(user_id: str) -> dict:
    """Headers for a signed-in learner."""
    return {
        "Authorization": f"Bearer token-{user_id}",
        "X-User-ID": user_id,
    }


@pytest.fixture
def learner_headers() -> dict:
    return auth_headers("learner_1")


@pytest_asyncio.fixture
async def enrolled_learner(client: AsyncClient, learner_headers: dict) -> dict:
    """A learner enrolled on the Bronze plan, nothing paid yet."""
    response = await client.post("/v1/enrollments", headers=learner_headers)
    assert response.status_code == 201

    response = await client.put(
        "/v1/enrollments/me/plan",
        json={"plan_id": "bronze", "start_date": "2024-01-10"},
        headers=learner_headers,
    )
    assert response.status_code == 200
    return response.json()
