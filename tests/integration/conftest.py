"""
Fixtures for integration tests.

Provides:
- In-memory SQLite database (aiosqlite) for the persistence adapter
- Mock notification publisher that records published events
- Publisher that records whether the transaction was committed before publishing
- Test client for the FastAPI app with dependencies overridden
"""

from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from irrrl_gateway.core.dependencies import (
    get_application_repository,
    get_notification_publisher,
)
from irrrl_gateway.domain.entities import ApplicationEvent, EventType
from irrrl_gateway.domain.interfaces import NotificationPublisher
from irrrl_gateway.infrastructure.database import Base
from irrrl_gateway.infrastructure.repositories import PostgresApplicationRepository
from irrrl_gateway.main import app


# =============================================================================
# Mock Clients
# =============================================================================

class MockNotificationPublisher(NotificationPublisher):
    """Publisher that records events instead of posting them."""

    def __init__(self, fail_mode: bool = False):
        self.fail_mode = fail_mode
        self.call_count = 0
        self.events: List[ApplicationEvent] = []

    async def publish(self, event: ApplicationEvent) -> bool:
        self.call_count += 1
        if self.fail_mode:
            return False
        self.events.append(event)
        return True

    def of_type(self, event_type: EventType) -> List[ApplicationEvent]:
        return [event for event in self.events if event.event_type == event_type]


class CommitTrackingPublisher(MockNotificationPublisher):
    """Records whether the request's transaction was still open at each publish."""

    def __init__(self, session: AsyncSession):
        super().__init__()
        self._session = session
        self.open_transaction_at_publish: List[bool] = []

    async def publish(self, event: ApplicationEvent) -> bool:
        self.open_transaction_at_publish.append(self._session.in_transaction())
        return await super().publish(event)


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


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def repository(test_session: AsyncSession) -> PostgresApplicationRepository:
    return PostgresApplicationRepository(test_session)


# =============================================================================
# Mock Client Fixtures
# =============================================================================

@pytest.fixture
def mock_publisher() -> MockNotificationPublisher:
    return MockNotificationPublisher()


@pytest.fixture
def failing_publisher() -> MockNotificationPublisher:
    return MockNotificationPublisher(fail_mode=True)


# =============================================================================
# App Client Fixtures
# =============================================================================

async def _client_for(
    session: AsyncSession,
    publisher: NotificationPublisher,
) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_application_repository():
        return PostgresApplicationRepository(session)

    def override_get_notification_publisher():
        return publisher

    app.dependency_overrides[get_application_repository] = override_get_application_repository
    app.dependency_overrides[get_notification_publisher] = override_get_notification_publisher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(
    test_session: AsyncSession,
    mock_publisher: MockNotificationPublisher,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with mocked dependencies.

    This client:
    - Uses an in-memory SQLite database
    - Records notifications with the mock publisher
    """
    async for ac in _client_for(test_session, mock_publisher):
        yield ac


@pytest.fixture
def commit_tracking_publisher(test_session: AsyncSession) -> CommitTrackingPublisher:
    return CommitTrackingPublisher(test_session)


@pytest_asyncio.fixture
async def client_with_commit_tracking(
    test_session: AsyncSession,
    commit_tracking_publisher: CommitTrackingPublisher,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client whose publisher inspects the session at publish time."""
    async for ac in _client_for(test_session, commit_tracking_publisher):
        yield ac


@pytest_asyncio.fixture
async def client_with_failing_publisher(
    test_session: AsyncSession,
    failing_publisher: MockNotificationPublisher,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client whose notifications are never delivered."""
    async for ac in _client_for(test_session, failing_publisher):
        yield ac


# =============================================================================
# Request Fixtures
# =============================================================================

@pytest.fixture
def rate_and_term_request() -> dict:
    """A streamlined refinance that passes NTB: $250/month savings, 24-month recoupment."""
    return {
        "application_type": "rate_and_term",
        "first_name": "Jordan",
        "last_name": "Rivera",
        "email": "jordan.rivera@example.com",
        "street_address": "12 Elm St",
        "city": "Dayton",
        "state": "OH",
        "zip_code": "45402",
        "currently_occupied": True,
        "requested_amount": "200000",
        "requested_rate": "6.0",
        "requested_term_months": 360,
        "total_loan_costs": "6000",
        "current_loan": {
            "current_balance": "200000",
            "interest_rate": "7.0",
            "original_term_months": 360,
            "remaining_term_months": 340,
            "monthly_principal_and_interest": "1449.10",
            "loan_number": "VA-123456",
            "lender": "Veterans First Mortgage",
        },
    }


@pytest.fixture
def cash_out_request(rate_and_term_request: dict) -> dict:
    return {
        **rate_and_term_request,
        "application_type": "cash_out",
        "cash_out_amount": "60000",
        "cash_out_purpose": "Home improvements",
    }


@pytest.fixture
def no_current_loan_request(rate_and_term_request: dict) -> dict:
    request = dict(rate_and_term_request)
    request.pop("current_loan")
    return request
