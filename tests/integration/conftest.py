"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real database and the full app.
These fixtures build on the root conftest.py database fixtures.
"""

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.database import get_db_session
from modules.backend.core.rate_limiter import get_rate_limiter
from modules.backend.core.security import create_access_token, hash_password
from modules.backend.models.enums import MilitaryBranch, RelationshipType, UserRole
from modules.backend.models.user import User
from modules.backend.realtime.manager import get_connection_manager
from modules.backend.repositories.user import UserRepository

ADMIN_EMAIL = "bravozulufilms@gmail.com"
DEFAULT_PASSWORD = "correct-horse-battery"


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with database session override.

    Every request shares the test session, so rows created by fixtures
    are visible to the API and vice versa.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from modules.backend.main import create_app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    get_rate_limiter().reset()
    get_connection_manager().reset()

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    get_rate_limiter().reset()
    get_connection_manager().reset()


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """Assert API response is a request validation error (422)."""
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()


# =============================================================================
# Member Fixtures
# =============================================================================


UserFactory = Callable[..., Awaitable[User]]


@pytest.fixture
def create_user(db_session: AsyncSession) -> UserFactory:
    """
    Factory for persisted members.

    Usage:
        async def test_something(create_user):
            veteran = await create_user(role=UserRole.VERIFIED, military_branch="army")
    """

    async def _create(
        email: str | None = None,
        *,
        role: str = UserRole.PUBLIC,
        relationship_type: str | None = None,
        military_branch: str | None = None,
        is_verified: bool | None = None,
        credits: int = 25,
        first_name: str | None = "Test",
        last_name: str | None = "Member",
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        user = await UserRepository(db_session).create(
            email=email or f"member-{uuid.uuid4().hex[:10]}@example.com",
            hashed_password=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
            relationship_type=relationship_type,
            military_branch=military_branch,
            is_verified=role == UserRole.VERIFIED if is_verified is None else is_verified,
            credits=credits,
        )
        await db_session.commit()
        return user

    return _create


@pytest.fixture
def headers_for() -> Callable[[User], dict[str, str]]:
    """Build bearer headers for a member."""

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token({"sub": user.id})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def public_user(create_user: UserFactory) -> User:
    """A registered member who has not asked for verification."""
    return await create_user(first_name="Pat", last_name="Public")


@pytest.fixture
async def verified_user(create_user: UserFactory) -> User:
    """A verified Army veteran."""
    return await create_user(
        first_name="Vera",
        last_name="Veteran",
        role=UserRole.VERIFIED,
        relationship_type=RelationshipType.VETERAN,
        military_branch=MilitaryBranch.ARMY,
    )


@pytest.fixture
async def admin_user(create_user: UserFactory) -> User:
    """The configured admin, who is also the super user."""
    return await create_user(
        ADMIN_EMAIL,
        first_name="Bravo",
        last_name="Zulu",
        role=UserRole.VERIFIED,
    )


@pytest.fixture
def public_headers(public_user: User, headers_for) -> dict[str, str]:
    return headers_for(public_user)


@pytest.fixture
def verified_headers(verified_user: User, headers_for) -> dict[str, str]:
    return headers_for(verified_user)


@pytest.fixture
def admin_headers(admin_user: User, headers_for) -> dict[str, str]:
    return headers_for(admin_user)
