"""
FastAPI Dependencies.

Shared dependencies for request handling: database session, request ID,
bearer authentication, role gating and per-user rate limiting.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.database import get_db_session
from modules.backend.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    RateLimitError,
)
from modules.backend.core.logging import get_logger
from modules.backend.core.rate_limiter import get_rate_limiter
from modules.backend.core.security import decode_token, is_admin_email
from modules.backend.models.enums import UserRole
from modules.backend.models.user import User
from modules.backend.repositories.user import UserRepository

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]

_bearer = HTTPBearer(auto_error=False)


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """Extract or generate request ID from headers."""
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


def _route_template(request: Request) -> str:
    """Matched route path such as /api/v1/scripts/{script_id}; the raw path if unrouted."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


async def get_current_user(
    request: Request,
    db: DbSession,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> User:
    """
    Resolve the bearer access token to a User.

    Raises:
        AuthenticationError: Missing, invalid or expired token, or unknown user
        RateLimitError: Per-user, per-route limit exceeded
    """
    if credentials is None:
        raise AuthenticationError("Authentication required")

    payload = decode_token(credentials.credentials, expected_type="access")
    user = await UserRepository(db).get_by_id_or_none(payload["sub"])
    if user is None:
        logger.warning("Token subject not found", extra={"user_id": payload["sub"]})
        raise AuthenticationError("User no longer exists")

    if get_app_config().features.auth_rate_limit_enabled:
        result = get_rate_limiter().check(user.id, _route_template(request))
        if not result.allowed:
            raise RateLimitError(
                "Too many requests, slow down",
                retry_after=result.retry_after_seconds,
            )

    request.state.user_id = user.id
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_verified_user(user: CurrentUser) -> User:
    """Require role == verified."""
    if user.role != UserRole.VERIFIED:
        raise AuthorizationError("Verified membership required")
    return user


VerifiedUser = Annotated[User, Depends(get_verified_user)]


async def get_admin_user(user: CurrentUser) -> User:
    """Require an email listed in security.roles.admin_emails."""
    if not is_admin_email(user.email):
        logger.warning("Admin access denied", extra={"user_id": user.id})
        raise AuthorizationError("Admin access required")
    return user


AdminUser = Annotated[User, Depends(get_admin_user)]
