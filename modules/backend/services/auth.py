"""
Auth Service.

Registration, password login and refresh-token exchange.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    ConflictError,
)
from modules.backend.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from modules.backend.models.enums import ActivityType
from modules.backend.models.user import User
from modules.backend.repositories.user import UserRepository
from modules.backend.schemas.user import UserRegister
from modules.backend.services.activity import ActivityService
from modules.backend.services.base import BaseService
from modules.backend.services.referral import ReferralService


class AuthService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.users = UserRepository(session)

    async def register(self, data: UserRegister) -> User:
        """
        Create an account with the signup credit grant.

        A referral code that cannot be applied is logged and ignored.

        Raises:
            ConflictError: Email already registered
        """
        email = data.email.strip().lower()
        if await self.users.get_by_email(email) is not None:
            raise ConflictError("Email already registered")

        user = await self._execute_db_operation(
            "register_user",
            self.users.create(
                email=email,
                hashed_password=hash_password(data.password),
                first_name=data.first_name,
                last_name=data.last_name,
                credits=get_app_config().credits.signup_credits,
            ),
        )
        self._log_operation("User registered", user_id=user.id)

        await ActivityService(self.session).record(
            user.id,
            ActivityType.MEMBER_JOINED,
            f"{user.display_name} joined the community",
        )

        if data.referral_code:
            try:
                await ReferralService(self.session).process_code(user, data.referral_code)
            except ApplicationError as e:
                self._logger.warning(
                    "Referral code not applied at registration",
                    extra={"user_id": user.id, "code": data.referral_code, "reason": e.message},
                )
            user = await self.users.save(user)

        return user

    async def login(self, email: str, password: str) -> tuple[str, str]:
        """
        Returns:
            (access_token, refresh_token)

        Raises:
            AuthenticationError: Unknown email or wrong password
        """
        user = await self.users.get_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            self._logger.warning("Failed login attempt", extra={"email": email.strip().lower()})
            raise AuthenticationError("Invalid email or password")

        self._log_operation("User logged in", user_id=user.id)
        claims = {"sub": user.id}
        return create_access_token(claims), create_refresh_token(claims)

    async def refresh(self, refresh_token: str) -> str:
        """
        Exchange a refresh token for a new access token.

        Raises:
            AuthenticationError: Invalid token, wrong token type, or unknown user
        """
        payload = decode_token(refresh_token, expected_type="refresh")
        user = await self.users.get_by_id_or_none(payload["sub"])
        if user is None:
            raise AuthenticationError("User no longer exists")
        return create_access_token({"sub": user.id})
