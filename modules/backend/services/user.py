"""
User Service.

Profiles, role changes, verification requests and the member directory.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import AuthorizationError
from modules.backend.core.security import is_admin_email
from modules.backend.models.enums import UserRole
from modules.backend.models.project import Project
from modules.backend.models.script import Script
from modules.backend.models.user import User
from modules.backend.repositories.project import ProjectRepository
from modules.backend.repositories.script import ScriptRepository
from modules.backend.repositories.user import UserRepository
from modules.backend.schemas.user import ProfileUpdate, VerificationRequest
from modules.backend.services.base import BaseService

MEMBER_LIST_LIMIT = 50
MEMBER_SEARCH_LIMIT = 20


class UserService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.users = UserRepository(session)

    async def get_user(self, user_id: str) -> User:
        return await self.users.get_by_id(user_id)

    async def update_role(self, user: User, role: UserRole) -> User:
        """
        Raises:
            AuthorizationError: Non-admin setting the verified role
        """
        if role == UserRole.VERIFIED and not is_admin_email(user.email):
            raise AuthorizationError("Admin access required to grant verified status")
        self._log_operation("Role updated", user_id=user.id, role=str(role))
        return await self.users.apply(user, role=role)

    async def request_verification(self, user: User, data: VerificationRequest) -> User:
        self._log_operation(
            "Verification requested",
            user_id=user.id,
            relationship_type=str(data.relationship_type),
        )
        return await self.users.apply(
            user,
            role=UserRole.PENDING,
            relationship_type=data.relationship_type,
            military_branch=data.military_branch,
            years_of_service=data.years_of_service,
            contact_email=data.contact_email,
            bio=data.bio if data.bio is not None else user.bio,
        )

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return user
        self._log_operation("Profile updated", user_id=user.id, fields=list(update_data))
        return await self.users.apply(user, **update_data)

    async def list_members(self, search: str | None = None, limit: int | None = None) -> list[User]:
        """Verified members. The default limit is smaller when searching."""
        if limit is None:
            limit = MEMBER_SEARCH_LIMIT if search else MEMBER_LIST_LIMIT
        return await self.users.list_verified_members(search, limit)

    async def projects_of(self, user_id: str, viewer_id: str) -> list[Project]:
        """A member's projects. Others see only the public ones."""
        await self.users.get_by_id(user_id)
        return await ProjectRepository(self.session).list_by_creator(
            user_id, public_only=user_id != viewer_id,
        )

    async def public_scripts_of(self, user_id: str) -> list[Script]:
        await self.users.get_by_id(user_id)
        return await ScriptRepository(self.session).list_by_author(user_id, public_only=True)
