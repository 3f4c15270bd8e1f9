"""
Script Service.

Screenplays owned by verified members. Private scripts are visible only
to their author; to anyone else they do not exist.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import NotFoundError
from modules.backend.models.enums import ActivityType
from modules.backend.models.script import Script
from modules.backend.models.user import User
from modules.backend.repositories.script import ScriptRepository
from modules.backend.schemas.script import ScriptCreate, ScriptUpdate
from modules.backend.services.activity import ActivityService
from modules.backend.services.base import BaseService


class ScriptService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = ScriptRepository(session)

    async def create_script(self, user: User, data: ScriptCreate) -> Script:
        """
        Raises:
            ValidationError: Blank title
        """
        self._validate_required(data.model_dump(), ["title"])
        self._log_operation("Creating script", user_id=user.id, title=data.title)

        script = await self._execute_db_operation(
            "create_script",
            self.repo.create(author_id=user.id, **data.model_dump()),
        )
        await ActivityService(self.session).record(
            user.id,
            ActivityType.SCRIPT_CREATED,
            f"{user.display_name} wrote a new script: {script.title}",
            metadata={"script_id": script.id},
        )
        return script

    async def list_own(self, user_id: str) -> list[Script]:
        return await self.repo.list_by_author(user_id)

    async def get_script(self, user_id: str, script_id: str) -> Script:
        """
        Raises:
            NotFoundError: Missing, or private and not the caller's
        """
        script = await self.repo.get_by_id(script_id)
        if script.author_id != user_id and not script.is_public:
            raise NotFoundError("Script not found")
        return script

    async def update_script(self, user_id: str, script_id: str, data: ScriptUpdate) -> Script:
        script = self._owned(await self.repo.get_by_id(script_id), user_id, "author_id", "Script")
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return script

        self._log_operation("Updating script", script_id=script_id, fields=list(update_data))
        return await self._execute_db_operation(
            "update_script",
            self.repo.apply(script, **update_data),
        )

    async def delete_script(self, user_id: str, script_id: str) -> None:
        script = self._owned(await self.repo.get_by_id(script_id), user_id, "author_id", "Script")
        self._log_operation("Deleting script", script_id=script_id)
        await self.repo.delete(script)
