"""
Project Service.

Film projects and their collaborators. A private project is visible
only to its creator and collaborators.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import ConflictError, NotFoundError
from modules.backend.models.enums import ActivityType, CollaboratorPermission, NotificationType
from modules.backend.models.project import Project, ProjectCollaborator
from modules.backend.models.user import User
from modules.backend.repositories.project import ProjectCollaboratorRepository, ProjectRepository
from modules.backend.repositories.user import UserRepository
from modules.backend.schemas.project import ProjectCreate
from modules.backend.services.activity import ActivityService
from modules.backend.services.base import BaseService
from modules.backend.services.notification import NotificationService


class ProjectService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.projects = ProjectRepository(session)
        self.collaborators = ProjectCollaboratorRepository(session)
        self.users = UserRepository(session)

    async def create_project(self, user: User, data: ProjectCreate) -> Project:
        self._log_operation("Creating project", user_id=user.id, title=data.title)
        project = await self._execute_db_operation(
            "create_project",
            self.projects.create(creator_id=user.id, **data.model_dump()),
        )
        await ActivityService(self.session).record(
            user.id,
            ActivityType.PROJECT_CREATED,
            f"{user.display_name} started a new project: {project.title}",
            metadata={"project_id": project.id, "type": str(project.type)},
        )
        return project

    async def list_public(self, limit: int = 20) -> list[tuple[Project, User]]:
        return await self.projects.list_public(limit=limit)

    async def list_mine(self, user_id: str) -> list[Project]:
        return await self.projects.list_for_member(user_id)

    async def get_visible(self, user_id: str, project_id: str) -> Project:
        """
        Raises:
            NotFoundError: Missing, or private and the caller is not a member
        """
        project = await self.projects.get_by_id(project_id)
        if project.is_public or project.creator_id == user_id:
            return project
        if await self.collaborators.get_membership(project_id, user_id) is None:
            raise NotFoundError("Project not found")
        return project

    async def detail(
        self, user_id: str, project_id: str,
    ) -> tuple[Project, User, list[tuple[ProjectCollaborator, User]]]:
        """Returns (project, creator, [(collaborator, user), ...])."""
        project = await self.get_visible(user_id, project_id)
        creator = await self.users.get_by_id(project.creator_id)
        return project, creator, await self.collaborators.list_for_project(project_id)

    async def join(self, user: User, project_id: str, role: str | None) -> ProjectCollaborator:
        """
        Add the caller as a read-only collaborator and tell the creator.

        Raises:
            ConflictError: Caller is the creator or already a collaborator
        """
        project = await self.get_visible(user.id, project_id)
        if project.creator_id == user.id:
            raise ConflictError("You created this project")
        if await self.collaborators.get_membership(project_id, user.id) is not None:
            raise ConflictError("You have already joined this project")

        collaborator = await self._execute_db_operation(
            "join_project",
            self.collaborators.create(
                project_id=project_id,
                user_id=user.id,
                role=role,
                permissions=CollaboratorPermission.READ,
            ),
        )
        await NotificationService(self.session).notify(
            project.creator_id,
            NotificationType.PROJECT_INVITE,
            "New collaborator",
            f"{user.display_name} joined {project.title}"
            + (f" as {role}" if role else "")
            + ".",
            action_url=f"/projects/{project.id}",
            related_entity_type="project",
            related_entity_id=project.id,
        )
        self._log_operation("Project joined", project_id=project_id, user_id=user.id)
        return collaborator
