"""
Project Repositories.
"""

from sqlalchemy import func, or_, select

from modules.backend.models.project import Project, ProjectCollaborator
from modules.backend.models.user import User
from modules.backend.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    model = Project

    async def list_public(self, limit: int = 20) -> list[tuple[Project, User]]:
        """Public projects with their creators, newest first."""
        result = await self.session.execute(
            select(Project, User)
            .join(User, User.id == Project.creator_id)
            .where(Project.is_public.is_(True))
            .order_by(Project.created_at.desc())
            .limit(limit)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def list_for_member(self, user_id: str) -> list[Project]:
        """Projects the user created or collaborates on."""
        collaborating = select(ProjectCollaborator.project_id).where(
            ProjectCollaborator.user_id == user_id
        )
        result = await self.session.execute(
            select(Project)
            .where(or_(Project.creator_id == user_id, Project.id.in_(collaborating)))
            .order_by(Project.updated_at.desc())
        )
        return list(result.scalars().all())

    async def list_by_creator(self, creator_id: str, public_only: bool = False) -> list[Project]:
        query = select(Project).where(Project.creator_id == creator_id)
        if public_only:
            query = query.where(Project.is_public.is_(True))
        result = await self.session.execute(query.order_by(Project.created_at.desc()))
        return list(result.scalars().all())

    async def count_by_creator(self, creator_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Project).where(Project.creator_id == creator_id)
        )
        return result.scalar_one()


class ProjectCollaboratorRepository(BaseRepository[ProjectCollaborator]):
    model = ProjectCollaborator
    label = "Collaborator"

    async def get_membership(self, project_id: str, user_id: str) -> ProjectCollaborator | None:
        result = await self.session.execute(
            select(ProjectCollaborator)
            .where(ProjectCollaborator.project_id == project_id)
            .where(ProjectCollaborator.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_for_project(self, project_id: str) -> list[tuple[ProjectCollaborator, User]]:
        result = await self.session.execute(
            select(ProjectCollaborator, User)
            .join(User, User.id == ProjectCollaborator.user_id)
            .where(ProjectCollaborator.project_id == project_id)
            .order_by(ProjectCollaborator.created_at)
        )
        return [(row[0], row[1]) for row in result.all()]
