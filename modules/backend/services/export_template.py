"""
Export Template Service.

Templates are shared by default. A private template is visible only to
its author, and only the author may change or delete a template.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import NotFoundError
from modules.backend.models.export_template import ExportTemplate
from modules.backend.models.user import User
from modules.backend.repositories.export_template import ExportTemplateRepository
from modules.backend.schemas.export_template import ExportTemplateCreate, ExportTemplateUpdate
from modules.backend.services.base import BaseService


class ExportTemplateService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = ExportTemplateRepository(session)

    async def list_templates(self, user_id: str) -> list[ExportTemplate]:
        return await self.repo.list_visible(user_id)

    async def get_template(self, user_id: str, template_id: str) -> ExportTemplate:
        template = await self.repo.get_by_id(template_id)
        if not template.is_public and template.created_by_id != user_id:
            raise NotFoundError("Export template not found")
        return template

    async def create_template(self, user: User, data: ExportTemplateCreate) -> ExportTemplate:
        template = await self._execute_db_operation(
            "create_export_template",
            self.repo.create(created_by_id=user.id, **data.model_dump(mode="json")),
        )
        self._log_operation("Export template created", template_id=template.id, template_type=template.template_type)
        return template

    async def update_template(
        self, user_id: str, template_id: str, data: ExportTemplateUpdate,
    ) -> ExportTemplate:
        template = self._owned(
            await self.repo.get_by_id(template_id), user_id, "created_by_id", "Export template",
        )
        update_data = data.model_dump(mode="json", exclude_unset=True)
        if not update_data:
            return template
        return await self.repo.apply(template, **update_data)

    async def delete_template(self, user_id: str, template_id: str) -> None:
        template = self._owned(
            await self.repo.get_by_id(template_id), user_id, "created_by_id", "Export template",
        )
        self._log_operation("Deleting export template", template_id=template_id)
        await self.repo.delete(template)
