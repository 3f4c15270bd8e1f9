"""
Export Template Repository.
"""

from sqlalchemy import or_, select

from modules.backend.models.export_template import ExportTemplate
from modules.backend.repositories.base import BaseRepository


class ExportTemplateRepository(BaseRepository[ExportTemplate]):
    model = ExportTemplate
    label = "Export template"

    async def list_visible(self, user_id: str) -> list[ExportTemplate]:
        """Public templates plus the caller's private ones, by name."""
        result = await self.session.execute(
            select(ExportTemplate)
            .where(or_(ExportTemplate.is_public.is_(True), ExportTemplate.created_by_id == user_id))
            .order_by(ExportTemplate.name.asc())
        )
        return list(result.scalars().all())
