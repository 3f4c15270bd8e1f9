"""
Report Repository.
"""

from sqlalchemy import select

from modules.backend.models.report import Report
from modules.backend.repositories.base import BaseRepository


class ReportRepository(BaseRepository[Report]):
    model = Report

    async def list_by_status(self, status: str | None = None, limit: int = 100) -> list[Report]:
        query = select(Report)
        if status:
            query = query.where(Report.status == status)
        result = await self.session.execute(query.order_by(Report.created_at.desc()).limit(limit))
        return list(result.scalars().all())
