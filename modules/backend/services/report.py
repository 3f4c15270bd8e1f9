"""
Report Service.

Member reports of users, posts or replies, and their moderation.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models.enums import ReportStatus
from modules.backend.models.report import Report
from modules.backend.models.user import User
from modules.backend.repositories.report import ReportRepository
from modules.backend.schemas.report import ReportCreate
from modules.backend.services.base import BaseService


class ReportService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = ReportRepository(session)

    async def create_report(self, user: User, data: ReportCreate) -> Report:
        self._validate_required(data.model_dump(), ["reason"])
        report = await self._execute_db_operation(
            "create_report",
            self.repo.create(reporter_id=user.id, **data.model_dump()),
        )
        self._log_operation("Report filed", report_id=report.id, reporter_id=user.id)
        return report

    async def list_reports(self, status: ReportStatus | None = None, limit: int = 100) -> list[Report]:
        return await self.repo.list_by_status(status, limit=limit)

    async def set_status(self, report_id: str, status: ReportStatus) -> Report:
        self._log_operation("Report status changed", report_id=report_id, status=str(status))
        return await self.repo.update(report_id, status=status)
