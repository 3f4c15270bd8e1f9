"""
Festival Services.

A member's own tracker of festival entries, and the packets of
materials assembled for them. Packets are private: anyone but the owner
sees 404.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import AuthorizationError
from modules.backend.core.utils import safe_filename, utc_now
from modules.backend.models.enums import ActivityType, PacketStatus
from modules.backend.models.festival import FestivalPacket, FestivalSubmission
from modules.backend.models.user import User
from modules.backend.repositories.festival import FestivalPacketRepository, FestivalSubmissionRepository
from modules.backend.repositories.project import ProjectRepository
from modules.backend.schemas.festival import (
    FestivalPacketCreate,
    FestivalPacketUpdate,
    FestivalSubmissionCreate,
    FestivalSubmissionUpdate,
    PacketExportResponse,
)
from modules.backend.services.activity import ActivityService
from modules.backend.services.base import BaseService
from modules.backend.services.export_template import ExportTemplateService


class FestivalSubmissionService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = FestivalSubmissionRepository(session)

    async def create_submission(
        self, user: User, data: FestivalSubmissionCreate,
    ) -> FestivalSubmission:
        submission = await self._execute_db_operation(
            "create_festival_submission",
            self.repo.create(submitter_id=user.id, **data.model_dump()),
        )
        await ActivityService(self.session).record(
            user.id,
            ActivityType.FESTIVAL_SUBMISSION,
            f"{user.display_name} is submitting to {submission.festival_name}",
            metadata={"submission_id": submission.id},
        )
        self._log_operation("Festival submission created", submission_id=submission.id)
        return submission

    async def list_own(self, user_id: str) -> list[FestivalSubmission]:
        return await self.repo.list_by_submitter(user_id)

    async def get_submission(self, user_id: str, submission_id: str) -> FestivalSubmission:
        """
        Raises:
            NotFoundError: Missing submission
            AuthorizationError: Someone else's submission
        """
        submission = await self.repo.get_by_id(submission_id)
        if submission.submitter_id != user_id:
            raise AuthorizationError("You can only view your own submissions")
        return submission

    async def update_submission(
        self, user_id: str, submission_id: str, data: FestivalSubmissionUpdate,
    ) -> FestivalSubmission:
        submission = self._owned(
            await self.repo.get_by_id(submission_id), user_id, "submitter_id", "Festival submission",
        )
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return submission
        self._log_operation("Updating festival submission", submission_id=submission_id)
        return await self.repo.apply(submission, **update_data)

    async def delete_submission(self, user_id: str, submission_id: str) -> None:
        submission = self._owned(
            await self.repo.get_by_id(submission_id), user_id, "submitter_id", "Festival submission",
        )
        self._log_operation("Deleting festival submission", submission_id=submission_id)
        await self.repo.delete(submission)


class FestivalPacketService(BaseService):
    EXPORT_URL = "/exports/festival-packet-{packet_id}.zip"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = FestivalPacketRepository(session)
        self.projects = ProjectRepository(session)

    async def _check_project(self, user_id: str, project_id: str | None) -> None:
        if project_id is not None:
            self._owned(await self.projects.get_by_id(project_id), user_id, "creator_id", "Project")

    async def create_packet(self, user: User, data: FestivalPacketCreate) -> FestivalPacket:
        """
        Raises:
            NotFoundError: project_id is not one of the caller's projects
        """
        await self._check_project(user.id, data.project_id)
        values = data.model_dump()
        if data.status == PacketStatus.SUBMITTED:
            values["submitted_at"] = utc_now()
        packet = await self._execute_db_operation(
            "create_festival_packet",
            self.repo.create(user_id=user.id, **values),
        )
        self._log_operation("Festival packet created", packet_id=packet.id, festival=packet.festival_name)
        return packet

    async def list_own(self, user_id: str) -> list[FestivalPacket]:
        return await self.repo.list_by_user(user_id)

    async def get_packet(self, user_id: str, packet_id: str) -> FestivalPacket:
        return self._owned(await self.repo.get_by_id(packet_id), user_id, "user_id", "Festival packet")

    async def update_packet(
        self, user_id: str, packet_id: str, data: FestivalPacketUpdate,
    ) -> FestivalPacket:
        """Moving a packet to submitted stamps submitted_at once."""
        packet = await self.get_packet(user_id, packet_id)
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return packet
        if "project_id" in update_data:
            await self._check_project(user_id, update_data["project_id"])
        if update_data.get("status") == PacketStatus.SUBMITTED and packet.submitted_at is None:
            update_data["submitted_at"] = utc_now()

        self._log_operation("Updating festival packet", packet_id=packet_id, fields=list(update_data))
        return await self.repo.apply(packet, **update_data)

    async def delete_packet(self, user_id: str, packet_id: str) -> None:
        packet = await self.get_packet(user_id, packet_id)
        self._log_operation("Deleting festival packet", packet_id=packet_id)
        await self.repo.delete(packet)

    async def export_packet(
        self, user_id: str, packet_id: str, template_id: str | None = None,
    ) -> PacketExportResponse:
        """
        Package a packet for download, optionally laid out by an export template.

        Raises:
            NotFoundError: Missing packet, or a template the caller cannot see
        """
        packet = await self.get_packet(user_id, packet_id)
        required_files: list[str] = []
        if template_id is not None:
            template = await ExportTemplateService(self.session).get_template(user_id, template_id)
            required_files = list(template.required_files)

        download_url = self.EXPORT_URL.format(packet_id=packet.id)
        await self.repo.apply(packet, packaged_file_path=download_url.lstrip("/"))
        self._log_operation("Festival packet exported", packet_id=packet.id, template_id=template_id)
        return PacketExportResponse(
            download_url=download_url,
            filename=safe_filename(packet.title, packet.festival_name, suffix=".zip"),
            template_id=template_id,
            required_files=required_files,
            created_at=utc_now(),
        )
