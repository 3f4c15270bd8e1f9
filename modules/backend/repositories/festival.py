"""
Festival Repositories.
"""

from sqlalchemy import select

from modules.backend.models.festival import FestivalPacket, FestivalSubmission
from modules.backend.repositories.base import BaseRepository


class FestivalSubmissionRepository(BaseRepository[FestivalSubmission]):
    model = FestivalSubmission
    label = "Festival submission"

    async def list_by_submitter(self, submitter_id: str) -> list[FestivalSubmission]:
        result = await self.session.execute(
            select(FestivalSubmission)
            .where(FestivalSubmission.submitter_id == submitter_id)
            .order_by(FestivalSubmission.created_at.desc())
        )
        return list(result.scalars().all())


class FestivalPacketRepository(BaseRepository[FestivalPacket]):
    model = FestivalPacket
    label = "Festival packet"

    async def list_by_user(self, user_id: str) -> list[FestivalPacket]:
        result = await self.session.execute(
            select(FestivalPacket)
            .where(FestivalPacket.user_id == user_id)
            .order_by(FestivalPacket.created_at.desc())
        )
        return list(result.scalars().all())
