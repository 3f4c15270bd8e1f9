"""
Integration tests for credit event delivery timing.

Credit events leave the process only after the ledger change commits.
"""

import asyncio
from unittest.mock import patch

from modules.backend.events.publishers import CreditEventPublisher
from modules.backend.models.enums import TransactionType
from modules.backend.services.credits import CreditService


class _Recorder:
    def __init__(self) -> None:
        self.streams: list[str] = []

    def patch(self):
        recorder = self

        async def record(publisher, stream, event):
            recorder.streams.append(stream)

        return patch.object(CreditEventPublisher, "_publish", record)


class TestPublishAfterCommit:
    async def test_spent_event_waits_for_commit(self, db_session, create_user):
        veteran = await create_user(credits=50)
        recorder = _Recorder()

        with recorder.patch():
            await CreditService(db_session).deduct(veteran, 10, "Script analysis")
            await asyncio.sleep(0)
            assert recorder.streams == []

            await db_session.commit()
            await asyncio.sleep(0)

        assert recorder.streams == [CreditEventPublisher.STREAM_SPENT]

    async def test_rolled_back_grant_is_never_published(self, db_session, create_user):
        veteran = await create_user(credits=50)
        veteran_id = veteran.id
        recorder = _Recorder()

        with recorder.patch():
            await CreditService(db_session).grant(
                veteran_id, 100, TransactionType.PURCHASE, "Purchased 100 credits",
            )
            await db_session.rollback()
            await db_session.commit()
            await asyncio.sleep(0)

        assert recorder.streams == []
