"""
Festival Models.

A member's tracker of festival entries, and the packets of materials
assembled for them.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, TimestampMixin, UUIDMixin
from modules.backend.models.enums import PacketStatus, SubmissionStatus


class FestivalSubmission(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "festival_submissions"

    submitter_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    festival_name: Mapped[str] = mapped_column(String(255), nullable=False)
    festival_url: Mapped[str | None] = mapped_column(String(500))
    project_id: Mapped[str | None] = mapped_column(
        ForeignKey("projects.id", ondelete="SET NULL"),
    )
    script_id: Mapped[str | None] = mapped_column(
        ForeignKey("scripts.id", ondelete="SET NULL"),
    )
    category: Mapped[str | None] = mapped_column(String(100))
    submission_date: Mapped[datetime | None] = mapped_column(DateTime)
    deadline: Mapped[datetime | None] = mapped_column(DateTime)
    # Entry fee in cents
    fee: Mapped[int | None] = mapped_column(Integer)
    status: Mapped[str] = mapped_column(
        String(20), default=SubmissionStatus.DRAFT, nullable=False,
    )
    notes: Mapped[str | None] = mapped_column(Text)


class FestivalPacket(UUIDMixin, TimestampMixin, Base):
    """The materials a member is assembling for one festival."""

    __tablename__ = "festival_packets"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    project_id: Mapped[str | None] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    festival_name: Mapped[str] = mapped_column(String(255), nullable=False)
    submission_deadline: Mapped[datetime | None] = mapped_column(DateTime)
    status: Mapped[str] = mapped_column(String(20), default=PacketStatus.DRAFT, nullable=False)
    # Festival-specific checklist, e.g. {"runtime_max_minutes": 40, "subtitles": true}
    requirements: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    packaged_file_path: Mapped[str | None] = mapped_column(String(500))
    submission_notes: Mapped[str | None] = mapped_column(Text)
    tracking_number: Mapped[str | None] = mapped_column(String(100))
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime)
