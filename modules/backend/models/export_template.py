"""
Export Template Model.

Describes how a festival packet or press kit is laid out on export:
which file roles it needs and how files are named.
"""

from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, TimestampMixin, UUIDMixin


class ExportTemplate(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "export_templates"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    template_type: Mapped[str] = mapped_column(String(30), nullable=False)
    # PacketFileRole values
    required_files: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    optional_files: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    # Folder -> file roles, e.g. {"press": ["poster", "stills"]}
    file_structure: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    naming_convention: Mapped[str | None] = mapped_column(String(255))
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_by_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
    )
