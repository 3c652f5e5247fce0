# teamflow/models/hotfix.py
from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, Text, Uuid, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamflow.models.base import Base

if TYPE_CHECKING:
    from teamflow.models.release import Release


class HotfixStatus(str, enum.Enum):
    pending = "pending"
    in_progress = "in_progress"
    deployed = "deployed"


class Hotfix(Base):
    __tablename__ = "hotfixes"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    bug_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("bugs.id", ondelete="CASCADE"),
        nullable=False,
    )
    release_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("releases.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    fixed_by: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    fixed_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    status: Mapped[HotfixStatus] = mapped_column(
        SAEnum(HotfixStatus, name="hotfix_status"),
        nullable=False,
        default=HotfixStatus.pending,
    )

    attached_commits: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    deployment_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    release: Mapped["Release"] = relationship()
