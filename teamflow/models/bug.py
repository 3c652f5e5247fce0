# teamflow/models/bug.py
from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Text, Uuid, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamflow.models.base import Base

if TYPE_CHECKING:
    from teamflow.models.release import Release


class BugSeverity(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class BugStatus(str, enum.Enum):
    open = "open"
    in_progress = "in_progress"
    resolved = "resolved"
    closed = "closed"
    rejected = "rejected"


class Bug(Base):
    __tablename__ = "bugs"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    severity: Mapped[BugSeverity] = mapped_column(SAEnum(BugSeverity, name="bug_severity"), nullable=False)
    status: Mapped[BugStatus] = mapped_column(
        SAEnum(BugStatus, name="bug_status"),
        nullable=False,
        default=BugStatus.open,
    )

    release_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("releases.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    reported_by: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)

    # assignee may update the bug regardless of role
    assigned_to: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    steps_to_reproduce: Mapped[str | None] = mapped_column(Text, nullable=True)
    expected_behavior: Mapped[str | None] = mapped_column(Text, nullable=True)
    actual_behavior: Mapped[str | None] = mapped_column(Text, nullable=True)

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
