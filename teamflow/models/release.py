# teamflow/models/release.py
from __future__ import annotations

import enum
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from teamflow.models.base import Base


class ReleaseStatus(str, enum.Enum):
    planned = "planned"
    deployed = "deployed"


class QAStatus(str, enum.Enum):
    pending = "pending"
    passed = "passed"
    failed = "failed"


class Release(Base):
    __tablename__ = "releases"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    version_tag: Mapped[str] = mapped_column(String(100), nullable=False)

    workspace_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    description: Mapped[str] = mapped_column(Text, nullable=False)
    planned_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    deployed_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_by: Mapped[UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    deployed_by: Mapped[UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)

    qa_status: Mapped[QAStatus] = mapped_column(
        SAEnum(QAStatus, name="qa_status"),
        nullable=False,
        default=QAStatus.pending,
    )
    status: Mapped[ReleaseStatus] = mapped_column(
        SAEnum(ReleaseStatus, name="release_status"),
        nullable=False,
        default=ReleaseStatus.planned,
    )

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
