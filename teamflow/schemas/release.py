# teamflow/schemas/release.py

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from teamflow.models.release import QAStatus, ReleaseStatus


class ReleaseCreate(BaseModel):
    workspace_id: UUID
    version_tag: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)
    planned_date: datetime


class ReleaseUpdate(BaseModel):
    version_tag: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1)
    planned_date: datetime | None = None


class QAStatusUpdate(BaseModel):
    qa_status: QAStatus


class ReleaseRead(BaseModel):
    id: UUID
    workspace_id: UUID
    version_tag: str
    description: str
    planned_date: datetime
    deployed_date: datetime | None = None
    created_by: UUID
    deployed_by: UUID | None = None
    qa_status: QAStatus
    status: ReleaseStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
