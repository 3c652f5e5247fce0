# teamflow/schemas/hotfix.py

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from teamflow.models.hotfix import HotfixStatus


class HotfixCreate(BaseModel):
    bug_id: UUID
    title: str = Field(min_length=1, max_length=300)
    description: str = Field(min_length=1)
    fixed_date: datetime | None = None
    attached_commits: list[str] = []
    deployment_notes: str | None = None


class HotfixUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = Field(default=None, min_length=1)
    status: HotfixStatus | None = None
    fixed_date: datetime | None = None
    attached_commits: list[str] | None = None
    deployment_notes: str | None = None


class HotfixRead(BaseModel):
    id: UUID
    release_id: UUID
    bug_id: UUID
    title: str
    description: str
    status: HotfixStatus
    fixed_by: UUID
    fixed_date: datetime | None = None
    attached_commits: list[str] = []
    deployment_notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
