# teamflow/schemas/bug.py

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from teamflow.models.bug import BugSeverity, BugStatus


class BugCreate(BaseModel):
    release_id: UUID
    title: str = Field(min_length=1, max_length=300)
    description: str = Field(min_length=1)
    severity: BugSeverity = BugSeverity.medium
    assigned_to: UUID | None = None
    steps_to_reproduce: str | None = None
    expected_behavior: str | None = None
    actual_behavior: str | None = None


class BugUpdate(BaseModel):
    # only fields present in the request body are applied
    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = Field(default=None, min_length=1)
    severity: BugSeverity | None = None
    status: BugStatus | None = None
    assigned_to: UUID | None = None
    steps_to_reproduce: str | None = None
    expected_behavior: str | None = None
    actual_behavior: str | None = None


class BugRead(BaseModel):
    id: UUID
    release_id: UUID
    title: str
    description: str
    severity: BugSeverity
    status: BugStatus
    reported_by: UUID
    assigned_to: UUID | None = None
    steps_to_reproduce: str | None = None
    expected_behavior: str | None = None
    actual_behavior: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
