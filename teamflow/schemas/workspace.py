# teamflow/schemas/workspace.py

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from teamflow.models.workspace import UserRole
from teamflow.schemas.user import UserSummary


class WorkspaceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None


class WorkspaceUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None


class WorkspaceSummary(BaseModel):
    id: UUID
    name: str
    description: str | None = None

    model_config = {"from_attributes": True}


class WorkspaceRead(WorkspaceSummary):
    created_by: UUID
    created_at: datetime
    updated_at: datetime


class MemberRead(BaseModel):
    user_id: UUID
    role: UserRole
    joined_at: datetime
    user: UserSummary | None = None

    model_config = {"from_attributes": True}


class MemberAdd(BaseModel):
    username_or_email: str = Field(min_length=1)
    role: UserRole


class MemberRoleUpdate(BaseModel):
    role: UserRole
