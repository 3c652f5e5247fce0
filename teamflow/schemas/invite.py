# teamflow/schemas/invite.py

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from teamflow.fsm.invite_fsm import Action
from teamflow.models.invite import InviteStatus
from teamflow.models.workspace import UserRole
from teamflow.schemas.user import UserSummary
from teamflow.schemas.workspace import WorkspaceSummary


class InviteCreate(BaseModel):
    username_or_email: str = Field(min_length=1)
    role: UserRole


class InviteRespond(BaseModel):
    action: Action


class InviteRead(BaseModel):
    id: UUID
    user_id: UUID
    workspace_id: UUID
    invited_by: UUID
    role: UserRole
    status: InviteStatus
    sent_at: datetime
    accepted_at: datetime | None = None

    model_config = {"from_attributes": True}


class UserInviteRead(InviteRead):
    """Invite as seen by the invitee."""

    workspace: WorkspaceSummary | None = None
    inviter: UserSummary | None = None


class WorkspaceInviteRead(InviteRead):
    """Invite as seen by the workspace managers."""

    user: UserSummary | None = None
