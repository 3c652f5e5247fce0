# teamflow/api/invites.py

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from teamflow.api.deps import WorkspaceContext, get_current_user_id, require_workspace_permission
from teamflow.core.db import get_db
from teamflow.core.rbac import WorkspacePermission
from teamflow.schemas.common import ApiResponse, ok
from teamflow.schemas.invite import (
    InviteCreate,
    InviteRead,
    InviteRespond,
    UserInviteRead,
    WorkspaceInviteRead,
)
from teamflow.services.invite_service import InviteService

router = APIRouter(prefix="/invites", tags=["invites"])

INVITE_RESPOND_OPENAPI_EXAMPLES = {
    "accept": {
        "summary": "Accept invite",
        "description": "Invitee joins the workspace with the role recorded on the invite.",
        "value": {"action": "accept"},
    },
    "decline": {
        "summary": "Decline invite",
        "value": {"action": "decline"},
    },
}


# literal paths first so they are not captured by /{workspace_id}


@router.get("/user", response_model=ApiResponse[list[UserInviteRead]])
def list_my_invites(
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    items = InviteService(db).list_for_user(caller_id)
    return ok([UserInviteRead.model_validate(i) for i in items])


@router.get("/workspace/{workspace_id}", response_model=ApiResponse[list[WorkspaceInviteRead]])
def list_workspace_invites(
    ctx: WorkspaceContext = Depends(require_workspace_permission(WorkspacePermission.MANAGER)),
    db: Session = Depends(get_db),
):
    items = InviteService(db).list_for_workspace(ctx.workspace.id)
    return ok([WorkspaceInviteRead.model_validate(i) for i in items])


@router.patch("/respond/{invite_id}", response_model=ApiResponse[InviteRead])
def respond_to_invite(
    invite_id: str,
    body: InviteRespond = Body(..., openapi_examples=INVITE_RESPOND_OPENAPI_EXAMPLES),
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    invite = InviteService(db).respond(invite_id=invite_id, user_id=caller_id, action=body.action)
    return ok(InviteRead.model_validate(invite), message=f"Invite {invite.status.value}")


@router.post("/{workspace_id}", response_model=ApiResponse[InviteRead], status_code=status.HTTP_201_CREATED)
def create_invite(
    workspace_id: str,
    body: InviteCreate,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    invite = InviteService(db).create_invite(
        workspace_id=workspace_id,
        username_or_email=body.username_or_email,
        invited_by=caller_id,
        role=body.role,
    )
    return ok(InviteRead.model_validate(invite), message="Invite sent", status=201)


@router.delete("/{invite_id}", response_model=ApiResponse[None])
def delete_invite(
    invite_id: str,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    InviteService(db).delete_invite(invite_id=invite_id, manager_id=caller_id)
    return ok(message="Invite deleted")
