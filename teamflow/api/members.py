# teamflow/api/members.py

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teamflow.api.deps import WorkspaceContext, require_workspace_permission
from teamflow.core.db import get_db
from teamflow.core.rbac import WorkspacePermission
from teamflow.schemas.common import ApiResponse, ok
from teamflow.schemas.workspace import MemberAdd, MemberRead, MemberRoleUpdate
from teamflow.services.workspace_service import MemberService

router = APIRouter(prefix="/workspaces/{workspace_id}/members", tags=["members"])

# SELF_OR_MANAGER compares the caller with this path parameter
TARGET = "user_id"


@router.get("", response_model=ApiResponse[list[MemberRead]])
def list_members(
    ctx: WorkspaceContext = Depends(require_workspace_permission(WorkspacePermission.MEMBER)),
):
    return ok([MemberRead.model_validate(m) for m in ctx.workspace.members])


@router.get("/{user_id}", response_model=ApiResponse[MemberRead])
def get_member(
    user_id: str,
    ctx: WorkspaceContext = Depends(
        require_workspace_permission(WorkspacePermission.SELF_OR_MANAGER, target_user_param=TARGET)
    ),
    db: Session = Depends(get_db),
):
    member = MemberService(db).get_member(ctx.workspace, user_id)
    return ok(MemberRead.model_validate(member))


@router.post("", response_model=ApiResponse[MemberRead], status_code=status.HTTP_201_CREATED)
def add_member(
    body: MemberAdd,
    ctx: WorkspaceContext = Depends(require_workspace_permission(WorkspacePermission.MANAGER)),
    db: Session = Depends(get_db),
):
    member = MemberService(db).add_member(
        ctx.workspace,
        username_or_email=body.username_or_email,
        role=body.role,
    )
    return ok(MemberRead.model_validate(member), message="Member added", status=201)


@router.patch("/{user_id}", response_model=ApiResponse[MemberRead])
def update_member_role(
    user_id: str,
    body: MemberRoleUpdate,
    ctx: WorkspaceContext = Depends(require_workspace_permission(WorkspacePermission.MANAGER)),
    db: Session = Depends(get_db),
):
    member = MemberService(db).update_role(ctx.workspace, user_id, body.role)
    return ok(MemberRead.model_validate(member), message="Member role updated")


@router.delete("/{user_id}", response_model=ApiResponse[None])
def remove_member(
    user_id: str,
    ctx: WorkspaceContext = Depends(require_workspace_permission(WorkspacePermission.MANAGER)),
    db: Session = Depends(get_db),
):
    MemberService(db).remove_member(ctx.workspace, user_id)
    return ok(message="Member removed")
