# teamflow/api/workspaces.py

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teamflow.api.deps import WorkspaceContext, get_current_user_id, require_workspace_permission
from teamflow.core.db import get_db
from teamflow.core.rbac import WorkspacePermission
from teamflow.schemas.common import ApiResponse, ok
from teamflow.schemas.workspace import WorkspaceCreate, WorkspaceRead, WorkspaceUpdate
from teamflow.services.workspace_service import WorkspaceService

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


@router.post("", response_model=ApiResponse[WorkspaceRead], status_code=status.HTTP_201_CREATED)
def create_workspace(
    body: WorkspaceCreate,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    ws = WorkspaceService(db).create_workspace(
        name=body.name,
        description=body.description,
        created_by=caller_id,
    )
    return ok(WorkspaceRead.model_validate(ws), message="Workspace created", status=201)


@router.get("", response_model=ApiResponse[list[WorkspaceRead]])
def list_my_workspaces(
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    items = WorkspaceService(db).list_for_user(caller_id)
    return ok([WorkspaceRead.model_validate(ws) for ws in items])


@router.get("/{workspace_id}", response_model=ApiResponse[WorkspaceRead])
def get_workspace(
    ctx: WorkspaceContext = Depends(require_workspace_permission(WorkspacePermission.MEMBER)),
):
    return ok(WorkspaceRead.model_validate(ctx.workspace))


@router.patch("/{workspace_id}", response_model=ApiResponse[WorkspaceRead])
def update_workspace(
    body: WorkspaceUpdate,
    ctx: WorkspaceContext = Depends(require_workspace_permission(WorkspacePermission.MANAGER)),
    db: Session = Depends(get_db),
):
    ws = WorkspaceService(db).update_workspace(ctx.workspace, body.model_dump(exclude_unset=True))
    return ok(WorkspaceRead.model_validate(ws), message="Workspace updated")


@router.delete("/{workspace_id}", response_model=ApiResponse[None])
def delete_workspace(
    ctx: WorkspaceContext = Depends(require_workspace_permission(WorkspacePermission.MANAGER)),
    db: Session = Depends(get_db),
):
    WorkspaceService(db).delete_workspace(ctx.workspace, actor_user_id=ctx.user_id)
    return ok(message="Workspace deleted")
