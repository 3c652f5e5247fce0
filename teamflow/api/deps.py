# teamflow/api/deps.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable
from uuid import UUID

from fastapi import Depends, Header, Path, Request
from sqlalchemy.orm import Session

from teamflow.core.db import get_db
from teamflow.core.rbac import WorkspacePermission, ensure_permission
from teamflow.core.security import authenticate
from teamflow.models.workspace import Workspace, WorkspaceMember
from teamflow.services.membership import find_member, get_workspace


# -----------------------------------------------------------------------------
# Authentication
# -----------------------------------------------------------------------------


def get_current_user_id(
    request: Request,
    authorization: str | None = Header(
        default=None,
        alias="Authorization",
        description="Access token, `Bearer <token>` or the bare token.",
        include_in_schema=False,
    ),
) -> UUID:
    """Verify the access token and put the caller id on the request state."""
    user_id = authenticate(authorization)
    request.state.user_id = user_id
    return user_id


# -----------------------------------------------------------------------------
# Workspace guard
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class WorkspaceContext:
    workspace: Workspace
    member: WorkspaceMember
    user_id: UUID


def require_workspace_permission(
    permission: WorkspacePermission,
    *,
    target_user_param: str | None = None,
) -> Callable[..., WorkspaceContext]:
    """
    Route guard for /{workspace_id}/... endpoints.

    target_user_param names the path parameter compared with the caller for
    SELF_OR_MANAGER.
    """

    def dependency(
        request: Request,
        workspace_id: str = Path(..., description="Workspace id (UUID)"),
        caller_id: UUID = Depends(get_current_user_id),
        db: Session = Depends(get_db),
    ) -> WorkspaceContext:
        workspace = get_workspace(db, workspace_id)
        member = find_member(workspace, caller_id)

        target_id = request.path_params.get(target_user_param) if target_user_param else None
        ensure_permission(permission, member.role if member else None, caller_id, target_id)

        return WorkspaceContext(workspace=workspace, member=member, user_id=caller_id)

    return dependency
