# teamflow/services/membership.py
"""Membership resolution: who is the caller inside a workspace."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from teamflow.core.errors import NotAMember, WorkspaceNotFound
from teamflow.core.ids import parse_id
from teamflow.models.workspace import Workspace, WorkspaceMember


def get_workspace(db: Session, workspace_id: UUID | str) -> Workspace:
    ws_id = parse_id(workspace_id, "workspace id")
    workspace = db.get(Workspace, ws_id)
    if workspace is None:
        raise WorkspaceNotFound()
    return workspace


def find_member(workspace: Workspace, user_id: UUID | str) -> WorkspaceMember | None:
    # member lists are small; a scan over the loaded rows is enough
    uid = parse_id(user_id, "user id")
    for m in workspace.members:
        if m.user_id == uid:
            return m
    return None


def resolve_membership(
    db: Session,
    workspace_id: UUID | str,
    user_id: UUID | str,
) -> tuple[Workspace, WorkspaceMember]:
    """
    Returns (workspace, caller membership).

    Raises:
      InvalidArgument   - malformed workspace id (before any lookup)
      WorkspaceNotFound - workspace does not exist
      NotAMember        - workspace exists, caller is not in members
    """
    workspace = get_workspace(db, workspace_id)
    member = find_member(workspace, user_id)
    if member is None:
        raise NotAMember()
    return workspace, member
