# teamflow/services/workspace_service.py

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from teamflow.core.errors import Conflict, InvalidArgument, MemberNotFound
from teamflow.core.ids import parse_id
from teamflow.models.bug import Bug
from teamflow.models.hotfix import Hotfix
from teamflow.models.invite import Invite
from teamflow.models.release import Release
from teamflow.models.workspace import UserRole, Workspace, WorkspaceMember
from teamflow.services.membership import find_member
from teamflow.services.users import get_user_by_username_or_email

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class WorkspaceService:
    """Workspace CRUD. Authorization is done by the caller (route guard)."""

    def __init__(self, db: Session):
        self.db = db

    def _ensure_name_free(self, name: str, *, exclude_id: UUID | None = None) -> None:
        stmt = select(Workspace.id).where(Workspace.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Workspace.id != exclude_id)
        if self.db.execute(stmt).first() is not None:
            raise Conflict("Workspace name already taken")

    def _commit_unique_name(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise Conflict("Workspace name already taken") from e

    def create_workspace(self, *, name: str, description: str | None, created_by: UUID) -> Workspace:
        """Creator becomes the first member, with the manager role."""
        self._ensure_name_free(name)

        ws = Workspace(name=name, description=description, created_by=created_by)
        ws.members.append(
            WorkspaceMember(user_id=created_by, role=UserRole.manager, joined_at=_now())
        )
        self.db.add(ws)
        self._commit_unique_name()
        self.db.refresh(ws)

        logger.info("Workspace %s created by %s", ws.id, created_by)
        return ws

    def list_for_user(self, user_id: UUID) -> list[Workspace]:
        return list(
            self.db.execute(
                select(Workspace)
                .join(WorkspaceMember, WorkspaceMember.workspace_id == Workspace.id)
                .where(WorkspaceMember.user_id == user_id)
                .order_by(Workspace.created_at.asc())
            ).scalars()
        )

    def update_workspace(self, workspace: Workspace, changes: dict[str, Any]) -> Workspace:
        if "name" in changes and changes["name"] is None:
            raise InvalidArgument("name cannot be null")
        name = changes.get("name")
        if name is not None and name != workspace.name:
            self._ensure_name_free(name, exclude_id=workspace.id)

        for field in ("name", "description"):
            if field in changes:
                setattr(workspace, field, changes[field])

        self._commit_unique_name()
        self.db.refresh(workspace)
        return workspace

    def delete_workspace(self, workspace: Workspace, *, actor_user_id: UUID) -> None:
        release_ids = select(Release.id).where(Release.workspace_id == workspace.id)
        self.db.execute(delete(Hotfix).where(Hotfix.release_id.in_(release_ids)))
        self.db.execute(delete(Bug).where(Bug.release_id.in_(release_ids)))
        self.db.execute(delete(Release).where(Release.workspace_id == workspace.id))
        self.db.execute(delete(Invite).where(Invite.workspace_id == workspace.id))
        # members go through the ORM cascade
        self.db.delete(workspace)
        self.db.commit()
        logger.info("Workspace %s deleted by %s", workspace.id, actor_user_id)


class MemberService:
    """Direct membership management (manager-only, enforced by the route guard)."""

    def __init__(self, db: Session):
        self.db = db

    def get_member(self, workspace: Workspace, user_id: UUID | str) -> WorkspaceMember:
        member = find_member(workspace, parse_id(user_id, "user id"))
        if member is None:
            raise MemberNotFound()
        return member

    def add_member(self, workspace: Workspace, *, username_or_email: str, role: UserRole) -> WorkspaceMember:
        user = get_user_by_username_or_email(self.db, username_or_email)
        if find_member(workspace, user.id) is not None:
            raise Conflict("User is already a member of this workspace")

        member = WorkspaceMember(user_id=user.id, role=UserRole(role), joined_at=_now())
        workspace.members.append(member)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise Conflict("User is already a member of this workspace") from e

        self.db.refresh(member)
        logger.info("Member %s added to workspace %s as %s", user.id, workspace.id, member.role.value)
        return member

    def _ensure_not_last_manager(self, workspace: Workspace, member: WorkspaceMember) -> None:
        if member.role != UserRole.manager:
            return
        others = [m for m in workspace.members if m.role == UserRole.manager and m.id != member.id]
        if not others:
            raise Conflict("Workspace must keep at least one manager")

    def update_role(self, workspace: Workspace, user_id: UUID | str, role: UserRole) -> WorkspaceMember:
        member = self.get_member(workspace, user_id)
        if UserRole(role) != UserRole.manager:
            self._ensure_not_last_manager(workspace, member)
        member.role = UserRole(role)
        self.db.commit()
        self.db.refresh(member)
        logger.info("Member %s role in workspace %s set to %s", member.user_id, workspace.id, member.role.value)
        return member

    def remove_member(self, workspace: Workspace, user_id: UUID | str) -> None:
        member = self.get_member(workspace, user_id)
        self._ensure_not_last_manager(workspace, member)
        workspace.members.remove(member)
        self.db.commit()
        logger.info("Member %s removed from workspace %s", member.user_id, workspace.id)
