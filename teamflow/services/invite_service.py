# teamflow/services/invite_service.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from teamflow.core.errors import Conflict, Forbidden, InvalidArgument, InviteNotFound, WorkspaceNotFound
from teamflow.core.ids import parse_id
from teamflow.core.rbac import is_allowed
from teamflow.fsm.invite_fsm import GRANT_MEMBERSHIP, Action, TransitionNotAllowed, apply_transition, parse_action
from teamflow.models.invite import Invite, InviteStatus
from teamflow.models.workspace import UserRole, Workspace, WorkspaceMember
from teamflow.services.membership import find_member, get_workspace
from teamflow.services.users import get_user_by_username_or_email

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InviteService:
    """
    Invite lifecycle: create (manager) -> respond (invitee, exactly once) | delete (manager).

    Acceptance writes the invite status and the membership row in one
    transaction; "user's workspaces" is derived from the membership table, so
    there is no second document to keep in sync.
    """

    def __init__(self, db: Session):
        self.db = db

    def _is_manager(self, workspace: Workspace, user_id: UUID | str, action: str) -> bool:
        member = find_member(workspace, user_id)
        return member is not None and is_allowed(action, member.role)

    def create_invite(
        self,
        *,
        workspace_id: UUID | str,
        username_or_email: str,
        invited_by: UUID,
        role: UserRole,
    ) -> Invite:
        workspace = get_workspace(self.db, workspace_id)

        if not self._is_manager(workspace, invited_by, "invite.create"):
            raise Forbidden("Only manager can invite")

        user = get_user_by_username_or_email(self.db, username_or_email)

        if find_member(workspace, user.id) is not None:
            raise Conflict("User is already a member")

        pending = self.db.execute(
            select(Invite).where(
                Invite.user_id == user.id,
                Invite.workspace_id == workspace.id,
                Invite.status == InviteStatus.pending,
            )
        ).scalar_one_or_none()
        if pending is not None:
            raise Conflict("Invite already pending")

        invite = Invite(
            user_id=user.id,
            workspace_id=workspace.id,
            invited_by=invited_by,
            role=UserRole(role),
            status=InviteStatus.pending,
            sent_at=_now(),
        )
        self.db.add(invite)
        try:
            self.db.commit()
        except IntegrityError as e:
            # partial unique index: a concurrent request created the pending invite first
            self.db.rollback()
            raise Conflict("Invite already pending") from e

        self.db.refresh(invite)
        logger.info(
            "Invite %s created: workspace=%s user=%s role=%s by=%s",
            invite.id, workspace.id, user.id, invite.role.value, invited_by,
        )
        return invite

    def respond(self, *, invite_id: UUID | str, user_id: UUID, action: Action | str) -> Invite:
        try:
            action = parse_action(action)
        except TransitionNotAllowed as e:
            raise InvalidArgument(str(e)) from e

        invite = self.db.get(Invite, parse_id(invite_id, "invite id"))
        if invite is None:
            raise InviteNotFound()

        if invite.user_id != user_id:
            raise Forbidden("Not your invite")

        try:
            to_status, side_effects = apply_transition(invite.status, action)
        except TransitionNotAllowed as e:
            raise Conflict(str(e)) from e

        invite.status = to_status

        for eff in side_effects:
            if eff.kind == GRANT_MEMBERSHIP:
                invite.accepted_at = _now()
                self._grant_membership(invite)

        try:
            self.db.commit()
        except IntegrityError as e:
            # concurrent accept/add inserted the same (workspace, user) row
            self.db.rollback()
            raise Conflict("User is already a member") from e

        self.db.refresh(invite)
        logger.info("Invite %s %s by %s", invite.id, invite.status.value, user_id)
        return invite

    def _grant_membership(self, invite: Invite) -> None:
        workspace = self.db.get(Workspace, invite.workspace_id)
        if workspace is None:
            raise WorkspaceNotFound()

        # never duplicate a membership row
        if find_member(workspace, invite.user_id) is not None:
            return

        workspace.members.append(
            WorkspaceMember(
                workspace_id=workspace.id,
                user_id=invite.user_id,
                role=invite.role,
                joined_at=_now(),
            )
        )

    def list_for_user(self, user_id: UUID) -> list[Invite]:
        return list(
            self.db.execute(
                select(Invite)
                .where(Invite.user_id == user_id)
                .options(selectinload(Invite.workspace), selectinload(Invite.inviter))
                .order_by(Invite.sent_at.desc())
            ).scalars()
        )

    def list_for_workspace(self, workspace_id: UUID | str) -> list[Invite]:
        ws_id = parse_id(workspace_id, "workspace id")
        return list(
            self.db.execute(
                select(Invite)
                .where(Invite.workspace_id == ws_id)
                .options(selectinload(Invite.user))
                .order_by(Invite.sent_at.desc())
            ).scalars()
        )

    def delete_invite(self, *, invite_id: UUID | str, manager_id: UUID) -> None:
        invite = self.db.get(Invite, parse_id(invite_id, "invite id"))
        if invite is None:
            raise InviteNotFound()

        workspace = self.db.get(Workspace, invite.workspace_id)
        if workspace is None:
            raise WorkspaceNotFound()

        if not self._is_manager(workspace, manager_id, "invite.delete"):
            raise Forbidden("Only manager can delete invites")

        # any status: pending invites are revoked, answered ones are just history
        self.db.delete(invite)
        self.db.commit()
        logger.info("Invite %s deleted by %s", invite.id, manager_id)
