# teamflow/services/bug_service.py

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from teamflow.core.errors import BugNotFound, InvalidArgument, NotAMember, ReleaseNotFound
from teamflow.core.ids import parse_id
from teamflow.core.rbac import ensure_allowed
from teamflow.models.bug import Bug, BugSeverity, BugStatus
from teamflow.models.hotfix import Hotfix
from teamflow.models.release import Release
from teamflow.models.workspace import Workspace, WorkspaceMember
from teamflow.services.membership import find_member, resolve_membership
from teamflow.services.users import get_user

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "title",
    "description",
    "severity",
    "status",
    "assigned_to",
    "steps_to_reproduce",
    "expected_behavior",
    "actual_behavior",
)


class BugService:
    """
    Bug gatekeeper.

    Load chain: bug -> release -> workspace membership of the caller.
    update: qa / manager, or the assignee whatever their role.
    delete: qa / manager only (being the assignee does not help).
    """

    def __init__(self, db: Session):
        self.db = db

    # ---------- helpers ----------

    def _get_release(self, release_id: UUID | str) -> Release:
        release = self.db.get(Release, parse_id(release_id, "release id"))
        if release is None:
            raise ReleaseNotFound()
        return release

    def _get(self, bug_id: UUID | str) -> Bug:
        bug = self.db.get(Bug, parse_id(bug_id, "bug id"))
        if bug is None:
            raise BugNotFound()
        return bug

    def load_for_member(self, bug_id: UUID | str, user_id: UUID) -> tuple[Bug, WorkspaceMember]:
        bug = self._get(bug_id)
        release = self._get_release(bug.release_id)
        _, member = resolve_membership(self.db, release.workspace_id, user_id)
        return bug, member

    def _check_assignee(self, workspace: Workspace, assignee_id: UUID | str | None) -> UUID | None:
        if assignee_id is None:
            return None
        user = get_user(self.db, assignee_id)
        if find_member(workspace, user.id) is None:
            raise NotAMember("Assigned user is not a member of this workspace")
        return user.id

    # ---------- Public API ----------

    def create(
        self,
        *,
        release_id: UUID | str,
        title: str,
        description: str,
        severity: BugSeverity,
        user_id: UUID,
        assigned_to: UUID | str | None = None,
        steps_to_reproduce: str | None = None,
        expected_behavior: str | None = None,
        actual_behavior: str | None = None,
    ) -> Bug:
        release = self._get_release(release_id)
        workspace, _ = resolve_membership(self.db, release.workspace_id, user_id)

        bug = Bug(
            title=title,
            description=description,
            severity=BugSeverity(severity),
            status=BugStatus.open,
            release_id=release.id,
            reported_by=user_id,
            assigned_to=self._check_assignee(workspace, assigned_to),
            steps_to_reproduce=steps_to_reproduce,
            expected_behavior=expected_behavior,
            actual_behavior=actual_behavior,
        )
        self.db.add(bug)
        self.db.commit()
        self.db.refresh(bug)
        logger.info("Bug %s reported on release %s by %s", bug.id, release.id, user_id)
        return bug

    def list_for_release(self, release_id: UUID | str, user_id: UUID) -> list[Bug]:
        release = self._get_release(release_id)
        resolve_membership(self.db, release.workspace_id, user_id)
        return list(
            self.db.execute(
                select(Bug)
                .where(Bug.release_id == release.id)
                .order_by(Bug.created_at.desc())
            ).scalars()
        )

    def get(self, bug_id: UUID | str, user_id: UUID) -> Bug:
        bug, _ = self.load_for_member(bug_id, user_id)
        return bug

    def update(self, bug_id: UUID | str, changes: dict[str, Any], user_id: UUID) -> Bug:
        bug, member = self.load_for_member(bug_id, user_id)
        ensure_allowed("bug.update", member.role, escape=(bug.assigned_to == user_id))

        if "assigned_to" in changes:
            workspace = member.workspace
            changes = dict(changes)
            changes["assigned_to"] = self._check_assignee(workspace, changes["assigned_to"])

        for field in _UPDATABLE_FIELDS:
            if field not in changes:
                continue
            value = changes[field]
            if value is None and field in ("title", "description", "severity", "status"):
                raise InvalidArgument(f"{field} cannot be null")
            setattr(bug, field, value)

        self.db.commit()
        self.db.refresh(bug)
        logger.info("Bug %s updated by %s", bug.id, user_id)
        return bug

    def delete(self, bug_id: UUID | str, user_id: UUID) -> None:
        bug, member = self.load_for_member(bug_id, user_id)
        ensure_allowed("bug.delete", member.role)

        self.db.execute(delete(Hotfix).where(Hotfix.bug_id == bug.id))
        self.db.delete(bug)
        self.db.commit()
        logger.info("Bug %s deleted by %s", bug.id, user_id)
