# teamflow/services/hotfix_service.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from teamflow.core.errors import BugNotFound, HotfixNotFound, InvalidArgument, ReleaseNotFound
from teamflow.core.ids import parse_id
from teamflow.core.rbac import ensure_allowed
from teamflow.models.bug import Bug
from teamflow.models.hotfix import Hotfix, HotfixStatus
from teamflow.models.release import Release
from teamflow.models.workspace import WorkspaceMember
from teamflow.services.membership import resolve_membership

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "title",
    "description",
    "status",
    "fixed_date",
    "attached_commits",
    "deployment_notes",
)
_REQUIRED_FIELDS = ("title", "description", "status", "attached_commits")


class HotfixService:
    """Hotfix gatekeeper: any member may file one, only qa / manager may change or drop it."""

    def __init__(self, db: Session):
        self.db = db

    def _get_release(self, release_id: UUID | str) -> Release:
        release = self.db.get(Release, parse_id(release_id, "release id"))
        if release is None:
            raise ReleaseNotFound()
        return release

    def _get(self, hotfix_id: UUID | str) -> Hotfix:
        hotfix = self.db.get(Hotfix, parse_id(hotfix_id, "hotfix id"))
        if hotfix is None:
            raise HotfixNotFound()
        return hotfix

    def load_for_member(self, hotfix_id: UUID | str, user_id: UUID) -> tuple[Hotfix, WorkspaceMember]:
        hotfix = self._get(hotfix_id)
        release = self._get_release(hotfix.release_id)
        _, member = resolve_membership(self.db, release.workspace_id, user_id)
        return hotfix, member

    def create(
        self,
        *,
        release_id: UUID | str,
        bug_id: UUID | str,
        title: str,
        description: str,
        user_id: UUID,
        fixed_date: datetime | None = None,
        attached_commits: list[str] | None = None,
        deployment_notes: str | None = None,
    ) -> Hotfix:
        release = self._get_release(release_id)
        resolve_membership(self.db, release.workspace_id, user_id)

        bug = self.db.get(Bug, parse_id(bug_id, "bug id"))
        if bug is None:
            raise BugNotFound()
        if bug.release_id != release.id:
            raise InvalidArgument("Bug does not belong to this release")

        hotfix = Hotfix(
            title=title,
            description=description,
            bug_id=bug.id,
            release_id=release.id,
            fixed_by=user_id,
            fixed_date=fixed_date,
            status=HotfixStatus.pending,
            attached_commits=list(attached_commits or []),
            deployment_notes=deployment_notes,
        )
        self.db.add(hotfix)
        self.db.commit()
        self.db.refresh(hotfix)
        logger.info("Hotfix %s for bug %s created by %s", hotfix.id, bug.id, user_id)
        return hotfix

    def list_for_release(self, release_id: UUID | str, user_id: UUID) -> list[Hotfix]:
        release = self._get_release(release_id)
        resolve_membership(self.db, release.workspace_id, user_id)
        return list(
            self.db.execute(
                select(Hotfix)
                .where(Hotfix.release_id == release.id)
                .order_by(Hotfix.created_at.desc())
            ).scalars()
        )

    def get(self, hotfix_id: UUID | str, user_id: UUID) -> Hotfix:
        hotfix, _ = self.load_for_member(hotfix_id, user_id)
        return hotfix

    def update(self, hotfix_id: UUID | str, changes: dict[str, Any], user_id: UUID) -> Hotfix:
        hotfix, member = self.load_for_member(hotfix_id, user_id)
        ensure_allowed("hotfix.update", member.role)

        for field in _UPDATABLE_FIELDS:
            if field not in changes:
                continue
            value = changes[field]
            if value is None and field in _REQUIRED_FIELDS:
                raise InvalidArgument(f"{field} cannot be null")
            setattr(hotfix, field, value)

        self.db.commit()
        self.db.refresh(hotfix)
        logger.info("Hotfix %s updated by %s", hotfix.id, user_id)
        return hotfix

    def delete(self, hotfix_id: UUID | str, user_id: UUID) -> None:
        hotfix, member = self.load_for_member(hotfix_id, user_id)
        ensure_allowed("hotfix.delete", member.role)

        self.db.delete(hotfix)
        self.db.commit()
        logger.info("Hotfix %s deleted by %s", hotfix.id, user_id)
