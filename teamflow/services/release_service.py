# teamflow/services/release_service.py

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from teamflow.core.errors import Conflict, ReleaseNotFound, UnauthorizedAction
from teamflow.core.ids import parse_id
from teamflow.core.rbac import ensure_allowed
from teamflow.models.bug import Bug
from teamflow.models.hotfix import Hotfix
from teamflow.models.release import QAStatus, Release, ReleaseStatus
from teamflow.models.workspace import WorkspaceMember
from teamflow.services.membership import resolve_membership

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ("version_tag", "description", "planned_date")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ReleaseService:
    """
    Release gatekeeper.

    Order for every mutation: load release -> resolve caller membership in the
    owning workspace -> role check -> creator check (update/deploy/delete) -> write.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---------- helpers ----------

    def _get(self, release_id: UUID | str) -> Release:
        release = self.db.get(Release, parse_id(release_id, "release id"))
        if release is None:
            raise ReleaseNotFound()
        return release

    def load_for_member(self, release_id: UUID | str, user_id: UUID) -> tuple[Release, WorkspaceMember]:
        release = self._get(release_id)
        _, member = resolve_membership(self.db, release.workspace_id, user_id)
        return release, member

    def _ensure_creator(self, release: Release, user_id: UUID, action: str) -> None:
        # TODO: confirm with product whether any manager (not only the creator) may deploy
        if release.created_by != user_id:
            raise UnauthorizedAction(f"You can only {action} releases you created")

    # ---------- Public API ----------

    def create(
        self,
        *,
        workspace_id: UUID | str,
        version_tag: str,
        description: str,
        planned_date: datetime,
        user_id: UUID,
    ) -> Release:
        workspace, member = resolve_membership(self.db, workspace_id, user_id)
        ensure_allowed("release.create", member.role)

        release = Release(
            workspace_id=workspace.id,
            version_tag=version_tag,
            description=description,
            planned_date=planned_date,
            created_by=user_id,
            qa_status=QAStatus.pending,
            status=ReleaseStatus.planned,
        )
        self.db.add(release)
        self.db.commit()
        self.db.refresh(release)
        logger.info("Release %s (%s) created in workspace %s", release.id, version_tag, workspace.id)
        return release

    def list_for_workspace(self, workspace_id: UUID) -> list[Release]:
        return list(
            self.db.execute(
                select(Release)
                .where(Release.workspace_id == workspace_id)
                .order_by(Release.planned_date.asc())
            ).scalars()
        )

    def get(self, release_id: UUID | str, user_id: UUID) -> Release:
        release, _ = self.load_for_member(release_id, user_id)
        return release

    def update(self, release_id: UUID | str, changes: dict[str, Any], user_id: UUID) -> Release:
        release, member = self.load_for_member(release_id, user_id)
        ensure_allowed("release.update", member.role)
        self._ensure_creator(release, user_id, "update")

        for field in _UPDATABLE_FIELDS:
            if field in changes and changes[field] is not None:
                setattr(release, field, changes[field])

        self.db.commit()
        self.db.refresh(release)
        return release

    def deploy(self, release_id: UUID | str, user_id: UUID) -> Release:
        release, member = self.load_for_member(release_id, user_id)
        ensure_allowed("release.deploy", member.role)
        self._ensure_creator(release, user_id, "deploy")

        if release.status == ReleaseStatus.deployed:
            raise Conflict("Release already deployed")

        release.status = ReleaseStatus.deployed
        release.deployed_by = user_id
        release.deployed_date = _now()

        self.db.commit()
        self.db.refresh(release)
        logger.info("Release %s deployed by %s", release.id, user_id)
        return release

    def update_qa_status(self, release_id: UUID | str, qa_status: QAStatus, user_id: UUID) -> Release:
        release, member = self.load_for_member(release_id, user_id)
        ensure_allowed("release.qa_status", member.role)

        release.qa_status = QAStatus(qa_status)

        self.db.commit()
        self.db.refresh(release)
        logger.info("Release %s qa_status=%s by %s", release.id, release.qa_status.value, user_id)
        return release

    def delete(self, release_id: UUID | str, user_id: UUID) -> None:
        release, member = self.load_for_member(release_id, user_id)
        ensure_allowed("release.delete", member.role)
        self._ensure_creator(release, user_id, "delete")

        self.db.execute(delete(Hotfix).where(Hotfix.release_id == release.id))
        self.db.execute(delete(Bug).where(Bug.release_id == release.id))
        self.db.delete(release)
        self.db.commit()
        logger.info("Release %s deleted by %s", release.id, user_id)
