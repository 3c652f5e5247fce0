# teamflow/services/auth_service.py

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import delete, exists, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from teamflow.core.errors import Conflict, InvalidArgument, Unauthenticated, UnauthorizedAction
from teamflow.core.security import (
    create_access_token,
    hash_password,
    hash_refresh_token,
    new_refresh_token,
    refresh_token_expiry,
    verify_password,
)
from teamflow.models.bug import Bug
from teamflow.models.hotfix import Hotfix
from teamflow.models.invite import Invite
from teamflow.models.refresh_token import RefreshToken
from teamflow.models.release import Release
from teamflow.models.user import User
from teamflow.models.workspace import UserRole, Workspace, WorkspaceMember
from teamflow.services.users import find_by_username_or_email, get_user

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def _ensure_unique(self, *, username: str | None, email: str | None, exclude_id: UUID | None = None) -> None:
        conds = []
        if username is not None:
            conds.append(User.username == username)
        if email is not None:
            conds.append(User.email == email)
        if not conds:
            return
        stmt = select(User.id).where(or_(*conds))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        if self.db.execute(stmt).first() is not None:
            raise Conflict("Username or email already in use")

    def _commit_unique(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise Conflict("Username or email already in use") from e

    def signup(self, *, username: str, email: str, password: str, display_name: str) -> User:
        username = username.strip()
        email = email.strip().lower()
        self._ensure_unique(username=username, email=email)

        user = User(
            username=username,
            email=email,
            display_name=display_name,
            password_hash=hash_password(password),
        )
        self.db.add(user)
        self._commit_unique()
        self.db.refresh(user)
        logger.info("User %s signed up", user.id)
        return user

    def login(self, *, username_or_email: str, password: str) -> dict[str, Any]:
        user = find_by_username_or_email(self.db, username_or_email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Login failed")
            raise InvalidArgument("Invalid credentials")

        return {
            "access_token": create_access_token(user.id),
            "refresh_token": self._issue_refresh_token(user.id),
            "token_type": "bearer",
            "user_id": user.id,
        }

    def _issue_refresh_token(self, user_id: UUID) -> str:
        token = new_refresh_token()
        row = self.db.execute(
            select(RefreshToken).where(RefreshToken.user_id == user_id)
        ).scalar_one_or_none()
        if row is None:
            row = RefreshToken(user_id=user_id)
            self.db.add(row)
        row.token_hash = hash_refresh_token(token)
        row.expires_at = refresh_token_expiry()
        self.db.commit()
        return token

    def refresh(self, refresh_token: str) -> dict[str, Any]:
        """New access token for a live refresh token; the refresh token itself is kept."""
        row = self.db.execute(
            select(RefreshToken).where(
                RefreshToken.token_hash == hash_refresh_token(refresh_token),
                RefreshToken.expires_at >= datetime.now(timezone.utc),
            )
        ).scalar_one_or_none()
        if row is None:
            logger.info("Refresh rejected")
            raise Unauthenticated("Refresh token is invalid or expired")

        return {
            "access_token": create_access_token(row.user_id),
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "user_id": row.user_id,
        }

    def update_profile(self, user_id: UUID | str, changes: dict[str, Any], caller_id: UUID) -> User:
        user = get_user(self.db, user_id)
        if user.id != caller_id:
            raise UnauthorizedAction("You can only update your own profile")

        email = changes.get("email")
        if email is not None:
            email = email.strip().lower()
            self._ensure_unique(username=None, email=email, exclude_id=user.id)
            user.email = email
        if changes.get("display_name") is not None:
            user.display_name = changes["display_name"]

        self._commit_unique()
        self.db.refresh(user)
        return user

    def _owns_records(self, user_id: UUID) -> bool:
        return bool(self.db.execute(
            select(
                or_(
                    exists().where(Workspace.created_by == user_id),
                    exists().where(or_(Release.created_by == user_id, Release.deployed_by == user_id)),
                    exists().where(Bug.reported_by == user_id),
                    exists().where(Hotfix.fixed_by == user_id),
                )
            )
        ).scalar())

    def _is_sole_manager(self, user_id: UUID) -> bool:
        managed = self.db.execute(
            select(WorkspaceMember.workspace_id).where(
                WorkspaceMember.user_id == user_id,
                WorkspaceMember.role == UserRole.manager,
            )
        ).scalars()
        for workspace_id in list(managed):
            managers = self.db.execute(
                select(func.count())
                .select_from(WorkspaceMember)
                .where(
                    WorkspaceMember.workspace_id == workspace_id,
                    WorkspaceMember.role == UserRole.manager,
                )
            ).scalar_one()
            if managers == 1:
                return True
        return False

    def delete_user(self, user_id: UUID | str, caller_id: UUID) -> None:
        """
        Self only. Memberships, invites (sent or received) and the refresh token
        go with the user; workspaces and release records they authored do not,
        so the delete is refused while any of those remain.
        """
        uid = get_user(self.db, user_id).id
        if uid != caller_id:
            raise UnauthorizedAction("You can only delete your own account")
        if self._owns_records(uid):
            raise Conflict("User still owns workspaces, releases, bugs or hotfixes")
        if self._is_sole_manager(uid):
            raise Conflict("Workspace must keep at least one manager")

        self.db.execute(delete(WorkspaceMember).where(WorkspaceMember.user_id == uid))
        self.db.execute(delete(Invite).where(or_(Invite.user_id == uid, Invite.invited_by == uid)))
        self.db.execute(delete(RefreshToken).where(RefreshToken.user_id == uid))
        self.db.execute(delete(User).where(User.id == uid))
        self.db.commit()
        # loaded workspace member lists still hold the removed rows
        self.db.expire_all()
        logger.info("User %s deleted", uid)
