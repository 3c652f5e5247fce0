# teamflow/services/users.py
from __future__ import annotations

from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from teamflow.core.errors import UserNotFound
from teamflow.core.ids import parse_id
from teamflow.models.user import User
from teamflow.models.workspace import WorkspaceMember


def find_by_username_or_email(db: Session, username_or_email: str) -> User | None:
    login = (username_or_email or "").strip()
    if not login:
        return None
    return db.execute(
        select(User).where(or_(User.username == login, User.email == login.lower()))
    ).scalar_one_or_none()


def get_user_by_username_or_email(db: Session, username_or_email: str) -> User:
    user = find_by_username_or_email(db, username_or_email)
    if user is None:
        raise UserNotFound()
    return user


def get_user(db: Session, user_id: UUID | str) -> User:
    user = db.get(User, parse_id(user_id, "user id"))
    if user is None:
        raise UserNotFound()
    return user


def workspace_ids_for_user(db: Session, user_id: UUID) -> list[UUID]:
    """User's workspaces, derived from the membership table."""
    return list(
        db.execute(
            select(WorkspaceMember.workspace_id)
            .where(WorkspaceMember.user_id == user_id)
            .order_by(WorkspaceMember.joined_at.asc())
        ).scalars()
    )
