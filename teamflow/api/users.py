# teamflow/api/users.py

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from teamflow.api.deps import get_current_user_id
from teamflow.core.db import get_db
from teamflow.schemas.common import ApiResponse, ok
from teamflow.schemas.user import UserMeRead, UserRead, UserUpdate
from teamflow.services.auth_service import AuthService
from teamflow.services.users import get_user, workspace_ids_for_user

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=ApiResponse[UserMeRead])
def get_me(
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    user = get_user(db, caller_id)
    data = UserMeRead.model_validate(user)
    data.workspaces = workspace_ids_for_user(db, user.id)
    return ok(data)


@router.get("/{user_id}", response_model=ApiResponse[UserRead])
def get_user_profile(
    user_id: str,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return ok(UserRead.model_validate(get_user(db, user_id)))


@router.patch("/{user_id}", response_model=ApiResponse[UserRead])
def update_user(
    user_id: str,
    body: UserUpdate,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    user = AuthService(db).update_profile(user_id, body.model_dump(exclude_unset=True), caller_id)
    return ok(UserRead.model_validate(user), message="User updated")


@router.delete("/{user_id}", response_model=ApiResponse[None])
def delete_user(
    user_id: str,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    AuthService(db).delete_user(user_id, caller_id)
    return ok(message="User deleted")
