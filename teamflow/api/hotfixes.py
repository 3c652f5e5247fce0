# teamflow/api/hotfixes.py

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from teamflow.api.deps import get_current_user_id
from teamflow.core.db import get_db
from teamflow.schemas.common import ApiResponse, ok
from teamflow.schemas.hotfix import HotfixRead, HotfixUpdate
from teamflow.services.hotfix_service import HotfixService

# creation lives under /releases/{release_id}/hotfixes
router = APIRouter(prefix="/hotfixes", tags=["hotfixes"])


@router.get("/release/{release_id}", response_model=ApiResponse[list[HotfixRead]])
def list_release_hotfixes(
    release_id: str,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    items = HotfixService(db).list_for_release(release_id, caller_id)
    return ok([HotfixRead.model_validate(h) for h in items])


@router.get("/{hotfix_id}", response_model=ApiResponse[HotfixRead])
def get_hotfix(
    hotfix_id: str,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return ok(HotfixRead.model_validate(HotfixService(db).get(hotfix_id, caller_id)))


@router.patch("/{hotfix_id}", response_model=ApiResponse[HotfixRead])
def update_hotfix(
    hotfix_id: str,
    body: HotfixUpdate,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    hotfix = HotfixService(db).update(hotfix_id, body.model_dump(exclude_unset=True), caller_id)
    return ok(HotfixRead.model_validate(hotfix), message="Hotfix updated")


@router.delete("/{hotfix_id}", response_model=ApiResponse[None])
def delete_hotfix(
    hotfix_id: str,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    HotfixService(db).delete(hotfix_id, caller_id)
    return ok(message="Hotfix deleted")
