# teamflow/api/bugs.py

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teamflow.api.deps import get_current_user_id
from teamflow.core.db import get_db
from teamflow.schemas.bug import BugCreate, BugRead, BugUpdate
from teamflow.schemas.common import ApiResponse, ok
from teamflow.services.bug_service import BugService

router = APIRouter(prefix="/bugs", tags=["bugs"])


@router.post("", response_model=ApiResponse[BugRead], status_code=status.HTTP_201_CREATED)
def create_bug(
    body: BugCreate,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    bug = BugService(db).create(
        release_id=body.release_id,
        title=body.title,
        description=body.description,
        severity=body.severity,
        user_id=caller_id,
        assigned_to=body.assigned_to,
        steps_to_reproduce=body.steps_to_reproduce,
        expected_behavior=body.expected_behavior,
        actual_behavior=body.actual_behavior,
    )
    return ok(BugRead.model_validate(bug), message="Bug reported", status=201)


@router.get("/release/{release_id}", response_model=ApiResponse[list[BugRead]])
def list_release_bugs(
    release_id: str,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    items = BugService(db).list_for_release(release_id, caller_id)
    return ok([BugRead.model_validate(b) for b in items])


@router.get("/{bug_id}", response_model=ApiResponse[BugRead])
def get_bug(
    bug_id: str,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return ok(BugRead.model_validate(BugService(db).get(bug_id, caller_id)))


@router.patch("/{bug_id}", response_model=ApiResponse[BugRead])
def update_bug(
    bug_id: str,
    body: BugUpdate,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    bug = BugService(db).update(bug_id, body.model_dump(exclude_unset=True), caller_id)
    return ok(BugRead.model_validate(bug), message="Bug updated")


@router.delete("/{bug_id}", response_model=ApiResponse[None])
def delete_bug(
    bug_id: str,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    BugService(db).delete(bug_id, caller_id)
    return ok(message="Bug deleted")
