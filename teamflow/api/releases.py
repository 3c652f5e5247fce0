# teamflow/api/releases.py

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teamflow.api.deps import WorkspaceContext, get_current_user_id, require_workspace_permission
from teamflow.core.db import get_db
from teamflow.core.rbac import WorkspacePermission
from teamflow.schemas.common import ApiResponse, ok
from teamflow.schemas.hotfix import HotfixCreate, HotfixRead
from teamflow.schemas.release import QAStatusUpdate, ReleaseCreate, ReleaseRead, ReleaseUpdate
from teamflow.services.hotfix_service import HotfixService
from teamflow.services.release_service import ReleaseService

router = APIRouter(prefix="/releases", tags=["releases"])


@router.post("", response_model=ApiResponse[ReleaseRead], status_code=status.HTTP_201_CREATED)
def create_release(
    body: ReleaseCreate,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    release = ReleaseService(db).create(
        workspace_id=body.workspace_id,
        version_tag=body.version_tag,
        description=body.description,
        planned_date=body.planned_date,
        user_id=caller_id,
    )
    return ok(ReleaseRead.model_validate(release), message="Release created", status=201)


@router.get("/workspace/{workspace_id}", response_model=ApiResponse[list[ReleaseRead]])
def list_workspace_releases(
    ctx: WorkspaceContext = Depends(require_workspace_permission(WorkspacePermission.MEMBER)),
    db: Session = Depends(get_db),
):
    items = ReleaseService(db).list_for_workspace(ctx.workspace.id)
    return ok([ReleaseRead.model_validate(r) for r in items])


@router.get("/{release_id}", response_model=ApiResponse[ReleaseRead])
def get_release(
    release_id: str,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return ok(ReleaseRead.model_validate(ReleaseService(db).get(release_id, caller_id)))


@router.put("/{release_id}", response_model=ApiResponse[ReleaseRead])
def update_release(
    release_id: str,
    body: ReleaseUpdate,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    release = ReleaseService(db).update(release_id, body.model_dump(exclude_unset=True), caller_id)
    return ok(ReleaseRead.model_validate(release), message="Release updated")


@router.put("/{release_id}/deploy", response_model=ApiResponse[ReleaseRead])
def deploy_release(
    release_id: str,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    release = ReleaseService(db).deploy(release_id, caller_id)
    return ok(ReleaseRead.model_validate(release), message="Release deployed")


@router.put("/{release_id}/qa", response_model=ApiResponse[ReleaseRead])
def update_release_qa_status(
    release_id: str,
    body: QAStatusUpdate,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    release = ReleaseService(db).update_qa_status(release_id, body.qa_status, caller_id)
    return ok(ReleaseRead.model_validate(release), message="QA status updated")


@router.delete("/{release_id}", response_model=ApiResponse[None])
def delete_release(
    release_id: str,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    ReleaseService(db).delete(release_id, caller_id)
    return ok(message="Release deleted")


@router.post(
    "/{release_id}/hotfixes",
    response_model=ApiResponse[HotfixRead],
    status_code=status.HTTP_201_CREATED,
)
def create_hotfix(
    release_id: str,
    body: HotfixCreate,
    caller_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    hotfix = HotfixService(db).create(
        release_id=release_id,
        bug_id=body.bug_id,
        title=body.title,
        description=body.description,
        user_id=caller_id,
        fixed_date=body.fixed_date,
        attached_commits=body.attached_commits,
        deployment_notes=body.deployment_notes,
    )
    return ok(HotfixRead.model_validate(hotfix), message="Hotfix created", status=201)
