# teamflow/api/health.py

from fastapi import APIRouter

from teamflow.schemas.common import ApiResponse, ok

router = APIRouter()


@router.get("/health", response_model=ApiResponse[dict[str, str]])
def health():
    return ok({"status": "ok"})
