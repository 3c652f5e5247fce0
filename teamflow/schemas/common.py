# teamflow/schemas/common.py

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ApiError(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    error: str
    status_code: int = Field(alias="statusCode")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform envelope for every response, success or failure."""

    success: bool = True
    status: int = 200
    message: str = "OK"
    data: T | None = None
    error: ApiError | None = None


def ok(data: Any = None, *, message: str = "OK", status: int = 200) -> ApiResponse:
    return ApiResponse(success=True, status=status, message=message, data=data)


def error_body(status: int, code: str, message: str) -> dict[str, Any]:
    return {
        "success": False,
        "status": status,
        "message": message,
        "data": None,
        "error": {"message": message, "error": code, "statusCode": status},
    }
