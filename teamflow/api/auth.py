# teamflow/api/auth.py

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from teamflow.core.db import get_db
from teamflow.schemas.common import ApiResponse, ok
from teamflow.schemas.user import LoginRequest, RefreshRequest, SignupRequest, TokenRead, UserRead
from teamflow.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

SIGNUP_OPENAPI_EXAMPLES = {
    "basic": {
        "summary": "Sign up",
        "value": {
            "username": "alice",
            "email": "alice@example.com",
            "password": "correct-horse",
            "display_name": "Alice",
        },
    }
}

LOGIN_OPENAPI_EXAMPLES = {
    "by_username": {
        "summary": "Log in with username",
        "value": {"username_or_email": "alice", "password": "correct-horse"},
    },
    "by_email": {
        "summary": "Log in with email",
        "value": {"username_or_email": "alice@example.com", "password": "correct-horse"},
    },
}


@router.post("/signup", response_model=ApiResponse[UserRead], status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest = Body(..., openapi_examples=SIGNUP_OPENAPI_EXAMPLES),
    db: Session = Depends(get_db),
):
    user = AuthService(db).signup(
        username=body.username,
        email=body.email,
        password=body.password,
        display_name=body.display_name,
    )
    return ok(UserRead.model_validate(user), message="User created", status=201)


@router.post("/login", response_model=ApiResponse[TokenRead])
def login(
    body: LoginRequest = Body(..., openapi_examples=LOGIN_OPENAPI_EXAMPLES),
    db: Session = Depends(get_db),
):
    token = AuthService(db).login(username_or_email=body.username_or_email, password=body.password)
    return ok(TokenRead(**token), message="Logged in")


@router.post("/refresh", response_model=ApiResponse[TokenRead])
def refresh(
    body: RefreshRequest,
    db: Session = Depends(get_db),
):
    token = AuthService(db).refresh(body.refresh_token)
    return ok(TokenRead(**token), message="Token refreshed")
