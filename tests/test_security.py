# tests/test_security.py
from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from jose import jwt

from teamflow.core.config import settings
from teamflow.core.errors import Unauthenticated
from teamflow.core.security import (
    authenticate,
    create_access_token,
    extract_token,
    hash_password,
    verify_access_token,
    verify_password,
)


def test_password_hash_roundtrip():
    h = hash_password("s3cret-pass")
    assert h != "s3cret-pass"
    assert verify_password("s3cret-pass", h)
    assert not verify_password("wrong", h)


def test_verify_password_with_malformed_hash():
    assert not verify_password("anything", "not-a-bcrypt-hash")


@pytest.mark.parametrize("header", ["Bearer abc.def.ghi", "bearer abc.def.ghi", "abc.def.ghi"])
def test_extract_token_strips_scheme(header):
    assert extract_token(header) == "abc.def.ghi"


@pytest.mark.parametrize("header", [None, "", "   "])
def test_extract_token_missing(header):
    with pytest.raises(Unauthenticated, match="Missing token"):
        extract_token(header)


@pytest.mark.parametrize("header", ["Basic abc", "Bearer a b"])
def test_extract_token_malformed(header):
    with pytest.raises(Unauthenticated):
        extract_token(header)


def test_access_token_roundtrip():
    uid = uuid.uuid4()
    assert verify_access_token(create_access_token(uid)) == uid
    assert authenticate(f"Bearer {create_access_token(uid)}") == uid


def test_expired_token_is_rejected():
    token = create_access_token(uuid.uuid4(), expires_delta=timedelta(seconds=-5))
    with pytest.raises(Unauthenticated):
        verify_access_token(token)


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode({"sub": str(uuid.uuid4()), "type": "access"}, "other-secret", algorithm="HS256")
    with pytest.raises(Unauthenticated):
        verify_access_token(token)


def test_token_of_other_type_is_rejected():
    token = jwt.encode(
        {"sub": str(uuid.uuid4()), "type": "refresh"},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(Unauthenticated):
        verify_access_token(token)


def test_token_with_non_uuid_subject_is_rejected():
    token = jwt.encode({"sub": "alice", "type": "access"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    with pytest.raises(Unauthenticated):
        verify_access_token(token)


def test_garbage_token_is_rejected():
    with pytest.raises(Unauthenticated):
        verify_access_token("not-a-jwt")
