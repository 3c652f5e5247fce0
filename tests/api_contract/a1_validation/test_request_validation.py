from __future__ import annotations

import pytest

from tests.factories import auth_headers, make_user, make_workspace


def _code(r) -> str:
    return r.json()["error"]["error"]


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/workspaces/not-a-uuid"),
        ("get", "/workspaces/not-a-uuid/members"),
        ("get", "/releases/not-a-uuid"),
        ("get", "/releases/workspace/not-a-uuid"),
        ("get", "/bugs/not-a-uuid"),
        ("get", "/bugs/release/not-a-uuid"),
        ("get", "/hotfixes/not-a-uuid"),
        ("get", "/users/not-a-uuid"),
        ("delete", "/invites/not-a-uuid"),
        ("delete", "/users/not-a-uuid"),
    ],
)
def test_malformed_path_id_is_400_invalid_argument(client, db, method, path):
    """Malformed ids fail with INVALID_ARGUMENT before any lookup, never 422/500."""
    user = make_user(db)
    r = getattr(client, method)(path, headers=auth_headers(user))
    assert r.status_code == 400, r.text
    assert _code(r) == "INVALID_ARGUMENT"


def test_invalid_role_is_validation_error(client, db):
    manager = make_user(db)
    ws = make_workspace(db, manager=manager)
    r = client.post(
        f"/workspaces/{ws.id}/members",
        json={"username_or_email": "anyone", "role": "owner"},
        headers=auth_headers(manager),
    )
    assert r.status_code == 400, r.text
    body = r.json()
    assert body["success"] is False
    assert body["error"]["error"] == "VALIDATION_ERROR"
    assert "role" in body["message"]


def test_invalid_invite_action_is_validation_error(client, db):
    user = make_user(db)
    r = client.patch(
        "/invites/respond/00000000-0000-0000-0000-000000000000",
        json={"action": "maybe"},
        headers=auth_headers(user),
    )
    assert r.status_code == 400
    assert _code(r) == "VALIDATION_ERROR"


def test_missing_body_fields(client, db):
    user = make_user(db)
    r = client.post("/workspaces", json={}, headers=auth_headers(user))
    assert r.status_code == 400
    assert _code(r) == "VALIDATION_ERROR"

    r = client.post("/auth/refresh", json={})
    assert r.status_code == 400
    assert _code(r) == "VALIDATION_ERROR"
