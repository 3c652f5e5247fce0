# tests/test_membership.py
from __future__ import annotations

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from teamflow.core.errors import InvalidArgument, NotAMember, WorkspaceNotFound
from teamflow.models.workspace import UserRole, WorkspaceMember
from teamflow.services.membership import find_member, resolve_membership
from teamflow.services.users import workspace_ids_for_user

from tests.factories import add_member, make_user, make_workspace


def test_resolve_membership_returns_caller_record(db):
    manager = make_user(db)
    dev = make_user(db)
    ws = make_workspace(db, manager=manager, members={UserRole.developer: [dev]})

    workspace, member = resolve_membership(db, str(ws.id), dev.id)
    assert workspace.id == ws.id
    assert member.user_id == dev.id
    assert member.role == UserRole.developer
    assert member.joined_at is not None


def test_resolve_membership_non_member(db):
    ws = make_workspace(db, manager=make_user(db))
    with pytest.raises(NotAMember):
        resolve_membership(db, ws.id, make_user(db).id)


def test_resolve_membership_missing_workspace(db):
    with pytest.raises(WorkspaceNotFound):
        resolve_membership(db, uuid.uuid4(), uuid.uuid4())


@pytest.mark.parametrize("raw", ["", "not-a-uuid", "123"])
def test_resolve_membership_malformed_id_fails_before_lookup(db, raw):
    with pytest.raises(InvalidArgument):
        resolve_membership(db, raw, uuid.uuid4())


def test_find_member_accepts_string_ids(db):
    manager = make_user(db)
    ws = make_workspace(db, manager=manager)
    assert find_member(ws, str(manager.id)) is not None
    assert find_member(ws, manager.id) is not None


def test_membership_pair_is_unique(db):
    manager = make_user(db)
    ws = make_workspace(db, manager=manager)

    ws.members.append(WorkspaceMember(user_id=manager.id, role=UserRole.qa))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_user_workspaces_are_derived_from_membership(db):
    manager = make_user(db)
    user = make_user(db)
    ws1 = make_workspace(db, manager=manager)
    ws2 = make_workspace(db, manager=manager)

    assert workspace_ids_for_user(db, user.id) == []

    add_member(db, ws1, user, UserRole.qa)
    add_member(db, ws2, user, UserRole.designer)
    assert set(workspace_ids_for_user(db, user.id)) == {ws1.id, ws2.id}

    ws1.members.remove(find_member(ws1, user.id))
    db.commit()
    assert workspace_ids_for_user(db, user.id) == [ws2.id]
