# tests/test_invite_service.py
"""
Invite lifecycle against a real session:
create (manager only, dedupe, not already a member) -> respond once -> delete.
"""
from __future__ import annotations

import uuid

import pytest
from sqlalchemy import select

from teamflow.core.errors import (
    Conflict,
    Forbidden,
    InvalidArgument,
    InviteNotFound,
    UserNotFound,
    WorkspaceNotFound,
)
from teamflow.models.invite import Invite, InviteStatus
from teamflow.models.workspace import UserRole, WorkspaceMember
from teamflow.services.invite_service import InviteService
from teamflow.services.membership import find_member
from teamflow.services.users import workspace_ids_for_user

from tests.factories import make_invite, make_user, make_workspace


@pytest.fixture()
def setup(db):
    manager = make_user(db, username="mgr")
    dev = make_user(db, username="dev")
    target = make_user(db, username="alice", email="alice@example.com")
    ws = make_workspace(db, manager=manager, members={UserRole.developer: [dev]})
    return manager, dev, target, ws


def _members_named(db, ws_id, user_id) -> int:
    return len(
        db.execute(
            select(WorkspaceMember).where(
                WorkspaceMember.workspace_id == ws_id,
                WorkspaceMember.user_id == user_id,
            )
        ).all()
    )


# -----------------------------------------------------------------------------
# create
# -----------------------------------------------------------------------------


def test_manager_creates_pending_invite(db, setup):
    manager, _, target, ws = setup
    invite = InviteService(db).create_invite(
        workspace_id=str(ws.id),
        username_or_email="alice@example.com",
        invited_by=manager.id,
        role=UserRole.qa,
    )
    assert invite.status == InviteStatus.pending
    assert invite.user_id == target.id
    assert invite.role == UserRole.qa
    assert invite.sent_at is not None
    assert invite.accepted_at is None


def test_create_by_username(db, setup):
    manager, _, target, ws = setup
    invite = InviteService(db).create_invite(
        workspace_id=ws.id, username_or_email="alice", invited_by=manager.id, role="developer"
    )
    assert invite.user_id == target.id


def test_non_manager_cannot_invite(db, setup):
    _, dev, _, ws = setup
    with pytest.raises(Forbidden):
        InviteService(db).create_invite(
            workspace_id=ws.id, username_or_email="alice", invited_by=dev.id, role=UserRole.qa
        )


def test_non_member_cannot_invite(db, setup):
    _, _, target, ws = setup
    with pytest.raises(Forbidden):
        InviteService(db).create_invite(
            workspace_id=ws.id, username_or_email="dev", invited_by=target.id, role=UserRole.qa
        )


def test_invite_to_missing_workspace(db, setup):
    manager, *_ = setup
    with pytest.raises(WorkspaceNotFound):
        InviteService(db).create_invite(
            workspace_id=uuid.uuid4(), username_or_email="alice", invited_by=manager.id, role=UserRole.qa
        )


def test_invite_unknown_user(db, setup):
    manager, _, _, ws = setup
    with pytest.raises(UserNotFound):
        InviteService(db).create_invite(
            workspace_id=ws.id, username_or_email="nobody", invited_by=manager.id, role=UserRole.qa
        )


def test_invite_existing_member_conflicts(db, setup):
    manager, _, _, ws = setup
    with pytest.raises(Conflict, match="already a member"):
        InviteService(db).create_invite(
            workspace_id=ws.id, username_or_email="dev", invited_by=manager.id, role=UserRole.qa
        )


def test_second_pending_invite_conflicts(db, setup):
    manager, _, _, ws = setup
    svc = InviteService(db)
    svc.create_invite(workspace_id=ws.id, username_or_email="alice", invited_by=manager.id, role=UserRole.qa)
    with pytest.raises(Conflict, match="already pending"):
        svc.create_invite(
            workspace_id=ws.id, username_or_email="alice", invited_by=manager.id, role=UserRole.developer
        )


def test_new_invite_allowed_after_decline(db, setup):
    manager, _, target, ws = setup
    svc = InviteService(db)
    first = svc.create_invite(
        workspace_id=ws.id, username_or_email="alice", invited_by=manager.id, role=UserRole.qa
    )
    svc.respond(invite_id=first.id, user_id=target.id, action="decline")

    second = svc.create_invite(
        workspace_id=ws.id, username_or_email="alice", invited_by=manager.id, role=UserRole.qa
    )
    assert second.id != first.id
    assert second.status == InviteStatus.pending


def test_new_invite_allowed_after_accept_and_leave(db, setup):
    manager, _, target, ws = setup
    svc = InviteService(db)
    first = svc.create_invite(
        workspace_id=ws.id, username_or_email="alice", invited_by=manager.id, role=UserRole.qa
    )
    svc.respond(invite_id=first.id, user_id=target.id, action="accept")

    ws.members.remove(find_member(ws, target.id))
    db.commit()

    second = svc.create_invite(
        workspace_id=ws.id, username_or_email="alice", invited_by=manager.id, role=UserRole.designer
    )
    assert second.status == InviteStatus.pending


# -----------------------------------------------------------------------------
# respond
# -----------------------------------------------------------------------------


def test_accept_adds_membership_exactly_once(db, setup):
    manager, _, target, ws = setup
    invite = make_invite(db, workspace=ws, user=target, invited_by=manager, role=UserRole.developer)

    result = InviteService(db).respond(invite_id=str(invite.id), user_id=target.id, action="accept")

    assert result.status == InviteStatus.accepted
    assert result.accepted_at is not None
    member = find_member(ws, target.id)
    assert member is not None and member.role == UserRole.developer
    assert _members_named(db, ws.id, target.id) == 1
    assert workspace_ids_for_user(db, target.id) == [ws.id]


def test_decline_changes_status_only(db, setup):
    manager, _, target, ws = setup
    invite = make_invite(db, workspace=ws, user=target, invited_by=manager)

    result = InviteService(db).respond(invite_id=invite.id, user_id=target.id, action="decline")

    assert result.status == InviteStatus.declined
    assert result.accepted_at is None
    assert find_member(ws, target.id) is None
    assert workspace_ids_for_user(db, target.id) == []


def test_accept_when_already_member_does_not_duplicate(db, setup):
    manager, dev, _, ws = setup
    # invite created before dev joined through another path
    invite = make_invite(db, workspace=ws, user=dev, invited_by=manager, role=UserRole.qa)

    InviteService(db).respond(invite_id=invite.id, user_id=dev.id, action="accept")

    assert _members_named(db, ws.id, dev.id) == 1
    # existing membership keeps its role
    assert find_member(ws, dev.id).role == UserRole.developer


def test_only_invitee_can_respond(db, setup):
    manager, dev, target, ws = setup
    invite = make_invite(db, workspace=ws, user=target, invited_by=manager)
    for other in (manager, dev):
        with pytest.raises(Forbidden, match="Not your invite"):
            InviteService(db).respond(invite_id=invite.id, user_id=other.id, action="accept")
    assert db.get(Invite, invite.id).status == InviteStatus.pending


@pytest.mark.parametrize("first", ["accept", "decline"])
@pytest.mark.parametrize("second", ["accept", "decline"])
def test_response_is_exactly_once(db, setup, first, second):
    manager, _, target, ws = setup
    invite = make_invite(db, workspace=ws, user=target, invited_by=manager)
    svc = InviteService(db)
    svc.respond(invite_id=invite.id, user_id=target.id, action=first)

    with pytest.raises(Conflict, match="already responded"):
        svc.respond(invite_id=invite.id, user_id=target.id, action=second)


def test_identity_is_checked_before_status(db, setup):
    manager, dev, target, ws = setup
    invite = make_invite(db, workspace=ws, user=target, invited_by=manager, status=InviteStatus.accepted)
    with pytest.raises(Forbidden):
        InviteService(db).respond(invite_id=invite.id, user_id=dev.id, action="decline")


def test_respond_unknown_action(db, setup):
    manager, _, target, ws = setup
    invite = make_invite(db, workspace=ws, user=target, invited_by=manager)
    with pytest.raises(InvalidArgument):
        InviteService(db).respond(invite_id=invite.id, user_id=target.id, action="ignore")


def test_respond_missing_invite(db, setup):
    _, _, target, _ = setup
    with pytest.raises(InviteNotFound):
        InviteService(db).respond(invite_id=uuid.uuid4(), user_id=target.id, action="accept")


# -----------------------------------------------------------------------------
# list / delete
# -----------------------------------------------------------------------------


def test_list_for_user_and_workspace(db, setup):
    manager, _, target, ws = setup
    other_ws = make_workspace(db, manager=manager)
    make_invite(db, workspace=ws, user=target, invited_by=manager)
    make_invite(db, workspace=other_ws, user=target, invited_by=manager)

    mine = InviteService(db).list_for_user(target.id)
    assert {i.workspace.name for i in mine} == {ws.name, other_ws.name}
    assert all(i.inviter.id == manager.id for i in mine)

    for_ws = InviteService(db).list_for_workspace(ws.id)
    assert [i.user.username for i in for_ws] == ["alice"]


@pytest.mark.parametrize("status", list(InviteStatus))
def test_manager_deletes_invite_in_any_status(db, setup, status):
    manager, _, target, ws = setup
    invite = make_invite(db, workspace=ws, user=target, invited_by=manager, status=status)

    InviteService(db).delete_invite(invite_id=invite.id, manager_id=manager.id)
    assert db.get(Invite, invite.id) is None


def test_non_manager_cannot_delete_invite(db, setup):
    manager, dev, target, ws = setup
    invite = make_invite(db, workspace=ws, user=target, invited_by=manager)
    with pytest.raises(Forbidden):
        InviteService(db).delete_invite(invite_id=invite.id, manager_id=dev.id)


def test_delete_missing_invite(db, setup):
    manager, *_ = setup
    with pytest.raises(InviteNotFound):
        InviteService(db).delete_invite(invite_id=uuid.uuid4(), manager_id=manager.id)
