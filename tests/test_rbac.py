# tests/test_rbac.py
"""
Permission evaluator tests (pure, no database).

- membership is checked before role
- MANAGER is an exact role match, no hierarchy
- SELF_OR_MANAGER: manager, or caller == target
- per-action allow lists for the resource gatekeepers
"""
from __future__ import annotations

import uuid

import pytest

from teamflow.core.errors import InsufficientRole, NotAMember
from teamflow.core.rbac import (
    ALLOW,
    DenyReason,
    WorkspacePermission,
    ensure_allowed,
    ensure_permission,
    evaluate,
    is_allowed,
)
from teamflow.models.workspace import UserRole

NON_MANAGERS = [UserRole.developer, UserRole.designer, UserRole.qa]


@pytest.mark.parametrize("required", list(WorkspacePermission))
def test_non_member_is_denied_for_every_level(required):
    caller = uuid.uuid4()
    # even when the target is the caller itself
    d = evaluate(required, None, caller, target_id=caller)
    assert not d.allowed
    assert d.reason is DenyReason.NOT_A_MEMBER


@pytest.mark.parametrize("role", list(UserRole))
def test_member_level_allows_every_role(role):
    assert evaluate(WorkspacePermission.MEMBER, role, uuid.uuid4()).allowed


def test_manager_level_allows_manager():
    assert evaluate(WorkspacePermission.MANAGER, UserRole.manager, uuid.uuid4()).allowed


@pytest.mark.parametrize("role", NON_MANAGERS)
def test_manager_level_denies_other_roles(role):
    d = evaluate(WorkspacePermission.MANAGER, role, uuid.uuid4())
    assert not d.allowed
    assert d.reason is DenyReason.INSUFFICIENT_ROLE


def test_role_given_as_string_is_accepted():
    assert evaluate(WorkspacePermission.MANAGER, "manager", uuid.uuid4()).allowed


@pytest.mark.parametrize("role", list(UserRole))
def test_self_or_manager_allows_self_for_any_role(role):
    caller = uuid.uuid4()
    assert evaluate(WorkspacePermission.SELF_OR_MANAGER, role, caller, target_id=caller).allowed
    # target taken from a path parameter arrives as a string
    assert evaluate(WorkspacePermission.SELF_OR_MANAGER, role, caller, target_id=str(caller)).allowed


@pytest.mark.parametrize("role", NON_MANAGERS)
def test_self_or_manager_matches_any_spelling_of_own_id(role):
    caller = uuid.uuid4()
    for spelling in (str(caller).upper(), caller.hex, f"{{{caller}}}"):
        assert evaluate(WorkspacePermission.SELF_OR_MANAGER, role, caller, target_id=spelling).allowed


@pytest.mark.parametrize("role", NON_MANAGERS)
def test_self_or_manager_denies_malformed_target(role):
    d = evaluate(WorkspacePermission.SELF_OR_MANAGER, role, uuid.uuid4(), target_id="not-a-uuid")
    assert not d.allowed
    assert d.reason is DenyReason.INSUFFICIENT_ROLE


def test_self_or_manager_allows_manager_on_other_target():
    d = evaluate(WorkspacePermission.SELF_OR_MANAGER, UserRole.manager, uuid.uuid4(), target_id=uuid.uuid4())
    assert d.allowed


@pytest.mark.parametrize("role", NON_MANAGERS)
def test_self_or_manager_denies_other_target(role):
    d = evaluate(WorkspacePermission.SELF_OR_MANAGER, role, uuid.uuid4(), target_id=uuid.uuid4())
    assert not d.allowed
    assert d.reason is DenyReason.INSUFFICIENT_ROLE


def test_self_or_manager_without_target_denies_non_manager():
    assert not evaluate(WorkspacePermission.SELF_OR_MANAGER, UserRole.qa, uuid.uuid4()).allowed


def test_ensure_permission_raises_typed_errors():
    with pytest.raises(NotAMember):
        ensure_permission(WorkspacePermission.MEMBER, None, uuid.uuid4())
    with pytest.raises(InsufficientRole):
        ensure_permission(WorkspacePermission.MANAGER, UserRole.designer, uuid.uuid4())
    ensure_permission(WorkspacePermission.MANAGER, UserRole.manager, uuid.uuid4())


# -----------------------------------------------------------------------------
# Gatekeeper allow lists
# -----------------------------------------------------------------------------


@pytest.mark.parametrize(
    "action,allowed_roles",
    [
        ("bug.update", {UserRole.qa, UserRole.manager}),
        ("bug.delete", {UserRole.qa, UserRole.manager}),
        ("hotfix.update", {UserRole.qa, UserRole.manager}),
        ("hotfix.delete", {UserRole.qa, UserRole.manager}),
        ("release.create", {UserRole.manager}),
        ("release.deploy", {UserRole.manager}),
        ("release.qa_status", {UserRole.qa, UserRole.manager}),
        ("invite.create", {UserRole.manager}),
        ("invite.delete", {UserRole.manager}),
    ],
)
def test_allow_table(action, allowed_roles):
    for role in UserRole:
        assert is_allowed(action, role) is (role in allowed_roles), (action, role)


def test_qa_actions_list_manager_explicitly():
    # no role hierarchy: manager access to qa actions comes from the table itself
    for action, roles in ALLOW.items():
        if UserRole.qa in roles:
            assert UserRole.manager in roles, action


def test_escape_predicate_skips_role_list():
    assert not is_allowed("bug.update", UserRole.designer)
    assert is_allowed("bug.update", UserRole.designer, escape=True)


def test_unknown_action_is_denied():
    assert not is_allowed("prd.delete", UserRole.manager)


def test_ensure_allowed_message_lists_roles():
    with pytest.raises(InsufficientRole) as ei:
        ensure_allowed("bug.delete", UserRole.developer)
    assert ei.value.message == "Only manager or qa can delete bugs"
    assert ei.value.status_code == 403
