# tests/test_invite_fsm.py
from __future__ import annotations

import pytest

from teamflow.fsm.invite_fsm import (
    GRANT_MEMBERSHIP,
    Action,
    TransitionNotAllowed,
    apply_transition,
    parse_action,
)
from teamflow.models.invite import InviteStatus


def test_accept_from_pending_grants_membership():
    to_status, effects = apply_transition(InviteStatus.pending, Action.ACCEPT)
    assert to_status == InviteStatus.accepted
    assert [e.kind for e in effects] == [GRANT_MEMBERSHIP]


def test_decline_from_pending_has_no_side_effects():
    to_status, effects = apply_transition(InviteStatus.pending, "decline")
    assert to_status == InviteStatus.declined
    assert effects == []


@pytest.mark.parametrize("current", [InviteStatus.accepted, InviteStatus.declined])
@pytest.mark.parametrize("action", list(Action))
def test_terminal_states_reject_every_action(current, action):
    with pytest.raises(TransitionNotAllowed, match="already responded"):
        apply_transition(current, action)


@pytest.mark.parametrize("raw", ["accept", " ACCEPT ", "Decline"])
def test_parse_action_normalizes(raw):
    assert parse_action(raw) in set(Action)


def test_parse_action_rejects_unknown():
    with pytest.raises(TransitionNotAllowed, match="Unknown action"):
        parse_action("maybe")
