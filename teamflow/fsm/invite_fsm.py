# teamflow/fsm/invite_fsm.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from teamflow.models.invite import InviteStatus

"""Invite FSM.

  pending -> accepted   (accept, by the invitee)
  pending -> declined   (decline, by the invitee)

accepted / declined are terminal: an invite is answered exactly once.
Deleting an invite is not a transition; a manager may delete it in any state.
"""


class TransitionNotAllowed(Exception):
    pass


class Action(str, Enum):
    ACCEPT = "accept"
    DECLINE = "decline"


@dataclass(frozen=True)
class SideEffect:
    """Declarative side effects for the service layer to execute."""

    kind: str
    payload: dict[str, Any]


GRANT_MEMBERSHIP = "grant_membership"

TERMINAL = {
    InviteStatus.accepted,
    InviteStatus.declined,
}

# action -> allowed from statuses + to status
TRANSITIONS: dict[Action, tuple[set[InviteStatus], InviteStatus]] = {
    Action.ACCEPT: ({InviteStatus.pending}, InviteStatus.accepted),
    Action.DECLINE: ({InviteStatus.pending}, InviteStatus.declined),
}


def parse_action(action_raw: str | Action) -> Action:
    if isinstance(action_raw, Action):
        return action_raw
    try:
        return Action(str(action_raw).strip().lower())
    except ValueError:
        allowed = ", ".join(a.value for a in Action)
        raise TransitionNotAllowed(f"Unknown action: '{action_raw}'. Allowed actions: {allowed}")


def apply_transition(
    current: InviteStatus,
    action_raw: str | Action,
) -> tuple[InviteStatus, list[SideEffect]]:
    """Returns (new_status, side_effects).

    Side effects are executed by the service layer in the same DB transaction.
    """
    action = parse_action(action_raw)

    if current in TERMINAL:
        raise TransitionNotAllowed("Invite already responded")

    allowed_from, to_status = TRANSITIONS[action]
    if current not in allowed_from:
        allowed_from_str = ", ".join(sorted(s.value for s in allowed_from))
        raise TransitionNotAllowed(
            f"Action '{action.value}' not allowed from status '{current.value}'. "
            f"Allowed from: {allowed_from_str}."
        )

    side_effects: list[SideEffect] = []
    if action is Action.ACCEPT:
        side_effects.append(SideEffect(kind=GRANT_MEMBERSHIP, payload={}))

    return to_status, side_effects
