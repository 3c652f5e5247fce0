# teamflow/core/rbac.py
"""
Workspace permission evaluation.

Two layers:
  - generic permission levels (MEMBER / MANAGER / SELF_OR_MANAGER) used by the
    route guard, see evaluate()
  - per-action allow-lists for resource gatekeepers, see ALLOW / ensure_allowed()

Roles are a flat enum: manager does not imply qa, and so on. Every action
lists the exact roles it accepts.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Mapping
from uuid import UUID

from teamflow.core.errors import InsufficientRole, NotAMember
from teamflow.models.workspace import UserRole

logger = logging.getLogger(__name__)


class WorkspacePermission(str, enum.Enum):
    MEMBER = "member"
    MANAGER = "manager"
    SELF_OR_MANAGER = "self_or_manager"


class DenyReason(str, enum.Enum):
    NOT_A_MEMBER = "not_a_member"
    INSUFFICIENT_ROLE = "insufficient_role"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: DenyReason | None = None
    message: str = ""

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason, message: str) -> "Decision":
        return cls(allowed=False, reason=reason, message=message)


def _as_uuid(value: UUID | str) -> UUID | None:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


def evaluate(
    required: WorkspacePermission,
    role: UserRole | None,
    caller_id: UUID,
    target_id: UUID | str | None = None,
) -> Decision:
    """
    role=None means the caller has no membership record in the workspace.
    Membership is checked first, so "not a member" wins over "insufficient role".
    """
    if role is None:
        return Decision.deny(DenyReason.NOT_A_MEMBER, "You are not a member of this workspace")
    role = UserRole(role)

    if required is WorkspacePermission.MEMBER:
        return Decision.allow()

    if required is WorkspacePermission.MANAGER:
        if role == UserRole.manager:
            return Decision.allow()
        return Decision.deny(DenyReason.INSUFFICIENT_ROLE, "You are not a manager")

    if required is WorkspacePermission.SELF_OR_MANAGER:
        if role == UserRole.manager:
            return Decision.allow()
        # canonical comparison: any accepted spelling of the caller id matches
        target = _as_uuid(target_id) if target_id is not None else None
        if target is not None and target == _as_uuid(caller_id):
            return Decision.allow()
        return Decision.deny(DenyReason.INSUFFICIENT_ROLE, "You are not authorized")

    raise ValueError(f"Unknown workspace permission: {required!r}")


def ensure_permission(
    required: WorkspacePermission,
    role: UserRole | None,
    caller_id: UUID,
    target_id: UUID | str | None = None,
) -> None:
    decision = evaluate(required, role, caller_id, target_id)
    if decision.allowed:
        return

    logger.info(
        "Workspace permission denied: required=%s role=%s caller=%s reason=%s",
        required.value,
        UserRole(role).value if role else None,
        caller_id,
        decision.reason.value if decision.reason else None,
    )
    if decision.reason is DenyReason.NOT_A_MEMBER:
        raise NotAMember(decision.message)
    raise InsufficientRole(decision.message)


# -----------------------------------------------------------------------------
# Resource gatekeepers: action -> allowed roles
# -----------------------------------------------------------------------------

_QA_OR_MANAGER = frozenset({UserRole.qa, UserRole.manager})
_MANAGER_ONLY = frozenset({UserRole.manager})

ALLOW: Mapping[str, frozenset[UserRole]] = {
    # ---- Bugs ----
    # bug.update also admits the assignee, see ensure_allowed(escape=...)
    "bug.update": _QA_OR_MANAGER,
    "bug.delete": _QA_OR_MANAGER,

    # ---- Hotfixes ----
    "hotfix.update": _QA_OR_MANAGER,
    "hotfix.delete": _QA_OR_MANAGER,

    # ---- Releases ----
    "release.create": _MANAGER_ONLY,
    "release.update": _MANAGER_ONLY,
    "release.deploy": _MANAGER_ONLY,
    "release.delete": _MANAGER_ONLY,
    "release.qa_status": _QA_OR_MANAGER,

    # ---- Invites ----
    "invite.create": _MANAGER_ONLY,
    "invite.delete": _MANAGER_ONLY,
}

# human-readable action names for error messages
_ACTION_LABELS: Mapping[str, str] = {
    "bug.update": "update this bug",
    "bug.delete": "delete bugs",
    "hotfix.update": "update hotfixes",
    "hotfix.delete": "delete hotfixes",
    "release.create": "create releases",
    "release.update": "update releases",
    "release.deploy": "deploy releases",
    "release.delete": "delete releases",
    "release.qa_status": "update QA status",
    "invite.create": "invite members",
    "invite.delete": "delete invites",
}


def is_allowed(action: str, role: UserRole, *, escape: bool = False) -> bool:
    """
    escape: action-specific predicate evaluated by the caller
    (e.g. "caller is the bug's assignee"); when true the role list is skipped.
    """
    if escape:
        return True
    return UserRole(role) in ALLOW.get(action, frozenset())


def ensure_allowed(action: str, role: UserRole, *, escape: bool = False) -> None:
    if is_allowed(action, role, escape=escape):
        return

    allowed = sorted(r.value for r in ALLOW.get(action, frozenset()))
    label = _ACTION_LABELS.get(action, action)
    logger.info("Action denied: action=%s role=%s allowed=%s", action, UserRole(role).value, allowed)
    raise InsufficientRole(f"Only {' or '.join(allowed) or 'nobody'} can {label}")
