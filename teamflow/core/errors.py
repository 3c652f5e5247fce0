# teamflow/core/errors.py
"""Domain error taxonomy.

Every error carries the HTTP status and machine-readable code it is rendered
with by the API error handlers. Services raise these directly; nothing in the
core catches them.
"""
from __future__ import annotations


class DomainError(Exception):
    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ---- 401 ----

class Unauthenticated(DomainError):
    status_code = 401
    error_code = "UNAUTHENTICATED"
    default_message = "Invalid token"


# ---- 400 ----

class InvalidArgument(DomainError):
    status_code = 400
    error_code = "INVALID_ARGUMENT"
    default_message = "Invalid argument"


class Conflict(DomainError):
    """Invariant violation on write (duplicate invite, already a member, ...)."""

    status_code = 400
    error_code = "CONFLICT"
    default_message = "Conflict"


# ---- 404 ----

class NotFound(DomainError):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "Not found"


class WorkspaceNotFound(NotFound):
    error_code = "WORKSPACE_NOT_FOUND"
    default_message = "Workspace not found"


class ReleaseNotFound(NotFound):
    error_code = "RELEASE_NOT_FOUND"
    default_message = "Release not found"


class BugNotFound(NotFound):
    error_code = "BUG_NOT_FOUND"
    default_message = "Bug not found"


class HotfixNotFound(NotFound):
    error_code = "HOTFIX_NOT_FOUND"
    default_message = "Hotfix not found"


class UserNotFound(NotFound):
    error_code = "USER_NOT_FOUND"
    default_message = "User not found"


class InviteNotFound(NotFound):
    error_code = "INVITE_NOT_FOUND"
    default_message = "Invite not found"


class MemberNotFound(NotFound):
    error_code = "MEMBER_NOT_FOUND"
    default_message = "Member not found in workspace"


class NotAMember(DomainError):
    status_code = 404
    error_code = "USER_NOT_MEMBER"
    default_message = "You are not a member of this workspace"


# ---- 403 ----

class Forbidden(DomainError):
    """Caller is authenticated (and usually a member) but not permitted."""

    status_code = 403
    error_code = "INVALID_PERMISSION"
    default_message = "Permission denied"


class InsufficientRole(Forbidden):
    error_code = "INSUFFICIENT_PERMISSIONS"
    default_message = "Insufficient permissions"


class UnauthorizedAction(Forbidden):
    error_code = "UNAUTHORIZED_ACTION"
    default_message = "You can only modify items you created"
