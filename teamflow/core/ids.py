# teamflow/core/ids.py
from __future__ import annotations

from uuid import UUID

from teamflow.core.errors import InvalidArgument


def parse_id(raw: UUID | str | None, what: str = "id") -> UUID:
    """Canonical identifier parsing; malformed input never reaches the store."""
    if isinstance(raw, UUID):
        return raw
    if raw is None or not str(raw).strip():
        raise InvalidArgument(f"Missing {what}")
    try:
        return UUID(str(raw).strip())
    except ValueError as e:
        raise InvalidArgument(f"Invalid {what}") from e
