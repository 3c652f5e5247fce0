# teamflow/core/logging.py
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at application start."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)

    # SQL echo is controlled by SQLAlchemy itself; keep its logger quiet
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
