# tests/conftest.py
import os

# must be set before teamflow.core.db builds its engine
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker as _sessionmaker
from sqlalchemy.pool import StaticPool

from teamflow.core.db import get_db
from teamflow.main import app
from teamflow.models.base import Base

# -----------------------------------------------------------------------------
# Register every table on Base.metadata before create_all
# -----------------------------------------------------------------------------
import teamflow.models.bug  # noqa: F401
import teamflow.models.hotfix  # noqa: F401
import teamflow.models.invite  # noqa: F401
import teamflow.models.refresh_token  # noqa: F401
import teamflow.models.release  # noqa: F401
import teamflow.models.user  # noqa: F401
import teamflow.models.workspace  # noqa: F401


def _enable_sqlite_fks(dbapi_connection, _record):
    cur = dbapi_connection.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


@pytest.fixture()
def engine():
    """
    Fresh in-memory database per test.

    StaticPool keeps the single connection alive; TestClient runs sync
    endpoints in a worker thread, hence check_same_thread=False.
    """
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    event.listen(eng, "connect", _enable_sqlite_fks)
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture()
def db(engine):
    Session = _sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db):
    """API client sharing the test session, so factories and requests see the same rows."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_db, None)
