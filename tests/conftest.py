"""
Shared fixtures: a throwaway SQLite database and upload directory per test.
"""
import os
import tempfile

# must be set before app.config is imported anywhere
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="toilet-spots-"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.api.deps import get_blob_store
from app.db import get_db, init_db
from app.services.images.blobs import BlobStore
from app.services.locations.gateway import LocationGateway

VALID_FIELDS = {
    "location": "  Central station, platform 3  ",
    "type": "public facility",
    "dangerRating": "2",
    "description": "  Clean enough, no paper.  ",
    "locationRating": "4",
}


class FakeClock:
    """Hands out strictly increasing timestamps."""

    def __init__(self, start=None, step=timedelta(minutes=1)):
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        self.now += self.step
        return self.now


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture()
def blobs(tmp_path):
    return BlobStore(tmp_path / "uploads")


@pytest.fixture()
def make_clock():
    return FakeClock


@pytest.fixture()
def gateway(db_session, blobs):
    return LocationGateway(db_session, blobs, clock=FakeClock())


@pytest.fixture()
def valid_fields():
    return dict(VALID_FIELDS)


@pytest.fixture()
def client(session_factory, blobs):
    from app.main import app

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_blob_store] = lambda: blobs
    yield TestClient(app)
    app.dependency_overrides.clear()


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: pure unit test (no database, no HTTP)")
    config.addinivalue_line("markers", "api: exercises the HTTP layer through TestClient")
