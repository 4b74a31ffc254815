# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from datetime import datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from heartbeat_tracker.db.session import Base
from heartbeat_tracker.db.session import get_db as app_get_session
from heartbeat_tracker.main import app as fastapi_app
from heartbeat_tracker.models import Device
from heartbeat_tracker.services.device_locks import DeviceLockRegistry
from heartbeat_tracker.services.watermark import LongestAbsenceWatermark

TEST_DB_URL = "sqlite://"
DEVICE_TOKEN = "my_token"
OTHER_DEVICE_TOKEN = "other_token"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def watermark() -> LongestAbsenceWatermark:
    """Return a fresh watermark starting at zero."""
    return LongestAbsenceWatermark()


@pytest.fixture()
def locks() -> DeviceLockRegistry:
    return DeviceLockRegistry()


@pytest.fixture()
def client(
    app: FastAPI,
    watermark: LongestAbsenceWatermark,
    locks: DeviceLockRegistry,
) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        # Startup seeds process state; replace it with the per-test instances.
        app.state.watermark = watermark
        app.state.device_locks = locks
        yield test_client


@pytest.fixture()
def base_time() -> datetime:
    """A fixed reference instant with whole-second resolution."""
    return datetime(2024, 6, 1, 12, 0, 0)


def _create_device(db: Session, name: str, token: str) -> Device:
    device = Device(name=name, token=token, beat_count=0)
    db.add(device)
    db.commit()
    db.refresh(device)
    return device


@pytest.fixture()
def device(db_session: Session) -> Device:
    """Create and return a persisted device."""
    return _create_device(db_session, "test device", DEVICE_TOKEN)


@pytest.fixture()
def other_device(db_session: Session) -> Device:
    """Create and return a second persisted device."""
    return _create_device(db_session, "other device", OTHER_DEVICE_TOKEN)


@pytest.fixture()
def auth_header(device: Device) -> dict[str, str]:
    """Return the Authorization header for the primary device."""
    return {"Authorization": device.token}

