"""Database session configuration."""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from heartbeat_tracker.core.errors import StorageError
from heartbeat_tracker.core.settings import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import heartbeat_tracker.models  # noqa: E402,F401


def _engine_kwargs(url: str) -> dict[str, object]:
    if url.startswith("sqlite"):
        # Sessions are handed to FastAPI's threadpool workers.
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(
    settings.effective_database_url,
    echo=settings.sql_debug,
    **_engine_kwargs(settings.effective_database_url),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """Run a block inside one transaction on ``db``.

    Commits only once the block finishes; any exception rolls back every
    change made through the session. Database failures are re-raised as
    :class:`StorageError` with the driver exception chained.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Transaction rolled back: %s", exc, exc_info=True)
        raise StorageError(str(exc)) from exc
    except BaseException:
        db.rollback()
        raise


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)
