"""Database configuration for the TaskMaster API."""
from typing import Generator, Optional
import logging

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine, Session

from taskmaster.config import Settings, normalize_database_url

logger = logging.getLogger(__name__)

IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


def create_db_engine(database_url: str, sslmode: Optional[str] = None) -> Engine:
    """
    Build an engine for the given URL.

    SQLite connections get foreign key enforcement turned on; in-memory
    SQLite shares one connection so every session sees the same database.
    """
    database_url = normalize_database_url(database_url)

    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in IN_MEMORY_SQLITE_URLS:
            kwargs["poolclass"] = StaticPool
        db_engine = create_engine(database_url, echo=False, **kwargs)

        @event.listens_for(db_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        logger.info("Using SQLite database: %s", database_url)
        return db_engine

    connect_args = {"sslmode": sslmode} if sslmode else {}
    logger.info("Using %s database", database_url.split(":", 1)[0])
    return create_engine(database_url, echo=False, pool_pre_ping=True, connect_args=connect_args)


def engine_from_settings(settings: Settings) -> Engine:
    return create_db_engine(settings.database_url, sslmode=settings.database_sslmode)


def get_session(request: Request) -> Generator[Session, None, None]:
    """
    Dependency for getting database sessions.

    The engine is the one ``create_app`` built and stored on ``app.state``;
    the session is closed on every exit path.
    """
    with Session(request.app.state.engine) as session:
        yield session
