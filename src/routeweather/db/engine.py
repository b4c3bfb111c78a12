"""Engine construction for the saved-route and session-cache store."""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from routeweather.config import Settings
from routeweather.db.models import Base

logger = logging.getLogger(__name__)

SessionLocal: sessionmaker[Session] = sessionmaker()


def _sqlite_wal(dbapi_conn, _connection_record) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_db_engine(settings: Settings) -> Engine:
    """Engine for ``settings.db_url()``.

    SQLite gets its data directory created, a 30 s busy timeout, cross-thread
    connections for the API worker pool, and WAL journaling.
    """
    url = settings.db_url()
    if not url.startswith("sqlite"):
        engine = create_engine(url, pool_pre_ping=True)
    else:
        if not settings.database_url:
            Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            url, connect_args={"check_same_thread": False, "timeout": 30}
        )
        event.listen(engine, "connect", _sqlite_wal)
    logger.info("Database engine created: %s", url.split("@")[-1])
    return engine


def open_database(settings: Settings, create_tables: bool = True) -> Engine:
    """Create the engine, bind ``SessionLocal`` to it, and optionally create tables."""
    engine = create_db_engine(settings)
    SessionLocal.configure(bind=engine)
    if create_tables:
        init_db(engine)
    return engine


def init_db(engine: Engine) -> None:
    """Create all tables. Production schemas come from Alembic instead."""
    Base.metadata.create_all(engine)
    logger.info("Database tables created")
