"""FastAPI dependencies for database sessions and client identity."""

from __future__ import annotations

import re
from collections.abc import Generator

from fastapi import HTTPException, Request
from sqlalchemy.orm import Session

from routeweather.db.engine import SessionLocal

CLIENT_HEADER = "X-Client-Id"
DEFAULT_CLIENT_ID = "local"

_CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def get_db() -> Generator[Session, None, None]:
    """Yield a SQLAlchemy session, committing on success or rolling back on error."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def current_client_id(request: Request) -> str:
    """Identify the browser/session the request belongs to.

    Single-user deployments send no header and share the ``local`` slot.
    Raises 400 for a malformed id.
    """
    client_id = request.headers.get(CLIENT_HEADER, DEFAULT_CLIENT_ID)
    if not _CLIENT_ID_PATTERN.match(client_id):
        raise HTTPException(status_code=400, detail=f"Invalid {CLIENT_HEADER} header")
    return client_id
