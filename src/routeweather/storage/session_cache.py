"""Single-slot session cache — last successful result per client."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import ValidationError
from sqlalchemy.orm import Session

from routeweather.db.models import CachedSessionRow
from routeweather.errors import RestoreFailed
from routeweather.models import CachedSession

logger = logging.getLogger(__name__)


def save_cached_session(session: Session, client_id: str, cached: CachedSession) -> None:
    """Replace the client's cached session with ``cached``."""
    payload = cached.model_dump_json()
    row = session.get(CachedSessionRow, client_id)
    if row is None:
        session.add(CachedSessionRow(client_id=client_id, payload_json=payload))
    else:
        row.payload_json = payload
        row.updated_at = datetime.now(timezone.utc)
    session.flush()


def load_cached_session(session: Session, client_id: str) -> CachedSession | None:
    """Load the client's cached session, or None if nothing is cached.

    Raises:
        RestoreFailed: If the stored payload does not parse.
    """
    row = session.get(CachedSessionRow, client_id)
    if row is None:
        return None
    try:
        return CachedSession.model_validate_json(row.payload_json)
    except ValidationError as exc:
        raise RestoreFailed(f"Cached session for {client_id} is malformed") from exc


def clear_cached_session(session: Session, client_id: str) -> bool:
    """Delete the client's cached session. Returns True if one existed."""
    row = session.get(CachedSessionRow, client_id)
    if row is None:
        return False
    session.delete(row)
    session.flush()
    return True
