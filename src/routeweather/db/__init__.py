"""Persistence for saved routes and the per-client session cache."""

from routeweather.db.engine import SessionLocal, create_db_engine, open_database
from routeweather.db.models import Base, CachedSessionRow, SavedRouteRow

__all__ = [
    "Base",
    "CachedSessionRow",
    "SavedRouteRow",
    "SessionLocal",
    "create_db_engine",
    "open_database",
]
