"""Saved route storage — database-backed persistence."""

from __future__ import annotations

import time
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from routeweather.db.models import SavedRouteRow
from routeweather.models import DirectionsRoute, RouteAddresses, SavedRoute


def default_route_name(addresses: RouteAddresses) -> str:
    return f"{addresses.start} → {addresses.end}"


def _row_to_saved(row: SavedRouteRow) -> SavedRoute:
    return SavedRoute(
        id=row.id,
        client_id=row.client_id,
        name=row.name,
        start_address=row.start_address,
        end_address=row.end_address,
        distance_text=row.distance_text,
        route=DirectionsRoute.model_validate_json(row.route_json),
        created_at=row.created_at,
    )


def create_saved_route(
    session: Session,
    client_id: str,
    name: str,
    addresses: RouteAddresses,
    route: DirectionsRoute,
) -> SavedRoute:
    """Insert a new saved route; its id is the creation time in epoch milliseconds."""
    route_id = time.time_ns() // 1_000_000
    # Two saves within the same millisecond still get distinct ids
    while session.get(SavedRouteRow, route_id) is not None:
        route_id += 1

    saved = SavedRoute(
        id=route_id,
        client_id=client_id,
        name=name.strip() or default_route_name(addresses),
        start_address=addresses.start,
        end_address=addresses.end,
        distance_text=route.distance_text,
        route=route,
        created_at=datetime.now(timezone.utc),
    )
    session.add(
        SavedRouteRow(
            id=saved.id,
            client_id=client_id,
            name=saved.name,
            start_address=saved.start_address,
            end_address=saved.end_address,
            distance_text=saved.distance_text,
            route_json=route.model_dump_json(),
            created_at=saved.created_at,
        )
    )
    session.flush()
    return saved


def load_saved_route(session: Session, client_id: str, route_id: int) -> SavedRoute:
    """Load one saved route. Raises KeyError if missing or owned by another client."""
    row = session.get(SavedRouteRow, route_id)
    if row is None or row.client_id != client_id:
        raise KeyError(f"Saved route not found: {route_id}")
    return _row_to_saved(row)


def list_saved_routes(session: Session, client_id: str) -> list[SavedRoute]:
    """List a client's saved routes in the order they were saved."""
    stmt = (
        select(SavedRouteRow)
        .where(SavedRouteRow.client_id == client_id)
        .order_by(SavedRouteRow.id)
    )
    rows = session.execute(stmt).scalars().all()
    return [_row_to_saved(r) for r in rows]


def delete_saved_route(session: Session, client_id: str, route_id: int) -> None:
    """Delete a saved route. Raises KeyError if missing or owned by another client."""
    row = session.get(SavedRouteRow, route_id)
    if row is None or row.client_id != client_id:
        raise KeyError(f"Saved route not found: {route_id}")
    session.delete(row)
    session.flush()
