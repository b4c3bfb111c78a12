"""API endpoints for saved routes."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from routeweather.api.deps import get_clients, get_controller, get_settings
from routeweather.api.routes import RouteWeatherResponse, run_and_cache
from routeweather.config import Settings
from routeweather.db.deps import current_client_id, get_db
from routeweather.errors import RestoreFailed
from routeweather.models import DirectionsRoute, RouteAddresses, SavedRoute
from routeweather.pipeline import ProviderClients
from routeweather.session import PlannerController
from routeweather.storage.saved_routes import (
    create_saved_route,
    delete_saved_route,
    list_saved_routes,
    load_saved_route,
)
from routeweather.storage.session_cache import load_cached_session

router = APIRouter(prefix="/saved-routes", tags=["saved-routes"])


class SaveRouteRequest(BaseModel):
    """Request body for saving the currently displayed route."""

    name: str = ""  # blank = "start → end"


class SavedRouteResponse(BaseModel):
    """Saved route in list responses (geometry omitted)."""

    id: int
    name: str
    start_address: str
    end_address: str
    distance_text: str
    created_at: str


class SavedRouteDetailResponse(SavedRouteResponse):
    route: DirectionsRoute


def _saved_to_response(saved: SavedRoute) -> SavedRouteResponse:
    return SavedRouteResponse(
        id=saved.id,
        name=saved.name,
        start_address=saved.start_address,
        end_address=saved.end_address,
        distance_text=saved.distance_text,
        created_at=saved.created_at.isoformat(),
    )


def _current_route(
    db: Session, client_id: str, controller: PlannerController
) -> tuple[RouteAddresses, DirectionsRoute] | None:
    """The route currently on display, falling back to the cached session."""
    result = controller.state.result
    if result is not None:
        return result.addresses, result.route
    try:
        cached = load_cached_session(db, client_id)
    except RestoreFailed:
        return None
    if cached is None:
        return None
    return cached.addresses, cached.route


@router.get("", response_model=list[SavedRouteResponse])
def list_all_saved_routes(
    client_id: str = Depends(current_client_id),
    db: Session = Depends(get_db),
):
    """List saved routes, oldest first."""
    return [_saved_to_response(s) for s in list_saved_routes(db, client_id)]


@router.post("", response_model=SavedRouteResponse, status_code=201)
def save_current_route(
    req: SaveRouteRequest,
    client_id: str = Depends(current_client_id),
    controller: PlannerController = Depends(get_controller),
    db: Session = Depends(get_db),
):
    """Save the current route under ``name`` (or ``start → end`` if blank)."""
    current = _current_route(db, client_id, controller)
    if current is None:
        raise HTTPException(status_code=409, detail="No route to save")
    addresses, route = current
    saved = create_saved_route(db, client_id, req.name, addresses, route)
    return _saved_to_response(saved)


@router.get("/{route_id}", response_model=SavedRouteDetailResponse)
def get_saved_route(
    route_id: int,
    client_id: str = Depends(current_client_id),
    db: Session = Depends(get_db),
):
    """Get a saved route including its geometry."""
    try:
        saved = load_saved_route(db, client_id, route_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Saved route '{route_id}' not found")
    return SavedRouteDetailResponse(
        **_saved_to_response(saved).model_dump(), route=saved.route
    )


@router.delete("/{route_id}", status_code=204)
def delete_saved(
    route_id: int,
    client_id: str = Depends(current_client_id),
    db: Session = Depends(get_db),
):
    """Delete a saved route."""
    try:
        delete_saved_route(db, client_id, route_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Saved route '{route_id}' not found")


@router.post("/{route_id}/plan", response_model=RouteWeatherResponse)
def plan_saved_route(
    route_id: int,
    client_id: str = Depends(current_client_id),
    controller: PlannerController = Depends(get_controller),
    clients: ProviderClients = Depends(get_clients),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
):
    """Re-run a saved route from its addresses, departing now."""
    try:
        saved = load_saved_route(db, client_id, route_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Saved route '{route_id}' not found")
    return run_and_cache(
        db,
        client_id,
        controller,
        clients,
        saved.start_address,
        saved.end_address,
        datetime.now(),
        settings.sample_interval_km,
    )
