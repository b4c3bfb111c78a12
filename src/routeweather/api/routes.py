"""API endpoints for planning a route and restoring the cached session."""

from __future__ import annotations

import logging
from datetime import datetime

import requests
from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from routeweather.analysis.classify import category_icon
from routeweather.analysis.segments import segments_feature_collection
from routeweather.api.deps import get_clients, get_controller, get_settings
from routeweather.config import Settings
from routeweather.db.deps import current_client_id, get_db
from routeweather.digest.links import navigation_links
from routeweather.digest.text import format_alert, format_summary
from routeweather.errors import (
    LocationNotFound,
    RestoreFailed,
    RouteNotFound,
    WeatherFetchFailed,
)
from routeweather.models import RouteAddresses, RouteWeatherResult, WeatherSample
from routeweather.pipeline import (
    ProviderClients,
    RouteWeatherOptions,
    cache_entry,
    execute_route_weather,
)
from routeweather.session import PlannerController, PlannerPhase
from routeweather.storage.session_cache import (
    clear_cached_session,
    load_cached_session,
    save_cached_session,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["route-weather"])


class RouteWeatherRequest(BaseModel):
    """Request body for planning a route."""

    start: str
    end: str
    departure_time: datetime | None = None  # None = now
    interval_km: float | None = None  # None = server setting

    @field_validator("start", "end")
    @classmethod
    def validate_location(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("location must not be empty")
        return v

    @field_validator("departure_time")
    @classmethod
    def validate_departure(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            raise ValueError("departure_time must include a UTC offset")
        return v

    @field_validator("interval_km")
    @classmethod
    def validate_interval(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("interval_km must be positive")
        return v


class AlertResponse(BaseModel):
    category: str
    icon: str
    start_mile: float
    start_time: datetime
    end_mile: float
    end_time: datetime
    text: str


class RouteWeatherResponse(BaseModel):
    """A planned route with its weather, ready for map rendering."""

    addresses: RouteAddresses
    departure_time: datetime
    distance_m: float
    duration_s: float
    distance_text: str
    duration_text: str
    samples: list[WeatherSample]
    alerts: list[AlertResponse]
    summary: list[str]
    segments: dict  # GeoJSON FeatureCollection
    links: dict[str, str]


def result_to_response(result: RouteWeatherResult) -> RouteWeatherResponse:
    return RouteWeatherResponse(
        addresses=result.addresses,
        departure_time=result.departure_time,
        distance_m=result.route.distance_m,
        duration_s=result.route.duration_s,
        distance_text=result.route.distance_text,
        duration_text=result.route.duration_text,
        samples=result.samples,
        alerts=[
            AlertResponse(
                category=a.category.value,
                icon=category_icon(a.category),
                start_mile=a.start_mile,
                start_time=a.start_time,
                end_mile=a.end_mile,
                end_time=a.end_time,
                text=format_alert(a),
            )
            for a in result.alerts
        ],
        summary=format_summary(result),
        segments=segments_feature_collection(result.segments),
        links=navigation_links(result.addresses),
    )


def run_and_cache(
    db: Session,
    client_id: str,
    controller: PlannerController,
    clients: ProviderClients,
    start: str,
    end: str,
    departure: datetime | None,
    interval_km: float,
) -> RouteWeatherResponse:
    """Run the pipeline under a fresh run token and cache the result.

    Provider failures map to HTTP errors; a run superseded by a newer
    submission from the same client gets 409 and is not cached.
    """
    token = controller.start_pipeline()
    try:
        result = execute_route_weather(
            start,
            end,
            clients,
            departure=departure,
            options=RouteWeatherOptions(interval_km=interval_km),
        )
    except (LocationNotFound, RouteNotFound) as exc:
        controller.fail_pipeline(token, str(exc))
        raise HTTPException(status_code=404, detail=str(exc))
    except WeatherFetchFailed as exc:
        logger.error("Weather fetch failed for %s -> %s", start, end, exc_info=True)
        controller.fail_pipeline(token, str(exc))
        raise HTTPException(status_code=502, detail=str(exc))
    except requests.RequestException as exc:
        logger.error("Provider request failed for %s -> %s", start, end, exc_info=True)
        controller.fail_pipeline(token, "Failed to get route")
        raise HTTPException(status_code=502, detail=f"Failed to get route: {exc}")
    except ValueError as exc:
        # Empty route geometry
        controller.fail_pipeline(token, str(exc))
        raise HTTPException(status_code=422, detail=str(exc))
    except Exception:
        logger.exception("Unexpected error planning %s -> %s", start, end)
        controller.fail_pipeline(token, "Failed to plan route")
        raise HTTPException(status_code=500, detail="Failed to plan route")

    if not controller.complete_pipeline(token, result):
        raise HTTPException(
            status_code=409, detail="Superseded by a newer route request"
        )

    save_cached_session(db, client_id, cache_entry(result))
    return result_to_response(result)


@router.post("/route-weather", response_model=RouteWeatherResponse)
def plan_route_weather(
    req: RouteWeatherRequest,
    client_id: str = Depends(current_client_id),
    controller: PlannerController = Depends(get_controller),
    clients: ProviderClients = Depends(get_clients),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
):
    """Plan a route and forecast the weather along it.

    Any earlier result for this client is cleared as soon as the run starts.
    """
    return run_and_cache(
        db,
        client_id,
        controller,
        clients,
        req.start,
        req.end,
        req.departure_time,
        req.interval_km or settings.sample_interval_km,
    )


@router.get(
    "/session",
    response_model=RouteWeatherResponse,
    responses={204: {"description": "Nothing cached"}},
)
def restore_session(
    client_id: str = Depends(current_client_id),
    controller: PlannerController = Depends(get_controller),
    db: Session = Depends(get_db),
):
    """Restore the last successful result without any provider calls.

    A malformed cache entry is discarded and treated as empty.
    """
    if not controller.begin_restore():
        raise HTTPException(status_code=409, detail="Route computation in progress")

    try:
        cached = load_cached_session(db, client_id)
    except RestoreFailed:
        logger.warning("Discarding cached session for %s", client_id, exc_info=True)
        clear_cached_session(db, client_id)
        controller.abort_restore()
        return Response(status_code=204)

    if cached is None:
        controller.abort_restore()
        return Response(status_code=204)

    try:
        result = controller.restore(cached)
    except RestoreFailed:
        logger.warning("Discarding cached session for %s", client_id, exc_info=True)
        clear_cached_session(db, client_id)
        controller.abort_restore()
        return Response(status_code=204)

    return result_to_response(result)


@router.delete("/session", status_code=204)
def clear_session(
    client_id: str = Depends(current_client_id),
    controller: PlannerController = Depends(get_controller),
    db: Session = Depends(get_db),
):
    """Clear the displayed result and the cached session."""
    controller.clear_state()
    clear_cached_session(db, client_id)


@router.get("/session/state")
def session_state(controller: PlannerController = Depends(get_controller)):
    """Current planner phase, for clients polling a long-running plan."""
    state = controller.state
    return {
        "phase": state.phase.value,
        "error": state.error,
        "has_result": state.result is not None and state.phase == PlannerPhase.READY,
    }
