"""FastAPI dependencies for settings, provider clients and planner state."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from routeweather.config import ApiKeys, Settings, load_api_keys
from routeweather.db.deps import current_client_id
from routeweather.errors import ConfigLoadFailed
from routeweather.fetch.http import build_session
from routeweather.fetch.places import GooglePlacesClient
from routeweather.pipeline import ProviderClients
from routeweather.session import PlannerController


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_api_keys() -> ApiKeys:
    """Provider credentials; 503 when the server is not configured."""
    try:
        return load_api_keys()
    except ConfigLoadFailed as exc:
        raise HTTPException(status_code=503, detail=str(exc))


def get_clients(
    settings: Settings = Depends(get_settings),
    keys: ApiKeys = Depends(get_api_keys),
) -> ProviderClients:
    return ProviderClients.from_settings(settings, keys)


def get_places_client(
    settings: Settings = Depends(get_settings),
    keys: ApiKeys = Depends(get_api_keys),
) -> GooglePlacesClient:
    return GooglePlacesClient(
        keys.google,
        timeout=settings.request_timeout_s,
        session=build_session(settings.max_retries, settings.backoff_factor),
    )


def get_controller(
    request: Request,
    client_id: str = Depends(current_client_id),
) -> PlannerController:
    return request.app.state.controllers.get(client_id)
