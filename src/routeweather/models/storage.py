"""Pydantic v2 models for saved routes and the cached session (storage layer)."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from routeweather.models.route import DirectionsRoute, RouteAddresses, WeatherSample


class SavedRoute(BaseModel):
    """A named route kept for later re-planning."""

    id: int  # creation timestamp, epoch milliseconds
    client_id: str = ""
    name: str
    start_address: str
    end_address: str
    distance_text: str
    route: DirectionsRoute
    created_at: datetime


class CachedSession(BaseModel):
    """Last successful computation for one client; replaced wholesale on each run."""

    route: DirectionsRoute
    weather_samples: list[WeatherSample] = Field(default_factory=list)
    addresses: RouteAddresses
    departure_time: datetime
