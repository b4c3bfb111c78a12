"""Error taxonomy for the route weather pipeline."""

from __future__ import annotations


class RouteWeatherError(Exception):
    """Base class; ``str(exc)`` is the user-facing message."""


class LocationNotFound(RouteWeatherError):
    """Geocoding returned no features for a location string."""

    def __init__(self, location: str):
        super().__init__(f"Could not find location: {location}")
        self.location = location


class RouteNotFound(RouteWeatherError):
    """The directions provider returned no route between two points."""

    def __init__(self, message: str = "No route found"):
        super().__init__(message)


class WeatherFetchFailed(RouteWeatherError):
    """A per-sample forecast call failed or returned malformed data."""


class ConfigLoadFailed(RouteWeatherError):
    """Credentials or settings could not be obtained."""


class RestoreFailed(RouteWeatherError):
    """A cached session could not be restored."""
