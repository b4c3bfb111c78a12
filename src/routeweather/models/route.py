"""Pydantic v2 models for routes, weather samples and their derived views."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

# (longitude, latitude) in degrees, GeoJSON order
Coordinate = tuple[float, float]

METERS_PER_MILE = 1609.34


class RoutePoint(BaseModel):
    """A sampled point along the route polyline."""

    coords: Coordinate
    distance_km: float  # cumulative from route start


class DirectionsRoute(BaseModel):
    """Driving route returned by the directions provider."""

    geometry: list[Coordinate] = Field(default_factory=list)
    distance_m: float
    duration_s: float

    @property
    def distance_miles(self) -> float:
        return self.distance_m / METERS_PER_MILE

    @property
    def distance_text(self) -> str:
        """Distance for display, e.g. ``123.4 mi``."""
        return f"{self.distance_miles:.1f} mi"

    @property
    def duration_text(self) -> str:
        """Duration for display, e.g. ``2h 5m`` or ``45m``."""
        total_min = round(self.duration_s / 60)
        hours, minutes = divmod(total_min, 60)
        if hours > 0:
            return f"{hours}h {minutes}m"
        return f"{minutes}m"


class AlertCategory(str, Enum):
    """Coarse bad-weather categories used to group alert ranges."""

    FOG = "Fog"
    RAIN = "Rain"
    HEAVY_RAIN = "Heavy rain"
    SNOW = "Snow"
    HEAVY_SNOW = "Heavy snow"
    THUNDERSTORM = "Thunderstorm"


class WeatherSample(BaseModel):
    """Forecast conditions at one route point, at its projected arrival time."""

    coords: Coordinate
    temperature_f: float
    precipitation_in: float
    weather_code: int
    wind_speed_mph: float
    arrival_time: datetime


class Segment(BaseModel):
    """A colored slice of the route polyline bound to one weather sample."""

    coordinates: list[Coordinate] = Field(default_factory=list)
    color: str
    weather_code: int
    description: str
    temperature_f: float
    precipitation_in: float
    wind_speed_mph: float
    arrival_time: datetime

    def to_feature(self) -> dict:
        """GeoJSON LineString Feature (may hold zero or one coordinate)."""
        return {
            "type": "Feature",
            "properties": {
                "color": self.color,
                "weather_code": self.weather_code,
                "description": self.description,
                "temperature_f": self.temperature_f,
                "precipitation_in": self.precipitation_in,
                "wind_speed_mph": self.wind_speed_mph,
                "arrival_time": self.arrival_time.isoformat(),
            },
            "geometry": {
                "type": "LineString",
                "coordinates": [list(c) for c in self.coordinates],
            },
        }


class AlertRange(BaseModel):
    """A merged run of consecutive samples sharing one bad-weather category."""

    category: AlertCategory
    start_mile: float
    start_time: datetime
    end_mile: float
    end_time: datetime


class RouteAddresses(BaseModel):
    """The start/end inputs as typed, plus their geocoded coordinates."""

    start: str
    end: str
    start_coords: Optional[Coordinate] = None
    end_coords: Optional[Coordinate] = None


class RouteWeatherResult(BaseModel):
    """Everything one pipeline run produces."""

    route: DirectionsRoute
    samples: list[WeatherSample] = Field(default_factory=list)
    segments: list[Segment] = Field(default_factory=list)
    alerts: list[AlertRange] = Field(default_factory=list)
    addresses: RouteAddresses
    departure_time: datetime


class PlaceSuggestion(BaseModel):
    """One autocomplete candidate."""

    place_id: str
    main_text: str
    secondary_text: str = ""

    @property
    def fallback_address(self) -> str:
        """Address text to use when the details lookup fails."""
        if self.secondary_text:
            return f"{self.main_text}, {self.secondary_text}"
        return self.main_text
