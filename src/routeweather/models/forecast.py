"""Pydantic v2 models for raw hourly forecasts."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from routeweather.models.route import Coordinate


class HourlyForecast(BaseModel):
    """Forecast data for one hour at one location (imperial units)."""

    time: datetime
    temperature_f: Optional[float] = None
    precipitation_in: Optional[float] = None
    weather_code: Optional[int] = None
    wind_speed_mph: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return None not in (
            self.temperature_f,
            self.precipitation_in,
            self.weather_code,
            self.wind_speed_mph,
        )


class PointForecast(BaseModel):
    """Hourly forecast window for one route point."""

    coords: Coordinate
    fetched_at: datetime
    hourly: list[HourlyForecast] = Field(default_factory=list)

    def hour_index(self, target: datetime) -> int:
        """Index of the hour containing ``target``, clamped to the returned window.

        Counts whole hours elapsed since the first returned timestamp, so a
        target before the window maps to 0 and one past it to the last hour.
        """
        if not self.hourly:
            raise ValueError("Forecast has no hourly data")
        elapsed_h = math.floor((target - self.hourly[0].time).total_seconds() / 3600)
        return max(0, min(elapsed_h, len(self.hourly) - 1))

    def at_time(self, target: datetime) -> HourlyForecast:
        """The forecast hour used for an arrival at ``target``."""
        return self.hourly[self.hour_index(target)]
