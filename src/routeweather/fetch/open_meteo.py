"""Open-Meteo client for hourly point forecasts along a route."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date, datetime, timedelta, timezone

import requests

from routeweather.errors import WeatherFetchFailed
from routeweather.fetch.http import build_session
from routeweather.fetch.timing import project_arrival_times
from routeweather.models import (
    Coordinate,
    HourlyForecast,
    PointForecast,
    RoutePoint,
    WeatherSample,
)

logger = logging.getLogger(__name__)

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
HOURLY_VARIABLES = "temperature_2m,precipitation,weathercode,windspeed_10m"


def forecast_window(arrival: datetime) -> tuple[date, date]:
    """Request dates for an arrival: from the day before its UTC date to two days after.

    Open-Meteo reads the dates in the point's local timezone. A local date is
    never more than one day from the UTC date, so the window always holds the
    local arrival date and the following day.
    """
    utc_date = arrival.astimezone(timezone.utc).date()
    return utc_date - timedelta(days=1), utc_date + timedelta(days=2)


class OpenMeteoClient:
    """Client for fetching hourly forecasts from the Open-Meteo API."""

    def __init__(
        self,
        timeout: float = 15,
        max_workers: int = 16,
        session: requests.Session | None = None,
    ):
        self.timeout = timeout
        self.max_workers = max_workers
        self.session = session or build_session()

    def fetch_hourly(self, coords: Coordinate, start_date: date, end_date: date) -> PointForecast:
        """Fetch the hourly forecast window for one (lon, lat) point.

        Timestamps come back in the location's local time; they are made
        timezone-aware using the response's ``utc_offset_seconds``.
        """
        lon, lat = coords
        params = {
            "latitude": lat,
            "longitude": lon,
            "hourly": HOURLY_VARIABLES,
            "timezone": "auto",
            "temperature_unit": "fahrenheit",
            "precipitation_unit": "inch",
            "windspeed_unit": "mph",
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
        }
        logger.debug("Fetching forecast for %.4f,%.4f (%s to %s)", lat, lon, start_date, end_date)

        resp = self.session.get(FORECAST_URL, params=params, timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()

        tz = timezone(timedelta(seconds=data.get("utc_offset_seconds", 0)))
        hourly_data = data.get("hourly", {})
        timestamps = hourly_data.get("time", [])

        return PointForecast(
            coords=coords,
            fetched_at=datetime.now(timezone.utc),
            hourly=[self._parse_hourly(hourly_data, i, ts, tz) for i, ts in enumerate(timestamps)],
        )

    def fetch_sample(self, point: RoutePoint, arrival_time: datetime) -> WeatherSample:
        """Conditions at ``point`` for the forecast hour containing ``arrival_time``.

        Raises:
            WeatherFetchFailed: On any transport error, non-2xx response,
                empty forecast window or missing value at the chosen hour.
        """
        if arrival_time.tzinfo is None:
            arrival_time = arrival_time.astimezone()
        start_date, end_date = forecast_window(arrival_time)
        try:
            forecast = self.fetch_hourly(point.coords, start_date, end_date)
        except (requests.RequestException, ValueError, TypeError, AttributeError) as exc:
            raise WeatherFetchFailed(f"Failed to fetch weather data: {exc}") from exc

        if not forecast.hourly:
            raise WeatherFetchFailed(
                f"Empty forecast for {point.coords[1]:.4f},{point.coords[0]:.4f}"
            )

        hour = forecast.at_time(arrival_time)
        if not hour.is_complete:
            raise WeatherFetchFailed(
                f"Incomplete forecast for {point.coords[1]:.4f},{point.coords[0]:.4f} at {hour.time}"
            )

        return WeatherSample(
            coords=point.coords,
            temperature_f=hour.temperature_f,
            precipitation_in=hour.precipitation_in,
            weather_code=hour.weather_code,
            wind_speed_mph=hour.wind_speed_mph,
            arrival_time=arrival_time,
        )

    def fetch_route_weather(
        self,
        points: list[RoutePoint],
        departure: datetime,
        total_duration_s: float,
    ) -> list[WeatherSample]:
        """Fetch one sample per route point concurrently, in route order.

        The first failure cancels any requests not yet started and is
        re-raised; no partial list is ever returned.
        """
        if not points:
            return []

        arrivals = project_arrival_times(len(points), departure, total_duration_s)
        samples: list[WeatherSample | None] = [None] * len(points)

        logger.info("Fetching weather for %d route points", len(points))
        pool = ThreadPoolExecutor(max_workers=max(1, min(self.max_workers, len(points))))
        try:
            futures = {
                pool.submit(self.fetch_sample, point, arrival): idx
                for idx, (point, arrival) in enumerate(zip(points, arrivals))
            }
            for future in as_completed(futures):
                samples[futures[future]] = future.result()
        except WeatherFetchFailed:
            logger.warning("Weather fetch failed, abandoning route", exc_info=True)
            raise
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        return samples

    def _parse_hourly(self, data: dict, idx: int, timestamp: str, tz: timezone) -> HourlyForecast:
        """Parse one hourly time step from the flat API response."""

        def get(key: str):
            arr = data.get(key)
            if arr is None or idx >= len(arr):
                return None
            return arr[idx]

        code = get("weathercode")
        return HourlyForecast(
            time=datetime.fromisoformat(timestamp).replace(tzinfo=tz),
            temperature_f=get("temperature_2m"),
            precipitation_in=get("precipitation"),
            weather_code=int(code) if code is not None else None,
            wind_speed_mph=get("windspeed_10m"),
        )
