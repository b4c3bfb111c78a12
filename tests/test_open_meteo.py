"""Tests for Open-Meteo client with mocked HTTP."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

import pytest
import responses

from routeweather.errors import WeatherFetchFailed
from routeweather.fetch.http import build_session
from routeweather.fetch.open_meteo import FORECAST_URL, OpenMeteoClient, forecast_window
from routeweather.models import RoutePoint


def _forecast_json(codes, start="2026-03-10T00:00", offset_s=0, temps=None):
    first = datetime.fromisoformat(start)
    n = len(codes)
    return {
        "utc_offset_seconds": offset_s,
        "hourly": {
            "time": [(first + timedelta(hours=i)).strftime("%Y-%m-%dT%H:%M") for i in range(n)],
            "temperature_2m": temps or [50.0 + i for i in range(n)],
            "precipitation": [0.0] * n,
            "weathercode": codes,
            "windspeed_10m": [8.0] * n,
        },
    }


@pytest.fixture
def client():
    return OpenMeteoClient(session=build_session(max_retries=0))


@pytest.fixture
def point():
    return RoutePoint(coords=(-122.0, 37.0), distance_km=0.0)


@responses.activate
def test_fetch_hourly_parses_response(client):
    responses.add(
        responses.GET, FORECAST_URL,
        json=_forecast_json([0, 61], offset_s=-25200), status=200,
    )

    forecast = client.fetch_hourly((-122.0, 37.0), date(2026, 3, 10), date(2026, 3, 11))

    assert len(forecast.hourly) == 2
    h = forecast.hourly[1]
    assert h.weather_code == 61
    assert h.temperature_f == 51.0
    assert h.time == datetime(2026, 3, 10, 1, 0, tzinfo=timezone(timedelta(hours=-7)))

    params = parse_qs(urlparse(responses.calls[0].request.url).query)
    assert params["latitude"] == ["37.0"]
    assert params["longitude"] == ["-122.0"]
    assert params["hourly"] == ["temperature_2m,precipitation,weathercode,windspeed_10m"]
    assert params["timezone"] == ["auto"]
    assert params["temperature_unit"] == ["fahrenheit"]
    assert params["precipitation_unit"] == ["inch"]
    assert params["windspeed_unit"] == ["mph"]
    assert params["start_date"] == ["2026-03-10"]
    assert params["end_date"] == ["2026-03-11"]


def test_forecast_window_uses_utc_date():
    arrival = datetime(2026, 3, 10, 23, 30, tzinfo=timezone.utc)
    assert forecast_window(arrival) == (date(2026, 3, 9), date(2026, 3, 12))


def test_forecast_window_independent_of_arrival_zone():
    utc = datetime(2026, 10, 20, 5, 30, tzinfo=timezone.utc)
    for hours in (-12, -4, 0, 9, 14):
        local = utc.astimezone(timezone(timedelta(hours=hours)))
        assert forecast_window(local) == (date(2026, 10, 19), date(2026, 10, 22))


class TestFetchSample:
    @responses.activate
    def test_picks_hour_containing_arrival(self, client, point):
        responses.add(responses.GET, FORECAST_URL, json=_forecast_json([0, 1, 61, 63]))
        arrival = datetime(2026, 3, 10, 2, 45, tzinfo=timezone.utc)

        sample = client.fetch_sample(point, arrival)

        assert sample.weather_code == 61
        assert sample.temperature_f == 52.0
        assert sample.arrival_time == arrival
        assert sample.coords == point.coords

    @responses.activate
    def test_arrival_at_last_timestamp(self, client, point):
        responses.add(responses.GET, FORECAST_URL, json=_forecast_json([0, 1, 61, 63]))
        sample = client.fetch_sample(point, datetime(2026, 3, 10, 3, 0, tzinfo=timezone.utc))
        assert sample.weather_code == 63

    @responses.activate
    def test_arrival_past_window_clamps_to_last_hour(self, client, point):
        responses.add(responses.GET, FORECAST_URL, json=_forecast_json([0, 1, 61, 63]))
        sample = client.fetch_sample(point, datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc))
        assert sample.weather_code == 63

    @responses.activate
    def test_arrival_before_window_clamps_to_first_hour(self, client, point):
        responses.add(responses.GET, FORECAST_URL, json=_forecast_json([45, 1, 61, 63]))
        sample = client.fetch_sample(point, datetime(2026, 3, 9, 22, 0, tzinfo=timezone.utc))
        assert sample.weather_code == 45

    @responses.activate
    def test_local_offset_applied(self, client, point):
        # 2026-03-10T08:00 UTC is 01:00 at UTC-7
        responses.add(
            responses.GET, FORECAST_URL,
            json=_forecast_json([0, 95, 0], offset_s=-25200),
        )
        sample = client.fetch_sample(point, datetime(2026, 3, 10, 8, 0, tzinfo=timezone.utc))
        assert sample.weather_code == 95

    @responses.activate
    def test_location_behind_departure_zone(self, client, point):
        # Departure clock says 01:30 on the 20th; at a UTC-7 point it is 22:30 on the 19th
        responses.add(
            responses.GET, FORECAST_URL,
            json=_forecast_json(
                [0] * 72, start="2026-10-19T00:00", offset_s=-25200,
                temps=[float(i) for i in range(72)],
            ),
        )
        arrival = datetime(2026, 10, 20, 1, 30, tzinfo=timezone(timedelta(hours=-4)))

        sample = client.fetch_sample(point, arrival)

        assert sample.temperature_f == 22.0
        params = parse_qs(urlparse(responses.calls[0].request.url).query)
        assert params["start_date"][0] <= "2026-10-19"
        assert params["end_date"][0] >= "2026-10-20"

    @responses.activate
    def test_empty_forecast_fails(self, client, point):
        responses.add(
            responses.GET, FORECAST_URL, json={"utc_offset_seconds": 0, "hourly": {"time": []}},
        )
        with pytest.raises(WeatherFetchFailed):
            client.fetch_sample(point, datetime(2026, 3, 10, 1, 0, tzinfo=timezone.utc))

    @responses.activate
    def test_missing_value_fails(self, client, point):
        data = _forecast_json([0, 1])
        data["hourly"]["temperature_2m"] = [50.0, None]
        responses.add(responses.GET, FORECAST_URL, json=data)
        with pytest.raises(WeatherFetchFailed):
            client.fetch_sample(point, datetime(2026, 3, 10, 1, 0, tzinfo=timezone.utc))

    @responses.activate
    def test_http_error_fails(self, client, point):
        responses.add(responses.GET, FORECAST_URL, json={"error": True}, status=400)
        with pytest.raises(WeatherFetchFailed, match="Failed to fetch weather data"):
            client.fetch_sample(point, datetime(2026, 3, 10, 1, 0, tzinfo=timezone.utc))


def _by_latitude(codes_by_lat: dict[str, int], fail_lat: str | None = None):
    """Callback serving a one-code forecast chosen by the request's latitude."""

    def _callback(request):
        lat = parse_qs(urlparse(request.url).query)["latitude"][0]
        if lat == fail_lat:
            return (500, {}, json.dumps({"reason": "boom"}))
        body = _forecast_json([codes_by_lat[lat]] * 48)
        return (200, {"Content-Type": "application/json"}, json.dumps(body))

    return _callback


class TestFetchRouteWeather:
    @responses.activate
    def test_one_sample_per_point_in_route_order(self, client):
        points = [
            RoutePoint(coords=(-122.0, 37.0), distance_km=0.0),
            RoutePoint(coords=(-122.0, 37.1), distance_km=11.1),
            RoutePoint(coords=(-122.0, 37.2), distance_km=22.2),
        ]
        responses.add_callback(
            responses.GET, FORECAST_URL,
            callback=_by_latitude({"37.0": 0, "37.1": 61, "37.2": 71}),
        )
        departure = datetime(2026, 3, 10, 8, 0, tzinfo=timezone.utc)

        samples = client.fetch_route_weather(points, departure, 3600)

        assert [s.weather_code for s in samples] == [0, 61, 71]
        assert [s.arrival_time for s in samples] == [
            departure,
            departure + timedelta(minutes=30),
            departure + timedelta(minutes=60),
        ]
        assert len(responses.calls) == 3

    @responses.activate
    def test_single_failure_fails_route(self, client):
        points = [
            RoutePoint(coords=(-122.0, lat), distance_km=11.1 * i)
            for i, lat in enumerate([37.0, 37.1, 37.2, 37.3])
        ]
        responses.add_callback(
            responses.GET, FORECAST_URL,
            callback=_by_latitude(
                {"37.0": 0, "37.1": 0, "37.2": 0, "37.3": 0}, fail_lat="37.2",
            ),
        )
        with pytest.raises(WeatherFetchFailed):
            client.fetch_route_weather(
                points, datetime(2026, 3, 10, 8, 0, tzinfo=timezone.utc), 3600,
            )

    def test_no_points(self, client):
        assert client.fetch_route_weather([], datetime.now(timezone.utc), 3600) == []


@responses.activate
def test_gateway_errors_are_retried(point):
    responses.add(responses.GET, FORECAST_URL, status=503)
    responses.add(responses.GET, FORECAST_URL, json=_forecast_json([3, 3]))
    client = OpenMeteoClient(session=build_session(max_retries=2, backoff_factor=0))

    sample = client.fetch_sample(point, datetime(2026, 3, 10, 0, 30, tzinfo=timezone.utc))

    assert sample.weather_code == 3
