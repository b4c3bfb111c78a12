"""Tests for the text digest and navigation links."""

from __future__ import annotations

from datetime import datetime, timezone

from routeweather.digest.links import navigation_links, waze_url
from routeweather.digest.text import (
    GOOD_CONDITIONS,
    format_alert,
    format_clock,
    format_digest,
    format_summary,
)
from routeweather.models import RouteAddresses


def test_format_clock():
    assert format_clock(datetime(2026, 3, 10, 15, 5, tzinfo=timezone.utc)) == "3:05 PM"
    assert format_clock(datetime(2026, 3, 10, 0, 30, tzinfo=timezone.utc)) == "12:30 AM"
    assert format_clock(datetime(2026, 3, 10, 10, 0, tzinfo=timezone.utc)) == "10:00 AM"


class TestSummary:
    def test_alert_line(self, sample_result):
        (alert,) = sample_result.alerts
        assert format_alert(alert) == "🌧️ Rain from mile 3 (8:10 AM) to mile 10 (8:20 AM)"

    def test_summary_lists_alerts(self, sample_result):
        assert format_summary(sample_result) == [format_alert(sample_result.alerts[0])]

    def test_good_conditions(self, sample_result):
        clear = sample_result.model_copy(update={"alerts": []})
        assert format_summary(clear) == [GOOD_CONDITIONS]
        assert GOOD_CONDITIONS == "✓ Good conditions throughout route"


def test_digest_contents(sample_result):
    digest = format_digest(sample_result)
    assert "A Street, Springfield -> B Avenue, Shelbyville" in digest
    assert "13.8 mi" in digest
    assert "20m" in digest
    assert "Rain from mile 3" in digest
    assert "Light rain" in digest
    # One line per sample
    assert digest.count("°F") == len(sample_result.samples)


class TestNavigationLinks:
    def test_all_apps(self, sample_addresses):
        links = navigation_links(sample_addresses)
        assert links["apple_maps"] == (
            "https://maps.apple.com/?saddr=A+Street%2C+Springfield"
            "&daddr=B+Avenue%2C+Shelbyville"
        )
        assert links["google_maps"] == (
            "https://www.google.com/maps/dir/?api=1&origin=A+Street%2C+Springfield"
            "&destination=B+Avenue%2C+Shelbyville"
        )
        assert links["waze"] == "https://waze.com/ul?ll=37.2%2C-122.0&navigate=yes"

    def test_waze_needs_coordinates(self):
        addresses = RouteAddresses(start="Here", end="There")
        assert waze_url(addresses) is None
        assert "waze" not in navigation_links(addresses)
