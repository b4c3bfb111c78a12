"""Plain text summary of a route weather result."""

from __future__ import annotations

from datetime import datetime

from routeweather.analysis.classify import category_icon, classify_weather
from routeweather.models import AlertRange, RouteWeatherResult

SEPARATOR = "=" * 60
GOOD_CONDITIONS = "✓ Good conditions throughout route"


def format_clock(dt: datetime) -> str:
    """12-hour clock time without a leading zero, e.g. ``3:05 PM``."""
    return dt.strftime("%I:%M %p").lstrip("0")


def format_alert(alert: AlertRange) -> str:
    """One alert line, e.g. ``🌧️ Rain from mile 12 (3:05 PM) to mile 40 (3:45 PM)``."""
    return (
        f"{category_icon(alert.category)} {alert.category.value} "
        f"from mile {alert.start_mile:.0f} ({format_clock(alert.start_time)}) "
        f"to mile {alert.end_mile:.0f} ({format_clock(alert.end_time)})"
    )


def format_summary(result: RouteWeatherResult) -> list[str]:
    """Alert lines for the route, or a single good-conditions line."""
    if not result.alerts:
        return [GOOD_CONDITIONS]
    return [format_alert(a) for a in result.alerts]


def format_digest(result: RouteWeatherResult) -> str:
    """Format a multi-line plain-text report for terminal output."""
    route = result.route
    lines: list[str] = [
        SEPARATOR,
        f"  {result.addresses.start} -> {result.addresses.end}",
        f"  Depart: {result.departure_time:%Y-%m-%d} {format_clock(result.departure_time)}",
        f"  Distance: {route.distance_text}  Duration: {route.duration_text}",
        SEPARATOR,
        "",
        "--- Weather along route ---",
    ]
    lines.extend(f"  {line}" for line in format_summary(result))

    lines.append("")
    lines.append("--- Samples ---")
    for sample in result.samples:
        description = classify_weather(sample.weather_code).description
        lines.append(
            f"  {format_clock(sample.arrival_time):>8}  {description:<24}"
            f" {sample.temperature_f:5.0f}°F  {sample.precipitation_in:4.2f}\""
            f"  {sample.wind_speed_mph:3.0f} mph"
        )

    lines.append(SEPARATOR)
    return "\n".join(lines)
