"""WMO weather code classification — display color, description, alert category."""

from __future__ import annotations

from typing import NamedTuple, Optional

from routeweather.models import AlertCategory

UNKNOWN_COLOR = "#6b7280"
UNKNOWN_DESCRIPTION = "Unknown"

# (codes, color, category); first match wins
_RULES: list[tuple[frozenset[int], str, Optional[AlertCategory]]] = [
    (frozenset({0}), "#4ade80", None),  # clear
    (frozenset({1, 2, 3}), "#86efac", None),  # cloudy
    (frozenset({45, 48}), "#9ca3af", AlertCategory.FOG),
    (frozenset(range(51, 58)), "#60a5fa", AlertCategory.RAIN),  # drizzle
    (frozenset({61, 80}), "#60a5fa", AlertCategory.RAIN),
    (frozenset({63, 81}), "#3b82f6", AlertCategory.RAIN),
    (frozenset({65, 66, 67, 82}), "#1e40af", AlertCategory.HEAVY_RAIN),
    (frozenset({71, 85}), "#e9d5ff", AlertCategory.SNOW),
    (frozenset({73}), "#a855f7", AlertCategory.SNOW),
    (frozenset({75, 77, 86}), "#9333ea", AlertCategory.HEAVY_SNOW),
    (frozenset(range(95, 100)), "#ef4444", AlertCategory.THUNDERSTORM),
]

DESCRIPTIONS: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Foggy",
    51: "Light drizzle",
    53: "Drizzle",
    55: "Heavy drizzle",
    56: "Light freezing drizzle",
    57: "Freezing drizzle",
    61: "Light rain",
    63: "Rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Freezing rain",
    71: "Light snow",
    73: "Snow",
    75: "Heavy snow",
    77: "Snow grains",
    80: "Light rain showers",
    81: "Rain showers",
    82: "Heavy rain showers",
    85: "Light snow showers",
    86: "Snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with hail",
    99: "Severe thunderstorm",
}

_ICONS: dict[AlertCategory, str] = {
    AlertCategory.FOG: "🌫️",
    AlertCategory.RAIN: "🌧️",
    AlertCategory.HEAVY_RAIN: "🌧️",
    AlertCategory.SNOW: "❄️",
    AlertCategory.HEAVY_SNOW: "❄️",
    AlertCategory.THUNDERSTORM: "⛈️",
}


class WeatherClass(NamedTuple):
    color: str
    description: str
    category: Optional[AlertCategory]  # None = good weather, never alerted


def classify_weather(code: int) -> WeatherClass:
    """Classify a WMO weather code. Total: unmatched codes map to the unknown style."""
    description = DESCRIPTIONS.get(code, UNKNOWN_DESCRIPTION)
    for codes, color, category in _RULES:
        if code in codes:
            return WeatherClass(color, description, category)
    return WeatherClass(UNKNOWN_COLOR, description, None)


def weather_category(code: int) -> Optional[AlertCategory]:
    return classify_weather(code).category


def category_icon(category: AlertCategory) -> str:
    """Display glyph for an alert category."""
    return _ICONS.get(category, "⚠️")
