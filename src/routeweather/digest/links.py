"""Deep links that hand the planned route to external navigation apps."""

from __future__ import annotations

from urllib.parse import urlencode

from routeweather.models import RouteAddresses


def apple_maps_url(addresses: RouteAddresses) -> str:
    return "https://maps.apple.com/?" + urlencode(
        {"saddr": addresses.start, "daddr": addresses.end}
    )


def google_maps_url(addresses: RouteAddresses) -> str:
    return "https://www.google.com/maps/dir/?" + urlencode(
        {"api": 1, "origin": addresses.start, "destination": addresses.end}
    )


def waze_url(addresses: RouteAddresses) -> str | None:
    """Waze navigates to coordinates only; None until the destination is geocoded."""
    if addresses.end_coords is None:
        return None
    lon, lat = addresses.end_coords
    return "https://waze.com/ul?" + urlencode({"ll": f"{lat},{lon}", "navigate": "yes"})


def navigation_links(addresses: RouteAddresses) -> dict[str, str]:
    """All available links keyed by app name."""
    links = {
        "apple_maps": apple_maps_url(addresses),
        "google_maps": google_maps_url(addresses),
    }
    waze = waze_url(addresses)
    if waze:
        links["waze"] = waze
    return links
