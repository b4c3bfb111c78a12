"""Google Places (New) client for address autocomplete."""

from __future__ import annotations

import logging

import requests

from routeweather.fetch.http import build_session
from routeweather.models import Coordinate, PlaceSuggestion

logger = logging.getLogger(__name__)

AUTOCOMPLETE_URL = "https://places.googleapis.com/v1/places:autocomplete"
DETAILS_URL = "https://places.googleapis.com/v1/places/{place_id}"

MIN_QUERY_LENGTH = 3
INCLUDED_PRIMARY_TYPES = ["street_address", "establishment", "locality", "postal_code"]
BIAS_RADIUS_M = 50000.0

# Centre of the contiguous USA, used when the caller has no location
DEFAULT_BIAS: Coordinate = (-98.5795, 39.8283)


class GooglePlacesClient:
    """Client for place predictions and place details."""

    def __init__(
        self,
        api_key: str,
        timeout: float = 15,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or build_session()

    def autocomplete(self, text: str, bias: Coordinate | None = None) -> list[PlaceSuggestion]:
        """Predict places for partial input, optionally biased towards (lon, lat).

        Queries shorter than three characters return no suggestions without
        hitting the API.
        """
        query = text.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        body: dict[str, object] = {
            "input": query,
            "includedPrimaryTypes": INCLUDED_PRIMARY_TYPES,
            "languageCode": "en",
            "regionCode": "us",
        }
        if bias is not None:
            body["locationBias"] = {
                "circle": {
                    "center": {"latitude": bias[1], "longitude": bias[0]},
                    "radius": BIAS_RADIUS_M,
                }
            }

        resp = self.session.post(
            AUTOCOMPLETE_URL,
            json=body,
            headers={"X-Goog-Api-Key": self.api_key},
            timeout=self.timeout,
        )
        resp.raise_for_status()

        suggestions = []
        for item in resp.json().get("suggestions", []):
            prediction = item.get("placePrediction")
            if not prediction:
                continue
            structured = prediction.get("structuredFormat", {})
            suggestions.append(
                PlaceSuggestion(
                    place_id=prediction["placeId"],
                    main_text=prediction.get("text", {}).get("text", ""),
                    secondary_text=structured.get("secondaryText", {}).get("text", ""),
                )
            )
        logger.debug("Autocomplete %r: %d suggestions", query, len(suggestions))
        return suggestions

    def place_details(self, place_id: str) -> str:
        """Canonical formatted address for a place id."""
        resp = self.session.get(
            DETAILS_URL.format(place_id=place_id),
            headers={
                "X-Goog-Api-Key": self.api_key,
                "X-Goog-FieldMask": "displayName,formattedAddress",
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()["formattedAddress"]

    def resolve(self, suggestion: PlaceSuggestion) -> str:
        """Formatted address for a suggestion, falling back to its display text."""
        try:
            return self.place_details(suggestion.place_id)
        except (requests.RequestException, KeyError, ValueError):
            logger.warning(
                "Place details failed for %s, using suggestion text",
                suggestion.place_id, exc_info=True,
            )
            return suggestion.fallback_address
