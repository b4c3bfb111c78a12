"""API endpoints proxying address autocomplete."""

from __future__ import annotations

import logging

import requests
from fastapi import APIRouter, Depends, HTTPException, Query

from routeweather.api.deps import get_places_client
from routeweather.fetch.places import DEFAULT_BIAS, GooglePlacesClient
from routeweather.models import PlaceSuggestion

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/places", tags=["places"])


@router.get("/autocomplete", response_model=list[PlaceSuggestion])
def autocomplete(
    q: str = Query(..., description="Partial address text"),
    lat: float | None = Query(None, ge=-90, le=90),
    lon: float | None = Query(None, ge=-180, le=180),
    client: GooglePlacesClient = Depends(get_places_client),
):
    """Suggest addresses for partial input.

    Results are biased towards (lat, lon) when both are given, otherwise
    towards the centre of the USA.
    """
    bias = (lon, lat) if lat is not None and lon is not None else DEFAULT_BIAS
    try:
        return client.autocomplete(q, bias=bias)
    except requests.RequestException as exc:
        logger.warning("Autocomplete failed for %r: %s", q, exc)
        raise HTTPException(status_code=502, detail="Autocomplete unavailable")


@router.get("/{place_id}")
def place_address(
    place_id: str,
    main_text: str = "",
    secondary_text: str = "",
    client: GooglePlacesClient = Depends(get_places_client),
):
    """Formatted address for a chosen suggestion.

    If the details lookup fails, the suggestion's own text is returned.
    """
    suggestion = PlaceSuggestion(
        place_id=place_id, main_text=main_text, secondary_text=secondary_text
    )
    return {"place_id": place_id, "address": client.resolve(suggestion)}
