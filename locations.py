"""
Geocoding (Nominatim) and routing (OSRM) proxies.

Each function is a single outbound GET with the configured timeout. Any
failure, including an answer we cannot read, is raised as UpstreamError.
"""

import logging
from typing import Any, Dict, List

import requests

from config import settings
from errors import UpstreamError
from schemas import AddressSuggestion, Coordinates

logger = logging.getLogger(__name__)


def _get_json(url: str, params: Dict[str, Any], what: str) -> Any:
    headers = {"User-Agent": settings.GEO_USER_AGENT}
    try:
        r = requests.get(url, params=params, headers=headers, timeout=settings.HTTP_TIMEOUT)
        r.raise_for_status()
        return r.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("%s request failed: %s", what, e)
        raise UpstreamError(f"{what} error: {str(e)[:120]}") from e


def search_addresses(query: str, limit: int = 5) -> List[AddressSuggestion]:
    """Address autocomplete, in the order Nominatim ranks them."""
    params = {
        "q": query,
        "format": "json",
        "limit": max(1, min(limit, 10)),
    }
    results = _get_json(f"{settings.NOMINATIM_URL}/search", params, "Geocoding")
    if not isinstance(results, list):
        raise UpstreamError("Geocoding error: unexpected response")

    items: List[AddressSuggestion] = []
    for it in results:
        try:
            items.append(AddressSuggestion(display_name=it["display_name"], lat=float(it["lat"]), lon=float(it["lon"])))
        except (KeyError, TypeError, ValueError):
            # skip malformed entries
            continue
    return items


def reverse_geocode(lat: float, lng: float) -> str:
    params = {"format": "json", "lat": lat, "lon": lng}
    data = _get_json(f"{settings.NOMINATIM_URL}/reverse", params, "Reverse geocoding")
    display_name = data.get("display_name") if isinstance(data, dict) else None
    if not display_name:
        raise UpstreamError("Reverse geocoding error: no address found")
    return display_name


def route_distance_meters(start: Coordinates, end: Coordinates) -> float:
    """Driving distance between two points, in meters."""
    url = f"{settings.OSRM_URL}/route/v1/driving/{start.lng},{start.lat};{end.lng},{end.lat}"
    params = {"overview": "false", "alternatives": "false"}
    data = _get_json(url, params, "Routing")
    try:
        return float(data["routes"][0]["distance"])
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise UpstreamError("Routing error: no route found") from e


def route_distance_km(start: Coordinates, end: Coordinates) -> float:
    return round(route_distance_meters(start, end) / 1000.0, 2)
