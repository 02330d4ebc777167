"""Geocoding and pincode boundaries.

The provider (a Nominatim-compatible search API such as LocationIQ) is tried first
when an API key is configured; any provider failure degrades to the static pincode
table. Callers only see NotFound when neither source knows the area.
"""
import logging
from dataclasses import dataclass

import httpx

from app.config import get_settings
from app.errors import NotFound, UpstreamUnavailable
from app.services import pincodes

log = logging.getLogger("uvicorn.error")

SOURCE_PROVIDER = "provider"
SOURCE_FALLBACK = "fallback"


@dataclass
class GeoPoint:
    latitude: float
    longitude: float
    source: str


@dataclass
class Boundary:
    pincode: str
    name: str | None
    center: list[float]
    coordinates: list[list[float]]
    source: str


def provider_configured() -> bool:
    return bool(get_settings().map_provider_api_key)


def _search(query: str, *, polygon: bool = False) -> dict:
    """First provider hit for `query`. Raises UpstreamUnavailable on any failure."""
    settings = get_settings()
    params = {
        "key": settings.map_provider_api_key,
        "q": query,
        "format": "json",
        "limit": 1,
        "countrycodes": "in",
    }
    if polygon:
        params["polygon_geojson"] = 1
    url = f"{settings.map_provider_base_url.rstrip('/')}/v1/search"
    try:
        with httpx.Client(timeout=settings.map_provider_timeout_seconds) as client:
            r = client.get(url, params=params)
    except httpx.HTTPError as e:
        raise UpstreamUnavailable(f"Mapping provider request failed: {type(e).__name__}") from e
    if r.status_code != 200:
        raise UpstreamUnavailable(f"Mapping provider returned {r.status_code}")
    try:
        results = r.json()
    except ValueError as e:
        raise UpstreamUnavailable("Mapping provider returned invalid JSON") from e
    if not isinstance(results, list) or not results:
        raise UpstreamUnavailable("Mapping provider returned no results")
    return results[0]


def _outer_ring(geojson: dict | None) -> list[list[float]]:
    """GeoJSON [lng, lat] outer ring -> [[lat, lng], ...]. Empty for non-area shapes."""
    if not geojson:
        return []
    kind = geojson.get("type")
    coords = geojson.get("coordinates") or []
    if kind == "Polygon" and coords:
        ring = coords[0]
    elif kind == "MultiPolygon" and coords:
        ring = max((poly[0] for poly in coords if poly), key=len, default=[])
    else:
        return []
    return [[float(lat), float(lng)] for lng, lat in ring]


def geocode(address: str | None = None, pincode: str | None = None) -> GeoPoint:
    address = (address or "").strip()
    pincode = (pincode or "").strip()
    if provider_configured() and (address or pincode):
        query = ", ".join(p for p in (address, pincode, "Ahmedabad") if p)
        try:
            hit = _search(query)
            return GeoPoint(float(hit["lat"]), float(hit["lon"]), SOURCE_PROVIDER)
        except (UpstreamUnavailable, KeyError, TypeError, ValueError) as e:
            log.warning("[Geo] Geocoding failed for %r, using pincode table: %s", query, e)
    entry = pincodes.lookup(pincode)
    if entry:
        lat, lng = entry["center"]
        return GeoPoint(lat, lng, SOURCE_FALLBACK)
    raise NotFound("Location not found")


def boundary(pincode: str) -> Boundary:
    pincode = (pincode or "").strip()
    entry = pincodes.lookup(pincode)
    if provider_configured():
        try:
            hit = _search(f"{pincode}, Ahmedabad", polygon=True)
            ring = _outer_ring(hit.get("geojson"))
            if ring:
                return Boundary(
                    pincode=pincode,
                    name=hit.get("display_name") or (entry or {}).get("name"),
                    center=[float(hit["lat"]), float(hit["lon"])],
                    coordinates=ring,
                    source=SOURCE_PROVIDER,
                )
            log.info("[Geo] Provider has no polygon for %s", pincode)
        except (UpstreamUnavailable, KeyError, TypeError, ValueError) as e:
            log.warning("[Geo] Boundary lookup failed for %s, using pincode table: %s", pincode, e)
    if entry:
        return Boundary(
            pincode=pincode,
            name=entry["name"],
            center=list(entry["center"]),
            coordinates=[list(p) for p in entry["coordinates"]],
            source=SOURCE_FALLBACK,
        )
    raise NotFound("Boundary not found for this pincode")
