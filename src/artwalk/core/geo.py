"""
Geospatial helpers.

Two concerns live here, and they must not be mixed:
- true geodesic distance (Haversine), the only basis for trigger decisions;
- display normalization, which maps a coordinate into a percentage range for
  placing an indicator on screen when a real map projection is unavailable.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import asin, cos, radians, sin, sqrt
from typing import Iterable, Sequence

EARTH_RADIUS_M = 6_371_000

DISPLAY_MIN = 10.0
DISPLAY_MAX = 90.0


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle distance in meters between two points."""
    lat1 = radians(a.lat)
    lon1 = radians(a.lon)
    lat2 = radians(b.lat)
    lon2 = radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal points.
    return 2 * EARTH_RADIUS_M * asin(sqrt(min(1.0, h)))


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two lat/lon pairs (degrees)."""
    return haversine_m(GeoPoint(lat=lat1, lon=lon1), GeoPoint(lat=lat2, lon=lon2))


def normalize(
    value: float,
    values: Iterable[float],
    *,
    low: float = DISPLAY_MIN,
    high: float = DISPLAY_MAX,
) -> float:
    """Map `value` linearly into [low, high] using the min/max of `values`.

    Returns the midpoint when `values` is empty or has zero spread. Values outside
    the set's range are clamped so the result always stays within [low, high].
    """
    pool = [float(v) for v in values]
    if not pool:
        return (low + high) / 2
    vmin = min(pool)
    vmax = max(pool)
    if vmax == vmin:
        return (low + high) / 2
    pct = (float(value) - vmin) / (vmax - vmin) * (high - low) + low
    return max(low, min(high, pct))


def screen_position(
    point: GeoPoint,
    points: Sequence[GeoPoint],
    *,
    low: float = DISPLAY_MIN,
    high: float = DISPLAY_MAX,
) -> tuple[float, float]:
    """Return `(left_pct, top_pct)` for `point` relative to the bounding box of `points`."""
    left = normalize(point.lon, (p.lon for p in points), low=low, high=high)
    top = normalize(point.lat, (p.lat for p in points), low=low, high=high)
    return left, top

