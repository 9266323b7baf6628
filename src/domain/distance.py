"""
Distance calculation using the Haversine formula.

Assumption
----------
Great-circle distance is used instead of a routing engine, so the figure
is a lower bound on the road distance the driver will actually cover.

Complexity: O(1) per call.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from .errors import InvalidCoordinate

if TYPE_CHECKING:
    from .entities import GeoPoint

EARTH_RADIUS_KM = 6_371.0


def check_coordinate(lat: float, lng: float) -> None:
    """Raise ``InvalidCoordinate`` unless lat/lng are finite and in range."""
    try:
        lat_ok = -90.0 <= lat <= 90.0
        lng_ok = -180.0 <= lng <= 180.0
    except TypeError as exc:
        raise InvalidCoordinate(f"Non-numeric coordinate ({lat!r}, {lng!r})") from exc
    # NaN fails both comparisons and lands here as well
    if not lat_ok:
        raise InvalidCoordinate(f"Latitude {lat!r} outside [-90, 90]")
    if not lng_ok:
        raise InvalidCoordinate(f"Longitude {lng!r} outside [-180, 180]")


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    check_coordinate(lat1, lng1)
    check_coordinate(lat2, lng2)

    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    # rounding can push h a hair past 1 for antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)
