"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Iterable

from shapely.geometry import MultiPoint

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def centroid(coordinates: Iterable[tuple[float, float]]) -> tuple[float, float]:
    """Arithmetic mean of (x, y) pairs; every occurrence counts."""

    coords = list(coordinates)
    if not coords:
        raise ValueError("Cannot compute the centroid of an empty coordinate set.")
    center = MultiPoint(coords).centroid
    return center.x, center.y
