"""Geospatial helper utilities for AQI estimation."""
from __future__ import annotations

import math
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

EARTH_RADIUS_METERS = 6371000.0

Coordinate = Tuple[float, float]


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two points given in degrees.

    Coordinates are not range-checked; callers filter malformed input upstream.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    # Rounding can push a past 1 for near-antipodal points.
    if a > 1.0:
        a = 1.0
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def coordinate_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Distance in meters between two ``(lat, lon)`` pairs."""
    return haversine_distance(a[0], a[1], b[0], b[1])


def distances_from(target: Sequence[float], coords: np.ndarray) -> np.ndarray:
    """Vectorised haversine distance from ``target`` to every row of ``coords``.

    ``coords`` is an ``(n, 2)`` array of latitude/longitude pairs in degrees.
    """
    coords = np.asarray(coords, dtype=float).reshape(-1, 2)
    lat1 = float(target[0])
    lon1 = float(target[1])
    lat2 = coords[:, 0]
    lon2 = coords[:, 1]
    d_lat = np.radians(lat2 - lat1)
    d_lon = np.radians(lon2 - lon1)
    a = (
        np.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * np.cos(np.radians(lat2)) * np.sin(d_lon / 2) ** 2
    )
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def round_half_up(value: float, digits: int = 1) -> float:
    """Round with halves going up, so -2.25 becomes -2.2 and 2.25 becomes 2.3."""
    factor = 10 ** digits
    scaled = value * factor + 0.5
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled) / factor


AQI_CATEGORIES: Dict[str, Tuple[int, int]] = {
    "Good": (0, 50),
    "Moderate": (51, 100),
    "USG": (101, 150),
    "Unhealthy": (151, 200),
    "Very Unhealthy": (201, 300),
    "Hazardous": (301, 500),
}

AQI_COLORS: Dict[str, str] = {
    "Good": "#00e400",
    "Moderate": "#ffff00",
    "USG": "#ff7e00",
    "Unhealthy": "#ff0000",
    "Very Unhealthy": "#8f3f97",
    "Hazardous": "#7e0023",
    "Unknown": "#999999",
}


def aqi_category(aqi_value: Optional[float]) -> str:
    if aqi_value is None or math.isnan(aqi_value) or aqi_value < 0:
        return "Unknown"
    # Upper bounds only, so 50.4 lands in Moderate.
    for name, (_, hi) in AQI_CATEGORIES.items():
        if aqi_value <= hi:
            return name
    return "Hazardous"


def aqi_color(aqi_value: Optional[float]) -> str:
    """Map an AQI value to the EPA hex colour used for map overlays."""
    return AQI_COLORS[aqi_category(aqi_value)]


__all__ = [
    "EARTH_RADIUS_METERS",
    "Coordinate",
    "haversine_distance",
    "coordinate_distance",
    "distances_from",
    "round_half_up",
    "aqi_category",
    "aqi_color",
    "AQI_CATEGORIES",
    "AQI_COLORS",
]
