"""Station records and nearest-station selection."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from .utils_geo import Coordinate, distances_from, round_half_up

logger = logging.getLogger(__name__)

# AirNow observation columns, see https://docs.airnowapi.org/Data/docs
FRAME_COLUMNS = ["Latitude", "Longitude", "AQI"]


@dataclass(frozen=True)
class Station:
    """A fixed sensor location and its latest AQI reading."""

    id: Any
    location: str
    latitude: float
    longitude: float
    value: float
    last_updated: Optional[Any] = None

    @property
    def coordinates(self) -> Coordinate:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class StationWithDistance:
    """A station annotated with its distance in meters to a query point."""

    station: Station
    distance: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.station.id,
            "location": self.station.location,
            "aqi": self.station.value,
            "distance": int(round_half_up(self.distance, 0)),
            "coordinates": [self.station.latitude, self.station.longitude],
        }


def _finite_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, (bool, np.bool_)):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _parse_coordinates(raw: Any) -> Optional[Coordinate]:
    if raw is None or isinstance(raw, (str, bytes, Mapping)):
        return None
    try:
        if len(raw) != 2:
            return None
        lat, lon = raw[0], raw[1]
    except (TypeError, KeyError, IndexError):
        return None
    lat_f = _finite_float(lat)
    lon_f = _finite_float(lon)
    if lat_f is None or lon_f is None:
        return None
    return (lat_f, lon_f)


def parse_station(record: Any) -> Optional[Station]:
    """Turn a station record into a :class:`Station`.

    Records look like ``{"id", "location", "coordinates": [lat, lon], "value",
    "lastUpdated"}``. Returns ``None`` when coordinates are missing or malformed
    or the value is missing or non-numeric.
    """
    if isinstance(record, Station):
        return record
    if not isinstance(record, Mapping):
        return None

    coords = _parse_coordinates(record.get("coordinates"))
    if coords is None:
        return None
    value = _finite_float(record.get("value"))
    if value is None:
        return None

    location = record.get("location")
    return Station(
        id=record.get("id"),
        location="" if location is None else str(location),
        latitude=coords[0],
        longitude=coords[1],
        value=value,
        last_updated=record.get("lastUpdated", record.get("last_updated")),
    )


def parse_stations(records: Optional[Iterable[Any]]) -> List[Station]:
    """Parse many records, silently dropping malformed ones."""
    if records is None:
        return []
    stations: List[Station] = []
    dropped = 0
    for record in records:
        station = parse_station(record)
        if station is None:
            dropped += 1
            continue
        stations.append(station)
    if dropped:
        logger.debug("Dropped %d malformed station records", dropped)
    return stations


def stations_from_frame(df: pd.DataFrame) -> List[Station]:
    """Build stations from an AirNow-style observation frame.

    Expects ``Latitude``, ``Longitude`` and ``AQI`` columns; ``SiteName`` and
    ``UTC`` are used for the label and timestamp when present. Negative AQI
    values are AirNow's missing-data sentinel and are skipped.
    """
    missing = set(FRAME_COLUMNS) - set(df.columns)
    if missing:
        raise ValueError(f"Station frame is missing columns: {sorted(missing)}")
    if df.empty:
        return []

    records = []
    for row in df.to_dict("records"):
        aqi = _finite_float(row.get("AQI"))
        if aqi is None or aqi < 0:
            continue
        site = row.get("SiteName")
        if site is None or (isinstance(site, float) and math.isnan(site)):
            site = f"{row.get('Latitude')},{row.get('Longitude')}"
        records.append(
            {
                "id": row.get("AQSID", site),
                "location": site,
                "coordinates": [row.get("Latitude"), row.get("Longitude")],
                "value": aqi,
                "lastUpdated": row.get("UTC"),
            }
        )
    return parse_stations(records)


def find_nearest_stations(
    stations: Optional[Sequence[Any]],
    target: Sequence[float],
    max_stations: int = 3,
    max_distance_meters: float = 50000,
) -> List[StationWithDistance]:
    """Return up to ``max_stations`` stations within range, nearest first.

    Stations at equal distance keep their input order. Malformed records are
    skipped; an empty list is a normal outcome.
    """
    if not stations:
        return []
    parsed = parse_stations(stations)
    if not parsed:
        return []

    coords = np.array([station.coordinates for station in parsed], dtype=float)
    distances = distances_from(target, coords)
    within = np.flatnonzero(distances <= max_distance_meters)
    order = within[np.argsort(distances[within], kind="stable")]
    limit = max(0, int(max_stations))
    return [StationWithDistance(parsed[i], float(distances[i])) for i in order[:limit]]


__all__ = [
    "Station",
    "StationWithDistance",
    "parse_station",
    "parse_stations",
    "stations_from_frame",
    "find_nearest_stations",
]
