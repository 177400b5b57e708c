"""
Pytest configuration for airtrace tests.

Provides helpers for placing stations and route points at known distances.
Along the equator a longitude offset of ``m / METERS_PER_DEGREE`` degrees is
``m`` meters away from the origin under the haversine formula.
"""

import math

import pytest

METERS_PER_DEGREE = 6371000.0 * math.pi / 180


@pytest.fixture
def east_of_origin():
    """Return a function mapping meters east of (0, 0) to a coordinate."""

    def _point(meters):
        return (0.0, meters / METERS_PER_DEGREE)

    return _point


@pytest.fixture
def make_station(east_of_origin):
    """Return a function building a station record ``meters`` east of (0, 0)."""

    def _station(station_id, meters, value, location=None):
        lat, lon = east_of_origin(meters)
        return {
            "id": station_id,
            "location": location or f"Station {station_id}",
            "coordinates": [lat, lon],
            "value": value,
        }

    return _station


@pytest.fixture
def kl_stations():
    """A few stations around Kuala Lumpur."""
    return [
        {"id": "kl-1", "location": "Cheras", "coordinates": [3.1065, 101.7256], "value": 62},
        {"id": "kl-2", "location": "Petaling Jaya", "coordinates": [3.1073, 101.6067], "value": 48},
        {"id": "kl-3", "location": "Batu Muda", "coordinates": [3.2128, 101.6823], "value": 71},
        {"id": "kl-4", "location": "Klang", "coordinates": [3.0108, 101.4081], "value": 55},
        {"id": "kl-5", "location": "Shah Alam", "coordinates": [3.0733, 101.5185], "value": None},
    ]
