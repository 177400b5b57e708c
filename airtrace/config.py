"""Estimation options and environment-backed defaults."""
from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

# Load environment variables from .env if available
load_dotenv()

DEFAULT_POWER = 2.0
DEFAULT_MAX_STATIONS = 3
DEFAULT_MAX_DISTANCE_METERS = 50000.0
DEFAULT_MIN_STATIONS = 1

SAMPLE_INTERVAL_METERS = float(os.environ.get("AIRTRACE_SAMPLE_INTERVAL_METERS", "1000"))

ENV_VARS = {
    "power": "AIRTRACE_IDW_POWER",
    "max_stations": "AIRTRACE_MAX_STATIONS",
    "max_distance_meters": "AIRTRACE_MAX_DISTANCE_METERS",
    "min_stations": "AIRTRACE_MIN_STATIONS",
}

# camelCase keys are what browser clients send.
_OPTION_KEYS = {
    "power": "power",
    "maxStations": "max_stations",
    "max_stations": "max_stations",
    "maxDistance": "max_distance_meters",
    "maxDistanceMeters": "max_distance_meters",
    "max_distance_meters": "max_distance_meters",
    "minStations": "min_stations",
    "min_stations": "min_stations",
}

_CASTS = {
    "power": float,
    "max_stations": int,
    "max_distance_meters": float,
    "min_stations": int,
}


def _cast(field_name: str, raw: Any) -> Any:
    if raw is None or isinstance(raw, bool):
        raise ValueError(f"{field_name} must be numeric, got {raw!r}")
    try:
        return _CASTS[field_name](raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} must be numeric, got {raw!r}") from exc


@dataclass(frozen=True)
class EstimationOptions:
    """Inverse-distance-weighting parameters.

    power: exponent applied to distance when weighting stations.
    max_stations: number of nearest stations considered.
    max_distance_meters: stations farther than this are ignored.
    min_stations: fewer stations in range than this yields no estimate.
    """

    power: float = DEFAULT_POWER
    max_stations: int = DEFAULT_MAX_STATIONS
    max_distance_meters: float = DEFAULT_MAX_DISTANCE_METERS
    min_stations: int = DEFAULT_MIN_STATIONS

    def __post_init__(self) -> None:
        if math.isnan(self.power) or self.power < 0:
            raise ValueError("power must be >= 0")
        if self.max_stations < 1:
            raise ValueError("max_stations must be >= 1")
        if math.isnan(self.max_distance_meters) or self.max_distance_meters <= 0:
            raise ValueError("max_distance_meters must be > 0")
        if self.min_stations < 0:
            raise ValueError("min_stations must be >= 0")

    @classmethod
    def from_mapping(
        cls,
        mapping: Optional[Mapping[str, Any]],
        base: Optional["EstimationOptions"] = None,
    ) -> "EstimationOptions":
        """Build options from a dict, falling back to ``base`` for absent keys.

        Accepts both camelCase and snake_case keys; unknown keys are ignored.
        """
        base = base or cls()
        values: Dict[str, Any] = {
            "power": base.power,
            "max_stations": base.max_stations,
            "max_distance_meters": base.max_distance_meters,
            "min_stations": base.min_stations,
        }
        if mapping is None:
            return cls(**values)
        if not isinstance(mapping, Mapping):
            raise ValueError("options must be an object")
        for key, raw in mapping.items():
            field_name = _OPTION_KEYS.get(key)
            if field_name is None:
                continue
            values[field_name] = _cast(field_name, raw)
        return cls(**values)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EstimationOptions":
        environ = os.environ if environ is None else environ
        overrides = {
            field_name: environ[var]
            for field_name, var in ENV_VARS.items()
            if environ.get(var)
        }
        return cls.from_mapping(overrides)


__all__ = [
    "EstimationOptions",
    "SAMPLE_INTERVAL_METERS",
    "DEFAULT_POWER",
    "DEFAULT_MAX_STATIONS",
    "DEFAULT_MAX_DISTANCE_METERS",
    "DEFAULT_MIN_STATIONS",
]
