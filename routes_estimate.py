"""Flask blueprint exposing point and route AQI estimation."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Tuple

from flask import Blueprint, Response, current_app, jsonify, request

from airtrace.config import SAMPLE_INTERVAL_METERS, EstimationOptions
from airtrace.estimator import estimate_aqi
from airtrace.geojson import route_geojson
from airtrace.route_aqi import aggregate_estimates, estimate_route
from airtrace.sampling import sample_route_points

logger = logging.getLogger(__name__)

estimate_bp = Blueprint("estimate_aqi", __name__)


def _validate_coordinate(raw: Any, name: str) -> Tuple[float, float]:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ValueError(f"{name} must be a [lat, lon] pair")
    try:
        lat, lon = (float(v) for v in raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} values must be numeric") from exc
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        raise ValueError(f"{name} is outside valid latitude/longitude ranges")
    return lat, lon


def _read_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


def _read_stations(body: Dict[str, Any]) -> List[Any]:
    stations = body.get("stations", [])
    if not isinstance(stations, list):
        raise ValueError("stations must be a list")
    return stations


def _read_route_request(body: Dict[str, Any]):
    route = body.get("route")
    if not isinstance(route, list):
        raise ValueError("route must be a list of [lat, lon] pairs")
    vertices = [_validate_coordinate(v, f"route[{i}]") for i, v in enumerate(route)]
    try:
        interval = float(body.get("interval", SAMPLE_INTERVAL_METERS))
    except (TypeError, ValueError) as exc:
        raise ValueError("interval must be numeric") from exc
    if interval <= 0:
        raise ValueError("interval must be > 0")
    options = EstimationOptions.from_mapping(body.get("options"), base=EstimationOptions.from_env())
    points = sample_route_points(vertices, interval)
    estimates = estimate_route(points, _read_stations(body), options)
    return points, estimates


@estimate_bp.route("/estimate/point", methods=["POST"])
def estimate_point() -> Response:
    try:
        body = _read_body()
        target = _validate_coordinate(body.get("target"), "target")
        stations = _read_stations(body)
        options = EstimationOptions.from_mapping(body.get("options"), base=EstimationOptions.from_env())
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    try:
        result = estimate_aqi(target, stations, options)
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("AQI estimation failed: %s", exc)
        return jsonify({"error": "estimation_failed", "details": str(exc)}), 500
    return jsonify(result.to_dict())


@estimate_bp.route("/estimate/route", methods=["POST"])
def estimate_route_summary() -> Response:
    try:
        points, estimates = _read_route_request(_read_body())
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Route AQI estimation failed: %s", exc)
        return jsonify({"error": "estimation_failed", "details": str(exc)}), 500

    return jsonify(
        {
            "points": [list(p) for p in points],
            "results": [e.to_dict() for e in estimates],
            "aggregate": aggregate_estimates(estimates).to_dict(),
        }
    )


@estimate_bp.route("/estimate/route.geojson", methods=["POST"])
def estimate_route_geojson() -> Response:
    try:
        points, estimates = _read_route_request(_read_body())
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("Route AQI estimation failed: %s", exc)
        return jsonify({"error": "estimation_failed", "details": str(exc)}), 500

    response = current_app.response_class(
        response=json.dumps(route_geojson(points, estimates)),
        status=200,
        mimetype="application/geo+json",
    )
    response.headers["Cache-Control"] = "no-store"
    return response


__all__ = ["estimate_bp"]
