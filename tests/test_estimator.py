import pytest

from airtrace.config import EstimationOptions
from airtrace.estimator import (
    STATUS_DEGENERATE_WEIGHTS,
    STATUS_ESTIMATED,
    STATUS_INSUFFICIENT_STATIONS,
    estimate_aqi,
)


def test_colocated_station_returns_its_value():
    stations = [{"id": 1, "location": "KL", "coordinates": [3.14, 101.69], "value": 50}]
    result = estimate_aqi((3.14, 101.69), stations)

    assert result.status == STATUS_ESTIMATED
    assert result.ok
    assert result.estimated_aqi == 50.0
    assert result.stations_used == 1
    assert result.stations[0].distance == 0
    assert result.error is None


def test_inverse_distance_squared_weighting(make_station):
    stations = [make_station("near", 1000, 20), make_station("far", 3000, 80)]
    result = estimate_aqi((0, 0), stations, EstimationOptions(power=2))

    # w_near / w_far = 9, so (9 * 20 + 80) / 10
    assert result.estimated_aqi == pytest.approx(26.0, abs=0.05)


def test_power_zero_is_plain_mean(make_station):
    stations = [make_station("a", 1000, 10), make_station("b", 2000, 20)]
    result = estimate_aqi((0, 0), stations, EstimationOptions(power=0))
    assert result.estimated_aqi == 15.0


def test_power_one_weighting(make_station):
    stations = [make_station("near", 1000, 20), make_station("far", 3000, 80)]
    result = estimate_aqi((0, 0), stations, EstimationOptions(power=1))
    # (3 * 20 + 80) / 4
    assert result.estimated_aqi == pytest.approx(35.0, abs=0.05)


def test_no_stations_is_insufficient_not_an_error():
    result = estimate_aqi((0, 0), [])

    assert result.status == STATUS_INSUFFICIENT_STATIONS
    assert not result.ok
    assert result.estimated_aqi is None
    assert result.confidence == 0
    assert result.stations_used == 0
    assert result.error == "Insufficient stations found. Required: 1, Found: 0"


def test_min_stations_not_met(make_station):
    stations = [make_station("only", 1000, 40)]
    result = estimate_aqi((0, 0), stations, EstimationOptions(min_stations=2))

    assert result.estimated_aqi is None
    assert result.confidence == 0
    assert result.stations_used == 1
    assert result.error == "Insufficient stations found. Required: 2, Found: 1"


def test_min_stations_zero_with_nothing_in_range():
    result = estimate_aqi((0, 0), [], EstimationOptions(min_stations=0))
    assert result.status == STATUS_INSUFFICIENT_STATIONS
    assert result.confidence == 0


def test_stations_out_of_range_are_ignored(make_station):
    stations = [make_station("far", 80000, 150)]
    result = estimate_aqi((0, 0), stations)
    assert result.estimated_aqi is None
    assert result.error.endswith("Found: 0")


def test_malformed_stations_are_skipped(make_station):
    stations = [
        {"id": "bad", "coordinates": [0.0], "value": 500},
        {"id": "null", "coordinates": [0.0, 0.0], "value": None},
        make_station("good", 500, 42),
    ]
    result = estimate_aqi((0, 0), stations)
    assert result.estimated_aqi == 42.0
    assert [s.station.id for s in result.stations] == ["good"]


def test_confidence_single_colocated_station():
    stations = [{"id": 1, "coordinates": [0.0, 0.0], "value": 10}]
    result = estimate_aqi((0, 0), stations)
    # distance score 1.0, station count score 1/3
    assert result.confidence == 73.3


def test_confidence_full_when_max_stations_colocated():
    stations = [{"id": i, "coordinates": [0.0, 0.0], "value": 10 * i} for i in range(1, 4)]
    result = estimate_aqi((0, 0), stations)
    assert result.confidence == 100.0
    assert result.estimated_aqi == 20.0


def test_confidence_decreases_with_distance(make_station):
    near = estimate_aqi((0, 0), [make_station("a", 1000, 50)])
    far = estimate_aqi((0, 0), [make_station("a", 40000, 50)])
    assert far.confidence < near.confidence
    for result in (near, far):
        assert 0 <= result.confidence <= 100


def test_confidence_formula(make_station):
    stations = [make_station("a", 10000, 50), make_station("b", 20000, 70)]
    result = estimate_aqi((0, 0), stations)
    distance_score = 1 - 15000 / 50000
    count_score = 2 / 3
    expected = (0.6 * distance_score + 0.4 * count_score) * 100
    assert result.confidence == pytest.approx(expected, abs=0.05)


def test_vanishing_weights_give_no_estimate(make_station):
    stations = [make_station("a", 20000, 50)]
    result = estimate_aqi((0, 0), stations, EstimationOptions(power=1000))
    assert result.status == STATUS_DEGENERATE_WEIGHTS
    assert result.estimated_aqi is None
    assert result.confidence == 0


def test_estimate_is_deterministic(kl_stations):
    first = estimate_aqi((3.139, 101.6869), kl_stations)
    second = estimate_aqi((3.139, 101.6869), kl_stations)
    assert first == second


def test_estimate_does_not_mutate_inputs(kl_stations):
    snapshot = [dict(s) for s in kl_stations]
    estimate_aqi((3.139, 101.6869), kl_stations)
    assert kl_stations == snapshot


def test_to_dict_shape(make_station):
    result = estimate_aqi((0, 0), [make_station("a", 1234.4, 30, location="Depot")])
    payload = result.to_dict()

    assert payload["status"] == "estimated"
    assert payload["estimatedAQI"] == 30.0
    assert payload["stationsUsed"] == 1
    assert payload["targetLocation"] == [0, 0]
    assert payload["stations"][0]["location"] == "Depot"
    assert payload["stations"][0]["distance"] == 1234
    assert "error" not in payload


def test_to_dict_includes_error_when_insufficient():
    payload = estimate_aqi((0, 0), []).to_dict()
    assert payload["estimatedAQI"] is None
    assert payload["error"].startswith("Insufficient stations found")


def test_huge_station_value_does_not_raise():
    stations = [{"id": 1, "coordinates": [0.0, 0.0], "value": 1.5e308}]
    result = estimate_aqi((0, 0), stations)
    assert result.status == STATUS_ESTIMATED
    assert result.estimated_aqi == 1.5e308


def test_overflowing_weighted_sum_gives_no_estimate():
    stations = [{"id": i, "coordinates": [0.0, 0.0], "value": 1.5e308} for i in range(2)]
    result = estimate_aqi((0, 0), stations)
    assert result.status == STATUS_DEGENERATE_WEIGHTS
    assert result.estimated_aqi is None
    assert result.error == "Weighted station values overflowed"
