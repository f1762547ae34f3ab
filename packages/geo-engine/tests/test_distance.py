import math

import pytest

from geo_engine.distance import DistanceCalculator, InMemoryDistanceCache, haversine_distance_km
from geo_engine.models import Coordinate

MANILA = Coordinate(latitude=14.5995, longitude=120.9842)
QUEZON_CITY = Coordinate(latitude=14.6760, longitude=121.0437)


def test_haversine_distance_is_zero_for_same_point() -> None:
    assert haversine_distance_km(MANILA, MANILA) == 0.0


def test_haversine_distance_matches_known_value() -> None:
    distance = haversine_distance_km(MANILA, QUEZON_CITY)
    assert distance == pytest.approx(10.6, abs=0.3)


def test_haversine_distance_is_symmetric() -> None:
    assert haversine_distance_km(MANILA, QUEZON_CITY) == pytest.approx(
        haversine_distance_km(QUEZON_CITY, MANILA)
    )


def test_one_degree_of_latitude() -> None:
    start = Coordinate(latitude=0.0, longitude=0.0)
    end = Coordinate(latitude=1.0, longitude=0.0)
    assert haversine_distance_km(start, end) == pytest.approx(6371.0 * math.pi / 180)


def test_nan_input_propagates() -> None:
    broken = Coordinate(latitude=math.nan, longitude=0.0)
    assert math.isnan(haversine_distance_km(MANILA, broken))


def test_calculator_returns_cached_value() -> None:
    cache = InMemoryDistanceCache()
    calculator = DistanceCalculator(cache)

    first = calculator.distance_km(MANILA, QUEZON_CITY)
    second = calculator.distance_km(MANILA, QUEZON_CITY)

    assert first == second
    assert len(cache) == 1


def test_calculator_serves_value_stored_in_cache() -> None:
    cache = InMemoryDistanceCache()
    calculator = DistanceCalculator(cache)
    key = (MANILA.latitude, MANILA.longitude, QUEZON_CITY.latitude, QUEZON_CITY.longitude)
    cache.set_if_absent(key, 123.0)

    assert calculator.distance_km(MANILA, QUEZON_CITY) == 123.0


def test_symmetric_keys_share_one_entry() -> None:
    calculator = DistanceCalculator()

    forward = calculator.distance_km(MANILA, QUEZON_CITY)
    backward = calculator.distance_km(QUEZON_CITY, MANILA)

    assert forward == backward
    assert len(calculator.cache) == 1


def test_directional_keys_keep_separate_entries() -> None:
    calculator = DistanceCalculator(symmetric_keys=False)

    forward = calculator.distance_km(MANILA, QUEZON_CITY)
    backward = calculator.distance_km(QUEZON_CITY, MANILA)

    assert forward == pytest.approx(backward)
    assert len(calculator.cache) == 2


def test_calculators_do_not_share_state() -> None:
    first = DistanceCalculator()
    second = DistanceCalculator()
    first.distance_km(MANILA, QUEZON_CITY)

    assert len(first.cache) == 1
    assert len(second.cache) == 0


def test_cache_set_if_absent_keeps_first_value() -> None:
    cache = InMemoryDistanceCache()
    key = (1.0, 2.0, 3.0, 4.0)

    assert cache.set_if_absent(key, 10.0) == 10.0
    assert cache.set_if_absent(key, 99.0) == 10.0
    assert cache.get(key) == 10.0


def test_bounded_cache_evicts_least_recently_used() -> None:
    cache = InMemoryDistanceCache(max_entries=2)
    cache.set_if_absent((0.0, 0.0, 0.0, 1.0), 1.0)
    cache.set_if_absent((0.0, 0.0, 0.0, 2.0), 2.0)
    cache.get((0.0, 0.0, 0.0, 1.0))
    cache.set_if_absent((0.0, 0.0, 0.0, 3.0), 3.0)

    assert len(cache) == 2
    assert cache.get((0.0, 0.0, 0.0, 2.0)) is None
    assert cache.get((0.0, 0.0, 0.0, 1.0)) == 1.0


def test_bounded_cache_rejects_invalid_size() -> None:
    with pytest.raises(ValueError):
        InMemoryDistanceCache(max_entries=0)
