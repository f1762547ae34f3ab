from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections import OrderedDict

from geo_engine.models import Coordinate

EARTH_RADIUS_KM = 6371.0

DistanceKey = tuple[float, float, float, float]


def haversine_distance_km(start: Coordinate, end: Coordinate) -> float:
    start_lat = math.radians(start.latitude)
    end_lat = math.radians(end.latitude)
    delta_lat = math.radians(end.latitude - start.latitude)
    delta_lng = math.radians(end.longitude - start.longitude)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(start_lat) * math.cos(end_lat) * math.sin(delta_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


class DistanceCache(ABC):
    @abstractmethod
    def get(self, key: DistanceKey) -> float | None:
        raise NotImplementedError

    @abstractmethod
    def set_if_absent(self, key: DistanceKey, value: float) -> float:
        """Store ``value`` unless ``key`` is present; return the stored value."""
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        raise NotImplementedError


class InMemoryDistanceCache(DistanceCache):
    def __init__(self, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self._max_entries = max_entries
        self._items: OrderedDict[DistanceKey, float] = OrderedDict()

    def get(self, key: DistanceKey) -> float | None:
        value = self._items.get(key)
        if value is not None and self._max_entries is not None:
            self._items.move_to_end(key)
        return value

    def set_if_absent(self, key: DistanceKey, value: float) -> float:
        stored = self._items.setdefault(key, value)
        if self._max_entries is not None:
            self._items.move_to_end(key)
            while len(self._items) > self._max_entries:
                self._items.popitem(last=False)
        return stored

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


class DistanceCalculator:
    """Memoized haversine distance.

    Distances between two fixed points never change, so cached entries are
    never invalidated. With ``symmetric_keys`` the pair is sorted before
    lookup and ``(a, b)`` shares an entry with ``(b, a)``; otherwise keys
    follow call order.
    """

    def __init__(self, cache: DistanceCache | None = None, symmetric_keys: bool = True) -> None:
        self._cache = cache if cache is not None else InMemoryDistanceCache()
        self._symmetric_keys = symmetric_keys

    @property
    def cache(self) -> DistanceCache:
        return self._cache

    def distance_km(self, start: Coordinate, end: Coordinate) -> float:
        key = self._key(start, end)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        return self._cache.set_if_absent(key, haversine_distance_km(start, end))

    def _key(self, start: Coordinate, end: Coordinate) -> DistanceKey:
        first = (start.latitude, start.longitude)
        second = (end.latitude, end.longitude)
        if self._symmetric_keys and second < first:
            first, second = second, first
        return (*first, *second)
