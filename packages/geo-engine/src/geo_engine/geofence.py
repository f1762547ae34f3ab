from geo_engine.distance import DistanceCalculator, haversine_distance_km
from geo_engine.models import Coordinate


def is_point_inside_radius(
    center: Coordinate,
    point: Coordinate,
    radius_km: float,
    calculator: DistanceCalculator | None = None,
) -> bool:
    if radius_km < 0:
        raise ValueError("radius_km must be >= 0")
    if calculator is None:
        return haversine_distance_km(center, point) <= radius_km
    return calculator.distance_km(center, point) <= radius_km
