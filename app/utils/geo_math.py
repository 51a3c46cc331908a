"""
Geo-math primitives: distances, direction vectors and metric offsets.

Direction vectors are expressed in degrees as (lat, lng) pairs. They are only
meaningful as directions; every conversion from meters back to degrees goes
through project_along_direction.
"""
import math
from typing import NamedTuple, Optional

from app.domain.models import Coordinate
from app.utils.geo_projection import DEFAULT_CONVERTER, MetricConverter


EARTH_RADIUS_M = 6371000.0


class Vector(NamedTuple):
    """Planar 2-D vector, (lat, lng) components."""
    lat: float
    lng: float

    @property
    def length(self) -> float:
        return math.hypot(self.lat, self.lng)


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """
    Great-circle distance between two coordinates.

    Args:
        a: First coordinate
        b: Second coordinate

    Returns:
        Distance in meters (never negative)
    """
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lng / 2) ** 2
    )
    # Rounding can push h a hair outside [0, 1]
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return max(0.0, EARTH_RADIUS_M * c)


def local_direction(a: Coordinate, b: Coordinate) -> Vector:
    """Direction from a to b in raw degree units."""
    return Vector(b.lat - a.lat, b.lng - a.lng)


def perpendicular(direction: Vector) -> Vector:
    """
    Unit vector rotated 90 degrees from the given direction.

    A zero-length direction yields (0, 1) so callers always get a usable vector.
    """
    rotated = Vector(-direction.lng, direction.lat)
    length = rotated.length
    if length > 0:
        return Vector(rotated.lat / length, rotated.lng / length)
    return Vector(0.0, 1.0)


def rotate(vector: Vector, degrees: float) -> Vector:
    """Rotate a vector counter-clockwise by the given angle."""
    angle = math.radians(degrees)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return Vector(
        vector.lat * cos_a - vector.lng * sin_a,
        vector.lat * sin_a + vector.lng * cos_a,
    )


def project_along_direction(
    origin: Coordinate,
    direction: Vector,
    sign: float,
    meters: float,
    converter: Optional[MetricConverter] = None,
) -> Coordinate:
    """
    Move from origin by a metric distance along a direction.

    Args:
        origin: Starting coordinate
        direction: Unit direction vector (lat, lng)
        sign: +1 or -1, which side of the direction to travel
        meters: Distance to travel
        converter: Meter-to-degree conversion (equirectangular by default)

    Returns:
        The displaced coordinate
    """
    converter = converter or DEFAULT_CONVERTER
    north_m = direction.lat * sign * meters
    east_m = direction.lng * sign * meters
    return converter.offset(origin, north_m, east_m)
