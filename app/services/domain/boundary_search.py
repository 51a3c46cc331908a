"""
Domain service: how far a branch can run before leaving its polygon.
"""
from typing import Optional, Sequence
import logging
import math

from app.domain.models import Coordinate
from app.utils.geo_math import Vector, project_along_direction
from app.utils.geo_projection import MetricConverter
from app.utils.polygon_geometry import point_in_polygon

logger = logging.getLogger(__name__)


DEFAULT_MAX_SEARCH_DISTANCE = 500.0
DEFAULT_SEARCH_TOLERANCE = 0.1


def max_distance_inside_polygon(
    start: Coordinate,
    direction: Vector,
    sign: float,
    polygon: Sequence[Coordinate],
    max_search: float = DEFAULT_MAX_SEARCH_DISTANCE,
    tolerance: float = DEFAULT_SEARCH_TOLERANCE,
    converter: Optional[MetricConverter] = None,
) -> float:
    """
    Bisection search for the longest travel that stays inside a polygon.

    Assumes a single inside-to-outside crossing along the ray. On strongly
    concave polygons the result may be shorter than the true maximum, but the
    returned distance always projects to a point inside the polygon.

    Args:
        start: Ray origin
        direction: Unit direction vector (lat, lng)
        sign: +1 or -1, side of the direction to search
        polygon: Polygon the endpoint must stay inside
        max_search: Upper bound of the search in meters
        tolerance: Stop once the interval is narrower than this (meters)
        converter: Meter-to-degree conversion

    Returns:
        Largest tested distance in meters whose endpoint is inside, or 0
    """
    if not polygon or len(polygon) < 3:
        return 0.0

    low = 0.0
    high = max_search
    max_valid_distance = 0.0

    while high - low > tolerance:
        mid = (low + high) / 2
        candidate = project_along_direction(start, direction, sign, mid, converter)

        if point_in_polygon(candidate, polygon):
            max_valid_distance = mid
            low = mid
        else:
            high = mid

    return max_valid_distance


def plants_on_branch(max_valid_distance: float, plant_spacing: float) -> int:
    """
    Number of plants that fit on a branch with half a spacing of lead-in.

    Returns:
        Plant count, 0 when not even the first plant fits
    """
    if plant_spacing <= 0:
        return 0
    buffer = plant_spacing * 0.5
    available = max_valid_distance - buffer
    if available <= 0:
        return 0
    return max(1, math.floor(available / plant_spacing) + 1)


def optimal_branch_length(max_valid_distance: float, plant_spacing: float) -> float:
    """
    Branch length that ends exactly on the last whole plant position.

    Args:
        max_valid_distance: Longest length that stays inside the polygon
        plant_spacing: Distance between plants in meters

    Returns:
        Branch length in meters, 0 when no plant fits
    """
    count = plants_on_branch(max_valid_distance, plant_spacing)
    if count == 0:
        return 0.0
    buffer = plant_spacing * 0.5
    return min(buffer + (count - 1) * plant_spacing, max_valid_distance)
