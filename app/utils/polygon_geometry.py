"""
Polygon helpers working directly on lat/lng vertex lists.

Polygons are implicitly closed (the last vertex connects to the first) and are
not validated for self-intersection; every function degrades to a safe value
instead of raising.
"""
from typing import List, Sequence
import logging
import math

from shapely.errors import ShapelyError
from shapely.geometry import Polygon
from shapely.validation import explain_validity

from app.domain.models import Coordinate
from app.utils.geo_projection import METERS_PER_DEGREE

logger = logging.getLogger(__name__)

# Edges whose lng span is below this are treated as parallel to the ray
EDGE_SPAN_EPSILON = 1e-15


def point_in_polygon(point: Coordinate, polygon: Sequence[Coordinate]) -> bool:
    """
    Ray-casting point-in-polygon test (odd number of crossings = inside).

    Args:
        point: Coordinate to test
        polygon: Polygon vertices (at least 3)

    Returns:
        True if the point is inside, False otherwise or for degenerate polygons
    """
    if point is None or not polygon or len(polygon) < 3:
        return False

    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i].lat, polygon[i].lng
        xj, yj = polygon[j].lat, polygon[j].lng

        if (yi > point.lng) != (yj > point.lng):
            span = yj - yi
            if abs(span) > EDGE_SPAN_EPSILON:
                x_cross = (xj - xi) * (point.lng - yi) / span + xi
                if point.lat < x_cross:
                    inside = not inside
        j = i

    return inside


def polygon_centroid_latitude(polygon: Sequence[Coordinate]) -> float:
    """Mean vertex latitude, used as the reference latitude for scaling."""
    if not polygon:
        return 0.0
    return sum(coord.lat for coord in polygon) / len(polygon)


def polygon_area(polygon: Sequence[Coordinate]) -> float:
    """
    Approximate polygon area using the shoelace formula on degrees.

    The degree area is scaled by 111 000 m per degree of latitude and
    111 000 * cos(mean latitude) m per degree of longitude, which is only
    accurate for field-scale polygons.

    Args:
        polygon: Polygon vertices

    Returns:
        Area in m² (0 for fewer than 3 vertices)
    """
    if not polygon or len(polygon) < 3:
        return 0.0

    twice_area = 0.0
    n = len(polygon)
    for i in range(n):
        j = (i + 1) % n
        twice_area += polygon[i].lat * polygon[j].lng
        twice_area -= polygon[j].lat * polygon[i].lng
    area_deg = abs(twice_area) / 2

    avg_lat = polygon_centroid_latitude(polygon)
    lat_factor = METERS_PER_DEGREE
    lng_factor = METERS_PER_DEGREE * math.cos(math.radians(avg_lat))

    return max(0.0, area_deg * lat_factor * lng_factor)


def polygon_issues(polygon: Sequence[Coordinate]) -> List[str]:
    """
    Describe geometric problems of a polygon (self-intersection, collapse).

    Used for diagnostics only; the layout algorithms accept invalid polygons.

    Args:
        polygon: Polygon vertices

    Returns:
        List of human readable problems (empty when the polygon is valid)
    """
    if not polygon or len(polygon) < 3:
        return [f"Polygon has {len(polygon) if polygon else 0} vertices, at least 3 are required"]

    try:
        shape = Polygon([(coord.lng, coord.lat) for coord in polygon])
        if shape.is_valid:
            return []
        return [explain_validity(shape)]
    except (ShapelyError, ValueError) as e:
        logger.debug(f"Could not build polygon for validation: {e}")
        return [f"Polygon could not be built: {e}"]
