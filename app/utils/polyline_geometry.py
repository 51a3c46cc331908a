"""
Polyline helpers: length, interpolation and projection onto a pipe.

Segment projection treats degrees as planar coordinates, which holds at
sub-kilometer scale. Lengths always use the haversine distance.
"""
from typing import NamedTuple, Optional, Sequence
import math

from app.domain.models import Coordinate
from app.utils.geo_math import haversine_distance


class ClosestPoint(NamedTuple):
    """Projection of a point onto a pipe."""
    position: Coordinate
    distance: float
    segment_index: int


def pipe_length(coords: Sequence[Coordinate]) -> float:
    """
    Total length of a polyline.

    Args:
        coords: Pipe vertices

    Returns:
        Sum of haversine segment lengths in meters (0 for fewer than 2 points)
    """
    if not coords or len(coords) < 2:
        return 0.0
    return sum(haversine_distance(coords[i - 1], coords[i]) for i in range(1, len(coords)))


class PipeLocation(NamedTuple):
    """Point along a pipe and the segment it lies on."""
    position: Coordinate
    segment_index: int


def locate_at_distance(
    coords: Sequence[Coordinate],
    distance: float,
) -> Optional[PipeLocation]:
    """
    Position at a given distance from the start of a pipe, with its segment.

    Zero-length segments (repeated vertices) are skipped, so the segment index
    always refers to a segment with a usable direction when the pipe has one.

    Args:
        coords: Pipe vertices
        distance: Distance from the first vertex in meters

    Returns:
        PipeLocation, the last vertex on the last usable segment if the
        distance exceeds the pipe length, or None for degenerate pipes and
        negative distances
    """
    if not coords or len(coords) < 2 or distance < 0:
        return None

    accumulated = 0.0
    last_segment = len(coords) - 2
    for i in range(1, len(coords)):
        start, end = coords[i - 1], coords[i]
        segment_length = haversine_distance(start, end)
        if segment_length == 0:
            continue
        last_segment = i - 1

        if accumulated + segment_length >= distance:
            progress = (distance - accumulated) / segment_length
            position = Coordinate(
                lat=start.lat + (end.lat - start.lat) * progress,
                lng=start.lng + (end.lng - start.lng) * progress,
            )
            return PipeLocation(position=position, segment_index=i - 1)

        accumulated += segment_length

    return PipeLocation(position=coords[-1], segment_index=last_segment)


def interpolate_at_distance(
    coords: Sequence[Coordinate],
    distance: float,
) -> Optional[Coordinate]:
    """
    Position at a given distance from the start of a pipe.

    Returns:
        Interpolated coordinate, the last vertex if the distance exceeds the
        pipe length, or None for degenerate pipes and negative distances
    """
    location = locate_at_distance(coords, distance)
    return location.position if location else None


def closest_point_on_pipe(
    point: Coordinate,
    coords: Sequence[Coordinate],
) -> Optional[ClosestPoint]:
    """
    Closest point on any segment of a pipe.

    Args:
        point: Point to project
        coords: Pipe vertices

    Returns:
        ClosestPoint (position, haversine distance in meters, segment index),
        or None when the pipe has no usable segment
    """
    if not coords or len(coords) < 2:
        return None

    best: Optional[ClosestPoint] = None

    for i in range(len(coords) - 1):
        start, end = coords[i], coords[i + 1]
        d_lat = end.lat - start.lat
        d_lng = end.lng - start.lng
        squared = d_lat * d_lat + d_lng * d_lng
        if squared == 0:
            continue

        dot = (point.lat - start.lat) * d_lat + (point.lng - start.lng) * d_lng
        t = max(0.0, min(1.0, dot / squared))

        on_segment = Coordinate(
            lat=start.lat + t * (end.lat - start.lat),
            lng=start.lng + t * (end.lng - start.lng),
        )
        distance = haversine_distance(point, on_segment)

        if best is None or distance < best.distance:
            best = ClosestPoint(position=on_segment, distance=distance, segment_index=i)

    return best


def distance_along_pipe(coords: Sequence[Coordinate], target: Coordinate) -> float:
    """
    Distance along a pipe up to the vertex nearest to target.

    Snaps to the nearest vertex rather than the true projection, so it is only
    suitable for reporting.

    Args:
        coords: Pipe vertices
        target: Point of interest

    Returns:
        Cumulative length in meters from the first vertex to the nearest vertex
    """
    if not coords:
        return 0.0

    closest_index = 0
    min_distance = math.inf
    for i, coord in enumerate(coords):
        d = math.hypot(coord.lat - target.lat, coord.lng - target.lng)
        if d < min_distance:
            min_distance = d
            closest_index = i

    return pipe_length(coords[:closest_index + 1])


def projected_distance_along_pipe(coords: Sequence[Coordinate], target: Coordinate) -> float:
    """
    Distance along a pipe up to the projection of target onto it.

    Args:
        coords: Pipe vertices
        target: Point of interest

    Returns:
        Cumulative length in meters, 0 when the pipe has no usable segment
    """
    closest = closest_point_on_pipe(target, coords)
    if closest is None:
        return 0.0

    start = coords[closest.segment_index]
    return pipe_length(coords[:closest.segment_index + 1]) + haversine_distance(start, closest.position)
