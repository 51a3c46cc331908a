"""
Domain service: realized spacing of a generated pipe network.

Descriptive aggregates only; nothing here feeds back into placement.
"""
from typing import Optional, Sequence
import logging

import numpy as np
from scipy.spatial import KDTree

from app.config import settings
from app.domain.models import Coordinate, SpacingStatistics, SubMainPipe
from app.utils.geo_math import haversine_distance
from app.utils.geo_projection import project_to_meters
from app.utils.polyline_geometry import distance_along_pipe, projected_distance_along_pipe

logger = logging.getLogger(__name__)

# Origins closer than this (meters) belong to the same row
SAME_ORIGIN_TOLERANCE = 1e-6


def _along(coords: Sequence[Coordinate], target: Coordinate, snap_to_vertex: bool) -> float:
    if snap_to_vertex:
        return distance_along_pipe(coords, target)
    return projected_distance_along_pipe(coords, target)


def _consecutive_gaps(positions: list[float]) -> list[float]:
    return [abs(positions[i] - positions[i - 1]) for i in range(1, len(positions))]


def _mean(values: list[float]) -> float:
    return float(np.mean(values)) if values else 0.0


def calculate_plant_clearance(positions: list[Coordinate]) -> float:
    """
    Median distance from each plant to its nearest neighbouring plant.

    Args:
        positions: Plant positions across the whole network

    Returns:
        Median nearest-neighbour distance in meters (0 with fewer than 2 plants)
    """
    if len(positions) < 2:
        return 0.0

    projected, _ = project_to_meters(positions)
    points = np.array(projected)
    kdtree = KDTree(points)
    # First neighbour is the point itself
    distances, _ = kdtree.query(points, k=2)
    return float(np.median(distances[:, 1]))


def calculate_spacing_statistics(
    sub_mains: Sequence[SubMainPipe],
    snap_to_vertex: Optional[bool] = None,
) -> SpacingStatistics:
    """
    Average realized row and plant spacing over a set of sub-mains.

    Row spacing is measured between consecutive distinct branch origins along
    each sub-main (a left/right pair shares one origin); plant spacing between
    consecutive plants along each branch.

    Distances along a pipe are taken at the point where the origin or plant
    projects onto it by default. Set snap_to_vertex (or the
    statistics_snap_to_vertex setting) to measure at the nearest pipe vertex
    instead; on a two-vertex sub-main that collapses most row gaps to zero.

    Args:
        sub_mains: Sub-main pipes with their branches and plants
        snap_to_vertex: Measure at the nearest pipe vertex instead of the
            projected point (default from settings)

    Returns:
        SpacingStatistics
    """
    if snap_to_vertex is None:
        snap_to_vertex = settings.statistics_snap_to_vertex

    total_branches = 0
    row_spacings: list[float] = []
    plant_spacings: list[float] = []
    all_positions: list[Coordinate] = []

    for sub_main in sub_mains:
        total_branches += len(sub_main.branch_pipes)

        origins: list[Coordinate] = []
        for branch in sub_main.branch_pipes:
            if not branch.coordinates:
                continue
            origin = branch.coordinates[0]
            if not origins or haversine_distance(origins[-1], origin) >= SAME_ORIGIN_TOLERANCE:
                origins.append(origin)

        if len(origins) > 1:
            positions = [_along(sub_main.coordinates, o, snap_to_vertex) for o in origins]
            row_spacings.extend(_consecutive_gaps(positions))

        for branch in sub_main.branch_pipes:
            all_positions.extend(plant.position for plant in branch.plants)
            if len(branch.plants) > 1:
                positions = [
                    _along(branch.coordinates, plant.position, snap_to_vertex)
                    for plant in branch.plants
                ]
                plant_spacings.extend(_consecutive_gaps(positions))

    statistics = SpacingStatistics(
        total_branches=total_branches,
        average_row_spacing=_mean(row_spacings),
        average_plant_spacing=_mean(plant_spacings),
        spacing_accuracy=100.0,
        median_plant_clearance=calculate_plant_clearance(all_positions),
    )

    logger.debug(f"Spacing statistics: branches={statistics.total_branches}, "
                 f"row={statistics.average_row_spacing:.2f}m, "
                 f"plant={statistics.average_plant_spacing:.2f}m")

    return statistics
