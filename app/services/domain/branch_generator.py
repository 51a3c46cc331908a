"""
Domain service: branch pipe generation along a drawn sub-main.

For every row position along the sub-main, a symmetric pair of branches is laid
out (one per side) and each branch is cut to end exactly on the last whole
plant position that still fits inside the target polygon:
- Row positions every row_spacing, starting half a row in
- Lateral direction from the sub-main segment the row sits on, rotated by
  the branch angle
- Bisection search for the polygon boundary
- Length snapped to whole plant intervals, minimum 15 m
- Start and end re-checked against the polygon, end kept out of exclusions
"""
from dataclasses import dataclass
from typing import Optional, Sequence
import logging
import math

from app.config import settings
from app.domain.models import BranchPipe, Coordinate, PlantSpacingSpec
from app.services.domain.boundary_search import (
    max_distance_inside_polygon,
    optimal_branch_length,
)
from app.services.domain.plant_placement import Exclusion, is_excluded, place_plants
from app.utils.geo_math import local_direction, perpendicular, project_along_direction, rotate
from app.utils.geo_projection import get_converter
from app.utils.polygon_geometry import point_in_polygon
from app.utils.polyline_geometry import locate_at_distance, pipe_length

logger = logging.getLogger(__name__)


MIN_BRANCH_LENGTH = 15.0
"""Branches shorter than this (meters) are not laid out."""

SIDES = (("left", -1), ("right", 1))


@dataclass
class BranchGenerationConfig:
    """Configuration for branch pipe generation."""

    default_angle: float = 90.0
    """Angle between the sub-main and its branches, in degrees"""

    min_angle: float = 0.0
    max_angle: float = 180.0

    max_search_distance: float = 500.0
    """Longest branch the boundary search considers (meters)"""

    search_tolerance: float = 0.1
    """Bisection precision (meters)"""

    branch_diameter: float = 25.0
    """Diameter recorded on generated branches (mm)"""

    projection: str = "equirectangular"
    """Meter-to-degree conversion (equirectangular or utm)"""

    @classmethod
    def from_settings(cls) -> "BranchGenerationConfig":
        return cls(
            default_angle=settings.default_branch_angle,
            min_angle=settings.min_branch_angle,
            max_angle=settings.max_branch_angle,
            max_search_distance=settings.boundary_search_max_distance,
            search_tolerance=settings.boundary_search_tolerance,
            branch_diameter=settings.branch_pipe_diameter,
            projection=settings.projection,
        )


class BranchPipeGenerator:
    """
    Lays out branch pipes and their plants along a sub-main pipe.

    A single deterministic pass: identical inputs give identical branches,
    plants and ids. Branches failing any check are omitted, never reported as
    errors.
    """

    def __init__(self, config: Optional[BranchGenerationConfig] = None):
        self.config = config or BranchGenerationConfig.from_settings()
        self.converter = get_converter(self.config.projection)

    def clamp_angle(self, angle: Optional[float]) -> float:
        """Branch angle within the configured range (default when None)."""
        if angle is None:
            return self.config.default_angle
        clamped = min(self.config.max_angle, max(self.config.min_angle, angle))
        if clamped != angle:
            logger.warning(f"Branch angle {angle} outside [{self.config.min_angle}, "
                           f"{self.config.max_angle}], using {clamped}")
        return clamped

    def generate(
        self,
        sub_main_coords: Sequence[Coordinate],
        target_area: Sequence[Coordinate],
        plant_spec: PlantSpacingSpec,
        exclusions: Sequence[Exclusion] = (),
        angle: Optional[float] = None,
        sub_main_id: str = "",
        zone_id: Optional[str] = None,
    ) -> list[BranchPipe]:
        """
        Generate branch pipes for one sub-main.

        Args:
            sub_main_coords: Drawn sub-main polyline
            target_area: Polygon the branches and plants must stay in
            plant_spec: Row and plant spacing
            exclusions: Areas where no plant may be placed
            angle: Branch angle in degrees (default from config)
            sub_main_id: Parent id recorded on the branches and used in their ids
            zone_id: Zone recorded on each plant

        Returns:
            Branch pipes in row order, left before right (possibly empty)
        """
        if not target_area or len(target_area) < 3:
            logger.warning("Target area has fewer than 3 points, no branches generated")
            return []

        length = pipe_length(sub_main_coords)
        if length <= 0:
            logger.warning("Sub-main pipe has no length, no branches generated")
            return []

        branch_angle = self.clamp_angle(angle)
        row_spacing = plant_spec.row_spacing
        number_of_rows = max(2, math.floor(length / row_spacing) + 1)
        id_prefix = f"{sub_main_id}-" if sub_main_id else ""

        logger.info(f"Generating branches along {length:.1f}m sub-main: up to {number_of_rows} rows, "
                    f"row spacing {row_spacing}m, plant spacing {plant_spec.plant_spacing}m, "
                    f"angle {branch_angle}°")

        branches = []
        rejected_short = 0
        rejected_outside = 0
        rejected_excluded = 0

        for row in range(number_of_rows):
            offset = row_spacing * 0.5 + row * row_spacing
            if offset > length:
                break

            location = locate_at_distance(sub_main_coords, offset)
            if location is None:
                continue

            origin, segment_index = location
            direction = local_direction(sub_main_coords[segment_index], sub_main_coords[segment_index + 1])
            lateral = rotate(perpendicular(direction), branch_angle - 90)

            for side, sign in SIDES:
                max_valid = max_distance_inside_polygon(
                    origin,
                    lateral,
                    sign,
                    target_area,
                    max_search=self.config.max_search_distance,
                    tolerance=self.config.search_tolerance,
                    converter=self.converter,
                )
                optimal = optimal_branch_length(max_valid, plant_spec.plant_spacing)

                if optimal < MIN_BRANCH_LENGTH:
                    rejected_short += 1
                    logger.debug(f"Row {row} {side}: {optimal:.1f}m below minimum branch length")
                    continue

                end = project_along_direction(origin, lateral, sign, optimal, self.converter)

                if not (point_in_polygon(origin, target_area) and point_in_polygon(end, target_area)):
                    rejected_outside += 1
                    logger.debug(f"Row {row} {side}: branch start or end outside target area")
                    continue
                if is_excluded(end, exclusions):
                    rejected_excluded += 1
                    logger.debug(f"Row {row} {side}: branch end inside an exclusion area")
                    continue

                branch_id = f"{id_prefix}branch-{row}-{side}"
                coordinates = [origin, end]
                plants = place_plants(
                    coordinates,
                    plant_spec,
                    target_area,
                    exclusions,
                    id_prefix=f"{branch_id}-plant",
                    zone_id=zone_id,
                )

                branches.append(BranchPipe(
                    id=branch_id,
                    sub_main_pipe_id=sub_main_id,
                    coordinates=coordinates,
                    length=pipe_length(coordinates),
                    diameter=self.config.branch_diameter,
                    plants=plants,
                    angle=branch_angle,
                    connection_point=min(1.0, offset / length),
                ))

        logger.info(f"Generated {len(branches)} branches "
                    f"(rejected: too short={rejected_short}, outside={rejected_outside}, "
                    f"excluded={rejected_excluded})")

        return branches
