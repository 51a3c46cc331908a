"""
Domain service: fixed-spacing plant placement along a pipe.
"""
from typing import Optional, Sequence, Union
import logging
import math

from app.domain.models import Coordinate, ExclusionArea, PlantPlacement, PlantSpacingSpec
from app.utils.polygon_geometry import point_in_polygon
from app.utils.polyline_geometry import interpolate_at_distance, pipe_length

logger = logging.getLogger(__name__)

Exclusion = Union[ExclusionArea, Sequence[Coordinate]]


def exclusion_polygon(exclusion: Exclusion) -> Sequence[Coordinate]:
    """Vertices of an exclusion given as a record or a bare polygon."""
    if isinstance(exclusion, ExclusionArea):
        return exclusion.coordinates
    return exclusion


def is_excluded(position: Coordinate, exclusions: Sequence[Exclusion]) -> bool:
    """True if the position falls inside any exclusion polygon."""
    return any(point_in_polygon(position, exclusion_polygon(e)) for e in exclusions)


def place_plants(
    pipe_coords: Sequence[Coordinate],
    plant_spec: PlantSpacingSpec,
    zone_polygon: Sequence[Coordinate],
    exclusions: Sequence[Exclusion] = (),
    id_prefix: str = "plant",
    zone_id: Optional[str] = None,
) -> list[PlantPlacement]:
    """
    Place plants along a pipe at exact spacing.

    The first plant sits half a spacing from the pipe start, then one every
    plant_spacing meters. Positions outside the zone or inside an exclusion
    are dropped; the remaining ones keep their ordinal in their id.

    Args:
        pipe_coords: Pipe vertices
        plant_spec: Spacing specification
        zone_polygon: Plants must fall inside this polygon
        exclusions: Areas where no plant may be placed
        id_prefix: Prefix for the generated plant ids
        zone_id: Zone recorded on each placement

    Returns:
        Placements in pipe order (possibly empty)
    """
    if not pipe_coords or len(pipe_coords) < 2:
        return []

    length = pipe_length(pipe_coords)
    spacing = plant_spec.plant_spacing
    buffer = spacing * 0.5
    available = length - buffer

    if available <= 0:
        return []

    number_of_plants = max(1, math.floor(available / spacing) + 1)

    plants = []
    outside_zone = 0
    in_exclusion = 0

    for i in range(number_of_plants):
        distance = buffer + i * spacing
        if distance > length:
            break

        position = interpolate_at_distance(pipe_coords, distance)
        if position is None:
            continue

        if not point_in_polygon(position, zone_polygon):
            outside_zone += 1
            continue
        if is_excluded(position, exclusions):
            in_exclusion += 1
            continue

        plants.append(PlantPlacement(
            id=f"{id_prefix}-{i}",
            position=position,
            plant_data=plant_spec,
            zone_id=zone_id,
        ))

    if outside_zone or in_exclusion:
        logger.debug(f"Dropped plants on {id_prefix}: outside zone={outside_zone}, "
                     f"in exclusion={in_exclusion}")

    return plants
