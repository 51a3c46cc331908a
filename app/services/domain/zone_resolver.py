"""
Domain service: which zone a pipe belongs to, and zone-level estimates.
"""
from typing import Optional, Sequence
import logging
import math

from app.config import settings
from app.domain.models import Coordinate, PlantSpacingSpec, Zone
from app.utils.polygon_geometry import point_in_polygon, polygon_area

logger = logging.getLogger(__name__)


MAIN_AREA_ZONE_ID = "main-area"


def find_zone_containing_point(point: Coordinate, zones: Sequence[Zone]) -> Optional[Zone]:
    """First zone whose polygon contains the point."""
    for zone in zones:
        if point_in_polygon(point, zone.coordinates):
            return zone
    return None


def find_zone_for_pipe(coordinates: Sequence[Coordinate], zones: Sequence[Zone]) -> Optional[Zone]:
    """
    Zone a drawn pipe belongs to.

    The middle vertex decides; the start and then the end vertex are tried
    when the middle falls outside every zone.
    """
    if not coordinates:
        return None

    for point in (coordinates[len(coordinates) // 2], coordinates[0], coordinates[-1]):
        zone = find_zone_containing_point(point, zones)
        if zone is not None:
            return zone
    return None


def find_target_zone_for_main_pipe(
    coordinates: Sequence[Coordinate],
    zones: Sequence[Zone],
    use_zones: bool,
) -> str:
    """
    Id of the zone a main pipe delivers to.

    Returns:
        The zone containing the pipe's end point, the first zone when none
        does, or "main-area" when zones are not in use
    """
    if not use_zones or not zones or not coordinates:
        return MAIN_AREA_ZONE_ID
    target = find_zone_containing_point(coordinates[-1], zones)
    return target.id if target else zones[0].id


def calculate_plant_count(
    zone_area: float,
    plant_spacing: float,
    row_spacing: float,
    area_efficiency: Optional[float] = None,
) -> int:
    """
    Estimate how many plants fit in an area.

    Args:
        zone_area: Area in m²
        plant_spacing: Distance between plants (m)
        row_spacing: Distance between rows (m)
        area_efficiency: Plantable share of the area (default from settings)

    Returns:
        Estimated plant count (0 for non-positive inputs)
    """
    if zone_area <= 0 or plant_spacing <= 0 or row_spacing <= 0:
        return 0
    if area_efficiency is None:
        area_efficiency = settings.plant_count_area_efficiency
    effective_area = zone_area * area_efficiency
    return max(0, math.floor(effective_area / (plant_spacing * row_spacing)))


def summarize_zone(zone: Zone) -> Zone:
    """Copy of the zone with area, plant count and water need filled in."""
    area = polygon_area(zone.coordinates)
    plant_count = calculate_plant_count(
        area, zone.plant_data.plant_spacing, zone.plant_data.row_spacing
    )
    return zone.model_copy(update={
        "area": area,
        "plant_count": plant_count,
        "total_water_need": plant_count * zone.plant_data.water_need,
    })


def main_area_zone(field_boundary: Sequence[Coordinate], plant_spec: PlantSpacingSpec) -> Zone:
    """Synthetic zone covering the whole field, used when zones are off."""
    return Zone(
        id=MAIN_AREA_ZONE_ID,
        name="Main area",
        coordinates=list(field_boundary),
        plant_data=plant_spec,
        area=polygon_area(field_boundary),
    )


def resolve_target_zone(
    sub_main_coords: Sequence[Coordinate],
    zones: Sequence[Zone],
    use_zones: bool,
    field_boundary: Sequence[Coordinate],
    plant_spec: Optional[PlantSpacingSpec],
    selected_zone_id: Optional[str] = None,
) -> Optional[Zone]:
    """
    Zone whose polygon and spacing a new sub-main is laid out in.

    With zones in use, the explicitly selected zone wins, otherwise the zone
    the pipe is drawn in. Without zones, the whole field boundary is used with
    the given plant spec.

    Returns:
        The zone, or None when no zone can be determined
    """
    if use_zones:
        if selected_zone_id is not None:
            for zone in zones:
                if zone.id == selected_zone_id:
                    return zone
            logger.warning(f"Selected zone '{selected_zone_id}' not found")
            return None
        return find_zone_for_pipe(sub_main_coords, zones)

    if plant_spec is None:
        return None
    return main_area_zone(field_boundary, plant_spec)
