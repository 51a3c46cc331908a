"""
Application service: Orchestration layer for irrigation layout operations.

This is the boundary of the layout engine. Degenerate geometry is a normal
outcome (empty lists, zero lengths); malformed input and unexpected failures
are logged and turned into an empty result carrying a diagnostic.
"""
from typing import Any, List, Mapping, Optional, Sequence
import logging
import uuid

from pydantic import ValidationError

from app.config import settings
from app.domain.models import (
    BranchPipe,
    Coordinate,
    ExclusionArea,
    LayoutDiagnostic,
    MainPipe,
    PlantPlacement,
    PlantSpacingSpec,
    SpacingStatistics,
    SubMainLayoutRequest,
    SubMainLayoutResult,
    SubMainPipe,
    Zone,
)
from app.services.domain.branch_generator import BranchPipeGenerator
from app.services.domain.network_statistics import calculate_spacing_statistics
from app.services.domain.plant_placement import place_plants
from app.services.domain.zone_resolver import (
    find_target_zone_for_main_pipe,
    resolve_target_zone,
    summarize_zone,
)
from app.utils.geo_math import haversine_distance
from app.utils.polygon_geometry import polygon_issues
from app.utils.polyline_geometry import (
    closest_point_on_pipe,
    pipe_length,
    projected_distance_along_pipe,
)

logger = logging.getLogger(__name__)


class LayoutInputError(ValueError):
    """Request the caller has to fix (e.g. a sub-main drawn outside every zone)."""
    pass


def generate_id(prefix: str) -> str:
    """Unique id for a record created by the service."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _summarize_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors()[:5]:
        location = ".".join(str(part) for part in item["loc"])
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


class LayoutService:
    """
    Application service for layout operations.

    Coordinates zone resolution, branch generation, plant placement and
    statistics. No geometry here, only orchestration and failure handling.
    """

    def __init__(self, generator: Optional[BranchPipeGenerator] = None):
        """
        Initialize the service with dependencies.

        Args:
            generator: Branch pipe generator (configured from settings by default)
        """
        self.generator = generator or BranchPipeGenerator()

    def generate_sub_main_layout(self, request: SubMainLayoutRequest) -> SubMainLayoutResult:
        """
        Lay out branches and plants along one drawn sub-main.

        This method orchestrates:
        1. Resolving the target zone (selected zone, zone containing the pipe,
           or the whole field)
        2. Generating branch pipes with their plants
        3. Computing spacing statistics over the new and existing sub-mains

        Args:
            request: Validated layout request

        Returns:
            SubMainLayoutResult, empty with an error diagnostic on failure

        Raises:
            LayoutInputError: If no target zone can be determined
        """
        zone = resolve_target_zone(
            request.coordinates,
            request.zones,
            request.use_zones,
            request.field_boundary,
            request.plant_data,
            request.selected_zone_id,
        )
        if zone is None:
            if request.use_zones:
                raise LayoutInputError("Sub-main pipe is not inside any zone and no zone was selected")
            raise LayoutInputError("Plant data is required when zones are not used")

        diagnostics = self._polygon_diagnostics(zone, request.exclusion_areas)
        sub_main_id = request.sub_main_id or generate_id("submain")

        try:
            branches = self.generator.generate(
                request.coordinates,
                zone.coordinates,
                zone.plant_data,
                request.exclusion_areas,
                angle=request.branch_angle,
                sub_main_id=sub_main_id,
                zone_id=zone.id,
            )
            sub_main = SubMainPipe(
                id=sub_main_id,
                zone_id=zone.id,
                coordinates=request.coordinates,
                length=pipe_length(request.coordinates),
                diameter=settings.sub_main_pipe_diameter,
                branch_pipes=branches,
            )
            statistics = calculate_spacing_statistics([*request.existing_sub_mains, sub_main])
        except Exception as e:
            logger.exception(f"Layout generation failed for sub-main {sub_main_id}: {e}")
            diagnostics.append(LayoutDiagnostic(
                level="error",
                code="layout_failed",
                message=f"Layout generation failed: {e}",
            ))
            return SubMainLayoutResult(diagnostics=diagnostics)

        if not branches:
            diagnostics.append(LayoutDiagnostic(
                level="info",
                code="no_branches",
                message="No branch fits inside the target area along this sub-main",
            ))

        plants = [plant for branch in branches for plant in branch.plants]
        logger.info(f"Sub-main {sub_main_id} in zone '{zone.id}': "
                    f"{len(branches)} branches, {len(plants)} plants")

        return SubMainLayoutResult(
            sub_main=sub_main,
            plants=plants,
            statistics=statistics,
            diagnostics=diagnostics,
        )

    def generate_from_payload(self, payload: Mapping[str, Any]) -> SubMainLayoutResult:
        """
        Validate a raw payload and lay it out; never raises.

        Args:
            payload: Request body as decoded JSON (camelCase or snake_case keys)

        Returns:
            SubMainLayoutResult, empty with an error diagnostic when the
            payload is malformed or the request cannot be satisfied
        """
        try:
            request = SubMainLayoutRequest.model_validate(payload)
        except ValidationError as e:
            message = _summarize_validation_error(e)
            logger.warning(f"Rejected layout payload: {message}")
            return SubMainLayoutResult(diagnostics=[
                LayoutDiagnostic(level="error", code="invalid_input", message=message)
            ])

        try:
            return self.generate_sub_main_layout(request)
        except LayoutInputError as e:
            logger.warning(f"Layout request cannot be satisfied: {e}")
            return SubMainLayoutResult(diagnostics=[
                LayoutDiagnostic(level="error", code="invalid_request", message=str(e))
            ])

    def place_plants_along_pipe(
        self,
        pipe_coords: Sequence[Coordinate],
        plant_spec: PlantSpacingSpec,
        zone_polygon: Sequence[Coordinate],
        exclusions: Sequence[ExclusionArea] = (),
    ) -> List[PlantPlacement]:
        """Plants at exact spacing along any pipe."""
        return place_plants(pipe_coords, plant_spec, zone_polygon, exclusions)

    def calculate_statistics(self, sub_mains: Sequence[SubMainPipe]) -> SpacingStatistics:
        """Spacing statistics over a whole network."""
        return calculate_spacing_statistics(sub_mains)

    def connect_plant_to_pipe(
        self,
        plant: PlantPlacement,
        pipe_coords: Sequence[Coordinate],
        sub_main_id: str,
    ) -> BranchPipe:
        """
        New branch from the closest point of a pipe to an existing plant.

        Args:
            plant: Plant to connect
            pipe_coords: Sub-main or branch the connection starts from
            sub_main_id: Sub-main the new branch belongs to

        Returns:
            BranchPipe carrying the single plant

        Raises:
            LayoutInputError: If the pipe has no usable segment
        """
        closest = closest_point_on_pipe(plant.position, pipe_coords)
        if closest is None:
            raise LayoutInputError("Pipe has no segment to connect to")

        total = pipe_length(pipe_coords)
        fraction = projected_distance_along_pipe(pipe_coords, plant.position) / total if total > 0 else 0.0

        return BranchPipe(
            id=generate_id("branch"),
            sub_main_pipe_id=sub_main_id,
            coordinates=[closest.position, plant.position],
            length=haversine_distance(closest.position, plant.position),
            diameter=settings.connection_pipe_diameter,
            plants=[plant],
            angle=90.0,
            connection_point=min(1.0, max(0.0, fraction)),
        )

    def build_main_pipe(
        self,
        coordinates: Sequence[Coordinate],
        pump_id: str,
        zones: Sequence[Zone],
        use_zones: bool,
    ) -> MainPipe:
        """Main pipe record from the pump, delivering to the zone it ends in."""
        if len(coordinates) < 2:
            raise LayoutInputError("A main pipe needs at least 2 points")
        return MainPipe(
            id=generate_id("mainpipe"),
            from_pump=pump_id,
            to_zone=find_target_zone_for_main_pipe(coordinates, zones, use_zones),
            coordinates=list(coordinates),
            length=pipe_length(coordinates),
            diameter=settings.main_pipe_diameter,
        )

    def summarize_zone(self, zone: Zone) -> Zone:
        """Zone with derived area, plant count and water need."""
        return summarize_zone(zone)

    def _polygon_diagnostics(
        self,
        zone: Zone,
        exclusions: Sequence[ExclusionArea],
    ) -> List[LayoutDiagnostic]:
        diagnostics = []
        for problem in polygon_issues(zone.coordinates):
            logger.warning(f"Zone '{zone.id}' polygon: {problem}")
            diagnostics.append(LayoutDiagnostic(
                level="warning",
                code="invalid_zone_polygon",
                message=f"Zone '{zone.id}': {problem}",
            ))
        for exclusion in exclusions:
            for problem in polygon_issues(exclusion.coordinates):
                logger.warning(f"Exclusion '{exclusion.id}' polygon: {problem}")
                diagnostics.append(LayoutDiagnostic(
                    level="warning",
                    code="invalid_exclusion_polygon",
                    message=f"Exclusion '{exclusion.name or exclusion.id}': {problem}",
                ))
        return diagnostics
