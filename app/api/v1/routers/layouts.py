"""
API router for layout endpoints.
"""
from fastapi import APIRouter, HTTPException

from app.api.dependencies import LayoutServiceDep
from app.api.v1.models.requests import (
    MainPipeRequest,
    PlantConnectionRequest,
    PlantPlacementRequest,
    SpacingStatisticsRequest,
)
from app.api.v1.models.responses import PlantPlacementResponse
from app.domain.models import (
    BranchPipe,
    MainPipe,
    SpacingStatistics,
    SubMainLayoutRequest,
    SubMainLayoutResult,
)
from app.services.application.layout_service import LayoutInputError


router = APIRouter(
    prefix="/layouts",
    tags=["layouts"],
)

COMMON_RESPONSES = {
    400: {"description": "Request cannot be satisfied"},
    422: {"description": "Malformed request body"},
    429: {"description": "Rate limit exceeded"},
}


@router.post(
    "/sub-main",
    response_model=SubMainLayoutResult,
    summary="Generate branch pipes and plants along a sub-main",
    description="""
    Lay out branch pipes and plants along a drawn sub-main pipe.

    This endpoint:
    1. Resolves the target area (selected zone, the zone the pipe is drawn in,
       or the whole field when zones are not used)
    2. Places a symmetric pair of branches at every row position
    3. Cuts each branch to end on a whole plant position inside the area
    4. Places plants along every branch, skipping exclusion areas
    5. Reports realized row and plant spacing

    Geometry problems are reported as diagnostics in the response rather than
    as errors.
    """,
    responses=COMMON_RESPONSES,
)
def generate_sub_main_layout(
    request: SubMainLayoutRequest,
    layout_service: LayoutServiceDep,
) -> SubMainLayoutResult:
    """
    Generate the layout of one sub-main.

    Args:
        request: Sub-main, zones and spacing
        layout_service: Layout service (injected dependency)

    Returns:
        SubMainLayoutResult with branches, plants, statistics and diagnostics

    Raises:
        HTTPException: If no target zone can be determined
    """
    try:
        return layout_service.generate_sub_main_layout(request)
    except LayoutInputError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/plants",
    response_model=PlantPlacementResponse,
    summary="Place plants along a pipe",
    responses=COMMON_RESPONSES,
)
def place_plants(
    request: PlantPlacementRequest,
    layout_service: LayoutServiceDep,
) -> PlantPlacementResponse:
    """Plants at exact spacing along any pipe, inside the zone and outside exclusions."""
    plants = layout_service.place_plants_along_pipe(
        request.pipe_coordinates,
        request.plant_data,
        request.zone_coordinates,
        request.exclusion_areas,
    )
    return PlantPlacementResponse(plant_count=len(plants), plants=plants)


@router.post(
    "/statistics",
    response_model=SpacingStatistics,
    summary="Spacing statistics of a network",
    responses=COMMON_RESPONSES,
)
def spacing_statistics(
    request: SpacingStatisticsRequest,
    layout_service: LayoutServiceDep,
) -> SpacingStatistics:
    """Average realized row and plant spacing over the given sub-mains."""
    return layout_service.calculate_statistics(request.sub_mains)


@router.post(
    "/connections",
    response_model=BranchPipe,
    summary="Connect a plant to the nearest point of a pipe",
    responses=COMMON_RESPONSES,
)
def connect_plant(
    request: PlantConnectionRequest,
    layout_service: LayoutServiceDep,
) -> BranchPipe:
    """New branch from the closest point on the pipe to the plant."""
    try:
        return layout_service.connect_plant_to_pipe(
            request.plant, request.pipe_coordinates, request.sub_main_id
        )
    except LayoutInputError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/main-pipe",
    response_model=MainPipe,
    summary="Build a main pipe record",
    responses=COMMON_RESPONSES,
)
def build_main_pipe(
    request: MainPipeRequest,
    layout_service: LayoutServiceDep,
) -> MainPipe:
    """Main pipe with its length and the zone it delivers to."""
    return layout_service.build_main_pipe(
        request.coordinates, request.pump.id, request.zones, request.use_zones
    )
