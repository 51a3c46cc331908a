"""
API router for zone and plant type endpoints.
"""
from fastapi import APIRouter

from app.api.dependencies import LayoutServiceDep
from app.api.v1.models.responses import PlantCatalogResponse
from app.domain.models import Zone
from app.domain.plant_catalog import DEFAULT_PLANT_TYPES


router = APIRouter(tags=["zones"])


@router.post(
    "/zones/summary",
    response_model=Zone,
    summary="Zone area, plant count and water need",
    responses={422: {"description": "Malformed zone"}, 429: {"description": "Rate limit exceeded"}},
)
def summarize_zone(zone: Zone, layout_service: LayoutServiceDep) -> Zone:
    """
    Fill in the derived fields of a zone.

    The plant count assumes 85% of the area is plantable; water need is
    plant count times the plant type's daily need.
    """
    return layout_service.summarize_zone(zone)


@router.get(
    "/plants/catalog",
    response_model=PlantCatalogResponse,
    summary="Default plant types",
)
def plant_catalog() -> PlantCatalogResponse:
    return PlantCatalogResponse(plants=DEFAULT_PLANT_TYPES)
