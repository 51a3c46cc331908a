"""
API request models using Pydantic.
"""
from typing import List

from pydantic import Field

from app.domain.models import (
    CamelModel,
    Coordinate,
    ExclusionArea,
    PlantPlacement,
    PlantSpacingSpec,
    Pump,
    SubMainPipe,
    Zone,
)


class PlantPlacementRequest(CamelModel):
    """Place plants along an arbitrary pipe."""
    pipe_coordinates: List[Coordinate] = Field(
        min_length=2,
        description="Pipe polyline the plants are placed along"
    )
    plant_data: PlantSpacingSpec
    zone_coordinates: List[Coordinate] = Field(
        default_factory=list,
        description="Plants outside this polygon are dropped"
    )
    exclusion_areas: List[ExclusionArea] = Field(default_factory=list)


class SpacingStatisticsRequest(CamelModel):
    """Sub-mains to summarize."""
    sub_mains: List[SubMainPipe] = Field(default_factory=list)


class PlantConnectionRequest(CamelModel):
    """Connect an existing plant to the nearest point of a pipe."""
    plant: PlantPlacement
    pipe_coordinates: List[Coordinate] = Field(min_length=2)
    sub_main_id: str = Field(description="Sub-main the new branch belongs to")


class MainPipeRequest(CamelModel):
    """Drawn main pipe from the pump."""
    coordinates: List[Coordinate] = Field(min_length=2)
    pump: Pump = Field(description="Pump the main pipe starts from")
    use_zones: bool = False
    zones: List[Zone] = Field(default_factory=list)
