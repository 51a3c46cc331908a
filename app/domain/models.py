"""
Domain models for the irrigation layout: coordinates, zones, pipes and plants.

These models represent the core domain entities and should be independent
of any infrastructure concerns (HTTP, storage, rendering). Attribute names are
snake_case in Python and camelCase on the wire.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase field names."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Coordinate(CamelModel):
    """Angular position in degrees (WGS84). No altitude."""
    lat: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)
    lng: float = Field(ge=-180.0, le=180.0, allow_inf_nan=False)

    class Config:
        frozen = True


class PlantSpacingSpec(CamelModel):
    """Spacing and water requirement of a plant type."""
    id: Optional[int] = None
    name: Optional[str] = None
    plant_spacing: float = Field(gt=0, description="Distance between plants along a branch (m)")
    row_spacing: float = Field(gt=0, description="Distance between branch origins along a sub-main (m)")
    water_need: float = Field(default=0.0, ge=0, description="Liters per plant per day")

    class Config:
        frozen = True


class Zone(CamelModel):
    """Polygon sub-region of the field with its own plant type."""
    id: str
    name: str = ""
    coordinates: List[Coordinate]
    plant_data: PlantSpacingSpec
    area: float = Field(default=0.0, description="Area in m²")
    plant_count: int = 0
    total_water_need: float = Field(default=0.0, description="Liters per day")


class ExclusionArea(CamelModel):
    """Region where no plants or branch endpoints may be placed."""
    id: str = ""
    type: Literal["building", "powerplant", "river", "road", "other"] = "other"
    name: str = ""
    coordinates: List[Coordinate]


class Pump(CamelModel):
    """Water source the main pipes start from."""
    id: str
    position: Coordinate
    type: Literal["submersible", "centrifugal", "jet"] = "submersible"
    capacity: float = 1000.0
    head: float = 50.0


class PlantPlacement(CamelModel):
    """A plant position tagged with the spacing used to place it."""
    id: str
    position: Coordinate
    plant_data: PlantSpacingSpec
    zone_id: Optional[str] = None


class BranchPipe(CamelModel):
    """Lateral pipe carrying plants, attached to a sub-main."""
    id: str
    sub_main_pipe_id: str = ""
    coordinates: List[Coordinate]
    length: float = Field(description="Length in meters")
    diameter: float = Field(default=25.0, description="Diameter in mm")
    plants: List[PlantPlacement] = Field(default_factory=list)
    angle: float = Field(default=90.0, ge=0, le=180)
    connection_point: float = Field(default=0.5, ge=0, le=1)
    sprinkler_type: str = "standard"


class SubMainPipe(CamelModel):
    """Secondary distribution pipe from which branch pipes are generated."""
    id: str
    zone_id: str
    coordinates: List[Coordinate]
    length: float = Field(description="Length in meters")
    diameter: float = Field(default=32.0, description="Diameter in mm")
    branch_pipes: List[BranchPipe] = Field(default_factory=list)
    material: Literal["pvc", "hdpe", "steel"] = "pvc"


class MainPipe(CamelModel):
    """Pipe from the pump to a zone."""
    id: str
    from_pump: str
    to_zone: str
    coordinates: List[Coordinate]
    length: float = Field(description="Length in meters")
    diameter: float = Field(default=50.0, description="Diameter in mm")


class SpacingStatistics(CamelModel):
    """Realized spacing of a generated network."""
    total_branches: int = 0
    average_row_spacing: float = 0.0
    average_plant_spacing: float = 0.0
    spacing_accuracy: float = 100.0
    median_plant_clearance: float = Field(
        default=0.0,
        description="Median distance (m) from each plant to its nearest neighbour"
    )


class LayoutDiagnostic(CamelModel):
    """Non-fatal note about an input or a computation."""
    level: Literal["info", "warning", "error"]
    code: str
    message: str


class SubMainLayoutResult(CamelModel):
    """Everything derived from one drawn sub-main pipe."""
    sub_main: Optional[SubMainPipe] = None
    plants: List[PlantPlacement] = Field(default_factory=list)
    statistics: SpacingStatistics = Field(default_factory=SpacingStatistics)
    diagnostics: List[LayoutDiagnostic] = Field(default_factory=list)


class SubMainLayoutRequest(CamelModel):
    """Inputs for laying out branches and plants along one drawn sub-main."""
    sub_main_id: Optional[str] = None
    coordinates: List[Coordinate] = Field(min_length=2, description="Drawn sub-main polyline")
    use_zones: bool = False
    zones: List[Zone] = Field(default_factory=list)
    selected_zone_id: Optional[str] = None
    field_boundary: List[Coordinate] = Field(
        default_factory=list,
        description="Whole-field polygon, the target area when zones are not used"
    )
    plant_data: Optional[PlantSpacingSpec] = Field(
        default=None,
        description="Spacing used when zones are not used"
    )
    exclusion_areas: List[ExclusionArea] = Field(default_factory=list)
    branch_angle: Optional[float] = Field(default=None, description="Degrees, 0-180")
    existing_sub_mains: List[SubMainPipe] = Field(
        default_factory=list,
        description="Sub-mains already laid out, included in the statistics"
    )
