"""
API response models using Pydantic.
"""
from typing import List

from pydantic import Field

from app.domain.models import CamelModel, PlantPlacement, PlantSpacingSpec


class PlantPlacementResponse(CamelModel):
    """Response model for the plant placement endpoint."""
    plant_count: int = Field(
        description="Number of plants placed"
    )
    plants: List[PlantPlacement] = Field(
        description="Placed plants in pipe order"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "plantCount": 1,
                "plants": [
                    {
                        "id": "plant-0",
                        "position": {"lat": 13.7563, "lng": 100.5018},
                        "plantData": {"plantSpacing": 5, "rowSpacing": 10, "waterNeed": 50},
                        "zoneId": None,
                    }
                ]
            }
        }


class PlantCatalogResponse(CamelModel):
    """Default plant types."""
    plants: List[PlantSpacingSpec]
