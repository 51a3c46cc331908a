"""
Default plant types offered to planners before they define their own.
"""
from typing import List, Optional

from app.domain.models import PlantSpacingSpec


DEFAULT_PLANT_TYPES: List[PlantSpacingSpec] = [
    PlantSpacingSpec(id=1, name="Mango", plant_spacing=8, row_spacing=8, water_need=50),
    PlantSpacingSpec(id=2, name="Durian", plant_spacing=10, row_spacing=10, water_need=80),
    PlantSpacingSpec(id=3, name="Pineapple", plant_spacing=1, row_spacing=1.2, water_need=3),
    PlantSpacingSpec(id=4, name="Banana", plant_spacing=2.5, row_spacing=3, water_need=25),
    PlantSpacingSpec(id=5, name="Papaya", plant_spacing=2.5, row_spacing=2.5, water_need=15),
    PlantSpacingSpec(id=6, name="Coconut", plant_spacing=9, row_spacing=9, water_need=100),
    PlantSpacingSpec(id=7, name="Arabica Coffee", plant_spacing=2, row_spacing=2, water_need=5),
    PlantSpacingSpec(id=8, name="Cocoa", plant_spacing=3, row_spacing=3, water_need=15),
    PlantSpacingSpec(id=9, name="Oil Palm", plant_spacing=9, row_spacing=9, water_need=150),
    # Rubber is rain-fed
    PlantSpacingSpec(id=10, name="Rubber", plant_spacing=7, row_spacing=3, water_need=0),
]


def get_plant_type(plant_id: int) -> Optional[PlantSpacingSpec]:
    """Look up a default plant type by id."""
    for plant in DEFAULT_PLANT_TYPES:
        if plant.id == plant_id:
            return plant
    return None
