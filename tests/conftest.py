"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- A ~100m x 100m square field near the equator
- A straight sub-main across the middle of the field
- Plant spacing specifications
- FastAPI test client
"""
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.domain.models import Coordinate, PlantSpacingSpec, Zone
from app.services.domain.branch_generator import BranchGenerationConfig, BranchPipeGenerator


def coord(lat: float, lng: float) -> Coordinate:
    return Coordinate(lat=lat, lng=lng)


# ============================================================
# Sample Geometry Fixtures
# ============================================================

@pytest.fixture
def square_field() -> list[Coordinate]:
    """Square of 0.0009° (~100m) per side at the equator."""
    return [
        coord(0.0, 0.0),
        coord(0.0, 0.0009),
        coord(0.0009, 0.0009),
        coord(0.0009, 0.0),
    ]


@pytest.fixture
def sub_main_coords() -> list[Coordinate]:
    """Straight ~100m sub-main running west to east through the field's middle."""
    return [coord(0.00045, 0.0), coord(0.00045, 0.0009)]


@pytest.fixture
def l_shaped_field() -> list[Coordinate]:
    """Concave L-shaped polygon."""
    return [
        coord(0.0, 0.0),
        coord(0.0, 0.0009),
        coord(0.0003, 0.0009),
        coord(0.0003, 0.0003),
        coord(0.0009, 0.0003),
        coord(0.0009, 0.0),
    ]


@pytest.fixture
def plant_spec() -> PlantSpacingSpec:
    """5m between plants, 10m between rows."""
    return PlantSpacingSpec(id=99, name="Test crop", plant_spacing=5, row_spacing=10, water_need=20)


@pytest.fixture
def square_zone(square_field, plant_spec) -> Zone:
    return Zone(id="zone-1", name="Zone 1", coordinates=square_field, plant_data=plant_spec)


@pytest.fixture
def generator() -> BranchPipeGenerator:
    """Generator with explicit defaults, independent of environment settings."""
    return BranchPipeGenerator(config=BranchGenerationConfig())


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> TestClient:
    """Create a synchronous test client for FastAPI."""
    return TestClient(app)
