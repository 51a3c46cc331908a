"""
Application configuration using Pydantic settings.
"""
from typing import Literal

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Branch Generation Parameters
    default_branch_angle: float = Field(
        default=90.0,
        description="Angle in degrees between a sub-main and its branch pipes"
    )
    min_branch_angle: float = Field(
        default=0.0,
        description="Smallest accepted branch angle in degrees"
    )
    max_branch_angle: float = Field(
        default=180.0,
        description="Largest accepted branch angle in degrees"
    )
    boundary_search_max_distance: float = Field(
        default=500.0,
        description="Longest branch (meters) the boundary search will consider"
    )
    boundary_search_tolerance: float = Field(
        default=0.1,
        description="Bisection stops once the search interval is narrower than this (meters)"
    )
    projection: Literal["equirectangular", "utm"] = Field(
        default="equirectangular",
        description="Conversion used to turn meter offsets into lat/lng offsets"
    )

    # Pipe Defaults (millimeters, carried through to the records)
    main_pipe_diameter: float = Field(default=50.0, description="Main pipe diameter in mm")
    sub_main_pipe_diameter: float = Field(default=32.0, description="Sub-main pipe diameter in mm")
    branch_pipe_diameter: float = Field(default=25.0, description="Generated branch pipe diameter in mm")
    connection_pipe_diameter: float = Field(
        default=20.0,
        description="Diameter in mm of a branch created by connecting a plant to a pipe"
    )

    # Zone Estimates
    plant_count_area_efficiency: float = Field(
        default=0.85,
        description="Share of a zone's area assumed plantable when estimating plant count"
    )

    # Statistics
    statistics_snap_to_vertex: bool = Field(
        default=False,
        description="Measure along-pipe spacing at the nearest pipe vertex instead of the projected point"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="Irrigation Layout Engine",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
