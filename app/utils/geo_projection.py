"""
Geospatial projection utilities for coordinate transformations.

Two converters turn a metric offset (meters north, meters east) from an origin
into a new lat/lng position:

- EquirectangularConverter: fixed 111 000 m per degree of latitude, scaled by
  cos(latitude) for longitude. Good enough for field-scale layouts.
- UtmConverter: exact offset in the UTM zone of the origin (pyproj).
"""
from functools import lru_cache
import math
from typing import List, Protocol, Tuple

from pyproj import Transformer

from app.domain.models import Coordinate


METERS_PER_DEGREE = 111000.0


def get_utm_zone(longitude: float) -> int:
    """
    Calculate the UTM zone number from longitude.

    Args:
        longitude: Longitude in degrees

    Returns:
        UTM zone number (1-60)
    """
    return min(int((longitude + 180) / 6) + 1, 60)


def get_utm_crs(longitude: float, latitude: float) -> str:
    """
    Get the appropriate UTM CRS (Coordinate Reference System) for a location.

    Args:
        longitude: Longitude in degrees
        latitude: Latitude in degrees

    Returns:
        EPSG code for the UTM zone
    """
    zone = get_utm_zone(longitude)
    # Northern hemisphere: EPSG:326XX, Southern hemisphere: EPSG:327XX
    hemisphere = "6" if latitude >= 0 else "7"
    return f"EPSG:32{hemisphere}{zone:02d}"


@lru_cache(maxsize=16)
def _get_transformers(utm_crs: str) -> Tuple[Transformer, Transformer]:
    forward = Transformer.from_crs("EPSG:4326", utm_crs, always_xy=True)
    reverse = Transformer.from_crs(utm_crs, "EPSG:4326", always_xy=True)
    return forward, reverse


def project_to_meters(
    coordinates: List[Coordinate]
) -> Tuple[List[Tuple[float, float]], Transformer]:
    """
    Project lat/lng coordinates to a planar coordinate system (UTM) in meters.

    Args:
        coordinates: Coordinates in degrees

    Returns:
        Tuple of:
            - List of (x, y) coordinates in meters
            - Transformer object for reverse transformation
    """
    if not coordinates:
        raise ValueError("Coordinates list cannot be empty")

    # Use the first coordinate to determine the UTM zone
    first = coordinates[0]
    forward, reverse = _get_transformers(get_utm_crs(first.lng, first.lat))

    projected = []
    for coord in coordinates:
        x, y = forward.transform(coord.lng, coord.lat)
        projected.append((x, y))

    return projected, reverse


def project_to_latlon(
    coordinates: List[Tuple[float, float]],
    transformer: Transformer
) -> List[Coordinate]:
    """
    Project planar coordinates (meters) back to lat/lng.

    Args:
        coordinates: List of (x, y) coordinates in meters
        transformer: Transformer object from project_to_meters

    Returns:
        List of Coordinates in degrees
    """
    latlon = []
    for x, y in coordinates:
        lng, lat = transformer.transform(x, y)
        latlon.append(Coordinate(lat=lat, lng=lng))

    return latlon


class MetricConverter(Protocol):
    """Turns a metric displacement from an origin into a new coordinate."""

    def offset(self, origin: Coordinate, north_m: float, east_m: float) -> Coordinate:
        ...


class EquirectangularConverter:
    """Local flat-earth conversion around the origin's latitude."""

    def __init__(self, meters_per_degree: float = METERS_PER_DEGREE):
        self.meters_per_degree = meters_per_degree

    def meters_per_degree_lat(self) -> float:
        return self.meters_per_degree

    def meters_per_degree_lng(self, reference_lat: float) -> float:
        return self.meters_per_degree * math.cos(math.radians(reference_lat))

    def offset(self, origin: Coordinate, north_m: float, east_m: float) -> Coordinate:
        return Coordinate(
            lat=origin.lat + north_m / self.meters_per_degree_lat(),
            lng=origin.lng + east_m / self.meters_per_degree_lng(origin.lat),
        )


class UtmConverter:
    """Offsets computed in the UTM zone containing the origin."""

    def offset(self, origin: Coordinate, north_m: float, east_m: float) -> Coordinate:
        projected, reverse = project_to_meters([origin])
        x, y = projected[0]
        return project_to_latlon([(x + east_m, y + north_m)], reverse)[0]


def get_converter(kind: str = "equirectangular") -> MetricConverter:
    """
    Build the converter named by configuration.

    Args:
        kind: "equirectangular" or "utm"

    Returns:
        Converter instance
    """
    if kind == "utm":
        return UtmConverter()
    if kind == "equirectangular":
        return EquirectangularConverter()
    raise ValueError(f"Unknown projection '{kind}'")


DEFAULT_CONVERTER = EquirectangularConverter()
