"""
Unit tests for the geometry primitives.

Tests cover:
- Haversine distance and direction vectors
- Metric offsets (equirectangular and UTM)
- Point-in-polygon, area and centroid latitude
- Pipe length, interpolation and projection
"""
import math

import numpy as np
import pytest

from app.domain.models import Coordinate
from app.utils.geo_math import (
    Vector,
    haversine_distance,
    local_direction,
    perpendicular,
    project_along_direction,
    rotate,
)
from app.utils.geo_projection import (
    EquirectangularConverter,
    UtmConverter,
    get_converter,
    get_utm_crs,
    get_utm_zone,
)
from app.utils.polygon_geometry import (
    point_in_polygon,
    polygon_area,
    polygon_centroid_latitude,
    polygon_issues,
)
from app.utils.polyline_geometry import (
    closest_point_on_pipe,
    distance_along_pipe,
    interpolate_at_distance,
    locate_at_distance,
    pipe_length,
    projected_distance_along_pipe,
)


def coord(lat: float, lng: float) -> Coordinate:
    return Coordinate(lat=lat, lng=lng)


# ============================================================
# Geo-Math Tests
# ============================================================

class TestHaversine:
    """Tests for great-circle distance."""

    def test_same_point_is_zero(self):
        """Distance from a point to itself is exactly 0."""
        p = coord(13.7563, 100.5018)
        assert haversine_distance(p, p) == 0.0

    def test_one_degree_latitude(self):
        """One degree of latitude is ~111.2 km on a 6371 km sphere."""
        d = haversine_distance(coord(0, 0), coord(1, 0))
        assert np.isclose(d, 6371000 * math.pi / 180, rtol=1e-9)

    def test_symmetric(self):
        a, b = coord(10.0, 20.0), coord(10.001, 20.002)
        assert haversine_distance(a, b) == pytest.approx(haversine_distance(b, a))


class TestDirections:
    """Tests for direction vectors and rotation."""

    def test_local_direction_is_degree_difference(self):
        v = local_direction(coord(1.0, 2.0), coord(1.5, 1.0))
        assert v == Vector(0.5, -1.0)

    def test_perpendicular_is_unit_and_orthogonal(self):
        direction = Vector(0.0003, 0.0004)
        p = perpendicular(direction)
        assert p.length == pytest.approx(1.0)
        assert p.lat * direction.lat + p.lng * direction.lng == pytest.approx(0.0)

    def test_perpendicular_of_zero_vector_falls_back(self):
        """Degenerate direction yields the fixed (0, 1) vector."""
        assert perpendicular(Vector(0.0, 0.0)) == Vector(0.0, 1.0)

    def test_rotate_quarter_turn(self):
        rotated = rotate(Vector(1.0, 0.0), 90)
        assert rotated.lat == pytest.approx(0.0, abs=1e-12)
        assert rotated.lng == pytest.approx(1.0)

    def test_rotate_zero_is_identity(self):
        v = Vector(0.6, 0.8)
        assert rotate(v, 0) == v


class TestProjectAlongDirection:
    """Tests for meter-to-degree displacement."""

    def test_north_uses_111km_per_degree(self):
        origin = coord(0.0, 0.0)
        end = project_along_direction(origin, Vector(1.0, 0.0), 1, 111.0)
        assert end.lat == pytest.approx(0.001)
        assert end.lng == 0.0

    def test_negative_sign_goes_the_other_way(self):
        origin = coord(0.0, 0.0)
        end = project_along_direction(origin, Vector(1.0, 0.0), -1, 111.0)
        assert end.lat == pytest.approx(-0.001)

    def test_east_scaled_by_latitude(self):
        """At 60° latitude a degree of longitude is half as long."""
        origin = coord(60.0, 10.0)
        end = project_along_direction(origin, Vector(0.0, 1.0), 1, 111.0)
        assert end.lng - origin.lng == pytest.approx(0.002)

    def test_utm_converter_offsets_by_requested_distance(self):
        origin = coord(13.75, 100.5)
        end = project_along_direction(origin, Vector(1.0, 0.0), 1, 100.0, UtmConverter())
        assert haversine_distance(origin, end) == pytest.approx(100.0, rel=0.01)
        assert end.lat > origin.lat


class TestProjectionHelpers:
    """Tests for UTM zone selection and converter factory."""

    def test_utm_zone(self):
        assert get_utm_zone(100.5) == 47
        assert get_utm_zone(180.0) == 60

    def test_utm_crs_hemisphere(self):
        assert get_utm_crs(100.5, 13.7) == "EPSG:32647"
        assert get_utm_crs(18.8, -32.3) == "EPSG:32734"

    def test_get_converter(self):
        assert isinstance(get_converter("equirectangular"), EquirectangularConverter)
        assert isinstance(get_converter("utm"), UtmConverter)
        with pytest.raises(ValueError):
            get_converter("mercator")


# ============================================================
# Polygon Tests
# ============================================================

class TestPointInPolygon:
    """Tests for the ray-casting membership test."""

    def test_inside_and_outside(self, square_field):
        assert point_in_polygon(coord(0.00045, 0.00045), square_field)
        assert not point_in_polygon(coord(0.001, 0.00045), square_field)
        assert not point_in_polygon(coord(0.00045, -0.0001), square_field)

    def test_concave_notch_is_outside(self, l_shaped_field):
        assert point_in_polygon(coord(0.0001, 0.0008), l_shaped_field)
        assert not point_in_polygon(coord(0.0006, 0.0006), l_shaped_field)

    def test_degenerate_polygons(self):
        """Fewer than 3 vertices is never inside."""
        p = coord(0.0, 0.0)
        assert not point_in_polygon(p, [])
        assert not point_in_polygon(p, [coord(-1, -1), coord(1, 1)])

    @pytest.mark.parametrize("point", [
        (0.0001, 0.0001),
        (0.0002, 0.0007),
        (0.0006, 0.0006),
        (0.0008, 0.0001),
        (0.0010, 0.0005),
    ])
    def test_invariant_under_vertex_rotation(self, l_shaped_field, point):
        """Starting the vertex list elsewhere does not change the answer."""
        p = coord(*point)
        expected = point_in_polygon(p, l_shaped_field)
        for shift in range(1, len(l_shaped_field)):
            rotated = l_shaped_field[shift:] + l_shaped_field[:shift]
            assert point_in_polygon(p, rotated) == expected

    def test_self_intersecting_polygon_does_not_raise(self):
        bow_tie = [coord(0, 0), coord(0.001, 0.001), coord(0, 0.001), coord(0.001, 0)]
        assert isinstance(point_in_polygon(coord(0.0005, 0.0002), bow_tie), bool)


class TestPolygonArea:
    """Tests for the approximate area."""

    def test_square_area(self, square_field):
        assert polygon_area(square_field) == pytest.approx(99.9 * 99.9)

    def test_orientation_independent(self, square_field):
        assert polygon_area(list(reversed(square_field))) == pytest.approx(polygon_area(square_field))

    def test_degenerate_is_zero(self):
        assert polygon_area([]) == 0.0
        assert polygon_area([coord(0, 0), coord(0, 1)]) == 0.0

    def test_centroid_latitude_is_vertex_mean(self, square_field):
        assert polygon_centroid_latitude(square_field) == pytest.approx(0.00045)
        assert polygon_centroid_latitude([]) == 0.0


class TestPolygonIssues:
    """Tests for polygon validity diagnostics."""

    def test_valid_polygon_has_no_issues(self, square_field):
        assert polygon_issues(square_field) == []

    def test_bow_tie_reports_self_intersection(self):
        bow_tie = [coord(0, 0), coord(0.001, 0.001), coord(0, 0.001), coord(0.001, 0)]
        issues = polygon_issues(bow_tie)
        assert len(issues) == 1
        assert "intersection" in issues[0].lower()

    def test_too_few_points(self):
        assert polygon_issues([coord(0, 0)])


# ============================================================
# Polyline Tests
# ============================================================

class TestPipeLength:
    """Tests for polyline length."""

    def test_degenerate_is_zero(self):
        assert pipe_length([]) == 0.0
        assert pipe_length([coord(0, 0)]) == 0.0

    def test_sum_of_segments(self):
        pipe = [coord(0, 0), coord(0, 0.001), coord(0.001, 0.001)]
        expected = haversine_distance(pipe[0], pipe[1]) + haversine_distance(pipe[1], pipe[2])
        assert pipe_length(pipe) == pytest.approx(expected)

    def test_reverse_has_same_length(self):
        pipe = [coord(0, 0), coord(0.0003, 0.001), coord(0.0011, 0.0012), coord(0.002, 0.0)]
        assert pipe_length(list(reversed(pipe))) == pytest.approx(pipe_length(pipe))
        assert pipe_length(pipe) >= 0


class TestInterpolateAtDistance:
    """Tests for positions along a pipe."""

    def test_zero_distance_is_first_point(self, sub_main_coords):
        assert interpolate_at_distance(sub_main_coords, 0) == sub_main_coords[0]

    def test_full_length_is_last_point(self):
        pipe = [coord(0, 0), coord(0, 0.001), coord(0.001, 0.001)]
        end = interpolate_at_distance(pipe, pipe_length(pipe))
        assert end.lat == pytest.approx(pipe[-1].lat, abs=1e-12)
        assert end.lng == pytest.approx(pipe[-1].lng, abs=1e-12)

    def test_beyond_length_is_clamped(self, sub_main_coords):
        assert interpolate_at_distance(sub_main_coords, 1e6) == sub_main_coords[-1]

    def test_midpoint(self, sub_main_coords):
        mid = interpolate_at_distance(sub_main_coords, pipe_length(sub_main_coords) / 2)
        assert mid.lat == pytest.approx(0.00045)
        assert mid.lng == pytest.approx(0.00045)

    def test_second_segment(self):
        pipe = [coord(0, 0), coord(0, 0.001), coord(0.001, 0.001)]
        first = haversine_distance(pipe[0], pipe[1])
        second = haversine_distance(pipe[1], pipe[2])
        point = interpolate_at_distance(pipe, first + second / 4)
        assert point.lat == pytest.approx(0.00025)
        assert point.lng == pytest.approx(0.001)

    def test_invalid_input_returns_none(self, sub_main_coords):
        assert interpolate_at_distance(sub_main_coords, -1) is None
        assert interpolate_at_distance([coord(0, 0)], 5) is None
        assert interpolate_at_distance([], 0) is None


class TestClosestPointOnPipe:
    """Tests for projection onto a pipe."""

    def test_projects_onto_segment_interior(self):
        pipe = [coord(0, 0), coord(0, 0.001)]
        closest = closest_point_on_pipe(coord(0.0001, 0.0005), pipe)
        assert closest.segment_index == 0
        assert closest.position.lat == pytest.approx(0.0)
        assert closest.position.lng == pytest.approx(0.0005)
        assert closest.distance == pytest.approx(haversine_distance(coord(0, 0), coord(0.0001, 0)))

    def test_clamps_to_segment_end(self):
        pipe = [coord(0, 0), coord(0, 0.001)]
        closest = closest_point_on_pipe(coord(0, 0.002), pipe)
        assert closest.position == pipe[-1]

    def test_picks_nearest_segment(self):
        pipe = [coord(0, 0), coord(0, 0.001), coord(0.001, 0.001)]
        closest = closest_point_on_pipe(coord(0.0006, 0.0012), pipe)
        assert closest.segment_index == 1
        assert closest.position.lat == pytest.approx(0.0006)

    def test_degenerate_pipes(self):
        p = coord(0, 0)
        assert closest_point_on_pipe(p, [p]) is None
        assert closest_point_on_pipe(coord(1, 1), [p, p]) is None


class TestDistanceAlongPipe:
    """Tests for along-pipe reporting distances."""

    def test_snaps_to_nearest_vertex(self):
        pipe = [coord(0, 0), coord(0, 0.001), coord(0, 0.002)]
        # Closer to the middle vertex than to either end
        target = coord(0.00001, 0.0011)
        assert distance_along_pipe(pipe, target) == pytest.approx(haversine_distance(pipe[0], pipe[1]))

    def test_first_vertex_is_zero(self):
        pipe = [coord(0, 0), coord(0, 0.001)]
        assert distance_along_pipe(pipe, coord(0, 0.0001)) == 0.0

    def test_projected_distance_is_exact(self):
        pipe = [coord(0, 0), coord(0, 0.001), coord(0, 0.002)]
        target = coord(0.00001, 0.0011)
        expected = haversine_distance(pipe[0], coord(0, 0.0011))
        assert projected_distance_along_pipe(pipe, target) == pytest.approx(expected, rel=1e-6)


class TestLocateAtDistance:
    """Tests for the segment a position along a pipe falls on."""

    def test_uneven_segments(self):
        """Short first segment: 20m along is already on the second one."""
        pipe = [coord(0, 0), coord(0, 0.0001), coord(0.001, 0.0001)]
        assert locate_at_distance(pipe, 5.0).segment_index == 0
        location = locate_at_distance(pipe, 20.0)
        assert location.segment_index == 1
        assert location.position.lng == pytest.approx(0.0001)

    def test_repeated_vertex_is_skipped(self):
        p, q = coord(0.00045, 0.0), coord(0.00045, 0.0009)
        location = locate_at_distance([p, p, q], 0.0)
        assert location.segment_index == 1
        assert location.position == p
        assert locate_at_distance([p, p, q], 50.0).segment_index == 1

    def test_beyond_length_uses_last_usable_segment(self):
        p, q = coord(0.00045, 0.0), coord(0.00045, 0.0009)
        location = locate_at_distance([p, q, q], 1e6)
        assert location.segment_index == 0
        assert location.position == q

    def test_matches_interpolation(self, sub_main_coords):
        location = locate_at_distance(sub_main_coords, 42.0)
        assert location.position == interpolate_at_distance(sub_main_coords, 42.0)

    def test_invalid_input_returns_none(self, sub_main_coords):
        assert locate_at_distance(sub_main_coords, -1) is None
        assert locate_at_distance(sub_main_coords[:1], 0) is None
