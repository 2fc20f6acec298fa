"""
Tests for handle centerline construction and sampling.
"""

import math
from types import SimpleNamespace

import numpy as np
import pytest

from mughandle.core.errors import HandleGeometryError, InvalidGeometry
from mughandle.core.path import (
    CornerSegment,
    HandlePath,
    LineSegment,
    build_path,
    matched_arm_angle_deg,
    radius_at_height,
    sample_path,
    vessel_wall_angle_deg,
)
from mughandle.io.loaders import VesselReference


def _params(**overrides):
    """Duck-typed parameters that skip model validation."""
    values = dict(
        protrusion_mm=35.0,
        top_attachment_height_mm=85.0,
        bottom_attachment_height_mm=15.0,
        upper_corner_radius_mm=15.0,
        lower_corner_radius_mm=15.0,
        vertical_arm_angle_deg=0.0,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class TestRadiusAtHeight:
    """Tests for vessel wall interpolation."""

    def test_default_vessel_ends(self):
        assert radius_at_height(0) == pytest.approx(30.0)
        assert radius_at_height(95) == pytest.approx(40.0)

    def test_default_vessel_midpoint(self):
        assert radius_at_height(47.5) == pytest.approx(35.0)

    def test_clamped_outside_vessel(self):
        """Heights above the rim or below the base use the end radius."""
        assert radius_at_height(200) == pytest.approx(40.0)
        assert radius_at_height(-10) == pytest.approx(30.0)

    def test_custom_vessel(self, tall_vessel):
        assert radius_at_height(0, tall_vessel) == pytest.approx(35.0)
        assert radius_at_height(110, tall_vessel) == pytest.approx(42.5)
        assert tall_vessel.radius_at_height(55) == pytest.approx(38.75)

    def test_straight_vessel(self, straight_vessel):
        assert radius_at_height(10, straight_vessel) == radius_at_height(90, straight_vessel)


class TestWallAngle:
    """Tests for vessel wall angle and matched arm tilt."""

    def test_default_vessel_angle(self):
        assert vessel_wall_angle_deg() == pytest.approx(math.degrees(math.atan(10 / 95)))

    def test_straight_wall_is_zero(self, straight_vessel):
        assert vessel_wall_angle_deg(straight_vessel) == 0.0

    def test_narrowing_vessel_is_negative(self):
        vessel = VesselReference(height_mm=100, top_diameter_mm=60, bottom_diameter_mm=80)
        assert vessel_wall_angle_deg(vessel) < 0

    def test_matched_angle_rounded(self, tall_vessel):
        # atan(7.5 / 110) = 3.9°
        assert matched_arm_angle_deg(tall_vessel) == 4.0

    def test_matched_angle_clamped(self):
        vessel = VesselReference(height_mm=50, top_diameter_mm=200, bottom_diameter_mm=20)
        assert matched_arm_angle_deg(vessel) == 30.0

    def test_matched_angle_clamped_negative(self):
        vessel = VesselReference(height_mm=50, top_diameter_mm=20, bottom_diameter_mm=200)
        assert matched_arm_angle_deg(vessel) == -30.0


class TestBuildPath:
    """Tests for build_path."""

    def test_five_segments(self, default_params):
        path = build_path(default_params)
        assert isinstance(path, HandlePath)
        kinds = [type(s) for s in path.segments]
        assert kinds == [LineSegment, CornerSegment, LineSegment, CornerSegment, LineSegment]

    @pytest.mark.parametrize("overrides", [
        {},
        {"vertical_arm_angle_deg": 12.0},
        {"vertical_arm_angle_deg": -20.0},
        {"upper_corner_radius_mm": 40.0, "lower_corner_radius_mm": 3.0},
        {"protrusion_mm": 5.0, "top_attachment_height_mm": 30.0, "bottom_attachment_height_mm": 25.0},
        {"upper_corner_radius_mm": 0.0, "lower_corner_radius_mm": 0.0},
    ])
    def test_segments_continuous(self, overrides):
        """Each segment starts exactly where the previous one ends."""
        path = build_path(_params(**overrides))
        for current, following in zip(path.segments, path.segments[1:]):
            assert np.allclose(current.end, following.start, atol=1e-9)

    def test_endpoints_on_vessel_wall(self, default_params, tall_vessel):
        path = build_path(default_params, tall_vessel)
        assert path.start == pytest.approx((tall_vessel.radius_at_height(15), 15, 0))
        assert path.end == pytest.approx((tall_vessel.radius_at_height(85), 85, 0))

    def test_outer_edge_from_wider_attachment(self, default_params):
        """The back arm sits protrusion mm outside the wider of the two wall radii."""
        path = build_path(default_params)
        expected_outer = radius_at_height(85) + default_params.protrusion_mm
        lower_corner = path.segments[1]
        assert lower_corner.control[0] == pytest.approx(expected_outer)

    def test_path_stays_in_plane(self, rectangular_params):
        path = build_path(rectangular_params)
        for segment in path.segments:
            assert segment.start[2] == 0.0
            assert segment.end[2] == 0.0

    def test_tilted_arm_direction(self):
        path = build_path(_params(vertical_arm_angle_deg=10.0))
        arm = path.segments[2]
        direction = np.subtract(arm.end, arm.start)
        direction /= np.linalg.norm(direction)
        angle = math.radians(10.0)
        assert np.allclose(direction[:2], [math.sin(angle), math.cos(angle)])

    def test_arm_projects_onto_span(self):
        """Lower radius + arm + upper radius cover the span vertically."""
        params = _params(vertical_arm_angle_deg=15.0, upper_corner_radius_mm=10.0, lower_corner_radius_mm=6.0)
        path = build_path(params)
        cos_a = math.cos(math.radians(15.0))
        vertical = (path.upper_corner_radius_mm + path.lower_corner_radius_mm + path.arm_length_mm) * cos_a
        assert vertical == pytest.approx(70.0)

    def test_corner_radius_clamped_silently(self):
        """Radii beyond 80% of min(protrusion, span/2) are reduced without error."""
        path = build_path(_params(protrusion_mm=20.0, upper_corner_radius_mm=50.0, lower_corner_radius_mm=18.0))
        assert path.upper_corner_radius_mm == pytest.approx(16.0)
        assert path.lower_corner_radius_mm == pytest.approx(16.0)

    def test_corner_radius_limited_by_span(self):
        path = build_path(_params(top_attachment_height_mm=35.0, bottom_attachment_height_mm=15.0))
        assert path.upper_corner_radius_mm == pytest.approx(8.0)

    def test_small_radius_unchanged(self):
        path = build_path(_params(upper_corner_radius_mm=5.0))
        assert path.upper_corner_radius_mm == 5.0

    def test_zero_span_raises(self):
        with pytest.raises(InvalidGeometry):
            build_path(_params(top_attachment_height_mm=40.0, bottom_attachment_height_mm=40.0))

    def test_inverted_attachments_raise(self):
        with pytest.raises(InvalidGeometry, match="must be above"):
            build_path(_params(top_attachment_height_mm=20.0, bottom_attachment_height_mm=60.0))

    def test_horizontal_arm_raises(self):
        with pytest.raises(InvalidGeometry):
            build_path(_params(vertical_arm_angle_deg=90.0))

    def test_errors_are_value_errors(self):
        """Callers guarding with ValueError still catch kernel failures."""
        with pytest.raises(ValueError):
            build_path(_params(top_attachment_height_mm=10.0))
        assert issubclass(InvalidGeometry, HandleGeometryError)

    def test_pydantic_params_accepted(self, default_params):
        assert build_path(default_params).length > 0


class TestArcLength:
    """Tests for arc-length evaluation."""

    def test_line_length_exact(self):
        assert LineSegment((0, 0, 0), (3, 4, 0)).length == 5.0

    def test_corner_length_between_chord_and_polygon(self):
        r = 10.0
        corner = CornerSegment((0, 0, 0), (r, 0, 0), (r, r, 0))
        assert r * math.sqrt(2) < corner.length < 2 * r

    def test_path_length_is_sum(self, default_params):
        path = build_path(default_params)
        assert path.length == pytest.approx(sum(s.length for s in path.segments))

    def test_point_at_ends(self, default_params):
        path = build_path(default_params)
        assert np.allclose(path.point_at(0.0), path.start)
        assert np.allclose(path.point_at(1.0), path.end)

    def test_point_at_is_arc_length_uniform(self, default_params):
        """Equal steps in u give (nearly) equal distances along the path."""
        path = build_path(default_params)
        points = [path.point_at(i / 200) for i in range(201)]
        steps = np.linalg.norm(np.diff(points, axis=0), axis=1)
        assert steps.max() == pytest.approx(path.length / 200, rel=0.02)

    def test_tangent_is_unit(self, rectangular_params):
        path = build_path(rectangular_params)
        for u in np.linspace(0, 1, 17):
            assert np.linalg.norm(path.tangent_at(u)) == pytest.approx(1.0)


class TestSamplePath:
    """Tests for sample_path."""

    def test_sample_count(self, default_params):
        path = build_path(default_params)
        assert len(sample_path(path, 96)) == 97
        assert len(sample_path(path, 32)) == 33

    def test_sample_parameters(self, default_params):
        samples = sample_path(build_path(default_params), 4)
        assert [s.t for s in samples] == [0.0, 0.25, 0.5, 0.75, 1.0]

    def test_zero_segments_single_sample(self, default_params):
        assert len(sample_path(build_path(default_params), 0)) == 1

    def test_first_sample_at_bottom_attachment(self, default_params):
        path = build_path(default_params)
        samples = sample_path(path)
        assert np.allclose(samples[0].position, path.start)
        assert np.allclose(samples[-1].position, path.end)

    def test_bottom_arm_runs_outward(self, default_params):
        first = sample_path(build_path(default_params), 8)[0]
        assert np.allclose(first.tangent, [1.0, 0.0, 0.0])

    def test_frames_orthonormal(self, rectangular_params):
        for sample in sample_path(build_path(rectangular_params), 24):
            assert np.linalg.norm(sample.normal) == pytest.approx(1.0)
            assert np.dot(sample.tangent, sample.normal) == pytest.approx(0.0, abs=1e-12)
            assert np.allclose(sample.binormal, [0.0, 0.0, 1.0])

    def test_normal_is_in_plane_rotation(self, default_params):
        for sample in sample_path(build_path(default_params), 12):
            assert np.allclose(sample.normal, [-sample.tangent[1], sample.tangent[0], 0.0])

    def test_degenerate_path_uses_default_frame(self):
        """A zero-length path falls back to tangent +Y and normal -X."""
        point = (30.0, 50.0, 0.0)
        path = HandlePath(segments=(LineSegment(point, point),))
        samples = sample_path(path, 2)
        for sample in samples:
            assert np.allclose(sample.tangent, [0.0, 1.0, 0.0])
            assert np.allclose(sample.normal, [-1.0, 0.0, 0.0])
            assert np.allclose(sample.position, point)
