"""
Tests for the sweep engine and the mesh value type.
"""

import numpy as np
import pytest

from mughandle.core.cross_section import build_profile, profile_mean_radius
from mughandle.core.errors import DegenerateMesh, DegenerateProfile
from mughandle.core.fillet import compute_fillet_zones
from mughandle.core.mesh import Mesh
from mughandle.core.path import build_path, sample_path
from mughandle.core.sweep import ring_scales, sweep


@pytest.fixture
def scenario_path(scenario_params):
    return build_path(scenario_params)


@pytest.fixture
def oval_profile():
    return build_profile(10, 6, 16)


def _triangle_normals(mesh):
    tris = mesh.positions[mesh.indices].astype(np.float64)
    return np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])


class TestSweepCounts:
    """Vertex, triangle and UV layout."""

    def test_counts(self, oval_profile, scenario_path):
        mesh = sweep(oval_profile, scenario_path, 25.0, path_segments=96)
        assert mesh.vertex_count == 97 * 16
        assert mesh.triangle_count == 96 * 16 * 2

    def test_preview_counts(self, scenario_path):
        mesh = sweep(build_profile(10, 6, 8), scenario_path, 25.0, path_segments=32)
        assert mesh.vertex_count == 33 * 8
        assert mesh.triangle_count == 32 * 8 * 2

    def test_indices_in_range(self, oval_profile, scenario_path):
        mesh = sweep(oval_profile, scenario_path, 25.0, path_segments=12)
        assert mesh.indices.max() < mesh.vertex_count
        assert mesh.indices.dtype == np.uint32

    def test_buffer_shapes(self, oval_profile, scenario_path):
        mesh = sweep(oval_profile, scenario_path, 25.0, path_segments=12)
        n = mesh.vertex_count
        assert mesh.positions.shape == (n, 3)
        assert mesh.normals.shape == (n, 3)
        assert mesh.uvs.shape == (n, 2)
        assert mesh.positions.dtype == np.float32

    def test_first_quad_winding(self, oval_profile, scenario_path):
        """Ring 0 point 0 joins ring 1 point 0 and ring 0 point 1."""
        mesh = sweep(oval_profile, scenario_path, 25.0, path_segments=12)
        assert list(mesh.indices[0]) == [0, 16, 1]
        assert list(mesh.indices[1]) == [1, 16, 17]

    def test_ring_wraps(self, oval_profile, scenario_path):
        """The last quad of a ring closes back to point 0."""
        mesh = sweep(oval_profile, scenario_path, 25.0, path_segments=12)
        assert list(mesh.indices[30]) == [15, 31, 0]
        assert list(mesh.indices[31]) == [0, 31, 16]

    def test_uvs(self, oval_profile, scenario_path):
        mesh = sweep(oval_profile, scenario_path, 25.0, path_segments=12)
        assert np.allclose(mesh.uvs[0], [0.0, 0.0])
        assert np.allclose(mesh.uvs[15], [1.0, 0.0])
        assert np.allclose(mesh.uvs[-1], [1.0, 1.0])

    def test_accepts_samples_and_point_lists(self, scenario_path):
        samples = sample_path(scenario_path, 10)
        points = [(1.0, 0.0), (0.0, -1.0), (-1.0, 0.0), (0.0, 1.0)]
        mesh = sweep(points, samples, 25.0)
        assert mesh.vertex_count == 11 * 4


class TestSweepGeometry:
    """Ring placement, thickness and fillet scaling."""

    def test_first_ring_centred_on_attachment(self, oval_profile, scenario_path):
        mesh = sweep(oval_profile, scenario_path, 25.0, path_segments=12)
        ring = mesh.positions[:16].astype(np.float64)
        assert np.allclose(ring.mean(axis=0), scenario_path.start, atol=1e-4)

    def test_reference_thickness(self, oval_profile, scenario_path):
        """At 25mm handle width the profile height is kept on the thickness axis."""
        mesh = sweep(oval_profile, scenario_path, 25.0, path_segments=12)
        middle = mesh.positions[6 * 16:7 * 16]
        assert middle[:, 2].max() == pytest.approx(3.0, abs=1e-5)

    def test_thickness_scaling(self, oval_profile, scenario_path):
        mesh = sweep(oval_profile, scenario_path, 50.0, path_segments=12)
        middle = mesh.positions[6 * 16:7 * 16]
        assert middle[:, 2].max() == pytest.approx(6.0, abs=1e-5)

    def test_fillet_enlarges_end_rings(self, scenario_params, oval_profile, scenario_path):
        zones = compute_fillet_zones(scenario_path, 8.0)
        mean_radius = profile_mean_radius(10, 6)
        mesh = sweep(oval_profile, scenario_path, 25.0, zones, 8.0, mean_radius, path_segments=96)
        first = mesh.positions[:16]
        middle = mesh.positions[48 * 16:49 * 16]
        # Scale 3 at the attachment; the thickness axis takes it twice
        assert first[:, 2].max() == pytest.approx(27.0, abs=1e-4)
        assert middle[:, 2].max() == pytest.approx(3.0, abs=1e-4)

    def test_no_fillet_scales_are_one(self, scenario_path):
        samples = sample_path(scenario_path, 96)
        zones = compute_fillet_zones(scenario_path, 0.0)
        assert np.all(ring_scales(samples, zones, 0.0, 4.0) == 1.0)

    def test_fillet_scales_peak_at_ends(self, scenario_path):
        samples = sample_path(scenario_path, 96)
        zones = compute_fillet_zones(scenario_path, 8.0)
        scales = ring_scales(samples, zones, 8.0, 4.0)
        assert scales[0] == 3.0
        assert scales[-1] == 3.0
        assert scales[48] == 1.0

    def test_normals_unit_and_outward(self, oval_profile, scenario_path):
        mesh = sweep(oval_profile, scenario_path, 25.0, path_segments=24)
        normals = mesh.normals.astype(np.float64)
        assert np.allclose(np.linalg.norm(normals, axis=1), 1.0, atol=1e-5)

        rings = mesh.positions.astype(np.float64).reshape(25, 16, 3)
        centers = np.array([s.position for s in sample_path(scenario_path, 24)])
        radial = (rings - centers[:, None, :]).reshape(-1, 3)
        assert np.all(np.einsum("ij,ij->i", radial, normals) > 0)

    def test_triangles_face_outward(self, oval_profile, scenario_path):
        """Face normals point away from the path at each triangle."""
        mesh = sweep(oval_profile, scenario_path, 25.0, path_segments=24)
        face = _triangle_normals(mesh)
        tris = mesh.positions[mesh.indices].astype(np.float64)
        ring_of_first = mesh.indices[:, 0] // 16
        centers = np.array([s.position for s in sample_path(scenario_path, 24)])
        outward = tris.mean(axis=1) - centers[ring_of_first]
        assert np.mean(np.einsum("ij,ij->i", face, outward) > 0) > 0.95


class TestSweepErrors:
    """Degenerate input."""

    def test_too_few_profile_points(self, scenario_path):
        with pytest.raises(DegenerateProfile):
            sweep([(0.0, 0.0), (1.0, 0.0)], scenario_path, 25.0)

    def test_non_finite_point_list(self, scenario_path):
        """Raw point lists get the same finiteness check as built profiles."""
        points = [(5.0, 0.0), (0.0, -3.0), (float("nan"), 0.0), (0.0, 3.0)]
        with pytest.raises(DegenerateProfile):
            sweep(points, scenario_path, 25.0)

    def test_infinite_point_array(self, scenario_path):
        points = np.array([[5.0, 0.0], [0.0, -3.0], [-np.inf, 0.0], [0.0, 3.0]])
        with pytest.raises(DegenerateProfile):
            sweep(points, scenario_path, 25.0)

    def test_too_few_samples(self, oval_profile, scenario_path):
        with pytest.raises(DegenerateMesh):
            sweep(oval_profile, sample_path(scenario_path, 0), 25.0)


class TestMesh:
    """Tests for the Mesh value type."""

    @pytest.fixture
    def quad(self):
        return Mesh(
            positions=[[0, 0, 0], [2, 0, 0], [2, 4, 0], [0, 4, 0]],
            normals=[[0, 0, 1]] * 4,
            uvs=[[0, 0], [1, 0], [1, 1], [0, 1]],
            indices=[0, 1, 2, 0, 2, 3],
        )

    def test_flat_index_buffer(self, quad):
        assert quad.indices.shape == (2, 3)
        assert quad.triangle_count == 2

    def test_read_only(self, quad):
        with pytest.raises(ValueError):
            quad.positions[0, 0] = 5.0

    def test_bounding_box(self, quad):
        low, high = quad.bounding_box()
        assert list(low) == [0, 0, 0]
        assert list(high) == [2, 4, 0]

    def test_centered(self, quad):
        low, high = quad.centered().bounding_box()
        assert list(low) == [-1, -2, 0]
        assert list(high) == [1, 2, 0]

    def test_stats(self, quad):
        assert quad.stats() == {"vertices": 4, "triangles": 2}

    def test_index_out_of_range(self):
        with pytest.raises(ValueError, match="out of range"):
            Mesh(positions=[[0, 0, 0]] * 3, normals=[[0, 0, 1]] * 3, uvs=[[0, 0]] * 3, indices=[0, 1, 3])

    def test_mismatched_attributes(self):
        with pytest.raises(ValueError):
            Mesh(positions=[[0, 0, 0]] * 3, normals=[[0, 0, 1]] * 2, uvs=[[0, 0]] * 3, indices=[0, 1, 2])
