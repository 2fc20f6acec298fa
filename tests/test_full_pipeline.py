"""
Full pipeline integration tests: calculator -> save -> load -> geometry -> STL.

Tests end-to-end workflows that cross multiple layers, catching integration
issues that unit tests miss.
"""

import json

import numpy as np
import pytest

from mughandle.calculator.core import apply_smart_defaults
from mughandle.calculator.validation import validate_handle
from mughandle.core import HandleGeometry
from mughandle.io.loaders import HandleDesign, load_design_json, save_design_json
from mughandle.io.stl import read_binary
from mughandle.state import HandleEditorState


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _assert_stl_consistent(data: bytes, expected_triangles: int):
    """Assert a binary STL declares and contains the expected triangles."""
    assert int.from_bytes(data[80:84], "little") == expected_triangles
    assert len(data) == 84 + 50 * expected_triangles
    normals, tris = read_binary(data)
    assert np.all(np.isfinite(tris))
    lengths = np.linalg.norm(normals, axis=1)
    assert np.all((np.abs(lengths - 1.0) < 1e-4) | (lengths == 0.0))


class TestScenarioPipeline:
    """The compact oval scenario from parameters to STL."""

    def test_params_to_stl(self, scenario_params):
        result = validate_handle(scenario_params)
        assert result.valid

        handle = HandleGeometry(scenario_params)
        assert handle.stats() == {"vertices": 1552, "triangles": 3072}
        _assert_stl_consistent(handle.to_stl_bytes(), 3072)

    def test_preview_pipeline(self, scenario_params):
        handle = HandleGeometry(scenario_params, preview=True)
        _assert_stl_consistent(handle.to_stl_bytes(), 512)

    def test_mesh_normals_unit(self, scenario_mesh):
        lengths = np.linalg.norm(scenario_mesh.normals, axis=1)
        assert np.allclose(lengths, 1.0, atol=1e-5)

    def test_first_ring_flared(self, scenario_mesh):
        """The fillet enlarges the cross-section at the attachment."""
        first = scenario_mesh.positions[:16].astype(np.float64)
        middle = scenario_mesh.positions[48 * 16:49 * 16].astype(np.float64)
        first_extent = np.ptp(first[:, 2])
        middle_extent = np.ptp(middle[:, 2])
        assert first_extent > 5 * middle_extent


class TestSaveLoadBuild:
    """Save -> load -> validate -> build."""

    def test_round_trip_build(self, sample_design, tmp_path):
        path = tmp_path / "design.json"
        save_design_json(sample_design, path)

        loaded = load_design_json(path)
        assert validate_handle(loaded.handle, loaded.vessel).valid

        original = HandleGeometry(sample_design.handle, sample_design.vessel).to_stl_bytes()
        rebuilt = HandleGeometry(loaded.handle, loaded.vessel).to_stl_bytes()
        assert original == rebuilt

    def test_smart_defaults_pipeline(self, default_params, tall_vessel, tmp_path):
        params = apply_smart_defaults(default_params, tall_vessel)
        design = HandleDesign(name="Fitted", handle=params, vessel=tall_vessel)
        assert validate_handle(design.handle, design.vessel).valid

        path = HandleGeometry(design.handle, design.vessel).export_stl(tmp_path / "fitted.stl")
        _assert_stl_consistent(path.read_bytes(), 3072)

    def test_rounded_rectangle_pipeline(self, rectangular_params, tmp_path):
        path = HandleGeometry(rectangular_params).export_stl(tmp_path / "box.stl")
        _assert_stl_consistent(path.read_bytes(), 96 * 20 * 2)


class TestEditorPipeline:
    """Browser project -> editor state -> mesh."""

    def test_project_to_mesh(self, browser_project_dict, tmp_path):
        state = HandleEditorState()
        state.load_project(browser_project_dict)
        assert not [m for m in state.messages if m.severity.value == "error"]

        design = state.to_design()
        handle = HandleGeometry(design.handle, design.vessel, preview=True)
        _assert_stl_consistent(handle.to_stl_bytes(), 32 * 20 * 2)

    def test_examples_load(self, examples_dir):
        for name in ("espresso_cup.json", "tall_mug.json", "browser_project.json"):
            design = load_design_json(examples_dir / name)
            assert validate_handle(design.handle, design.vessel).valid, name


@pytest.mark.slow
class TestHighResolution:
    """Dense sampling still produces a consistent mesh."""

    def test_dense_mesh(self, scenario_params):
        handle = HandleGeometry(scenario_params, path_segments=400, profile_segments=64)
        mesh = handle.build()
        assert mesh.vertex_count == 401 * 64
        _assert_stl_consistent(handle.to_stl_bytes(), 400 * 64 * 2)
