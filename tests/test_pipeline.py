"""Tests for the configured default pipeline and the demo entry point."""

import json

import pytest
import trimesh

import main
from geodesics.config import reload_geodesic_defaults
from utilities.default_pipeline import distance_field_from_defaults, resolve_max_distance


@pytest.fixture
def sphere_file(tmp_path):
    path = tmp_path / "ball.ply"
    trimesh.creation.icosphere(subdivisions=1).export(str(path))
    return path


def test_resolve_max_distance_modes(make_grid):
    mesh = make_grid(4, 0.5)
    assert resolve_max_distance(mesh, {"max_distance": None}) is None
    assert resolve_max_distance(mesh, {"max_distance": "2.0"}) == 2.0
    scaled = resolve_max_distance(mesh, {"max_distance": 2.0, "max_distance_mode": "median_edge_multiplier"})
    assert scaled == pytest.approx(1.0)


def test_pipeline_without_export(sphere_file, capsys):
    result, mesh = distance_field_from_defaults(sphere_file, 3, return_mesh=True)
    out = capsys.readouterr().out

    assert result.source == 3
    assert result[3] == 0.0
    assert len(result) == len(mesh.vertices)
    assert "Computing geodesic distances from vertex 3" in out
    assert "Distance export written" not in out


def test_pipeline_exports_when_configured(sphere_file, tmp_path, capsys):
    export_dir = tmp_path / "exports"
    config = tmp_path / "geodesic_defaults.yaml"
    config.write_text(
        "exports:\n"
        "  distance_export: true\n"
        f"  export_directory: '{export_dir.as_posix()}'\n"
        "distance:\n"
        "  max_distance: 1.0\n"
        "  max_distance_mode: median_edge_multiplier\n",
        encoding="utf-8",
    )
    reload_geodesic_defaults(str(config))

    result = distance_field_from_defaults(sphere_file, 0)
    target = export_dir / "ball_v0_distances.json"

    assert target.is_file()
    assert "Distance export written" in capsys.readouterr().out
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["meta"]["source_vertex"] == 0
    assert payload["meta"]["field_statistics"]["discovered"] == len(result)
    assert len(result) < 42


def test_sphere_demo_reports_errors(capsys):
    main.run_sphere_demo(subdivisions=1)
    out = capsys.readouterr().out
    assert "Icosphere: 42 vertices" in out
    assert "Mean abs error, relaxed distances" in out
