"""Tests for the YAML-backed solver configuration."""

import pytest

from geodesics.config import get_geodesic_defaults, get_geodesic_section, reload_geodesic_defaults
from geodesics.geodesic_distance import distance_to_point


def test_builtin_defaults():
    settings = get_geodesic_defaults()
    assert settings["distance"]["tolerance"] == 1e-6
    assert settings["distance"]["max_distance"] is None
    assert settings["relaxation"]["max_passes"] == 10000
    assert settings["backends"] == {"bounds": "heap", "relaxation": "python"}


def test_sections_are_copies():
    section = get_geodesic_section("distance")
    section["tolerance"] = 1.0
    assert get_geodesic_section("distance")["tolerance"] == 1e-6
    assert get_geodesic_section("missing") == {}


def test_explicit_yaml_is_merged(tmp_path):
    path = tmp_path / "geodesic_defaults.yaml"
    path.write_text("distance:\n  tolerance: 0.001\nbackends:\n  relaxation: numba\n", encoding="utf-8")
    reload_geodesic_defaults(str(path))

    settings = get_geodesic_defaults()
    assert settings["distance"]["tolerance"] == 0.001
    assert settings["distance"]["max_distance_mode"] == "absolute"
    assert settings["backends"] == {"bounds": "heap", "relaxation": "numba"}


def test_environment_override(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("general:\n  verbose: true\n", encoding="utf-8")
    monkeypatch.setenv("GEODESIC_DEFAULTS_YAML", str(path))
    reload_geodesic_defaults()
    assert get_geodesic_section("general")["verbose"] is True


def test_empty_yaml_keeps_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    reload_geodesic_defaults(str(path))
    assert get_geodesic_section("relaxation")["max_passes"] == 10000


def test_non_mapping_yaml_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        reload_geodesic_defaults(str(path))


def test_configured_budget_applies_to_queries(tmp_path, grid_mesh, capsys):
    path = tmp_path / "budget.yaml"
    path.write_text("relaxation:\n  max_passes: 1\ngeneral:\n  verbose: true\n", encoding="utf-8")
    reload_geodesic_defaults(str(path))

    limited = distance_to_point(grid_mesh, 0)
    assert limited.passes == 1
    assert not limited.converged
    assert "[relax]" in capsys.readouterr().out

    # Keyword arguments take precedence over the file.
    full = distance_to_point(grid_mesh, 0, max_passes=100, verbose=False)
    assert full.converged


def test_zero_limits_are_not_replaced_by_configured_values(tmp_path, grid_mesh):
    path = tmp_path / "limits.yaml"
    path.write_text("distance:\n  tolerance: 0.5\n  max_distance: 2.0\n", encoding="utf-8")
    reload_geodesic_defaults(str(path))

    # Every improvement on the 4x4 grid is below 0.5.
    assert distance_to_point(grid_mesh, 0, max_distance=10.0).updates == 0

    exact = distance_to_point(grid_mesh, 0, max_distance=10.0, tolerance=0.0)
    assert exact.updates > 0
    assert exact[7] == pytest.approx(5.0 ** 0.5)

    assert distance_to_point(grid_mesh, 0, max_distance=0.0).as_dict() == {0: 0.0}
