"""Tests for loading meshes from disk."""

import numpy as np
import pytest
import trimesh

from geodesics.geodesic_distance import distance_to_point
from loaders.mesh_loader import MeshLoader


@pytest.fixture
def sphere_file(tmp_path):
    path = tmp_path / "sphere.ply"
    trimesh.creation.icosphere(subdivisions=1).export(str(path))
    return path


def test_loader_exposes_solver_arrays(sphere_file):
    mesh = MeshLoader(str(sphere_file))
    source = trimesh.creation.icosphere(subdivisions=1)

    assert mesh.positions.dtype == np.float64
    assert mesh.positions.shape == source.vertices.shape
    assert np.allclose(mesh.positions, source.vertices)
    assert np.array_equal(mesh.faces, source.faces)


def test_star_map_is_cached(sphere_file):
    mesh = MeshLoader(str(sphere_file))
    stars = mesh.vertex_star_map()
    assert mesh.vertex_star_map() is stars
    assert len(stars) == len(mesh.vertices)


def test_loaded_mesh_query_matches_arrays(sphere_file):
    mesh = MeshLoader(str(sphere_file))
    from_loader = distance_to_point(mesh, 0, vertex_star_map=mesh.vertex_star_map())
    from_arrays = distance_to_point({"faces": mesh.faces, "positions": mesh.positions}, 0)
    assert from_loader.as_dict() == from_arrays.as_dict()
