"""Shared mesh fixtures for the geodesic distance tests."""

import math

import numpy as np
import pytest
import trimesh

from geodesics.config import reload_geodesic_defaults


def build_grid(n_cells, spacing=1.0):
    """Flat ``n_cells x n_cells`` grid in the z=0 plane, split along (i,j)-(i+1,j+1)."""
    n = n_cells + 1
    positions = np.array(
        [(i * spacing, j * spacing, 0.0) for j in range(n) for i in range(n)],
        dtype=float,
    )
    faces = []
    for j in range(n_cells):
        for i in range(n_cells):
            v00 = j * n + i
            v10 = v00 + 1
            v01 = v00 + n
            v11 = v01 + 1
            faces.append((v00, v10, v11))
            faces.append((v00, v11, v01))
    return {"faces": np.array(faces, dtype=int), "positions": positions}


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Run every test against the built-in configuration."""
    monkeypatch.delenv("GEODESIC_DEFAULTS_YAML", raising=False)
    reload_geodesic_defaults()
    yield
    reload_geodesic_defaults()


@pytest.fixture
def equilateral_mesh():
    return {
        "faces": [[0, 1, 2]],
        "positions": [
            (0.0, 0.0, 0.0),
            (1.0, 0.0, 0.0),
            (0.5, math.sqrt(3.0) / 2.0, 0.0),
        ],
    }


@pytest.fixture
def grid_mesh():
    return build_grid(4)


@pytest.fixture
def make_grid():
    return build_grid


@pytest.fixture
def icosphere():
    return trimesh.creation.icosphere(subdivisions=2, radius=1.0)
