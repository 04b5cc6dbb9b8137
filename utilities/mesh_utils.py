"""Utility primitives for reading mesh arrays and geometric scales."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Tuple

import numpy as np


def mesh_arrays(mesh: Any) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(faces, positions)`` for any supported mesh representation.

    Accepted inputs are objects exposing ``faces`` together with either
    ``positions`` or ``vertices`` (which covers :class:`trimesh.Trimesh` and
    :class:`loaders.mesh_loader.MeshLoader`), and mappings holding the same
    keys.

    Parameters
    ----------
    mesh : Any
        Triangle mesh in one of the supported forms.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        ``faces`` as ``int64`` shaped ``(F, 3)`` and ``positions`` as
        ``float64`` shaped ``(V, 3)``.

    Raises
    ------
    TypeError
        If neither positions nor vertices can be found on ``mesh``.
    ValueError
        If the arrays are not shaped as triangle connectivity and 3D points.
    """
    if isinstance(mesh, Mapping):
        faces = mesh.get("faces")
        positions = mesh.get("positions", mesh.get("vertices"))
    else:
        faces = getattr(mesh, "faces", None)
        positions = getattr(mesh, "positions", None)
        if positions is None:
            positions = getattr(mesh, "vertices", None)

    if faces is None or positions is None:
        raise TypeError("mesh must provide faces and positions (or vertices)")

    positions = np.asarray(positions, dtype=np.float64)
    if positions.ndim != 2 or positions.shape[1] != 3:
        raise ValueError(f"positions must be shaped (V, 3), got {positions.shape}")

    faces = np.asarray(faces, dtype=np.int64)
    if faces.size == 0:
        faces = faces.reshape(0, 3)
    if faces.ndim != 2 or faces.shape[1] != 3:
        raise ValueError(f"faces must be shaped (F, 3), got {faces.shape}")
    return faces, positions


def median_edge_length(mesh: Any) -> float:
    """Estimate a characteristic edge length used to scale distance limits.

    The median of the unique edge lengths is robust to a few outlier edges.
    Meshes without any face fall back to ``1.0``.

    Parameters
    ----------
    mesh : Any
        Surface mesh accepted by :func:`mesh_arrays`.

    Returns
    -------
    float
        Characteristic distance scale measured in mesh units.
    """
    faces, positions = mesh_arrays(mesh)
    if faces.shape[0] == 0:
        return 1.0

    edges = np.concatenate([faces[:, [0, 1]], faces[:, [1, 2]], faces[:, [2, 0]]])
    edges = np.unique(np.sort(edges, axis=1), axis=0)
    lengths = np.linalg.norm(positions[edges[:, 1]] - positions[edges[:, 0]], axis=1)
    lengths = lengths[np.isfinite(lengths)]
    return float(np.median(lengths)) if lengths.size else 1.0
