"""Mesh adjacency: vertex stars and the weighted edge graph derived from them.

The star of a vertex is the list of faces incident to it. Everything the
distance solver needs about connectivity is derived from the star map: the
edge graph walked by the bound initializer (as Python lists, as CSR arrays
for the compiled kernels, or as a NetworkX graph) and the CSR star arrays
consumed by the compiled relaxation kernel.
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Any, Dict, List, Mapping, Sequence, Tuple

import networkx as nx
import numpy as np

from utilities.mesh_utils import mesh_arrays

StarMap = Mapping[int, Sequence[int]]


def vertex_stars(mesh: Any) -> Dict[int, List[int]]:
    """Return the faces incident to every vertex referenced by ``mesh``.

    Parameters
    ----------
    mesh : Any
        Triangle mesh accepted by :func:`utilities.mesh_utils.mesh_arrays`.

    Returns
    -------
    Dict[int, List[int]]
        Mapping from vertex index to ascending face indices. Vertices that no
        face references have no entry.
    """
    faces, _ = mesh_arrays(mesh)
    stars: Dict[int, List[int]] = defaultdict(list)
    for fi, tri in enumerate(faces.tolist()):
        for v in tri:
            star = stars[v]
            # A degenerate face may repeat a vertex; list it once.
            if not star or star[-1] != fi:
                star.append(fi)
    return dict(stars)


def star_neighbors(faces: np.ndarray, stars: StarMap, v: int) -> List[int]:
    """Return the vertices sharing a face with ``v``, in first-seen order."""
    seen = {v}
    out: List[int] = []
    for fi in stars.get(v, ()):
        for u in faces[fi]:
            u = int(u)
            if u not in seen:
                seen.add(u)
                out.append(u)
    return out


def edge_length(positions: np.ndarray, v: int, u: int) -> float:
    """Euclidean length of the edge ``(v, u)``."""
    dx = float(positions[v, 0]) - float(positions[u, 0])
    dy = float(positions[v, 1]) - float(positions[u, 1])
    dz = float(positions[v, 2]) - float(positions[u, 2])
    return math.sqrt(dx * dx + dy * dy + dz * dz)


def stars_to_csr(stars: StarMap, n_vertices: int) -> Tuple[np.ndarray, np.ndarray]:
    """Pack a star map into CSR arrays ``(indptr, face_indices)``.

    Row ``v`` lists the faces of ``v``; vertices without a star get an empty
    row.
    """
    indptr = np.zeros(n_vertices + 1, dtype=np.int64)
    indices: List[int] = []
    for v in range(n_vertices):
        indices.extend(int(fi) for fi in stars.get(v, ()))
        indptr[v + 1] = len(indices)
    face_indices = np.array(indices, dtype=np.int64) if indices else np.empty(0, dtype=np.int64)
    return indptr, face_indices


def edge_graph_csr(
    faces: np.ndarray,
    positions: np.ndarray,
    stars: StarMap,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Construct CSR adjacency arrays with Euclidean weights from the stars.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray, np.ndarray]
        ``(indptr, indices, weights)`` with one row per vertex of
        ``positions``.
    """
    n = positions.shape[0]
    indptr = np.zeros(n + 1, dtype=np.int64)
    indices: List[int] = []
    weights: List[float] = []
    for v in range(n):
        for u in star_neighbors(faces, stars, v):
            indices.append(u)
            weights.append(edge_length(positions, v, u))
        indptr[v + 1] = len(indices)
    idx = np.array(indices, dtype=np.int64) if indices else np.empty(0, dtype=np.int64)
    w = np.array(weights, dtype=np.float64) if weights else np.empty(0, dtype=np.float64)
    return indptr, idx, w


def edge_graph_networkx(faces: np.ndarray, positions: np.ndarray, stars: StarMap) -> nx.Graph:
    """Populate a NetworkX graph with every vertex and Euclidean edge weights."""
    G = nx.Graph()
    G.add_nodes_from(range(positions.shape[0]))
    for v in stars:
        v = int(v)
        for u in star_neighbors(faces, stars, v):
            if not G.has_edge(v, u):
                G.add_edge(v, u, weight=edge_length(positions, v, u))
    return G
