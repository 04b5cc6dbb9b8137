"""Initial upper bounds on geodesic distance from edge-graph shortest paths.

Dijkstra's algorithm runs over the mesh 1-skeleton with Euclidean edge
lengths. A path along edges is never shorter than the geodesic between its
end points, so every finalized value is an upper bound that the relaxation
stage later tightens.

Candidates above ``2 * max_distance`` are not queued. The cutoff bounds an
upper bound rather than the true distance, so a vertex whose geodesic distance
is below ``max_distance`` can still be left out when its edge-graph distance
is large; the behaviour is kept as is because it limits the search region
cheaply.
"""

from __future__ import annotations

import math
from typing import NamedTuple, Optional

import networkx as nx
import numpy as np
from tqdm import tqdm

from geodesics.distance_field import DistanceField
from geodesics.numba_accel import dijkstra_with_cutoff_jit
from geodesics.topology import StarMap, edge_graph_csr, edge_graph_networkx, edge_length
from utilities.priority_queue import MinPriorityQueue

BOUND_BACKENDS = ("heap", "networkx", "numba")


class QueueEntry(NamedTuple):
    distance: float
    vertex: int


def initial_distance_bounds(
    faces: np.ndarray,
    positions: np.ndarray,
    source: int,
    max_distance: float,
    stars: StarMap,
    *,
    backend: str = "heap",
    graph: Optional[nx.Graph] = None,
    csr: Optional[tuple] = None,
    show_progress: bool = False,
) -> DistanceField:
    """Compute edge-graph distances from ``source`` within ``2 * max_distance``.

    Parameters
    ----------
    faces : np.ndarray
        Triangle indices shaped ``(F, 3)``.
    positions : np.ndarray
        Vertex coordinates shaped ``(V, 3)``.
    source : int
        Seed vertex.
    max_distance : float
        Query radius; ``math.inf`` disables pruning.
    stars : StarMap
        Faces incident to each vertex.
    backend : {'heap', 'networkx', 'numba'}, optional
        Shortest-path implementation. All three return the same distances.
    graph : networkx.Graph, optional
        Pre-built edge graph reused by the ``'networkx'`` backend.
    csr : tuple, optional
        Pre-built ``(indptr, indices, weights)`` reused by the ``'numba'``
        backend.
    show_progress : bool, optional
        Display a progress bar over finalized vertices (``'heap'`` only).

    Returns
    -------
    DistanceField
        Discovered vertices and their finalized edge-graph distances.

    Raises
    ------
    ValueError
        If ``backend`` is not recognised.
    """
    if backend not in BOUND_BACKENDS:
        raise ValueError(f"backend must be one of {BOUND_BACKENDS}, got {backend!r}")

    cutoff = 2.0 * max_distance
    if backend == "networkx":
        return _bounds_networkx(faces, positions, source, cutoff, stars, graph)
    if backend == "numba":
        return _bounds_numba(faces, positions, source, cutoff, stars, csr)
    return _bounds_heap(faces, positions, source, cutoff, stars, show_progress)


def _bounds_heap(
    faces: np.ndarray,
    positions: np.ndarray,
    source: int,
    cutoff: float,
    stars: StarMap,
    show_progress: bool,
) -> DistanceField:
    field = DistanceField(positions.shape[0])
    to_visit: MinPriorityQueue[QueueEntry] = MinPriorityQueue(key=lambda entry: entry.distance)
    to_visit.push(QueueEntry(0.0, int(source)))

    with tqdm(
        total=positions.shape[0],
        disable=not show_progress,
        desc="Edge-graph bounds",
        unit="vertex",
    ) as bar:
        while to_visit.size() > 0:
            d, v = to_visit.pop()
            if field.discovered[v]:
                continue
            field.discover(v, d)
            bar.update(1)

            for fi in stars.get(v, ()):
                for u in faces[fi]:
                    u = int(u)
                    if u == v or field.discovered[u]:
                        continue
                    candidate = d + edge_length(positions, v, u)
                    if candidate <= cutoff:
                        to_visit.push(QueueEntry(candidate, u))
    return field


def _bounds_networkx(
    faces: np.ndarray,
    positions: np.ndarray,
    source: int,
    cutoff: float,
    stars: StarMap,
    graph: Optional[nx.Graph],
) -> DistanceField:
    if graph is None:
        graph = edge_graph_networkx(faces, positions, stars)
    dmap = nx.single_source_dijkstra_path_length(
        graph,
        int(source),
        cutoff=cutoff if math.isfinite(cutoff) else None,
        weight="weight",
    )
    field = DistanceField(positions.shape[0])
    for v, d in dmap.items():
        field.discover(int(v), float(d))
    return field


def _bounds_numba(
    faces: np.ndarray,
    positions: np.ndarray,
    source: int,
    cutoff: float,
    stars: StarMap,
    csr: Optional[tuple],
) -> DistanceField:
    if csr is None:
        csr = edge_graph_csr(faces, positions, stars)
    indptr, indices, weights = csr
    dist = dijkstra_with_cutoff_jit(indptr, indices, weights, int(source), cutoff)
    field = DistanceField(positions.shape[0])
    reached = np.isfinite(dist)
    field.distances[reached] = dist[reached]
    field.discovered[:] = reached
    return field
