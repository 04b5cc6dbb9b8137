"""Numba-compiled kernels for the bound initializer and the relaxation pass.

The kernels repeat the arithmetic of the pure-Python backends operation for
operation and are compiled without ``fastmath``, so both backends produce the
same distances.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from numba import njit

from geodesics.unfolding import EPSILON, SENTINEL

__all__ = [
    "dijkstra_with_cutoff_jit",
    "quadratic_distance_jit",
    "relax_pass_jit",
]


@njit(cache=True)
def _heap_push(heap_nodes, heap_dists, size, node, dist):
    i = size
    while i > 0:
        parent = (i - 1) // 2
        if heap_dists[parent] <= dist:
            break
        heap_nodes[i] = heap_nodes[parent]
        heap_dists[i] = heap_dists[parent]
        i = parent
    heap_nodes[i] = node
    heap_dists[i] = dist
    return size + 1


@njit(cache=True)
def _heap_pop(heap_nodes, heap_dists, size):
    node = heap_nodes[0]
    dist = heap_dists[0]
    size -= 1
    if size <= 0:
        return node, dist, size
    last_node = heap_nodes[size]
    last_dist = heap_dists[size]
    i = 0
    while True:
        left = 2 * i + 1
        if left >= size:
            break
        right = left + 1
        smallest = left
        if right < size and heap_dists[right] < heap_dists[left]:
            smallest = right
        if heap_dists[smallest] >= last_dist:
            break
        heap_nodes[i] = heap_nodes[smallest]
        heap_dists[i] = heap_dists[smallest]
        i = smallest
    heap_nodes[i] = last_node
    heap_dists[i] = last_dist
    return node, dist, size


@njit(cache=True)
def _dijkstra_kernel(
    indptr: np.ndarray,
    indices: np.ndarray,
    weights: np.ndarray,
    source: int,
    cutoff: float,
) -> np.ndarray:
    n = indptr.shape[0] - 1
    dist = np.empty(n, dtype=np.float64)
    visited = np.zeros(n, dtype=np.uint8)
    for i in range(n):
        dist[i] = np.inf

    heap_capacity = max(1, indices.shape[0] + 8)
    heap_nodes = np.empty(heap_capacity, dtype=np.int64)
    heap_dists = np.empty(heap_capacity, dtype=np.float64)
    heap_size = 0

    dist[source] = 0.0
    heap_size = _heap_push(heap_nodes, heap_dists, heap_size, source, 0.0)

    while heap_size > 0:
        node, cur_dist, heap_size = _heap_pop(heap_nodes, heap_dists, heap_size)
        if visited[node]:
            continue
        visited[node] = 1
        if cur_dist > dist[node]:
            continue
        for idx in range(indptr[node], indptr[node + 1]):
            nbr = indices[idx]
            if visited[nbr]:
                continue
            new_dist = cur_dist + weights[idx]
            if cutoff >= 0.0 and new_dist > cutoff:
                continue
            if new_dist < dist[nbr]:
                dist[nbr] = new_dist
                heap_size = _heap_push(heap_nodes, heap_dists, heap_size, nbr, new_dist)

    return dist


@njit(cache=True)
def _unfold_kernel(
    positions: np.ndarray,
    ia: int,
    ib: int,
    ic: int,
    dpa: float,
    dpb: float,
    orientation: float,
    eps: float,
) -> float:
    # Negative return value means "no constraint".
    ab0 = positions[ib, 0] - positions[ia, 0]
    ab1 = positions[ib, 1] - positions[ia, 1]
    ab2 = positions[ib, 2] - positions[ia, 2]
    dab2 = ab0 * ab0 + ab1 * ab1 + ab2 * ab2
    dab = math.sqrt(dab2)
    if dab < eps:
        return -1.0

    ac0 = positions[ic, 0] - positions[ia, 0]
    ac1 = positions[ic, 1] - positions[ia, 1]
    ac2 = positions[ic, 2] - positions[ia, 2]

    s = 1.0 / dab
    ab0 *= s
    ab1 *= s
    ab2 *= s
    c0 = ab0 * ac0 + ab1 * ac1 + ab2 * ac2
    r0 = ac0 - c0 * ab0
    r1 = ac1 - c0 * ab1
    r2 = ac2 - c0 * ab2
    c1 = math.sqrt(r0 * r0 + r1 * r1 + r2 * r2)

    p0 = (dpa * dpa - dpb * dpb + dab2) / (2.0 * dab)
    radicand = dpa * dpa - p0 * p0
    if radicand < 0.0:
        return -1.0
    p1 = math.sqrt(radicand)
    if orientation < 0.0:
        p1 = -p1

    d0 = c0 - p0
    d1 = c1 - p1
    return math.sqrt(d0 * d0 + d1 * d1)


@njit(cache=True)
def _relax_pass_kernel(
    positions: np.ndarray,
    faces: np.ndarray,
    star_indptr: np.ndarray,
    star_faces: np.ndarray,
    order: np.ndarray,
    dist: np.ndarray,
    discovered: np.ndarray,
    max_distance: float,
    tolerance: float,
    eps: float,
) -> int:
    updates = 0
    for oi in range(order.shape[0]):
        v = order[oi]
        if dist[v] > max_distance:
            break
        for si in range(star_indptr[v], star_indptr[v + 1]):
            fi = star_faces[si]
            f0 = faces[fi, 0]
            f1 = faces[fi, 1]
            f2 = faces[fi, 2]
            if discovered[f0] == 0 or discovered[f1] == 0 or discovered[f2] == 0:
                continue

            # Stable insertion sort of the three corners by distance.
            if dist[f1] < dist[f0]:
                f0, f1 = f1, f0
            if dist[f2] < dist[f1]:
                f1, f2 = f2, f1
                if dist[f1] < dist[f0]:
                    f0, f1 = f1, f0

            if abs(dist[f1] - dist[f2]) < tolerance:
                continue

            old = dist[f2]
            cand = _unfold_kernel(positions, f0, f1, f2, dist[f0], dist[f1], -1.0, eps)
            if cand < 0.0:
                continue
            if cand < old and abs(cand - old) > tolerance:
                dist[f2] = cand
                updates += 1
    return updates


def dijkstra_with_cutoff_jit(
    indptr: np.ndarray,
    indices: np.ndarray,
    weights: np.ndarray,
    source: int,
    cutoff: float,
) -> np.ndarray:

    """Compute single-source edge-graph distances with an optional cutoff.

    Parameters
    ----------
    indptr, indices, weights : np.ndarray
        CSR representation of the mesh edge graph.
    source : int
        Starting vertex index.
    cutoff : float
        Candidates above this value are never queued. ``np.inf`` yields the
        full solution.

    Returns
    -------
    np.ndarray
        Distance array with ``np.inf`` for vertices that were not reached."""
    cutoff = float(cutoff)
    if not math.isfinite(cutoff):
        cutoff = -1.0
    return _dijkstra_kernel(indptr, indices, weights, int(source), cutoff)


def quadratic_distance_jit(
    a: Sequence[float],
    b: Sequence[float],
    c: Sequence[float],
    dpa: float,
    dpb: float,
    orientation: int,
) -> float:
    """Compiled counterpart of :func:`geodesics.unfolding.quadratic_distance`."""
    corners = np.array([a, b, c], dtype=np.float64)
    d = _unfold_kernel(corners, 0, 1, 2, float(dpa), float(dpb), float(orientation), EPSILON)
    return SENTINEL if d < 0.0 else d


def relax_pass_jit(
    positions: np.ndarray,
    faces: np.ndarray,
    star_indptr: np.ndarray,
    star_faces: np.ndarray,
    order: np.ndarray,
    dist: np.ndarray,
    discovered: np.ndarray,
    max_distance: float,
    tolerance: float,
) -> int:

    """Run one Gauss-Seidel relaxation pass in place on ``dist``.

    Parameters
    ----------
    positions, faces : np.ndarray
        Mesh geometry shaped ``(V, 3)`` and ``(F, 3)``.
    star_indptr, star_faces : np.ndarray
        CSR vertex stars (see :func:`geodesics.topology.stars_to_csr`).
    order : np.ndarray
        Discovered vertices sorted by ascending distance.
    dist : np.ndarray
        Distances, updated in place.
    discovered : np.ndarray
        Boolean mask of vertices that carry a distance.
    max_distance, tolerance : float
        Sweep limit and update tolerance.

    Returns
    -------
    int
        Number of updates made during the pass."""
    return int(
        _relax_pass_kernel(
            positions,
            faces,
            star_indptr,
            star_faces,
            order,
            dist,
            discovered.view(np.uint8),
            float(max_distance),
            float(tolerance),
            EPSILON,
        )
    )
