"""Iterative tightening of edge-graph bounds by local triangle unfolding.

Each pass visits the discovered vertices in ascending order of their current
distance and, for every face around a vertex, re-estimates the farthest
corner of that face by unfolding it against the two nearer corners (see
:mod:`geodesics.unfolding`). Updates are written in place and are visible to
the rest of the same pass (Gauss-Seidel order). Passes repeat until one makes
no update, or until the pass/time budget runs out.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np
from tqdm import tqdm

from geodesics.distance_field import DistanceField
from geodesics.numba_accel import relax_pass_jit
from geodesics.topology import StarMap, stars_to_csr
from geodesics.unfolding import Distance, unfold_triangle

RELAX_BACKENDS = ("python", "numba")


@dataclass(frozen=True)
class PassReport:
    """Summary of one completed relaxation pass."""

    index: int
    updates: int


@dataclass(frozen=True)
class RelaxationOutcome:
    """How a relaxation run ended.

    Attributes
    ----------
    converged : bool
        ``True`` when the last pass made no update.
    passes : int
        Number of passes performed, including the final quiet one.
    updates : int
        Total number of distance updates across all passes.
    elapsed : float
        Wall-clock seconds spent relaxing.
    """

    converged: bool
    passes: int
    updates: int
    elapsed: float


def sweep_order(field: DistanceField) -> np.ndarray:
    """Discovered vertices sorted by current distance, ties by vertex index."""
    vertices = field.vertices()
    return vertices[np.argsort(field.distances[vertices], kind="stable")]


def relax_pass(
    field: DistanceField,
    faces: np.ndarray,
    positions: np.ndarray,
    stars: StarMap,
    max_distance: float,
    tolerance: float,
) -> int:
    """Run a single Gauss-Seidel pass over ``field`` and count its updates.

    Faces touching an undiscovered vertex are skipped, so a pass never
    discovers new vertices.
    """
    dist = field.distances
    discovered = field.discovered
    updates = 0
    for v in sweep_order(field):
        if dist[v] > max_distance:
            break
        for fi in stars.get(int(v), ()):
            face = faces[fi]
            if not (discovered[face[0]] and discovered[face[1]] and discovered[face[2]]):
                continue
            f0, f1, f2 = sorted((int(u) for u in face), key=lambda u: dist[u])
            if abs(dist[f1] - dist[f2]) < tolerance:
                continue

            candidate = unfold_triangle(
                positions[f0],
                positions[f1],
                positions[f2],
                dist[f0],
                dist[f1],
                -1,
            )
            if not isinstance(candidate, Distance):
                continue
            old = dist[f2]
            if candidate.value < old and abs(candidate.value - old) > tolerance:
                field.tighten(f2, candidate.value)
                updates += 1
    return updates


def relaxation_passes(
    field: DistanceField,
    faces: np.ndarray,
    positions: np.ndarray,
    stars: StarMap,
    *,
    max_distance: float = np.inf,
    tolerance: float = 1e-6,
    backend: str = "python",
    star_csr: Optional[tuple] = None,
) -> Iterator[PassReport]:
    """Yield one :class:`PassReport` per pass until a pass makes no update.

    The generator is unbounded; the caller decides when to stop drawing
    passes. ``field`` reflects every update of a pass when its report is
    yielded.

    Parameters
    ----------
    field : DistanceField
        Bounds from :func:`geodesics.bound_initializer.initial_distance_bounds`,
        tightened in place.
    faces, positions : np.ndarray
        Mesh geometry.
    stars : StarMap
        Faces incident to each vertex.
    max_distance : float, optional
        Vertices farther than this are not swept.
    tolerance : float, optional
        Minimum improvement, and minimum gap between the two far corners of a
        face, for an update to happen.
    backend : {'python', 'numba'}, optional
        Implementation of a single pass.
    star_csr : tuple, optional
        Pre-built ``(indptr, face_indices)`` reused by the ``'numba'`` backend.

    Raises
    ------
    ValueError
        If ``backend`` is not recognised.
    """
    if backend not in RELAX_BACKENDS:
        raise ValueError(f"backend must be one of {RELAX_BACKENDS}, got {backend!r}")
    if backend == "numba" and star_csr is None:
        star_csr = stars_to_csr(stars, positions.shape[0])

    index = 0
    while True:
        if backend == "numba":
            updates = relax_pass_jit(
                positions,
                faces,
                star_csr[0],
                star_csr[1],
                sweep_order(field),
                field.distances,
                field.discovered,
                max_distance,
                tolerance,
            )
        else:
            updates = relax_pass(field, faces, positions, stars, max_distance, tolerance)
        index += 1
        yield PassReport(index, updates)
        if updates == 0:
            return


def relax_distances(
    field: DistanceField,
    faces: np.ndarray,
    positions: np.ndarray,
    stars: StarMap,
    *,
    max_distance: float = np.inf,
    tolerance: float = 1e-6,
    max_passes: Optional[int] = 10000,
    time_budget: Optional[float] = None,
    backend: str = "python",
    star_csr: Optional[tuple] = None,
    show_progress: bool = False,
    verbose: bool = False,
) -> RelaxationOutcome:
    """Relax ``field`` in place until it stops changing or a budget runs out.

    ``max_passes`` caps the number of passes and ``time_budget`` caps the
    wall-clock seconds; the budget is checked between passes, so a pass in
    progress always completes. When a budget stops the loop the field holds
    the best estimate reached so far and ``converged`` is ``False``.

    Raises
    ------
    ValueError
        If ``max_passes`` is not positive or ``time_budget`` is negative.
    """
    if max_passes is not None and max_passes < 1:
        raise ValueError(f"max_passes must be positive, got {max_passes}")
    if time_budget is not None and time_budget < 0:
        raise ValueError(f"time_budget must be non-negative, got {time_budget}")

    start = time.perf_counter()
    passes = 0
    total_updates = 0
    converged = False

    reports = relaxation_passes(
        field,
        faces,
        positions,
        stars,
        max_distance=max_distance,
        tolerance=tolerance,
        backend=backend,
        star_csr=star_csr,
    )
    with tqdm(disable=not show_progress, desc="Relaxation passes", unit="pass") as bar:
        for report in reports:
            passes = report.index
            total_updates += report.updates
            bar.update(1)
            bar.set_postfix(updates=report.updates)
            if report.updates == 0:
                converged = True
                break
            if max_passes is not None and passes >= max_passes:
                break
            if time_budget is not None and time.perf_counter() - start >= time_budget:
                break

    elapsed = time.perf_counter() - start
    if verbose:
        if converged:
            print(f"[relax] Fixed point after {passes} passes ({total_updates} updates, {elapsed:.3f}s)")
        else:
            print(
                f"[relax] Stopped after {passes} passes without reaching a fixed point "
                f"({total_updates} updates, {elapsed:.3f}s)"
            )
    return RelaxationOutcome(converged, passes, total_updates, elapsed)
