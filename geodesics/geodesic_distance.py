"""Approximate single-source geodesic distances on triangle meshes.

The query runs in two stages. Edge-graph shortest paths give an upper bound
for every vertex within ``2 * max_distance`` (:mod:`geodesics.bound_initializer`),
then repeated triangle unfolding tightens the bounds toward the geodesic
distance (:mod:`geodesics.relaxation`). All per-query state lives in the
returned :class:`~geodesics.distance_field.GeodesicDistances`; the vertex-star
map is only read and can be shared between queries.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Dict, Optional, Sequence

import numpy as np

from geodesics.bound_initializer import BOUND_BACKENDS, initial_distance_bounds
from geodesics.config import get_geodesic_defaults
from geodesics.distance_field import GeodesicDistances
from geodesics.relaxation import RELAX_BACKENDS, relax_distances
from geodesics.topology import (
    StarMap,
    edge_graph_csr,
    edge_graph_networkx,
    stars_to_csr,
    vertex_stars,
)
from utilities.config_utils import (
    coerce_bool,
    coerce_choice,
    coerce_float,
    coerce_int,
    coerce_optional_float,
)
from utilities.mesh_utils import mesh_arrays


def _resolve_options(overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Merge explicit keyword arguments over the configured defaults."""
    settings = get_geodesic_defaults()
    general_cfg = settings.get("general", {})
    distance_cfg = settings.get("distance", {})
    relax_cfg = settings.get("relaxation", {})
    backends_cfg = settings.get("backends", {})

    options: Dict[str, Any] = {
        "max_distance": coerce_optional_float(distance_cfg.get("max_distance"), None),
        "tolerance": coerce_float(distance_cfg.get("tolerance"), 1e-6),
        "max_passes": coerce_optional_float(relax_cfg.get("max_passes"), 10000),
        "time_budget": coerce_optional_float(relax_cfg.get("time_budget"), None),
        "bounds_backend": coerce_choice(backends_cfg.get("bounds"), BOUND_BACKENDS, "heap"),
        "relax_backend": coerce_choice(backends_cfg.get("relaxation"), RELAX_BACKENDS, "python"),
        "show_progress": coerce_bool(general_cfg.get("show_progress"), False),
        "verbose": coerce_bool(general_cfg.get("verbose"), False),
    }
    for key, value in overrides.items():
        if value is not None:
            options[key] = value

    if options["max_distance"] is None:
        options["max_distance"] = math.inf
    if options["max_passes"] is not None:
        options["max_passes"] = coerce_int(options["max_passes"], 10000)

    if options["max_distance"] < 0:
        raise ValueError(f"max_distance must be non-negative, got {options['max_distance']}")
    if options["tolerance"] < 0:
        raise ValueError(f"tolerance must be non-negative, got {options['tolerance']}")
    return options


class SurfaceDistanceSolver:
    """Geodesic distance queries against one mesh with cached adjacency.

    The star map, the CSR arrays used by the compiled backends and the
    NetworkX edge graph are built on first use and reused by every later
    query. Nothing query-specific is stored on the solver.

    Parameters
    ----------
    mesh : Any
        Triangle mesh accepted by :func:`utilities.mesh_utils.mesh_arrays`.
    vertex_star_map : StarMap, optional
        Pre-computed stars; computed from the faces when omitted.
    """

    def __init__(self, mesh: Any, vertex_star_map: Optional[StarMap] = None) -> None:
        self.faces, self.positions = mesh_arrays(mesh)
        if vertex_star_map is not None and not isinstance(vertex_star_map, Mapping):
            # Per-vertex sequences indexed by vertex id.
            vertex_star_map = dict(enumerate(vertex_star_map))
        self._stars = vertex_star_map
        self._graph = None
        self._edge_csr: Optional[tuple] = None
        self._star_csr: Optional[tuple] = None

    @property
    def n_vertices(self) -> int:
        return int(self.positions.shape[0])

    @property
    def stars(self) -> StarMap:
        if self._stars is None:
            self._stars = vertex_stars({"faces": self.faces, "positions": self.positions})
        return self._stars

    def _ensure_backend_data(self, bounds_backend: str, relax_backend: str) -> None:
        """Build the adjacency structures the selected backends consume."""
        if bounds_backend == "networkx" and self._graph is None:
            self._graph = edge_graph_networkx(self.faces, self.positions, self.stars)
        if bounds_backend == "numba" and self._edge_csr is None:
            self._edge_csr = edge_graph_csr(self.faces, self.positions, self.stars)
        if relax_backend == "numba" and self._star_csr is None:
            self._star_csr = stars_to_csr(self.stars, self.n_vertices)

    def distance_to_point(
        self,
        source_vertex: int,
        max_distance: Optional[float] = None,
        tolerance: Optional[float] = None,
        *,
        max_passes: Optional[int] = None,
        time_budget: Optional[float] = None,
        bounds_backend: Optional[str] = None,
        relax_backend: Optional[str] = None,
        show_progress: Optional[bool] = None,
        verbose: Optional[bool] = None,
    ) -> GeodesicDistances:
        """Approximate geodesic distances from ``source_vertex``.

        Parameters
        ----------
        source_vertex : int
            Vertex the distances are measured from.
        max_distance : float, optional
            Query radius. Vertices whose edge-graph distance exceeds
            ``2 * max_distance`` are left undiscovered and relaxation stops
            sweeping beyond ``max_distance``. Defaults to +inf; ``0`` is taken
            literally and keeps only the source.
        tolerance : float, optional
            Relaxation tolerance, default ``1e-6``. Only ``None`` selects a
            default; ``0`` disables the tolerance gate.
        max_passes : int, optional
            Relaxation pass budget, default ``10000``.
        time_budget : float, optional
            Relaxation wall-clock budget in seconds, disabled by default.
        bounds_backend : {'heap', 'networkx', 'numba'}, optional
            Shortest-path implementation for the initial bounds.
        relax_backend : {'python', 'numba'}, optional
            Implementation of a relaxation pass.
        show_progress, verbose : bool, optional
            Progress bars and status lines.

        Unset options fall back to :mod:`geodesics.config`.

        Returns
        -------
        GeodesicDistances
            Mapping from discovered vertex to distance, with the stage-one
            bounds and the convergence state attached.

        Raises
        ------
        IndexError
            If ``source_vertex`` is not a vertex of the mesh.
        ValueError
            For negative limits or unknown backends.
        """
        opts = _resolve_options(
            {
                "max_distance": max_distance,
                "tolerance": tolerance,
                "max_passes": max_passes,
                "time_budget": time_budget,
                "bounds_backend": bounds_backend,
                "relax_backend": relax_backend,
                "show_progress": show_progress,
                "verbose": verbose,
            }
        )
        source = int(source_vertex)
        if not 0 <= source < self.n_vertices:
            raise IndexError(f"source_vertex {source} out of range for {self.n_vertices} vertices")
        if opts["bounds_backend"] not in BOUND_BACKENDS:
            raise ValueError(f"bounds_backend must be one of {BOUND_BACKENDS}, got {opts['bounds_backend']!r}")
        if opts["relax_backend"] not in RELAX_BACKENDS:
            raise ValueError(f"relax_backend must be one of {RELAX_BACKENDS}, got {opts['relax_backend']!r}")

        self._ensure_backend_data(opts["bounds_backend"], opts["relax_backend"])

        field = initial_distance_bounds(
            self.faces,
            self.positions,
            source,
            opts["max_distance"],
            self.stars,
            backend=opts["bounds_backend"],
            graph=self._graph,
            csr=self._edge_csr,
            show_progress=opts["show_progress"],
        )
        bounds = field.copy()

        outcome = relax_distances(
            field,
            self.faces,
            self.positions,
            self.stars,
            max_distance=opts["max_distance"],
            tolerance=opts["tolerance"],
            max_passes=opts["max_passes"],
            time_budget=opts["time_budget"],
            backend=opts["relax_backend"],
            star_csr=self._star_csr,
            show_progress=opts["show_progress"],
            verbose=opts["verbose"],
        )
        return GeodesicDistances(
            source=source,
            field=field,
            initial_bounds=bounds,
            converged=outcome.converged,
            passes=outcome.passes,
            updates=outcome.updates,
            elapsed=outcome.elapsed,
        )

    def distance_field(self, source_vertex: int, **kwargs: Any) -> np.ndarray:
        """Dense per-vertex distances from ``source_vertex`` (``inf`` if undiscovered)."""
        return self.distance_to_point(source_vertex, **kwargs).as_array()

    def closest_vertex(self, point: Sequence[float]) -> int:
        """Return the index of the vertex nearest to ``point``."""
        target = np.asarray(point, dtype=float).reshape(3)
        distances = np.linalg.norm(self.positions - target, axis=1)
        return int(np.argmin(distances))


def distance_to_point(
    mesh: Any,
    source_vertex: int,
    max_distance: Optional[float] = None,
    tolerance: Optional[float] = None,
    vertex_star_map: Optional[StarMap] = None,
    **options: Any,
) -> GeodesicDistances:
    """Approximate geodesic distances from ``source_vertex`` over ``mesh``.

    Parameters
    ----------
    mesh : Any
        Triangle mesh: ``faces`` plus ``positions`` (or ``vertices``).
    source_vertex : int
        Vertex the distances are measured from.
    max_distance : float, optional
        Query radius, +inf by default.
    tolerance : float, optional
        Relaxation tolerance, ``1e-6`` by default. For both limits only
        ``None`` means "use the default"; ``0`` is honoured as given.
    vertex_star_map : StarMap, optional
        Faces incident to each vertex; computed with
        :func:`geodesics.topology.vertex_stars` when omitted.
    **options
        Forwarded to :meth:`SurfaceDistanceSolver.distance_to_point`
        (``max_passes``, ``time_budget``, backends, progress flags).

    Returns
    -------
    GeodesicDistances
        Mapping from every discovered vertex to its distance.
    """
    solver = SurfaceDistanceSolver(mesh, vertex_star_map=vertex_star_map)
    return solver.distance_to_point(source_vertex, max_distance, tolerance, **options)
