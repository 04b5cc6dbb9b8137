"""Per-query distance storage and the result returned to callers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np


class DistanceField(Mapping):
    """Vertex-indexed distances with an explicit ``discovered`` mask.

    Storage is pre-sized to the vertex count of the mesh. A vertex without a
    distance is *undiscovered*: it is absent from the mapping view and holds
    ``inf`` in :attr:`distances`. Once written, a vertex's value can only go
    down (see :meth:`tighten`).

    Parameters
    ----------
    n_vertices : int
        Number of vertices of the mesh the field belongs to.
    """

    def __init__(self, n_vertices: int) -> None:
        self.distances = np.full(int(n_vertices), np.inf, dtype=np.float64)
        self.discovered = np.zeros(int(n_vertices), dtype=bool)

    @property
    def n_vertices(self) -> int:
        return int(self.distances.shape[0])

    def discover(self, v: int, distance: float) -> None:
        """Write the first (upper-bound) distance of ``v``."""
        self.distances[v] = distance
        self.discovered[v] = True

    def tighten(self, v: int, distance: float) -> bool:
        """Lower the distance of ``v`` to ``distance`` if that is smaller.

        Returns
        -------
        bool
            ``True`` when the stored value changed.
        """
        if distance < self.distances[v]:
            self.distances[v] = distance
            return True
        return False

    def vertices(self) -> np.ndarray:
        """Discovered vertex indices in ascending order."""
        return np.flatnonzero(self.discovered)

    def copy(self) -> "DistanceField":
        out = DistanceField(self.n_vertices)
        out.distances[:] = self.distances
        out.discovered[:] = self.discovered
        return out

    def as_array(self, fill: float = np.inf) -> np.ndarray:
        """Dense copy of the distances with ``fill`` at undiscovered vertices."""
        out = self.distances.copy()
        out[~self.discovered] = fill
        return out

    def as_dict(self) -> dict:
        return {int(v): float(self.distances[v]) for v in self.vertices()}

    def __getitem__(self, v: int) -> float:
        if not self._has(v):
            raise KeyError(v)
        return float(self.distances[v])

    def __contains__(self, v: object) -> bool:
        return self._has(v)

    def __iter__(self) -> Iterator[int]:
        return (int(v) for v in self.vertices())

    def __len__(self) -> int:
        return int(np.count_nonzero(self.discovered))

    def __repr__(self) -> str:
        return f"DistanceField(n_vertices={self.n_vertices}, discovered={len(self)})"

    def _has(self, v: object) -> bool:
        if isinstance(v, (bool, np.bool_)) or not isinstance(v, (int, np.integer)):
            return False
        return 0 <= v < self.n_vertices and bool(self.discovered[v])


@dataclass(eq=False)
class GeodesicDistances(Mapping):
    """Relaxed distances from ``source`` together with how they were obtained.

    Behaves as a read-only ``Mapping[int, float]`` over discovered vertices;
    equality compares the distances only, like any other mapping.

    Attributes
    ----------
    source : int
        Source vertex of the query.
    field : DistanceField
        Relaxed distances.
    initial_bounds : DistanceField
        Snapshot of the edge-graph bounds before relaxation.
    converged : bool
        ``False`` when the pass or time budget ran out before a fixed point.
    passes : int
        Number of relaxation passes performed.
    """

    source: int
    field: DistanceField
    initial_bounds: DistanceField
    converged: bool
    passes: int
    updates: int = 0
    elapsed: Optional[float] = None

    def as_array(self, fill: float = np.inf) -> np.ndarray:
        return self.field.as_array(fill)

    def as_dict(self) -> dict:
        return self.field.as_dict()

    def __getitem__(self, v: int) -> float:
        return self.field[v]

    def __iter__(self) -> Iterator[int]:
        return iter(self.field)

    def __len__(self) -> int:
        return len(self.field)

    def __contains__(self, v: object) -> bool:
        return v in self.field
