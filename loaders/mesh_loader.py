"""Mesh loading helpers exposing the arrays the distance solver consumes."""

from __future__ import annotations

from typing import Dict, List, Optional

import numpy as np
import trimesh

from geodesics.topology import vertex_stars


class MeshLoader(trimesh.Trimesh):
    """Extend :class:`trimesh.Trimesh` with the adjacency the solver reads."""

    def __init__(self, file_path: str, **kwargs):
        """Load a triangle surface mesh without reordering its vertices.

        Parameters
        ----------
        file_path : str
            Path to the mesh file. All formats supported by
            :func:`trimesh.load_mesh` are accepted.
        **kwargs : dict, optional
            Additional keyword arguments forwarded to
            :func:`trimesh.load_mesh`.

        Raises
        ------
        TypeError
            If the loaded geometry is not a single
            :class:`trimesh.Trimesh` instance.
        """
        kwargs.setdefault("process", False)
        mesh = trimesh.load_mesh(file_path, **kwargs)
        if not isinstance(mesh, trimesh.Trimesh):
            raise TypeError("Loaded geometry is not a single trimesh.Trimesh")
        super().__init__(
            vertices=mesh.vertices,
            faces=mesh.faces,
            process=False,
            metadata=mesh.metadata,
        )
        self._star_cache: Optional[Dict[int, List[int]]] = None

    @property
    def positions(self) -> np.ndarray:
        """Vertex coordinates shaped ``(V, 3)``; alias of ``vertices``."""
        return np.asarray(self.vertices, dtype=np.float64)

    def vertex_star_map(self) -> Dict[int, List[int]]:
        """Return (and cache) the faces incident to every vertex.

        The map can be shared by any number of distance queries on this mesh
        as long as the faces are not edited.
        """
        if self._star_cache is None:
            self._star_cache = vertex_stars(self)
        return self._star_cache
