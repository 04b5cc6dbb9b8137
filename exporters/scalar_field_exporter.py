"""JSON export for per-vertex geodesic distance fields."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import numpy as np

from geodesics.distance_field import GeodesicDistances
from utilities.mesh_utils import mesh_arrays


def export_distance_field_to_json(
    mesh: Any,
    distances: Mapping[int, float],
    output_dir: str | Path,
    *,
    filename: str = "distance_field.json",
    indent: int | None = 2,
    include_faces: bool = True,
) -> Path:
    """Serialise a per-vertex distance field to JSON.

    Parameters
    ----------
    mesh
        Mesh the distances were computed on. Accepts
        :class:`loaders.mesh_loader.MeshLoader`, :class:`trimesh.Trimesh`, or
        anything :func:`utilities.mesh_utils.mesh_arrays` understands.
    distances
        Mapping from vertex index to distance, typically the
        :class:`~geodesics.distance_field.GeodesicDistances` returned by a
        query. Vertices missing from the mapping are written as ``null``.
    output_dir
        Destination directory for the JSON export.
    filename
        Name of the JSON file to create inside ``output_dir``.
    indent
        Indentation passed through to :func:`json.dumps`. Set to ``None`` for a compact export.
    include_faces
        When ``True``, face connectivity is written alongside vertices.

    Returns
    -------
    Path
        Absolute path to the written JSON file.

    Raises
    ------
    TypeError
        If ``mesh`` does not expose faces and vertices.
    ValueError
        When ``distances`` names a vertex outside the mesh or holds a
        negative or non-finite value.
    """
    faces, vertices = mesh_arrays(mesh)
    vertex_count = vertices.shape[0]

    values: list = [None] * vertex_count
    for v, d in distances.items():
        v = int(v)
        if not 0 <= v < vertex_count:
            raise ValueError(f"distance given for vertex {v}, mesh has {vertex_count} vertices")
        d = float(d)
        if not np.isfinite(d) or d < 0.0:
            raise ValueError(f"distance of vertex {v} must be finite and non-negative, got {d}")
        values[v] = d

    known = np.array([d for d in values if d is not None], dtype=float)
    stats = {
        "discovered": int(known.size),
        "min": float(known.min()) if known.size else None,
        "max": float(known.max()) if known.size else None,
        "mean": float(known.mean()) if known.size else None,
    }

    meta: dict[str, Any] = {
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "vertex_count": vertex_count,
        "face_count": int(faces.shape[0]) if include_faces else 0,
        "field_statistics": stats,
    }
    if isinstance(distances, GeodesicDistances):
        meta.update(
            source_vertex=distances.source,
            converged=distances.converged,
            relaxation_passes=distances.passes,
        )

    payload: dict[str, Any] = {
        "meta": meta,
        "vertices": vertices.tolist(),
        "distances": values,
    }
    if include_faces:
        payload["faces"] = faces.tolist()

    dest_dir = Path(output_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    target = dest_dir / filename
    target.write_text(json.dumps(payload, indent=indent), encoding="utf-8")
    return target.resolve()
