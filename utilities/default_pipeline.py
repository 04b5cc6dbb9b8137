"""Shared helpers for reproducing the default distance pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from exporters import export_distance_field_to_json
from geodesics.config import get_geodesic_defaults
from geodesics.distance_field import GeodesicDistances
from geodesics.geodesic_distance import SurfaceDistanceSolver
from loaders.mesh_loader import MeshLoader
from utilities.config_utils import coerce_bool, coerce_choice, coerce_optional_float
from utilities.mesh_utils import median_edge_length


__all__ = ["resolve_max_distance", "distance_field_from_defaults"]


def resolve_max_distance(mesh: MeshLoader, distance_cfg: dict) -> Optional[float]:
    """Turn the configured radius into mesh units (``None`` = unbounded)."""
    value = coerce_optional_float(distance_cfg.get("max_distance"), None)
    if value is None:
        return None
    mode = coerce_choice(
        distance_cfg.get("max_distance_mode"),
        ("absolute", "median_edge_multiplier"),
        "absolute",
    )
    if mode == "median_edge_multiplier":
        return value * median_edge_length(mesh)
    return value


def distance_field_from_defaults(
    mesh_path: str | Path,
    source_vertex: int = 0,
    *,
    return_mesh: bool = False,
) -> GeodesicDistances | Tuple[GeodesicDistances, MeshLoader]:
    """Load ``mesh_path`` and compute distances from ``source_vertex`` using defaults."""
    settings = get_geodesic_defaults()
    distance_cfg = settings.get("distance", {})
    exports_cfg = settings.get("exports", {})

    print(f"Loading mesh from {mesh_path} ...")
    mesh = MeshLoader(str(mesh_path))
    print(f"Mesh has {len(mesh.vertices)} vertices and {len(mesh.faces)} faces")

    max_distance = resolve_max_distance(mesh, distance_cfg)
    solver = SurfaceDistanceSolver(mesh, vertex_star_map=mesh.vertex_star_map())

    print(f"Computing geodesic distances from vertex {source_vertex} ...")
    result = solver.distance_to_point(source_vertex, max_distance)
    print(
        f"Discovered {len(result)} vertices in {result.passes} relaxation passes "
        f"(converged: {result.converged})"
    )

    if coerce_bool(exports_cfg.get("distance_export"), False):
        export_dir_raw = exports_cfg.get("export_directory") or "export_output/distances"
        file_name = f"{Path(mesh_path).stem}_v{int(source_vertex)}_distances.json"
        try:
            output_file = export_distance_field_to_json(
                mesh,
                result,
                Path(export_dir_raw),
                filename=file_name,
            )
            print(f"Distance export written -> {output_file}")
        except (OSError, ValueError) as err:
            print(f"[export] Failed to write distance JSON: {err}")

    if return_mesh:
        return result, mesh
    return result
