"""Export helpers for geodesic distance outputs."""

from .scalar_field_exporter import export_distance_field_to_json

__all__ = [
    "export_distance_field_to_json",
]
