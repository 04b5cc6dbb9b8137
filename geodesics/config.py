"""Geodesic solver configuration helpers with YAML override support."""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml


_DEFAULTS: Dict[str, Any] = {
    "general": {
        "show_progress": False,
        "verbose": False,
    },
    "distance": {
        # ``None`` keeps the search unbounded (+inf).
        "max_distance": None,
        # Options: 'absolute', 'median_edge_multiplier' (scales max_distance
        # by the median edge length in the default pipeline).
        "max_distance_mode": "absolute",
        "tolerance": 1e-6,
    },
    "relaxation": {
        "max_passes": 10000,
        # Wall-clock budget in seconds; ``None`` disables it.
        "time_budget": None,
    },
    "backends": {
        # Options: 'heap', 'networkx', 'numba'
        "bounds": "heap",
        # Options: 'python', 'numba'
        "relaxation": "python",
    },
    "exports": {
        "distance_export": False,
        "export_directory": "export_output/distances",
    },
}

_EFFECTIVE_DEFAULTS: Dict[str, Any] = copy.deepcopy(_DEFAULTS)


def _deep_update(destination: Dict[str, Any], source: Dict[str, Any]) -> None:
    """Recursively merge ``source`` into ``destination`` in-place."""
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(destination.get(key), dict):
            _deep_update(destination[key], value)
        else:
            destination[key] = value


def _candidate_paths(path: Optional[str]) -> Iterable[Path]:
    """Yield the YAML file locations that are probed for overrides."""
    if path:
        yield Path(path)
        return

    env_override = os.environ.get("GEODESIC_DEFAULTS_YAML")
    if env_override:
        yield Path(env_override)

    package_dir = Path(__file__).resolve().parent
    project_root = package_dir.parent

    yield project_root / "geodesic_defaults.yaml"
    yield Path.cwd() / "geodesic_defaults.yaml"
    yield package_dir / "geodesic_defaults.yaml"


def reload_geodesic_defaults(path: Optional[str] = None) -> None:
    """Reload solver settings from the first YAML file found, else built-ins.

    Parameters
    ----------
    path : str, optional
        Explicit YAML file. When given, no other location is probed.

    Raises
    ------
    ValueError
        If the selected YAML document is not a mapping.
    yaml.YAMLError
        If the selected file cannot be parsed.
    """
    defaults = copy.deepcopy(_DEFAULTS)

    for candidate in _candidate_paths(path):
        if candidate.is_file():
            data = yaml.safe_load(candidate.read_text(encoding="utf-8")) or {}
            if not isinstance(data, dict):
                raise ValueError(f"{candidate} must contain a mapping, got {type(data).__name__}")
            _deep_update(defaults, data)
            break

    global _EFFECTIVE_DEFAULTS
    _EFFECTIVE_DEFAULTS = defaults


def get_geodesic_defaults() -> Dict[str, Any]:
    """Return a deep copy of all effective configuration groups."""
    return copy.deepcopy(_EFFECTIVE_DEFAULTS)


def get_geodesic_section(section: str) -> Dict[str, Any]:
    """Return a deep copy of the configuration subset named ``section``."""
    section_defaults = _EFFECTIVE_DEFAULTS.get(section, {})
    if isinstance(section_defaults, dict):
        return copy.deepcopy(section_defaults)
    return {}


reload_geodesic_defaults()
