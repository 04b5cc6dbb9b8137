"""Utilities for coercing configuration values into canonical types."""

from __future__ import annotations

import math
from typing import Collection, Optional


def coerce_choice(value: object, choices: Collection[str], fallback: str) -> str:
    """Return ``value`` as a lower-case label if it belongs to ``choices``.

    Parameters
    ----------
    value : object
        Free-form label supplied by configuration. Strings are normalised by
        trimming whitespace and lowering the case.
    choices : Collection[str]
        Recognised lower-case labels.
    fallback : str
        Label returned when ``value`` is empty or unrecognised.

    Returns
    -------
    str
        The normalised label or ``fallback``.
    """
    label = str(value or fallback).strip().lower()
    if label not in choices:
        return fallback
    return label


def coerce_float(value: object, fallback: float) -> float:
    """Cast ``value`` to ``float``, returning ``fallback`` when that fails."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return fallback


def coerce_optional_float(value: object, fallback: Optional[float] = None) -> Optional[float]:
    """Cast ``value`` to ``float`` while letting ``None`` through.

    Strings such as ``"inf"`` or ``"none"`` are understood, which keeps YAML
    overrides readable for unbounded settings.

    Parameters
    ----------
    value : object
        Candidate number, ``None`` or a string token.
    fallback : float, optional
        Returned when ``value`` cannot be interpreted.

    Returns
    -------
    Optional[float]
        ``None`` for "no limit", otherwise the parsed float.
    """
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in {"", "none", "null"}:
        return None
    parsed = coerce_float(value, math.nan)
    if math.isnan(parsed):
        return fallback
    return parsed


def coerce_int(value: object, fallback: int) -> int:
    """Cast ``value`` to ``int``, returning ``fallback`` when that fails."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def coerce_bool(value: object, fallback: bool) -> bool:
    """Interpret ``value`` as a boolean using common textual conventions.

    Parameters
    ----------
    value : object
        Configuration token that should represent ``True`` or ``False``. Truthy
        and falsy strings, numbers, and actual booleans are recognised.
    fallback : bool
        Value returned when ``value`` cannot be interpreted reliably.

    Returns
    -------
    bool
        Parsed boolean or ``fallback`` if the conversion is ambiguous.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "on"}:
            return True
        if lowered in {"false", "0", "no", "off"}:
            return False
    if isinstance(value, (int, float)):
        return bool(value)
    return fallback
