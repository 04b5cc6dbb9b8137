"""Triangle unfolding: a local distance estimate for the far corner of a face.

Given a triangle ``(a, b, c)`` and distance estimates ``dpa`` and ``dpb`` of
``a`` and ``b`` from the source, the source is reconstructed as a virtual
point in the plane of the triangle and the straight-line distance from that
point to ``c`` is returned. In the 2D frame with origin ``a`` and first axis
along ``b - a``:

    p0 = (dpa**2 - dpb**2 + dab**2) / (2 * dab)
    p1 = +/- sqrt(dpa**2 - p0**2)

The estimate assumes the shortest path reaches ``c`` across edge ``(a, b)``
and that the adjacent face unfolds flat onto this one.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Union

#: Minimum length of edge ``(a, b)`` for the unfolding frame to be usable.
EPSILON = 1e-6

#: Float stand-in for :data:`NO_CONSTRAINT` returned by :func:`quadratic_distance`.
SENTINEL = 1e30


@dataclass(frozen=True)
class Distance:
    """A usable candidate distance."""

    value: float

    def as_float(self) -> float:
        return self.value


class NoConstraint:
    """The face yields no usable constraint (degenerate edge or infeasible unfolding)."""

    _instance = None

    def __new__(cls) -> "NoConstraint":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def as_float(self) -> float:
        return SENTINEL

    def __repr__(self) -> str:
        return "NO_CONSTRAINT"


NO_CONSTRAINT = NoConstraint()

UnfoldResult = Union[Distance, NoConstraint]


def unfold_triangle(
    a: Sequence[float],
    b: Sequence[float],
    c: Sequence[float],
    dpa: float,
    dpb: float,
    orientation: int,
) -> UnfoldResult:
    """Estimate the distance of ``c`` by unfolding the triangle ``(a, b, c)``.

    Parameters
    ----------
    a, b, c : Sequence[float]
        3D corner positions. ``(a, b)`` is the edge the path crosses.
    dpa, dpb : float
        Current distance estimates of ``a`` and ``b``.
    orientation : int
        Sign selecting the side of ``(a, b)`` that receives the virtual
        source. Negative places it opposite ``c``.

    Returns
    -------
    UnfoldResult
        :class:`Distance` with the candidate, or :data:`NO_CONSTRAINT` when
        ``|b - a| < EPSILON`` or ``dpa**2 - p0**2`` is negative.
    """
    ab0 = float(b[0]) - float(a[0])
    ab1 = float(b[1]) - float(a[1])
    ab2 = float(b[2]) - float(a[2])
    dab2 = ab0 * ab0 + ab1 * ab1 + ab2 * ab2
    dab = math.sqrt(dab2)
    if dab < EPSILON:
        return NO_CONSTRAINT

    ac0 = float(c[0]) - float(a[0])
    ac1 = float(c[1]) - float(a[1])
    ac2 = float(c[2]) - float(a[2])

    # c in the (a, b) frame; the perpendicular part is a magnitude only.
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
        return NO_CONSTRAINT
    p1 = math.sqrt(radicand)
    if orientation < 0:
        p1 = -p1

    d0 = c0 - p0
    d1 = c1 - p1
    return Distance(math.sqrt(d0 * d0 + d1 * d1))


def quadratic_distance(
    a: Sequence[float],
    b: Sequence[float],
    c: Sequence[float],
    dpa: float,
    dpb: float,
    orientation: int,
) -> float:
    """Float form of :func:`unfold_triangle`; :data:`SENTINEL` means no constraint."""
    return unfold_triangle(a, b, c, dpa, dpb, orientation).as_float()
