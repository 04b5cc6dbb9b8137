"""Tests for the triangle unfolding primitive."""

import math

import numpy as np
import pytest

from geodesics.numba_accel import quadratic_distance_jit
from geodesics.unfolding import (
    NO_CONSTRAINT,
    SENTINEL,
    Distance,
    NoConstraint,
    quadratic_distance,
    unfold_triangle,
)


def test_reference_triangle():
    d = quadratic_distance((0, 0, 0), (1, 0, 0), (0.5, 1, 0), 1.0, 1.0, -1)
    assert d == pytest.approx(1.0 + math.sqrt(3.0) / 2.0)
    assert d < 1e29


def test_positive_orientation_places_source_on_c_side():
    d = quadratic_distance((0, 0, 0), (1, 0, 0), (0.5, 1, 0), 1.0, 1.0, 1)
    assert d == pytest.approx(1.0 - math.sqrt(3.0) / 2.0)


def test_recovers_planar_distance_to_true_source():
    # Source at the origin; a, b carry their exact distances.
    a, b, c = (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (2.0, 1.0, 0.0)
    d = quadratic_distance(a, b, c, 1.0, math.sqrt(2.0), -1)
    assert d == pytest.approx(math.sqrt(5.0))


def test_invariant_under_rigid_motion():
    a, b, c = np.array([1.0, 0.0, 0.0]), np.array([1.0, 1.0, 0.0]), np.array([2.0, 1.0, 0.0])
    theta = 0.7
    rot = np.array([
        [math.cos(theta), 0.0, math.sin(theta)],
        [0.0, 1.0, 0.0],
        [-math.sin(theta), 0.0, math.cos(theta)],
    ])
    shift = np.array([3.0, -2.0, 5.0])
    moved = [rot @ p + shift for p in (a, b, c)]
    expected = quadratic_distance(a, b, c, 1.0, math.sqrt(2.0), -1)
    assert quadratic_distance(*moved, 1.0, math.sqrt(2.0), -1) == pytest.approx(expected)


@pytest.mark.parametrize(
    "b",
    [(0.0, 0.0, 0.0), (1e-7, 0.0, 0.0), (0.0, 5e-7, 5e-7)],
)
def test_degenerate_edge_has_no_constraint(b):
    assert unfold_triangle((0, 0, 0), b, (0.5, 1, 0), 1.0, 1.0, -1) is NO_CONSTRAINT
    assert quadratic_distance((0, 0, 0), b, (0.5, 1, 0), 1.0, 1.0, -1) >= 1e29


def test_short_but_usable_edge_is_finite():
    d = quadratic_distance((0, 0, 0), (1e-4, 0, 0), (0, 1e-4, 0), 1e-4, 1e-4, -1)
    assert math.isfinite(d)
    assert 0.0 <= d < 1e29


def test_infeasible_unfolding_has_no_constraint():
    # dpa + dab < dpb: no point in the plane is at dpa from a and dpb from b.
    result = unfold_triangle((0, 0, 0), (1, 0, 0), (0.5, 1, 0), 0.1, 5.0, -1)
    assert result is NO_CONSTRAINT
    assert quadratic_distance((0, 0, 0), (1, 0, 0), (0.5, 1, 0), 0.1, 5.0, -1) == SENTINEL


def test_result_variants():
    result = unfold_triangle((0, 0, 0), (1, 0, 0), (0.5, 1, 0), 1.0, 1.0, -1)
    assert isinstance(result, Distance)
    assert result.as_float() == result.value
    assert NoConstraint() is NO_CONSTRAINT
    assert NO_CONSTRAINT.as_float() == SENTINEL


@pytest.mark.parametrize(
    "args",
    [
        ((0, 0, 0), (1, 0, 0), (0.5, 1, 0), 1.0, 1.0, -1),
        ((1, 0, 0), (1, 1, 0), (2, 1, 0), 1.0, math.sqrt(2.0), -1),
        ((0, 0, 0), (0.3, 0.2, 0.9), (1.0, -0.4, 0.1), 2.0, 2.5, -1),
        ((0, 0, 0), (1, 0, 0), (0.5, 1, 0), 0.1, 5.0, -1),
        ((0, 0, 0), (0, 0, 0), (0.5, 1, 0), 1.0, 1.0, -1),
    ],
)
def test_compiled_kernel_matches(args):
    assert quadratic_distance_jit(*args) == pytest.approx(quadratic_distance(*args), rel=1e-12)
