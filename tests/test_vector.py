"""Tests for ForceVector arithmetic."""

from __future__ import annotations

import math

import pytest

from forceplate.data.vector import ForceVector
from forceplate.errors import DivisionByZero


def test_add_and_subtract():
    a = ForceVector(1.0, 2.0, 3.0)
    b = ForceVector(0.5, -1.0, 2.0)
    assert a + b == ForceVector(1.5, 1.0, 5.0)
    assert a - b == ForceVector(0.5, 3.0, 1.0)
    assert a.add(b) == a + b


def test_scale_and_rmul():
    v = ForceVector(1.0, -2.0, 4.0)
    assert v * 2 == ForceVector(2.0, -4.0, 8.0)
    assert 2 * v == v.scale(2)
    assert -v == ForceVector(-1.0, 2.0, -4.0)


def test_divide_by_zero_raises():
    with pytest.raises(DivisionByZero):
        ForceVector(1.0, 1.0, 1.0).divide(0)
    with pytest.raises(ZeroDivisionError):
        ForceVector(1.0, 1.0, 1.0) / 0


def test_divide():
    assert ForceVector(2.0, 4.0, 6.0) / 2 == ForceVector(1.0, 2.0, 3.0)


@pytest.mark.parametrize(
    "vector",
    [ForceVector(3.0, 4.0, 0.0), ForceVector(-1.0, 2.0, -7.5), ForceVector(0.0, 0.0, 1e-6)],
)
def test_normalize_has_unit_magnitude(vector):
    assert vector.normalize().magnitude() == pytest.approx(1.0)


def test_normalize_zero_vector_is_zero():
    assert ForceVector.zero().normalize() == ForceVector.zero()


def test_magnitudes():
    v = ForceVector(3.0, 4.0, 12.0)
    assert v.magnitude() == pytest.approx(13.0)
    assert v.horizontal_magnitude() == pytest.approx(5.0)


def test_dot_and_cross():
    x = ForceVector(1.0, 0.0, 0.0)
    y = ForceVector(0.0, 1.0, 0.0)
    assert x.dot(y) == 0.0
    assert x.cross(y) == ForceVector(0.0, 0.0, 1.0)
    assert y.cross(x) == ForceVector(0.0, 0.0, -1.0)


def test_angle():
    v = ForceVector.horizontal(0.0, 2.0)
    assert v.angle() == pytest.approx(math.pi / 2)
    assert v.angle_degrees() == pytest.approx(90.0)


def test_constructors():
    assert ForceVector.vertical(700) == ForceVector(0.0, 0.0, 700.0)
    assert ForceVector.horizontal(1, 2) == ForceVector(1.0, 2.0, 0.0)


def test_vector_is_immutable():
    v = ForceVector(1.0, 2.0, 3.0)
    with pytest.raises(AttributeError):
        v.x = 5.0  # type: ignore[misc]
