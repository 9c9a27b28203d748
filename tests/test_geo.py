from __future__ import annotations

import math

import pytest

from gpsbridge.geo import distance_meters

# Degrees of latitude per meter on the 6,371 km sphere.
_DEG_PER_M = 180 / (math.pi * 6_371_000)


def test_distance_to_self_is_zero() -> None:
    assert distance_meters(52.37, 4.89, 52.37, 4.89) == 0


def test_distance_is_symmetric() -> None:
    a = (38.7223, -9.1393)
    b = (41.1579, -8.6291)
    assert distance_meters(*a, *b) == pytest.approx(distance_meters(*b, *a))


def test_hundred_meters_north_of_origin() -> None:
    assert distance_meters(0, 0, 100 * _DEG_PER_M, 0) == pytest.approx(100, rel=0.01)


def test_antipodal_points_do_not_overflow() -> None:
    assert distance_meters(0, 0, 0, 180) == pytest.approx(math.pi * 6_371_000)
