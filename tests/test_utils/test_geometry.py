"""
Tests for Rink Geometry Helpers
"""

import math

import pytest

from iceflow.utils.geometry import (
    TWO_PI,
    CircularAccumulator,
    bucket_center,
    calculate_direction,
    calculate_distance,
    calculate_speed,
    direction_bucket,
    is_toward_attacking_end,
    normalize_angle,
    reflect_direction,
)


class TestAngles:
    """Tests for angle normalization and buckets."""

    def test_normalize_angle_range(self):
        for angle in (-10.0, -math.pi, 0.0, math.pi, TWO_PI, 7.5, 100.0):
            result = normalize_angle(angle)
            assert 0 <= result < TWO_PI

    def test_normalize_negative(self):
        assert normalize_angle(-math.pi / 2) == pytest.approx(3 * math.pi / 2)

    def test_normalize_full_turn(self):
        assert normalize_angle(TWO_PI) == 0.0

    def test_direction_bucket(self):
        assert direction_bucket(0.0, 8) == 0
        assert direction_bucket(math.pi, 8) == 4
        assert direction_bucket(-0.01, 8) == 7

    def test_bucket_center(self):
        assert bucket_center(0, 4) == pytest.approx(math.pi / 4)

    def test_reflect_direction(self):
        # Straight toward the attacking end mirrors to straight back
        assert reflect_direction(0.0) == pytest.approx(math.pi)
        assert reflect_direction(math.pi / 2) == pytest.approx(math.pi / 2)

    def test_is_toward_attacking_end(self):
        assert is_toward_attacking_end(0.1)
        assert is_toward_attacking_end(-0.1)
        assert not is_toward_attacking_end(math.pi)


class TestDistanceAndSpeed:
    """Tests for distance, direction and speed."""

    def test_distance(self):
        assert calculate_distance(0, 0, 3, 4) == pytest.approx(5.0)

    def test_direction(self):
        assert calculate_direction(0, 0, 0, 1) == pytest.approx(math.pi / 2)

    def test_speed(self):
        assert calculate_speed(0, 0, 0, 10, 0, 1000) == pytest.approx(10.0)

    def test_speed_non_increasing_time(self):
        assert calculate_speed(0, 0, 1000, 10, 0, 1000) == 0.0


class TestCircularAccumulator:
    """Tests for CircularAccumulator."""

    def test_combine_is_order_independent(self):
        a = CircularAccumulator.from_direction(0.2, speed=10, success=1)
        b = CircularAccumulator.from_direction(1.5, speed=20, success=0)
        c = CircularAccumulator.from_direction(5.9, speed=15, success=1, weight=2)

        left = a.combine(b).combine(c)
        right = c.combine(a).combine(b)

        assert left.weight == right.weight
        assert left.mean_direction == pytest.approx(right.mean_direction)
        assert left.mean_speed == pytest.approx(right.mean_speed)
        assert left.success_rate == pytest.approx(right.success_rate)

    def test_wraparound(self):
        """Directions either side of 0 average to 0, not pi."""
        acc = CircularAccumulator.from_direction(0.1).combine(
            CircularAccumulator.from_direction(TWO_PI - 0.1)
        )
        result = acc.mean_direction
        assert min(result, TWO_PI - result) == pytest.approx(0.0, abs=1e-9)

    def test_weighted_direction(self):
        acc = CircularAccumulator.from_direction(0.0, weight=1.0).combine(
            CircularAccumulator.from_direction(math.pi / 2, weight=0.0)
        )
        assert acc.mean_direction == pytest.approx(0.0)

    def test_means(self):
        acc = CircularAccumulator.from_direction(0.0, speed=10, success=1).combine(
            CircularAccumulator.from_direction(0.0, speed=20, success=0)
        )
        assert acc.weight == 2
        assert acc.mean_speed == pytest.approx(15.0)
        assert acc.success_rate == pytest.approx(0.5)

    def test_empty(self):
        acc = CircularAccumulator()
        assert acc.mean_direction == 0.0
        assert acc.mean_speed == 0.0
        assert acc.success_rate == 0.0
