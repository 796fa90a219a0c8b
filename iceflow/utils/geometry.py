"""
Rink Geometry Helpers

Shared vector and circular-statistics helpers for movement analytics.
Angles wrap at 2*pi, so every directional average goes through sine/cosine
summation instead of an arithmetic mean of raw angles.
"""

import math
from dataclasses import dataclass

TWO_PI = 2 * math.pi

# NHL coordinate system: center ice origin, 200 x 85 ft sheet
RINK_MIN_X = -100.0
RINK_MAX_X = 100.0
RINK_MIN_Y = -42.5
RINK_MAX_Y = 42.5

# Blue lines sit 25 ft either side of center
BLUE_LINE_X = 25.0

# Attacking net
GOAL_X = 89.0
GOAL_Y = 0.0


def normalize_angle(angle: float) -> float:
    """Normalize an angle in radians to [0, 2*pi)."""
    result = math.fmod(angle, TWO_PI)
    if result < 0:
        result += TWO_PI
    # fmod of a tiny negative can round up to exactly 2*pi
    if result >= TWO_PI:
        result = 0.0
    return result


def calculate_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance in feet."""
    return math.hypot(x2 - x1, y2 - y1)


def calculate_direction(x1: float, y1: float, x2: float, y2: float) -> float:
    """Bearing from the first point to the second, radians in (-pi, pi]."""
    return math.atan2(y2 - y1, x2 - x1)


def calculate_speed(
    x1: float, y1: float, t1_ms: float,
    x2: float, y2: float, t2_ms: float,
) -> float:
    """Speed in ft/s between two timestamped points, 0 for non-increasing time."""
    seconds = (t2_ms - t1_ms) / 1000
    if seconds <= 0:
        return 0.0
    return calculate_distance(x1, y1, x2, y2) / seconds


def direction_bucket(direction: float, bucket_count: int) -> int:
    """Index (0..bucket_count-1) of the angular bucket holding a direction."""
    bucket_size = TWO_PI / bucket_count
    return int(normalize_angle(direction) // bucket_size) % bucket_count


def bucket_center(index: int, bucket_count: int) -> float:
    """Center angle of an angular bucket."""
    return (index + 0.5) * (TWO_PI / bucket_count)


def reflect_direction(angle: float) -> float:
    """Mirror a direction across the center red line (pi - angle)."""
    return normalize_angle(math.pi - angle)


def is_toward_attacking_end(direction: float) -> bool:
    """True when a direction has a positive component toward the attacking end."""
    angle = normalize_angle(direction)
    return angle < math.pi / 2 or angle > 3 * math.pi / 2


@dataclass(frozen=True)
class CircularAccumulator:
    """
    Commutative accumulator of weighted directions, speeds and successes.

    Combining accumulators is associative and order-independent, which lets
    grid merges run as a plain reduce over a keyed map.
    """

    sin_sum: float = 0.0
    cos_sum: float = 0.0
    weight: float = 0.0
    speed_sum: float = 0.0
    success_sum: float = 0.0

    @classmethod
    def from_direction(
        cls,
        direction: float,
        speed: float = 0.0,
        success: float = 0.0,
        weight: float = 1.0,
    ) -> "CircularAccumulator":
        """Accumulator for a single (possibly weighted) observation."""
        return cls(
            sin_sum=math.sin(direction) * weight,
            cos_sum=math.cos(direction) * weight,
            weight=weight,
            speed_sum=speed * weight,
            success_sum=success * weight,
        )

    def combine(self, other: "CircularAccumulator") -> "CircularAccumulator":
        """Merge two accumulators."""
        return CircularAccumulator(
            sin_sum=self.sin_sum + other.sin_sum,
            cos_sum=self.cos_sum + other.cos_sum,
            weight=self.weight + other.weight,
            speed_sum=self.speed_sum + other.speed_sum,
            success_sum=self.success_sum + other.success_sum,
        )

    @property
    def mean_direction(self) -> float:
        """Circular mean direction in [0, 2*pi), 0 when empty."""
        if self.weight <= 0:
            return 0.0
        return normalize_angle(math.atan2(self.sin_sum, self.cos_sum))

    @property
    def mean_speed(self) -> float:
        """Weighted average speed."""
        return self.speed_sum / self.weight if self.weight > 0 else 0.0

    @property
    def success_rate(self) -> float:
        """Weighted fraction of successful observations."""
        return self.success_sum / self.weight if self.weight > 0 else 0.0
