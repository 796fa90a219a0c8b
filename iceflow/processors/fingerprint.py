"""
Movement Fingerprint Processor

Builds a circular histogram of skating directions for a player or team.
Each bucket carries a frequency normalized against the busiest bucket and
the average speed of the samples that fell into it.
"""

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from iceflow.models.movement import SkatingTrail
from iceflow.utils.geometry import bucket_center, direction_bucket

VALID_BUCKET_COUNTS = (8, 16)
DEFAULT_MIN_SPEED = 2.0  # ft/s, below this the skater is gliding or stopped


@dataclass(frozen=True)
class DirectionalBucket:
    """One spoke of the fingerprint."""

    direction: float  # center angle, radians
    frequency: float  # 0-1 relative to the busiest bucket
    avg_speed: float  # ft/s
    total_count: int


@dataclass(frozen=True)
class MovementFingerprint:
    """Directional skating tendencies."""

    buckets: tuple[DirectionalBucket, ...]
    bucket_count: int
    dominant_direction: float
    avg_overall_speed: float
    total_samples: int
    games_analyzed: int
    player_id: int | None = None
    player_name: str | None = None
    team_id: int | None = None

    @property
    def dominant_bucket(self) -> DirectionalBucket:
        return max(self.buckets, key=lambda b: b.total_count)


def calculate_movement_fingerprint(
    trails: Iterable[SkatingTrail],
    bucket_count: int = 16,
    player_id: int | None = None,
    team_id: int | None = None,
    min_speed: float = DEFAULT_MIN_SPEED,
) -> MovementFingerprint:
    """
    Build a movement fingerprint from skating trails.

    The first point of every trail is skipped since it has no preceding
    motion. Samples slower than ``min_speed`` are ignored.

    Args:
        trails: Skating trails
        bucket_count: 8 or 16 directional buckets
        player_id: Only include this player's trails
        team_id: Only include this team's trails
        min_speed: Minimum sample speed (ft/s)

    Returns:
        MovementFingerprint

    Raises:
        ValueError: If bucket_count is not 8 or 16
    """
    if bucket_count not in VALID_BUCKET_COUNTS:
        raise ValueError(f"bucket_count must be one of {VALID_BUCKET_COUNTS}, got {bucket_count}")

    indices: list[int] = []
    speeds: list[float] = []
    games: set[int] = set()
    player_name = None

    for trail in trails:
        if player_id is not None and trail.player_id != player_id:
            continue
        if team_id is not None and trail.team_id != team_id:
            continue

        games.add(trail.game_id)
        if player_id is not None and player_name is None:
            player_name = trail.player_name

        for point in trail.points[1:]:
            if point.speed < min_speed:
                continue
            indices.append(direction_bucket(point.direction, bucket_count))
            speeds.append(point.speed)

    counts = np.bincount(np.asarray(indices, dtype=int), minlength=bucket_count)
    speed_sums = np.bincount(
        np.asarray(indices, dtype=int),
        weights=np.asarray(speeds, dtype=float),
        minlength=bucket_count,
    )
    max_count = int(counts.max()) if counts.size else 0

    buckets = tuple(
        DirectionalBucket(
            direction=bucket_center(i, bucket_count),
            frequency=float(counts[i] / max_count) if max_count > 0 else 0.0,
            avg_speed=float(speed_sums[i] / counts[i]) if counts[i] > 0 else 0.0,
            total_count=int(counts[i]),
        )
        for i in range(bucket_count)
    )

    # argmax returns the first index on ties
    dominant = int(np.argmax(counts))
    total_samples = len(speeds)

    return MovementFingerprint(
        buckets=buckets,
        bucket_count=bucket_count,
        dominant_direction=buckets[dominant].direction,
        avg_overall_speed=sum(speeds) / total_samples if total_samples else 0.0,
        total_samples=total_samples,
        games_analyzed=len(games),
        player_id=player_id,
        player_name=player_name,
        team_id=team_id,
    )


def compare_fingerprints(first: MovementFingerprint, second: MovementFingerprint) -> float:
    """
    Similarity of two fingerprints on a 0-100 scale.

    Raises:
        ValueError: If the fingerprints have different bucket counts
    """
    if first.bucket_count != second.bucket_count:
        raise ValueError(
            f"Fingerprints must have the same bucket count "
            f"({first.bucket_count} != {second.bucket_count})"
        )

    similarity = sum(
        1 - abs(a.frequency - b.frequency) for a, b in zip(first.buckets, second.buckets)
    )
    return similarity / first.bucket_count * 100
