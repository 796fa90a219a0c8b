"""
Tests for Movement Fingerprint Processor
"""

import math

import pytest

from iceflow.models.movement import MovementPoint, SkatingTrail
from iceflow.processors.fingerprint import calculate_movement_fingerprint, compare_fingerprints


def _trail(directions, speed=15.0, player_id=97, team_id=22, game_id=1) -> SkatingTrail:
    """Trail whose points (after the first) head in the given directions."""
    points = [MovementPoint(x=0, y=0, timestamp_ms=0, speed=speed)]
    points += [
        MovementPoint(x=i, y=0, timestamp_ms=i * 100, speed=speed, direction=d)
        for i, d in enumerate(directions, start=1)
    ]
    return SkatingTrail(player_id=player_id, player_name="Skater", team_id=team_id,
                        game_id=game_id, points=tuple(points))


class TestMovementFingerprint:
    """Tests for calculate_movement_fingerprint."""

    def test_invalid_bucket_count(self):
        with pytest.raises(ValueError):
            calculate_movement_fingerprint([], bucket_count=12)

    def test_bucket_counts(self):
        trails = [_trail([0.1, 0.1, math.pi + 0.1])]
        assert len(calculate_movement_fingerprint(trails, bucket_count=8).buckets) == 8
        assert len(calculate_movement_fingerprint(trails, bucket_count=16).buckets) == 16

    def test_frequencies_normalized_to_busiest(self):
        trails = [_trail([0.1, 0.1, 0.1, 0.1, math.pi + 0.1, math.pi / 2 + 0.1])]
        fingerprint = calculate_movement_fingerprint(trails, bucket_count=8)

        frequencies = [b.frequency for b in fingerprint.buckets]
        assert all(0.0 <= f <= 1.0 for f in frequencies)
        assert frequencies.count(1.0) == 1
        assert fingerprint.buckets[0].frequency == 1.0
        assert fingerprint.buckets[4].frequency == pytest.approx(0.25)

    def test_normalization_independent_of_sample_count(self):
        small = calculate_movement_fingerprint([_trail([0.1, 0.1, math.pi + 0.1])], bucket_count=8)
        large = calculate_movement_fingerprint(
            [_trail([0.1, 0.1, math.pi + 0.1]) for _ in range(10)], bucket_count=8
        )
        assert [b.frequency for b in small.buckets] == [b.frequency for b in large.buckets]
        assert large.total_samples == 10 * small.total_samples

    def test_first_point_and_slow_samples_skipped(self):
        slow = _trail([0.1, 0.1], speed=1.0)
        fingerprint = calculate_movement_fingerprint([slow], bucket_count=8)
        assert fingerprint.total_samples == 0
        assert all(b.frequency == 0.0 for b in fingerprint.buckets)
        assert fingerprint.avg_overall_speed == 0.0

    def test_dominant_direction(self):
        fingerprint = calculate_movement_fingerprint([_trail([math.pi + 0.1] * 3 + [0.1])], bucket_count=8)
        assert fingerprint.dominant_direction == pytest.approx(fingerprint.buckets[4].direction)
        assert fingerprint.dominant_bucket.total_count == 3

    def test_player_filter(self):
        trails = [_trail([0.1], player_id=1, game_id=1), _trail([0.1, 0.1], player_id=2, game_id=2)]
        fingerprint = calculate_movement_fingerprint(trails, bucket_count=8, player_id=2)

        assert fingerprint.total_samples == 2
        assert fingerprint.games_analyzed == 1
        assert fingerprint.player_name == "Skater"

    def test_average_speed_per_bucket(self):
        points = (
            MovementPoint(x=0, y=0, timestamp_ms=0, speed=10),
            MovementPoint(x=1, y=0, timestamp_ms=100, speed=10, direction=0.1),
            MovementPoint(x=2, y=0, timestamp_ms=200, speed=20, direction=0.1),
        )
        trail = SkatingTrail(player_id=1, team_id=1, points=points)
        fingerprint = calculate_movement_fingerprint([trail], bucket_count=8)
        assert fingerprint.buckets[0].avg_speed == pytest.approx(15.0)


class TestCompareFingerprints:
    """Tests for compare_fingerprints."""

    def test_identical(self):
        fingerprint = calculate_movement_fingerprint([_trail([0.1, 2.0])], bucket_count=8)
        assert compare_fingerprints(fingerprint, fingerprint) == pytest.approx(100.0)

    def test_mismatched_bucket_counts(self):
        eight = calculate_movement_fingerprint([_trail([0.1])], bucket_count=8)
        sixteen = calculate_movement_fingerprint([_trail([0.1])], bucket_count=16)
        with pytest.raises(ValueError):
            compare_fingerprints(eight, sixteen)

    def test_opposite_tendencies(self):
        forward = calculate_movement_fingerprint([_trail([0.1])], bucket_count=8)
        backward = calculate_movement_fingerprint([_trail([math.pi + 0.1])], bucket_count=8)
        # Two of eight buckets differ completely
        assert compare_fingerprints(forward, backward) == pytest.approx(75.0)
