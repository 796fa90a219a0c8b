"""
Movement Tracking Models

Pydantic value records for skater tracking samples and per-shift skating
trails used by the fingerprint, flow-field and shift-intensity processors.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from iceflow.utils.geometry import BLUE_LINE_X, calculate_distance, normalize_angle
from iceflow.utils.stat_calculations import first_present, safe_float, safe_int


class MovementZone(str, Enum):
    """Zone of the sheet relative to the attacking direction."""

    OFFENSIVE = "offensive"
    NEUTRAL = "neutral"
    DEFENSIVE = "defensive"


def zone_from_x(x: float) -> MovementZone:
    """Classify an x coordinate into offensive/neutral/defensive."""
    if x > BLUE_LINE_X:
        return MovementZone.OFFENSIVE
    if x < -BLUE_LINE_X:
        return MovementZone.DEFENSIVE
    return MovementZone.NEUTRAL


class MovementPoint(BaseModel):
    """One tracking sample within a shift."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    timestamp_ms: float = 0.0  # milliseconds into the shift
    speed: float = 0.0  # ft/s
    direction: float = 0.0  # radians, 0 = toward attacking end

    @field_validator("x", "y", "timestamp_ms", "speed", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> float:
        return safe_float(value)

    @field_validator("direction", mode="before")
    @classmethod
    def _normalize_direction(cls, value: Any) -> float:
        return normalize_angle(safe_float(value))

    @property
    def zone(self) -> MovementZone:
        return zone_from_x(self.x)

    @classmethod
    def from_sample(cls, sample: dict[str, Any]) -> "MovementPoint":
        """Build a point from a raw tracking sample (camelCase or snake_case keys)."""
        return cls(
            x=sample.get("x"),
            y=sample.get("y"),
            timestamp_ms=first_present(sample, "timestampMs", "timestamp_ms", "timestamp"),
            speed=first_present(sample, "speedFtPerSec", "speed_ft_per_sec", "speed"),
            direction=first_present(sample, "directionRadians", "direction_radians", "direction"),
        )


class ZoneTime(BaseModel):
    """Milliseconds spent in each zone."""

    model_config = ConfigDict(frozen=True)

    offensive: float = 0.0
    neutral: float = 0.0
    defensive: float = 0.0

    @property
    def total(self) -> float:
        return self.offensive + self.neutral + self.defensive


class SkatingTrail(BaseModel):
    """
    Ordered tracking samples for one player-shift.

    Points are kept in increasing timestamp order. Aggregate distance,
    speed and zone-time totals are carried alongside the points.
    """

    model_config = ConfigDict(frozen=True)

    player_id: int
    player_name: str = ""
    team_id: int = 0
    game_id: int = 0
    shift_id: str = ""
    period: int = 1
    start_time: str = "0:00"  # period clock, MM:SS
    end_time: str = "0:00"
    points: tuple[MovementPoint, ...] = ()
    total_distance: float = 0.0  # feet
    avg_speed: float = 0.0  # ft/s
    max_speed: float = 0.0  # ft/s
    zone_time: ZoneTime = Field(default_factory=ZoneTime)

    @field_validator("points", mode="after")
    @classmethod
    def _order_points(cls, points: tuple[MovementPoint, ...]) -> tuple[MovementPoint, ...]:
        return tuple(sorted(points, key=lambda p: p.timestamp_ms))

    @property
    def duration_ms(self) -> float:
        """Tracked time between first and last sample."""
        if len(self.points) < 2:
            return 0.0
        return self.points[-1].timestamp_ms - self.points[0].timestamp_ms

    @classmethod
    def from_samples(
        cls,
        samples: list[dict[str, Any]],
        player_id: int,
        player_name: str = "",
        team_id: int = 0,
        game_id: int = 0,
        shift_id: str = "",
        period: int = 1,
        start_time: str = "0:00",
        end_time: str = "0:00",
    ) -> "SkatingTrail":
        """
        Construct a trail from raw tracking samples.

        Samples are sorted by timestamp. Distance sums the straight-line
        segments between consecutive samples, and each interval is credited
        to the zone of the sample that closes it.
        """
        points = sorted(
            (MovementPoint.from_sample(s) for s in samples),
            key=lambda p: p.timestamp_ms,
        )

        total_distance = 0.0
        zone_ms = {zone: 0.0 for zone in MovementZone}
        for prev, curr in zip(points, points[1:]):
            total_distance += calculate_distance(prev.x, prev.y, curr.x, curr.y)
            zone_ms[curr.zone] += curr.timestamp_ms - prev.timestamp_ms

        speeds = [p.speed for p in points]
        avg_speed = sum(speeds) / len(speeds) if speeds else 0.0

        return cls(
            player_id=safe_int(player_id),
            player_name=player_name,
            team_id=safe_int(team_id),
            game_id=safe_int(game_id),
            shift_id=shift_id or f"{game_id}-{period}-{player_id}",
            period=period,
            start_time=start_time,
            end_time=end_time,
            points=tuple(points),
            total_distance=total_distance,
            avg_speed=avg_speed,
            max_speed=max(speeds, default=0.0),
            zone_time=ZoneTime(
                offensive=zone_ms[MovementZone.OFFENSIVE],
                neutral=zone_ms[MovementZone.NEUTRAL],
                defensive=zone_ms[MovementZone.DEFENSIVE],
            ),
        )
