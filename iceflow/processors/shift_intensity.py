"""
Shift Intensity Processor

Scores each shift's workload from distance skated and average speed, and
measures how much of it was spent in the offensive vs defensive zone.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from iceflow.models.movement import SkatingTrail, ZoneTime
from iceflow.utils.stat_calculations import parse_time_to_seconds, round_half_up

# Normalization ceilings for an elite shift
MAX_EXPECTED_DISTANCE = 1000.0  # ft
MAX_EXPECTED_SPEED = 25.0  # ft/s

DISTANCE_WEIGHT = 0.6
SPEED_WEIGHT = 0.4

SHIFT_EVENT_TYPES = ("shot", "goal", "hit", "takeaway", "giveaway", "block", "faceoff")


@dataclass(frozen=True)
class ShiftEvent:
    """Discrete event during a shift."""

    type: str
    timestamp: float  # ms into the shift
    x: float = 0.0
    y: float = 0.0
    description: str | None = None

    def __post_init__(self) -> None:
        if self.type not in SHIFT_EVENT_TYPES:
            raise ValueError(f"Unknown shift event type: {self.type}")


@dataclass(frozen=True)
class ShiftData:
    """Workload summary for one player-shift."""

    shift_id: str
    player_id: int
    player_name: str
    game_id: int
    period: int
    start_time: str
    end_time: str
    duration: int  # seconds
    intensity: int  # 0-100
    distance: float  # ft
    avg_speed: float  # ft/s
    zone_balance: float  # -1 (all DZ) to +1 (all OZ)
    events: tuple[ShiftEvent, ...] = ()


@dataclass(frozen=True)
class ShiftIntensitySummary:
    """Shift workload across a game."""

    game_id: int
    shifts: tuple[ShiftData, ...]
    avg_intensity: float
    total_distance: float
    total_toi: int  # seconds
    oz_time: float  # % of shifts leaning offensive
    dz_time: float  # % of shifts leaning defensive
    events_count: dict[str, int] = field(default_factory=dict)
    player_id: int | None = None
    player_name: str | None = None


def calculate_shift_intensity(distance: float, avg_speed: float) -> int:
    """Workload score 0-100 weighted 60/40 toward distance over speed."""
    normalized_distance = min(max(distance, 0.0) / MAX_EXPECTED_DISTANCE, 1.0)
    normalized_speed = min(max(avg_speed, 0.0) / MAX_EXPECTED_SPEED, 1.0)
    score = (normalized_distance * DISTANCE_WEIGHT + normalized_speed * SPEED_WEIGHT) * 100
    return int(round_half_up(score))


def calculate_zone_balance(zone_time: ZoneTime) -> float:
    """Offensive-zone fraction minus defensive-zone fraction, 0 with no time."""
    total = zone_time.total
    if total <= 0:
        return 0.0
    return (zone_time.offensive - zone_time.defensive) / total


def process_trail_to_shift(
    trail: SkatingTrail,
    events: Iterable[ShiftEvent] = (),
) -> ShiftData:
    """Summarize a skating trail as one shift; duration comes from the clock strings."""
    duration = abs(parse_time_to_seconds(trail.end_time) - parse_time_to_seconds(trail.start_time))

    return ShiftData(
        shift_id=trail.shift_id,
        player_id=trail.player_id,
        player_name=trail.player_name,
        game_id=trail.game_id,
        period=trail.period,
        start_time=trail.start_time,
        end_time=trail.end_time,
        duration=duration,
        intensity=calculate_shift_intensity(trail.total_distance, trail.avg_speed),
        distance=trail.total_distance,
        avg_speed=trail.avg_speed,
        zone_balance=calculate_zone_balance(trail.zone_time),
        events=tuple(events),
    )


def summarize_shifts(
    shifts: Iterable[ShiftData],
    game_id: int,
    player_id: int | None = None,
) -> ShiftIntensitySummary:
    """
    Summarize shifts from one game, optionally for a single player.

    oz_time/dz_time are the share of shifts whose zone balance leaned
    offensive/defensive, not a share of seconds.
    """
    selected = tuple(
        s for s in shifts
        if s.game_id == game_id and (player_id is None or s.player_id == player_id)
    )
    counted = ("shot", "goal", "hit", "takeaway", "giveaway")

    if not selected:
        return ShiftIntensitySummary(
            game_id=game_id,
            shifts=(),
            avg_intensity=0.0,
            total_distance=0.0,
            total_toi=0,
            oz_time=0.0,
            dz_time=0.0,
            events_count={f"{name}s": 0 for name in counted},
            player_id=player_id,
        )

    event_types = Counter(event.type for shift in selected for event in shift.events)
    n = len(selected)

    return ShiftIntensitySummary(
        game_id=game_id,
        shifts=selected,
        avg_intensity=sum(s.intensity for s in selected) / n,
        total_distance=sum(s.distance for s in selected),
        total_toi=sum(s.duration for s in selected),
        oz_time=sum(1 for s in selected if s.zone_balance > 0) / n * 100,
        dz_time=sum(1 for s in selected if s.zone_balance < 0) / n * 100,
        events_count={f"{name}s": event_types.get(name, 0) for name in counted},
        player_id=player_id,
        player_name=selected[0].player_name if player_id is not None else None,
    )
