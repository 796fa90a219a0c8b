"""
Momentum Processor

Game-flow series from play-by-play events:
- Rolling shot-attempt momentum sampled every 30 s over a 2-minute window
- Swings where the momentum lead changes hands sharply
- Per-period shot and scoring-chance differentials
- Sustained surges of one-sided pressure
"""

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from iceflow.analytics.expected_goals import HIGH_DANGER_XG, calculate_xg
from iceflow.models.play_event import PERIOD_SECONDS, PlayEvent
from iceflow.models.shot import ShotAttempt, ShotOutcome, shot_geometry
from iceflow.utils.stat_calculations import round_half_up

WINDOW_SECONDS = 120
SAMPLE_INTERVAL_SECONDS = 30
REGULATION_SECONDS = 3 * PERIOD_SECONDS

# Small samples are damped: momentum divides by at least this many attempts
MIN_ATTEMPTS_FOR_FULL_MOMENTUM = 5

SWING_THRESHOLD = 0.4
SURGE_INTENSITY = 0.3
SURGE_GAP_SECONDS = 120

MOMENTUM_EVENT_TYPES = {
    "goal": "goal",
    "shot-on-goal": "shot",
    "missed-shot": "shot",
    "blocked-shot": "shot",
    "hit": "hit",
    "takeaway": "takeaway",
    "giveaway": "giveaway",
}


@dataclass(frozen=True)
class MomentumEvent:
    """A play-by-play event that moves momentum."""

    event_id: int
    period: int
    time_in_period: str
    time_elapsed: int  # seconds since the opening faceoff
    team_id: int
    event_type: str  # "shot", "goal", "hit", "takeaway" or "giveaway"
    x_goal: float | None = None

    @property
    def is_shot_attempt(self) -> bool:
        return self.event_type in ("shot", "goal")


@dataclass(frozen=True)
class MomentumSample:
    """Shot attempts by each side in the window ending at ``time``."""

    time: int
    home_shots: int
    away_shots: int
    momentum: float  # -1 (away) to +1 (home)


@dataclass(frozen=True)
class MomentumSwing:
    time: int
    period: int
    from_team: int
    to_team: int
    trigger: str = "Shot Surge"


@dataclass(frozen=True)
class PeriodMomentum:
    period: int
    dominant_team: int
    shot_differential: int  # home - away
    scoring_chance_differential: int


@dataclass(frozen=True)
class MomentumPeriod:
    """A stretch of sustained one-sided pressure."""

    start_time: int
    end_time: int
    team_id: int
    intensity: float  # peak |momentum|


@dataclass(frozen=True)
class MomentumAnalytics:
    momentum_periods: tuple[MomentumPeriod, ...]
    momentum_swings: tuple[MomentumSwing, ...]
    rolling_averages: tuple[MomentumSample, ...]
    period_momentum: tuple[PeriodMomentum, ...]


def quick_expected_goal(x: float, y: float) -> float:
    """xG of an unadorned shot from a location, measured to the nearer net."""
    distance, angle = shot_geometry(x, y)
    shot = ShotAttempt(outcome=ShotOutcome.SHOT, x=x, y=y, distance=distance, angle=angle)
    return calculate_xg(shot).x_goal


def parse_events_for_momentum(events: Iterable[PlayEvent]) -> list[MomentumEvent]:
    """
    Momentum events in game-time order.

    Events without an owning team, or of a type that does not move
    momentum (faceoffs, stoppages, penalties), are dropped. Shots and
    goals with both coordinates get an xG estimate.
    """
    momentum_events = []
    for event in events:
        event_type = MOMENTUM_EVENT_TYPES.get(event.type_key)
        if event.team_id is None or event_type is None:
            continue

        x_goal = None
        if event_type in ("shot", "goal") and event.x is not None and event.y is not None:
            x_goal = quick_expected_goal(event.x, event.y)

        momentum_events.append(
            MomentumEvent(
                event_id=event.event_id,
                period=event.period,
                time_in_period=event.time_in_period,
                time_elapsed=event.game_seconds,
                team_id=event.team_id,
                event_type=event_type,
                x_goal=x_goal,
            )
        )

    momentum_events.sort(key=lambda e: e.time_elapsed)
    return momentum_events


def _shot_count(events: Iterable[MomentumEvent], team_id: int) -> int:
    return sum(1 for e in events if e.team_id == team_id and e.is_shot_attempt)


def calculate_rolling_momentum(
    events: Sequence[MomentumEvent],
    home_team_id: int,
    away_team_id: int,
    window_seconds: int = WINDOW_SECONDS,
    sample_interval: int = SAMPLE_INTERVAL_SECONDS,
) -> list[MomentumSample]:
    """
    Sample shot-attempt momentum through the game.

    Samples run from 0 to the later of the last event and the end of
    regulation. Each covers attempts in ``(time - window, time]``;
    momentum is the attempt difference over max(total, 5), 0 when neither
    side has an attempt, rounded to 2 decimals.
    """
    max_time = max([e.time_elapsed for e in events] + [REGULATION_SECONDS])

    samples = []
    for time in range(0, max_time + 1, sample_interval):
        window = [e for e in events if time - window_seconds < e.time_elapsed <= time]
        home = _shot_count(window, home_team_id)
        away = _shot_count(window, away_team_id)
        total = home + away
        momentum = (home - away) / max(total, MIN_ATTEMPTS_FOR_FULL_MOMENTUM) if total > 0 else 0.0

        samples.append(
            MomentumSample(
                time=time,
                home_shots=home,
                away_shots=away,
                momentum=round_half_up(momentum, 2),
            )
        )
    return samples


def detect_momentum_swings(
    samples: Sequence[MomentumSample],
    home_team_id: int,
    away_team_id: int,
    threshold: float = SWING_THRESHOLD,
) -> list[MomentumSwing]:
    """
    Consecutive samples whose momentum moves by more than ``threshold``
    and whose leading side changes. Zero momentum counts as the away side.
    """
    swings = []
    for prev, curr in zip(samples, samples[1:]):
        if abs(curr.momentum - prev.momentum) <= threshold:
            continue

        from_team = home_team_id if prev.momentum > 0 else away_team_id
        to_team = home_team_id if curr.momentum > 0 else away_team_id
        if from_team != to_team:
            swings.append(
                MomentumSwing(
                    time=curr.time,
                    period=curr.time // PERIOD_SECONDS + 1,
                    from_team=from_team,
                    to_team=to_team,
                )
            )
    return swings


def analyze_period_momentum(
    events: Sequence[MomentumEvent],
    home_team_id: int,
    away_team_id: int,
    periods: Sequence[int] = (1, 2, 3),
) -> list[PeriodMomentum]:
    """Shot and high-danger chance differentials (home - away) per period."""
    results = []
    for period in periods:
        period_events = [e for e in events if e.period == period]
        chances = [e for e in period_events if (e.x_goal or 0.0) >= HIGH_DANGER_XG]

        shot_diff = _shot_count(period_events, home_team_id) - _shot_count(period_events, away_team_id)
        chance_diff = _shot_count(chances, home_team_id) - _shot_count(chances, away_team_id)

        results.append(
            PeriodMomentum(
                period=period,
                dominant_team=home_team_id if shot_diff > 0 else away_team_id,
                shot_differential=shot_diff,
                scoring_chance_differential=chance_diff,
            )
        )
    return results


def find_momentum_periods(
    samples: Sequence[MomentumSample],
    home_team_id: int,
    away_team_id: int,
) -> list[MomentumPeriod]:
    """
    Group high-momentum samples (|momentum| > 0.3) into surges.

    A surge continues while the same team leads and no more than two
    minutes pass between qualifying samples.
    """
    surges: list[MomentumPeriod] = []
    current: MomentumPeriod | None = None

    for sample in samples:
        intensity = abs(sample.momentum)
        if intensity <= SURGE_INTENSITY:
            continue

        team_id = home_team_id if sample.momentum > 0 else away_team_id
        if (
            current is None
            or current.team_id != team_id
            or sample.time - current.end_time > SURGE_GAP_SECONDS
        ):
            if current is not None:
                surges.append(current)
            current = MomentumPeriod(
                start_time=sample.time,
                end_time=sample.time,
                team_id=team_id,
                intensity=intensity,
            )
        else:
            current = replace(current, end_time=sample.time, intensity=max(current.intensity, intensity))

    if current is not None:
        surges.append(current)
    return surges


def analyze_momentum(
    events: Iterable[PlayEvent],
    home_team_id: int,
    away_team_id: int,
) -> MomentumAnalytics:
    """Full momentum breakdown for one game's play-by-play."""
    momentum_events = parse_events_for_momentum(events)
    samples = calculate_rolling_momentum(momentum_events, home_team_id, away_team_id)

    return MomentumAnalytics(
        momentum_periods=tuple(find_momentum_periods(samples, home_team_id, away_team_id)),
        momentum_swings=tuple(detect_momentum_swings(samples, home_team_id, away_team_id)),
        rolling_averages=tuple(samples),
        period_momentum=tuple(analyze_period_momentum(momentum_events, home_team_id, away_team_id)),
    )
