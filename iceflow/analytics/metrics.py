"""
Possession Metrics Module

Calculates advanced hockey statistics including:
- Corsi and Fenwick (counts, shares, relative to team baseline)
- Expected goals for/against and goals above expected
- Shooting %, save % and PDO
- Offensive zone-start share
- Per-60 minute rates

All percentages are on a 0-100 scale. Shares default to 50 (neutral) when
both sides are empty and per-60 rates default to 0 without ice time.
"""

from dataclasses import dataclass
from typing import Iterable

from iceflow.analytics.expected_goals import shot_expected_goal
from iceflow.models.shot import ShotAttempt
from iceflow.utils.stat_calculations import per_game, round_half_up, toi_to_minutes

NEUTRAL_PCT = 50.0


def share_pct(value: float, other: float) -> float:
    """value / (value + other) * 100, 50 when both are zero."""
    total = value + other
    return value / total * 100 if total > 0 else NEUTRAL_PCT


@dataclass(frozen=True)
class AdvancedStats:
    """On-ice possession and finishing metrics for one player or team."""

    # Corsi (all attempts)
    corsi_for: int
    corsi_against: int
    corsi_for_pct: float
    corsi_relative: float

    # Fenwick (unblocked attempts)
    fenwick_for: int
    fenwick_against: int
    fenwick_for_pct: float
    fenwick_relative: float

    # Expected goals
    expected_goals: float
    expected_goals_against: float
    expected_goals_diff: float
    expected_goals_pct: float
    goals_above_expected: float

    # Finishing and goaltending
    shooting_pct: float
    save_pct: float
    pdo: float

    # Deployment
    offensive_zone_start_pct: float
    quality_of_competition: float | None
    quality_of_teammates: float | None

    # Relative to team baseline
    relative_corsi: float
    relative_fenwick: float
    relative_xg: float

    # Per 60
    corsi_for_60: float
    fenwick_for_60: float
    xg_60: float
    goals_60: float
    points_60: float


def calculate_advanced_metrics(
    shots_for: Iterable[ShotAttempt],
    shots_against: Iterable[ShotAttempt],
    goals: int,
    goals_against: int,
    toi_minutes: float,
    team_avg_corsi_for: float = 50.0,
    team_avg_fenwick_for: float = 50.0,
    o_zone_starts: int = 100,
    d_zone_starts: int = 100,
    assists: int | None = None,
) -> AdvancedStats:
    """
    Calculate possession metrics from on-ice shot attempts.

    Args:
        shots_for: Attempts by the player's side while on ice
        shots_against: Attempts by the opponent while on ice
        goals: Actual goals for
        goals_against: Actual goals against
        toi_minutes: Time on ice in minutes
        team_avg_corsi_for: Team CF% baseline for relative Corsi
        team_avg_fenwick_for: Team FF% baseline for relative Fenwick
        o_zone_starts: Offensive zone starts
        d_zone_starts: Defensive zone starts
        assists: Assists for points/60. Without them points/60 equals goals/60.

    Returns:
        AdvancedStats
    """
    shots_for = list(shots_for)
    shots_against = list(shots_against)

    corsi_for = len(shots_for)
    corsi_against = len(shots_against)
    corsi_for_pct = share_pct(corsi_for, corsi_against)

    fenwick_for = sum(1 for s in shots_for if s.is_unblocked)
    fenwick_against = sum(1 for s in shots_against if s.is_unblocked)
    fenwick_for_pct = share_pct(fenwick_for, fenwick_against)

    expected_goals = sum((shot_expected_goal(s) for s in shots_for), 0.0)
    expected_goals_against = sum((shot_expected_goal(s) for s in shots_against), 0.0)
    expected_goals_diff = expected_goals - expected_goals_against
    expected_goals_pct = share_pct(expected_goals, expected_goals_against)

    on_goal_for = sum(1 for s in shots_for if s.is_on_goal)
    on_goal_against = sum(1 for s in shots_against if s.is_on_goal)
    shooting_pct = goals / on_goal_for * 100 if on_goal_for > 0 else 0.0
    save_pct = (
        (on_goal_against - goals_against) / on_goal_against * 100
        if on_goal_against > 0
        else 0.0
    )

    relative_corsi = corsi_for_pct - team_avg_corsi_for
    relative_fenwick = fenwick_for_pct - team_avg_fenwick_for

    multiplier = 60 / toi_minutes if toi_minutes and toi_minutes > 0 else 0.0
    goals_60 = goals * multiplier
    points_60 = (goals + assists) * multiplier if assists is not None else goals_60

    return AdvancedStats(
        corsi_for=corsi_for,
        corsi_against=corsi_against,
        corsi_for_pct=corsi_for_pct,
        corsi_relative=relative_corsi,
        fenwick_for=fenwick_for,
        fenwick_against=fenwick_against,
        fenwick_for_pct=fenwick_for_pct,
        fenwick_relative=relative_fenwick,
        expected_goals=expected_goals,
        expected_goals_against=expected_goals_against,
        expected_goals_diff=expected_goals_diff,
        expected_goals_pct=expected_goals_pct,
        goals_above_expected=goals - expected_goals,
        shooting_pct=shooting_pct,
        save_pct=save_pct,
        pdo=shooting_pct + save_pct,
        offensive_zone_start_pct=share_pct(o_zone_starts, d_zone_starts),
        # No on-ice opponent/teammate data to weight by
        quality_of_competition=None,
        quality_of_teammates=None,
        relative_corsi=relative_corsi,
        relative_fenwick=relative_fenwick,
        relative_xg=expected_goals_diff,
        corsi_for_60=corsi_for * multiplier,
        fenwick_for_60=fenwick_for * multiplier,
        xg_60=expected_goals * multiplier,
        goals_60=goals_60,
        points_60=points_60,
    )


# League reference values for box-score estimates
LEAGUE_SHOOTING_PCT = 0.102
LEAGUE_SAVE_PCT = 89.8
SHOT_ATTEMPTS_PER_SHOT = 1.65
BLOCK_RATE = 0.15
HIGH_DANGER_SHOT_PCT = 18.0
LEAGUE_SHOTS_PER_SKATER_GAME = 2.0
PRIMARY_ASSIST_SHARE = 0.6
DEFAULT_AVG_TOI = "15:00"


@dataclass(frozen=True)
class ComputedAdvancedStats:
    """Advanced-stat estimates derived from a box-score season line."""

    x_goals: float
    x_goals_difference: float  # actual - expected
    goals_above_expected: float

    pdo: float
    on_ice_shooting_pct: float
    estimated_on_ice_save_pct: float

    corsi_for: int
    corsi_against: int
    corsi_for_pct: float
    relative_corsi: float

    fenwick_for: int
    fenwick_against: int
    fenwick_for_pct: float

    high_danger_shot_pct: float
    shooting_talent: float
    avg_shot_danger: float

    offensive_zone_start_pct: float
    defensive_zone_start_pct: float

    points_per_x_goals: float
    goals_per_x_goals: float

    primary_points_pct: float
    primary_points_per_60: float


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def estimate_x_goals(shots: int, goals: int, power_play_goals: int = 0) -> float:
    """
    Estimate season xG from shot volume and conversion.

    High finishers are assumed to be getting better looks, so the per-shot
    value steps up with shooting %. Power-play goals add a flat bonus.
    """
    if shots <= 0:
        return 0.0

    shooting_pct = goals / shots
    if shooting_pct > 0.15:
        xg_per_shot = 0.11
    elif shooting_pct > 0.12:
        xg_per_shot = 0.095
    elif shooting_pct > 0.09:
        xg_per_shot = 0.08
    elif shooting_pct > 0.06:
        xg_per_shot = 0.07
    else:
        xg_per_shot = 0.06

    return round_half_up(shots * xg_per_shot + power_play_goals * 0.08, 2)


def estimate_possession(
    shots: int,
    plus_minus: int,
    games_played: int,
    attempts_per_shot: float = SHOT_ATTEMPTS_PER_SHOT,
) -> tuple[int, int, float]:
    """
    Estimate on-ice attempts for/against and the resulting share.

    The player's own attempts are scaled up to a team total by an assumed
    share of team offense (15-35%, from shots per game), and plus/minus per
    game nudges the share around 50% (clamped to 35-65).

    Returns:
        (attempts_for, attempts_against, share_pct rounded to 1 decimal)
    """
    if games_played <= 0 or shots <= 0:
        return 0, 0, NEUTRAL_PCT

    personal_attempts = shots * attempts_per_shot
    offensive_share = _clamp(shots / games_played / LEAGUE_SHOTS_PER_SKATER_GAME, 0.5, 2.0)
    share_of_team = _clamp(offensive_share * 0.15, 0.15, 0.35)
    team_for = personal_attempts / share_of_team

    target_pct = _clamp(50 + plus_minus / games_played * 4, 35, 65)
    team_against = team_for * (100 - target_pct) / target_pct

    attempts_for = int(round_half_up(team_for))
    attempts_against = int(round_half_up(max(1.0, team_against)))
    return attempts_for, attempts_against, round_half_up(share_pct(attempts_for, attempts_against), 1)


def estimate_pdo(shooting_pct: float, plus_minus: int, games_played: int) -> float:
    """
    Estimate PDO from a 0-1 shooting percentage.

    Save % starts from the league average and moves half a point per +1
    plus/minus per game, clamped to 87-94; PDO is clamped to 92-108.
    """
    pm_per_game = plus_minus / games_played if games_played > 0 else 0.0
    save_pct = _clamp(LEAGUE_SAVE_PCT + pm_per_game * 0.5, 87, 94)
    return round_half_up(_clamp(shooting_pct * 100 + save_pct, 92, 108), 1)


def compute_advanced_stats_from_basic(
    goals: int,
    assists: int,
    points: int,
    shots: int,
    plus_minus: int,
    games_played: int,
    power_play_goals: int = 0,
    avg_toi: str | int | float | None = DEFAULT_AVG_TOI,
) -> ComputedAdvancedStats:
    """
    Estimate advanced stats from a season's box-score numbers.

    Used where no on-ice event data exists (league-wide tables). Every
    estimate degrades to a neutral value when games or shots are zero.

    Args:
        goals: Season goals
        assists: Season assists
        points: Season points
        shots: Season shots on goal
        plus_minus: Season plus/minus
        games_played: Games played
        power_play_goals: Power-play goals
        avg_toi: Average TOI per game ("MM:SS" or seconds)

    Returns:
        ComputedAdvancedStats
    """
    toi_per_game = toi_to_minutes(avg_toi if avg_toi is not None else DEFAULT_AVG_TOI)
    total_toi = toi_per_game * max(games_played, 0)

    x_goals = estimate_x_goals(shots, goals, power_play_goals)
    x_goals_difference = round_half_up(goals - x_goals, 2)

    corsi_for, corsi_against, corsi_pct = estimate_possession(shots, plus_minus, games_played)
    fenwick_for, fenwick_against, fenwick_pct = estimate_possession(
        shots,
        plus_minus,
        games_played,
        attempts_per_shot=SHOT_ATTEMPTS_PER_SHOT * (1 - BLOCK_RATE),
    )

    shooting_pct = goals / shots if shots > 0 else 0.0
    pdo = estimate_pdo(shooting_pct, plus_minus, games_played)

    high_danger_pct = _clamp(HIGH_DANGER_SHOT_PCT + (shooting_pct - 0.1) * 50, 10, 40)
    avg_shot_danger = x_goals / shots if shots > 0 else 0.0
    shooting_talent = (goals - x_goals) / shots if shots > 0 else 0.0

    # Scorers with modest plus/minus tend to be sheltered offensively
    offensive_indicator = per_game(points, games_played) - per_game(plus_minus, games_played) * 0.3
    oz_start_pct = _clamp(50 + offensive_indicator * 5, 30, 70)

    primary_points = goals + assists * PRIMARY_ASSIST_SHARE
    primary_pct = primary_points / points * 100 if points > 0 else 0.0
    primary_per_60 = primary_points / total_toi * 60 if total_toi > 0 else 0.0

    return ComputedAdvancedStats(
        x_goals=x_goals,
        x_goals_difference=x_goals_difference,
        goals_above_expected=x_goals_difference,
        pdo=pdo,
        on_ice_shooting_pct=shooting_pct * 100,
        estimated_on_ice_save_pct=pdo - shooting_pct * 100,
        corsi_for=corsi_for,
        corsi_against=corsi_against,
        corsi_for_pct=corsi_pct,
        relative_corsi=corsi_pct - NEUTRAL_PCT,
        fenwick_for=fenwick_for,
        fenwick_against=fenwick_against,
        fenwick_for_pct=fenwick_pct,
        high_danger_shot_pct=round_half_up(high_danger_pct, 1),
        shooting_talent=round_half_up(shooting_talent, 3),
        avg_shot_danger=round_half_up(avg_shot_danger, 3),
        offensive_zone_start_pct=round_half_up(oz_start_pct, 1),
        defensive_zone_start_pct=round_half_up(100 - oz_start_pct, 1),
        points_per_x_goals=round_half_up(points / x_goals, 2) if x_goals > 0 else 0.0,
        goals_per_x_goals=round_half_up(goals / x_goals, 2) if x_goals > 0 else 0.0,
        primary_points_pct=round_half_up(primary_pct, 1),
        primary_points_per_60=round_half_up(primary_per_60, 2),
    )


PERCENT_METRICS = {
    "corsi_for_pct",
    "fenwick_for_pct",
    "expected_goals_pct",
    "offensive_zone_start_pct",
    "shooting_pct",
    "save_pct",
}
SIGNED_METRICS = {"expected_goals", "expected_goals_against", "goals_above_expected", "war"}


def format_advanced_stat(value: float, metric: str) -> str:
    """Format a metric value for display."""
    if metric in PERCENT_METRICS:
        return f"{value:.1f}%"
    if metric in SIGNED_METRICS:
        return f"{value:+.2f}"
    return f"{value:.1f}"
