"""
Rolling Metrics Processor

Game-by-game time series for a player:
- Per-game metric lines built from shot attempts
- Rolling-window PDO, Corsi%, Fenwick%, xG%, shooting % and scoring rates
- Cumulative expected vs actual goals with the running differential
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from iceflow.analytics.expected_goals import shot_expected_goal
from iceflow.analytics.metrics import share_pct
from iceflow.models.shot import ShotAttempt
from iceflow.utils.stat_calculations import round_half_up

DEFAULT_WINDOW = 5


@dataclass(frozen=True)
class GameMetrics:
    """One game's on-ice results for a player."""

    game_id: int
    date: str
    goals: int = 0
    assists: int = 0
    points: int = 0
    shots_for: int = 0  # on goal
    shots_against: int = 0
    shot_attempts_for: int = 0
    shot_attempts_against: int = 0
    unblocked_for: int = 0
    unblocked_against: int = 0
    xg_for: float = 0.0
    xg_against: float = 0.0
    goals_for: int = 0
    goals_against: int = 0
    toi: int = 0  # seconds
    opponent: str | None = None


@dataclass(frozen=True)
class RollingMetrics:
    """Rolling-window values as of one game."""

    game_number: int
    game_id: int
    date: str
    rolling_pdo: float
    rolling_corsi_pct: float
    rolling_fenwick_pct: float
    rolling_xg_pct: float
    rolling_shooting_pct: float
    rolling_points_per_game: float
    rolling_goals_per_game: float
    rolling_xg_for: float
    rolling_xg_against: float
    game_pdo: float
    game_corsi_pct: float
    game_fenwick_pct: float
    game_xg_for: float
    game_goals_for: int


@dataclass(frozen=True)
class CumulativeXGPoint:
    """Running expected vs actual goals after one game."""

    game_number: int
    game_id: int
    date: str
    game_xg: float
    game_goals: int
    cumulative_xg: float
    cumulative_goals: int
    differential: float  # cumulative goals - cumulative xG


def calculate_pdo(goals_for: int, shots_for: int, goals_against: int, shots_against: int) -> float:
    """
    On-ice shooting % plus save % (league neutral is about 100).

    A side with no shots against is credited with a perfect 100 save %.
    """
    shooting_pct = goals_for / shots_for * 100 if shots_for > 0 else 0.0
    save_pct = (shots_against - goals_against) / shots_against * 100 if shots_against > 0 else 100.0
    return shooting_pct + save_pct


def aggregate_shots_to_game_metrics(
    game_id: int,
    date: str,
    player_shots: Iterable[ShotAttempt],
    opponent_shots: Iterable[ShotAttempt],
    player_goals: int,
    player_assists: int,
    xg_calculator: Callable[[ShotAttempt], float] = shot_expected_goal,
) -> GameMetrics:
    """Build a game line from the attempts for and against while on ice."""
    player_shots = list(player_shots)
    opponent_shots = list(opponent_shots)

    return GameMetrics(
        game_id=game_id,
        date=date,
        goals=player_goals,
        assists=player_assists,
        points=player_goals + player_assists,
        shots_for=sum(1 for s in player_shots if s.is_on_goal),
        shots_against=sum(1 for s in opponent_shots if s.is_on_goal),
        shot_attempts_for=len(player_shots),
        shot_attempts_against=len(opponent_shots),
        unblocked_for=sum(1 for s in player_shots if s.is_unblocked),
        unblocked_against=sum(1 for s in opponent_shots if s.is_unblocked),
        xg_for=round_half_up(sum((xg_calculator(s) for s in player_shots), 0.0), 2),
        xg_against=round_half_up(sum((xg_calculator(s) for s in opponent_shots), 0.0), 2),
        goals_for=sum(1 for s in player_shots if s.is_goal),
        goals_against=sum(1 for s in opponent_shots if s.is_goal),
    )


def calculate_rolling_metrics(
    games: Sequence[GameMetrics],
    window: int = DEFAULT_WINDOW,
) -> list[RollingMetrics]:
    """
    Rolling averages over the trailing ``window`` games.

    Early games use however many games are available. Percentages are
    rounded to 1 decimal and per-game rates to 2.
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")

    results = []
    for i, game in enumerate(games):
        span = games[max(0, i - window + 1): i + 1]
        n = len(span)

        goals = sum(g.goals for g in span)
        shots_for = sum(g.shots_for for g in span)
        xg_for = sum(g.xg_for for g in span)
        xg_against = sum(g.xg_against for g in span)

        rolling_pdo = calculate_pdo(
            sum(g.goals_for for g in span),
            shots_for,
            sum(g.goals_against for g in span),
            sum(g.shots_against for g in span),
        )

        results.append(
            RollingMetrics(
                game_number=i + 1,
                game_id=game.game_id,
                date=game.date,
                rolling_pdo=round_half_up(rolling_pdo, 1),
                rolling_corsi_pct=round_half_up(
                    share_pct(
                        sum(g.shot_attempts_for for g in span),
                        sum(g.shot_attempts_against for g in span),
                    ),
                    1,
                ),
                rolling_fenwick_pct=round_half_up(
                    share_pct(
                        sum(g.unblocked_for for g in span),
                        sum(g.unblocked_against for g in span),
                    ),
                    1,
                ),
                rolling_xg_pct=round_half_up(share_pct(xg_for, xg_against), 1),
                rolling_shooting_pct=round_half_up(goals / shots_for * 100 if shots_for > 0 else 0.0, 1),
                rolling_points_per_game=round_half_up(sum(g.points for g in span) / n, 2),
                rolling_goals_per_game=round_half_up(goals / n, 2),
                rolling_xg_for=round_half_up(xg_for / n, 2),
                rolling_xg_against=round_half_up(xg_against / n, 2),
                game_pdo=round_half_up(
                    calculate_pdo(game.goals_for, game.shots_for, game.goals_against, game.shots_against),
                    1,
                ),
                game_corsi_pct=round_half_up(share_pct(game.shot_attempts_for, game.shot_attempts_against), 1),
                game_fenwick_pct=round_half_up(share_pct(game.unblocked_for, game.unblocked_against), 1),
                game_xg_for=round_half_up(game.xg_for, 2),
                game_goals_for=game.goals_for,
            )
        )

    return results


def cumulative_xg_series(games: Iterable[GameMetrics]) -> list[CumulativeXGPoint]:
    """
    Running expected and actual goals through a chronological game list.

    A positive differential means the player has finished above expectation
    to date.
    """
    series = []
    total_xg = 0.0
    total_goals = 0

    for number, game in enumerate(games, start=1):
        total_xg += game.xg_for
        total_goals += game.goals_for
        series.append(
            CumulativeXGPoint(
                game_number=number,
                game_id=game.game_id,
                date=game.date,
                game_xg=round_half_up(game.xg_for, 2),
                game_goals=game.goals_for,
                cumulative_xg=round_half_up(total_xg, 2),
                cumulative_goals=total_goals,
                differential=round_half_up(total_goals - total_xg, 2),
            )
        )

    return series
