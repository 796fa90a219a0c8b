"""
Value Estimators

Replacement-level value scores:
- WAR: points above a position-specific replacement rate, in wins
- GSAA: goaltender saves above a league-average save rate
"""

from iceflow.models.player import GoalieSeasonStats, RosterPlayerStats, position_group
from iceflow.utils.stat_calculations import per_60, toi_to_minutes

# Replacement-level scoring (points per 60)
FORWARD_REPLACEMENT_P60 = 0.8
DEFENSE_REPLACEMENT_P60 = 0.4

POINTS_PER_WIN = 6.0
LEAGUE_AVG_SAVE_PCT = 0.910


def replacement_level(position: str) -> float:
    """Replacement points/60 for a position code."""
    if position_group(position) == "D":
        return DEFENSE_REPLACEMENT_P60
    return FORWARD_REPLACEMENT_P60


def calculate_war(
    goals: int,
    assists: int,
    plus_minus: int,
    toi_minutes: float,
    position: str,
) -> float:
    """
    Simplified wins above replacement.

    Args:
        goals: Goals scored
        assists: Assists
        plus_minus: Unused by the scoring-based estimate; accepted so callers
            can pass a full season line
        toi_minutes: Total time on ice in minutes
        position: Position code (anything containing "D" is a defenseman)

    Returns:
        WAR, never below 0
    """
    points_60 = per_60(goals + assists, toi_minutes)
    points_above_replacement = (points_60 - replacement_level(position)) * (max(toi_minutes, 0) / 60)
    return max(0.0, points_above_replacement / POINTS_PER_WIN)


def war_for_player(player: RosterPlayerStats) -> float:
    """WAR from a season line, using average TOI times games played."""
    toi_minutes = toi_to_minutes(player.avg_toi_seconds) * player.games_played
    return calculate_war(player.goals, player.assists, player.plus_minus, toi_minutes, player.position)


def calculate_gsaa(
    saves: int,
    shots_against: int,
    league_avg_save_pct: float = LEAGUE_AVG_SAVE_PCT,
) -> float:
    """Goals saved above average; 0 when the goalie faced no shots."""
    if shots_against == 0:
        return 0.0
    return saves - shots_against * league_avg_save_pct


def gsaa_for_goalie(goalie: GoalieSeasonStats, league_avg_save_pct: float = LEAGUE_AVG_SAVE_PCT) -> float:
    """GSAA from a goalie season line."""
    return calculate_gsaa(goalie.saves, goalie.shots_against, league_avg_save_pct)
