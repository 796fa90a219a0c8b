"""
Player Data Model

Pydantic models for season statistics lines as delivered by the club-stats
provider, plus the position helpers used by the league filters.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from iceflow.utils.stat_calculations import (
    safe_float,
    safe_int,
    seconds_to_time_string,
    toi_to_seconds,
)


class PlayerPosition(str, Enum):
    """Player position enumeration."""

    CENTER = "C"
    LEFT_WING = "LW"
    RIGHT_WING = "RW"
    DEFENSEMAN = "D"
    GOALIE = "G"
    FORWARD = "F"  # provider fallback when no specific code is given


def position_group(position_code: str) -> str:
    """Map a position code to "F", "D" or "G"."""
    code = (position_code or "").upper()
    if code == "G":
        return "G"
    if "D" in code:
        return "D"
    return "F"


class RosterPlayerStats(BaseModel):
    """
    One skater's season line.

    Counting stats default to 0 and malformed numbers are coerced rather
    than rejected, so a single bad field never drops a player from a table.
    """

    model_config = ConfigDict(frozen=True)

    player_id: int
    name: str = "Unknown"
    team_abbrev: str = ""
    position: str = "F"
    games_played: int = 0
    goals: int = 0
    assists: int = 0
    points: int = 0
    shots: int = 0
    plus_minus: int = 0
    penalty_minutes: int = 0
    power_play_goals: int = 0
    power_play_points: int = 0
    shorthanded_goals: int = 0
    shorthanded_points: int = 0
    game_winning_goals: int = 0
    overtime_goals: int = 0
    shooting_pct: float = 0.0  # 0-1 as delivered by the provider
    avg_toi_seconds: float = 0.0  # per game
    avg_shifts_per_game: float = 0.0
    faceoff_win_pct: float = 0.0

    @field_validator(
        "games_played",
        "goals",
        "assists",
        "points",
        "shots",
        "plus_minus",
        "penalty_minutes",
        "power_play_goals",
        "power_play_points",
        "shorthanded_goals",
        "shorthanded_points",
        "game_winning_goals",
        "overtime_goals",
        mode="before",
    )
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        return safe_int(value)

    @field_validator("shooting_pct", "avg_shifts_per_game", "faceoff_win_pct", mode="before")
    @classmethod
    def _coerce_rate(cls, value: Any) -> float:
        return safe_float(value)

    @field_validator("avg_toi_seconds", mode="before")
    @classmethod
    def _coerce_toi(cls, value: Any) -> float:
        return toi_to_seconds(value)

    @property
    def avg_toi(self) -> str:
        """Average time on ice as "M:SS"."""
        return seconds_to_time_string(self.avg_toi_seconds)

    @property
    def position_group(self) -> str:
        return position_group(self.position)

    @property
    def is_defenseman(self) -> bool:
        return self.position_group == "D"

    @property
    def is_forward(self) -> bool:
        return self.position_group == "F"

    @classmethod
    def from_club_stats(cls, skater: dict[str, Any], team_abbrev: str) -> "RosterPlayerStats":
        """
        Build a season line from a club-stats skater entry.

        Names arrive as localized dictionaries ({"default": "Connor"}).
        Average TOI may be seconds or an "MM:SS" string.
        """
        first = (skater.get("firstName") or {}).get("default", "")
        last = (skater.get("lastName") or {}).get("default", "")
        name = f"{first} {last}".strip() or "Unknown"

        pp_goals = safe_int(skater.get("powerPlayGoals"))
        sh_goals = safe_int(skater.get("shorthandedGoals"))

        return cls(
            player_id=safe_int(skater.get("playerId")),
            name=name,
            team_abbrev=team_abbrev,
            position=skater.get("positionCode") or "F",
            games_played=skater.get("gamesPlayed"),
            goals=skater.get("goals"),
            assists=skater.get("assists"),
            points=skater.get("points"),
            shots=skater.get("shots"),
            plus_minus=skater.get("plusMinus"),
            penalty_minutes=skater.get("penaltyMinutes"),
            power_play_goals=pp_goals,
            power_play_points=pp_goals + safe_int(skater.get("powerPlayAssists")),
            shorthanded_goals=sh_goals,
            shorthanded_points=sh_goals + safe_int(skater.get("shorthandedAssists")),
            game_winning_goals=skater.get("gameWinningGoals"),
            overtime_goals=skater.get("overtimeGoals"),
            shooting_pct=skater.get("shootingPctg"),
            avg_toi_seconds=skater.get("avgTimeOnIcePerGame"),
            avg_shifts_per_game=skater.get("avgShiftsPerGame"),
            faceoff_win_pct=skater.get("faceoffWinPctg"),
        )


class GoalieSeasonStats(BaseModel):
    """Goalie season line used by the GSAA estimator."""

    model_config = ConfigDict(frozen=True)

    player_id: int
    name: str = "Unknown"
    team_abbrev: str = ""
    games_played: int = 0
    saves: int = 0
    shots_against: int = 0
    goals_against: int = 0

    @field_validator("games_played", "saves", "shots_against", "goals_against", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        return safe_int(value)

    @property
    def save_percentage(self) -> float:
        """Save percentage as a 0-1 fraction."""
        return self.saves / self.shots_against if self.shots_against > 0 else 0.0

    @classmethod
    def from_club_stats(cls, goalie: dict[str, Any], team_abbrev: str) -> "GoalieSeasonStats":
        """Build a goalie line from a club-stats goalie entry."""
        first = (goalie.get("firstName") or {}).get("default", "")
        last = (goalie.get("lastName") or {}).get("default", "")
        shots_against = safe_int(goalie.get("shotsAgainst"))
        goals_against = safe_int(goalie.get("goalsAgainst"))
        saves = goalie.get("saves")
        if saves is None:
            saves = max(shots_against - goals_against, 0)

        return cls(
            player_id=safe_int(goalie.get("playerId")),
            name=f"{first} {last}".strip() or "Unknown",
            team_abbrev=team_abbrev,
            games_played=goalie.get("gamesPlayed"),
            saves=saves,
            shots_against=shots_against,
            goals_against=goals_against,
        )
