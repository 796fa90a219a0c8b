"""
Roster Stats Collector

Fetches a team's season statistics from the club-stats endpoint and
parses them into RosterPlayerStats / GoalieSeasonStats records.
"""

from typing import Any

from loguru import logger

from iceflow.collectors.nhl_api import NHLApiClient
from iceflow.models.player import GoalieSeasonStats, RosterPlayerStats

# All 32 clubs; Utah replaced Arizona for 2024-25
NHL_TEAMS = [
    "BOS", "BUF", "DET", "FLA", "MTL", "OTT", "TBL", "TOR",  # Atlantic
    "CAR", "CBJ", "NJD", "NYI", "NYR", "PHI", "PIT", "WSH",  # Metropolitan
    "UTA", "CHI", "COL", "DAL", "MIN", "NSH", "STL", "WPG",  # Central
    "ANA", "CGY", "EDM", "LAK", "SJS", "SEA", "VAN", "VGK",  # Pacific
]


def parse_club_stats(
    data: dict[str, Any], team_abbrev: str
) -> tuple[list[RosterPlayerStats], list[GoalieSeasonStats]]:
    """
    Parse a club-stats response.

    Entries without a usable player id are skipped with a debug message.

    Returns:
        (skaters, goalies)
    """
    skaters = []
    for entry in data.get("skaters") or []:
        if entry.get("playerId") is None:
            logger.debug(f"Skipping skater entry without playerId for {team_abbrev}")
            continue
        skaters.append(RosterPlayerStats.from_club_stats(entry, team_abbrev))

    goalies = []
    for entry in data.get("goalies") or []:
        if entry.get("playerId") is None:
            logger.debug(f"Skipping goalie entry without playerId for {team_abbrev}")
            continue
        goalies.append(GoalieSeasonStats.from_club_stats(entry, team_abbrev))

    return skaters, goalies


class RosterStatsCollector:
    """Collector for team season statistics."""

    def __init__(self, api_client: NHLApiClient | None = None):
        """
        Initialize the roster stats collector.

        Args:
            api_client: NHL API client instance. Creates one if not provided.
        """
        self.api_client = api_client or NHLApiClient()

    def fetch_team_skaters(self, team_abbrev: str, season: str | None = None) -> list[RosterPlayerStats]:
        """
        Season lines for every skater on a team.

        Raises:
            httpx.HTTPError: If the request fails after retries
        """
        data = self.api_client.get_club_stats(team_abbrev, season)
        skaters, _ = parse_club_stats(data, team_abbrev)
        logger.debug(f"Parsed {len(skaters)} skaters for {team_abbrev}")
        return skaters

    def fetch_team_goalies(self, team_abbrev: str, season: str | None = None) -> list[GoalieSeasonStats]:
        """Season lines for every goalie on a team."""
        data = self.api_client.get_club_stats(team_abbrev, season)
        _, goalies = parse_club_stats(data, team_abbrev)
        return goalies
