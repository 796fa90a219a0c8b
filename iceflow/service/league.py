"""
League Aggregation Pipeline

Fans the per-player calculators out across every roster in the league and
merges the results into one ranked, filterable table. Rosters are fetched
through a BatchRunner; a team whose fetch fails simply contributes no rows.
"""

from dataclasses import dataclass, field, replace
from pathlib import Path

from loguru import logger

from iceflow.analytics.metrics import ComputedAdvancedStats, compute_advanced_stats_from_basic
from iceflow.analytics.value import gsaa_for_goalie, war_for_player
from iceflow.collectors.nhl_api import current_season, load_config
from iceflow.collectors.roster_stats import NHL_TEAMS, RosterStatsCollector
from iceflow.models.player import GoalieSeasonStats, RosterPlayerStats
from iceflow.service.batch_runner import BatchRunner
from iceflow.service.cache import ResultCache
from iceflow.utils.stat_calculations import calculate_percentile, per_60, round_half_up, toi_to_minutes

DEFAULT_BATCH_SIZE = 8
DEFAULT_BATCH_DELAY = 0.05

# Metrics that receive a percentile rank in every table
PERCENTILE_METRICS = (
    "points",
    "goals",
    "assists",
    "points_per_60",
    "goals_per_60",
    "war",
    "corsi_for_pct",
    "x_goals",
)

POSITION_GROUPS = {"F", "D"}

ROW_METRICS = {"points_per_60", "goals_per_60", "war"}
ADVANCED_METRICS = set(ComputedAdvancedStats.__dataclass_fields__)
SEASON_METRICS = {
    name
    for name, info in RosterPlayerStats.model_fields.items()
    if info.annotation in (int, float) and name != "player_id"
}
SORTABLE_METRICS = ROW_METRICS | ADVANCED_METRICS | SEASON_METRICS


@dataclass(frozen=True)
class LeagueConfig:
    """Batch settings and team list for league-wide runs."""

    batch_size: int = DEFAULT_BATCH_SIZE
    delay_seconds: float = DEFAULT_BATCH_DELAY
    teams: tuple[str, ...] = tuple(NHL_TEAMS)


def load_league_config(config_path: str | Path | None = None) -> LeagueConfig:
    """
    Read the ``league`` section of the API config.

    A missing file falls back to the built-in defaults.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError as e:
        logger.warning(f"{e}; using default league settings")
        return LeagueConfig()

    league = config.get("league") or {}
    return LeagueConfig(
        batch_size=int(league.get("batch_size", DEFAULT_BATCH_SIZE)),
        delay_seconds=float(league.get("batch_delay_seconds", DEFAULT_BATCH_DELAY)),
        teams=tuple(league.get("teams") or NHL_TEAMS),
    )


@dataclass(frozen=True)
class LeaguePlayerRow:
    """One skater's row in a league table."""

    player: RosterPlayerStats
    points_per_60: float
    goals_per_60: float
    war: float
    advanced: ComputedAdvancedStats
    percentiles: dict[str, float] = field(default_factory=dict)

    def metric(self, name: str) -> float:
        """
        Look up a metric by name on the row, its advanced stats, or the
        underlying season line.

        Raises:
            ValueError: If no such metric exists
        """
        if name in ROW_METRICS:
            return getattr(self, name)
        if name in ADVANCED_METRICS:
            return getattr(self.advanced, name)
        if name in SEASON_METRICS:
            return getattr(self.player, name)
        raise ValueError(f"Unknown metric: {name}")


@dataclass(frozen=True)
class LeagueGoalieRow:
    """One goalie's row in a league table."""

    goalie: GoalieSeasonStats
    gsaa: float


def build_player_row(player: RosterPlayerStats) -> LeaguePlayerRow:
    """Compute every per-player metric for one season line."""
    toi_minutes = toi_to_minutes(player.avg_toi_seconds) * player.games_played
    advanced = compute_advanced_stats_from_basic(
        goals=player.goals,
        assists=player.assists,
        points=player.points,
        shots=player.shots,
        plus_minus=player.plus_minus,
        games_played=player.games_played,
        power_play_goals=player.power_play_goals,
        avg_toi=player.avg_toi_seconds or None,
    )
    return LeaguePlayerRow(
        player=player,
        points_per_60=round_half_up(per_60(player.points, toi_minutes), 2),
        goals_per_60=round_half_up(per_60(player.goals, toi_minutes), 2),
        war=round_half_up(war_for_player(player), 2),
        advanced=advanced,
    )


def rank_percentiles(
    rows: list[LeaguePlayerRow], metrics: tuple[str, ...] = PERCENTILE_METRICS
) -> list[LeaguePlayerRow]:
    """Attach percentile ranks, computed within ``rows``, for each metric."""
    samples = {name: [row.metric(name) for row in rows] for name in metrics}
    return [
        replace(
            row,
            percentiles={
                name: round_half_up(calculate_percentile(row.metric(name), samples[name]), 1)
                for name in metrics
            },
        )
        for row in rows
    ]


class LeaguePipeline:
    """
    League-wide table builder.

    Example:
        >>> pipeline = LeaguePipeline()
        >>> table = pipeline.build_table(sort_by="points_per_60", position_group="D", min_games=20)
    """

    def __init__(
        self,
        collector: RosterStatsCollector | None = None,
        runner: BatchRunner | None = None,
        config: LeagueConfig | None = None,
        season: str | None = None,
        cache: ResultCache | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            collector: Roster collector (creates one if not provided)
            runner: Batch runner (built from config if not provided)
            config: League settings (read from the config file if not provided)
            season: Season id, defaults to the current season
            cache: Optional cache for fetched league rosters
        """
        self.config = config or load_league_config()
        self.collector = collector or RosterStatsCollector()
        self.runner = runner or BatchRunner(
            batch_size=self.config.batch_size,
            delay_seconds=self.config.delay_seconds,
        )
        self.season = season or current_season()
        self.cache = cache

        logger.info(f"LeaguePipeline initialized for season {self.season}")

    def fetch_league_players(self, teams: list[str] | None = None) -> list[RosterPlayerStats]:
        """
        Season lines for every skater on the given teams.

        Teams whose fetch failed contribute nothing. A result with any
        failed team is never cached, so the next call retries them.
        """
        team_list = list(teams or self.config.teams)
        key = f"skaters:{self.season}:{','.join(sorted(team_list))}"

        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        results = self.runner.run(
            team_list,
            lambda team: self.collector.fetch_team_skaters(team, self.season),
        )
        players: list[RosterPlayerStats] = []
        failed: list[str] = []
        for team in team_list:
            roster = results.get(team)
            if roster is None:
                logger.warning(f"No roster data for {team}")
                failed.append(team)
                continue
            players.extend(roster)

        if self.cache is not None and not failed:
            self.cache.set(key, players)
        return players

    def build_table(
        self,
        teams: list[str] | None = None,
        sort_by: str = "points",
        position_group: str | None = None,
        min_games: int = 0,
        descending: bool = True,
    ) -> list[LeaguePlayerRow]:
        """
        Build a ranked league table.

        Args:
            teams: Team abbreviations, defaults to the configured league
            sort_by: Metric name (row, advanced-stat or season-line field)
            position_group: "F", "D" or None for all skaters
            min_games: Minimum games played to be included
            descending: Sort order

        Returns:
            Filtered, sorted rows with percentile ranks attached

        Raises:
            ValueError: If position_group or sort_by is unknown
        """
        if position_group is not None and position_group not in POSITION_GROUPS:
            raise ValueError(f"Unknown position group: {position_group}")
        if sort_by not in SORTABLE_METRICS:
            raise ValueError(f"Unknown metric: {sort_by}")

        players = self.fetch_league_players(teams)
        rows = [
            build_player_row(player)
            for player in players
            if player.games_played >= min_games
            and (position_group is None or player.position_group == position_group)
        ]
        rows.sort(key=lambda row: row.metric(sort_by), reverse=descending)

        logger.info(f"League table built: {len(rows)} of {len(players)} skaters, sorted by {sort_by}")
        return rank_percentiles(rows)

    def build_goalie_table(
        self, teams: list[str] | None = None, min_games: int = 0
    ) -> list[LeagueGoalieRow]:
        """Goalies ranked by goals saved above average."""
        team_list = list(teams or self.config.teams)
        results = self.runner.run(
            team_list,
            lambda team: self.collector.fetch_team_goalies(team, self.season),
        )

        rows = [
            LeagueGoalieRow(goalie=goalie, gsaa=round_half_up(gsaa_for_goalie(goalie), 2))
            for team in team_list
            for goalie in results.get(team) or []
            if goalie.games_played >= min_games
        ]
        rows.sort(key=lambda row: row.gsaa, reverse=True)
        return rows
