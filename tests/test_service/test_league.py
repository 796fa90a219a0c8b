"""
Tests for League Aggregation Pipeline

The roster collector is a MagicMock; batches run with no delay.
"""

from unittest.mock import MagicMock

import httpx
import pytest

from iceflow.models.player import GoalieSeasonStats
from iceflow.service.batch_runner import BatchRunner
from iceflow.service.cache import ResultCache
from iceflow.service.league import (
    LeagueConfig,
    LeaguePipeline,
    build_player_row,
    load_league_config,
    rank_percentiles,
)


@pytest.fixture
def collector(roster_players) -> MagicMock:
    """Collector serving EDM and TOR rosters; BAD always fails."""
    rosters = {
        "EDM": [p for p in roster_players if p.team_abbrev == "EDM"],
        "TOR": [p for p in roster_players if p.team_abbrev == "TOR"],
    }

    def fetch_skaters(team: str, season: str | None = None):
        if team not in rosters:
            raise httpx.ConnectError(f"no data for {team}")
        return rosters[team]

    def fetch_goalies(team: str, season: str | None = None):
        if team not in rosters:
            raise httpx.ConnectError(f"no data for {team}")
        return [
            GoalieSeasonStats(player_id=100, name=f"{team} Starter", team_abbrev=team,
                              games_played=40, saves=920, shots_against=1000),
            GoalieSeasonStats(player_id=101, name=f"{team} Backup", team_abbrev=team,
                              games_played=5, saves=100, shots_against=120),
        ]

    mock = MagicMock()
    mock.fetch_team_skaters.side_effect = fetch_skaters
    mock.fetch_team_goalies.side_effect = fetch_goalies
    return mock


@pytest.fixture
def pipeline(collector) -> LeaguePipeline:
    return LeaguePipeline(
        collector=collector,
        runner=BatchRunner(batch_size=2, delay_seconds=0, sleep=lambda s: None),
        config=LeagueConfig(batch_size=2, delay_seconds=0, teams=("EDM", "TOR")),
        season="20242025",
    )


class TestLoadLeagueConfig:
    """Tests for load_league_config."""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_league_config(tmp_path / "missing.yaml")
        assert config == LeagueConfig()
        assert len(config.teams) == 32

    def test_reads_league_section(self, tmp_path):
        path = tmp_path / "api_config.yaml"
        path.write_text("league:\n  batch_size: 4\n  batch_delay_seconds: 0.2\n  teams: [EDM, TOR]\n")

        config = load_league_config(path)
        assert config.batch_size == 4
        assert config.delay_seconds == 0.2
        assert config.teams == ("EDM", "TOR")

    def test_missing_section_uses_defaults(self, tmp_path):
        path = tmp_path / "api_config.yaml"
        path.write_text("api:\n  timeout: 5\n")
        assert load_league_config(path) == LeagueConfig()


class TestPlayerRows:
    """Tests for build_player_row and percentile ranking."""

    def test_row_metrics(self, roster_players):
        row = build_player_row(roster_players[0])
        # 60 games at 20:00 = 1200 minutes
        assert row.points_per_60 == pytest.approx(3.5)
        assert row.goals_per_60 == pytest.approx(1.5)
        assert row.war > 0
        assert row.metric("points") == 70
        assert row.metric("corsi_for_pct") == row.advanced.corsi_for_pct
        assert row.metric("war") == row.war

    def test_unknown_metric(self, roster_players):
        with pytest.raises(ValueError):
            build_player_row(roster_players[0]).metric("height")

    def test_percentiles(self, roster_players):
        rows = rank_percentiles([build_player_row(p) for p in roster_players])
        by_id = {row.player.player_id: row for row in rows}

        # points 70, 5, 38, 45: 70 is above three of four
        assert by_id[1].percentiles["points"] == pytest.approx(75.0)
        assert by_id[2].percentiles["points"] == 0.0
        assert set(by_id[1].percentiles) >= {"points", "points_per_60", "war"}


class TestLeaguePipeline:
    """Tests for LeaguePipeline."""

    def test_fetches_every_team(self, pipeline, collector):
        players = pipeline.fetch_league_players()
        assert len(players) == 4
        assert collector.fetch_team_skaters.call_count == 2

    def test_failed_team_dropped(self, pipeline):
        players = pipeline.fetch_league_players(["EDM", "BAD", "TOR"])
        assert {p.team_abbrev for p in players} == {"EDM", "TOR"}
        assert len(players) == 4

    def test_all_teams_fail(self, pipeline):
        assert pipeline.build_table(teams=["BAD"]) == []

    def test_sorted_by_points(self, pipeline):
        table = pipeline.build_table()
        assert [row.player.points for row in table] == [70, 45, 38, 5]

    def test_ascending(self, pipeline):
        table = pipeline.build_table(descending=False)
        assert [row.player.points for row in table] == [5, 38, 45, 70]

    def test_sort_by_derived_metric(self, pipeline):
        table = pipeline.build_table(sort_by="points_per_60")
        values = [row.points_per_60 for row in table]
        assert values == sorted(values, reverse=True)

    def test_position_filter(self, pipeline):
        defense = pipeline.build_table(position_group="D")
        forwards = pipeline.build_table(position_group="F")

        assert [row.player.player_id for row in defense] == [3]
        assert {row.player.player_id for row in forwards} == {1, 2, 4}

    def test_min_games_filter_applied_before_ranking(self, pipeline):
        table = pipeline.build_table(min_games=20)

        assert 2 not in {row.player.player_id for row in table}
        # Lowest of the three remaining point totals ranks 0
        assert table[-1].percentiles["points"] == 0.0

    def test_unknown_sort_metric(self, pipeline):
        with pytest.raises(ValueError):
            pipeline.build_table(sort_by="height")

    def test_unknown_sort_metric_even_when_empty(self, pipeline):
        with pytest.raises(ValueError):
            pipeline.build_table(teams=["BAD"], sort_by="height")

    def test_unknown_position_group(self, pipeline):
        with pytest.raises(ValueError):
            pipeline.build_table(position_group="G")

    def test_cache_reuses_rosters(self, collector):
        clock_now = [0.0]
        pipeline = LeaguePipeline(
            collector=collector,
            runner=BatchRunner(batch_size=2, delay_seconds=0, sleep=lambda s: None),
            config=LeagueConfig(teams=("EDM", "TOR")),
            season="20242025",
            cache=ResultCache(ttl_seconds=300, clock=lambda: clock_now[0]),
        )

        pipeline.build_table()
        pipeline.build_table(sort_by="goals")
        assert collector.fetch_team_skaters.call_count == 2

        clock_now[0] = 300.0
        pipeline.build_table()
        assert collector.fetch_team_skaters.call_count == 4

    def test_goalie_table(self, pipeline):
        table = pipeline.build_goalie_table(teams=["EDM", "BAD"], min_games=10)

        assert len(table) == 1
        assert table[0].goalie.name == "EDM Starter"
        assert table[0].gsaa == pytest.approx(10.0)

    def test_goalie_table_sorted(self, pipeline):
        table = pipeline.build_goalie_table()
        gsaa = [row.gsaa for row in table]
        assert gsaa == sorted(gsaa, reverse=True)

    def test_partial_failure_not_cached(self, roster_players):
        """A team that failed once is fetched again on the next call, not served from cache."""
        outage = {"TOR": 1}

        def fetch_skaters(team: str, season: str | None = None):
            if outage.get(team):
                outage[team] -= 1
                raise httpx.ConnectError(f"{team} unavailable")
            return [p for p in roster_players if p.team_abbrev == team]

        collector = MagicMock()
        collector.fetch_team_skaters.side_effect = fetch_skaters
        clock_now = [0.0]
        pipeline = LeaguePipeline(
            collector=collector,
            runner=BatchRunner(batch_size=2, delay_seconds=0, sleep=lambda s: None),
            config=LeagueConfig(teams=("EDM", "TOR")),
            season="20242025",
            cache=ResultCache(ttl_seconds=3600, clock=lambda: clock_now[0]),
        )

        first = pipeline.build_table()
        clock_now[0] = 10.0
        second = pipeline.build_table()
        third = pipeline.build_table()

        assert {row.player.team_abbrev for row in first} == {"EDM"}
        assert {row.player.team_abbrev for row in second} == {"EDM", "TOR"}
        assert len(third) == 4
        assert collector.fetch_team_skaters.call_count == 4

    def test_all_failed_result_not_cached(self, pipeline, collector):
        pipeline.cache = ResultCache(ttl_seconds=3600, clock=lambda: 0.0)

        assert pipeline.fetch_league_players(["BAD"]) == []
        pipeline.fetch_league_players(["BAD"])
        assert collector.fetch_team_skaters.call_count == 2
