#!/usr/bin/env python3
"""
Command line interface for league tables.

Usage:
    python -m cli.main leaders --sort points_per_60 --position D --min-games 20
    python -m cli.main leaders --teams TOR MTL --limit 10
    python -m cli.main goalies --min-games 10
"""

import argparse
import sys
from pathlib import Path

from loguru import logger

from iceflow.analytics.metrics import format_advanced_stat
from iceflow.collectors.nhl_api import NHLApiClient, format_season
from iceflow.collectors.roster_stats import RosterStatsCollector
from iceflow.service.cache import ResultCache
from iceflow.service.league import LeagueGoalieRow, LeaguePipeline, LeaguePlayerRow, load_league_config


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for CLI usage."""
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG")
    else:
        logger.add(sys.stderr, level="WARNING")


def print_leaders(rows: list[LeaguePlayerRow], sort_by: str, limit: int) -> None:
    """Print a skater table."""
    print()
    print(f"{'#':>3}  {'Player':<24} {'Team':<4} {'Pos':<3} {'GP':>3} {'G':>3} {'A':>3} {'P':>4} "
          f"{'P/60':>5} {'WAR':>6} {sort_by:>14} {'Pctl':>5}")
    print("-" * 92)
    for rank, row in enumerate(rows[:limit], 1):
        player = row.player
        value = format_advanced_stat(row.metric(sort_by), sort_by)
        pctl = row.percentiles.get(sort_by)
        pctl_text = f"{pctl:.0f}" if pctl is not None else "-"
        print(
            f"{rank:>3}  {player.name[:24]:<24} {player.team_abbrev:<4} {player.position:<3} "
            f"{player.games_played:>3} {player.goals:>3} {player.assists:>3} {player.points:>4} "
            f"{row.points_per_60:>5.2f} {row.war:>+6.2f} {value:>14} {pctl_text:>5}"
        )
    print()


def print_goalies(rows: list[LeagueGoalieRow], limit: int) -> None:
    """Print a goalie table."""
    print()
    print(f"{'#':>3}  {'Goalie':<24} {'Team':<4} {'GP':>3} {'SA':>5} {'SV%':>6} {'GSAA':>7}")
    print("-" * 58)
    for rank, row in enumerate(rows[:limit], 1):
        goalie = row.goalie
        print(
            f"{rank:>3}  {goalie.name[:24]:<24} {goalie.team_abbrev:<4} {goalie.games_played:>3} "
            f"{goalie.shots_against:>5} {goalie.save_percentage:>6.3f} {row.gsaa:>+7.2f}"
        )
    print()


def build_league_cache(config: dict) -> ResultCache | None:
    """On-disk roster cache under the configured cache directory, if caching is enabled."""
    cache_config = config.get("cache", {})
    if not cache_config.get("enabled", False):
        return None
    return ResultCache.on_disk(
        Path(cache_config["directory"]) / "league",
        ttl_seconds=cache_config.get("ttl_hours", 24) * 3600,
    )


def build_pipeline(args: argparse.Namespace) -> tuple[LeaguePipeline, NHLApiClient]:
    """Wire the API client, collector, cache and pipeline from config."""
    client = NHLApiClient(config_path=args.config)
    cache = build_league_cache(client.config)
    if args.refresh:
        client.clear_cache()
        if cache is not None:
            cache.clear()

    pipeline = LeaguePipeline(
        collector=RosterStatsCollector(api_client=client),
        config=load_league_config(args.config),
        season=args.season,
        cache=cache,
    )
    return pipeline, client


def cmd_leaders(args: argparse.Namespace) -> int:
    """Print the skater league table."""
    pipeline, client = build_pipeline(args)
    with client:
        rows = pipeline.build_table(
            teams=args.teams,
            sort_by=args.sort,
            position_group=args.position,
            min_games=args.min_games,
            descending=not args.ascending,
        )

    print(f"League leaders {format_season(pipeline.season)}: {len(rows)} skaters")
    print_leaders(rows, args.sort, args.limit)
    return 0


def cmd_goalies(args: argparse.Namespace) -> int:
    """Print the goalie GSAA table."""
    pipeline, client = build_pipeline(args)
    with client:
        rows = pipeline.build_goalie_table(teams=args.teams, min_games=args.min_games)

    print(f"Goalies {format_season(pipeline.season)}: {len(rows)} goalies")
    print_goalies(rows, args.limit)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Hockey analytics league tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Top defensemen by points per 60
  python -m cli.main leaders --sort points_per_60 --position D --min-games 20

  # Two teams only, lowest Corsi share first
  python -m cli.main leaders --teams TOR MTL --sort corsi_for_pct --ascending

  # Goalies by goals saved above average
  python -m cli.main goalies --min-games 10
        """,
    )
    parser.add_argument("--config", type=str, default=None, help="Path to api_config.yaml")
    parser.add_argument("--season", type=str, default=None, help="Season id, e.g. 20242025")
    parser.add_argument("--refresh", action="store_true", help="Clear cached responses and rosters first")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    leaders_parser = subparsers.add_parser("leaders", help="Skater league table")
    leaders_parser.add_argument("--teams", nargs="+", default=None, help="Team abbreviations")
    leaders_parser.add_argument("--sort", type=str, default="points", help="Metric to sort by (default: points)")
    leaders_parser.add_argument("--position", choices=["F", "D"], default=None, help="Position group")
    leaders_parser.add_argument("--min-games", type=int, default=0, help="Minimum games played")
    leaders_parser.add_argument("--ascending", action="store_true", help="Sort lowest first")
    leaders_parser.add_argument("--limit", type=int, default=25, help="Rows to print (default: 25)")

    goalies_parser = subparsers.add_parser("goalies", help="Goalie GSAA table")
    goalies_parser.add_argument("--teams", nargs="+", default=None, help="Team abbreviations")
    goalies_parser.add_argument("--min-games", type=int, default=0, help="Minimum games played")
    goalies_parser.add_argument("--limit", type=int, default=25, help="Rows to print (default: 25)")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command == "leaders":
            return cmd_leaders(args)
        elif args.command == "goalies":
            return cmd_goalies(args)
        else:
            parser.print_help()
            return 0
    except ValueError as e:
        print(f"Error: {e}")
        return 2
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
