"""Service layer: result caching, batched fan-out and league tables."""

from .batch_runner import BatchRunner
from .cache import ResultCache
from .league import (
    LeagueConfig,
    LeagueGoalieRow,
    LeaguePipeline,
    LeaguePlayerRow,
    build_player_row,
    load_league_config,
    rank_percentiles,
)

__all__ = [
    "BatchRunner",
    "ResultCache",
    "LeagueConfig",
    "LeagueGoalieRow",
    "LeaguePipeline",
    "LeaguePlayerRow",
    "build_player_row",
    "load_league_config",
    "rank_percentiles",
]
