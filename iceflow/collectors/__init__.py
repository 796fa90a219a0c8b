"""
Data Collectors Module

This module contains collectors for fetching season data from the NHL API.

Collectors:
    - NHLApiClient: Core API client (rate limiting, caching, retries)
    - RosterStatsCollector: Team skater and goalie season lines
"""

from iceflow.collectors.nhl_api import NHLApiClient, RateLimiter, current_season, load_config
from iceflow.collectors.roster_stats import NHL_TEAMS, RosterStatsCollector, parse_club_stats

__all__ = [
    "NHLApiClient",
    "RateLimiter",
    "current_season",
    "load_config",
    "NHL_TEAMS",
    "RosterStatsCollector",
    "parse_club_stats",
]
