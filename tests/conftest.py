"""
Pytest Configuration and Fixtures

Shared fixtures and configuration for the iceflow test suite.
"""

from typing import Any
from unittest.mock import MagicMock

import pytest

from iceflow.models.movement import SkatingTrail
from iceflow.models.player import RosterPlayerStats
from iceflow.models.shot import ShotAttempt


@pytest.fixture
def api_config() -> dict[str, Any]:
    """API configuration with caching disabled and no delays."""
    return {
        "api": {
            "base_url": "https://api-web.nhle.com",
            "timeout": 5,
            "rate_limit": {
                "requests_per_minute": 1000,
                "request_delay": 0.0,
                "max_retries": 2,
                "retry_delay": 1.0,
                "retry_backoff": 2.0,
            },
        },
        "cache": {"enabled": False, "ttl_hours": 1, "directory": "data/cache"},
        "endpoints": {
            "club_stats": "/v1/club-stats/{team_abbrev}/{season}/{game_type}",
        },
        "league": {"batch_size": 4, "batch_delay_seconds": 0.0, "teams": ["EDM", "TOR"]},
    }


@pytest.fixture
def club_stats_response() -> dict[str, Any]:
    """Club-stats payload with two skaters and one goalie."""
    return {
        "season": "20242025",
        "gameType": 2,
        "skaters": [
            {
                "playerId": 8478402,
                "firstName": {"default": "Connor"},
                "lastName": {"default": "McDavid"},
                "positionCode": "C",
                "gamesPlayed": 60,
                "goals": 30,
                "assists": 60,
                "points": 90,
                "plusMinus": 20,
                "penaltyMinutes": 20,
                "powerPlayGoals": 8,
                "powerPlayAssists": 20,
                "shorthandedGoals": 1,
                "shorthandedAssists": 0,
                "gameWinningGoals": 6,
                "overtimeGoals": 2,
                "shots": 200,
                "shootingPctg": 0.15,
                "avgTimeOnIcePerGame": 1320.0,
                "avgShiftsPerGame": 22.1,
                "faceoffWinPctg": 0.53,
            },
            {
                "playerId": 8477934,
                "firstName": {"default": "Evan"},
                "lastName": {"default": "Bouchard"},
                "positionCode": "D",
                "gamesPlayed": 60,
                "goals": 10,
                "assists": 40,
                "points": 50,
                "plusMinus": 5,
                "shots": 150,
                "shootingPctg": 0.0667,
                "avgTimeOnIcePerGame": "23:30",
            },
        ],
        "goalies": [
            {
                "playerId": 8479973,
                "firstName": {"default": "Stuart"},
                "lastName": {"default": "Skinner"},
                "gamesPlayed": 50,
                "shotsAgainst": 1300,
                "goalsAgainst": 117,
                "saves": 1183,
            },
        ],
    }


@pytest.fixture
def roster_players() -> list[RosterPlayerStats]:
    """A small mixed roster of season lines."""
    return [
        RosterPlayerStats(player_id=1, name="Center One", team_abbrev="EDM", position="C",
                          games_played=60, goals=30, assists=40, points=70, shots=180,
                          plus_minus=10, avg_toi_seconds=1200),
        RosterPlayerStats(player_id=2, name="Wing Two", team_abbrev="EDM", position="LW",
                          games_played=10, goals=2, assists=3, points=5, shots=20,
                          plus_minus=-2, avg_toi_seconds=900),
        RosterPlayerStats(player_id=3, name="Defense Three", team_abbrev="TOR", position="D",
                          games_played=55, goals=8, assists=30, points=38, shots=120,
                          plus_minus=4, avg_toi_seconds=1380),
        RosterPlayerStats(player_id=4, name="Wing Four", team_abbrev="TOR", position="RW",
                          games_played=58, goals=25, assists=20, points=45, shots=160,
                          plus_minus=0, avg_toi_seconds=1080),
    ]


@pytest.fixture
def shots_for() -> list[ShotAttempt]:
    """Four attempts: one of each outcome."""
    return [
        ShotAttempt(outcome="goal", distance=15, angle=10),
        ShotAttempt(outcome="shot", distance=30, angle=20),
        ShotAttempt(outcome="miss", distance=40, angle=30),
        ShotAttempt(outcome="block", distance=50, angle=15),
    ]


@pytest.fixture
def shots_against() -> list[ShotAttempt]:
    """Two attempts against: a save and a miss."""
    return [
        ShotAttempt(outcome="shot", distance=25, angle=5),
        ShotAttempt(outcome="miss", distance=35, angle=25),
    ]


@pytest.fixture
def tracking_samples() -> list[dict[str, Any]]:
    """Raw samples for one shift, deliberately out of timestamp order."""
    return [
        {"x": 10.0, "y": 0.0, "timestampMs": 1000, "speedFtPerSec": 20.0, "directionRadians": 0.0},
        {"x": 0.0, "y": 0.0, "timestampMs": 0, "speedFtPerSec": 10.0, "directionRadians": 0.0},
        {"x": 30.0, "y": 0.0, "timestampMs": 2000, "speedFtPerSec": 20.0, "directionRadians": 0.0},
        {"x": 30.0, "y": 10.0, "timestampMs": 3000, "speedFtPerSec": 10.0, "directionRadians": 1.5707963},
    ]


@pytest.fixture
def skating_trail(tracking_samples) -> SkatingTrail:
    """Trail built from tracking_samples."""
    return SkatingTrail.from_samples(
        tracking_samples,
        player_id=97,
        player_name="Connor McDavid",
        team_id=22,
        game_id=2024020001,
        period=1,
        start_time="05:00",
        end_time="05:45",
    )


@pytest.fixture
def mock_api_client(club_stats_response) -> MagicMock:
    """Mock NHL API client returning club_stats_response."""
    client = MagicMock()
    client.get_club_stats.return_value = club_stats_response
    return client
