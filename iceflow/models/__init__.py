"""
Data Models Module

This module contains Pydantic models for the records the calculators consume.

Models:
    - ShotAttempt: Shot location, outcome and context
    - MovementPoint / SkatingTrail: Tracking samples for one player-shift
    - PlayEvent: One play-by-play event with owner, clock and location
    - RosterPlayerStats / GoalieSeasonStats: Season statistics lines
"""

from iceflow.models.movement import MovementPoint, MovementZone, SkatingTrail, ZoneTime, zone_from_x
from iceflow.models.play_event import PlayEvent, parse_play_events
from iceflow.models.player import (
    GoalieSeasonStats,
    PlayerPosition,
    RosterPlayerStats,
    position_group,
)
from iceflow.models.shot import ShotAttempt, ShotOutcome, parse_shot_records, shot_geometry

__all__ = [
    "MovementPoint",
    "MovementZone",
    "SkatingTrail",
    "ZoneTime",
    "zone_from_x",
    "PlayEvent",
    "parse_play_events",
    "GoalieSeasonStats",
    "PlayerPosition",
    "RosterPlayerStats",
    "position_group",
    "ShotAttempt",
    "ShotOutcome",
    "parse_shot_records",
    "shot_geometry",
]
