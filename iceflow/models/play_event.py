"""
Play-by-Play Event Model

Flat record for one NHL play-by-play event, as consumed by the zone
transition and momentum processors.
"""

from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, field_validator

from iceflow.utils.stat_calculations import first_present, optional_float, parse_time_to_seconds, safe_int

PERIOD_SECONDS = 1200


def _name_part(value: Any) -> str | None:
    if isinstance(value, dict):
        value = value.get("default")
    return str(value) if value else None


class PlayEvent(BaseModel):
    """
    A single play-by-play event.

    ``team_id`` is the team that owns the event; it is None for events the
    feed does not attribute (stoppages, period starts). Coordinates are
    feet from center ice and None when the feed leaves them out.
    """

    model_config = ConfigDict(frozen=True)

    event_id: int = 0
    type_key: str = ""
    period: int = 1
    time_in_period: str = "00:00"
    team_id: int | None = None
    x: float | None = None
    y: float | None = None
    player_id: int = 0
    player_name: str | None = None

    @field_validator("x", "y", mode="before")
    @classmethod
    def _coerce_coordinate(cls, value: Any) -> float | None:
        return optional_float(value)

    @field_validator("team_id", mode="before")
    @classmethod
    def _coerce_team(cls, value: Any) -> int | None:
        team_id = safe_int(value)
        return team_id or None

    @property
    def seconds_in_period(self) -> int:
        return parse_time_to_seconds(self.time_in_period)

    @property
    def game_seconds(self) -> int:
        """Seconds since the opening faceoff, counting 20-minute periods."""
        return (self.period - 1) * PERIOD_SECONDS + self.seconds_in_period

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "PlayEvent":
        """Build an event from an NHL play-by-play record."""
        details = record.get("details") or {}
        first = _name_part(details.get("firstName"))
        last = _name_part(details.get("lastName"))

        return cls(
            event_id=safe_int(record.get("eventId")),
            type_key=str(record.get("typeDescKey") or ""),
            period=safe_int((record.get("periodDescriptor") or {}).get("number")) or 1,
            time_in_period=record.get("timeInPeriod") or "00:00",
            team_id=details.get("eventOwnerTeamId"),
            x=details.get("xCoord"),
            y=details.get("yCoord"),
            player_id=safe_int(first_present(details, "playerId", "scoringPlayerId", "shootingPlayerId")),
            player_name=f"{first} {last}" if first and last else None,
        )


def parse_play_events(records: list[dict[str, Any]]) -> list[PlayEvent]:
    """Parse play-by-play records in feed order."""
    events = [PlayEvent.from_record(record) for record in records]
    logger.debug(f"Parsed {len(events)} play-by-play events")
    return events
