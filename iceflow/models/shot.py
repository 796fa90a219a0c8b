"""
Shot Attempt Model

Pydantic value records for shot attempts used by the expected-goal model
and the possession calculators.
"""

import math
from enum import Enum
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, field_validator

from iceflow.utils.geometry import GOAL_X, GOAL_Y
from iceflow.utils.stat_calculations import first_present, optional_float


class ShotOutcome(str, Enum):
    """Result of a shot attempt."""

    GOAL = "goal"
    SHOT = "shot"  # saved shot on goal
    MISS = "miss"
    BLOCK = "block"


# Provider result names -> outcome
OUTCOME_MAP = {
    "goal": ShotOutcome.GOAL,
    "shot": ShotOutcome.SHOT,
    "shot-on-goal": ShotOutcome.SHOT,
    "sog": ShotOutcome.SHOT,
    "save": ShotOutcome.SHOT,
    "miss": ShotOutcome.MISS,
    "missed": ShotOutcome.MISS,
    "missed-shot": ShotOutcome.MISS,
    "block": ShotOutcome.BLOCK,
    "blocked": ShotOutcome.BLOCK,
    "blocked-shot": ShotOutcome.BLOCK,
}

# Provider shot-type names -> model shot types
SHOT_TYPE_MAP = {
    "wrist": "wrist",
    "slap": "slap",
    "snap": "snap",
    "backhand": "backhand",
    "tip": "tip",
    "tip-in": "tip",
    "tip_in": "tip",
    "deflected": "tip",
    "deflection": "tip",
    "wrap": "wrap",
    "wrap-around": "wrap",
    "wrap_around": "wrap",
}

# Provider strength names -> model strength states
STRENGTH_MAP = {
    "5v5": "5v5",
    "ev": "5v5",
    "even": "5v5",
    "pp": "PP",
    "5v4": "PP",
    "5v3": "PP",
    "4v3": "PP",
    "sh": "SH",
    "pk": "SH",
    "4v5": "SH",
    "3v5": "SH",
    "3v4": "SH",
    "4v4": "4v4",
    "3v3": "3v3",
}


class ShotAttempt(BaseModel):
    """
    A single shot attempt.

    Coordinates are feet from center ice. Distance is feet from the net and
    angle is degrees off the net's center line. Malformed numbers become
    None so the xG model can apply its conservative defaults.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    outcome: ShotOutcome
    x: float | None = None
    y: float | None = None
    distance: float | None = None
    angle: float | None = None
    shot_type: str | None = None
    strength: str | None = None
    rebound: bool = False
    rush_shot: bool = False
    x_goal: float | None = None  # provider-supplied expected goal value

    @field_validator("x", "y", "x_goal", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> float | None:
        return optional_float(value)

    @field_validator("distance", "angle", mode="before")
    @classmethod
    def _coerce_non_negative(cls, value: Any) -> float | None:
        number = optional_float(value)
        return abs(number) if number is not None else None

    @field_validator("shot_type", mode="before")
    @classmethod
    def _normalize_shot_type(cls, value: Any) -> str | None:
        if value is None:
            return None
        return SHOT_TYPE_MAP.get(str(value).strip().lower(), str(value).strip().lower())

    @field_validator("strength", mode="before")
    @classmethod
    def _normalize_strength(cls, value: Any) -> str | None:
        if value is None:
            return None
        return STRENGTH_MAP.get(str(value).strip().lower(), str(value).strip())

    @property
    def is_goal(self) -> bool:
        return self.outcome == ShotOutcome.GOAL

    @property
    def is_on_goal(self) -> bool:
        """Goals and saved shots."""
        return self.outcome in (ShotOutcome.GOAL, ShotOutcome.SHOT)

    @property
    def is_unblocked(self) -> bool:
        """Counts toward Fenwick."""
        return self.outcome != ShotOutcome.BLOCK

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "ShotAttempt":
        """
        Build a shot from a provider record.

        Accepts either ``result`` or ``type`` for the outcome (including NHL
        play-by-play names such as "shot-on-goal"), camelCase or snake_case
        keys, and derives distance/angle from the coordinates when they are
        not supplied.

        Raises:
            ValueError: If the outcome is not a shot attempt
        """
        raw_outcome = (
            record.get("result")
            or record.get("type")
            or record.get("typeDescKey")
            or record.get("event_type")
        )
        outcome = OUTCOME_MAP.get(str(raw_outcome).strip().lower()) if raw_outcome else None
        if outcome is None:
            raise ValueError(f"Not a shot attempt outcome: {raw_outcome!r}")

        x = optional_float(first_present(record, "x", "xCoord", "x_coord"))
        y = optional_float(first_present(record, "y", "yCoord", "y_coord"))
        distance = optional_float(record.get("distance"))
        angle = optional_float(record.get("angle"))

        if x is not None and y is not None:
            derived_distance, derived_angle = shot_geometry(x, y)
            if distance is None:
                distance = derived_distance
            if angle is None:
                angle = derived_angle

        return cls(
            outcome=outcome,
            x=x,
            y=y,
            distance=distance,
            angle=angle,
            shot_type=first_present(record, "shotType", "shot_type"),
            strength=record.get("strength"),
            rebound=bool(first_present(record, "rebound", "isRebound", "is_rebound") or False),
            rush_shot=bool(first_present(record, "rushShot", "rush_shot", "isRushShot", "is_rush") or False),
            x_goal=first_present(record, "xGoal", "x_goal", "xg"),
        )


def shot_geometry(x: float, y: float) -> tuple[float, float]:
    """
    Distance (ft) and angle (degrees off center) to the attacking net.

    Coordinates are folded onto the positive-x end so both halves of the
    sheet measure against the same net.
    """
    x = abs(x)
    dx = GOAL_X - x
    dy = y - GOAL_Y
    distance = math.hypot(dx, dy)
    angle = math.degrees(math.atan2(abs(dy), max(dx, 0.1)))
    return distance, angle


def parse_shot_records(records: list[dict[str, Any]]) -> list[ShotAttempt]:
    """Parse provider records, skipping events that are not shot attempts."""
    shots = []
    for record in records:
        try:
            shots.append(ShotAttempt.from_record(record))
        except ValueError as e:
            logger.debug(f"Skipping record: {e}")
    return shots
