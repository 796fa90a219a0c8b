"""
Expected Goals Model

Logistic-regression estimate of the probability that a shot attempt becomes
a goal, from distance, angle, shot type, strength state and rebound/rush
context. Coefficients follow public xG research (distance and angle are the
dominant terms; categorical context enters as log-odds adjustments).
"""

import math
from dataclasses import dataclass
from typing import Iterable

from iceflow.models.shot import ShotAttempt
from iceflow.utils.stat_calculations import optional_float, round_half_up


@dataclass(frozen=True)
class XGModelCoefficients:
    """Coefficients for the logistic xG model."""

    intercept: float = -0.5
    distance: float = -0.045  # per foot
    angle: float = -0.025  # per degree off center
    rebound_bonus: float = 0.6
    rush_shot_bonus: float = 0.0  # no edge once distance/angle are controlled for


DEFAULT_COEFFICIENTS = XGModelCoefficients()

SHOT_TYPE_MULTIPLIERS = {
    "wrist": 1.0,
    "slap": 0.85,
    "snap": 1.05,
    "backhand": 0.80,
    "tip": 1.35,
    "wrap": 0.70,
}

STRENGTH_MULTIPLIERS = {
    "5v5": 1.0,
    "PP": 1.10,
    "SH": 0.90,
    "4v4": 1.05,
    "3v3": 1.08,
}

# Plausible ranges; missing values take the far end
MAX_DISTANCE = 200.0
MAX_ANGLE = 90.0

# Output clamp for a single shot
MIN_XG = 0.005
MAX_XG = 0.60

HIGH_DANGER_XG = 0.15
MEDIUM_DANGER_XG = 0.08


@dataclass(frozen=True)
class XGPrediction:
    """Model output for one shot."""

    x_goal: float
    danger_level: str  # "low", "medium" or "high"
    shot: ShotAttempt


def _bounded(value: float | None, upper: float) -> float:
    number = optional_float(value)
    if number is None:
        return upper
    return max(0.0, min(upper, number))


def danger_level(x_goal: float) -> str:
    """Danger tier for an xG value."""
    if x_goal >= HIGH_DANGER_XG:
        return "high"
    if x_goal >= MEDIUM_DANGER_XG:
        return "medium"
    return "low"


def calculate_xg(
    shot: ShotAttempt,
    coefficients: XGModelCoefficients = DEFAULT_COEFFICIENTS,
) -> XGPrediction:
    """
    Predict the goal probability of a shot from its features.

    Missing or malformed distance/angle are treated as the least dangerous
    plausible value (200 ft, 90 degrees) so sums over many shots stay defined.
    The result is clamped to [0.005, 0.60].

    Args:
        shot: Shot attempt
        coefficients: Model coefficients

    Returns:
        XGPrediction with probability and danger tier
    """
    distance = _bounded(shot.distance, MAX_DISTANCE)
    angle = _bounded(shot.angle, MAX_ANGLE)

    logit = coefficients.intercept
    logit += distance * coefficients.distance
    logit += angle * coefficients.angle

    # Multipliers enter as log-odds; unknown keys are neutral
    logit += math.log(SHOT_TYPE_MULTIPLIERS.get(shot.shot_type or "wrist", 1.0))
    logit += math.log(STRENGTH_MULTIPLIERS.get(shot.strength or "5v5", 1.0))

    if shot.rebound:
        logit += coefficients.rebound_bonus
    if shot.rush_shot:
        logit += coefficients.rush_shot_bonus

    probability = 1 / (1 + math.exp(-logit))
    x_goal = max(MIN_XG, min(MAX_XG, probability))

    return XGPrediction(x_goal=x_goal, danger_level=danger_level(x_goal), shot=shot)


def shot_expected_goal(shot: ShotAttempt) -> float:
    """xG for a shot, using a provider-supplied value verbatim when present."""
    if shot.x_goal is not None:
        return shot.x_goal
    return calculate_xg(shot).x_goal


def calculate_batch_xg(shots: Iterable[ShotAttempt]) -> list[XGPrediction]:
    """Predict every shot in a collection."""
    return [calculate_xg(shot) for shot in shots]


def calculate_total_xg(shots: Iterable[ShotAttempt]) -> float:
    """Sum of expected goals over a collection of shots."""
    return sum((shot_expected_goal(shot) for shot in shots), 0.0)


def calculate_xg_differential(
    shots_for: Iterable[ShotAttempt],
    shots_against: Iterable[ShotAttempt],
) -> dict[str, float]:
    """
    Expected goals for vs against.

    Returns:
        Dictionary with xgf, xga, xg_diff (2 decimals) and xg_pct (1 decimal,
        50 when neither side has any expected goals)
    """
    xgf = calculate_total_xg(shots_for)
    xga = calculate_total_xg(shots_against)
    total = xgf + xga
    xg_pct = xgf / total * 100 if total > 0 else 50.0

    return {
        "xgf": round_half_up(xgf, 2),
        "xga": round_half_up(xga, 2),
        "xg_diff": round_half_up(xgf - xga, 2),
        "xg_pct": round_half_up(xg_pct, 1),
    }


def is_high_danger(shot: ShotAttempt) -> bool:
    """Slot shots: closer than 25 ft and within 45 degrees of center."""
    if shot.distance is None or shot.angle is None:
        return False
    return shot.distance < 25 and shot.angle < 45


def shot_quality_label(x_goal: float) -> str:
    """Display label for an xG value."""
    return f"{danger_level(x_goal).title()} Danger"


def calculate_goals_above_expected(actual_goals: int, shots: Iterable[ShotAttempt]) -> float:
    """Actual goals minus expected goals (signed, 2 decimals)."""
    return round_half_up(actual_goals - calculate_total_xg(shots), 2)
