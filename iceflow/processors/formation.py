"""
Formation Deviation Processor

Compares on-ice positions against fixed positional benchmarks for a game
situation and grades each player's distance from their expected spot.
"""

from dataclasses import dataclass
from typing import Any, Iterable

from iceflow.models.movement import MovementZone, zone_from_x
from iceflow.utils.geometry import calculate_direction, calculate_distance
from iceflow.utils.stat_calculations import optional_float

DEFAULT_SITUATION = "5v5_neutral"

# Expected (x, y) by role, NHL coordinates with the team attacking toward +x
EXPECTED_POSITIONS: dict[str, dict[str, tuple[float, float]]] = {
    "5v5_neutral": {
        "C": (0, 0),
        "LW": (-10, -25),
        "RW": (-10, 25),
        "LD": (-40, -15),
        "RD": (-40, 15),
    },
    "5v5_offensive": {
        "C": (70, 0),
        "LW": (80, -20),
        "RW": (80, 20),
        "LD": (50, -25),
        "RD": (50, 25),
    },
    "5v5_defensive": {
        "C": (-50, 0),
        "LW": (-45, -15),
        "RW": (-45, 15),
        "LD": (-70, -15),
        "RD": (-70, 15),
    },
    "breakout": {
        "C": (-30, 0),
        "LW": (-20, -35),
        "RW": (-20, 35),
        "LD": (-75, -20),
        "RD": (-75, 20),
    },
    "forecheck_1_2_2": {
        "C": (75, 0),  # F1
        "LW": (55, -20),
        "RW": (55, 20),
        "LD": (30, -15),
        "RD": (30, 15),
    },
    "PP_umbrella": {
        "C": (75, 0),  # net front
        "LW": (65, -25),
        "RW": (65, 25),
        "LD": (50, -30),
        "RD": (50, 30),
    },
    # Four skaters: two forwards up top, two defensemen low
    "PK_box": {
        "C": (-65, -10),
        "LW": (-65, 10),
        "LD": (-80, -10),
        "RD": (-80, 10),
    },
}

GREEN_THRESHOLD = 5.0  # ft
YELLOW_THRESHOLD = 10.0  # ft

# Each foot of average deviation costs 2.5 points; 40 ft scores 0
SCORE_PER_FOOT = 2.5


@dataclass(frozen=True)
class PositionDeviation:
    """One player's actual vs expected position."""

    player_id: int
    player_name: str
    position: str
    actual_x: float
    actual_y: float
    expected_x: float
    expected_y: float
    deviation_distance: float  # ft
    deviation_angle: float  # radians, bearing from expected to actual
    severity: str  # green / yellow / red
    timestamp: float = 0.0


@dataclass(frozen=True)
class FormationSnapshot:
    """Formation state of a team at one instant."""

    timestamp: float
    period: int
    time_in_period: str
    situation: str
    players: tuple[PositionDeviation, ...]
    team_deviation_avg: float

    @property
    def is_in_position(self) -> bool:
        """True when every graded player is within the green threshold."""
        return all(p.severity == "green" for p in self.players)

    @property
    def formation_score(self) -> float:
        return calculate_team_formation_score(self.players)


def deviation_severity(distance: float) -> str:
    """Severity tier for a deviation distance."""
    if distance < GREEN_THRESHOLD:
        return "green"
    if distance < YELLOW_THRESHOLD:
        return "yellow"
    return "red"


def calculate_formation_deviation(
    actual_positions: Iterable[dict[str, Any]],
    situation: str = DEFAULT_SITUATION,
    timestamp: float = 0.0,
) -> list[PositionDeviation]:
    """
    Grade actual positions against a situation's benchmark table.

    Players whose role has no entry in the table (goalies, the missing
    winger on the penalty kill) are skipped, as are players without a
    usable x/y coordinate. Unknown situations use ``5v5_neutral``.

    Args:
        actual_positions: Dicts with player_id, player_name, position, x, y
        situation: Key into EXPECTED_POSITIONS
        timestamp: Timestamp stamped onto each deviation

    Returns:
        List of PositionDeviation in input order
    """
    expected_map = EXPECTED_POSITIONS.get(situation, EXPECTED_POSITIONS[DEFAULT_SITUATION])

    deviations = []
    for actual in actual_positions:
        role = actual.get("position", "")
        expected = expected_map.get(role)
        if expected is None:
            continue

        x = optional_float(actual.get("x"))
        y = optional_float(actual.get("y"))
        if x is None or y is None:
            continue

        expected_x, expected_y = expected
        distance = calculate_distance(x, y, expected_x, expected_y)

        deviations.append(
            PositionDeviation(
                player_id=actual.get("player_id", 0),
                player_name=actual.get("player_name", ""),
                position=role,
                actual_x=x,
                actual_y=y,
                expected_x=expected_x,
                expected_y=expected_y,
                deviation_distance=distance,
                deviation_angle=calculate_direction(expected_x, expected_y, x, y),
                severity=deviation_severity(distance),
                timestamp=timestamp,
            )
        )

    return deviations


def calculate_team_formation_score(deviations: Iterable[PositionDeviation]) -> float:
    """Team formation score 0-100 from the average deviation; 0 with no players."""
    distances = [d.deviation_distance for d in deviations]
    if not distances:
        return 0.0
    avg = sum(distances) / len(distances)
    return max(0.0, min(100.0, 100 - avg * SCORE_PER_FOOT))


def detect_formation_situation(
    puck_x: float,
    puck_y: float,
    strength: str = "5v5",
    possession: str = "team",
) -> str:
    """
    Pick the benchmark table for a puck location and game state.

    Args:
        puck_x: Puck x coordinate
        puck_y: Puck y coordinate (does not affect the choice)
        strength: "5v5", "PP" or "PK"
        possession: "team", "opponent" or "loose"

    Returns:
        Situation key for EXPECTED_POSITIONS
    """
    if strength == "PP":
        return "PP_umbrella"
    if strength == "PK":
        return "PK_box"

    zone = zone_from_x(puck_x)
    if possession == "team":
        if zone == MovementZone.OFFENSIVE:
            return "forecheck_1_2_2"
        if zone == MovementZone.DEFENSIVE:
            return "breakout"

    if zone == MovementZone.DEFENSIVE:
        return "5v5_defensive"
    if zone == MovementZone.OFFENSIVE:
        return "5v5_offensive"
    return DEFAULT_SITUATION


def build_formation_snapshot(
    actual_positions: Iterable[dict[str, Any]],
    situation: str = DEFAULT_SITUATION,
    period: int = 1,
    time_in_period: str = "0:00",
    timestamp: float = 0.0,
) -> FormationSnapshot:
    """Grade a set of positions and wrap them in a snapshot."""
    players = tuple(calculate_formation_deviation(actual_positions, situation, timestamp))
    avg = sum(p.deviation_distance for p in players) / len(players) if players else 0.0

    return FormationSnapshot(
        timestamp=timestamp,
        period=period,
        time_in_period=time_in_period,
        situation=situation if situation in EXPECTED_POSITIONS else DEFAULT_SITUATION,
        players=players,
        team_deviation_avg=avg,
    )
