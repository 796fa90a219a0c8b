"""
Team Flow Field Processor

Aggregates skating samples into a rectangular grid over the sheet. Each
cell reports the circular-mean direction of travel, average speed, the
share of samples heading toward the attacking end, and a magnitude
normalized against the busiest cell.

A half-rink view folds the defensive half onto the offensive half so a
team's tendencies can be shown on a single end.
"""

from collections import defaultdict
from dataclasses import dataclass, replace
from functools import reduce
from typing import Iterable

from loguru import logger

from iceflow.models.movement import SkatingTrail
from iceflow.utils.geometry import (
    RINK_MAX_X,
    RINK_MAX_Y,
    RINK_MIN_X,
    RINK_MIN_Y,
    CircularAccumulator,
    is_toward_attacking_end,
    reflect_direction,
)

DEFAULT_GRID_WIDTH = 10
DEFAULT_GRID_HEIGHT = 8

SITUATIONS = ("5v5", "PP", "PK", "forecheck", "breakout", "all")

CellKey = tuple[int, int]


@dataclass(frozen=True)
class FlowFieldCell:
    """One grid cell of a flow field."""

    cell_id: str
    grid_x: int
    grid_y: int
    center_x: float
    center_y: float
    direction: float  # circular mean, radians in [0, 2*pi)
    magnitude: float  # frequency / busiest cell
    frequency: int
    avg_speed: float
    success_rate: float


@dataclass(frozen=True)
class TeamFlowField:
    """Movement tendencies of one team across the sheet."""

    team_id: int
    team_abbrev: str
    cells: tuple[FlowFieldCell, ...]
    grid_width: int
    grid_height: int
    situation: str = "all"
    sample_size: int = 0  # trails included
    games_analyzed: int = 0
    half_rink: bool = False

    @property
    def total_frequency(self) -> int:
        return sum(cell.frequency for cell in self.cells)

    def get_cell(self, grid_x: int, grid_y: int) -> FlowFieldCell | None:
        """Look up a cell by grid coordinates."""
        for cell in self.cells:
            if cell.grid_x == grid_x and cell.grid_y == grid_y:
                return cell
        return None


def _cell_size(grid_width: int, grid_height: int) -> tuple[float, float]:
    return (
        (RINK_MAX_X - RINK_MIN_X) / grid_width,
        (RINK_MAX_Y - RINK_MIN_Y) / grid_height,
    )


def _cell_center(key: CellKey, grid_width: int, grid_height: int) -> tuple[float, float]:
    cell_width, cell_height = _cell_size(grid_width, grid_height)
    gx, gy = key
    return RINK_MIN_X + (gx + 0.5) * cell_width, RINK_MIN_Y + (gy + 0.5) * cell_height


def _build_cells(
    accumulators: dict[CellKey, CircularAccumulator],
    grid_width: int,
    grid_height: int,
) -> tuple[FlowFieldCell, ...]:
    """Turn accumulators into cells, normalizing magnitude against the busiest one."""
    max_frequency = max((acc.weight for acc in accumulators.values()), default=0.0)

    cells = []
    for key in sorted(accumulators):
        acc = accumulators[key]
        center_x, center_y = _cell_center(key, grid_width, grid_height)
        cells.append(
            FlowFieldCell(
                cell_id=f"{key[0]}-{key[1]}",
                grid_x=key[0],
                grid_y=key[1],
                center_x=center_x,
                center_y=center_y,
                direction=acc.mean_direction,
                magnitude=acc.weight / max_frequency if max_frequency > 0 else 0.0,
                frequency=int(round(acc.weight)),
                avg_speed=acc.mean_speed,
                success_rate=acc.success_rate,
            )
        )
    return tuple(cells)


def calculate_team_flow_field(
    trails: Iterable[SkatingTrail],
    team_id: int,
    team_abbrev: str = "",
    situation: str = "all",
    grid_width: int = DEFAULT_GRID_WIDTH,
    grid_height: int = DEFAULT_GRID_HEIGHT,
) -> TeamFlowField:
    """
    Build a team's flow field from skating trails.

    Samples outside the sheet are dropped. A sample counts as a success when
    its direction points toward the attacking end.

    Args:
        trails: Skating trails (other teams' trails are ignored)
        team_id: Team to aggregate
        team_abbrev: Team abbreviation for display
        situation: Situation label
        grid_width: Columns across the length of the sheet
        grid_height: Rows across the width of the sheet

    Returns:
        TeamFlowField with one cell per grid position
    """
    if grid_width < 1 or grid_height < 1:
        raise ValueError(f"Grid must be at least 1x1, got {grid_width}x{grid_height}")

    cell_width, cell_height = _cell_size(grid_width, grid_height)
    accumulators = {
        (gx, gy): CircularAccumulator()
        for gx in range(grid_width)
        for gy in range(grid_height)
    }

    games: set[int] = set()
    sample_size = 0
    dropped = 0

    for trail in trails:
        if trail.team_id != team_id:
            continue
        sample_size += 1
        games.add(trail.game_id)

        for point in trail.points:
            gx = int((point.x - RINK_MIN_X) // cell_width)
            gy = int((point.y - RINK_MIN_Y) // cell_height)
            if not (0 <= gx < grid_width and 0 <= gy < grid_height):
                dropped += 1
                continue

            observation = CircularAccumulator.from_direction(
                point.direction,
                speed=point.speed,
                success=1.0 if is_toward_attacking_end(point.direction) else 0.0,
            )
            accumulators[(gx, gy)] = accumulators[(gx, gy)].combine(observation)

    if dropped:
        logger.debug(f"Dropped {dropped} off-sheet samples for team {team_id}")

    return TeamFlowField(
        team_id=team_id,
        team_abbrev=team_abbrev,
        cells=_build_cells(accumulators, grid_width, grid_height),
        grid_width=grid_width,
        grid_height=grid_height,
        situation=situation,
        sample_size=sample_size,
        games_analyzed=len(games),
    )


def to_half_rink(field: TeamFlowField) -> TeamFlowField:
    """
    Fold the defensive half of a flow field onto the offensive half.

    Cells whose center lies in the defensive half move to the mirrored
    column (``grid_width - 1 - grid_x``) with their direction reflected
    across the red line. Cells sharing a destination are merged with
    count-weighted direction, speed and success rate. Contributions are
    reduced in a fixed key order so the input cell order never matters.
    Total frequency is preserved.
    """
    if field.half_rink:
        return field

    contributions: dict[CellKey, list[tuple[CellKey, CircularAccumulator]]] = defaultdict(list)
    for cell in field.cells:
        source = (cell.grid_x, cell.grid_y)
        direction = cell.direction
        target = source
        if cell.center_x < 0:
            target = (field.grid_width - 1 - cell.grid_x, cell.grid_y)
            direction = reflect_direction(direction)

        contributions[target].append(
            (
                source,
                CircularAccumulator.from_direction(
                    direction,
                    speed=cell.avg_speed,
                    success=cell.success_rate,
                    weight=float(cell.frequency),
                ),
            )
        )

    merged = {
        target: reduce(
            CircularAccumulator.combine,
            (acc for _, acc in sorted(parts, key=lambda part: part[0])),
            CircularAccumulator(),
        )
        for target, parts in contributions.items()
    }

    return replace(
        field,
        cells=_build_cells(merged, field.grid_width, field.grid_height),
        half_rink=True,
    )


def filter_flow_field_by_situation(field: TeamFlowField, situation: str) -> TeamFlowField:
    """
    Relabel a flow field with a game situation.

    Tracking samples carry no game-state tags, so the cells are unchanged.
    """
    if situation not in SITUATIONS:
        raise ValueError(f"Unknown situation: {situation}")
    return replace(field, situation=situation)
