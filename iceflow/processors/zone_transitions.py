"""
Zone Transition Processor

Detects blue-line crossings in a play-by-play sequence and classifies them:
- Entries (neutral zone into either end zone): controlled carry vs dump-in,
  whether possession was sustained, and whether a shot followed within 5 s
- Exits (either end zone into the neutral zone): carry, pass or clear, and
  whether the exiting team kept the puck

Teams switch ends every period, so both ends of the sheet are tracked.
"""

from dataclasses import dataclass
from typing import Callable, Sequence

from iceflow.models.play_event import PlayEvent
from iceflow.utils.geometry import BLUE_LINE_X
from iceflow.utils.stat_calculations import round_half_up

NEUTRAL = "neutral"

QUICK_SHOT_SECONDS = 5

POSSESSION_LOST_TYPES = ("faceoff", "giveaway", "stoppage")
POSSESSION_TYPES = ("shot-on-goal", "goal", "hit", "takeaway")
SUSTAINED_TYPES = ("shot-on-goal", "goal", "hit")
SHOT_TYPES = ("shot-on-goal", "missed-shot", "goal")
EXIT_TURNOVER_TYPES = ("takeaway", "shot-on-goal", "hit")


@dataclass(frozen=True)
class ZoneEntry:
    """A crossing from the neutral zone into an end zone."""

    event_id: int
    player_id: int
    team_id: int
    period: int
    time_in_period: str
    entry_type: str  # "controlled" or "dump"
    x: float
    y: float
    success: bool  # possession sustained after the entry
    shot_within_5_seconds: bool
    player_name: str | None = None


@dataclass(frozen=True)
class ZoneExit:
    """A crossing from an end zone into the neutral zone."""

    event_id: int
    player_id: int
    team_id: int
    period: int
    time_in_period: str
    exit_type: str  # "controlled", "pass" or "clear"
    x: float
    y: float
    success: bool  # no immediate turnover
    player_name: str | None = None


@dataclass(frozen=True)
class ZoneAnalytics:
    """Entry and exit totals with their rates (0-100, 1 decimal)."""

    entries: tuple[ZoneEntry, ...]
    exits: tuple[ZoneExit, ...]
    total_entries: int
    controlled_entries: int
    dump_ins: int
    controlled_entry_rate: float
    total_exits: int
    successful_exits: int
    exit_success_rate: float


def rink_end(x: float) -> str:
    """
    Which part of the sheet an x coordinate is in.

    Returns "positive" past the +x blue line, "negative" past the -x blue
    line and "neutral" between them (the lines themselves are neutral).
    """
    if x > BLUE_LINE_X:
        return "positive"
    if x < -BLUE_LINE_X:
        return "negative"
    return NEUTRAL


def _is_entry(prev_x: float, curr_x: float) -> bool:
    return rink_end(prev_x) == NEUTRAL and rink_end(curr_x) != NEUTRAL


def _is_exit(prev_x: float, curr_x: float) -> bool:
    return rink_end(prev_x) != NEUTRAL and rink_end(curr_x) == NEUTRAL


def _crossings(events: Sequence[PlayEvent], crossed: Callable[[float, float], bool]) -> list[int]:
    """Indices of owned, located events that cross a blue line from the event before."""
    indices = []
    for i in range(1, len(events)):
        prev, curr = events[i - 1], events[i]
        if prev.x is None or curr.x is None or curr.team_id is None:
            continue
        if crossed(prev.x, curr.x):
            indices.append(i)
    return indices


def _entry_type(events: Sequence[PlayEvent], index: int) -> str:
    prev, curr = events[index - 1], events[index]
    team_id = curr.team_id

    if curr.type_key in POSSESSION_LOST_TYPES:
        return "dump"
    if prev.team_id == team_id or curr.type_key in POSSESSION_TYPES:
        return "controlled"

    # Possession changed hands at the line; a carry shows up as repeated
    # events by the entering team in the same end
    end = rink_end(curr.x)
    in_zone = 0
    for event in events[index : index + 4]:
        if event.team_id != team_id:
            break
        if event.x is not None and rink_end(event.x) == end:
            in_zone += 1
    return "controlled" if in_zone >= 2 else "dump"


def _entry_sustained(events: Sequence[PlayEvent], index: int, team_id: int) -> bool:
    for event in events[index + 1 : index + 5]:
        if event.team_id is not None and event.team_id != team_id:
            return False
        if event.type_key == "faceoff":
            return False
        if event.type_key in SUSTAINED_TYPES:
            return True
    return True


def _shot_follows(events: Sequence[PlayEvent], index: int, within_seconds: int = QUICK_SHOT_SECONDS) -> bool:
    entry_time = events[index].seconds_in_period
    for event in events[index + 1 : index + 10]:
        if abs(event.seconds_in_period - entry_time) > within_seconds:
            break
        if event.type_key in SHOT_TYPES:
            return True
    return False


def _exit_type(event: PlayEvent) -> str:
    if event.type_key in ("hit", "takeaway"):
        return "clear"
    if event.type_key in ("shot-on-goal", "pass"):
        return "pass"
    return "controlled"


def _exit_succeeded(events: Sequence[PlayEvent], index: int, team_id: int) -> bool:
    for event in events[index + 1 : index + 4]:
        if (
            event.team_id is not None
            and event.team_id != team_id
            and event.type_key in EXIT_TURNOVER_TYPES
        ):
            return False
    return True


def detect_zone_entries(events: Sequence[PlayEvent]) -> list[ZoneEntry]:
    """
    Find zone entries in a play-by-play sequence.

    An entry is an owned event past a blue line whose predecessor was in
    the neutral zone. Events without an x coordinate or owning team never
    count as either side of a crossing.

    Args:
        events: Events in feed order

    Returns:
        Entries in feed order
    """
    entries = []
    for i in _crossings(events, _is_entry):
        event = events[i]
        entries.append(
            ZoneEntry(
                event_id=event.event_id,
                player_id=event.player_id,
                team_id=event.team_id,
                period=event.period,
                time_in_period=event.time_in_period,
                entry_type=_entry_type(events, i),
                x=event.x,
                y=event.y or 0.0,
                success=_entry_sustained(events, i, event.team_id),
                shot_within_5_seconds=_shot_follows(events, i),
                player_name=event.player_name,
            )
        )
    return entries


def detect_zone_exits(events: Sequence[PlayEvent]) -> list[ZoneExit]:
    """Find zone exits in a play-by-play sequence (see detect_zone_entries)."""
    exits = []
    for i in _crossings(events, _is_exit):
        event = events[i]
        exits.append(
            ZoneExit(
                event_id=event.event_id,
                player_id=event.player_id,
                team_id=event.team_id,
                period=event.period,
                time_in_period=event.time_in_period,
                exit_type=_exit_type(event),
                x=event.x,
                y=event.y or 0.0,
                success=_exit_succeeded(events, i, event.team_id),
                player_name=event.player_name,
            )
        )
    return exits


def calculate_zone_analytics(
    entries: Sequence[ZoneEntry], exits: Sequence[ZoneExit]
) -> ZoneAnalytics:
    """Controlled-entry rate and exit success rate; both 0 with nothing to rate."""
    total_entries = len(entries)
    controlled = sum(1 for e in entries if e.entry_type == "controlled")
    dump_ins = sum(1 for e in entries if e.entry_type == "dump")
    total_exits = len(exits)
    successful_exits = sum(1 for e in exits if e.success)

    return ZoneAnalytics(
        entries=tuple(entries),
        exits=tuple(exits),
        total_entries=total_entries,
        controlled_entries=controlled,
        dump_ins=dump_ins,
        controlled_entry_rate=round_half_up(controlled / total_entries * 100, 1) if total_entries else 0.0,
        total_exits=total_exits,
        successful_exits=successful_exits,
        exit_success_rate=round_half_up(successful_exits / total_exits * 100, 1) if total_exits else 0.0,
    )


def analyze_zone_transitions(events: Sequence[PlayEvent]) -> ZoneAnalytics:
    """Detect entries and exits, then rate them."""
    return calculate_zone_analytics(detect_zone_entries(events), detect_zone_exits(events))
