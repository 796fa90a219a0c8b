"""
Tests for Zone Transition Processor
"""

import pytest

from iceflow.models.play_event import PlayEvent
from iceflow.processors.zone_transitions import (
    ZoneEntry,
    ZoneExit,
    analyze_zone_transitions,
    calculate_zone_analytics,
    detect_zone_entries,
    detect_zone_exits,
    rink_end,
)


def _event(event_id: int, type_key: str, team_id: int | None, x: float | None, time: str = "05:00") -> PlayEvent:
    return PlayEvent(event_id=event_id, type_key=type_key, team_id=team_id, x=x, y=0.0, time_in_period=time)


def _entry(entry_type: str, success: bool = True) -> ZoneEntry:
    return ZoneEntry(
        event_id=1, player_id=1, team_id=10, period=1, time_in_period="05:00",
        entry_type=entry_type, x=50.0, y=0.0, success=success, shot_within_5_seconds=False,
    )


def _exit(success: bool) -> ZoneExit:
    return ZoneExit(
        event_id=2, player_id=1, team_id=10, period=1, time_in_period="06:00",
        exit_type="controlled", x=0.0, y=0.0, success=success,
    )


class TestRinkEnd:
    """Tests for rink_end."""

    @pytest.mark.parametrize(
        "x,expected",
        [(50, "positive"), (-50, "negative"), (0, "neutral"), (25, "neutral"), (-25, "neutral"), (25.1, "positive")],
    )
    def test_blue_lines(self, x, expected):
        assert rink_end(x) == expected


class TestZoneEntries:
    """Tests for detect_zone_entries."""

    def test_same_team_carry_is_controlled(self):
        events = [
            _event(1, "shot-on-goal", 10, 0, "05:00"),
            _event(2, "shot-on-goal", 10, 50, "05:05"),
        ]

        entries = detect_zone_entries(events)

        assert len(entries) == 1
        assert entries[0].team_id == 10
        assert entries[0].entry_type == "controlled"
        assert entries[0].success

    def test_both_ends_count(self):
        events = [_event(1, "hit", 10, 0), _event(2, "blocked-shot", 20, -60)]
        assert len(detect_zone_entries(events)) == 1

    def test_faceoff_after_crossing_is_dump(self):
        events = [_event(1, "hit", 10, 0), _event(2, "faceoff", 20, 60), _event(3, "hit", 10, 70)]

        entry = detect_zone_entries(events)[0]

        assert entry.entry_type == "dump"
        assert not entry.success

    def test_change_of_possession_needs_two_events_in_zone(self):
        carried = [
            _event(1, "blocked-shot", 20, 10),
            _event(2, "missed-shot", 10, 40),
            _event(3, "missed-shot", 10, 45),
        ]
        dumped = [
            _event(1, "blocked-shot", 20, 10),
            _event(2, "missed-shot", 10, 40),
            _event(3, "missed-shot", 20, 45),
        ]

        assert detect_zone_entries(carried)[0].entry_type == "controlled"
        assert detect_zone_entries(dumped)[0].entry_type == "dump"

    def test_opponent_event_ends_sustained_possession(self):
        events = [_event(1, "hit", 10, 0), _event(2, "hit", 10, 50), _event(3, "takeaway", 20, 60)]
        assert not detect_zone_entries(events)[0].success

    def test_quick_shot(self):
        quick = [
            _event(1, "hit", 10, 0, "05:00"),
            _event(2, "hit", 10, 50, "05:02"),
            _event(3, "missed-shot", 10, 60, "05:06"),
        ]
        slow = [
            _event(1, "hit", 10, 0, "05:00"),
            _event(2, "hit", 10, 50, "05:02"),
            _event(3, "missed-shot", 10, 60, "05:09"),
        ]

        assert detect_zone_entries(quick)[0].shot_within_5_seconds
        assert not detect_zone_entries(slow)[0].shot_within_5_seconds

    def test_same_zone_no_entry(self):
        events = [_event(1, "hit", 10, 50), _event(2, "hit", 10, 60)]
        assert detect_zone_entries(events) == []

    def test_empty(self):
        assert detect_zone_entries([]) == []

    def test_missing_coordinates_skipped(self):
        events = [_event(1, "hit", 10, None), _event(2, "hit", 10, 50)]
        assert detect_zone_entries(events) == []

    def test_unowned_event_skipped(self):
        events = [_event(1, "hit", 10, 0), _event(2, "stoppage", None, 50)]
        assert detect_zone_entries(events) == []


class TestZoneExits:
    """Tests for detect_zone_exits."""

    def test_hit_exit_is_clear(self):
        events = [_event(1, "hit", 10, 50), _event(2, "hit", 10, 0)]

        exits = detect_zone_exits(events)

        assert len(exits) == 1
        assert exits[0].exit_type == "clear"
        assert exits[0].success

    @pytest.mark.parametrize(
        "type_key,expected",
        [("takeaway", "clear"), ("shot-on-goal", "pass"), ("giveaway", "controlled")],
    )
    def test_exit_types(self, type_key, expected):
        events = [_event(1, "hit", 10, -50), _event(2, type_key, 10, -10)]
        assert detect_zone_exits(events)[0].exit_type == expected

    def test_opponent_takeaway_fails_exit(self):
        events = [_event(1, "hit", 10, 50), _event(2, "giveaway", 10, 0), _event(3, "takeaway", 20, 5)]
        assert not detect_zone_exits(events)[0].success

    def test_opponent_non_turnover_event_does_not_fail_exit(self):
        events = [_event(1, "hit", 10, 50), _event(2, "giveaway", 10, 0), _event(3, "faceoff", 20, 5)]
        assert detect_zone_exits(events)[0].success

    def test_empty(self):
        assert detect_zone_exits([]) == []


class TestZoneAnalytics:
    """Tests for calculate_zone_analytics."""

    def test_rates(self):
        entries = [_entry("controlled"), _entry("dump", success=False), _entry("controlled")]
        exits = [_exit(True), _exit(False)]

        result = calculate_zone_analytics(entries, exits)

        assert result.total_entries == 3
        assert result.controlled_entries == 2
        assert result.dump_ins == 1
        assert result.controlled_entry_rate == pytest.approx(66.7)
        assert result.total_exits == 2
        assert result.successful_exits == 1
        assert result.exit_success_rate == pytest.approx(50.0)

    def test_empty(self):
        result = calculate_zone_analytics([], [])
        assert result.total_entries == 0
        assert result.controlled_entry_rate == 0.0
        assert result.exit_success_rate == 0.0

    def test_analyze_sequence(self):
        events = [
            _event(1, "hit", 10, 0),
            _event(2, "shot-on-goal", 10, 60),
            _event(3, "takeaway", 20, 10),
        ]

        result = analyze_zone_transitions(events)

        assert result.total_entries == 1
        assert result.total_exits == 1
        assert result.exits[0].team_id == 20
