"""
Tests for Statistic Helpers

Tests for numeric coercion, time-on-ice parsing, rates and percentiles.
"""

import pytest

from iceflow.utils.stat_calculations import (
    calculate_percentile,
    calculate_shooting_pct,
    calculate_trend,
    first_present,
    optional_float,
    parse_time_to_seconds,
    per_60,
    per_game,
    points_per_60,
    round_half_up,
    safe_float,
    safe_int,
    seconds_to_time_string,
    toi_to_minutes,
)


class TestNumericCoercion:
    """Tests for safe_float / safe_int / optional_float."""

    def test_safe_float_parses_text(self):
        assert safe_float("3.5") == 3.5
        assert safe_float(7) == 7.0

    def test_safe_float_malformed_text_uses_default(self):
        """Unparseable text must never become NaN."""
        assert safe_float("n/a") == 0.0
        assert safe_float("", default=-1.0) == -1.0
        assert safe_float(None) == 0.0

    def test_safe_float_rejects_nan_and_inf(self):
        assert safe_float(float("nan")) == 0.0
        assert safe_float("inf") == 0.0

    def test_safe_int_truncates(self):
        assert safe_int("12") == 12
        assert safe_int(3.9) == 3
        assert safe_int("abc") == 0

    def test_optional_float_keeps_missing(self):
        assert optional_float(None) is None
        assert optional_float("bad") is None
        assert optional_float("0") == 0.0


class TestTimeParsing:
    """Tests for clock string helpers."""

    def test_parse_time_to_seconds(self):
        assert parse_time_to_seconds("12:30") == 750
        assert parse_time_to_seconds("0:45") == 45
        assert parse_time_to_seconds("") == 0
        assert parse_time_to_seconds(None) == 0

    def test_seconds_to_time_string(self):
        assert seconds_to_time_string(750) == "12:30"
        assert seconds_to_time_string(65.9) == "1:05"

    def test_toi_to_minutes_accepts_both_forms(self):
        assert toi_to_minutes("15:00") == pytest.approx(15.0)
        assert toi_to_minutes(1200) == pytest.approx(20.0)
        assert toi_to_minutes("1200") == pytest.approx(20.0)
        assert toi_to_minutes(None) == 0.0


class TestRates:
    """Tests for per-game and per-60 helpers."""

    def test_per_game(self):
        assert per_game(30, 10) == 3.0
        assert per_game(30, 0) == 0.0

    def test_per_60_scales_linearly(self):
        assert per_60(4, 20) == pytest.approx(12.0)
        assert per_60(8, 20) == pytest.approx(24.0)
        assert per_60(4, 40) == pytest.approx(6.0)

    def test_per_60_zero_minutes(self):
        assert per_60(5, 0) == 0.0

    def test_points_per_60_from_average_toi(self):
        # 10 games at 20:00 = 200 minutes
        assert points_per_60(10, "20:00", 10) == pytest.approx(3.0)
        assert points_per_60(10, "20:00", 0) == 0.0

    def test_shooting_pct(self):
        assert calculate_shooting_pct(5, 50) == pytest.approx(10.0)
        assert calculate_shooting_pct(5, 0) == 0.0
        assert calculate_shooting_pct(5, None) == 0.0


class TestRounding:
    """Tests for round_half_up."""

    def test_ties_go_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(12.5) == 13
        assert round_half_up(-2.5) == -2

    def test_decimals(self):
        assert round_half_up(0.125, 2) == pytest.approx(0.13)
        assert round_half_up(66.66666, 1) == pytest.approx(66.7)

    def test_non_ties_match_round(self):
        for value in (1.2, 1.7, -3.4, 99.51):
            assert round_half_up(value) == round(value)


class TestPercentile:
    """Tests for calculate_percentile."""

    def test_percentile_midpoint(self):
        values = [10, 20, 30, 40, 50, 60, 70, 80, 90, 100]
        assert calculate_percentile(50, values) == pytest.approx(40.0)

    def test_percentile_above_all(self):
        assert calculate_percentile(500, [10, 20, 30]) == 100.0

    def test_percentile_at_or_below_minimum(self):
        assert calculate_percentile(10, [10, 20, 30]) == 0.0
        assert calculate_percentile(1, [10, 20, 30]) == 0.0

    def test_percentile_unsorted_input(self):
        assert calculate_percentile(30, [30, 10, 20, 40]) == pytest.approx(50.0)

    def test_percentile_empty(self):
        assert calculate_percentile(5, []) == 0.0


class TestTrend:
    """Tests for calculate_trend."""

    def test_trend_increase(self):
        # 1.0 ppg vs 0.5 ppg
        assert calculate_trend((82, 82), (41, 82)) == pytest.approx(100.0)

    def test_trend_decrease(self):
        assert calculate_trend((41, 82), (82, 82)) == pytest.approx(-50.0)

    def test_trend_no_previous(self):
        assert calculate_trend((10, 10), (0, 0)) == 100.0
        assert calculate_trend((0, 10), (0, 0)) == 0.0


def test_first_present():
    record = {"shotType": None, "shot_type": "wrist"}
    assert first_present(record, "shotType", "shot_type") == "wrist"
    assert first_present(record, "missing") is None
