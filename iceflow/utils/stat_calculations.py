"""
Statistic Helpers

Small, divide-by-zero-safe helpers shared by the calculators:
- Numeric coercion that never yields NaN
- Time-on-ice parsing ("MM:SS" strings or seconds)
- Per-game and per-60 rates
- Half-up rounding
- Percentile ranking and season-over-season trend
"""

import math
from typing import Any


def safe_float(value: Any, default: float = 0.0) -> float:
    """
    Coerce a provider value to float.

    Unparseable text, None, NaN and infinities all collapse to ``default``
    so that they cannot poison downstream sums.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def safe_int(value: Any, default: int = 0) -> int:
    """Coerce a provider value to int (see safe_float)."""
    result = safe_float(value, float("nan"))
    if math.isnan(result):
        return default
    return int(result)


def optional_float(value: Any) -> float | None:
    """Like safe_float but keeps missing/malformed values as None."""
    result = safe_float(value, float("nan"))
    return None if math.isnan(result) else result


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round to ``digits`` decimals with halves going up (2.5 -> 3, -2.5 -> -2).

    Unlike the built-in round(), ties never go to the even neighbour.
    """
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def parse_time_to_seconds(time_str: str | None) -> int:
    """
    Parse a "MM:SS" clock string into total seconds.

    Examples:
        "12:30" -> 750
        "0:45"  -> 45
        ""      -> 0
    """
    if not time_str:
        return 0
    parts = str(time_str).strip().split(":")
    minutes = safe_int(parts[0] if parts else 0)
    seconds = safe_int(parts[1]) if len(parts) > 1 else 0
    return minutes * 60 + seconds


def seconds_to_time_string(total_seconds: int | float) -> str:
    """Format seconds as "M:SS"."""
    total = int(total_seconds)
    return f"{total // 60}:{total % 60:02d}"


def toi_to_seconds(toi: str | int | float | None) -> float:
    """Time on ice as seconds; accepts "MM:SS" strings or raw seconds."""
    if isinstance(toi, str):
        if ":" in toi:
            return float(parse_time_to_seconds(toi))
        return safe_float(toi)
    return safe_float(toi)


def toi_to_minutes(toi: str | int | float | None) -> float:
    """Time on ice as minutes."""
    return toi_to_seconds(toi) / 60


def per_game(value: float, games_played: int) -> float:
    """Rate per game played, 0 when no games."""
    if not games_played or games_played <= 0:
        return 0.0
    return value / games_played


def per_60(value: float, toi_minutes: float) -> float:
    """Rate per 60 minutes of ice time, 0 when no ice time."""
    if not toi_minutes or toi_minutes <= 0:
        return 0.0
    return value * (60 / toi_minutes)


def points_per_60(points: int, avg_toi: str | int | float | None, games_played: int) -> float:
    """Points per 60 from a per-game average TOI."""
    total_minutes = toi_to_minutes(avg_toi) * max(games_played or 0, 0)
    return per_60(points, total_minutes)


def calculate_shooting_pct(goals: int, shots: int | None) -> float:
    """Shooting percentage on a 0-100 scale."""
    if not shots:
        return 0.0
    return goals / shots * 100


def calculate_percentile(value: float, all_values: list[float]) -> float:
    """
    Percentile rank of ``value`` within ``all_values`` (0-100).

    The rank is the share of samples strictly below the first sample that
    is >= value. A value above every sample ranks 100; a value at or below
    the minimum ranks 0.
    """
    if not all_values:
        return 0.0

    ordered = sorted(all_values)
    for index, sample in enumerate(ordered):
        if sample >= value:
            return index / len(ordered) * 100
    return 100.0


def calculate_trend(latest: tuple[int, int], previous: tuple[int, int]) -> float:
    """
    Percent change in points per game between two seasons.

    Args:
        latest: (points, games_played) for the most recent season
        previous: (points, games_played) for the season before
    """
    latest_ppg = per_game(*latest)
    previous_ppg = per_game(*previous)
    if previous_ppg == 0:
        return 100.0 if latest_ppg > 0 else 0.0
    return (latest_ppg - previous_ppg) / previous_ppg * 100


def first_present(record: dict[str, Any], *keys: str) -> Any:
    """Return the first non-None value among several key spellings."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None
