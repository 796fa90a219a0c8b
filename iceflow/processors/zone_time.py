"""
Zone Time Processor

Converts raw offensive/neutral/defensive zone times into shares of total
tracked time, overall and per period.
"""

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from iceflow.models.movement import SkatingTrail, ZoneTime


@dataclass(frozen=True)
class ZoneTimeShare:
    """Zone shares (0-100) of a total tracked time."""

    offensive_pct: float
    neutral_pct: float
    defensive_pct: float
    total_time: float

    @property
    def net_offensive_pct(self) -> float:
        """Offensive minus defensive share."""
        return self.offensive_pct - self.defensive_pct


@dataclass(frozen=True)
class ZoneTimeBreakdown:
    """Overall zone shares plus an optional per-period split."""

    overall: ZoneTimeShare
    by_period: dict[int, ZoneTimeShare] = field(default_factory=dict)


def zone_time_share(zone_time: ZoneTime) -> ZoneTimeShare:
    """Shares of total time; all zero when no time was tracked."""
    total = zone_time.total
    if total <= 0:
        return ZoneTimeShare(0.0, 0.0, 0.0, 0.0)

    return ZoneTimeShare(
        offensive_pct=zone_time.offensive / total * 100,
        neutral_pct=zone_time.neutral / total * 100,
        defensive_pct=zone_time.defensive / total * 100,
        total_time=total,
    )


def zone_time_breakdown(
    zone_time: ZoneTime,
    periods: Mapping[int, ZoneTime] | None = None,
) -> ZoneTimeBreakdown:
    """
    Overall and per-period zone shares.

    Args:
        zone_time: Totals for the whole sample
        periods: Optional totals keyed by period number

    Returns:
        ZoneTimeBreakdown
    """
    return ZoneTimeBreakdown(
        overall=zone_time_share(zone_time),
        by_period={period: zone_time_share(zt) for period, zt in sorted((periods or {}).items())},
    )


def sum_zone_time(trails: Iterable[SkatingTrail]) -> tuple[ZoneTime, dict[int, ZoneTime]]:
    """Total zone time across trails, overall and by period."""
    overall = [0.0, 0.0, 0.0]
    by_period: dict[int, list[float]] = {}

    for trail in trails:
        zt = trail.zone_time
        bucket = by_period.setdefault(trail.period, [0.0, 0.0, 0.0])
        for totals in (overall, bucket):
            totals[0] += zt.offensive
            totals[1] += zt.neutral
            totals[2] += zt.defensive

    return (
        ZoneTime(offensive=overall[0], neutral=overall[1], defensive=overall[2]),
        {
            period: ZoneTime(offensive=t[0], neutral=t[1], defensive=t[2])
            for period, t in by_period.items()
        },
    )
