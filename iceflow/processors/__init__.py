"""
Data Processors Module

This module contains processors that aggregate movement and game records.

Processors:
    - Movement fingerprint: directional skating histogram
    - Flow field: gridded movement vectors with half-rink folding
    - Formation: deviation from positional benchmarks
    - Shift intensity: per-shift workload and zone balance
    - Rolling: rolling-window and cumulative game series
    - Zone time: zone shares of tracked time
    - Zone transitions: blue-line entries and exits from play-by-play
    - Momentum: rolling shot momentum, swings and surges from play-by-play
"""

from iceflow.processors.fingerprint import (
    DirectionalBucket,
    MovementFingerprint,
    calculate_movement_fingerprint,
    compare_fingerprints,
)
from iceflow.processors.flow_field import (
    FlowFieldCell,
    TeamFlowField,
    calculate_team_flow_field,
    filter_flow_field_by_situation,
    to_half_rink,
)
from iceflow.processors.momentum import (
    MomentumAnalytics,
    MomentumSample,
    analyze_momentum,
    analyze_period_momentum,
    calculate_rolling_momentum,
    detect_momentum_swings,
    parse_events_for_momentum,
)
from iceflow.processors.formation import (
    EXPECTED_POSITIONS,
    FormationSnapshot,
    PositionDeviation,
    build_formation_snapshot,
    calculate_formation_deviation,
    calculate_team_formation_score,
    detect_formation_situation,
    deviation_severity,
)
from iceflow.processors.rolling import (
    CumulativeXGPoint,
    GameMetrics,
    RollingMetrics,
    aggregate_shots_to_game_metrics,
    calculate_rolling_metrics,
    cumulative_xg_series,
)
from iceflow.processors.shift_intensity import (
    ShiftData,
    ShiftEvent,
    ShiftIntensitySummary,
    calculate_shift_intensity,
    calculate_zone_balance,
    process_trail_to_shift,
    summarize_shifts,
)
from iceflow.processors.zone_time import (
    ZoneTimeBreakdown,
    ZoneTimeShare,
    sum_zone_time,
    zone_time_breakdown,
)
from iceflow.processors.zone_transitions import (
    ZoneAnalytics,
    ZoneEntry,
    ZoneExit,
    analyze_zone_transitions,
    calculate_zone_analytics,
    detect_zone_entries,
    detect_zone_exits,
)

__all__ = [
    "DirectionalBucket",
    "MovementFingerprint",
    "calculate_movement_fingerprint",
    "compare_fingerprints",
    "FlowFieldCell",
    "TeamFlowField",
    "calculate_team_flow_field",
    "filter_flow_field_by_situation",
    "to_half_rink",
    "EXPECTED_POSITIONS",
    "FormationSnapshot",
    "PositionDeviation",
    "build_formation_snapshot",
    "calculate_formation_deviation",
    "calculate_team_formation_score",
    "detect_formation_situation",
    "deviation_severity",
    "CumulativeXGPoint",
    "GameMetrics",
    "RollingMetrics",
    "aggregate_shots_to_game_metrics",
    "calculate_rolling_metrics",
    "cumulative_xg_series",
    "ShiftData",
    "ShiftEvent",
    "ShiftIntensitySummary",
    "calculate_shift_intensity",
    "calculate_zone_balance",
    "process_trail_to_shift",
    "summarize_shifts",
    "ZoneTimeBreakdown",
    "ZoneTimeShare",
    "sum_zone_time",
    "zone_time_breakdown",
    "MomentumAnalytics",
    "MomentumSample",
    "analyze_momentum",
    "analyze_period_momentum",
    "calculate_rolling_momentum",
    "detect_momentum_swings",
    "parse_events_for_momentum",
    "ZoneAnalytics",
    "ZoneEntry",
    "ZoneExit",
    "analyze_zone_transitions",
    "calculate_zone_analytics",
    "detect_zone_entries",
    "detect_zone_exits",
]
