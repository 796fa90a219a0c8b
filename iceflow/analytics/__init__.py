"""
Analytics Module

This module contains the unit-level metric calculators.

Components:
    - Expected goals: logistic shot-quality model
    - Possession metrics: Corsi, Fenwick, PDO, zone starts, per-60 rates
    - Value estimators: WAR and GSAA
"""

from iceflow.analytics.expected_goals import (
    XGPrediction,
    calculate_batch_xg,
    calculate_goals_above_expected,
    calculate_total_xg,
    calculate_xg,
    calculate_xg_differential,
    is_high_danger,
    shot_expected_goal,
    shot_quality_label,
)
from iceflow.analytics.metrics import (
    AdvancedStats,
    ComputedAdvancedStats,
    calculate_advanced_metrics,
    compute_advanced_stats_from_basic,
    format_advanced_stat,
)
from iceflow.analytics.value import calculate_gsaa, calculate_war, gsaa_for_goalie, war_for_player

__all__ = [
    # Expected goals
    "XGPrediction",
    "calculate_batch_xg",
    "calculate_goals_above_expected",
    "calculate_total_xg",
    "calculate_xg",
    "calculate_xg_differential",
    "is_high_danger",
    "shot_expected_goal",
    "shot_quality_label",
    # Possession
    "AdvancedStats",
    "ComputedAdvancedStats",
    "calculate_advanced_metrics",
    "compute_advanced_stats_from_basic",
    "format_advanced_stat",
    # Value
    "calculate_gsaa",
    "calculate_war",
    "gsaa_for_goalie",
    "war_for_player",
]
