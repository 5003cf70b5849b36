"""
Analytics: typing metrics and per-key statistics.
"""

from typequest.analytics import metrics_calculator
from typequest.analytics.key_stats import KeyStat, KeyStatsAggregator

__all__ = [
    "metrics_calculator",
    "KeyStat",
    "KeyStatsAggregator",
]
