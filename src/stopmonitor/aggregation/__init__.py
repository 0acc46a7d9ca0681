"""
Pure aggregations of stop events into view models.

Every function here is a deterministic recomputation from its inputs:
identical events always give identical views in identical order.
"""

from .distribution import build_distribution, category_color, count_by_reason
from .formatting import format_datetime, format_time, round_half_up
from .history import DEFAULT_HISTORY_WINDOW, build_history
from .summary import build_summary
from .trend import DEFAULT_TREND_WINDOW, build_trend

__all__ = [
    "DEFAULT_HISTORY_WINDOW",
    "DEFAULT_TREND_WINDOW",
    "build_distribution",
    "build_history",
    "build_summary",
    "build_trend",
    "category_color",
    "count_by_reason",
    "format_datetime",
    "format_time",
    "round_half_up",
]
