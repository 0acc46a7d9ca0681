"""
Duration trend of the most recent stops.
"""

from typing import Optional, Sequence

from ..models.events import StopEvent
from ..models.views import TrendPoint, TrendView
from .formatting import format_time

DEFAULT_TREND_WINDOW = 10


def build_trend(
    events: Sequence[StopEvent],
    window: int = DEFAULT_TREND_WINDOW,
    placeholder: str = "--",
    tz_name: Optional[str] = None,
) -> TrendView:
    """
    Durations of the last `window` displayed events, oldest first.

    "Last" is the tail of the delivered sequence; events are not sorted.
    Each point is labelled with the start time of the stop (HH:MM:SS), or
    the placeholder when the event has no start time.
    """
    tail = tuple(events)[-window:] if window > 0 else ()
    return TrendView(points=tuple(
        TrendPoint(
            label=format_time(e.start_time, placeholder, tz_name),
            duration_minutes=e.duration_minutes,
        )
        for e in tail
    ))
