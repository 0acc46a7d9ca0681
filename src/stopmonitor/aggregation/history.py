"""
History table of the most recent stops, newest first.
"""

from typing import Optional, Sequence

from ..models.events import StopEvent
from ..models.views import HistoryRow, HistoryView
from .formatting import format_datetime, round_half_up

DEFAULT_HISTORY_WINDOW = 20


def build_history(
    events: Sequence[StopEvent],
    window: int = DEFAULT_HISTORY_WINDOW,
    missing_value: str = "—",
    missing_time: str = "--",
    tz_name: Optional[str] = None,
) -> HistoryView:
    """
    Format the last `window` displayed events as table rows, newest first.

    Rows are keyed by record id, falling back to the row position. A stop
    without an end time is still ongoing and shows `missing_value` in its
    end column. Durations are rounded to whole minutes.
    """
    tail = tuple(events)[-window:] if window > 0 else ()
    rows = []
    for position, event in enumerate(reversed(tail)):
        rows.append(HistoryRow(
            key=event.row_key(position),
            machine=event.machine or missing_value,
            reason=event.reason,
            start=format_datetime(event.start_time, missing_time, tz_name),
            end=format_datetime(event.end_time, missing_value, tz_name),
            duration_minutes=round_half_up(event.duration_minutes),
        ))
    return HistoryView(rows=tuple(rows))
