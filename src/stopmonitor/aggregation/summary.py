"""
Headline figures for the summary cards.
"""

from typing import Sequence

from ..models.events import StopEvent
from ..models.views import SummaryView
from .distribution import count_by_reason


def build_summary(events: Sequence[StopEvent]) -> SummaryView:
    """
    Summarize the displayed (reason-filtered) events.

    The most frequent reason breaks ties by first appearance. An empty input
    yields zeros and no top reason.
    """
    events = tuple(events)
    if not events:
        return SummaryView()

    total_minutes = sum(e.duration_minutes for e in events)
    counts = count_by_reason(events)
    top_reason, _ = max(counts, key=lambda pair: pair[1])

    return SummaryView(
        total_stops=len(events),
        total_minutes=total_minutes,
        average_minutes=total_minutes / len(events),
        ongoing_stops=sum(1 for e in events if e.is_ongoing),
        top_reason=top_reason,
    )
