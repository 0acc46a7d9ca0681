"""
Scope filters applied to normalized stop events.

Both filters are exact-match, order preserving and total: they never raise
and an empty input yields an empty output.
"""

from typing import Iterable, Optional, Tuple

from ..models.events import StopEvent


def scope_to_machine(events: Iterable[StopEvent], machine: str) -> Tuple[StopEvent, ...]:
    """Keep only the events produced by the monitored machine."""
    return tuple(e for e in events if e.machine == machine)


def apply_reason_filter(events: Iterable[StopEvent], reason: Optional[str]) -> Tuple[StopEvent, ...]:
    """
    Keep only the events whose reason equals `reason`.

    Matching is case-sensitive with no trimming. A reason of None disables
    the filter and returns the input unchanged.
    """
    if reason is None:
        return tuple(events)
    return tuple(e for e in events if e.reason == reason)
