"""
Stop event data model.

A StopEvent is the normalized form of one stop record delivered by the
backend. Instances are immutable snapshots; every successful poll creates a
fresh tuple of them.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class StopEvent:
    """
    One interval during which the monitored machine was not producing.

    Attributes:
        reason: Category of the stop, never empty after normalization
        id: Opaque identifier from the backend, used only as a row key
        machine: Label of the machine that produced the record
        start_time: When the stop began, None when the record has no usable time
        end_time: When the stop ended, None while the stop is ongoing
        duration_minutes: Length of the stop in minutes
    """

    reason: str
    id: Optional[Any] = None
    machine: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration_minutes: float = 0.0

    @property
    def is_ongoing(self) -> bool:
        return self.end_time is None

    def row_key(self, position: int) -> Any:
        """Key for table rows: the record id, or its position when it has none."""
        return self.id if self.id is not None else position
