"""
View models handed to the presentation layer.

This module defines the immutable structures produced by the aggregators and
assembled into one DashboardViews snapshot per state change:

- DistributionView: stop counts per reason, with stable colors
- TrendView: durations of the most recent stops, oldest first
- HistoryView: formatted rows of the most recent stops, newest first
- SummaryView: headline figures for the card row
- DashboardError: the last fetch failure, if any

Snapshots are replaced wholesale, never mutated, so a consumer always sees
a consistent set of views.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class DistributionSlice:
    """One category of the reason breakdown."""

    reason: str
    count: int
    color: str


@dataclass(frozen=True)
class DistributionView:
    """Stop counts grouped by reason, in first-appearance order."""

    slices: Tuple[DistributionSlice, ...] = ()

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(s.reason for s in self.slices)

    @property
    def counts(self) -> Tuple[int, ...]:
        return tuple(s.count for s in self.slices)

    @property
    def colors(self) -> Tuple[str, ...]:
        return tuple(s.color for s in self.slices)

    @property
    def total(self) -> int:
        return sum(self.counts)

    def as_mapping(self) -> Dict[str, int]:
        """Reason -> count, preserving slice order."""
        return {s.reason: s.count for s in self.slices}

    def is_empty(self) -> bool:
        return not self.slices


@dataclass(frozen=True)
class TrendPoint:
    label: str
    duration_minutes: float


@dataclass(frozen=True)
class TrendView:
    """Durations of the most recent stops in delivery order."""

    points: Tuple[TrendPoint, ...] = ()

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(p.label for p in self.points)

    @property
    def durations(self) -> Tuple[float, ...]:
        return tuple(p.duration_minutes for p in self.points)

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class HistoryRow:
    # Record id, or the row position when the record has none.
    key: Any
    machine: str
    reason: str
    start: str
    end: str
    duration_minutes: int


@dataclass(frozen=True)
class HistoryView:
    """Most recent stops, newest first."""

    rows: Tuple[HistoryRow, ...] = ()

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class SummaryView:
    """Headline figures over the displayed (reason-filtered) stops."""

    total_stops: int = 0
    total_minutes: float = 0.0
    average_minutes: float = 0.0
    ongoing_stops: int = 0
    top_reason: Optional[str] = None


@dataclass(frozen=True)
class DashboardError:
    """
    The last fetch failure surfaced to the presentation layer.

    Attributes:
        kind: "network" or "application"
        message: Text for the error banner
        occurred_at: When the failure was reported
    """

    kind: str
    message: str
    occurred_at: datetime


@dataclass(frozen=True)
class DashboardViews:
    """
    A complete, consistent set of view models for one state of the dashboard.
    """

    distribution: DistributionView = field(default_factory=DistributionView)
    trend: TrendView = field(default_factory=TrendView)
    history: HistoryView = field(default_factory=HistoryView)
    summary: SummaryView = field(default_factory=SummaryView)
    selected_reason: Optional[str] = None
    error: Optional[DashboardError] = None
    # Incremented on every state transition.
    revision: int = 0
    # When the last successful poll was applied, None before the first one.
    updated_at: Optional[datetime] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None
