"""
The dashboard's owned state and its transitions.

The store holds the only mutable state of the dashboard: the normalized
dataset, the reason filter and the last fetch error. Each named transition
builds the complete set of views for its candidate state first and only then
replaces state and views together and hands the new snapshot to subscribers.
A consumer therefore never sees views from two different states mixed
together, and a state whose views cannot be built is never adopted.
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from ..filtering import FilterCoordinator
from ..models.config import LabelConfig
from ..models.events import StopEvent
from ..models.views import DashboardError, DashboardViews
from ..validation import ApplicationError, FetchError, NetworkError
from .assembler import ViewAssembler

logger = logging.getLogger(__name__)

Listener = Callable[[DashboardViews], None]


class DashboardStore:
    """
    Owner of the dataset, the filter selection and the error signal.

    Transitions:
        apply_result: replace the dataset, clear the error
        apply_error: keep the dataset, set the error
        select_reason / handle_distribution_click: set the filter
        clear_filter: drop the filter
    """

    def __init__(self, assembler: ViewAssembler, labels: Optional[LabelConfig] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.assembler = assembler
        self.labels = labels or assembler.dashboard.labels
        self._clock = clock
        self._events: Tuple[StopEvent, ...] = ()
        self._filter = FilterCoordinator()
        self._error: Optional[DashboardError] = None
        self._revision = 0
        self._updated_at: Optional[datetime] = None
        self._listeners: List[Listener] = []
        self._views = assembler.assemble(self._events)

    @property
    def views(self) -> DashboardViews:
        """The latest complete snapshot."""
        return self._views

    @property
    def events(self) -> Tuple[StopEvent, ...]:
        return self._events

    @property
    def selected_reason(self) -> Optional[str]:
        return self._filter.selected

    @property
    def error(self) -> Optional[DashboardError]:
        return self._error

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with every new snapshot.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def apply_result(self, events: Iterable[StopEvent]) -> DashboardViews:
        """Replace the dataset with a freshly normalized one and clear the error."""
        had_error = self._error is not None
        views = self._commit(tuple(events), self._filter, None, self._clock())
        if had_error and views.error is None:
            logger.info("Backend reachable again, error cleared")
        return views

    def apply_error(self, error: FetchError) -> DashboardViews:
        """Record a fetch failure; the last good dataset stays displayed."""
        return self._commit(self._events, self._filter, self._dashboard_error(error), self._updated_at)

    def select_reason(self, reason: str) -> DashboardViews:
        selection = FilterCoordinator(self._filter.selected)
        selection.select(reason)
        return self._commit(self._events, selection, self._error, self._updated_at)

    def handle_distribution_click(self, index: Optional[int]) -> DashboardViews:
        """
        Select the reason at `index` of the current breakdown.

        Clicks that hit no category leave the state (and the revision) alone.
        """
        selection = FilterCoordinator(self._filter.selected)
        if not selection.select_index(self._views.distribution.labels, index):
            return self._views
        return self._commit(self._events, selection, self._error, self._updated_at)

    def clear_filter(self) -> DashboardViews:
        selection = FilterCoordinator(self._filter.selected)
        selection.clear()
        return self._commit(self._events, selection, self._error, self._updated_at)

    def _dashboard_error(self, error: FetchError) -> DashboardError:
        if isinstance(error, NetworkError):
            message = self.labels.network_error
        else:
            message = str(error)
        return DashboardError(kind=error.kind, message=message, occurred_at=self._clock())

    def _commit(
        self,
        events: Tuple[StopEvent, ...],
        selection: FilterCoordinator,
        error: Optional[DashboardError],
        updated_at: Optional[datetime],
    ) -> DashboardViews:
        """
        Assemble the views of a candidate state, then publish state and views together.

        If the candidate cannot be assembled, the previous dataset and
        selection stay in place and are published with an application error.
        """
        try:
            views = self.assembler.assemble(
                events,
                selected_reason=selection.selected,
                error=error,
                revision=self._revision + 1,
                updated_at=updated_at,
            )
        except Exception as e:
            logger.error(f"Could not assemble dashboard views: {e}", exc_info=True)
            events, selection, updated_at = self._events, self._filter, self._updated_at
            error = self._dashboard_error(ApplicationError(f"Could not assemble dashboard views: {e}"))
            views = self.assembler.assemble(
                events,
                selected_reason=selection.selected,
                error=error,
                revision=self._revision + 1,
                updated_at=updated_at,
            )

        self._events = events
        self._filter = selection
        self._error = error
        self._updated_at = updated_at
        self._revision += 1
        self._views = views

        for listener in list(self._listeners):
            try:
                listener(views)
            except Exception as e:
                logger.error(f"Dashboard listener failed: {e}", exc_info=True)
        return views
