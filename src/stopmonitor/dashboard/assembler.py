"""
Assembly of the dashboard view models from one normalized dataset.
"""

from datetime import datetime
from typing import Iterable, Optional, Tuple

from ..aggregation import build_distribution, build_history, build_summary, build_trend
from ..filtering import apply_reason_filter, scope_to_machine
from ..models.config import DashboardConfig
from ..models.events import StopEvent
from ..models.views import DashboardError, DashboardViews


class ViewAssembler:
    """
    Derives every view from the same dataset in a fixed order:
    machine scope, reason filter, aggregation.

    The distribution is fed the machine-scoped events *without* the reason
    filter; trend, history and summary get the filtered events. Feeding the
    filtered events to the distribution would collapse it to the selected
    category after the first click.
    """

    def __init__(self, dashboard: DashboardConfig):
        self.dashboard = dashboard

    def scope(self, events: Iterable[StopEvent]) -> Tuple[StopEvent, ...]:
        return scope_to_machine(events, self.dashboard.monitored_machine)

    def assemble(
        self,
        events: Iterable[StopEvent],
        selected_reason: Optional[str] = None,
        error: Optional[DashboardError] = None,
        revision: int = 0,
        updated_at: Optional[datetime] = None,
    ) -> DashboardViews:
        cfg = self.dashboard
        labels = cfg.labels

        machine_events = self.scope(events)
        displayed = apply_reason_filter(machine_events, selected_reason)

        return DashboardViews(
            distribution=build_distribution(machine_events, hue_step=cfg.hue_step_degrees),
            trend=build_trend(
                displayed,
                window=cfg.trend_window,
                placeholder=labels.missing_time,
                tz_name=cfg.display_timezone,
            ),
            history=build_history(
                displayed,
                window=cfg.history_window,
                missing_value=labels.missing_value,
                missing_time=labels.missing_time,
                tz_name=cfg.display_timezone,
            ),
            summary=build_summary(displayed),
            selected_reason=selected_reason,
            error=error,
            revision=revision,
            updated_at=updated_at,
        )
