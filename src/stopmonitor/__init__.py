"""
stopmonitor: live downtime dashboard for a single production machine.

This package polls stop records from a backend, normalizes them, and derives
coordinated views: a breakdown by reason, a trend of recent durations, a
history of recent stops and summary cards. A single reason filter, set by
clicking the breakdown, narrows every view except the breakdown itself.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Stop events, view models and configuration structures
- validation: Input validation, error taxonomy and error handling
- normalization: Conversion of backend payloads into stop events
- filtering: Machine scope, reason filter and the shared selection
- aggregation: Pure derivations of the views
- polling: Backend client and the refresh cadence
- dashboard: Owned state, view assembly and session wiring
- rendering: Plotly figures and HTML page
- cli: Command-line interface

Usage:
    From command line:
        python -m stopmonitor.cli.main [options]

    Programmatically:
        from stopmonitor import DashboardSession, get_config
        async with DashboardSession(get_config()) as session:
            session.subscribe(print)
            ...
"""

from .config import get_config, clear_config_cache, set_config_path
from .cli import main_cli
from .dashboard import DashboardSession, DashboardStore, ViewAssembler

from .models import (
    AppConfig,
    BackendConfig,
    DashboardConfig,
    DashboardError,
    DashboardViews,
    LabelConfig,
    StopEvent,
)

from .normalization import normalize
from .filtering import FilterCoordinator, apply_reason_filter, scope_to_machine
from .aggregation import build_distribution, build_history, build_summary, build_trend
from .polling import Poller, StopsClient

from .validation import (
    ApplicationError,
    FetchError,
    NetworkError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "main_cli",
    "DashboardSession",
    "DashboardStore",
    "ViewAssembler",
    # Models
    "AppConfig",
    "BackendConfig",
    "DashboardConfig",
    "DashboardError",
    "DashboardViews",
    "LabelConfig",
    "StopEvent",
    # Pipeline
    "normalize",
    "FilterCoordinator",
    "apply_reason_filter",
    "scope_to_machine",
    "build_distribution",
    "build_history",
    "build_summary",
    "build_trend",
    "Poller",
    "StopsClient",
    # Errors
    "ApplicationError",
    "FetchError",
    "NetworkError",
    "ValidationError",
]
