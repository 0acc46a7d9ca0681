"""
Data models and structures for the stop dashboard.

This module provides the data models used throughout the application,
organized by their functional purpose:

Configuration Models:
- Backend connection settings
- Dashboard behaviour and display labels

Event Models:
- The normalized stop event

View Models:
- Distribution, trend, history and summary views
- The error signal and the assembled dashboard snapshot

All models use type hints and dataclasses; events and views are frozen.
"""

from .config import AppConfig, BackendConfig, DashboardConfig, LabelConfig

from .events import StopEvent

from .views import (
    DashboardError,
    DashboardViews,
    DistributionSlice,
    DistributionView,
    HistoryRow,
    HistoryView,
    SummaryView,
    TrendPoint,
    TrendView,
)

__all__ = [
    # Configuration
    "AppConfig",
    "BackendConfig",
    "DashboardConfig",
    "LabelConfig",
    # Events
    "StopEvent",
    # Views
    "DashboardError",
    "DashboardViews",
    "DistributionSlice",
    "DistributionView",
    "HistoryRow",
    "HistoryView",
    "SummaryView",
    "TrendPoint",
    "TrendView",
]
