"""
Backend access and periodic refresh for the stopmonitor package.

This module provides the HTTP client for the stops endpoint and the Poller
that drives the refresh cadence with AsyncIO.
"""

from .client import StopsClient
from .poller import DEFAULT_INTERVAL_SECONDS, Poller, PollerStats, PollToken

__all__ = [
    "DEFAULT_INTERVAL_SECONDS",
    "Poller",
    "PollerStats",
    "PollToken",
    "StopsClient",
]
