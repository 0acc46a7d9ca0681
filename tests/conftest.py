"""
Pytest configuration and shared fixtures for the stopmonitor test suite.

This module provides common fixtures, sample payloads and configuration
objects for all test modules.
"""

import shutil
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from stopmonitor.config import clear_config_cache  # noqa: E402
from stopmonitor.config import manager as config_manager  # noqa: E402
from stopmonitor.models import (  # noqa: E402
    AppConfig,
    BackendConfig,
    DashboardConfig,
    LabelConfig,
    StopEvent,
)


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def reset_config_cache(monkeypatch):
    """Make sure no test sees configuration (or a config path) set by another."""
    monkeypatch.setattr(config_manager, "_CONFIG_FILE_PATH", config_manager._DEFAULT_CONFIG_FILE_PATH)
    clear_config_cache()
    yield
    clear_config_cache()


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def scenario_records() -> List[Dict[str, Any]]:
    """Three records, two of them on the monitored machine M01."""
    return [
        {"machine": "M01", "reason": "Jam", "duration_minutes": 5},
        {"machine": "M02", "reason": "Jam", "duration_minutes": 3},
        {"machine": "M01", "reason": "Power", "duration_minutes": 10},
    ]


@pytest.fixture
def timed_records() -> List[Dict[str, Any]]:
    """Chronologically ordered records using every field spelling."""
    return [
        {"id": 1, "machine": "M01", "reason": "Jam",
         "start_time": "2024-03-01T08:00:00", "end_time": "2024-03-01T08:05:00",
         "duration_minutes": 5},
        {"id": 2, "machine": "M01", "reason": "Power",
         "start": "2024-03-01T09:00:00", "end_time": "2024-03-01T09:10:30",
         "duration": 10.5},
        {"machine": "M01", "reason": "Jam",
         "timestamp": "2024-03-01T10:00:00"},
        {"id": 4, "machine": "M02", "reason": "Setup",
         "start_time": "2024-03-01T10:30:00", "duration_minutes": 7},
        {"id": 5, "machine": "M01",
         "start_time": "2024-03-01T11:00:00", "duration_minutes": 2.4},
    ]


def make_events(count: int, machine: str = "M01", reasons=("Jam", "Power", "Setup")) -> List[StopEvent]:
    """`count` chronological events, one minute apart, cycling through `reasons`."""
    return [
        StopEvent(
            id=i,
            machine=machine,
            reason=reasons[i % len(reasons)],
            start_time=datetime(2024, 3, 1, 8, i % 60, 0),
            duration_minutes=float(i + 1),
        )
        for i in range(count)
    ]


@pytest.fixture
def event_factory():
    return make_events


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def dashboard_config() -> DashboardConfig:
    """Dashboard configuration scoped to machine M01."""
    return DashboardConfig(monitored_machine="M01", poll_interval_ms=100, labels=LabelConfig())


@pytest.fixture
def app_config(dashboard_config) -> AppConfig:
    return AppConfig(
        backend=BackendConfig(base_url="http://backend.test"),
        dashboard=dashboard_config,
    )


@pytest.fixture
def config_file(temp_dir) -> Path:
    """A complete config.toml in a temporary directory."""
    path = temp_dir / "config.toml"
    path.write_text(
        """
[backend]
base_url = "http://factory.local:8080/"
timeout_seconds = 4.0
connect_timeout_seconds = 2.0

[dashboard]
monitored_machine = "M01"
poll_interval_ms = 2500
trend_window = 5
history_window = 8
hue_step_degrees = 45
display_timezone = "UTC"

[dashboard.labels]
unknown_reason = "Unknown"
""",
        encoding="utf-8",
    )
    return path
