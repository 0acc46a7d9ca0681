"""
Configuration validation utilities.

This module turns raw configuration sections into validated dataclasses.
"""

import logging
from typing import Any, Dict

from ..models.config import AppConfig, BackendConfig, DashboardConfig, LabelConfig
from ..validation import (
    ValidationError,
    validate_base_url,
    validate_non_empty_string,
    validate_positive_float,
    validate_positive_integer,
    validate_timezone,
)

logger = logging.getLogger(__name__)


def validate_backend_config(backend_data: Dict[str, Any]) -> BackendConfig:
    """
    Validate and create a BackendConfig from the `[backend]` section.

    Raises:
        ValidationError: If validation fails
    """
    defaults = BackendConfig()

    base_url = validate_base_url(
        backend_data.get("base_url", defaults.base_url),
        field_name="backend.base_url",
    )

    data_path = validate_non_empty_string(
        backend_data.get("data_path", defaults.data_path),
        field_name="backend.data_path",
    )
    if not data_path.startswith("/"):
        raise ValidationError(
            f"backend.data_path must start with '/', got {data_path!r}",
            field_name="backend.data_path",
            value=data_path,
        )

    timeout_seconds = validate_positive_float(
        backend_data.get("timeout_seconds", defaults.timeout_seconds),
        min_value=0.1,
        max_value=300.0,
        field_name="backend.timeout_seconds",
    )

    connect_timeout_seconds = validate_positive_float(
        backend_data.get("connect_timeout_seconds", defaults.connect_timeout_seconds),
        min_value=0.1,
        max_value=timeout_seconds,
        field_name="backend.connect_timeout_seconds",
    )

    return BackendConfig(
        base_url=base_url,
        data_path=data_path,
        timeout_seconds=timeout_seconds,
        connect_timeout_seconds=connect_timeout_seconds,
    )


def validate_label_config(label_data: Dict[str, Any]) -> LabelConfig:
    """
    Validate and create a LabelConfig from the `[dashboard.labels]` section.

    Raises:
        ValidationError: If a label is not a non-empty string
    """
    defaults = LabelConfig()
    values = {}
    for name in ("unknown_reason", "missing_value", "missing_time",
                 "network_error", "error_banner_prefix"):
        values[name] = validate_non_empty_string(
            label_data.get(name, getattr(defaults, name)),
            field_name=f"dashboard.labels.{name}",
        )
    unknown = set(label_data) - set(values)
    if unknown:
        logger.warning(f"Ignoring unknown keys in [dashboard.labels]: {sorted(unknown)}")
    return LabelConfig(**values)


def validate_dashboard_config(dashboard_data: Dict[str, Any]) -> DashboardConfig:
    """
    Validate and create a DashboardConfig from the `[dashboard]` section.

    Raises:
        ValidationError: If validation fails
    """
    defaults = DashboardConfig()

    monitored_machine = validate_non_empty_string(
        dashboard_data.get("monitored_machine", defaults.monitored_machine),
        field_name="dashboard.monitored_machine",
    )

    poll_interval_ms = validate_positive_integer(
        dashboard_data.get("poll_interval_ms", defaults.poll_interval_ms),
        min_value=100,  # 100ms minimum
        max_value=3_600_000,  # 1h maximum
        field_name="dashboard.poll_interval_ms",
    )

    trend_window = validate_positive_integer(
        dashboard_data.get("trend_window", defaults.trend_window),
        min_value=1,
        max_value=1000,
        field_name="dashboard.trend_window",
    )

    history_window = validate_positive_integer(
        dashboard_data.get("history_window", defaults.history_window),
        min_value=1,
        max_value=1000,
        field_name="dashboard.history_window",
    )

    hue_step_degrees = validate_positive_integer(
        dashboard_data.get("hue_step_degrees", defaults.hue_step_degrees),
        min_value=1,
        max_value=359,
        field_name="dashboard.hue_step_degrees",
    )

    display_timezone = validate_timezone(
        dashboard_data.get("display_timezone"),
        field_name="dashboard.display_timezone",
    )

    labels = validate_label_config(dashboard_data.get("labels", {}))

    return DashboardConfig(
        monitored_machine=monitored_machine,
        poll_interval_ms=poll_interval_ms,
        trend_window=trend_window,
        history_window=history_window,
        hue_step_degrees=hue_step_degrees,
        display_timezone=display_timezone,
        labels=labels,
    )


def validate_app_config(config_data: Dict[str, Any]) -> AppConfig:
    """
    Validate the whole configuration document.

    Missing sections fall back to their defaults.
    """
    return AppConfig(
        backend=validate_backend_config(config_data.get("backend", {})),
        dashboard=validate_dashboard_config(config_data.get("dashboard", {})),
    )
