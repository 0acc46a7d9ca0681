"""
Configuration data models.

This module contains the configuration structures for the backend connection,
the dashboard behaviour and the user-facing labels, loaded from `config.toml`.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class BackendConfig:
    """
    Connection settings for the stops backend, loaded from `[backend]`.
    """

    # Base URL of the backend, scheme and host included.
    base_url: str = "http://localhost:5000"
    # Path of the stop records endpoint, appended to base_url.
    data_path: str = "/api/data"
    # Overall request timeout in seconds.
    timeout_seconds: float = 10.0
    # Connection establishment timeout in seconds.
    connect_timeout_seconds: float = 5.0

    @property
    def data_url(self) -> str:
        return f"{self.base_url}{self.data_path}"


@dataclass
class LabelConfig:
    """
    User-facing labels, loaded from `[dashboard.labels]`.
    """

    # Reason assigned to records that carry none.
    unknown_reason: str = "Desconhecido"
    # Shown for missing machine labels and missing end times.
    missing_value: str = "—"
    # Shown for time-derived fields of records without a usable start time.
    missing_time: str = "--"
    # Banner message for transport-level failures.
    network_error: str = "Erro de rede ao conectar com o backend."
    # Prefix of the error banner.
    error_banner_prefix: str = "Erro ao buscar dados"


@dataclass
class DashboardConfig:
    """
    Dashboard behaviour, loaded from `[dashboard]`.
    """

    # The single machine the dashboard is scoped to.
    monitored_machine: str = "Máquina 01"
    # Delay between the start of consecutive fetches, in milliseconds.
    poll_interval_ms: int = 5000
    # Number of most recent stops in the duration trend.
    trend_window: int = 10
    # Number of most recent stops in the history table.
    history_window: int = 20
    # Hue step between consecutive distribution categories, in degrees.
    hue_step_degrees: int = 60
    # IANA timezone used to display timestamps; None keeps them as received.
    display_timezone: Optional[str] = None
    labels: LabelConfig = field(default_factory=LabelConfig)

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    backend: BackendConfig
    dashboard: DashboardConfig
