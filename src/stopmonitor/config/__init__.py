"""
Configuration management for the stopmonitor package.

This module provides a clean interface for loading, validating, and accessing
configuration data from a TOML file with singleton pattern management.
"""

from .manager import (
    clear_config_cache,
    get_config,
    get_config_info,
    is_config_loaded,
    set_config_path,
)

from .loader import (
    API_URL_ENV_VAR,
    apply_env_overrides,
    load_main_config,
    load_toml_file,
)
from .validators import (
    validate_app_config,
    validate_backend_config,
    validate_dashboard_config,
    validate_label_config,
)

__all__ = [
    # Main interface
    "get_config",
    "set_config_path",
    "clear_config_cache",
    "is_config_loaded",
    "get_config_info",
    # Advanced interface
    "API_URL_ENV_VAR",
    "apply_env_overrides",
    "load_toml_file",
    "load_main_config",
    "validate_app_config",
    "validate_backend_config",
    "validate_dashboard_config",
    "validate_label_config",
]
