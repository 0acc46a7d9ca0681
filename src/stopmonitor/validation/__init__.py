"""
Validation and error handling for the stopmonitor package.

This module provides input validation, the fetch error taxonomy and
error handling helpers with consistent error reporting across the application.
"""

from .exceptions import (
    ApplicationError,
    ErrorSeverity,
    FetchError,
    NetworkError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_fetch_error,
)

from .validators import (
    validate_base_url,
    validate_enum_choice,
    validate_non_empty_string,
    validate_positive_float,
    validate_positive_integer,
    validate_timezone,
)

__all__ = [
    # Exceptions
    "ErrorSeverity",
    "ValidationError",
    "FetchError",
    "NetworkError",
    "ApplicationError",
    # Handlers
    "handle_error",
    "handle_config_error",
    "handle_fetch_error",
    "handle_cli_error",
    # Validators
    "validate_base_url",
    "validate_enum_choice",
    "validate_non_empty_string",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_timezone",
]
