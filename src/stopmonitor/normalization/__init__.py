"""
Record normalization for the stopmonitor package.
"""

from .normalizer import (
    DEFAULT_UNKNOWN_REASON,
    extract_records,
    normalize,
    normalize_record,
    parse_timestamp,
    resolve_duration_minutes,
    resolve_end_time,
    resolve_machine,
    resolve_reason,
    resolve_start_time,
)

__all__ = [
    "DEFAULT_UNKNOWN_REASON",
    "extract_records",
    "normalize",
    "normalize_record",
    "parse_timestamp",
    "resolve_duration_minutes",
    "resolve_end_time",
    "resolve_machine",
    "resolve_reason",
    "resolve_start_time",
]
