"""
Display formatting shared by the aggregators.

Dates use the day-first layout of the dashboard (dd/mm/yyyy) and times a
24-hour clock with seconds.
"""

import math
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

DATE_FORMAT = "%d/%m/%Y"
TIME_FORMAT = "%H:%M:%S"


def _localize(value: datetime, tz_name: Optional[str]) -> datetime:
    # Naive timestamps carry no offset to convert from; show them as received.
    if tz_name and value.tzinfo is not None:
        return value.astimezone(ZoneInfo(tz_name))
    return value


def format_time(value: Optional[datetime], placeholder: str = "--",
                tz_name: Optional[str] = None) -> str:
    """HH:MM:SS of `value`, or the placeholder when there is none."""
    if value is None:
        return placeholder
    return _localize(value, tz_name).strftime(TIME_FORMAT)


def format_datetime(value: Optional[datetime], placeholder: str = "--",
                    tz_name: Optional[str] = None) -> str:
    """dd/mm/yyyy HH:MM:SS of `value`, or the placeholder when there is none."""
    if value is None:
        return placeholder
    return _localize(value, tz_name).strftime(f"{DATE_FORMAT} {TIME_FORMAT}")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return int(math.floor(value + 0.5))
