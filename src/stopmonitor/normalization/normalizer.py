"""
Normalization of backend payloads into stop events.

The backend answers either with a bare list of stop records or with an
envelope object carrying them under "stops". Records come in several shapes:
the start of a stop may be called start_time, start or timestamp, and the
duration may be called duration_minutes or duration. This module resolves
each field through an explicit, ordered chain and produces a tuple of
immutable StopEvent values. Nothing past this module sees raw records.

Resolution rules:

- start time: first present of start_time, start, timestamp. "Present" means
  not None, "", 0 or False. The chosen value is parsed as an
  ISO-8601 string or as epoch milliseconds; if it cannot be parsed the event
  keeps no start time rather than falling through to the next field.
- duration: first non-None of duration_minutes, duration, else 0. Values
  that are not numbers (or numeric strings) count as 0.
- reason: missing or empty reasons get the configured sentinel label.
- machine: only string labels are kept, so scoping matches exactly.

Lone UTF-16 surrogates (legal as JSON escapes) are replaced in reason and
machine labels so the text can always be encoded.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any, Optional, Tuple

from ..models.events import StopEvent

logger = logging.getLogger(__name__)

DEFAULT_UNKNOWN_REASON = "Desconhecido"

# Ordered resolution chains; earlier keys take precedence.
START_TIME_FIELDS: Tuple[str, ...] = ("start_time", "start", "timestamp")
END_TIME_FIELDS: Tuple[str, ...] = ("end_time",)
DURATION_FIELDS: Tuple[str, ...] = ("duration_minutes", "duration")

ENVELOPE_FIELD = "stops"


def _is_present(value: Any) -> bool:
    # Empty strings, zero, NaN and False count as missing, like a falsy value.
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0 and not math.isnan(value)
    return True


def _clean_text(value: str) -> str:
    # Lone surrogates from JSON escapes cannot be encoded; replace them.
    return value.encode("utf-8", "replace").decode("utf-8")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp value from a stop record.

    Accepts datetime instances, ISO-8601 strings (a trailing "Z" is UTC) and
    numbers, which are epoch milliseconds.

    Returns:
        The parsed datetime, or None if the value is not a usable timestamp
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            logger.debug(f"Unparseable timestamp: {value!r}")
            return None
    return None


def _coerce_minutes(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            logger.debug(f"Non-numeric duration: {value!r}")
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def resolve_start_time(record: Mapping) -> Optional[datetime]:
    """Start of the stop from the first present of start_time, start, timestamp."""
    for key in START_TIME_FIELDS:
        value = record.get(key)
        if _is_present(value):
            return parse_timestamp(value)
    return None


def resolve_end_time(record: Mapping) -> Optional[datetime]:
    """End of the stop; None means the stop is still ongoing."""
    for key in END_TIME_FIELDS:
        value = record.get(key)
        if _is_present(value):
            return parse_timestamp(value)
    return None


def resolve_duration_minutes(record: Mapping) -> float:
    """Duration from the first non-None of duration_minutes, duration; else 0."""
    for key in DURATION_FIELDS:
        value = record.get(key)
        if value is not None:
            return _coerce_minutes(value)
    return 0.0


def resolve_reason(record: Mapping, unknown_reason: str = DEFAULT_UNKNOWN_REASON) -> str:
    """Stop reason, or the sentinel label when the record has none."""
    value = record.get("reason")
    if not _is_present(value):
        return unknown_reason
    return _clean_text(value if isinstance(value, str) else str(value))


def resolve_machine(record: Mapping) -> Optional[str]:
    """
    Machine label of the record.

    Only string labels are kept: a numeric label such as 1 never matches the
    monitored machine "1", so it is treated as missing.
    """
    value = record.get("machine")
    if not isinstance(value, str):
        if value is not None:
            logger.debug(f"Ignoring non-string machine label: {value!r}")
        return None
    return _clean_text(value)


def normalize_record(record: Any, unknown_reason: str = DEFAULT_UNKNOWN_REASON) -> StopEvent:
    """
    Convert one raw record into a StopEvent.

    StopEvent instances are returned unchanged. Anything that is not a
    mapping yields an event with every field defaulted, so positions in the
    sequence are kept.
    """
    if isinstance(record, StopEvent):
        return record
    if not isinstance(record, Mapping):
        logger.debug(f"Record is not an object, using defaults: {record!r}")
        record = {}
    return StopEvent(
        id=record.get("id"),
        machine=resolve_machine(record),
        reason=resolve_reason(record, unknown_reason),
        start_time=resolve_start_time(record),
        end_time=resolve_end_time(record),
        duration_minutes=resolve_duration_minutes(record),
    )


def extract_records(payload: Any) -> Sequence:
    """
    Pull the record list out of a payload.

    A bare list is returned as is, an object yields its "stops" list, and
    any other shape (including {"stops": null}) yields an empty list.
    """
    if isinstance(payload, (list, tuple)):
        return payload
    if isinstance(payload, Mapping):
        stops = payload.get(ENVELOPE_FIELD)
        if isinstance(stops, (list, tuple)):
            return stops
        if stops is not None:
            logger.warning(f"Ignoring '{ENVELOPE_FIELD}' field of type {type(stops).__name__}")
        return []
    if payload is not None:
        logger.warning(f"Ignoring payload of type {type(payload).__name__}")
    return []


def normalize(payload: Any, unknown_reason: str = DEFAULT_UNKNOWN_REASON) -> Tuple[StopEvent, ...]:
    """
    Normalize a backend payload into stop events.

    Order and length of the record list are preserved; no sorting happens.
    Feeding the result back in returns an equal tuple.

    Args:
        payload: Decoded JSON body of the data endpoint
        unknown_reason: Label for records without a reason

    Returns:
        Tuple of StopEvent, possibly empty; never raises on bad shapes
    """
    return tuple(normalize_record(r, unknown_reason) for r in extract_records(payload))
