"""Observation date/time codec.

Three representations are involved:

  - eBird wire format: ``obsDt`` is ``YYYY-MM-DD HH:MM`` or just ``YYYY-MM-DD``
    when the checklist has no start time.
  - ``CanonicalTimestamp``: a date plus an optional time of day (minute
    precision). Used for comparisons and rendering.
  - Persisted text: ``M/D/YYYY`` or ``M/D/YYYY H:MM``. This is what the ledger
    file stores and what notification e-mails show.

``parse(render(ts)) == ts`` holds for every timestamp.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time

from ebird_notifier.exceptions import DecodeError


@dataclass(frozen=True)
class CanonicalTimestamp:
    """A calendar date with an optional time of day."""

    day: date
    time_of_day: time | None = None

    @property
    def has_time(self) -> bool:
        return self.time_of_day is not None

    def as_datetime(self) -> datetime:
        """Naive datetime for age comparisons (midnight when date-only)."""
        return datetime.combine(self.day, self.time_of_day or time.min)


# =============================================================================
# Wire format (eBird API)
# =============================================================================


def decode(raw_date: str, raw_time: str | None = None) -> CanonicalTimestamp:
    """Decode an eBird date and optional time into a CanonicalTimestamp.

    Accepts ``2024-04-01``, ``2024-04-01 06:30`` or a date plus a separate
    ``raw_time`` such as ``06:30``. Seconds, if present, are dropped.

    Raises:
        DecodeError: The date is not a valid calendar date or the time is
            malformed.
    """
    date_part, _, time_part = raw_date.strip().partition(" ")
    if raw_time:
        time_part = raw_time.strip()

    try:
        day = date.fromisoformat(date_part)
    except ValueError:
        msg = f"Invalid observation date {raw_date!r}"
        raise DecodeError(msg) from None

    if not time_part:
        return CanonicalTimestamp(day)

    try:
        clock = time.fromisoformat(time_part.strip())
    except ValueError:
        msg = f"Invalid observation time {time_part!r}"
        raise DecodeError(msg) from None
    return CanonicalTimestamp(day, clock.replace(second=0, microsecond=0))


# =============================================================================
# Persisted text
# =============================================================================


def render(ts: CanonicalTimestamp) -> str:
    """Render as ``M/D/YYYY`` or ``M/D/YYYY H:MM`` (only minutes are padded)."""
    text = f"{ts.day.month}/{ts.day.day}/{ts.day.year}"
    if ts.time_of_day is not None:
        text += f" {ts.time_of_day.hour}:{ts.time_of_day.minute:02d}"
    return text


def _int_token(token: str, field: str, text: str) -> int:
    if not (token.isascii() and token.isdigit()):
        msg = f"Failed to parse {field} from {text!r}"
        raise DecodeError(msg)
    return int(token)


def parse(text: str) -> CanonicalTimestamp:
    """Parse text produced by ``render`` back into a CanonicalTimestamp.

    Raises:
        DecodeError: Missing separator, non-numeric token, or an out-of-range
            date/time value.
    """
    segments = text.strip().split(" ")
    date_tokens = segments[0].split("/")
    if len(date_tokens) != 3:
        msg = f"Expected M/D/YYYY in timestamp {text!r}"
        raise DecodeError(msg)
    if len(segments) > 2:
        msg = f"Unexpected trailing data in timestamp {text!r}"
        raise DecodeError(msg)
    month = _int_token(date_tokens[0], "month", text)
    day_of_month = _int_token(date_tokens[1], "day", text)
    year = _int_token(date_tokens[2], "year", text)

    try:
        day = date(year, month, day_of_month)
    except ValueError as e:
        msg = f"Invalid date in timestamp {text!r}: {e}"
        raise DecodeError(msg) from None

    if len(segments) == 1:
        return CanonicalTimestamp(day)

    time_tokens = segments[1].split(":")
    if len(time_tokens) != 2:
        msg = f"Expected H:MM in timestamp {text!r}"
        raise DecodeError(msg)
    hour = _int_token(time_tokens[0], "hour", text)
    minute = _int_token(time_tokens[1], "minute", text)

    try:
        clock = time(hour, minute)
    except ValueError as e:
        msg = f"Invalid time in timestamp {text!r}: {e}"
        raise DecodeError(msg) from None
    return CanonicalTimestamp(day, clock)
