"""Parsers for command-line event values."""

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional, Tuple

from ..errors import EventValidationError
from ..protocol.models import Level, normalize_ip_address

EPOCH_RE = re.compile(r"-?[0-9]+")


def split_key_value(pair: str, kind: str) -> Tuple[str, str]:
    """
    Split a ``key:value`` argument on its first colon.

    Args:
        pair: Raw argument, e.g. ``"id:user:42"``
        kind: What the pair describes (tag, extra, user), used in errors

    Returns:
        Tuple of (key, value); the value keeps any further colons

    Raises:
        EventValidationError: If the pair has no colon
    """
    key, sep, value = pair.partition(":")
    if not sep:
        raise EventValidationError(f"missing {kind} value in {pair!r}")
    return key, value


def parse_level(value: Optional[str]) -> Level:
    """Parse a severity level case-sensitively, defaulting to error."""
    if value is None:
        return Level.ERROR
    try:
        return Level(value)
    except ValueError:
        return Level.ERROR


def parse_category_level(category: str) -> Optional[Level]:
    """Map a log category such as ``INFO`` to a level, ignoring case."""
    try:
        return Level(category.strip().lower())
    except ValueError:
        return None


def _parse_epoch(value: str) -> Optional[datetime]:
    if not EPOCH_RE.fullmatch(value):
        return None
    seconds = int(value)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _parse_rfc2822(value: str) -> Optional[datetime]:
    try:
        dt = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _parse_rfc3339(value: str) -> Optional[datetime]:
    normalized = value.strip()
    if normalized[-1:] in ("Z", "z"):
        normalized = normalized[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    # RFC 3339 requires an explicit offset
    if dt.tzinfo is None:
        return None
    return dt


def parse_timestamp(value: str) -> datetime:
    """
    Parse an event timestamp.

    Accepted formats, tried in order: Unix epoch seconds (integer only),
    RFC 2822, RFC 3339.

    Args:
        value: Raw timestamp string

    Returns:
        Timezone-aware datetime

    Raises:
        EventValidationError: If no format matches
    """
    for parser in (_parse_epoch, _parse_rfc2822, _parse_rfc3339):
        dt = parser(value)
        if dt is not None:
            return dt

    raise EventValidationError(
        f"invalid timestamp {value!r}: expected unix timestamp, RFC2822 or RFC3339"
    )


def parse_ip_address(value: str) -> str:
    """
    Validate a user IP address.

    Raises:
        EventValidationError: If the value is not an IP address
    """
    try:
        return normalize_ip_address(value)
    except ValueError as e:
        raise EventValidationError(f"invalid ip_address {value!r}") from e
