"""Turn the tail of a logfile into event breadcrumbs."""

from collections import deque
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

import structlog

from ..errors import EventFileError
from ..protocol.models import MAX_BREADCRUMBS, Breadcrumb, Level
from .parsers import parse_category_level

logger = structlog.get_logger(__name__)

CATEGORY_SEPARATOR = ": "


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def read_tail(path: str, limit: int = MAX_BREADCRUMBS) -> List[str]:
    """
    Read the last ``limit`` lines of a text file, oldest first.

    Raises:
        EventFileError: If the file cannot be opened, read or decoded
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = deque((line.rstrip("\r\n") for line in f), maxlen=limit)
    except (OSError, UnicodeDecodeError) as e:
        raise EventFileError(f"Could not read logfile {path}: {e}") from e
    return list(lines)


def split_category(line: str) -> Tuple[Optional[Level], str]:
    """
    Split ``"CATEGORY: message"`` into (level, message).

    Returns (None, line) when the line has no prefix or the prefix is not
    a known level.
    """
    category, sep, rest = line.partition(CATEGORY_SEPARATOR)
    if not sep:
        return None, line
    level = parse_category_level(category)
    if level is None:
        return None, line
    return level, rest


def line_to_breadcrumb(line: str, timestamp: datetime, with_categories: bool) -> Breadcrumb:
    level = None
    message = line
    if with_categories:
        level, message = split_category(line)
    return Breadcrumb(
        timestamp=timestamp,
        level=level,
        message=message,
    )


def extract_breadcrumbs(
    path: str,
    with_categories: bool = False,
    clock: Optional[Callable[[], datetime]] = None,
) -> List[Breadcrumb]:
    """
    Extract breadcrumbs from the most recent lines of a logfile.

    Args:
        path: Logfile path
        with_categories: Parse a leading ``LEVEL: `` prefix into the level
        clock: Source of the shared breadcrumb timestamp

    Returns:
        At most MAX_BREADCRUMBS breadcrumbs in file order

    Raises:
        EventFileError: If the logfile cannot be read
    """
    lines = read_tail(path)
    timestamp = (clock or _utcnow)()
    breadcrumbs = [line_to_breadcrumb(line, timestamp, with_categories) for line in lines]

    logger.debug(
        "logfile_breadcrumbs_extracted",
        path=path,
        count=len(breadcrumbs),
        with_categories=with_categories,
    )
    return breadcrumbs
