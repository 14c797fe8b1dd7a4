"""Loading of pre-formed JSON events for replay."""

import glob
from typing import List

import orjson
import structlog
from pydantic import ValidationError

from ..errors import EventFileError, EventValidationError
from ..protocol.models import Event

logger = structlog.get_logger(__name__)


def collect_event_files(pattern: str) -> List[str]:
    """
    Expand a path or glob pattern into event files.

    Matching is case-sensitive and includes hidden files. Results are sorted
    so the dispatch order is stable for a given directory snapshot.

    Raises:
        EventFileError: If the pattern cannot be expanded
    """
    try:
        paths = glob.glob(pattern, include_hidden=True)
    except (OSError, ValueError) as e:
        raise EventFileError(f"Could not expand pattern {pattern!r}: {e}") from e
    return sorted(paths)


def parse_event(payload: bytes, source: str = "<payload>") -> Event:
    """
    Decode a JSON document into an Event.

    Unknown fields are kept; wrong types are rejected.

    Raises:
        EventValidationError: If the payload is not valid JSON or not an event
    """
    try:
        data = orjson.loads(payload)
    except orjson.JSONDecodeError as e:
        raise EventValidationError(f"Invalid JSON in {source}: {e}") from e

    if not isinstance(data, dict):
        raise EventValidationError(
            f"Invalid event in {source}: expected a JSON object, got {type(data).__name__}"
        )

    try:
        return Event.model_validate(data)
    except ValidationError as e:
        raise EventValidationError(f"Invalid event in {source}: {e}") from e


def load_event_file(path: str) -> Event:
    """
    Read and decode one event file.

    Raises:
        EventFileError: If the file cannot be read
        EventValidationError: If its content is not a valid event
    """
    try:
        with open(path, "rb") as f:
            payload = f.read()
    except OSError as e:
        raise EventFileError(f"Could not read event file {path}: {e}") from e

    event = parse_event(payload, source=path)
    logger.debug("event_file_loaded", path=path, event_id=event.event_id.hex)
    return event
