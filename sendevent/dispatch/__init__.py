"""Event replay and delivery."""

from .replay import collect_event_files, load_event_file, parse_event
from .transport import SentryTransport, Transport

__all__ = [
    "SentryTransport",
    "Transport",
    "collect_event_files",
    "load_event_file",
    "parse_event",
]
