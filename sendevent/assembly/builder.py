"""Manual assembly of a single event from command-line values."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import structlog

from ..protocol.models import ClientSdkInfo, Event, LogEntry
from .breadcrumbs import extract_breadcrumbs
from .parsers import parse_level, parse_timestamp, split_key_value
from .resolvers import resolve_release, resolve_user
from .sources import (
    EnvironmentSource,
    OsEnvironment,
    current_user_name,
    detect_release_name,
    sdk_info,
)

logger = structlog.get_logger(__name__)

DEFAULT_PLATFORM = "other"
ENVIRON_KEY = "environ"


@dataclass
class ManualEventOptions:
    """Discrete event values as given on the command line."""

    level: Optional[str] = None
    timestamp: Optional[str] = None
    release: Optional[str] = None
    dist: Optional[str] = None
    environment: Optional[str] = None
    no_environ: bool = False
    messages: List[str] = field(default_factory=list)
    message_args: List[str] = field(default_factory=list)
    platform: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    extra: List[str] = field(default_factory=list)
    user: List[str] = field(default_factory=list)
    fingerprint: List[str] = field(default_factory=list)
    logfile: Optional[str] = None
    with_categories: bool = False


class EventBuilder:
    """
    Build an Event from ManualEventOptions.

    The process-level collaborators (environment, release detection, OS user,
    SDK descriptor) are injected so assembly stays deterministic under test.
    """

    def __init__(
        self,
        environment: Optional[EnvironmentSource] = None,
        detect_release: Callable[[], Optional[str]] = detect_release_name,
        current_user: Callable[[], Optional[str]] = current_user_name,
        sdk: Callable[[], ClientSdkInfo] = sdk_info,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.environment = environment or OsEnvironment()
        self.detect_release = detect_release
        self.current_user = current_user
        self.sdk = sdk
        self.clock = clock

    def build(self, options: ManualEventOptions) -> Event:
        """
        Assemble the event.

        Raises:
            EventValidationError: On a malformed timestamp, pair or IP address
            EventFileError: If the logfile cannot be read
        """
        fields: Dict[str, Any] = {
            "sdk": self.sdk(),
            "level": parse_level(options.level),
            "release": resolve_release(options.release, self.detect_release),
            "dist": options.dist,
            "environment": options.environment,
            "platform": options.platform or DEFAULT_PLATFORM,
            "logentry": self.build_logentry(options.messages, options.message_args),
        }

        if options.timestamp is not None:
            fields["timestamp"] = parse_timestamp(options.timestamp)

        fields["tags"] = self.build_tags(options.tags)
        fields["extra"] = self.build_extra(options.extra, options.no_environ)
        fields["user"] = resolve_user(options.user, self.current_user)

        if options.fingerprint:
            fields["fingerprint"] = list(options.fingerprint)

        if options.logfile:
            fields["breadcrumbs"] = extract_breadcrumbs(
                options.logfile, options.with_categories, clock=self.clock
            )

        event = Event(**fields)
        logger.debug(
            "event_assembled",
            event_id=event.event_id.hex,
            level=event.level.value,
            tags=len(event.tags),
            breadcrumbs=len(event.breadcrumbs),
        )
        return event

    @staticmethod
    def build_logentry(messages: List[str], message_args: List[str]) -> Optional[LogEntry]:
        """Join message fragments with newlines; no fragments means no message."""
        if not messages:
            return None
        return LogEntry(message="\n".join(messages), params=list(message_args))

    @staticmethod
    def build_tags(pairs: List[str]) -> Dict[str, str]:
        tags: Dict[str, str] = {}
        for pair in pairs:
            key, value = split_key_value(pair, "tag")
            tags[key] = value
        return tags

    def build_extra(self, pairs: List[str], no_environ: bool = False) -> Dict[str, Any]:
        """
        Merge the environment snapshot and ``key:value`` extras.

        The snapshot goes in first, so an explicit ``environ:...`` pair
        replaces it.
        """
        extra: Dict[str, Any] = {}
        if not no_environ:
            extra[ENVIRON_KEY] = self.environment.snapshot()
        for pair in pairs:
            key, value = split_key_value(pair, "extra")
            extra[key] = value
        return extra
