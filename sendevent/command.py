"""The send-event command: input selection, dispatch and reporting."""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import structlog
from sentry_sdk.utils import Dsn

from .assembly.builder import EventBuilder, ManualEventOptions
from .config import Settings
from .dispatch.replay import collect_event_files, load_event_file
from .dispatch.transport import Transport

logger = structlog.get_logger(__name__)

MANUAL_SOURCE = "manual"


@dataclass
class DispatchResult:
    """Outcome of one dispatch: where the event came from and its id."""

    source: str
    event_id: str

    def describe(self) -> str:
        if self.source == MANUAL_SOURCE:
            return f"Event dispatched: {self.event_id}"
        return f"Event from file {self.source} dispatched: {self.event_id}"


def print_result(result: DispatchResult) -> None:
    print(result.describe())


def replay_events(
    paths: Sequence[str],
    dsn: Dsn,
    transport: Transport,
    report: Callable[[DispatchResult], None] = print_result,
) -> List[DispatchResult]:
    """
    Dispatch each event file in order.

    The first unreadable or invalid file aborts the run; files after it are
    not attempted.
    """
    results = []
    for path in paths:
        event = load_event_file(path)
        result = DispatchResult(source=path, event_id=transport.send(event, dsn))
        logger.info("event_dispatched", source=path, event_id=result.event_id)
        report(result)
        results.append(result)
    return results


def send_manual_event(
    options: ManualEventOptions,
    dsn: Dsn,
    transport: Transport,
    builder: EventBuilder,
    report: Callable[[DispatchResult], None] = print_result,
) -> DispatchResult:
    """Assemble one event from discrete values and dispatch it."""
    event = builder.build(options)
    result = DispatchResult(source=MANUAL_SOURCE, event_id=transport.send(event, dsn))
    logger.info("event_dispatched", source=MANUAL_SOURCE, event_id=result.event_id)
    report(result)
    return result


def execute(
    path: Optional[str],
    options: ManualEventOptions,
    settings: Settings,
    transport: Transport,
    builder: Optional[EventBuilder] = None,
    report: Callable[[DispatchResult], None] = print_result,
) -> List[DispatchResult]:
    """
    Run the send-event command.

    With ``path`` set, every matching JSON file is replayed and ``options``
    is ignored. Otherwise a single event is assembled from ``options``.

    Args:
        path: Path or glob pattern of event files, or None
        options: Values for manual assembly
        settings: Configuration holding the DSN
        transport: Event sender
        builder: Event builder, defaults to one using the process environment
        report: Called with each result right after its dispatch

    Returns:
        One DispatchResult per dispatched event

    Raises:
        ConfigurationError: If the DSN is missing or malformed
        EventValidationError: On malformed input
        EventFileError: On unreadable files or patterns
    """
    dsn = settings.get_dsn()

    if path is not None:
        paths = collect_event_files(path)
        if not paths:
            logger.warning("no_event_files_matched", pattern=path)
            return []
        return replay_events(paths, dsn, transport, report)

    builder = builder or EventBuilder()
    return [send_manual_event(options, dsn, transport, builder, report)]
