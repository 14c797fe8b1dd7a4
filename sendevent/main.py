"""Command-line entry point for sending events to Sentry."""

import argparse
import logging
import sys
from typing import List, Optional

import structlog

from . import __version__
from .assembly.builder import ManualEventOptions
from .command import execute
from .config import Settings, load_settings
from .dispatch.transport import SentryTransport, Transport
from .errors import ConfigurationError, SendEventError

logger = structlog.get_logger(__name__)

DESCRIPTION = "Send a manual event to Sentry."

EPILOG = (
    "NOTE: This command will validate input parameters and attempt to send an "
    "event to Sentry. Due to network errors, rate limits or sampling the event "
    "is not guaranteed to actually arrive. Check debug output for transmission "
    "errors by passing --log-level=debug or setting SENTRY_LOG_LEVEL=debug."
)


def configure_logging(level: str) -> None:
    """Configure structured logging on stderr."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sendevent",
        description=DESCRIPTION,
        epilog=EPILOG,
    )
    parser.add_argument(
        "path",
        nargs="?",
        metavar="PATH",
        help="The path or glob to the file(s) in JSON format to send as event(s). "
        "When provided, all other arguments are ignored.",
    )
    parser.add_argument(
        "-l",
        "--level",
        metavar="LEVEL",
        help="Optional event severity/log level. (debug|info|warning|error|fatal) "
        "[defaults to 'error']",
    )
    parser.add_argument(
        "--timestamp",
        metavar="TIMESTAMP",
        help="Optional event timestamp in one of supported formats: "
        "unix timestamp, RFC2822 or RFC3339.",
    )
    parser.add_argument("-r", "--release", metavar="RELEASE", help="Optional identifier of the release.")
    parser.add_argument("-d", "--dist", metavar="DISTRIBUTION", help="Set the distribution.")
    parser.add_argument(
        "-E", "--env", dest="environment", metavar="ENVIRONMENT", help="Send with a specific environment."
    )
    parser.add_argument(
        "--no-environ", action="store_true", help="Do not send environment variables along."
    )
    parser.add_argument(
        "-m",
        "--message",
        dest="messages",
        action="append",
        default=[],
        metavar="MESSAGE",
        help="The event message.",
    )
    parser.add_argument(
        "-a",
        "--message-arg",
        dest="message_args",
        action="append",
        default=[],
        metavar="MESSAGE_ARG",
        help="Arguments for the event message.",
    )
    parser.add_argument(
        "-p",
        "--platform",
        metavar="PLATFORM",
        help="Override the default 'other' platform specifier.",
    )
    parser.add_argument(
        "-t",
        "--tag",
        dest="tags",
        action="append",
        default=[],
        metavar="KEY:VALUE",
        help="Add a tag (key:value) to the event.",
    )
    parser.add_argument(
        "-e",
        "--extra",
        action="append",
        default=[],
        metavar="KEY:VALUE",
        help="Add extra information (key:value) to the event.",
    )
    parser.add_argument(
        "-u",
        "--user",
        action="append",
        default=[],
        metavar="KEY:VALUE",
        help="Add user information (key:value) to the event. [eg: id:42, username:foo]",
    )
    parser.add_argument(
        "-f",
        "--fingerprint",
        action="append",
        default=[],
        metavar="FINGERPRINT",
        help="Change the fingerprint of the event.",
    )
    parser.add_argument(
        "--logfile",
        metavar="PATH",
        help="Send a logfile as breadcrumbs with the event (last 100 records).",
    )
    parser.add_argument(
        "--with-categories",
        action="store_true",
        help='Parse a leading category off logfile lines, e.g. "INFO: Something broke" '
        'becomes a breadcrumb with level "info" and message "Something broke".',
    )
    parser.add_argument("--dsn", metavar="DSN", help="Override the SENTRY_DSN setting.")
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        help="Log level for diagnostic output on stderr (overrides SENTRY_LOG_LEVEL).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def options_from_args(args: argparse.Namespace) -> ManualEventOptions:
    return ManualEventOptions(
        level=args.level,
        timestamp=args.timestamp,
        release=args.release,
        dist=args.dist,
        environment=args.environment,
        no_environ=args.no_environ,
        messages=args.messages,
        message_args=args.message_args,
        platform=args.platform,
        tags=args.tags,
        extra=args.extra,
        user=args.user,
        fingerprint=args.fingerprint,
        logfile=args.logfile,
        with_categories=args.with_categories,
    )


def main(
    argv: Optional[List[str]] = None,
    settings: Optional[Settings] = None,
    transport: Optional[Transport] = None,
) -> int:
    """
    Run the command.

    Returns:
        Process exit code: 0 on success, 1 on any fatal error
    """
    args = build_parser().parse_args(argv)

    if settings is None:
        try:
            settings = load_settings()
        except ConfigurationError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1

    overrides = {}
    if args.dsn:
        overrides["dsn"] = args.dsn.strip()
    if args.log_level:
        overrides["log_level"] = args.log_level
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging(settings.log_level)

    transport = transport or SentryTransport(flush_timeout=settings.flush_timeout)

    try:
        execute(args.path, options_from_args(args), settings, transport)
    except SendEventError as e:
        logger.error("send_event_failed", error=str(e), error_type=type(e).__name__)
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
