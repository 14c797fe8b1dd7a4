"""Exceptions raised while assembling and dispatching events."""


class SendEventError(Exception):
    """Base class for every fatal error of the send-event command."""


class EventValidationError(SendEventError):
    """Malformed user input: timestamp, key:value pair, IP address or event file."""


class ConfigurationError(SendEventError):
    """Missing or malformed destination DSN."""


class EventFileError(SendEventError):
    """An event file, logfile or glob pattern could not be read."""
