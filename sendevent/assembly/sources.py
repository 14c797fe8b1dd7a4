"""Process-level data sources consulted while assembling an event."""

import getpass
import os
from typing import Dict, Mapping, Optional, Protocol

import structlog
from sentry_sdk.utils import get_default_release

from .. import __version__
from ..protocol.models import ClientSdkInfo

logger = structlog.get_logger(__name__)

SDK_NAME = "sendevent"


class EnvironmentSource(Protocol):
    """Provides a snapshot of environment variables."""

    def snapshot(self) -> Dict[str, str]:
        ...


class OsEnvironment:
    """Environment variables of the running process."""

    def snapshot(self) -> Dict[str, str]:
        return dict(os.environ)


class StaticEnvironment:
    """Fixed variable set, used where the process environment must not leak in."""

    def __init__(self, variables: Optional[Mapping[str, str]] = None):
        self.variables = dict(variables or {})

    def snapshot(self) -> Dict[str, str]:
        return dict(self.variables)


def sdk_info() -> ClientSdkInfo:
    """Descriptor attached to every manually assembled event."""
    return ClientSdkInfo(name=SDK_NAME, version=__version__)


def detect_release_name() -> Optional[str]:
    """
    Detect the release name from the environment.

    Looks at SENTRY_RELEASE, the current git HEAD and common CI/hosting
    variables, in that order.

    Returns:
        Release name, or None if nothing could be detected
    """
    release = get_default_release()
    if release:
        logger.debug("release_detected", release=release)
        return release
    return None


def current_user_name() -> Optional[str]:
    """Name of the OS user running the process, or None if unknown."""
    try:
        return getpass.getuser()
    except (OSError, KeyError) as e:
        logger.debug("user_lookup_failed", error=str(e))
        return None
