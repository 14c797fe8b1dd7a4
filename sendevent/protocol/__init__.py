"""Sentry event protocol."""

from .models import (
    AUTO_IP_ADDRESS,
    MAX_BREADCRUMBS,
    Breadcrumb,
    ClientSdkInfo,
    Event,
    Level,
    LogEntry,
    User,
)

__all__ = [
    "AUTO_IP_ADDRESS",
    "MAX_BREADCRUMBS",
    "Breadcrumb",
    "ClientSdkInfo",
    "Event",
    "Level",
    "LogEntry",
    "User",
]
