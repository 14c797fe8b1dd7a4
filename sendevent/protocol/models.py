"""Sentry event protocol models."""

import ipaddress
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_serializer,
    model_validator,
)

# Sentry truncates breadcrumbs at 100 per event
MAX_BREADCRUMBS = 100

# Tells the ingestion side to infer the address from the request
AUTO_IP_ADDRESS = "{{auto}}"


def normalize_ip_address(value: str) -> str:
    """
    Validate a user IP address.

    Args:
        value: IPv4/IPv6 address or the ``{{auto}}`` marker

    Returns:
        Canonical address string

    Raises:
        ValueError: If the value is not an IP address
    """
    if value == AUTO_IP_ADDRESS:
        return value
    return str(ipaddress.ip_address(value))


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Interpret naive datetimes as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Level(str, Enum):
    """Sentry event severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


class LogEntry(BaseModel):
    """Structured message: a template plus positional parameters."""

    message: str
    params: List[str] = Field(default_factory=list)


class User(BaseModel):
    """
    Sentry user context.

    Keys without a dedicated field live in ``other`` and are flattened into
    the user object on the wire.
    """

    id: Optional[str] = None
    email: Optional[str] = None
    ip_address: Optional[str] = None
    username: Optional[str] = None
    other: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_other(cls, data: Any) -> Any:
        """Move unknown wire keys into ``other``."""
        if not isinstance(data, dict):
            return data

        known = set(cls.model_fields) - {"other"}
        result = {k: v for k, v in data.items() if k in known}
        other: Dict[str, Any] = {}

        nested = data.get("other")
        if isinstance(nested, dict):
            other.update(nested)
        elif "other" in data:
            other["other"] = nested

        for key, value in data.items():
            if key not in known and key != "other":
                other[key] = value

        result["other"] = other
        return result

    @field_validator("ip_address")
    @classmethod
    def validate_ip_address(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return normalize_ip_address(v)

    @model_serializer(mode="wrap")
    def flatten_other(self, handler) -> Dict[str, Any]:
        data = handler(self)
        other = data.pop("other", None) or {}
        for key, value in other.items():
            data.setdefault(key, value)
        return data


class Breadcrumb(BaseModel):
    """Sentry breadcrumb for event trail."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    type: Optional[str] = None
    category: Optional[str] = None
    level: Optional[Level] = None
    message: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        return ensure_aware(v)


class ClientSdkInfo(BaseModel):
    """Name and version of the client that produced the event."""

    model_config = ConfigDict(extra="allow")

    name: str
    version: str


class Event(BaseModel):
    """
    Sentry event.

    Built once per dispatch attempt. Fields this model does not know about
    (exception, contexts, request, ...) are kept and sent unchanged.
    """

    model_config = ConfigDict(extra="allow")

    # Identifiers
    event_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    timestamp: Optional[datetime] = None

    # Core fields
    level: Level = Level.ERROR
    platform: str = "other"
    release: Optional[str] = None
    dist: Optional[str] = None
    environment: Optional[str] = None

    # Message
    logentry: Optional[LogEntry] = None

    # Context
    user: Optional[User] = None
    tags: Dict[str, str] = Field(default_factory=dict)
    extra: Dict[str, Any] = Field(default_factory=dict)
    fingerprint: Optional[List[str]] = None

    # Breadcrumbs
    breadcrumbs: List[Breadcrumb] = Field(default_factory=list)

    # SDK info
    sdk: Optional[ClientSdkInfo] = None

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(v)

    @field_validator("fingerprint")
    @classmethod
    def validate_fingerprint(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is not None and not v:
            raise ValueError("fingerprint must not be empty")
        return v

    @field_validator("breadcrumbs", mode="before")
    @classmethod
    def unwrap_breadcrumbs(cls, v: Any) -> Any:
        """Accept both ``{"values": [...]}`` and a bare list."""
        if v is None:
            return []
        if isinstance(v, dict) and "values" in v:
            return v["values"] or []
        return v

    @field_validator("breadcrumbs")
    @classmethod
    def keep_recent_breadcrumbs(cls, v: List[Breadcrumb]) -> List[Breadcrumb]:
        return v[-MAX_BREADCRUMBS:]

    @field_serializer("event_id")
    def serialize_event_id(self, v: uuid.UUID) -> str:
        return v.hex

    @field_serializer("breadcrumbs", mode="wrap")
    def serialize_breadcrumbs(self, v: List[Breadcrumb], handler) -> Dict[str, Any]:
        return {"values": handler(v)}

    def to_payload(self) -> Dict[str, Any]:
        """
        Serialize to the JSON-compatible Sentry wire format.

        Returns:
            Event payload dict without unset fields
        """
        payload = self.model_dump(mode="json", exclude_none=True)
        if not self.breadcrumbs:
            payload.pop("breadcrumbs", None)
        return payload
