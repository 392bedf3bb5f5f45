"""Shared models used across webdriver-bridge."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class Dialect(str, enum.Enum):
    """Wire-protocol dialect spoken by a driver endpoint."""

    W3C = "w3c"
    LEGACY = "legacy"


class HTTPMethod(str, enum.Enum):
    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


class ErrorCategory(str, enum.Enum):
    """Remote failure categories shared by both dialects.

    Values are the W3C error code strings. ``element not visible`` and
    ``element not selectable`` only exist on the legacy wire.
    """

    ELEMENT_CLICK_INTERCEPTED = "element click intercepted"
    ELEMENT_NOT_INTERACTABLE = "element not interactable"
    ELEMENT_NOT_SELECTABLE = "element not selectable"
    ELEMENT_NOT_VISIBLE = "element not visible"
    INSECURE_CERTIFICATE = "insecure certificate"
    INVALID_ARGUMENT = "invalid argument"
    INVALID_COOKIE_DOMAIN = "invalid cookie domain"
    INVALID_ELEMENT_STATE = "invalid element state"
    INVALID_SELECTOR = "invalid selector"
    INVALID_SESSION_ID = "invalid session id"
    JAVASCRIPT_ERROR = "javascript error"
    MOVE_TARGET_OUT_OF_BOUNDS = "move target out of bounds"
    NO_SUCH_ALERT = "no such alert"
    NO_SUCH_COOKIE = "no such cookie"
    NO_SUCH_ELEMENT = "no such element"
    NO_SUCH_FRAME = "no such frame"
    NO_SUCH_SHADOW_ROOT = "no such shadow root"
    NO_SUCH_WINDOW = "no such window"
    SCRIPT_TIMEOUT = "script timeout"
    SESSION_NOT_CREATED = "session not created"
    STALE_ELEMENT_REFERENCE = "stale element reference"
    DETACHED_SHADOW_ROOT = "detached shadow root"
    TIMEOUT = "timeout"
    UNABLE_TO_SET_COOKIE = "unable to set cookie"
    UNABLE_TO_CAPTURE_SCREEN = "unable to capture screen"
    UNEXPECTED_ALERT_OPEN = "unexpected alert open"
    UNKNOWN_COMMAND = "unknown command"
    UNKNOWN_ERROR = "unknown error"
    UNKNOWN_METHOD = "unknown method"
    UNSUPPORTED_OPERATION = "unsupported operation"


INCONCLUSIVE_INTERACTION_CATEGORIES = frozenset(
    {
        ErrorCategory.STALE_ELEMENT_REFERENCE,
        ErrorCategory.ELEMENT_NOT_VISIBLE,
        ErrorCategory.ELEMENT_NOT_SELECTABLE,
        ErrorCategory.INVALID_ELEMENT_STATE,
    }
)


class SessionState(str, enum.Enum):
    """Lifecycle of a driver session."""

    UNOPENED = "unopened"
    OPENING = "opening"
    OPEN = "open"
    CLOSED = "closed"


class EventLevel(str, enum.Enum):
    """Severity of driver events."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DriverEvent(BaseModel):
    """Structured entry emitted by the process, transport and session layers."""

    type: str
    message: str
    level: EventLevel = EventLevel.INFO
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
