"""Envelope codecs for the W3C and legacy JSON wire dialects."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ..errors import RemoteError, TransportFailure
from ..models import Dialect
from .codes import category_for_error_string, category_for_http_status, category_for_legacy_status

W3C_ELEMENT_KEY = "element-6066-11e4-a52e-4f735466cecf"
LEGACY_ELEMENT_KEY = "ELEMENT"


@dataclass
class Reply:
    """Successful response with the dialect envelope removed."""

    value: Any = None
    session_id: Optional[str] = None


class DialectCodec(ABC):
    """Wrap outgoing payloads and unwrap responses for one dialect."""

    dialect: Dialect
    element_key: str

    @abstractmethod
    def new_session_body(self, capabilities: dict[str, Any]) -> dict[str, Any]:
        """Return the new-session payload wrapping ``capabilities``."""

    @abstractmethod
    def unwrap(self, status_code: int, payload: Any) -> Reply:
        """Return the reply carried by ``payload`` or raise :class:`RemoteError`."""


class W3CCodec(DialectCodec):
    dialect = Dialect.W3C
    element_key = W3C_ELEMENT_KEY

    def new_session_body(self, capabilities: dict[str, Any]) -> dict[str, Any]:
        return {"capabilities": {"alwaysMatch": capabilities, "firstMatch": [{}]}}

    def unwrap(self, status_code: int, payload: Any) -> Reply:
        value = payload.get("value") if isinstance(payload, dict) else None
        if isinstance(value, dict) and "error" in value:
            raise _error_from_value(value, status_code)
        if not 200 <= status_code < 300:
            raise RemoteError(
                category_for_http_status(status_code),
                _text(payload),
                http_status=status_code,
            )
        if payload is not None and not (isinstance(payload, dict) and "value" in payload):
            raise TransportFailure(f"Response is missing the 'value' member: {_text(payload)}")
        return Reply(value=value)


class LegacyCodec(DialectCodec):
    dialect = Dialect.LEGACY
    element_key = LEGACY_ELEMENT_KEY

    def new_session_body(self, capabilities: dict[str, Any]) -> dict[str, Any]:
        return {"desiredCapabilities": capabilities}

    def unwrap(self, status_code: int, payload: Any) -> Reply:
        if isinstance(payload, dict) and "status" in payload:
            status = payload["status"]
            if not isinstance(status, int) or isinstance(status, bool):
                raise TransportFailure(f"Invalid status in response: {status!r}")
            value = payload.get("value")
            if status != 0:
                raise RemoteError(
                    category_for_legacy_status(status),
                    _legacy_message(value),
                    code=status,
                    http_status=status_code,
                )
            return Reply(value=value, session_id=payload.get("sessionId"))
        # Some legacy-mode servers report failures with a W3C style body.
        value = payload.get("value") if isinstance(payload, dict) else None
        if isinstance(value, dict) and "error" in value:
            raise _error_from_value(value, status_code)
        if not 200 <= status_code < 300:
            raise RemoteError(
                category_for_http_status(status_code),
                _text(payload),
                http_status=status_code,
            )
        if payload is None:
            return Reply()
        raise TransportFailure(f"Response is missing the 'status' member: {_text(payload)}")


def codec_for(dialect: Dialect) -> DialectCodec:
    if dialect is Dialect.W3C:
        return W3CCodec()
    if dialect is Dialect.LEGACY:
        return LegacyCodec()
    raise ValueError(f"Unsupported dialect: {dialect}")


def _error_from_value(value: dict[str, Any], status_code: int) -> RemoteError:
    code = value.get("error")
    return RemoteError(
        category_for_error_string(code if isinstance(code, str) else None),
        value.get("message") or None,
        code=code,
        http_status=status_code,
    )


def _legacy_message(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        message = value.get("message")
        return str(message) if message else None
    if value is None:
        return None
    return str(value)


def _text(payload: Any) -> Optional[str]:
    if payload is None:
        return None
    text = str(payload)
    return text if len(text) <= 500 else text[:500] + "..."
