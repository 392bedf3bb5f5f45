"""Typed requests understood by :class:`~webdriver_bridge.wire.transport.WireTransport`.

Each request declares its HTTP method, its path and body for a given
dialect, and the schema its response value is validated against. A
``response_type`` of ``None`` means the response carries no value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, ClassVar, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from ..capabilities.document import CapabilityDocument
from ..errors import SessionNotOpen
from ..models import Dialect, HTTPMethod
from .dialects import LEGACY_ELEMENT_KEY, W3C_ELEMENT_KEY, Reply, codec_for
from .locators import ElementLocator


@lru_cache(maxsize=None)
def _adapter(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


class StatusInfo(BaseModel):
    """Driver readiness report. Legacy drivers omit ``ready``."""

    model_config = ConfigDict(extra="allow")

    ready: Optional[bool] = None
    message: Optional[str] = None


class NewSessionResult(BaseModel):
    session_id: str
    capabilities: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class ElementReference:
    """Opaque handle of a remote element."""

    id: str

    @classmethod
    def from_wire(cls, value: Any) -> "ElementReference":
        if isinstance(value, dict):
            for key in (W3C_ELEMENT_KEY, LEGACY_ELEMENT_KEY):
                element_id = value.get(key)
                if isinstance(element_id, str) and element_id:
                    return cls(element_id)
        raise ValueError(f"Not an element reference: {value!r}")

    def to_wire(self, dialect: Dialect) -> dict[str, str]:
        return {codec_for(dialect).element_key: self.id}


@dataclass(frozen=True)
class Request:
    """Base class for every request."""

    method: ClassVar[HTTPMethod] = HTTPMethod.GET
    response_type: ClassVar[Any] = None

    def path_components(self, dialect: Dialect) -> List[str]:
        raise NotImplementedError

    def body(self, dialect: Dialect) -> Optional[dict[str, Any]]:
        if self.method is HTTPMethod.POST:
            return {}
        return None

    def parse_response(self, reply: Reply, dialect: Dialect) -> Any:
        if self.response_type is None:
            return None
        return _adapter(self.response_type).validate_python(reply.value)


@dataclass(frozen=True)
class SessionRequest(Request):
    """Request scoped to a session; ``session`` is filled in by the session when left unset."""

    session: Optional[str] = field(default=None, kw_only=True)

    def session_path(self, *components: str) -> List[str]:
        if not self.session:
            raise SessionNotOpen(f"{type(self).__name__} requires a session id")
        return ["session", self.session, *components]


@dataclass(frozen=True)
class Status(Request):
    response_type: ClassVar[Any] = StatusInfo

    def path_components(self, dialect: Dialect) -> List[str]:
        return ["status"]


@dataclass(frozen=True)
class NewSession(Request):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST

    capabilities: CapabilityDocument

    def path_components(self, dialect: Dialect) -> List[str]:
        return ["session"]

    def body(self, dialect: Dialect) -> dict[str, Any]:
        return codec_for(dialect).new_session_body(self.capabilities.to_wire())

    def parse_response(self, reply: Reply, dialect: Dialect) -> NewSessionResult:
        value = reply.value if isinstance(reply.value, dict) else {}
        if dialect is Dialect.W3C:
            session_id = value.get("sessionId")
            capabilities = value.get("capabilities") or {}
        else:
            session_id = reply.session_id or value.get("sessionId")
            capabilities = value
        if not isinstance(session_id, str) or not session_id:
            raise ValueError("New session response carries no session id")
        return NewSessionResult(session_id=session_id, capabilities=capabilities)


@dataclass(frozen=True)
class DeleteSession(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.DELETE

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path()


@dataclass(frozen=True)
class NavigateTo(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST

    url: str

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path("url")

    def body(self, dialect: Dialect) -> dict[str, Any]:
        return {"url": self.url}


@dataclass(frozen=True)
class GetCurrentUrl(SessionRequest):
    response_type: ClassVar[Any] = str

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path("url")


@dataclass(frozen=True)
class GetTitle(SessionRequest):
    response_type: ClassVar[Any] = str

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path("title")


@dataclass(frozen=True)
class Back(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path("back")


@dataclass(frozen=True)
class Forward(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path("forward")


@dataclass(frozen=True)
class Refresh(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path("refresh")


@dataclass(frozen=True)
class FindElement(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST

    locator: ElementLocator

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path("element")

    def body(self, dialect: Dialect) -> dict[str, Any]:
        return self.locator.to_wire(dialect)

    def parse_response(self, reply: Reply, dialect: Dialect) -> ElementReference:
        return ElementReference.from_wire(reply.value)


@dataclass(frozen=True)
class FindElements(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST

    locator: ElementLocator

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path("elements")

    def body(self, dialect: Dialect) -> dict[str, Any]:
        return self.locator.to_wire(dialect)

    def parse_response(self, reply: Reply, dialect: Dialect) -> List[ElementReference]:
        if not isinstance(reply.value, list):
            raise ValueError(f"Expected a list of elements, got {reply.value!r}")
        return [ElementReference.from_wire(item) for item in reply.value]


@dataclass(frozen=True)
class ElementClick(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST

    element: str

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path("element", self.element, "click")


@dataclass(frozen=True)
class ElementClear(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST

    element: str

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path("element", self.element, "clear")


@dataclass(frozen=True)
class GetElementText(SessionRequest):
    response_type: ClassVar[Any] = str

    element: str

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path("element", self.element, "text")


@dataclass(frozen=True)
class ElementSendKeys(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST

    element: str
    text: str

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path("element", self.element, "value")

    def body(self, dialect: Dialect) -> dict[str, Any]:
        if dialect is Dialect.LEGACY:
            return {"value": list(self.text)}
        return {"text": self.text}


@dataclass(frozen=True)
class ExecuteScript(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST
    response_type: ClassVar[Any] = Any

    script: str
    args: Sequence[Any] = ()

    def path_components(self, dialect: Dialect) -> List[str]:
        if dialect is Dialect.LEGACY:
            return self.session_path("execute")
        return self.session_path("execute", "sync")

    def body(self, dialect: Dialect) -> dict[str, Any]:
        args = [arg.to_wire(dialect) if isinstance(arg, ElementReference) else arg for arg in self.args]
        return {"script": self.script, "args": args}


@dataclass(frozen=True)
class TakeScreenshot(SessionRequest):
    """Returns the base64-encoded PNG of the current viewport."""

    response_type: ClassVar[Any] = str

    def path_components(self, dialect: Dialect) -> List[str]:
        return self.session_path("screenshot")


@dataclass(frozen=True)
class AcceptAlert(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST

    def path_components(self, dialect: Dialect) -> List[str]:
        if dialect is Dialect.LEGACY:
            return self.session_path("accept_alert")
        return self.session_path("alert", "accept")


@dataclass(frozen=True)
class DismissAlert(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST

    def path_components(self, dialect: Dialect) -> List[str]:
        if dialect is Dialect.LEGACY:
            return self.session_path("dismiss_alert")
        return self.session_path("alert", "dismiss")


@dataclass(frozen=True)
class GetAlertText(SessionRequest):
    response_type: ClassVar[Any] = str

    def path_components(self, dialect: Dialect) -> List[str]:
        if dialect is Dialect.LEGACY:
            return self.session_path("alert_text")
        return self.session_path("alert", "text")


@dataclass(frozen=True)
class SendAlertText(SessionRequest):
    method: ClassVar[HTTPMethod] = HTTPMethod.POST

    text: str

    def path_components(self, dialect: Dialect) -> List[str]:
        if dialect is Dialect.LEGACY:
            return self.session_path("alert_text")
        return self.session_path("alert", "text")

    def body(self, dialect: Dialect) -> dict[str, Any]:
        return {"text": self.text}
