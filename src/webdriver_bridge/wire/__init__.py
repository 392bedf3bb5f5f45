"""Wire protocol dialects, request types and the HTTP transport."""

from .dialects import LegacyCodec, Reply, W3CCodec, codec_for  # noqa: F401
from .locators import ElementLocator  # noqa: F401
from .requests import (  # noqa: F401
    AcceptAlert,
    Back,
    DeleteSession,
    DismissAlert,
    ElementClear,
    ElementClick,
    ElementReference,
    ElementSendKeys,
    ExecuteScript,
    FindElement,
    FindElements,
    Forward,
    GetAlertText,
    GetCurrentUrl,
    GetElementText,
    GetTitle,
    NavigateTo,
    NewSession,
    NewSessionResult,
    Refresh,
    Request,
    SendAlertText,
    SessionRequest,
    Status,
    StatusInfo,
    TakeScreenshot,
)
from .transport import WireTransport  # noqa: F401
