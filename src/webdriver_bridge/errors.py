"""Exception taxonomy for driver supervision, session negotiation and dispatch."""

from __future__ import annotations

from typing import Optional, Union

from .models import INCONCLUSIVE_INTERACTION_CATEGORIES, ErrorCategory


class WebDriverError(RuntimeError):
    """Base class for every failure raised by webdriver-bridge."""


class ProcessLaunchFailed(WebDriverError):
    """Raised when the driver executable cannot be spawned."""

    def __init__(self, executable: str, cause: BaseException) -> None:
        self.executable = executable
        self.cause = cause
        super().__init__(f"Failed to launch driver {executable!r}: {cause}")


class DriverNotReady(WebDriverError):
    """Raised when the driver does not answer its status probe in time."""

    def __init__(
        self,
        last_error: Optional[BaseException] = None,
        *,
        exited: bool = False,
        returncode: Optional[int] = None,
    ) -> None:
        self.last_error = last_error
        self.exited = exited
        self.returncode = returncode
        if exited:
            message = f"Driver process exited before becoming ready (code {returncode})"
        elif last_error is not None:
            message = f"Driver failed to start: {last_error}"
        else:
            message = "Driver failed to start within the timeout period"
        super().__init__(message)


class SessionCreationFailed(WebDriverError):
    """Raised when the new-session handshake does not yield a session."""

    def __init__(self, underlying: BaseException) -> None:
        self.underlying = underlying
        super().__init__(f"Session creation failed: {underlying}")


class SessionNotOpen(WebDriverError):
    """Raised when a request is sent through a session that is not open."""


class InvalidCapabilities(WebDriverError):
    """Raised when a capability document cannot be decoded."""


class TransportFailure(WebDriverError):
    """Connection-level failure or a response body that cannot be decoded."""

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        self.url = url
        super().__init__(message)


class RemoteError(WebDriverError):
    """Error reported by the remote driver, categorised across dialects."""

    def __init__(
        self,
        category: ErrorCategory,
        message: Optional[str] = None,
        *,
        code: Union[str, int, None] = None,
        http_status: Optional[int] = None,
    ) -> None:
        self.category = category
        self.message = message
        self.code = code
        self.http_status = http_status
        text = category.value if not message else f"{category.value}: {message}"
        super().__init__(text)

    @property
    def is_inconclusive_interaction(self) -> bool:
        return self.category in INCONCLUSIVE_INTERACTION_CATEGORIES


def is_inconclusive_interaction(error: Union[BaseException, ErrorCategory]) -> bool:
    """Return True if ``error`` means the element state made an action ambiguous.

    Stale, hidden, unselectable and invalid-state elements fall into this
    bucket. Callers may retry these at a higher layer.
    """

    if isinstance(error, ErrorCategory):
        return error in INCONCLUSIVE_INTERACTION_CATEGORIES
    if isinstance(error, RemoteError):
        return error.is_inconclusive_interaction
    return False
