from __future__ import annotations

import pytest

from webdriver_bridge.errors import (
    DriverNotReady,
    ProcessLaunchFailed,
    RemoteError,
    SessionCreationFailed,
    TransportFailure,
    WebDriverError,
    is_inconclusive_interaction,
)
from webdriver_bridge.models import ErrorCategory


def test_remote_error_message_includes_category() -> None:
    error = RemoteError(ErrorCategory.NO_SUCH_ELEMENT, "no element #missing", code=7)

    assert str(error) == "no such element: no element #missing"
    assert error.code == 7
    assert isinstance(error, WebDriverError)


def test_driver_not_ready_describes_exit() -> None:
    error = DriverNotReady(exited=True, returncode=3)

    assert "exited" in str(error)
    assert error.returncode == 3


def test_process_launch_failed_keeps_cause() -> None:
    cause = FileNotFoundError("chromedriver")
    error = ProcessLaunchFailed("chromedriver", cause)

    assert error.cause is cause
    assert "chromedriver" in str(error)


def test_session_creation_failed_wraps_underlying() -> None:
    underlying = TransportFailure("connection refused")

    error = SessionCreationFailed(underlying)

    assert error.underlying is underlying
    assert "connection refused" in str(error)


@pytest.mark.parametrize(
    "category, expected",
    [
        (ErrorCategory.STALE_ELEMENT_REFERENCE, True),
        (ErrorCategory.ELEMENT_NOT_VISIBLE, True),
        (ErrorCategory.ELEMENT_NOT_SELECTABLE, True),
        (ErrorCategory.INVALID_ELEMENT_STATE, True),
        (ErrorCategory.NO_SUCH_ELEMENT, False),
        (ErrorCategory.TIMEOUT, False),
    ],
)
def test_inconclusive_interaction(category: ErrorCategory, expected: bool) -> None:
    assert is_inconclusive_interaction(category) is expected
    assert is_inconclusive_interaction(RemoteError(category)) is expected
    assert RemoteError(category).is_inconclusive_interaction is expected


def test_non_remote_errors_are_not_inconclusive() -> None:
    assert not is_inconclusive_interaction(TransportFailure("reset"))
    assert not is_inconclusive_interaction(ValueError("nope"))
