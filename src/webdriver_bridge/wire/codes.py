"""Mapping of wire-level error codes onto :class:`ErrorCategory`."""

from __future__ import annotations

from typing import Optional

from ..models import ErrorCategory

# JSON wire protocol status codes, as reported by chromedriver in legacy mode.
LEGACY_STATUS_CODES: dict[int, ErrorCategory] = {
    6: ErrorCategory.INVALID_SESSION_ID,
    7: ErrorCategory.NO_SUCH_ELEMENT,
    8: ErrorCategory.NO_SUCH_FRAME,
    9: ErrorCategory.UNKNOWN_COMMAND,
    10: ErrorCategory.STALE_ELEMENT_REFERENCE,
    11: ErrorCategory.ELEMENT_NOT_VISIBLE,
    12: ErrorCategory.INVALID_ELEMENT_STATE,
    13: ErrorCategory.UNKNOWN_ERROR,
    15: ErrorCategory.ELEMENT_NOT_SELECTABLE,
    17: ErrorCategory.JAVASCRIPT_ERROR,
    19: ErrorCategory.INVALID_SELECTOR,
    21: ErrorCategory.TIMEOUT,
    23: ErrorCategory.NO_SUCH_WINDOW,
    24: ErrorCategory.INVALID_COOKIE_DOMAIN,
    25: ErrorCategory.UNABLE_TO_SET_COOKIE,
    26: ErrorCategory.UNEXPECTED_ALERT_OPEN,
    27: ErrorCategory.NO_SUCH_ALERT,
    28: ErrorCategory.SCRIPT_TIMEOUT,
    32: ErrorCategory.INVALID_SELECTOR,
    33: ErrorCategory.SESSION_NOT_CREATED,
    34: ErrorCategory.MOVE_TARGET_OUT_OF_BOUNDS,
    60: ErrorCategory.ELEMENT_NOT_INTERACTABLE,
    61: ErrorCategory.INVALID_ARGUMENT,
    62: ErrorCategory.NO_SUCH_COOKIE,
    63: ErrorCategory.UNABLE_TO_CAPTURE_SCREEN,
    64: ErrorCategory.ELEMENT_CLICK_INTERCEPTED,
    65: ErrorCategory.NO_SUCH_SHADOW_ROOT,
    405: ErrorCategory.UNSUPPORTED_OPERATION,
}

# Legacy servers sometimes spell categories with the old camel-case names.
_LEGACY_NAMES: dict[str, ErrorCategory] = {
    "nosuchelement": ErrorCategory.NO_SUCH_ELEMENT,
    "staleelementreference": ErrorCategory.STALE_ELEMENT_REFERENCE,
    "elementnotvisible": ErrorCategory.ELEMENT_NOT_VISIBLE,
    "elementisnotselectable": ErrorCategory.ELEMENT_NOT_SELECTABLE,
    "invalidelementstate": ErrorCategory.INVALID_ELEMENT_STATE,
    "unknowncommand": ErrorCategory.UNKNOWN_COMMAND,
}


def category_for_legacy_status(status: int) -> ErrorCategory:
    return LEGACY_STATUS_CODES.get(status, ErrorCategory.UNKNOWN_ERROR)


def category_for_error_string(code: Optional[str]) -> ErrorCategory:
    if not code:
        return ErrorCategory.UNKNOWN_ERROR
    try:
        return ErrorCategory(code)
    except ValueError:
        squashed = code.replace(" ", "").replace("_", "").lower()
        return _LEGACY_NAMES.get(squashed, ErrorCategory.UNKNOWN_ERROR)


def category_for_http_status(status_code: int) -> ErrorCategory:
    """Fallback used when an error response carries no readable code."""

    if status_code == 404:
        return ErrorCategory.UNKNOWN_COMMAND
    if status_code == 405:
        return ErrorCategory.UNKNOWN_METHOD
    if status_code == 400:
        return ErrorCategory.INVALID_ARGUMENT
    return ErrorCategory.UNKNOWN_ERROR
