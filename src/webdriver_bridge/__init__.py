"""webdriver-bridge: supervise WebDriver processes, negotiate sessions and dispatch typed requests.

Two wire dialects are supported behind one transport: the W3C protocol
and the legacy JSON wire protocol with its status/value envelope.
"""

from .capabilities import CapabilityDocument, ChromeOptions  # noqa: F401
from .errors import (  # noqa: F401
    DriverNotReady,
    InvalidCapabilities,
    ProcessLaunchFailed,
    RemoteError,
    SessionCreationFailed,
    SessionNotOpen,
    TransportFailure,
    WebDriverError,
    is_inconclusive_interaction,
)
from .models import Dialect, ErrorCategory, SessionState  # noqa: F401
from .process import DriverProcess  # noqa: F401
from .session import Session  # noqa: F401
from .wire import WireTransport  # noqa: F401
