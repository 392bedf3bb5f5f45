"""Driver sessions: the new-session handshake and request dispatch."""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Any, Optional

from .capabilities.document import CapabilityDocument
from .errors import SessionCreationFailed, SessionNotOpen, WebDriverError
from .events import EventSink, NullEventSink
from .models import Dialect, EventLevel, SessionState
from .process.supervisor import DEFAULT_POLL_INTERVAL, DriverProcess
from .wire.requests import DeleteSession, NewSession, NewSessionResult, Request, SessionRequest
from .wire.transport import WireTransport

LOGGER = logging.getLogger(__name__)

DEFAULT_STARTUP_TIMEOUT = 10.0
DEFAULT_TEARDOWN_TIMEOUT = 5.0


class Session:
    """A negotiated driver session.

    Build one with :meth:`open` (optionally owning a driver process) or
    :meth:`attach` (never owning one). Every later operation goes through
    :meth:`send`. Closing is best-effort and idempotent.
    """

    def __init__(
        self,
        transport: WireTransport,
        *,
        process: Optional[DriverProcess] = None,
        owns_transport: bool = False,
        events: Optional[EventSink] = None,
        teardown_timeout: float = DEFAULT_TEARDOWN_TIMEOUT,
    ) -> None:
        self._transport = transport
        self._process = process
        self._owns_transport = owns_transport
        self._events = events or NullEventSink()
        self._teardown_timeout = teardown_timeout
        self._state = SessionState.UNOPENED
        self._session_id: Optional[str] = None
        self._capabilities: dict[str, Any] = {}
        self._lock = threading.RLock()

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @classmethod
    def open(
        cls,
        capabilities: CapabilityDocument,
        transport: WireTransport,
        *,
        process: Optional[DriverProcess] = None,
        startup_timeout: float = DEFAULT_STARTUP_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        owns_transport: bool = False,
        events: Optional[EventSink] = None,
        teardown_timeout: float = DEFAULT_TEARDOWN_TIMEOUT,
    ) -> "Session":
        """Start ``process`` if given, wait for it, and perform the handshake.

        A process passed here is owned by the session: it is stopped if the
        handshake fails and when the session closes.
        """

        session = cls(
            transport,
            process=process,
            owns_transport=owns_transport,
            events=events,
            teardown_timeout=teardown_timeout,
        )
        session._open(capabilities, startup_timeout=startup_timeout, poll_interval=poll_interval)
        return session

    @classmethod
    def attach(
        cls,
        transport: WireTransport,
        *,
        session_id: Optional[str] = None,
        capabilities: Optional[CapabilityDocument] = None,
        owns_transport: bool = False,
        events: Optional[EventSink] = None,
        teardown_timeout: float = DEFAULT_TEARDOWN_TIMEOUT,
    ) -> "Session":
        """Use a driver someone else manages.

        With ``session_id`` the session is adopted as-is; otherwise a new
        session is negotiated with ``capabilities``. Closing never stops a
        process.
        """

        session = cls(
            transport,
            owns_transport=owns_transport,
            events=events,
            teardown_timeout=teardown_timeout,
        )
        if session_id:
            session._session_id = session_id
            session._state = SessionState.OPEN
            return session
        if capabilities is None:
            raise ValueError("attach needs either a session_id or capabilities")
        session._open(capabilities)
        return session

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    @property
    def capabilities(self) -> dict[str, Any]:
        """Capabilities the driver reported when the session was created."""
        return dict(self._capabilities)

    @property
    def dialect(self) -> Dialect:
        return self._transport.dialect

    @property
    def transport(self) -> WireTransport:
        return self._transport

    @property
    def process(self) -> Optional[DriverProcess]:
        return self._process

    @property
    def owns_process(self) -> bool:
        return self._process is not None

    def send(self, request: Request) -> Any:
        with self._lock:
            if self._state is not SessionState.OPEN:
                raise SessionNotOpen(f"Session is {self._state.value}")
            if isinstance(request, SessionRequest) and request.session is None:
                request = dataclasses.replace(request, session=self._session_id)
            return self._transport.send(request)

    def close(self) -> None:
        with self._lock:
            if self._state is SessionState.CLOSED:
                return
            was_open = self._state is SessionState.OPEN
            self._state = SessionState.CLOSED
        if was_open:
            self._delete_remote_session()
        self._release()
        self._events.record("session_closed", "Session closed", session_id=self._session_id)

    def _open(
        self,
        capabilities: CapabilityDocument,
        *,
        startup_timeout: float = DEFAULT_STARTUP_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._state = SessionState.OPENING
        if self._process is not None:
            try:
                self._process.start()
                self._process.wait_until_ready(startup_timeout, poll_interval=poll_interval)
            except BaseException:
                self._abandon()
                raise
        try:
            result: NewSessionResult = self._transport.send(
                NewSession(capabilities=capabilities.model_copy(deep=True))
            )
        except WebDriverError as exc:
            self._events.record(
                "session_failed",
                f"New session request failed: {exc}",
                level=EventLevel.ERROR,
            )
            self._abandon()
            raise SessionCreationFailed(exc) from exc
        except BaseException:
            self._abandon()
            raise
        self._session_id = result.session_id
        self._capabilities = dict(result.capabilities)
        self._state = SessionState.OPEN
        LOGGER.info("Opened session %s (%s)", self._session_id, self.dialect.value)
        self._events.record(
            "session_opened",
            f"Session {self._session_id} opened",
            session_id=self._session_id,
            dialect=self.dialect.value,
        )

    def _abandon(self) -> None:
        self._state = SessionState.CLOSED
        self._release()

    def _delete_remote_session(self) -> None:
        try:
            self._transport.send(
                DeleteSession(session=self._session_id), timeout=self._teardown_timeout
            )
        except WebDriverError as exc:
            LOGGER.warning("Failed to delete session %s: %s", self._session_id, exc)
            self._events.record(
                "teardown_error",
                "Delete session failed",
                level=EventLevel.WARNING,
                session_id=self._session_id,
                error=str(exc),
            )

    def _release(self) -> None:
        if self._process is not None:
            self._process.stop()
        if self._owns_transport:
            self._transport.close()
