"""Lifecycle management for a single driver process."""

from __future__ import annotations

import logging
import subprocess
import time
from pathlib import Path
from typing import IO, List, Optional, Sequence

import httpx

from ..errors import DriverNotReady, ProcessLaunchFailed
from ..events import EventSink, NullEventSink
from ..models import EventLevel
from .launcher import ProcessLauncher, default_launcher

LOGGER = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.1
DEFAULT_HOST = "127.0.0.1"


class DriverProcess:
    """Own one driver child process and report when it accepts connections.

    ``start`` is a no-op while the child is alive and ``stop`` is safe to
    call any number of times, including before ``start``. Used as a context
    manager the child is always stopped on exit.
    """

    def __init__(
        self,
        executable: str | Path,
        *,
        port: int,
        host: str = DEFAULT_HOST,
        args: Sequence[str] = (),
        status_path: str = "/status",
        log_file: Optional[Path] = None,
        stop_timeout: Optional[float] = None,
        launcher: Optional[ProcessLauncher] = None,
        events: Optional[EventSink] = None,
        probe_transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.executable = str(executable)
        self.host = host
        self.port = port
        self.args = list(args)
        self._status_path = status_path
        self._log_file = log_file
        self._stop_timeout = stop_timeout
        self._launcher = launcher or default_launcher()
        self._events = events or NullEventSink()
        self._probe_transport = probe_transport
        self._process: Optional[subprocess.Popen] = None
        self._output: Optional[IO[bytes]] = None

    def __enter__(self) -> "DriverProcess":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def status_url(self) -> str:
        if not self._status_path:
            return self.base_url
        return f"{self.base_url}/{self._status_path.lstrip('/')}"

    @property
    def command(self) -> List[str]:
        return [self.executable, f"--port={self.port}", *self.args]

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid if self._process else None

    @property
    def returncode(self) -> Optional[int]:
        return self._process.returncode if self._process else None

    @property
    def is_running(self) -> bool:
        process = self._process
        return process is not None and self._launcher.is_alive(process)

    def start(self) -> None:
        if self.is_running:
            LOGGER.debug("Driver %s already running (pid %s)", self.executable, self.pid)
            return
        self._close_output()
        output = self._open_output()
        LOGGER.info("Launching driver: %s", " ".join(self.command))
        try:
            self._process = self._launcher.spawn(self.command, output=output)
        except OSError as exc:
            self._close_output()
            self._events.record(
                "process_failed",
                f"Failed to launch {self.executable}",
                level=EventLevel.ERROR,
                error=str(exc),
            )
            raise ProcessLaunchFailed(self.executable, exc) from exc
        self._events.record(
            "process_started",
            f"Driver started on port {self.port}",
            pid=self._process.pid,
            command=self.command,
        )

    def stop(self) -> None:
        process = self._process
        if process is None:
            return
        self._process = None
        try:
            if self._launcher.is_alive(process):
                LOGGER.debug("Terminating driver process %s", process.pid)
                self._launcher.terminate(process)
                if self._stop_timeout is not None:
                    try:
                        process.wait(timeout=self._stop_timeout)
                    except subprocess.TimeoutExpired:
                        LOGGER.warning("Driver %s ignored terminate; killing", process.pid)
                        self._launcher.kill(process)
        except OSError as exc:
            LOGGER.warning("Failed to stop driver process %s: %s", process.pid, exc)
            self._events.record(
                "teardown_error",
                "Failed to stop driver process",
                level=EventLevel.WARNING,
                pid=process.pid,
                error=str(exc),
            )
        finally:
            self._close_output()
        self._events.record("process_stopped", "Driver stopped", pid=process.pid)

    def wait_until_ready(
        self,
        timeout: float,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        """Block until the status probe answers with a 2xx response.

        Raises :class:`DriverNotReady` as soon as the process is seen dead,
        or once ``timeout`` seconds have passed, carrying the last probe
        error. Probes are spaced ``poll_interval`` seconds apart.
        """

        if timeout <= 0:
            raise ValueError("timeout must be positive")
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        deadline = time.monotonic() + timeout
        last_error: Optional[BaseException] = None
        with httpx.Client(transport=self._probe_transport) as client:
            while True:
                if not self.is_running:
                    error = DriverNotReady(last_error, exited=True, returncode=self.returncode)
                    self._not_ready(error)
                    raise error
                remaining = deadline - time.monotonic()
                try:
                    response = client.get(
                        self.status_url,
                        timeout=max(min(remaining, 1.0), 0.05),
                    )
                    response.raise_for_status()
                except httpx.HTTPError as exc:
                    last_error = exc
                else:
                    self._events.record("process_ready", f"Driver ready at {self.base_url}")
                    return
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    error = DriverNotReady(last_error)
                    self._not_ready(error)
                    raise error
                time.sleep(min(poll_interval, remaining))

    def _not_ready(self, error: DriverNotReady) -> None:
        LOGGER.warning("%s", error)
        self._events.record(
            "process_not_ready",
            str(error),
            level=EventLevel.ERROR,
            url=self.status_url,
        )

    def _open_output(self):
        if self._log_file is None:
            return subprocess.DEVNULL
        self._log_file.parent.mkdir(parents=True, exist_ok=True)
        self._output = self._log_file.open("ab")
        return self._output

    def _close_output(self) -> None:
        if self._output is not None:
            self._output.close()
            self._output = None
