from __future__ import annotations

import os
import socket
import stat
import sys
import time
from pathlib import Path

import httpx
import pytest

from webdriver_bridge.errors import DriverNotReady, ProcessLaunchFailed
from webdriver_bridge.events import RecordingEventSink
from webdriver_bridge.process import DriverProcess, PosixLauncher, WindowsLauncher, default_launcher

posix_only = pytest.mark.skipif(os.name == "nt", reason="uses shebang scripts")

STUB_DRIVER = """\
import json
import sys
from http.server import BaseHTTPRequestHandler, HTTPServer

port = int(next(arg.split("=", 1)[1] for arg in sys.argv[1:] if arg.startswith("--port=")))


class Handler(BaseHTTPRequestHandler):
    def _reply(self, code, payload):
        body = json.dumps(payload).encode()
        self.send_response(code)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _drain(self):
        length = int(self.headers.get("Content-Length") or 0)
        return self.rfile.read(length) if length else b""

    def do_GET(self):
        if self.path == "/status":
            self._reply(200, {"sessionId": None, "status": 0, "value": {"ready": True}})
        else:
            self._reply(404, {"sessionId": None, "status": 9, "value": {"message": self.path}})

    def do_POST(self):
        self._drain()
        if self.path == "/session":
            self._reply(200, {"sessionId": "stub-session", "status": 0, "value": {"browserName": "chrome"}})
        else:
            self._reply(404, {"sessionId": None, "status": 9, "value": {"message": self.path}})

    def do_DELETE(self):
        self._reply(200, {"sessionId": "stub-session", "status": 0, "value": None})

    def log_message(self, *args):
        pass


HTTPServer(("127.0.0.1", port), Handler).serve_forever()
"""


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def _script(tmp_path: Path, name: str, body: str, interpreter: str = sys.executable) -> Path:
    path = tmp_path / name
    path.write_text(f"#!{interpreter}\n{body}")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def test_command_includes_port_and_extra_args(fake_launcher) -> None:
    process = DriverProcess(
        "/usr/bin/chromedriver",
        port=9515,
        args=["--verbose", "--allowed-ips="],
        launcher=fake_launcher,
    )

    process.start()

    assert fake_launcher.commands == [["/usr/bin/chromedriver", "--port=9515", "--verbose", "--allowed-ips="]]
    assert process.base_url == "http://127.0.0.1:9515"
    assert process.status_url == "http://127.0.0.1:9515/status"


def test_start_is_noop_while_running(fake_launcher) -> None:
    process = DriverProcess("driver", port=1, launcher=fake_launcher)

    process.start()
    process.start()

    assert len(fake_launcher.commands) == 1
    assert process.is_running


def test_stop_is_idempotent(fake_launcher) -> None:
    process = DriverProcess("driver", port=1, launcher=fake_launcher)

    process.stop()
    assert not process.is_running

    process.start()
    process.stop()
    process.stop()

    assert not process.is_running
    assert len(fake_launcher.terminated) == 1


def test_stop_with_timeout_kills_stubborn_child(fake_launcher, monkeypatch) -> None:
    import subprocess

    process = DriverProcess("driver", port=1, launcher=fake_launcher, stop_timeout=0.1)
    process.start()
    child = fake_launcher.children[0]
    monkeypatch.setattr(fake_launcher, "terminate", lambda proc: None)

    def never_exits(timeout=None):
        raise subprocess.TimeoutExpired("driver", timeout)

    monkeypatch.setattr(child, "wait", never_exits)

    process.stop()

    assert child.killed
    assert not process.is_running


def test_stop_swallows_os_errors(fake_launcher, monkeypatch) -> None:
    events = RecordingEventSink()
    process = DriverProcess("driver", port=1, launcher=fake_launcher, events=events)
    process.start()

    def explode(proc):
        raise PermissionError("denied")

    monkeypatch.setattr(fake_launcher, "terminate", explode)

    process.stop()

    assert not process.is_running
    assert "teardown_error" in events.types()


def test_spawn_failure_raises_process_launch_failed() -> None:
    process = DriverProcess("/nonexistent/driver-binary", port=1)

    with pytest.raises(ProcessLaunchFailed) as exc_info:
        process.start()

    assert isinstance(exc_info.value.cause, OSError)
    assert exc_info.value.executable == "/nonexistent/driver-binary"
    assert not process.is_running


def test_wait_until_ready_returns_when_probe_succeeds(fake_launcher, ready_probe) -> None:
    events = RecordingEventSink()
    process = DriverProcess(
        "driver", port=1, launcher=fake_launcher, probe_transport=ready_probe, events=events
    )
    process.start()

    process.wait_until_ready(1.0)

    assert events.types() == ["process_started", "process_ready"]


def test_wait_until_ready_times_out_within_one_interval(fake_launcher) -> None:
    probes: list[float] = []

    def refuse(request: httpx.Request) -> httpx.Response:
        probes.append(time.monotonic())
        raise httpx.ConnectError("connection refused", request=request)

    process = DriverProcess(
        "driver",
        port=1,
        launcher=fake_launcher,
        probe_transport=httpx.MockTransport(refuse),
    )
    process.start()

    started = time.monotonic()
    with pytest.raises(DriverNotReady) as exc_info:
        process.wait_until_ready(0.5, poll_interval=0.1)
    elapsed = time.monotonic() - started

    assert 0.5 <= elapsed < 0.5 + 0.1 + 0.4
    assert isinstance(exc_info.value.last_error, httpx.ConnectError)
    assert not exc_info.value.exited
    assert 2 <= len(probes) <= 7
    gaps = [later - earlier for earlier, later in zip(probes, probes[1:])]
    # only the final sleep may be trimmed to the deadline
    assert all(gap >= 0.09 for gap in gaps[:-1])


def test_wait_until_ready_fails_fast_when_process_exits(fake_launcher, refused_probe) -> None:
    process = DriverProcess("driver", port=1, launcher=fake_launcher, probe_transport=refused_probe)
    process.start()
    fake_launcher.children[0].returncode = 1

    started = time.monotonic()
    with pytest.raises(DriverNotReady) as exc_info:
        process.wait_until_ready(5.0)

    assert time.monotonic() - started < 1.0
    assert exc_info.value.exited
    assert exc_info.value.returncode == 1


def test_wait_until_ready_rejects_non_positive_timeout(fake_launcher) -> None:
    process = DriverProcess("driver", port=1, launcher=fake_launcher)

    with pytest.raises(ValueError):
        process.wait_until_ready(0)


def test_minimal_status_path_probes_base_url(fake_launcher) -> None:
    seen: list[str] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, text="ok")

    process = DriverProcess(
        "driver",
        port=4444,
        status_path="",
        launcher=fake_launcher,
        probe_transport=httpx.MockTransport(record),
    )
    process.start()
    process.wait_until_ready(1.0)

    assert seen == ["http://127.0.0.1:4444"]


def test_default_launcher_selection() -> None:
    assert isinstance(default_launcher("nt"), WindowsLauncher)
    assert isinstance(default_launcher("posix"), PosixLauncher)


@posix_only
def test_real_process_lifecycle(tmp_path: Path) -> None:
    driver = _script(tmp_path, "stub-driver", STUB_DRIVER)
    port = _free_port()
    log_file = tmp_path / "logs" / "driver.log"

    with DriverProcess(driver, port=port, log_file=log_file, stop_timeout=5) as process:
        assert process.is_running
        process.wait_until_ready(10.0)
        response = httpx.get(process.status_url, timeout=2)
        assert response.json()["value"]["ready"] is True

    assert not process.is_running
    assert log_file.exists()


@posix_only
def test_real_process_that_exits_is_not_ready(tmp_path: Path) -> None:
    driver = _script(tmp_path, "crashing-driver", "exit 3\n", interpreter="/bin/sh")
    process = DriverProcess(driver, port=_free_port())
    process.start()

    with pytest.raises(DriverNotReady) as exc_info:
        process.wait_until_ready(5.0)

    assert exc_info.value.exited
    assert exc_info.value.returncode == 3
    process.stop()
    assert not process.is_running
