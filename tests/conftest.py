from __future__ import annotations

from typing import Optional, Sequence

import httpx
import pytest

from webdriver_bridge.process.launcher import ProcessLauncher


class FakeChild:
    """Stand-in for ``subprocess.Popen`` that never touches the OS."""

    def __init__(self, pid: int) -> None:
        self.pid = pid
        self.returncode: Optional[int] = None
        self.killed = False

    def poll(self) -> Optional[int]:
        return self.returncode

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        return self.returncode

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9


class FakeLauncher(ProcessLauncher):
    def __init__(self, *, fail_with: Optional[OSError] = None) -> None:
        self.commands: list[list[str]] = []
        self.children: list[FakeChild] = []
        self.terminated: list[FakeChild] = []
        self._fail_with = fail_with

    def spawn(self, command: Sequence[str], *, output) -> FakeChild:  # type: ignore[override]
        if self._fail_with is not None:
            raise self._fail_with
        self.commands.append(list(command))
        child = FakeChild(pid=1000 + len(self.children))
        self.children.append(child)
        return child

    def terminate(self, process: FakeChild) -> None:  # type: ignore[override]
        self.terminated.append(process)
        process.returncode = -15


@pytest.fixture
def fake_launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def ready_probe() -> httpx.MockTransport:
    return httpx.MockTransport(
        lambda request: httpx.Response(200, json={"value": {"ready": True, "message": ""}})
    )


@pytest.fixture
def refused_probe() -> httpx.MockTransport:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(refuse)
