"""Platform-specific spawning and termination of driver processes."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from abc import ABC, abstractmethod
from typing import IO, Optional, Sequence, Union

LOGGER = logging.getLogger(__name__)

Output = Union[int, IO[bytes]]


class ProcessLauncher(ABC):
    """Spawn, terminate and probe a child process."""

    @abstractmethod
    def spawn(self, command: Sequence[str], *, output: Output) -> subprocess.Popen:
        """Start ``command`` with stdout and stderr sent to ``output``."""

    @abstractmethod
    def terminate(self, process: subprocess.Popen) -> None:
        """Ask the process (and its children) to exit."""

    def kill(self, process: subprocess.Popen) -> None:
        process.kill()

    def is_alive(self, process: subprocess.Popen) -> bool:
        return process.poll() is None


class PosixLauncher(ProcessLauncher):
    """Run the driver in its own process group so browsers it spawns exit with it."""

    def spawn(self, command: Sequence[str], *, output: Output) -> subprocess.Popen:
        return subprocess.Popen(
            list(command),
            stdin=subprocess.DEVNULL,
            stdout=output,
            stderr=output,
            start_new_session=True,
        )

    def terminate(self, process: subprocess.Popen) -> None:
        try:
            os.killpg(process.pid, signal.SIGTERM)
        except ProcessLookupError:
            return
        except PermissionError:
            process.terminate()

    def kill(self, process: subprocess.Popen) -> None:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            return


class WindowsLauncher(ProcessLauncher):
    """Terminate the whole process tree with ``taskkill``."""

    def spawn(self, command: Sequence[str], *, output: Output) -> subprocess.Popen:
        return subprocess.Popen(
            list(command),
            stdin=subprocess.DEVNULL,
            stdout=output,
            stderr=output,
            creationflags=getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0),
        )

    def terminate(self, process: subprocess.Popen) -> None:
        result = subprocess.run(
            ["taskkill", "/PID", str(process.pid), "/T", "/F"],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
        if result.returncode != 0 and process.poll() is None:
            process.terminate()


def default_launcher(os_name: Optional[str] = None) -> ProcessLauncher:
    """Pick the launcher for the running platform."""

    if (os_name or os.name) == "nt":
        return WindowsLauncher()
    return PosixLauncher()
