"""Driver process supervision."""

from .launcher import PosixLauncher, ProcessLauncher, WindowsLauncher, default_launcher  # noqa: F401
from .supervisor import DriverProcess  # noqa: F401
