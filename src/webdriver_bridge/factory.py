"""Factories for constructing components from configuration."""

from __future__ import annotations

import shutil
from typing import Any, Mapping, Optional

from .capabilities.chrome import PRESETS
from .capabilities.document import CapabilityDocument
from .config import BridgeConfig, DriverConfig, TransportConfig, deep_update
from .events import EventSink
from .process.supervisor import DriverProcess
from .session import Session
from .wire.transport import WireTransport

DEFAULT_DRIVER_NAME = "chromedriver"


def locate_driver(name: str = DEFAULT_DRIVER_NAME) -> Optional[str]:
    """Return the path of ``name`` on ``PATH``, or None."""

    return shutil.which(name)


def build_capabilities(
    preset: str = "standard",
    overrides: Optional[Mapping[str, Any]] = None,
) -> CapabilityDocument:
    """Build the preset document and deep-merge wire-shaped ``overrides`` over it."""

    name = preset.lower()
    if name == "none":
        base = CapabilityDocument()
    elif name in PRESETS:
        base = PRESETS[name]()
    else:
        raise ValueError(f"Unsupported capability preset: {preset}")
    if not overrides:
        return base
    wire = base.to_wire()
    deep_update(wire, overrides)
    return CapabilityDocument.from_wire(wire)


def build_process(config: DriverConfig, *, events: Optional[EventSink] = None) -> DriverProcess:
    executable = str(config.executable) if config.executable else locate_driver()
    if not executable:
        raise ValueError(
            f"No driver executable configured and {DEFAULT_DRIVER_NAME!r} is not on PATH"
        )
    return DriverProcess(
        executable,
        port=config.port,
        host=config.host,
        args=config.args,
        status_path=config.status_path,
        log_file=config.log_file,
        stop_timeout=config.stop_timeout,
        events=events,
    )


def build_transport(
    config: TransportConfig,
    base_url: str,
    *,
    events: Optional[EventSink] = None,
) -> WireTransport:
    return WireTransport(base_url, config.dialect, timeout=config.timeout, events=events)


def open_session(config: BridgeConfig, *, events: Optional[EventSink] = None) -> Session:
    """Spawn the configured driver, or attach to ``transport.endpoint``, and open a session."""

    capabilities = build_capabilities(config.preset, config.capabilities)
    if config.transport.endpoint:
        transport = build_transport(config.transport, config.transport.endpoint, events=events)
        try:
            return Session.attach(
                transport,
                capabilities=capabilities,
                owns_transport=True,
                events=events,
                teardown_timeout=config.transport.teardown_timeout,
            )
        except Exception:
            transport.close()
            raise

    process = build_process(config.driver, events=events)
    transport = build_transport(config.transport, process.base_url, events=events)
    try:
        return Session.open(
            capabilities,
            transport,
            process=process,
            startup_timeout=config.driver.startup_timeout,
            poll_interval=config.driver.poll_interval,
            owns_transport=True,
            events=events,
            teardown_timeout=config.transport.teardown_timeout,
        )
    except Exception:
        transport.close()
        raise
