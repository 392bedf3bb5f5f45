"""Event sinks receiving structured driver events."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

from rich.console import Console

from .models import DriverEvent, EventLevel

_LOG_LEVELS = {
    EventLevel.DEBUG: logging.DEBUG,
    EventLevel.INFO: logging.INFO,
    EventLevel.WARNING: logging.WARNING,
    EventLevel.ERROR: logging.ERROR,
}


class EventSink(ABC):
    """Interface for receiving driver lifecycle and request events."""

    @abstractmethod
    def emit(self, event: DriverEvent) -> None:
        """Record a single event."""

    def record(
        self,
        type: str,
        message: str,
        *,
        level: EventLevel = EventLevel.INFO,
        **data: Any,
    ) -> None:
        self.emit(DriverEvent(type=type, message=message, level=level, data=data))


class NullEventSink(EventSink):
    """Sink that drops every event."""

    def emit(self, event: DriverEvent) -> None:
        return


class LoggingEventSink(EventSink):
    """Forward events to a standard library logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("webdriver_bridge.events")
        self._lock = threading.Lock()

    def emit(self, event: DriverEvent) -> None:
        with self._lock:
            self._logger.log(
                _LOG_LEVELS[event.level],
                "[%s] %s",
                event.type,
                event.message,
                extra={"event_data": event.data},
            )


class ConsoleEventSink(EventSink):
    """Print events to the terminal using Rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console(stderr=True)
        self._lock = threading.Lock()

    def emit(self, event: DriverEvent) -> None:
        style = {
            "debug": "dim",
            "info": "cyan",
            "warning": "yellow",
            "error": "red",
        }.get(event.level.value, "white")
        with self._lock:
            self._console.print(
                f"[{event.level.value.upper()}] {event.message}", style=style, markup=False
            )
            if event.data:
                self._console.print(event.data, style="dim")


class RecordingEventSink(EventSink):
    """Keep events in memory, in emission order."""

    def __init__(self) -> None:
        self._events: List[DriverEvent] = []
        self._lock = threading.Lock()

    def emit(self, event: DriverEvent) -> None:
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> List[DriverEvent]:
        with self._lock:
            return list(self._events)

    def types(self) -> List[str]:
        return [event.type for event in self.events]


class CompositeEventSink(EventSink):
    """Fan-out sink that propagates events to multiple sinks."""

    def __init__(self, sinks: Iterable[EventSink]) -> None:
        self._sinks = list(sinks)

    def emit(self, event: DriverEvent) -> None:
        for sink in self._sinks:
            sink.emit(event)
