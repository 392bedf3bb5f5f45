from __future__ import annotations

import io
import logging

from rich.console import Console

from webdriver_bridge.events import (
    CompositeEventSink,
    ConsoleEventSink,
    LoggingEventSink,
    NullEventSink,
    RecordingEventSink,
)
from webdriver_bridge.models import DriverEvent, EventLevel


def test_record_builds_event_with_data() -> None:
    sink = RecordingEventSink()

    sink.record("process_started", "Started driver", pid=42)

    (event,) = sink.events
    assert event.type == "process_started"
    assert event.level is EventLevel.INFO
    assert event.data == {"pid": 42}
    assert event.timestamp.tzinfo is not None


def test_composite_fans_out_in_order() -> None:
    first = RecordingEventSink()
    second = RecordingEventSink()
    composite = CompositeEventSink([first, NullEventSink(), second])

    composite.record("session_opened", "opened")
    composite.record("session_closed", "closed")

    assert first.types() == ["session_opened", "session_closed"]
    assert second.types() == first.types()


def test_logging_sink_maps_levels(caplog) -> None:
    logger = logging.getLogger("webdriver_bridge.tests.events")
    sink = LoggingEventSink(logger)

    with caplog.at_level(logging.DEBUG, logger=logger.name):
        sink.record("teardown_error", "Delete session failed", level=EventLevel.WARNING, error="boom")

    (record,) = caplog.records
    assert record.levelno == logging.WARNING
    assert record.getMessage() == "[teardown_error] Delete session failed"
    assert record.event_data == {"error": "boom"}


def test_console_sink_prints_message() -> None:
    buffer = io.StringIO()
    sink = ConsoleEventSink(Console(file=buffer, width=120, color_system=None))

    sink.emit(DriverEvent(type="session_failed", message="handshake failed", level=EventLevel.ERROR))

    assert "[ERROR] handshake failed" in buffer.getvalue()
