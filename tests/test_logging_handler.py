import logging

import pytest

from logthrottle.domain.envelope import Envelope
from logthrottle.infrastructure.sinks import LoggingSink, trace_report
from logthrottle.interfaces.logging_handler import ThrottledHandler


class CollectingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []
        self.flushed = 0
        self.closed = False

    def emit(self, record):
        self.records.append(record)

    def flush(self):
        self.flushed += 1

    def close(self):
        self.closed = True
        super().close()


@pytest.fixture
def throttled_logger(request, timeline):
    target = CollectingHandler()
    handler = ThrottledHandler(target, delay_ms=1000, clock=timeline.clock, scheduler=timeline)
    logger = logging.getLogger(f"logthrottle.tests.{request.node.name}")
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    yield logger, handler, target
    logger.removeHandler(handler)


def test_handler_collapses_repeated_records(throttled_logger, timeline) -> None:
    logger, _handler, target = throttled_logger
    for t in (0, 100, 200):
        timeline.advance_to(t)
        logger.warning("disk %s", "full")
    timeline.advance_to(5000)

    assert len(target.records) == 1
    record = target.records[0]
    assert record.getMessage() == "disk full (repeated 3 times)"
    assert record.levelno == logging.WARNING
    assert record.name == logger.name


def test_handler_forwards_single_record_unchanged(throttled_logger, timeline) -> None:
    logger, _handler, target = throttled_logger
    logger.info("started")
    timeline.advance_to(1000)
    assert [r.getMessage() for r in target.records] == ["started"]


def test_handler_keeps_latest_of_distinct_records(throttled_logger, timeline) -> None:
    logger, _handler, target = throttled_logger
    logger.info("one")
    timeline.advance_to(100)
    logger.error("two")
    timeline.advance_to(5000)
    assert [r.getMessage() for r in target.records] == ["two"]


def test_handler_close_delivers_pending_record(throttled_logger, timeline) -> None:
    logger, handler, target = throttled_logger
    logger.info("late")
    logger.info("late")
    handler.close()
    assert [r.getMessage() for r in target.records] == ["late (repeated 2 times)"]
    assert target.flushed == 1
    assert target.closed is False
    assert timeline.live() == []


def test_handler_routes_diff_errors_to_handle_error(timeline, monkeypatch) -> None:
    def broken(_old, _new):
        raise RuntimeError("boom")

    target = CollectingHandler()
    handler = ThrottledHandler(
        target, delay_ms=1000, diff=broken, clock=timeline.clock, scheduler=timeline
    )
    errors = []
    monkeypatch.setattr(handler, "handleError", errors.append)
    first = logging.makeLogRecord({"msg": "a"})
    second = logging.makeLogRecord({"msg": "b"})
    handler.handle(first)
    handler.handle(second)
    assert errors == [second]


def test_logging_sink_logs_repeat_count(caplog) -> None:
    logger = logging.getLogger("logthrottle.tests.sink")
    sink = LoggingSink(logger=logger, level=logging.WARNING)
    with caplog.at_level(logging.WARNING, logger=logger.name):
        sink(Envelope(added_at=0.0, payload="disk full", repeat_count=4))
        sink(Envelope(added_at=0.0, payload="ok"))
    assert [r.getMessage() for r in caplog.records] == ["disk full (repeated 4 times)", "ok"]


def test_trace_report_logs_envelope_and_total(caplog) -> None:
    envelope = Envelope(added_at=10.0, payload="disk full", repeat_count=2, reported_at=20.0)
    with caplog.at_level(logging.DEBUG, logger="logthrottle.infrastructure.sinks"):
        trace_report(envelope, 7)
    assert caplog.records[-1].getMessage() == (
        "report payload='disk full' times=2 added_at=10.0 reported_at=20.0 total=7"
    )


def test_trace_report_uses_injected_writer() -> None:
    lines = []
    trace_report(Envelope(added_at=0.0, payload="x"), 1, write=lambda m, *a: lines.append(m % a))
    assert lines == ["report payload='x' times=1 added_at=0.0 reported_at=None total=1"]
