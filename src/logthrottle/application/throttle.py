import logging
import threading
from typing import Any

from logthrottle.application.ports import (
    Clock,
    DiffPredicate,
    ReportSink,
    Scheduler,
    TimerHandle,
    TraceWriter,
)
from logthrottle.domain.envelope import Envelope
from logthrottle.domain.predicates import always_duplicate, resolve_diff
from logthrottle.infrastructure.clock import monotonic_ms
from logthrottle.infrastructure.config import ThrottleConfig
from logthrottle.infrastructure.schedulers import ThreadingScheduler
from logthrottle.infrastructure.sinks import trace_report

LOG = logging.getLogger(__name__)


def _validate_delay(delay_ms: Any) -> float:
    if isinstance(delay_ms, bool) or not isinstance(delay_ms, (int, float)):
        raise ValueError(f"delay_ms must be a number of milliseconds, got {delay_ms!r}")
    if not delay_ms > 0:
        raise ValueError(f"delay_ms must be positive, got {delay_ms!r}")
    return delay_ms


class ThrottleWindowManager:
    """Tracks a single pending window; at most one flush is scheduled at a time."""

    def __init__(
        self,
        delay_ms: float = 5000,
        diff: DiffPredicate | None = None,
        report: ReportSink | None = None,
        clock: Clock | None = None,
        scheduler: Scheduler | None = None,
        trace: TraceWriter | None = None,
    ) -> None:
        self._delay_ms = _validate_delay(delay_ms)
        self._diff = diff or always_duplicate
        self._report = report
        self._clock = clock or monotonic_ms
        self._scheduler = scheduler or ThreadingScheduler()
        self._trace = trace or LOG.debug
        # The stock scheduler fires on a timer thread.
        self._lock = threading.Lock()
        self._pending: Envelope | None = None
        self._handle: TimerHandle | None = None
        self._repeat_started_at: float | None = None
        self._is_repeating = False
        self._total_reported = 0

    @classmethod
    def from_config(cls, cfg: ThrottleConfig, **collaborators: Any) -> "ThrottleWindowManager":
        # Trace output goes through the package logger unless a writer is injected.
        logging.getLogger("logthrottle").setLevel(cfg.log_level)
        collaborators.setdefault("diff", resolve_diff(cfg.diff))
        return cls(delay_ms=cfg.delay_ms, **collaborators)

    @property
    def delay_ms(self) -> float:
        return self._delay_ms

    @property
    def pending(self) -> Envelope | None:
        return self._pending

    @property
    def is_repeating(self) -> bool:
        return self._is_repeating

    @property
    def total_reported(self) -> int:
        return self._total_reported

    def add(self, record: Any) -> "ThrottleWindowManager":
        envelope = Envelope(added_at=self._clock(), payload=record)
        self._trace("add record %r", record)
        with self._lock:
            due = self._accept(envelope)
        if due is not None:
            self.flush(due)
        return self

    def flush(self, envelope: Envelope) -> None:
        with self._lock:
            envelope.reported_at = self._clock()
            self._total_reported += 1
        self.report(envelope)

    def report(self, envelope: Envelope) -> None:
        if self._report is not None:
            self._report(envelope)
            return
        trace_report(envelope, self._total_reported, write=self._trace)

    def cancel(self) -> Envelope | None:
        """Drop the scheduled flush and return the pending envelope, if any."""
        with self._lock:
            envelope = self._pending
            self._cancel_timer()
            self._pending = None
            self._reset_run()
        if envelope is not None:
            self._trace("cancelled pending window times=%d", envelope.repeat_count)
        return envelope

    def close(self) -> None:
        envelope = self.cancel()
        if envelope is not None:
            self.flush(envelope)

    def __enter__(self) -> "ThrottleWindowManager":
        return self

    def __exit__(self, *_exc_info) -> None:
        self.close()

    def _accept(self, envelope: Envelope) -> Envelope | None:
        """Apply one record to the window. Returns an envelope that is due now."""
        previous = self._pending
        if previous is None:
            self._trace("first record of a new window")
            self._reset_run()
            self._open(envelope)
            return None

        gap = envelope.added_at - previous.added_at
        if gap >= self._delay_ms:
            # The previous window's quiet period is over but its timer has not run.
            self._trace("gap %.1fms reached delay, starting a new window", gap)
            self._reset_run()
            self._open(envelope)
            return previous

        if not self._diff(previous.payload, envelope.payload):
            self._trace("not a duplicate, replacing window")
            self._reset_run()
            self._open(envelope)
            return None

        started_at = self._repeat_started_at if self._is_repeating else previous.added_at
        if envelope.added_at - started_at > self._delay_ms:
            self._trace(
                "duplicate run exceeded %sms, reporting times=%d",
                self._delay_ms,
                previous.repeat_count,
            )
            self._reset_run()
            self._open(envelope)
            return previous

        if not self._is_repeating:
            self._trace("first duplicate, run started at %.1f", started_at)
        self._is_repeating = True
        self._repeat_started_at = started_at
        envelope.repeat_count = previous.repeat_count + 1
        self._open(envelope)
        return None

    def _open(self, envelope: Envelope) -> None:
        self._cancel_timer()
        self._pending = envelope
        self._handle = self._scheduler.call_later(
            self._delay_ms / 1000.0, self._on_timer, envelope
        )

    def _on_timer(self, envelope: Envelope) -> None:
        with self._lock:
            if self._pending is not envelope:
                self._trace("ignoring flush for a superseded window")
                return
            self._pending = None
            self._handle = None
        self.flush(envelope)

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _reset_run(self) -> None:
        self._is_repeating = False
        self._repeat_started_at = None
