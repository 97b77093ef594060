import logging
from typing import Any

from logthrottle.application.ports import DiffPredicate
from logthrottle.application.throttle import ThrottleWindowManager
from logthrottle.domain.envelope import Envelope
from logthrottle.domain.predicates import same_log_record


def _with_repeat_suffix(record: logging.LogRecord, times: int) -> logging.LogRecord:
    copy = logging.makeLogRecord(record.__dict__)
    copy.msg = f"{record.getMessage()} (repeated {times} times)"
    copy.args = None
    return copy


class ThrottledHandler(logging.Handler):
    """Forwards throttled records to ``target``; closing leaves ``target`` open."""

    def __init__(
        self,
        target: logging.Handler,
        delay_ms: float = 5000,
        diff: DiffPredicate | None = None,
        level: int = logging.NOTSET,
        **collaborators: Any,
    ) -> None:
        super().__init__(level)
        self.target = target
        self.manager = ThrottleWindowManager(
            delay_ms=delay_ms,
            diff=diff or same_log_record,
            report=self._forward,
            **collaborators,
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.manager.add(record)
        except Exception:
            self.handleError(record)

    def _forward(self, envelope: Envelope) -> None:
        record = envelope.payload
        if envelope.repeated:
            record = _with_repeat_suffix(record, envelope.repeat_count)
        self.target.handle(record)

    def flush(self) -> None:
        self.target.flush()

    def close(self) -> None:
        try:
            self.manager.close()
            self.flush()
        finally:
            super().close()
