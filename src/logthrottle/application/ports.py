from typing import Any, Callable, Protocol

from logthrottle.domain.envelope import Envelope


class Clock(Protocol):
    def __call__(self) -> float:
        ...


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def call_later(self, delay_s: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        ...


class DiffPredicate(Protocol):
    def __call__(self, old: Any, new: Any) -> bool:
        ...


class ReportSink(Protocol):
    def __call__(self, envelope: Envelope) -> None:
        ...


class TraceWriter(Protocol):
    def __call__(self, msg: str, *args: Any) -> None:
        ...
