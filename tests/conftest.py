from dataclasses import dataclass, field
from typing import Any, Callable

import pytest


@dataclass
class FakeTimer:
    due_ms: float
    callback: Callable[..., Any]
    args: tuple
    honors_cancel: bool = True
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        if self.honors_cancel:
            self.cancelled = True


@dataclass
class FakeTimeline:
    """Manual clock and scheduler; timers only run when the clock is advanced."""

    now: float = 0.0
    honors_cancel: bool = True
    timers: list[FakeTimer] = field(default_factory=list)

    def clock(self) -> float:
        return self.now

    def call_later(self, delay_s: float, callback: Callable[..., Any], *args: Any) -> FakeTimer:
        timer = FakeTimer(
            due_ms=self.now + delay_s * 1000.0,
            callback=callback,
            args=args,
            honors_cancel=self.honors_cancel,
        )
        self.timers.append(timer)
        return timer

    def live(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance_to(self, when_ms: float) -> None:
        while True:
            due = sorted(
                (t for t in self.live() if t.due_ms <= when_ms),
                key=lambda t: t.due_ms,
            )
            if not due:
                break
            timer = due[0]
            self.now = timer.due_ms
            timer.fired = True
            timer.callback(*timer.args)
        self.now = when_ms


@pytest.fixture
def timeline() -> FakeTimeline:
    return FakeTimeline()
