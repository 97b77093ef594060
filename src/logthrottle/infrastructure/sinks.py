import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from logthrottle.domain.envelope import Envelope

LOG = logging.getLogger(__name__)


def trace_report(
    envelope: Envelope, total: int, write: Callable[..., Any] | None = None
) -> None:
    (write or LOG.debug)(
        "report payload=%r times=%d added_at=%.1f reported_at=%s total=%d",
        envelope.payload,
        envelope.repeat_count,
        envelope.added_at,
        envelope.reported_at,
        total,
    )


@dataclass
class LoggingSink:
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("logthrottle.report"))
    level: int = logging.INFO

    def __call__(self, envelope: Envelope) -> None:
        if envelope.repeated:
            self.logger.log(
                self.level, "%s (repeated %d times)", envelope.payload, envelope.repeat_count
            )
            return
        self.logger.log(self.level, "%s", envelope.payload)
