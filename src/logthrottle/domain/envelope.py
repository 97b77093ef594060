from dataclasses import dataclass
from typing import Any


@dataclass
class Envelope:
    added_at: float
    payload: Any
    repeat_count: int = 1
    reported_at: float | None = None

    @property
    def repeated(self) -> bool:
        return self.repeat_count > 1
