import time


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0
