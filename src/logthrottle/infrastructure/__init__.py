from .clock import monotonic_ms
from .config import ThrottleConfig, configure_logging, load_config
from .schedulers import AsyncioScheduler, ThreadingScheduler
from .sinks import LoggingSink, trace_report

__all__ = [
    "monotonic_ms",
    "ThrottleConfig",
    "configure_logging",
    "load_config",
    "AsyncioScheduler",
    "ThreadingScheduler",
    "LoggingSink",
    "trace_report",
]
