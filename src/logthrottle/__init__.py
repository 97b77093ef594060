from logthrottle.application.throttle import ThrottleWindowManager
from logthrottle.domain import Envelope, always_duplicate, same_log_record, same_message
from logthrottle.infrastructure import (
    AsyncioScheduler,
    LoggingSink,
    ThreadingScheduler,
    ThrottleConfig,
    load_config,
)
from logthrottle.interfaces.logging_handler import ThrottledHandler

__all__ = [
    "ThrottleWindowManager",
    "Envelope",
    "always_duplicate",
    "same_log_record",
    "same_message",
    "AsyncioScheduler",
    "LoggingSink",
    "ThreadingScheduler",
    "ThrottleConfig",
    "load_config",
    "ThrottledHandler",
]
