from .envelope import Envelope
from .predicates import DIFF_NAMES, always_duplicate, resolve_diff, same_log_record, same_message

__all__ = [
    "Envelope",
    "DIFF_NAMES",
    "always_duplicate",
    "resolve_diff",
    "same_log_record",
    "same_message",
]
