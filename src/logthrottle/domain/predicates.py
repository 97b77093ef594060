import logging
from collections.abc import Mapping
from typing import Any, Callable


def always_duplicate(_old: Any, _new: Any) -> bool:
    # Permissive placeholder default; pass same_message or a real predicate.
    return True


def _message_of(record: Any) -> Any:
    if isinstance(record, Mapping):
        return record.get("msg")
    return getattr(record, "msg", record)


def same_message(old: Any, new: Any) -> bool:
    return _message_of(old) == _message_of(new)


def same_log_record(old: logging.LogRecord, new: logging.LogRecord) -> bool:
    return (
        old.name == new.name
        and old.levelno == new.levelno
        and old.getMessage() == new.getMessage()
    )


_BY_NAME: dict[str, Callable[[Any, Any], bool]] = {
    "always": always_duplicate,
    "message": same_message,
    "log_record": same_log_record,
}

DIFF_NAMES = frozenset(_BY_NAME)


def resolve_diff(name: str) -> Callable[[Any, Any], bool]:
    key = str(name).strip().lower()
    try:
        return _BY_NAME[key]
    except KeyError:
        raise ValueError(f"Unknown diff predicate: {name!r}") from None
