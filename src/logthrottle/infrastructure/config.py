import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from logthrottle.domain.predicates import DIFF_NAMES

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib


@dataclass(frozen=True)
class ThrottleConfig:
    delay_ms: int = 5000
    diff: str = "always"
    log_level: str = "INFO"


def _toml_error_type():
    return getattr(tomllib, "TOMLDecodeError", ValueError)


class _ThrottleConfigModel(BaseModel):
    delay_ms: int = 5000
    diff: str = "always"
    log_level: str = "INFO"

    @field_validator("delay_ms", mode="before")
    @classmethod
    def _reject_bool_numbers(cls, value):
        if isinstance(value, bool):
            raise ValueError("boolean values are not valid for numeric fields")
        return value

    @field_validator("delay_ms")
    @classmethod
    def _require_positive_delay(cls, value):
        if value <= 0:
            raise ValueError("delay_ms must be a positive number of milliseconds")
        return value

    @field_validator("diff", mode="before")
    @classmethod
    def _normalize_diff(cls, value):
        normalized = str(value).strip().lower()
        if normalized not in DIFF_NAMES:
            raise ValueError(f"diff must be one of: {', '.join(sorted(DIFF_NAMES))}")
        return normalized

    @field_validator("log_level", mode="before")
    @classmethod
    def _uppercase_log_level(cls, value):
        return str(value).upper()


def _default_config_path() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "logthrottle" / "config.toml"
    return Path.home() / ".config" / "logthrottle" / "config.toml"


def _load_toml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    if not path.is_file():
        raise ValueError(f"Config path is not a file: {path}")
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as exc:
        raise ValueError(f"Cannot read config file: {path}") from exc
    except _toml_error_type() as exc:
        raise ValueError(f"Invalid TOML in config file: {path}") from exc
    return data if isinstance(data, dict) else {}


def _merge_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    merged = dict(data)
    # Settings may also live under a [throttle] table.
    table = merged.pop("throttle", None)
    if isinstance(table, dict):
        merged.update(table)

    env_delay = os.getenv("LOGTHROTTLE_DELAY_MS")
    env_diff = os.getenv("LOGTHROTTLE_DIFF")
    env_log_level = os.getenv("LOGTHROTTLE_LOG_LEVEL")
    if env_delay is not None:
        merged["delay_ms"] = env_delay
    if env_diff is not None:
        merged["diff"] = env_diff
    if env_log_level is not None:
        merged["log_level"] = env_log_level
    return merged


def load_config(path: str | None = None) -> ThrottleConfig:
    cfg_path = Path(path) if path else _default_config_path()
    data = _merge_env_overrides(_load_toml(cfg_path))
    try:
        parsed = _ThrottleConfigModel.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid config values: {exc}") from exc

    return ThrottleConfig(
        delay_ms=parsed.delay_ms,
        diff=parsed.diff,
        log_level=parsed.log_level,
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        force=True,
    )
