"""Runtime settings, read from BEATWISE_* environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from .exceptions import ConfigError


DEFAULT_CSV_PATH = "dataset/merged_data_cleaned.csv"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Config:
    csv_path: str = DEFAULT_CSV_PATH
    top_limit: int = 10
    bucket_top: int = 3
    cache_records: bool = False
    extra_fields: Tuple[str, ...] = ()
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Config":
        extra = os.getenv("BEATWISE_EXTRA_FIELDS", "")
        return cls(
            csv_path=os.getenv("BEATWISE_CSV_PATH", DEFAULT_CSV_PATH),
            top_limit=_env_int("BEATWISE_TOP_LIMIT", 10),
            bucket_top=_env_int("BEATWISE_BUCKET_TOP", 3),
            cache_records=_env_bool("BEATWISE_CACHE_RECORDS", False),
            extra_fields=tuple(f.strip() for f in extra.split(",") if f.strip()),
            log_level=os.getenv("BEATWISE_LOG_LEVEL", "INFO"),
            log_dir=os.getenv("BEATWISE_LOG_DIR") or None,
        )
