from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_HOST_ENV = "WU_API_HOST"
_PORT_ENV = "WU_API_PORT"
_STATION_ID_ENV = "WU_STATION_ID"
_API_KEY_ENV = "WU_API_KEY"
_TIMEOUT_ENV = "WU_TIMEOUT_SECONDS"
_DECODE_BUFFER_ENV = "WU_DECODE_BUFFER_BYTES"
_READ_CHUNK_ENV = "WU_READ_CHUNK_BYTES"
_MAX_RECORDS_ENV = "WU_MAX_RECORDS"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    api_host: str
    api_port: int
    station_id: Optional[str]
    api_key: Optional[str]
    timeout_seconds: float
    decode_buffer_bytes: int
    read_chunk_bytes: int
    max_records: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        api_host=_read_str_env(_HOST_ENV, "api.weather.com"),
        api_port=_read_positive_int(_PORT_ENV, 443),
        station_id=_read_optional_env(_STATION_ID_ENV, None),
        api_key=_read_optional_env(_API_KEY_ENV, None),
        timeout_seconds=_read_positive_float(_TIMEOUT_ENV, 10.0),
        decode_buffer_bytes=_read_positive_int(_DECODE_BUFFER_ENV, 2048),
        read_chunk_bytes=_read_positive_int(_READ_CHUNK_ENV, 512),
        max_records=_read_positive_int(_MAX_RECORDS_ENV, 7),
        log_level=_read_log_level("INFO"),
    )
