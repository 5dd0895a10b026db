from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from settings import get_settings


@dataclass(frozen=True)
class CLIConfig:
    station_id: Optional[str] = None
    api_key: Optional[str] = None
    max_records: int = 7
    log_level: str = "INFO"


def load_config(
    station_id: Optional[str] = None,
    api_key: Optional[str] = None,
    log_level: Optional[str] = None,
) -> CLIConfig:
    settings = get_settings()
    return CLIConfig(
        station_id=(station_id or settings.station_id or "").strip() or None,
        api_key=(api_key or settings.api_key or "").strip() or None,
        max_records=settings.max_records,
        log_level=(log_level or settings.log_level).upper(),
    )
