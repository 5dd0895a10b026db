"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

OBS_TIME_MISSING = "N/A"
OBS_TIME_MAX_BYTES = 63


@dataclass(slots=True)
class WeatherRecord:
    """A single observation or daily summary decoded from the WU API."""

    obs_time_local: str = OBS_TIME_MISSING
    humidity_avg: int = 0
    temp_avg: float = 0.0
    precip_rate: float = 0.0
    precip_total: float = 0.0


def allocate_records(capacity: int) -> List[WeatherRecord]:
    """Pre-allocate the fixed-capacity output sequence a fetch writes into."""
    if capacity < 0:
        raise ValueError("Record capacity cannot be negative.")
    return [WeatherRecord() for _ in range(capacity)]
