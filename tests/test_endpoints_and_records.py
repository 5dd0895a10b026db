"""Unit tests for endpoint presets and record allocation."""

from __future__ import annotations

import pytest

from models.records import WeatherRecord, allocate_records
from services.endpoints import get_endpoint, list_endpoints


def test_allocate_records_builds_distinct_default_slots() -> None:
    records = allocate_records(3)

    assert records == [WeatherRecord()] * 3
    assert records[0] is not records[1]
    assert records[0].obs_time_local == "N/A"


def test_allocate_records_rejects_negative_capacity() -> None:
    with pytest.raises(ValueError):
        allocate_records(-1)


def test_get_endpoint_returns_preset() -> None:
    endpoint = get_endpoint("daily-7day")

    assert endpoint.path == "v2/pws/dailysummary/7day"
    assert endpoint.array_marker == '"summaries":['


def test_get_endpoint_unknown_name_lists_known_ones() -> None:
    with pytest.raises(KeyError) as excinfo:
        get_endpoint("monthly")

    assert "daily-7day" in excinfo.value.args[0]


def test_list_endpoints_has_unique_names() -> None:
    names = [endpoint.name for endpoint in list_endpoints()]

    assert len(names) == len(set(names)) == 3
