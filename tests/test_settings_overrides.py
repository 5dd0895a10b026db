from __future__ import annotations

import pytest

from services.fetcher import build_fetcher
from settings import get_settings


@pytest.fixture(autouse=True)
def _reset_caches():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("WU_API_HOST", "api.example.test")
    monkeypatch.setenv("WU_API_PORT", "8443")
    monkeypatch.setenv("WU_STATION_ID", " KNYNEWYO1 ")
    monkeypatch.setenv("WU_API_KEY", "abc123")
    monkeypatch.setenv("WU_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("WU_DECODE_BUFFER_BYTES", "4096")
    monkeypatch.setenv("WU_READ_CHUNK_BYTES", "128")
    monkeypatch.setenv("WU_MAX_RECORDS", "3")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()
    fetcher = build_fetcher()

    assert settings.station_id == "KNYNEWYO1"
    assert settings.api_key == "abc123"
    assert settings.max_records == 3
    assert settings.log_level == "DEBUG"
    assert fetcher.host == "api.example.test"
    assert fetcher.port == 8443
    assert fetcher.base_url == "https://api.example.test:8443"
    assert fetcher.timeout == 2.5
    assert fetcher.decode_buffer_size == 4096
    assert fetcher.read_chunk_size == 128


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("WU_API_HOST", "   ")
    monkeypatch.setenv("WU_API_PORT", "not-a-port")
    monkeypatch.setenv("WU_STATION_ID", "")
    monkeypatch.setenv("WU_TIMEOUT_SECONDS", "-1")
    monkeypatch.setenv("WU_DECODE_BUFFER_BYTES", "0")
    monkeypatch.delenv("WU_API_KEY", raising=False)
    monkeypatch.delenv("WU_MAX_RECORDS", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    settings = get_settings()

    assert settings.api_host == "api.weather.com"
    assert settings.api_port == 443
    assert settings.station_id is None
    assert settings.api_key is None
    assert settings.timeout_seconds == 10.0
    assert settings.decode_buffer_bytes == 2048
    assert settings.max_records == 7
    assert settings.log_level == "INFO"
    assert build_fetcher().base_url == "https://api.weather.com"
