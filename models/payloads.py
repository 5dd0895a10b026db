"""Pydantic schemas for objects inside the WU ``summaries``/``observations`` arrays."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from models.records import OBS_TIME_MAX_BYTES, OBS_TIME_MISSING, WeatherRecord

# Numbers must arrive as JSON numbers; "61.5" or Infinity make the object malformed.
_PAYLOAD_CONFIG = ConfigDict(extra="ignore", allow_inf_nan=False)


class ImperialPayload(BaseModel):
    """Measurements reported in imperial units (``units=e``)."""

    model_config = _PAYLOAD_CONFIG

    temp_avg: float = Field(default=0.0, alias="tempAvg", strict=True)
    precip_rate: float = Field(default=0.0, alias="precipRate", strict=True)
    precip_total: float = Field(default=0.0, alias="precipTotal", strict=True)

    @field_validator("temp_avg", "precip_rate", "precip_total", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class ObservationPayload(BaseModel):
    """One array element. Only the fields mapped onto ``WeatherRecord`` are read."""

    model_config = _PAYLOAD_CONFIG

    obs_time_local: str = Field(default=OBS_TIME_MISSING, alias="obsTimeLocal")
    humidity_avg: float = Field(default=0.0, alias="humidityAvg", strict=True)
    imperial: ImperialPayload = Field(default_factory=ImperialPayload)

    @field_validator("obs_time_local", mode="before")
    @classmethod
    def _string_or_missing(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return OBS_TIME_MISSING
        encoded = value.encode("utf-8")
        if len(encoded) <= OBS_TIME_MAX_BYTES:
            return value
        # Cut on the byte bound, dropping a multi-byte character split by it.
        return encoded[:OBS_TIME_MAX_BYTES].decode("utf-8", errors="ignore")

    @field_validator("humidity_avg", mode="before")
    @classmethod
    def _humidity_null_as_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("imperial", mode="before")
    @classmethod
    def _imperial_null_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def to_record(self) -> WeatherRecord:
        return WeatherRecord(
            obs_time_local=self.obs_time_local,
            humidity_avg=int(self.humidity_avg),
            temp_avg=self.imperial.temp_avg,
            precip_rate=self.imperial.precip_rate,
            precip_total=self.imperial.precip_total,
        )
