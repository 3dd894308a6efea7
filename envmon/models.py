import re
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# sensor fields every reading carries, in display order
READING_FIELDS = (
    "temperature",
    "humidity",
    "pressure",
    "co",
    "co2",
    "methane",
    "lpg",
    "pm25",
    "pm10",
    "noise",
    "light",
)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_epoch_seconds(value: str) -> int:
    """Whole seconds from a string-encoded epoch, reading the integer prefix only."""
    match = _LEADING_INT.match(value)
    if match is None:
        raise ValueError(f"not an epoch timestamp: {value!r}")
    return int(match.group(1))


class Device(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    device_id: str
    device_name: str = ""
    device_imei: str = ""
    is_active: bool = True
    user_id: Optional[str] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @field_validator("device_id", "user_id", mode="before")
    @classmethod
    def _as_str(cls, v):
        return None if v is None else str(v)

    @property
    def label(self) -> str:
        return self.device_name or self.device_id


class Reading(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False, extra="ignore")

    id: str
    device_id: str
    temperature: float
    humidity: float
    pressure: float
    co: float
    co2: float
    methane: float
    lpg: float
    pm25: float
    pm10: float
    noise: float
    light: float
    recorded_at: str

    @field_validator("id", "device_id", "recorded_at", mode="before")
    @classmethod
    def _as_str(cls, v):
        return str(v)

    @field_validator("recorded_at")
    @classmethod
    def _epoch(cls, v: str) -> str:
        parse_epoch_seconds(v)
        return v

    @property
    def recorded_at_seconds(self) -> int:
        return parse_epoch_seconds(self.recorded_at)

    @property
    def recorded_at_utc(self) -> datetime:
        return datetime.fromtimestamp(self.recorded_at_seconds, tz=timezone.utc)

    def value(self, key: str) -> float:
        if key not in READING_FIELDS:
            raise KeyError(key)
        return getattr(self, key)
