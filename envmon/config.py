import logging
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from envmon.errors import ConfigError

DEFAULT_API = "http://127.0.0.1:8000"


class Settings(BaseSettings):
    """Dashboard settings, read from ``ENVMON_*`` variables or a ``.env`` file."""

    model_config = SettingsConfigDict(
        env_prefix="ENVMON_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    api_base_url: str = DEFAULT_API
    api_token: str = ""
    request_timeout: float = Field(5.0, gt=0)
    log_level: str = "INFO"
    display_tz: str = "UTC"

    @field_validator("api_base_url")
    @classmethod
    def _check_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("expected an http(s) URL")
        return v

    @field_validator("api_token")
    @classmethod
    def _strip_token(cls, v: str) -> str:
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("display_tz")
    @classmethod
    def _check_tz(cls, v: str) -> str:
        v = v.strip()
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError("unknown time zone") from None
        return v


# streamlit secret key -> setting name
SECRET_KEYS = {
    "api": "api_base_url",
    "token": "api_token",
    "timeout": "request_timeout",
    "log_level": "log_level",
    "display_tz": "display_tz",
}


def load_settings(secrets: Optional[Mapping] = None) -> Settings:
    """Resolve settings from Streamlit secrets first, then the environment.

    Blank secrets fall through; anything still missing takes the ``Settings``
    default.
    """
    overrides = {}
    for key, name in SECRET_KEYS.items():
        value = (secrets or {}).get(key)
        if value is not None and value != "":
            overrides[name] = value
    try:
        return Settings(**overrides)
    except ValidationError as e:
        err = e.errors()[0]
        raise ConfigError(str(err["loc"][0]), err.get("input"), err["msg"]) from e


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
