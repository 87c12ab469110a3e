# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

"""
Runtime configuration, read from the environment (and an optional ``.env``).

The upstream addresses keep their historical variable names,
``TELEMETRY_URL`` and ``INTEROP_PROXY_URL``. Everything else is prefixed with
``AUTOPILOT_``.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROTOCOL = "http://"
DEFAULT_TELEMETRY_URL = "0.0.0.0:5000"
DEFAULT_INTEROP_PROXY_URL = "0.0.0.0:8000"


class Settings(BaseSettings):
    """Runtime configuration for the replanning service."""

    model_config = SettingsConfigDict(
        env_prefix="AUTOPILOT_",
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    telemetry_url: str = Field(
        DEFAULT_TELEMETRY_URL,
        validation_alias=AliasChoices("TELEMETRY_URL", "AUTOPILOT_TELEMETRY_URL"),
        description="Base address of the telemetry service.",
    )
    interop_proxy_url: str = Field(
        DEFAULT_INTEROP_PROXY_URL,
        validation_alias=AliasChoices("INTEROP_PROXY_URL", "AUTOPILOT_INTEROP_PROXY_URL"),
        description="Base address of the interop proxy service.",
    )
    host: str = Field("0.0.0.0", description="Interface the service binds to.")
    port: int = Field(7500, ge=1, le=65535, description="Port the service listens on.")
    tolerance: float = Field(1.0, gt=0, description="Positional tolerance of the planner, in meters.")
    request_timeout: float = Field(1.0, gt=0, description="Timeout of each upstream request, in seconds.")
    lock_timeout: float = Field(
        0.0,
        ge=0,
        description="How long a replan waits for a busy planner before failing, in seconds.",
    )
    log_level: str = Field("INFO", description="Level of the autopilot package logger.")

    @field_validator("telemetry_url", "interop_proxy_url")
    @classmethod
    def _add_protocol(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if "://" not in value:
            value = PROTOCOL + value
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


@lru_cache()
def get_settings() -> Settings:
    """Return the cached process settings."""

    return Settings()
