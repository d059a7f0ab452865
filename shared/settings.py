from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from shared.protocol import DEFAULT_ACCEPT_TIMEOUT_MS, DEFAULT_FRAME_SIZE, ConfigError

ENV_PREFIX = "PAIRCHAT_"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseModel):
    """Baseline settings shared by the server and client roles."""

    model_config = ConfigDict(extra="forbid")

    frame_size: int = Field(default=DEFAULT_FRAME_SIZE, gt=0, description="Bytes per frame on the wire")
    accept_timeout_ms: int = Field(default=DEFAULT_ACCEPT_TIMEOUT_MS, gt=0, description="Bounded admission wait")
    poll_interval_ms: int = Field(default=100, gt=0, description="Console input wait per tick")
    history_size: int = Field(default=200, gt=0, description="Chat lines kept in memory")
    log_level: str = "WARNING"
    log_file: Optional[Path] = None

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level


def load_settings(env_path: str = ".env") -> Settings:
    """Load settings from env/.env, ``PAIRCHAT_<FIELD>`` overrides the defaults."""
    if Path(env_path).exists():
        load_dotenv(env_path)

    values: Dict[str, Any] = {}
    for name in Settings.model_fields:
        raw = os.getenv(f"{ENV_PREFIX}{name.upper()}")
        if raw:
            values[name] = raw
    try:
        return Settings(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc


def configure_logging(settings: Settings) -> None:
    """Route logs to ``log_file`` when set so they stay out of the chat console."""
    if settings.log_file:
        logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, filename=str(settings.log_file))
    else:
        logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)


__all__ = ["ENV_PREFIX", "Settings", "load_settings", "configure_logging"]
