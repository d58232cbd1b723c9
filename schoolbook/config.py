"""
Runtime settings for the engine.

Values are read from the environment (a local .env file is honoured) and
validated once. Each setting is only a default: functions that use one
also accept it as an explicit keyword argument.
"""

import logging
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()

ENV_PREFIX = "SCHOOLBOOK_"


class Settings(BaseModel):
    miller_rabin_rounds: int = Field(default=5, ge=1)
    generator_window: int = Field(default=1_000_000, ge=1)
    max_prime_probes: int = Field(default=100_000, ge=1)
    max_generator_candidates: int = Field(default=10_000, ge=1)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"unknown log level: {v}")
        return v


def _from_env() -> dict:
    values = {}
    for name in Settings.model_fields:
        raw = os.getenv(ENV_PREFIX + name.upper())
        if raw is not None:
            values[name] = raw
    return values


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(**_from_env())


def reset_settings() -> None:
    """Drop the cached settings so the environment is read again."""
    get_settings.cache_clear()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=level or get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
