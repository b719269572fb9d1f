"""
Application settings.

Quota configuration (removals per player, time limit) is owned by whoever starts a game, not by the rule engine.
The values here are only the defaults handed to new games.
"""

import logging
import os
from collections.abc import Mapping
from typing import Optional

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "REMOVAL_CHESS_"
DEFAULT_DATABASE_URL = "sqlite:///removal_chess.db"


class Settings(BaseModel):
    database_url: str = DEFAULT_DATABASE_URL
    removals_per_player: Optional[int] = Field(default=None, ge=0)
    time_limit_seconds: Optional[int] = Field(default=None, gt=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level


def load_settings(environ: Mapping[str, str] = os.environ) -> Settings:
    """Read settings from REMOVAL_CHESS_* environment variables. Empty values count as unset."""
    values: dict[str, str] = {}
    for name in Settings.model_fields:
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}", "").strip()
        if raw:
            values[name] = raw
    return Settings.model_validate(values)
