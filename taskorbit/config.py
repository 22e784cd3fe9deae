"""Runtime settings for TaskOrbit, read from the environment."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = "TASKORBIT_"


class Settings(BaseModel):
    """Settings for the server and its data store."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    data_dir: Path | None = Field(
        default=None,
        description="Directory holding the persisted JSON blobs; None keeps data in memory",
    )
    seed_samples: bool = Field(default=True, description="Load the sample dataset when nothing is persisted")
    log_level: str = Field(default="WARNING")

    @field_validator("data_dir", mode="before")
    @classmethod
    def _empty_dir_is_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from ``TASKORBIT_*`` environment variables.

    Recognised: TASKORBIT_DATA_DIR, TASKORBIT_SEED_SAMPLES, TASKORBIT_LOG_LEVEL.
    """
    env = os.environ if environ is None else environ
    values = {}
    for field in Settings.model_fields:
        key = ENV_PREFIX + field.upper()
        if key in env:
            values[field] = env[key]
    return Settings.model_validate(values)
