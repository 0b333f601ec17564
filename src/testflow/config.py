"""Environment-based configuration for the CLI."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

from testflow.constants import (
    DIAGRAM_MAX_ACTIONS,
    LABEL_MAX_CHARS,
    LABEL_MIN_CHARS,
    Framework,
)

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and ``TESTFLOW_*`` environment variables.

    The compiler itself never reads settings; the CLI passes these
    values in explicitly.
    """

    default_framework: Framework = Framework.PLAYWRIGHT

    # Diagram limits
    max_actions: int = DIAGRAM_MAX_ACTIONS
    label_max_chars: int = LABEL_MAX_CHARS

    # Logging
    log_level: str = "INFO"
    log_dir: Path | None = None  # None = no JSON compile log

    # Rendering
    mmdc_timeout_seconds: int = 60

    @field_validator("max_actions")
    @classmethod
    def _validate_max_actions(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_actions must be at least 1")
        return v

    @field_validator("label_max_chars")
    @classmethod
    def _validate_label_max_chars(cls, v: int) -> int:
        if v < LABEL_MIN_CHARS:
            raise ValueError(
                f"label_max_chars must be at least {LABEL_MIN_CHARS}"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            logger.warning("Unknown TESTFLOW_LOG_LEVEL %r, using INFO", v)
            return "INFO"
        return level

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "TESTFLOW_",
        "extra": "ignore",
    }
