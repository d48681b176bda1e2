"""Configuration management for splitboard.

Settings come from environment variables; CLI options override them.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from splitboard.domain.errors import ValidationError

DB_PATH_ENV = "SPLITBOARD_DB_PATH"
LOG_LEVEL_ENV = "SPLITBOARD_LOG_LEVEL"
SAVE_DELAY_ENV = "SPLITBOARD_SAVE_DELAY_MS"


@dataclass
class Config:
    """Application configuration."""

    db_path: Path
    log_level: str
    save_delay_ms: int

    @property
    def save_delay(self) -> float:
        """Quiescence window in seconds."""
        return self.save_delay_ms / 1000

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        return cls(
            db_path=Path.home() / ".splitboard" / "splitboard.db",
            log_level="WARNING",
            save_delay_ms=300,
        )


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Load configuration from the environment.

    Args:
        environ: Mapping to read instead of ``os.environ``

    Raises:
        ValidationError: If the save delay is not a non-negative integer
    """
    environ = os.environ if environ is None else environ
    config = Config.default()

    if environ.get(DB_PATH_ENV):
        config.db_path = Path(environ[DB_PATH_ENV]).expanduser()
    if environ.get(LOG_LEVEL_ENV):
        config.log_level = environ[LOG_LEVEL_ENV].upper()
    if environ.get(SAVE_DELAY_ENV):
        raw = environ[SAVE_DELAY_ENV]
        try:
            config.save_delay_ms = int(raw)
        except ValueError:
            raise ValidationError(f"{SAVE_DELAY_ENV} must be an integer, got '{raw}'")
        if config.save_delay_ms < 0:
            raise ValidationError(f"{SAVE_DELAY_ENV} must be non-negative")

    return config
