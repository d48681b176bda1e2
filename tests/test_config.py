"""Tests for configuration and logging setup."""

import logging
from pathlib import Path

import pytest

from splitboard.domain.errors import ValidationError
from splitboard.utils.config import (
    DB_PATH_ENV,
    LOG_LEVEL_ENV,
    SAVE_DELAY_ENV,
    Config,
    load_config,
)
from splitboard.utils.logger import setup_logging


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self):
        config = load_config({})

        assert config == Config.default()
        assert config.db_path.name == "splitboard.db"
        assert config.log_level == "WARNING"
        assert config.save_delay == 0.3

    def test_environment_overrides(self, tmp_path):
        config = load_config(
            {
                DB_PATH_ENV: str(tmp_path / "boards.db"),
                LOG_LEVEL_ENV: "debug",
                SAVE_DELAY_ENV: "50",
            }
        )

        assert config.db_path == Path(tmp_path / "boards.db")
        assert config.log_level == "DEBUG"
        assert config.save_delay_ms == 50
        assert config.save_delay == 0.05

    @pytest.mark.parametrize("raw", ["soon", "-1"])
    def test_invalid_save_delay(self, raw):
        with pytest.raises(ValidationError):
            load_config({SAVE_DELAY_ENV: raw})


def test_setup_logging_replaces_handlers():
    setup_logging("INFO")
    logger = setup_logging("debug")

    assert logger.name == "splitboard"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
