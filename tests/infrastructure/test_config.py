"""Tests for environment-driven settings."""

from datetime import timedelta
from pathlib import Path

import pytest

from sweetshop.infrastructure.config import ConfigError, Settings


def test_defaults():
    settings = Settings.from_env({})
    assert settings.data_dir == Path("data")
    assert settings.token_secret is None
    assert settings.token_ttl == timedelta(hours=24)
    assert settings.bcrypt_rounds == 12
    assert settings.log_level == "WARNING"


def test_reads_every_variable():
    settings = Settings.from_env(
        {
            "SWEETSHOP_DATA_DIR": "/srv/shop",
            "SWEETSHOP_TOKEN_SECRET": "s" * 32,
            "SWEETSHOP_TOKEN_TTL_SECONDS": "60",
            "SWEETSHOP_BCRYPT_ROUNDS": "4",
            "SWEETSHOP_LOG_LEVEL": "debug",
        }
    )
    assert settings.data_dir == Path("/srv/shop")
    assert settings.token_secret == "s" * 32
    assert settings.token_ttl == timedelta(seconds=60)
    assert settings.bcrypt_rounds == 4
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env",
    [
        {"SWEETSHOP_TOKEN_TTL_SECONDS": "soon"},
        {"SWEETSHOP_TOKEN_TTL_SECONDS": "-1"},
        {"SWEETSHOP_BCRYPT_ROUNDS": "many"},
        {"SWEETSHOP_LOG_LEVEL": "LOUD"},
    ],
)
def test_bad_values_rejected(env):
    with pytest.raises(ConfigError):
        Settings.from_env(env)
