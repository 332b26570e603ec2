"""Runtime settings, read from ``SWEETSHOP_*`` environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from sweetshop.infrastructure.security.password_hasher import DEFAULT_ROUNDS
from sweetshop.infrastructure.security.token_service import DEFAULT_TTL

ENV_PREFIX = "SWEETSHOP_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """A setting is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    token_secret: str | None = None
    token_ttl: timedelta = DEFAULT_TTL
    bcrypt_rounds: int = DEFAULT_ROUNDS
    log_level: str = "WARNING"

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        log_level = env.get(f"{ENV_PREFIX}LOG_LEVEL", "WARNING").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ConfigError(
                f"{ENV_PREFIX}LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, "
                f"got {log_level!r}"
            )

        ttl_seconds = _int(env, "TOKEN_TTL_SECONDS", int(DEFAULT_TTL.total_seconds()))
        if ttl_seconds < 0:
            raise ConfigError(f"{ENV_PREFIX}TOKEN_TTL_SECONDS cannot be negative")

        return Settings(
            data_dir=Path(env.get(f"{ENV_PREFIX}DATA_DIR", "data")),
            token_secret=env.get(f"{ENV_PREFIX}TOKEN_SECRET") or None,
            token_ttl=timedelta(seconds=ttl_seconds),
            bcrypt_rounds=_int(env, "BCRYPT_ROUNDS", DEFAULT_ROUNDS),
            log_level=log_level,
        )


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None
