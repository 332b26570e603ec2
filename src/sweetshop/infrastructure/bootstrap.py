"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module receives its collaborators through its constructor.
"""

from __future__ import annotations

from sweetshop.application.access_guard import AccessGuard
from sweetshop.domain.service.inventory_ledger import InventoryLedger
from sweetshop.infrastructure.config import ConfigError, Settings
from sweetshop.infrastructure.persistence.json_account_repository import (
    JsonAccountRepository,
)
from sweetshop.infrastructure.persistence.json_item_repository import (
    JsonItemRepository,
)
from sweetshop.infrastructure.security.password_hasher import BcryptPasswordHasher
from sweetshop.infrastructure.security.token_service import JwtTokenService


def settings() -> Settings:
    return Settings.from_env()


def item_repository(config: Settings) -> JsonItemRepository:
    return JsonItemRepository(config.data_dir / "items.json")


def account_repository(config: Settings) -> JsonAccountRepository:
    return JsonAccountRepository(config.data_dir / "accounts.json")


def password_hasher(config: Settings) -> BcryptPasswordHasher:
    try:
        return BcryptPasswordHasher(rounds=config.bcrypt_rounds)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc


def token_service(config: Settings) -> JwtTokenService:
    if config.token_secret is None:
        raise ConfigError("SWEETSHOP_TOKEN_SECRET is not set")
    try:
        return JwtTokenService(config.token_secret, ttl=config.token_ttl)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc


def access_guard(config: Settings) -> AccessGuard:
    return AccessGuard(token_service(config))


def inventory_ledger(config: Settings) -> InventoryLedger:
    return InventoryLedger(item_repository(config))
