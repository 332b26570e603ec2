"""Application service: Register Account use case.

Creates CUSTOMER accounts through ``handle`` and MANAGER accounts through
``handle_manager``.  Manager registration is reachable without any prior
privilege; callers that need to restrict it must do so in front of this
handler.
"""

from __future__ import annotations

import structlog

from sweetshop.application.dto import AuthResultDTO
from sweetshop.domain.exceptions import ConflictError, ValidationError
from sweetshop.domain.model.account import Account, Role, validated_identity
from sweetshop.domain.repository.account_repository import AccountRepository
from sweetshop.domain.security import PasswordHasher, TokenService

logger = structlog.get_logger(__name__)

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class RegisterAccountHandler:

    def __init__(
        self,
        account_repo: AccountRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ) -> None:
        self._account_repo = account_repo
        self._password_hasher = password_hasher
        self._token_service = token_service

    def handle(self, username: str, email: str, password: str) -> AuthResultDTO:
        """Register a customer and log them straight in."""
        return self._register(username, email, password, Role.CUSTOMER)

    def handle_manager(self, username: str, email: str, password: str) -> AuthResultDTO:
        """Register a manager and log them straight in."""
        return self._register(username, email, password, Role.MANAGER)

    def _register(
        self, username: str, email: str, password: str, role: Role
    ) -> AuthResultDTO:
        username, email = validated_identity(username, email)
        if not password or not password.strip():
            raise ValidationError("Password is required")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes"
            )

        if self._account_repo.exists_by_username(username):
            raise ConflictError("Username already exists")
        if self._account_repo.exists_by_email(email):
            raise ConflictError("Email already exists")

        account = Account.create(
            username, email, self._password_hasher.hash(password), role
        )
        account = self._account_repo.add(account)

        token = self._token_service.issue(account.username, account.role)
        logger.info("account_registered", username=account.username, role=role.value)
        return AuthResultDTO.for_account(account, token)
