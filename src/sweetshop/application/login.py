"""Application service: Login use case."""

from __future__ import annotations

import structlog

from sweetshop.application.dto import AuthResultDTO
from sweetshop.domain.exceptions import AuthenticationError
from sweetshop.domain.repository.account_repository import AccountRepository
from sweetshop.domain.security import PasswordHasher, TokenService

logger = structlog.get_logger(__name__)


class LoginHandler:

    def __init__(
        self,
        account_repo: AccountRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ) -> None:
        self._account_repo = account_repo
        self._password_hasher = password_hasher
        self._token_service = token_service

    def handle(self, username: str, password: str) -> AuthResultDTO:
        """Exchange a username and password for a session token.

        Unknown usernames and wrong passwords fail with the same message.
        """
        account = self._account_repo.get_by_username((username or "").strip())
        if account is None or not self._password_hasher.verify(
            password or "", account.password_hash
        ):
            logger.info("login_failed", username=username)
            raise AuthenticationError("Invalid username or password")

        token = self._token_service.issue(account.username, account.role)
        logger.info("login_succeeded", username=account.username)
        return AuthResultDTO.for_account(account, token)
