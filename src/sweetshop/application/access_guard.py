"""Access Guard: decides whether a caller may run an operation.

Every application handler calls the guard once, at the boundary, with the
access level the operation needs.  Nothing below the guard re-checks
roles: the inventory ledger trusts whatever identity the guard admitted.

Denials tell the caller only whether it failed authentication (401) or
authorization (403), never which check inside those failed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog

from sweetshop.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainException,
    InvalidTokenError,
)
from sweetshop.domain.model.account import Role
from sweetshop.domain.security import TokenService

logger = structlog.get_logger(__name__)


class AccessLevel(Enum):
    PUBLIC = "PUBLIC"
    AUTHENTICATED = "AUTHENTICATED"
    MANAGER = "MANAGER"


class DenialReason(Enum):
    NO_TOKEN = "NO_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"
    INSUFFICIENT_ROLE = "INSUFFICIENT_ROLE"


@dataclass(frozen=True)
class Principal:
    """Who is calling.  ``identity`` is None for anonymous callers."""

    identity: str | None
    role: Role | None

    @property
    def is_anonymous(self) -> bool:
        return self.identity is None


ANONYMOUS = Principal(identity=None, role=None)


@dataclass(frozen=True)
class Admitted:
    principal: Principal


@dataclass(frozen=True)
class Denied:
    reason: DenialReason

    @property
    def status(self) -> int:
        return 403 if self.reason == DenialReason.INSUFFICIENT_ROLE else 401

    def to_exception(self) -> DomainException:
        if self.reason == DenialReason.INSUFFICIENT_ROLE:
            return AuthorizationError("Access denied")
        return AuthenticationError("Authentication required")


class AccessGuard:

    def __init__(self, token_service: TokenService) -> None:
        self._token_service = token_service

    def authorize(self, token: str | None, level: AccessLevel) -> Admitted | Denied:
        """Admit or deny a call needing *level*.

        PUBLIC always admits: the caller's principal when the token is
        valid, an anonymous one otherwise.
        """
        if token is not None and not token.strip():
            token = None

        if level == AccessLevel.PUBLIC:
            if token is None:
                return Admitted(ANONYMOUS)
            try:
                claims = self._token_service.verify(token)
            except InvalidTokenError:
                return Admitted(ANONYMOUS)
            return Admitted(Principal(claims.subject, claims.role))

        if token is None:
            return self._deny(DenialReason.NO_TOKEN, level)
        try:
            claims = self._token_service.verify(token)
        except InvalidTokenError:
            return self._deny(DenialReason.INVALID_TOKEN, level)

        if level == AccessLevel.MANAGER and claims.role != Role.MANAGER:
            return self._deny(DenialReason.INSUFFICIENT_ROLE, level, claims.subject)

        return Admitted(Principal(claims.subject, claims.role))

    def require(self, token: str | None, level: AccessLevel) -> Principal:
        """Like ``authorize`` but raises on denial and returns the principal."""
        decision = self.authorize(token, level)
        if isinstance(decision, Denied):
            raise decision.to_exception()
        return decision.principal

    @staticmethod
    def _deny(
        reason: DenialReason, level: AccessLevel, subject: str | None = None
    ) -> Denied:
        logger.info(
            "access_denied", reason=reason.value, level=level.value, subject=subject
        )
        return Denied(reason)
