"""Abstract credential services used by the application layer.

Concrete implementations (JWT signing, bcrypt) live in infrastructure and
are wired in by the composition root.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from sweetshop.domain.model.account import Role


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    role: Role
    issued_at: datetime
    expires_at: datetime


class TokenService(ABC):

    @abstractmethod
    def issue(self, identity: str, role: Role) -> str:
        """Return a signed session token for *identity*."""

    @abstractmethod
    def verify(self, token: str) -> TokenClaims:
        """Return the token's claims.

        Raises InvalidTokenError for any expired, forged or malformed token.
        """


class PasswordHasher(ABC):

    @abstractmethod
    def hash(self, password: str) -> str:
        """Return an opaque, salted hash of *password*."""

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """True if *password* matches *password_hash*."""
