"""Stateless session tokens, signed as HS256 JSON Web Tokens.

A token carries ``sub`` (username), ``role``, ``iat`` and ``exp``.  Nothing
is stored server-side: a token is valid iff its signature checks out
against the process secret and ``exp`` is still in the future.

Every rejection raises the same InvalidTokenError so callers cannot tell
a forged token from an expired or garbled one.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import jwt
import structlog

from sweetshop.domain.exceptions import InvalidTokenError
from sweetshop.domain.model.account import Role
from sweetshop.domain.security import TokenClaims, TokenService

logger = structlog.get_logger(__name__)

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(hours=24)
MIN_SECRET_BYTES = 32

_REQUIRED_CLAIMS = ["sub", "role", "iat", "exp"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JwtTokenService(TokenService):

    def __init__(
        self,
        secret: str,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if len(secret.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ValueError(
                f"Token secret must be at least {MIN_SECRET_BYTES} bytes long"
            )
        if ttl < timedelta(0):
            raise ValueError("Token TTL cannot be negative")
        self._secret = secret
        self._ttl = ttl
        self._clock = clock

    def issue(self, identity: str, role: Role) -> str:
        """Sign a token for *identity* that expires ``ttl`` from now.

        ``exp`` is rounded up to the next whole second so the token never
        lives shorter than ``ttl``.  A zero TTL expires at issue time.
        """
        now = self._clock()
        issued_at = int(now.timestamp())
        if self._ttl:
            expires_at = math.ceil((now + self._ttl).timestamp())
        else:
            expires_at = issued_at
        payload = {
            "sub": identity,
            "role": role.value,
            "iat": issued_at,
            "exp": expires_at,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Return the token's claims, or raise InvalidTokenError."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                # Expiry is checked below against the injected clock.
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": _REQUIRED_CLAIMS,
                },
            )
            claims = TokenClaims(
                subject=_subject(payload["sub"]),
                role=Role(payload["role"]),
                issued_at=_from_epoch(payload["iat"]),
                expires_at=_from_epoch(payload["exp"]),
            )
        except (jwt.PyJWTError, KeyError, ValueError, TypeError, OverflowError) as exc:
            logger.debug("token_rejected", reason=type(exc).__name__)
            raise InvalidTokenError() from None

        if claims.expires_at <= self._clock():
            logger.debug("token_rejected", reason="expired", subject=claims.subject)
            raise InvalidTokenError()
        return claims


def _subject(value: object) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError("subject must be a non-empty string")
    return value


def _from_epoch(value: object) -> datetime:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError("timestamp must be numeric")
    return datetime.fromtimestamp(value, tz=timezone.utc)
