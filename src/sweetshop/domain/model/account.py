"""Account aggregate: who may log in, and with which role."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sweetshop.domain.exceptions import ValidationError


class Role(Enum):
    CUSTOMER = "CUSTOMER"
    MANAGER = "MANAGER"


@dataclass(frozen=True)
class Account:
    """A registered user.

    Immutable once created.  ``password_hash`` is an opaque secret and
    must never leave the application layer.
    """

    id: str | None
    username: str
    email: str
    password_hash: str
    role: Role = Role.CUSTOMER

    @staticmethod
    def create(username: str, email: str, password_hash: str, role: Role) -> Account:
        username, email = validated_identity(username, email)
        return Account(
            id=None,
            username=username,
            email=email,
            password_hash=password_hash,
            role=role,
        )

    def __repr__(self) -> str:
        return (
            f"Account(id={self.id!r}, username={self.username!r}, "
            f"email={self.email!r}, role={self.role.value})"
        )


def validated_identity(username: str, email: str) -> tuple[str, str]:
    """Check username and email, returning them trimmed (email lower-cased)."""
    if not username or not username.strip():
        raise ValidationError("Username is required")
    if not email or not email.strip():
        raise ValidationError("Email is required")
    if "@" not in email:
        raise ValidationError(f"Invalid email address: {email!r}")
    return username.strip(), email.strip().lower()
