"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the front end and the application layer without
exposing domain internals (or password hashes) to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from sweetshop.domain.model.account import Account
from sweetshop.domain.model.item import Item


@dataclass(frozen=True)
class ItemDTO:
    """Output: one catalog item as displayed to the user."""

    id: str
    name: str
    category: str
    unit_price: str  # formatted, e.g. "50.00"
    stock_quantity: int

    @staticmethod
    def from_item(item: Item) -> ItemDTO:
        return ItemDTO(
            id=item.id,  # type: ignore[arg-type]
            name=item.name,
            category=item.category,
            unit_price=str(item.unit_price),
            stock_quantity=item.stock_quantity,
        )


@dataclass(frozen=True)
class AuthResultDTO:
    """Output: a fresh session token plus who it belongs to."""

    token: str
    username: str
    email: str
    role: str

    @staticmethod
    def for_account(account: Account, token: str) -> AuthResultDTO:
        return AuthResultDTO(
            token=token,
            username=account.username,
            email=account.email,
            role=account.role.value,
        )


@dataclass(frozen=True)
class SearchCriteria:
    """Input: optional item filters, AND-combined."""

    name: str | None = None
    category: str | None = None
    min_price: str | None = None
    max_price: str | None = None
