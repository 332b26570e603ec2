"""Abstract repository for the Account aggregate (the credential store)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from sweetshop.domain.model.account import Account


class AccountRepository(ABC):

    @abstractmethod
    def get_by_username(self, username: str) -> Account | None:
        """Return an account by its exact username, or None."""

    @abstractmethod
    def exists_by_username(self, username: str) -> bool:
        """True if the username is taken."""

    @abstractmethod
    def exists_by_email(self, email: str) -> bool:
        """True if the email is already registered."""

    @abstractmethod
    def add(self, account: Account) -> Account:
        """Store a new account and return it with its assigned ID.

        Raises ConflictError if the username or email is taken.
        """
