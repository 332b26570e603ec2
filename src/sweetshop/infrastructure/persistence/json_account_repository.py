"""JSON-file-backed implementation of AccountRepository.

Locked the same way as JsonItemRepository, so two concurrent registrations
cannot both pass the username and email checks.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path

from filelock import FileLock

from sweetshop.domain.exceptions import ConflictError
from sweetshop.domain.model.account import Account, Role
from sweetshop.domain.repository.account_repository import AccountRepository


class JsonAccountRepository(AccountRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_lock = FileLock(file_path.with_name(file_path.name + ".lock"))
        with self._exclusive():
            self._ensure_file()

    # --- AccountRepository interface ------------------------------------------

    def get_by_username(self, username: str) -> Account | None:
        with self._exclusive():
            for raw in self._load_raw():
                if raw["username"] == username:
                    return self._to_domain(raw)
        return None

    def exists_by_username(self, username: str) -> bool:
        return self.get_by_username(username) is not None

    def exists_by_email(self, email: str) -> bool:
        email = email.strip().lower()
        with self._exclusive():
            return any(raw["email"] == email for raw in self._load_raw())

    def add(self, account: Account) -> Account:
        with self._exclusive():
            records = self._load_raw()
            if any(raw["username"] == account.username for raw in records):
                raise ConflictError("Username already exists")
            if any(raw["email"] == account.email for raw in records):
                raise ConflictError("Email already exists")

            stored = replace(account, id=account.id or uuid.uuid4().hex)
            records.append(self._to_raw(stored))
            self._persist_raw(records)
            return stored

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(account: Account) -> dict:
        return {
            "id": account.id,
            "username": account.username,
            "email": account.email,
            "password_hash": account.password_hash,
            "role": account.role.value,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Account:
        return Account(
            id=raw["id"],
            username=raw["username"],
            email=raw["email"],
            password_hash=raw["password_hash"],
            role=Role(raw["role"]),
        )

    # --- File helpers ---------------------------------------------------------

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        with self._lock, self._file_lock:
            yield

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=self._file_path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(json.dumps(records, indent=2) + "\n")
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._persist_raw([])
