# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential stores.

Both variants share one contract:

- ``find_by_id`` / ``find_by_email`` return ``None`` when nothing matches.
- ``create`` rejects an email that is already stored (exact, case-sensitive
  match), hashes the password and assigns ``max(id) + 1``.
- ``verify`` returns the user only when the password matches; an unknown
  email and a wrong password both give ``None``.

``create`` runs its check/assign/persist cycle under a lock, so concurrent
registrations can neither share an id nor share an email.
"""

from __future__ import annotations

import abc
import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from authdemo.auth.passwords import hash_password, verify_password
from authdemo.auth.users import User, UserCandidate
from authdemo.errors import DuplicateEmail
from authdemo.infra.users_csv import append_user, ensure_users_file, read_users

logger = logging.getLogger(__name__)


def next_id(users: Iterable[User]) -> int:
    return max((u.id for u in users), default=0) + 1


class CredentialStore(abc.ABC):
    def __init__(self, *, password_scheme: str = "argon2") -> None:
        self.password_scheme = password_scheme
        self._lock = threading.Lock()

    @abc.abstractmethod
    def all(self) -> List[User]:
        ...

    @abc.abstractmethod
    def _persist(self, user: User) -> None:
        ...

    def count(self) -> int:
        return len(self.all())

    def find_by_id(self, user_id: int) -> Optional[User]:
        for u in self.all():
            if u.id == user_id:
                return u
        return None

    def find_by_email(self, email: str) -> Optional[User]:
        for u in self.all():
            if u.email == email:
                return u
        return None

    def create(self, candidate: UserCandidate) -> User:
        password_hash = hash_password(candidate.raw_password, scheme=self.password_scheme)
        with self._lock:
            existing = self.all()
            if any(u.email == candidate.email for u in existing):
                raise DuplicateEmail()
            user = User(
                id=next_id(existing),
                name=candidate.name,
                email=candidate.email,
                password_hash=password_hash,
                role=candidate.role,
                profile_picture=(candidate.profile_picture or "").strip() or None,
            )
            self._persist(user)
        logger.info("Created user id=%s role=%s", user.id, user.role.value)
        return user

    def verify(self, email: str, raw_password: str) -> Optional[User]:
        u = self.find_by_email(email)
        if not u:
            return None
        if not verify_password(u.password_hash, raw_password):
            return None
        return u


class MemoryUserStore(CredentialStore):
    """Users kept in a dict; everything is lost when the process exits."""

    def __init__(self, *, password_scheme: str = "argon2") -> None:
        super().__init__(password_scheme=password_scheme)
        self._users: Dict[int, User] = {}

    def all(self) -> List[User]:
        return list(self._users.values())

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def _persist(self, user: User) -> None:
        self._users[user.id] = user


class CsvUserStore(CredentialStore):
    """Users kept in a CSV file, re-read in full on every lookup."""

    def __init__(self, path: Path, *, password_scheme: str = "argon2") -> None:
        super().__init__(password_scheme=password_scheme)
        self.path = Path(path)
        ensure_users_file(self.path)

    def all(self) -> List[User]:
        return read_users(self.path)

    def _persist(self, user: User) -> None:
        append_user(self.path, user)


def build_store(settings) -> CredentialStore:
    if settings.store_backend == "memory":
        return MemoryUserStore(password_scheme=settings.password_scheme)
    return CsvUserStore(settings.users_path, password_scheme=settings.password_scheme)
