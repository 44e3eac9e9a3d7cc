# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

from authdemo.auth.store import CredentialStore
from authdemo.auth.users import UserSnapshot
from authdemo.errors import InvalidCredentials, Unauthenticated

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Session:
    token: str
    user: UserSnapshot
    created_at: datetime
    expires_at: datetime

    def expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SessionAuthenticator:
    """Server-side sessions keyed by an opaque token.

    The session keeps the public snapshot taken at login; ``current_user``
    never goes back to the store.
    """

    def __init__(
        self,
        store: CredentialStore,
        *,
        secret_key: str,
        salt: str = "authdemo.session.v1",
        max_age: int = 24 * 60 * 60,
        clock: Clock = _utcnow,
    ) -> None:
        if not secret_key:
            raise RuntimeError("SessionAuthenticator needs a secret key")
        self.store = store
        self.max_age = int(max_age)
        self._clock = clock
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    # --- session lifecycle ---

    def login(self, email: str, raw_password: str) -> Session:
        user = self.store.verify(email, raw_password)
        if user is None:
            logger.info("Login failed")
            raise InvalidCredentials()

        now = self._clock()
        session = Session(
            token=secrets.token_urlsafe(32),
            user=user.public(),
            created_at=now,
            expires_at=now + timedelta(seconds=self.max_age),
        )
        self.purge_expired()
        with self._lock:
            self._sessions[session.token] = session
        logger.info("Login ok user_id=%s", user.id)
        return session

    def current_user(self, token: Optional[str]) -> UserSnapshot:
        if not token:
            raise Unauthenticated()
        now = self._clock()
        with self._lock:
            session = self._sessions.get(token)
            if session is not None and session.expired(now):
                del self._sessions[token]
                session = None
        if session is None:
            raise Unauthenticated()
        return session.user

    def logout(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            session = self._sessions.pop(token, None)
        if session is not None:
            logger.info("Logout user_id=%s", session.user.id)

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            stale = [t for t, s in self._sessions.items() if s.expired(now)]
            for t in stale:
                del self._sessions[t]
        return len(stale)

    def active_sessions(self) -> int:
        with self._lock:
            return len(self._sessions)

    # --- cookie encoding ---

    def sign_cookie(self, token: str) -> str:
        return self._serializer.dumps({"t": token})

    def unsign_cookie(self, value: Optional[str]) -> Optional[str]:
        """Return the session token carried by a cookie, or None if it is forged or too old."""
        if not value:
            return None
        try:
            data = self._serializer.loads(value, max_age=self.max_age)
        except (BadSignature, BadTimeSignature):
            return None
        t = str((data or {}).get("t") or "").strip() if isinstance(data, dict) else ""
        return t or None

    def current_user_from_cookie(self, value: Optional[str]) -> UserSnapshot:
        return self.current_user(self.unsign_cookie(value))
