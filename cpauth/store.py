"""In-memory user and session stores, each guarded by its own lock.

When an operation needs both stores it must take the session lock first and
release it before taking the user lock.
"""

from __future__ import annotations

import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .constants import AUTH_ID_BYTES, CHALLENGE_TTL, MAX_SESSIONS
from .errors import NotFound


@dataclass(frozen=True)
class UserRecord:
    """Published commitments for one user."""

    user_id: str
    y1: int
    y2: int


@dataclass(frozen=True)
class SessionRecord:
    """Ephemeral state of one authentication attempt."""

    auth_id: str
    user_id: str
    r1: int
    r2: int
    c: int
    created_at: float = 0.0


class UserStore:
    """Map user ids to their commitments; last registration wins."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: Dict[str, UserRecord] = {}

    def register(self, user_id: str, y1: int, y2: int) -> Tuple[UserRecord, bool]:
        """Store the record and report whether it replaced an earlier one."""

        record = UserRecord(user_id=user_id, y1=y1, y2=y2)
        with self._lock:
            replaced = user_id in self._users
            self._users[user_id] = record
        return record, replaced

    def get(self, user_id: str) -> Optional[UserRecord]:
        with self._lock:
            return self._users.get(user_id)

    def lookup(self, user_id: str) -> UserRecord:
        record = self.get(user_id)
        if record is None:
            raise NotFound(f"User {user_id!r} not found")
        return record

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._users

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)


class SessionStore:
    """Single-use authentication sessions keyed by a random ``auth_id``.

    Sessions older than ``ttl`` seconds are dropped, and once ``max_sessions``
    are pending the oldest one is evicted to make room.
    """

    def __init__(
        self,
        ttl: float = CHALLENGE_TTL,
        max_sessions: int = MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = threading.Lock()
        self._sessions: Dict[str, SessionRecord] = {}
        self.ttl = ttl
        self.max_sessions = max_sessions
        self._clock = clock

    @staticmethod
    def new_auth_id() -> str:
        return secrets.token_urlsafe(AUTH_ID_BYTES)

    def _expired(self, record: SessionRecord, now: float) -> bool:
        return now - record.created_at >= self.ttl

    def _prune(self, now: float) -> None:
        # Insertion order is creation order, so expired sessions sit at the front.
        while self._sessions:
            oldest = next(iter(self._sessions.values()))
            if not self._expired(oldest, now) and len(self._sessions) < self.max_sessions:
                break
            del self._sessions[oldest.auth_id]

    def create(self, user_id: str, r1: int, r2: int, c: int) -> SessionRecord:
        with self._lock:
            now = self._clock()
            self._prune(now)
            auth_id = self.new_auth_id()
            while auth_id in self._sessions:
                auth_id = self.new_auth_id()
            record = SessionRecord(
                auth_id=auth_id,
                user_id=user_id,
                r1=r1,
                r2=r2,
                c=c,
                created_at=now,
            )
            self._sessions[auth_id] = record
        return record

    def consume(self, auth_id: str) -> SessionRecord:
        """Atomically remove and return the session, or raise :class:`NotFound`."""

        with self._lock:
            record = self._sessions.pop(auth_id, None)
            now = self._clock()
        if record is None or self._expired(record, now):
            raise NotFound("Session not found")
        return record

    def __contains__(self, auth_id: object) -> bool:
        with self._lock:
            return auth_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


__all__ = ["SessionRecord", "SessionStore", "UserRecord", "UserStore"]
