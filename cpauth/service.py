"""Registration, challenge issuance and verification over the two stores."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from .constants import SESSION_TOKEN_BYTES
from .crypto import ChaumPedersenVerifier, RandomBelow
from .errors import InvalidArgument
from .params import GroupParameters
from .store import SessionStore, UserStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Challenge:
    auth_id: str
    c: int


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a well-formed verification: a session token or a rejection."""

    user_id: str
    session_id: Optional[str] = None

    @property
    def verified(self) -> bool:
        return self.session_id is not None


class AuthService:
    """Server side of the Chaum-Pedersen protocol.

    The group parameters are passed in once and never change. The service
    owns a :class:`UserStore` and a :class:`SessionStore`; every public
    method is safe to call from concurrent request handlers.
    """

    def __init__(
        self,
        params: GroupParameters,
        users: Optional[UserStore] = None,
        sessions: Optional[SessionStore] = None,
        randbelow: RandomBelow = secrets.randbelow,
    ) -> None:
        self.params = params
        self.users = users if users is not None else UserStore()
        self.sessions = sessions if sessions is not None else SessionStore()
        self._randbelow = randbelow

    def _check_element(self, name: str, value: int) -> None:
        if not 0 <= value < self.params.p:
            raise InvalidArgument(f"{name} must lie in [0, p)")

    def register(self, user_id: str, y1: int, y2: int) -> str:
        self._check_element("y1", y1)
        self._check_element("y2", y2)
        _, replaced = self.users.register(user_id, y1, y2)
        if replaced:
            logger.warning("Replaced existing commitments for user: %s", user_id)
        logger.info("Received registration for user: %s", user_id)
        return f"User {user_id} registered successfully"

    def issue_challenge(self) -> int:
        """Draw a challenge uniformly from ``[0, q)``."""

        return self._randbelow(self.params.q)

    def create_challenge(self, user_id: str, r1: int, r2: int) -> Challenge:
        self._check_element("r1", r1)
        self._check_element("r2", r2)
        self.users.lookup(user_id)

        c = self.issue_challenge()
        session = self.sessions.create(user_id, r1, r2, c)
        logger.info("Issued authentication challenge for user: %s", user_id)
        return Challenge(auth_id=session.auth_id, c=c)

    def verify(self, auth_id: str, s: int) -> VerificationResult:
        if s < 0:
            raise InvalidArgument("Negative exponentiation is not allowed")

        # Sessions before users; consume() has released its lock on return.
        session = self.sessions.consume(auth_id)
        user = self.users.lookup(session.user_id)

        verifier = ChaumPedersenVerifier(self.params, user.y1, user.y2)
        if not verifier.verify(session.r1, session.r2, session.c, s):
            logger.info("Verification failed for user: %s", session.user_id)
            return VerificationResult(user_id=session.user_id)

        logger.info("Verification successful for user: %s", session.user_id)
        return VerificationResult(
            user_id=session.user_id,
            session_id=secrets.token_urlsafe(SESSION_TOKEN_BYTES),
        )


__all__ = ["AuthService", "Challenge", "VerificationResult"]
