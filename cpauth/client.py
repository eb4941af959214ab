"""HTTP client for the authentication service."""

from __future__ import annotations

import logging
import secrets
from typing import Dict, Optional, Tuple

import httpx

from .codec import encode_integer, parse_integer
from .constants import DEFAULT_URL
from .crypto import ChaumPedersenProver, RandomBelow
from .errors import InvalidArgument
from .params import GroupParameters

logger = logging.getLogger(__name__)


def password_to_secret(password: str) -> int:
    """Interpret a numeric password as the secret exponent ``x``."""

    secret = parse_integer("password", password.strip())
    if secret <= 0:
        raise InvalidArgument("Password must be a positive integer")
    return secret


class AuthClient:
    """Speak the three protocol calls over HTTP.

    Pass ``http_client`` to reuse an existing :class:`httpx.Client` (for
    instance FastAPI's ``TestClient``); otherwise one is created for
    ``base_url`` and closed by :meth:`close`.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        *,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.Client(base_url=base_url, timeout=timeout)
        self._http = http_client

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "AuthClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _post(self, path: str, payload: Dict[str, str]) -> Dict[str, str]:
        response = self._http.post(path, json=payload)
        response.raise_for_status()
        return response.json()

    def register(self, user: str, y1: int, y2: int) -> str:
        reply = self._post(
            "/register",
            {"user": user, "y1": encode_integer(y1), "y2": encode_integer(y2)},
        )
        return reply["message"]

    def create_authentication_challenge(self, user: str, r1: int, r2: int) -> Tuple[str, int]:
        reply = self._post(
            "/authentication/challenge",
            {"user": user, "r1": encode_integer(r1), "r2": encode_integer(r2)},
        )
        return reply["auth_id"], parse_integer("c", reply["c"])

    def verify_authentication(self, auth_id: str, s: int) -> str:
        reply = self._post(
            "/authentication/verify",
            {"auth_id": auth_id, "s": encode_integer(s)},
        )
        return reply["session_id"]

    def register_secret(self, user: str, secret: int, params: GroupParameters) -> str:
        commitments = ChaumPedersenProver(secret, params).commitments()
        return self.register(user, commitments.y1, commitments.y2)

    def login(
        self,
        user: str,
        secret: int,
        params: GroupParameters,
        randbelow: RandomBelow = secrets.randbelow,
    ) -> str:
        """Run one challenge/response round; an empty string means rejected."""

        prover = ChaumPedersenProver(secret, params)
        ephemeral = prover.commit(randbelow)
        auth_id, challenge = self.create_authentication_challenge(user, ephemeral.r1, ephemeral.r2)
        response = prover.respond(challenge, ephemeral)
        session_id = self.verify_authentication(auth_id, response)
        if session_id:
            logger.info("Authentication succeeded for user: %s", user)
        else:
            logger.info("Authentication failed for user: %s", user)
        return session_id


__all__ = ["AuthClient", "password_to_secret"]
