"""Core arithmetic helpers for the Chaum-Pedersen identification protocol."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Tuple

from .constants import PRIMALITY_ROUNDS
from .errors import InvalidArgument

if TYPE_CHECKING:
    from .params import GroupParameters

RandomBelow = Callable[[int], int]


def pow_mod(base: int, exponent: int, modulus: int) -> int:
    """Compute ``base ** exponent mod modulus`` for a non-negative exponent."""

    if exponent < 0:
        raise InvalidArgument("Negative exponentiation is not allowed")
    if modulus <= 0:
        raise ValueError("Modulus must be positive")
    return pow(base, exponent, modulus)


def floor_mod(value: int, modulus: int) -> int:
    """Reduce ``value`` into ``[0, modulus)``, also for negative values."""

    if modulus <= 0:
        raise ValueError("Modulus must be positive")
    # Python's % already floors towards negative infinity for a positive modulus.
    return value % modulus


def is_probable_prime(n: int, rounds: int = PRIMALITY_ROUNDS) -> bool:
    """Miller-Rabin primality test."""

    if n < 2:
        return False
    for small in (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37):
        if n % small == 0:
            return n == small

    d = n - 1
    s = 0
    while d % 2 == 0:
        d //= 2
        s += 1

    for _ in range(rounds):
        a = secrets.randbelow(n - 3) + 2
        x = pow_mod(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(s - 1):
            x = pow_mod(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


@dataclass(frozen=True)
class Commitments:
    """Long-lived public commitments ``y1 = g^x`` and ``y2 = h^x``."""

    y1: int
    y2: int


@dataclass(frozen=True)
class EphemeralCommitment:
    """Commitment pair sent with a challenge request, plus its private nonce."""

    nonce: int
    r1: int
    r2: int


def derive_commitments(secret: int, params: GroupParameters) -> Tuple[int, int]:
    y1 = pow_mod(params.g, secret, params.p)
    y2 = pow_mod(params.h, secret, params.p)
    return y1, y2


def derive_ephemeral(
    params: GroupParameters,
    randbelow: RandomBelow = secrets.randbelow,
) -> Tuple[int, int, int]:
    """Pick a nonce ``k`` uniformly from ``[1, q)`` and commit to it."""

    k = randbelow(params.q - 1) + 1
    r1 = pow_mod(params.g, k, params.p)
    r2 = pow_mod(params.h, k, params.p)
    return k, r1, r2


def compute_response(nonce: int, challenge: int, secret: int, q: int) -> int:
    """Return ``s = (k - c * x) mod q``, always in ``[0, q)``."""

    return floor_mod(nonce - challenge * secret, q)


def recompute_commitment(base: int, response: int, public: int, challenge: int, p: int) -> int:
    """Evaluate ``base^s * public^c mod p``."""

    product = pow_mod(base, response, p) * pow_mod(public, challenge, p)
    return floor_mod(product, p)


class ChaumPedersenProver:
    """Prover holding the long-lived secret ``x``."""

    def __init__(self, secret: int, params: GroupParameters) -> None:
        if secret <= 0:
            raise InvalidArgument("Secret must be a positive integer")
        self.secret = secret
        self.params = params

    def commitments(self) -> Commitments:
        y1, y2 = derive_commitments(self.secret, self.params)
        return Commitments(y1=y1, y2=y2)

    def commit(self, randbelow: RandomBelow = secrets.randbelow) -> EphemeralCommitment:
        nonce, r1, r2 = derive_ephemeral(self.params, randbelow)
        return EphemeralCommitment(nonce=nonce, r1=r1, r2=r2)

    def respond(self, challenge: int, commitment: EphemeralCommitment) -> int:
        if challenge < 0:
            raise InvalidArgument("Challenge must be non-negative")
        return compute_response(commitment.nonce, challenge, self.secret, self.params.q)


class ChaumPedersenVerifier:
    """Verifier that checks responses against a user's public commitments."""

    def __init__(self, params: GroupParameters, y1: int, y2: int) -> None:
        self.params = params
        self.y1 = y1
        self.y2 = y2

    def verify(self, r1: int, r2: int, challenge: int, response: int) -> bool:
        if response < 0:
            raise InvalidArgument("Response must be non-negative")
        p = self.params.p
        r1_prime = recompute_commitment(self.params.g, response, self.y1, challenge, p)
        r2_prime = recompute_commitment(self.params.h, response, self.y2, challenge, p)
        return r1_prime == r1 and r2_prime == r2


__all__ = [
    "ChaumPedersenProver",
    "ChaumPedersenVerifier",
    "Commitments",
    "EphemeralCommitment",
    "compute_response",
    "derive_commitments",
    "derive_ephemeral",
    "floor_mod",
    "is_probable_prime",
    "pow_mod",
    "recompute_commitment",
]
