"""Chaum-Pedersen zero-knowledge password authentication."""

from .crypto import (
    ChaumPedersenProver,
    ChaumPedersenVerifier,
    Commitments,
    EphemeralCommitment,
    compute_response,
    derive_commitments,
    derive_ephemeral,
    floor_mod,
    pow_mod,
)
from .errors import AuthError, InvalidArgument, MalformedInput, NotFound, ParameterError
from .params import GroupParameters, default_parameters, load_parameters, resolve_parameters
from .service import AuthService, Challenge, VerificationResult
from .store import SessionRecord, SessionStore, UserRecord, UserStore

__all__ = [
    "AuthError",
    "AuthService",
    "Challenge",
    "ChaumPedersenProver",
    "ChaumPedersenVerifier",
    "Commitments",
    "EphemeralCommitment",
    "GroupParameters",
    "InvalidArgument",
    "MalformedInput",
    "NotFound",
    "ParameterError",
    "SessionRecord",
    "SessionStore",
    "UserRecord",
    "UserStore",
    "VerificationResult",
    "compute_response",
    "default_parameters",
    "derive_commitments",
    "derive_ephemeral",
    "floor_mod",
    "load_parameters",
    "pow_mod",
    "resolve_parameters",
]
