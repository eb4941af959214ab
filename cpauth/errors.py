"""Exception hierarchy shared by the protocol core and its front ends."""

from __future__ import annotations


class AuthError(Exception):
    """Base class for request-scoped protocol failures."""


class NotFound(AuthError):
    """A referenced user or session does not exist."""


class InvalidArgument(AuthError):
    """A value parsed correctly but lies outside its permitted range."""


class MalformedInput(AuthError):
    """A protocol field could not be parsed as an integer."""


class ParameterError(ValueError):
    """The group parameters are missing, malformed or inconsistent."""


__all__ = [
    "AuthError",
    "InvalidArgument",
    "MalformedInput",
    "NotFound",
    "ParameterError",
]
