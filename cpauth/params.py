"""Group parameters and the configuration loader that produces them."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .codec import encode_integer, parse_integer
from .constants import (
    DEFAULT_G,
    DEFAULT_H,
    DEFAULT_P,
    DEFAULT_Q,
    PARAMETER_FIELDS,
    PARAMETERS_ENV,
)
from .crypto import floor_mod, is_probable_prime, pow_mod
from .errors import MalformedInput, ParameterError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupParameters:
    """Shared arithmetic context: modulus ``p``, subgroup order ``q``, generators ``g`` and ``h``."""

    p: int
    q: int
    g: int
    h: int

    def validate(self) -> "GroupParameters":
        """Check the group invariants, raising :class:`ParameterError` on failure."""

        if not is_probable_prime(self.p):
            raise ParameterError("p must be prime")
        if not is_probable_prime(self.q):
            raise ParameterError("q must be prime")
        if floor_mod(self.p - 1, self.q) != 0:
            raise ParameterError("q must divide p - 1")
        for name, generator in (("g", self.g), ("h", self.h)):
            if not 1 < generator < self.p:
                raise ParameterError(f"{name} must lie in (1, p)")
            if pow_mod(generator, self.q, self.p) != 1:
                raise ParameterError(f"{name} must have order q")
        return self

    def to_dict(self) -> Dict[str, str]:
        return {name: encode_integer(getattr(self, name)) for name in PARAMETER_FIELDS}

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "GroupParameters":
        values = {}
        for name in PARAMETER_FIELDS:
            if name not in data:
                raise ParameterError(f"Missing parameter '{name}'")
            try:
                values[name] = parse_integer(name, data[name])
            except MalformedInput as exc:
                raise ParameterError(str(exc)) from exc
        return GroupParameters(**values).validate()


def default_parameters() -> GroupParameters:
    """Return the built-in 2048-bit group."""

    return GroupParameters(p=DEFAULT_P, q=DEFAULT_Q, g=DEFAULT_G, h=DEFAULT_H)


def load_parameters(path: str) -> GroupParameters:
    """Load and validate a JSON parameter file of decimal strings."""

    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except OSError as exc:
        raise ParameterError(f"Unable to read parameters from {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ParameterError(f"Parameters file {path} is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise ParameterError("Parameters file must contain a JSON object")
    params = GroupParameters.from_dict(payload)
    logger.info("Loaded %d-bit group parameters from %s", params.p.bit_length(), path)
    return params


def resolve_parameters(path: Optional[str] = None) -> GroupParameters:
    """Pick the explicit path, then ``$CPAUTH_PARAMETERS``, then the built-in group."""

    source = path or os.environ.get(PARAMETERS_ENV)
    if source:
        return load_parameters(source)
    logger.info("Using built-in %d-bit group parameters", DEFAULT_P.bit_length())
    return default_parameters()


def save_parameters(params: GroupParameters, path: str) -> None:
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(params.to_dict(), handle, indent=2)


__all__ = [
    "GroupParameters",
    "default_parameters",
    "load_parameters",
    "resolve_parameters",
    "save_parameters",
]
