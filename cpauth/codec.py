"""Decimal-string encoding of arbitrary precision integers."""

from __future__ import annotations

import re

from .constants import MAX_INTEGER_DIGITS
from .errors import MalformedInput

_DECIMAL = re.compile(r"-?[0-9]+")


def parse_integer(name: str, value: object) -> int:
    """Parse a decimal protocol field, raising :class:`MalformedInput` on garbage.

    Only an optional leading minus sign followed by ASCII digits is accepted;
    whitespace, underscores, signs like ``+`` and other bases are refused so a
    field always has exactly one reading.
    """

    if not isinstance(value, str) or _DECIMAL.fullmatch(value) is None:
        raise MalformedInput(f"{name} must be a decimal integer")
    if len(value.lstrip("-")) > MAX_INTEGER_DIGITS:
        raise MalformedInput(f"{name} has too many digits")
    try:
        return int(value)
    except ValueError as exc:
        # int() refuses digit strings above sys.get_int_max_str_digits().
        raise MalformedInput(f"{name} has too many digits") from exc


def encode_integer(value: int) -> str:
    return str(value)


__all__ = ["encode_integer", "parse_integer"]
