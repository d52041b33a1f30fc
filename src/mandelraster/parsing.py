"""Parsing of the ``WIDTHxHEIGHT`` and ``REAL,IMAG`` command line values."""

from __future__ import annotations

from typing import Callable, Optional, Tuple, TypeVar

T = TypeVar("T")

__all__ = ["parse_pair", "parse_complex", "parse_bounds"]


def parse_pair(s: str, separator: str, kind: Callable[[str], T]) -> Optional[Tuple[T, T]]:
    """Parse ``<LEFT><separator><RIGHT>`` where both sides convert with ``kind``.

    The string is split at the first occurrence of ``separator``. Returns
    ``None`` if the separator is missing or either side fails to convert.
    Whitespace and ``_`` digit separators are rejected rather than skipped.
    """
    index = s.find(separator)
    if index < 0:
        return None
    left, right = s[:index], s[index + 1 :]
    if not (_is_bare_token(left) and _is_bare_token(right)):
        return None
    try:
        return kind(left), kind(right)
    except ValueError:
        return None


def _is_bare_token(token: str) -> bool:
    return token == token.strip() and "_" not in token


def parse_complex(s: str) -> Optional[complex]:
    pair = parse_pair(s, ",", float)
    if pair is None:
        return None
    re, im = pair
    return complex(re, im)


def parse_bounds(s: str) -> Optional[Tuple[int, int]]:
    """Parse ``WIDTHxHEIGHT``; both dimensions must be strictly positive."""
    pair = parse_pair(s, "x", int)
    if pair is None:
        return None
    width, height = pair
    if width <= 0 or height <= 0:
        return None
    return width, height
