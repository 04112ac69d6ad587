"""Locale-aware string ordering for re-export sources and property names."""

from __future__ import annotations

import unicodedata
from typing import Tuple

# Root-locale collation puts punctuation before digits and digits before letters,
# in this order rather than ASCII order.
_PUNCTUATION_ORDER = "_-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"
_PUNCTUATION_RANK = {char: index for index, char in enumerate(_PUNCTUATION_ORDER)}


def _decompose(char: str) -> Tuple[str, str]:
    """Split a character into its base and any combining accents (``é`` → ``e``, ``\\u0301``)."""
    decomposed = unicodedata.normalize("NFD", char)
    return decomposed[0], decomposed[1:]


def _primary_weight(char: str) -> Tuple[int, str]:
    base, _ = _decompose(char)
    if base.isspace():
        return (0, base)
    rank = _PUNCTUATION_RANK.get(base)
    if rank is not None:
        return (1, chr(rank))
    if base.isdigit():
        return (2, base)
    if base.isalpha():
        return (3, base.casefold())
    return (4, base)


def locale_key(
    value: str,
) -> Tuple[Tuple[Tuple[int, str], ...], Tuple[str, ...], Tuple[int, ...]]:
    """Sort key approximating ICU root collation at three strengths.

    Letters compare by their unaccented, case-folded base first, so ``é``
    sorts with ``e``. Remaining ties are broken by accents (unaccented
    first), then by case (lower before upper). Contractions and expansions
    such as ``ß`` → ``ss`` are not modelled.
    """
    primary = tuple(_primary_weight(char) for char in value)
    secondary = tuple(_decompose(char)[1] for char in value)
    tertiary = tuple(0 if char.islower() or not char.isalpha() else 1 for char in value)
    return primary, secondary, tertiary


__all__ = ["locale_key"]
