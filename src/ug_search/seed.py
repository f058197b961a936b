"""Parsing of the four hexadecimal seed words entered by the user."""

from __future__ import annotations

from typing import Sequence

from ug_search.errors import SeedParseError

_WORD_NAMES = ("s0", "s1", "s2", "s3")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def parse_seed_word(word: str, text: str) -> int:
    """Parse one seed word; *word* names it in the error message."""
    digits = text.strip()
    if digits[:2].lower() == "0x":
        digits = digits[2:]
    if not digits or len(digits) > 8 or not set(digits) <= _HEX_DIGITS:
        raise SeedParseError(word, text)
    return int(digits, 16)


def parse_seed_words(words: Sequence[str]) -> tuple[int, int, int, int]:
    """Parse ``s0``..``s3`` in order, failing on the first bad word.

    Nothing is returned unless all four words parse, so callers never
    build a generator from a partial seed.
    """
    if len(words) != 4:
        raise ValueError(f"expected 4 seed words, got {len(words)}")
    s0, s1, s2, s3 = (parse_seed_word(name, text) for name, text in zip(_WORD_NAMES, words))
    return s0, s1, s2, s3
