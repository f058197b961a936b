"""Exception types raised by the underground search engine.

- **SeedParseError**: one of the four seed words is not valid hex.
- **CapacityError**: a bounded collection (statues, results) is full.
- **OracleContractError**: a spawn oracle produced an impossible event.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ug_search.core.models import MatchRecord


class UgSearchError(Exception):
    """Base class for all search engine errors."""


class SeedParseError(UgSearchError, ValueError):
    """Raised when a seed word cannot be parsed as a 32-bit hex value."""

    def __init__(self, word: str, text: str) -> None:
        super().__init__(f"Failed to parse {word}: {text!r}")
        self.word = word
        self.text = text


class CapacityError(UgSearchError):
    """Raised when a bounded collection would grow past its limit."""


class StatueCapacityError(CapacityError):
    """Raised by :meth:`StatueConfig.add` when every statue slot is taken."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Statue configuration is full ({limit} statues)")
        self.limit = limit


class ResultCapacityError(CapacityError):
    """Raised when a search produces more matches than it may keep.

    ``partial`` holds the matches accumulated before the limit was hit.
    """

    def __init__(self, limit: int, partial: list[MatchRecord]) -> None:
        super().__init__(f"Search exceeded the result limit of {limit} matches")
        self.limit = limit
        self.partial = partial


class OracleContractError(UgSearchError, RuntimeError):
    """Raised when a spawn oracle emits an out-of-range value.

    This indicates broken spawn-table data and is not recoverable.
    """
