"""Secret-base statue configuration.

Placed statues boost spawn weights for Pokemon sharing a type with the
statue's species; rare (gold) statues boost more.  Order matters to the
oracle, so the configuration only supports appending and removing the
most recent statue.
"""

from __future__ import annotations

from typing import Iterator

from pydantic import BaseModel, ConfigDict

from ug_search.errors import StatueCapacityError

MAX_STATUES = 18
"""Largest number of statues a secret base can display."""


class Statue(BaseModel):
    """A single placed statue."""

    model_config = ConfigDict(frozen=True)

    species: int
    """National dex number of the statue's Pokemon."""

    rare: bool = False
    """Gold (rare) variant of the statue."""


class StatueConfig:
    """Ordered, bounded list of placed statues."""

    def __init__(self, statues: list[Statue] | None = None, limit: int = MAX_STATUES) -> None:
        self._limit = limit
        self._statues: list[Statue] = []
        for statue in statues or []:
            self.add(statue)

    @property
    def limit(self) -> int:
        return self._limit

    def add(self, statue: Statue) -> None:
        """Append *statue*; raises :class:`StatueCapacityError` when full."""
        if len(self._statues) >= self._limit:
            raise StatueCapacityError(self._limit)
        self._statues.append(statue)

    def remove_last(self) -> Statue | None:
        """Remove and return the most recent statue; no-op when empty."""
        if not self._statues:
            return None
        return self._statues.pop()

    def snapshot(self) -> tuple[Statue, ...]:
        """Immutable copy for the duration of one search."""
        return tuple(self._statues)

    # -- dunder helpers ------------------------------------------------------

    def __len__(self) -> int:
        return len(self._statues)

    def __iter__(self) -> Iterator[Statue]:
        return iter(self._statues)

    def __repr__(self) -> str:
        return f"StatueConfig({len(self._statues)}/{self._limit})"
