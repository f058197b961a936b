"""Base class for spawn oracles.

A spawn oracle turns the PRNG state at one advance into the Pokemon that
advance would spawn.  The search orchestrator calls :meth:`SpawnOracle.generate`
exactly once per advance, strictly in increasing order, and hands it a
*copy* of the generator: the oracle may consume as many values as it likes
and the orchestrator alone moves the real state forward by one step.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from ug_search.core.models import SearchContext, SpawnEvent
    from ug_search.core.statues import Statue
    from ug_search.rng.xorshift import XorShift128


@dataclass(frozen=True, slots=True)
class SpawnResult:
    """Spawns produced by one advance: at most one regular and one rare."""

    regular: SpawnEvent | None = None
    rare: SpawnEvent | None = None

    def __iter__(self) -> Iterator[SpawnEvent]:
        """Yield the produced events, regular first."""
        if self.regular is not None:
            yield self.regular
        if self.rare is not None:
            yield self.rare


EMPTY_RESULT = SpawnResult()


class SpawnOracle(ABC):
    """Base class for spawn derivation strategies."""

    @abstractmethod
    def generate(
        self,
        rng: XorShift128,
        context: SearchContext,
        statues: tuple[Statue, ...],
    ) -> SpawnResult:
        """Derive the spawns for the advance whose state *rng* holds.

        Parameters
        ----------
        rng:
            A private copy of the generator at this advance.
        context:
            Version, story progress, room and Diglett mode.
        statues:
            Snapshot of the placed statues, in placement order.
        """
