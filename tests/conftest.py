"""Shared fixtures and helpers for search engine tests."""

from __future__ import annotations

import pytest

from ug_search.core.models import RoomType, SearchContext, SpawnEvent, StoryFlag
from ug_search.core.statues import Statue
from ug_search.oracle.base import SpawnOracle, SpawnResult
from ug_search.oracle.table import HeldItem, RoomTable, SpawnSlot, SpawnTableSet
from ug_search.rng.xorshift import XorShift128

SEED_WORDS = (0x12345678, 0x9ABCDEF0, 0x0FEDCBA9, 0x87654321)


def make_event(**overrides: object) -> SpawnEvent:
    defaults = dict(
        species=25,
        shiny=False,
        ivs=(10, 10, 10, 10, 10, 10),
        ability=0,
        nature=3,
        gender=0,
        item=0,
        egg_move=None,
        pid=0x1234ABCD,
        ec=0xDEADBEEF,
        rare=False,
    )
    defaults.update(overrides)
    return SpawnEvent(**defaults)  # type: ignore[arg-type]


class PairOracle(SpawnOracle):
    """Emits one regular and one rare spawn per advance.

    IVs and PID come from the generator so events differ by advance.
    """

    def __init__(self, regular_species: int = 25, rare_species: int = 133) -> None:
        self.regular_species = regular_species
        self.rare_species = rare_species

    def generate(self, rng, context, statues) -> SpawnResult:
        pid = rng.next()
        ivs = tuple(rng.rand_range(0, 32) for _ in range(6))
        return SpawnResult(
            make_event(species=self.regular_species, pid=pid, ivs=ivs),
            make_event(species=self.rare_species, pid=pid ^ 0xFFFF, ivs=ivs, rare=True),
        )


class RecordingOracle(SpawnOracle):
    """Returns scripted results and records the state it was called with."""

    def __init__(self, results: list[SpawnResult] | None = None) -> None:
        self.results = results or []
        self.states: list[tuple[int, int, int, int]] = []
        self.statues_seen: list[tuple[Statue, ...]] = []

    def generate(self, rng, context, statues) -> SpawnResult:
        self.states.append(rng.state)
        self.statues_seen.append(statues)
        # Consuming from the copy must not disturb the search's generator.
        rng.advance(5)
        index = len(self.states) - 1
        if index < len(self.results):
            return self.results[index]
        return SpawnResult()


@pytest.fixture()
def rng() -> XorShift128:
    return XorShift128.from_state(SEED_WORDS)


@pytest.fixture()
def context() -> SearchContext:
    return SearchContext(room=RoomType.SPACIOUS_CAVE)


@pytest.fixture()
def table_set() -> SpawnTableSet:
    """A small two-room table with a rare pool and statue data."""
    return SpawnTableSet(
        rooms=[
            RoomTable(
                room=RoomType.SPACIOUS_CAVE,
                slots=[
                    SpawnSlot(species=74, weight=40, types=["rock", "ground"], gender_ratio=127),
                    SpawnSlot(
                        species=41, weight=40, types=["poison", "flying"],
                        items=[HeldItem(item=1, rate=5)],
                    ),
                    SpawnSlot(species=81, weight=20, types=["electric", "steel"], gender_ratio=255),
                    SpawnSlot(
                        species=246, weight=10, types=["rock", "ground"],
                        min_story=StoryFlag.NATIONAL_DEX, egg_moves=[246, 349],
                    ),
                    SpawnSlot(species=299, weight=10, types=["rock"], versions=["SP"]),
                ],
                rare_slots=[
                    SpawnSlot(species=133, weight=1, types=["normal"], gender_ratio=31),
                ],
                rare_rate=30,
            ),
            RoomTable(
                room=RoomType.GRASSLAND_CAVE,
                slots=[SpawnSlot(species=43, types=["grass", "poison"])],
            ),
        ],
        statue_types={
            95: ["rock", "ground"],
            25: ["electric"],
        },
    )
