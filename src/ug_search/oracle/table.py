"""Table-driven spawn oracle.

Spawn tables are plain data supplied by the caller (typically loaded from
JSON with :func:`load_table_set`).  For each advance the oracle:

1. picks a regular species from the room's slots by weight, after statue
   boosts, and generates it;
2. rolls the room's rare rate and, on success, picks and generates a rare
   species the same way.

Generating a Pokemon draws, in order: encryption constant, PID, one shiny
roll (two in Diglett mode), six IVs, ability slot, gender (unless fixed),
nature, held item and egg move.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from ug_search.core.models import (
    GENDER_FEMALE,
    GENDER_MALE,
    GENDERLESS,
    NATURE_COUNT,
    RoomType,
    SearchContext,
    SpawnEvent,
    StoryFlag,
    Version,
)
from ug_search.core.statues import Statue
from ug_search.oracle.base import EMPTY_RESULT, SpawnOracle, SpawnResult
from ug_search.rng.xorshift import XorShift128

logger = logging.getLogger(__name__)

_SHINY_THRESHOLD = 16

GENDER_RATIO_MALE_ONLY = 0
GENDER_RATIO_FEMALE_ONLY = 254
GENDER_RATIO_GENDERLESS = 255


# ---------------------------------------------------------------------------
# Table models
# ---------------------------------------------------------------------------

class HeldItem(BaseModel):
    """An item a species may hold, with its percent chance."""

    item: int = Field(gt=0)
    rate: int = Field(ge=0, le=100)


class SpawnSlot(BaseModel):
    """One species entry in a room's spawn table."""

    species: int = Field(gt=0)
    weight: int = Field(default=1, gt=0)
    types: list[str] = []
    """Elemental types; statues sharing a type boost this slot."""

    min_story: StoryFlag = StoryFlag.UNDERGROUND_UNLOCKED
    versions: list[Version] = [Version.BD, Version.SP]
    gender_ratio: int = Field(default=127, ge=0, le=255)
    """0 male only, 254 female only, 255 genderless, otherwise female threshold."""

    items: list[HeldItem] = []
    egg_moves: list[int] = []

    @model_validator(mode="after")
    def _validate_item_rates(self) -> "SpawnSlot":
        if sum(h.rate for h in self.items) > 100:
            raise ValueError(f"held item rates for species {self.species} exceed 100%")
        return self

    def available(self, context: SearchContext) -> bool:
        return context.version in self.versions and context.story_flag >= self.min_story


class RoomTable(BaseModel):
    """Spawn table of a single underground room."""

    room: RoomType
    slots: list[SpawnSlot]
    rare_slots: list[SpawnSlot] = []
    rare_rate: int = Field(default=0, ge=0, le=100)
    """Percent chance per advance of an additional rare spawn."""


class SpawnTableSet(BaseModel):
    """All room tables plus the data needed to apply statue boosts."""

    rooms: list[RoomTable]
    statue_types: dict[int, list[str]] = {}
    """Species id -> types, for every species that exists as a statue."""

    statue_boost: int = Field(default=50, ge=0)
    """Percent weight bonus per matching regular statue."""

    rare_statue_boost: int = Field(default=100, ge=0)
    """Percent weight bonus per matching rare (gold) statue."""

    @model_validator(mode="after")
    def _validate_unique_rooms(self) -> "SpawnTableSet":
        seen: set[RoomType] = set()
        for table in self.rooms:
            if table.room in seen:
                raise ValueError(f"duplicate table for room {table.room.name}")
            seen.add(table.room)
        return self


def load_table_set(path: Path) -> SpawnTableSet:
    """Load a spawn table set from a JSON file."""
    data = json.loads(path.read_text())
    return SpawnTableSet.model_validate(data)


# ---------------------------------------------------------------------------
# TableOracle
# ---------------------------------------------------------------------------

class TableOracle(SpawnOracle):
    """Oracle that derives spawns from a :class:`SpawnTableSet`."""

    def __init__(self, tables: SpawnTableSet) -> None:
        self.tables = tables
        self._rooms = {t.room: t for t in tables.rooms}
        self._weights_cache: dict[tuple, tuple[list[SpawnSlot], list[int], list[SpawnSlot], list[int]]] = {}

    def generate(
        self,
        rng: XorShift128,
        context: SearchContext,
        statues: tuple[Statue, ...],
    ) -> SpawnResult:
        table = self._rooms.get(context.room)
        if table is None:
            return EMPTY_RESULT

        slots, weights, rare_slots, rare_weights = self._weighted_slots(table, context, statues)
        rolls = 2 if context.diglett_mode else 1

        regular = None
        if slots:
            slot = _pick_weighted(rng, slots, weights)
            regular = _generate_pokemon(rng, slot, rolls, rare=False)

        rare = None
        if rare_slots and rng.rand_range(0, 100) < table.rare_rate:
            slot = _pick_weighted(rng, rare_slots, rare_weights)
            rare = _generate_pokemon(rng, slot, rolls, rare=True)

        return SpawnResult(regular, rare)

    # -- weights -------------------------------------------------------------

    def _weighted_slots(
        self,
        table: RoomTable,
        context: SearchContext,
        statues: tuple[Statue, ...],
    ) -> tuple[list[SpawnSlot], list[int], list[SpawnSlot], list[int]]:
        """Eligible slots and their statue-boosted weights, cached per context."""
        key = (context, statues)
        cached = self._weights_cache.get(key)
        if cached is not None:
            return cached

        bonuses = self._type_bonuses(statues)
        slots = [s for s in table.slots if s.available(context)]
        rare_slots = [s for s in table.rare_slots if s.available(context)]
        result = (
            slots,
            [_boosted_weight(s, bonuses) for s in slots],
            rare_slots,
            [_boosted_weight(s, bonuses) for s in rare_slots],
        )
        self._weights_cache[key] = result
        logger.debug(
            "Room %s: %d regular / %d rare slots eligible",
            table.room.name, len(slots), len(rare_slots),
        )
        return result

    def _type_bonuses(self, statues: tuple[Statue, ...]) -> dict[str, int]:
        bonuses: dict[str, int] = {}
        for statue in statues:
            boost = self.tables.rare_statue_boost if statue.rare else self.tables.statue_boost
            for type_name in self.tables.statue_types.get(statue.species, []):
                bonuses[type_name] = bonuses.get(type_name, 0) + boost
        return bonuses


def _boosted_weight(slot: SpawnSlot, bonuses: dict[str, int]) -> int:
    bonus = sum(bonuses.get(t, 0) for t in set(slot.types))
    return slot.weight * (100 + bonus)


def _pick_weighted(rng: XorShift128, slots: list[SpawnSlot], weights: list[int]) -> SpawnSlot:
    roll = rng.rand_range(0, sum(weights))
    for slot, weight in zip(slots, weights):
        if roll < weight:
            return slot
        roll -= weight
    return slots[-1]  # pragma: no cover


def _is_shiny(pid: int, shiny_rand: int) -> bool:
    xor = (pid >> 16) ^ (pid & 0xFFFF) ^ (shiny_rand >> 16) ^ (shiny_rand & 0xFFFF)
    return xor < _SHINY_THRESHOLD


def _roll_gender(rng: XorShift128, ratio: int) -> int:
    if ratio == GENDER_RATIO_GENDERLESS:
        return GENDERLESS
    if ratio == GENDER_RATIO_FEMALE_ONLY:
        return GENDER_FEMALE
    if ratio == GENDER_RATIO_MALE_ONLY:
        return GENDER_MALE
    return GENDER_FEMALE if rng.rand_range(0, 253) + 1 < ratio else GENDER_MALE


def _roll_item(rng: XorShift128, items: list[HeldItem]) -> int:
    if not items:
        return 0
    roll = rng.rand_range(0, 100)
    for held in items:
        if roll < held.rate:
            return held.item
        roll -= held.rate
    return 0


def _generate_pokemon(rng: XorShift128, slot: SpawnSlot, shiny_rolls: int, rare: bool) -> SpawnEvent:
    ec = rng.next()
    pid = rng.next()
    shiny = False
    for _ in range(shiny_rolls):
        if _is_shiny(pid, rng.next()):
            shiny = True

    ivs = (
        rng.rand_range(0, 32), rng.rand_range(0, 32), rng.rand_range(0, 32),
        rng.rand_range(0, 32), rng.rand_range(0, 32), rng.rand_range(0, 32),
    )
    ability = rng.rand_range(0, 2)
    gender = _roll_gender(rng, slot.gender_ratio)
    nature = rng.rand_range(0, NATURE_COUNT)
    item = _roll_item(rng, slot.items)

    egg_move = None
    if slot.egg_moves:
        egg_move = slot.egg_moves[rng.rand_range(0, len(slot.egg_moves))]

    return SpawnEvent(
        species=slot.species,
        shiny=shiny,
        ivs=ivs,
        ability=ability,
        nature=nature,
        gender=gender,
        item=item,
        egg_move=egg_move,
        pid=pid,
        ec=ec,
        rare=rare,
    )
