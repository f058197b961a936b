"""Spawn oracles -- derive the Pokemon spawned at each advance."""

from ug_search.oracle.base import EMPTY_RESULT, SpawnOracle, SpawnResult
from ug_search.oracle.table import (
    HeldItem,
    RoomTable,
    SpawnSlot,
    SpawnTableSet,
    TableOracle,
    load_table_set,
)

__all__ = [
    "EMPTY_RESULT",
    "SpawnOracle",
    "SpawnResult",
    "HeldItem",
    "RoomTable",
    "SpawnSlot",
    "SpawnTableSet",
    "TableOracle",
    "load_table_set",
]
