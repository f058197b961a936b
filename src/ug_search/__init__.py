"""Seed-driven Grand Underground spawn search engine.

Given a xorshift128 state and a window of advances, derive the Pokemon each
advance would spawn, filter them, and report the matching advances.
"""

from ug_search.core.models import MatchRecord, RoomType, SearchContext, SpawnEvent, StoryFlag, Version
from ug_search.core.statues import Statue, StatueConfig
from ug_search.errors import (
    CapacityError,
    OracleContractError,
    ResultCapacityError,
    SeedParseError,
    StatueCapacityError,
    UgSearchError,
)
from ug_search.filters import FilterSpec, Predicate, compile_filter
from ug_search.oracle.base import SpawnOracle, SpawnResult
from ug_search.oracle.table import SpawnTableSet, TableOracle, load_table_set
from ug_search.rng.xorshift import XorShift128
from ug_search.search import (
    BatchSearchRunner,
    CancelToken,
    SearchOrchestrator,
    SearchRequest,
    search,
)

__all__ = [
    # core
    "MatchRecord",
    "RoomType",
    "SearchContext",
    "SpawnEvent",
    "Statue",
    "StatueConfig",
    "StoryFlag",
    "Version",
    # errors
    "CapacityError",
    "OracleContractError",
    "ResultCapacityError",
    "SeedParseError",
    "StatueCapacityError",
    "UgSearchError",
    # filters
    "FilterSpec",
    "Predicate",
    "compile_filter",
    # oracle
    "SpawnOracle",
    "SpawnResult",
    "SpawnTableSet",
    "TableOracle",
    "load_table_set",
    # rng
    "XorShift128",
    # search
    "BatchSearchRunner",
    "CancelToken",
    "SearchOrchestrator",
    "SearchRequest",
    "search",
]
