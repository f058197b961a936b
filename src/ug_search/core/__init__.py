"""Core data model for the underground search engine."""

from ug_search.core.models import (
    GENDER_FEMALE,
    GENDER_MALE,
    GENDERLESS,
    MatchRecord,
    RoomType,
    SearchContext,
    SpawnEvent,
    StoryFlag,
    Version,
)
from ug_search.core.statues import MAX_STATUES, Statue, StatueConfig

__all__ = [
    # models
    "GENDER_FEMALE",
    "GENDER_MALE",
    "GENDERLESS",
    "MatchRecord",
    "RoomType",
    "SearchContext",
    "SpawnEvent",
    "StoryFlag",
    "Version",
    # statues
    "MAX_STATUES",
    "Statue",
    "StatueConfig",
]
