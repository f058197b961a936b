"""Search context, spawn events and match records.

``SearchContext`` is a Pydantic model because it arrives from user
configuration.  ``SpawnEvent`` and ``MatchRecord`` are frozen dataclasses:
one or two events are created per advance, so they are kept as cheap as
possible.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict

from ug_search.errors import OracleContractError

NATURE_COUNT = 25
MAX_IV = 31

GENDER_MALE = 0
GENDER_FEMALE = 1
GENDERLESS = 2


class Version(str, Enum):
    """The two game editions; each has its own version-exclusive spawns."""

    BD = "BD"
    SP = "SP"


class StoryFlag(int, Enum):
    """Story progress tiers that unlock more underground spawns."""

    UNDERGROUND_UNLOCKED = 1
    STRENGTH_OBTAINED = 2
    DEFOG_OBTAINED = 3
    SEVEN_BADGES = 4
    WATERFALL_OBTAINED = 5
    NATIONAL_DEX = 6


class RoomType(int, Enum):
    """Grand Underground rooms, numbered as in the game's spawn tables."""

    SPACIOUS_CAVE = 2
    GRASSLAND_CAVE = 3
    FOUNTAINSPRING_CAVE = 4
    ROCKY_CAVE = 5
    VOLCANIC_CAVE = 6
    SWAMPY_CAVE = 7
    DAZZLING_CAVE = 8
    WHITEOUT_CAVE = 9
    ICY_CAVE = 10
    RIVERBANK_CAVE = 11
    SANDSEAR_CAVE = 12
    STILL_WATER_CAVERN = 13
    SUNLIT_CAVERN = 14
    BIG_BLUFF_CAVERN = 15
    STARGLEAM_CAVERN = 16
    GLACIAL_CAVERN = 17
    BOGSUNK_CAVERN = 18
    TYPHLO_CAVERN = 19


class SearchContext(BaseModel):
    """Everything besides the seed that selects which spawn table applies."""

    model_config = ConfigDict(frozen=True)

    version: Version = Version.BD
    story_flag: StoryFlag = StoryFlag.NATIONAL_DEX
    room: RoomType = RoomType.SPACIOUS_CAVE
    diglett_mode: bool = False
    """Diglett bonus active: each spawn gets an extra shiny roll."""


# ---------------------------------------------------------------------------
# SpawnEvent
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SpawnEvent:
    """One fully generated underground Pokemon.

    Attributes
    ----------
    species:
        National dex number.
    shiny:
        Whether any shiny roll succeeded.
    ivs:
        HP, Atk, Def, SpA, SpD, Spe, each 0..31.
    ability:
        Ability slot, 0 or 1.
    nature:
        Nature id, 0..24.
    gender:
        0 male, 1 female, 2 genderless.
    item:
        Held item id, 0 for none.
    egg_move:
        Egg move id, or ``None``.
    pid, ec:
        32-bit personality value and encryption constant.
    rare:
        ``True`` for the rare (statue-boosted) spawn of an advance.
    """

    species: int
    shiny: bool
    ivs: tuple[int, int, int, int, int, int]
    ability: int
    nature: int
    gender: int
    item: int = 0
    egg_move: int | None = None
    pid: int = 0
    ec: int = 0
    rare: bool = False

    def __post_init__(self) -> None:
        if self.species <= 0:
            raise OracleContractError(f"invalid species id {self.species}")
        if len(self.ivs) != 6 or any(not 0 <= iv <= MAX_IV for iv in self.ivs):
            raise OracleContractError(f"invalid IVs {self.ivs!r}")
        if self.ability not in (0, 1):
            raise OracleContractError(f"invalid ability slot {self.ability}")
        if not 0 <= self.nature < NATURE_COUNT:
            raise OracleContractError(f"invalid nature {self.nature}")
        if self.gender not in (GENDER_MALE, GENDER_FEMALE, GENDERLESS):
            raise OracleContractError(f"invalid gender slot {self.gender}")
        if self.item < 0 or (self.egg_move is not None and self.egg_move <= 0):
            raise OracleContractError("negative item or egg move id")
        if not 0 <= self.pid <= 0xFFFFFFFF or not 0 <= self.ec <= 0xFFFFFFFF:
            raise OracleContractError("pid/ec out of 32-bit range")

    @property
    def perfect_ivs(self) -> bool:
        return all(iv == MAX_IV for iv in self.ivs)


@dataclass(frozen=True, slots=True)
class MatchRecord:
    """A filtered spawn tagged with the advance that produced it."""

    advance: int
    event: SpawnEvent

    def shifted(self, offset: int) -> MatchRecord:
        """Return this record with *offset* added to its advance."""
        return MatchRecord(self.advance + offset, self.event)
