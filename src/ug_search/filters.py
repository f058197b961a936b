"""Filter engine -- turns a :class:`FilterSpec` into a compiled predicate.

Each filterable field is described by one condition variant:

- **Ignore**: the field is not checked.
- **Exact**: the field must equal one value.
- **Range**: the field must lie in an inclusive ``[lo, hi]`` interval.
- **AnyOf**: the field must be one of a set of values.

:func:`compile_filter` resolves the spec into an ordered tuple of
``(getter, condition)`` checks once, so evaluating an event is a single
short-circuiting loop with no per-event branching on the spec.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from operator import attrgetter
from typing import Callable, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ug_search.core.models import GENDERLESS, MAX_IV, NATURE_COUNT, SpawnEvent

logger = logging.getLogger(__name__)

IV_NAMES = ("hp", "atk", "def", "spa", "spd", "spe")


# =====================================================================
# Condition variants
# =====================================================================

@dataclass(frozen=True)
class Ignore:
    def test(self, value: object) -> bool:
        return True


@dataclass(frozen=True)
class Exact:
    value: object

    def test(self, value: object) -> bool:
        return value == self.value


@dataclass(frozen=True)
class Range:
    lo: int
    hi: int

    def test(self, value: int) -> bool:
        return self.lo <= value <= self.hi

    def covers(self, lo: int, hi: int) -> bool:
        """True if this range admits every value in ``[lo, hi]``."""
        return self.lo <= lo and self.hi >= hi


@dataclass(frozen=True)
class AnyOf:
    values: frozenset[int]

    def test(self, value: object) -> bool:
        return value in self.values


Condition = Union[Ignore, Exact, Range, AnyOf]

IGNORE = Ignore()


# =====================================================================
# FilterSpec
# =====================================================================

class FilterSpec(BaseModel):
    """User-facing filter settings.

    Every field defaults to "don't care".
    """

    model_config = ConfigDict(frozen=True)

    shiny: bool = False
    """Require a shiny spawn.  ``False`` means shininess is not checked."""

    species: int | None = None
    min_ivs: tuple[int, int, int, int, int, int] = (0, 0, 0, 0, 0, 0)
    max_ivs: tuple[int, int, int, int, int, int] = (MAX_IV,) * 6
    ability: int | None = None
    natures: frozenset[int] = frozenset()
    """Accepted nature ids; empty accepts every nature."""

    gender: int | None = None
    item: int | None = None
    egg_move: int | None = None

    exclusive: bool = False
    """Check every constrained field, even ones whose range is fully open."""

    @field_validator("min_ivs", "max_ivs")
    @classmethod
    def _validate_iv_bounds(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        for iv in v:
            if not 0 <= iv <= MAX_IV:
                raise ValueError(f"IV bound {iv} outside 0..{MAX_IV}")
        return v

    @field_validator("natures")
    @classmethod
    def _validate_natures(cls, v: frozenset[int]) -> frozenset[int]:
        for nature in v:
            if not 0 <= nature < NATURE_COUNT:
                raise ValueError(f"Unknown nature id {nature}")
        return v

    @field_validator("ability")
    @classmethod
    def _validate_ability(cls, v: int | None) -> int | None:
        if v is not None and v not in (0, 1):
            raise ValueError("ability slot must be 0 or 1")
        return v

    @field_validator("gender")
    @classmethod
    def _validate_gender(cls, v: int | None) -> int | None:
        if v is not None and not 0 <= v <= GENDERLESS:
            raise ValueError(f"gender slot must be 0..{GENDERLESS}")
        return v

    @model_validator(mode="after")
    def _validate_iv_ranges(self) -> "FilterSpec":
        for name, lo, hi in zip(IV_NAMES, self.min_ivs, self.max_ivs):
            if lo > hi:
                raise ValueError(f"min {name} IV {lo} exceeds max {hi}")
        return self

    def conditions(self) -> list[tuple[str, Condition]]:
        """Return ``(field, condition)`` pairs in evaluation order."""
        result: list[tuple[str, Condition]] = [
            ("shiny", Exact(True) if self.shiny else IGNORE),
            ("species", _exact_or_ignore(self.species)),
        ]
        for name, lo, hi in zip(IV_NAMES, self.min_ivs, self.max_ivs):
            result.append((f"iv_{name}", Range(lo, hi)))
        result.extend([
            ("ability", _exact_or_ignore(self.ability)),
            ("nature", AnyOf(self.natures) if self.natures else IGNORE),
            ("gender", _exact_or_ignore(self.gender)),
            ("item", _exact_or_ignore(self.item)),
            ("egg_move", _exact_or_ignore(self.egg_move)),
        ])
        return result


def _exact_or_ignore(value: int | None) -> Condition:
    return IGNORE if value is None else Exact(value)


# =====================================================================
# Compiled predicate
# =====================================================================

def _iv_getter(index: int) -> Callable[[SpawnEvent], int]:
    def get(event: SpawnEvent) -> int:
        return event.ivs[index]
    return get


_GETTERS: dict[str, Callable[[SpawnEvent], object]] = {
    "shiny": attrgetter("shiny"),
    "species": attrgetter("species"),
    "ability": attrgetter("ability"),
    "nature": attrgetter("nature"),
    "gender": attrgetter("gender"),
    "item": attrgetter("item"),
    "egg_move": attrgetter("egg_move"),
}
for _i, _name in enumerate(IV_NAMES):
    _GETTERS[f"iv_{_name}"] = _iv_getter(_i)


class Predicate:
    """A compiled filter.  Pure: the same event always gives the same answer."""

    __slots__ = ("_checks", "fields", "exclusive")

    def __init__(
        self,
        checks: tuple[tuple[Callable[[SpawnEvent], object], Condition], ...],
        fields: tuple[str, ...],
        exclusive: bool,
    ) -> None:
        self._checks = checks
        self.fields = fields
        """Names of the fields actually checked, in order."""
        self.exclusive = exclusive

    def matches(self, event: SpawnEvent) -> bool:
        for get, condition in self._checks:
            if not condition.test(get(event)):
                return False
        return True

    __call__ = matches

    def __repr__(self) -> str:
        mode = "exclusive" if self.exclusive else "lenient"
        return f"Predicate({mode}, fields={list(self.fields)})"


def compile_filter(spec: FilterSpec) -> Predicate:
    """Compile *spec* into a :class:`Predicate`.

    ``Ignore`` conditions are always dropped.  In non-exclusive mode IV
    ranges spanning the whole 0..31 domain are dropped as well; exclusive
    mode keeps them so every constrained field is checked.
    """
    checks: list[tuple[Callable[[SpawnEvent], object], Condition]] = []
    fields: list[str] = []
    for name, condition in spec.conditions():
        if isinstance(condition, Ignore):
            continue
        if (
            not spec.exclusive
            and isinstance(condition, Range)
            and condition.covers(0, MAX_IV)
        ):
            continue
        checks.append((_GETTERS[name], condition))
        fields.append(name)

    predicate = Predicate(tuple(checks), tuple(fields), spec.exclusive)
    logger.debug("Compiled %r", predicate)
    return predicate
