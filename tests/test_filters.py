"""Tests for filter specs and compiled predicates."""

import pytest
from pydantic import ValidationError

from tests.conftest import make_event
from ug_search.filters import (
    AnyOf,
    Exact,
    FilterSpec,
    Ignore,
    Range,
    compile_filter,
)


# ---------------------------------------------------------------------------
# Condition variants
# ---------------------------------------------------------------------------

class TestConditions:
    def test_ignore_accepts_anything(self):
        assert Ignore().test(None)
        assert Ignore().test(12345)

    def test_exact(self):
        assert Exact(5).test(5)
        assert not Exact(5).test(6)

    def test_range_is_inclusive(self):
        r = Range(3, 7)
        assert r.test(3) and r.test(7)
        assert not r.test(2) and not r.test(8)

    def test_range_covers(self):
        assert Range(0, 31).covers(0, 31)
        assert not Range(1, 31).covers(0, 31)

    def test_any_of(self):
        cond = AnyOf(frozenset({1, 4}))
        assert cond.test(4)
        assert not cond.test(2)


# ---------------------------------------------------------------------------
# FilterSpec validation
# ---------------------------------------------------------------------------

class TestFilterSpec:
    def test_defaults_are_dont_care(self):
        spec = FilterSpec()
        kinds = {name: type(cond) for name, cond in spec.conditions()}
        assert kinds["shiny"] is Ignore
        assert kinds["species"] is Ignore
        assert kinds["nature"] is Ignore
        assert kinds["iv_hp"] is Range

    def test_evaluation_order(self):
        names = [name for name, _ in FilterSpec().conditions()]
        assert names == [
            "shiny", "species",
            "iv_hp", "iv_atk", "iv_def", "iv_spa", "iv_spd", "iv_spe",
            "ability", "nature", "gender", "item", "egg_move",
        ]

    def test_rejects_inverted_iv_range(self):
        with pytest.raises(ValidationError, match="exceeds max"):
            FilterSpec(min_ivs=(20, 0, 0, 0, 0, 0), max_ivs=(10, 31, 31, 31, 31, 31))

    def test_rejects_iv_out_of_bounds(self):
        with pytest.raises(ValidationError):
            FilterSpec(max_ivs=(32, 31, 31, 31, 31, 31))

    def test_rejects_unknown_nature(self):
        with pytest.raises(ValidationError, match="nature"):
            FilterSpec(natures=frozenset({25}))

    def test_rejects_bad_ability_and_gender(self):
        with pytest.raises(ValidationError):
            FilterSpec(ability=2)
        with pytest.raises(ValidationError):
            FilterSpec(gender=3)

    def test_round_trips_through_json(self):
        spec = FilterSpec(species=25, natures=frozenset({1, 2}), shiny=True)
        assert FilterSpec.model_validate_json(spec.model_dump_json()) == spec


# ---------------------------------------------------------------------------
# Compiled predicates
# ---------------------------------------------------------------------------

class TestCompileFilter:
    def test_default_spec_matches_everything(self):
        predicate = compile_filter(FilterSpec())
        assert predicate.fields == ()
        for event in [
            make_event(),
            make_event(species=133, shiny=True, ivs=(0,) * 6, gender=2, egg_move=44),
            make_event(ivs=(31,) * 6, nature=24, item=7, ability=1),
        ]:
            assert predicate.matches(event)

    def test_compiling_twice_gives_same_answer(self):
        spec = FilterSpec(species=25, min_ivs=(20, 0, 0, 0, 0, 0))
        event = make_event(species=25, ivs=(25, 1, 1, 1, 1, 1))
        first = compile_filter(spec)
        second = compile_filter(spec)
        assert first.matches(event) == second.matches(event) == first.matches(event)

    def test_perfect_ivs_only(self):
        predicate = compile_filter(FilterSpec(min_ivs=(31,) * 6))
        assert predicate.matches(make_event(ivs=(31,) * 6))
        for i in range(6):
            ivs = [31] * 6
            ivs[i] = 30
            assert not predicate.matches(make_event(ivs=tuple(ivs)))

    def test_shiny_required(self):
        predicate = compile_filter(FilterSpec(shiny=True))
        assert predicate.matches(make_event(shiny=True))
        assert not predicate.matches(make_event(shiny=False))

    def test_species(self):
        predicate = compile_filter(FilterSpec(species=133))
        assert predicate.matches(make_event(species=133))
        assert not predicate.matches(make_event(species=25))

    def test_nature_set(self):
        predicate = compile_filter(FilterSpec(natures=frozenset({3, 10})))
        assert predicate.matches(make_event(nature=10))
        assert not predicate.matches(make_event(nature=4))

    def test_ability_gender_item_egg_move(self):
        predicate = compile_filter(FilterSpec(ability=1, gender=1, item=213, egg_move=33))
        good = make_event(ability=1, gender=1, item=213, egg_move=33)
        assert predicate.matches(good)
        assert not predicate.matches(make_event(ability=0, gender=1, item=213, egg_move=33))
        assert not predicate.matches(make_event(ability=1, gender=0, item=213, egg_move=33))
        assert not predicate.matches(make_event(ability=1, gender=1, item=0, egg_move=33))
        assert not predicate.matches(make_event(ability=1, gender=1, item=213, egg_move=None))

    def test_genderless_slot(self):
        predicate = compile_filter(FilterSpec(gender=2))
        assert predicate.matches(make_event(gender=2))
        assert not predicate.matches(make_event(gender=0))

    def test_lenient_mode_drops_open_ranges(self):
        predicate = compile_filter(FilterSpec(species=25, min_ivs=(0, 5, 0, 0, 0, 0)))
        assert predicate.fields == ("species", "iv_atk")
        assert not predicate.exclusive

    def test_exclusive_mode_checks_every_constrained_field(self):
        predicate = compile_filter(FilterSpec(species=25, exclusive=True))
        assert predicate.fields == (
            "species", "iv_hp", "iv_atk", "iv_def", "iv_spa", "iv_spd", "iv_spe",
        )
        assert predicate.exclusive

    def test_exclusive_agrees_with_lenient_on_valid_events(self):
        spec = FilterSpec(species=25, natures=frozenset({3}), min_ivs=(10, 0, 0, 0, 0, 0))
        lenient = compile_filter(spec)
        strict = compile_filter(spec.model_copy(update={"exclusive": True}))
        for event in [
            make_event(),
            make_event(species=133),
            make_event(nature=4),
            make_event(ivs=(9, 10, 10, 10, 10, 10)),
        ]:
            assert lenient.matches(event) == strict.matches(event)

    def test_predicate_is_callable(self):
        predicate = compile_filter(FilterSpec(species=25))
        assert predicate(make_event(species=25))
