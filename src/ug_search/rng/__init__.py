"""PRNG primitives for the underground search engine."""

from ug_search.rng.xorshift import OFFSET_JUMP_THRESHOLD, XorShift128, skip_to_offset

__all__ = [
    "OFFSET_JUMP_THRESHOLD",
    "XorShift128",
    "skip_to_offset",
]
