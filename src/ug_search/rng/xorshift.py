"""128-bit xorshift generator used by the Grand Underground spawner.

The generator's single-step transform is linear over GF(2), so ``n`` steps
can be expressed as the 128x128 bit matrix ``T^n``.  :meth:`XorShift128.jump`
applies the cached powers ``T^(2^k)`` for every set bit of ``n`` and reaches
the same state as ``n`` calls to :meth:`XorShift128.next` in ``O(log n)``
matrix-vector products.
"""

from __future__ import annotations

import logging
import threading
from typing import Sequence

logger = logging.getLogger(__name__)

_MASK32 = 0xFFFFFFFF

OFFSET_JUMP_THRESHOLD = 4096
"""Offsets below this are walked one step at a time; larger ones jump."""


# =====================================================================
# Packed-state helpers
# =====================================================================

def _pack(s0: int, s1: int, s2: int, s3: int) -> int:
    return s0 | (s1 << 32) | (s2 << 64) | (s3 << 96)


def _unpack(v: int) -> tuple[int, int, int, int]:
    return v & _MASK32, (v >> 32) & _MASK32, (v >> 64) & _MASK32, v >> 96


def _step_packed(v: int) -> int:
    s0, s1, s2, s3 = _unpack(v)
    t = s0 ^ ((s0 << 11) & _MASK32)
    t ^= t >> 8
    t ^= s3 ^ (s3 >> 19)
    return _pack(s1, s2, s3, t)


def _apply(columns: Sequence[int], v: int) -> int:
    """Multiply the bit matrix given by *columns* with the vector *v*."""
    result = 0
    while v:
        low = v & -v
        result ^= columns[low.bit_length() - 1]
        v ^= low
    return result


# Column i of T^(2^k) is the image of unit vector e_i after 2^k steps.
_jump_powers: list[tuple[int, ...]] = [
    tuple(_step_packed(1 << i) for i in range(128)),
]
_jump_lock = threading.Lock()


def _jump_power(k: int) -> tuple[int, ...]:
    """Return the columns of ``T^(2^k)``, squaring up from the cache."""
    if k < len(_jump_powers):
        return _jump_powers[k]
    with _jump_lock:
        while len(_jump_powers) <= k:
            prev = _jump_powers[-1]
            _jump_powers.append(tuple(_apply(prev, col) for col in prev))
        return _jump_powers[k]


# =====================================================================
# XorShift128
# =====================================================================

class XorShift128:
    """Xorshift128 state register with single-step and jump-ahead advances.

    Parameters
    ----------
    s0, s1, s2, s3:
        The four unsigned 32-bit words of the state, lowest word first.
    """

    __slots__ = ("_s0", "_s1", "_s2", "_s3")

    def __init__(self, s0: int, s1: int, s2: int, s3: int) -> None:
        for word in (s0, s1, s2, s3):
            if not 0 <= word <= _MASK32:
                raise ValueError(f"state word out of 32-bit range: {word:#x}")
        self._s0 = s0
        self._s1 = s1
        self._s2 = s2
        self._s3 = s3

    @classmethod
    def from_state(cls, state: Sequence[int]) -> XorShift128:
        """Build a generator from a sequence of four state words."""
        if len(state) != 4:
            raise ValueError(f"expected 4 state words, got {len(state)}")
        return cls(*state)

    # -- public properties ---------------------------------------------------

    @property
    def state(self) -> tuple[int, int, int, int]:
        """Return the current four state words."""
        return self._s0, self._s1, self._s2, self._s3

    def copy(self) -> XorShift128:
        """Return an independent generator at the same state."""
        return XorShift128(self._s0, self._s1, self._s2, self._s3)

    # -- core random methods -------------------------------------------------

    def next(self) -> int:
        """Advance one step and return the new 32-bit output word."""
        t = self._s0
        s = self._s3
        t ^= (t << 11) & _MASK32
        t ^= t >> 8
        t ^= s ^ (s >> 19)
        self._s0 = self._s1
        self._s1 = self._s2
        self._s2 = s
        self._s3 = t
        return t

    def rand_range(self, low: int, high: int) -> int:
        """Return an integer *N* such that ``low <= N < high``."""
        return low + self.next() % (high - low)

    def rand_float(self) -> float:
        """Return a float in ``[0.0, 1.0]`` from the low 23 bits of an output."""
        return (self.next() & 0x7FFFFF) / 8388607.0

    # -- advancing -----------------------------------------------------------

    def advance(self, steps: int) -> None:
        """Apply the single-step transform *steps* times."""
        if steps < 0:
            raise ValueError(f"steps must be >= 0, got {steps}")
        for _ in range(steps):
            self.next()

    def jump(self, steps: int) -> None:
        """Reach the state of ``advance(steps)`` via cached matrix powers."""
        if steps < 0:
            raise ValueError(f"steps must be >= 0, got {steps}")
        v = _pack(self._s0, self._s1, self._s2, self._s3)
        k = 0
        while steps:
            if steps & 1:
                v = _apply(_jump_power(k), v)
            steps >>= 1
            k += 1
        self._s0, self._s1, self._s2, self._s3 = _unpack(v)

    # -- dunder helpers ------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, XorShift128):
            return NotImplemented
        return self.state == other.state

    def __repr__(self) -> str:
        words = ", ".join(f"{w:08X}" for w in self.state)
        return f"XorShift128({words})"


def skip_to_offset(rng: XorShift128, offset: int, steps: int | None = None) -> None:
    """Move *rng* forward to the start of a search window.

    *offset* is the requested minimum advance and decides the strategy:
    below :data:`OFFSET_JUMP_THRESHOLD` the generator is walked step by step,
    otherwise it jumps.  *steps* is how many transforms to apply and
    defaults to *offset*; callers add any input delay to it.
    """
    if steps is None:
        steps = offset
    if offset < OFFSET_JUMP_THRESHOLD:
        logger.debug("Advancing %d steps (offset %d)", steps, offset)
        rng.advance(steps)
    else:
        logger.debug("Jumping %d steps (offset %d)", steps, offset)
        rng.jump(steps)
