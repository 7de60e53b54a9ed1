"""
XorShift128 RNG - the single seeded random stream behind a run.

Every random decision in a run (item draws, event picks, wheel rolls, boss
picks) is taken from one Random instance owned by the RunState, so a seed
plus the same sequence of player decisions reproduces the run exactly.

Unseeded runs draw a seed from the OS entropy pool once and then behave
exactly like seeded runs.

Daily challenge runs share a seed derived from the calendar date.
"""

from datetime import date
from typing import Optional
import os


_MASK_64 = 0xFFFFFFFFFFFFFFFF

# 0-9 + A-Z excluding O (O is read as 0)
SEED_CHARACTERS = "0123456789ABCDEFGHIJKLMNPQRSTUVWXYZ"


class XorShift128:
    """
    XorShift128 PRNG.

    State is two 64-bit integers (seed0, seed1).
    """

    def __init__(self, seed: int, seed1: Optional[int] = None):
        """
        Initialize with a 64-bit seed or explicit (seed0, seed1) state.

        Args:
            seed: Either the initial seed (if seed1 is None) or seed0 state
            seed1: If provided, use (seed, seed1) as direct state values
        """
        if seed1 is not None:
            self.seed0 = seed & _MASK_64
            self.seed1 = seed1 & _MASK_64
        else:
            # A zero state would never leave zero
            if seed == 0:
                seed = -0x8000000000000000
            self.seed0 = self._murmur_hash3(seed)
            self.seed1 = self._murmur_hash3(self.seed0)

    @staticmethod
    def _murmur_hash3(x: int) -> int:
        """MurmurHash3 finalizer - spreads the seed over both state words."""
        x = x & _MASK_64
        x ^= x >> 33
        x = (x * 0xff51afd7ed558ccd) & _MASK_64
        x ^= x >> 33
        x = (x * 0xc4ceb9fe1a85ec53) & _MASK_64
        x ^= x >> 33
        return x

    def _next_long(self) -> int:
        """Generate the next unsigned 64-bit value."""
        s1 = self.seed0
        s0 = self.seed1
        self.seed0 = s0

        s1 ^= (s1 << 23) & _MASK_64
        self.seed1 = (s1 ^ s0 ^ (s1 >> 17) ^ (s0 >> 26)) & _MASK_64

        return (self.seed0 + self.seed1) & _MASK_64

    def next_int(self, bound: int) -> int:
        """Random int in [0, bound)."""
        if bound <= 0:
            raise ValueError("bound must be positive")
        return (self._next_long() >> 1) % bound

    def next_float(self) -> float:
        """Random float in [0, 1) with 24 bits of precision."""
        return (self._next_long() >> 40) / (1 << 24)

    def next_double(self) -> float:
        """Random double in [0, 1) with 53 bits of precision."""
        return (self._next_long() >> 11) / (1 << 53)

    def next_boolean(self) -> bool:
        """Random boolean - checks least significant bit."""
        return (self._next_long() & 1) != 0

    def get_state(self, index: int) -> int:
        """Get state value (0 = seed0, 1 = seed1)."""
        if index == 0:
            return self.seed0
        return self.seed1

    def copy(self) -> 'XorShift128':
        """Create a copy with same state."""
        return XorShift128(self.seed0, self.seed1)


class Random:
    """
    Counter-tracking wrapper around XorShift128.

    The counter records how many draws a run has made, which makes it easy
    to assert that two runs consumed randomness identically.

    Methods:
    - random_int(range) -> [0, range] inclusive
    - random_int_range(start, end) -> [start, end] inclusive
    - random_index(length) -> [0, length) for list picks
    - random_double() -> [0, 1), used for weighted selection
    - random_boolean(chance) -> nextFloat() < chance (coin flip if None)
    """

    def __init__(self, seed: int, counter: int = 0):
        """
        Initialize RNG with seed and optional counter.

        Args:
            seed: 64-bit seed value
            counter: Number of draws to skip (replaying a stream)
        """
        self.seed = seed
        self._rng = XorShift128(seed)
        self.counter = 0

        for _ in range(counter):
            self.random_int(999)

    def random_int(self, range_val: int) -> int:
        """Random int in [0, range_val] INCLUSIVE."""
        self.counter += 1
        return self._rng.next_int(range_val + 1)

    def random_int_range(self, start: int, end: int) -> int:
        """Random int in [start, end] INCLUSIVE."""
        self.counter += 1
        return start + self._rng.next_int(end - start + 1)

    def random_index(self, length: int) -> int:
        """Random list index in [0, length)."""
        if length <= 0:
            raise ValueError("cannot pick from an empty sequence")
        self.counter += 1
        return self._rng.next_int(length)

    def random_double(self) -> float:
        """Random double in [0, 1)."""
        self.counter += 1
        return self._rng.next_double()

    def random_boolean(self, chance: float = None) -> bool:
        """
        Random boolean.

        With no argument (or None): 50% chance via the low bit.
        With a float argument: nextFloat() < chance.
        """
        self.counter += 1
        if chance is None:
            return self._rng.next_boolean()
        return self._rng.next_float() < chance

    def choice(self, items):
        """Pick one element of a non-empty sequence uniformly."""
        return items[self.random_index(len(items))]

    def copy(self) -> 'Random':
        """Create a copy with same state and counter."""
        new = Random.__new__(Random)
        new.seed = self.seed
        new._rng = XorShift128(
            self._rng.get_state(0),
            self._rng.get_state(1)
        )
        new.counter = self.counter
        return new


def seed_to_long(seed_string: str) -> int:
    """
    Convert a seed string (e.g., "LOOT4EVER") to its long value.

    Base-35 encoding: 0-9 + A-Z excluding O. O is replaced with 0. Digit-only
    strings are base-35 too, so every long_to_seed() string reads back.
    """
    seed_string = seed_string.upper().replace("O", "0")

    result = 0
    for char in seed_string:
        remainder = SEED_CHARACTERS.find(char)
        if remainder == -1:
            continue
        result *= len(SEED_CHARACTERS)
        result += remainder

    return result


def long_to_seed(seed_long: int) -> str:
    """Convert a long value back to its base-35 seed string."""
    char_count = len(SEED_CHARACTERS)

    if seed_long == 0:
        return "0"

    leftover = seed_long & _MASK_64

    result = []
    while leftover != 0:
        remainder = leftover % char_count
        leftover = leftover // char_count
        result.append(SEED_CHARACTERS[remainder])

    return ''.join(reversed(result))


def daily_seed(day: date) -> int:
    """Seed shared by every player's daily run on the given day (YYYYMMDD)."""
    return int(day.strftime("%Y%m%d"))


def random_seed() -> int:
    """Fresh 63-bit seed for an unseeded run."""
    return int.from_bytes(os.urandom(8), "big") >> 1
