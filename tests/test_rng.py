"""
RNG Tests

XorShift128 stream, the counter-tracking Random wrapper, seed strings and
daily seeds.
"""

from datetime import date

import pytest

from lootorlose.state.rng import (
    XorShift128, Random, seed_to_long, long_to_seed, daily_seed, random_seed,
)


class TestSeedConversion:
    """Test seed string to long conversion."""

    def test_known_seeds(self):
        """Single characters map to their base-35 digit."""
        assert seed_to_long("0") == 0
        assert seed_to_long("A") == 10
        assert seed_to_long("Z") == 34
        assert seed_to_long("AA") == 10 * 35 + 10

    def test_numeric_strings_are_base_35(self):
        """Digit-only strings use the same base-35 reading as any other."""
        assert seed_to_long("10") == 35
        assert seed_to_long("42") == 4 * 35 + 2

    def test_o_to_zero_conversion(self):
        """O is read as 0."""
        assert seed_to_long("LOOT") == seed_to_long("L00T")

    def test_case_insensitive(self):
        assert seed_to_long("loot4ever") == seed_to_long("LOOT4EVER")

    def test_roundtrip(self):
        """long_to_seed -> seed_to_long for seeds with letters."""
        for seed in ["LOOT4EVER", "ABC", "DRAGON", "Z9Z9"]:
            value = seed_to_long(seed)
            assert seed_to_long(long_to_seed(value)) == value

    def test_numeric_roundtrip(self):
        """Every seed survives long_to_seed -> seed_to_long, digit-only strings included."""
        for seed in range(1, 2000):
            assert seed_to_long(long_to_seed(seed)) == seed
        assert long_to_seed(35) == "10"
        assert seed_to_long(long_to_seed(20240101)) == 20240101

    def test_zero_seed_string(self):
        assert long_to_seed(0) == "0"


class TestXorShift128:
    """Test the XorShift128 generator."""

    def test_deterministic(self):
        """Same seed produces same sequence."""
        rng1 = XorShift128(12345)
        rng2 = XorShift128(12345)
        for _ in range(100):
            assert rng1._next_long() == rng2._next_long()

    def test_seed_zero_handling(self):
        """Seed 0 must not produce a stuck all-zero state."""
        rng = XorShift128(0)
        assert not (rng.seed0 == 0 and rng.seed1 == 0)
        assert rng._next_long() != rng._next_long()

    def test_next_int_range(self):
        rng = XorShift128(42)
        for bound in [1, 2, 10, 100]:
            for _ in range(100):
                assert 0 <= rng.next_int(bound) < bound

    def test_next_int_rejects_bad_bound(self):
        with pytest.raises(ValueError):
            XorShift128(42).next_int(0)

    def test_doubles_in_unit_interval(self):
        rng = XorShift128(7)
        for _ in range(1000):
            assert 0.0 <= rng.next_double() < 1.0
            assert 0.0 <= rng.next_float() < 1.0

    def test_copy_continues_identically(self):
        rng = XorShift128(99)
        rng._next_long()
        clone = rng.copy()
        assert [rng._next_long() for _ in range(10)] == [clone._next_long() for _ in range(10)]


class TestRandom:
    """Test the Random wrapper."""

    def test_random_int_inclusive(self, rng_seed_42):
        values = {rng_seed_42.random_int(3) for _ in range(500)}
        assert values == {0, 1, 2, 3}

    def test_random_int_range_inclusive(self, rng_seed_42):
        values = {rng_seed_42.random_int_range(15, 17) for _ in range(500)}
        assert values == {15, 16, 17}

    def test_random_index_rejects_empty(self, rng_seed_42):
        with pytest.raises(ValueError):
            rng_seed_42.random_index(0)

    def test_counter_tracks_draws(self, rng_seed_42):
        rng_seed_42.random_int(10)
        rng_seed_42.random_double()
        rng_seed_42.random_boolean(0.5)
        rng_seed_42.choice(["a", "b"])
        assert rng_seed_42.counter == 4

    def test_counter_skip_replays_stream(self):
        rng = Random(42)
        for _ in range(5):
            rng.random_int(999)
        replay = Random(42, counter=5)
        assert replay.counter == 5
        assert replay.random_int(999) == rng.random_int(999)

    def test_boolean_extremes(self, rng_seed_42):
        assert not any(rng_seed_42.random_boolean(0.0) for _ in range(100))
        assert all(rng_seed_42.random_boolean(1.0) for _ in range(100))

    def test_copy_is_independent(self, rng_seed_42):
        clone = rng_seed_42.copy()
        assert clone.random_double() == rng_seed_42.random_double()
        clone.random_double()
        assert clone.counter == rng_seed_42.counter + 1


class TestDailySeed:
    """Test daily and random seeds."""

    def test_daily_seed_is_date_number(self):
        assert daily_seed(date(2024, 3, 9)) == 20240309

    def test_same_day_same_seed(self):
        assert daily_seed(date(2025, 1, 1)) == daily_seed(date(2025, 1, 1))

    def test_random_seed_non_negative(self):
        for _ in range(10):
            assert 0 <= random_seed() < 2 ** 63
