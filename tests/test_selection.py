"""
Weighted Selection Tests
"""

import pytest

from lootorlose.generation.selection import select_weighted
from lootorlose.state.rng import Random


class TestSelectWeighted:
    """Test select_weighted."""

    def test_uniform_weights_converge(self):
        """[1, 1, 1] picks each option about a third of the time."""
        rng = Random(42)
        counts = {"a": 0, "b": 0, "c": 0}
        draws = 10000
        for _ in range(draws):
            counts[select_weighted(["a", "b", "c"], [1, 1, 1], rng)] += 1
        for count in counts.values():
            assert abs(count / draws - 1 / 3) < 0.05

    def test_zero_weight_never_chosen(self):
        rng = Random(42)
        for _ in range(1000):
            assert select_weighted(["never", "always"], [0.0, 1.0], rng) == "always"

    def test_heavier_weight_dominates(self):
        rng = Random(12345)
        picks = [select_weighted(["light", "heavy"], [1, 9], rng) for _ in range(5000)]
        assert picks.count("heavy") / len(picks) == pytest.approx(0.9, abs=0.03)

    def test_all_zero_returns_first_without_drawing(self):
        rng = Random(42)
        assert select_weighted(["x", "y"], [0, 0], rng) == "x"
        assert rng.counter == 0

    def test_single_candidate(self):
        assert select_weighted(["only"], [5.0], Random(1)) == "only"

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            select_weighted([], [], Random(1))

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError):
            select_weighted(["a", "b"], [1.0], Random(1))

    def test_deterministic(self):
        r1, r2 = Random(7), Random(7)
        seq1 = [select_weighted("abcd", [1, 2, 3, 4], r1) for _ in range(50)]
        seq2 = [select_weighted("abcd", [1, 2, 3, 4], r2) for _ in range(50)]
        assert seq1 == seq2


class FixedRoll:
    """Stand-in stream that always rolls the same double."""

    def __init__(self, value):
        self.value = value
        self.counter = 0

    def random_double(self):
        self.counter += 1
        return self.value


class TestSelectionBoundaries:
    """Test rolls landing exactly on cumulative boundaries."""

    def test_zero_roll_skips_zero_weight_first(self):
        assert select_weighted(["never", "always"], [0.0, 1.0], FixedRoll(0.0)) == "always"

    def test_roll_on_boundary_goes_to_next(self):
        # roll 0.5 * 2 == 1.0 is the end of "a"'s interval
        assert select_weighted(["a", "b"], [1.0, 1.0], FixedRoll(0.5)) == "b"

    def test_drift_never_returns_zero_weight_last(self):
        assert select_weighted(["a", "b", "c"], [1.0, 1.0, 0.0], FixedRoll(1.0)) == "b"
