"""
Weighted random selection.

Single draw with probability proportional to weight:

    roll = rng.random_double() * total
    walk the cumulative sum, return the first candidate with roll < cumulative

Zero or negative total weight returns the first candidate without consuming
randomness. A zero weight never wins: floating point drift that leaves the
roll past the last cumulative value returns the last positive-weight
candidate.
"""

from typing import Sequence, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from ..state.rng import Random


T = TypeVar("T")


def select_weighted(candidates: Sequence[T], weights: Sequence[float], rng: 'Random') -> T:
    """
    Pick one candidate with probability proportional to its weight.

    Args:
        candidates: Non-empty sequence of options
        weights: One weight per candidate
        rng: Random stream the roll is taken from

    Raises:
        ValueError: empty candidates or mismatched lengths
    """
    if not candidates:
        raise ValueError("select_weighted requires at least one candidate")
    if len(candidates) != len(weights):
        raise ValueError(
            f"candidates and weights differ in length ({len(candidates)} != {len(weights)})"
        )

    total = sum(weights)
    if total <= 0:
        return candidates[0]

    roll = rng.random_double() * total
    cumulative = 0.0
    for candidate, weight in zip(candidates, weights):
        cumulative += weight
        if roll < cumulative:
            return candidate

    # Float drift past the last cumulative value: last candidate that can win
    for candidate, weight in zip(reversed(candidates), reversed(weights)):
        if weight > 0:
            return candidate
    return candidates[-1]
