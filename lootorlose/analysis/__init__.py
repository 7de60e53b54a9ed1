"""Drop odds and batch statistics."""

from .drop_odds import drop_probabilities, odds_table, rarity_distribution
from .batch import BatchSummary, simulate_runs, summarize_runs

__all__ = [
    "drop_probabilities",
    "rarity_distribution",
    "odds_table",
    "simulate_runs",
    "summarize_runs",
    "BatchSummary",
]
