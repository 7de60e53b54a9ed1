"""
Batch simulation of headless runs and summary statistics.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union

import numpy as np

from ..config import GameConfig
from ..content.catalog import Catalog, load_catalog
from ..game import DecisionFn, RunResult, run_headless


logger = logging.getLogger(__name__)


@dataclass
class BatchSummary:
    """Aggregate statistics over a batch of runs."""
    runs: int
    mean_score: float
    median_score: float
    p90_score: float
    max_score: int
    mean_rounds: float
    max_rounds: int
    mean_bosses: float
    survival_rate: float
    death_causes: Dict[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "runs": self.runs,
            "mean_score": round(self.mean_score, 1),
            "median_score": round(self.median_score, 1),
            "p90_score": round(self.p90_score, 1),
            "max_score": self.max_score,
            "mean_rounds": round(self.mean_rounds, 2),
            "max_rounds": self.max_rounds,
            "mean_bosses": round(self.mean_bosses, 2),
            "survival_rate": round(self.survival_rate, 3),
            "death_causes": dict(self.death_causes),
        }


def simulate_runs(
    seeds: Iterable[Union[str, int]],
    decision_fn: Optional[DecisionFn] = None,
    character: Optional[str] = None,
    biome: Optional[str] = None,
    catalog: Optional[Catalog] = None,
    config: Optional[GameConfig] = None,
    max_rounds: int = 1000,
) -> List[RunResult]:
    """Play one headless run per seed with the same policy."""
    config = config or GameConfig()
    catalog = catalog or load_catalog(config.data_dir)

    results = []
    for seed in seeds:
        results.append(run_headless(
            seed, decision_fn,
            character=character, biome=biome,
            catalog=catalog, config=config,
            max_rounds=max_rounds,
        ))
    logger.info("Simulated %d runs", len(results))
    return results


def summarize_runs(results: List[RunResult]) -> BatchSummary:
    """Score, length and survival statistics for a batch."""
    if not results:
        raise ValueError("No runs to summarize")

    scores = np.array([r.final_score for r in results], dtype=float)
    rounds = np.array([r.rounds_completed for r in results], dtype=float)
    bosses = np.array([r.bosses_defeated for r in results], dtype=float)
    survived = np.array([r.survived for r in results], dtype=bool)

    causes: Dict[str, int] = {}
    for r in results:
        cause = r.death_cause or "survived"
        causes[cause] = causes.get(cause, 0) + 1

    return BatchSummary(
        runs=len(results),
        mean_score=float(np.mean(scores)),
        median_score=float(np.median(scores)),
        p90_score=float(np.percentile(scores, 90)),
        max_score=int(scores.max()),
        mean_rounds=float(np.mean(rounds)),
        max_rounds=int(rounds.max()),
        mean_bosses=float(np.mean(bosses)),
        survival_rate=float(survived.mean()),
        death_causes=causes,
    )
