"""
End-of-run scoring.

    round points   = 10 per round completed
    boss points    = 500 per boss defeated
    synergy points = 100 per active synergy in the final inventory
    rarity points  = Common 10, Uncommon 25, Rare 50, Legendary 100 per item
    multiplier     = min(2.0, 1.0 + streak_days * 0.1)
    total          = int((round + boss + synergy + rarity) * multiplier)

Negative counts are treated as zero.
"""

from dataclasses import dataclass
from typing import Any, Dict, Sequence

from ..content.items import ItemRarity


POINTS_PER_ROUND = 10
POINTS_PER_BOSS = 500
POINTS_PER_SYNERGY = 100

RARITY_POINTS: Dict[ItemRarity, int] = {
    ItemRarity.COMMON: 10,
    ItemRarity.UNCOMMON: 25,
    ItemRarity.RARE: 50,
    ItemRarity.LEGENDARY: 100,
}

STREAK_MULTIPLIER_PER_DAY = 0.1
MAX_STREAK_MULTIPLIER = 2.0


@dataclass
class ScoreBreakdown:
    round_points: int = 0
    boss_points: int = 0
    synergy_points: int = 0
    rarity_points: int = 0
    streak_multiplier: float = 1.0
    total_score: int = 0

    @property
    def subtotal(self) -> int:
        return self.round_points + self.boss_points + self.synergy_points + self.rarity_points

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round_points": self.round_points,
            "boss_points": self.boss_points,
            "synergy_points": self.synergy_points,
            "rarity_points": self.rarity_points,
            "streak_multiplier": self.streak_multiplier,
            "total_score": self.total_score,
        }


def get_streak_multiplier(streak_days: int) -> float:
    multiplier = round(1.0 + max(streak_days, 0) * STREAK_MULTIPLIER_PER_DAY, 2)
    return min(MAX_STREAK_MULTIPLIER, multiplier)


def calculate_rarity_points(inventory: Sequence[Any]) -> int:
    return sum(RARITY_POINTS[item.rarity] for item in inventory)


def calculate_run_score(
    rounds_completed: int,
    bosses_defeated: int,
    final_inventory: Sequence[Any],
    synergies: Sequence[Any],
    streak_days: int = 0,
) -> ScoreBreakdown:
    """
    Score a finished run.

    Args:
        rounds_completed: Rounds survived
        bosses_defeated: Bosses beaten
        final_inventory: Items held at the end of the run
        synergies: Synergies active on the final inventory
        streak_days: Consecutive days played (drives the multiplier)
    """
    breakdown = ScoreBreakdown(
        round_points=max(rounds_completed, 0) * POINTS_PER_ROUND,
        boss_points=max(bosses_defeated, 0) * POINTS_PER_BOSS,
        synergy_points=len(synergies) * POINTS_PER_SYNERGY,
        rarity_points=calculate_rarity_points(final_inventory),
        streak_multiplier=get_streak_multiplier(streak_days),
    )
    breakdown.total_score = int(breakdown.subtotal * breakdown.streak_multiplier)
    return breakdown
