"""
Meta-progression across runs: lifetime stats, daily streak, unlocks and
achievements.

PlayerProgress is a plain record; the host decides where it is stored and
round-trips it through to_dict() / from_dict(). After each run:

    update = record_run(progress, runner.result, date.today())
    update.new_achievements, update.new_unlocks
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)


# ============================================================================
# UNLOCK THRESHOLDS
# ============================================================================

ROGUE_RUNS_REQUIRED = 10
MAGE_BOSSES_REQUIRED = 5
MERCHANT_ITEMS_REQUIRED = 100
VOLCANO_ROUND_REQUIRED = 30
ABYSS_SCORE_REQUIRED = 5000
ABYSS_REQUIRED_BIOMES = ("crypt", "volcano", "ice_palace")

# ============================================================================
# ACHIEVEMENT THRESHOLDS
# ============================================================================

SURVIVOR_ROUNDS = 50
CURSED_COLLECTOR_ITEMS = 3
HOARDER_ITEMS = 5
BOSS_SLAYER_COUNT = 3
HIGH_SCORE = 5000
VETERAN_RUNS = 100

# Achievement id for defeating a boss in a run
BOSS_ACHIEVEMENTS = {
    "fire_dragon": "dragon_slayer",
    "skeleton_king": "skeleton_king_slayer",
    "ice_queen": "ice_queen_slayer",
    "abyss_lord": "abyss_lord_slayer",
}


def biome_score_achievement(biome_id: str, score: int = ABYSS_SCORE_REQUIRED) -> str:
    return f"biome_{biome_id}_score_{score}"


@dataclass
class PlayerProgress:
    """Persistent player progression."""
    player_id: str = ""

    # Lifetime stats
    total_runs: int = 0
    best_score: int = 0
    best_round: int = 0
    total_items_looted: int = 0
    total_bosses_defeated: int = 0
    item_loot_count: Dict[str, int] = field(default_factory=dict)

    # Unlocks
    unlocked_character_ids: List[str] = field(default_factory=lambda: ["warrior"])
    unlocked_biome_ids: List[str] = field(default_factory=lambda: ["crypt"])
    unlocked_achievement_ids: List[str] = field(default_factory=list)

    # Daily streak
    current_streak: int = 0
    best_streak: int = 0
    last_play_date: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "total_runs": self.total_runs,
            "best_score": self.best_score,
            "best_round": self.best_round,
            "total_items_looted": self.total_items_looted,
            "total_bosses_defeated": self.total_bosses_defeated,
            "item_loot_count": dict(self.item_loot_count),
            "unlocked_character_ids": list(self.unlocked_character_ids),
            "unlocked_biome_ids": list(self.unlocked_biome_ids),
            "unlocked_achievement_ids": list(self.unlocked_achievement_ids),
            "current_streak": self.current_streak,
            "best_streak": self.best_streak,
            "last_play_date": self.last_play_date.isoformat() if self.last_play_date else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlayerProgress':
        last_play = data.get("last_play_date")
        defaults = cls()
        return cls(
            player_id=data.get("player_id", ""),
            total_runs=data.get("total_runs", 0),
            best_score=data.get("best_score", 0),
            best_round=data.get("best_round", 0),
            total_items_looted=data.get("total_items_looted", 0),
            total_bosses_defeated=data.get("total_bosses_defeated", 0),
            item_loot_count=dict(data.get("item_loot_count", {})),
            unlocked_character_ids=list(data.get("unlocked_character_ids", defaults.unlocked_character_ids)),
            unlocked_biome_ids=list(data.get("unlocked_biome_ids", defaults.unlocked_biome_ids)),
            unlocked_achievement_ids=list(data.get("unlocked_achievement_ids", [])),
            current_streak=data.get("current_streak", 0),
            best_streak=data.get("best_streak", 0),
            last_play_date=date.fromisoformat(last_play) if last_play else None,
        )


@dataclass(frozen=True)
class UnlockResult:
    unlock_type: str        # "character" or "biome"
    unlock_id: str
    condition_key: str


@dataclass
class ProgressUpdate:
    """What a finished run earned."""
    new_achievements: List[str] = field(default_factory=list)
    new_unlocks: List[UnlockResult] = field(default_factory=list)
    streak: int = 0


# ============================================================================
# STREAK
# ============================================================================

def update_streak(progress: PlayerProgress, today: date) -> int:
    """
    Advance the daily streak for a run finished on `today`.

    Playing the day after the last play extends the streak, playing again on
    the same day leaves it, anything else starts over at 1.
    """
    last = progress.last_play_date
    if last is not None and last == today - timedelta(days=1):
        progress.current_streak += 1
    elif last is None or last != today:
        progress.current_streak = 1

    progress.best_streak = max(progress.best_streak, progress.current_streak)
    progress.last_play_date = today
    return progress.current_streak


# ============================================================================
# UNLOCKS
# ============================================================================

def _has_defeated_boss(progress: PlayerProgress, boss_id: str) -> bool:
    earned = progress.unlocked_achievement_ids
    return f"{boss_id}_slayer" in earned or f"{boss_id}_defeated" in earned


def calculate_unlocks(progress: PlayerProgress) -> List[UnlockResult]:
    """New character and biome unlocks earned by the player's lifetime stats."""
    unlocks: List[UnlockResult] = []
    chars = progress.unlocked_character_ids
    biomes = progress.unlocked_biome_ids

    if "rogue" not in chars and progress.total_runs >= ROGUE_RUNS_REQUIRED:
        unlocks.append(UnlockResult("character", "rogue", "unlock_rogue_condition"))
    if "mage" not in chars and progress.total_bosses_defeated >= MAGE_BOSSES_REQUIRED:
        unlocks.append(UnlockResult("character", "mage", "unlock_mage_condition"))
    if "merchant" not in chars and progress.total_items_looted >= MERCHANT_ITEMS_REQUIRED:
        unlocks.append(UnlockResult("character", "merchant", "unlock_merchant_condition"))

    if "volcano" not in biomes and progress.best_round >= VOLCANO_ROUND_REQUIRED:
        unlocks.append(UnlockResult("biome", "volcano", "unlock_volcano_condition"))
    if "ice_palace" not in biomes and _has_defeated_boss(progress, "skeleton_king"):
        unlocks.append(UnlockResult("biome", "ice_palace", "unlock_ice_palace_condition"))
    if "abyss" not in biomes and all(
        biome_score_achievement(b) in progress.unlocked_achievement_ids
        for b in ABYSS_REQUIRED_BIOMES
    ):
        unlocks.append(UnlockResult("biome", "abyss", "unlock_abyss_condition"))

    return unlocks


# ============================================================================
# ACHIEVEMENTS
# ============================================================================

def check_achievements(result: Any, progress: PlayerProgress) -> List[str]:
    """
    Achievement ids newly earned by a run.

    Args:
        result: RunResult of the finished run
        progress: Player progress (already-earned achievements are skipped)
    """
    earned = set(progress.unlocked_achievement_ids)
    candidates: List[str] = []

    if result.rounds_completed >= SURVIVOR_ROUNDS:
        candidates.append("survivor_50")
    if result.survived and result.cursed_items_held >= CURSED_COLLECTOR_ITEMS:
        candidates.append("cursed_collector")
    if result.survived and result.weapons_held == 0:
        candidates.append("pacifist")
    if result.bosses_defeated >= 1:
        candidates.append("first_blood")
    if result.survived and len(result.final_inventory) >= HOARDER_ITEMS:
        candidates.append("hoarder")
    if result.survived and result.has_legendary:
        candidates.append("legendary_collector")
    if result.bosses_defeated >= BOSS_SLAYER_COUNT:
        candidates.append("boss_slayer_3")
    if result.final_score >= HIGH_SCORE:
        candidates.append("high_scorer")

    for boss_id, achievement in BOSS_ACHIEVEMENTS.items():
        if boss_id in result.defeated_boss_ids:
            candidates.append(achievement)

    if progress.total_runs >= VETERAN_RUNS:
        candidates.append("veteran_100")
    if result.final_score >= ABYSS_SCORE_REQUIRED:
        candidates.append(biome_score_achievement(result.biome))

    new: List[str] = []
    for achievement in candidates:
        if achievement not in earned and achievement not in new:
            new.append(achievement)
    return new


# ============================================================================
# RUN RECORDING
# ============================================================================

def record_run(progress: PlayerProgress, result: Any, today: date) -> ProgressUpdate:
    """
    Fold a finished run into the player's progress.

    Updates lifetime totals, bests and the daily streak, then grants any
    achievements and unlocks the run earned.
    """
    progress.total_runs += 1
    progress.total_items_looted += result.items_looted
    progress.total_bosses_defeated += result.bosses_defeated
    progress.best_score = max(progress.best_score, result.final_score)
    progress.best_round = max(progress.best_round, result.rounds_completed)
    for item_id in result.looted_item_ids:
        progress.item_loot_count[item_id] = progress.item_loot_count.get(item_id, 0) + 1

    streak = update_streak(progress, today)

    achievements = check_achievements(result, progress)
    progress.unlocked_achievement_ids.extend(achievements)

    unlocks = calculate_unlocks(progress)
    for unlock in unlocks:
        target = (progress.unlocked_character_ids if unlock.unlock_type == "character"
                  else progress.unlocked_biome_ids)
        target.append(unlock.unlock_id)

    if achievements or unlocks:
        logger.info(
            "Run recorded: achievements %s, unlocks %s",
            achievements, [u.unlock_id for u in unlocks],
        )
    return ProgressUpdate(new_achievements=achievements, new_unlocks=unlocks, streak=streak)
