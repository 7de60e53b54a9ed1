"""
Boss combat resolution.

Combat is a single deterministic formula, not a turn loop:

    boss_hp      = base_hp + round * hp_scaling
    boss_attack  = max(1, boss_hp // 10)

    item attack  = attack (halved if cursed), x1.5 on the boss weakness
                   category, x0.5 on the resistance category
    damage       = int(sum(item attack) + synergy attack)
    defense      = sum(defense, halved with // if cursed) + synergy defense
    damage_taken = max(0, boss_attack - defense)

The player wins when damage >= boss_hp. Damage taken applies whether or not
the player wins. Rewards for a win are applied by the GameRunner.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, TYPE_CHECKING

from ..content.bosses import BossDefinition
from .synergy import SynergyResult

if TYPE_CHECKING:
    from ..state.rng import Random


logger = logging.getLogger(__name__)


WEAKNESS_MULTIPLIER = 1.5
RESISTANCE_MULTIPLIER = 0.5
BOSS_ATTACK_DIVISOR = 10


@dataclass
class CombatResult:
    """Outcome of one boss fight."""
    boss_id: str
    player_won: bool
    damage_dealt: int
    damage_taken: int
    boss_hp: int
    boss_attack: int
    player_defense: int
    boss_remaining_hp: int
    # Message keys for the presentation layer, in order
    combat_log: List[str] = field(default_factory=list)


# ============================================================================
# FORMULAS
# ============================================================================

def calculate_boss_hp(boss: BossDefinition, round_num: int) -> int:
    return boss.base_hp + round_num * boss.hp_scaling


def calculate_boss_attack(boss_hp: int) -> int:
    return max(boss_hp // BOSS_ATTACK_DIVISOR, 1)


def calculate_base_attack(inventory: Sequence[Any]) -> int:
    """Raw item attack, cursed items contributing half (rounded down)."""
    return sum(item.attack // 2 if item.is_cursed else item.attack for item in inventory)


def calculate_base_defense(inventory: Sequence[Any]) -> int:
    """Raw item defense, cursed items contributing half (rounded down)."""
    return sum(item.defense // 2 if item.is_cursed else item.defense for item in inventory)


def calculate_effective_damage(
    inventory: Sequence[Any],
    boss: BossDefinition,
    synergy_attack: int = 0,
) -> int:
    """Per-item attack with weakness/resistance applied, plus synergy attack at full value."""
    if not inventory:
        return 0

    item_damage = 0.0
    for item in inventory:
        attack = item.attack / 2 if item.is_cursed else float(item.attack)
        if item.category == boss.weakness:
            attack *= WEAKNESS_MULTIPLIER
        elif item.category == boss.resistance:
            attack *= RESISTANCE_MULTIPLIER
        item_damage += attack

    return int(item_damage + synergy_attack)


# ============================================================================
# RESOLUTION
# ============================================================================

def calculate_combat(
    boss: BossDefinition,
    inventory: Sequence[Any],
    synergies: Sequence[SynergyResult],
    round_num: int,
) -> CombatResult:
    """
    Resolve a boss fight.

    Args:
        boss: Boss being fought
        inventory: Player items (definitions or instances)
        synergies: Active synergies, usually check_synergies(inventory)
        round_num: Current round, drives boss hit points

    Returns:
        CombatResult with the outcome and an ordered combat log.
    """
    log = []

    boss_hp = calculate_boss_hp(boss, round_num)
    log.append("combat_boss_appears")

    synergy_attack = sum(s.bonus_attack for s in synergies)
    log.append("combat_player_attack_base")
    if synergy_attack > 0:
        log.append("combat_synergy_attack_bonus")

    damage = calculate_effective_damage(inventory, boss, synergy_attack)

    if boss.weakness is not None and any(i.category == boss.weakness for i in inventory):
        log.append("combat_weakness_exploited")
    if boss.resistance is not None and any(i.category == boss.resistance for i in inventory):
        log.append("combat_resistance_active")

    boss_attack = calculate_boss_attack(boss_hp)

    synergy_defense = sum(s.bonus_defense for s in synergies)
    defense = calculate_base_defense(inventory) + synergy_defense
    if synergy_defense > 0:
        log.append("combat_synergy_defense_bonus")

    damage_taken = max(boss_attack - defense, 0)
    log.append("combat_boss_attacks")
    if defense > 0:
        log.append("combat_defense_reduces")

    remaining = max(boss_hp - damage, 0)
    player_won = remaining <= 0
    if player_won:
        log.extend(["combat_boss_defeated", "combat_victory"])
    else:
        log.extend(["combat_boss_survives", "combat_defeat"])

    logger.debug(
        "Combat vs %s (round %d): dealt %d/%d, took %d, %s",
        boss.id, round_num, damage, boss_hp, damage_taken,
        "won" if player_won else "lost",
    )

    return CombatResult(
        boss_id=boss.id,
        player_won=player_won,
        damage_dealt=damage,
        damage_taken=damage_taken,
        boss_hp=boss_hp,
        boss_attack=boss_attack,
        player_defense=defense,
        boss_remaining_hp=remaining,
        combat_log=log,
    )


def select_boss_for_round(
    bosses: Sequence[BossDefinition],
    round_num: int,
    biome: str,
    rng: 'Random',
) -> Optional[BossDefinition]:
    """
    Pick the boss for a boss round.

    Bosses whose min_round has been reached are eligible; those preferring the
    active biome win over the rest. Ties are broken uniformly with the run rng.
    """
    eligible = [b for b in bosses if b.min_round <= round_num]
    if not eligible:
        return None

    preferred = [b for b in eligible if b.preferred_biome == biome]
    return rng.choice(preferred or eligible)
