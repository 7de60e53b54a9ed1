"""
Run State - everything about a Loot or Lose run in progress.

One RunState per run. It is created from a character, a biome and a seed,
mutated only by the GameRunner (and the event handlers it dispatches to),
and discarded when the run ends. Nothing here is persisted mid-run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..content.characters import BiomeDefinition, CharacterDefinition
from ..content.events import BuffType
from ..content.items import ItemInstance, total_slots
from ..generation.items import DungeonZone, get_zone_for_round
from .rng import Random, long_to_seed, random_seed, seed_to_long


# Message keys for the end-of-run screen
DEATH_CAUSE_HP = "death_cause_hp"
DEATH_CAUSE_CURSE = "death_cause_curse"
DEATH_CAUSE_ENDED = "death_cause_ended"


@dataclass
class RunState:
    """
    Complete state of a run.

    The inventory is ordered; discard choices refer to positions in it.
    """

    # ==================== SEED & RNG ====================
    seed: int
    rng: Random = None

    # ==================== SETUP ====================
    character_id: str = "warrior"
    biome: str = "crypt"
    is_daily_run: bool = False

    # ==================== RUN PROGRESS ====================
    round: int = 0
    zone: DungeonZone = DungeonZone.TUTORIAL
    alive: bool = True
    death_cause: Optional[str] = None

    # ==================== RESOURCES ====================
    hp: int = 100
    max_hp: int = 100
    gold: int = 0
    score: int = 0

    # ==================== INVENTORY ====================
    inventory: List[ItemInstance] = field(default_factory=list)
    capacity: int = 5
    active_buffs: List[BuffType] = field(default_factory=list)

    # ==================== COUNTERS ====================
    bosses_defeated: int = 0
    defeated_boss_ids: List[str] = field(default_factory=list)
    items_looted: int = 0
    items_left: int = 0
    events_seen: int = 0

    def __post_init__(self):
        if self.rng is None:
            self.rng = Random(self.seed)

    @property
    def seed_string(self) -> str:
        return long_to_seed(self.seed)

    # ----- INVENTORY -----

    @property
    def used_slots(self) -> int:
        return total_slots(self.inventory)

    @property
    def free_slots(self) -> int:
        return self.capacity - self.used_slots

    def can_fit(self, item: Any) -> bool:
        return item.slot_size <= self.free_slots

    def add_item(self, item: ItemInstance) -> bool:
        """Add an item if it fits. Returns False (and changes nothing) otherwise."""
        if not self.can_fit(item):
            return False
        self.inventory.append(item)
        return True

    def remove_item(self, index: int) -> ItemInstance:
        return self.inventory.pop(index)

    def remove_item_by_id(self, item_id: str) -> Optional[ItemInstance]:
        """Remove the first inventory item with this id."""
        for idx, item in enumerate(self.inventory):
            if item.id == item_id:
                return self.inventory.pop(idx)
        return None

    def get_inventory_ids(self) -> List[str]:
        return [item.id for item in self.inventory]

    # ----- RESOURCE MANAGEMENT -----

    def heal(self, amount: int) -> int:
        """Heal up to max HP. Returns HP actually restored."""
        before = self.hp
        self.hp = min(self.hp + max(amount, 0), self.max_hp)
        return self.hp - before

    def damage(self, amount: int) -> int:
        """Lose HP (floored at 0). Returns HP actually lost."""
        before = self.hp
        self.hp = max(0, self.hp - max(amount, 0))
        return before - self.hp

    def apply_hp_change(self, delta: int) -> int:
        if delta >= 0:
            return self.heal(delta)
        return -self.damage(-delta)

    def add_gold(self, amount: int):
        self.gold = max(0, self.gold + amount)

    # ----- PROGRESS -----

    def advance_round(self) -> int:
        self.round += 1
        self.zone = get_zone_for_round(self.round)
        return self.round

    def kill(self, cause: str):
        if cause == DEATH_CAUSE_CURSE:
            self.hp = 0
        self.alive = False
        self.death_cause = cause

    # ----- SERIALIZATION -----

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "seed_string": self.seed_string,
            "character": self.character_id,
            "biome": self.biome,
            "round": self.round,
            "zone": self.zone.value,
            "alive": self.alive,
            "death_cause": self.death_cause,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "gold": self.gold,
            "score": self.score,
            "inventory": [item.to_dict() for item in self.inventory],
            "capacity": self.capacity,
            "used_slots": self.used_slots,
            "active_buffs": [b.value for b in self.active_buffs],
            "bosses_defeated": self.bosses_defeated,
            "items_looted": self.items_looted,
            "items_left": self.items_left,
            "rng_counter": self.rng.counter,
        }


def create_run(
    character: CharacterDefinition,
    biome: BiomeDefinition,
    seed: Union[int, str, None] = None,
    starting_items: Optional[List[ItemInstance]] = None,
    is_daily_run: bool = False,
) -> RunState:
    """
    Create a fresh run for a character in a biome.

    Args:
        character: Character being played (HP, capacity)
        biome: Biome of the run
        seed: Numeric seed, seed string, or None for a random seed
        starting_items: Instances of the character's starting items; any
            that do not fit the capacity are dropped
        is_daily_run: Whether this is the shared daily challenge

    Returns:
        RunState at round 0, waiting for the first round
    """
    if seed is None:
        seed = random_seed()
    elif isinstance(seed, str):
        seed = seed_to_long(seed)

    run = RunState(
        seed=seed,
        character_id=character.id,
        biome=biome.id,
        is_daily_run=is_daily_run,
        hp=character.base_hp,
        max_hp=character.base_hp,
        capacity=character.inventory_slots,
    )

    for item in starting_items or []:
        run.add_item(item)

    return run
