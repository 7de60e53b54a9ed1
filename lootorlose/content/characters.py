"""
Playable characters and biomes.

A character sets the starting hit points, inventory capacity and starting
items of a run. A biome restricts which items and bosses show up.
Both carry an `unlocked` flag; progression.py decides when locked ones open.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


DEFAULT_BASE_HP = 100
DEFAULT_INVENTORY_SLOTS = 5
MAX_INVENTORY_SLOTS = 8


class CharacterType(Enum):
    WARRIOR = "Warrior"
    ROGUE = "Rogue"
    MAGE = "Mage"
    MERCHANT = "Merchant"


class BiomeType(Enum):
    CRYPT = "Crypt"
    VOLCANO = "Volcano"
    ICE_PALACE = "IcePalace"
    ABYSS = "Abyss"


@dataclass(frozen=True)
class CharacterDefinition:
    id: str
    name: str
    character_type: CharacterType
    base_hp: int = DEFAULT_BASE_HP
    inventory_slots: int = DEFAULT_INVENTORY_SLOTS
    starting_item_ids: Tuple[str, ...] = ()
    unlocked: bool = False

    def __post_init__(self):
        if not 1 <= self.inventory_slots <= MAX_INVENTORY_SLOTS:
            raise ValueError(
                f"Character {self.id}: inventory_slots must be 1-{MAX_INVENTORY_SLOTS}"
            )
        if self.base_hp <= 0:
            raise ValueError(f"Character {self.id}: base_hp must be positive")


@dataclass(frozen=True)
class BiomeDefinition:
    id: str
    name: str
    biome_type: BiomeType
    exclusive_item_ids: Tuple[str, ...] = ()
    boss_ids: Tuple[str, ...] = ()
    unlocked: bool = False
