"""
Item Definitions - the catalog entries every round draws from.

Item structure:
- id: Unique identifier string (ids also drive keyword synergies: "fire",
  "ice", "shield", "armor", "helmet")
- category: Weapon, Defense, Consumable, Key, Trap, Artifact, Curse
- rarity: Common < Uncommon < Rare < Legendary
- slot_size: 1 or 2 inventory slots
- attack / defense / heal: flat stat contributions
- synergy_ids / anti_synergy_ids: explicit pairings with other items
- biomes: biome ids the item can drop in (empty = every biome)
- drop_weight: relative drop weight before rarity and zone scaling

Definitions are immutable. Anything that enters play becomes an
ItemInstance so curses and upgrades never leak back into the catalog.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Tuple


class ItemCategory(Enum):
    """Item categories."""
    WEAPON = "Weapon"
    DEFENSE = "Defense"
    CONSUMABLE = "Consumable"
    KEY = "Key"
    TRAP = "Trap"
    ARTIFACT = "Artifact"
    CURSE = "Curse"


class ItemRarity(Enum):
    """Item rarities, ordered by `rank`."""
    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    LEGENDARY = "Legendary"

    @property
    def rank(self) -> int:
        return RARITY_RANK[self]


RARITY_RANK: Dict[ItemRarity, int] = {
    ItemRarity.COMMON: 0,
    ItemRarity.UNCOMMON: 1,
    ItemRarity.RARE: 2,
    ItemRarity.LEGENDARY: 3,
}

# Never offered by merchants, wheels or chests
HAZARD_CATEGORIES: FrozenSet[ItemCategory] = frozenset({ItemCategory.TRAP, ItemCategory.CURSE})

VALID_SLOT_SIZES = (1, 2)


@dataclass(frozen=True)
class ItemDefinition:
    """An immutable catalog item."""
    id: str
    name: str
    category: ItemCategory
    rarity: ItemRarity
    slot_size: int = 1

    # Stats
    attack: int = 0
    defense: int = 0
    heal: int = 0

    # Flags
    is_cursed: bool = False
    is_consumable: bool = False

    # Pairings
    synergy_ids: Tuple[str, ...] = ()
    anti_synergy_ids: Tuple[str, ...] = ()

    # Drop rules
    biomes: Tuple[str, ...] = ()
    drop_weight: float = 1.0

    def __post_init__(self):
        if self.slot_size not in VALID_SLOT_SIZES:
            raise ValueError(f"Item {self.id}: slot_size must be 1 or 2, got {self.slot_size}")
        if self.drop_weight < 0:
            raise ValueError(f"Item {self.id}: drop_weight must be non-negative")

    @property
    def is_hazard(self) -> bool:
        return self.category in HAZARD_CATEGORIES

    def instantiate(self) -> 'ItemInstance':
        return ItemInstance.from_definition(self)


@dataclass
class ItemInstance:
    """
    An item in play (inventory, offer, drop or event reward).

    Carries the same attribute names as ItemDefinition so every rule
    function works on either. Curse and upgrade effects mutate only this copy.
    """
    id: str
    name: str
    category: ItemCategory
    rarity: ItemRarity
    slot_size: int = 1
    attack: int = 0
    defense: int = 0
    heal: int = 0
    is_cursed: bool = False
    is_consumable: bool = False
    synergy_ids: Tuple[str, ...] = ()
    anti_synergy_ids: Tuple[str, ...] = ()
    biomes: Tuple[str, ...] = ()
    drop_weight: float = 1.0

    # Times a blacksmith improved this copy
    upgrades: int = 0

    @classmethod
    def from_definition(cls, definition: ItemDefinition) -> 'ItemInstance':
        return cls(
            id=definition.id,
            name=definition.name,
            category=definition.category,
            rarity=definition.rarity,
            slot_size=definition.slot_size,
            attack=definition.attack,
            defense=definition.defense,
            heal=definition.heal,
            is_cursed=definition.is_cursed,
            is_consumable=definition.is_consumable,
            synergy_ids=definition.synergy_ids,
            anti_synergy_ids=definition.anti_synergy_ids,
            biomes=definition.biomes,
            drop_weight=definition.drop_weight,
        )

    @property
    def is_hazard(self) -> bool:
        return self.category in HAZARD_CATEGORIES

    def apply_curse(self) -> None:
        """Mark cursed and halve both stats."""
        self.is_cursed = True
        self.attack //= 2
        self.defense //= 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category.value,
            "rarity": self.rarity.value,
            "slot_size": self.slot_size,
            "attack": self.attack,
            "defense": self.defense,
            "heal": self.heal,
            "is_cursed": self.is_cursed,
            "upgrades": self.upgrades,
        }

    def __repr__(self) -> str:
        suffix = "+" * self.upgrades
        if self.is_cursed:
            suffix += "(cursed)"
        return f"{self.id}{suffix}"


def total_slots(items: List[Any]) -> int:
    """Total slot usage of an inventory."""
    return sum(item.slot_size for item in items)
