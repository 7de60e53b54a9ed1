"""
Content module - item, boss, event, character and biome definitions.

Definitions are loaded from JSON by the catalog; the bundled data lives in
lootorlose/data/.
"""

from .items import (
    ItemCategory, ItemRarity, ItemDefinition, ItemInstance,
    HAZARD_CATEGORIES, total_slots,
)
from .bosses import BossType, BossDefinition
from .events import EventKind, BuffType, EventDefinition, ALL_BUFFS
from .characters import (
    CharacterType, BiomeType, CharacterDefinition, BiomeDefinition,
    DEFAULT_BASE_HP, DEFAULT_INVENTORY_SLOTS, MAX_INVENTORY_SLOTS,
)
from .catalog import Catalog, CatalogError, load_catalog, DEFAULT_DATA_DIR
