"""
Catalog loading - items, bosses, events, characters and biomes from JSON.

A catalog directory holds one file per category, each a JSON array of
records with snake_case keys:

    items.json  bosses.json  events.json  characters.json  biomes.json

Enum fields use their display values ("Weapon", "Legendary", "FireDragon",
"WheelOfFortune", "IcePalace", ...). The package ships a default catalog in
lootorlose/data/.

The Catalog is read-only once built: runs copy what they need into
ItemInstances and never write back.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, Union

from .items import ItemCategory, ItemDefinition, ItemRarity
from .bosses import BossDefinition, BossType
from .events import EventDefinition, EventKind
from .characters import BiomeDefinition, BiomeType, CharacterDefinition, CharacterType


logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"

E = TypeVar("E")


class CatalogError(ValueError):
    """A catalog file is missing, malformed or references unknown values."""


# ============================================================================
# RECORD PARSING
# ============================================================================

def _enum(enum_cls: Type[E], value: Any, where: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        valid = ", ".join(m.value for m in enum_cls)
        raise CatalogError(f"{where}: unknown {enum_cls.__name__} {value!r} (expected one of {valid})")


def _optional_enum(enum_cls: Type[E], value: Any, where: str) -> Optional[E]:
    if value is None:
        return None
    return _enum(enum_cls, value, where)


def _require(record: Dict[str, Any], key: str, where: str) -> Any:
    if key not in record:
        raise CatalogError(f"{where}: missing required field '{key}'")
    return record[key]


def parse_item(record: Dict[str, Any]) -> ItemDefinition:
    item_id = _require(record, "id", "items.json")
    where = f"items.json[{item_id}]"
    try:
        return ItemDefinition(
            id=item_id,
            name=record.get("name", item_id),
            category=_enum(ItemCategory, _require(record, "category", where), where),
            rarity=_enum(ItemRarity, _require(record, "rarity", where), where),
            slot_size=int(record.get("slot_size", 1)),
            attack=int(record.get("attack", 0)),
            defense=int(record.get("defense", 0)),
            heal=int(record.get("heal", 0)),
            is_cursed=bool(record.get("is_cursed", False)),
            is_consumable=bool(record.get("is_consumable", False)),
            synergy_ids=tuple(record.get("synergy_ids", ())),
            anti_synergy_ids=tuple(record.get("anti_synergy_ids", ())),
            biomes=tuple(record.get("biomes", ())),
            drop_weight=float(record.get("drop_weight", 1.0)),
        )
    except CatalogError:
        raise
    except (TypeError, ValueError) as e:
        raise CatalogError(f"{where}: {e}") from e


def parse_boss(record: Dict[str, Any]) -> BossDefinition:
    boss_id = _require(record, "id", "bosses.json")
    where = f"bosses.json[{boss_id}]"
    return BossDefinition(
        id=boss_id,
        name=record.get("name", boss_id),
        boss_type=_enum(BossType, _require(record, "boss_type", where), where),
        base_hp=int(_require(record, "base_hp", where)),
        hp_scaling=int(record.get("hp_scaling", 0)),
        weakness=_optional_enum(ItemCategory, record.get("weakness"), where),
        resistance=_optional_enum(ItemCategory, record.get("resistance"), where),
        guaranteed_drop_ids=tuple(record.get("guaranteed_drop_ids", ())),
        min_round=int(record.get("min_round", 1)),
        preferred_biome=record.get("preferred_biome"),
    )


def parse_event(record: Dict[str, Any]) -> EventDefinition:
    event_id = _require(record, "id", "events.json")
    where = f"events.json[{event_id}]"
    return EventDefinition(
        id=event_id,
        name=record.get("name", event_id),
        kind=_enum(EventKind, _require(record, "kind", where), where),
        probability=float(record.get("probability", 0.1)),
        min_round=int(record.get("min_round", 1)),
        biomes=tuple(record.get("biomes", ())),
    )


def parse_character(record: Dict[str, Any]) -> CharacterDefinition:
    char_id = _require(record, "id", "characters.json")
    where = f"characters.json[{char_id}]"
    try:
        return CharacterDefinition(
            id=char_id,
            name=record.get("name", char_id),
            character_type=_enum(CharacterType, _require(record, "character_type", where), where),
            base_hp=int(record.get("base_hp", 100)),
            inventory_slots=int(record.get("inventory_slots", 5)),
            starting_item_ids=tuple(record.get("starting_item_ids", ())),
            unlocked=bool(record.get("unlocked", False)),
        )
    except CatalogError:
        raise
    except ValueError as e:
        raise CatalogError(f"{where}: {e}") from e


def parse_biome(record: Dict[str, Any]) -> BiomeDefinition:
    biome_id = _require(record, "id", "biomes.json")
    where = f"biomes.json[{biome_id}]"
    return BiomeDefinition(
        id=biome_id,
        name=record.get("name", biome_id),
        biome_type=_enum(BiomeType, _require(record, "biome_type", where), where),
        exclusive_item_ids=tuple(record.get("exclusive_item_ids", ())),
        boss_ids=tuple(record.get("boss_ids", ())),
        unlocked=bool(record.get("unlocked", False)),
    )


# ============================================================================
# CATALOG
# ============================================================================

@dataclass
class Catalog:
    """All content a run can draw from, keyed by id."""
    items: Dict[str, ItemDefinition] = field(default_factory=dict)
    bosses: Dict[str, BossDefinition] = field(default_factory=dict)
    events: Dict[str, EventDefinition] = field(default_factory=dict)
    characters: Dict[str, CharacterDefinition] = field(default_factory=dict)
    biomes: Dict[str, BiomeDefinition] = field(default_factory=dict)

    @classmethod
    def from_dicts(
        cls,
        items: List[Dict[str, Any]] = (),
        bosses: List[Dict[str, Any]] = (),
        events: List[Dict[str, Any]] = (),
        characters: List[Dict[str, Any]] = (),
        biomes: List[Dict[str, Any]] = (),
    ) -> "Catalog":
        """Build a catalog from raw record lists."""
        return cls(
            items=_index(items, parse_item, "items"),
            bosses=_index(bosses, parse_boss, "bosses"),
            events=_index(events, parse_event, "events"),
            characters=_index(characters, parse_character, "characters"),
            biomes=_index(biomes, parse_biome, "biomes"),
        )

    @classmethod
    def from_directory(cls, path: Union[str, Path]) -> "Catalog":
        """Load every catalog file from a directory."""
        path = Path(path)
        if not path.is_dir():
            raise CatalogError(f"Catalog directory not found: {path}")

        catalog = cls.from_dicts(
            items=_read_records(path / "items.json"),
            bosses=_read_records(path / "bosses.json"),
            events=_read_records(path / "events.json"),
            characters=_read_records(path / "characters.json"),
            biomes=_read_records(path / "biomes.json"),
        )
        catalog.validate()
        logger.debug(
            "Loaded catalog from %s: %d items, %d bosses, %d events, %d characters, %d biomes",
            path, len(catalog.items), len(catalog.bosses), len(catalog.events),
            len(catalog.characters), len(catalog.biomes),
        )
        return catalog

    def validate(self) -> None:
        """Check that every cross-reference points at a known id."""
        for boss in self.bosses.values():
            for drop_id in boss.guaranteed_drop_ids:
                if drop_id not in self.items:
                    raise CatalogError(f"Boss {boss.id}: unknown guaranteed drop '{drop_id}'")
        for character in self.characters.values():
            for item_id in character.starting_item_ids:
                if item_id not in self.items:
                    raise CatalogError(f"Character {character.id}: unknown starting item '{item_id}'")
        for biome in self.biomes.values():
            for boss_id in biome.boss_ids:
                if boss_id not in self.bosses:
                    raise CatalogError(f"Biome {biome.id}: unknown boss '{boss_id}'")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_item(self, item_id: str) -> ItemDefinition:
        if item_id not in self.items:
            raise ValueError(f"Unknown item: {item_id}")
        return self.items[item_id]

    def get_boss(self, boss_id: str) -> BossDefinition:
        if boss_id not in self.bosses:
            raise ValueError(f"Unknown boss: {boss_id}")
        return self.bosses[boss_id]

    def get_event(self, event_id: str) -> EventDefinition:
        if event_id not in self.events:
            raise ValueError(f"Unknown event: {event_id}")
        return self.events[event_id]

    def get_character(self, character_id: str) -> CharacterDefinition:
        if character_id not in self.characters:
            raise ValueError(f"Unknown character: {character_id}")
        return self.characters[character_id]

    def get_biome(self, biome_id: str) -> BiomeDefinition:
        if biome_id not in self.biomes:
            raise ValueError(f"Unknown biome: {biome_id}")
        return self.biomes[biome_id]

    @property
    def item_pool(self) -> List[ItemDefinition]:
        """Every item, in catalog order."""
        return list(self.items.values())

    def items_for_biome(self, biome_id: str) -> List[ItemDefinition]:
        """Items that can drop in a biome (unrestricted items included)."""
        return [i for i in self.items.values() if not i.biomes or biome_id in i.biomes]


def _read_records(path: Path) -> List[Dict[str, Any]]:
    if not path.exists():
        logger.debug("Catalog file %s missing, treating as empty", path)
        return []
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CatalogError(f"{path.name}: invalid JSON ({e})") from e
    if not isinstance(data, list):
        raise CatalogError(f"{path.name}: expected a JSON array of records")
    return data


def _index(records, parser: Callable[[Dict[str, Any]], Any], kind: str) -> Dict[str, Any]:
    indexed: Dict[str, Any] = {}
    for record in records:
        entry = parser(record)
        if entry.id in indexed:
            raise CatalogError(f"{kind}: duplicate id '{entry.id}'")
        indexed[entry.id] = entry
    return indexed


_default_catalog: Optional[Catalog] = None


def load_catalog(path: Union[str, Path, None] = None) -> Catalog:
    """
    Load a catalog directory.

    With no path, returns the bundled catalog (loaded once and shared).
    """
    global _default_catalog
    if path is not None:
        return Catalog.from_directory(path)
    if _default_catalog is None:
        _default_catalog = Catalog.from_directory(DEFAULT_DATA_DIR)
    return _default_catalog
