"""
Event Definitions.

Random events replace the item draw on some rounds. Each event kind has one
handler in handlers/event_handler.py; the definition only carries the data
used to pick an event (weight, earliest round, biome restriction).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class EventKind(Enum):
    MERCHANT = "Merchant"
    ALTAR = "Altar"
    CHEST = "Chest"
    CURSE = "Curse"
    WHEEL_OF_FORTUNE = "WheelOfFortune"
    HEALER = "Healer"
    BLACKSMITH = "Blacksmith"
    TRAP = "Trap"


class BuffType(Enum):
    """Buffs granted by altars and the wheel."""
    DAMAGE_BOOST = "DamageBoost"
    DEFENSE_BOOST = "DefenseBoost"
    HEALTH_BOOST = "HealthBoost"
    LUCK_BOOST = "LuckBoost"
    SPEED_BOOST = "SpeedBoost"


ALL_BUFFS = tuple(BuffType)


@dataclass(frozen=True)
class EventDefinition:
    """An immutable event catalog entry."""
    id: str
    name: str
    kind: EventKind
    probability: float = 0.1  # Relative selection weight
    min_round: int = 1
    biomes: Tuple[str, ...] = ()  # Empty = every biome

    def is_available(self, round_num: int, biome: str) -> bool:
        if round_num < self.min_round:
            return False
        return not self.biomes or biome in self.biomes
