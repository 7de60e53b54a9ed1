"""
Game configuration.

Defaults live on GameConfig. load_config() reads a .env file (python-dotenv)
and applies LOOTORLOSE_* environment overrides on top:

    LOOTORLOSE_BOSS_INTERVAL      boss every N rounds (default 15)
    LOOTORLOSE_EVENT_CHANCE       flat event chance for every zone
    LOOTORLOSE_MIN_EVENT_ROUND    first round events can fire (default 6)
    LOOTORLOSE_DATA_DIR           catalog directory (default: bundled data)
    LOOTORLOSE_DEFAULT_CHARACTER  character id (default warrior)
    LOOTORLOSE_DEFAULT_BIOME      biome id (default crypt)
"""

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from dotenv import load_dotenv

from .generation.items import BOSS_ROUND_INTERVAL, DungeonZone


logger = logging.getLogger(__name__)

ENV_PREFIX = "LOOTORLOSE_"

DEFAULT_EVENT_CHANCES: Dict[DungeonZone, float] = {
    DungeonZone.TUTORIAL: 0.10,
    DungeonZone.STANDARD: 0.15,
    DungeonZone.DANGER: 0.20,
    DungeonZone.CHAOS: 0.30,
}


@dataclass(frozen=True)
class GameConfig:
    """Tunable rules of a run."""
    boss_round_interval: int = BOSS_ROUND_INTERVAL

    # Events
    event_chances: Dict[DungeonZone, float] = field(default_factory=lambda: dict(DEFAULT_EVENT_CHANCES))
    min_event_round: int = 6

    # Loot
    curse_damage: int = 10

    # Boss victory
    boss_victory_score: int = 500
    boss_victory_heal_percent: float = 0.25

    # Run setup
    default_character: str = "warrior"
    default_biome: str = "crypt"
    data_dir: Optional[str] = None

    def __post_init__(self):
        if self.boss_round_interval <= 0:
            raise ValueError("boss_round_interval must be positive")
        if self.min_event_round < 1:
            raise ValueError("min_event_round must be at least 1")
        for zone, chance in self.event_chances.items():
            if not 0.0 <= chance <= 1.0:
                raise ValueError(f"Event chance for {zone.value} must be in [0, 1], got {chance}")

    def event_chance(self, zone: DungeonZone) -> float:
        return self.event_chances.get(zone, 0.0)


def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}")


def _env_float(name: str) -> Optional[float]:
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}")


def load_config(env_file: Optional[str] = None, base: Optional[GameConfig] = None) -> GameConfig:
    """
    Build a GameConfig from defaults, a .env file and the environment.

    Args:
        env_file: Explicit .env path (default: search from the working directory)
        base: Config to override (default: GameConfig())
    """
    load_dotenv(env_file)
    config = base or GameConfig()
    overrides = {}

    interval = _env_int("BOSS_INTERVAL")
    if interval is not None:
        overrides["boss_round_interval"] = interval

    chance = _env_float("EVENT_CHANCE")
    if chance is not None:
        overrides["event_chances"] = {zone: chance for zone in DungeonZone}

    min_round = _env_int("MIN_EVENT_ROUND")
    if min_round is not None:
        overrides["min_event_round"] = min_round

    for key, attr in (("DATA_DIR", "data_dir"),
                      ("DEFAULT_CHARACTER", "default_character"),
                      ("DEFAULT_BIOME", "default_biome")):
        value = os.environ.get(ENV_PREFIX + key)
        if value:
            overrides[attr] = value

    if overrides:
        logger.debug("Config overrides from environment: %s", sorted(overrides))
        config = replace(config, **overrides)
    return config
