"""
Configuration Tests
"""

import pytest

from lootorlose.config import GameConfig, load_config
from lootorlose.generation.items import DungeonZone


ENV_KEYS = [
    "LOOTORLOSE_BOSS_INTERVAL",
    "LOOTORLOSE_EVENT_CHANCE",
    "LOOTORLOSE_MIN_EVENT_ROUND",
    "LOOTORLOSE_DATA_DIR",
    "LOOTORLOSE_DEFAULT_CHARACTER",
    "LOOTORLOSE_DEFAULT_BIOME",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Unset every LOOTORLOSE_* variable and remove any set during the test."""
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


class TestGameConfig:
    """Test defaults and validation."""

    def test_defaults(self):
        config = GameConfig()
        assert config.boss_round_interval == 15
        assert config.min_event_round == 6
        assert config.curse_damage == 10
        assert config.boss_victory_score == 500

    def test_event_chances_per_zone(self):
        config = GameConfig()
        assert config.event_chance(DungeonZone.TUTORIAL) == 0.10
        assert config.event_chance(DungeonZone.CHAOS) == 0.30

    def test_rejects_bad_interval(self):
        with pytest.raises(ValueError):
            GameConfig(boss_round_interval=0)

    def test_rejects_bad_chance(self):
        with pytest.raises(ValueError):
            GameConfig(event_chances={DungeonZone.TUTORIAL: 1.5})


class TestLoadConfig:
    """Test .env and environment overrides."""

    def test_no_overrides(self, clean_env, tmp_path):
        config = load_config(str(tmp_path / "missing.env"))
        assert config == GameConfig()

    def test_environment_overrides(self, clean_env, tmp_path):
        clean_env.setenv("LOOTORLOSE_BOSS_INTERVAL", "10")
        clean_env.setenv("LOOTORLOSE_EVENT_CHANCE", "0.5")
        clean_env.setenv("LOOTORLOSE_DEFAULT_BIOME", "volcano")
        config = load_config(str(tmp_path / "missing.env"))
        assert config.boss_round_interval == 10
        assert all(config.event_chance(zone) == 0.5 for zone in DungeonZone)
        assert config.default_biome == "volcano"

    def test_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("LOOTORLOSE_MIN_EVENT_ROUND=3\nLOOTORLOSE_DEFAULT_CHARACTER=rogue\n")
        config = load_config(str(env_file))
        assert config.min_event_round == 3
        assert config.default_character == "rogue"

    def test_malformed_value(self, clean_env, tmp_path):
        clean_env.setenv("LOOTORLOSE_BOSS_INTERVAL", "often")
        with pytest.raises(ValueError):
            load_config(str(tmp_path / "missing.env"))

    def test_out_of_range_value(self, clean_env, tmp_path):
        clean_env.setenv("LOOTORLOSE_EVENT_CHANCE", "2")
        with pytest.raises(ValueError):
            load_config(str(tmp_path / "missing.env"))
