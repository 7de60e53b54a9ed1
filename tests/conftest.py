"""
Shared pytest fixtures for the Loot or Lose test suite.

This module provides reusable fixtures for:
- RNG with known seeds
- The bundled content catalog
- Item, boss and event factories
- Fresh run states
"""

import os
import sys

import pytest

# Ensure project root is in path
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from lootorlose.calc.score import ScoreBreakdown
from lootorlose.content.bosses import BossDefinition, BossType
from lootorlose.content.catalog import load_catalog
from lootorlose.content.events import EventDefinition, EventKind
from lootorlose.content.items import ItemCategory, ItemDefinition, ItemInstance, ItemRarity
from lootorlose.game import RunResult
from lootorlose.state.rng import Random
from lootorlose.state.run import RunState


# =============================================================================
# RNG Fixtures
# =============================================================================


@pytest.fixture
def rng_seed_42():
    """RNG initialized with seed 42 for deterministic tests."""
    return Random(42)


@pytest.fixture
def rng_seed_12345():
    """RNG initialized with seed 12345 for deterministic tests."""
    return Random(12345)


# =============================================================================
# Catalog Fixtures
# =============================================================================


@pytest.fixture
def catalog():
    """The bundled content catalog."""
    return load_catalog()


# =============================================================================
# Factories
# =============================================================================


def build_item(item_id="test_item", category=ItemCategory.WEAPON, rarity=ItemRarity.COMMON, **kwargs):
    """ItemDefinition with sensible defaults."""
    return ItemDefinition(
        id=item_id,
        name=kwargs.pop("name", item_id.replace("_", " ").title()),
        category=category,
        rarity=rarity,
        **kwargs,
    )


@pytest.fixture
def make_item():
    """Factory for ItemDefinition objects."""
    return build_item


@pytest.fixture
def make_instance():
    """Factory for ItemInstance objects."""
    def _make(item_id="test_item", category=ItemCategory.WEAPON, rarity=ItemRarity.COMMON, **kwargs):
        return ItemInstance.from_definition(build_item(item_id, category, rarity, **kwargs))
    return _make


@pytest.fixture
def make_boss():
    """Factory for BossDefinition objects."""
    def _make(boss_id="test_boss", base_hp=100, hp_scaling=5, **kwargs):
        return BossDefinition(
            id=boss_id,
            name=kwargs.pop("name", "Test Boss"),
            boss_type=kwargs.pop("boss_type", BossType.SKELETON_KING),
            base_hp=base_hp,
            hp_scaling=hp_scaling,
            **kwargs,
        )
    return _make


@pytest.fixture
def make_event():
    """Factory for EventDefinition objects."""
    def _make(kind, event_id=None, **kwargs):
        return EventDefinition(
            id=event_id or kind.value.lower(),
            name=kwargs.pop("name", kind.value),
            kind=kind,
            **kwargs,
        )
    return _make


@pytest.fixture
def run_state():
    """Fresh run: 100/100 HP, five empty slots, seed 42."""
    return RunState(seed=42, hp=100, max_hp=100, capacity=5)


@pytest.fixture
def make_run_result():
    """Factory for finished-run results; items are given as instances."""
    def _make(score=0, items=(), survived=True, death_cause=None, **kwargs):
        fields = dict(
            seed=42,
            seed_string="16",
            character="warrior",
            biome="crypt",
            is_daily_run=False,
            score=ScoreBreakdown(total_score=score),
            rounds_completed=10,
            bosses_defeated=0,
            defeated_boss_ids=[],
            items_looted=0,
            items_left=0,
            looted_item_ids=[],
            final_inventory=[item.id for item in items],
            final_items=[item.to_dict() for item in items],
            death_cause=death_cause,
            survived=survived,
            hp_remaining=50 if survived else 0,
            gold=0,
        )
        fields.update(kwargs)
        return RunResult(**fields)
    return _make
