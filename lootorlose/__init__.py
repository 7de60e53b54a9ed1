"""
Loot or Lose Engine

Deterministic simulation of Loot or Lose runs: each round offers an item to
loot or leave, every 15th round is a boss, and random events shake up the
inventory in between. A run ends when HP hits zero or two cursed items clash.

Core subsystems:
- state: RNG (XorShift128), run state
- content: Items, bosses, events, characters, biomes (JSON catalog)
- generation: Weighted selection, item drops per zone and biome
- calc: Synergies, boss combat, scoring
- handlers: Event resolution
- analysis: Drop odds and batch statistics (numpy)

Usage:
    from lootorlose import GameRunner, GamePhase, Decision

    runner = GameRunner(seed="LOOT4EVER", character="warrior", biome="crypt")
    while not runner.game_over:
        runner.next_round()
        if runner.phase == GamePhase.AWAITING_DECISION:
            runner.make_decision(Decision.LOOT)
    print(runner.result.final_score)
"""

__version__ = "0.1.0"

# RNG System
from .state.rng import XorShift128, Random, seed_to_long, long_to_seed, daily_seed

# Content
from .content.items import ItemCategory, ItemRarity, ItemDefinition, ItemInstance
from .content.catalog import Catalog, CatalogError, load_catalog

# Rules
from .generation.items import DungeonZone, generate_item, get_zone_for_round, is_boss_round
from .calc.synergy import check_synergies, check_anti_synergies
from .calc.combat import calculate_combat
from .calc.score import ScoreBreakdown, calculate_run_score
from .handlers.event_handler import process_event

# Run State
from .state.run import RunState, create_run
from .config import GameConfig, load_config

# Game Runner
from .game import (
    GameRunner,
    GamePhase,
    Decision,
    RoundKind,
    RoundResult,
    DecisionResult,
    RunResult,
    apply_policy,
    run_headless,
)

# Progression
from .progression import PlayerProgress, record_run, calculate_unlocks, check_achievements
