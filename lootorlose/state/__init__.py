"""
State module - run state and RNG.

Contains:
- RNG system (XorShift128, seed strings, daily seeds)
- Run state tracking (hp, inventory, round, counters)
"""

# RNG System
from .rng import XorShift128, Random, seed_to_long, long_to_seed, daily_seed, random_seed

# Run State Tracking
from .run import (
    RunState,
    create_run,
    DEATH_CAUSE_HP,
    DEATH_CAUSE_CURSE,
    DEATH_CAUSE_ENDED,
)
