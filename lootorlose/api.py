"""
Stable entry points for hosts that only need the rules.

    from lootorlose.api import generate_item, calculate_combat

Everything here is a pure function of its arguments (plus the RNG passed in)
except process_event, which may modify one inventory item in place for the
Curse and Blacksmith events.
"""

from .calc.combat import CombatResult, calculate_combat
from .calc.score import ScoreBreakdown, calculate_run_score
from .calc.synergy import AntiSynergyResult, SynergyResult, check_anti_synergies, check_synergies
from .generation.items import generate_item
from .handlers.event_handler import EventOutcome, process_event

__all__ = [
    "generate_item",
    "check_synergies",
    "check_anti_synergies",
    "calculate_combat",
    "process_event",
    "calculate_run_score",
    "SynergyResult",
    "AntiSynergyResult",
    "CombatResult",
    "EventOutcome",
    "ScoreBreakdown",
]
