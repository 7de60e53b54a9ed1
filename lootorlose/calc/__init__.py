"""
Calculation utilities: synergies, boss combat, scoring.

All functions are pure; none of them touch a RunState.
"""

from .synergy import (
    SynergyType,
    SynergyResult,
    AntiSynergyResult,
    SynergyTotals,
    check_synergies,
    check_anti_synergies,
    calculate_synergy_totals,
)

from .combat import (
    CombatResult,
    calculate_combat,
    calculate_boss_hp,
    calculate_boss_attack,
    calculate_effective_damage,
    select_boss_for_round,
)

from .score import (
    ScoreBreakdown,
    calculate_run_score,
    get_streak_multiplier,
)
