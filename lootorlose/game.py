"""
Game Runner - drives a Loot or Lose run from first round to death.

The GameRunner owns one RunState and is the only thing that mutates it. The
host (UI, bot, test) calls:

    runner = GameRunner(seed="LOOT4EVER", character="warrior", biome="crypt")
    while not runner.game_over:
        round_result = runner.next_round()
        if runner.phase == GamePhase.AWAITING_DECISION:
            runner.make_decision(Decision.LOOT)       # or LEAVE / TIMEOUT
    print(runner.result.final_score)

Each round is one of:
- Boss round (every 15th): resolved immediately by formula
- Event round (from round 6, per-zone chance): resolved immediately
- Item round: an item is offered and the runner waits for a decision

Looting into a full inventory is rejected unless the caller names inventory
positions to discard. After every change to the inventory, item effects
(heal, curse damage, single-use consumption) and anti-synergy damage are
applied, then death is checked. A fatal anti-synergy or HP <= 0 ends the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from .calc.combat import CombatResult, calculate_combat, select_boss_for_round
from .calc.score import ScoreBreakdown, calculate_run_score
from .calc.synergy import AntiSynergyResult, SynergyResult, check_anti_synergies, check_synergies
from .config import GameConfig
from .content.bosses import BossDefinition
from .content.catalog import Catalog, load_catalog
from .content.events import EventDefinition
from .content.items import ItemCategory, ItemInstance, ItemRarity
from .generation.items import DungeonZone, generate_item, is_boss_round
from .handlers.event_handler import EventOutcome, process_event, select_event
from .state.run import (
    DEATH_CAUSE_CURSE,
    DEATH_CAUSE_ENDED,
    DEATH_CAUSE_HP,
    RunState,
    create_run,
)


logger = logging.getLogger(__name__)


class GamePhase(Enum):
    """Current phase of the run."""
    AWAITING_ROUND = auto()      # Ready for next_round()
    AWAITING_DECISION = auto()   # Item offered, waiting for loot/leave/timeout
    AWAITING_DISCARD = auto()    # Loot rejected, inventory full, discard needed
    RUN_COMPLETE = auto()        # Dead or ended


class Decision(Enum):
    LOOT = "loot"
    LEAVE = "leave"
    TIMEOUT = "timeout"


class RoundKind(Enum):
    ITEM = "item"
    BOSS = "boss"
    EVENT = "event"
    SKIPPED = "skipped"          # Nothing eligible to offer


# =============================================================================
# Result Records
# =============================================================================

@dataclass
class RoundResult:
    """What happened when a round started."""
    round: int
    zone: DungeonZone
    kind: RoundKind
    item: Optional[ItemInstance] = None
    boss_id: Optional[str] = None
    combat: Optional[CombatResult] = None
    event_id: Optional[str] = None
    event: Optional[EventOutcome] = None
    hp_change: int = 0
    items_gained: List[str] = field(default_factory=list)
    items_skipped: List[str] = field(default_factory=list)   # Did not fit
    anti_synergies: List[AntiSynergyResult] = field(default_factory=list)
    run_over: bool = False


@dataclass
class DecisionResult:
    """Outcome of a loot/leave/timeout decision."""
    decision: Decision
    item_id: str
    accepted: bool
    reason: Optional[str] = None
    requires_discard: bool = False
    discarded_ids: List[str] = field(default_factory=list)
    hp_change: int = 0
    consumed: bool = False
    synergies: List[SynergyResult] = field(default_factory=list)
    anti_synergies: List[AntiSynergyResult] = field(default_factory=list)
    run_over: bool = False


@dataclass
class DecisionLogEntry:
    """Record of a decision made during the run."""
    round: int
    phase: GamePhase
    decision: Decision
    item_id: str
    accepted: bool
    discarded_ids: List[str]
    state_snapshot: Dict[str, Any]


@dataclass
class RunResult:
    """End-of-run snapshot, computed once when the run ends."""
    seed: int
    seed_string: str
    character: str
    biome: str
    is_daily_run: bool
    score: ScoreBreakdown
    rounds_completed: int
    bosses_defeated: int
    defeated_boss_ids: List[str]
    items_looted: int
    items_left: int
    looted_item_ids: List[str]
    final_inventory: List[str]
    final_items: List[Dict[str, Any]]
    death_cause: Optional[str]
    survived: bool
    hp_remaining: int
    gold: int

    @property
    def final_score(self) -> int:
        return self.score.total_score

    @property
    def cursed_items_held(self) -> int:
        return sum(1 for item in self.final_items if item["is_cursed"])

    @property
    def weapons_held(self) -> int:
        return sum(1 for item in self.final_items if item["category"] == ItemCategory.WEAPON.value)

    @property
    def has_legendary(self) -> bool:
        return any(item["rarity"] == ItemRarity.LEGENDARY.value for item in self.final_items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed_string,
            "character": self.character,
            "biome": self.biome,
            "is_daily_run": self.is_daily_run,
            "final_score": self.final_score,
            "score": self.score.to_dict(),
            "rounds_completed": self.rounds_completed,
            "bosses_defeated": self.bosses_defeated,
            "defeated_boss_ids": list(self.defeated_boss_ids),
            "items_looted": self.items_looted,
            "items_left": self.items_left,
            "final_inventory": list(self.final_inventory),
            "death_cause": self.death_cause,
            "survived": self.survived,
            "hp_remaining": self.hp_remaining,
            "gold": self.gold,
        }


# =============================================================================
# Game Runner
# =============================================================================

class GameRunner:
    """
    Run state machine for one Loot or Lose run.

    Args:
        seed: Seed string, numeric seed, or None for a random run
        character: Character id (default from config)
        biome: Biome id (default from config)
        catalog: Content catalog (default: bundled data, or config.data_dir)
        config: Game rules
        streak_days: Daily streak used for the score multiplier at run end
        is_daily_run: Whether this is the shared daily challenge
    """

    def __init__(
        self,
        seed: Union[str, int, None] = None,
        character: Optional[str] = None,
        biome: Optional[str] = None,
        catalog: Optional[Catalog] = None,
        config: Optional[GameConfig] = None,
        streak_days: int = 0,
        is_daily_run: bool = False,
    ):
        self.config = config or GameConfig()
        self.catalog = catalog or load_catalog(self.config.data_dir)
        self.streak_days = streak_days

        character_def = self.catalog.get_character(character or self.config.default_character)
        biome_def = self.catalog.get_biome(biome or self.config.default_biome)

        starting_items = [
            self.catalog.get_item(item_id).instantiate()
            for item_id in character_def.starting_item_ids
        ]
        self.run_state: RunState = create_run(
            character_def, biome_def, seed,
            starting_items=starting_items,
            is_daily_run=is_daily_run,
        )

        # Item pool for event rewards: what can drop in this biome
        self.event_item_pool = self.catalog.items_for_biome(biome_def.id)

        self.phase = GamePhase.AWAITING_ROUND
        self.pending_item: Optional[ItemInstance] = None
        self.round_log: List[RoundResult] = []
        self.decision_log: List[DecisionLogEntry] = []
        self.looted_item_ids: List[str] = []
        self.result: Optional[RunResult] = None

        logger.debug(
            "New run: seed=%s character=%s biome=%s hp=%d slots=%d",
            self.run_state.seed_string, character_def.id, biome_def.id,
            self.run_state.hp, self.run_state.capacity,
        )

    @property
    def game_over(self) -> bool:
        return self.phase == GamePhase.RUN_COMPLETE

    # =========================================================================
    # Rounds
    # =========================================================================

    def next_round(self) -> RoundResult:
        """Advance to the next round and resolve or present it."""
        if self.game_over:
            raise RuntimeError("Run is over")
        if self.phase != GamePhase.AWAITING_ROUND:
            raise RuntimeError(f"Cannot start a round while {self.phase.name}")

        rs = self.run_state
        rs.advance_round()

        if is_boss_round(rs.round, self.config.boss_round_interval):
            boss = select_boss_for_round(list(self.catalog.bosses.values()), rs.round, rs.biome, rs.rng)
            if boss is not None:
                return self._record_round(self._resolve_boss(boss))
            logger.debug("Round %d: no eligible boss, offering an item instead", rs.round)

        elif rs.round >= self.config.min_event_round and rs.rng.random_boolean(
            self.config.event_chance(rs.zone)
        ):
            event = select_event(list(self.catalog.events.values()), rs.round, rs.biome, rs.rng)
            if event is not None:
                return self._record_round(self._resolve_event(event))
            logger.debug("Round %d: no eligible event, offering an item instead", rs.round)

        return self._record_round(self._offer_item())

    def _record_round(self, result: RoundResult) -> RoundResult:
        result.run_over = self.game_over
        self.round_log.append(result)
        return result

    def _offer_item(self) -> RoundResult:
        rs = self.run_state
        item = generate_item(self.catalog.item_pool, rs.round, rs.biome, rs.zone, rs.rng)
        if item is None:
            return RoundResult(rs.round, rs.zone, RoundKind.SKIPPED)

        self.pending_item = item
        self.phase = GamePhase.AWAITING_DECISION
        return RoundResult(rs.round, rs.zone, RoundKind.ITEM, item=item)

    def _resolve_boss(self, boss: BossDefinition) -> RoundResult:
        rs = self.run_state
        hp_before = rs.hp

        combat = calculate_combat(boss, rs.inventory, check_synergies(rs.inventory), rs.round)
        rs.damage(combat.damage_taken)

        gained: List[str] = []
        skipped: List[str] = []
        anti: List[AntiSynergyResult] = []
        if combat.player_won:
            rs.bosses_defeated += 1
            rs.defeated_boss_ids.append(boss.id)
            rs.score += self.config.boss_victory_score

        # The boss hit lands first; a player it kills gets no heal and no drops
        if combat.player_won and rs.hp > 0:
            rs.heal(int(rs.max_hp * self.config.boss_victory_heal_percent))

            for drop_id in boss.guaranteed_drop_ids:
                drop = self.catalog.get_item(drop_id).instantiate()
                if self._receive_item(drop):
                    gained.append(drop.id)
                    rs.items_looted += 1
                    self.looted_item_ids.append(drop.id)
                else:
                    skipped.append(drop.id)
            if gained:
                anti = self._apply_anti_synergies()

        logger.debug(
            "Round %d boss %s: %s, hp %d -> %d",
            rs.round, boss.id, "victory" if combat.player_won else "defeat", hp_before, rs.hp,
        )
        self._check_death()
        return RoundResult(
            rs.round, rs.zone, RoundKind.BOSS,
            boss_id=boss.id,
            combat=combat,
            hp_change=rs.hp - hp_before,
            items_gained=gained,
            items_skipped=skipped,
            anti_synergies=anti,
        )

    def _resolve_event(self, event: EventDefinition) -> RoundResult:
        rs = self.run_state
        hp_before = rs.hp
        rs.events_seen += 1

        outcome = process_event(event, rs, rs.rng, self.event_item_pool)

        for lost in outcome.items_lost:
            self._remove_instance(lost)
        rs.apply_hp_change(outcome.hp_change)
        rs.add_gold(outcome.gold_change)
        if outcome.buff_gained is not None:
            rs.active_buffs.append(outcome.buff_gained)

        gained: List[str] = []
        skipped: List[str] = []
        for item in outcome.items_gained:
            if self._receive_item(item):
                gained.append(item.id)
            else:
                skipped.append(item.id)
        anti = self._apply_anti_synergies() if gained else []

        self._check_death()
        return RoundResult(
            rs.round, rs.zone, RoundKind.EVENT,
            event_id=event.id,
            event=outcome,
            hp_change=rs.hp - hp_before,
            items_gained=gained,
            items_skipped=skipped,
            anti_synergies=anti,
        )

    # =========================================================================
    # Decisions
    # =========================================================================

    def make_decision(
        self,
        decision: Union[Decision, str],
        discard_indices: Optional[Sequence[int]] = None,
    ) -> DecisionResult:
        """
        Resolve the offered item.

        Args:
            decision: LOOT, LEAVE or TIMEOUT
            discard_indices: Inventory positions to drop before looting. Needed
                when the item does not fit; a rejected loot changes nothing.

        Raises:
            RuntimeError: the run is over
            ValueError: no item is waiting for a decision
        """
        if self.game_over:
            raise RuntimeError("Run is over")
        if self.pending_item is None:
            raise ValueError("No item is waiting for a decision")

        decision = Decision(decision)
        item = self.pending_item

        if decision in (Decision.LEAVE, Decision.TIMEOUT):
            self.run_state.items_left += 1
            result = DecisionResult(decision, item.id, accepted=True)
            self._close_decision(result, [])
            return result

        return self._loot(item, discard_indices or [])

    def _loot(self, item: ItemInstance, discard_indices: Sequence[int]) -> DecisionResult:
        rs = self.run_state
        discards = sorted(set(discard_indices))

        if any(idx < 0 or idx >= len(rs.inventory) for idx in discards):
            return self._reject(item, "invalid_discard")

        freed = sum(rs.inventory[idx].slot_size for idx in discards)
        if item.slot_size > rs.free_slots + freed:
            return self._reject(item, "inventory_full")

        hp_before = rs.hp
        discarded = [rs.inventory[idx] for idx in discards]
        for idx in reversed(discards):
            rs.remove_item(idx)

        self._receive_item(item)
        rs.items_looted += 1
        self.looted_item_ids.append(item.id)
        anti = self._apply_anti_synergies()

        result = DecisionResult(
            Decision.LOOT, item.id,
            accepted=True,
            discarded_ids=[d.id for d in discarded],
            hp_change=rs.hp - hp_before,
            consumed=item.is_consumable,
            synergies=check_synergies(rs.inventory),
            anti_synergies=anti,
        )
        logger.debug("Round %d: looted %s (discarded %s)", rs.round, item.id, result.discarded_ids)
        self._close_decision(result, result.discarded_ids)
        self._check_death()
        result.run_over = self.game_over
        return result

    def _reject(self, item: ItemInstance, reason: str) -> DecisionResult:
        self.phase = GamePhase.AWAITING_DISCARD
        result = DecisionResult(
            Decision.LOOT, item.id,
            accepted=False,
            reason=reason,
            requires_discard=True,
        )
        self._log_decision(result, [])
        return result

    def _close_decision(self, result: DecisionResult, discarded_ids: List[str]):
        self._log_decision(result, discarded_ids)
        self.pending_item = None
        self.phase = GamePhase.AWAITING_ROUND

    def _log_decision(self, result: DecisionResult, discarded_ids: List[str]):
        rs = self.run_state
        self.decision_log.append(DecisionLogEntry(
            round=rs.round,
            phase=self.phase,
            decision=result.decision,
            item_id=result.item_id,
            accepted=result.accepted,
            discarded_ids=list(discarded_ids),
            state_snapshot={
                "hp": rs.hp,
                "used_slots": rs.used_slots,
                "capacity": rs.capacity,
                "inventory": rs.get_inventory_ids(),
            },
        ))

    # =========================================================================
    # Inventory Effects
    # =========================================================================

    def _receive_item(self, item: ItemInstance) -> bool:
        """
        Put an item into the inventory and apply its on-entry effects.

        Heal items restore HP, cursed items deal curse damage, and single-use
        items are removed again right away. Returns False if it did not fit.
        """
        rs = self.run_state
        if not rs.add_item(item):
            return False

        if item.heal > 0:
            rs.heal(item.heal)
        if item.is_cursed:
            rs.damage(self.config.curse_damage)
        if item.is_consumable:
            self._remove_instance(item)
        return True

    def _remove_instance(self, item: ItemInstance) -> bool:
        inventory = self.run_state.inventory
        for idx, held in enumerate(inventory):
            if held is item:
                inventory.pop(idx)
                return True
        return self.run_state.remove_item_by_id(item.id) is not None

    def _apply_anti_synergies(self) -> List[AntiSynergyResult]:
        rs = self.run_state
        conflicts = check_anti_synergies(rs.inventory)
        damage = sum(c.damage for c in conflicts)
        if damage > 0:
            rs.damage(damage)
            logger.debug("Anti-synergy damage %d (%d conflicts)", damage, len(conflicts))
        if any(c.is_fatal for c in conflicts):
            rs.hp = 0
        return conflicts

    # =========================================================================
    # Run End
    # =========================================================================

    def _check_death(self) -> bool:
        rs = self.run_state
        if any(c.is_fatal for c in check_anti_synergies(rs.inventory)):
            self._finish(DEATH_CAUSE_CURSE)
            return True
        if rs.hp <= 0:
            self._finish(DEATH_CAUSE_HP)
            return True
        return False

    def end_run(self, cause: str = DEATH_CAUSE_ENDED) -> RunResult:
        """
        End the run now. The default cause means the player walked out alive;
        a death cause ends it as a death. A finished run is left as it is.
        """
        if cause not in (DEATH_CAUSE_ENDED, DEATH_CAUSE_HP, DEATH_CAUSE_CURSE):
            raise ValueError(f"Unknown end cause: {cause}")
        if not self.game_over:
            self._finish(cause)
        return self.result

    def _finish(self, cause: str):
        rs = self.run_state
        survived = cause == DEATH_CAUSE_ENDED
        if survived:
            rs.death_cause = None
        else:
            rs.kill(cause)

        self.pending_item = None
        self.phase = GamePhase.RUN_COMPLETE

        breakdown = calculate_run_score(
            rs.round, rs.bosses_defeated, rs.inventory,
            check_synergies(rs.inventory), self.streak_days,
        )
        rs.score = breakdown.total_score

        self.result = RunResult(
            seed=rs.seed,
            seed_string=rs.seed_string,
            character=rs.character_id,
            biome=rs.biome,
            is_daily_run=rs.is_daily_run,
            score=breakdown,
            rounds_completed=rs.round,
            bosses_defeated=rs.bosses_defeated,
            defeated_boss_ids=list(rs.defeated_boss_ids),
            items_looted=rs.items_looted,
            items_left=rs.items_left,
            looted_item_ids=list(self.looted_item_ids),
            final_inventory=rs.get_inventory_ids(),
            final_items=[item.to_dict() for item in rs.inventory],
            death_cause=rs.death_cause,
            survived=survived,
            hp_remaining=rs.hp,
            gold=rs.gold,
        )
        logger.info(
            "Run over at round %d (%s): score %d",
            rs.round, rs.death_cause or "ended", breakdown.total_score,
        )

    # =========================================================================
    # Statistics
    # =========================================================================

    def get_run_statistics(self) -> Dict[str, Any]:
        """Statistics for the current run."""
        rs = self.run_state
        kinds = [r.kind for r in self.round_log]
        return {
            "seed": rs.seed_string,
            "character": rs.character_id,
            "biome": rs.biome,
            "round": rs.round,
            "zone": rs.zone.value,
            "alive": rs.alive,
            "hp": rs.hp,
            "max_hp": rs.max_hp,
            "gold": rs.gold,
            "score": rs.score,
            "bosses_defeated": rs.bosses_defeated,
            "items_looted": rs.items_looted,
            "items_left": rs.items_left,
            "events_seen": kinds.count(RoundKind.EVENT),
            "boss_rounds": kinds.count(RoundKind.BOSS),
            "skipped_rounds": kinds.count(RoundKind.SKIPPED),
            "decisions_made": len(self.decision_log),
            "rng_counter": rs.rng.counter,
        }


# =============================================================================
# Headless Runs
# =============================================================================

DecisionFn = Callable[[RunState, ItemInstance], Union[Decision, Tuple[Decision, List[int]]]]


def apply_policy(runner: GameRunner, decision_fn: DecisionFn) -> DecisionResult:
    """
    Ask a decision function about the pending item and apply its answer.

    The function returns a Decision or (Decision, discard_indices). A rejected
    loot (inventory full, no usable discard) is turned into LEAVE.
    """
    choice = decision_fn(runner.run_state, runner.pending_item)
    if isinstance(choice, tuple):
        decision, discards = choice
    else:
        decision, discards = choice, None

    result = runner.make_decision(decision, discards)
    if not result.accepted:
        result = runner.make_decision(Decision.LEAVE)
    return result


def run_headless(
    seed: Union[str, int, None],
    decision_fn: Optional[DecisionFn] = None,
    character: Optional[str] = None,
    biome: Optional[str] = None,
    catalog: Optional[Catalog] = None,
    config: Optional[GameConfig] = None,
    streak_days: int = 0,
    max_rounds: int = 1000,
) -> RunResult:
    """
    Play a complete run with a decision function.

    Args:
        seed: Run seed
        decision_fn: Callable(run_state, item) -> Decision or (Decision, discard_indices).
                     If None, always loots.
        max_rounds: Safety limit; the run is ended voluntarily when reached

    Decisions go through apply_policy().
    """
    if decision_fn is None:
        decision_fn = lambda state, item: Decision.LOOT

    runner = GameRunner(
        seed=seed, character=character, biome=biome,
        catalog=catalog, config=config, streak_days=streak_days,
    )

    while not runner.game_over and runner.run_state.round < max_rounds:
        runner.next_round()
        if runner.phase != GamePhase.AWAITING_DECISION:
            continue

        apply_policy(runner, decision_fn)

    return runner.end_run()
