"""
Event Handler - resolves random events.

Each event kind has one handler function; process_event() dispatches through
EVENT_HANDLERS. Handlers read the run state, take their random picks from the
run's stream, and report what should change as an EventOutcome. They do not
touch hp, gold or the inventory list themselves: the GameRunner applies every
outcome the same way, whatever the event kind.

The exceptions are Curse and Blacksmith, which modify the chosen inventory
item in place (the item stays in the inventory, only its stats change).

Event kinds:
- Merchant:       trade a random item for a higher-rarity one
- Altar:          sacrifice a random item for a buff
- Chest:          spend a key for a Rare/Legendary item, or take 20 damage
- Curse:          curse a random non-cursed item (halves its stats)
- WheelOfFortune: 40% item, 20% buff, 20% gold, 10% nothing, 10% damage
- Healer:         restore 30 HP
- Blacksmith:     +50% to one stat of a random item (at least +1)
- Trap:           15-30 damage
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, TYPE_CHECKING

from ..content.events import ALL_BUFFS, BuffType, EventDefinition, EventKind
from ..content.items import ItemCategory, ItemDefinition, ItemInstance, ItemRarity
from ..generation.selection import select_weighted

if TYPE_CHECKING:
    from ..state.run import RunState
    from ..state.rng import Random


logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

CHEST_TRAP_DAMAGE = 20
HEALER_HEAL_AMOUNT = 30
TRAP_MIN_DAMAGE = 15
TRAP_MAX_DAMAGE = 30

# Wheel of Fortune: cumulative roll thresholds out of 100
WHEEL_ITEM_BELOW = 40
WHEEL_BUFF_BELOW = 60
WHEEL_GOLD_BELOW = 80
WHEEL_NOTHING_BELOW = 90
WHEEL_GOLD_MIN = 50
WHEEL_GOLD_MAX = 150
WHEEL_DAMAGE_MIN = 10
WHEEL_DAMAGE_MAX = 30

CHEST_LOOT_RARITIES = frozenset({ItemRarity.RARE, ItemRarity.LEGENDARY})


# ============================================================================
# OUTCOME
# ============================================================================

@dataclass
class EventOutcome:
    """What an event did, for the runner to apply."""
    event_id: str
    kind: EventKind
    success: bool
    message_key: str

    items_gained: List[ItemInstance] = field(default_factory=list)
    # The exact inventory items to remove
    items_lost: List[ItemInstance] = field(default_factory=list)
    hp_change: int = 0
    gold_change: int = 0
    buff_gained: Optional[BuffType] = None

    # Set by Curse / Blacksmith for display
    item_modified: Optional[str] = None

    @property
    def items_lost_ids(self) -> List[str]:
        return [item.id for item in self.items_lost]


def _non_hazard(pool: Sequence[ItemDefinition]) -> List[ItemDefinition]:
    return [item for item in pool if item.category not in (ItemCategory.TRAP, ItemCategory.CURSE)]


def _random_buff(rng: 'Random') -> BuffType:
    return ALL_BUFFS[rng.random_index(len(ALL_BUFFS))]


# ============================================================================
# HANDLERS
# ============================================================================

def _handle_merchant(event: EventDefinition, run_state: 'RunState', rng: 'Random',
                     item_pool: Sequence[ItemDefinition]) -> EventOutcome:
    """Merchant: lose a random item, gain a non-hazard item of higher rarity (or any non-hazard)."""
    if not run_state.inventory:
        return EventOutcome(event.id, event.kind, False, "event_merchant_no_items")

    traded = rng.choice(run_state.inventory)

    candidates = [i for i in _non_hazard(item_pool) if i.rarity.rank > traded.rarity.rank]
    if not candidates:
        candidates = _non_hazard(item_pool)

    gained = rng.choice(candidates).instantiate() if candidates else None
    return EventOutcome(
        event.id, event.kind,
        success=gained is not None,
        message_key="event_merchant_trade_success" if gained else "event_merchant_trade_fail",
        items_gained=[gained] if gained else [],
        items_lost=[traded],
    )


def _handle_altar(event: EventDefinition, run_state: 'RunState', rng: 'Random',
                  item_pool: Sequence[ItemDefinition]) -> EventOutcome:
    """Altar: sacrifice a random item for a random buff."""
    if not run_state.inventory:
        return EventOutcome(event.id, event.kind, False, "event_altar_no_items")

    sacrificed = rng.choice(run_state.inventory)
    return EventOutcome(
        event.id, event.kind, True, "event_altar_sacrifice",
        items_lost=[sacrificed],
        buff_gained=_random_buff(rng),
    )


def _handle_chest(event: EventDefinition, run_state: 'RunState', rng: 'Random',
                  item_pool: Sequence[ItemDefinition]) -> EventOutcome:
    """Chest: a key opens it for Rare/Legendary loot; without one it bites."""
    key = next((i for i in run_state.inventory if i.category == ItemCategory.KEY), None)
    if key is None:
        return EventOutcome(
            event.id, event.kind, False, "event_chest_trapped",
            hp_change=-CHEST_TRAP_DAMAGE,
        )

    loot = [i for i in _non_hazard(item_pool) if i.rarity in CHEST_LOOT_RARITIES]
    gained = [rng.choice(loot).instantiate()] if loot else []
    return EventOutcome(
        event.id, event.kind, True, "event_chest_unlocked",
        items_gained=gained,
        items_lost=[key],
    )


def _handle_curse(event: EventDefinition, run_state: 'RunState', rng: 'Random',
                  item_pool: Sequence[ItemDefinition]) -> EventOutcome:
    """Curse: a random non-cursed item becomes cursed, halving its stats."""
    if not run_state.inventory:
        return EventOutcome(event.id, event.kind, False, "event_curse_no_items")

    cursable = [i for i in run_state.inventory if not i.is_cursed]
    if not cursable:
        return EventOutcome(event.id, event.kind, False, "event_curse_all_cursed")

    target = rng.choice(cursable)
    target.apply_curse()
    return EventOutcome(event.id, event.kind, False, "event_curse_applied", item_modified=target.id)


def _handle_wheel_of_fortune(event: EventDefinition, run_state: 'RunState', rng: 'Random',
                             item_pool: Sequence[ItemDefinition]) -> EventOutcome:
    """Wheel of Fortune: one roll out of 100 across five bands."""
    roll = rng.random_int(99)

    if roll < WHEEL_ITEM_BELOW:
        candidates = _non_hazard(item_pool)
        gained = [rng.choice(candidates).instantiate()] if candidates else []
        return EventOutcome(event.id, event.kind, True, "event_wheel_item", items_gained=gained)

    if roll < WHEEL_BUFF_BELOW:
        return EventOutcome(event.id, event.kind, True, "event_wheel_buff", buff_gained=_random_buff(rng))

    if roll < WHEEL_GOLD_BELOW:
        gold = rng.random_int_range(WHEEL_GOLD_MIN, WHEEL_GOLD_MAX)
        return EventOutcome(event.id, event.kind, True, "event_wheel_gold", gold_change=gold)

    if roll < WHEEL_NOTHING_BELOW:
        return EventOutcome(event.id, event.kind, True, "event_wheel_nothing")

    damage = rng.random_int_range(WHEEL_DAMAGE_MIN, WHEEL_DAMAGE_MAX)
    return EventOutcome(event.id, event.kind, False, "event_wheel_damage", hp_change=-damage)


def _handle_healer(event: EventDefinition, run_state: 'RunState', rng: 'Random',
                   item_pool: Sequence[ItemDefinition]) -> EventOutcome:
    return EventOutcome(event.id, event.kind, True, "event_healer_restore", hp_change=HEALER_HEAL_AMOUNT)


def _handle_blacksmith(event: EventDefinition, run_state: 'RunState', rng: 'Random',
                       item_pool: Sequence[ItemDefinition]) -> EventOutcome:
    """Blacksmith: +50% (min +1) to attack or defense of a random non-cursed item."""
    if not run_state.inventory:
        return EventOutcome(event.id, event.kind, False, "event_blacksmith_no_items")

    upgradeable = [
        i for i in run_state.inventory
        if not i.is_cursed and (i.attack > 0 or i.defense > 0)
    ]
    if not upgradeable:
        return EventOutcome(event.id, event.kind, False, "event_blacksmith_no_upgradeable")

    target = rng.choice(upgradeable)
    if target.attack > 0 and target.defense > 0:
        upgrade_attack = rng.random_index(2) == 0
    else:
        upgrade_attack = target.attack > 0

    if upgrade_attack:
        target.attack += max(target.attack // 2, 1)
    else:
        target.defense += max(target.defense // 2, 1)
    target.upgrades += 1

    return EventOutcome(event.id, event.kind, True, "event_blacksmith_upgrade", item_modified=target.id)


def _handle_trap(event: EventDefinition, run_state: 'RunState', rng: 'Random',
                 item_pool: Sequence[ItemDefinition]) -> EventOutcome:
    damage = rng.random_int_range(TRAP_MIN_DAMAGE, TRAP_MAX_DAMAGE)
    return EventOutcome(event.id, event.kind, False, "event_trap_triggered", hp_change=-damage)


EventHandlerFn = Callable[[EventDefinition, 'RunState', 'Random', Sequence[ItemDefinition]], EventOutcome]

EVENT_HANDLERS: Dict[EventKind, EventHandlerFn] = {
    EventKind.MERCHANT: _handle_merchant,
    EventKind.ALTAR: _handle_altar,
    EventKind.CHEST: _handle_chest,
    EventKind.CURSE: _handle_curse,
    EventKind.WHEEL_OF_FORTUNE: _handle_wheel_of_fortune,
    EventKind.HEALER: _handle_healer,
    EventKind.BLACKSMITH: _handle_blacksmith,
    EventKind.TRAP: _handle_trap,
}


# ============================================================================
# DISPATCH / SELECTION
# ============================================================================

def process_event(
    event: EventDefinition,
    run_state: 'RunState',
    rng: 'Random',
    item_pool: Optional[Sequence[ItemDefinition]] = None,
) -> EventOutcome:
    """
    Resolve an event against the current run state.

    Args:
        event: Event being resolved
        run_state: Current run (read; Curse/Blacksmith modify one item in place)
        rng: Random stream for every pick the event makes
        item_pool: Items that can be granted (merchant, chest, wheel)

    Returns:
        EventOutcome describing hp/gold/item/buff changes to apply
    """
    handler = EVENT_HANDLERS.get(event.kind)
    if handler is None:
        raise ValueError(f"Unknown event kind: {event.kind}")

    outcome = handler(event, run_state, rng, item_pool or [])
    logger.debug(
        "Event %s (%s): %s, hp %+d, gold %+d, gained %s, lost %s",
        event.id, event.kind.value, outcome.message_key, outcome.hp_change,
        outcome.gold_change, [i.id for i in outcome.items_gained], outcome.items_lost_ids,
    )
    return outcome


def select_event(
    events: Sequence[EventDefinition],
    round_num: int,
    biome: str,
    rng: 'Random',
) -> Optional[EventDefinition]:
    """
    Pick which event fires, weighted by probability.

    Only events whose min_round has been reached and whose biome list is
    empty or contains the active biome are eligible. All-zero weights fall
    back to a uniform pick.
    """
    eligible = [e for e in events if e.is_available(round_num, biome)]
    if not eligible:
        return None

    weights = [max(e.probability, 0.0) for e in eligible]
    if sum(weights) <= 0:
        return rng.choice(eligible)
    return select_weighted(eligible, weights, rng)
