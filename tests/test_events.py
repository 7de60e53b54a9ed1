"""
Event Handler Tests

Each handler reports its effects as an EventOutcome; only Curse and
Blacksmith touch an inventory item directly.
"""

import pytest

from lootorlose.content.events import BuffType, EventKind
from lootorlose.content.items import ItemCategory, ItemRarity
from lootorlose.handlers.event_handler import (
    CHEST_TRAP_DAMAGE,
    EVENT_HANDLERS,
    HEALER_HEAL_AMOUNT,
    process_event,
    select_event,
)
from lootorlose.state.rng import Random


@pytest.fixture
def pool(make_item):
    return [
        make_item("stick", rarity=ItemRarity.COMMON, attack=2),
        make_item("blade", rarity=ItemRarity.RARE, attack=20),
        make_item("crown", ItemCategory.ARTIFACT, ItemRarity.LEGENDARY, defense=10),
        make_item("curse_doll", ItemCategory.CURSE, ItemRarity.LEGENDARY, is_cursed=True),
    ]


class TestDispatch:
    """Test the handler table."""

    def test_every_kind_has_a_handler(self):
        assert set(EVENT_HANDLERS) == set(EventKind)

    def test_unknown_kind_raises(self, make_event, run_state):
        event = make_event(EventKind.HEALER)
        object.__setattr__(event, "kind", "Bogus")
        with pytest.raises(ValueError):
            process_event(event, run_state, Random(1))


class TestMerchant:
    """Test the merchant trade."""

    def test_no_items(self, make_event, run_state, pool):
        outcome = process_event(make_event(EventKind.MERCHANT), run_state, Random(1), pool)
        assert not outcome.success
        assert outcome.message_key == "event_merchant_no_items"

    def test_trades_for_higher_rarity_non_hazard(self, make_event, run_state, make_instance, pool):
        stick = make_instance("stick", attack=2)
        run_state.inventory.append(stick)
        outcome = process_event(make_event(EventKind.MERCHANT), run_state, Random(1), pool)
        assert outcome.success
        assert outcome.items_lost == [stick]
        assert outcome.items_gained[0].id in ("blade", "crown")

    def test_does_not_modify_inventory(self, make_event, run_state, make_instance, pool):
        run_state.inventory.append(make_instance("stick"))
        process_event(make_event(EventKind.MERCHANT), run_state, Random(1), pool)
        assert run_state.get_inventory_ids() == ["stick"]


class TestAltar:
    """Test the altar sacrifice."""

    def test_sacrifice_for_buff(self, make_event, run_state, make_instance):
        item = make_instance("offering")
        run_state.inventory.append(item)
        outcome = process_event(make_event(EventKind.ALTAR), run_state, Random(3))
        assert outcome.items_lost == [item]
        assert isinstance(outcome.buff_gained, BuffType)

    def test_empty_inventory(self, make_event, run_state):
        outcome = process_event(make_event(EventKind.ALTAR), run_state, Random(3))
        assert outcome.message_key == "event_altar_no_items"
        assert outcome.buff_gained is None


class TestChest:
    """Test the locked chest."""

    def test_without_key_deals_damage(self, make_event, run_state, pool):
        outcome = process_event(make_event(EventKind.CHEST), run_state, Random(1), pool)
        assert not outcome.success
        assert outcome.hp_change == -CHEST_TRAP_DAMAGE

    def test_key_opens_for_rare_loot(self, make_event, run_state, make_instance, pool):
        key = make_instance("bronze_key", ItemCategory.KEY)
        run_state.inventory.append(key)
        outcome = process_event(make_event(EventKind.CHEST), run_state, Random(1), pool)
        assert outcome.success
        assert outcome.items_lost == [key]
        assert outcome.items_gained[0].rarity in (ItemRarity.RARE, ItemRarity.LEGENDARY)
        assert not outcome.items_gained[0].is_hazard


class TestCurse:
    """Test the curse event."""

    def test_curses_item_in_place(self, make_event, run_state, make_instance):
        sword = make_instance("sword", attack=10, defense=5)
        run_state.inventory.append(sword)
        outcome = process_event(make_event(EventKind.CURSE), run_state, Random(1))
        assert outcome.message_key == "event_curse_applied"
        assert outcome.item_modified == "sword"
        assert sword.is_cursed
        assert sword.attack == 5
        assert sword.defense == 2

    def test_all_cursed(self, make_event, run_state, make_instance):
        run_state.inventory.append(make_instance("doll", is_cursed=True))
        outcome = process_event(make_event(EventKind.CURSE), run_state, Random(1))
        assert outcome.message_key == "event_curse_all_cursed"


class TestWheelOfFortune:
    """Test the wheel's outcome bands."""

    def test_all_bands_reachable(self, make_event, run_state, pool):
        keys = set()
        rng = Random(42)
        for _ in range(500):
            keys.add(process_event(make_event(EventKind.WHEEL_OF_FORTUNE), run_state, rng, pool).message_key)
        assert keys == {
            "event_wheel_item", "event_wheel_buff", "event_wheel_gold",
            "event_wheel_nothing", "event_wheel_damage",
        }

    def test_amounts_in_range(self, make_event, run_state, pool):
        rng = Random(7)
        for _ in range(300):
            outcome = process_event(make_event(EventKind.WHEEL_OF_FORTUNE), run_state, rng, pool)
            if outcome.message_key == "event_wheel_gold":
                assert 50 <= outcome.gold_change <= 150
            elif outcome.message_key == "event_wheel_damage":
                assert -30 <= outcome.hp_change <= -10
            elif outcome.message_key == "event_wheel_item":
                assert not outcome.items_gained[0].is_hazard


class TestSimpleEvents:
    """Test healer, blacksmith and trap."""

    def test_healer(self, make_event, run_state):
        outcome = process_event(make_event(EventKind.HEALER), run_state, Random(1))
        assert outcome.hp_change == HEALER_HEAL_AMOUNT

    def test_trap_damage_range(self, make_event, run_state):
        rng = Random(11)
        for _ in range(200):
            outcome = process_event(make_event(EventKind.TRAP), run_state, rng)
            assert -30 <= outcome.hp_change <= -15

    def test_blacksmith_upgrades(self, make_event, run_state, make_instance):
        sword = make_instance("sword", attack=10)
        run_state.inventory.append(sword)
        outcome = process_event(make_event(EventKind.BLACKSMITH), run_state, Random(1))
        assert outcome.success
        assert sword.attack == 15
        assert sword.upgrades == 1

    def test_blacksmith_minimum_plus_one(self, make_event, run_state, make_instance):
        shield = make_instance("shield", ItemCategory.DEFENSE, defense=1)
        run_state.inventory.append(shield)
        process_event(make_event(EventKind.BLACKSMITH), run_state, Random(1))
        assert shield.defense == 2

    def test_blacksmith_skips_cursed(self, make_event, run_state, make_instance):
        run_state.inventory.append(make_instance("doll", attack=10, is_cursed=True))
        outcome = process_event(make_event(EventKind.BLACKSMITH), run_state, Random(1))
        assert not outcome.success
        assert outcome.message_key == "event_blacksmith_no_upgradeable"


class TestSelectEvent:
    """Test event selection."""

    def test_min_round_filter(self, make_event):
        events = [make_event(EventKind.CURSE, min_round=10)]
        assert select_event(events, 6, "crypt", Random(1)) is None
        assert select_event(events, 10, "crypt", Random(1)).kind == EventKind.CURSE

    def test_biome_filter(self, make_event):
        events = [make_event(EventKind.TRAP, "lava", biomes=("volcano",)), make_event(EventKind.HEALER)]
        rng = Random(2)
        for _ in range(100):
            assert select_event(events, 20, "crypt", rng).id == "healer"

    def test_zero_weights_fall_back_to_uniform(self, make_event):
        events = [make_event(EventKind.HEALER, probability=0.0), make_event(EventKind.TRAP, probability=0.0)]
        rng = Random(4)
        picked = {select_event(events, 20, "crypt", rng).id for _ in range(100)}
        assert picked == {"healer", "trap"}
