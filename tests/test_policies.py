"""
Policy Tests
"""

from lootorlose.content.items import ItemCategory, ItemRarity
from lootorlose.game import Decision
from lootorlose.policies import POLICIES, always_leave, always_loot, greedy, item_value, timeout


class TestSimplePolicies:

    def test_fixed_answers(self, run_state, make_instance):
        item = make_instance()
        assert always_loot(run_state, item) == Decision.LOOT
        assert always_leave(run_state, item) == Decision.LEAVE
        assert timeout(run_state, item) == Decision.TIMEOUT

    def test_registry(self):
        assert set(POLICIES) == {"loot", "leave", "timeout", "greedy"}


class TestItemValue:

    def test_stats_per_slot(self, make_instance):
        assert item_value(make_instance("bow", attack=10, slot_size=2)) == 5.0
        assert item_value(make_instance("axe", rarity=ItemRarity.RARE, attack=10)) == 15.0

    def test_hazards_and_curses_negative(self, make_instance):
        assert item_value(make_instance("spikes", ItemCategory.TRAP)) < 0
        assert item_value(make_instance("blade", attack=50, is_cursed=True)) < 0


class TestGreedy:
    """Test the greedy policy."""

    def test_loots_when_room(self, run_state, make_instance):
        assert greedy(run_state, make_instance("sword", attack=5)) == Decision.LOOT

    def test_leaves_hazards_and_curses(self, run_state, make_instance):
        assert greedy(run_state, make_instance("spikes", ItemCategory.TRAP)) == Decision.LEAVE
        assert greedy(run_state, make_instance("blade", is_cursed=True)) == Decision.LEAVE

    def test_leaves_conflicting_item(self, run_state, make_instance):
        run_state.add_item(make_instance("relic", ItemCategory.ARTIFACT))
        item = make_instance("amulet", ItemCategory.ARTIFACT, anti_synergy_ids=("relic",))
        assert greedy(run_state, item) == Decision.LEAVE

    def test_potion_only_when_hurt(self, run_state, make_instance):
        potion = make_instance("potion", ItemCategory.CONSUMABLE, heal=25, is_consumable=True)
        assert greedy(run_state, potion) == Decision.LEAVE
        run_state.hp = 60
        assert greedy(run_state, potion) == Decision.LOOT

    def test_swaps_out_weakest(self, run_state, make_instance):
        for i in range(5):
            run_state.add_item(make_instance(f"stick_{i}", attack=i + 1))
        choice = greedy(run_state, make_instance("excalibur", rarity=ItemRarity.LEGENDARY, attack=40))
        assert choice == (Decision.LOOT, [0])

    def test_keeps_better_items(self, run_state, make_instance):
        for i in range(5):
            run_state.add_item(make_instance(f"axe_{i}", attack=20))
        assert greedy(run_state, make_instance("club", attack=3)) == Decision.LEAVE

    def test_full_inventory_potion_left(self, run_state, make_instance):
        for i in range(5):
            run_state.add_item(make_instance(f"stick_{i}", attack=1))
        run_state.hp = 10
        potion = make_instance("potion", ItemCategory.CONSUMABLE, heal=25, is_consumable=True)
        assert greedy(run_state, potion) == Decision.LEAVE
