"""
Synergy and Anti-Synergy Tests
"""

from lootorlose.calc.synergy import (
    SynergyType,
    calculate_synergy_totals,
    check_anti_synergies,
    check_synergies,
)
from lootorlose.content.items import ItemCategory, ItemRarity


def _types(synergies):
    return [s.synergy_type for s in synergies]


class TestDualWield:
    """Test the dual wield synergy."""

    def test_two_weapons(self, make_instance):
        inventory = [make_instance("sword_a"), make_instance("sword_b")]
        result = [s for s in check_synergies(inventory) if s.synergy_type == SynergyType.DUAL_WIELD]
        assert len(result) == 1
        assert result[0].bonus_attack == 20

    def test_three_weapons(self, make_instance):
        inventory = [make_instance("a"), make_instance("b"), make_instance("c")]
        result = [s for s in check_synergies(inventory) if s.synergy_type == SynergyType.DUAL_WIELD]
        assert result[0].bonus_attack == 30

    def test_one_weapon(self, make_instance):
        assert check_synergies([make_instance("solo")]) == []


class TestCategorySynergies:
    """Test armor set, potion master, key collector and elemental combo."""

    def test_armor_set(self, make_instance):
        inventory = [
            make_instance("wooden_shield", ItemCategory.DEFENSE),
            make_instance("leather_armor", ItemCategory.DEFENSE),
            make_instance("iron_helmet", ItemCategory.DEFENSE),
        ]
        synergies = check_synergies(inventory)
        assert _types(synergies) == [SynergyType.ARMOR_SET]
        assert synergies[0].bonus_defense == 15
        assert synergies[0].bonus_hp == 20

    def test_armor_set_needs_all_three(self, make_instance):
        inventory = [
            make_instance("wooden_shield", ItemCategory.DEFENSE),
            make_instance("leather_armor", ItemCategory.DEFENSE),
        ]
        assert check_synergies(inventory) == []

    def test_potion_master(self, make_instance):
        inventory = [make_instance(f"potion_{i}", ItemCategory.CONSUMABLE) for i in range(4)]
        synergy = check_synergies(inventory)[0]
        assert synergy.synergy_type == SynergyType.POTION_MASTER
        assert synergy.bonus_defense == 5
        assert synergy.bonus_hp == 60

    def test_key_collector(self, make_instance):
        inventory = [make_instance(f"key_{i}", ItemCategory.KEY) for i in range(3)]
        assert _types(check_synergies(inventory)) == [SynergyType.KEY_COLLECTOR]

    def test_elemental_combo(self, make_instance):
        inventory = [
            make_instance("fire_flask", ItemCategory.CONSUMABLE),
            make_instance("ice_orb", ItemCategory.ARTIFACT),
        ]
        synergy = check_synergies(inventory)[0]
        assert synergy.synergy_type == SynergyType.ELEMENTAL_COMBO
        assert synergy.bonus_attack == 20
        assert synergy.bonus_defense == 10


class TestItemCombos:
    """Test item-defined synergy pairs."""

    def test_pair_reported_once(self, make_instance):
        inventory = [
            make_instance("excalibur", synergy_ids=("royal_shield",)),
            make_instance("royal_shield", ItemCategory.DEFENSE, synergy_ids=("excalibur",)),
        ]
        combos = [s for s in check_synergies(inventory) if s.synergy_type == SynergyType.ITEM_COMBO]
        assert len(combos) == 1
        assert sorted(combos[0].item_ids) == ["excalibur", "royal_shield"]

    def test_item_does_not_pair_with_itself(self, make_instance):
        inventory = [make_instance("mirror", ItemCategory.ARTIFACT, synergy_ids=("mirror",))]
        assert check_synergies(inventory) == []

    def test_two_copies_pair(self, make_instance):
        inventory = [
            make_instance("twin", ItemCategory.ARTIFACT, synergy_ids=("twin",)),
            make_instance("twin", ItemCategory.ARTIFACT, synergy_ids=("twin",)),
        ]
        assert _types(check_synergies(inventory)) == [SynergyType.ITEM_COMBO]


class TestAntiSynergies:
    """Test conflicting pairs."""

    def test_two_cursed_items_are_fatal(self, make_instance):
        inventory = [
            make_instance("cursed_amulet", ItemCategory.CURSE, is_cursed=True),
            make_instance("haunted_crown", ItemCategory.CURSE, is_cursed=True,
                          anti_synergy_ids=("cursed_amulet",)),
        ]
        conflicts = check_anti_synergies(inventory)
        assert len(conflicts) == 1
        assert conflicts[0].damage == 999
        assert conflicts[0].is_fatal

    def test_one_cursed_item_is_not_fatal(self, make_instance):
        inventory = [
            make_instance("holy_relic", ItemCategory.ARTIFACT),
            make_instance("cursed_amulet", ItemCategory.CURSE, is_cursed=True,
                          anti_synergy_ids=("holy_relic",)),
        ]
        conflicts = check_anti_synergies(inventory)
        assert conflicts[0].damage == 10
        assert not conflicts[0].is_fatal

    def test_either_direction_triggers(self, make_instance):
        inventory = [
            make_instance("a", ItemCategory.ARTIFACT, anti_synergy_ids=("b",)),
            make_instance("b", ItemCategory.ARTIFACT),
        ]
        assert len(check_anti_synergies(inventory)) == 1
        assert len(check_anti_synergies(list(reversed(inventory)))) == 1

    def test_mutual_listing_reported_once(self, make_instance):
        inventory = [
            make_instance("a", ItemCategory.ARTIFACT, anti_synergy_ids=("b",)),
            make_instance("b", ItemCategory.ARTIFACT, anti_synergy_ids=("a",)),
        ]
        assert len(check_anti_synergies(inventory)) == 1

    def test_no_conflicts(self, make_instance):
        assert check_anti_synergies([make_instance("a"), make_instance("b")]) == []


class TestTotals:
    """Test calculate_synergy_totals."""

    def test_sums_bonuses_and_damage(self, make_instance):
        inventory = [
            make_instance("sword_a"),
            make_instance("sword_b"),
            make_instance("holy_relic", ItemCategory.ARTIFACT, rarity=ItemRarity.RARE),
            make_instance("cursed_amulet", ItemCategory.CURSE, is_cursed=True,
                          anti_synergy_ids=("holy_relic",)),
        ]
        totals = calculate_synergy_totals(inventory)
        assert totals.total_bonus_attack == 20
        assert totals.total_anti_synergy_damage == 10
        assert not totals.has_fatal_anti_synergy

    def test_empty_inventory(self):
        totals = calculate_synergy_totals([])
        assert totals.total_bonus_attack == 0
        assert not totals.has_fatal_anti_synergy
