"""Tests for the five-layer stat pipeline."""

import pytest

from nextera.core.equipment import equip_item, make_equipment
from nextera.core.gem_system import activate_all_gems, equip_gem, use_gem_effect
from nextera.core.stat_calculator import (
    apply_damage,
    apply_healing,
    calculate_equipment_bonuses,
    calculate_stat_breakdown,
    compute_stats,
    get_class_modifiers,
    get_current_hp,
    get_gem_passive_bonus,
    get_rank_multiplier,
)
from nextera.data.models import EquippedGem, EquipmentSlot, Rank, Rarity, StatBonus


@pytest.fixture
def fire_adept(make_unit):
    """Rank B unit with the Ruby gem (Fire Adept, +5 attack passive)."""
    unit = make_unit(atk=20, rank=Rank.B)
    return equip_gem(unit, "ruby_gem").unwrap()


class TestMultipliers:
    """Tests for rank and subclass lookup."""

    @pytest.mark.parametrize("rank,expected", [("C", 1.0), ("B", 1.15), ("A", 1.30), ("S", 1.50)])
    def test_rank_multipliers(self, rank, expected):
        assert get_rank_multiplier(rank) == expected

    def test_unknown_rank_is_neutral(self):
        assert get_rank_multiplier("Z") == 1.0

    def test_fire_adept_modifiers(self):
        mods = get_class_modifiers("Fire Adept")
        assert mods["attack"] == 1.10
        assert mods["speed"] == 1.05

    def test_no_subclass_is_neutral(self):
        assert set(get_class_modifiers(None).values()) == {1.0}
        assert set(get_class_modifiers("Chef").values()) == {1.0}


class TestComputeStats:
    """Tests for compute_stats."""

    def test_base_unit(self, make_unit):
        stats = compute_stats(make_unit())
        assert stats.max_hp == 100
        assert stats.attack == 20
        assert stats.defense == 10
        assert stats.speed == 50
        assert stats.max_mp == 50

    def test_rank_s_scales_hp(self, make_unit):
        assert compute_stats(make_unit(rank=Rank.S)).max_hp == 150

    def test_layer_order(self, fire_adept):
        """floor(20 * 1.15 * 1.10) + 0 + 5 = 30, not floor((20 + 5) * 1.15 * 1.10)."""
        attack = compute_stats(fire_adept).attack
        assert attack == 30
        assert attack != 31

    def test_subclass_defense(self, make_unit):
        unit = equip_gem(make_unit(defense=10), "emerald_gem").unwrap()
        # floor(10 * 1.15) + 5 passive
        assert compute_stats(unit).defense == 16

    def test_equipment_is_flat(self, make_unit):
        blade = make_equipment("blade", EquipmentSlot.WEAPON, Rarity.RARE)
        unit, _ = equip_item(make_unit(), blade)
        assert compute_stats(unit).attack == 35

    def test_unknown_gem_contributes_nothing(self, make_unit):
        unit = make_unit(equipped_gem=EquippedGem(gem_id="no_such_gem"))
        assert compute_stats(unit).attack == 20

    def test_pure(self, fire_adept):
        assert compute_stats(fire_adept) == compute_stats(fire_adept)

    def test_get_by_name(self, make_unit):
        stats = compute_stats(make_unit())
        assert stats.get("hp") == 100
        assert stats.get("speed") == 50


class TestGemPassive:
    """Passive bonus follows the gem state."""

    def test_active_gem_passive(self, fire_adept):
        assert get_gem_passive_bonus(fire_adept) == StatBonus(attack=5)

    def test_used_gem_drops_passive(self, fire_adept):
        spent = use_gem_effect(fire_adept).unwrap()
        assert compute_stats(spent).attack == 25
        # Subclass stays after the effect is used
        assert spent.subclass == "Fire Adept"

    def test_reactivation_restores_passive(self, fire_adept):
        spent = use_gem_effect(fire_adept).unwrap()
        (restored,) = activate_all_gems([spent])
        assert compute_stats(restored).attack == 30


class TestEquipmentBonuses:
    """Tests for equipment totals."""

    def test_no_equipment(self, make_unit):
        assert calculate_equipment_bonuses(make_unit()) == StatBonus()

    def test_sums_all_slots(self, make_unit):
        unit = make_unit()
        for piece in (
            make_equipment("w", EquipmentSlot.WEAPON, Rarity.COMMON),
            make_equipment("a", EquipmentSlot.ARMOR, Rarity.UNCOMMON),
            make_equipment("c", EquipmentSlot.ACCESSORY, Rarity.EPIC),
        ):
            unit, _ = equip_item(unit, piece)
        assert calculate_equipment_bonuses(unit) == StatBonus(attack=5, defense=10, speed=20)


class TestStatBreakdown:
    """Tests for per-layer breakdown."""

    def test_layers_sum_to_final(self, fire_adept):
        breakdown = calculate_stat_breakdown(fire_adept, "attack")
        assert breakdown.final == compute_stats(fire_adept).attack
        assert breakdown.base + breakdown.from_rank + breakdown.from_class + breakdown.from_equipment + breakdown.from_gem == breakdown.final
        assert breakdown.from_gem == 5

    def test_unknown_stat(self, make_unit):
        with pytest.raises(ValueError):
            calculate_stat_breakdown(make_unit(), "luck")


class TestHitPoints:
    """Tests for damage and healing clamps."""

    def test_full_hp_by_default(self, make_unit):
        assert get_current_hp(make_unit()) == 100

    def test_damage_clamps_at_zero(self, make_unit):
        unit = apply_damage(make_unit(), 500)
        assert unit.current_hp == 0
        assert unit.is_defeated

    def test_healing_clamps_at_max(self, make_unit):
        unit = apply_healing(make_unit(current_hp=90), 50)
        assert unit.current_hp == 100

    def test_defeated_units_are_not_healed(self, make_unit):
        unit = make_unit(current_hp=0)
        assert apply_healing(unit, 50).current_hp == 0

    def test_original_unchanged(self, make_unit):
        unit = make_unit()
        apply_damage(unit, 10)
        assert unit.current_hp is None
