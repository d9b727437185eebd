"""Tests for combat action resolution."""

import math

import pytest

from nextera.combat.resolver import resolve_ability, resolve_attack, resolve_gem_effect
from nextera.core.gem_system import equip_gem
from nextera.core.result import ErrorCode
from nextera.core.rng import make_stream
from nextera.core.stat_calculator import apply_damage, compute_stats
from nextera.data.models import (
    Ability,
    ActionType,
    BuffEffect,
    DamageEffect,
    Element,
    GemState,
    HealEffect,
    TargetType,
)


@pytest.fixture
def attacker(make_unit):
    return make_unit(id="attacker", luck=0)


@pytest.fixture
def defender(make_unit):
    return make_unit(id="defender")


@pytest.fixture
def fireball():
    return Ability(
        id="fireball",
        name="Fireball",
        mp_cost=20,
        effect=DamageEffect(target=TargetType.SINGLE_ENEMY, power=35),
    )


@pytest.fixture
def cure():
    return Ability(
        id="cure",
        name="Cure",
        mp_cost=15,
        effect=HealEffect(target=TargetType.SINGLE_ALLY, power=30),
    )


def battle(seed=1):
    return make_stream(seed).fork("battle").fork(0).fork("actions")


class TestResolveAttack:
    """Tests for basic attacks."""

    def test_damage_within_variance(self, attacker, defender):
        for seed in range(50):
            outcome = resolve_attack(attacker, defender, battle(seed)).unwrap()
            # floor(20 - 10 / 2) = 15, variance +-2
            assert 13 <= outcome.action.damage <= 17
            assert outcome.targets[0].current_hp == 100 - outcome.action.damage
            assert not outcome.action.is_critical

    def test_deterministic(self, attacker, defender):
        first = resolve_attack(attacker, defender, battle(3)).unwrap()
        second = resolve_attack(attacker, defender, battle(3)).unwrap()
        assert first == second

    def test_draws_variance_then_crit(self, make_unit, defender):
        attacker = make_unit(id="attacker", luck=50)
        probe = battle(7)
        variance = probe.int(-2, 2)
        is_critical = probe.int(0, 99) < 50

        expected = 15 + variance
        if is_critical:
            expected = math.floor(expected * 1.5)

        outcome = resolve_attack(attacker, defender, battle(7)).unwrap()
        assert outcome.action.is_critical == is_critical
        assert outcome.action.damage == expected

    def test_defending_halves(self, attacker, defender):
        outcome = resolve_attack(attacker, defender, battle(), defending=True).unwrap()
        assert 6 <= outcome.action.damage <= 8

    def test_guaranteed_crit(self, make_unit, defender):
        attacker = make_unit(id="attacker", luck=100)
        outcome = resolve_attack(attacker, defender, battle()).unwrap()
        assert outcome.action.is_critical
        assert 19 <= outcome.action.damage <= 25

    def test_minimum_damage(self, make_unit):
        weak = make_unit(id="weak", atk=1, luck=0)
        wall = make_unit(id="wall", defense=100)
        outcome = resolve_attack(weak, wall, battle()).unwrap()
        assert outcome.action.damage == 1

    def test_invalid_luck(self, make_unit, defender):
        result = resolve_attack(make_unit(luck=101), defender, battle())
        assert result.code == ErrorCode.INVALID_LUCK

    def test_defeated_defender(self, attacker, make_unit):
        result = resolve_attack(attacker, make_unit(id="dead", current_hp=0), battle())
        assert result.code == ErrorCode.NO_VALID_TARGET

    def test_defeated_attacker(self, make_unit, defender):
        fallen = make_unit(id="attacker", current_hp=0)
        result = resolve_attack(fallen, defender, battle())
        assert result.code == ErrorCode.NO_VALID_TARGET

    def test_player_elemental_bonus(self, make_unit, defender, mars_gem_state):
        plain = make_unit(id="attacker", luck=0)
        aligned = make_unit(id="attacker", luck=0, element=Element.MARS)
        base = resolve_attack(plain, defender, battle(4)).unwrap().action.damage
        boosted = resolve_attack(aligned, defender, battle(4), gem_state=mars_gem_state).unwrap().action.damage
        assert boosted == math.floor(base * 1.15 + 0.5)

    def test_action_record(self, attacker, defender):
        action = resolve_attack(attacker, defender, battle()).unwrap().action
        assert action.type == ActionType.ATTACK
        assert action.actor_id == "attacker"
        assert action.target_ids == ("defender",)


class TestResolveAbility:
    """Tests for ability casts."""

    def test_damage_ability(self, attacker, defender, fireball):
        outcome = resolve_ability(attacker, fireball, [defender], battle()).unwrap()
        # floor(35 + 20 * 0.5)
        assert outcome.action.damage == 45
        assert outcome.targets[0].current_hp == 55
        assert outcome.actor.current_mp == 30
        assert outcome.action.ability_id == "fireball"

    def test_matching_element_bonus(self, make_unit, defender, fireball, mars_gem_state):
        caster = make_unit(id="caster", luck=0, element=Element.MARS)
        outcome = resolve_ability(caster, fireball, [defender], battle(), gem_state=mars_gem_state).unwrap()
        assert outcome.action.damage == 52

    def test_insufficient_mp(self, make_unit, defender, fireball):
        caster = make_unit(id="caster", current_mp=10)
        result = resolve_ability(caster, fireball, [defender], battle())
        assert result.code == ErrorCode.INSUFFICIENT_MP

    def test_no_enemies(self, attacker, defender, fireball):
        result = resolve_ability(attacker, fireball, [defender], battle(), has_enemies=False)
        assert result.code == ErrorCode.NO_VALID_TARGET

    def test_single_target_needs_one(self, attacker, make_unit, fireball):
        targets = [make_unit(id="a"), make_unit(id="b")]
        result = resolve_ability(attacker, fireball, targets, battle())
        assert result.code == ErrorCode.NO_VALID_TARGET

    def test_defeated_caster(self, make_unit, defender, fireball):
        caster = make_unit(id="caster", current_hp=0)
        result = resolve_ability(caster, fireball, [defender], battle())
        assert result.code == ErrorCode.NO_VALID_TARGET

    def test_invalid_luck_spends_nothing(self, make_unit, defender, fireball):
        caster = make_unit(id="caster", luck=-5)
        result = resolve_ability(caster, fireball, [defender], battle())
        assert result.code == ErrorCode.INVALID_LUCK
        assert caster.current_mp == 50

    def test_heal_ally(self, make_unit, cure):
        caster = make_unit(id="caster")
        ally = make_unit(id="ally", current_hp=40)
        outcome = resolve_ability(caster, cure, [ally], battle()).unwrap()
        assert outcome.targets[0].current_hp == 70
        assert outcome.action.healing == 30
        assert outcome.actor.current_mp == 35

    def test_heal_self_keeps_actor_in_sync(self, make_unit, cure):
        caster = make_unit(id="caster", current_hp=40)
        outcome = resolve_ability(caster, cure, [caster], battle()).unwrap()
        assert outcome.actor.current_hp == 70
        assert outcome.actor.current_mp == 35
        assert outcome.targets[0] == outcome.actor

    def test_self_buff(self, attacker):
        guard = Ability(
            id="stone_wall",
            name="Stone Wall",
            mp_cost=15,
            effect=BuffEffect(target=TargetType.SELF, buff_stat="defense", buff_amount=20, buff_duration=3),
        )
        outcome = resolve_ability(attacker, guard, [], battle(), has_allies=False, has_enemies=False).unwrap()
        assert outcome.action.target_ids == ("attacker",)
        assert outcome.action.buff_amount == 20
        assert outcome.action.buff_duration == 3
        assert outcome.actor.current_mp == 35


class TestResolveGemEffect:
    """Tests for per-unit gem effects."""

    def test_damage_effect(self, make_unit, defender):
        unit = equip_gem(make_unit(id="caster"), "ruby_gem").unwrap()
        outcome = resolve_gem_effect(unit, [defender]).unwrap()
        assert outcome.action.type == ActionType.GEM_EFFECT
        assert outcome.action.damage == 50
        assert outcome.targets[0].current_hp == 50
        assert outcome.actor.equipped_gem.state == GemState.INACTIVE

    def test_only_once(self, make_unit, defender):
        unit = equip_gem(make_unit(id="caster"), "ruby_gem").unwrap()
        spent = resolve_gem_effect(unit, [defender]).unwrap().actor
        result = resolve_gem_effect(spent, [defender])
        assert result.code == ErrorCode.GEM_ALREADY_INACTIVE

    def test_no_gem(self, attacker, defender):
        assert resolve_gem_effect(attacker, [defender]).code == ErrorCode.NO_GEM_EQUIPPED

    def test_party_heal(self, make_unit):
        caster = equip_gem(make_unit(id="caster", current_hp=50), "sapphire_gem").unwrap()
        ally = make_unit(id="ally", current_hp=30)
        outcome = resolve_gem_effect(caster, [caster, ally]).unwrap()
        assert outcome.action.healing == 40
        assert outcome.actor.current_hp == 90
        assert outcome.targets[1].current_hp == 70

    def test_defeated_unit_cannot_fire(self, make_unit, defender):
        unit = equip_gem(make_unit(id="caster", current_hp=0), "ruby_gem").unwrap()
        result = resolve_gem_effect(unit, [defender])
        assert result.code == ErrorCode.NO_VALID_TARGET

    def test_hp_clamped_to_reduced_max(self, make_unit):
        # Water Adept: floor(100 * 1.05) + 10 passive while active
        caster = apply_damage(equip_gem(make_unit(id="caster"), "sapphire_gem").unwrap(), 1)
        assert caster.current_hp == 114
        ally = make_unit(id="ally", current_hp=30)
        outcome = resolve_gem_effect(caster, [ally]).unwrap()
        assert compute_stats(outcome.actor).max_hp == 105
        assert outcome.actor.current_hp == 105
        assert outcome.targets[0].current_hp == 70
