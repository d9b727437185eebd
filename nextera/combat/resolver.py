"""Combat action resolution.

Each ``resolve_*`` function resolves one action atomically: it either returns
``Ok(ActionOutcome)`` with new unit snapshots, or an ``Err`` with nothing
changed (no MP spent, no gem deactivated, no HP lost).

Random draws come only from the stream handed in, in a fixed order:
basic attacks draw variance then the critical roll; damage abilities draw one
critical roll; gem effects draw nothing.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, TYPE_CHECKING

from nextera.combat.ability import (
    calculate_ability_damage,
    calculate_ability_healing,
    get_ability_buff_amount,
    get_ability_buff_duration,
    is_ability_usable,
    use_ability,
)
from nextera.combat.critical import apply_critical, check_critical_hit, validate_luck
from nextera.core.constants import ATTACK_VARIANCE, DEFEND_REDUCTION
from nextera.core.element_system import apply_element_bonus
from nextera.core.gem_system import use_gem_effect
from nextera.core.result import ErrorCode, Ok, Result, err
from nextera.core.rng import RngStream
from nextera.core.stat_calculator import apply_damage, apply_healing, compute_stats
from nextera.data.loaders.gem_loader import get_gem_by_id
from nextera.data.models.ability import Ability, TargetType
from nextera.data.models.battle import ActionType, CombatAction
from nextera.data.models.gem import ActiveGemState
from nextera.data.models.unit import Unit

if TYPE_CHECKING:
    from nextera.data.loaders.catalog import Catalog

_SINGLE_TARGETS = (TargetType.SINGLE_ENEMY, TargetType.SINGLE_ALLY)


@dataclass(frozen=True)
class ActionOutcome:
    """Snapshots after one resolved action.

    ``targets`` are in the order given; when the actor is among its own
    targets, ``actor`` and that target entry are the same snapshot.
    """

    actor: Unit
    targets: tuple[Unit, ...]
    action: CombatAction


def _bonus(value: int, unit: Unit, gem_state: Optional[ActiveGemState]) -> int:
    # Enemy actions pass no gem state and get no elemental scaling
    if gem_state is None:
        return value
    return apply_element_bonus(value, unit, gem_state)


def _select_targets(
    actor: Unit,
    target_type: TargetType,
    targets: tuple[Unit, ...],
) -> Result[tuple[Unit, ...]]:
    if target_type == TargetType.SELF:
        return Ok((actor,))

    living = tuple(t for t in targets if not t.is_defeated)
    if not living:
        return err(ErrorCode.NO_VALID_TARGET, "No living target for this action")
    if target_type in _SINGLE_TARGETS and len(living) != 1:
        return err(ErrorCode.NO_VALID_TARGET, f"{target_type.value} needs exactly one target, got {len(living)}")
    return Ok(living)


def _apply_to_targets(actor, targets, effect):
    """Apply ``effect(unit) -> unit`` to each target, keeping the actor in sync."""
    updated = []
    for target in targets:
        if target.id == actor.id:
            actor = effect(actor)
            updated.append(actor)
        else:
            updated.append(effect(target))
    return actor, tuple(updated)


def resolve_attack(
    attacker: Unit,
    defender: Unit,
    stream: RngStream,
    gem_state: Optional[ActiveGemState] = None,
    defending: bool = False,
    catalog: Optional["Catalog"] = None,
) -> Result[ActionOutcome]:
    """
    Resolve a basic attack.

    Damage = max(1, floor(atk - def / 2) + variance), halved (min 1) against a
    defending target, then scaled by a critical hit and the elemental bonus.

    Args:
        attacker: Unit making the attack
        defender: Target unit
        stream: Battle stream; draws variance then the critical roll
        gem_state: Alignment gem state for player attacks, None for enemies
        defending: Whether the defender chose to defend this turn
        catalog: Catalog for gem lookups (packaged tables by default)
    """
    if attacker.is_defeated:
        return err(ErrorCode.NO_VALID_TARGET, f"{attacker.name} is defeated and cannot act")
    if defender.is_defeated:
        return err(ErrorCode.NO_VALID_TARGET, f"{defender.name} is already defeated")
    if not validate_luck(attacker.luck):
        return err(ErrorCode.INVALID_LUCK, f"{attacker.name} has luck {attacker.luck}; expected 0-100")

    attack = compute_stats(attacker, catalog).attack
    defense = compute_stats(defender, catalog).defense

    damage = max(1, math.floor(attack - defense / 2) + stream.int(*ATTACK_VARIANCE))
    if defending:
        damage = max(1, math.floor(damage * DEFEND_REDUCTION))

    is_critical = check_critical_hit(attacker, stream).unwrap()
    damage = _bonus(apply_critical(damage, is_critical), attacker, gem_state)

    hit = apply_damage(defender, damage, catalog)
    action = CombatAction(
        seq=0,
        type=ActionType.ATTACK,
        actor_id=attacker.id,
        target_ids=(defender.id,),
        damage=damage,
        is_critical=is_critical,
    )
    return Ok(ActionOutcome(actor=attacker, targets=(hit,), action=action))


def resolve_ability(
    caster: Unit,
    ability: Ability,
    targets: Iterable[Unit],
    stream: RngStream,
    gem_state: Optional[ActiveGemState] = None,
    has_allies: bool = True,
    has_enemies: bool = True,
    catalog: Optional["Catalog"] = None,
) -> Result[ActionOutcome]:
    """
    Resolve an ability cast.

    Checks usability, rolls one critical for damage abilities, deducts MP and
    applies the effect to every target. Buffs are recorded on the action for
    the battle layer to track; cleanses heal by their power.
    """
    if caster.is_defeated:
        return err(ErrorCode.NO_VALID_TARGET, f"{caster.name} is defeated and cannot act")
    usability = is_ability_usable(caster, ability, has_allies, has_enemies)
    if not usability.usable:
        return err(usability.code, usability.reason)

    selected = _select_targets(caster, ability.target, tuple(targets))
    if not selected.ok:
        return selected

    is_critical = False
    if ability.is_damage:
        crit = check_critical_hit(caster, stream)
        if not crit.ok:
            return crit
        is_critical = crit.value

    caster_stats = compute_stats(caster, catalog)
    actor = use_ability(caster, ability).unwrap()

    damage = 0
    healing = 0
    effect_type = ability.effect.type
    if effect_type == "damage":
        damage = _bonus(
            apply_critical(calculate_ability_damage(ability, caster_stats.attack), is_critical),
            caster,
            gem_state,
        )
        actor, hit = _apply_to_targets(actor, selected.value, lambda u: apply_damage(u, damage, catalog))
    elif effect_type == "heal" or (effect_type == "debuff_remove" and ability.effect.power > 0):
        base = calculate_ability_healing(ability) if effect_type == "heal" else ability.effect.power
        healing = _bonus(base, caster, gem_state)
        actor, hit = _apply_to_targets(actor, selected.value, lambda u: apply_healing(u, healing, catalog))
    else:
        hit = tuple(actor if t.id == actor.id else t for t in selected.value)

    action = CombatAction(
        seq=0,
        type=ActionType.ABILITY,
        actor_id=caster.id,
        target_ids=tuple(t.id for t in hit),
        ability_id=ability.id,
        damage=damage,
        healing=healing,
        is_critical=is_critical,
        buff_stat=ability.effect.buff_stat if effect_type == "buff" else None,
        buff_amount=get_ability_buff_amount(ability),
        buff_duration=get_ability_buff_duration(ability),
    )
    return Ok(ActionOutcome(actor=actor, targets=hit, action=action))


def resolve_gem_effect(
    unit: Unit,
    targets: Iterable[Unit],
    gem_state: Optional[ActiveGemState] = None,
    catalog: Optional["Catalog"] = None,
) -> Result[ActionOutcome]:
    """
    Fire the one-time battle effect of a unit's equipped gem.

    The gem goes inactive, so the unit loses its passive bonus until the next
    battle; damage and healing use the effect's flat power.
    """
    if unit.is_defeated:
        return err(ErrorCode.NO_VALID_TARGET, f"{unit.name} is defeated and cannot act")
    spent = use_gem_effect(unit, catalog)
    if not spent.ok:
        return spent

    gem_id = unit.equipped_gem.gem_id
    gem = catalog.get_gem(gem_id) if catalog is not None else get_gem_by_id(gem_id)
    if gem is None:
        return err(ErrorCode.UNKNOWN_GEM, f"Gem not found: {gem_id}")

    effect = gem.gem_effect
    selected = _select_targets(unit, effect.target, tuple(targets))
    if not selected.ok:
        return selected

    actor = spent.value
    damage = 0
    healing = 0
    if effect.type == "damage":
        damage = _bonus(effect.power, unit, gem_state)
        actor, hit = _apply_to_targets(actor, selected.value, lambda u: apply_damage(u, damage, catalog))
    elif effect.type in ("heal", "debuff_remove") and effect.power > 0:
        healing = _bonus(effect.power, unit, gem_state)
        actor, hit = _apply_to_targets(actor, selected.value, lambda u: apply_healing(u, healing, catalog))
    else:
        hit = tuple(actor if t.id == actor.id else t for t in selected.value)

    action = CombatAction(
        seq=0,
        type=ActionType.GEM_EFFECT,
        actor_id=unit.id,
        target_ids=tuple(t.id for t in hit),
        ability_id=gem.id,
        damage=damage,
        healing=healing,
        buff_stat=effect.buff_stat,
        buff_amount=effect.buff_amount,
        buff_duration=effect.buff_duration,
    )
    return Ok(ActionOutcome(actor=actor, targets=hit, action=action))
