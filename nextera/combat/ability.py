"""Ability System for NextEra.

MP accounting and ability effect math. ``use_ability`` only deducts MP; the
gameplay effect is applied separately by the resolver so that each part can
be tested on its own.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from nextera.core.constants import ABILITY_ATTACK_SCALING, DEFAULT_MAX_MP
from nextera.core.result import ErrorCode, Ok, Result, err
from nextera.data.models.ability import ALLY_TARGETS, ENEMY_TARGETS, Ability
from nextera.data.models.unit import Unit


@dataclass(frozen=True)
class Usability:
    """Whether an ability can be used now, and the first reason why not."""

    usable: bool
    reason: Optional[str] = None
    code: Optional[ErrorCode] = None


def can_use_ability(unit: Unit, ability: Ability) -> bool:
    """Check whether the unit has enough MP."""
    return unit.current_mp >= ability.mp_cost


def use_ability(unit: Unit, ability: Ability) -> Result[Unit]:
    """Deduct the ability's MP cost.

    Returns:
        Ok with the updated unit, or Err(INSUFFICIENT_MP) leaving the unit as is.
    """
    if not can_use_ability(unit, ability):
        return err(
            ErrorCode.INSUFFICIENT_MP,
            f"{unit.name} needs {ability.mp_cost} MP for {ability.name} (has {unit.current_mp})",
        )
    return Ok(unit.model_copy(update={"current_mp": unit.current_mp - ability.mp_cost}))


def restore_mp(unit: Unit, max_mp: int = DEFAULT_MAX_MP) -> Unit:
    """Refill MP; called at battle start."""
    return unit.model_copy(update={"current_mp": max_mp})


def restore_all_mp(team: Iterable[Unit], max_mp: int = DEFAULT_MAX_MP) -> tuple[Unit, ...]:
    """Refill MP for every unit in a team."""
    return tuple(restore_mp(unit, max_mp) for unit in team)


def calculate_ability_damage(ability: Ability, caster_attack: int) -> int:
    """Damage = floor(power + attack * 0.5); 0 for non-damage abilities."""
    if not ability.is_damage:
        return 0
    return math.floor(ability.effect.power + caster_attack * ABILITY_ATTACK_SCALING)


def calculate_ability_healing(ability: Ability) -> int:
    """Healing is the flat power; it does not scale with stats."""
    if not ability.is_heal:
        return 0
    return ability.effect.power


def get_ability_buff_amount(ability: Ability) -> int:
    if ability.effect.type != "buff":
        return 0
    return ability.effect.buff_amount


def get_ability_buff_duration(ability: Ability) -> int:
    if ability.effect.type != "buff":
        return 0
    return ability.effect.buff_duration


def is_ability_usable(
    unit: Unit,
    ability: Ability,
    has_allies: bool,
    has_enemies: bool,
) -> Usability:
    """
    Check MP first, then target availability.

    Self-targeted abilities always have a target.
    """
    if not can_use_ability(unit, ability):
        return Usability(
            False,
            f"Not enough MP (need {ability.mp_cost}, have {unit.current_mp})",
            ErrorCode.INSUFFICIENT_MP,
        )

    if ability.target in ENEMY_TARGETS and not has_enemies:
        return Usability(False, "No enemies available", ErrorCode.NO_VALID_TARGET)
    if ability.target in ALLY_TARGETS and not has_allies:
        return Usability(False, "No allies available", ErrorCode.NO_VALID_TARGET)

    return Usability(True)
