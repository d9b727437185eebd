"""Element System for NextEra.

The run-wide alignment gem. While the chosen gem is not activated, every
unit's damage and healing is scaled by how its element relates to the gem:

- matching element: +15%
- counter element: -5%
- anything else: +5%

Counter pairs: Mars <-> Mercury, Venus <-> Jupiter, Moon <-> Sun.

Activating the gem fires its party-wide effect and drops every multiplier
to 1.0, but matching and counter units keep the spell the gem granted them.
The activation flag is run scoped and is never reset between battles.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional, TYPE_CHECKING

from nextera.core.constants import (
    BONUS_COUNTER,
    BONUS_MATCHING,
    BONUS_NEUTRAL,
    BONUS_NONE,
    COUNTER_ELEMENT,
)
from nextera.core.result import ErrorCode, Ok, Result, err
from nextera.core.stat_calculator import apply_damage, apply_healing
from nextera.data.loaders.gem_loader import (
    load_counter_wards,
    load_gem_activations,
    load_matching_spells,
)
from nextera.data.models.ability import Ability
from nextera.data.models.gem import ActivationEffect, ActiveGemState, ElementalGem, GemActivation
from nextera.data.models.unit import Element, Unit

if TYPE_CHECKING:
    from nextera.data.loaders.catalog import Catalog

logger = logging.getLogger(__name__)

MATCHING = "matching"
COUNTER = "counter"
NEUTRAL = "neutral"


@dataclass(frozen=True)
class ElementRelationship:
    """How a unit's element relates to the gem, with the bonus in percent."""

    type: str
    bonus: int


@dataclass(frozen=True)
class ActivationOutcome:
    """Units after a gem activation fired."""

    party: tuple[Unit, ...]
    enemies: tuple[Unit, ...]
    message: str
    damage: int = 0
    healing: int = 0


def get_counter_element(element: Element) -> Element:
    return Element(COUNTER_ELEMENT[element])


def get_element_relationship(unit_element: Element, gem_element: Element) -> ElementRelationship:
    """Classify a unit element against the gem element."""
    if unit_element == gem_element:
        return ElementRelationship(MATCHING, 15)
    if unit_element == get_counter_element(gem_element):
        return ElementRelationship(COUNTER, -5)
    return ElementRelationship(NEUTRAL, 5)


def calculate_element_bonus(unit: Unit, state: ActiveGemState) -> float:
    """Multiplier applied to damage and healing a unit deals.

    1.0 when no gem is chosen or the gem has been activated. A unit without
    an element counts as neutral.
    """
    if state.active_gem is None or state.is_activated:
        return BONUS_NONE
    if unit.element is None:
        return BONUS_NEUTRAL

    relationship = get_element_relationship(unit.element, state.active_gem.element)
    if relationship.type == MATCHING:
        return BONUS_MATCHING
    if relationship.type == COUNTER:
        return BONUS_COUNTER
    return BONUS_NEUTRAL


def apply_element_bonus(value: int, unit: Unit, state: ActiveGemState) -> int:
    """Scale a damage or healing value, rounding halves up."""
    return math.floor(value * calculate_element_bonus(unit, state) + 0.5)


def get_granted_spells(
    unit_element: Optional[Element],
    state: ActiveGemState,
    catalog: Optional["Catalog"] = None,
) -> tuple[Ability, ...]:
    """Spells the alignment gem grants a unit; unaffected by activation."""
    if state.active_gem is None or unit_element is None:
        return ()

    gem_element = state.active_gem.element
    relationship = get_element_relationship(unit_element, gem_element)

    if relationship.type == MATCHING:
        spells = catalog.matching_spells if catalog is not None else load_matching_spells()
        spell = spells.get(unit_element)
    elif relationship.type == COUNTER:
        # Ward against the gem's element
        wards = catalog.counter_wards if catalog is not None else load_counter_wards()
        spell = wards.get(gem_element)
    else:
        spell = None

    return (spell,) if spell is not None else ()


def set_active_gem(gem: ElementalGem) -> ActiveGemState:
    """Choose the alignment gem; a fresh choice starts unactivated."""
    logger.info("Alignment gem set to %s (%s)", gem.name, gem.element)
    return ActiveGemState(active_gem=gem, is_activated=False)


def activate_gem(state: ActiveGemState) -> Result[ActiveGemState]:
    """Spend the alignment gem's one-time activation."""
    if state.active_gem is None:
        return err(ErrorCode.NO_ACTIVE_GEM, "No alignment gem selected")
    if state.is_activated:
        return err(ErrorCode.GEM_ALREADY_ACTIVATED, f"{state.active_gem.name} is already activated")
    return Ok(state.model_copy(update={"is_activated": True}))


def get_gem_activation(element: Element, catalog: Optional["Catalog"] = None) -> Optional[GemActivation]:
    activations = catalog.activations if catalog is not None else load_gem_activations()
    return activations.get(element)


def execute_gem_activation(
    activation: GemActivation,
    party: Iterable[Unit],
    enemies: Iterable[Unit],
    catalog: Optional["Catalog"] = None,
) -> ActivationOutcome:
    """
    Apply an activation's party-wide effect.

    AoE damage hits every living enemy and party heal restores every living
    ally by the activation's power. Buff and debuff activations are announced
    only; they change no stats.
    """
    party = tuple(party)
    enemies = tuple(enemies)

    if activation.effect == ActivationEffect.AOE_DAMAGE:
        hit = tuple(
            e if e.is_defeated else apply_damage(e, activation.power, catalog) for e in enemies
        )
        return ActivationOutcome(
            party=party,
            enemies=hit,
            message=f"{activation.name} deals {activation.power} damage to all enemies!",
            damage=activation.power,
        )

    if activation.effect == ActivationEffect.PARTY_HEAL:
        healed = tuple(apply_healing(u, activation.power, catalog) for u in party)
        return ActivationOutcome(
            party=healed,
            enemies=enemies,
            message=f"{activation.name} heals all allies for {activation.power} HP!",
            healing=activation.power,
        )

    return ActivationOutcome(party=party, enemies=enemies, message=f"{activation.name} activated!")
