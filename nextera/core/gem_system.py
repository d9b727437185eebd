"""Gem System for NextEra.

Per-unit equippable gems. Equipping grants the gem's subclass (stat layer 3)
and its ability; the flat passive bonus (stat layer 5) applies only while the
gem is active. Using the gem's one-time battle effect deactivates it until
the next battle, when ``activate_all_gems`` switches every gem back on.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, TYPE_CHECKING

from nextera.core.result import ErrorCode, Ok, Result, err
from nextera.core.stat_calculator import compute_stats
from nextera.data.loaders.gem_loader import get_gem_by_id
from nextera.data.models.ability import Ability
from nextera.data.models.gem import GemSpec
from nextera.data.models.unit import EquippedGem, GemState, Unit

if TYPE_CHECKING:
    from nextera.data.loaders.catalog import Catalog


@dataclass(frozen=True)
class EquippedGemInfo:
    """Equipped gem as shown in the UI."""

    gem: GemSpec
    state: GemState
    passive_active: bool


def _lookup(gem_id: str, catalog: Optional["Catalog"]) -> Optional[GemSpec]:
    if catalog is not None:
        return catalog.get_gem(gem_id)
    return get_gem_by_id(gem_id)


def equip_gem(unit: Unit, gem_id: str, catalog: Optional["Catalog"] = None) -> Result[Unit]:
    """Equip a gem; it starts active and sets the unit's subclass."""
    gem = _lookup(gem_id, catalog)
    if gem is None:
        return err(ErrorCode.UNKNOWN_GEM, f"Gem not found: {gem_id}")

    return Ok(unit.model_copy(update={
        "equipped_gem": EquippedGem(gem_id=gem_id, state=GemState.ACTIVE),
        "subclass": gem.grants_subclass,
    }))


def unequip_gem(unit: Unit) -> Unit:
    """Remove the gem together with the subclass it granted."""
    return unit.model_copy(update={"equipped_gem": None, "subclass": None})


def can_use_gem_effect(unit: Unit) -> bool:
    return unit.equipped_gem is not None and unit.equipped_gem.state == GemState.ACTIVE


def use_gem_effect(unit: Unit, catalog: Optional["Catalog"] = None) -> Result[Unit]:
    """Spend the gem's battle effect.

    Only the passive bonus is lost; subclass and granted ability stay.
    Battle HP above the reduced max HP is clamped down to it.
    """
    if unit.equipped_gem is None:
        return err(ErrorCode.NO_GEM_EQUIPPED, f"{unit.name} has no gem equipped")
    if unit.equipped_gem.state == GemState.INACTIVE:
        return err(
            ErrorCode.GEM_ALREADY_INACTIVE,
            f"{unit.name}'s gem is already inactive (already used this battle)",
        )

    gem = unit.equipped_gem.model_copy(update={"state": GemState.INACTIVE})
    spent = unit.model_copy(update={"equipped_gem": gem})
    if spent.current_hp is not None:
        max_hp = compute_stats(spent, catalog).max_hp
        if spent.current_hp > max_hp:
            spent = spent.model_copy(update={"current_hp": max_hp})
    return Ok(spent)


def activate_all_gems(team: Iterable[Unit]) -> tuple[Unit, ...]:
    """Reactivate every equipped gem; called at battle start."""
    activated = []
    for unit in team:
        if unit.equipped_gem is not None and unit.equipped_gem.state == GemState.INACTIVE:
            gem = unit.equipped_gem.model_copy(update={"state": GemState.ACTIVE})
            unit = unit.model_copy(update={"equipped_gem": gem})
        activated.append(unit)
    return tuple(activated)


def get_unit_abilities(unit: Unit, catalog: Optional["Catalog"] = None) -> tuple[Ability, ...]:
    """Abilities granted by the equipped gem, regardless of its state."""
    if unit.equipped_gem is None:
        return ()
    gem = _lookup(unit.equipped_gem.gem_id, catalog)
    if gem is None:
        return ()
    return (gem.granted_ability,)


def get_equipped_gem_info(unit: Unit, catalog: Optional["Catalog"] = None) -> Optional[EquippedGemInfo]:
    if unit.equipped_gem is None:
        return None
    gem = _lookup(unit.equipped_gem.gem_id, catalog)
    if gem is None:
        return None
    state = unit.equipped_gem.state
    return EquippedGemInfo(gem=gem, state=state, passive_active=state == GemState.ACTIVE)
