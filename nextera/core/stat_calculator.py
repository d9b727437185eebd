"""Stat Calculator for NextEra.

Effective stats are composed from five ordered layers:

1. base stats stored on the unit
2. rank multiplier
3. subclass multipliers
4. equipment flat bonus
5. equipped-gem passive flat bonus (only while the gem is active)

``final = floor(base * rank * class) + equipment + gem`` per stat. The layers
are not commutative, so they must always be applied in this order.
"""

import math
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from nextera.core.constants import (
    CLASS_MODIFIERS,
    DEFAULT_MAX_MP,
    NEUTRAL_CLASS_MODIFIERS,
    RANK_MULTIPLIER,
)
from nextera.data.loaders.gem_loader import get_gem_by_id
from nextera.data.models.unit import GemState, StatBonus, Unit

if TYPE_CHECKING:
    from nextera.data.loaders.catalog import Catalog

STAT_NAMES: tuple[str, ...] = ("hp", "attack", "defense", "speed")

# Stat name -> Unit field holding the base value
_BASE_FIELD = {"hp": "hp", "attack": "atk", "defense": "defense", "speed": "speed"}


@dataclass(frozen=True)
class CalculatedStats:
    """Effective combat stats of a unit."""

    max_hp: int
    attack: int
    defense: int
    speed: int
    max_mp: int = DEFAULT_MAX_MP

    def get(self, stat: str) -> int:
        return self.max_hp if stat == "hp" else getattr(self, stat)


@dataclass(frozen=True)
class StatBreakdown:
    """Per-layer contribution to one stat, for display."""

    stat: str
    base: int
    from_rank: int
    from_class: int
    from_equipment: int
    from_gem: int
    final: int


def get_rank_multiplier(rank: str) -> float:
    """Multiplier for a rank; unknown ranks count as C."""
    return RANK_MULTIPLIER.get(rank, 1.0)


def get_class_modifiers(subclass: Optional[str]) -> dict[str, float]:
    """Per-stat multipliers for a subclass; none or unknown is neutral."""
    if subclass is None:
        return dict(NEUTRAL_CLASS_MODIFIERS)
    return dict(CLASS_MODIFIERS.get(subclass, NEUTRAL_CLASS_MODIFIERS))


def calculate_equipment_bonuses(unit: Unit) -> StatBonus:
    """Sum of flat bonuses over the unit's equipped pieces."""
    total = StatBonus()
    for piece in unit.equipment.pieces():
        total = total + piece.stats
    return total


def get_gem_passive_bonus(unit: Unit, catalog: Optional["Catalog"] = None) -> StatBonus:
    """Flat passive bonus of the equipped gem.

    Zero when no gem is equipped, when the gem is inactive, or when the gem
    id is not in the catalog.
    """
    equipped = unit.equipped_gem
    if equipped is None or equipped.state != GemState.ACTIVE:
        return StatBonus()

    gem = catalog.get_gem(equipped.gem_id) if catalog is not None else get_gem_by_id(equipped.gem_id)
    if gem is None:
        return StatBonus()
    return gem.passive_bonus


def _scaled(base: int, rank_mult: float, class_mult: float) -> int:
    # Rank first, then class, on the unfloored product
    return math.floor(base * rank_mult * class_mult)


def compute_stats(unit: Unit, catalog: Optional["Catalog"] = None) -> CalculatedStats:
    """
    Calculate effective stats for a unit.

    Args:
        unit: The unit snapshot
        catalog: Catalog used to resolve the equipped gem (packaged tables by default)

    Returns:
        CalculatedStats with all five layers applied
    """
    rank_mult = get_rank_multiplier(unit.rank)
    class_mods = get_class_modifiers(unit.subclass)
    equipment = calculate_equipment_bonuses(unit)
    gem = get_gem_passive_bonus(unit, catalog)

    values = {}
    for stat in STAT_NAMES:
        base = getattr(unit, _BASE_FIELD[stat])
        values[stat] = (
            _scaled(base, rank_mult, class_mods[stat])
            + getattr(equipment, stat)
            + getattr(gem, stat)
        )

    return CalculatedStats(
        max_hp=values["hp"],
        attack=values["attack"],
        defense=values["defense"],
        speed=values["speed"],
        max_mp=DEFAULT_MAX_MP,
    )


def calculate_stat_breakdown(
    unit: Unit,
    stat: str,
    catalog: Optional["Catalog"] = None,
) -> StatBreakdown:
    """Break one stat down into the contribution of each layer."""
    if stat not in _BASE_FIELD:
        raise ValueError(f"Unknown stat: {stat}")

    base = getattr(unit, _BASE_FIELD[stat])
    rank_mult = get_rank_multiplier(unit.rank)
    after_rank = math.floor(base * rank_mult)
    after_class = _scaled(base, rank_mult, get_class_modifiers(unit.subclass)[stat])
    from_equipment = getattr(calculate_equipment_bonuses(unit), stat)
    from_gem = getattr(get_gem_passive_bonus(unit, catalog), stat)

    return StatBreakdown(
        stat=stat,
        base=base,
        from_rank=after_rank - base,
        from_class=after_class - after_rank,
        from_equipment=from_equipment,
        from_gem=from_gem,
        final=after_class + from_equipment + from_gem,
    )


def get_current_hp(unit: Unit, catalog: Optional["Catalog"] = None) -> int:
    """Battle HP; a unit without ``current_hp`` is at full health."""
    if unit.current_hp is not None:
        return unit.current_hp
    return compute_stats(unit, catalog).max_hp


def apply_damage(unit: Unit, amount: int, catalog: Optional["Catalog"] = None) -> Unit:
    """Return the unit with HP reduced, clamped at 0."""
    hp = max(0, get_current_hp(unit, catalog) - max(0, amount))
    return unit.model_copy(update={"current_hp": hp})


def apply_healing(unit: Unit, amount: int, catalog: Optional["Catalog"] = None) -> Unit:
    """Return the unit with HP restored, clamped at max HP. Defeated units stay down."""
    if unit.is_defeated:
        return unit
    max_hp = compute_stats(unit, catalog).max_hp
    hp = min(max_hp, get_current_hp(unit, catalog) + max(0, amount))
    return unit.model_copy(update={"current_hp": hp})
