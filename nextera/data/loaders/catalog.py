"""Catalog bundle injected into the orchestrator and reward generator."""

from dataclasses import dataclass, field
from typing import Optional

from ..models.ability import Ability
from ..models.gem import ElementalGem, GemActivation, GemSpec
from ..models.item import Item
from ..models.opponent import Difficulty, OpponentSpec
from ..models.unit import Element, EnemyUnitTemplate, Rarity, Unit
from .gem_loader import (
    load_counter_wards,
    load_elemental_gems,
    load_gem_activations,
    load_gems,
    load_matching_spells,
)
from .item_loader import load_items
from .opponent_loader import load_opponents
from .unit_loader import load_starter_units


@dataclass(frozen=True)
class Catalog:
    """Read-only view over every static table the core reads."""

    starters: tuple[Unit, ...] = ()
    gems: tuple[GemSpec, ...] = ()
    items: tuple[Item, ...] = ()
    opponents: tuple[OpponentSpec, ...] = ()
    elemental_gems: tuple[ElementalGem, ...] = ()
    matching_spells: dict[Element, Ability] = field(default_factory=dict)
    counter_wards: dict[Element, Ability] = field(default_factory=dict)
    activations: dict[Element, GemActivation] = field(default_factory=dict)

    def get_gem(self, gem_id: str) -> Optional[GemSpec]:
        return next((g for g in self.gems if g.id == gem_id), None)

    def get_item(self, item_id: str) -> Optional[Item]:
        return next((i for i in self.items if i.id == item_id), None)

    def get_opponent(self, opponent_id: str) -> Optional[OpponentSpec]:
        return next((o for o in self.opponents if o.id == opponent_id), None)

    def get_elemental_gem(self, gem_id: str) -> Optional[ElementalGem]:
        return next((g for g in self.elemental_gems if g.id == gem_id), None)

    def get_enemy_template(self, template_id: str) -> Optional[EnemyUnitTemplate]:
        for opponent in self.opponents:
            template = opponent.get_unit(template_id)
            if template is not None:
                return template
        return None

    def items_of_rarity(self, rarity: Rarity) -> list[Item]:
        return [i for i in self.items if i.rarity == rarity]

    def opponents_of_difficulty(self, difficulty: Difficulty) -> list[OpponentSpec]:
        return [o for o in self.opponents if o.difficulty == difficulty]


def load_catalog() -> Catalog:
    """Build a Catalog from the packaged JSON tables."""
    return Catalog(
        starters=load_starter_units(),
        gems=load_gems(),
        items=load_items(),
        opponents=load_opponents(),
        elemental_gems=load_elemental_gems(),
        matching_spells=load_matching_spells(),
        counter_wards=load_counter_wards(),
        activations=load_gem_activations(),
    )


def clear_cache() -> None:
    """Drop every cached table so the next load re-reads the files."""
    for loader in (
        load_starter_units,
        load_gems,
        load_items,
        load_opponents,
        load_elemental_gems,
        load_matching_spells,
        load_counter_wards,
        load_gem_activations,
    ):
        loader.cache_clear()
