"""Gem data models.

Two separate gem mechanics share this module:
- GemSpec: per-unit equippable gems (subclass, ability, passive bonus).
- ElementalGem / ActiveGemState: the single run-wide alignment gem.
"""

from enum import StrEnum
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .ability import Ability, BuffStat, TargetType
from .unit import Element, StatBonus


class GemEffect(BaseModel):
    """One-time battle effect of an equipped gem; deactivates the gem."""
    type: Literal["damage", "heal", "buff", "debuff_remove"]
    target: TargetType
    power: int = Field(default=0, ge=0)
    buff_stat: Optional[BuffStat] = None
    buff_amount: int = 0
    buff_duration: int = 0

    model_config = {"frozen": True}


class GemSpec(BaseModel):
    """Per-unit equippable gem."""
    id: str = Field(..., description="Unique identifier (lowercase, underscores)")
    name: str
    description: str = ""
    grants_subclass: str = Field(..., description="Subclass granted while equipped")
    passive_bonus: StatBonus = Field(default_factory=StatBonus, description="Flat bonus while active")
    granted_ability: Ability
    gem_effect: GemEffect
    combination_element: Optional[str] = None
    combination_power: int = 0

    model_config = {"frozen": True}


class ElementalGem(BaseModel):
    """The run-wide alignment gem chosen by the player."""
    id: str
    element: Element
    name: str
    description: str = ""

    model_config = {"frozen": True}


class ActiveGemState(BaseModel):
    """Alignment gem selection and its one-time activation flag."""
    active_gem: Optional[ElementalGem] = None
    is_activated: bool = False

    model_config = {"frozen": True}


class ActivationEffect(StrEnum):
    """Party-wide effects triggered by activating the alignment gem."""
    AOE_DAMAGE = "aoe_damage"
    PARTY_HEAL = "party_heal"
    PARTY_BUFF = "party_buff"
    ENEMY_DEBUFF = "enemy_debuff"


class GemActivation(BaseModel):
    """Activation ability for one element."""
    id: str
    name: str
    description: str = ""
    effect: ActivationEffect
    power: int = Field(..., ge=0)
    target: Literal["all_enemies", "all_allies"]

    model_config = {"frozen": True}
