"""Ability data model."""

from enum import StrEnum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class TargetType(StrEnum):
    """Who an ability or effect can target."""
    SINGLE_ENEMY = "single_enemy"
    SINGLE_ALLY = "single_ally"
    ALL_ENEMIES = "all_enemies"
    ALL_ALLIES = "all_allies"
    SELF = "self"


ENEMY_TARGETS = (TargetType.SINGLE_ENEMY, TargetType.ALL_ENEMIES)
ALLY_TARGETS = (TargetType.SINGLE_ALLY, TargetType.ALL_ALLIES)


class BuffStat(StrEnum):
    """Stats a buff can raise."""
    ATTACK = "attack"
    DEFENSE = "defense"
    SPEED = "speed"


class DamageEffect(BaseModel):
    """Deals power + caster attack scaling."""
    type: Literal["damage"] = "damage"
    target: TargetType
    power: int = Field(..., ge=0)
    element: Optional[str] = Field(default=None, description="Flavour element (fire, water, air, ...)")

    model_config = {"frozen": True}


class HealEffect(BaseModel):
    """Restores a fixed amount of HP."""
    type: Literal["heal"] = "heal"
    target: TargetType
    power: int = Field(..., ge=0)
    element: Optional[str] = None

    model_config = {"frozen": True}


class BuffEffect(BaseModel):
    """Raises one stat for a number of turns."""
    type: Literal["buff"] = "buff"
    target: TargetType
    power: int = Field(default=0, ge=0)
    buff_stat: BuffStat
    buff_amount: int
    buff_duration: int = Field(..., ge=1, description="Turns the buff lasts")

    model_config = {"frozen": True}


class CleanseEffect(BaseModel):
    """Removes harmful effects; power is an optional heal."""
    type: Literal["debuff_remove"] = "debuff_remove"
    target: TargetType
    power: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


AbilityEffect = Annotated[
    Union[DamageEffect, HealEffect, BuffEffect, CleanseEffect],
    Field(discriminator="type"),
]


class Ability(BaseModel):
    """An MP-costed ability."""
    id: str = Field(..., description="Unique identifier (lowercase, underscores)")
    name: str
    description: str = ""
    mp_cost: int = Field(..., gt=0)
    effect: AbilityEffect

    model_config = {"frozen": True}

    @property
    def target(self) -> TargetType:
        return self.effect.target

    @property
    def is_damage(self) -> bool:
        return self.effect.type == "damage"

    @property
    def is_heal(self) -> bool:
        return self.effect.type == "heal"
