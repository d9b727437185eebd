"""Battle outcome models: actions, results and rewards."""

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .ability import BuffStat
from .item import Item
from .unit import EnemyUnitTemplate, Equipment


class Winner(StrEnum):
    """Battle winner; fleeing counts as a draw."""
    PLAYER = "player"
    ENEMY = "enemy"
    DRAW = "draw"


class ActionType(StrEnum):
    """Kinds of combat action."""
    ATTACK = "attack"
    ABILITY = "ability"
    GEM_EFFECT = "gem_effect"
    GEM_ACTIVATION = "gem_activation"
    DEFEND = "defend"
    ITEM = "item"
    FLEE = "flee"


class CombatAction(BaseModel):
    """One resolved action in a battle log."""
    seq: int = Field(..., ge=0)
    type: ActionType
    actor_id: str
    target_ids: tuple[str, ...] = ()
    ability_id: Optional[str] = None
    damage: int = Field(default=0, ge=0)
    healing: int = Field(default=0, ge=0)
    is_critical: bool = False
    buff_stat: Optional[BuffStat] = None
    buff_amount: int = 0
    buff_duration: int = 0

    model_config = {"frozen": True}


class BattleResult(BaseModel):
    """Outcome of a completed battle."""
    winner: Winner
    actions: tuple[CombatAction, ...] = ()
    units_defeated: tuple[str, ...] = Field(default=(), description="Defeated enemy unit ids")
    turns_taken: int = Field(..., ge=0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_sequence(self) -> "BattleResult":
        for expected, action in enumerate(self.actions):
            if action.seq != expected:
                raise ValueError(f"Action seq {action.seq} at position {expected}; seq must start at 0 and increase by 1")
        return self


class BattleReward(BaseModel):
    """Loot and experience granted after a battle."""
    items: tuple[Item, ...] = ()
    equipment: tuple[Equipment, ...] = ()
    gems: tuple[str, ...] = Field(default=(), max_length=1)
    experience: int = Field(default=0, ge=0)
    defeated_enemies: tuple[EnemyUnitTemplate, ...] = ()

    model_config = {"frozen": True}
