"""Run-scoped state: roster, progression counters and the run context."""

from typing import Optional

from pydantic import BaseModel, Field

from .battle import BattleResult, BattleReward
from .gem import ActiveGemState
from .item import Item
from .opponent import OpponentPreview
from .unit import Equipment, Unit


class ProgressionCounters(BaseModel):
    """Counters persisted across saves."""
    runs_attempted: int = Field(default=0, ge=0)
    runs_completed: int = Field(default=0, ge=0)
    battles_won: int = Field(default=0, ge=0)
    battles_lost: int = Field(default=0, ge=0)
    units_recruited: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class Roster(BaseModel):
    """Active party plus bench."""
    active_party: tuple[Unit, ...] = ()
    bench: tuple[Unit, ...] = ()

    model_config = {"frozen": True}

    @property
    def all_units(self) -> tuple[Unit, ...]:
        return self.active_party + self.bench


class RunContext(BaseModel):
    """Everything a run carries between orchestrator operations."""
    run_seed: int
    battle_index: int = Field(default=0, ge=0)
    roster: Roster = Field(default_factory=Roster)
    inventory: tuple[Item, ...] = ()
    equipment_inventory: tuple[Equipment, ...] = ()
    gems: tuple[str, ...] = Field(default=(), description="Owned per-unit gem ids")
    active_gem_state: ActiveGemState = Field(default_factory=ActiveGemState)
    progression: ProgressionCounters = Field(default_factory=ProgressionCounters)
    current_choices: tuple[OpponentPreview, ...] = ()
    selected_opponent_id: Optional[str] = None
    last_battle_result: Optional[BattleResult] = None
    last_reward: Optional[BattleReward] = None

    model_config = {"frozen": True}

    def get_selected_opponent(self) -> Optional[OpponentPreview]:
        for preview in self.current_choices:
            if preview.spec.id == self.selected_opponent_id:
                return preview
        return None
