"""Opponent data model for NextEra."""

from enum import StrEnum

from pydantic import BaseModel, Field

from .unit import EnemyUnitTemplate


class Difficulty(StrEnum):
    """Opponent tier; drives reward rates and multipliers."""
    STANDARD = "Standard"
    NORMAL = "Normal"
    HARD = "Hard"


class OpponentSpec(BaseModel):
    """An opponent team that can be offered as a battle choice."""
    id: str
    name: str
    difficulty: Difficulty
    primary_tag: str = ""
    units: tuple[EnemyUnitTemplate, ...] = Field(..., min_length=1)

    model_config = {"frozen": True}

    def get_unit(self, unit_id: str) -> EnemyUnitTemplate | None:
        for unit in self.units:
            if unit.id == unit_id:
                return unit
        return None


class OpponentPreview(BaseModel):
    """An opponent as presented in the choice screen."""
    spec: OpponentSpec
    battle_index: int = Field(..., ge=0)
    threat: int = Field(default=0, description="Sum of unit base stats")

    model_config = {"frozen": True}

    @classmethod
    def from_spec(cls, spec: OpponentSpec, battle_index: int) -> "OpponentPreview":
        threat = sum(
            u.base_stats.hp + u.base_stats.atk + u.base_stats.defense + u.base_stats.speed
            for u in spec.units
        )
        return cls(spec=spec, battle_index=battle_index, threat=threat)
