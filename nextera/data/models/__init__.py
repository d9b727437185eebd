# Data Models
from .ability import (
    Ability,
    AbilityEffect,
    BuffEffect,
    BuffStat,
    CleanseEffect,
    DamageEffect,
    HealEffect,
    TargetType,
)
from .unit import (
    BaseStats,
    Element,
    EnemyUnitTemplate,
    Equipment,
    EquipmentLoadout,
    EquipmentSlot,
    EquippedGem,
    GemState,
    Rank,
    Rarity,
    Role,
    StatBonus,
    Unit,
)
from .gem import ActivationEffect, ActiveGemState, ElementalGem, GemActivation, GemEffect, GemSpec
from .item import Item, ItemType
from .opponent import Difficulty, OpponentPreview, OpponentSpec
from .battle import ActionType, BattleResult, BattleReward, CombatAction, Winner
from .progression import ProgressionCounters, Roster, RunContext

__all__ = [
    "Ability",
    "AbilityEffect",
    "BuffEffect",
    "BuffStat",
    "CleanseEffect",
    "DamageEffect",
    "HealEffect",
    "TargetType",
    "BaseStats",
    "Element",
    "EnemyUnitTemplate",
    "Equipment",
    "EquipmentLoadout",
    "EquipmentSlot",
    "EquippedGem",
    "GemState",
    "Rank",
    "Rarity",
    "Role",
    "StatBonus",
    "Unit",
    "ActivationEffect",
    "ActiveGemState",
    "ElementalGem",
    "GemActivation",
    "GemEffect",
    "GemSpec",
    "Item",
    "ItemType",
    "Difficulty",
    "OpponentPreview",
    "OpponentSpec",
    "ActionType",
    "BattleResult",
    "BattleReward",
    "CombatAction",
    "Winner",
    "ProgressionCounters",
    "Roster",
    "RunContext",
]
