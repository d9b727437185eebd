# Combat resolution
from nextera.combat.ability import (
    Usability,
    can_use_ability,
    use_ability,
    restore_mp,
    restore_all_mp,
    calculate_ability_damage,
    calculate_ability_healing,
    get_ability_buff_amount,
    get_ability_buff_duration,
    is_ability_usable,
)
from nextera.combat.critical import check_critical_hit, apply_critical, validate_luck
from nextera.combat.resolver import (
    ActionOutcome,
    resolve_attack,
    resolve_ability,
    resolve_gem_effect,
)
from nextera.combat.battle_log import BattleLog

__all__ = [
    # Abilities
    "Usability",
    "can_use_ability",
    "use_ability",
    "restore_mp",
    "restore_all_mp",
    "calculate_ability_damage",
    "calculate_ability_healing",
    "get_ability_buff_amount",
    "get_ability_buff_duration",
    "is_ability_usable",
    # Critical hits
    "check_critical_hit",
    "apply_critical",
    "validate_luck",
    # Resolver
    "ActionOutcome",
    "resolve_attack",
    "resolve_ability",
    "resolve_gem_effect",
    # Log
    "BattleLog",
]
