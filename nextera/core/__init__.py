# Core simulation modules
# GameController: import from nextera.core.game_controller (it depends on nextera.combat)
from .result import (
    ErrorCode,
    GameError,
    Ok,
    Err,
    Result,
    err,
    NextEraError,
    CatalogError,
    SaveFormatError,
    ResultError,
)
from .constants import (
    RANK_MULTIPLIER,
    CLASS_MODIFIERS,
    DEFAULT_MAX_MP,
    COUNTER_ELEMENT,
    SAVE_VERSION,
)
from .rng import RngStream, make_stream, derive_seed
from .stat_calculator import (
    CalculatedStats,
    StatBreakdown,
    compute_stats,
    calculate_stat_breakdown,
    get_rank_multiplier,
    get_class_modifiers,
    calculate_equipment_bonuses,
    get_gem_passive_bonus,
    get_current_hp,
    apply_damage,
    apply_healing,
)
from .element_system import (
    ElementRelationship,
    ActivationOutcome,
    get_counter_element,
    get_element_relationship,
    calculate_element_bonus,
    apply_element_bonus,
    get_granted_spells,
    set_active_gem,
    activate_gem,
    get_gem_activation,
    execute_gem_activation,
)
from .gem_system import (
    EquippedGemInfo,
    equip_gem,
    unequip_gem,
    use_gem_effect,
    activate_all_gems,
    can_use_gem_effect,
    get_unit_abilities,
    get_equipped_gem_info,
)
from .equipment import make_equipment, equip_item, unequip_item, get_equipped
from .reward_system import RewardSystem, calculate_experience
from .choice_system import ChoiceSystem, choice_stream
from .roster_manager import RosterManager, RosterStats, recruit_from_template
from .save_system import (
    SaveEnvelope,
    SaveStore,
    SaveSystem,
    SlotInfo,
    InMemorySaveStore,
    FileSaveStore,
    parse_envelope,
)

__all__ = [
    # Results
    "ErrorCode",
    "GameError",
    "Ok",
    "Err",
    "Result",
    "err",
    "NextEraError",
    "CatalogError",
    "SaveFormatError",
    "ResultError",
    # Constants
    "RANK_MULTIPLIER",
    "CLASS_MODIFIERS",
    "DEFAULT_MAX_MP",
    "COUNTER_ELEMENT",
    "SAVE_VERSION",
    # RNG
    "RngStream",
    "make_stream",
    "derive_seed",
    # Stats
    "CalculatedStats",
    "StatBreakdown",
    "compute_stats",
    "calculate_stat_breakdown",
    "get_rank_multiplier",
    "get_class_modifiers",
    "calculate_equipment_bonuses",
    "get_gem_passive_bonus",
    "get_current_hp",
    "apply_damage",
    "apply_healing",
    # Elemental alignment
    "ElementRelationship",
    "ActivationOutcome",
    "get_counter_element",
    "get_element_relationship",
    "calculate_element_bonus",
    "apply_element_bonus",
    "get_granted_spells",
    "set_active_gem",
    "activate_gem",
    "get_gem_activation",
    "execute_gem_activation",
    # Per-unit gems
    "EquippedGemInfo",
    "equip_gem",
    "unequip_gem",
    "use_gem_effect",
    "activate_all_gems",
    "can_use_gem_effect",
    "get_unit_abilities",
    "get_equipped_gem_info",
    # Equipment
    "make_equipment",
    "equip_item",
    "unequip_item",
    "get_equipped",
    # Rewards and choices
    "RewardSystem",
    "calculate_experience",
    "ChoiceSystem",
    "choice_stream",
    # Roster
    "RosterManager",
    "RosterStats",
    "recruit_from_template",
    # Persistence
    "SaveEnvelope",
    "SaveStore",
    "SaveSystem",
    "SlotInfo",
    "InMemorySaveStore",
    "FileSaveStore",
    "parse_envelope",
]
