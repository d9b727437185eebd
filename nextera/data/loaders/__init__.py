# Data Loaders
from .unit_loader import (
    load_starter_units,
    get_starter_by_id,
    get_starters_by_role,
)
from .gem_loader import (
    load_gems,
    get_gem_by_id,
    load_elemental_gems,
    get_elemental_gem,
    load_matching_spells,
    load_counter_wards,
    load_gem_activations,
)
from .item_loader import (
    load_items,
    get_item_by_id,
    get_items_by_rarity,
    get_items_by_type,
)
from .opponent_loader import (
    load_opponents,
    get_opponent_by_id,
    get_opponents_by_difficulty,
    get_enemy_template,
)
from .catalog import Catalog, load_catalog, clear_cache

__all__ = [
    # Unit loaders
    "load_starter_units",
    "get_starter_by_id",
    "get_starters_by_role",
    # Gem loaders
    "load_gems",
    "get_gem_by_id",
    "load_elemental_gems",
    "get_elemental_gem",
    "load_matching_spells",
    "load_counter_wards",
    "load_gem_activations",
    # Item loaders
    "load_items",
    "get_item_by_id",
    "get_items_by_rarity",
    "get_items_by_type",
    # Opponent loaders
    "load_opponents",
    "get_opponent_by_id",
    "get_opponents_by_difficulty",
    "get_enemy_template",
    # Catalog bundle
    "Catalog",
    "load_catalog",
    "clear_cache",
]
