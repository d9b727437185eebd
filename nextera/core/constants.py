"""NextEra Game Constants."""

from typing import Final

# =============================================================================
# UNITS
# =============================================================================
# Rank multipliers applied to hp/atk/def/speed (stat layer 2)
RANK_MULTIPLIER: Final[dict[str, float]] = {
    "C": 1.0,
    "B": 1.15,
    "A": 1.30,
    "S": 1.50,
}

# Subclass percentage modifiers (stat layer 3)
# Format: {subclass: {hp, attack, defense, speed}}
CLASS_MODIFIERS: Final[dict[str, dict[str, float]]] = {
    "Fire Adept": {"hp": 1.0, "attack": 1.10, "defense": 1.0, "speed": 1.05},
    "Water Adept": {"hp": 1.05, "attack": 1.0, "defense": 1.10, "speed": 1.0},
    "Earth Adept": {"hp": 1.10, "attack": 1.0, "defense": 1.15, "speed": 1.0},
    "Air Adept": {"hp": 1.0, "attack": 1.05, "defense": 1.0, "speed": 1.15},
    "Mystic Adept": {"hp": 1.05, "attack": 1.05, "defense": 1.05, "speed": 1.05},
}
NEUTRAL_CLASS_MODIFIERS: Final[dict[str, float]] = {
    "hp": 1.0,
    "attack": 1.0,
    "defense": 1.0,
    "speed": 1.0,
}

DEFAULT_MAX_MP: Final[int] = 50

# =============================================================================
# COMBAT
# =============================================================================
ABILITY_ATTACK_SCALING: Final[float] = 0.5  # Ability damage = power + atk * 0.5
CRIT_ROLL_SIDES: Final[int] = 100  # Crit roll is int(0, 99) < luck
CRIT_MULTIPLIER: Final[float] = 1.5
ATTACK_VARIANCE: Final[tuple[int, int]] = (-2, 2)
DEFEND_REDUCTION: Final[float] = 0.5

# =============================================================================
# ELEMENTAL ALIGNMENT
# =============================================================================
# Bidirectional counter pairs
COUNTER_ELEMENT: Final[dict[str, str]] = {
    "Mars": "Mercury",
    "Mercury": "Mars",
    "Venus": "Jupiter",
    "Jupiter": "Venus",
    "Moon": "Sun",
    "Sun": "Moon",
}

BONUS_MATCHING: Final[float] = 1.15  # +15%
BONUS_NEUTRAL: Final[float] = 1.05  # +5%
BONUS_COUNTER: Final[float] = 0.95  # -5%
BONUS_NONE: Final[float] = 1.0

# =============================================================================
# REWARDS
# =============================================================================
EXP_PER_TURN: Final[int] = 10
EXP_MULTIPLIER: Final[dict[str, float]] = {
    "Standard": 1.0,
    "Normal": 1.5,
    "Hard": 2.0,
}

# Item drops: independent trials per battle
ITEM_MAX_DROPS: Final[dict[str, int]] = {"Standard": 1, "Normal": 2, "Hard": 3}
ITEM_DROP_RATE: Final[dict[str, float]] = {"Standard": 0.3, "Normal": 0.5, "Hard": 0.8}

# Item rarity bands: roll > threshold, checked from rarest down
# Standard: 1% epic, 15% rare, 84% common
# Normal:   5% epic, 30% rare, 65% common
# Hard:    20% epic, 40% rare, 40% common
ITEM_RARITY_THRESHOLDS: Final[dict[str, dict[str, float]]] = {
    "Standard": {"epic": 0.99, "rare": 0.84},
    "Normal": {"epic": 0.95, "rare": 0.65},
    "Hard": {"epic": 0.80, "rare": 0.40},
}

# Equipment drops: one trial per defeated enemy
EQUIPMENT_DROP_CHANCE: Final[dict[str, float]] = {"Standard": 0.2, "Normal": 0.3, "Hard": 0.4}

# Equipment rarity bands: roll < upper bound, checked from common up (rest = epic)
EQUIPMENT_RARITY_BANDS: Final[dict[str, tuple[tuple[str, float], ...]]] = {
    "Standard": (("common", 0.60), ("uncommon", 0.85), ("rare", 0.97)),
    "Normal": (("common", 0.40), ("uncommon", 0.75), ("rare", 0.93)),
    "Hard": (("common", 0.20), ("uncommon", 0.55), ("rare", 0.85)),
}
EQUIPMENT_RARITY_BONUS: Final[dict[str, int]] = {
    "common": 5,
    "uncommon": 10,
    "rare": 15,
    "epic": 20,
}
EQUIPMENT_SLOTS: Final[tuple[str, ...]] = ("weapon", "armor", "accessory")
EQUIPMENT_SLOT_STAT: Final[dict[str, str]] = {
    "weapon": "attack",
    "armor": "defense",
    "accessory": "speed",
}
EQUIPMENT_SLOT_NAME: Final[dict[str, str]] = {
    "weapon": "Blade",
    "armor": "Mail",
    "accessory": "Charm",
}

# Gem drops: at most one per battle
GEM_DROP_CHANCE: Final[dict[str, float]] = {"Standard": 0.10, "Normal": 0.15, "Hard": 0.20}

BASE_GOLD: Final[int] = 50
GOLD_MULTIPLIER: Final[dict[str, int]] = {"Standard": 1, "Normal": 2, "Hard": 3}

# =============================================================================
# PERSISTENCE
# =============================================================================
SAVE_VERSION: Final[str] = "v1"
