"""Opponent data loader for NextEra."""

from functools import lru_cache
from typing import Optional

from ..models.opponent import Difficulty, OpponentSpec
from ..models.unit import EnemyUnitTemplate
from ._source import parse_records, read_table

OPPONENTS_FILE = "opponents.json"


@lru_cache(maxsize=1)
def load_opponents() -> tuple[OpponentSpec, ...]:
    """Load all opponent teams.

    Returns:
        Tuple of OpponentSpec objects in catalog order.
    """
    records = read_table(OPPONENTS_FILE, "opponents")
    return tuple(parse_records(records, OpponentSpec.model_validate, "opponents"))


def get_opponent_by_id(opponent_id: str) -> Optional[OpponentSpec]:
    """Get an opponent by its ID.

    Args:
        opponent_id: The unique opponent identifier.

    Returns:
        OpponentSpec if found, None otherwise.
    """
    for opponent in load_opponents():
        if opponent.id == opponent_id:
            return opponent
    return None


def get_opponents_by_difficulty(difficulty: Difficulty) -> list[OpponentSpec]:
    """Get all opponents of one difficulty, in catalog order."""
    return [o for o in load_opponents() if o.difficulty == difficulty]


def get_enemy_template(template_id: str) -> Optional[EnemyUnitTemplate]:
    """Find an enemy unit template across every opponent."""
    for opponent in load_opponents():
        template = opponent.get_unit(template_id)
        if template is not None:
            return template
    return None
