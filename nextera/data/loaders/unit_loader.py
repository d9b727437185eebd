"""Starter unit loader."""

from functools import lru_cache
from typing import Optional

from ..models.unit import Role, Unit
from ._source import parse_records, read_table

UNITS_FILE = "units.json"


@lru_cache(maxsize=1)
def load_starter_units() -> tuple[Unit, ...]:
    """Load the selectable starter units.

    Returns:
        Tuple of Unit objects in catalog order.
    """
    records = read_table(UNITS_FILE, "starters")
    return tuple(parse_records(records, Unit.model_validate, "starters"))


def get_starter_by_id(unit_id: str) -> Optional[Unit]:
    """Get a starter unit by its ID.

    Args:
        unit_id: The unique unit identifier.

    Returns:
        Unit if found, None otherwise.
    """
    for unit in load_starter_units():
        if unit.id == unit_id:
            return unit
    return None


def get_starters_by_role(role: Role) -> list[Unit]:
    """Get all starter units with a given role."""
    return [unit for unit in load_starter_units() if unit.role == role]
