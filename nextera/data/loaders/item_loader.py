"""Item data loader for NextEra."""

from functools import lru_cache
from typing import Optional

from ..models.item import Item, ItemType
from ..models.unit import Rarity
from ._source import parse_records, read_table

ITEMS_FILE = "items.json"


@lru_cache(maxsize=1)
def load_items() -> tuple[Item, ...]:
    """Load all droppable items.

    Returns:
        Tuple of Item objects in catalog order.
    """
    records = read_table(ITEMS_FILE, "items")
    return tuple(parse_records(records, Item.model_validate, "items"))


def get_item_by_id(item_id: str) -> Optional[Item]:
    """Get an item by its ID.

    Args:
        item_id: The unique item identifier.

    Returns:
        Item object if found, None otherwise.
    """
    for item in load_items():
        if item.id == item_id:
            return item
    return None


def get_items_by_rarity(rarity: Rarity) -> list[Item]:
    """Get all items of one rarity, in catalog order."""
    return [item for item in load_items() if item.rarity == rarity]


def get_items_by_type(item_type: ItemType) -> list[Item]:
    """Get all items of a specific type."""
    return [item for item in load_items() if item.type == item_type]
