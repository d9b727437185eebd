"""Item data model for NextEra."""

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field

from .unit import Rarity


class ItemType(StrEnum):
    """Item classification."""
    CONSUMABLE = "consumable"
    MATERIAL = "material"


class Item(BaseModel):
    """Inventory item dropped as loot."""
    id: str = Field(..., description="Unique identifier (lowercase, underscores)")
    name: str = Field(..., description="Display name")
    description: str = ""
    type: ItemType = ItemType.CONSUMABLE
    rarity: Rarity = Rarity.COMMON
    heal_amount: Optional[int] = Field(default=None, ge=0, description="HP restored when used")

    model_config = {"frozen": True}

    @property
    def is_consumable(self) -> bool:
        return self.type == ItemType.CONSUMABLE
