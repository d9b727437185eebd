"""Equipment loadout for NextEra.

Each unit has one weapon, armor and accessory slot. Equipped pieces add their
flat bonus in stat layer 4.
"""

from typing import Optional

from nextera.core.constants import EQUIPMENT_RARITY_BONUS, EQUIPMENT_SLOT_NAME, EQUIPMENT_SLOT_STAT
from nextera.data.models.unit import Equipment, EquipmentSlot, Rarity, StatBonus, Unit


def make_equipment(equipment_id: str, slot: EquipmentSlot, rarity: Rarity) -> Equipment:
    """Build a generated piece whose bonus goes to the slot's stat."""
    stat = EQUIPMENT_SLOT_STAT[slot]
    bonus = EQUIPMENT_RARITY_BONUS[rarity]
    return Equipment(
        id=equipment_id,
        name=f"{rarity.value.title()} {EQUIPMENT_SLOT_NAME[slot]}",
        slot=slot,
        rarity=rarity,
        stats=StatBonus(**{stat: bonus}),
    )


def get_equipped(unit: Unit, slot: EquipmentSlot) -> Optional[Equipment]:
    return getattr(unit.equipment, slot.value)


def equip_item(unit: Unit, equipment: Equipment) -> tuple[Unit, Optional[Equipment]]:
    """
    Put a piece in its slot.

    Returns:
        The updated unit and the piece it replaced (if any)
    """
    previous = get_equipped(unit, equipment.slot)
    loadout = unit.equipment.model_copy(update={equipment.slot.value: equipment})
    return unit.model_copy(update={"equipment": loadout}), previous


def unequip_item(unit: Unit, slot: EquipmentSlot) -> tuple[Unit, Optional[Equipment]]:
    """Empty a slot, returning the removed piece."""
    previous = get_equipped(unit, slot)
    if previous is None:
        return unit, None
    loadout = unit.equipment.model_copy(update={slot.value: None})
    return unit.model_copy(update={"equipment": loadout}), previous
