"""Reward System for NextEra.

Generates battle rewards from a stream scoped to ``('rewards', battle_index)``.
Draws are consumed in a fixed order so that the same opponent, result and
stream always produce the same reward:

1. experience (no draw)
2. items: ``max_drops`` trials, each a drop float then a rarity float and a choice
3. equipment: one trial per defeated enemy, each a drop float then slot choice
   and rarity float
4. gems: one drop float, then an index into the gem catalog
"""

import logging
import math
from typing import Optional

from nextera.core.constants import (
    BASE_GOLD,
    EQUIPMENT_DROP_CHANCE,
    EQUIPMENT_RARITY_BANDS,
    EQUIPMENT_SLOTS,
    EXP_MULTIPLIER,
    EXP_PER_TURN,
    GEM_DROP_CHANCE,
    GOLD_MULTIPLIER,
    ITEM_DROP_RATE,
    ITEM_MAX_DROPS,
    ITEM_RARITY_THRESHOLDS,
)
from nextera.core.equipment import make_equipment
from nextera.core.rng import RngStream
from nextera.data.loaders.catalog import Catalog, load_catalog
from nextera.data.models.battle import BattleResult, BattleReward
from nextera.data.models.item import Item
from nextera.data.models.opponent import Difficulty, OpponentSpec
from nextera.data.models.unit import Equipment, EquipmentSlot, Rarity

logger = logging.getLogger(__name__)


def calculate_experience(difficulty: Difficulty, turns_taken: int) -> int:
    """floor(turns * 10 * difficulty multiplier)."""
    return math.floor(turns_taken * EXP_PER_TURN * EXP_MULTIPLIER[difficulty])


def roll_item_rarity(roll: float, difficulty: Difficulty) -> Rarity:
    thresholds = ITEM_RARITY_THRESHOLDS[difficulty]
    if roll > thresholds["epic"]:
        return Rarity.EPIC
    if roll > thresholds["rare"]:
        return Rarity.RARE
    return Rarity.COMMON


def roll_equipment_rarity(roll: float, difficulty: Difficulty) -> Rarity:
    for rarity, upper in EQUIPMENT_RARITY_BANDS[difficulty]:
        if roll < upper:
            return Rarity(rarity)
    return Rarity.EPIC


class RewardSystem:
    """
    Generates loot, experience and recruitable enemies after a battle.
    """

    def __init__(self, catalog: Optional[Catalog] = None):
        self.catalog = catalog if catalog is not None else load_catalog()

    def generate_rewards(
        self,
        opponent: OpponentSpec,
        result: BattleResult,
        stream: RngStream,
    ) -> BattleReward:
        """
        Generate the reward for a finished battle.

        Args:
            opponent: The opponent that was fought
            result: The completed battle result
            stream: Stream scoped to ``(run_seed, 'rewards', battle_index)``

        Returns:
            BattleReward, identical for identical inputs
        """
        difficulty = opponent.difficulty
        experience = calculate_experience(difficulty, result.turns_taken)

        items = self._roll_items(stream, difficulty)
        equipment = self._roll_equipment(stream, difficulty, len(result.units_defeated))
        gems = self._roll_gems(stream, difficulty)

        # Only units actually defeated, not the whole opponent roster
        defeated = tuple(u for u in opponent.units if u.id in result.units_defeated)

        logger.info(
            "Rewards generated: opponent=%s difficulty=%s exp=%d items=%d equipment=%d gems=%d defeated=%d",
            opponent.id, difficulty, experience, len(items), len(equipment), len(gems), len(defeated),
        )

        return BattleReward(
            items=items,
            equipment=equipment,
            gems=gems,
            experience=experience,
            defeated_enemies=defeated,
        )

    def _roll_items(self, stream: RngStream, difficulty: Difficulty) -> tuple[Item, ...]:
        items = []
        for _ in range(ITEM_MAX_DROPS[difficulty]):
            if stream.float() < ITEM_DROP_RATE[difficulty]:
                item = self._roll_single_item(stream, difficulty)
                if item is not None:
                    items.append(item)
        return tuple(items)

    def _roll_single_item(self, stream: RngStream, difficulty: Difficulty) -> Optional[Item]:
        rarity = roll_item_rarity(stream.float(), difficulty)
        pool = self.catalog.items_of_rarity(rarity) or self.catalog.items_of_rarity(Rarity.COMMON)
        if not pool:
            logger.warning("No %s or common items in catalog; drop skipped", rarity)
            return None
        return stream.choose(pool)

    def _roll_equipment(
        self,
        stream: RngStream,
        difficulty: Difficulty,
        defeated_count: int,
    ) -> tuple[Equipment, ...]:
        # Stream path keeps generated ids unique per battle
        scope = "-".join(stream.path) or "root"
        pieces = []
        for n in range(defeated_count):
            if stream.float() < EQUIPMENT_DROP_CHANCE[difficulty]:
                slot = EquipmentSlot(stream.choose(EQUIPMENT_SLOTS))
                rarity = roll_equipment_rarity(stream.float(), difficulty)
                pieces.append(make_equipment(f"eq_{scope}_{n}_{slot.value}", slot, rarity))
        return tuple(pieces)

    def _roll_gems(self, stream: RngStream, difficulty: Difficulty) -> tuple[str, ...]:
        if stream.float() >= GEM_DROP_CHANCE[difficulty] or not self.catalog.gems:
            return ()
        gem = self.catalog.gems[stream.int(0, len(self.catalog.gems) - 1)]
        return (gem.id,)

    def calculate_gold(self, opponent: OpponentSpec) -> int:
        """50 * difficulty multiplier * number of enemy units."""
        return BASE_GOLD * GOLD_MULTIPLIER[opponent.difficulty] * len(opponent.units)
