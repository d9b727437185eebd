"""Ordered record of one battle's actions."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from nextera.data.models.battle import ActionType, BattleResult, CombatAction, Winner
from nextera.data.models.unit import Unit


@dataclass(frozen=True)
class BattleLog:
    """Immutable action log; every method returns a new log.

    Sequence numbers are assigned on ``record`` starting at 0, so the
    finished ``BattleResult`` always has a gap-free ``seq``.
    """

    actions: tuple[CombatAction, ...] = field(default_factory=tuple)
    turns_taken: int = 0

    @property
    def next_seq(self) -> int:
        return len(self.actions)

    def record(self, action: CombatAction) -> "BattleLog":
        stamped = action.model_copy(update={"seq": self.next_seq})
        return BattleLog(actions=self.actions + (stamped,), turns_taken=self.turns_taken)

    def record_defend(self, unit: Unit) -> "BattleLog":
        return self.record(CombatAction(seq=0, type=ActionType.DEFEND, actor_id=unit.id))

    def record_flee(self, unit: Unit) -> "BattleLog":
        return self.record(CombatAction(seq=0, type=ActionType.FLEE, actor_id=unit.id))

    def record_item(self, unit: Unit, target: Unit, healing: int, item_id: Optional[str] = None) -> "BattleLog":
        return self.record(CombatAction(
            seq=0,
            type=ActionType.ITEM,
            actor_id=unit.id,
            target_ids=(target.id,),
            ability_id=item_id,
            healing=healing,
        ))

    def next_turn(self) -> "BattleLog":
        return BattleLog(actions=self.actions, turns_taken=self.turns_taken + 1)

    def finish(self, winner: Winner, enemies: Iterable[Unit]) -> BattleResult:
        """Build the result; enemies at 0 HP count as defeated."""
        defeated = tuple(e.id for e in enemies if e.is_defeated)
        return BattleResult(
            winner=winner,
            actions=self.actions,
            units_defeated=defeated,
            turns_taken=self.turns_taken,
        )
