"""Roster Manager for NextEra.

Splits the player's units into an active party (at most four, the units that
fight) and an unbounded bench. Every operation returns a new ``Roster``.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from nextera.config import settings
from nextera.core.result import ErrorCode, Ok, Result, err
from nextera.data.models.progression import Roster
from nextera.data.models.unit import EnemyUnitTemplate, Unit


@dataclass(frozen=True)
class RosterStats:
    active_count: int
    bench_count: int
    total_count: int
    has_full_active_party: bool


def _index_of(units: tuple[Unit, ...], unit_id: str) -> int:
    for i, unit in enumerate(units):
        if unit.id == unit_id:
            return i
    return -1


class RosterManager:
    """
    Active party / bench bookkeeping.
    """

    def __init__(self, max_active_size: Optional[int] = None):
        self.max_active_size = max_active_size or settings.MAX_ACTIVE_PARTY

    def create_roster_from_team(self, team: Iterable[Unit]) -> Roster:
        """First ``max_active_size`` units go to the party, the rest to the bench."""
        team = tuple(team)
        return Roster(
            active_party=team[: self.max_active_size],
            bench=team[self.max_active_size:],
        )

    def get_active_team(self, roster: Roster) -> tuple[Unit, ...]:
        return roster.active_party

    def get_all_units(self, roster: Roster) -> tuple[Unit, ...]:
        return roster.all_units

    def get_unit(self, roster: Roster, unit_id: str) -> Optional[Unit]:
        for unit in roster.all_units:
            if unit.id == unit_id:
                return unit
        return None

    def swap_units(self, roster: Roster, bench_unit_id: str, active_unit_id: str) -> Result[Roster]:
        """Exchange a bench unit with an active one, keeping both positions."""
        bench_index = _index_of(roster.bench, bench_unit_id)
        if bench_index == -1:
            return err(ErrorCode.UNKNOWN_UNIT, f"Bench unit {bench_unit_id} not found")

        active_index = _index_of(roster.active_party, active_unit_id)
        if active_index == -1:
            return err(ErrorCode.UNKNOWN_UNIT, f"Active unit {active_unit_id} not found")

        bench = list(roster.bench)
        active = list(roster.active_party)
        bench[bench_index], active[active_index] = active[active_index], bench[bench_index]
        return Ok(Roster(active_party=tuple(active), bench=tuple(bench)))

    def move_to_active(self, roster: Roster, unit_id: str) -> Result[Roster]:
        """Promote a bench unit into a free party slot."""
        index = _index_of(roster.bench, unit_id)
        if index == -1:
            return err(ErrorCode.UNKNOWN_UNIT, f"Bench unit {unit_id} not found")
        if len(roster.active_party) >= self.max_active_size:
            return err(ErrorCode.TEAM_FULL, f"Active party already has {self.max_active_size} units")

        unit = roster.bench[index]
        return Ok(Roster(
            active_party=roster.active_party + (unit,),
            bench=roster.bench[:index] + roster.bench[index + 1:],
        ))

    def move_to_bench(self, roster: Roster, unit_id: str) -> Result[Roster]:
        """Bench an active unit; the party may not become empty."""
        index = _index_of(roster.active_party, unit_id)
        if index == -1:
            return err(ErrorCode.UNKNOWN_UNIT, f"Active unit {unit_id} not found")
        if len(roster.active_party) == 1:
            return err(ErrorCode.INVALID_ROSTER, "Active party cannot be empty")

        unit = roster.active_party[index]
        return Ok(Roster(
            active_party=roster.active_party[:index] + roster.active_party[index + 1:],
            bench=roster.bench + (unit,),
        ))

    def add_recruited_unit(self, roster: Roster, unit: Unit) -> Roster:
        """Join the party if there is room, otherwise the bench."""
        if len(roster.active_party) < self.max_active_size:
            return Roster(active_party=roster.active_party + (unit,), bench=roster.bench)
        return Roster(active_party=roster.active_party, bench=roster.bench + (unit,))

    def replace_unit(self, roster: Roster, unit_id: str, new_unit: Unit) -> Result[Roster]:
        """Put ``new_unit`` in the place of ``unit_id`` (party or bench)."""
        index = _index_of(roster.active_party, unit_id)
        if index != -1:
            active = roster.active_party[:index] + (new_unit,) + roster.active_party[index + 1:]
            return Ok(Roster(active_party=active, bench=roster.bench))

        index = _index_of(roster.bench, unit_id)
        if index != -1:
            bench = roster.bench[:index] + (new_unit,) + roster.bench[index + 1:]
            return Ok(Roster(active_party=roster.active_party, bench=bench))

        return err(ErrorCode.UNKNOWN_UNIT, f"Unit {unit_id} not found in roster")

    def update_units(self, roster: Roster, units: Iterable[Unit]) -> Roster:
        """Replace units by id wherever they sit; unknown ids are ignored."""
        by_id = {u.id: u for u in units}
        return Roster(
            active_party=tuple(by_id.get(u.id, u) for u in roster.active_party),
            bench=tuple(by_id.get(u.id, u) for u in roster.bench),
        )

    def validate_roster(self, roster: Roster) -> Result[None]:
        """Party non-empty, at most ``max_active_size``, no duplicate ids."""
        if not roster.active_party:
            return err(ErrorCode.INVALID_ROSTER, "Active party cannot be empty")
        if len(roster.active_party) > self.max_active_size:
            return err(ErrorCode.INVALID_ROSTER, f"Active party cannot exceed {self.max_active_size} units")

        seen = set()
        for unit in roster.all_units:
            if unit.id in seen:
                return err(ErrorCode.INVALID_ROSTER, f"Duplicate unit ID found: {unit.id}")
            seen.add(unit.id)
        return Ok(None)

    def get_roster_stats(self, roster: Roster) -> RosterStats:
        active = len(roster.active_party)
        bench = len(roster.bench)
        return RosterStats(
            active_count=active,
            bench_count=bench,
            total_count=active + bench,
            has_full_active_party=active == self.max_active_size,
        )


def recruit_from_template(template: EnemyUnitTemplate, recruit_number: int) -> Unit:
    """Turn a defeated enemy into a level-1 player unit with a deterministic id."""
    return template.to_unit(unit_id=f"recruited_{template.id}_{recruit_number}")
