"""Tests for active party and bench management."""

import pytest

from nextera.config import settings
from nextera.core.result import ErrorCode
from nextera.core.roster_manager import RosterManager, recruit_from_template
from nextera.data.loaders import get_enemy_template


@pytest.fixture
def manager():
    return RosterManager(max_active_size=4)


@pytest.fixture
def team(make_unit):
    return [make_unit(id=f"u{i}", name=f"Unit {i}") for i in range(6)]


@pytest.fixture
def roster(manager, team):
    return manager.create_roster_from_team(team)


class TestCreateRoster:
    """First four fight, the rest wait."""

    def test_split(self, roster):
        assert [u.id for u in roster.active_party] == ["u0", "u1", "u2", "u3"]
        assert [u.id for u in roster.bench] == ["u4", "u5"]

    def test_small_team(self, manager, team):
        roster = manager.create_roster_from_team(team[:2])
        assert len(roster.active_party) == 2
        assert roster.bench == ()

    def test_lookup(self, manager, roster):
        assert manager.get_unit(roster, "u5").name == "Unit 5"
        assert manager.get_unit(roster, "nobody") is None
        assert len(manager.get_all_units(roster)) == 6
        assert len(manager.get_active_team(roster)) == 4

    def test_default_size_from_settings(self):
        assert RosterManager().max_active_size == 4

    def test_party_size_follows_settings(self, monkeypatch, team):
        monkeypatch.setattr(settings, "MAX_ACTIVE_PARTY", 3)
        manager = RosterManager()
        roster = manager.create_roster_from_team(team)
        assert manager.max_active_size == 3
        assert [u.id for u in roster.active_party] == ["u0", "u1", "u2"]
        assert len(roster.bench) == 3


class TestMoves:
    """Swaps and moves keep positions."""

    def test_swap(self, manager, roster):
        swapped = manager.swap_units(roster, "u4", "u1").unwrap()
        assert [u.id for u in swapped.active_party] == ["u0", "u4", "u2", "u3"]
        assert [u.id for u in swapped.bench] == ["u1", "u5"]

    def test_swap_unknown_bench(self, manager, roster):
        assert manager.swap_units(roster, "u0", "u1").code == ErrorCode.UNKNOWN_UNIT

    def test_swap_unknown_active(self, manager, roster):
        assert manager.swap_units(roster, "u4", "u5").code == ErrorCode.UNKNOWN_UNIT

    def test_move_to_active_full(self, manager, roster):
        assert manager.move_to_active(roster, "u4").code == ErrorCode.TEAM_FULL

    def test_move_to_bench_then_back(self, manager, roster):
        benched = manager.move_to_bench(roster, "u2").unwrap()
        assert len(benched.active_party) == 3
        promoted = manager.move_to_active(benched, "u5").unwrap()
        assert [u.id for u in promoted.active_party] == ["u0", "u1", "u3", "u5"]

    def test_cannot_empty_party(self, manager, make_unit):
        roster = manager.create_roster_from_team([make_unit(id="solo")])
        assert manager.move_to_bench(roster, "solo").code == ErrorCode.INVALID_ROSTER


class TestRecruitment:
    """Recruits join the party if there is room."""

    def test_joins_bench_when_full(self, manager, roster, make_unit):
        updated = manager.add_recruited_unit(roster, make_unit(id="new"))
        assert updated.bench[-1].id == "new"

    def test_joins_party_when_room(self, manager, team, make_unit):
        roster = manager.create_roster_from_team(team[:2])
        updated = manager.add_recruited_unit(roster, make_unit(id="new"))
        assert updated.active_party[-1].id == "new"

    def test_replace(self, manager, roster, make_unit):
        updated = manager.replace_unit(roster, "u5", make_unit(id="new")).unwrap()
        assert [u.id for u in updated.bench] == ["u4", "new"]

    def test_replace_unknown(self, manager, roster, make_unit):
        assert manager.replace_unit(roster, "nobody", make_unit(id="new")).code == ErrorCode.UNKNOWN_UNIT

    def test_recruit_from_template(self):
        unit = recruit_from_template(get_enemy_template("lich"), 3)
        assert unit.id == "recruited_lich_3"
        assert unit.name == "Lich"
        assert unit.atk == 42
        assert unit.level == 1


class TestValidation:
    """Roster invariants."""

    def test_valid(self, manager, roster):
        assert manager.validate_roster(roster).ok

    def test_empty_party(self, manager):
        assert manager.validate_roster(manager.create_roster_from_team([])).code == ErrorCode.INVALID_ROSTER

    def test_duplicate_ids(self, manager, make_unit):
        roster = manager.create_roster_from_team([make_unit(id="x"), make_unit(id="x")])
        assert manager.validate_roster(roster).code == ErrorCode.INVALID_ROSTER

    def test_update_units(self, manager, roster, make_unit):
        updated = manager.update_units(roster, [make_unit(id="u5", name="Renamed"), make_unit(id="ghost")])
        assert manager.get_unit(updated, "u5").name == "Renamed"
        assert manager.get_unit(updated, "ghost") is None

    def test_stats(self, manager, roster):
        stats = manager.get_roster_stats(roster)
        assert stats.active_count == 4
        assert stats.bench_count == 2
        assert stats.total_count == 6
        assert stats.has_full_active_party
