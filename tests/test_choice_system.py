"""Tests for opponent choice generation."""

import pytest

from nextera.core.choice_system import ChoiceSystem, choice_stream
from nextera.core.result import ErrorCode
from nextera.core.rng import make_stream
from nextera.data.loaders import load_catalog
from nextera.data.loaders.catalog import Catalog
from nextera.data.models import Difficulty


@pytest.fixture
def choices():
    return ChoiceSystem()


class TestGenerateChoices:
    """One opponent per difficulty, in order."""

    def test_three_choices_in_order(self, choices):
        result = choices.generate_choices(choice_stream(make_stream(1), 0), 0).unwrap()
        assert [c.spec.difficulty for c in result] == [Difficulty.STANDARD, Difficulty.NORMAL, Difficulty.HARD]

    def test_battle_index_recorded(self, choices):
        result = choices.generate_choices(choice_stream(make_stream(1), 4), 4).unwrap()
        assert all(c.battle_index == 4 for c in result)

    def test_threat_is_sum_of_stats(self, choices):
        preview = choices.generate_choices(choice_stream(make_stream(1), 0), 0).unwrap()[0]
        expected = sum(
            u.base_stats.hp + u.base_stats.atk + u.base_stats.defense + u.base_stats.speed
            for u in preview.spec.units
        )
        assert preview.threat == expected

    def test_deterministic(self, choices):
        first = choices.generate_choices(choice_stream(make_stream(12345), 3), 3).unwrap()
        second = choices.generate_choices(choice_stream(make_stream(12345), 3), 3).unwrap()
        assert first == second

    def test_varies_across_battles(self, choices):
        root = make_stream(77)
        seen = {
            tuple(c.spec.id for c in choices.generate_choices(choice_stream(root, i), i).unwrap())
            for i in range(30)
        }
        assert len(seen) > 1

    def test_missing_difficulty(self):
        catalog = load_catalog()
        standard_only = tuple(o for o in catalog.opponents if o.difficulty == Difficulty.STANDARD)
        system = ChoiceSystem(Catalog(opponents=standard_only))
        result = system.generate_choices(choice_stream(make_stream(1), 0), 0)
        assert not result.ok
        assert result.code == ErrorCode.NO_OPPONENTS


class TestChoiceStream:
    """Choice streams are scoped by battle index."""

    def test_path(self):
        assert choice_stream(make_stream(1), 3).path == ("choice", "3")
