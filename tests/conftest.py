"""Shared fixtures."""

import pytest

from nextera.data.loaders import clear_cache
from nextera.data.models import ActiveGemState, Element, ElementalGem, Role, Unit


@pytest.fixture
def make_unit():
    """Factory for units with sensible defaults; keyword arguments override."""
    def _make(**overrides):
        data = {
            "id": "hero",
            "name": "Hero",
            "role": Role.DPS,
            "hp": 100,
            "atk": 20,
            "defense": 10,
            "speed": 50,
        }
        data.update(overrides)
        return Unit(**data)
    return _make


@pytest.fixture
def mars_gem_state():
    """Alignment gem set to Mars, not yet activated."""
    gem = ElementalGem(id="mars_gem", element=Element.MARS, name="Mars Gem")
    return ActiveGemState(active_gem=gem, is_activated=False)


@pytest.fixture(autouse=True)
def fresh_catalog_cache():
    """Every test sees the packaged catalog files as they are on disk."""
    clear_cache()
    yield
    clear_cache()
