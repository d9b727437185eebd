"""Gem catalog loader.

Covers both gem mechanics: per-unit equippable gems (``gems.json``) and the
elemental alignment gems with their granted spells and activations
(``elements.json``).
"""

from functools import lru_cache
from typing import Optional

from ...exceptions import CatalogError
from ..models.ability import Ability
from ..models.gem import ElementalGem, GemActivation, GemSpec
from ..models.unit import Element
from ._source import parse_keyed, parse_records, read_table

GEMS_FILE = "gems.json"
ELEMENTS_FILE = "elements.json"


@lru_cache(maxsize=1)
def load_gems() -> tuple[GemSpec, ...]:
    """Load all per-unit equippable gems.

    Returns:
        Tuple of GemSpec objects in catalog order.
    """
    records = read_table(GEMS_FILE, "gems")
    return tuple(parse_records(records, GemSpec.model_validate, "gems"))


def get_gem_by_id(gem_id: str) -> Optional[GemSpec]:
    """Get a per-unit gem by its ID.

    Args:
        gem_id: The unique gem identifier.

    Returns:
        GemSpec if found, None otherwise.
    """
    for gem in load_gems():
        if gem.id == gem_id:
            return gem
    return None


@lru_cache(maxsize=1)
def load_elemental_gems() -> tuple[ElementalGem, ...]:
    """Load the six elemental alignment gems."""
    records = read_table(ELEMENTS_FILE, "elemental_gems")
    return tuple(parse_records(records, ElementalGem.model_validate, "elemental_gems"))


def get_elemental_gem(element: Element) -> Optional[ElementalGem]:
    """Get the alignment gem for an element."""
    for gem in load_elemental_gems():
        if gem.element == element:
            return gem
    return None


def _load_per_element(table: str, parse) -> dict[Element, object]:
    parsed = parse_keyed(read_table(ELEMENTS_FILE, table), parse, table)
    try:
        by_element = {Element(key): value for key, value in parsed.items()}
    except ValueError as e:
        raise CatalogError(f"Unknown element in '{table}': {e}") from e

    missing = set(Element) - set(by_element)
    if missing:
        raise CatalogError(f"'{table}' is missing elements: {sorted(missing)}")
    return by_element


@lru_cache(maxsize=1)
def load_matching_spells() -> dict[Element, Ability]:
    """Spells granted to units whose element matches the alignment gem."""
    return _load_per_element("matching_spells", Ability.model_validate)


@lru_cache(maxsize=1)
def load_counter_wards() -> dict[Element, Ability]:
    """Wards granted to counter-element units, keyed by the gem's element."""
    return _load_per_element("counter_wards", Ability.model_validate)


@lru_cache(maxsize=1)
def load_gem_activations() -> dict[Element, GemActivation]:
    """Activation abilities keyed by element."""
    return _load_per_element("activations", GemActivation.model_validate)
