"""Shared helpers for reading catalog JSON tables."""

import json
from pathlib import Path
from typing import Any, Callable, TypeVar

from pydantic import ValidationError

from ...exceptions import CatalogError

T = TypeVar("T")

# Catalog tables ship inside the package
CATALOG_DIR = Path(__file__).parent.parent / "catalog"


def read_table(filename: str, key: str) -> Any:
    """Read one top-level table from a catalog file.

    Raises:
        CatalogError: If the file is missing, is not valid JSON or lacks ``key``.
    """
    path = CATALOG_DIR / filename
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Cannot read catalog file {path.name}: {e}") from e

    if not isinstance(data, dict) or key not in data:
        raise CatalogError(f"Catalog file {path.name} has no '{key}' table")
    return data[key]


def parse_records(records: Any, parse: Callable[[Any], T], table: str) -> list[T]:
    """Validate each record of a table, naming the offending entry on failure."""
    if not isinstance(records, list):
        raise CatalogError(f"Catalog table '{table}' must be a list")

    parsed = []
    for index, record in enumerate(records):
        try:
            parsed.append(parse(record))
        except ValidationError as e:
            raise CatalogError(f"Invalid entry #{index} in '{table}': {e}") from e
    return parsed


def parse_keyed(records: Any, parse: Callable[[Any], T], table: str) -> dict[str, T]:
    """Validate a table keyed by element name."""
    if not isinstance(records, dict):
        raise CatalogError(f"Catalog table '{table}' must be an object")

    parsed = {}
    for key, record in records.items():
        try:
            parsed[key] = parse(record)
        except ValidationError as e:
            raise CatalogError(f"Invalid entry '{key}' in '{table}': {e}") from e
    return parsed
