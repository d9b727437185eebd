"""Result values and error types for the simulation core.

Expected failures (validation, game rules) are returned as ``Err`` values
and callers branch on them. Broken invariants (malformed catalog data,
corrupted save envelopes) raise a ``NextEraError`` subclass instead.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, NoReturn, TypeVar, Union

from nextera.exceptions import CatalogError, NextEraError, ResultError, SaveFormatError

T = TypeVar("T")


class ErrorCode(StrEnum):
    """Validation failure categories."""

    INSUFFICIENT_MP = "insufficient_mp"
    NO_VALID_TARGET = "no_valid_target"
    INVALID_LUCK = "invalid_luck"
    UNKNOWN_GEM = "unknown_gem"
    UNKNOWN_ITEM = "unknown_item"
    UNKNOWN_EQUIPMENT = "unknown_equipment"
    UNKNOWN_OPPONENT = "unknown_opponent"
    UNKNOWN_UNIT = "unknown_unit"
    NO_GEM_EQUIPPED = "no_gem_equipped"
    GEM_ALREADY_INACTIVE = "gem_already_inactive"
    NO_ACTIVE_GEM = "no_active_gem"
    GEM_ALREADY_ACTIVATED = "gem_already_activated"
    NO_CHOICES = "no_choices"
    NO_OPPONENTS = "no_opponents"
    INVALID_STATE = "invalid_state"
    INVALID_ROSTER = "invalid_roster"
    TEAM_FULL = "team_full"
    SAVE_NOT_FOUND = "save_not_found"
    SAVE_FAILED = "save_failed"
    SAVE_CORRUPTED = "save_corrupted"


@dataclass(frozen=True)
class GameError:
    """A reportable validation failure."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result carrying a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed result carrying a GameError."""

    error: GameError

    @property
    def ok(self) -> bool:
        return False

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    def unwrap(self) -> NoReturn:
        raise ResultError(self.error)

    def unwrap_or(self, default: T) -> T:
        return default


Result = Union[Ok[T], Err]


def err(code: ErrorCode, message: str) -> Err:
    """Shorthand for ``Err(GameError(code, message))``."""
    return Err(GameError(code, message))


__all__ = [
    "CatalogError",
    "Err",
    "ErrorCode",
    "GameError",
    "NextEraError",
    "Ok",
    "Result",
    "ResultError",
    "SaveFormatError",
    "err",
]
