"""Critical hit rolls driven by unit luck."""

import math

from nextera.core.constants import CRIT_MULTIPLIER, CRIT_ROLL_SIDES
from nextera.core.result import ErrorCode, Ok, Result, err
from nextera.core.rng import RngStream
from nextera.data.models.unit import Unit


def validate_luck(luck: int) -> bool:
    return 0 <= luck <= 100


def check_critical_hit(unit: Unit, stream: RngStream) -> Result[bool]:
    """Roll for a critical hit.

    Luck must lie in [0, 100]; out-of-range values are reported, never
    clamped, and no value is drawn from the stream in that case. Otherwise
    one ``int(0, 99)`` is drawn and compared against luck, so luck 0 never
    crits and luck 100 always does.
    """
    if not validate_luck(unit.luck):
        return err(ErrorCode.INVALID_LUCK, f"{unit.name} has luck {unit.luck}; expected 0-100")

    roll = stream.int(0, CRIT_ROLL_SIDES - 1)
    return Ok(roll < unit.luck)


def apply_critical(damage: int, is_critical: bool) -> int:
    """Scale damage by the critical multiplier (floored)."""
    if not is_critical:
        return damage
    return math.floor(damage * CRIT_MULTIPLIER)
