"""Seeded random stream hierarchy.

A stream is identified by its origin seed plus an ordered path of fork
labels. The underlying ``random.Random`` is seeded from a SHA-256 digest of
``(seed, path)``, so forking never depends on how many values the parent or
any sibling has drawn. Rebuilding the root from a persisted seed therefore
re-derives exactly the same child streams after a load.

Usage:
    root = make_stream(12345)
    rewards = root.fork("rewards").fork(3)
    roll = rewards.int(0, 99)
"""

import hashlib
import logging
import random
from typing import Sequence, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")
Label = Union[str, int]


def _normalize_label(label: Label) -> str:
    if isinstance(label, bool) or not isinstance(label, (str, int)):
        raise TypeError(f"Fork label must be str or int, got {type(label).__name__}")
    return str(label)


def derive_seed(seed: int, path: tuple[str, ...]) -> int:
    """Derive the generator seed for a stream from its seed and label path."""
    # Length-prefixed labels keep ("ab",) and ("a", "b") distinct.
    payload = f"{seed}|" + "|".join(f"{len(label)}:{label}" for label in path)
    digest = hashlib.sha256(payload.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


class RngStream:
    """Deterministic random stream that forks into independent children.

    The handle itself is immutable (``seed`` and ``path`` never change);
    draws only advance this stream's private cursor.
    """

    __slots__ = ("_seed", "_path", "_random")

    def __init__(self, seed: int, path: tuple[str, ...] = ()):
        self._seed = int(seed)
        self._path = tuple(path)
        self._random = random.Random(derive_seed(self._seed, self._path))

    @property
    def seed(self) -> int:
        """Origin seed of the hierarchy."""
        return self._seed

    @property
    def path(self) -> tuple[str, ...]:
        """Fork labels from the root to this stream."""
        return self._path

    def __eq__(self, other: object) -> bool:
        # Identity of a stream, not of its cursor position
        if not isinstance(other, RngStream):
            return NotImplemented
        return self._seed == other._seed and self._path == other._path

    def __hash__(self) -> int:
        return hash((self._seed, self._path))

    def __repr__(self) -> str:
        return f"RngStream(seed={self._seed}, path={'/'.join(self._path) or '<root>'})"

    def fork(self, label: Label) -> "RngStream":
        """Derive the child stream for ``label``.

        Pure function of ``(seed, path + label)``: integer labels are
        normalised to their decimal string, so ``fork(3) == fork("3")``.
        """
        child = RngStream(self._seed, self._path + (_normalize_label(label),))
        logger.debug("rng fork seed=%s path=%s", self._seed, "/".join(child.path))
        return child

    def int(self, min_value: int, max_value: int) -> int:
        """Return an integer in ``[min_value, max_value]`` (inclusive)."""
        if min_value > max_value:
            raise ValueError(f"min {min_value} > max {max_value}")
        return self._random.randint(min_value, max_value)

    def float(self) -> float:
        """Return a float in ``[0.0, 1.0)``."""
        return self._random.random()

    def choose(self, items: Sequence[T]) -> T:
        """Return one element using a uniform index draw."""
        if len(items) == 0:
            raise ValueError("Cannot choose from an empty sequence")
        return items[self.int(0, len(items) - 1)]


def make_stream(seed: int) -> RngStream:
    """Create the root stream for ``seed``."""
    return RngStream(seed)
