"""Opponent choice generation.

Each battle offers one opponent per difficulty, Standard then Normal then Hard,
drawn from the stream ``root.fork('choice').fork(battle_index)``. Because the
stream depends only on the run seed and the battle index, a reloaded run sees
the same choices it would have seen without the reload.
"""

import logging
from typing import Optional

from nextera.core.result import ErrorCode, Ok, Result, err
from nextera.core.rng import RngStream
from nextera.data.loaders.catalog import Catalog, load_catalog
from nextera.data.models.opponent import Difficulty, OpponentPreview

logger = logging.getLogger(__name__)

CHOICE_ORDER: tuple[Difficulty, ...] = (Difficulty.STANDARD, Difficulty.NORMAL, Difficulty.HARD)


def choice_stream(root: RngStream, battle_index: int) -> RngStream:
    """The stream that opponent choices for ``battle_index`` are drawn from."""
    return root.fork("choice").fork(battle_index)


class ChoiceSystem:
    """Draws the opponent choices for a battle."""

    def __init__(self, catalog: Optional[Catalog] = None):
        self.catalog = catalog if catalog is not None else load_catalog()

    def generate_choices(
        self,
        stream: RngStream,
        battle_index: int,
    ) -> Result[tuple[OpponentPreview, ...]]:
        """
        Draw one opponent per difficulty.

        Args:
            stream: Stream from ``choice_stream(root, battle_index)``
            battle_index: Index of the upcoming battle

        Returns:
            Ok with three previews in difficulty order, or Err(NO_OPPONENTS)
        """
        choices = []
        for difficulty in CHOICE_ORDER:
            pool = self.catalog.opponents_of_difficulty(difficulty)
            if not pool:
                return err(ErrorCode.NO_OPPONENTS, f"No {difficulty} opponents in catalog")
            choices.append(OpponentPreview.from_spec(stream.choose(pool), battle_index))

        logger.info(
            "Choices for battle %d: %s",
            battle_index, ", ".join(c.spec.id for c in choices),
        )
        return Ok(tuple(choices))
