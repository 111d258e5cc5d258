#!/usr/bin/env python3
"""
Default strategy: uniformly random coordinates.

There is no board model behind it; moves are not checked for legality and
the source square may equal the destination.
"""

import random
from typing import Optional

from megachess_client.strategy_base import MAX_OFFSET, MIN_OFFSET, Coordinates, StrategyBase


class Strategy(StrategyBase):
    """
    Picks each coordinate independently from [min_offset, max_offset).

    One random generator lives as long as the strategy.

    :param min_offset: Smallest coordinate
    :type min_offset: int
    :param max_offset: Exclusive upper bound for coordinates
    :type max_offset: int
    :param seed: Optional seed for reproducible moves
    :type seed: Optional[int]
    """

    def __init__(self, min_offset: int = MIN_OFFSET, max_offset: int = MAX_OFFSET,
                 seed: Optional[int] = None):
        super().__init__(min_offset, max_offset)
        self._rng = random.Random(seed)

    def _random_position(self) -> int:
        return self._rng.randrange(self.min_offset, self.max_offset)

    def choose_move(self, board_id: str, turn_token: str) -> Coordinates:
        return Coordinates(
            from_col=self._random_position(),
            to_col=self._random_position(),
            from_row=self._random_position(),
            to_row=self._random_position(),
        )
