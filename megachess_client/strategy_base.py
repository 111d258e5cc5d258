#!/usr/bin/env python3
"""
Base class for move strategies.

A strategy only picks coordinates. The MegaChessClient handles the
connection, decoding and sending, so subclasses never touch the websocket.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

# Coordinates are drawn from [MIN_OFFSET, MAX_OFFSET)
MIN_OFFSET = 1
MAX_OFFSET = 9


@dataclass(frozen=True)
class Coordinates:
    from_col: int
    to_col: int
    from_row: int
    to_row: int


class StrategyBase(ABC):
    """
    Abstract base class for move strategies.

    :param min_offset: Smallest coordinate the strategy may return
    :type min_offset: int
    :param max_offset: Exclusive upper bound for coordinates
    :type max_offset: int
    :raises ValueError: If the bounds leave no coordinate to choose
    """

    def __init__(self, min_offset: int = MIN_OFFSET, max_offset: int = MAX_OFFSET):
        if min_offset >= max_offset:
            raise ValueError(f"min_offset ({min_offset}) must be lower than max_offset ({max_offset})")
        self.min_offset = min_offset
        self.max_offset = max_offset

    @abstractmethod
    def choose_move(self, board_id: str, turn_token: str) -> Coordinates:
        """
        Choose the coordinates to play on a board.

        :param board_id: Board the move is for
        :type board_id: str
        :param turn_token: Token the server issued for this turn
        :type turn_token: str
        :return: Source and destination of the move
        :rtype: Coordinates
        """
        pass
