#!/usr/bin/env python3
"""
Unit tests for the megachess client strategy module.
"""

import os
import sys
import tempfile
import textwrap
import unittest

# Add the project root to the path so we can import the module
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from megachess_client.main import load_strategy_from_file  # noqa: E402
from megachess_client.strategy import Strategy  # noqa: E402
from megachess_client.strategy_base import Coordinates  # noqa: E402


class TestStrategy(unittest.TestCase):
    """Test cases for the random strategy."""

    def test_coordinates_within_default_bounds(self):
        strategy = Strategy()
        seen = set()
        for _ in range(500):
            move = strategy.choose_move("board", "token")
            for value in (move.from_col, move.to_col, move.from_row, move.to_row):
                self.assertGreaterEqual(value, 1)
                self.assertLessEqual(value, 8)
                seen.add(value)
        # Uniform over 1..8, so every value shows up in 2000 draws
        self.assertEqual(seen, set(range(1, 9)))

    def test_custom_bounds(self):
        strategy = Strategy(min_offset=3, max_offset=4)
        self.assertEqual(strategy.choose_move("b", "t"), Coordinates(3, 3, 3, 3))

    def test_seed_is_reproducible(self):
        first = [Strategy(seed=7).choose_move("b", "t") for _ in range(3)]
        second = [Strategy(seed=7).choose_move("b", "t") for _ in range(3)]
        self.assertEqual(first, second)

    def test_empty_range_rejected(self):
        with self.assertRaises(ValueError):
            Strategy(min_offset=5, max_offset=5)


class TestLoadStrategy(unittest.TestCase):
    """Test cases for loading strategies from files."""

    def test_load_strategy_from_file(self):
        source = textwrap.dedent("""
            from megachess_client.strategy_base import Coordinates, StrategyBase


            class Strategy(StrategyBase):
                def choose_move(self, board_id, turn_token):
                    return Coordinates(self.min_offset, self.min_offset, self.min_offset, self.min_offset)
        """)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "fixed_strategy.py")
            with open(path, 'w') as f:
                f.write(source)
            strategy = load_strategy_from_file(path, 2, 6)

        self.assertEqual(strategy.max_offset, 6)
        self.assertEqual(strategy.choose_move("b", "t"), Coordinates(2, 2, 2, 2))

    def test_missing_strategy_class(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "empty_strategy.py")
            with open(path, 'w') as f:
                f.write("VALUE = 1\n")
            with self.assertRaises(AttributeError):
                load_strategy_from_file(path, 1, 9)


if __name__ == '__main__':
    unittest.main()
