from __future__ import annotations

import unittest

from snakebrain.board import EMPTY, FOOD, Board, HeadToHead
from snakebrain.geometry import Coord
from snakebrain.snapshot import Snake


def _snake(snake_id, body, length=None, health=100):
    cells = tuple(Coord(*c) for c in body)
    return Snake(id=snake_id, body=cells, length=len(cells) if length is None else length, health=health)


class BoundsTest(unittest.TestCase):
    def test_in_bounds_matches_dimensions(self):
        for width, height in ((1, 1), (3, 5), (11, 11), (7, 19)):
            board = Board(width, height)
            for x in range(-2, width + 2):
                for y in range(-2, height + 2):
                    expected = 0 <= x < width and 0 <= y < height
                    self.assertEqual(board.in_bounds(Coord(x, y)), expected, (width, height, x, y))

    def test_out_of_bounds_queries_never_index(self):
        board = Board(5, 5)
        outside = Coord(5, 0)
        self.assertFalse(board.is_unoccupied(outside))
        self.assertFalse(board.is_on_edge(outside))
        self.assertFalse(board.is_snake_head(outside))
        self.assertFalse(board.is_food(outside))
        with self.assertRaises(IndexError):
            board.occupant(outside)

    def test_zero_size_board_rejected(self):
        with self.assertRaises(ValueError):
            Board(0, 11)


class GridLayoutTest(unittest.TestCase):
    def test_row_zero_is_top_row(self):
        board = Board(4, 3, food=[(0, 2)], snakes=[_snake("a", [(3, 0)])])
        self.assertEqual(board.grid[0][0], FOOD)
        self.assertEqual(board.grid[2][3], "a")
        self.assertEqual(board.render(), "*...\n....\n...H")

    def test_grid_and_bodies_agree(self):
        snakes = [
            _snake("a", [(1, 1), (1, 2), (2, 2), (3, 2)]),
            _snake("b", [(5, 5), (5, 4), (5, 3), (5, 3)], length=4),
            _snake("c", [(0, 0)]),
        ]
        board = Board(7, 7, food=[(6, 6), (0, 6)], snakes=snakes)
        for snake in snakes:
            self.assertEqual(set(board.cells_of(snake.id)), set(snake.body))
        for row in board.grid:
            for marker in row:
                self.assertIn(marker, (EMPTY, FOOD, "a", "b", "c"))

    def test_food_under_a_snake_is_dropped(self):
        board = Board(5, 5, food=[(1, 1), (4, 4)], snakes=[_snake("a", [(1, 1), (1, 0)])])
        self.assertEqual(board.occupant(Coord(1, 1)), "a")
        self.assertEqual(board.food, (Coord(4, 4),))


class OccupancyQueryTest(unittest.TestCase):
    def setUp(self):
        self.me = _snake("me", [(2, 2), (2, 1), (2, 0)])
        self.other = _snake("other", [(4, 2), (4, 3)])
        self.board = Board(5, 5, food=[(0, 4)], snakes=[self.me, self.other], you_id="me")

    def test_unoccupied_counts_food_as_free(self):
        self.assertTrue(self.board.is_unoccupied(Coord(0, 4)))
        self.assertTrue(self.board.is_unoccupied(Coord(0, 0)))
        self.assertFalse(self.board.is_unoccupied(Coord(2, 1)))

    def test_edge_ring(self):
        self.assertTrue(self.board.is_on_edge(Coord(0, 2)))
        self.assertTrue(self.board.is_on_edge(Coord(4, 4)))
        self.assertFalse(self.board.is_on_edge(Coord(2, 2)))
        self.assertFalse(self.board.is_on_edge(Coord(1, 3)))

    def test_snake_head(self):
        self.assertTrue(self.board.is_snake_head(Coord(2, 2)))
        self.assertTrue(self.board.is_snake_head(Coord(4, 2)))
        self.assertFalse(self.board.is_snake_head(Coord(2, 1)))
        self.assertFalse(self.board.is_snake_head(Coord(0, 4)))

    def test_head_to_head_by_length(self):
        self.assertIs(self.board.head_to_head("other", 3), HeadToHead.WIN)
        self.assertIs(self.board.head_to_head("other", 2), HeadToHead.TIE)
        self.assertIs(self.board.head_to_head("other", 1), HeadToHead.LOSS)

    def test_snake_direction(self):
        self.assertEqual(self.board.snake_direction("me"), "up")
        self.assertEqual(self.board.snake_direction("other"), "down")
        self.assertIsNone(self.board.snake_direction("missing"))

    def test_snake_direction_skips_stacked_segments(self):
        board = Board(5, 5, snakes=[_snake("s", [(1, 1), (1, 1), (0, 1)])])
        self.assertEqual(board.snake_direction("s"), "right")
        lone = Board(5, 5, snakes=[_snake("s", [(1, 1), (1, 1), (1, 1)])])
        self.assertIsNone(lone.snake_direction("s"))

    def test_nearest_food_prefers_first_listed_on_ties(self):
        board = Board(7, 7, food=[(3, 5), (5, 3), (3, 0)])
        self.assertEqual(board.nearest_food(Coord(3, 3)), Coord(3, 5))
        self.assertIsNone(Board(3, 3).nearest_food(Coord(1, 1)))


class TailRuleTest(unittest.TestCase):
    def _boards(self, prior_food):
        snake = _snake("s", [(2, 2), (2, 1), (2, 0)])
        prior = Board(5, 5, food=prior_food, snakes=[_snake("s", [(2, 1), (2, 0), (1, 0)])])
        return Board(5, 5, snakes=[snake]), prior

    def test_tail_vacates_when_snake_did_not_eat(self):
        board, prior = self._boards(prior_food=[(4, 4)])
        self.assertTrue(board.is_valid_snake_tail(prior, Coord(2, 0)))

    def test_tail_stays_when_snake_ate(self):
        board, prior = self._boards(prior_food=[(2, 2)])
        self.assertFalse(board.is_valid_snake_tail(prior, Coord(2, 0)))

    def test_no_prior_board_is_conservative(self):
        board, _ = self._boards(prior_food=[])
        self.assertFalse(board.is_valid_snake_tail(None, Coord(2, 0)))

    def test_only_the_tail_segment_qualifies(self):
        board, prior = self._boards(prior_food=[])
        self.assertFalse(board.is_valid_snake_tail(prior, Coord(2, 1)))
        self.assertFalse(board.is_valid_snake_tail(prior, Coord(0, 0)))

    def test_stacked_tail_never_vacates(self):
        board = Board(5, 5, snakes=[_snake("s", [(2, 2), (2, 1), (2, 1)])])
        self.assertFalse(board.is_valid_snake_tail(Board(5, 5), Coord(2, 1)))


class BodyBlockedTest(unittest.TestCase):
    def test_open_surroundings(self):
        me = _snake("me", [(3, 3), (3, 2), (3, 1)])
        board = Board(7, 7, snakes=[me])
        # The neck is directly behind the last move (up) and is ignored.
        self.assertFalse(board.is_body_blocked(Coord(3, 3), "up"))

    def test_neck_counts_when_not_behind(self):
        me = _snake("me", [(3, 3), (3, 2), (3, 1)])
        board = Board(7, 7, snakes=[me])
        self.assertTrue(board.is_body_blocked(Coord(3, 3), "left"))

    def test_diagonal_segment_blocks(self):
        me = _snake("me", [(3, 3), (3, 2)])
        other = _snake("o", [(4, 4), (5, 4)])
        board = Board(7, 7, snakes=[me, other])
        self.assertTrue(board.is_body_blocked(Coord(3, 3), "up"))

    def test_food_does_not_block(self):
        me = _snake("me", [(3, 3), (3, 2)])
        board = Board(7, 7, food=[(2, 4), (4, 3)], snakes=[me])
        self.assertFalse(board.is_body_blocked(Coord(3, 3), "up"))

    def test_uses_remembered_direction_by_default(self):
        me = _snake("me", [(3, 3), (3, 2)])
        board = Board(7, 7, snakes=[me], last_direction="up")
        self.assertFalse(board.is_body_blocked(Coord(3, 3)))


if __name__ == "__main__":
    unittest.main()
