"""Spatial index built once per turn from a snapshot.

The grid is stored row-major with row 0 holding the topmost board row, so every
accessor goes through `_index`, the single y-up -> storage-row transform.
"""

from __future__ import annotations

import enum
from typing import Dict, Iterable, List, Optional, Tuple

from .geometry import REVERSE, Coord, direction_between, manhattan, neighbors8, step
from .snapshot import Snake, Snapshot

EMPTY = ""
# Snake ids come from the game server; the leading NUL keeps this marker out of their namespace.
FOOD = "\x00food"


class HeadToHead(enum.Enum):
    WIN = "win"
    TIE = "tie"
    LOSS = "loss"


class Board:
    """Occupancy grid plus the snake table it was built from."""

    def __init__(
        self,
        width: int,
        height: int,
        food: Iterable[Coord] = (),
        snakes: Iterable[Snake] = (),
        you_id: Optional[str] = None,
        last_direction: Optional[str] = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"board must be non-empty, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.you_id = you_id
        self.last_direction = last_direction
        self.grid: List[List[str]] = [[EMPTY] * self.width for _ in range(self.height)]

        food = [Coord(*c) for c in food]
        for cell in food:
            self._write(cell, FOOD)

        self.snakes: Dict[str, Snake] = {}
        for snake in snakes:
            self.snakes[snake.id] = snake
            for seg in snake.body:
                self._write(seg, snake.id)

        # A segment written over food wins; keep only the food that is still visible.
        self.food: Tuple[Coord, ...] = tuple(dict.fromkeys(c for c in food if self.occupant(c) == FOOD))

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, last_direction: Optional[str] = None) -> "Board":
        return cls(
            snapshot.width,
            snapshot.height,
            food=snapshot.food,
            snakes=snapshot.snakes,
            you_id=snapshot.you.id,
            last_direction=last_direction,
        )

    # ----------------------------
    # Storage
    # ----------------------------
    def _index(self, cell: Coord) -> Tuple[int, int]:
        if not self.in_bounds(cell):
            raise IndexError(f"{tuple(cell)} outside {self.width}x{self.height} board")
        return self.height - 1 - cell[1], cell[0]

    def _coord(self, row: int, col: int) -> Coord:
        """Inverse of _index."""
        return Coord(col, self.height - 1 - row)

    def _write(self, cell: Coord, marker: str) -> None:
        row, col = self._index(cell)
        self.grid[row][col] = marker

    def occupant(self, cell: Coord) -> str:
        """Raw marker at cell: EMPTY, FOOD or a snake id. Raises IndexError off-board."""
        row, col = self._index(cell)
        return self.grid[row][col]

    # ----------------------------
    # Queries
    # ----------------------------
    def in_bounds(self, cell: Coord) -> bool:
        return 0 <= cell[0] < self.width and 0 <= cell[1] < self.height

    def is_unoccupied(self, cell: Coord) -> bool:
        if not self.in_bounds(cell):
            return False
        return self.occupant(cell) in (EMPTY, FOOD)

    def is_food(self, cell: Coord) -> bool:
        return self.in_bounds(cell) and self.occupant(cell) == FOOD

    def is_on_edge(self, cell: Coord) -> bool:
        if not self.in_bounds(cell):
            return False
        x, y = cell
        return x == 0 or y == 0 or x == self.width - 1 or y == self.height - 1

    def snake_at(self, cell: Coord) -> Optional[Snake]:
        if not self.in_bounds(cell):
            return None
        return self.snakes.get(self.occupant(cell))

    def is_snake_head(self, cell: Coord) -> bool:
        snake = self.snake_at(cell)
        return snake is not None and snake.head == cell

    def is_valid_snake_tail(self, prior_board: Optional["Board"], cell: Coord) -> bool:
        """True if cell is a tail its owner will vacate this turn.

        A snake that ate on its last move keeps its tail in place. That shows up either as
        a stacked tail in this snapshot or as food under its current head on the prior board.
        Without a prior board there is no way to tell, so the answer is False.
        """
        if prior_board is None:
            return False
        snake = self.snake_at(cell)
        if snake is None or snake.tail != cell or snake.tail_stacked:
            return False
        return not prior_board.is_food(snake.head)

    def head_to_head(self, opponent_id: str, my_length: int) -> HeadToHead:
        opponent = self.snakes[opponent_id]
        if my_length > opponent.length:
            return HeadToHead.WIN
        if my_length == opponent.length:
            return HeadToHead.TIE
        return HeadToHead.LOSS

    def is_body_blocked(self, cell: Coord, last_direction: Optional[str] = None) -> bool:
        """True if any in-bounds 8-neighbour (except the one behind us) holds a snake."""
        if last_direction is None:
            last_direction = self.last_direction
        behind = step(cell, REVERSE[last_direction]) if last_direction in REVERSE else None
        for nb in neighbors8(cell):
            if nb == behind or not self.in_bounds(nb):
                continue
            if not self.is_unoccupied(nb):
                return True
        return False

    def snake_direction(self, snake_id: str) -> Optional[str]:
        """Heading inferred from the two foremost distinct segments, if any."""
        snake = self.snakes.get(snake_id)
        if snake is None:
            return None
        head = snake.head
        for seg in snake.body[1:]:
            if seg != head:
                return direction_between(seg, head)
        return None

    def nearest_food(self, cell: Coord) -> Optional[Coord]:
        """Closest food by Manhattan distance; first listed wins ties."""
        best: Optional[Coord] = None
        best_dist = 0
        for f in self.food:
            d = manhattan(cell, f)
            if best is None or d < best_dist:
                best, best_dist = f, d
        return best

    def cells_of(self, snake_id: str) -> List[Coord]:
        """Every grid cell marked with snake_id (used to check grid/body consistency)."""
        out: List[Coord] = []
        for row_idx, row in enumerate(self.grid):
            for col, marker in enumerate(row):
                if marker == snake_id:
                    out.append(self._coord(row_idx, col))
        return out

    def render(self) -> str:
        """ASCII view, top row first: '.' empty, '*' food, 'Y' own head, 'H' other heads, 'o' body."""
        lines = []
        for row_idx, row in enumerate(self.grid):
            chars = []
            for col, marker in enumerate(row):
                if marker == EMPTY:
                    chars.append(".")
                elif marker == FOOD:
                    chars.append("*")
                elif self.snakes[marker].head == self._coord(row_idx, col):
                    chars.append("Y" if marker == self.you_id else "H")
                else:
                    chars.append("o")
            lines.append("".join(chars))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Board({self.width}x{self.height}, food={len(self.food)}, snakes={len(self.snakes)})"

