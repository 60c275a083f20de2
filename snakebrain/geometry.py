from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple


class Coord(NamedTuple):
    """Board coordinate; origin bottom-left, y grows upward."""

    x: int
    y: int


Delta = Tuple[int, int]

UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"

# Evaluation order; earlier entries win score ties.
DIRECTIONS: Sequence[str] = (UP, DOWN, RIGHT, LEFT)

DELTAS: Dict[str, Delta] = {
    UP: (0, 1),
    DOWN: (0, -1),
    RIGHT: (1, 0),
    LEFT: (-1, 0),
}

DIAGONALS: Sequence[Delta] = [(1, 1), (1, -1), (-1, -1), (-1, 1)]

REVERSE: Dict[str, str] = {
    UP: DOWN,
    DOWN: UP,
    RIGHT: LEFT,
    LEFT: RIGHT,
}


def step(cell: Coord, direction: str) -> Coord:
    dx, dy = DELTAS[direction]
    return Coord(cell.x + dx, cell.y + dy)


def manhattan(a: Coord, b: Coord) -> int:
    return abs(a.x - b.x) + abs(a.y - b.y)


def neighbors4(cell: Coord) -> List[Coord]:
    """Cardinal neighbours in evaluation order (no bounds check)."""
    return [step(cell, direction) for direction in DIRECTIONS]


def neighbors8(cell: Coord) -> List[Coord]:
    """Cardinal then diagonal neighbours (no bounds check)."""
    out = neighbors4(cell)
    out.extend(Coord(cell.x + dx, cell.y + dy) for dx, dy in DIAGONALS)
    return out


def direction_between(src: Coord, dst: Coord) -> Optional[str]:
    """Return the direction that moves src onto dst, or None if they are not 4-adjacent."""
    delta = (dst.x - src.x, dst.y - src.y)
    for direction, d in DELTAS.items():
        if d == delta:
            return direction
    return None
