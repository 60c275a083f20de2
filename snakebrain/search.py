from __future__ import annotations

from typing import List, Set

from .board import Board
from .geometry import Coord, manhattan, neighbors4


def _passable(board: Board, cell: Coord, tail: Coord, tail_vacates: bool) -> bool:
    if not board.in_bounds(cell):
        return False
    if board.is_unoccupied(cell):
        return True
    return tail_vacates and cell == tail


def tail_reachability(board: Board, start: Coord, tail: Coord, tail_vacates: bool = False) -> int:
    """Flood fill from start and report whether our own tail can be reached.

    Returns +N when the tail (or a cell next to it) was reached, -N otherwise, where N is
    the number of cells explored. start is where the head would move, so it is explored
    even if it is still occupied (a tail about to vacate); off-board starts explore nothing.

    Iterative DFS: the visited set only grows, so the walk ends after at most W*H pops.
    """
    if not board.in_bounds(start):
        return 0

    stack: List[Coord] = [start]
    seen: Set[Coord] = {start}
    found = False
    while stack:
        cur = stack.pop()
        # Touching the tail counts as reaching it, whether or not the tail vacates.
        if not found and manhattan(cur, tail) <= 1:
            found = True
        for nxt in neighbors4(cur):
            if nxt in seen or not _passable(board, nxt, tail, tail_vacates):
                continue
            seen.add(nxt)
            stack.append(nxt)

    explored = len(seen)
    return explored if found else -explored
