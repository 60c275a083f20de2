"""Game-server payload parsing.

The game server sends one JSON document per notification (start/move/end). This module
turns that payload into immutable records and rejects payloads the engine cannot act on:
a move computed from a half-parsed board would be a guess, so a malformed snapshot is
fatal for its turn.

Snapshot files (used by the CLI for offline replay) may be stored as JSON, JSON lines
(one payload per line) or msgpack (a single payload or a list of payloads).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import msgpack

from .geometry import Coord

logger = logging.getLogger(__name__)


class SnakebrainError(Exception):
    """Base class for engine errors surfaced to callers."""


class SnapshotError(SnakebrainError, ValueError):
    """The snapshot is missing data the engine needs to pick a move."""


@dataclass(frozen=True)
class Snake:
    id: str
    body: Tuple[Coord, ...]
    length: int
    health: int
    name: str = ""

    @property
    def head(self) -> Coord:
        return self.body[0]

    @property
    def tail(self) -> Coord:
        return self.body[-1]

    @property
    def tail_stacked(self) -> bool:
        """True when the last two segments overlap (the snake has just been fed)."""
        return len(self.body) > 1 and self.body[-1] == self.body[-2]


@dataclass(frozen=True)
class Snapshot:
    game_id: str
    turn: int
    width: int
    height: int
    food: Tuple[Coord, ...]
    snakes: Tuple[Snake, ...]
    you: Snake


def _coord(raw: Any, where: str) -> Coord:
    if not isinstance(raw, Mapping):
        raise SnapshotError(f"{where}: expected an object with x/y, got {raw!r}")
    x, y = raw.get("x"), raw.get("y")
    # bool is an int subclass; reject it explicitly.
    if not isinstance(x, int) or not isinstance(y, int) or isinstance(x, bool) or isinstance(y, bool):
        raise SnapshotError(f"{where}: non-integer coordinate {raw!r}")
    return Coord(x, y)


def _check_bounds(cell: Coord, width: int, height: int, where: str) -> None:
    if not (0 <= cell.x < width and 0 <= cell.y < height):
        raise SnapshotError(f"{where}: {tuple(cell)} outside {width}x{height} board")


def _snake(raw: Any, width: int, height: int, where: str) -> Snake:
    if not isinstance(raw, Mapping):
        raise SnapshotError(f"{where}: expected an object")
    snake_id = raw.get("id")
    if not snake_id or not isinstance(snake_id, str):
        raise SnapshotError(f"{where}: missing snake id")
    raw_body = raw.get("body")
    if not isinstance(raw_body, list) or not raw_body:
        raise SnapshotError(f"{where} ({snake_id}): empty body")

    body = tuple(_coord(seg, f"{where} ({snake_id}) body[{i}]") for i, seg in enumerate(raw_body))
    for i, seg in enumerate(body):
        _check_bounds(seg, width, height, f"{where} ({snake_id}) body[{i}]")

    if "head" in raw and raw["head"] is not None:
        head = _coord(raw["head"], f"{where} ({snake_id}) head")
        if head != body[0]:
            raise SnapshotError(f"{where} ({snake_id}): head {tuple(head)} is not body[0] {tuple(body[0])}")

    length = raw.get("length", len(body))
    health = raw.get("health", 100)
    if not isinstance(length, int) or not isinstance(health, int):
        raise SnapshotError(f"{where} ({snake_id}): length/health must be integers")

    return Snake(
        id=snake_id,
        body=body,
        length=length,
        health=health,
        name=str(raw.get("name") or ""),
    )


def parse_snapshot(payload: Any) -> Snapshot:
    """Validate a game-server payload and return a Snapshot.

    Raises SnapshotError for anything the engine cannot safely act on.
    """
    if not isinstance(payload, Mapping):
        raise SnapshotError("payload must be a JSON object")

    game = payload.get("game")
    game_id = game.get("id") if isinstance(game, Mapping) else None
    if not game_id:
        raise SnapshotError("missing game id")

    board = payload.get("board")
    if not isinstance(board, Mapping):
        raise SnapshotError("missing board")
    width, height = board.get("width"), board.get("height")
    if not isinstance(width, int) or not isinstance(height, int) or width <= 0 or height <= 0:
        raise SnapshotError(f"invalid board size {width!r}x{height!r}")

    food: List[Coord] = []
    for i, raw in enumerate(board.get("food") or []):
        cell = _coord(raw, f"food[{i}]")
        _check_bounds(cell, width, height, f"food[{i}]")
        food.append(cell)

    snakes: Dict[str, Snake] = {}
    for i, raw in enumerate(board.get("snakes") or []):
        snake = _snake(raw, width, height, f"snakes[{i}]")
        if snake.id in snakes:
            raise SnapshotError(f"duplicate snake id {snake.id!r}")
        snakes[snake.id] = snake

    raw_you = payload.get("you")
    if not raw_you:
        raise SnapshotError("missing own snake ('you')")
    you = _snake(raw_you, width, height, "you")
    if you.id not in snakes:
        logger.debug("Own snake %s not listed in board.snakes; adding it", you.id)
        snakes[you.id] = you

    turn = payload.get("turn", 0)
    return Snapshot(
        game_id=str(game_id),
        turn=int(turn) if isinstance(turn, int) else 0,
        width=width,
        height=height,
        food=tuple(food),
        snakes=tuple(snakes.values()),
        you=snakes[you.id],
    )


def game_id_of(payload: Any) -> Optional[str]:
    """Best-effort game id lookup for start/end notifications (no full validation)."""
    if not isinstance(payload, Mapping):
        return None
    game = payload.get("game")
    if isinstance(game, Mapping) and game.get("id"):
        return str(game["id"])
    return None


def load_payloads(path: str | Path) -> List[Dict[str, Any]]:
    """Read raw snapshot payloads from a .json, .jsonl or .msgpack file."""
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix in (".msgpack", ".mpk"):
        obj = msgpack.unpackb(p.read_bytes(), raw=False, strict_map_key=False)
    elif suffix == ".jsonl":
        with p.open(encoding="utf-8") as fh:
            obj = [json.loads(line) for line in fh if line.strip()]
    else:
        with p.open(encoding="utf-8") as fh:
            obj = json.load(fh)

    if isinstance(obj, list):
        return list(obj)
    return [obj]
