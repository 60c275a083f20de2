"""Game-server facing entry points: info, start, move, end."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from . import __version__, config
from .board import Board
from .geometry import step
from .heuristic import Decision, MoveEvaluator
from .memory import GameStatus, TurnMemoryRegistry
from .snapshot import SnapshotError, game_id_of, parse_snapshot

logger = logging.getLogger(__name__)


class Engine:
    """Owns the per-game registry and turns snapshots into moves.

    Malformed snapshots raise SnapshotError; everything else (no legal move, a move for a
    game that was never started, ending an unknown game) still yields a normal answer.
    """

    def __init__(
        self,
        evaluator: Optional[MoveEvaluator] = None,
        registry: Optional[TurnMemoryRegistry] = None,
    ) -> None:
        self.evaluator = evaluator or MoveEvaluator()
        self.registry = registry or TurnMemoryRegistry()

    def info(self) -> Dict[str, str]:
        return {
            "apiversion": config.API_VERSION,
            "author": config.AUTHOR,
            "color": config.COLOR,
            "head": config.HEAD,
            "tail": config.TAIL,
            "version": __version__,
        }

    def start(self, payload: Any) -> str:
        game_id = game_id_of(payload)
        if game_id is None:
            raise SnapshotError("start notification without a game id")
        self.registry.begin(game_id)
        logger.info("START game=%s", game_id)
        return "ok"

    def move(self, payload: Any) -> Decision:
        snapshot = parse_snapshot(payload)
        game_id = snapshot.game_id
        memory = self.registry.get_or_default(game_id)

        board = Board.from_snapshot(snapshot, last_direction=memory.last_direction)
        decision = self.evaluator.evaluate(board, snapshot.you, memory)

        ate = board.is_food(step(snapshot.you.head, decision.move))
        self.registry.update(game_id, memory.advance(decision.move, ate, board, snapshot.turn))

        logger.info("MOVE game=%s turn=%d -> %s", game_id, snapshot.turn, decision.move)
        return decision

    def end(self, payload: Any) -> str:
        game_id = game_id_of(payload)
        if game_id is None or not self.registry.discard(game_id):
            logger.debug("END for unknown game %s; nothing to discard", game_id)
        logger.info("END game=%s", game_id)
        return "ok"

    def status(self, game_id: str) -> GameStatus:
        return self.registry.status(game_id)
