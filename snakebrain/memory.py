"""Per-game turn memory.

Each active game owns one TurnMemory record: the direction chosen last turn, whether that
move landed on food, and the Board it was computed from (needed to tell which tails will
vacate this turn). Records live in a TurnMemoryRegistry owned by the engine instance; there
is no module-level state, and one game's record is never visible to another game.

Lifecycle per game id: NOT_STARTED -> ACTIVE (start notification, or the first move of a
game that skipped start) -> ENDED (end notification discards the record).
"""

from __future__ import annotations

import enum
import logging
import threading
from collections import deque
from dataclasses import dataclass, replace
from typing import Deque, Dict, Optional, Set

from . import config
from .board import Board

logger = logging.getLogger(__name__)


class GameStatus(enum.Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    ENDED = "ended"


@dataclass(frozen=True)
class TurnMemory:
    last_direction: str = config.DEFAULT_DIRECTION
    ate_food: bool = False
    board: Optional[Board] = None
    turn: int = -1

    def advance(self, direction: str, ate_food: bool, board: Board, turn: int) -> "TurnMemory":
        return replace(self, last_direction=direction, ate_food=ate_food, board=board, turn=turn)


class TurnMemoryRegistry:
    """Thread-safe map of game id -> TurnMemory.

    Records are immutable; an update swaps the whole record under the lock, so a reader
    always sees either the previous turn's record or the new one.
    """

    def __init__(self, ended_history: int = config.ENDED_GAMES_HISTORY) -> None:
        self._lock = threading.Lock()
        self._games: Dict[str, TurnMemory] = {}
        self._ended: Deque[str] = deque(maxlen=max(0, int(ended_history)))
        self._ended_set: Set[str] = set()

    def begin(self, game_id: str) -> TurnMemory:
        """Create a fresh record (start notification). Restarting a game resets it."""
        memory = TurnMemory()
        with self._lock:
            if game_id in self._games:
                logger.info("Game %s restarted; resetting turn memory", game_id)
            self._games[game_id] = memory
            self._forget_ended(game_id)
        return memory

    def get(self, game_id: str) -> Optional[TurnMemory]:
        with self._lock:
            return self._games.get(game_id)

    def get_or_default(self, game_id: str) -> TurnMemory:
        """Return the game's record, or default context if the game was never started."""
        memory = self.get(game_id)
        if memory is None:
            logger.warning("No turn memory for game %s (move without start); using defaults", game_id)
            return TurnMemory()
        return memory

    def update(self, game_id: str, memory: TurnMemory) -> None:
        with self._lock:
            self._games[game_id] = memory
            self._forget_ended(game_id)

    def discard(self, game_id: str) -> bool:
        """Drop the game's record. Unknown ids are a no-op; returns whether anything was dropped."""
        with self._lock:
            existed = self._games.pop(game_id, None) is not None
            if existed and self._ended.maxlen:
                if len(self._ended) == self._ended.maxlen:
                    self._ended_set.discard(self._ended[0])
                self._ended.append(game_id)
                self._ended_set.add(game_id)
        return existed

    def status(self, game_id: str) -> GameStatus:
        with self._lock:
            if game_id in self._games:
                return GameStatus.ACTIVE
            if game_id in self._ended_set:
                return GameStatus.ENDED
        return GameStatus.NOT_STARTED

    def _forget_ended(self, game_id: str) -> None:
        if game_id in self._ended_set:
            self._ended_set.discard(game_id)
            self._ended.remove(game_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)

    def __contains__(self, game_id: object) -> bool:
        with self._lock:
            return game_id in self._games
