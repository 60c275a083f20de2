"""One-ply move scoring: legality, food bias, head-to-head combat and space pressure."""

from __future__ import annotations

import logging
from typing import Any, Dict, NamedTuple, Optional

from . import config
from .board import Board, HeadToHead
from .geometry import DIRECTIONS, Coord, manhattan, neighbors4, step
from .memory import TurnMemory
from .search import tail_reachability
from .snapshot import Snake

logger = logging.getLogger(__name__)


class Decision(NamedTuple):
    move: str
    scores: Dict[str, float]
    meta: Dict[str, Dict[str, Any]]


def select_move(scores: Dict[str, float]) -> str:
    """Arg-max over DIRECTIONS; a later direction must be strictly better to win."""
    best = DIRECTIONS[0]
    for direction in DIRECTIONS[1:]:
        if scores[direction] > scores[best]:
            best = direction
    return best


class MoveEvaluator:
    """Scores the four candidate moves for our snake on one board.

    Weights are read from config at construction so tests and callers can tune them
    per instance.
    """

    def __init__(self, **overrides: float) -> None:
        self.legality_penalty = float(overrides.pop("legality_penalty", config.LEGALITY_PENALTY))
        self.low_health_threshold = int(overrides.pop("low_health_threshold", config.LOW_HEALTH_THRESHOLD))
        self.food_near_distance = int(overrides.pop("food_near_distance", config.FOOD_NEAR_DISTANCE))
        self.food_bonus = float(overrides.pop("food_bonus", config.FOOD_BONUS))
        self.combat_win_bonus = float(overrides.pop("combat_win_bonus", config.COMBAT_WIN_BONUS))
        self.combat_advancing_bonus = float(overrides.pop("combat_advancing_bonus", config.COMBAT_ADVANCING_BONUS))
        self.combat_tie_penalty = float(overrides.pop("combat_tie_penalty", config.COMBAT_TIE_PENALTY))
        self.combat_loss_penalty = float(overrides.pop("combat_loss_penalty", config.COMBAT_LOSS_PENALTY))
        self.space_fail_penalty = float(overrides.pop("space_fail_penalty", config.SPACE_FAIL_PENALTY))
        self.space_reward_weight = float(overrides.pop("space_reward_weight", config.SPACE_REWARD_WEIGHT))
        if overrides:
            raise TypeError(f"unknown weight(s): {', '.join(sorted(overrides))}")

    # ----------------------------
    # Individual terms
    # ----------------------------
    def _is_legal(self, board: Board, me: Snake, dest: Coord, memory: TurnMemory) -> bool:
        if not board.in_bounds(dest):
            return False
        if board.is_unoccupied(dest):
            return True
        if not board.is_valid_snake_tail(memory.board, dest):
            return False
        # Our own tail stays put if we ate last turn.
        if dest == me.tail and board.occupant(dest) == me.id:
            return not memory.ate_food
        return True

    def _food_target(self, board: Board, me: Snake) -> Optional[Coord]:
        """Nearest food, if we are hungry or it is already close; None otherwise."""
        target = board.nearest_food(me.head)
        if target is None:
            return None
        if me.health < self.low_health_threshold or manhattan(me.head, target) <= self.food_near_distance:
            return target
        return None

    def _combat(self, board: Board, me: Snake, dest: Coord) -> float:
        for nb in neighbors4(dest):
            if nb == me.head or not board.is_snake_head(nb):
                continue
            opponent = board.snake_at(nb)
            outcome = board.head_to_head(opponent.id, me.length)
            if outcome is HeadToHead.WIN:
                score = self.combat_win_bonus
                heading = board.snake_direction(opponent.id)
                if heading is not None and manhattan(step(opponent.head, heading), me.head) < manhattan(
                    opponent.head, me.head
                ):
                    score += self.combat_advancing_bonus
                return score
            if outcome is HeadToHead.TIE:
                return self.combat_tie_penalty
            return self.combat_loss_penalty
        return 0.0

    def _space(self, board: Board, me: Snake, dest: Coord, tail_vacates: bool) -> tuple[float, int]:
        reach = tail_reachability(board, dest, me.tail, tail_vacates)
        score = self.space_reward_weight * abs(reach)
        if reach <= 0:
            score += self.space_fail_penalty
        return score, reach

    # ----------------------------
    # Main evaluation
    # ----------------------------
    def evaluate(self, board: Board, me: Snake, memory: Optional[TurnMemory] = None) -> Decision:
        if memory is None:
            memory = TurnMemory()

        scores: Dict[str, float] = {direction: 0.0 for direction in DIRECTIONS}
        meta: Dict[str, Dict[str, Any]] = {direction: {} for direction in DIRECTIONS}

        food = self._food_target(board, me)
        food_dist = manhattan(me.head, food) if food is not None else 0

        constrained = board.is_on_edge(me.head) or board.is_body_blocked(me.head, memory.last_direction)
        tail_vacates = (
            constrained
            and not memory.ate_food
            and board.is_valid_snake_tail(memory.board, me.tail)
        )

        any_legal = False
        for direction in DIRECTIONS:
            dest = step(me.head, direction)
            info = meta[direction]

            if not self._is_legal(board, me, dest, memory):
                scores[direction] = self.legality_penalty
                info["legal"] = False
                continue
            info["legal"] = True
            any_legal = True

            if food is not None and manhattan(dest, food) < food_dist:
                scores[direction] += self.food_bonus
                info["food"] = self.food_bonus

            combat = self._combat(board, me, dest)
            if combat:
                scores[direction] += combat
                info["combat"] = combat

            if constrained:
                space, reach = self._space(board, me, dest, tail_vacates)
                scores[direction] += space
                info["reach"] = reach

        move = select_move(scores)
        if not any_legal:
            logger.warning("No legal move for %s at %s; returning least-bad %s", me.id, tuple(me.head), move)
        logger.debug("Scores for %s: %s -> %s", me.id, scores, move)
        return Decision(move, scores, meta)
