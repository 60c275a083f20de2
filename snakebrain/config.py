"""Central configuration for the move engine and its HTTP/CLI surfaces."""

from __future__ import annotations

import logging
import os
import sys

# Logging
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)-20s - %(levelname)-8s - %(message)s"


def _level_from_env(default: int = logging.INFO) -> int:
    raw = os.environ.get("SNAKEBRAIN_LOG_LEVEL")
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(level: int | None = None) -> None:
    """Configure root logging if the host application has not done so already.

    This keeps the package library-friendly (it will not override an existing logging setup,
    e.g. the one installed by a WSGI server), while preserving CLI ergonomics.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(
        level=_level_from_env() if level is None else level,
        format=DEFAULT_LOG_FORMAT,
        stream=sys.stdout,
    )


configure_logging()

logger = logging.getLogger("snakebrain")


# ----------------------------
# Identity (GET /)
# ----------------------------
API_VERSION = "1"
AUTHOR = os.environ.get("SNAKEBRAIN_AUTHOR", "adisam")
COLOR = os.environ.get("SNAKEBRAIN_COLOR", "#2bbfec")
HEAD = os.environ.get("SNAKEBRAIN_HEAD", "bendr")
TAIL = os.environ.get("SNAKEBRAIN_TAIL", "small-rattle")


# ----------------------------
# Server
# ----------------------------
HOST = os.environ.get("SNAKEBRAIN_HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "3000"))


# ----------------------------
# Turn memory
# ----------------------------
DEFAULT_DIRECTION = "up"
# How many ended game ids the registry remembers (for status queries only).
ENDED_GAMES_HISTORY = 256


# ----------------------------
# Scoring
# ----------------------------
# Dominates every other term: an illegal move only wins when nothing is legal.
LEGALITY_PENALTY = -1000.0

# Food seeking
LOW_HEALTH_THRESHOLD = 30
FOOD_NEAR_DISTANCE = 4
FOOD_BONUS = 1.0

# Head-to-head
COMBAT_WIN_BONUS = 5.0
COMBAT_ADVANCING_BONUS = 1.0
COMBAT_TIE_PENALTY = -200.0
COMBAT_LOSS_PENALTY = -400.0

# Space pressure (only evaluated on the edge or when body-blocked)
SPACE_FAIL_PENALTY = -100.0
# Tunable: partially offsets SPACE_FAIL_PENALTY for moves into large pockets.
SPACE_REWARD_WEIGHT = 0.1


def validate_config() -> None:
    """Basic sanity checks."""
    ok = True
    if not (1 <= PORT <= 65535):
        logger.error("PORT must be in 1..65535")
        ok = False
    if LEGALITY_PENALTY >= min(COMBAT_LOSS_PENALTY, COMBAT_TIE_PENALTY, SPACE_FAIL_PENALTY):
        logger.error("LEGALITY_PENALTY must be lower than every other penalty")
        ok = False
    if COMBAT_LOSS_PENALTY > COMBAT_TIE_PENALTY:
        logger.error("COMBAT_LOSS_PENALTY must be <= COMBAT_TIE_PENALTY")
        ok = False
    if LOW_HEALTH_THRESHOLD < 0 or FOOD_NEAR_DISTANCE < 0:
        logger.error("Food thresholds must be >= 0")
        ok = False
    if SPACE_REWARD_WEIGHT < 0:
        logger.error("SPACE_REWARD_WEIGHT must be >= 0")
        ok = False
    if DEFAULT_DIRECTION not in ("up", "down", "left", "right"):
        logger.error("DEFAULT_DIRECTION must be a cardinal direction")
        ok = False
    if not ok:
        raise SystemExit(1)
