"""Runtime settings read from the environment."""

import logging
import os
from dataclasses import dataclass

from .constants import DEFAULT_DIFFICULTY, GRID_COUNT, MIN_GRID_COUNT
from .models import PROFILES

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not an integer, using {default}")
        return default
    if value < minimum:
        logger.warning(f"{name}={value} is below {minimum}, using {default}")
        return default
    return value


def _env_log_level(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    level = raw.upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning(f"{name}={raw!r} is not a logging level, using {default}")
        return default
    return level


@dataclass(frozen=True)
class Settings:
    grid_count: int = GRID_COUNT
    difficulty: str = DEFAULT_DIFFICULTY
    highscore_path: str = "data/highscores.json"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8765
    frame_rate: int = 60

    @classmethod
    def from_env(cls) -> "Settings":
        difficulty = os.getenv("SNAKE_DIFFICULTY", DEFAULT_DIFFICULTY)
        if difficulty not in PROFILES:
            logger.warning(f"Unknown SNAKE_DIFFICULTY {difficulty!r}, using {DEFAULT_DIFFICULTY}")
            difficulty = DEFAULT_DIFFICULTY
        return cls(
            grid_count=_env_int("SNAKE_GRID_COUNT", GRID_COUNT, minimum=MIN_GRID_COUNT),
            difficulty=difficulty,
            highscore_path=os.getenv("SNAKE_HIGHSCORE_PATH", cls.highscore_path),
            log_level=_env_log_level("SNAKE_LOG_LEVEL", cls.log_level),
            host=os.getenv("SNAKE_HOST", cls.host),
            port=_env_int("SNAKE_PORT", cls.port),
            frame_rate=_env_int("SNAKE_FRAME_RATE", cls.frame_rate),
        )
