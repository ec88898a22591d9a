"""High-score persistence.

Scores are kept per difficulty profile under ``snake_high_score_<name>``.
Files written by the single-speed game only carry the unkeyed
``snake_high_score`` value; it is used for any profile that has no score of
its own yet.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol, Union

from .constants import HIGH_SCORE_KEY
from .errors import PersistenceUnavailable

logger = logging.getLogger(__name__)


def profile_key(difficulty: str) -> str:
    return f"{HIGH_SCORE_KEY}_{difficulty}"


class HighScoreStore(Protocol):
    def load(self, difficulty: str) -> int: ...

    def save(self, difficulty: str, score: int) -> None: ...


def _lookup(data: dict, difficulty: str) -> int:
    raw = data.get(profile_key(difficulty))
    if raw is None:
        raw = data.get(HIGH_SCORE_KEY)
    if raw is None:
        return 0
    try:
        return max(0, int(raw))
    except (TypeError, ValueError):
        logger.warning(f"Ignoring malformed high score {raw!r} for {difficulty}")
        return 0


class MemoryHighScoreStore:
    def __init__(self, initial: Optional[dict] = None):
        self.data: dict = dict(initial or {})

    def load(self, difficulty: str) -> int:
        return _lookup(self.data, difficulty)

    def save(self, difficulty: str, score: int) -> None:
        self.data[profile_key(difficulty)] = score


class JsonHighScoreStore:
    """Stores every profile's high score in one JSON object on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceUnavailable(f"cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceUnavailable(f"{self.path} does not hold a JSON object")
        return data

    def _write(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            tmp.replace(self.path)
        except OSError as e:
            raise PersistenceUnavailable(f"cannot write {self.path}: {e}") from e

    def load(self, difficulty: str) -> int:
        try:
            return _lookup(self._read(), difficulty)
        except PersistenceUnavailable as e:
            logger.warning(f"Failed to load high score: {e}")
            return 0

    def save(self, difficulty: str, score: int) -> None:
        try:
            data = self._read()
        except PersistenceUnavailable as e:
            logger.warning(f"Existing high scores unreadable, starting fresh: {e}")
            data = {}
        data[profile_key(difficulty)] = score
        try:
            self._write(data)
        except PersistenceUnavailable as e:
            logger.warning(f"High score save skipped: {e}")
            return
        logger.debug(f"Saved high score {score} for {difficulty} to {self.path}")
