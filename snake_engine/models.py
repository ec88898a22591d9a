"""Data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .constants import DIFFICULTIES, GRID_COUNT


class GamePhase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    OVER = "over"


class GameOverReason(Enum):
    WALL = "wall"
    SELF = "self"


class EventKind(Enum):
    SCORE_CHANGED = "score_changed"
    FOOD_EATEN = "food_eaten"
    GAME_OVER = "game_over"
    PHASE_CHANGED = "phase_changed"
    DIFFICULTY_CHANGED = "difficulty_changed"
    HIGH_SCORE_CHANGED = "high_score_changed"


@dataclass(frozen=True)
class DifficultyProfile:
    name: str
    label: str
    base_speed_ms: int
    speed_increment_ms: int
    min_speed_factor: float

    @property
    def min_speed_ms(self) -> int:
        """Fastest tick interval this profile allows."""
        return max(1, round(self.base_speed_ms * self.min_speed_factor))

    def speed_for_score(self, score: int, points_per_level: int) -> int:
        level = score // points_per_level
        return max(self.min_speed_ms, self.base_speed_ms - level * self.speed_increment_ms)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "label": self.label,
            "base_speed_ms": self.base_speed_ms,
            "speed_increment_ms": self.speed_increment_ms,
            "min_speed_ms": self.min_speed_ms,
        }


PROFILES: dict[str, DifficultyProfile] = {
    name: DifficultyProfile(name, label, base, step, factor)
    for name, (label, base, step, factor) in DIFFICULTIES.items()
}


@dataclass(frozen=True)
class EngineEvent:
    kind: EventKind
    value: Any = None

    def to_dict(self) -> dict:
        value = self.value
        if isinstance(value, Enum):
            value = value.value
        return {"type": "event", "event": self.kind.value, "value": value}


@dataclass
class Snapshot:
    snake: list = field(default_factory=list)
    food: Optional[tuple[int, int]] = None
    phase: GamePhase = GamePhase.IDLE
    score: int = 0
    high_score: int = 0
    difficulty: str = ""
    speed: int = 0
    direction: str = "right"
    reason: Optional[GameOverReason] = None
    grid_count: int = GRID_COUNT

    def to_dict(self) -> dict:
        return {
            "snake": [list(cell) for cell in self.snake],
            "food": list(self.food) if self.food else None,
            "phase": self.phase.value,
            "score": self.score,
            "high_score": self.high_score,
            "difficulty": self.difficulty,
            "speed": self.speed,
            "direction": self.direction,
            "reason": self.reason.value if self.reason else None,
            "grid_count": self.grid_count,
        }
