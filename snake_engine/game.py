"""Core game state and logic."""

import logging
import random
from typing import Callable, Iterable, Optional, Union

from .clock import Clock, MonotonicClock
from .constants import (
    GRID_COUNT, MIN_GRID_COUNT, INITIAL_LENGTH, SCORE_PER_FOOD, POINTS_PER_LEVEL,
    FREE_CELL_SCAN_RATIO, MAX_FOOD_ATTEMPTS, DEFAULT_DIFFICULTY,
    DIRECTIONS,
)
from .highscores import HighScoreStore, MemoryHighScoreStore
from .models import (
    DifficultyProfile, EngineEvent, EventKind, GameOverReason, GamePhase,
    PROFILES, Snapshot,
)

logger = logging.getLogger(__name__)

Listener = Callable[[EngineEvent], None]


def _axis(direction: str) -> int:
    return 0 if DIRECTIONS[direction][0] else 1


class SimulationEngine:
    """Snake simulation advanced one cell per tick.

    The engine never schedules itself. A host calls :meth:`tick` whenever
    ``speed`` milliseconds have passed, or :meth:`advance` to let the
    injected clock decide. Every guarded operation returns ``False`` instead
    of raising when the current phase does not allow it.
    """

    def __init__(
        self,
        grid_count: int = GRID_COUNT,
        difficulty: Union[str, DifficultyProfile] = DEFAULT_DIFFICULTY,
        clock: Optional[Clock] = None,
        high_scores: Optional[HighScoreStore] = None,
        listeners: Iterable[Listener] = (),
        rng: Optional[random.Random] = None,
    ):
        if grid_count < MIN_GRID_COUNT:
            raise ValueError(f"grid_count must be at least {MIN_GRID_COUNT}")
        profile = self._resolve_profile(difficulty)
        if profile is None:
            raise ValueError(f"unknown difficulty {difficulty!r}")

        self.grid_count = grid_count
        self.clock = clock or MonotonicClock()
        self.high_scores = high_scores if high_scores is not None else MemoryHighScoreStore()
        self.listeners: list[Listener] = list(listeners)
        self.rng = rng or random.Random()

        self.profile = profile
        self.phase = GamePhase.IDLE
        self.snake: list[tuple[int, int]] = []
        self.direction = "right"
        self.next_direction = "right"
        self.food: Optional[tuple[int, int]] = None
        self.score = 0
        self.speed = profile.base_speed_ms
        self.reason: Optional[GameOverReason] = None
        self.last_tick_at: Optional[float] = None
        self.high_score = self.high_scores.load(profile.name)

    @staticmethod
    def _resolve_profile(difficulty) -> Optional[DifficultyProfile]:
        if isinstance(difficulty, DifficultyProfile):
            return difficulty
        if not isinstance(difficulty, str):
            return None
        return PROFILES.get(difficulty)

    # -- events ---------------------------------------------------------

    def emit(self, kind: EventKind, value=None):
        event = EngineEvent(kind, value)
        for listener in self.listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"Listener failed on {kind.value}")

    def _set_phase(self, phase: GamePhase):
        if phase == self.phase:
            return
        logger.info(f"Phase {self.phase.value} -> {phase.value}")
        self.phase = phase
        self.emit(EventKind.PHASE_CHANGED, phase)

    # -- transitions ----------------------------------------------------

    def select_difficulty(self, difficulty: Union[str, DifficultyProfile]) -> bool:
        if self.phase not in (GamePhase.IDLE, GamePhase.OVER):
            logger.debug(f"Difficulty change rejected while {self.phase.value}")
            return False
        profile = self._resolve_profile(difficulty)
        if profile is None:
            logger.debug(f"Unknown difficulty {difficulty!r}")
            return False
        self.profile = profile
        self.speed = profile.base_speed_ms
        self.high_score = self.high_scores.load(profile.name)
        logger.info(f"Difficulty set to {profile.name}")
        self.emit(EventKind.DIFFICULTY_CHANGED, profile.name)
        return True

    def start(self) -> bool:
        if self.phase != GamePhase.IDLE:
            logger.debug(f"Start rejected while {self.phase.value}")
            return False
        cx = cy = self.grid_count // 2
        self.snake = [(cx - i, cy) for i in range(INITIAL_LENGTH)]
        self.direction = "right"
        self.next_direction = "right"
        self.score = 0
        self.speed = self.profile.base_speed_ms
        self.reason = None
        self.spawn_food()
        self.last_tick_at = self.clock.now_ms()
        self._set_phase(GamePhase.RUNNING)
        return True

    def set_input_direction(self, direction: str) -> bool:
        if self.phase != GamePhase.RUNNING:
            return False
        if not isinstance(direction, str) or direction not in DIRECTIONS:
            return False
        # Only turns are accepted: a press on the axis of the applied
        # direction (not the pending one) is dropped.
        if _axis(direction) == _axis(self.direction):
            return False
        self.next_direction = direction
        return True

    def pause(self) -> bool:
        if self.phase != GamePhase.RUNNING:
            return False
        self._set_phase(GamePhase.PAUSED)
        return True

    def resume(self) -> bool:
        if self.phase != GamePhase.PAUSED:
            return False
        self.last_tick_at = self.clock.now_ms()
        self._set_phase(GamePhase.RUNNING)
        return True

    def toggle_pause(self) -> bool:
        if self.phase == GamePhase.PAUSED:
            return self.resume()
        return self.pause()

    def restart(self):
        self.snake = []
        self.food = None
        self.direction = "right"
        self.next_direction = "right"
        self.speed = self.profile.base_speed_ms
        self.reason = None
        self.last_tick_at = None
        if self.score:
            self.score = 0
            self.emit(EventKind.SCORE_CHANGED, 0)
        self._set_phase(GamePhase.IDLE)

    # -- simulation -----------------------------------------------------

    def advance(self, now_ms: Optional[float] = None) -> bool:
        """Tick once if ``speed`` ms have elapsed since the last tick."""
        if self.phase != GamePhase.RUNNING:
            return False
        now = self.clock.now_ms() if now_ms is None else now_ms
        if self.last_tick_at is not None and now - self.last_tick_at < self.speed:
            return False
        self.last_tick_at = now
        self.tick()
        return True

    def tick(self) -> bool:
        if self.phase != GamePhase.RUNNING:
            return False

        self.direction = self.next_direction
        dx, dy = DIRECTIONS[self.direction]
        hx, hy = self.snake[0]
        head = (hx + dx, hy + dy)

        if not (0 <= head[0] < self.grid_count and 0 <= head[1] < self.grid_count):
            self._game_over(GameOverReason.WALL)
            return True
        if head in self.snake:
            self._game_over(GameOverReason.SELF)
            return True

        self.snake.insert(0, head)
        if head == self.food:
            self.score += SCORE_PER_FOOD
            self.emit(EventKind.SCORE_CHANGED, self.score)
            self.emit(EventKind.FOOD_EATEN, head)
            self._update_high_score()
            self.spawn_food()
            self.speed = self.profile.speed_for_score(self.score, POINTS_PER_LEVEL)
        else:
            self.snake.pop()
        return True

    def _game_over(self, reason: GameOverReason):
        self.reason = reason
        logger.info(f"Game over ({reason.value}) with score {self.score}")
        self._set_phase(GamePhase.OVER)
        self.emit(EventKind.GAME_OVER, reason)

    def _update_high_score(self):
        if self.score <= self.high_score:
            return
        self.high_score = self.score
        self.high_scores.save(self.profile.name, self.score)
        self.emit(EventKind.HIGH_SCORE_CHANGED, self.score)

    def spawn_food(self):
        occupied = set(self.snake)
        total = self.grid_count * self.grid_count

        if len(occupied) < total * FREE_CELL_SCAN_RATIO:
            for _ in range(MAX_FOOD_ATTEMPTS):
                cell = (self.rng.randrange(self.grid_count), self.rng.randrange(self.grid_count))
                if cell not in occupied:
                    self.food = cell
                    return

        free = [
            (x, y)
            for y in range(self.grid_count)
            for x in range(self.grid_count)
            if (x, y) not in occupied
        ]
        self.food = self.rng.choice(free) if free else None
        assert self.food is None or self.food not in occupied

    # -- read side ------------------------------------------------------

    @property
    def head(self) -> Optional[tuple[int, int]]:
        return self.snake[0] if self.snake else None

    @property
    def is_playing(self) -> bool:
        return self.phase in (GamePhase.RUNNING, GamePhase.PAUSED)

    def snapshot(self) -> Snapshot:
        return Snapshot(
            snake=list(self.snake),
            food=self.food,
            phase=self.phase,
            score=self.score,
            high_score=self.high_score,
            difficulty=self.profile.name,
            speed=self.speed,
            direction=self.direction,
            reason=self.reason,
            grid_count=self.grid_count,
        )
