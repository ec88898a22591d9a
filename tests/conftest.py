"""Pytest configuration and fixtures for snake engine tests."""

import random

import pytest

from snake_engine.game import SimulationEngine
from snake_engine.highscores import MemoryHighScoreStore


class ManualClock:
    """Clock that only moves when a test says so."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def now_ms(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def store():
    return MemoryHighScoreStore()


@pytest.fixture
def events():
    return []


@pytest.fixture
def engine(clock, store, events, seeded_rng):
    """Engine on the default 30x30 grid with the normal profile."""
    return SimulationEngine(
        grid_count=30,
        difficulty="normal",
        clock=clock,
        high_scores=store,
        listeners=[events.append],
        rng=seeded_rng,
    )
