"""
Background job definitions for the simulation scheduler.

A job only describes *what* one firing does; ``shared.scheduler`` owns the
timing loop and failure isolation around it.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class PeriodicJob:
    """Perform one activity ``N`` times per firing, ``N`` uniform in [min_repeats, max_repeats]."""

    name: str
    activity: str
    period_seconds: float
    min_repeats: int
    max_repeats: int

    def activity_names(self) -> Tuple[str, ...]:
        return (self.activity,)

    async def fire(self, engine, rng: random.Random) -> int:
        repeats = rng.randint(self.min_repeats, self.max_repeats)
        for _ in range(repeats):
            engine.perform(self.activity)
        return repeats


@dataclass(frozen=True)
class SweepJob:
    """Perform every activity of the engine exactly once."""

    name: str
    period_seconds: float

    def activity_names(self) -> Tuple[str, ...]:
        return ()

    async def fire(self, engine, rng: random.Random) -> int:
        return len(engine.perform_all())


@dataclass(frozen=True)
class BurstJob:
    """Fire a rapid, randomly mixed run of activities to simulate a traffic spike.

    ``split`` holds cumulative probability thresholds in ascending order; a
    uniform roll selects the first activity whose threshold exceeds it, and
    the last entry catches everything above the final threshold.
    """

    name: str
    period_seconds: float
    min_size: int
    max_size: int
    min_delay_ms: int
    max_delay_ms: int
    split: Tuple[Tuple[float, str], ...]

    def __post_init__(self):
        thresholds = [threshold for threshold, _ in self.split]
        if not self.split or thresholds != sorted(thresholds):
            raise ValueError(f"{self.name}: split thresholds must be non-empty and ascending")

    def activity_names(self) -> Tuple[str, ...]:
        return tuple(activity for _, activity in self.split)

    def choose(self, roll: float) -> str:
        for threshold, activity in self.split:
            if roll < threshold:
                return activity
        return self.split[-1][1]

    async def fire(self, engine, rng: random.Random) -> int:
        size = rng.randint(self.min_size, self.max_size)
        for _ in range(size):
            engine.perform(self.choose(rng.random()))
            await asyncio.sleep(rng.randint(self.min_delay_ms, self.max_delay_ms) / 1000.0)
        return size
