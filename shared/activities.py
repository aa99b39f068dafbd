"""
Mutation steps that make up a simulated activity.

Each step draws its own random values independently and uniformly, applies
them to the registry, and returns the values it drew so the engine can log
a single trace line per activity. Tag values are never supplied by the
caller; they are drawn from the enumerations the instrument was registered
with, so every series a step touches already exists.
"""

import random
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union


def draw_tags(registry, metric: str, rng: random.Random) -> Dict[str, str]:
    """Pick one value per tag of ``metric`` uniformly from its enumeration."""
    definition = registry.definition(metric)
    return {key: rng.choice(values) for key, values in definition.tags.items()}


@dataclass(frozen=True)
class Increment:
    """Increment a counter series chosen by drawing every tag."""

    metric: str
    probability: float = 1.0

    def metrics(self) -> Tuple[str, ...]:
        return (self.metric,)

    def apply(self, registry, rng: random.Random) -> Dict[str, Any]:
        if self.probability < 1.0 and rng.random() >= self.probability:
            return {}
        tags = draw_tags(registry, self.metric, rng)
        registry.increment(self.metric, **tags)
        return tags


@dataclass(frozen=True)
class Observe:
    """Record one observation into a distribution summary.

    When ``accumulate`` names a gauge, ``int(value * scale)`` is added to it
    as well (revenue in cents, total session seconds).
    """

    metric: str
    low: float
    high: float
    integral: bool = False
    accumulate: Optional[str] = None
    scale: float = 1

    def metrics(self) -> Tuple[str, ...]:
        return tuple(filter(None, (self.metric, self.accumulate)))

    def apply(self, registry, rng: random.Random) -> Dict[str, Any]:
        if self.integral:
            value = rng.randint(int(self.low), int(self.high))
        else:
            value = rng.uniform(self.low, self.high)
        registry.observe(self.metric, value, **draw_tags(registry, self.metric, rng))
        drawn = {self.metric: value}
        if self.accumulate:
            drawn[self.accumulate] = registry.gauge(self.accumulate).add(int(value * self.scale))
        return drawn


@dataclass(frozen=True)
class RecordDuration:
    """Record a random duration, drawn in whole milliseconds, into a timer."""

    metric: str
    low_ms: int
    high_ms: int

    def metrics(self) -> Tuple[str, ...]:
        return (self.metric,)

    def apply(self, registry, rng: random.Random) -> Dict[str, Any]:
        duration_ms = rng.randint(self.low_ms, self.high_ms)
        tags = draw_tags(registry, self.metric, rng)
        registry.record_duration(self.metric, duration_ms / 1000.0, **tags)
        return {f"{self.metric}.ms": duration_ms, **tags}


@dataclass(frozen=True)
class AdjustGauge:
    """Apply a random integer delta to a gauge, clamped to its declared range.

    ``floor`` names another gauge whose current value raises the lower bound
    (online users never drop below active users).
    """

    metric: str
    low: int
    high: int
    floor: Optional[str] = None

    def metrics(self) -> Tuple[str, ...]:
        return tuple(filter(None, (self.metric, self.floor)))

    def apply(self, registry, rng: random.Random) -> Dict[str, Any]:
        delta = rng.randint(self.low, self.high)
        floor = registry.gauge(self.floor).get() if self.floor else None
        return {self.metric: registry.gauge(self.metric).adjust(delta, floor=floor)}


@dataclass(frozen=True)
class SetGauge:
    """Overwrite a gauge with a random integer (times ``multiplier``)."""

    metric: str
    low: int
    high: int
    multiplier: int = 1

    def metrics(self) -> Tuple[str, ...]:
        return (self.metric,)

    def apply(self, registry, rng: random.Random) -> Dict[str, Any]:
        value = rng.randint(self.low, self.high) * self.multiplier
        return {self.metric: registry.gauge(self.metric).set(value)}


Step = Union[Increment, Observe, RecordDuration, AdjustGauge, SetGauge]
