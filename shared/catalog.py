"""
Declarative catalog types for a simulated analytics domain.

A domain is described entirely by data: the instruments it exports, the
activity kinds that mutate them, and the background jobs that fire those
activities. The generic engine in ``shared.engine`` and the scheduler in
``shared.scheduler`` interpret a catalog; no domain carries its own
mutation or scheduling code.
"""

import math
from dataclasses import dataclass, field
from typing import ClassVar, Dict, Optional, Tuple, Union

from .activities import Step
from .jobs import BurstJob, PeriodicJob, SweepJob


@dataclass(frozen=True)
class InstrumentDef:
    """Static identity of an instrument: name, help text and enumerated tags."""

    kind: ClassVar[str] = "instrument"

    name: str
    description: str
    tags: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    @property
    def tag_keys(self) -> Tuple[str, ...]:
        return tuple(self.tags)

    @property
    def series_count(self) -> int:
        """Number of series pre-registered for this instrument."""
        return math.prod(len(values) for values in self.tags.values())


@dataclass(frozen=True)
class CounterDef(InstrumentDef):
    kind: ClassVar[str] = "counter"


@dataclass(frozen=True)
class GaugeDef(InstrumentDef):
    """Gauge backed by a clamped cell; ``maximum`` may be ``math.inf``."""

    kind: ClassVar[str] = "gauge"

    initial: float = 0
    minimum: float = 0
    maximum: float = math.inf

    def __post_init__(self):
        if self.tags:
            raise ValueError(f"{self.name}: gauges are single-series and take no tags")
        if self.minimum > self.maximum:
            raise ValueError(f"{self.name}: minimum exceeds maximum")
        if not self.minimum <= self.initial <= self.maximum:
            raise ValueError(f"{self.name}: initial value outside [{self.minimum}, {self.maximum}]")


@dataclass(frozen=True)
class TimerDef(InstrumentDef):
    kind: ClassVar[str] = "timer"

    unit: ClassVar[str] = "seconds"


@dataclass(frozen=True)
class SummaryDef(InstrumentDef):
    """Distribution summary of a unitless or domain-unit observation."""

    kind: ClassVar[str] = "summary"

    unit: Optional[str] = None


Definition = Union[CounterDef, GaugeDef, TimerDef, SummaryDef]
Job = Union[PeriodicJob, SweepJob, BurstJob]


@dataclass(frozen=True)
class Activity:
    """One activity kind: an ordered set of steps applied per call."""

    name: str
    description: str
    steps: Tuple[Step, ...]


@dataclass(frozen=True)
class DomainCatalog:
    """Everything the engine and scheduler need to simulate one domain."""

    service: str
    namespace: str
    instruments: Tuple[Definition, ...]
    activities: Tuple[Activity, ...]
    jobs: Tuple[Job, ...]
    endpoint_timer: str
    region_counter: str
    request_timer: Optional[str] = None

    def __post_init__(self):
        names = [definition.name for definition in self.instruments]
        duplicates = {name for name in names if names.count(name) > 1}
        if duplicates:
            raise ValueError(f"Duplicate instrument names: {sorted(duplicates)}")

        known = set(names)
        for activity in self.activities:
            for step in activity.steps:
                for metric in step.metrics():
                    if metric not in known:
                        raise ValueError(f"Activity {activity.name} references unknown instrument {metric}")

        kinds = {activity.name for activity in self.activities}
        for job in self.jobs:
            missing = set(job.activity_names()) - kinds
            if missing:
                raise ValueError(f"Job {job.name} references unknown activities {sorted(missing)}")

        for metric in filter(None, (self.endpoint_timer, self.region_counter, self.request_timer)):
            if metric not in known:
                raise ValueError(f"Unknown instrument {metric}")

    def instrument(self, name: str) -> Definition:
        for definition in self.instruments:
            if definition.name == name:
                return definition
        raise KeyError(name)

    @property
    def activity_names(self) -> Tuple[str, ...]:
        return tuple(activity.name for activity in self.activities)

    @property
    def regions(self) -> Tuple[str, ...]:
        return self.instrument(self.region_counter).tags["region"]

    @property
    def endpoints(self) -> Tuple[str, ...]:
        return self.instrument(self.endpoint_timer).tags["endpoint"]
