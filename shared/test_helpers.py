"""
Test helper functions and factory methods for the analytics services.
"""

import random
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from prometheus_client.parser import text_string_to_metric_families

from .activities import AdjustGauge, Increment, Observe, RecordDuration, SetGauge
from .catalog import Activity, CounterDef, DomainCatalog, GaugeDef, SummaryDef, TimerDef
from .jobs import BurstJob, PeriodicJob, SweepJob

# Overrides that make a service deterministic enough for request tests
TEST_CONFIG: Dict[str, Any] = {
    "simulation_enabled": False,
    "request_delay_scale": 0.0,
    "env": "test",
    "log_level": "warning",
}

TEST_REGIONS = ("north", "south")
TEST_ENDPOINTS = ("/api/widgets", "/api/gadgets")


@dataclass(frozen=True)
class FailingStep:
    """Step that always raises, for exercising failure isolation."""

    message: str = "simulated failure"

    def metrics(self) -> Tuple[str, ...]:
        return ()

    def apply(self, registry, rng: random.Random) -> Dict[str, Any]:
        raise RuntimeError(self.message)


class CatalogFactory:
    """Factory for creating small catalogs and jobs."""

    @staticmethod
    def create_instruments() -> Tuple:
        return (
            CounterDef("test.widgets.total", "Widgets produced", tags={
                "color": ("red", "green", "blue"),
                "size": ("small", "large"),
            }),
            CounterDef("test.ticks.total", "Untagged ticks"),
            GaugeDef("test.queue.depth", "Queue depth", initial=5, maximum=10),
            GaugeDef("test.queue.floor", "Lower bound for depth", initial=3, maximum=10),
            GaugeDef("test.pool.size", "Pool size", minimum=1, initial=1, maximum=8),
            TimerDef("test.work.duration", "Work duration"),
            SummaryDef("test.payload.size", "Payload sizes", unit="bytes"),
            GaugeDef("test.payload.total", "Accumulated payload"),
            CounterDef("test.requests.by.region", "Requests by region", tags={"region": TEST_REGIONS}),
            TimerDef("test.endpoint.duration", "Endpoint duration", tags={"endpoint": TEST_ENDPOINTS}),
            TimerDef("test.request.duration", "Request duration"),
        )

    @staticmethod
    def create_activities(include_failing: bool = False) -> Tuple[Activity, ...]:
        activities = [
            Activity("widgets", "Widget activity", (
                Increment("test.widgets.total"),
                Increment("test.ticks.total"),
                AdjustGauge("test.queue.depth", -4, 4, floor="test.queue.floor"),
                SetGauge("test.pool.size", 0, 20),
                RecordDuration("test.work.duration", 1, 50),
                Observe("test.payload.size", 10, 100, integral=True, accumulate="test.payload.total"),
            )),
            Activity("regions", "Regional activity", (
                Increment("test.requests.by.region"),
            )),
            Activity("endpoints", "Endpoint activity", (
                RecordDuration("test.endpoint.duration", 1, 10),
            )),
        ]
        if include_failing:
            activities.append(Activity("broken", "Broken activity", (FailingStep(),)))
        return tuple(activities)

    @staticmethod
    def create_jobs() -> Tuple:
        return (
            PeriodicJob("widget-activity", "widgets", 0.01, 1, 3),
            SweepJob("sweep", 0.05),
            BurstJob("burst", 0.05, 2, 4, 0, 1, split=(
                (0.5, "widgets"),
                (1.0, "regions"),
            )),
        )

    @classmethod
    def create_catalog(cls, include_failing: bool = False, jobs: Tuple = None) -> DomainCatalog:
        return DomainCatalog(
            service="test-analytics",
            namespace="test",
            instruments=cls.create_instruments(),
            activities=cls.create_activities(include_failing),
            jobs=cls.create_jobs() if jobs is None else jobs,
            endpoint_timer="test.endpoint.duration",
            region_counter="test.requests.by.region",
            request_timer="test.request.duration",
        )


def parse_exposition(text) -> Dict[str, Any]:
    """Parse Prometheus text output into ``{family name: family}``."""
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    return {family.name: family for family in text_string_to_metric_families(text)}


def sample_labels(family, sample_name: str) -> List[Dict[str, str]]:
    """Label sets of every sample called ``sample_name`` in ``family``."""
    return [sample.labels for sample in family.samples if sample.name == sample_name]
