"""
Generic metrics engine driving a declarative domain catalog.
"""

import random
from typing import Any, Dict, List, Optional

from .catalog import Activity, CounterDef, DomainCatalog
from .errors import UnknownActivityError, UnknownSeriesError
from .logging import get_logger
from .metrics import MetricsRegistry


class MetricsEngine:
    """Applies catalog activities to a metrics registry.

    One engine instance serves both the background scheduler and the HTTP
    handlers of a service. Every instrument update is thread-safe on its own;
    updates to different instruments within one activity are not atomic
    with respect to each other.
    """

    def __init__(
        self,
        catalog: DomainCatalog,
        registry: Optional[MetricsRegistry] = None,
        rng: Optional[random.Random] = None,
        common_labels: Optional[Dict[str, str]] = None,
    ):
        self.catalog = catalog
        self.registry = registry or MetricsRegistry(
            common_labels=common_labels,
            service_name=catalog.service
        )
        self.rng = rng or random.Random()
        self.logger = get_logger(f"{catalog.namespace}.engine")
        self._activities = {activity.name: activity for activity in catalog.activities}

        self.errors_metric = f"{catalog.namespace}.simulation.errors.total"
        self.registry.register_all(catalog.instruments)
        self.registry.register(CounterDef(
            self.errors_metric,
            "Simulated activities that failed",
            tags={"activity": catalog.activity_names}
        ))

    @property
    def activities(self) -> List[str]:
        return list(self._activities)

    def activity(self, kind: str) -> Activity:
        """Look up an activity by name."""
        activity = self._activities.get(kind)
        if activity is None:
            raise UnknownActivityError(kind, self._activities)
        return activity

    def perform(self, kind: str) -> Dict[str, Any]:
        """Run one activity and return the values it drew."""
        activity = self.activity(kind)

        drawn: Dict[str, Any] = {}
        for step in activity.steps:
            drawn.update(step.apply(self.registry, self.rng))

        self.logger.debug("Simulated activity", activity=kind, **drawn)
        return drawn

    def perform_safely(self, kind: str) -> bool:
        """Run one activity, logging and counting any failure instead of raising."""
        try:
            self.perform(kind)
            return True
        except UnknownActivityError:
            raise
        except Exception as e:
            self.logger.error("Activity simulation failed", activity=kind, error=str(e), exc_info=True)
            self.registry.increment(self.errors_metric, activity=kind)
            return False

    def perform_all(self) -> Dict[str, Dict[str, Any]]:
        """Run every activity exactly once, in catalog order."""
        return {kind: self.perform(kind) for kind in self._activities}

    def perform_all_safely(self) -> List[str]:
        """Run every activity once through ``perform_safely``; returns the ones that failed."""
        return [kind for kind in self._activities if not self.perform_safely(kind)]

    def record_request(self, endpoint: str, seconds: float) -> bool:
        """Record the elapsed time of one handled request.

        Returns False when ``endpoint`` has no pre-registered timer; the
        generic request timer, if the domain has one, is recorded regardless.
        """
        if self.catalog.request_timer:
            self.registry.record_duration(self.catalog.request_timer, seconds)

        try:
            self.registry.record_duration(self.catalog.endpoint_timer, seconds, endpoint=endpoint)
        except UnknownSeriesError:
            self.logger.debug("No endpoint timer registered", endpoint=endpoint)
            return False
        return True
