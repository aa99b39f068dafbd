"""
Shared metrics registry for the analytics services.

Instruments are created once from catalog definitions and live for the
process lifetime. Every tagged instrument has the full cross product of its
enumerated tag values registered up front, so series are looked up, never
created, on the hot path.
"""

import itertools
import threading
from typing import Dict, Any, Iterable, Optional, Tuple

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    GCCollector,
    Histogram,
    Info,
    PlatformCollector,
    ProcessCollector,
    Summary,
    generate_latest,
)

from .errors import RegistrationError, UnknownSeriesError


def prometheus_name(name: str) -> str:
    """Sanitize a dotted instrument name for Prometheus format."""
    # Replace invalid characters with underscores
    sanitized = ""
    for char in name:
        if char.isalnum() or char == '_':
            sanitized += char
        else:
            sanitized += '_'

    # Ensure it starts with a letter
    if sanitized and not sanitized[0].isalpha():
        sanitized = "metric_" + sanitized

    return sanitized or "unknown_metric"


def exported_name(definition) -> str:
    """Metric family name as it appears in the exposition output."""
    name = prometheus_name(definition.name)
    unit = getattr(definition, "unit", None)
    if definition.kind == "counter" and not name.endswith("_total"):
        name += "_total"
    if unit and not name.endswith("_" + unit):
        name += "_" + unit
    return name


class GaugeCell:
    """Mutable gauge value clamped to ``[minimum, maximum]`` on every write."""

    def __init__(self, initial: float = 0, minimum: float = 0, maximum: float = float("inf")):
        self.minimum = minimum
        self.maximum = maximum
        self._lock = threading.Lock()
        self._value = self._clamp(initial)

    def _clamp(self, value: float, floor: Optional[float] = None) -> float:
        lower = self.minimum if floor is None else max(self.minimum, floor)
        return max(lower, min(self.maximum, value))

    def get(self) -> float:
        with self._lock:
            return self._value

    def set(self, value: float) -> float:
        with self._lock:
            self._value = self._clamp(value)
            return self._value

    def add(self, delta: float) -> float:
        with self._lock:
            self._value = self._clamp(self._value + delta)
            return self._value

    def adjust(self, delta: float, floor: Optional[float] = None) -> float:
        """Add ``delta``; ``floor`` raises the lower bound for this write only."""
        with self._lock:
            self._value = self._clamp(self._value + delta, floor)
            return self._value


class MetricsRegistry:
    """Registry of catalog instruments backed by a prometheus ``CollectorRegistry``."""

    def __init__(
        self,
        registry: Optional[CollectorRegistry] = None,
        common_labels: Optional[Dict[str, str]] = None,
        service_name: Optional[str] = None,
        version: str = "1.0.0",
        runtime_metrics: bool = True,
    ):
        self.collector_registry = registry or CollectorRegistry()
        self.common_labels: Dict[str, str] = dict(common_labels or {})
        self._metrics: Dict[str, Any] = {}
        self._definitions: Dict[str, Any] = {}
        self._series: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], Any] = {}
        self._gauges: Dict[str, GaugeCell] = {}
        self._lock = threading.Lock()
        self._setup_metrics(service_name, version)
        if runtime_metrics:
            self._setup_runtime_collectors()

    def _setup_metrics(self, service_name: Optional[str], version: str):
        """Set up metrics every service exports regardless of its catalog."""
        labelnames = tuple(self.common_labels)

        self._metrics["service_info"] = Info(
            "service",
            "Service information",
            labelnames,
            registry=self.collector_registry
        )
        self._bind(self._metrics["service_info"], {}).info({
            "service": service_name or "unknown",
            "service_version": version
        })

        self._metrics["http_server_requests"] = Histogram(
            "http_server_requests",
            "HTTP request duration",
            labelnames + ("method", "uri", "status"),
            unit="seconds",
            registry=self.collector_registry
        )

    def _setup_runtime_collectors(self):
        """Export process, interpreter and garbage collector metrics from this registry."""
        ProcessCollector(registry=self.collector_registry)
        PlatformCollector(registry=self.collector_registry)
        GCCollector(registry=self.collector_registry)

    def _bind(self, metric, tags: Dict[str, str]):
        labels = {**self.common_labels, **tags}
        return metric.labels(**labels) if labels else metric

    @staticmethod
    def _series_key(name: str, tags: Dict[str, str]) -> Tuple[str, Tuple[Tuple[str, str], ...]]:
        return name, tuple(sorted(tags.items()))

    def _create(self, definition):
        name = prometheus_name(definition.name)
        labelnames = tuple(self.common_labels) + definition.tag_keys
        kwargs = {"registry": self.collector_registry}

        if definition.kind == "counter":
            return Counter(name, definition.description, labelnames, **kwargs)
        if definition.kind == "gauge":
            return Gauge(name, definition.description, labelnames, **kwargs)
        if definition.kind == "timer":
            return Histogram(name, definition.description, labelnames, unit=definition.unit, **kwargs)
        if definition.kind == "summary":
            return Summary(name, definition.description, labelnames, unit=definition.unit or "", **kwargs)
        raise RegistrationError(definition.name, f"unsupported instrument kind {definition.kind}")

    def register(self, definition):
        """Create the instrument for ``definition``, or return the one already registered."""
        with self._lock:
            existing = self._definitions.get(definition.name)
            if existing is not None:
                if existing.kind != definition.kind or existing.tag_keys != definition.tag_keys:
                    raise RegistrationError(definition.name)
                return self._metrics[definition.name]

            metric = self._create(definition)
            self._metrics[definition.name] = metric
            self._definitions[definition.name] = definition

            for combination in itertools.product(*definition.tags.values()):
                tags = dict(zip(definition.tag_keys, combination))
                self._series[self._series_key(definition.name, tags)] = self._bind(metric, tags)

            if definition.kind == "gauge":
                cell = GaugeCell(definition.initial, definition.minimum, definition.maximum)
                self._gauges[definition.name] = cell
                self.series(definition.name).set_function(cell.get)

            return metric

    def register_all(self, definitions: Iterable[Any]):
        for definition in definitions:
            self.register(definition)

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def definition(self, name: str):
        try:
            return self._definitions[name]
        except KeyError:
            raise UnknownSeriesError(name) from None

    @property
    def definitions(self) -> Tuple[Any, ...]:
        return tuple(self._definitions.values())

    def series(self, name: str, **tags):
        """Return the pre-registered series for ``name`` and ``tags``."""
        try:
            return self._series[self._series_key(name, tags)]
        except KeyError:
            raise UnknownSeriesError(name, tags) from None

    def family(self, name: str) -> Dict[str, Any]:
        """Map each value of a single-tag instrument to its series."""
        definition = self.definition(name)
        if len(definition.tags) != 1:
            raise UnknownSeriesError(name)
        key, values = next(iter(definition.tags.items()))
        return {value: self.series(name, **{key: value}) for value in values}

    def gauge(self, name: str) -> GaugeCell:
        try:
            return self._gauges[name]
        except KeyError:
            raise UnknownSeriesError(name) from None

    def increment(self, name: str, amount: float = 1, **tags):
        self.series(name, **tags).inc(amount)

    def observe(self, name: str, value: float, **tags):
        self.series(name, **tags).observe(value)

    def record_duration(self, name: str, seconds: float, **tags):
        self.series(name, **tags).observe(seconds)

    def record_http_request(self, method: str, uri: str, status_code: int, duration: float):
        """Record HTTP request metrics."""
        self._bind(self._metrics["http_server_requests"], {
            "method": method,
            "uri": uri,
            "status": str(status_code)
        }).observe(duration)

    def sample_value(self, sample_name: str, **tags) -> Optional[float]:
        """Look up one exported sample, with the common labels filled in."""
        return self.collector_registry.get_sample_value(sample_name, {**self.common_labels, **tags})

    def total(self, name: str) -> float:
        """Sum an instrument across all of its series.

        Counters sum their totals, timers and summaries their observation
        counts, gauges report their current value.
        """
        definition = self.definition(name)
        if definition.kind == "gauge":
            return self.gauge(name).get()

        family = exported_name(definition)
        if definition.kind == "counter":
            target = family
        else:
            target = family + "_count"

        total = 0.0
        for metric_family in self._metrics[name].collect():
            for sample in metric_family.samples:
                if sample.name == target:
                    total += sample.value
        return total

    def render(self) -> bytes:
        """Render every registered instrument in the Prometheus text format."""
        return generate_latest(self.collector_registry)

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST
