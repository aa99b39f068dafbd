"""
Unit tests for the shared metrics registry.
"""

import math
import threading

import pytest

from shared.catalog import CounterDef, GaugeDef, SummaryDef, TimerDef
from shared.errors import RegistrationError, UnknownSeriesError
from shared.metrics import GaugeCell, MetricsRegistry, exported_name, prometheus_name
from shared.test_helpers import TEST_ENDPOINTS, TEST_REGIONS, CatalogFactory


class TestPrometheusNames:
    """Test cases for exported metric names."""

    def test_dots_become_underscores(self):
        assert prometheus_name("commerce.orders.active") == "commerce_orders_active"

    def test_leading_digit_is_prefixed(self):
        assert prometheus_name("2fa.logins") == "metric_2fa_logins"

    def test_timer_gains_seconds_suffix(self):
        definition = TimerDef("commerce.order.processing.duration", "Processing time")
        assert exported_name(definition) == "commerce_order_processing_duration_seconds"

    def test_summary_gains_unit_suffix(self):
        assert exported_name(SummaryDef("app.message.size", "Sizes", unit="bytes")) == "app_message_size_bytes"
        assert exported_name(SummaryDef("user.activity.score", "Scores")) == "user_activity_score"

    def test_counter_sample_ends_in_total(self):
        assert exported_name(CounterDef("commerce.orders.total", "Orders")) == "commerce_orders_total"
        assert exported_name(CounterDef("app.requests.by.region", "Regions")) == "app_requests_by_region_total"


class TestGaugeCell:
    """Test cases for clamped gauge cells."""

    def test_initial_value_is_clamped(self):
        assert GaugeCell(initial=-5, minimum=0, maximum=10).get() == 0

    def test_add_clamps_to_range(self):
        cell = GaugeCell(initial=5, minimum=1, maximum=10)
        assert cell.add(100) == 10
        assert cell.add(-100) == 1

    def test_set_clamps_to_range(self):
        cell = GaugeCell(initial=0, minimum=0, maximum=150)
        assert cell.set(151) == 150
        assert cell.set(-1) == 0

    def test_adjust_floor_raises_lower_bound(self):
        cell = GaugeCell(initial=10, minimum=0, maximum=200)
        assert cell.adjust(-20, floor=7) == 7
        assert cell.adjust(-20) == 0

    def test_unbounded_maximum(self):
        cell = GaugeCell(initial=0, minimum=0, maximum=math.inf)
        assert cell.add(10 ** 12) == 10 ** 12


class TestMetricsRegistry:
    """Test cases for MetricsRegistry."""

    @pytest.fixture
    def registry(self):
        """Create a registry holding the test instruments."""
        registry = MetricsRegistry(service_name="test-analytics")
        registry.register_all(CatalogFactory.create_instruments())
        return registry

    def test_register_returns_existing_instrument(self, registry):
        definition = CounterDef("test.ticks.total", "Untagged ticks")
        first = registry.get_metric("test.ticks.total")
        assert registry.register(definition) is first

    def test_conflicting_registration_raises(self, registry):
        with pytest.raises(RegistrationError):
            registry.register(GaugeDef("test.ticks.total", "Now a gauge"))

        with pytest.raises(RegistrationError):
            registry.register(CounterDef("test.ticks.total", "Now tagged", tags={"kind": ("a",)}))

    def test_full_cross_product_is_pre_registered(self, registry):
        for color in ("red", "green", "blue"):
            for size in ("small", "large"):
                assert registry.sample_value("test_widgets_total", color=color, size=size) == 0.0

    def test_region_and_endpoint_families_exist_before_mutation(self, registry):
        regions = registry.family("test.requests.by.region")
        endpoints = registry.family("test.endpoint.duration")

        assert set(regions) == set(TEST_REGIONS)
        assert set(endpoints) == set(TEST_ENDPOINTS)
        for region in TEST_REGIONS:
            assert registry.sample_value("test_requests_by_region_total", region=region) == 0.0
        for endpoint in TEST_ENDPOINTS:
            assert registry.sample_value("test_endpoint_duration_seconds_count", endpoint=endpoint) == 0.0

    def test_family_requires_single_tag(self, registry):
        with pytest.raises(UnknownSeriesError):
            registry.family("test.widgets.total")

    def test_unknown_series_raises(self, registry):
        with pytest.raises(UnknownSeriesError):
            registry.increment("test.widgets.total", color="purple", size="small")

        with pytest.raises(UnknownSeriesError):
            registry.increment("test.missing.total")

    def test_increment_and_total(self, registry):
        registry.increment("test.widgets.total", color="red", size="small")
        registry.increment("test.widgets.total", amount=2, color="blue", size="large")

        assert registry.sample_value("test_widgets_total", color="blue", size="large") == 2.0
        assert registry.total("test.widgets.total") == 3.0

    def test_record_duration_counts_observations(self, registry):
        registry.record_duration("test.work.duration", 0.25)
        registry.record_duration("test.work.duration", 0.5)

        assert registry.total("test.work.duration") == 2
        assert registry.sample_value("test_work_duration_seconds_sum") == pytest.approx(0.75)

    def test_gauge_exports_cell_value(self, registry):
        registry.gauge("test.queue.depth").set(7)

        assert registry.sample_value("test_queue_depth") == 7.0
        assert registry.total("test.queue.depth") == 7.0

    def test_gauge_initial_value(self, registry):
        assert registry.sample_value("test_pool_size") == 1.0
        assert registry.sample_value("test_queue_depth") == 5.0

    def test_common_labels_apply_to_every_series(self):
        labels = {"application": "test-analytics", "environment": "test", "version": "9.9.9", "instance": "a"}
        registry = MetricsRegistry(common_labels=labels, service_name="test-analytics")
        registry.register_all(CatalogFactory.create_instruments())

        registry.increment("test.ticks.total")
        assert registry.collector_registry.get_sample_value("test_ticks_total", labels) == 1.0
        assert registry.sample_value("test_ticks_total") == 1.0

    def test_service_info_is_exported(self, registry):
        assert registry.sample_value(
            "service_info",
            service="test-analytics",
            service_version="1.0.0"
        ) == 1.0

    def test_record_http_request(self, registry):
        registry.record_http_request("GET", "/api/widgets", 200, 0.01)

        assert registry.sample_value(
            "http_server_requests_seconds_count",
            method="GET",
            uri="/api/widgets",
            status="200"
        ) == 1.0

    def test_concurrent_increments_lose_no_updates(self, registry):
        def worker():
            for _ in range(100):
                registry.increment("test.ticks.total")

        threads = [threading.Thread(target=worker) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert registry.total("test.ticks.total") == 1000

    def test_concurrent_gauge_updates_stay_in_range(self, registry):
        cell = registry.gauge("test.queue.depth")

        def worker(delta):
            for _ in range(500):
                cell.add(delta)

        threads = [threading.Thread(target=worker, args=(3 if i % 2 else -3,)) for i in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert 0 <= cell.get() <= 10


class TestDefinitions:
    """Test cases for instrument definitions."""

    def test_series_count_is_cross_product(self):
        definition = CatalogFactory.create_instruments()[0]
        assert definition.series_count == 6

    def test_untagged_series_count_is_one(self):
        assert CounterDef("x.total", "x").series_count == 1

    def test_gauge_rejects_tags(self):
        with pytest.raises(ValueError):
            GaugeDef("x.gauge", "x", tags={"a": ("b",)})

    def test_gauge_rejects_initial_out_of_range(self):
        with pytest.raises(ValueError):
            GaugeDef("x.gauge", "x", initial=11, maximum=10)
