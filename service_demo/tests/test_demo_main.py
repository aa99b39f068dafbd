"""
Unit tests for the metrics demo service.
"""

import random

import pytest
from fastapi.testclient import TestClient

from service_demo.app.catalog import ERROR_CODES, ERROR_TYPES, MIB
from service_demo.app.main import DemoService
from shared.jobs import BurstJob, PeriodicJob, SweepJob
from shared.test_helpers import TEST_CONFIG


class TestDemoService:
    """Test cases for DemoService."""

    @pytest.fixture
    def service(self):
        """Create DemoService instance."""
        return DemoService(rng=random.Random(3), **TEST_CONFIG)

    @pytest.fixture
    def client(self, service):
        """Create test client."""
        return TestClient(service.app)

    def test_get_users(self, client, service):
        """Test listing users."""
        response = client.get("/api/users")
        assert response.status_code == 200
        assert 5 <= len(response.json()["users"]) <= 14
        assert service.metrics.total("app.requests.total") == 1
        assert service.metrics.total("app.request.duration") == 1

    def test_create_user(self, client, service):
        """Test registering a user."""
        response = client.post("/api/users")
        assert response.status_code == 200
        assert service.metrics.total("app.users.registrations.total") == 1
        assert service.metrics.total("app.database.query.duration") == 1

    def test_orders(self, client, service):
        """Test order endpoints."""
        assert client.get("/api/orders").status_code == 200
        assert client.post("/api/orders", json={}).status_code == 200

        assert service.metrics.total("app.orders.total") == 2
        assert service.metrics.total("app.payment.processing.duration") == 2
        assert service.metrics.sample_value(
            "app_endpoint_duration_seconds_count", endpoint="/api/orders"
        ) == 2.0

    def test_get_products(self, client, service):
        """Test listing products."""
        response = client.get("/api/products")
        assert response.status_code == 200
        assert all("rating" not in product for product in response.json()["products"])
        assert service.metrics.sample_value(
            "app_endpoint_duration_seconds_count", endpoint="/api/products"
        ) == 1.0

    def test_payments_fail_about_ten_percent(self, client):
        """Test payment outcome distribution over many calls."""
        statuses = [client.post("/api/payments").status_code for _ in range(1000)]

        assert set(statuses) <= {200, 402}
        assert 50 <= statuses.count(402) <= 150

    def test_error_counter_tags(self, service):
        """Test error counter series are drawn from their enumerations."""
        for _ in range(2000):
            service.engine.perform("users")

        errors = service.metrics.total("app.errors.total")
        assert 40 <= errors <= 170
        counted = sum(
            service.metrics.sample_value("app_errors_total", error_type=error_type, status_code=code)
            for error_type in ERROR_TYPES
            for code in ERROR_CODES
        )
        assert counted == errors

    def test_resource_gauges(self, service):
        """Test gauge ranges under repeated user activity."""
        for _ in range(300):
            service.engine.perform("users")
            assert 0 <= service.metrics.gauge("app.users.active").get() <= 200
            assert 0 <= service.metrics.gauge("app.queue.size").get() <= 49
            assert 5 <= service.metrics.gauge("app.database.connections.active").get() <= 19

            memory = service.metrics.gauge("app.memory.usage.bytes").get()
            assert memory % MIB == 0
            assert 100 * MIB <= memory <= 999 * MIB

    def test_simulate_all(self, client, service):
        """Test simulating every activity."""
        response = client.post("/api/simulate/all")
        assert response.status_code == 200
        assert response.json()["message"] == "All app activities simulated"
        assert service.metrics.total("app.users.registrations.total") == 1
        assert service.metrics.total("app.message.size") == 1


class TestDemoSchedule:
    """Test cases for the demo job schedule."""

    def test_user_activity_period_follows_configuration(self):
        service = DemoService(**{**TEST_CONFIG, "simulation_enabled": True, "simulation_interval_seconds": 9})

        jobs = {job.name: job for job in service.scheduler.jobs}
        assert jobs["user-activity"].period_seconds == 9
        assert jobs["order-activity"].period_seconds == 10

    def test_job_kinds(self):
        service = DemoService(**{**TEST_CONFIG, "simulation_enabled": True})

        kinds = [type(job) for job in service.scheduler.jobs]
        assert kinds.count(PeriodicJob) == 6
        assert kinds.count(SweepJob) == 1
        assert kinds.count(BurstJob) == 1

    def test_disabled_simulation_has_no_jobs(self):
        service = DemoService(**TEST_CONFIG)

        assert service.scheduler.jobs == []
