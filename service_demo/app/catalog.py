"""
Consolidated demo domain under the ``app`` namespace.

A single service exercising every instrument kind: request and error
counters, resource gauges, timers and distribution summaries.
"""

from shared.activities import AdjustGauge, Increment, Observe, RecordDuration, SetGauge
from shared.catalog import (
    Activity,
    CounterDef,
    DomainCatalog,
    GaugeDef,
    SummaryDef,
    TimerDef,
)
from shared.jobs import BurstJob, PeriodicJob, SweepJob

SERVICE_NAME = "metrics-demo"

MIB = 1024 * 1024
ERROR_RATE = 0.05

ERROR_TYPES = ("validation", "authentication", "authorization", "database", "network", "timeout")
ERROR_CODES = ("400", "401", "403", "404", "500", "502", "503")
ORDER_TYPES = ("standard", "express", "overnight", "international")
PAYMENT_METHODS = ("credit_card", "debit_card", "paypal", "apple_pay", "google_pay", "bank_transfer")
REGISTRATION_SOURCES = ("web", "mobile_app", "social_login", "referral")
USER_TYPES = ("free", "premium", "enterprise")

REGIONS = ("us-east-1", "us-west-2", "eu-west-1", "ap-southeast-1")
ENDPOINTS = ("/api/users", "/api/orders", "/api/products", "/api/payments")

INSTRUMENTS = (
    # Counters
    CounterDef("app.requests.total", "Total number of requests"),
    CounterDef("app.errors.total", "Total number of errors", tags={
        "error_type": ERROR_TYPES,
        "status_code": ERROR_CODES,
    }),
    CounterDef("app.orders.total", "Total number of orders", tags={
        "order_type": ORDER_TYPES,
        "payment_method": PAYMENT_METHODS,
    }),
    CounterDef("app.users.registrations.total", "Total number of user registrations", tags={
        "source": REGISTRATION_SOURCES,
        "user_type": USER_TYPES,
    }),

    # Gauges
    GaugeDef("app.users.active", "Number of currently active users", maximum=200),
    GaugeDef("app.queue.size", "Current queue size", maximum=50),
    GaugeDef("app.memory.usage.bytes", "Current memory usage in bytes"),
    GaugeDef("app.database.connections.active", "Number of active database connections", initial=10),

    # Timers
    TimerDef("app.request.duration", "Request processing time"),
    TimerDef("app.database.query.duration", "Database query execution time"),
    TimerDef("app.payment.processing.duration", "Payment processing time"),

    # Distributions
    SummaryDef("app.order.value", "Distribution of order values", unit="dollars"),
    SummaryDef("app.message.size", "Distribution of message sizes", unit="bytes"),

    # Traffic
    CounterDef("app.requests.by.region", "Requests by region", tags={"region": REGIONS}),
    TimerDef("app.endpoint.duration", "Endpoint processing time", tags={"endpoint": ENDPOINTS}),
)

ACTIVITIES = (
    Activity("users", "User activity", (
        Increment("app.requests.total"),
        Increment("app.errors.total", probability=ERROR_RATE),
        AdjustGauge("app.users.active", -5, 5),
        SetGauge("app.queue.size", 0, 49),
        SetGauge("app.memory.usage.bytes", 100, 999, multiplier=MIB),
        SetGauge("app.database.connections.active", 5, 19),
    )),
    Activity("orders", "Order processing", (
        Increment("app.orders.total"),
        Observe("app.order.value", 10.0, 500.0),
        RecordDuration("app.payment.processing.duration", 100, 1999),
    )),
    Activity("database", "Database activity", (
        RecordDuration("app.database.query.duration", 5, 499),
        Observe("app.message.size", 100, 9999, integral=True),
    )),
    Activity("registrations", "User registration", (
        Increment("app.users.registrations.total"),
    )),
    Activity("regions", "Regional activity", (
        Increment("app.requests.by.region"),
    )),
    Activity("endpoints", "Endpoint activity", (
        RecordDuration("app.endpoint.duration", 50, 999),
    )),
)


def build_jobs(interval_seconds: int = 5):
    return (
        PeriodicJob("user-activity", "users", interval_seconds, 1, 4),
        PeriodicJob("order-activity", "orders", 10, 1, 3),
        PeriodicJob("database-activity", "database", 3, 2, 6),
        PeriodicJob("regional-traffic", "regions", 7, 3, 7),
        PeriodicJob("endpoint-performance", "endpoints", 8, 2, 5),
        PeriodicJob("user-registrations", "registrations", 30, 0, 3),
        SweepJob("comprehensive-sweep", 60),
        BurstJob("traffic-burst", 120, 10, 24, 10, 49, split=(
            (0.3, "users"),
            (0.5, "orders"),
            (0.7, "database"),
            (0.85, "regions"),
            (1.0, "endpoints"),
        )),
    )


def build_catalog(interval_seconds: int = 5) -> DomainCatalog:
    """Build the demo catalog; ``interval_seconds`` sets the user activity period."""
    return DomainCatalog(
        service=SERVICE_NAME,
        namespace="app",
        instruments=INSTRUMENTS,
        activities=ACTIVITIES,
        jobs=build_jobs(interval_seconds),
        endpoint_timer="app.endpoint.duration",
        region_counter="app.requests.by.region",
        request_timer="app.request.duration",
    )
