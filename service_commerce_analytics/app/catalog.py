"""
Commerce domain: orders, payments, product catalog, carts and the database
behind them.
"""

from shared.activities import AdjustGauge, Increment, Observe, RecordDuration
from shared.catalog import (
    Activity,
    CounterDef,
    DomainCatalog,
    GaugeDef,
    SummaryDef,
    TimerDef,
)
from shared.jobs import BurstJob, PeriodicJob, SweepJob

SERVICE_NAME = "commerce-analytics"

ORDER_TYPES = ("standard", "express", "overnight", "international", "subscription")
PAYMENT_METHODS = ("credit_card", "debit_card", "paypal", "apple_pay", "google_pay", "bank_transfer", "crypto")
FULFILLMENT_TYPES = ("warehouse", "dropship", "digital", "pickup")
CURRENCIES = ("USD", "EUR", "GBP", "CAD", "JPY", "AUD")
PAYMENT_STATUSES = ("success", "failed", "pending", "cancelled")
PRODUCT_CATEGORIES = ("electronics", "clothing", "books", "home", "sports", "automotive", "beauty")
DEVICE_TYPES = ("desktop", "mobile", "tablet", "api")
CART_ACTIONS = ("add_item", "remove_item", "update_quantity", "apply_coupon", "checkout", "abandon")

REGIONS = ("us-east-1", "us-west-2", "eu-west-1", "ap-southeast-1", "ca-central-1")
ENDPOINTS = ("/api/orders", "/api/payments", "/api/products", "/api/cart")

INSTRUMENTS = (
    # Orders
    CounterDef("commerce.orders.total", "Total number of orders processed", tags={
        "order_type": ORDER_TYPES,
        "payment_method": PAYMENT_METHODS,
        "fulfillment_type": FULFILLMENT_TYPES,
    }),
    SummaryDef("commerce.order.value", "Distribution of order values", unit="dollars"),
    SummaryDef("commerce.shipping.cost", "Distribution of shipping costs", unit="dollars"),
    TimerDef("commerce.order.processing.duration", "Time taken to process orders"),
    GaugeDef("commerce.orders.active", "Orders currently being processed", maximum=100),
    GaugeDef("commerce.revenue.total", "Total revenue in cents"),

    # Payments
    CounterDef("commerce.payments.total", "Total number of payment attempts", tags={
        "payment_method": PAYMENT_METHODS,
        "currency": CURRENCIES,
        "status": PAYMENT_STATUSES,
    }),
    TimerDef("commerce.payment.processing.duration", "Time taken to process payments"),

    # Products
    CounterDef("commerce.products.views.total", "Total number of product views", tags={
        "category": PRODUCT_CATEGORIES,
        "device": DEVICE_TYPES,
    }),
    SummaryDef("commerce.product.rating", "Distribution of product ratings"),
    GaugeDef("commerce.inventory.levels", "Units in stock across the catalog", initial=1000, maximum=5000),
    TimerDef("commerce.inventory.check.duration", "Time taken to check inventory"),

    # Cart
    CounterDef("commerce.cart.actions.total", "Total number of cart actions", tags={
        "action": CART_ACTIONS,
        "device": DEVICE_TYPES,
    }),

    # Database
    TimerDef("commerce.database.query.duration", "Database query execution time"),
    GaugeDef("commerce.database.connections.active", "Active database connections", initial=10, minimum=1, maximum=50),

    # Traffic
    CounterDef("commerce.requests.by.region", "Requests by region", tags={"region": REGIONS}),
    TimerDef("commerce.endpoint.duration", "Request duration by endpoint", tags={"endpoint": ENDPOINTS}),
)

ACTIVITIES = (
    Activity("orders", "Order processing", (
        Increment("commerce.orders.total"),
        Observe("commerce.order.value", 10.0, 500.0, accumulate="commerce.revenue.total", scale=100),
        Observe("commerce.shipping.cost", 0.0, 25.0),
        RecordDuration("commerce.order.processing.duration", 200, 2999),
        AdjustGauge("commerce.orders.active", -2, 4),
    )),
    Activity("payments", "Payment processing", (
        Increment("commerce.payments.total"),
        RecordDuration("commerce.payment.processing.duration", 300, 2499),
    )),
    Activity("products", "Product activity", (
        Increment("commerce.products.views.total"),
        Observe("commerce.product.rating", 1.0, 5.0),
        AdjustGauge("commerce.inventory.levels", -10, 4),
        RecordDuration("commerce.inventory.check.duration", 25, 199),
    )),
    Activity("cart", "Cart activity", (
        Increment("commerce.cart.actions.total"),
    )),
    Activity("database", "Database activity", (
        RecordDuration("commerce.database.query.duration", 10, 799),
        AdjustGauge("commerce.database.connections.active", -2, 2),
    )),
    Activity("regions", "Regional commerce activity", (
        Increment("commerce.requests.by.region"),
    )),
    Activity("endpoints", "Commerce endpoint activity", (
        RecordDuration("commerce.endpoint.duration", 100, 1499),
    )),
)

JOBS = (
    PeriodicJob("order-activity", "orders", 12, 1, 4),
    PeriodicJob("payment-activity", "payments", 8, 1, 3),
    PeriodicJob("product-activity", "products", 5, 2, 8),
    PeriodicJob("cart-activity", "cart", 7, 1, 5),
    PeriodicJob("database-activity", "database", 4, 2, 6),
    PeriodicJob("regional-traffic", "regions", 9, 3, 9),
    PeriodicJob("endpoint-performance", "endpoints", 6, 2, 6),
    SweepJob("comprehensive-sweep", 60),
    BurstJob("shopping-burst", 180, 20, 49, 5, 29, split=(
        (0.25, "orders"),
        (0.45, "payments"),
        (0.70, "products"),
        (0.85, "cart"),
        (1.0, "endpoints"),
    )),
)


def build_catalog() -> DomainCatalog:
    return DomainCatalog(
        service=SERVICE_NAME,
        namespace="commerce",
        instruments=INSTRUMENTS,
        activities=ACTIVITIES,
        jobs=JOBS,
        endpoint_timer="commerce.endpoint.duration",
        region_counter="commerce.requests.by.region",
    )
