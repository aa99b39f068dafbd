"""
Commerce Analytics service.
"""

from fastapi import Query, Request
from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.catalog import DomainCatalog
from shared.fake_data import fake_cart_items, fake_orders, fake_products

from .catalog import CART_ACTIONS, FULFILLMENT_TYPES, SERVICE_NAME, build_catalog

PAYMENT_FAILURE_RATE = 0.1


class CommerceAnalyticsService(BaseService):
    """Commerce Analytics service implementation."""

    health_activity = "products"

    def __init__(self, rng=None, **config_overrides):
        super().__init__(SERVICE_NAME, 8082, rng=rng, **config_overrides)

        self._setup_commerce_routes()

    def _build_catalog(self) -> DomainCatalog:
        return build_catalog()

    def _setup_commerce_routes(self):
        """Set up commerce-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": SERVICE_NAME,
                "message": "Commerce Analytics Service",
                "version": self.config.version,
                "activities": self.engine.activities
            }

        @self.app.get("/api/orders")
        async def get_orders():
            """List recent orders."""
            duration = await self.simulate_request("/api/orders", (75, 399), ("orders", "database", "regions"))

            self.logger.info("GET /api/orders processed", duration_ms=round(duration * 1000))
            return {
                "orders": fake_orders(self.rng, FULFILLMENT_TYPES),
                "total": self.rng.randint(50, 499),
                "timestamp": self.now()
            }

        @self.app.post("/api/orders")
        async def create_order(request: Request):
            """Create an order."""
            body = await self.read_body(request)
            duration = await self.simulate_request("/api/orders", (200, 799), ("orders", "database", "products"))

            self.logger.info("POST /api/orders processed", duration_ms=round(duration * 1000), fields=sorted(body))
            return {
                "orderId": self.rng.randint(10000, 999998),
                "total": self.rng.uniform(10.0, 500.0),
                "status": "confirmed",
                "created": self.now()
            }

        @self.app.get("/api/products")
        async def get_products():
            """List catalog products."""
            duration = await self.simulate_request("/api/products", (30, 199), ("products", "database"))

            self.logger.info("GET /api/products processed", duration_ms=round(duration * 1000))
            return {
                "products": fake_products(self.rng, with_rating=True),
                "total": self.rng.randint(200, 1999),
                "timestamp": self.now()
            }

        @self.app.post("/api/payments")
        async def process_payment(request: Request):
            """Process a payment; roughly one in ten is declined with 402."""
            body = await self.read_body(request)
            duration = await self.simulate_request("/api/payments", (500, 1999), ("payments", "orders", "database"))

            # Drawn independently of the status tag recorded on the payments counter
            success = self.draw_success(PAYMENT_FAILURE_RATE)
            content = {
                "paymentId": self.rng.randint(100000, 9999998),
                "status": "success" if success else "failed",
                "amount": self.rng.uniform(10.0, 1000.0),
                "processed": self.now()
            }

            self.logger.info(
                "POST /api/payments processed",
                duration_ms=round(duration * 1000),
                status=content["status"],
                fields=sorted(body)
            )
            return JSONResponse(status_code=200 if success else 402, content=content)

        @self.app.get("/api/cart")
        async def get_cart(user_id: int = Query(1, alias="userId")):
            """Show a user's cart."""
            duration = await self.simulate_request("/api/cart", (50, 249), ("cart", "products"))

            self.logger.info("GET /api/cart processed", duration_ms=round(duration * 1000))
            return {
                "userId": user_id,
                "items": fake_cart_items(self.rng),
                "totalValue": self.rng.uniform(25.0, 300.0),
                "itemCount": self.rng.randint(1, 7),
                "timestamp": self.now()
            }

        @self.app.post("/api/cart")
        async def update_cart(request: Request):
            """Apply a cart update."""
            body = await self.read_body(request)
            duration = await self.simulate_request("/api/cart", (75, 299), ("cart", "products", "database"))

            self.logger.info("POST /api/cart processed", duration_ms=round(duration * 1000), fields=sorted(body))
            return {
                "cartId": self.rng.randint(10000, 99998),
                "action": self.rng.choice(CART_ACTIONS),
                "totalValue": self.rng.uniform(25.0, 300.0),
                "updated": self.now()
            }


def create_app(rng=None, **config_overrides):
    """Create commerce analytics service application."""
    service = CommerceAnalyticsService(rng=rng, **config_overrides)
    return service.app


if __name__ == "__main__":
    service = CommerceAnalyticsService()
    service.run()
