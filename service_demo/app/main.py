"""
Metrics demo service.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.catalog import DomainCatalog
from shared.fake_data import fake_orders, fake_person, fake_products, fake_users

from .catalog import SERVICE_NAME, build_catalog

PAYMENT_FAILURE_RATE = 0.1


class DemoService(BaseService):
    """Demo service implementation."""

    health_activity = "users"

    def __init__(self, rng=None, **config_overrides):
        super().__init__(SERVICE_NAME, 8080, rng=rng, **config_overrides)

        self._setup_demo_routes()

    def _build_catalog(self) -> DomainCatalog:
        return build_catalog(self.config.simulation_interval_seconds)

    def _setup_demo_routes(self):
        """Set up demo routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": SERVICE_NAME,
                "message": "Metrics Demo Service",
                "version": self.config.version,
                "activities": self.engine.activities
            }

        @self.app.get("/api/users")
        async def get_users():
            duration = await self.simulate_request("/api/users", (50, 299), ("users", "regions"))

            self.logger.info("GET /api/users processed", duration_ms=round(duration * 1000))
            return {
                "users": fake_users(self.rng),
                "total": self.rng.randint(100, 999),
                "timestamp": self.now()
            }

        @self.app.post("/api/users")
        async def create_user(request: Request):
            body = await self.read_body(request)
            duration = await self.simulate_request("/api/users", (100, 499), ("registrations", "users", "database"))

            self.logger.info("POST /api/users processed", duration_ms=round(duration * 1000), fields=sorted(body))
            return {
                "id": self.rng.randint(1000, 99998),
                **fake_person(),
                "created": self.now()
            }

        @self.app.get("/api/orders")
        async def get_orders():
            duration = await self.simulate_request("/api/orders", (75, 399), ("orders", "database", "regions"))

            self.logger.info("GET /api/orders processed", duration_ms=round(duration * 1000))
            return {
                "orders": fake_orders(self.rng),
                "total": self.rng.randint(50, 499),
                "timestamp": self.now()
            }

        @self.app.post("/api/orders")
        async def create_order(request: Request):
            body = await self.read_body(request)
            duration = await self.simulate_request("/api/orders", (200, 799), ("orders", "database", "users"))

            self.logger.info("POST /api/orders processed", duration_ms=round(duration * 1000), fields=sorted(body))
            return {
                "orderId": self.rng.randint(10000, 999998),
                "total": self.rng.uniform(10.0, 500.0),
                "status": "confirmed",
                "created": self.now()
            }

        @self.app.get("/api/products")
        async def get_products():
            duration = await self.simulate_request("/api/products", (30, 199), ("users", "database"))

            self.logger.info("GET /api/products processed", duration_ms=round(duration * 1000))
            return {
                "products": fake_products(self.rng),
                "total": self.rng.randint(200, 1999),
                "timestamp": self.now()
            }

        @self.app.post("/api/payments")
        async def process_payment(request: Request):
            """Process a payment; roughly one in ten is declined with 402."""
            body = await self.read_body(request)
            duration = await self.simulate_request("/api/payments", (500, 1999), ("orders", "database", "users"))

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


def create_app(rng=None, **config_overrides):
    """Create demo service application."""
    service = DemoService(rng=rng, **config_overrides)
    return service.app


if __name__ == "__main__":
    service = DemoService()
    service.run()
