"""
User Analytics service.
"""

from datetime import datetime, timedelta, timezone

from fastapi import Query, Request
from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.catalog import DomainCatalog
from shared.fake_data import fake_person, fake_token, fake_users

from .catalog import SERVICE_NAME, USER_TYPES, build_catalog

AUTH_FAILURE_RATE = 0.15
SESSION_TTL = timedelta(hours=1)


class UserAnalyticsService(BaseService):
    """User Analytics service implementation."""

    health_activity = "users"

    def __init__(self, rng=None, **config_overrides):
        super().__init__(SERVICE_NAME, 8081, rng=rng, **config_overrides)

        self._setup_user_routes()

    def _build_catalog(self) -> DomainCatalog:
        return build_catalog()

    def _setup_user_routes(self):
        """Set up user-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": SERVICE_NAME,
                "message": "User Analytics Service",
                "version": self.config.version,
                "activities": self.engine.activities
            }

        @self.app.get("/api/users")
        async def get_users():
            """List users."""
            duration = await self.simulate_request("/api/users", (50, 299), ("users", "regions"))

            self.logger.info("GET /api/users processed", duration_ms=round(duration * 1000))
            return {
                "users": fake_users(self.rng, USER_TYPES),
                "total": self.rng.randint(100, 999),
                "timestamp": self.now()
            }

        @self.app.post("/api/users")
        async def create_user(request: Request):
            """Register a user."""
            body = await self.read_body(request)
            duration = await self.simulate_request("/api/users", (100, 499), ("registrations", "users"))

            self.logger.info("POST /api/users processed", duration_ms=round(duration * 1000), fields=sorted(body))
            return {
                "id": self.rng.randint(1000, 99998),
                **fake_person(),
                "created": self.now()
            }

        @self.app.get("/api/users/profile")
        async def get_user_profile(user_id: int = Query(1, alias="userId")):
            """Load a user profile."""
            duration = await self.simulate_request("/api/users/profile", (75, 399), ("users", "endpoints"))

            last_login = datetime.now(timezone.utc) - timedelta(seconds=self.rng.randint(0, 3599))
            self.logger.info("GET /api/users/profile processed", duration_ms=round(duration * 1000))
            return {
                "userId": user_id,
                **fake_person(),
                "profileViews": self.rng.randint(1, 99),
                "lastLogin": last_login.isoformat(),
                "timestamp": self.now()
            }

        @self.app.post("/api/users/auth")
        async def authenticate_user(request: Request):
            """Authenticate a user; roughly 15% of attempts are rejected with 401."""
            body = await self.read_body(request)
            duration = await self.simulate_request("/api/users/auth", (200, 799), ("logins", "users"))

            # Drawn independently of the success tag recorded on the logins counter
            success = self.draw_success(AUTH_FAILURE_RATE)
            content = {
                "success": success,
                "userId": self.rng.randint(1000, 99998) if success else None,
                "token": fake_token() if success else None,
                "timestamp": self.now()
            }

            self.logger.info(
                "POST /api/users/auth processed",
                duration_ms=round(duration * 1000),
                success=success,
                fields=sorted(body)
            )
            return JSONResponse(status_code=200 if success else 401, content=content)

        @self.app.post("/api/users/sessions")
        async def create_user_session(request: Request):
            """Start a user session."""
            body = await self.read_body(request)
            duration = await self.simulate_request("/api/users/sessions", (50, 199), ("sessions", "users"))

            started = datetime.now(timezone.utc)
            self.logger.info("POST /api/users/sessions processed", duration_ms=round(duration * 1000), fields=sorted(body))
            return {
                "sessionId": fake_token(),
                "userId": self.rng.randint(1000, 99998),
                "started": started.isoformat(),
                "expiresAt": (started + SESSION_TTL).isoformat()
            }


def create_app(rng=None, **config_overrides):
    """Create user analytics service application."""
    service = UserAnalyticsService(rng=rng, **config_overrides)
    return service.app


if __name__ == "__main__":
    service = UserAnalyticsService()
    service.run()
