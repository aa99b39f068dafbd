"""
Base service class for the analytics services.
"""

import asyncio
import json
import os
import random
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence, Tuple

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .catalog import DomainCatalog
from .config import get_config
from .engine import MetricsEngine
from .errors import AnalyticsException
from .logging import clear_context, configure_logging, get_logger, set_request_id
from .metrics import MetricsRegistry
from .scheduler import SimulationScheduler


class BaseService:
    """Base service class with common functionality.

    Subclasses supply the domain catalog and register their ``/api`` routes;
    the base wires the metrics engine, the background scheduler, exposition
    endpoints, and request timing.
    """

    health_activity: Optional[str] = None

    def __init__(self, service_name: str, port: int, rng: Optional[random.Random] = None, **config_overrides):
        self.service_name = service_name
        self.port = port
        self.config = get_config(service_name, port, **config_overrides)

        # Configure logging
        configure_logging(service_name, self.config.log_level)
        self.logger = get_logger(service_name)

        self._start_time = time.time()
        self.rng = rng or random.Random()
        self.catalog = self._build_catalog()
        self.metrics = MetricsRegistry(
            common_labels=self.config.common_labels(),
            service_name=service_name,
            version=self.config.version
        )
        self.engine = MetricsEngine(self.catalog, registry=self.metrics, rng=self.rng)
        self.scheduler = SimulationScheduler(
            self.engine,
            self.catalog.jobs,
            enabled=self.config.simulation_enabled
        )

        # Create FastAPI app
        self.app = self._create_app()

        # Set up middleware
        self._setup_middleware()

        # Set up routes
        self._setup_routes()

        self.app.state.service = self

    def _build_catalog(self) -> DomainCatalog:
        """Return the domain catalog. Override in subclasses."""
        raise NotImplementedError

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        await self.start()
        try:
            yield
        finally:
            await self.stop()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application."""
        return FastAPI(
            title=f"{self.service_name.replace('-', ' ').title()} Service",
            description=f"Synthetic {self.catalog.namespace} metrics service",
            version=self.config.version,
            docs_url="/docs" if self.config.env == "local" else None,
            redoc_url="/redoc" if self.config.env == "local" else None,
            lifespan=self._lifespan,
        )

    def _setup_middleware(self):
        """Set up middleware."""

        # CORS middleware
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"] if self.config.env == "local" else [],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        # Request timing middleware
        @self.app.middleware("http")
        async def add_request_timing(request: Request, call_next):
            request_id = set_request_id(request.headers.get("X-Request-ID"))
            start_time = time.perf_counter()
            status_code = 500

            try:
                response = await call_next(request)
                status_code = response.status_code
                response.headers["X-Request-ID"] = request_id
                return response
            finally:
                duration = time.perf_counter() - start_time

                # Record metrics
                self.metrics.record_http_request(
                    method=request.method,
                    uri=self._route_template(request, status_code),
                    status_code=status_code,
                    duration=duration
                )

                # Log request
                self.logger.info(
                    "HTTP request",
                    method=request.method,
                    path=request.url.path,
                    status_code=status_code,
                    duration_ms=round(duration * 1000, 2)
                )
                clear_context()

    def _setup_routes(self):
        """Set up common routes."""

        @self.app.get("/health")
        async def health_check():
            """Health check endpoint."""
            return {
                "service": self.service_name,
                "status": "ok",
                "uptime_seconds": self._get_uptime(),
                "dependencies": await self._check_dependencies(),
                "version": self.config.version,
                "commit": os.getenv("GIT_COMMIT", "unknown")
            }

        @self.app.get("/metrics")
        async def metrics_endpoint():
            """Prometheus metrics endpoint."""
            return Response(
                content=self.metrics.render(),
                media_type=self.metrics.content_type
            )

        @self.app.get("/actuator/prometheus")
        async def actuator_prometheus():
            """Prometheus metrics at the conventional actuator path."""
            return Response(
                content=self.metrics.render(),
                media_type=self.metrics.content_type
            )

        @self.app.get("/api/health-check")
        async def api_health_check():
            """Liveness probe that also feeds one activity into the metrics."""
            if self.health_activity:
                self.engine.perform_safely(self.health_activity)
            return {
                "status": "healthy",
                "service": self.catalog.service,
                "timestamp": self.now(),
                "uptime": "running"
            }

        @self.app.post("/api/simulate/{kind}")
        async def simulate_activity(kind: str):
            """Run one named activity, or every activity for ``all``."""
            kind = kind.lower()
            if kind == "all":
                failed = self.engine.perform_all_safely()
                message = f"All {self.catalog.namespace} activities simulated"
            else:
                activity = self.engine.activity(kind)
                failed = [] if self.engine.perform_safely(kind) else [kind]
                message = f"{activity.description} simulated"

            self.logger.info("Simulated activity", type=kind, failed=failed)
            return {
                "message": message,
                "type": kind,
                "failed": failed,
                "service": self.catalog.service,
                "timestamp": self.now()
            }

        # Error handlers
        @self.app.exception_handler(AnalyticsException)
        async def analytics_exception_handler(request: Request, exc: AnalyticsException):
            """Handle AnalyticsException."""
            self.logger.error(
                "Analytics error",
                code=exc.code,
                message=exc.message,
                details=exc.details
            )
            return JSONResponse(
                status_code=exc.status_code,
                content=exc.to_response().model_dump()
            )

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle general exceptions."""
            self.logger.error("Unhandled exception", error=str(exc), exc_info=True)
            return JSONResponse(
                status_code=500,
                content={
                    "code": "INTERNAL_ERROR",
                    "message": "Internal server error",
                    "details": {}
                }
            )

    @staticmethod
    def _route_template(request: Request, status_code: int) -> str:
        """Matched route path, or a fixed placeholder so stray paths add no series."""
        route = request.scope.get("route")
        path = getattr(route, "path", None)
        if path:
            return path
        return "NOT_FOUND" if status_code == 404 else "UNKNOWN"

    async def simulate_request(self, endpoint: str, delay_ms: Tuple[int, int], activities: Sequence[str]) -> float:
        """Delay, mutate and time one handled request.

        Returns the elapsed seconds, which are also recorded into the
        endpoint's timer.
        """
        start_time = time.perf_counter()

        await self._simulate_delay(*delay_ms)
        for kind in activities:
            self.engine.perform_safely(kind)

        duration = time.perf_counter() - start_time
        self.engine.record_request(endpoint, duration)
        return duration

    async def _simulate_delay(self, min_ms: int, max_ms: int):
        if self.config.request_delay_scale <= 0:
            return
        delay_ms = self.rng.randint(min_ms, max_ms)
        await asyncio.sleep(delay_ms / 1000.0 * self.config.request_delay_scale)

    def draw_success(self, failure_rate: float) -> bool:
        """Independent outcome draw for the HTTP response status."""
        return self.rng.random() > failure_rate

    @staticmethod
    async def read_body(request: Request) -> Dict[str, Any]:
        """Read a JSON object body, treating absent or malformed input as empty."""
        raw = await request.body()
        if not raw:
            return {}
        try:
            body = json.loads(raw)
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    @staticmethod
    def now() -> str:
        return datetime.now(timezone.utc).isoformat()

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check service dependencies."""
        if not self.scheduler.enabled:
            scheduler_state = "disabled"
        elif self.scheduler.running:
            scheduler_state = "ok"
        else:
            scheduler_state = "stopped"
        return {"scheduler": scheduler_state}

    def _get_uptime(self) -> float:
        """Get service uptime in seconds."""
        return time.time() - self._start_time

    async def start(self):
        """Start background simulation."""
        self._start_time = time.time()
        await self.scheduler.start()
        self.logger.info("Service started", simulation_enabled=self.scheduler.enabled)

    async def stop(self):
        """Stop background simulation."""
        await self.scheduler.stop()
        self.logger.info("Service stopped")

    def run(self):
        """Run the service."""
        import uvicorn
        uvicorn.run(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower()
        )
