"""
Shared building blocks for the synthetic analytics services.

This package holds everything that is not specific to one domain:

- catalog: Declarative instrument, activity and job definitions
- metrics: Prometheus registry with pre-registered series and clamped gauges
- activities / engine: Random mutation of catalog instruments
- jobs / scheduler: Fixed-rate background simulation
- base_service: FastAPI service skeleton shared by every domain
- config / logging / errors: Settings, structured logging, error types

Domain packages (service_*) depend on shared/, never the reverse.
"""
