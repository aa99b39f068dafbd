"""
Shared configuration management for the analytics services.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="ANALYTICS_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    version: str = Field(default="1.0.0")
    instance: str = Field(default="local")

    # Simulation
    simulation_enabled: bool = Field(default=True)
    simulation_interval_seconds: int = Field(default=5, ge=1)
    request_delay_scale: float = Field(default=1.0, ge=0.0)

    # Metrics
    common_tags_enabled: bool = Field(default=True)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)

    def common_labels(self) -> dict:
        """Labels applied to every series exported by the service."""
        if not self.common_tags_enabled:
            return {}
        return {
            "application": self.service_name,
            "environment": self.env,
            "version": self.version,
            "instance": self.instance,
        }


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
