"""
Configuration for the backend services
"""

from functools import lru_cache
from typing import Tuple

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackendSettings(BaseSettings):
    """Ports and simulated database latency for the service stubs"""

    user_service_port: int = 3002
    transaction_service_port: int = 3003
    notification_service_port: int = 3004

    # Simulated latency in seconds, document store vs key-value store
    record_latency_min: float = 0.01
    record_latency_max: float = 0.06
    cache_latency_min: float = 0.005
    cache_latency_max: float = 0.025

    log_level: str = "INFO"
    log_format: str = "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @model_validator(mode="after")
    def validate_latency(self):
        for low, high in (
            (self.record_latency_min, self.record_latency_max),
            (self.cache_latency_min, self.cache_latency_max),
        ):
            if low < 0 or high < low:
                raise ValueError("Latency bounds must satisfy 0 <= min <= max")
        return self

    @property
    def record_latency(self) -> Tuple[float, float]:
        return (self.record_latency_min, self.record_latency_max)

    @property
    def cache_latency(self) -> Tuple[float, float]:
        return (self.cache_latency_min, self.cache_latency_max)


@lru_cache
def get_backend_settings() -> BackendSettings:
    return BackendSettings()
