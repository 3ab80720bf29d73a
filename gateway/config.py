"""
Configuration Management
Environment-based configuration for the API gateway
"""

from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.get_logger(__name__)

SERVICE_NAMES = ("user", "transaction", "notification")

# Backend endpoint sets per deployment environment
ENVIRONMENT_PROFILES: Dict[str, Dict[str, str]] = {
    "development": {
        "user": "http://localhost:3002",
        "transaction": "http://localhost:3003",
        "notification": "http://localhost:3004",
    },
    "staging": {
        "user": "https://user-staging.fintech.com",
        "transaction": "https://transaction-staging.fintech.com",
        "notification": "https://notification-staging.fintech.com",
    },
    "production": {
        "user": "https://user.fintech.com",
        "transaction": "https://transaction.fintech.com",
        "notification": "https://notification.fintech.com",
    },
}


class Settings(BaseSettings):
    # App config
    service_name: str = "api-gateway"
    environment: str = "development"
    port: int = 3001
    log_level: str = "INFO"
    log_format: str = "json"
    logging_config_path: Optional[str] = None

    # Backend service URLs; unset values come from the environment profile
    user_service_url: Optional[str] = None
    transaction_service_url: Optional[str] = None
    notification_service_url: Optional[str] = None

    # Upstream behaviour
    upstream_timeout: float = 10.0
    health_check_interval: float = 30.0
    health_check_timeout: float = 5.0

    # Login test account, password must come from the environment
    test_user_id: str = "user_12345"
    test_user_email: str = "test@fintech.com"
    test_user_password: Optional[SecretStr] = None
    test_user_first_name: str = "John"
    test_user_last_name: str = "Doe"

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, v):
        v = (v or "development").strip().lower()
        if v not in ENVIRONMENT_PROFILES:
            logger.warning("Unknown environment, falling back to development", environment=v)
            return "development"
        return v

    @field_validator("upstream_timeout", "health_check_interval", "health_check_timeout")
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("Timeouts and intervals must be positive")
        return v

    @model_validator(mode="after")
    def resolve_service_urls(self):
        profile = ENVIRONMENT_PROFILES[self.environment]
        for name in SERVICE_NAMES:
            field = f"{name}_service_url"
            url = getattr(self, field) or profile[name]
            setattr(self, field, url.rstrip("/"))
        return self

    @property
    def service_registry(self) -> Mapping[str, str]:
        """Read-only mapping of service name to base URL"""
        return MappingProxyType({
            name: getattr(self, f"{name}_service_url") for name in SERVICE_NAMES
        })


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings instance"""
    return Settings()
