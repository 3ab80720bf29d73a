"""
FastAPI Dependencies
Credential guards and access to the gateway's shared components
"""

from typing import Optional

from fastapi import Header, Request
import structlog

from gateway.config import Settings
from gateway.exceptions import AuthRejected
from gateway.services.auth_service import CredentialVerifier
from gateway.services.forwarder import RequestForwarder
from gateway.services.health_monitor import HealthMonitor

logger = structlog.get_logger(__name__)

API_KEY_MARKER = "api_key"
BEARER_PREFIX = "Bearer "


async def require_api_key(x_api_key: Optional[str] = Header(None)) -> str:
    """
    Require an x-api-key header carrying the api_key marker

    Raises:
        AuthRejected: If the header is missing or malformed
    """
    if not x_api_key or API_KEY_MARKER not in x_api_key:
        logger.warning("Rejected request without valid API key")
        raise AuthRejected("Invalid or missing API key")
    return x_api_key


async def require_bearer_token(authorization: Optional[str] = Header(None)) -> str:
    """
    Require an Authorization header of the form 'Bearer <token>'

    Returns:
        str: The token part of the header

    Raises:
        AuthRejected: If the header is missing, uses another scheme or has no token
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        logger.warning("Rejected request without bearer token")
        raise AuthRejected("Missing or invalid authorization token")

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        logger.warning("Rejected request with empty bearer token")
        raise AuthRejected("Missing or invalid authorization token")
    return token


def get_settings_dependency(request: Request) -> Settings:
    return request.app.state.settings


def get_forwarder(request: Request) -> RequestForwarder:
    return request.app.state.forwarder


def get_health_monitor(request: Request) -> HealthMonitor:
    return request.app.state.health_monitor


def get_credential_verifier(request: Request) -> CredentialVerifier:
    return request.app.state.credential_verifier
