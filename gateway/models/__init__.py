"""
Data models for the API gateway
"""

from .proxy import (
    HealthStatus, ProxyRequest, ProxyOutcome,
    Success, UpstreamError, UpstreamUnreachable, GatewayFault
)
from .auth import LoginRequest, LoginUser, LoginResponse

__all__ = [
    "HealthStatus",
    "ProxyRequest",
    "ProxyOutcome",
    "Success",
    "UpstreamError",
    "UpstreamUnreachable",
    "GatewayFault",
    "LoginRequest",
    "LoginUser",
    "LoginResponse",
]
