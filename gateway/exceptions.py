"""
Gateway error taxonomy
"""

from typing import Any, Dict, List, Optional


class GatewayError(Exception):
    """Base class for errors the gateway renders as JSON responses"""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.error)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.message:
            body["message"] = self.message
        return body


class AuthRejected(GatewayError):
    """Missing or malformed credential, never forwarded"""

    status_code = 401

    def __init__(self, error: str):
        super().__init__()
        self.error = error


class RouteNotFound(GatewayError):
    """No gateway route matches the request"""

    status_code = 404
    error = "Route not found"

    AVAILABLE_ROUTES: List[str] = [
        "POST /api/auth/login",
        "GET /api/health",
        "/api/users/*",
        "/api/transactions/*",
        "/api/notifications/*",
    ]

    def __init__(self, method: str, path: str):
        super().__init__(f"No route found for {method} {path}")

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["availableRoutes"] = list(self.AVAILABLE_ROUTES)
        return body
