"""
Proxy routes
Forwards /api/users, /api/transactions and /api/notifications to the backend services
"""

from typing import Callable, List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
import structlog

from gateway.models.proxy import (
    ProxyRequest, ProxyOutcome,
    Success, UpstreamError, UpstreamUnreachable, GatewayFault
)
from gateway.utils.dependencies import get_forwarder, require_api_key, require_bearer_token

logger = structlog.get_logger(__name__)

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]
GATEWAY_PREFIX = "/api"

router = APIRouter()


def upstream_path(request: Request) -> str:
    """Request path with the gateway's /api segment removed"""
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else request.url.path
    if path.startswith(GATEWAY_PREFIX):
        path = path[len(GATEWAY_PREFIX):]
    return path or "/"


async def build_proxy_request(request: Request) -> ProxyRequest:
    return ProxyRequest.build(
        method=request.method,
        path=upstream_path(request),
        query=request.scope.get("query_string", b"").decode("latin-1"),
        body=await request.body(),
        headers=request.headers
    )


def outcome_to_response(outcome: ProxyOutcome, service_name: str) -> Response:
    """Translate a forwarding outcome into the gateway's HTTP response"""
    if isinstance(outcome, (Success, UpstreamError)):
        return Response(
            content=outcome.body,
            status_code=outcome.status,
            media_type=outcome.content_type
        )

    if isinstance(outcome, UpstreamUnreachable):
        return JSONResponse(
            status_code=503,
            content={
                "error": "Service unavailable",
                "message": f"Unable to connect to {service_name} service"
            }
        )

    if not isinstance(outcome, GatewayFault):
        logger.error("Unknown proxy outcome", outcome=repr(outcome))
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": "Gateway error"}
    )


def _proxy_endpoint(service_name: str) -> Callable:
    async def proxy(request: Request, forwarder=Depends(get_forwarder)) -> Response:
        base_url = request.app.state.registry[service_name]
        proxy_request = await build_proxy_request(request)
        outcome = await forwarder.forward(base_url, proxy_request)
        return outcome_to_response(outcome, service_name)

    proxy.__name__ = f"proxy_{service_name}"
    return proxy


def _register(prefix: str, service_name: str, guard: Callable):
    endpoint = _proxy_endpoint(service_name)
    dependencies: List = [Depends(guard)]
    for path in (prefix, f"{prefix}/{{path:path}}"):
        router.add_api_route(
            path,
            endpoint,
            methods=PROXY_METHODS,
            dependencies=dependencies,
            include_in_schema=path == prefix,
            name=f"{service_name}_proxy" if path == prefix else f"{service_name}_proxy_path"
        )


_register("/users", "user", require_api_key)
_register("/transactions", "transaction", require_bearer_token)
_register("/notifications", "notification", require_bearer_token)
