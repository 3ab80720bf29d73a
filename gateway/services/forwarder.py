"""
Request Forwarder
Reissues gateway requests against a backend service and classifies the result

Connection pooling follows the shared-client pattern:
- Single AsyncClient initialized at app startup
- Limits to prevent connection exhaustion
- Every call bounded by the upstream timeout
"""

import asyncio
import socket
from typing import Optional

import httpx
import structlog

from gateway.models.proxy import (
    ProxyRequest, ProxyOutcome,
    Success, UpstreamError, UpstreamUnreachable, GatewayFault
)

logger = structlog.get_logger(__name__)


def _is_name_resolution_failure(exc: BaseException) -> bool:
    """Walk the exception chain looking for a DNS lookup error"""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, socket.gaierror):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


class RequestForwarder:
    """
    Proxies requests to backend services.

    Lifecycle:
        - Call start() during app startup (FastAPI lifespan)
        - Call stop() during app shutdown
        - If not started, each call opens and closes its own client
    """

    MAX_CONNECTIONS = 100
    MAX_KEEPALIVE = 20
    KEEPALIVE_EXPIRY = 5.0

    def __init__(self, timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _build_client(self) -> httpx.AsyncClient:
        limits = httpx.Limits(
            max_connections=self.MAX_CONNECTIONS,
            max_keepalive_connections=self.MAX_KEEPALIVE,
            keepalive_expiry=self.KEEPALIVE_EXPIRY
        )
        return httpx.AsyncClient(
            limits=limits,
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
            follow_redirects=False
        )

    async def start(self):
        """Initialize the shared HTTP client"""
        if self._client is not None:
            logger.warning("RequestForwarder already started")
            return
        self._client = self._build_client()
        logger.info(
            "RequestForwarder started",
            max_connections=self.MAX_CONNECTIONS,
            timeout=self.timeout
        )

    async def stop(self):
        """Close the HTTP client and release pooled connections"""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("RequestForwarder stopped")

    async def _send(self, client: httpx.AsyncClient, base_url: str, proxy_request: ProxyRequest) -> httpx.Response:
        request = client.build_request(
            proxy_request.method,
            proxy_request.target_url(base_url),
            content=proxy_request.body or None,
            headers=proxy_request.headers
        )
        return await asyncio.wait_for(client.send(request), timeout=self.timeout)

    async def forward(self, base_url: str, proxy_request: ProxyRequest) -> ProxyOutcome:
        """Forward one request and classify what came back"""
        url = proxy_request.target_url(base_url)
        logger.info("Forwarding request", method=proxy_request.method, url=url)

        try:
            if self._client:
                response = await self._send(self._client, base_url, proxy_request)
            else:
                logger.warning("RequestForwarder not started, using per-request client")
                async with self._build_client() as client:
                    response = await self._send(client, base_url, proxy_request)

        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.error("Upstream timed out", url=url, timeout=self.timeout)
            return UpstreamUnreachable(reason=f"timeout after {self.timeout}s")
        except httpx.ConnectError as e:
            if _is_name_resolution_failure(e):
                logger.error("Upstream host could not be resolved", url=url, error=str(e))
                return GatewayFault(message="Gateway error")
            logger.error("Upstream connection failed", url=url, error=str(e))
            return UpstreamUnreachable(reason=str(e))
        except httpx.HTTPError as e:
            logger.error("Upstream request failed", url=url, error=str(e))
            return GatewayFault(message="Gateway error")
        except Exception as e:
            logger.error("Unexpected error forwarding request", url=url, error=str(e), exc_info=True)
            return GatewayFault(message="Gateway error")

        logger.info("Service responded", url=url, status_code=response.status_code)
        content_type = response.headers.get("content-type")
        if response.status_code >= 400:
            return UpstreamError(status=response.status_code, body=response.content, content_type=content_type)
        return Success(status=response.status_code, body=response.content, content_type=content_type)
