"""
Proxy data models
Transient request and outcome values used while forwarding a call upstream
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Union

FORWARDED_HEADERS = ("content-type",)


class HealthStatus(str, Enum):
    """Reachability of a backend service as seen by the health monitor"""
    UNKNOWN = "unknown"
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass(frozen=True)
class ProxyRequest:
    """An inbound request reduced to what gets reissued upstream"""
    method: str
    path: str
    query: str = ""
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        query: str,
        body: bytes,
        headers: Mapping[str, str]
    ) -> "ProxyRequest":
        """Create a proxy request keeping only the forwarded header subset"""
        kept = {}
        for name in FORWARDED_HEADERS:
            value = headers.get(name)
            if value is not None:
                kept[name] = value
        return cls(method=method.upper(), path=path, query=query, body=body, headers=kept)

    def target_url(self, base_url: str) -> str:
        url = f"{base_url.rstrip('/')}{self.path}"
        if self.query:
            url = f"{url}?{self.query}"
        return url


@dataclass(frozen=True)
class Success:
    status: int
    body: bytes
    content_type: Optional[str] = None


@dataclass(frozen=True)
class UpstreamError:
    status: int
    body: bytes
    content_type: Optional[str] = None


@dataclass(frozen=True)
class UpstreamUnreachable:
    reason: str = ""


@dataclass(frozen=True)
class GatewayFault:
    message: str = "Gateway error"


ProxyOutcome = Union[Success, UpstreamError, UpstreamUnreachable, GatewayFault]
