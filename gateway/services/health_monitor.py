"""
Health Monitor
Periodic reachability checks for the backend services

Each service moves through Unknown -> Healthy <-> Unhealthy. Probes run
concurrently per round so one slow backend cannot delay the others, and the
polling loop stops cooperatively when stop() is called.
"""

import asyncio
from typing import Dict, Mapping, Optional

import httpx
import structlog

from gateway.models.proxy import HealthStatus

logger = structlog.get_logger(__name__)


class HealthMonitor:
    """Polls every registered service's /health endpoint and caches the result"""

    def __init__(
        self,
        registry: Mapping[str, str],
        interval: float = 30.0,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.registry = registry
        self.interval = interval
        self.timeout = timeout
        self._transport = transport
        self._state: Dict[str, HealthStatus] = {name: HealthStatus.UNKNOWN for name in registry}
        self._client: Optional[httpx.AsyncClient] = None
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def snapshot(self) -> Dict[str, HealthStatus]:
        """Copy of the cached state, never triggers a probe"""
        return dict(self._state)

    def _set_status(self, name: str, status: HealthStatus):
        previous = self._state[name]
        self._state[name] = status
        if previous != status:
            logger.info(
                "Service health changed",
                service=name,
                previous=previous.value,
                current=status.value
            )

    async def check_service(self, name: str) -> HealthStatus:
        """Probe one service and record the result"""
        url = f"{self.registry[name].rstrip('/')}/health"
        status = HealthStatus.UNHEALTHY
        try:
            if self._client:
                response = await asyncio.wait_for(self._client.get(url), timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                    response = await asyncio.wait_for(client.get(url), timeout=self.timeout)
            if response.status_code == 200:
                status = HealthStatus.HEALTHY
            else:
                logger.warning("Health probe returned non-200", service=name, status_code=response.status_code)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning("Health probe timed out", service=name, timeout=self.timeout)
        except Exception as e:
            logger.warning("Health probe failed", service=name, error=str(e))

        self._set_status(name, status)
        return status

    async def check_all(self) -> Dict[str, HealthStatus]:
        """Run one probe round over all services concurrently"""
        await asyncio.gather(*(self.check_service(name) for name in self.registry))
        return self.snapshot()

    async def _poll(self, eager: bool):
        if eager:
            await self.check_all()
            logger.info(
                "Initial service health",
                services={name: status.value for name, status in self._state.items()}
            )

        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
                break
            except asyncio.TimeoutError:
                pass
            await self.check_all()

    async def start(self, eager: bool = True):
        """
        Create the probe client and start polling in the background

        With eager set, the first probe round runs immediately inside the
        polling task, so start() returns without waiting on any backend.
        """
        if self.running:
            logger.warning("HealthMonitor already started")
            return

        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        self._stop_event = asyncio.Event()

        self._task = asyncio.create_task(self._poll(eager))
        logger.info("HealthMonitor started", interval=self.interval, timeout=self.timeout)

    async def stop(self):
        """Stop polling and close the probe client"""
        if self._stop_event is not None:
            self._stop_event.set()

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("HealthMonitor stopped")

        if self._client is not None:
            await self._client.aclose()
            self._client = None
