"""
Unit tests for HealthMonitor
"""

import asyncio
import time

import httpx
import pytest

from gateway.models.proxy import HealthStatus
from gateway.services.health_monitor import HealthMonitor

REGISTRY = {
    "user": "http://user-service",
    "transaction": "http://transaction-service",
    "notification": "http://notification-service",
}


def status_transport(statuses):
    """Answer /health per host: an int status code, or an exception class to raise"""
    def handler(request: httpx.Request) -> httpx.Response:
        result = statuses[request.url.host]
        if isinstance(result, int):
            return httpx.Response(result, json={"status": "healthy"})
        raise result("probe failed", request=request)
    return httpx.MockTransport(handler)


class TestHealthMonitor:
    def test_initial_state_is_unknown(self):
        monitor = HealthMonitor(REGISTRY)
        assert monitor.snapshot() == {name: HealthStatus.UNKNOWN for name in REGISTRY}
        assert not monitor.running

    @pytest.mark.asyncio
    async def test_probe_results_per_service(self):
        transport = status_transport({
            "user-service": 200,
            "transaction-service": 500,
            "notification-service": httpx.ConnectError,
        })
        monitor = HealthMonitor(REGISTRY, timeout=1.0, transport=transport)

        state = await monitor.check_all()

        assert state == {
            "user": HealthStatus.HEALTHY,
            "transaction": HealthStatus.UNHEALTHY,
            "notification": HealthStatus.UNHEALTHY,
        }

    @pytest.mark.asyncio
    async def test_slow_service_does_not_block_others(self):
        async def handler(request):
            if request.url.host == "transaction-service":
                await asyncio.sleep(5)
            return httpx.Response(200)

        monitor = HealthMonitor(REGISTRY, timeout=0.1, transport=httpx.MockTransport(handler))

        started = time.perf_counter()
        state = await monitor.check_all()
        elapsed = time.perf_counter() - started

        assert elapsed < 1.0
        assert state["transaction"] == HealthStatus.UNHEALTHY
        assert state["user"] == HealthStatus.HEALTHY
        assert state["notification"] == HealthStatus.HEALTHY

    @pytest.mark.asyncio
    async def test_service_recovers(self):
        statuses = {"user-service": 503, "transaction-service": 200, "notification-service": 200}
        monitor = HealthMonitor(REGISTRY, transport=status_transport(statuses))

        assert await monitor.check_service("user") == HealthStatus.UNHEALTHY
        statuses["user-service"] = 200
        assert await monitor.check_service("user") == HealthStatus.HEALTHY
        assert set(monitor.snapshot()) == set(REGISTRY)

    @pytest.mark.asyncio
    async def test_start_probes_eagerly_and_stop_cancels_polling(self):
        probes = []

        def handler(request):
            probes.append(request.url.host)
            return httpx.Response(200)

        monitor = HealthMonitor(REGISTRY, interval=0.05, timeout=1.0, transport=httpx.MockTransport(handler))
        await monitor.start()
        await asyncio.sleep(0.01)

        assert len(probes) == 3
        assert monitor.snapshot() == {name: HealthStatus.HEALTHY for name in REGISTRY}
        assert monitor.running

        await asyncio.sleep(0.2)
        assert len(probes) > 3

        await monitor.stop()
        assert not monitor.running
        count = len(probes)
        await asyncio.sleep(0.15)
        assert len(probes) == count

    @pytest.mark.asyncio
    async def test_stop_is_idempotent(self):
        monitor = HealthMonitor(REGISTRY, transport=status_transport({
            "user-service": 200, "transaction-service": 200, "notification-service": 200,
        }))
        await monitor.stop()
        await monitor.start(eager=False)
        await monitor.stop()
        await monitor.stop()
        assert not monitor.running

    @pytest.mark.asyncio
    async def test_snapshot_does_not_probe(self):
        probes = []

        def handler(request):
            probes.append(request)
            return httpx.Response(200)

        monitor = HealthMonitor(REGISTRY, transport=httpx.MockTransport(handler))
        monitor.snapshot()
        monitor.snapshot()
        assert probes == []

    @pytest.mark.asyncio
    async def test_start_does_not_wait_for_slow_backends(self):
        async def handler(request):
            await asyncio.sleep(30)
            return httpx.Response(200)

        monitor = HealthMonitor(REGISTRY, timeout=3.0, transport=httpx.MockTransport(handler))

        started = time.perf_counter()
        await monitor.start()
        elapsed = time.perf_counter() - started

        assert elapsed < 0.5
        assert monitor.running
        assert monitor.snapshot() == {name: HealthStatus.UNKNOWN for name in REGISTRY}
        await monitor.stop()
        assert not monitor.running
