"""
Pytest fixtures for the gateway and backend service tests
"""

import time
from typing import Dict, List

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from backends.config import BackendSettings
from backends.notification_service.main import create_app as create_notification_app
from backends.transaction_service.main import create_app as create_transaction_app
from backends.user_service.main import create_app as create_user_app
from gateway.config import Settings
from gateway.main import create_app as create_gateway_app
from gateway.models.proxy import HealthStatus

API_KEY_HEADERS = {"x-api-key": "dev_api_key_123"}
BEARER_HEADERS = {"Authorization": "Bearer dev_jwt_token"}
TEST_PASSWORD = "TestPassword123!"


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test."
    )


def wait_for_health_probes(app: FastAPI, timeout: float = 5.0):
    """Block until the background monitor has probed every service once"""
    deadline = time.monotonic() + timeout
    while HealthStatus.UNKNOWN in app.state.health_monitor.snapshot().values():
        if time.monotonic() > deadline:
            raise AssertionError("health probes did not complete in time")
        time.sleep(0.01)


class ServiceTransport(httpx.AsyncBaseTransport):
    """Routes upstream calls to in-process ASGI apps by host name"""

    def __init__(self, apps: Dict[str, FastAPI]):
        self.transports = {host: httpx.ASGITransport(app=app) for host, app in apps.items()}
        self.requests: List[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        transport = self.transports.get(request.url.host)
        if transport is None:
            raise httpx.ConnectError("Connection refused", request=request)
        return await transport.handle_async_request(request)

    def forwarded_to(self, host: str) -> List[httpx.Request]:
        """Requests sent to a host, health probes excluded"""
        return [
            request for request in self.requests
            if request.url.host == host and request.url.path != "/health"
        ]


@pytest.fixture
def gateway_settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="development",
        user_service_url="http://user-service",
        transaction_service_url="http://transaction-service",
        notification_service_url="http://notification-service",
        upstream_timeout=2.0,
        health_check_interval=30.0,
        health_check_timeout=1.0,
        test_user_password=TEST_PASSWORD,
    )


@pytest.fixture
def backend_settings() -> BackendSettings:
    return BackendSettings(
        _env_file=None,
        record_latency_min=0,
        record_latency_max=0,
        cache_latency_min=0,
        cache_latency_max=0,
    )


@pytest.fixture
def backend_apps(backend_settings) -> Dict[str, FastAPI]:
    return {
        "user-service": create_user_app(settings=backend_settings),
        "transaction-service": create_transaction_app(settings=backend_settings),
        "notification-service": create_notification_app(settings=backend_settings),
    }


@pytest.fixture
def transport(backend_apps) -> ServiceTransport:
    return ServiceTransport(backend_apps)


@pytest.fixture
def gateway_client(gateway_settings, transport):
    app = create_gateway_app(gateway_settings, transport=transport)
    with TestClient(app) as client:
        wait_for_health_probes(app)
        yield client


@pytest.fixture
def sample_user() -> Dict[str, str]:
    return {
        "email": "jane.roe@example.com",
        "password": "secret123",
        "firstName": "Jane",
        "lastName": "Roe",
    }


@pytest.fixture
def sample_transaction() -> Dict:
    return {
        "userId": "user_12345",
        "amount": 100.50,
        "type": "credit",
        "description": "Test payment",
    }
