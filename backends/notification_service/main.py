"""
Notification Service - FastAPI Application
"""

from typing import Optional

from fastapi import FastAPI

from backends.config import BackendSettings, get_backend_settings
from backends.notification_service import routes
from backends.service import create_service_app
from backends.store import InMemoryRecordStore, RecordStore
from shared.utils.logger import setup_logging
from shared.utils.timestamps import utc_timestamp

SERVICE_NAME = "notification-service"


def seed_records():
    # Oldest first so the newest seed is listed first
    return [
        {
            "id": "notif_001",
            "userId": "user_12345",
            "type": "email",
            "title": "Transaction Alert",
            "message": "Your payment of $87.42 has been processed",
            "status": "sent",
            "timestamp": utc_timestamp(-86400)
        },
        {
            "id": "notif_002",
            "userId": "user_12345",
            "type": "sms",
            "title": "Deposit Confirmation",
            "message": "Salary deposit of $3,200.00 received",
            "status": "sent",
            "timestamp": utc_timestamp(-172800)
        },
        {
            "id": "notif_003",
            "userId": "user_12345",
            "type": "push",
            "title": "Security Alert",
            "message": "Login from new device detected",
            "status": "pending",
            "timestamp": utc_timestamp(-3600)
        },
    ]


def create_store(settings: BackendSettings, seed: bool = True) -> InMemoryRecordStore:
    store = InMemoryRecordStore(
        "notif",
        id_field="id",
        latency=settings.cache_latency,
        timestamps=False
    )
    if seed:
        store.seed(seed_records())
    return store


def create_app(store: Optional[RecordStore] = None, settings: Optional[BackendSettings] = None) -> FastAPI:
    settings = settings or get_backend_settings()
    app = create_service_app(
        SERVICE_NAME,
        title="Notification Service",
        port=settings.notification_service_port,
        store=store if store is not None else create_store(settings)
    )
    app.include_router(routes.router, prefix="/notifications", tags=["Notifications"])
    return app


if __name__ == "__main__":
    import uvicorn

    backend_settings = get_backend_settings()
    setup_logging(backend_settings.log_level, backend_settings.log_format)
    uvicorn.run(create_app(settings=backend_settings), host="0.0.0.0", port=backend_settings.notification_service_port)
