"""
User Service - FastAPI Application
"""

from typing import Optional

from fastapi import FastAPI

from backends.config import BackendSettings, get_backend_settings
from backends.service import create_service_app
from backends.store import InMemoryRecordStore, RecordStore
from backends.user_service import routes
from shared.utils.logger import setup_logging
from shared.utils.timestamps import utc_timestamp

SERVICE_NAME = "user-service"


def seed_records():
    now = utc_timestamp()
    return [
        {
            "_id": "user_12345",
            "email": "test@fintech.com",
            "firstName": "John",
            "lastName": "Doe",
            "phoneNumber": "+1-555-0123",
            "dateOfBirth": "1990-01-15",
            "address": {
                "street": "123 Main St",
                "city": "San Francisco",
                "state": "CA",
                "zipCode": "94102",
                "country": "US"
            },
            "createdAt": now,
            "updatedAt": now
        }
    ]


def create_store(settings: BackendSettings, seed: bool = True) -> InMemoryRecordStore:
    store = InMemoryRecordStore("user", id_field="_id", latency=settings.record_latency)
    if seed:
        store.seed(seed_records())
    return store


def create_app(store: Optional[RecordStore] = None, settings: Optional[BackendSettings] = None) -> FastAPI:
    settings = settings or get_backend_settings()
    app = create_service_app(
        SERVICE_NAME,
        title="User Service",
        port=settings.user_service_port,
        store=store if store is not None else create_store(settings)
    )
    app.include_router(routes.router, prefix="/users", tags=["Users"])
    return app


if __name__ == "__main__":
    import uvicorn

    backend_settings = get_backend_settings()
    setup_logging(backend_settings.log_level, backend_settings.log_format)
    uvicorn.run(create_app(settings=backend_settings), host="0.0.0.0", port=backend_settings.user_service_port)
