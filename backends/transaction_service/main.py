"""
Transaction Service - FastAPI Application
"""

from typing import Optional

from fastapi import FastAPI

from backends.config import BackendSettings, get_backend_settings
from backends.service import create_service_app
from backends.store import InMemoryRecordStore, RecordStore
from backends.transaction_service import routes
from shared.utils.logger import setup_logging
from shared.utils.timestamps import utc_timestamp

SERVICE_NAME = "transaction-service"

DAY = 86400


def seed_records():
    seeds = [
        ("txn_001", 87.42, "debit", "Grocery Store Purchase", "Whole Foods Market", "groceries", DAY),
        ("txn_002", 3200.00, "credit", "Salary Deposit", "TechCorp Inc", "salary", 2 * DAY),
        ("txn_003", 250.00, "debit", "Online Transfer", "Savings Account", "transfer", 3 * DAY),
    ]
    records = []
    for txn_id, amount, txn_type, description, merchant, category, age in seeds:
        created = utc_timestamp(-age)
        records.append({
            "_id": txn_id,
            "userId": "user_12345",
            "amount": amount,
            "currency": "USD",
            "type": txn_type,
            "description": description,
            "merchantName": merchant,
            "category": category,
            "status": "completed",
            "createdAt": created,
            "updatedAt": created
        })
    return records


def create_store(settings: BackendSettings, seed: bool = True) -> InMemoryRecordStore:
    store = InMemoryRecordStore("txn", id_field="_id", latency=settings.record_latency)
    if seed:
        store.seed(seed_records())
    return store


def create_app(store: Optional[RecordStore] = None, settings: Optional[BackendSettings] = None) -> FastAPI:
    settings = settings or get_backend_settings()
    app = create_service_app(
        SERVICE_NAME,
        title="Transaction Service",
        port=settings.transaction_service_port,
        store=store if store is not None else create_store(settings)
    )
    app.include_router(routes.router, prefix="/transactions", tags=["Transactions"])
    return app


if __name__ == "__main__":
    import uvicorn

    backend_settings = get_backend_settings()
    setup_logging(backend_settings.log_level, backend_settings.log_format)
    uvicorn.run(create_app(settings=backend_settings), host="0.0.0.0", port=backend_settings.transaction_service_port)
