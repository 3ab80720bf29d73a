"""
Tests for the backend service stubs
"""

import pytest
from fastapi.testclient import TestClient

from backends.notification_service.main import create_app as create_notification_app
from backends.store import InMemoryRecordStore
from backends.transaction_service.main import create_app as create_transaction_app
from backends.user_service.main import create_app as create_user_app


class TestRecordStore:
    @pytest.mark.asyncio
    async def test_create_assigns_prefixed_id_and_timestamps(self):
        store = InMemoryRecordStore("user")
        record = await store.create({"_id": "forged", "email": "a@b.co"})

        assert record["_id"].startswith("user_")
        assert record["_id"] != "forged"
        assert record["createdAt"] == record["updatedAt"]

    @pytest.mark.asyncio
    async def test_find_all_newest_first_with_filter(self):
        store = InMemoryRecordStore("notif", id_field="id", timestamps=False)
        first = await store.create({"userId": "u1"})
        await store.create({"userId": "u2"})
        third = await store.create({"userId": "u1"})

        found = await store.find_all(lambda record: record["userId"] == "u1")
        assert [record["id"] for record in found] == [third["id"], first["id"]]
        assert "createdAt" not in found[0]

    @pytest.mark.asyncio
    async def test_update_keeps_id_and_returns_copy(self):
        store = InMemoryRecordStore("txn")
        created = await store.create({"status": "pending"})

        updated = await store.update(created["_id"], {"status": "completed", "_id": "other"})
        assert updated["_id"] == created["_id"]
        assert updated["status"] == "completed"

        updated["status"] = "mutated"
        assert (await store.find_by_id(created["_id"]))["status"] == "completed"

    @pytest.mark.asyncio
    async def test_missing_records(self):
        store = InMemoryRecordStore("txn")
        assert await store.find_by_id("nope") is None
        assert await store.update("nope", {}) is None
        assert await store.delete("nope") is False


class TestUserService:
    @pytest.fixture
    def client(self, backend_settings):
        return TestClient(create_user_app(settings=backend_settings))

    def test_health_check(self, client):
        data = client.get("/health").json()
        assert data["service"] == "user-service"
        assert data["status"] == "healthy"
        assert data["port"] == 3002
        assert "timestamp" in data

    def test_create_user_strips_password(self, client, sample_user):
        response = client.post("/users", json=sample_user)
        assert response.status_code == 201
        user = response.json()
        assert "password" not in user
        assert user["_id"].startswith("user_")

    def test_missing_fields(self, client):
        response = client.post("/users", json={"email": "a@b.co"})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: email, password, firstName, lastName"}

    def test_short_password(self, client, sample_user):
        sample_user["password"] = "12345"
        response = client.post("/users", json=sample_user)
        assert response.status_code == 400
        assert response.json() == {"error": "Password must be at least 6 characters long"}

    def test_duplicate_email(self, client, sample_user):
        sample_user["email"] = "test@fintech.com"
        response = client.post("/users", json=sample_user)
        assert response.status_code == 409
        assert response.json() == {"error": "User with this email already exists"}

    def test_update_and_delete(self, client):
        updated = client.put("/users/user_12345", json={"firstName": "Johnny"})
        assert updated.status_code == 200
        assert updated.json()["firstName"] == "Johnny"
        assert updated.json()["lastName"] == "Doe"

        assert client.delete("/users/user_12345").status_code == 204
        assert client.delete("/users/user_12345").status_code == 404
        assert client.put("/users/user_12345", json={}).status_code == 404

    def test_non_object_body_rejected(self, client):
        response = client.post("/users", content=b"not json", headers={"content-type": "application/json"})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_injected_store_is_used(self, backend_settings):
        client = TestClient(create_user_app(store=InMemoryRecordStore("user"), settings=backend_settings))
        assert client.get("/users/user_12345").status_code == 404


class TestTransactionService:
    @pytest.fixture
    def client(self, backend_settings):
        return TestClient(create_transaction_app(settings=backend_settings))

    def test_seeded_history_newest_first(self, client):
        data = client.get("/transactions/user/user_12345").json()
        assert [txn["_id"] for txn in data] == ["txn_001", "txn_002", "txn_003"]
        assert client.get("/transactions/user/nobody").json() == []

    def test_create_applies_defaults(self, client, sample_transaction):
        response = client.post("/transactions", json=sample_transaction)
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["currency"] == "USD"

        listed = client.get("/transactions").json()
        assert listed[0]["_id"] == data["_id"]
        assert len(listed) == 4

    @pytest.mark.parametrize("overrides,error", [
        ({"amount": 0}, "Missing required fields: userId, amount, type"),
        ({"amount": -100}, "Amount must be positive"),
        ({"amount": "100"}, "Amount must be a number"),
        ({"type": "refund"}, "Invalid transaction type. Must be credit or debit"),
        ({"amount": 50000.01}, "Transaction amount exceeds maximum limit of $50,000"),
    ])
    def test_validation(self, client, sample_transaction, overrides, error):
        response = client.post("/transactions", json={**sample_transaction, **overrides})
        assert response.status_code == 400
        assert response.json() == {"error": error}

    def test_maximum_amount_accepted(self, client, sample_transaction):
        response = client.post("/transactions", json={**sample_transaction, "amount": 50000})
        assert response.status_code == 201

    def test_patch_status(self, client):
        response = client.patch("/transactions/txn_002", json={"status": "reversed"})
        assert response.status_code == 200
        assert response.json()["status"] == "reversed"
        assert client.patch("/transactions/missing", json={}).status_code == 404
        assert client.get("/transactions/missing").json() == {"error": "Transaction not found"}


class TestNotificationService:
    @pytest.fixture
    def client(self, backend_settings):
        return TestClient(create_notification_app(settings=backend_settings))

    def test_seeded_list_order(self, client):
        data = client.get("/notifications/user/user_12345").json()
        assert [notif["id"] for notif in data] == ["notif_003", "notif_002", "notif_001"]

    def test_create_forces_pending(self, client):
        response = client.post("/notifications", json={
            "userId": "user_1", "type": "email", "title": "T", "message": "M", "status": "sent"
        })
        assert response.status_code == 201
        data = response.json()
        assert data["id"].startswith("notif_")
        assert data["status"] == "pending"
        assert "timestamp" in data

    def test_invalid_type(self, client):
        response = client.post("/notifications", json={
            "userId": "user_1", "type": "fax", "title": "T", "message": "M"
        })
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid notification type. Must be email, sms, or push"}

    def test_status_transitions(self, client):
        invalid = client.patch("/notifications/notif_003/status", json={"status": "archived"})
        assert invalid.status_code == 400

        delivered = client.patch("/notifications/notif_003/status", json={"status": "delivered"})
        assert delivered.status_code == 200
        assert delivered.json()["status"] == "delivered"
        assert "updatedAt" in delivered.json()

        missing = client.patch("/notifications/missing/status", json={"status": "read"})
        assert missing.status_code == 404

    def test_delete(self, client):
        assert client.delete("/notifications/notif_001").status_code == 204
        assert client.get("/notifications/notif_001").status_code == 404
        assert client.delete("/notifications/notif_001").status_code == 404
