"""
Transaction routes
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException
import structlog

from backends.service import get_store
from backends.store import Record, RecordStore
from backends.validators import validate_new_transaction

logger = structlog.get_logger(__name__)

router = APIRouter()


def newest_first(transactions: List[Record]) -> List[Record]:
    return sorted(transactions, key=lambda txn: txn.get("createdAt", ""), reverse=True)


@router.post("", status_code=201)
async def create_transaction(
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store)
):
    """Create a transaction"""
    error = validate_new_transaction(payload)
    if error:
        raise HTTPException(status_code=400, detail=error)

    data = {
        **payload,
        "status": payload.get("status") or "pending",
        "currency": payload.get("currency") or "USD",
    }
    transaction = await store.create(data)
    logger.info("Created transaction", transaction_id=transaction["_id"], user_id=transaction["userId"])
    return transaction


@router.get("/user/{user_id}")
async def get_user_transactions(user_id: str, store: RecordStore = Depends(get_store)):
    """Transactions for one user, newest first"""
    transactions = await store.find_all(lambda txn: txn.get("userId") == user_id)
    logger.info("Found transactions for user", user_id=user_id, count=len(transactions))
    return newest_first(transactions)


@router.get("/{transaction_id}")
async def get_transaction(transaction_id: str, store: RecordStore = Depends(get_store)):
    """Get transaction by ID"""
    transaction = await store.find_by_id(transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@router.get("")
async def list_transactions(store: RecordStore = Depends(get_store)):
    """All transactions, newest first"""
    return newest_first(await store.find_all())


@router.patch("/{transaction_id}")
async def update_transaction(
    transaction_id: str,
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store)
):
    """Update transaction fields such as status"""
    transaction = await store.update(transaction_id, payload)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")

    logger.info("Updated transaction", transaction_id=transaction_id)
    return transaction
