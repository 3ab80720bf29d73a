"""
User management routes
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Response
import structlog

from backends.service import get_store
from backends.store import Record, RecordStore
from backends.validators import validate_new_user

logger = structlog.get_logger(__name__)

router = APIRouter()


def without_password(user: Record) -> Record:
    return {key: value for key, value in user.items() if key != "password"}


async def find_by_email(store: RecordStore, email: str):
    matches = await store.find_all(lambda user: user.get("email") == email)
    return matches[0] if matches else None


@router.post("", status_code=201)
async def create_user(
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store)
):
    """Create a new user"""
    error = validate_new_user(payload)
    if error:
        raise HTTPException(status_code=400, detail=error)

    if await find_by_email(store, payload["email"]):
        raise HTTPException(status_code=409, detail="User with this email already exists")

    user = await store.create(payload)
    logger.info("Created user", user_id=user["_id"])
    return without_password(user)


@router.get("/{user_id}")
async def get_user(user_id: str, store: RecordStore = Depends(get_store)):
    """Get user by ID"""
    user = await store.find_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return without_password(user)


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store)
):
    """Update user fields"""
    user = await store.update(user_id, payload)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    logger.info("Updated user", user_id=user_id)
    return without_password(user)


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: str, store: RecordStore = Depends(get_store)):
    """Delete a user"""
    if not await store.delete(user_id):
        raise HTTPException(status_code=404, detail="User not found")

    logger.info("Deleted user", user_id=user_id)
    return Response(status_code=204)
