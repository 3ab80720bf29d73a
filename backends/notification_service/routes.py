"""
Notification routes
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, Response
import structlog

from backends.service import get_store
from backends.store import RecordStore
from backends.validators import validate_new_notification, validate_notification_status
from shared.utils.timestamps import utc_timestamp

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post("", status_code=201)
async def create_notification(
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store)
):
    """Queue a notification for a user"""
    error = validate_new_notification(payload)
    if error:
        raise HTTPException(status_code=400, detail=error)

    notification = await store.create({
        **payload,
        "status": "pending",
        "timestamp": utc_timestamp()
    })
    logger.info("Created notification", notification_id=notification["id"], user_id=notification["userId"])
    return notification


@router.get("/user/{user_id}")
async def get_user_notifications(user_id: str, store: RecordStore = Depends(get_store)):
    """Notifications for one user, most recently created first"""
    notifications = await store.find_all(lambda notif: notif.get("userId") == user_id)
    logger.info("Found notifications for user", user_id=user_id, count=len(notifications))
    return notifications


@router.get("/{notification_id}")
async def get_notification(notification_id: str, store: RecordStore = Depends(get_store)):
    """Get notification by ID"""
    notification = await store.find_by_id(notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification


@router.patch("/{notification_id}/status")
async def update_notification_status(
    notification_id: str,
    payload: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store)
):
    """Move a notification to another delivery status"""
    status = payload.get("status")
    error = validate_notification_status(status)
    if error:
        raise HTTPException(status_code=400, detail=error)

    notification = await store.update(notification_id, {"status": status, "updatedAt": utc_timestamp()})
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")

    logger.info("Updated notification status", notification_id=notification_id, status=status)
    return notification


@router.delete("/{notification_id}", status_code=204)
async def delete_notification(notification_id: str, store: RecordStore = Depends(get_store)):
    """Delete a notification"""
    if not await store.delete(notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")

    logger.info("Deleted notification", notification_id=notification_id)
    return Response(status_code=204)
