"""
Validation utilities for the backend services

Each validator returns the first error message, or None when the payload is acceptable.
"""

import re
from typing import Any, Dict, Iterable, Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

TRANSACTION_TYPES = ("credit", "debit")
MAX_TRANSACTION_AMOUNT = 50000

NOTIFICATION_TYPES = ("email", "sms", "push")
NOTIFICATION_STATUSES = ("pending", "sent", "failed", "delivered", "read")


def _missing(payload: Dict[str, Any], fields: Iterable[str]) -> bool:
    return any(not payload.get(field) for field in fields)


def validate_new_user(payload: Dict[str, Any]) -> Optional[str]:
    required = ("email", "password", "firstName", "lastName")
    if _missing(payload, required):
        return f"Missing required fields: {', '.join(required)}"

    if not isinstance(payload["email"], str) or not EMAIL_PATTERN.match(payload["email"]):
        return "Invalid email format"

    if not isinstance(payload["password"], str) or len(payload["password"]) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"

    return None


def validate_new_transaction(payload: Dict[str, Any]) -> Optional[str]:
    required = ("userId", "amount", "type")
    if _missing(payload, required):
        return f"Missing required fields: {', '.join(required)}"

    amount = payload["amount"]
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return "Amount must be a number"

    if amount <= 0:
        return "Amount must be positive"

    if payload["type"] not in TRANSACTION_TYPES:
        return "Invalid transaction type. Must be credit or debit"

    if amount > MAX_TRANSACTION_AMOUNT:
        return "Transaction amount exceeds maximum limit of $50,000"

    return None


def validate_new_notification(payload: Dict[str, Any]) -> Optional[str]:
    required = ("userId", "type", "title", "message")
    if _missing(payload, required):
        return f"Missing required fields: {', '.join(required)}"

    if payload["type"] not in NOTIFICATION_TYPES:
        return "Invalid notification type. Must be email, sms, or push"

    return None


def validate_notification_status(status: Any) -> Optional[str]:
    if status not in NOTIFICATION_STATUSES:
        return "Invalid status. Must be pending, sent, failed, delivered, or read"
    return None
