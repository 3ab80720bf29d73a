"""
Timestamp helpers shared by the gateway and the backend services
"""

from datetime import datetime, timedelta, timezone


def utc_timestamp(offset_seconds: float = 0) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix"""
    moment = datetime.now(timezone.utc) + timedelta(seconds=offset_seconds)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
