"""
Shared utilities for the fintech services

This package contains common utilities used across the gateway and the backend services.
"""

from .logger import setup_logging, mask_secret, request_logging_middleware
from .timestamps import utc_timestamp

__all__ = [
    "setup_logging",
    "mask_secret",
    "request_logging_middleware",
    "utc_timestamp",
]

__version__ = "1.0.0"
