"""
API routes for the gateway
"""

from . import health, auth, proxy

__all__ = ["health", "auth", "proxy"]
