"""
Gateway services
"""

from .forwarder import RequestForwarder
from .health_monitor import HealthMonitor
from .auth_service import CredentialVerifier, LoginAccount

__all__ = ["RequestForwarder", "HealthMonitor", "CredentialVerifier", "LoginAccount"]
