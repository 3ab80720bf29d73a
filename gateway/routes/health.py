"""
Health check routes for the API gateway
"""

from fastapi import APIRouter, Depends

from gateway.config import Settings
from gateway.models.proxy import HealthStatus
from gateway.services.health_monitor import HealthMonitor
from gateway.utils.dependencies import get_health_monitor, get_settings_dependency
from shared.utils.timestamps import utc_timestamp

router = APIRouter()


@router.get("/health")
async def health_check(
    monitor: HealthMonitor = Depends(get_health_monitor),
    settings: Settings = Depends(get_settings_dependency)
):
    """Gateway health combined with the cached backend health"""
    services = {
        f"{name}-service": "healthy" if status == HealthStatus.HEALTHY else "unhealthy"
        for name, status in monitor.snapshot().items()
    }
    return {
        "service": settings.service_name,
        "status": "healthy",
        "port": settings.port,
        "services": services,
        "timestamp": utc_timestamp()
    }
