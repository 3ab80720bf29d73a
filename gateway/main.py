"""
API Gateway - Main Application
Single entry point in front of the user, transaction and notification services
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gateway.config import Settings, get_settings
from gateway.exceptions import GatewayError, RouteNotFound
from gateway.routes import auth, health, proxy
from gateway.services.auth_service import CredentialVerifier
from gateway.services.forwarder import RequestForwarder
from gateway.services.health_monitor import HealthMonitor
from shared.utils.logger import request_logging_middleware, setup_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events"""
    settings: Settings = app.state.settings
    logger.info(
        "Starting API Gateway",
        environment=settings.environment,
        port=settings.port,
        services=dict(app.state.registry)
    )

    await app.state.forwarder.start()
    await app.state.health_monitor.start()

    yield

    logger.info("API Gateway shutting down")
    await app.state.health_monitor.stop()
    await app.state.forwarder.stop()
    logger.info("API Gateway shutdown complete")


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """
    Build the gateway application

    Args:
        settings: Gateway settings, defaults to the environment-driven settings
        transport: Optional httpx transport used for every upstream call
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Fintech API Gateway",
        description="Routes and guards requests for the user, transaction and notification services",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.registry = settings.service_registry
    app.state.forwarder = RequestForwarder(timeout=settings.upstream_timeout, transport=transport)
    app.state.health_monitor = HealthMonitor(
        app.state.registry,
        interval=settings.health_check_interval,
        timeout=settings.health_check_timeout,
        transport=transport
    )
    app.state.credential_verifier = CredentialVerifier.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_logging_middleware(settings.service_name))

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Methods outside the route table surface as 405
        if exc.status_code in (404, 405):
            error = RouteNotFound(request.method, request.url.path)
            return JSONResponse(status_code=error.status_code, content=error.to_dict())
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("Invalid request body", path=request.url.path, errors=str(exc.errors()))
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            error=str(exc),
            method=request.method,
            url=str(request.url),
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred"
            }
        )

    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(proxy.router, prefix="/api", tags=["Proxy"])

    @app.api_route(
        "/{full_path:path}",
        methods=proxy.PROXY_METHODS,
        include_in_schema=False
    )
    async def route_not_found(request: Request):
        raise RouteNotFound(request.method, request.url.path)

    return app


def build_default_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.logging_config_path)
    return create_app(settings)


app = build_default_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "gateway.main:app",
        host="0.0.0.0",
        port=get_settings().port,
        log_level="info"
    )
