"""
Common FastAPI wiring for the backend services
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
import structlog

from backends.store import RecordStore
from shared.utils.logger import request_logging_middleware
from shared.utils.timestamps import utc_timestamp


def get_store(request: Request) -> RecordStore:
    """Dependency to get the service's record store"""
    return request.app.state.store


def create_service_app(service_name: str, title: str, port: int, store: RecordStore) -> FastAPI:
    """
    Build a backend service app with health check, logging and JSON errors

    Error responses always have the shape {"error": "<message>"}.
    """
    logger = structlog.get_logger(service_name)

    app = FastAPI(title=title, version="1.0.0")
    app.state.service_name = service_name
    app.state.port = port
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_logging_middleware(service_name))

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception", error=str(exc), path=request.url.path, exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/health")
    async def health_check():
        """Service health check"""
        return {
            "service": service_name,
            "status": "healthy",
            "port": port,
            "timestamp": utc_timestamp()
        }

    return app
