"""
Logging utilities for the fintech services

Provides centralized structlog configuration and the request logging
middleware shared by the gateway and the backend services.
"""

import os
import time
import logging
import logging.config
from typing import Optional, Dict, Any

import structlog
import yaml
from fastapi import Request

# Default logging configuration for the stdlib handlers structlog writes through
DEFAULT_LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(message)s',
        },
        'detailed': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'default',
            'stream': 'ext://sys.stdout'
        }
    },
    'root': {
        'level': 'INFO',
        'handlers': ['console'],
    }
}

LOG_FORMATS = ('json', 'console')


def _load_config_file(config_path: str) -> Optional[Dict[str, Any]]:
    """Load a YAML dictConfig file, returning None when it cannot be read"""
    try:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logging.getLogger(__name__).warning(
            "Failed to load logging config from %s: %s", config_path, e
        )
        return None


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    config_path: Optional[str] = None
) -> None:
    """
    Setup stdlib logging and structlog

    Args:
        log_level: Root log level
        log_format: Renderer for structlog events ('json' or 'console')
        config_path: Optional YAML file with a logging dictConfig
    """
    config = None
    if config_path and os.path.exists(config_path):
        config = _load_config_file(config_path)

    if not config:
        config = {
            **DEFAULT_LOGGING_CONFIG,
            'handlers': {k: dict(v) for k, v in DEFAULT_LOGGING_CONFIG['handlers'].items()},
            'root': dict(DEFAULT_LOGGING_CONFIG['root']),
        }

    level = log_level.upper()
    config.setdefault('root', {})['level'] = level
    for handler_config in config.get('handlers', {}).values():
        handler_config['level'] = level

    logging.config.dictConfig(config)

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def mask_secret(value: Optional[str], visible: int = 10) -> Optional[str]:
    """Keep only the first characters of a credential for log output"""
    if not value:
        return None
    return f"{value[:visible]}..."


def request_logging_middleware(service_name: str):
    """
    Build an HTTP middleware that times each request and logs it

    The returned coroutine is registered with ``app.middleware("http")``.
    """
    logger = structlog.get_logger(service_name)

    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()
        logger.info(
            "Request received",
            method=request.method,
            path=request.url.path,
            query=request.url.query or None,
            client_ip=request.client.host if request.client else "unknown",
            api_key=mask_secret(request.headers.get("x-api-key")),
            auth_token=mask_secret(request.headers.get("authorization"), visible=20),
        )

        response = await call_next(request)

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return response

    return log_requests
