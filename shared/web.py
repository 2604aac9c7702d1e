"""
FastAPI plumbing shared by the catalog and order apps.

- Logging setup in one place so both services log the same way
- Mapping from our error taxonomy to HTTP status codes
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.exceptions import ServiceError

LOG_FORMAT = "%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s"

logger = logging.getLogger("web")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with the services' common format."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )


def install_error_handlers(app: FastAPI) -> None:
    """
    Translate service errors into HTTP responses.

    NotFoundError -> 404, ServiceUnavailableError -> 503,
    ValidationFailure -> 422, anything unexpected -> 500.
    """

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unexpected error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
