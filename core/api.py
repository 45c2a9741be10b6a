"""API utilities for FastAPI route handling."""

import functools
import logging
from collections.abc import Callable
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.exceptions import (
    AuthenticationException,
    ExternalServiceException,
    FootprintException,
    IngestionTimeoutException,
    PersistenceConflictException,
    ResourceNotFoundException,
    ValidationException,
)

_REQUEST_LOCATIONS = {"body", "query", "path", "header"}


def api_route(logger: logging.Logger):
    """
    Decorator for FastAPI endpoints that provides standardized error handling.

    Wraps async endpoint functions with try/except to:
    - Re-raise HTTPException instances as-is
    - Map custom exceptions to appropriate HTTP status codes
    - Log and convert other exceptions to 500 HTTPException

    Usage:
        @router.get("/api/traces/example")
        @api_route(logger)
        async def my_endpoint():
            # ... business logic ...
            return result
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except ValidationException as e:
                logger.warning("Validation error in %s: %s", func.__name__, e.message)
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=e.message,
                ) from e
            except ResourceNotFoundException as e:
                logger.info("Resource not found in %s: %s", func.__name__, e.message)
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=e.message,
                ) from e
            except AuthenticationException as e:
                logger.warning(
                    "Authentication failed in %s: %s",
                    func.__name__,
                    e.message,
                )
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail=e.message,
                    headers={"WWW-Authenticate": "Bearer"},
                ) from e
            except PersistenceConflictException as e:
                logger.exception(
                    "Write conflict not resolved in %s: %s",
                    func.__name__,
                    e.message,
                )
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail=e.message,
                ) from e
            except IngestionTimeoutException as e:
                logger.warning("Timed out in %s: %s", func.__name__, e.message)
                raise HTTPException(
                    status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                    detail=e.message,
                ) from e
            except ExternalServiceException as e:
                logger.exception(
                    "External service error in %s: %s",
                    func.__name__,
                    e.message,
                )
                raise HTTPException(
                    status_code=status.HTTP_502_BAD_GATEWAY,
                    detail=f"External service error: {e.message}",
                ) from e
            except FootprintException as e:
                logger.exception(
                    "Application error in %s: %s",
                    func.__name__,
                    e.message,
                )
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=e.message,
                ) from e
            except Exception as e:
                logger.exception("Unexpected error in %s", func.__name__)
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=str(e),
                ) from e

        return wrapper

    return decorator


def format_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic error entries into a field-level list."""
    formatted: list[dict[str, str]] = []
    for error in errors:
        loc = [
            str(part) for part in error.get("loc", ()) if part not in _REQUEST_LOCATIONS
        ]
        formatted.append(
            {
                "field": ".".join(loc) or "request",
                "message": str(error.get("msg", "Invalid value")),
                "type": str(error.get("type", "value_error")),
            },
        )
    return formatted


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    errors = format_validation_errors(list(exc.errors()))
    logging.getLogger(__name__).info(
        "Rejected %s %s: %d invalid field(s)",
        request.method,
        request.url.path,
        len(errors),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "status": "error",
            "message": "Validation failed",
            "errors": errors,
        },
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Register the shared request-validation handler on an app."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
