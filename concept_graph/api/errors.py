"""
Centralized exception handling for API endpoints.

Provides handlers for graph-domain errors, validation errors and runtime
exceptions, ensuring consistent error responses across all endpoints using
the unified APIError schema.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from concept_graph.graph.errors import (
    ConceptInUseError,
    GraphError,
    InvalidInputError,
    PairInUseError,
    ReferenceNotFoundError,
)
from concept_graph.models.errors import (
    APIError,
    ErrorCode,
    concept_in_use_error,
    internal_error,
    invalid_input_error,
    pair_in_use_error,
    reference_not_found_error,
    service_unavailable_error,
    validation_error,
)

logger = logging.getLogger(__name__)


def graph_error_response(exc: GraphError) -> tuple[int, APIError]:
    """
    Map a graph-domain exception to an HTTP status and APIError.

    Args:
        exc: The domain exception

    Returns:
        Tuple of (status_code, api_error)
    """
    if isinstance(exc, ReferenceNotFoundError):
        return 404, reference_not_found_error(exc.message, detail=exc.detail)
    if isinstance(exc, PairInUseError):
        return 409, pair_in_use_error(detail=exc.detail)
    if isinstance(exc, ConceptInUseError):
        return 409, concept_in_use_error(detail=exc.detail)
    if isinstance(exc, InvalidInputError):
        return 400, invalid_input_error(exc.message, detail=exc.detail)
    return 400, APIError(
        code=ErrorCode.INVALID_INPUT, message=exc.message, detail=exc.detail
    )


async def graph_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Render a GraphError raised by a service as an APIError response.

    Args:
        request: The incoming HTTP request
        exc: The graph exception (must be GraphError)

    Returns:
        JSONResponse with the mapped status code
    """
    if not isinstance(exc, GraphError):
        raise exc

    status_code, api_error = graph_error_response(exc)
    logger.warning(
        f"{request.method} {request.url.path}: {api_error.code.value} - {exc.message}"
    )
    return JSONResponse(status_code=status_code, content=api_error.to_dict())


async def validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """
    Return 422 with structured validation error details using APIError schema.

    Args:
        request: The incoming HTTP request
        exc: The validation exception (must be RequestValidationError)

    Returns:
        JSONResponse with validation error details
    """
    if not isinstance(exc, RequestValidationError):
        raise exc

    # Report the first error for a consistent response
    errors = exc.errors()
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        message = first_error["msg"]

        api_error = validation_error(field=field, reason=message)
        return JSONResponse(status_code=422, content=api_error.to_dict())

    api_error = APIError(
        code=ErrorCode.VALIDATION_ERROR,
        message="Validation failed",
        hint="Check the request format and try again",
    )
    return JSONResponse(status_code=422, content=api_error.to_dict())


async def unhandled_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """
    Last-resort handler: log the traceback, return a safe 500.

    Args:
        request: The incoming HTTP request
        exc: Any exception not handled elsewhere

    Returns:
        JSONResponse with an INTERNAL_ERROR body
    """
    http_exc = handle_endpoint_error(exc, f"{request.method} {request.url.path}")
    return JSONResponse(status_code=http_exc.status_code, content=http_exc.detail)


def handle_endpoint_error(e: Exception, context: str) -> HTTPException:
    """
    Convert exceptions to safe HTTP responses with structured error details.

    Logs full error details server-side but returns safe messages to clients
    using the APIError schema to prevent information leakage.

    Args:
        e: The exception that occurred
        context: Description of the endpoint context for logging

    Returns:
        HTTPException with appropriate status code and APIError-formatted detail
    """
    # Pass through existing HTTPExceptions unchanged
    if isinstance(e, HTTPException):
        return e

    api_error: APIError

    if isinstance(e, GraphError):
        status_code, api_error = graph_error_response(e)
        logger.warning(f"{context}: {api_error.code.value} - {e.message}")
        return HTTPException(status_code=status_code, detail=api_error.to_dict())

    if isinstance(e, RuntimeError) and "not initialized" in str(e).lower():
        logger.warning(f"{context}: Services unavailable - {e}")
        api_error = service_unavailable_error(detail=str(e))
        return HTTPException(status_code=503, detail=api_error.to_dict())

    # Log full error details but don't expose to client
    logger.error(f"{context}: {type(e).__name__}: {e}", exc_info=e)
    api_error = internal_error(detail=type(e).__name__)
    return HTTPException(status_code=500, detail=api_error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers on the FastAPI app.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(GraphError, graph_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
