from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from route_errors.core.conversion import FailureConversions, conversions
from route_errors.core.errors import PayloadShapeError, RouteError
from route_errors.core.logging import logger
from route_errors.core.rendering import to_response
from route_errors.core.status_policy import FaultKind


def _log_error(request: Request, error: RouteError, exc_info: bool = False) -> None:
    source: Optional[BaseException] = error.source
    if error.kind is FaultKind.server:
        logger.error(
            "RouteError-5xx: %s %s status=%s kind=%s source=%r",
            request.method,
            request.url.path,
            error.status_code,
            error.kind.value,
            source,
            exc_info=source if exc_info else None,
        )
    else:
        logger.warning(
            "RouteError: %s %s status=%s kind=%s error=%s",
            request.method,
            request.url.path,
            error.status_code,
            error.kind.value,
            error.public_message,
        )


def _respond(request: Request, error: RouteError) -> JSONResponse:
    try:
        return to_response(error)
    except PayloadShapeError:
        # Malformed payload: still answer with a renderable 500, without the payload
        logger.error(
            "Error payload could not be rendered: %s %s status=%s payload=%s",
            request.method,
            request.url.path,
            error.status_code,
            type(error.data).__name__,
            exc_info=True,
        )
        return to_response(RouteError.internal_server())


def make_handlers(registry: FailureConversions):
    async def route_error_handler(request: Request, exc: RouteError) -> JSONResponse:
        _log_error(request, exc)
        return _respond(request, exc)

    async def failure_handler(request: Request, exc: Exception) -> JSONResponse:
        error = registry.from_failure(exc)
        # Error log with stack trace for 5xx
        _log_error(request, error, exc_info=True)
        return _respond(request, error)

    return route_error_handler, failure_handler


def install_error_handlers(app: FastAPI, registry: FailureConversions = conversions) -> None:
    """
    Route every failure raised by the app through the conversion registry.

    Types registered on the registry are handled inside the exception
    middleware. Anything else reaches the catch-all ``Exception`` handler,
    which still converts it but also lets the server log it as unhandled.
    """
    route_error_handler, failure_handler = make_handlers(registry)

    app.add_exception_handler(RouteError, route_error_handler)
    for exc_type in registry.registered_types():
        app.add_exception_handler(exc_type, failure_handler)
    app.add_exception_handler(Exception, failure_handler)
