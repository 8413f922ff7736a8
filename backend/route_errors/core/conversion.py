from http import HTTPStatus
from typing import Any, Callable, Dict, List, Optional, Type

from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from route_errors.core.errors import RouteError, RouteInternalError


Converter = Callable[[Any], RouteError]


class FailureConversions:
    """
    Registry turning arbitrary failures into RouteError values.

    Lookup order for a failure:
    1. a RouteError is returned as-is
    2. the converter registered for the nearest class in the failure's MRO
    3. a ``to_route_error()`` method on the failure
    4. ``RouteError.internal_server()``

    Conversion never raises and never logs. A converter that raises, or
    returns anything other than a RouteError, falls back to step 4.
    """

    def __init__(self) -> None:
        self._converters: Dict[type, Converter] = {}

    def register(self, exc_type: Type[BaseException], converter: Optional[Converter] = None):
        if converter is None:
            def decorator(func: Converter) -> Converter:
                self._converters[exc_type] = func
                return func

            return decorator
        self._converters[exc_type] = converter
        return converter

    def converter_for(self, exc_type: type) -> Optional[Converter]:
        for klass in exc_type.__mro__:
            converter = self._converters.get(klass)
            if converter is not None:
                return converter
        return None

    def registered_types(self) -> List[type]:
        return list(self._converters)

    def _convert(self, failure: Any) -> Optional[RouteError]:
        converter = self.converter_for(type(failure))
        if converter is not None:
            return converter(failure)
        hook = getattr(failure, "to_route_error", None)
        if callable(hook):
            return hook()
        return None

    def from_failure(self, failure: Any) -> RouteError:
        if isinstance(failure, RouteError):
            return failure
        try:
            error = self._convert(failure)
        except Exception:
            error = None
        if not isinstance(error, RouteError):
            error = RouteError.internal_server()
        if error.source is None and isinstance(failure, BaseException):
            error = error.with_source(failure)
        return error

    def internal_from_failure(self, failure: Any) -> RouteInternalError:
        return RouteInternalError.from_route_error(self.from_failure(failure))


conversions = FailureConversions()


def from_failure(failure: Any) -> RouteError:
    return conversions.from_failure(failure)


def internal_from_failure(failure: Any) -> RouteInternalError:
    return conversions.internal_from_failure(failure)


def _sanitize_validation_detail(detail: Any) -> Any:
    """
    Ensure validation detail is JSON-serializable.
    Pydantic may include an Exception instance in ctx.error; convert to str.
    """
    if isinstance(detail, list):
        sanitized = []
        for item in detail:
            if isinstance(item, dict):
                ctx = item.get("ctx")
                if isinstance(ctx, dict) and "error" in ctx and isinstance(ctx["error"], BaseException):
                    new_item = dict(item)
                    new_ctx = dict(ctx)
                    new_ctx["error"] = str(ctx["error"])
                    new_item["ctx"] = new_ctx
                    sanitized.append(new_item)
                    continue
            sanitized.append(item)
        return sanitized
    return detail


@conversions.register(StarletteHTTPException)
def _from_http_exception(exc: StarletteHTTPException) -> RouteError:
    error = RouteError.for_status(exc.status_code)
    detail = exc.detail
    if isinstance(detail, str):
        # Starlette fills in the reason phrase when no detail was given
        if detail and detail != HTTPStatus(exc.status_code).phrase:
            error = error.with_message(detail)
    elif detail is not None:
        error = error.with_data({"detail": detail})
    if exc.headers:
        error = error.with_headers(exc.headers)
    return error


@conversions.register(RequestValidationError)
def _from_validation_error(exc: RequestValidationError) -> RouteError:
    issues = _sanitize_validation_detail(list(exc.errors()))
    return RouteError.unprocessable().with_data({"issues": issues})
