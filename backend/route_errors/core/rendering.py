import json
from typing import Any, Dict, Mapping, NamedTuple, Optional

from fastapi.responses import JSONResponse
from pydantic_core import PydanticSerializationError, to_jsonable_python

from route_errors.core.errors import PayloadShapeError, RouteError, RouteInternalError
from route_errors.schemas.errors import InternalErrorDetail


ERROR_KEY = "error"
INTERNAL_ERROR_KEY = "internal_error"
RESERVED_KEYS = (ERROR_KEY, INTERNAL_ERROR_KEY)


class RenderedError(NamedTuple):
    status_code: int
    body: Dict[str, Any]


def payload_fields(payload: Any) -> Dict[str, Any]:
    """
    Serialize an error payload into a JSON-ready field mapping.

    Raises PayloadShapeError when the payload is not serializable, does not
    serialize to an object (e.g. a bare string or a list) or holds values
    JSON cannot represent, such as NaN.
    """
    if payload is None:
        return {}
    if isinstance(payload, Mapping):
        payload = dict(payload)
    try:
        fields = to_jsonable_python(payload)
    except PydanticSerializationError as exc:
        raise PayloadShapeError(f"Cannot serialize {type(payload).__name__} payload") from exc
    if not isinstance(fields, dict):
        raise PayloadShapeError(
            f"{type(payload).__name__} payload must serialize to an object, "
            f"got {type(fields).__name__}"
        )
    try:
        # Same check JSONResponse applies when rendering the body
        json.dumps(fields, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise PayloadShapeError(f"{type(payload).__name__} payload is not JSON compliant") from exc
    return fields


def _internal_fields(error: RouteInternalError) -> Optional[Dict[str, Any]]:
    if error.internal is not None:
        return payload_fields(error.internal)
    source = error.source
    if source is None:
        return None
    detail = InternalErrorDetail(name=str(source) or type(source).__name__, debug=repr(source))
    return detail.model_dump()


def render(error: RouteError) -> RenderedError:
    body: Dict[str, Any] = {ERROR_KEY: error.public_message}
    # Reserved keys always win over payload fields of the same name
    for key, value in payload_fields(error.data).items():
        if key not in RESERVED_KEYS:
            body[key] = value
    if isinstance(error, RouteInternalError):
        internal = _internal_fields(error)
        if internal is not None:
            body[INTERNAL_ERROR_KEY] = internal
    return RenderedError(status_code=error.status_code, body=body)


def to_response(error: RouteError) -> JSONResponse:
    rendered = render(error)
    return JSONResponse(
        status_code=rendered.status_code,
        content=rendered.body,
        headers=error.headers,
        media_type="application/json",
    )
