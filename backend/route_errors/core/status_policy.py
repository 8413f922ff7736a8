from enum import Enum
from http import HTTPStatus
from types import MappingProxyType
from typing import Mapping


FALLBACK_MESSAGE = "An unexpected error occurred"

STATUS_MESSAGES: Mapping[int, str] = MappingProxyType(
    {
        400: "The request was invalid",
        401: "Authentication is required",
        403: "You do not have permission to perform this action",
        404: "The resource was not found",
        409: "A conflict occurred",
        422: "The request could not be processed",
        500: FALLBACK_MESSAGE,
    }
)


class FaultKind(str, Enum):
    client = "client"
    server = "server"
    custom = "custom"


_CLIENT_FAULT_STATUSES = frozenset({400, 401, 403, 404, 409, 422})


def default_message(status_code: int) -> str:
    """Public message for a status; unknown statuses get the generic 500 text."""
    return STATUS_MESSAGES.get(status_code, FALLBACK_MESSAGE)


def fault_kind(status_code: int) -> FaultKind:
    if status_code in _CLIENT_FAULT_STATUSES:
        return FaultKind.client
    if status_code >= 500:
        return FaultKind.server
    return FaultKind.custom


def ensure_status_code(status_code: int) -> int:
    """Return ``status_code`` as a plain int, rejecting unregistered codes."""
    try:
        return int(HTTPStatus(status_code))
    except ValueError:
        raise ValueError(f"{status_code!r} is not a registered HTTP status code")
