"""Canonical JSON error responses for FastAPI request handlers."""

from route_errors.core.conversion import (
    FailureConversions,
    conversions,
    from_failure,
    internal_from_failure,
)
from route_errors.core.errors import PayloadShapeError, RouteError, RouteInternalError
from route_errors.core.handlers import install_error_handlers
from route_errors.core.rendering import RenderedError, payload_fields, render, to_response
from route_errors.core.status_policy import FaultKind, default_message, fault_kind

__all__ = [
    "FailureConversions",
    "FaultKind",
    "PayloadShapeError",
    "RenderedError",
    "RouteError",
    "RouteInternalError",
    "conversions",
    "default_message",
    "fault_kind",
    "from_failure",
    "install_error_handlers",
    "internal_from_failure",
    "payload_fields",
    "render",
    "to_response",
]
