from typing import Any, Dict, Generic, Mapping, Optional, TypeVar

from route_errors.core.status_policy import (
    FaultKind,
    default_message,
    ensure_status_code,
    fault_kind,
)


D = TypeVar("D")
I = TypeVar("I")
NewD = TypeVar("NewD")
NewI = TypeVar("NewI")


def _rebuild(cls, fields):
    return cls(**fields)


class PayloadShapeError(TypeError):
    """Raised when an error payload does not serialize to a JSON object."""
    pass


class RouteError(Exception, Generic[D]):
    """
    Canonical error returned to API callers.

    Rendered as ``{"error": <public message>, ...<data fields>}`` with
    ``status_code`` as the HTTP status. Most handlers only need one of the
    named constructors:

    - ``RouteError.not_found()``
    - ``RouteError.bad_request()``
    - ``RouteError.unauthorized()``
    - ``RouteError.internal_server()``

    Setters never mutate; each returns a new error so calls can be chained:
    ``RouteError.not_found().with_data(UserLookup(username="alice"))``.
    """

    def __init__(
        self,
        status_code: int = 500,
        *,
        message: Optional[str] = None,
        data: Optional[D] = None,
        source: Optional[BaseException] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._status_code = ensure_status_code(status_code)
        self._message = message
        self._data = data
        self._source = source
        self._headers = dict(headers) if headers else None
        super().__init__(self.public_message)

    @classmethod
    def for_status(cls, status_code: int) -> "RouteError[Any]":
        return cls(status_code)

    @classmethod
    def bad_request(cls) -> "RouteError[Any]":
        return cls.for_status(400)

    @classmethod
    def unauthorized(cls) -> "RouteError[Any]":
        return cls.for_status(401)

    @classmethod
    def forbidden(cls) -> "RouteError[Any]":
        return cls.for_status(403)

    @classmethod
    def not_found(cls) -> "RouteError[Any]":
        return cls.for_status(404)

    @classmethod
    def conflict(cls) -> "RouteError[Any]":
        return cls.for_status(409)

    @classmethod
    def unprocessable(cls) -> "RouteError[Any]":
        return cls.for_status(422)

    @classmethod
    def internal_server(cls) -> "RouteError[Any]":
        return cls.for_status(500)

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def message(self) -> Optional[str]:
        """The explicit message override, if one was set."""
        return self._message

    @property
    def public_message(self) -> str:
        """The message shown to the end user."""
        # An empty override would leave the client without a message
        if self._message:
            return self._message
        return default_message(self._status_code)

    @property
    def data(self) -> Optional[D]:
        return self._data

    @property
    def source(self) -> Optional[BaseException]:
        """The failure this error was built from. Never rendered publicly."""
        return self._source

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        """Extra response headers, e.g. ``Allow`` on a 405."""
        return self._headers

    @property
    def kind(self) -> FaultKind:
        return fault_kind(self._status_code)

    def _fields(self) -> Dict[str, Any]:
        return {
            "status_code": self._status_code,
            "message": self._message,
            "data": self._data,
            "source": self._source,
            "headers": self._headers,
        }

    def _replace(self, **changes: Any) -> Any:
        fields = self._fields()
        fields.update(changes)
        return type(self)(**fields)

    def with_status(self, status_code: int) -> "RouteError[D]":
        return self._replace(status_code=status_code)

    def with_message(self, message: str) -> "RouteError[D]":
        """
        Override the public message.

        Without an override the message is derived from the status code.
        """
        return self._replace(message=message)

    def with_data(self, data: NewD) -> "RouteError[NewD]":
        """
        Attach extra data whose fields are merged into the response body.

        The data must serialize to a JSON object (pydantic model, dataclass
        or mapping).
        """
        return self._replace(data=data)

    def with_source(self, source: BaseException) -> "RouteError[D]":
        return self._replace(source=source)

    def with_headers(self, headers: Mapping[str, str]) -> "RouteError[D]":
        return self._replace(headers=headers)

    def __reduce__(self):
        # Exception.__reduce__ would rebuild from args, which only hold the message
        return (_rebuild, (type(self), self._fields()))

    def __str__(self) -> str:
        return self.public_message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self._status_code}, "
            f"message={self.public_message!r}, source={self._source!r})"
        )


class RouteInternalError(RouteError[D], Generic[D, I]):
    """
    Error that exposes implementation detail under ``internal_error``.

    Only for trusted, internal-facing endpoints. When no internal data is
    attached, the source failure is described instead.
    """

    def __init__(
        self,
        status_code: int = 500,
        *,
        message: Optional[str] = None,
        data: Optional[D] = None,
        source: Optional[BaseException] = None,
        headers: Optional[Mapping[str, str]] = None,
        internal: Optional[I] = None,
    ) -> None:
        self._internal = internal
        super().__init__(status_code, message=message, data=data, source=source, headers=headers)

    @classmethod
    def from_route_error(cls, error: RouteError[Any]) -> "RouteInternalError[Any, Any]":
        if isinstance(error, cls):
            return error
        return cls(**RouteError._fields(error))

    @property
    def internal(self) -> Optional[I]:
        return self._internal

    def _fields(self) -> Dict[str, Any]:
        fields = super()._fields()
        fields["internal"] = self._internal
        return fields

    def with_internal_data(self, internal: NewI) -> "RouteInternalError[D, NewI]":
        return self._replace(internal=internal)
