"""API exceptions raised by services and rendered as JSON error responses.

An ApiException carries an HTTP status, an ordered list of ErrorMessage
objects (the first one is the primary error) and optional extra top-level
fields ("other data") such as a trace id. ``svcutils.mapper`` converts
between these exceptions and {"errors": [...], ...} response bodies.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from svcutils.schemas.error import ErrorMessage

# Reserved top-level key holding the error list in a response body.
ERRORS_KEY = "errors"


def without_keys(data: Mapping[Any, Any] | None, *keys: object) -> dict[str, Any]:
    """Return a new dict with ``keys`` and any ``None`` key left out."""
    if not data:
        return {}
    excluded = {None, *keys}
    return {key: value for key, value in data.items() if key not in excluded}


class ApiException(Exception):
    """Failure to be reported to an API caller.

    Build it either from a single message, which becomes one ErrorMessage
    whose code is the status::

        raise ApiException("Order 7 is already shipped", 409)

    or from a prepared list of errors plus extra data::

        raise ApiException(
            status_code=422,
            errors=[ErrorMessage(message="must be positive", field_name="quantity")],
            other_data={"traceId": trace_id},
        )

    A ``None`` message with no ``errors`` gives an exception with an empty
    error list. All attributes are read-only.
    """

    def __init__(
        self,
        message: str | None = None,
        status_code: int = 500,
        *,
        errors: Iterable[ErrorMessage] | None = None,
        other_data: Mapping[str, Any] | None = None,
    ) -> None:
        if errors is not None:
            self._errors = tuple(errors)
        elif message is not None:
            self._errors = (ErrorMessage(message=message, code=status_code),)
        else:
            self._errors = ()
        self._status_code = status_code
        self._other_data = MappingProxyType(without_keys(other_data, ERRORS_KEY))
        super().__init__(self.message or "")

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def errors(self) -> tuple[ErrorMessage, ...]:
        return self._errors

    @property
    def other_data(self) -> Mapping[str, Any]:
        return self._other_data

    @property
    def message(self) -> str | None:
        """Message of the primary (first) error, if there is one."""
        return self._errors[0].message if self._errors else None

    @property
    def messages(self) -> list[str | None]:
        return [error.message for error in self._errors]

    def __reduce__(self) -> tuple[Any, ...]:
        # Subclass constructors differ, so rebuild through ApiException.__init__.
        return (
            _rebuild_api_exception,
            (type(self), self._status_code, self._errors, dict(self._other_data)),
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self._status_code}, "
            f"errors={list(self._errors)!r}, other_data={dict(self._other_data)!r})"
        )


def _rebuild_api_exception(
    cls: type[ApiException],
    status_code: int,
    errors: tuple[ErrorMessage, ...],
    other_data: dict[str, Any],
) -> ApiException:
    exc = cls.__new__(cls)
    ApiException.__init__(exc, None, status_code, errors=errors, other_data=other_data)
    return exc


class BadRequestException(ApiException):
    """Raised when the request itself is invalid (400)."""

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: Iterable[ErrorMessage] | None = None,
        other_data: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message, 400, errors=errors, other_data=other_data)


class NotFoundException(ApiException):
    """Raised when a requested entity does not exist (404)."""

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: Iterable[ErrorMessage] | None = None,
        other_data: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message, 404, errors=errors, other_data=other_data)


class ConflictException(ApiException):
    """Raised when an operation conflicts with existing state, e.g. a duplicate (409)."""

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: Iterable[ErrorMessage] | None = None,
        other_data: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message, 409, errors=errors, other_data=other_data)


class ServerErrorException(ApiException):
    """Raised for unexpected server-side failures (500)."""

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: Iterable[ErrorMessage] | None = None,
        other_data: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message, 500, errors=errors, other_data=other_data)
