"""Conversion between ApiException and JSON error responses.

Encoding turns an exception into a FastAPI ``JSONResponse`` whose body is the
exception's other data plus {"errors": [...]}. Decoding goes the other way for
responses received with httpx and never raises: a body that cannot be read or
understood yields a less detailed, but still valid, ApiException.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter, ValidationError

from svcutils.config import settings
from svcutils.exceptions import ERRORS_KEY, ApiException, without_keys
from svcutils.logging import get_logger
from svcutils.schemas.error import ErrorMessage

logger = get_logger(__name__)

_ENTITY_ADAPTER: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])


@dataclass(frozen=True, slots=True)
class _Failure:
    """Error outcome of a decode step; the caller picks the fallback."""

    error: Exception


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------
def build_response_entity(exception: ApiException) -> dict[str, Any]:
    """Build the response body for ``exception`` as a dict.

    Other data comes first, then the reserved "errors" key. The error list
    always wins if other data happens to use the same key.
    """
    entity: dict[str, Any] = dict(exception.other_data)
    entity[ERRORS_KEY] = list(exception.errors)
    return entity


def build_response(exception: ApiException) -> JSONResponse:
    """Render ``exception`` as an ``application/json`` response with its status."""
    content = {
        key: (
            [error.to_dict() for error in value]
            if key == ERRORS_KEY
            else jsonable_encoder(value)
        )
        for key, value in build_response_entity(exception).items()
    }
    return JSONResponse(status_code=exception.status_code, content=content)


async def api_exception_handler(request: Request, exc: ApiException) -> JSONResponse:
    """Return the JSON error response for ApiException and its subclasses.

    Client errors (4xx) are logged at info, server errors (5xx) at warning.
    """
    log = logger.warning if exc.status_code >= 500 else logger.info
    log(
        "api_exception",
        status=exc.status_code,
        error=exc.message,
        path=request.url.path,
        method=request.method,
    )
    return build_response(exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the ApiException handler on ``app``.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(ApiException, api_exception_handler)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------
def to_api_exception(response: httpx.Response | None) -> ApiException | None:
    """Rebuild an ApiException from an error response received with httpx.

    Reads the body once. Returns ``None`` only when ``response`` is ``None``.
    Fallbacks, from most to least detailed:

    - JSON object body: errors and other data taken from the object
      (see ``entity_to_api_exception``)
    - non-JSON body: the raw text is the single error message
    - no body, or a blank one: the status reason phrase is the single message
    - unreadable body: no error messages at all, only the status
    """
    if response is None:
        return None
    return _from_read_result(response, _read_text(response))


async def to_api_exception_async(response: httpx.Response | None) -> ApiException | None:
    """Same as ``to_api_exception`` for responses from an ``httpx.AsyncClient``."""
    if response is None:
        return None
    return _from_read_result(response, await _aread_text(response))


def entity_to_api_exception(status: int, entity: Mapping[Any, Any] | None) -> ApiException:
    """Rebuild an ApiException from a status code and a decoded response body.

    Entries of the list under "errors" that are ErrorMessage objects are kept
    as is, mappings are converted with ``ErrorMessage.from_mapping``, anything
    else is dropped. Every other entry becomes other data. A body without an
    "errors" key gives an exception with no error messages, keeping the body as
    other data. An "errors" value that is not a list gives an exception with
    only the status.
    """
    if not entity or ERRORS_KEY not in entity:
        return ApiException(None, status, other_data=entity)

    match _extract_error_messages(entity[ERRORS_KEY]):
        case _Failure(error=error):
            logger.warning(
                "error_entity_not_convertible",
                status=status,
                error=str(error),
                entity=_truncate(repr(entity)),
            )
            return ApiException(None, status)
        case errors:
            return ApiException(
                status_code=status,
                errors=errors,
                other_data=without_keys(entity, ERRORS_KEY),
            )


def _from_read_result(response: httpx.Response, result: str | _Failure) -> ApiException:
    status = response.status_code
    match result:
        case _Failure(error=error):
            logger.warning(
                "error_entity_unreadable",
                status=status,
                error=repr(error),
            )
            return ApiException(None, status)
        case "":
            return ApiException(response.reason_phrase or None, status)
        case str() as text if not text.strip():
            logger.warning("error_entity_blank", status=status)
            return ApiException(response.reason_phrase or None, status)
        case str() as text:
            return _from_entity_text(status, text)


def _from_entity_text(status: int, text: str) -> ApiException:
    match _parse_entity(text):
        case _Failure(error=error):
            logger.warning(
                "error_entity_not_json",
                status=status,
                error=str(error),
                entity=_truncate(text),
            )
            return ApiException(text, status)
        case entity:
            return entity_to_api_exception(status, entity)


def _read_text(response: httpx.Response) -> str | _Failure:
    try:
        response.read()
    except (httpx.HTTPError, RuntimeError) as e:
        # httpx stream errors (consumed, closed, async stream) are RuntimeErrors
        if isinstance(response.stream, httpx.SyncByteStream) and not response.is_closed:
            response.close()
        return _Failure(e)
    return response.text


async def _aread_text(response: httpx.Response) -> str | _Failure:
    try:
        await response.aread()
    except (httpx.HTTPError, RuntimeError) as e:
        if isinstance(response.stream, httpx.AsyncByteStream) and not response.is_closed:
            await response.aclose()
        return _Failure(e)
    return response.text


def _parse_entity(text: str) -> dict[str, Any] | _Failure:
    try:
        return _ENTITY_ADAPTER.validate_json(text)
    except ValidationError as e:
        return _Failure(e)


def _extract_error_messages(value: Any) -> tuple[ErrorMessage, ...] | _Failure:
    match value:
        case list() | tuple():
            converted = (_to_error_message(element) for element in value)
            return tuple(message for message in converted if message is not None)
        case _:
            return _Failure(
                TypeError(f"{ERRORS_KEY!r} must be a list, got {type(value).__name__}")
            )


def _to_error_message(element: Any) -> ErrorMessage | None:
    match element:
        case ErrorMessage():
            return element
        case Mapping():
            try:
                return ErrorMessage.from_mapping(element)
            except ValidationError:
                return None
        case _:
            return None


def _truncate(text: str) -> str:
    limit = settings.error_entity_log_limit
    return text if len(text) <= limit else f"{text[:limit]}..."
