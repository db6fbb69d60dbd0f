import pickle

import pytest

from svcutils.exceptions import (
    ERRORS_KEY,
    ApiException,
    BadRequestException,
    ConflictException,
    NotFoundException,
    ServerErrorException,
)
from svcutils.schemas.error import ErrorMessage


def test_message_becomes_single_error_with_status_code() -> None:
    exc = ApiException("Order 7 not found", 404)

    assert exc.status_code == 404
    assert exc.errors == (ErrorMessage(message="Order 7 not found", code=404),)
    assert exc.message == "Order 7 not found"
    assert str(exc) == "Order 7 not found"


def test_no_message_gives_empty_errors() -> None:
    exc = ApiException(None, 502)

    assert exc.errors == ()
    assert exc.message is None
    assert str(exc) == ""
    assert exc.other_data == {}


def test_default_status_is_500() -> None:
    assert ApiException("boom").status_code == 500


def test_errors_keep_order_and_first_is_primary() -> None:
    errors = [ErrorMessage(message="first"), ErrorMessage(message="second")]

    exc = ApiException(status_code=400, errors=errors)

    assert exc.messages == ["first", "second"]
    assert exc.message == "first"


def test_other_data_is_copied_and_read_only() -> None:
    source = {"traceId": "abc"}
    exc = ApiException("bad", 400, other_data=source)
    source["traceId"] = "changed"

    assert exc.other_data == {"traceId": "abc"}
    with pytest.raises(TypeError):
        exc.other_data["traceId"] = "x"  # type: ignore[index]


def test_other_data_never_holds_errors_key() -> None:
    exc = ApiException("bad", 400, other_data={ERRORS_KEY: ["x"], "traceId": "abc"})

    assert exc.other_data == {"traceId": "abc"}


def test_attributes_are_read_only() -> None:
    exc = ApiException("bad", 400)

    with pytest.raises(AttributeError):
        exc.status_code = 200  # type: ignore[misc]


@pytest.mark.parametrize(
    ("exception_type", "status_code"),
    [
        (BadRequestException, 400),
        (NotFoundException, 404),
        (ConflictException, 409),
        (ServerErrorException, 500),
    ],
)
def test_subclasses_use_fixed_status(
    exception_type: type[ApiException], status_code: int
) -> None:
    exc = exception_type("something happened", other_data={"traceId": "t"})

    assert isinstance(exc, ApiException)
    assert exc.status_code == status_code
    assert exc.errors == (ErrorMessage(message="something happened", code=status_code),)
    assert exc.other_data == {"traceId": "t"}


def test_pickle_round_trip_keeps_state() -> None:
    exc = ApiException(
        status_code=409,
        errors=[ErrorMessage(message="dup", code="DUPLICATE"), ErrorMessage(message="second")],
        other_data={"traceId": "t"},
    )

    restored = pickle.loads(pickle.dumps(exc))

    assert type(restored) is ApiException
    assert restored.status_code == 409
    assert restored.errors == exc.errors
    assert restored.other_data == {"traceId": "t"}
    assert str(restored) == "dup"


def test_pickle_round_trip_keeps_subclass() -> None:
    exc = NotFoundException("Order 7 not found", other_data={"traceId": "t"})

    restored = pickle.loads(pickle.dumps(exc))

    assert type(restored) is NotFoundException
    assert restored.status_code == 404
    assert restored.errors == (ErrorMessage(message="Order 7 not found", code=404),)
    assert restored.other_data == {"traceId": "t"}
    with pytest.raises(TypeError):
        restored.other_data["traceId"] = "x"  # type: ignore[index]
