"""Null-coalescing helpers."""

from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


def first_non_null(first: T | None, second: T | None, *rest: T | None) -> T | None:
    """Return the first argument that is not ``None``, or ``None`` if all are.

    Falsy values such as ``0`` or ``""`` count as present::

        first_non_null(None, 0, 5)  # -> 0
    """
    if first is not None:
        return first
    if second is not None:
        return second
    return next((value for value in rest if value is not None), None)


def first_supplied_non_null(
    first: Callable[[], T | None],
    second: Callable[[], T | None],
    *rest: Callable[[], T | None],
) -> T | None:
    """Call the suppliers left to right and return the first non-``None`` result.

    Suppliers after the first hit are never called, so expensive lookups can be
    chained::

        first_supplied_non_null(lambda: cache.get(key), lambda: db.load(key))
    """
    for supplier in (first, second, *rest):
        value = supplier()
        if value is not None:
            return value
    return None
