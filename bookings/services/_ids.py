"""Parsing of identifiers arriving as strings."""

from typing import TypeVar

from bookings.domain.errors import InvalidIdError

T = TypeVar("T")


def parse_id(id_type: type[T], value: str, kind: str) -> T:
    """Parse ``value`` with ``id_type.from_string``.

    Raises:
        InvalidIdError: If ``value`` is not a valid UUID.
    """
    try:
        return id_type.from_string(value)
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdError(kind) from None
