"""Domain error codes for the bookings module."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_ID = "INVALID_ID"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_REFERENCE = "INVALID_REFERENCE"
    INVALID_ISSUE_RANGE = "INVALID_ISSUE_RANGE"
    ISSUE_CLOSED = "ISSUE_CLOSED"
    CLOSE_DATE_LOCKED = "CLOSE_DATE_LOCKED"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    SCHEDULE_NOT_FOUND = "SCHEDULE_NOT_FOUND"
    MAGAZINE_NOT_FOUND = "MAGAZINE_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
    LEAFLET_DELIVERY_NOT_FOUND = "LEAFLET_DELIVERY_NOT_FOUND"
    NO_CURRENT_ISSUE = "NO_CURRENT_ISSUE"
    CONTENT_SIZE_NOT_FOUND = "CONTENT_SIZE_NOT_FOUND"
    PRICE_NOT_FOUND = "PRICE_NOT_FOUND"
    NO_SCHEDULE = "NO_SCHEDULE"
    RECORD_IN_USE = "RECORD_IN_USE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} ID format",
        )
        self.kind = kind


class InvalidInputError(DomainError):
    """Raised when a numeric operand falls outside its declared domain."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_INPUT,
            message=f"{field} {reason}",
        )
        self.field = field


class InvalidReferenceError(DomainError):
    """Raised when a payload references an entity the operator does not own."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_REFERENCE,
            message=f"{kind} not found",
        )
        self.kind = kind


class InvalidIssueRangeError(DomainError):
    """Raised when a finish issue is scheduled before the start issue."""

    def __init__(self, start_issue: str, finish_issue: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ISSUE_RANGE,
            message=f"Finish issue {finish_issue} comes before start issue {start_issue}",
        )
        self.start_issue = start_issue
        self.finish_issue = finish_issue


class IssueClosedError(DomainError):
    """Raised by services when a booking references a closed issue."""

    def __init__(
        self,
        issue_name: str,
        message: str,
        schedule_name: str | None,
        close_date: datetime | None,
    ) -> None:
        super().__init__(code=ErrorCode.ISSUE_CLOSED, message=message)
        self.issue_name = issue_name
        self.schedule_name = schedule_name
        self.close_date = close_date


class CloseDateLockedError(DomainError):
    """Raised when the close date of an already closed issue is changed."""

    def __init__(self, issue_name: str) -> None:
        super().__init__(
            code=ErrorCode.CLOSE_DATE_LOCKED,
            message=f"Cannot modify close date for {issue_name} as it has already passed",
        )
        self.issue_name = issue_name


class DuplicateNameError(DomainError):
    """Raised when a name is already taken within the operator's data."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_NAME,
            message=f"A {kind} with this name already exists",
        )
        self.name = name


class ScheduleNotFoundError(DomainError):
    """Raised when a schedule is not found."""

    def __init__(self, schedule_id: str) -> None:
        super().__init__(
            code=ErrorCode.SCHEDULE_NOT_FOUND,
            message="Schedule not found",
        )
        self.schedule_id = schedule_id


class MagazineNotFoundError(DomainError):
    """Raised when a magazine is not found."""

    def __init__(self, magazine_id: str) -> None:
        super().__init__(
            code=ErrorCode.MAGAZINE_NOT_FOUND,
            message="Magazine not found",
        )
        self.magazine_id = magazine_id


class CustomerNotFoundError(DomainError):
    """Raised when a customer is not found."""

    def __init__(self, customer_id: str) -> None:
        super().__init__(
            code=ErrorCode.CUSTOMER_NOT_FOUND,
            message="Customer not found",
        )
        self.customer_id = customer_id


class BookingNotFoundError(DomainError):
    """Raised when a booking is not found."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_NOT_FOUND,
            message="Booking not found",
        )
        self.booking_id = booking_id


class LeafletDeliveryNotFoundError(DomainError):
    """Raised when a leaflet delivery is not found."""

    def __init__(self, delivery_id: str) -> None:
        super().__init__(
            code=ErrorCode.LEAFLET_DELIVERY_NOT_FOUND,
            message="Leaflet delivery not found",
        )
        self.delivery_id = delivery_id


class NoCurrentIssueError(DomainError):
    """Raised when a magazine's schedule has no issues to report on."""

    def __init__(self, magazine_id: str) -> None:
        super().__init__(
            code=ErrorCode.NO_CURRENT_ISSUE,
            message="No current or upcoming issue found",
        )
        self.magazine_id = magazine_id


class ContentSizeNotFoundError(DomainError):
    """Raised when a content size is not found."""

    def __init__(self, content_size_id: str) -> None:
        super().__init__(
            code=ErrorCode.CONTENT_SIZE_NOT_FOUND,
            message="Content size not found",
        )
        self.content_size_id = content_size_id


class PriceNotFoundError(DomainError):
    """Raised when a content size has no price for a magazine."""

    def __init__(self, content_size_id: str, magazine_id: str) -> None:
        super().__init__(
            code=ErrorCode.PRICE_NOT_FOUND,
            message="Price not found for this magazine",
        )
        self.content_size_id = content_size_id
        self.magazine_id = magazine_id


class NoScheduleError(DomainError):
    def __init__(self, magazine_id: str) -> None:
        super().__init__(
            code=ErrorCode.NO_SCHEDULE,
            message="Magazine has no schedule assigned",
        )
        self.magazine_id = magazine_id


class RecordInUseError(DomainError):
    """Raised when deleting a record that bookings or magazines still reference."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            code=ErrorCode.RECORD_IN_USE,
            message=f"{kind} is still in use and cannot be deleted",
        )
        self.kind = kind
