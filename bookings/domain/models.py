"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in bookings/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from bookings.domain.errors import InvalidIssueRangeError
from bookings.domain.pricing import PriceLine
from bookings.domain.value_objects import (
    BookingId,
    ContentSizeId,
    CustomerId,
    LeafletDeliveryId,
    MagazineId,
    Money,
    OperatorId,
    ScheduleId,
)

DEFAULT_TOTAL_PAGES = 40


class ContentType(str, Enum):
    """Default vocabulary of content types an entry can book."""

    ADVERT = "Advert"
    ARTICLE = "Article"
    PUZZLE = "Puzzle"
    ADVERTORIAL = "Advertorial"
    FRONT_COVER = "Front Cover"
    IN_HOUSE = "In-house"


class BookingStatus(str, Enum):
    ACTIVE = "Active"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class ScheduleIssue:
    """A single scheduled edition with the date it stops taking content."""

    name: str
    close_date: datetime
    sort_order: int


@dataclass(frozen=True)
class Schedule:
    """Domain representation of a publishing Schedule."""

    id: ScheduleId
    operator_id: OperatorId
    name: str
    issues: tuple[ScheduleIssue, ...] = ()
    archived: bool = False

    def ordered_issues(self) -> list[ScheduleIssue]:
        return sorted(self.issues, key=lambda issue: issue.sort_order)

    def issue(self, name: str) -> ScheduleIssue | None:
        """Return the issue called ``name`` (exact match), if scheduled."""
        for issue in self.ordered_issues():
            if issue.name == name:
                return issue
        return None

    def position(self, name: str) -> int | None:
        issue = self.issue(name)
        return issue.sort_order if issue is not None else None


@dataclass(frozen=True)
class IssueRange:
    """Issues a booking entry runs in.

    An ongoing range has no finish issue. Ordering is resolved through the
    governing schedule's sort order, never by comparing issue names.
    """

    start_issue: str
    finish_issue: str | None = None
    is_ongoing: bool = False

    def __post_init__(self) -> None:
        if not self.start_issue or not self.start_issue.strip():
            raise ValueError("Start issue is required")
        if self.is_ongoing or not self.finish_issue:
            object.__setattr__(self, "finish_issue", None)

    def issue_names(self) -> tuple[str, ...]:
        """Distinct issue names that must be open for this range to be booked."""
        if self.finish_issue and self.finish_issue != self.start_issue:
            return (self.start_issue, self.finish_issue)
        return (self.start_issue,)

    def validate_against(self, schedule: Schedule | None) -> None:
        """Raise InvalidIssueRangeError if the finish issue precedes the start."""
        if schedule is None or self.finish_issue is None:
            return
        start = schedule.position(self.start_issue)
        finish = schedule.position(self.finish_issue)
        if start is not None and finish is not None and finish < start:
            raise InvalidIssueRangeError(self.start_issue, self.finish_issue)

    def covers(self, issue_name: str, schedule: Schedule | None) -> bool:
        """Whether the entry runs in ``issue_name``."""
        if issue_name == self.start_issue:
            return True
        if schedule is None:
            return False
        start = schedule.position(self.start_issue)
        target = schedule.position(issue_name)
        if start is None or target is None or target < start:
            return False
        if self.is_ongoing:
            return True
        if self.finish_issue is None:
            return False
        finish = schedule.position(self.finish_issue)
        return finish is not None and target <= finish


@dataclass(frozen=True)
class Customer:
    """Domain representation of a Customer."""

    id: CustomerId
    operator_id: OperatorId
    name: str
    booking_note: str = ""
    created_at: datetime | None = None


@dataclass(frozen=True)
class PageConfiguration:
    issue_name: str
    total_pages: int = DEFAULT_TOTAL_PAGES

    def __post_init__(self) -> None:
        if self.total_pages < 1:
            raise ValueError("An issue needs at least one page")


@dataclass(frozen=True)
class Magazine:
    """Domain representation of a Magazine."""

    id: MagazineId
    operator_id: OperatorId
    name: str
    schedule_id: ScheduleId | None
    page_configurations: tuple[PageConfiguration, ...] = ()
    archived: bool = False

    def total_pages(self, issue_name: str) -> int:
        for config in self.page_configurations:
            if config.issue_name == issue_name:
                return config.total_pages
        return DEFAULT_TOTAL_PAGES


@dataclass(frozen=True)
class ContentSizePrice:
    magazine_id: MagazineId
    price: Money


@dataclass(frozen=True)
class ContentSize:
    """An ad-space dimension, ``size`` measured in pages."""

    id: ContentSizeId
    operator_id: OperatorId
    description: str
    size: Decimal
    prices: tuple[ContentSizePrice, ...] = ()

    def price_for(self, magazine_id: MagazineId) -> Money | None:
        for price in self.prices:
            if price.magazine_id == magazine_id:
                return price.price
        return None


@dataclass(frozen=True)
class BookingEntry:
    """One magazine row within a booking."""

    magazine_id: MagazineId
    content_size_id: ContentSizeId
    content_type: str
    price: PriceLine
    issues: IssueRange
    net_value: Money


@dataclass(frozen=True)
class Booking:
    """Domain representation of a Booking.

    ``total_value`` is the sum of entry net values plus ``additional_charges``
    and is not clamped, so a large rebate can make it negative.
    """

    id: BookingId
    operator_id: OperatorId
    customer_id: CustomerId
    entries: tuple[BookingEntry, ...]
    additional_charges: Decimal
    total_value: Decimal
    status: BookingStatus = BookingStatus.ACTIVE
    notes: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class LeafletDelivery:
    """Domain representation of a LeafletDelivery."""

    id: LeafletDeliveryId
    operator_id: OperatorId
    customer_id: CustomerId
    magazine_id: MagazineId
    issue: str
    price: PriceLine
    net_value: Money
    description: str
    quantity: int
    note: str = ""
    status: BookingStatus = BookingStatus.ACTIVE
    created_at: datetime | None = None
    updated_at: datetime | None = None
