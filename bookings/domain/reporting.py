"""Dashboard arithmetic: month windows, percentage change, page allocation.

Also the per-magazine, per-customer and recent-activity groupings. Only
active bookings count towards value totals; callers filter by status.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from bookings.domain.models import Booking
from bookings.domain.value_objects import CustomerId, MagazineId

UNALLOCATED = "Unallocated"


@dataclass(frozen=True)
class ActivityTotals:
    count: int = 0
    value: Decimal = Decimal("0")


@dataclass(frozen=True)
class MonthWindows:
    current_start: datetime
    previous_start: datetime


@dataclass(frozen=True)
class ContentAllocation:
    content_type: str
    pages: Decimal
    count: int
    value: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class IssueAllocation:
    """Page usage of one magazine issue."""

    magazine_name: str
    issue_name: str
    close_date: datetime | None
    total_pages: int
    booked_pages: Decimal
    unallocated_pages: Decimal
    breakdown: tuple[ContentAllocation, ...]
    total_value: Decimal


def month_windows(now: datetime) -> MonthWindows:
    current_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if current_start.month == 1:
        previous_start = current_start.replace(year=current_start.year - 1, month=12)
    else:
        previous_start = current_start.replace(month=current_start.month - 1)
    return MonthWindows(current_start=current_start, previous_start=previous_start)


def percentage_change(current: Decimal | int, previous: Decimal | int) -> int:
    """Whole-percent change from ``previous`` to ``current``.

    Growth from nothing counts as 100%.
    """
    if previous == 0:
        return 100 if current > 0 else 0
    change = (Decimal(current) - Decimal(previous)) / Decimal(previous) * 100
    return int(change.to_integral_value(rounding=ROUND_HALF_UP))


def _share(pages: Decimal, total_pages: int) -> Decimal:
    return (pages / Decimal(total_pages) * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def allocate_pages(
    magazine_name: str,
    issue_name: str,
    close_date: datetime | None,
    total_pages: int,
    booked: Iterable[tuple[str, Decimal, Decimal]],
) -> IssueAllocation:
    """Group booked ``(content_type, pages, value)`` rows by content type."""
    grouped: dict[str, list] = {}
    for content_type, pages, value in booked:
        row = grouped.setdefault(content_type, [Decimal("0"), 0, Decimal("0")])
        row[0] += pages
        row[1] += 1
        row[2] += value

    booked_pages = sum((row[0] for row in grouped.values()), Decimal("0"))
    unallocated = max(Decimal("0"), Decimal(total_pages) - booked_pages)

    breakdown = [
        ContentAllocation(
            content_type=content_type,
            pages=pages,
            count=count,
            value=value,
            percentage=_share(pages, total_pages),
        )
        for content_type, (pages, count, value) in grouped.items()
    ]
    if unallocated > 0:
        breakdown.append(
            ContentAllocation(
                content_type=UNALLOCATED,
                pages=unallocated,
                count=0,
                value=Decimal("0"),
                percentage=_share(unallocated, total_pages),
            )
        )

    return IssueAllocation(
        magazine_name=magazine_name,
        issue_name=issue_name,
        close_date=close_date,
        total_pages=total_pages,
        booked_pages=booked_pages,
        unallocated_pages=unallocated,
        breakdown=tuple(breakdown),
        total_value=sum((row[2] for row in grouped.values()), Decimal("0")),
    )


@dataclass(frozen=True)
class ContentTotals:
    content_type: str
    count: int
    value: Decimal


@dataclass(frozen=True)
class PublicationTotals:
    """Active booking value carried by one magazine."""

    magazine_id: MagazineId
    magazine_name: str
    total_bookings: int
    total_value: Decimal
    breakdown: tuple[ContentTotals, ...]


@dataclass(frozen=True)
class CustomerTotals:
    customer_id: CustomerId
    customer_name: str
    total_bookings: int
    total_value: Decimal


@dataclass(frozen=True)
class Activity:
    """One line of the recent activity feed."""

    kind: str
    id: UUID
    customer_name: str
    description: str
    value: Decimal
    created_at: datetime | None


def publication_totals(
    magazine_id: MagazineId, magazine_name: str, bookings: Iterable[Booking]
) -> PublicationTotals:
    """Sum the net value of the entries each booking places in the magazine."""
    grouped: dict[str, list] = {}
    booking_count = 0
    for booking in bookings:
        entries = [entry for entry in booking.entries if entry.magazine_id == magazine_id]
        if not entries:
            continue
        booking_count += 1
        for entry in entries:
            row = grouped.setdefault(entry.content_type, [0, Decimal("0")])
            row[0] += 1
            row[1] += entry.net_value.amount

    return PublicationTotals(
        magazine_id=magazine_id,
        magazine_name=magazine_name,
        total_bookings=booking_count,
        total_value=sum((row[1] for row in grouped.values()), Decimal("0")),
        breakdown=tuple(
            ContentTotals(content_type=content_type, count=count, value=value)
            for content_type, (count, value) in grouped.items()
        ),
    )


def top_customers(
    bookings: Iterable[Booking], names: Mapping[CustomerId, str], limit: int = 10
) -> list[CustomerTotals]:
    """Customers ranked by summed booking total, highest first.

    Customers missing from ``names`` are skipped.
    """
    grouped: dict[CustomerId, list] = {}
    for booking in bookings:
        row = grouped.setdefault(booking.customer_id, [0, Decimal("0")])
        row[0] += 1
        row[1] += booking.total_value

    ranked = sorted(grouped.items(), key=lambda item: item[1][1], reverse=True)
    return [
        CustomerTotals(
            customer_id=customer_id,
            customer_name=names[customer_id],
            total_bookings=count,
            total_value=value,
        )
        for customer_id, (count, value) in ranked
        if customer_id in names
    ][:limit]


def latest(activities: Iterable[Activity], limit: int = 10) -> list[Activity]:
    dated = [activity for activity in activities if activity.created_at is not None]
    return sorted(dated, key=lambda activity: activity.created_at, reverse=True)[:limit]
