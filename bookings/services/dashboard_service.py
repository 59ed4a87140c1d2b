"""Dashboard service - revenue totals, issue page allocation and activity feeds."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from django.utils import timezone

from bookings.domain import BookingStatus, ContentSizeId, MagazineId, OperatorId
from bookings.domain.availability import current_or_nearest_issue
from bookings.domain.errors import MagazineNotFoundError, NoCurrentIssueError
from bookings.domain.reporting import (
    Activity,
    CustomerTotals,
    IssueAllocation,
    PublicationTotals,
    allocate_pages,
    latest,
    month_windows,
    percentage_change,
    publication_totals,
    top_customers,
)
from bookings.services._ids import parse_id
from bookings.stores.interfaces import BookingStore, CatalogStore, ScheduleStore

TOP_CUSTOMERS = 10
RECENT_PER_KIND = 5


@dataclass(frozen=True)
class DashboardStats:
    total_customers: int
    total_magazines: int
    total_bookings: int
    total_leaflet_deliveries: int
    total_booking_value: Decimal
    total_leaflet_value: Decimal
    total_revenue: Decimal
    customer_change: int
    booking_change: int
    leaflet_delivery_change: int
    booking_value_change: int
    leaflet_value_change: int
    total_revenue_change: int


class DashboardService:
    """Read-only aggregation over an operator's bookings."""

    def __init__(
        self,
        bookings: BookingStore,
        catalog: CatalogStore,
        schedules: ScheduleStore,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._bookings = bookings
        self._catalog = catalog
        self._schedules = schedules
        self._clock = clock

    def stats(self, operator_id: OperatorId) -> DashboardStats:
        """All-time totals plus this month's change against last month."""
        windows = month_windows(self._clock())
        current = windows.current_start
        previous = windows.previous_start

        bookings_all = self._bookings.booking_totals(operator_id)
        leaflets_all = self._bookings.leaflet_totals(operator_id)
        bookings_now = self._bookings.booking_totals(operator_id, since=current)
        bookings_before = self._bookings.booking_totals(operator_id, since=previous, until=current)
        leaflets_now = self._bookings.leaflet_totals(operator_id, since=current)
        leaflets_before = self._bookings.leaflet_totals(operator_id, since=previous, until=current)

        return DashboardStats(
            total_customers=self._catalog.count_customers(operator_id),
            total_magazines=self._catalog.count_magazines(operator_id),
            total_bookings=bookings_all.count,
            total_leaflet_deliveries=leaflets_all.count,
            total_booking_value=bookings_all.value,
            total_leaflet_value=leaflets_all.value,
            total_revenue=bookings_all.value + leaflets_all.value,
            customer_change=percentage_change(
                self._catalog.count_customers(operator_id, since=current),
                self._catalog.count_customers(operator_id, since=previous, until=current),
            ),
            booking_change=percentage_change(bookings_now.count, bookings_before.count),
            leaflet_delivery_change=percentage_change(leaflets_now.count, leaflets_before.count),
            booking_value_change=percentage_change(bookings_now.value, bookings_before.value),
            leaflet_value_change=percentage_change(leaflets_now.value, leaflets_before.value),
            total_revenue_change=percentage_change(
                bookings_now.value + leaflets_now.value,
                bookings_before.value + leaflets_before.value,
            ),
        )

    def current_issue(self, operator_id: OperatorId, magazine_id: str) -> IssueAllocation:
        """Page allocation of the magazine's current (or latest) issue.

        Raises:
            InvalidIdError: If the magazine_id is not a valid UUID.
            MagazineNotFoundError: If the magazine does not exist.
            NoCurrentIssueError: If the magazine has no scheduled issues.
        """
        magazine = self._catalog.get_magazine(
            operator_id, parse_id(MagazineId, magazine_id, "magazine")
        )
        if magazine is None:
            raise MagazineNotFoundError(magazine_id)

        schedule = None
        if magazine.schedule_id is not None:
            schedule = self._schedules.get_schedule(operator_id, magazine.schedule_id)
        issue_name = current_or_nearest_issue(schedule, self._clock())
        if issue_name is None:
            raise NoCurrentIssueError(magazine_id)

        sizes: dict[ContentSizeId, Decimal] = {}
        booked = []
        for booking in self._bookings.list_bookings(
            operator_id, magazine_id=magazine.id, status=BookingStatus.ACTIVE
        ):
            for entry in booking.entries:
                if entry.magazine_id != magazine.id or not entry.issues.covers(issue_name, schedule):
                    continue
                if entry.content_size_id not in sizes:
                    content_size = self._catalog.get_content_size(operator_id, entry.content_size_id)
                    sizes[entry.content_size_id] = content_size.size if content_size else Decimal("0")
                booked.append((entry.content_type, sizes[entry.content_size_id], entry.net_value.amount))

        return allocate_pages(
            magazine_name=magazine.name,
            issue_name=issue_name,
            close_date=schedule.issue(issue_name).close_date,
            total_pages=magazine.total_pages(issue_name),
            booked=booked,
        )

    def publications(self, operator_id: OperatorId) -> list[PublicationTotals]:
        """Active booking value per magazine, archived magazines included."""
        return [
            publication_totals(
                magazine.id,
                magazine.name,
                self._bookings.list_bookings(
                    operator_id, magazine_id=magazine.id, status=BookingStatus.ACTIVE
                ),
            )
            for magazine in self._catalog.list_magazines(operator_id, include_archived=True)
        ]

    def top_customers(self, operator_id: OperatorId, limit: int = TOP_CUSTOMERS) -> list[CustomerTotals]:
        names = {customer.id: customer.name for customer in self._catalog.list_customers(operator_id)}
        return top_customers(
            self._bookings.list_bookings(operator_id, status=BookingStatus.ACTIVE), names, limit
        )

    def recent_activity(self, operator_id: OperatorId) -> list[Activity]:
        """The newest bookings and leaflet deliveries, merged by creation time."""
        customers = {c.id: c.name for c in self._catalog.list_customers(operator_id)}
        magazines = {
            m.id: m.name
            for m in self._catalog.list_magazines(operator_id, include_archived=True)
        }
        sizes = {s.id: s.description for s in self._catalog.list_content_sizes(operator_id)}

        activities = []
        for booking in self._bookings.recent_bookings(operator_id, RECENT_PER_KIND):
            described = _distinct(sizes.get(e.content_size_id, "") for e in booking.entries)
            placed = _distinct(magazines.get(e.magazine_id, "") for e in booking.entries)
            activities.append(
                Activity(
                    kind="booking",
                    id=booking.id.value,
                    customer_name=customers.get(booking.customer_id, ""),
                    description=f"{described} in {placed}",
                    value=booking.total_value,
                    created_at=booking.created_at,
                )
            )
        for delivery in self._bookings.recent_leaflet_deliveries(operator_id, RECENT_PER_KIND):
            activities.append(
                Activity(
                    kind="leaflet",
                    id=delivery.id.value,
                    customer_name=customers.get(delivery.customer_id, ""),
                    description=(
                        f"Leaflet delivery ({delivery.quantity}x) in "
                        f"{magazines.get(delivery.magazine_id, '')}"
                    ),
                    value=delivery.net_value.amount,
                    created_at=delivery.created_at,
                )
            )
        return latest(activities, limit=2 * RECENT_PER_KIND)


def _distinct(names: Iterable[str]) -> str:
    return ", ".join(dict.fromkeys(name for name in names if name))
