"""In-memory stores for service tests."""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from bookings.domain import (
    Booking,
    BookingId,
    BookingStatus,
    ContentSize,
    ContentSizeId,
    Customer,
    CustomerId,
    LeafletDelivery,
    LeafletDeliveryId,
    Magazine,
    MagazineId,
    OperatorId,
    Schedule,
    ScheduleId,
)
from bookings.domain.errors import RecordInUseError
from bookings.domain.reporting import ActivityTotals
from bookings.stores.interfaces import BookingStore, CatalogStore, ScheduleStore


def _between(created_at: datetime | None, since: datetime | None, until: datetime | None) -> bool:
    if created_at is None:
        return since is None and until is None
    if since is not None and created_at < since:
        return False
    if until is not None and created_at >= until:
        return False
    return True


class InMemoryScheduleStore(ScheduleStore):
    def __init__(self, *schedules: Schedule) -> None:
        self.schedules: dict[ScheduleId, Schedule] = {s.id: s for s in schedules}
        self.in_use: set[ScheduleId] = set()

    def list_schedules(self, operator_id: OperatorId, include_archived: bool = False) -> list[Schedule]:
        return [
            s
            for s in self.schedules.values()
            if s.operator_id == operator_id and (include_archived or not s.archived)
        ]

    def get_schedule(self, operator_id: OperatorId, schedule_id: ScheduleId) -> Schedule | None:
        schedule = self.schedules.get(schedule_id)
        return schedule if schedule and schedule.operator_id == operator_id else None

    def exists_by_name_case_insensitive(
        self, operator_id: OperatorId, name: str, exclude: ScheduleId | None = None
    ) -> bool:
        return any(
            s.name.lower() == name.lower() and s.id != exclude
            for s in self.list_schedules(operator_id)
        )

    def save_schedule(self, schedule: Schedule) -> Schedule:
        self.schedules[schedule.id] = schedule
        return schedule

    def delete_schedule(self, operator_id: OperatorId, schedule_id: ScheduleId) -> bool:
        if self.get_schedule(operator_id, schedule_id) is None:
            return False
        if schedule_id in self.in_use:
            raise RecordInUseError("Schedule")
        del self.schedules[schedule_id]
        return True


class InMemoryCatalogStore(CatalogStore):
    def __init__(self) -> None:
        self.customers: dict[CustomerId, Customer] = {}
        self.magazines: dict[MagazineId, Magazine] = {}
        self.content_sizes: dict[ContentSizeId, ContentSize] = {}
        self.in_use: set = set()

    def add(self, *records) -> None:
        for record in records:
            if isinstance(record, Customer):
                self.customers[record.id] = record
            elif isinstance(record, Magazine):
                self.magazines[record.id] = record
            elif isinstance(record, ContentSize):
                self.content_sizes[record.id] = record

    @staticmethod
    def _owned(record, operator_id: OperatorId):
        return record if record is not None and record.operator_id == operator_id else None

    def _delete(self, records: dict, key, operator_id: OperatorId, kind: str) -> bool:
        if self._owned(records.get(key), operator_id) is None:
            return False
        if key in self.in_use:
            raise RecordInUseError(kind)
        del records[key]
        return True

    @staticmethod
    def _name_taken(records, operator_id: OperatorId, name: str, exclude) -> bool:
        return any(
            r.operator_id == operator_id and r.name.lower() == name.lower() and r.id != exclude
            for r in records
        )

    def list_customers(self, operator_id: OperatorId) -> list[Customer]:
        return sorted(
            (c for c in self.customers.values() if c.operator_id == operator_id),
            key=lambda c: c.name,
        )

    def customer_name_taken(
        self, operator_id: OperatorId, name: str, exclude: CustomerId | None = None
    ) -> bool:
        return self._name_taken(self.customers.values(), operator_id, name, exclude)

    def save_customer(self, customer: Customer) -> Customer:
        self.customers[customer.id] = customer
        return customer

    def delete_customer(self, operator_id: OperatorId, customer_id: CustomerId) -> bool:
        return self._delete(self.customers, customer_id, operator_id, "Customer")

    def list_magazines(self, operator_id: OperatorId, include_archived: bool = False) -> list[Magazine]:
        return sorted(
            (
                m
                for m in self.magazines.values()
                if m.operator_id == operator_id and (include_archived or not m.archived)
            ),
            key=lambda m: m.name,
        )

    def magazine_name_taken(
        self, operator_id: OperatorId, name: str, exclude: MagazineId | None = None
    ) -> bool:
        return self._name_taken(self.magazines.values(), operator_id, name, exclude)

    def save_magazine(self, magazine: Magazine) -> Magazine:
        self.magazines[magazine.id] = magazine
        return magazine

    def delete_magazine(self, operator_id: OperatorId, magazine_id: MagazineId) -> bool:
        return self._delete(self.magazines, magazine_id, operator_id, "Magazine")

    def list_content_sizes(self, operator_id: OperatorId) -> list[ContentSize]:
        return sorted(
            (s for s in self.content_sizes.values() if s.operator_id == operator_id),
            key=lambda s: (s.size, s.description),
        )

    def save_content_size(self, content_size: ContentSize) -> ContentSize:
        self.content_sizes[content_size.id] = content_size
        return content_size

    def delete_content_size(self, operator_id: OperatorId, content_size_id: ContentSizeId) -> bool:
        return self._delete(self.content_sizes, content_size_id, operator_id, "Content size")

    def get_customer(self, operator_id: OperatorId, customer_id: CustomerId) -> Customer | None:
        return self._owned(self.customers.get(customer_id), operator_id)

    def get_magazine(self, operator_id: OperatorId, magazine_id: MagazineId) -> Magazine | None:
        return self._owned(self.magazines.get(magazine_id), operator_id)

    def get_content_size(
        self, operator_id: OperatorId, content_size_id: ContentSizeId
    ) -> ContentSize | None:
        return self._owned(self.content_sizes.get(content_size_id), operator_id)

    def count_customers(
        self, operator_id: OperatorId, since: datetime | None = None, until: datetime | None = None
    ) -> int:
        return sum(
            1
            for c in self.customers.values()
            if c.operator_id == operator_id and _between(c.created_at, since, until)
        )

    def count_magazines(self, operator_id: OperatorId) -> int:
        return sum(1 for m in self.magazines.values() if m.operator_id == operator_id)


class InMemoryBookingStore(BookingStore):
    def __init__(self, now: datetime | None = None) -> None:
        self.now = now
        self.bookings: dict[BookingId, Booking] = {}
        self.deliveries: dict[LeafletDeliveryId, LeafletDelivery] = {}

    def list_bookings(
        self,
        operator_id: OperatorId,
        customer_id: CustomerId | None = None,
        magazine_id: MagazineId | None = None,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        return [
            b
            for b in self.bookings.values()
            if b.operator_id == operator_id
            and (customer_id is None or b.customer_id == customer_id)
            and (magazine_id is None or any(e.magazine_id == magazine_id for e in b.entries))
            and (status is None or b.status == status)
        ]

    def get_booking(self, operator_id: OperatorId, booking_id: BookingId) -> Booking | None:
        booking = self.bookings.get(booking_id)
        return booking if booking and booking.operator_id == operator_id else None

    def save_booking(self, booking: Booking) -> Booking:
        existing = self.bookings.get(booking.id)
        created_at = existing.created_at if existing else booking.created_at or self.now
        saved = replace(booking, created_at=created_at, updated_at=self.now)
        self.bookings[booking.id] = saved
        return saved

    def delete_booking(self, operator_id: OperatorId, booking_id: BookingId) -> bool:
        if self.get_booking(operator_id, booking_id) is None:
            return False
        del self.bookings[booking_id]
        return True

    def recent_bookings(self, operator_id: OperatorId, limit: int) -> list[Booking]:
        rows = [b for b in self.list_bookings(operator_id) if b.created_at is not None]
        return sorted(rows, key=lambda b: b.created_at, reverse=True)[:limit]

    def recent_leaflet_deliveries(self, operator_id: OperatorId, limit: int) -> list[LeafletDelivery]:
        rows = [d for d in self.list_leaflet_deliveries(operator_id) if d.created_at is not None]
        return sorted(rows, key=lambda d: d.created_at, reverse=True)[:limit]

    def list_leaflet_deliveries(
        self,
        operator_id: OperatorId,
        customer_id: CustomerId | None = None,
        magazine_id: MagazineId | None = None,
        issue: str | None = None,
        status: BookingStatus | None = None,
    ) -> list[LeafletDelivery]:
        return [
            d
            for d in self.deliveries.values()
            if d.operator_id == operator_id
            and (customer_id is None or d.customer_id == customer_id)
            and (magazine_id is None or d.magazine_id == magazine_id)
            and (issue is None or d.issue == issue)
            and (status is None or d.status == status)
        ]

    def get_leaflet_delivery(
        self, operator_id: OperatorId, delivery_id: LeafletDeliveryId
    ) -> LeafletDelivery | None:
        delivery = self.deliveries.get(delivery_id)
        return delivery if delivery and delivery.operator_id == operator_id else None

    def save_leaflet_delivery(self, delivery: LeafletDelivery) -> LeafletDelivery:
        existing = self.deliveries.get(delivery.id)
        created_at = existing.created_at if existing else delivery.created_at or self.now
        saved = replace(delivery, created_at=created_at, updated_at=self.now)
        self.deliveries[delivery.id] = saved
        return saved

    def delete_leaflet_delivery(self, operator_id: OperatorId, delivery_id: LeafletDeliveryId) -> bool:
        if self.get_leaflet_delivery(operator_id, delivery_id) is None:
            return False
        del self.deliveries[delivery_id]
        return True

    def booking_totals(
        self, operator_id: OperatorId, since: datetime | None = None, until: datetime | None = None
    ) -> ActivityTotals:
        rows = [
            b
            for b in self.list_bookings(operator_id, status=BookingStatus.ACTIVE)
            if _between(b.created_at, since, until)
        ]
        return ActivityTotals(
            count=len(rows), value=sum((b.total_value for b in rows), Decimal("0"))
        )

    def leaflet_totals(
        self, operator_id: OperatorId, since: datetime | None = None, until: datetime | None = None
    ) -> ActivityTotals:
        rows = [
            d
            for d in self.list_leaflet_deliveries(operator_id, status=BookingStatus.ACTIVE)
            if _between(d.created_at, since, until)
        ]
        return ActivityTotals(
            count=len(rows), value=sum((d.net_value.amount for d in rows), Decimal("0"))
        )
