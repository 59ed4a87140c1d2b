"""Django ORM implementations of the stores.

Each method queries the ORM scoped to the operator and converts rows to
domain models.
"""

from datetime import datetime
from decimal import Decimal

from django.db import transaction
from django.db.models import Count, ProtectedError, QuerySet, Sum

from bookings import models as orm
from bookings.domain import (
    Booking,
    BookingEntry,
    BookingId,
    BookingStatus,
    ContentSize,
    ContentSizeId,
    ContentSizePrice,
    Customer,
    CustomerId,
    DiscountSpec,
    IssueRange,
    LeafletDelivery,
    LeafletDeliveryId,
    Magazine,
    MagazineId,
    Money,
    OperatorId,
    PageConfiguration,
    PriceLine,
    Schedule,
    ScheduleId,
    ScheduleIssue,
)
from bookings.domain.errors import RecordInUseError
from bookings.domain.reporting import ActivityTotals
from bookings.stores.interfaces import BookingStore, CatalogStore, ScheduleStore


def _created_between(queryset: QuerySet, since: datetime | None, until: datetime | None) -> QuerySet:
    if since is not None:
        queryset = queryset.filter(created_at__gte=since)
    if until is not None:
        queryset = queryset.filter(created_at__lt=until)
    return queryset


def schedule_to_domain(row: orm.Schedule) -> Schedule:
    return Schedule(
        id=ScheduleId(row.id),
        operator_id=OperatorId(row.operator_id),
        name=row.name,
        issues=tuple(
            ScheduleIssue(name=issue.name, close_date=issue.close_date, sort_order=issue.sort_order)
            for issue in row.issues.all()
        ),
        archived=row.archived,
    )


def customer_to_domain(row: orm.Customer) -> Customer:
    return Customer(
        id=CustomerId(row.id),
        operator_id=OperatorId(row.operator_id),
        name=row.name,
        booking_note=row.booking_note,
        created_at=row.created_at,
    )


def magazine_to_domain(row: orm.Magazine) -> Magazine:
    return Magazine(
        id=MagazineId(row.id),
        operator_id=OperatorId(row.operator_id),
        name=row.name,
        schedule_id=ScheduleId(row.schedule_id) if row.schedule_id else None,
        page_configurations=tuple(
            PageConfiguration(issue_name=config.issue_name, total_pages=config.total_pages)
            for config in row.page_configurations.all()
        ),
        archived=row.archived,
    )


def content_size_to_domain(row: orm.ContentSize) -> ContentSize:
    return ContentSize(
        id=ContentSizeId(row.id),
        operator_id=OperatorId(row.operator_id),
        description=row.description,
        size=row.size,
        prices=tuple(
            ContentSizePrice(magazine_id=MagazineId(price.magazine_id), price=Money(price.price))
            for price in row.prices.all()
        ),
    )


def _delete(queryset: QuerySet, kind: str) -> bool:
    try:
        deleted, _ = queryset.delete()
    except ProtectedError:
        raise RecordInUseError(kind) from None
    return deleted > 0


def entry_to_domain(row: orm.BookingEntry) -> BookingEntry:
    return BookingEntry(
        magazine_id=MagazineId(row.magazine_id),
        content_size_id=ContentSizeId(row.content_size_id),
        content_type=row.content_type,
        price=PriceLine(
            base_price=row.list_price,
            discount=DiscountSpec(
                percentage=row.discount_percentage, absolute_value=row.discount_value
            ),
            additional_charges=row.additional_charges,
        ),
        issues=IssueRange(
            start_issue=row.start_issue,
            finish_issue=row.finish_issue,
            is_ongoing=row.is_ongoing,
        ),
        net_value=Money(row.net_value),
    )


def booking_to_domain(row: orm.Booking) -> Booking:
    return Booking(
        id=BookingId(row.id),
        operator_id=OperatorId(row.operator_id),
        customer_id=CustomerId(row.customer_id),
        entries=tuple(entry_to_domain(entry) for entry in row.entries.all()),
        additional_charges=row.additional_charges,
        total_value=row.total_value,
        status=BookingStatus(row.status),
        notes=row.notes,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def leaflet_delivery_to_domain(row: orm.LeafletDelivery) -> LeafletDelivery:
    return LeafletDelivery(
        id=LeafletDeliveryId(row.id),
        operator_id=OperatorId(row.operator_id),
        customer_id=CustomerId(row.customer_id),
        magazine_id=MagazineId(row.magazine_id),
        issue=row.issue,
        price=PriceLine(
            base_price=row.price,
            discount=DiscountSpec(
                percentage=row.discount_percentage, absolute_value=row.discount_value
            ),
            additional_charges=row.additional_charges,
        ),
        net_value=Money(row.net_value),
        description=row.leaflet_description,
        quantity=row.quantity,
        note=row.note,
        status=BookingStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class DjangoScheduleStore(ScheduleStore):
    """Schedule store backed by the Django ORM."""

    def _queryset(self, operator_id: OperatorId) -> QuerySet:
        return orm.Schedule.objects.filter(operator_id=operator_id.value).prefetch_related("issues")

    def list_schedules(self, operator_id: OperatorId, include_archived: bool = False) -> list[Schedule]:
        queryset = self._queryset(operator_id)
        if not include_archived:
            queryset = queryset.filter(archived=False)
        return [schedule_to_domain(row) for row in queryset]

    def get_schedule(self, operator_id: OperatorId, schedule_id: ScheduleId) -> Schedule | None:
        row = self._queryset(operator_id).filter(id=schedule_id.value).first()
        return schedule_to_domain(row) if row else None

    def exists_by_name_case_insensitive(
        self, operator_id: OperatorId, name: str, exclude: ScheduleId | None = None
    ) -> bool:
        queryset = orm.Schedule.objects.filter(
            operator_id=operator_id.value, archived=False, name__iexact=name
        )
        if exclude is not None:
            queryset = queryset.exclude(id=exclude.value)
        return queryset.exists()

    @transaction.atomic
    def save_schedule(self, schedule: Schedule) -> Schedule:
        row, _ = orm.Schedule.objects.update_or_create(
            id=schedule.id.value,
            defaults={
                "operator_id": schedule.operator_id.value,
                "name": schedule.name,
                "archived": schedule.archived,
            },
        )
        row.issues.all().delete()
        orm.ScheduleIssue.objects.bulk_create(
            orm.ScheduleIssue(
                schedule=row,
                name=issue.name,
                close_date=issue.close_date,
                sort_order=issue.sort_order,
            )
            for issue in schedule.issues
        )
        return self.get_schedule(schedule.operator_id, schedule.id)

    def delete_schedule(self, operator_id: OperatorId, schedule_id: ScheduleId) -> bool:
        queryset = orm.Schedule.objects.filter(operator_id=operator_id.value, id=schedule_id.value)
        return _delete(queryset, "Schedule")


class DjangoCatalogStore(CatalogStore):
    """Customers, magazines and content sizes backed by the Django ORM."""

    # Customers

    def list_customers(self, operator_id: OperatorId) -> list[Customer]:
        queryset = orm.Customer.objects.filter(operator_id=operator_id.value).order_by("name")
        return [customer_to_domain(row) for row in queryset]

    def get_customer(self, operator_id: OperatorId, customer_id: CustomerId) -> Customer | None:
        row = orm.Customer.objects.filter(operator_id=operator_id.value, id=customer_id.value).first()
        return customer_to_domain(row) if row else None

    def customer_name_taken(
        self, operator_id: OperatorId, name: str, exclude: CustomerId | None = None
    ) -> bool:
        queryset = orm.Customer.objects.filter(operator_id=operator_id.value, name__iexact=name)
        if exclude is not None:
            queryset = queryset.exclude(id=exclude.value)
        return queryset.exists()

    def save_customer(self, customer: Customer) -> Customer:
        orm.Customer.objects.update_or_create(
            id=customer.id.value,
            defaults={
                "operator_id": customer.operator_id.value,
                "name": customer.name,
                "booking_note": customer.booking_note,
            },
        )
        return self.get_customer(customer.operator_id, customer.id)

    def delete_customer(self, operator_id: OperatorId, customer_id: CustomerId) -> bool:
        queryset = orm.Customer.objects.filter(operator_id=operator_id.value, id=customer_id.value)
        return _delete(queryset, "Customer")

    # Magazines

    def _magazines(self, operator_id: OperatorId) -> QuerySet:
        return orm.Magazine.objects.filter(operator_id=operator_id.value).prefetch_related(
            "page_configurations"
        )

    def list_magazines(self, operator_id: OperatorId, include_archived: bool = False) -> list[Magazine]:
        queryset = self._magazines(operator_id)
        if not include_archived:
            queryset = queryset.filter(archived=False)
        return [magazine_to_domain(row) for row in queryset]

    def get_magazine(self, operator_id: OperatorId, magazine_id: MagazineId) -> Magazine | None:
        row = self._magazines(operator_id).filter(id=magazine_id.value).first()
        return magazine_to_domain(row) if row else None

    def magazine_name_taken(
        self, operator_id: OperatorId, name: str, exclude: MagazineId | None = None
    ) -> bool:
        queryset = orm.Magazine.objects.filter(operator_id=operator_id.value, name__iexact=name)
        if exclude is not None:
            queryset = queryset.exclude(id=exclude.value)
        return queryset.exists()

    @transaction.atomic
    def save_magazine(self, magazine: Magazine) -> Magazine:
        row, _ = orm.Magazine.objects.update_or_create(
            id=magazine.id.value,
            defaults={
                "operator_id": magazine.operator_id.value,
                "name": magazine.name,
                "schedule_id": magazine.schedule_id.value if magazine.schedule_id else None,
                "archived": magazine.archived,
            },
        )
        row.page_configurations.all().delete()
        orm.PageConfiguration.objects.bulk_create(
            orm.PageConfiguration(
                magazine=row, issue_name=config.issue_name, total_pages=config.total_pages
            )
            for config in magazine.page_configurations
        )
        return self.get_magazine(magazine.operator_id, magazine.id)

    def delete_magazine(self, operator_id: OperatorId, magazine_id: MagazineId) -> bool:
        queryset = orm.Magazine.objects.filter(operator_id=operator_id.value, id=magazine_id.value)
        return _delete(queryset, "Magazine")

    # Content sizes

    def _content_sizes(self, operator_id: OperatorId) -> QuerySet:
        return orm.ContentSize.objects.filter(operator_id=operator_id.value).prefetch_related(
            "prices"
        )

    def list_content_sizes(self, operator_id: OperatorId) -> list[ContentSize]:
        queryset = self._content_sizes(operator_id).order_by("size", "description")
        return [content_size_to_domain(row) for row in queryset]

    def get_content_size(
        self, operator_id: OperatorId, content_size_id: ContentSizeId
    ) -> ContentSize | None:
        row = self._content_sizes(operator_id).filter(id=content_size_id.value).first()
        return content_size_to_domain(row) if row else None

    @transaction.atomic
    def save_content_size(self, content_size: ContentSize) -> ContentSize:
        row, _ = orm.ContentSize.objects.update_or_create(
            id=content_size.id.value,
            defaults={
                "operator_id": content_size.operator_id.value,
                "description": content_size.description,
                "size": content_size.size,
            },
        )
        row.prices.all().delete()
        orm.ContentSizePrice.objects.bulk_create(
            orm.ContentSizePrice(
                content_size=row, magazine_id=price.magazine_id.value, price=price.price.amount
            )
            for price in content_size.prices
        )
        return self.get_content_size(content_size.operator_id, content_size.id)

    def delete_content_size(self, operator_id: OperatorId, content_size_id: ContentSizeId) -> bool:
        queryset = orm.ContentSize.objects.filter(
            operator_id=operator_id.value, id=content_size_id.value
        )
        return _delete(queryset, "Content size")

    # Counts

    def count_customers(
        self, operator_id: OperatorId, since: datetime | None = None, until: datetime | None = None
    ) -> int:
        queryset = orm.Customer.objects.filter(operator_id=operator_id.value)
        return _created_between(queryset, since, until).count()

    def count_magazines(self, operator_id: OperatorId) -> int:
        return orm.Magazine.objects.filter(operator_id=operator_id.value).count()


class DjangoBookingStore(BookingStore):
    """Bookings and leaflet deliveries backed by the Django ORM."""

    def _bookings(self, operator_id: OperatorId) -> QuerySet:
        return orm.Booking.objects.filter(operator_id=operator_id.value).prefetch_related("entries")

    def list_bookings(
        self,
        operator_id: OperatorId,
        customer_id: CustomerId | None = None,
        magazine_id: MagazineId | None = None,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        queryset = self._bookings(operator_id)
        if customer_id is not None:
            queryset = queryset.filter(customer_id=customer_id.value)
        if magazine_id is not None:
            queryset = queryset.filter(entries__magazine_id=magazine_id.value).distinct()
        if status is not None:
            queryset = queryset.filter(status=status.value)
        return [booking_to_domain(row) for row in queryset]

    def get_booking(self, operator_id: OperatorId, booking_id: BookingId) -> Booking | None:
        row = self._bookings(operator_id).filter(id=booking_id.value).first()
        return booking_to_domain(row) if row else None

    @transaction.atomic
    def save_booking(self, booking: Booking) -> Booking:
        row, _ = orm.Booking.objects.update_or_create(
            id=booking.id.value,
            defaults={
                "operator_id": booking.operator_id.value,
                "customer_id": booking.customer_id.value,
                "additional_charges": booking.additional_charges,
                "total_value": booking.total_value,
                "notes": booking.notes,
                "status": booking.status.value,
            },
        )
        row.entries.all().delete()
        for position, entry in enumerate(booking.entries):
            # saved one by one so the pre_save signal derives net_value
            orm.BookingEntry.objects.create(
                booking=row,
                position=position,
                magazine_id=entry.magazine_id.value,
                content_size_id=entry.content_size_id.value,
                content_type=entry.content_type,
                list_price=entry.price.base_price,
                discount_percentage=entry.price.discount.percentage,
                discount_value=entry.price.discount.absolute_value,
                additional_charges=entry.price.additional_charges,
                net_value=entry.net_value.amount,
                start_issue=entry.issues.start_issue,
                finish_issue=entry.issues.finish_issue,
                is_ongoing=entry.issues.is_ongoing,
            )
        return self.get_booking(booking.operator_id, booking.id)

    def delete_booking(self, operator_id: OperatorId, booking_id: BookingId) -> bool:
        deleted, _ = orm.Booking.objects.filter(
            operator_id=operator_id.value, id=booking_id.value
        ).delete()
        return deleted > 0

    def recent_bookings(self, operator_id: OperatorId, limit: int) -> list[Booking]:
        queryset = self._bookings(operator_id).order_by("-created_at")[:limit]
        return [booking_to_domain(row) for row in queryset]

    def list_leaflet_deliveries(
        self,
        operator_id: OperatorId,
        customer_id: CustomerId | None = None,
        magazine_id: MagazineId | None = None,
        issue: str | None = None,
        status: BookingStatus | None = None,
    ) -> list[LeafletDelivery]:
        queryset = orm.LeafletDelivery.objects.filter(operator_id=operator_id.value)
        if customer_id is not None:
            queryset = queryset.filter(customer_id=customer_id.value)
        if magazine_id is not None:
            queryset = queryset.filter(magazine_id=magazine_id.value)
        if issue:
            queryset = queryset.filter(issue=issue)
        if status is not None:
            queryset = queryset.filter(status=status.value)
        return [leaflet_delivery_to_domain(row) for row in queryset]

    def get_leaflet_delivery(
        self, operator_id: OperatorId, delivery_id: LeafletDeliveryId
    ) -> LeafletDelivery | None:
        row = orm.LeafletDelivery.objects.filter(
            operator_id=operator_id.value, id=delivery_id.value
        ).first()
        return leaflet_delivery_to_domain(row) if row else None

    def save_leaflet_delivery(self, delivery: LeafletDelivery) -> LeafletDelivery:
        orm.LeafletDelivery.objects.update_or_create(
            id=delivery.id.value,
            defaults={
                "operator_id": delivery.operator_id.value,
                "customer_id": delivery.customer_id.value,
                "magazine_id": delivery.magazine_id.value,
                "issue": delivery.issue,
                "price": delivery.price.base_price,
                "discount_percentage": delivery.price.discount.percentage,
                "discount_value": delivery.price.discount.absolute_value,
                "additional_charges": delivery.price.additional_charges,
                "net_value": delivery.net_value.amount,
                "leaflet_description": delivery.description,
                "quantity": delivery.quantity,
                "note": delivery.note,
                "status": delivery.status.value,
            },
        )
        return self.get_leaflet_delivery(delivery.operator_id, delivery.id)

    def delete_leaflet_delivery(self, operator_id: OperatorId, delivery_id: LeafletDeliveryId) -> bool:
        deleted, _ = orm.LeafletDelivery.objects.filter(
            operator_id=operator_id.value, id=delivery_id.value
        ).delete()
        return deleted > 0

    def recent_leaflet_deliveries(self, operator_id: OperatorId, limit: int) -> list[LeafletDelivery]:
        queryset = orm.LeafletDelivery.objects.filter(operator_id=operator_id.value).order_by(
            "-created_at"
        )[:limit]
        return [leaflet_delivery_to_domain(row) for row in queryset]

    def booking_totals(
        self, operator_id: OperatorId, since: datetime | None = None, until: datetime | None = None
    ) -> ActivityTotals:
        queryset = orm.Booking.objects.filter(
            operator_id=operator_id.value, status=BookingStatus.ACTIVE.value
        )
        return self._totals(_created_between(queryset, since, until), "total_value")

    def leaflet_totals(
        self, operator_id: OperatorId, since: datetime | None = None, until: datetime | None = None
    ) -> ActivityTotals:
        queryset = orm.LeafletDelivery.objects.filter(
            operator_id=operator_id.value, status=BookingStatus.ACTIVE.value
        )
        return self._totals(_created_between(queryset, since, until), "net_value")

    @staticmethod
    def _totals(queryset: QuerySet, field: str) -> ActivityTotals:
        result = queryset.aggregate(count=Count("id"), value=Sum(field))
        return ActivityTotals(count=result["count"], value=result["value"] or Decimal("0"))
