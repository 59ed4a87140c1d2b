"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Every query is scoped to
one operator; stores never return another operator's records.
"""

from abc import ABC, abstractmethod
from datetime import datetime

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
from bookings.domain.reporting import ActivityTotals


class ScheduleStore(ABC):
    """Interface for schedule persistence operations."""

    @abstractmethod
    def list_schedules(self, operator_id: OperatorId, include_archived: bool = False) -> list[Schedule]:
        """Return the operator's schedules ordered by name."""
        ...

    @abstractmethod
    def get_schedule(self, operator_id: OperatorId, schedule_id: ScheduleId) -> Schedule | None:
        """Return a schedule by ID, or None if not found."""
        ...

    @abstractmethod
    def exists_by_name_case_insensitive(
        self, operator_id: OperatorId, name: str, exclude: ScheduleId | None = None
    ) -> bool:
        """Check if a non-archived schedule already uses ``name``."""
        ...

    @abstractmethod
    def save_schedule(self, schedule: Schedule) -> Schedule:
        """Insert or replace a schedule together with its issues."""
        ...

    @abstractmethod
    def delete_schedule(self, operator_id: OperatorId, schedule_id: ScheduleId) -> bool:
        """Delete a schedule; False if it did not exist.

        Raises:
            RecordInUseError: If a magazine still follows the schedule.
        """
        ...


class CatalogStore(ABC):
    """Interface for reference data: customers, magazines, content sizes.

    Deleting a record that bookings still reference raises RecordInUseError.
    """

    @abstractmethod
    def list_customers(self, operator_id: OperatorId) -> list[Customer]:
        """Return the operator's customers ordered by name."""
        ...

    @abstractmethod
    def get_customer(self, operator_id: OperatorId, customer_id: CustomerId) -> Customer | None:
        ...

    @abstractmethod
    def customer_name_taken(
        self, operator_id: OperatorId, name: str, exclude: CustomerId | None = None
    ) -> bool:
        """Check case-insensitively whether another customer uses ``name``."""
        ...

    @abstractmethod
    def save_customer(self, customer: Customer) -> Customer:
        ...

    @abstractmethod
    def delete_customer(self, operator_id: OperatorId, customer_id: CustomerId) -> bool:
        ...

    @abstractmethod
    def list_magazines(self, operator_id: OperatorId, include_archived: bool = False) -> list[Magazine]:
        ...

    @abstractmethod
    def get_magazine(self, operator_id: OperatorId, magazine_id: MagazineId) -> Magazine | None:
        ...

    @abstractmethod
    def magazine_name_taken(
        self, operator_id: OperatorId, name: str, exclude: MagazineId | None = None
    ) -> bool:
        """Check case-insensitively whether another magazine, archived or not, uses ``name``."""
        ...

    @abstractmethod
    def save_magazine(self, magazine: Magazine) -> Magazine:
        """Insert or replace a magazine together with its page configurations."""
        ...

    @abstractmethod
    def delete_magazine(self, operator_id: OperatorId, magazine_id: MagazineId) -> bool:
        ...

    @abstractmethod
    def list_content_sizes(self, operator_id: OperatorId) -> list[ContentSize]:
        """Return the operator's content sizes ordered by size."""
        ...

    @abstractmethod
    def get_content_size(
        self, operator_id: OperatorId, content_size_id: ContentSizeId
    ) -> ContentSize | None:
        ...

    @abstractmethod
    def save_content_size(self, content_size: ContentSize) -> ContentSize:
        """Insert or replace a content size together with its prices."""
        ...

    @abstractmethod
    def delete_content_size(self, operator_id: OperatorId, content_size_id: ContentSizeId) -> bool:
        ...

    @abstractmethod
    def count_customers(
        self, operator_id: OperatorId, since: datetime | None = None, until: datetime | None = None
    ) -> int:
        """Count customers created in ``[since, until)``; open ends are unbounded."""
        ...

    @abstractmethod
    def count_magazines(self, operator_id: OperatorId) -> int:
        ...


class BookingStore(ABC):
    """Interface for bookings and leaflet deliveries."""

    @abstractmethod
    def list_bookings(
        self,
        operator_id: OperatorId,
        customer_id: CustomerId | None = None,
        magazine_id: MagazineId | None = None,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        """Return bookings ordered by created_at descending."""
        ...

    @abstractmethod
    def get_booking(self, operator_id: OperatorId, booking_id: BookingId) -> Booking | None:
        ...

    @abstractmethod
    def save_booking(self, booking: Booking) -> Booking:
        """Insert or replace a booking and all of its entries."""
        ...

    @abstractmethod
    def delete_booking(self, operator_id: OperatorId, booking_id: BookingId) -> bool:
        """Delete a booking; False if it did not exist."""
        ...

    @abstractmethod
    def recent_bookings(self, operator_id: OperatorId, limit: int) -> list[Booking]:
        """Return the ``limit`` most recently created bookings, newest first."""
        ...

    @abstractmethod
    def list_leaflet_deliveries(
        self,
        operator_id: OperatorId,
        customer_id: CustomerId | None = None,
        magazine_id: MagazineId | None = None,
        issue: str | None = None,
        status: BookingStatus | None = None,
    ) -> list[LeafletDelivery]:
        """Return leaflet deliveries ordered by created_at descending."""
        ...

    @abstractmethod
    def get_leaflet_delivery(
        self, operator_id: OperatorId, delivery_id: LeafletDeliveryId
    ) -> LeafletDelivery | None:
        ...

    @abstractmethod
    def save_leaflet_delivery(self, delivery: LeafletDelivery) -> LeafletDelivery:
        ...

    @abstractmethod
    def delete_leaflet_delivery(self, operator_id: OperatorId, delivery_id: LeafletDeliveryId) -> bool:
        ...

    @abstractmethod
    def recent_leaflet_deliveries(self, operator_id: OperatorId, limit: int) -> list[LeafletDelivery]:
        ...

    @abstractmethod
    def booking_totals(
        self, operator_id: OperatorId, since: datetime | None = None, until: datetime | None = None
    ) -> ActivityTotals:
        """Count and summed total value of active bookings created in ``[since, until)``."""
        ...

    @abstractmethod
    def leaflet_totals(
        self, operator_id: OperatorId, since: datetime | None = None, until: datetime | None = None
    ) -> ActivityTotals:
        """Count and summed net value of active leaflet deliveries created in ``[since, until)``."""
        ...
