"""Booking service - bookings and leaflet deliveries.

Every write follows the same order: referenced records must belong to the
operator, every issue named by the payload must still be open, then each
line is priced and the aggregate is saved. A closed issue rejects the whole
payload before anything is written.
"""

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from django.utils import timezone

from bookings.domain import (
    Booking,
    BookingEntry,
    BookingId,
    BookingStatus,
    ContentSize,
    ContentSizeId,
    Customer,
    CustomerId,
    IssueRange,
    LeafletDelivery,
    LeafletDeliveryId,
    Magazine,
    MagazineId,
    OperatorId,
    PriceCalculator,
    Schedule,
)
from bookings.domain import availability
from bookings.domain.availability import AvailabilityResult
from bookings.domain.errors import (
    BookingNotFoundError,
    CustomerNotFoundError,
    InvalidInputError,
    InvalidReferenceError,
    IssueClosedError,
    LeafletDeliveryNotFoundError,
)
from bookings.services._ids import parse_id
from bookings.stores.interfaces import BookingStore, CatalogStore, ScheduleStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryDraft:
    """One magazine row of a booking request, amounts still raw."""

    magazine_id: str
    content_size_id: str
    content_type: str
    start_issue: str
    finish_issue: str | None = None
    is_ongoing: bool = False
    base_price: object = None
    discount_percentage: object = None
    discount_value: object = None
    additional_charges: object = None


@dataclass(frozen=True)
class BookingDraft:
    customer_id: str
    entries: Sequence[EntryDraft]
    additional_charges: object = None
    notes: str = ""
    status: str | None = None


@dataclass(frozen=True)
class LeafletDraft:
    customer_id: str
    magazine_id: str
    issue: str
    price: object
    description: str
    quantity: int
    discount_percentage: object = None
    discount_value: object = None
    additional_charges: object = None
    note: str = ""
    status: str | None = None


def parse_status(value: str | None) -> BookingStatus | None:
    if value in (None, ""):
        return None
    try:
        return BookingStatus(value)
    except ValueError:
        raise InvalidInputError("status", "must be Active, Completed or Cancelled") from None


def _closed(result: AvailabilityResult) -> IssueClosedError:
    return IssueClosedError(
        issue_name=result.issue_name,
        message=result.message,
        schedule_name=result.schedule_name,
        close_date=result.close_date,
    )


class _References:
    """Per-request lookups of records the payload points at."""

    def __init__(self, catalog: CatalogStore, schedules: ScheduleStore, operator_id: OperatorId) -> None:
        self._catalog = catalog
        self._schedule_store = schedules
        self._operator_id = operator_id
        self._magazines: dict[MagazineId, Magazine] = {}
        self._content_sizes: dict[ContentSizeId, ContentSize] = {}
        self._governing: dict[MagazineId, Schedule | None] = {}
        self.schedules = schedules.list_schedules(operator_id)

    def customer(self, customer_id: str) -> Customer:
        customer = self._catalog.get_customer(
            self._operator_id, parse_id(CustomerId, customer_id, "customer")
        )
        if customer is None:
            raise InvalidReferenceError("Customer")
        return customer

    def magazine(self, magazine_id: str) -> Magazine:
        magazine = self.magazine_by_id(parse_id(MagazineId, magazine_id, "magazine"))
        if magazine is None:
            raise InvalidReferenceError("Magazine")
        return magazine

    def magazine_by_id(self, magazine_id: MagazineId) -> Magazine | None:
        if magazine_id not in self._magazines:
            magazine = self._catalog.get_magazine(self._operator_id, magazine_id)
            if magazine is None:
                return None
            self._magazines[magazine_id] = magazine
        return self._magazines[magazine_id]

    def content_size(self, content_size_id: str) -> ContentSize:
        key = parse_id(ContentSizeId, content_size_id, "content size")
        if key not in self._content_sizes:
            content_size = self._catalog.get_content_size(self._operator_id, key)
            if content_size is None:
                raise InvalidReferenceError("Content size")
            self._content_sizes[key] = content_size
        return self._content_sizes[key]

    def schedule_for(self, magazine: Magazine) -> Schedule | None:
        """The schedule that orders ``magazine``'s issues, archived or not."""
        if magazine.id not in self._governing:
            schedule = None
            if magazine.schedule_id is not None:
                schedule = next((s for s in self.schedules if s.id == magazine.schedule_id), None)
                if schedule is None:
                    schedule = self._schedule_store.get_schedule(
                        self._operator_id, magazine.schedule_id
                    )
            self._governing[magazine.id] = schedule
        return self._governing[magazine.id]


class BookingService:
    """Service for booking and leaflet delivery operations."""

    def __init__(
        self,
        bookings: BookingStore,
        catalog: CatalogStore,
        schedules: ScheduleStore,
        calculator: PriceCalculator | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._bookings = bookings
        self._catalog = catalog
        self._schedules = schedules
        self._calculator = calculator or PriceCalculator()
        self._clock = clock

    # Bookings

    def list_bookings(
        self,
        operator_id: OperatorId,
        customer_id: str | None = None,
        magazine_id: str | None = None,
        issue: str | None = None,
        status: str | None = None,
    ) -> list[Booking]:
        """Return the operator's bookings, optionally filtered.

        The issue filter keeps bookings with an entry running in that issue,
        judged by the sort order of the entry's magazine schedule.
        """
        customer = parse_id(CustomerId, customer_id, "customer") if customer_id else None
        magazine = parse_id(MagazineId, magazine_id, "magazine") if magazine_id else None
        bookings = self._bookings.list_bookings(
            operator_id, customer_id=customer, magazine_id=magazine, status=parse_status(status)
        )
        if not issue:
            return bookings

        refs = _References(self._catalog, self._schedules, operator_id)

        def runs_in_issue(entry: BookingEntry) -> bool:
            if magazine is not None and entry.magazine_id != magazine:
                return False
            entry_magazine = refs.magazine_by_id(entry.magazine_id)
            schedule = refs.schedule_for(entry_magazine) if entry_magazine else None
            return entry.issues.covers(issue, schedule)

        return [b for b in bookings if any(runs_in_issue(entry) for entry in b.entries)]

    def get_booking(self, operator_id: OperatorId, booking_id: str) -> Booking:
        """Return a booking by ID.

        Raises:
            InvalidIdError: If the booking_id is not a valid UUID.
            BookingNotFoundError: If the booking does not exist.
        """
        booking = self._bookings.get_booking(operator_id, parse_id(BookingId, booking_id, "booking"))
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    def create_booking(self, operator_id: OperatorId, draft: BookingDraft) -> Booking:
        booking = self._build_booking(
            operator_id,
            BookingId(uuid.uuid4()),
            draft,
            parse_status(draft.status) or BookingStatus.ACTIVE,
        )
        saved = self._bookings.save_booking(booking)
        logger.info(
            "Booking %s created for customer %s: %d entries, total %s",
            saved.id.value,
            saved.customer_id.value,
            len(saved.entries),
            saved.total_value,
        )
        return saved

    def update_booking(self, operator_id: OperatorId, booking_id: str, draft: BookingDraft) -> Booking:
        """Replace a booking with the submitted fields, repricing every entry."""
        existing = self.get_booking(operator_id, booking_id)
        booking = self._build_booking(
            operator_id,
            existing.id,
            draft,
            parse_status(draft.status) or existing.status,
        )
        saved = self._bookings.save_booking(booking)
        logger.info("Booking %s updated, total %s", saved.id.value, saved.total_value)
        return saved

    def delete_booking(self, operator_id: OperatorId, booking_id: str) -> None:
        if not self._bookings.delete_booking(operator_id, parse_id(BookingId, booking_id, "booking")):
            raise BookingNotFoundError(booking_id)
        logger.info("Booking %s deleted", booking_id)

    def customer_bookings(
        self, operator_id: OperatorId, customer_id: str
    ) -> tuple[Customer, list[Booking], Decimal]:
        """Return a customer, their bookings and the sum of the booking totals."""
        customer = self._catalog.get_customer(
            operator_id, parse_id(CustomerId, customer_id, "customer")
        )
        if customer is None:
            raise CustomerNotFoundError(customer_id)
        bookings = self._bookings.list_bookings(operator_id, customer_id=customer.id)
        total = sum((booking.total_value for booking in bookings), Decimal("0"))
        return customer, bookings, total

    def _build_booking(
        self,
        operator_id: OperatorId,
        booking_id: BookingId,
        draft: BookingDraft,
        status: BookingStatus,
    ) -> Booking:
        if not draft.entries:
            raise InvalidInputError("magazineEntries", "must contain at least one magazine")

        refs = _References(self._catalog, self._schedules, operator_id)
        customer = refs.customer(draft.customer_id)
        resolved = [
            (
                entry,
                refs.magazine(entry.magazine_id),
                refs.content_size(entry.content_size_id),
                self._issue_range(entry),
            )
            for entry in draft.entries
        ]

        issue_names = [name for _, _, _, issues in resolved for name in issues.issue_names()]
        closed = availability.first_closed(issue_names, refs.schedules, self._clock())
        if closed is not None:
            logger.info("Booking rejected for operator %s: %s", operator_id.value, closed.message)
            raise _closed(closed)

        entries = []
        for entry, magazine, content_size, issues in resolved:
            issues.validate_against(refs.schedule_for(magazine))
            entries.append(self._price_entry(entry, magazine, content_size, issues))

        additional_charges = self._calculator.to_amount(draft.additional_charges, "additionalCharges")
        return Booking(
            id=booking_id,
            operator_id=operator_id,
            customer_id=customer.id,
            entries=tuple(entries),
            additional_charges=additional_charges,
            total_value=self._calculator.compute_booking_total(
                [entry.price for entry in entries], additional_charges
            ),
            status=status,
            notes=(draft.notes or "").strip(),
        )

    def _price_entry(
        self, entry: EntryDraft, magazine: Magazine, content_size: ContentSize, issues: IssueRange
    ) -> BookingEntry:
        base_price = entry.base_price
        if base_price in (None, ""):
            list_price = content_size.price_for(magazine.id)
            base_price = list_price.amount if list_price is not None else None

        content_type = (entry.content_type or "").strip()
        if not content_type:
            raise InvalidInputError("contentType", "is required")

        line = self._calculator.price_line(
            base_price, entry.discount_percentage, entry.discount_value, entry.additional_charges
        )
        return BookingEntry(
            magazine_id=magazine.id,
            content_size_id=content_size.id,
            content_type=content_type,
            price=line,
            issues=issues,
            net_value=self._calculator.compute_net_value(line),
        )

    @staticmethod
    def _issue_range(entry: EntryDraft) -> IssueRange:
        try:
            return IssueRange(
                start_issue=(entry.start_issue or "").strip(),
                finish_issue=(entry.finish_issue or "").strip() or None,
                is_ongoing=bool(entry.is_ongoing),
            )
        except ValueError:
            raise InvalidInputError("startIssue", "is required") from None

    # Leaflet deliveries

    def list_leaflet_deliveries(
        self,
        operator_id: OperatorId,
        customer_id: str | None = None,
        magazine_id: str | None = None,
        issue: str | None = None,
        status: str | None = None,
    ) -> list[LeafletDelivery]:
        return self._bookings.list_leaflet_deliveries(
            operator_id,
            customer_id=parse_id(CustomerId, customer_id, "customer") if customer_id else None,
            magazine_id=parse_id(MagazineId, magazine_id, "magazine") if magazine_id else None,
            issue=issue or None,
            status=parse_status(status),
        )

    def get_leaflet_delivery(self, operator_id: OperatorId, delivery_id: str) -> LeafletDelivery:
        delivery = self._bookings.get_leaflet_delivery(
            operator_id, parse_id(LeafletDeliveryId, delivery_id, "leaflet delivery")
        )
        if delivery is None:
            raise LeafletDeliveryNotFoundError(delivery_id)
        return delivery

    def create_leaflet_delivery(self, operator_id: OperatorId, draft: LeafletDraft) -> LeafletDelivery:
        delivery = self._build_leaflet_delivery(
            operator_id,
            LeafletDeliveryId(uuid.uuid4()),
            draft,
            parse_status(draft.status) or BookingStatus.ACTIVE,
        )
        saved = self._bookings.save_leaflet_delivery(delivery)
        logger.info("Leaflet delivery %s created, net %s", saved.id.value, saved.net_value)
        return saved

    def update_leaflet_delivery(
        self, operator_id: OperatorId, delivery_id: str, draft: LeafletDraft
    ) -> LeafletDelivery:
        existing = self.get_leaflet_delivery(operator_id, delivery_id)
        delivery = self._build_leaflet_delivery(
            operator_id, existing.id, draft, parse_status(draft.status) or existing.status
        )
        saved = self._bookings.save_leaflet_delivery(delivery)
        logger.info("Leaflet delivery %s updated, net %s", saved.id.value, saved.net_value)
        return saved

    def delete_leaflet_delivery(self, operator_id: OperatorId, delivery_id: str) -> None:
        deleted = self._bookings.delete_leaflet_delivery(
            operator_id, parse_id(LeafletDeliveryId, delivery_id, "leaflet delivery")
        )
        if not deleted:
            raise LeafletDeliveryNotFoundError(delivery_id)
        logger.info("Leaflet delivery %s deleted", delivery_id)

    def _build_leaflet_delivery(
        self,
        operator_id: OperatorId,
        delivery_id: LeafletDeliveryId,
        draft: LeafletDraft,
        status: BookingStatus,
    ) -> LeafletDelivery:
        refs = _References(self._catalog, self._schedules, operator_id)
        customer = refs.customer(draft.customer_id)
        magazine = refs.magazine(draft.magazine_id)

        issue = (draft.issue or "").strip()
        if not issue:
            raise InvalidInputError("issue", "is required")
        description = (draft.description or "").strip()
        if not description:
            raise InvalidInputError("leafletDescription", "is required")
        if draft.quantity is None or int(draft.quantity) < 1:
            raise InvalidInputError("quantity", "must be at least 1")

        result = availability.check_availability(issue, refs.schedules, self._clock())
        if result.closed:
            logger.info("Leaflet delivery rejected for operator %s: %s", operator_id.value, result.message)
            raise _closed(result)

        line = self._calculator.price_line(
            draft.price, draft.discount_percentage, draft.discount_value, draft.additional_charges
        )
        return LeafletDelivery(
            id=delivery_id,
            operator_id=operator_id,
            customer_id=customer.id,
            magazine_id=magazine.id,
            issue=issue,
            price=line,
            net_value=self._calculator.compute_net_value(line),
            description=description,
            quantity=int(draft.quantity),
            note=(draft.note or "").strip(),
            status=status,
        )
