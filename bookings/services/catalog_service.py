"""Catalog service - customers, magazines and content sizes.

Names of customers and magazines are unique per operator, compared without
regard to case.
"""

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from django.utils import timezone

from bookings.domain import (
    ContentSize,
    ContentSizeId,
    ContentSizePrice,
    ContentType,
    Customer,
    CustomerId,
    Magazine,
    MagazineId,
    Money,
    OperatorId,
    PageConfiguration,
    ScheduleId,
    ScheduleIssue,
)
from bookings.domain.availability import current_or_nearest_issue
from bookings.domain.errors import (
    ContentSizeNotFoundError,
    CustomerNotFoundError,
    DuplicateNameError,
    InvalidInputError,
    InvalidReferenceError,
    MagazineNotFoundError,
    NoScheduleError,
    PriceNotFoundError,
)
from bookings.services._ids import parse_id
from bookings.stores.interfaces import CatalogStore, ScheduleStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomerDraft:
    name: str
    booking_note: str = ""


@dataclass(frozen=True)
class MagazineDraft:
    name: str
    schedule_id: str
    page_configurations: Sequence[PageConfiguration] = ()


@dataclass(frozen=True)
class PriceDraft:
    magazine_id: str
    price: Decimal


@dataclass(frozen=True)
class ContentSizeDraft:
    description: str
    size: Decimal
    prices: Sequence[PriceDraft] = ()


@dataclass(frozen=True)
class CurrentIssue:
    """A magazine's current issue together with the pages it prints."""

    magazine_name: str
    issue: ScheduleIssue | None
    total_pages: int | None


def _required(value: str, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise InvalidInputError(field, "is required")
    return value


class CatalogService:
    """Service for the reference data bookings point at."""

    def __init__(
        self,
        store: CatalogStore,
        schedules: ScheduleStore,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._schedules = schedules
        self._clock = clock

    @staticmethod
    def content_types() -> list[str]:
        """The default content type vocabulary offered for new entries."""
        return [content_type.value for content_type in ContentType]

    # Customers

    def list_customers(self, operator_id: OperatorId) -> list[Customer]:
        return self._store.list_customers(operator_id)

    def get_customer(self, operator_id: OperatorId, customer_id: str) -> Customer:
        customer = self._store.get_customer(
            operator_id, parse_id(CustomerId, customer_id, "customer")
        )
        if customer is None:
            raise CustomerNotFoundError(customer_id)
        return customer

    def create_customer(self, operator_id: OperatorId, draft: CustomerDraft) -> Customer:
        name = _required(draft.name, "name")
        if self._store.customer_name_taken(operator_id, name):
            raise DuplicateNameError("customer", name)
        saved = self._store.save_customer(
            Customer(
                id=CustomerId(uuid.uuid4()),
                operator_id=operator_id,
                name=name,
                booking_note=(draft.booking_note or "").strip(),
            )
        )
        logger.info("Customer %s created", saved.id.value)
        return saved

    def update_customer(
        self, operator_id: OperatorId, customer_id: str, draft: CustomerDraft
    ) -> Customer:
        existing = self.get_customer(operator_id, customer_id)
        name = _required(draft.name, "name")
        if self._store.customer_name_taken(operator_id, name, exclude=existing.id):
            raise DuplicateNameError("customer", name)
        return self._store.save_customer(
            replace(existing, name=name, booking_note=(draft.booking_note or "").strip())
        )

    def delete_customer(self, operator_id: OperatorId, customer_id: str) -> None:
        """Delete a customer.

        Raises:
            CustomerNotFoundError: If the customer does not exist.
            RecordInUseError: If bookings or leaflet deliveries reference it.
        """
        key = parse_id(CustomerId, customer_id, "customer")
        if not self._store.delete_customer(operator_id, key):
            raise CustomerNotFoundError(customer_id)
        logger.info("Customer %s deleted", customer_id)

    # Magazines

    def list_magazines(self, operator_id: OperatorId, include_archived: bool = False) -> list[Magazine]:
        return self._store.list_magazines(operator_id, include_archived=include_archived)

    def get_magazine(self, operator_id: OperatorId, magazine_id: str) -> Magazine:
        magazine = self._store.get_magazine(
            operator_id, parse_id(MagazineId, magazine_id, "magazine")
        )
        if magazine is None:
            raise MagazineNotFoundError(magazine_id)
        return magazine

    def create_magazine(self, operator_id: OperatorId, draft: MagazineDraft) -> Magazine:
        name = _required(draft.name, "name")
        schedule_id = self._schedule_reference(operator_id, draft.schedule_id)
        if self._store.magazine_name_taken(operator_id, name):
            raise DuplicateNameError("magazine", name)
        saved = self._store.save_magazine(
            Magazine(
                id=MagazineId(uuid.uuid4()),
                operator_id=operator_id,
                name=name,
                schedule_id=schedule_id,
                page_configurations=tuple(draft.page_configurations),
            )
        )
        logger.info("Magazine %s created", saved.id.value)
        return saved

    def update_magazine(
        self, operator_id: OperatorId, magazine_id: str, draft: MagazineDraft
    ) -> Magazine:
        existing = self.get_magazine(operator_id, magazine_id)
        name = _required(draft.name, "name")
        schedule_id = self._schedule_reference(operator_id, draft.schedule_id)
        if self._store.magazine_name_taken(operator_id, name, exclude=existing.id):
            raise DuplicateNameError("magazine", name)
        return self._store.save_magazine(
            replace(
                existing,
                name=name,
                schedule_id=schedule_id,
                page_configurations=tuple(draft.page_configurations),
            )
        )

    def set_magazine_archived(
        self, operator_id: OperatorId, magazine_id: str, archived: bool
    ) -> Magazine:
        existing = self.get_magazine(operator_id, magazine_id)
        saved = self._store.save_magazine(replace(existing, archived=archived))
        logger.info("Magazine %s archived=%s", saved.id.value, archived)
        return saved

    def delete_magazine(self, operator_id: OperatorId, magazine_id: str) -> None:
        key = parse_id(MagazineId, magazine_id, "magazine")
        if not self._store.delete_magazine(operator_id, key):
            raise MagazineNotFoundError(magazine_id)
        logger.info("Magazine %s deleted", magazine_id)

    def current_issue(self, operator_id: OperatorId, magazine_id: str) -> CurrentIssue:
        """The magazine's first issue still open, else its last issue.

        Raises:
            MagazineNotFoundError: If the magazine does not exist.
            NoScheduleError: If the magazine follows no schedule.
        """
        magazine = self.get_magazine(operator_id, magazine_id)
        schedule = None
        if magazine.schedule_id is not None:
            schedule = self._schedules.get_schedule(operator_id, magazine.schedule_id)
        if schedule is None:
            raise NoScheduleError(magazine_id)

        name = current_or_nearest_issue(schedule, self._clock())
        if name is None:
            return CurrentIssue(magazine_name=magazine.name, issue=None, total_pages=None)
        return CurrentIssue(
            magazine_name=magazine.name,
            issue=schedule.issue(name),
            total_pages=magazine.total_pages(name),
        )

    def _schedule_reference(self, operator_id: OperatorId, schedule_id: str) -> ScheduleId:
        key = parse_id(ScheduleId, schedule_id, "schedule")
        if self._schedules.get_schedule(operator_id, key) is None:
            raise InvalidReferenceError("Schedule")
        return key

    # Content sizes

    def list_content_sizes(self, operator_id: OperatorId) -> list[ContentSize]:
        return self._store.list_content_sizes(operator_id)

    def get_content_size(self, operator_id: OperatorId, content_size_id: str) -> ContentSize:
        content_size = self._store.get_content_size(
            operator_id, parse_id(ContentSizeId, content_size_id, "content size")
        )
        if content_size is None:
            raise ContentSizeNotFoundError(content_size_id)
        return content_size

    def create_content_size(self, operator_id: OperatorId, draft: ContentSizeDraft) -> ContentSize:
        content_size = self._build_content_size(operator_id, ContentSizeId(uuid.uuid4()), draft)
        saved = self._store.save_content_size(content_size)
        logger.info("Content size %s created", saved.id.value)
        return saved

    def update_content_size(
        self, operator_id: OperatorId, content_size_id: str, draft: ContentSizeDraft
    ) -> ContentSize:
        existing = self.get_content_size(operator_id, content_size_id)
        return self._store.save_content_size(
            self._build_content_size(operator_id, existing.id, draft)
        )

    def delete_content_size(self, operator_id: OperatorId, content_size_id: str) -> None:
        key = parse_id(ContentSizeId, content_size_id, "content size")
        if not self._store.delete_content_size(operator_id, key):
            raise ContentSizeNotFoundError(content_size_id)
        logger.info("Content size %s deleted", content_size_id)

    def price_for(self, operator_id: OperatorId, content_size_id: str, magazine_id: str) -> Money:
        """List price of a content size in one magazine.

        Raises:
            ContentSizeNotFoundError: If the content size does not exist.
            PriceNotFoundError: If the size carries no price for the magazine.
        """
        content_size = self.get_content_size(operator_id, content_size_id)
        price = content_size.price_for(parse_id(MagazineId, magazine_id, "magazine"))
        if price is None:
            raise PriceNotFoundError(content_size_id, magazine_id)
        return price

    def _build_content_size(
        self, operator_id: OperatorId, content_size_id: ContentSizeId, draft: ContentSizeDraft
    ) -> ContentSize:
        prices = []
        for price in draft.prices:
            magazine_id = parse_id(MagazineId, price.magazine_id, "magazine")
            if self._store.get_magazine(operator_id, magazine_id) is None:
                raise InvalidReferenceError("Magazine")
            if price.price is None or price.price < 0:
                raise InvalidInputError("prices", "must not be negative")
            prices.append(ContentSizePrice(magazine_id=magazine_id, price=Money.of(price.price)))
        if draft.size is None or draft.size <= 0:
            raise InvalidInputError("size", "must be greater than zero")
        return ContentSize(
            id=content_size_id,
            operator_id=operator_id,
            description=_required(draft.description, "description"),
            size=draft.size,
            prices=tuple(prices),
        )
