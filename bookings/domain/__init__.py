from bookings.domain.availability import AvailabilityResult
from bookings.domain.models import (
    Booking,
    BookingEntry,
    BookingStatus,
    ContentSize,
    ContentSizePrice,
    ContentType,
    Customer,
    IssueRange,
    LeafletDelivery,
    Magazine,
    PageConfiguration,
    Schedule,
    ScheduleIssue,
)
from bookings.domain.pricing import DiscountSpec, PriceCalculator, PriceLine, ValidationPolicy
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

__all__ = [
    "AvailabilityResult",
    "Booking",
    "BookingEntry",
    "BookingStatus",
    "ContentSize",
    "ContentSizePrice",
    "ContentType",
    "Customer",
    "IssueRange",
    "LeafletDelivery",
    "Magazine",
    "PageConfiguration",
    "Schedule",
    "ScheduleIssue",
    "DiscountSpec",
    "PriceCalculator",
    "PriceLine",
    "ValidationPolicy",
    "BookingId",
    "ContentSizeId",
    "CustomerId",
    "LeafletDeliveryId",
    "MagazineId",
    "Money",
    "OperatorId",
    "ScheduleId",
]
