"""Serializers for request payloads and domain model responses.

Input serializers check structure only. Amounts pass through untouched so
the price calculator applies the configured validation policy to them.
"""

from decimal import Decimal

from rest_framework import serializers

from bookings.domain import PageConfiguration
from bookings.domain.models import DEFAULT_TOTAL_PAGES
from bookings.services import (
    BookingDraft,
    ContentSizeDraft,
    CustomerDraft,
    EntryDraft,
    IssueDraft,
    LeafletDraft,
    MagazineDraft,
    PriceDraft,
)

STATUSES = ["Active", "Completed", "Cancelled"]


class AmountField(serializers.Field):
    """A raw numeric request value handed to the price calculator as-is."""

    def __init__(self, **kwargs) -> None:
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_null", True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, (dict, list, bool)):
            raise serializers.ValidationError("A number is required.")
        return data

    def to_representation(self, value):
        return str(value)


def _money(source: str) -> serializers.DecimalField:
    return serializers.DecimalField(max_digits=14, decimal_places=2, source=source)


# Input


class IssueInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    closeDate = serializers.DateTimeField(source="close_date")


class ScheduleInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    issues = IssueInputSerializer(many=True, allow_empty=False)

    def to_drafts(self) -> list[IssueDraft]:
        return [IssueDraft(**issue) for issue in self.validated_data["issues"]]


class BookingEntryInputSerializer(serializers.Serializer):
    magazine = serializers.CharField()
    contentSize = serializers.CharField()
    contentType = serializers.CharField(max_length=100)
    listPrice = AmountField()
    discountPercentage = AmountField()
    discountValue = AmountField()
    additionalCharges = AmountField()
    startIssue = serializers.CharField(max_length=100)
    finishIssue = serializers.CharField(
        max_length=100, required=False, allow_null=True, allow_blank=True
    )
    isOngoing = serializers.BooleanField(required=False, default=False)

    @staticmethod
    def to_draft(data: dict) -> EntryDraft:
        return EntryDraft(
            magazine_id=data["magazine"],
            content_size_id=data["contentSize"],
            content_type=data["contentType"],
            start_issue=data["startIssue"],
            finish_issue=data.get("finishIssue"),
            is_ongoing=data.get("isOngoing", False),
            base_price=data.get("listPrice"),
            discount_percentage=data.get("discountPercentage"),
            discount_value=data.get("discountValue"),
            additional_charges=data.get("additionalCharges"),
        )


class BookingInputSerializer(serializers.Serializer):
    customer = serializers.CharField()
    magazineEntries = BookingEntryInputSerializer(many=True, allow_empty=False)
    additionalCharges = AmountField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    status = serializers.ChoiceField(choices=STATUSES, required=False)

    def to_draft(self) -> BookingDraft:
        data = self.validated_data
        return BookingDraft(
            customer_id=data["customer"],
            entries=[BookingEntryInputSerializer.to_draft(entry) for entry in data["magazineEntries"]],
            additional_charges=data.get("additionalCharges"),
            notes=data.get("notes", ""),
            status=data.get("status"),
        )


class LeafletDeliveryInputSerializer(serializers.Serializer):
    customer = serializers.CharField()
    magazine = serializers.CharField()
    issue = serializers.CharField(max_length=100)
    price = AmountField(required=True, allow_null=False)
    discountPercentage = AmountField()
    discountValue = AmountField()
    additionalCharges = AmountField()
    leafletDescription = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1)
    note = serializers.CharField(required=False, allow_blank=True, default="")
    status = serializers.ChoiceField(choices=STATUSES, required=False)

    def to_draft(self) -> LeafletDraft:
        data = self.validated_data
        return LeafletDraft(
            customer_id=data["customer"],
            magazine_id=data["magazine"],
            issue=data["issue"],
            price=data["price"],
            description=data["leafletDescription"],
            quantity=data["quantity"],
            discount_percentage=data.get("discountPercentage"),
            discount_value=data.get("discountValue"),
            additional_charges=data.get("additionalCharges"),
            note=data.get("note", ""),
            status=data.get("status"),
        )


class CustomerInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    bookingNote = serializers.CharField(required=False, allow_blank=True, default="")

    def to_draft(self) -> CustomerDraft:
        data = self.validated_data
        return CustomerDraft(name=data["name"], booking_note=data.get("bookingNote", ""))


class PageConfigurationInputSerializer(serializers.Serializer):
    issueName = serializers.CharField(max_length=100)
    totalPages = serializers.IntegerField(min_value=1, default=DEFAULT_TOTAL_PAGES)


class MagazineInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    schedule = serializers.CharField()
    pageConfigurations = PageConfigurationInputSerializer(many=True, required=False, default=list)

    def to_draft(self) -> MagazineDraft:
        data = self.validated_data
        return MagazineDraft(
            name=data["name"],
            schedule_id=data["schedule"],
            page_configurations=[
                PageConfiguration(issue_name=config["issueName"], total_pages=config["totalPages"])
                for config in data.get("pageConfigurations", [])
            ],
        )


class PriceInputSerializer(serializers.Serializer):
    magazine = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))


class ContentSizeInputSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255)
    size = serializers.DecimalField(
        max_digits=6,
        decimal_places=3,
        min_value=Decimal("0.001"),
        max_value=Decimal("999.999"),
    )
    prices = PriceInputSerializer(many=True, required=False, default=list)

    def to_draft(self) -> ContentSizeDraft:
        data = self.validated_data
        return ContentSizeDraft(
            description=data["description"],
            size=data["size"],
            prices=[
                PriceDraft(magazine_id=price["magazine"], price=price["price"])
                for price in data.get("prices", [])
            ],
        )


# Output


class CustomerSerializer(serializers.Serializer):
    """Serializer for Customer domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    bookingNote = serializers.CharField(source="booking_note")
    createdAt = serializers.DateTimeField(source="created_at")


class PageConfigurationSerializer(serializers.Serializer):
    issueName = serializers.CharField(source="issue_name")
    totalPages = serializers.IntegerField(source="total_pages")


class MagazineSerializer(serializers.Serializer):
    """Serializer for Magazine domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    schedule = serializers.UUIDField(source="schedule_id.value", allow_null=True)
    archived = serializers.BooleanField()
    pageConfigurations = PageConfigurationSerializer(many=True, source="page_configurations")


class ContentSizePriceSerializer(serializers.Serializer):
    magazine = serializers.UUIDField(source="magazine_id.value")
    price = _money("price.amount")


class ContentSizeSerializer(serializers.Serializer):
    """Serializer for ContentSize domain model."""

    id = serializers.UUIDField(source="id.value")
    description = serializers.CharField()
    size = serializers.DecimalField(max_digits=6, decimal_places=3)
    prices = ContentSizePriceSerializer(many=True)


class MagazineIssueSerializer(serializers.Serializer):
    magazine = serializers.CharField(source="magazine_name")
    currentIssue = serializers.SerializerMethodField()

    def get_currentIssue(self, current) -> dict | None:
        if current.issue is None:
            return None
        return {
            "name": current.issue.name,
            "closeDate": serializers.DateTimeField().to_representation(current.issue.close_date),
            "sortOrder": current.issue.sort_order,
            "totalPages": current.total_pages,
        }


class ScheduleIssueSerializer(serializers.Serializer):
    name = serializers.CharField()
    closeDate = serializers.DateTimeField(source="close_date")
    sortOrder = serializers.IntegerField(source="sort_order")


class ScheduleSerializer(serializers.Serializer):
    """Serializer for Schedule domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    archived = serializers.BooleanField()
    issues = ScheduleIssueSerializer(many=True, source="ordered_issues")


class AvailabilitySerializer(serializers.Serializer):
    available = serializers.BooleanField()
    message = serializers.CharField()
    schedule = serializers.CharField(source="schedule_name", allow_null=True)
    closedDate = serializers.DateTimeField(source="close_date", allow_null=True)


class BookingEntrySerializer(serializers.Serializer):
    """Serializer for BookingEntry domain model."""

    magazine = serializers.UUIDField(source="magazine_id.value")
    contentSize = serializers.UUIDField(source="content_size_id.value")
    contentType = serializers.CharField(source="content_type")
    listPrice = _money("price.base_price")
    discountPercentage = _money("price.discount.percentage")
    discountValue = _money("price.discount.absolute_value")
    additionalCharges = _money("price.additional_charges")
    netValue = _money("net_value.amount")
    startIssue = serializers.CharField(source="issues.start_issue")
    finishIssue = serializers.CharField(source="issues.finish_issue", allow_null=True)
    isOngoing = serializers.BooleanField(source="issues.is_ongoing")


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.UUIDField(source="id.value")
    customer = serializers.UUIDField(source="customer_id.value")
    magazineEntries = BookingEntrySerializer(many=True, source="entries")
    additionalCharges = _money("additional_charges")
    totalValue = _money("total_value")
    notes = serializers.CharField()
    status = serializers.CharField(source="status.value")
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")


class LeafletDeliverySerializer(serializers.Serializer):
    """Serializer for LeafletDelivery domain model."""

    id = serializers.UUIDField(source="id.value")
    customer = serializers.UUIDField(source="customer_id.value")
    magazine = serializers.UUIDField(source="magazine_id.value")
    issue = serializers.CharField()
    price = _money("price.base_price")
    discountPercentage = _money("price.discount.percentage")
    discountValue = _money("price.discount.absolute_value")
    additionalCharges = _money("price.additional_charges")
    netValue = _money("net_value.amount")
    leafletDescription = serializers.CharField(source="description")
    quantity = serializers.IntegerField()
    note = serializers.CharField()
    status = serializers.CharField(source="status.value")
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")


class ContentAllocationSerializer(serializers.Serializer):
    contentType = serializers.CharField(source="content_type")
    pages = serializers.DecimalField(max_digits=9, decimal_places=3)
    count = serializers.IntegerField()
    value = serializers.DecimalField(max_digits=14, decimal_places=2)
    percentage = serializers.DecimalField(max_digits=5, decimal_places=1)


class IssueAllocationSerializer(serializers.Serializer):
    magazine = serializers.CharField(source="magazine_name")
    currentIssue = serializers.SerializerMethodField()
    totalBookedPages = serializers.DecimalField(
        max_digits=9, decimal_places=3, source="booked_pages"
    )
    totalPages = serializers.IntegerField(source="total_pages")
    unallocatedPages = serializers.DecimalField(
        max_digits=9, decimal_places=3, source="unallocated_pages"
    )
    breakdown = ContentAllocationSerializer(many=True)
    totalValue = _money("total_value")

    def get_currentIssue(self, allocation) -> dict:
        return {
            "name": allocation.issue_name,
            "totalPages": allocation.total_pages,
            "closeDate": serializers.DateTimeField().to_representation(allocation.close_date)
            if allocation.close_date
            else None,
        }


class DashboardStatsSerializer(serializers.Serializer):
    totalCustomers = serializers.IntegerField(source="total_customers")
    totalMagazines = serializers.IntegerField(source="total_magazines")
    totalBookings = serializers.IntegerField(source="total_bookings")
    totalLeafletDeliveries = serializers.IntegerField(source="total_leaflet_deliveries")
    totalBookingValue = _money("total_booking_value")
    totalLeafletValue = _money("total_leaflet_value")
    totalRevenue = _money("total_revenue")
    customerChange = serializers.IntegerField(source="customer_change")
    bookingChange = serializers.IntegerField(source="booking_change")
    leafletDeliveryChange = serializers.IntegerField(source="leaflet_delivery_change")
    bookingValueChange = serializers.IntegerField(source="booking_value_change")
    leafletValueChange = serializers.IntegerField(source="leaflet_value_change")
    totalRevenueChange = serializers.IntegerField(source="total_revenue_change")


class ContentTotalsSerializer(serializers.Serializer):
    contentType = serializers.CharField(source="content_type")
    count = serializers.IntegerField()
    value = serializers.DecimalField(max_digits=14, decimal_places=2)


class PublicationTotalsSerializer(serializers.Serializer):
    magazine = serializers.SerializerMethodField()
    totalBookings = serializers.IntegerField(source="total_bookings")
    totalValue = _money("total_value")
    contentTypeBreakdown = ContentTotalsSerializer(many=True, source="breakdown")

    def get_magazine(self, totals) -> dict:
        return {"id": str(totals.magazine_id.value), "name": totals.magazine_name}


class CustomerTotalsSerializer(serializers.Serializer):
    customer = serializers.UUIDField(source="customer_id.value")
    customerName = serializers.CharField(source="customer_name")
    totalBookings = serializers.IntegerField(source="total_bookings")
    totalValue = _money("total_value")


class ActivitySerializer(serializers.Serializer):
    type = serializers.CharField(source="kind")
    id = serializers.UUIDField()
    customerName = serializers.CharField(source="customer_name")
    description = serializers.CharField()
    value = serializers.DecimalField(max_digits=14, decimal_places=2)
    createdAt = serializers.DateTimeField(source="created_at")


class ArchiveInputSerializer(serializers.Serializer):
    archived = serializers.BooleanField()
