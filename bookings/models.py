"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from bookings.domain import BookingStatus

STATUS_CHOICES = [(status.value, status.value) for status in BookingStatus]


class Customer(models.Model):
    """Persistence model for customers."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    operator = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="customers"
    )
    name = models.CharField(max_length=255)
    booking_note = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["operator", "name"], name="customer_operator_name_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Schedule(models.Model):
    """Persistence model for publishing schedules."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    operator = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="schedules"
    )
    name = models.CharField(max_length=255)
    archived = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["operator", "archived"], name="schedule_operator_archived_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class ScheduleIssue(models.Model):
    """Persistence model for the issues of a schedule."""

    schedule = models.ForeignKey(Schedule, on_delete=models.CASCADE, related_name="issues")
    name = models.CharField(max_length=100)
    close_date = models.DateTimeField()
    sort_order = models.PositiveIntegerField()

    class Meta:
        ordering = ["sort_order"]
        indexes = [
            models.Index(fields=["schedule", "name"], name="issue_schedule_name_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.schedule.name} - {self.name}"


class Magazine(models.Model):
    """Persistence model for magazines."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    operator = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="magazines"
    )
    name = models.CharField(max_length=255)
    schedule = models.ForeignKey(
        Schedule, on_delete=models.PROTECT, related_name="magazines", null=True, blank=True
    )
    archived = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class PageConfiguration(models.Model):
    """Number of pages a magazine prints for one issue."""

    magazine = models.ForeignKey(
        Magazine, on_delete=models.CASCADE, related_name="page_configurations"
    )
    issue_name = models.CharField(max_length=100)
    total_pages = models.PositiveIntegerField(default=40, validators=[MinValueValidator(1)])

    def __str__(self) -> str:
        return f"{self.magazine.name} - {self.issue_name}: {self.total_pages}"


class ContentSize(models.Model):
    """Persistence model for ad-space sizes."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    operator = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="content_sizes"
    )
    description = models.CharField(max_length=255)
    size = models.DecimalField(
        max_digits=6,
        decimal_places=3,
        validators=[MinValueValidator(Decimal("0.001")), MaxValueValidator(Decimal("999.999"))],
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["description"]

    def __str__(self) -> str:
        return self.description


class ContentSizePrice(models.Model):
    """List price of a content size in one magazine."""

    content_size = models.ForeignKey(ContentSize, on_delete=models.CASCADE, related_name="prices")
    magazine = models.ForeignKey(Magazine, on_delete=models.CASCADE, related_name="content_prices")
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])

    def __str__(self) -> str:
        return f"{self.content_size.description} in {self.magazine.name} - {self.price}"


class Booking(models.Model):
    """Persistence model for bookings."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    operator = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bookings"
    )
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name="bookings")
    additional_charges = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total_value = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    notes = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=BookingStatus.ACTIVE.value
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["operator", "-created_at"], name="booking_operator_created_idx"),
            models.Index(fields=["customer"], name="booking_customer_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.customer.name} - {self.total_value}"


class BookingEntry(models.Model):
    """One magazine row of a booking."""

    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="entries")
    position = models.PositiveIntegerField(default=0)
    magazine = models.ForeignKey(Magazine, on_delete=models.PROTECT, related_name="booking_entries")
    content_size = models.ForeignKey(
        ContentSize, on_delete=models.PROTECT, related_name="booking_entries"
    )
    content_type = models.CharField(max_length=100)
    list_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    discount_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    discount_value = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    additional_charges = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    net_value = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    start_issue = models.CharField(max_length=100)
    finish_issue = models.CharField(max_length=100, blank=True, null=True)
    is_ongoing = models.BooleanField(default=False)

    class Meta:
        ordering = ["position"]
        verbose_name_plural = "booking entries"
        indexes = [
            models.Index(fields=["magazine", "start_issue"], name="entry_magazine_start_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.magazine.name} - {self.content_type} from {self.start_issue}"


class LeafletDelivery(models.Model):
    """Persistence model for leaflet inserts."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    operator = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="leaflet_deliveries"
    )
    customer = models.ForeignKey(
        Customer, on_delete=models.PROTECT, related_name="leaflet_deliveries"
    )
    magazine = models.ForeignKey(
        Magazine, on_delete=models.PROTECT, related_name="leaflet_deliveries"
    )
    issue = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    discount_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    discount_value = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    additional_charges = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    net_value = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    leaflet_description = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    note = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=BookingStatus.ACTIVE.value
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "leaflet deliveries"
        indexes = [
            models.Index(fields=["customer", "issue"], name="leaflet_customer_issue_idx"),
            models.Index(fields=["magazine", "issue"], name="leaflet_magazine_issue_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.leaflet_description} ({self.quantity}x) - {self.issue}"
