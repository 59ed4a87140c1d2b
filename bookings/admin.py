from django.contrib import admin

from bookings.models import (
    Booking,
    BookingEntry,
    ContentSize,
    ContentSizePrice,
    Customer,
    LeafletDelivery,
    Magazine,
    PageConfiguration,
    Schedule,
    ScheduleIssue,
)


class ScheduleIssueInline(admin.TabularInline):
    model = ScheduleIssue
    extra = 1


class PageConfigurationInline(admin.TabularInline):
    model = PageConfiguration
    extra = 1


class ContentSizePriceInline(admin.TabularInline):
    model = ContentSizePrice
    extra = 1


class BookingEntryInline(admin.TabularInline):
    model = BookingEntry
    extra = 1
    readonly_fields = ["net_value"]


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ["name", "operator", "created_at"]
    search_fields = ["name"]


@admin.register(Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    list_display = ["name", "operator", "archived"]
    list_filter = ["archived"]
    inlines = [ScheduleIssueInline]


@admin.register(Magazine)
class MagazineAdmin(admin.ModelAdmin):
    list_display = ["name", "schedule", "archived"]
    list_filter = ["archived"]
    inlines = [PageConfigurationInline]


@admin.register(ContentSize)
class ContentSizeAdmin(admin.ModelAdmin):
    list_display = ["description", "size"]
    inlines = [ContentSizePriceInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["customer", "status", "total_value", "created_at"]
    list_filter = ["status"]
    readonly_fields = ["total_value"]
    inlines = [BookingEntryInline]


@admin.register(LeafletDelivery)
class LeafletDeliveryAdmin(admin.ModelAdmin):
    list_display = ["leaflet_description", "customer", "magazine", "issue", "net_value", "status"]
    list_filter = ["status", "magazine"]
    readonly_fields = ["net_value"]
