from bookings.services.booking_service import BookingDraft, BookingService, EntryDraft, LeafletDraft
from bookings.services.catalog_service import (
    CatalogService,
    ContentSizeDraft,
    CurrentIssue,
    CustomerDraft,
    MagazineDraft,
    PriceDraft,
)
from bookings.services.dashboard_service import DashboardService, DashboardStats
from bookings.services.schedule_service import IssueDraft, ScheduleService

__all__ = [
    "BookingDraft",
    "BookingService",
    "EntryDraft",
    "LeafletDraft",
    "CatalogService",
    "ContentSizeDraft",
    "CurrentIssue",
    "CustomerDraft",
    "MagazineDraft",
    "PriceDraft",
    "DashboardService",
    "DashboardStats",
    "IssueDraft",
    "ScheduleService",
]
