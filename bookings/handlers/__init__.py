from bookings.handlers.views import (
    BookingDetailView,
    BookingListView,
    ContentSizeDetailView,
    ContentSizeListView,
    ContentSizePriceView,
    ContentTypeListView,
    CurrentIssueDashboardView,
    CurrentOpenIssueView,
    CustomerBookingsView,
    CustomerDetailView,
    CustomerListView,
    DashboardStatsView,
    IssueValidationView,
    LeafletDeliveryDetailView,
    LeafletDeliveryListView,
    MagazineArchiveView,
    MagazineCurrentIssueView,
    MagazineDetailView,
    MagazineListView,
    PublicationTotalsView,
    RecentActivityView,
    ScheduleArchiveView,
    ScheduleAvailableIssuesView,
    ScheduleDetailView,
    ScheduleListView,
    TopCustomersView,
)

__all__ = [
    "BookingDetailView",
    "BookingListView",
    "ContentSizeDetailView",
    "ContentSizeListView",
    "ContentSizePriceView",
    "ContentTypeListView",
    "CurrentIssueDashboardView",
    "CurrentOpenIssueView",
    "CustomerBookingsView",
    "CustomerDetailView",
    "CustomerListView",
    "DashboardStatsView",
    "IssueValidationView",
    "LeafletDeliveryDetailView",
    "LeafletDeliveryListView",
    "MagazineArchiveView",
    "MagazineCurrentIssueView",
    "MagazineDetailView",
    "MagazineListView",
    "PublicationTotalsView",
    "RecentActivityView",
    "ScheduleArchiveView",
    "ScheduleAvailableIssuesView",
    "ScheduleDetailView",
    "ScheduleListView",
    "TopCustomersView",
]
