from django.urls import path

from bookings.handlers import (
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

urlpatterns = [
    path("schedules", ScheduleListView.as_view(), name="schedule-list"),
    path("schedules/current-issue", CurrentOpenIssueView.as_view(), name="schedule-current-issue"),
    path(
        "schedules/validate-issue/<str:issue_name>",
        IssueValidationView.as_view(),
        name="schedule-validate-issue",
    ),
    path("schedules/<str:schedule_id>", ScheduleDetailView.as_view(), name="schedule-detail"),
    path(
        "schedules/<str:schedule_id>/archive",
        ScheduleArchiveView.as_view(),
        name="schedule-archive",
    ),
    path(
        "schedules/<str:schedule_id>/available-issues",
        ScheduleAvailableIssuesView.as_view(),
        name="schedule-available-issues",
    ),
    path("customers", CustomerListView.as_view(), name="customer-list"),
    path("customers/<str:customer_id>", CustomerDetailView.as_view(), name="customer-detail"),
    path("magazines", MagazineListView.as_view(), name="magazine-list"),
    path(
        "magazines/current-issue/<str:magazine_id>",
        MagazineCurrentIssueView.as_view(),
        name="magazine-current-issue",
    ),
    path("magazines/<str:magazine_id>", MagazineDetailView.as_view(), name="magazine-detail"),
    path(
        "magazines/<str:magazine_id>/archive",
        MagazineArchiveView.as_view(),
        name="magazine-archive",
    ),
    path("content-sizes", ContentSizeListView.as_view(), name="content-size-list"),
    path(
        "content-sizes/<str:content_size_id>",
        ContentSizeDetailView.as_view(),
        name="content-size-detail",
    ),
    path(
        "content-sizes/<str:content_size_id>/price/<str:magazine_id>",
        ContentSizePriceView.as_view(),
        name="content-size-price",
    ),
    path("content-types", ContentTypeListView.as_view(), name="content-type-list"),
    path("bookings", BookingListView.as_view(), name="booking-list"),
    path(
        "bookings/customer/<str:customer_id>",
        CustomerBookingsView.as_view(),
        name="customer-bookings",
    ),
    path("bookings/<str:booking_id>", BookingDetailView.as_view(), name="booking-detail"),
    path("leaflet-deliveries", LeafletDeliveryListView.as_view(), name="leaflet-delivery-list"),
    path(
        "leaflet-deliveries/<str:delivery_id>",
        LeafletDeliveryDetailView.as_view(),
        name="leaflet-delivery-detail",
    ),
    path("dashboard/stats", DashboardStatsView.as_view(), name="dashboard-stats"),
    path(
        "dashboard/current-issue/<str:magazine_id>",
        CurrentIssueDashboardView.as_view(),
        name="dashboard-current-issue",
    ),
    path("dashboard/publications", PublicationTotalsView.as_view(), name="dashboard-publications"),
    path("dashboard/top-customers", TopCustomersView.as_view(), name="dashboard-top-customers"),
    path(
        "dashboard/recent-activity",
        RecentActivityView.as_view(),
        name="dashboard-recent-activity",
    ),
]
