"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.serializers import Serializer
from rest_framework.views import APIView

from bookings.domain import OperatorId, PriceCalculator, ValidationPolicy
from bookings.domain.errors import DomainError, ErrorCode, IssueClosedError
from bookings.handlers.serializers import (
    ActivitySerializer,
    ArchiveInputSerializer,
    AvailabilitySerializer,
    BookingInputSerializer,
    BookingSerializer,
    ContentSizeInputSerializer,
    ContentSizeSerializer,
    CustomerInputSerializer,
    CustomerSerializer,
    CustomerTotalsSerializer,
    DashboardStatsSerializer,
    IssueAllocationSerializer,
    LeafletDeliveryInputSerializer,
    LeafletDeliverySerializer,
    MagazineInputSerializer,
    MagazineIssueSerializer,
    MagazineSerializer,
    PublicationTotalsSerializer,
    ScheduleInputSerializer,
    ScheduleIssueSerializer,
    ScheduleSerializer,
)
from bookings.services import BookingService, CatalogService, DashboardService, ScheduleService
from bookings.stores.django_store import DjangoBookingStore, DjangoCatalogStore, DjangoScheduleStore

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes"}

NOT_FOUND = {
    ErrorCode.SCHEDULE_NOT_FOUND,
    ErrorCode.MAGAZINE_NOT_FOUND,
    ErrorCode.CUSTOMER_NOT_FOUND,
    ErrorCode.BOOKING_NOT_FOUND,
    ErrorCode.LEAFLET_DELIVERY_NOT_FOUND,
    ErrorCode.NO_CURRENT_ISSUE,
    ErrorCode.CONTENT_SIZE_NOT_FOUND,
    ErrorCode.PRICE_NOT_FOUND,
}


def price_calculator() -> PriceCalculator:
    return PriceCalculator(ValidationPolicy(settings.BOOKINGS_PRICE_VALIDATION))


def schedule_service() -> ScheduleService:
    return ScheduleService(DjangoScheduleStore())


def catalog_service() -> CatalogService:
    return CatalogService(DjangoCatalogStore(), DjangoScheduleStore())


def booking_service() -> BookingService:
    return BookingService(
        DjangoBookingStore(), DjangoCatalogStore(), DjangoScheduleStore(), price_calculator()
    )


def dashboard_service() -> DashboardService:
    return DashboardService(DjangoBookingStore(), DjangoCatalogStore(), DjangoScheduleStore())


def error_response(error: DomainError) -> Response:
    body = {"code": error.code.value, "message": error.message}
    if isinstance(error, IssueClosedError):
        body["schedule"] = error.schedule_name
        body["closedDate"] = error.close_date.isoformat() if error.close_date else None
    code = status.HTTP_404_NOT_FOUND if error.code in NOT_FOUND else status.HTTP_400_BAD_REQUEST
    return Response(body, status=code)


def include_archived(request: Request) -> bool:
    return request.query_params.get("includeArchived", "").lower() in TRUE_VALUES


def validation_failed(serializer: Serializer) -> Response:
    return Response(
        {"message": "Validation failed", "errors": serializer.errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


class OperatorAPIView(APIView):
    """Base view scoping every call to the authenticated operator."""

    @property
    def operator_id(self) -> OperatorId:
        return OperatorId(self.request.user.pk)

    def handle_exception(self, exc):
        if isinstance(exc, DomainError):
            logger.info("%s %s rejected: %s", self.request.method, self.request.path, exc)
            return error_response(exc)
        return super().handle_exception(exc)


class ScheduleListView(OperatorAPIView):
    """Handler for GET/POST /api/schedules"""

    def get(self, request: Request) -> Response:
        schedules = schedule_service().list_schedules(
            self.operator_id, include_archived=include_archived(request)
        )
        return Response(ScheduleSerializer(schedules, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = ScheduleInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        schedule = schedule_service().create_schedule(
            self.operator_id, serializer.validated_data["name"], serializer.to_drafts()
        )
        return Response(ScheduleSerializer(schedule).data, status=status.HTTP_201_CREATED)


class ScheduleDetailView(OperatorAPIView):
    """Handler for GET/PUT/DELETE /api/schedules/{schedule_id}"""

    def get(self, request: Request, schedule_id: str) -> Response:
        schedule = schedule_service().get_schedule(self.operator_id, schedule_id)
        return Response(ScheduleSerializer(schedule).data)

    def put(self, request: Request, schedule_id: str) -> Response:
        serializer = ScheduleInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        schedule = schedule_service().update_schedule(
            self.operator_id,
            schedule_id,
            serializer.validated_data["name"],
            serializer.to_drafts(),
        )
        return Response(ScheduleSerializer(schedule).data)

    def delete(self, request: Request, schedule_id: str) -> Response:
        schedule_service().delete_schedule(self.operator_id, schedule_id)
        return Response({"message": "Schedule deleted successfully"})


class ScheduleArchiveView(OperatorAPIView):
    """Handler for PATCH /api/schedules/{schedule_id}/archive"""

    def patch(self, request: Request, schedule_id: str) -> Response:
        schedule = schedule_service().toggle_archived(self.operator_id, schedule_id)
        return Response(ScheduleSerializer(schedule).data)


class ScheduleAvailableIssuesView(OperatorAPIView):
    """Handler for GET /api/schedules/{schedule_id}/available-issues"""

    def get(self, request: Request, schedule_id: str) -> Response:
        service = schedule_service()
        schedule = service.get_schedule(self.operator_id, schedule_id)
        issues = service.available_issues(self.operator_id, schedule_id)
        return Response(
            {
                "schedule": schedule.name,
                "availableIssues": ScheduleIssueSerializer(issues, many=True).data,
            }
        )


class IssueValidationView(OperatorAPIView):
    """Handler for GET /api/schedules/validate-issue/{issue_name}"""

    def get(self, request: Request, issue_name: str) -> Response:
        result = schedule_service().validate_issue(self.operator_id, issue_name)
        return Response(AvailabilitySerializer(result).data)


class CurrentOpenIssueView(OperatorAPIView):
    """Handler for GET /api/schedules/current-issue"""

    def get(self, request: Request) -> Response:
        return Response({"issue": schedule_service().current_open_issue(self.operator_id)})


class CustomerListView(OperatorAPIView):
    """Handler for GET/POST /api/customers"""

    def get(self, request: Request) -> Response:
        customers = catalog_service().list_customers(self.operator_id)
        return Response(CustomerSerializer(customers, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = CustomerInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        customer = catalog_service().create_customer(self.operator_id, serializer.to_draft())
        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)


class CustomerDetailView(OperatorAPIView):
    """Handler for GET/PUT/DELETE /api/customers/{customer_id}"""

    def get(self, request: Request, customer_id: str) -> Response:
        customer = catalog_service().get_customer(self.operator_id, customer_id)
        return Response(CustomerSerializer(customer).data)

    def put(self, request: Request, customer_id: str) -> Response:
        serializer = CustomerInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        customer = catalog_service().update_customer(
            self.operator_id, customer_id, serializer.to_draft()
        )
        return Response(CustomerSerializer(customer).data)

    def delete(self, request: Request, customer_id: str) -> Response:
        catalog_service().delete_customer(self.operator_id, customer_id)
        return Response({"message": "Customer deleted successfully"})


class MagazineListView(OperatorAPIView):
    """Handler for GET/POST /api/magazines"""

    def get(self, request: Request) -> Response:
        magazines = catalog_service().list_magazines(
            self.operator_id, include_archived=include_archived(request)
        )
        return Response(MagazineSerializer(magazines, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = MagazineInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        magazine = catalog_service().create_magazine(self.operator_id, serializer.to_draft())
        return Response(MagazineSerializer(magazine).data, status=status.HTTP_201_CREATED)


class MagazineDetailView(OperatorAPIView):
    """Handler for GET/PUT/DELETE /api/magazines/{magazine_id}"""

    def get(self, request: Request, magazine_id: str) -> Response:
        magazine = catalog_service().get_magazine(self.operator_id, magazine_id)
        return Response(MagazineSerializer(magazine).data)

    def put(self, request: Request, magazine_id: str) -> Response:
        serializer = MagazineInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        magazine = catalog_service().update_magazine(
            self.operator_id, magazine_id, serializer.to_draft()
        )
        return Response(MagazineSerializer(magazine).data)

    def delete(self, request: Request, magazine_id: str) -> Response:
        catalog_service().delete_magazine(self.operator_id, magazine_id)
        return Response({"message": "Magazine deleted successfully"})


class MagazineArchiveView(OperatorAPIView):
    """Handler for PATCH /api/magazines/{magazine_id}/archive"""

    def patch(self, request: Request, magazine_id: str) -> Response:
        serializer = ArchiveInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        magazine = catalog_service().set_magazine_archived(
            self.operator_id, magazine_id, serializer.validated_data["archived"]
        )
        return Response(MagazineSerializer(magazine).data)


class MagazineCurrentIssueView(OperatorAPIView):
    """Handler for GET /api/magazines/current-issue/{magazine_id}"""

    def get(self, request: Request, magazine_id: str) -> Response:
        current = catalog_service().current_issue(self.operator_id, magazine_id)
        return Response(MagazineIssueSerializer(current).data)


class ContentSizeListView(OperatorAPIView):
    """Handler for GET/POST /api/content-sizes"""

    def get(self, request: Request) -> Response:
        content_sizes = catalog_service().list_content_sizes(self.operator_id)
        return Response(ContentSizeSerializer(content_sizes, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = ContentSizeInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        content_size = catalog_service().create_content_size(self.operator_id, serializer.to_draft())
        return Response(ContentSizeSerializer(content_size).data, status=status.HTTP_201_CREATED)


class ContentSizeDetailView(OperatorAPIView):
    """Handler for GET/PUT/DELETE /api/content-sizes/{content_size_id}"""

    def get(self, request: Request, content_size_id: str) -> Response:
        content_size = catalog_service().get_content_size(self.operator_id, content_size_id)
        return Response(ContentSizeSerializer(content_size).data)

    def put(self, request: Request, content_size_id: str) -> Response:
        serializer = ContentSizeInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        content_size = catalog_service().update_content_size(
            self.operator_id, content_size_id, serializer.to_draft()
        )
        return Response(ContentSizeSerializer(content_size).data)

    def delete(self, request: Request, content_size_id: str) -> Response:
        catalog_service().delete_content_size(self.operator_id, content_size_id)
        return Response({"message": "Content size deleted successfully"})


class ContentSizePriceView(OperatorAPIView):
    """Handler for GET /api/content-sizes/{content_size_id}/price/{magazine_id}"""

    def get(self, request: Request, content_size_id: str, magazine_id: str) -> Response:
        price = catalog_service().price_for(self.operator_id, content_size_id, magazine_id)
        return Response({"price": str(price)})


class ContentTypeListView(OperatorAPIView):
    """Handler for GET /api/content-types"""

    def get(self, request: Request) -> Response:
        return Response(CatalogService.content_types())


class BookingListView(OperatorAPIView):
    """Handler for GET/POST /api/bookings"""

    def get(self, request: Request) -> Response:
        params = request.query_params
        bookings = booking_service().list_bookings(
            self.operator_id,
            customer_id=params.get("customer"),
            magazine_id=params.get("magazine"),
            issue=params.get("issue"),
            status=params.get("status"),
        )
        return Response(BookingSerializer(bookings, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = BookingInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        booking = booking_service().create_booking(self.operator_id, serializer.to_draft())
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class BookingDetailView(OperatorAPIView):
    """Handler for GET/PUT/DELETE /api/bookings/{booking_id}"""

    def get(self, request: Request, booking_id: str) -> Response:
        booking = booking_service().get_booking(self.operator_id, booking_id)
        return Response(BookingSerializer(booking).data)

    def put(self, request: Request, booking_id: str) -> Response:
        serializer = BookingInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        booking = booking_service().update_booking(
            self.operator_id, booking_id, serializer.to_draft()
        )
        return Response(BookingSerializer(booking).data)

    def delete(self, request: Request, booking_id: str) -> Response:
        booking_service().delete_booking(self.operator_id, booking_id)
        return Response({"message": "Booking deleted successfully"})


class CustomerBookingsView(OperatorAPIView):
    """Handler for GET /api/bookings/customer/{customer_id}"""

    def get(self, request: Request, customer_id: str) -> Response:
        customer, bookings, total = booking_service().customer_bookings(
            self.operator_id, customer_id
        )
        return Response(
            {
                "customer": {"id": str(customer.id.value), "name": customer.name},
                "bookings": BookingSerializer(bookings, many=True).data,
                "totalValue": f"{total:.2f}",
            }
        )


class LeafletDeliveryListView(OperatorAPIView):
    """Handler for GET/POST /api/leaflet-deliveries"""

    def get(self, request: Request) -> Response:
        params = request.query_params
        deliveries = booking_service().list_leaflet_deliveries(
            self.operator_id,
            customer_id=params.get("customer"),
            magazine_id=params.get("magazine"),
            issue=params.get("issue"),
            status=params.get("status"),
        )
        return Response(LeafletDeliverySerializer(deliveries, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = LeafletDeliveryInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        delivery = booking_service().create_leaflet_delivery(self.operator_id, serializer.to_draft())
        return Response(LeafletDeliverySerializer(delivery).data, status=status.HTTP_201_CREATED)


class LeafletDeliveryDetailView(OperatorAPIView):
    """Handler for GET/PUT/DELETE /api/leaflet-deliveries/{delivery_id}"""

    def get(self, request: Request, delivery_id: str) -> Response:
        delivery = booking_service().get_leaflet_delivery(self.operator_id, delivery_id)
        return Response(LeafletDeliverySerializer(delivery).data)

    def put(self, request: Request, delivery_id: str) -> Response:
        serializer = LeafletDeliveryInputSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_failed(serializer)
        delivery = booking_service().update_leaflet_delivery(
            self.operator_id, delivery_id, serializer.to_draft()
        )
        return Response(LeafletDeliverySerializer(delivery).data)

    def delete(self, request: Request, delivery_id: str) -> Response:
        booking_service().delete_leaflet_delivery(self.operator_id, delivery_id)
        return Response({"message": "Leaflet delivery deleted successfully"})


class DashboardStatsView(OperatorAPIView):
    """Handler for GET /api/dashboard/stats"""

    def get(self, request: Request) -> Response:
        stats = dashboard_service().stats(self.operator_id)
        return Response(DashboardStatsSerializer(stats).data)


class CurrentIssueDashboardView(OperatorAPIView):
    """Handler for GET /api/dashboard/current-issue/{magazine_id}"""

    def get(self, request: Request, magazine_id: str) -> Response:
        allocation = dashboard_service().current_issue(self.operator_id, magazine_id)
        return Response(IssueAllocationSerializer(allocation).data)


class PublicationTotalsView(OperatorAPIView):
    """Handler for GET /api/dashboard/publications"""

    def get(self, request: Request) -> Response:
        totals = dashboard_service().publications(self.operator_id)
        return Response(PublicationTotalsSerializer(totals, many=True).data)


class TopCustomersView(OperatorAPIView):
    """Handler for GET /api/dashboard/top-customers"""

    def get(self, request: Request) -> Response:
        totals = dashboard_service().top_customers(self.operator_id)
        return Response(CustomerTotalsSerializer(totals, many=True).data)


class RecentActivityView(OperatorAPIView):
    """Handler for GET /api/dashboard/recent-activity"""

    def get(self, request: Request) -> Response:
        activities = dashboard_service().recent_activity(self.operator_id)
        return Response(ActivitySerializer(activities, many=True).data)
