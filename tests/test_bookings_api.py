"""HTTP tests for the bookings API.

Run with: pytest tests/test_bookings_api.py -v
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from urllib.parse import quote

import pytest

from bookings import models


def booking_payload(catalog, *entries, **extra) -> dict:
    payload = {
        "customer": str(catalog["customer"].id),
        "magazineEntries": list(entries)
        or [
            {
                "magazine": str(catalog["magazine"].id),
                "contentSize": str(catalog["half_page"].id),
                "contentType": "Advert",
                "startIssue": "Oct 2026",
            }
        ],
    }
    payload.update(extra)
    return payload


def entry(catalog, **overrides) -> dict:
    values = {
        "magazine": str(catalog["magazine"].id),
        "contentSize": str(catalog["half_page"].id),
        "contentType": "Advert",
        "startIssue": "Oct 2026",
    }
    values.update(overrides)
    return values


@pytest.mark.django_db
class TestAuthentication:
    def test_anonymous_requests_are_refused(self, api_client):
        response = api_client.get("/api/bookings")
        assert response.status_code in (401, 403)


@pytest.mark.django_db
class TestBookingEndpoints:
    """Tests for /api/bookings."""

    def test_create_booking_returns_priced_booking(self, client_for, catalog):
        """Given open issues, returns the booking with derived net values."""
        payload = booking_payload(
            catalog,
            entry(
                catalog,
                listPrice=100,
                discountPercentage="10",
                discountValue=5,
                additionalCharges="20",
            ),
            additionalCharges="7.5",
            notes="Front of book please",
        )
        response = client_for.post("/api/bookings", payload, format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["magazineEntries"][0]["netValue"] == "115.00"
        assert body["totalValue"] == "122.50"
        assert body["status"] == "Active"
        assert models.Booking.objects.get(pk=body["id"]).total_value == Decimal("122.50")

    def test_list_price_defaults_to_content_size_price(self, client_for, catalog):
        response = client_for.post("/api/bookings", booking_payload(catalog), format="json")
        assert response.status_code == 201
        assert response.json()["magazineEntries"][0]["listPrice"] == "200.00"

    def test_closed_issue_is_rejected(self, client_for, catalog):
        """Given an entry starting in a closed issue, nothing is written."""
        payload = booking_payload(catalog, entry(catalog, startIssue="Sep 2026"))
        response = client_for.post("/api/bookings", payload, format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "ISSUE_CLOSED"
        assert body["message"].startswith('Issue "Sep 2026" is closed. Close date was ')
        assert body["schedule"] == "Monthly"
        assert body["closedDate"]
        assert models.Booking.objects.count() == 0

    def test_out_of_range_discount_is_rejected(self, client_for, catalog):
        payload = booking_payload(catalog, entry(catalog, discountPercentage=150))
        response = client_for.post("/api/bookings", payload, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    def test_sub_cent_operands_keep_total_equal_to_entries(self, client_for, catalog):
        """Operands are rounded to cents before pricing, so the stored row agrees."""
        payload = booking_payload(
            catalog, entry(catalog, listPrice="1000", discountPercentage="0.005")
        )
        response = client_for.post("/api/bookings", payload, format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["magazineEntries"][0]["discountPercentage"] == "0.01"
        assert body["magazineEntries"][0]["netValue"] == "999.90"
        assert body["totalValue"] == "999.90"
        booking = models.Booking.objects.get(pk=body["id"])
        stored = booking.entries.get()
        assert stored.discount_percentage == Decimal("0.01")
        assert stored.net_value == Decimal("999.90")
        assert booking.total_value == Decimal("999.90")

    @pytest.mark.parametrize(
        "overrides",
        [{"listPrice": "100000000"}, {"discountValue": 1e10}, {"additionalCharges": "-1e9"}],
    )
    def test_oversized_amount_is_rejected(self, client_for, catalog, overrides):
        payload = booking_payload(catalog, entry(catalog, **overrides))
        response = client_for.post("/api/bookings", payload, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"
        assert models.Booking.objects.count() == 0

    def test_oversized_booking_charge_is_rejected(self, client_for, catalog):
        payload = booking_payload(catalog, additionalCharges="1e9")
        response = client_for.post("/api/bookings", payload, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    @pytest.mark.parametrize("missing", ["customer", "magazineEntries"])
    def test_missing_fields_fail_validation(self, client_for, catalog, missing):
        payload = booking_payload(catalog)
        del payload[missing]
        response = client_for.post("/api/bookings", payload, format="json")
        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"
        assert missing in response.json()["errors"]

    def test_malformed_booking_id(self, client_for):
        """Given invalid UUID, returns 400."""
        response = client_for.get("/api/bookings/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID"

    def test_update_and_delete(self, client_for, catalog):
        created = client_for.post("/api/bookings", booking_payload(catalog), format="json").json()
        url = f"/api/bookings/{created['id']}"

        updated = client_for.put(
            url,
            booking_payload(catalog, entry(catalog, listPrice="80"), status="Completed"),
            format="json",
        )
        assert updated.status_code == 200
        assert updated.json()["totalValue"] == "80.00"
        assert updated.json()["status"] == "Completed"

        assert client_for.delete(url).status_code == 200
        assert client_for.get(url).status_code == 404

    def test_list_filters(self, client_for, catalog):
        client_for.post("/api/bookings", booking_payload(catalog), format="json")
        client_for.post(
            "/api/bookings",
            booking_payload(catalog, entry(catalog, startIssue="Nov 2026")),
            format="json",
        )
        assert len(client_for.get("/api/bookings").json()) == 2
        assert len(client_for.get("/api/bookings", {"issue": "Nov 2026"}).json()) == 1
        assert client_for.get("/api/bookings", {"status": "Cancelled"}).json() == []

    def test_customer_bookings(self, client_for, catalog):
        client_for.post("/api/bookings", booking_payload(catalog), format="json")
        response = client_for.get(f"/api/bookings/customer/{catalog['customer'].id}")
        assert response.status_code == 200
        assert response.json()["customer"]["name"] == "Bakery Ltd"
        assert response.json()["totalValue"] == "200.00"


@pytest.mark.django_db
class TestTenantIsolation:
    def test_other_operator_cannot_see_booking(self, client_for, api_client, other_operator, catalog):
        """Given another operator's booking, returns 404."""
        created = client_for.post("/api/bookings", booking_payload(catalog), format="json").json()
        api_client.force_authenticate(user=other_operator)

        assert api_client.get(f"/api/bookings/{created['id']}").status_code == 404
        assert api_client.get("/api/bookings").json() == []

    def test_other_operator_cannot_book_foreign_customer(self, api_client, other_operator, catalog):
        api_client.force_authenticate(user=other_operator)
        response = api_client.post("/api/bookings", booking_payload(catalog), format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REFERENCE"


@pytest.mark.django_db
class TestScheduleEndpoints:
    """Tests for /api/schedules."""

    def test_create_and_fetch_schedule(self, client_for):
        payload = {
            "name": "Weekly",
            "issues": [
                {"name": "W2", "closeDate": "2030-01-08T00:00:00Z"},
                {"name": "W1", "closeDate": "2030-01-01T00:00:00Z"},
            ],
        }
        response = client_for.post("/api/schedules", payload, format="json")
        assert response.status_code == 201
        body = response.json()
        assert [issue["name"] for issue in body["issues"]] == ["W2", "W1"]

        fetched = client_for.get(f"/api/schedules/{body['id']}")
        assert fetched.json()["name"] == "Weekly"

    def test_duplicate_name_is_rejected(self, client_for, catalog):
        payload = {"name": "monthly", "issues": [{"name": "X", "closeDate": "2030-01-01T00:00:00Z"}]}
        response = client_for.post("/api/schedules", payload, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "DUPLICATE_NAME"

    def test_closed_issue_date_is_locked(self, client_for, catalog):
        issues = [
            {"name": issue.name, "closeDate": issue.close_date.isoformat()}
            for issue in catalog["schedule"].issues.order_by("sort_order")
        ]
        issues[0]["closeDate"] = (datetime.now(timezone.utc) + timedelta(days=2)).isoformat()
        response = client_for.put(
            f"/api/schedules/{catalog['schedule'].id}",
            {"name": "Monthly", "issues": issues},
            format="json",
        )
        assert response.status_code == 400
        assert response.json()["code"] == "CLOSE_DATE_LOCKED"

    def test_validate_issue(self, client_for, catalog):
        closed = client_for.get(f"/api/schedules/validate-issue/{quote('Sep 2026')}").json()
        assert closed["available"] is False
        assert closed["schedule"] == "Monthly"

        unknown = client_for.get("/api/schedules/validate-issue/Special").json()
        assert unknown == {
            "available": True,
            "message": "Issue is available (no schedule restrictions)",
            "schedule": None,
            "closedDate": None,
        }

    def test_available_and_current_issue(self, client_for, catalog):
        response = client_for.get(f"/api/schedules/{catalog['schedule'].id}/available-issues")
        names = [issue["name"] for issue in response.json()["availableIssues"]]
        assert names == ["Oct 2026", "Nov 2026"]
        assert client_for.get("/api/schedules/current-issue").json() == {"issue": "Oct 2026"}

    def test_archive_releases_issues(self, client_for, catalog):
        url = f"/api/schedules/{catalog['schedule'].id}/archive"
        response = client_for.patch(url)
        assert response.status_code == 200
        assert response.json()["archived"] is True
        assert client_for.get("/api/schedules").json() == []
        assert len(client_for.get("/api/schedules?includeArchived=true").json()) == 1
        response = client_for.post(
            "/api/bookings",
            booking_payload(catalog, entry(catalog, startIssue="Sep 2026")),
            format="json",
        )
        assert response.status_code == 201

        assert client_for.patch(url).json()["archived"] is False

    def test_delete_schedule_in_use_is_refused(self, client_for, catalog):
        url = f"/api/schedules/{catalog['schedule'].id}"
        response = client_for.delete(url)
        assert response.status_code == 400
        assert response.json()["code"] == "RECORD_IN_USE"

        catalog["magazine"].schedule = None
        catalog["magazine"].save()
        assert client_for.delete(url).status_code == 200
        assert not models.Schedule.objects.exists()
        assert not models.ScheduleIssue.objects.exists()

    def test_unknown_schedule(self, client_for):
        response = client_for.get("/api/schedules/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
        assert response.json()["code"] == "SCHEDULE_NOT_FOUND"


@pytest.mark.django_db
class TestLeafletDeliveryEndpoints:
    def payload(self, catalog, **overrides) -> dict:
        values = {
            "customer": str(catalog["customer"].id),
            "magazine": str(catalog["magazine"].id),
            "issue": "Oct 2026",
            "price": "90",
            "discountValue": "10",
            "leafletDescription": "Pizza menu",
            "quantity": 1000,
        }
        values.update(overrides)
        return values

    def test_create_leaflet_delivery(self, client_for, catalog):
        response = client_for.post("/api/leaflet-deliveries", self.payload(catalog), format="json")
        assert response.status_code == 201
        assert response.json()["netValue"] == "80.00"
        assert models.LeafletDelivery.objects.get().net_value == Decimal("80.00")

    def test_closed_issue_is_rejected(self, client_for, catalog):
        response = client_for.post(
            "/api/leaflet-deliveries", self.payload(catalog, issue="Sep 2026"), format="json"
        )
        assert response.status_code == 400
        assert response.json()["code"] == "ISSUE_CLOSED"

    def test_zero_quantity_fails_validation(self, client_for, catalog):
        response = client_for.post(
            "/api/leaflet-deliveries", self.payload(catalog, quantity=0), format="json"
        )
        assert response.status_code == 400
        assert "quantity" in response.json()["errors"]


@pytest.mark.django_db
class TestDashboardEndpoints:
    def test_stats(self, client_for, catalog):
        client_for.post("/api/bookings", booking_payload(catalog), format="json")
        body = client_for.get("/api/dashboard/stats").json()
        assert body["totalCustomers"] == 1
        assert body["totalMagazines"] == 1
        assert body["totalBookings"] == 1
        assert body["totalRevenue"] == "200.00"
        assert body["bookingChange"] == 100

    def test_current_issue(self, client_for, catalog):
        client_for.post("/api/bookings", booking_payload(catalog), format="json")
        response = client_for.get(f"/api/dashboard/current-issue/{catalog['magazine'].id}")
        assert response.status_code == 200
        body = response.json()
        assert body["currentIssue"]["name"] == "Oct 2026"
        assert body["totalPages"] == 32
        assert body["totalBookedPages"] == "0.500"
        assert body["breakdown"][0]["contentType"] == "Advert"

    def test_publications(self, client_for, catalog):
        client_for.post("/api/bookings", booking_payload(catalog), format="json")
        response = client_for.get("/api/dashboard/publications")
        assert response.status_code == 200
        [totals] = response.json()
        assert totals["magazine"] == {"id": str(catalog["magazine"].id), "name": "Village Life"}
        assert totals["totalBookings"] == 1
        assert totals["totalValue"] == "200.00"
        assert totals["contentTypeBreakdown"] == [
            {"contentType": "Advert", "count": 1, "value": "200.00"}
        ]

    def test_top_customers(self, client_for, catalog):
        client_for.post("/api/bookings", booking_payload(catalog), format="json")
        [top] = client_for.get("/api/dashboard/top-customers").json()
        assert top["customerName"] == "Bakery Ltd"
        assert top["totalBookings"] == 1
        assert top["totalValue"] == "200.00"

    def test_recent_activity(self, client_for, catalog):
        client_for.post("/api/bookings", booking_payload(catalog), format="json")
        activity = client_for.get("/api/dashboard/recent-activity").json()
        assert [(a["type"], a["description"]) for a in activity] == [
            ("booking", "Half page in Village Life")
        ]
        assert activity[0]["customerName"] == "Bakery Ltd"
        assert activity[0]["value"] == "200.00"


@pytest.mark.django_db
class TestCustomerEndpoints:
    """Tests for /api/customers."""

    def test_create_list_and_update(self, client_for):
        response = client_for.post(
            "/api/customers", {"name": " Florist ", "bookingNote": "Cash"}, format="json"
        )
        assert response.status_code == 201
        created = response.json()
        assert created["name"] == "Florist"

        url = f"/api/customers/{created['id']}"
        updated = client_for.put(url, {"name": "Florist & Co"}, format="json")
        assert updated.status_code == 200
        assert updated.json()["bookingNote"] == ""
        assert [c["name"] for c in client_for.get("/api/customers").json()] == ["Florist & Co"]

    def test_name_is_unique_ignoring_case(self, client_for, catalog):
        response = client_for.post("/api/customers", {"name": "bakery LTD"}, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "DUPLICATE_NAME"

    def test_same_name_for_another_operator(self, api_client, other_operator, catalog):
        api_client.force_authenticate(user=other_operator)
        response = api_client.post("/api/customers", {"name": "Bakery Ltd"}, format="json")
        assert response.status_code == 201

    def test_customer_with_bookings_cannot_be_deleted(self, client_for, catalog):
        client_for.post("/api/bookings", booking_payload(catalog), format="json")
        url = f"/api/customers/{catalog['customer'].id}"
        response = client_for.delete(url)
        assert response.status_code == 400
        assert response.json()["code"] == "RECORD_IN_USE"
        assert models.Customer.objects.filter(pk=catalog["customer"].id).exists()

    def test_delete_and_unknown_customer(self, client_for, catalog):
        url = f"/api/customers/{catalog['customer'].id}"
        assert client_for.delete(url).status_code == 200
        response = client_for.get(url)
        assert response.status_code == 404
        assert response.json()["code"] == "CUSTOMER_NOT_FOUND"


@pytest.mark.django_db
class TestMagazineEndpoints:
    """Tests for /api/magazines."""

    def test_create_magazine(self, client_for, catalog):
        payload = {
            "name": "Town Crier",
            "schedule": str(catalog["schedule"].id),
            "pageConfigurations": [{"issueName": "Oct 2026", "totalPages": 24}],
        }
        response = client_for.post("/api/magazines", payload, format="json")
        assert response.status_code == 201
        body = response.json()
        assert body["schedule"] == str(catalog["schedule"].id)
        assert body["pageConfigurations"] == [{"issueName": "Oct 2026", "totalPages": 24}]
        assert models.PageConfiguration.objects.filter(magazine_id=body["id"]).count() == 1

    def test_duplicate_name_and_unknown_schedule(self, client_for, catalog):
        duplicate = {"name": "VILLAGE LIFE", "schedule": str(catalog["schedule"].id)}
        response = client_for.post("/api/magazines", duplicate, format="json")
        assert response.json()["code"] == "DUPLICATE_NAME"

        unknown = {"name": "Town Crier", "schedule": "00000000-0000-0000-0000-000000000000"}
        response = client_for.post("/api/magazines", unknown, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REFERENCE"

    def test_update_replaces_page_configurations(self, client_for, catalog):
        url = f"/api/magazines/{catalog['magazine'].id}"
        payload = {"name": "Village Life", "schedule": str(catalog["schedule"].id)}
        response = client_for.put(url, payload, format="json")
        assert response.status_code == 200
        assert response.json()["pageConfigurations"] == []

    def test_archive_hides_magazine(self, client_for, catalog):
        url = f"/api/magazines/{catalog['magazine'].id}/archive"
        response = client_for.patch(url, {"archived": True}, format="json")
        assert response.status_code == 200
        assert response.json()["archived"] is True
        assert client_for.get("/api/magazines").json() == []
        assert len(client_for.get("/api/magazines", {"includeArchived": "true"}).json()) == 1

    def test_booked_magazine_cannot_be_deleted(self, client_for, catalog):
        client_for.post("/api/bookings", booking_payload(catalog), format="json")
        response = client_for.delete(f"/api/magazines/{catalog['magazine'].id}")
        assert response.status_code == 400
        assert response.json()["code"] == "RECORD_IN_USE"

    def test_current_issue(self, client_for, catalog):
        response = client_for.get(f"/api/magazines/current-issue/{catalog['magazine'].id}")
        assert response.status_code == 200
        body = response.json()
        assert body["magazine"] == "Village Life"
        assert body["currentIssue"]["name"] == "Oct 2026"
        assert body["currentIssue"]["sortOrder"] == 1
        assert body["currentIssue"]["totalPages"] == 32

    def test_current_issue_without_schedule(self, client_for, catalog):
        catalog["magazine"].schedule = None
        catalog["magazine"].save()
        response = client_for.get(f"/api/magazines/current-issue/{catalog['magazine'].id}")
        assert response.status_code == 400
        assert response.json()["code"] == "NO_SCHEDULE"


@pytest.mark.django_db
class TestContentSizeEndpoints:
    """Tests for /api/content-sizes and /api/content-types."""

    def test_create_and_list(self, client_for, catalog):
        payload = {
            "description": "Full page",
            "size": "1",
            "prices": [{"magazine": str(catalog["magazine"].id), "price": "350.00"}],
        }
        response = client_for.post("/api/content-sizes", payload, format="json")
        assert response.status_code == 201
        assert response.json()["prices"][0]["price"] == "350.00"
        listed = client_for.get("/api/content-sizes").json()
        assert [s["description"] for s in listed] == ["Half page", "Full page"]

    def test_price_of_foreign_magazine_is_rejected(self, client_for, catalog, other_operator):
        foreign = models.Magazine.objects.create(operator=other_operator, name="Elsewhere")
        payload = {
            "description": "Full page",
            "size": "1",
            "prices": [{"magazine": str(foreign.id), "price": "10"}],
        }
        response = client_for.post("/api/content-sizes", payload, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REFERENCE"

    def test_size_out_of_range_fails_validation(self, client_for):
        response = client_for.post(
            "/api/content-sizes", {"description": "Huge", "size": "1000"}, format="json"
        )
        assert response.status_code == 400
        assert "size" in response.json()["errors"]

    def test_price_lookup(self, client_for, catalog):
        base = f"/api/content-sizes/{catalog['half_page'].id}/price"
        response = client_for.get(f"{base}/{catalog['magazine'].id}")
        assert response.status_code == 200
        assert response.json() == {"price": "200.00"}

        missing = client_for.get(f"{base}/00000000-0000-0000-0000-000000000000")
        assert missing.status_code == 404
        assert missing.json()["code"] == "PRICE_NOT_FOUND"

    def test_update_and_delete(self, client_for, catalog):
        url = f"/api/content-sizes/{catalog['half_page'].id}"
        response = client_for.put(url, {"description": "Half page", "size": "0.5"}, format="json")
        assert response.status_code == 200
        assert response.json()["prices"] == []
        assert client_for.delete(url).status_code == 200
        assert client_for.get(url).json()["code"] == "CONTENT_SIZE_NOT_FOUND"

    def test_content_types(self, client_for):
        response = client_for.get("/api/content-types")
        assert response.status_code == 200
        assert "Advert" in response.json()
