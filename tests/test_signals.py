"""Tests for the ORM signals that keep stored money fields consistent.

Run with: pytest tests/test_signals.py -v
"""

from decimal import Decimal

import pytest

from bookings import models

@pytest.fixture
def booking(operator, catalog):
    return models.Booking.objects.create(operator=operator, customer=catalog["customer"])


def add_entry(booking, catalog, **prices):
    return models.BookingEntry.objects.create(
        booking=booking,
        magazine=catalog["magazine"],
        content_size=catalog["half_page"],
        content_type="Advert",
        start_issue="Oct 2026",
        **prices,
    )


@pytest.mark.django_db
class TestBookingEntrySignals:
    def test_net_value_is_derived_on_save(self, booking, catalog):
        created = add_entry(
            booking,
            catalog,
            list_price=Decimal("100"),
            discount_percentage=Decimal("10"),
            discount_value=Decimal("5"),
            additional_charges=Decimal("20"),
            net_value=Decimal("999"),
        )
        created.refresh_from_db()
        assert created.net_value == Decimal("115.00")

    def test_booking_total_follows_entries(self, booking, catalog):
        first = add_entry(booking, catalog, list_price=Decimal("100"))
        add_entry(booking, catalog, list_price=Decimal("50"))
        booking.refresh_from_db()
        assert booking.total_value == Decimal("150.00")

        first.delete()
        booking.refresh_from_db()
        assert booking.total_value == Decimal("50.00")

    def test_booking_charge_change_refreshes_total(self, booking, catalog):
        add_entry(booking, catalog, list_price=Decimal("40"))
        booking.refresh_from_db()
        booking.additional_charges = Decimal("-60")
        booking.save()
        booking.refresh_from_db()
        assert booking.total_value == Decimal("-20.00")

    def test_deleting_booking_cascades_quietly(self, booking, catalog):
        add_entry(booking, catalog, list_price=Decimal("40"))
        booking.delete()
        assert models.BookingEntry.objects.count() == 0


@pytest.mark.django_db
class TestLeafletDeliverySignals:
    def test_net_value_is_derived_on_save(self, operator, catalog):
        delivery = models.LeafletDelivery.objects.create(
            operator=operator,
            customer=catalog["customer"],
            magazine=catalog["magazine"],
            issue="Oct 2026",
            price=Decimal("60"),
            discount_value=Decimal("100"),
            leaflet_description="Flyer",
            quantity=10,
        )
        delivery.refresh_from_db()
        assert delivery.net_value == Decimal("0.00")
