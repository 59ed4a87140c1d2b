"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from rest_framework.test import APIClient


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def operator(django_user_model):
    return django_user_model.objects.create_user(username="operator", password="secret")


@pytest.fixture
def other_operator(django_user_model):
    return django_user_model.objects.create_user(username="rival", password="secret")


@pytest.fixture
def client_for(operator) -> APIClient:
    client = APIClient()
    client.force_authenticate(user=operator)
    return client


@pytest.fixture
def catalog(operator):
    """A schedule with one closed and two open issues, a magazine and a priced size."""
    from bookings import models

    today = datetime.now(timezone.utc)
    schedule = models.Schedule.objects.create(operator=operator, name="Monthly")
    for order, (name, offset) in enumerate(
        [("Sep 2026", -10), ("Oct 2026", 5), ("Nov 2026", 35)]
    ):
        models.ScheduleIssue.objects.create(
            schedule=schedule,
            name=name,
            close_date=today + timedelta(days=offset),
            sort_order=order,
        )
    magazine = models.Magazine.objects.create(operator=operator, name="Village Life", schedule=schedule)
    models.PageConfiguration.objects.create(magazine=magazine, issue_name="Oct 2026", total_pages=32)
    customer = models.Customer.objects.create(operator=operator, name="Bakery Ltd")
    half_page = models.ContentSize.objects.create(
        operator=operator, description="Half page", size=Decimal("0.5")
    )
    models.ContentSizePrice.objects.create(
        content_size=half_page, magazine=magazine, price=Decimal("200.00")
    )
    return {
        "schedule": schedule,
        "magazine": magazine,
        "customer": customer,
        "half_page": half_page,
    }
