"""Django signals keeping derived money fields in step with their inputs.

A stored net value is never trusted: it is recomputed from the pricing
fields on every save, whichever code path saves the row.
"""

import logging

from django.conf import settings
from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from bookings.domain.pricing import DiscountSpec, PriceCalculator, PriceLine, ValidationPolicy
from bookings.models import Booking, BookingEntry, LeafletDelivery

logger = logging.getLogger(__name__)


def _calculator() -> PriceCalculator:
    return PriceCalculator(ValidationPolicy(settings.BOOKINGS_PRICE_VALIDATION))


def _line(base_price, percentage, absolute_value, additional_charges) -> PriceLine:
    return PriceLine(
        base_price=base_price,
        discount=DiscountSpec(percentage=percentage, absolute_value=absolute_value),
        additional_charges=additional_charges,
    )


@receiver(pre_save, sender=BookingEntry)
def derive_entry_net_value(sender, instance, **kwargs):
    """Recompute a booking entry's net value before it is written."""
    instance.net_value = _calculator().compute_net_value(
        _line(
            instance.list_price,
            instance.discount_percentage,
            instance.discount_value,
            instance.additional_charges,
        )
    ).amount


@receiver(pre_save, sender=LeafletDelivery)
def derive_leaflet_net_value(sender, instance, **kwargs):
    """Recompute a leaflet delivery's net value before it is written."""
    instance.net_value = _calculator().compute_net_value(
        _line(
            instance.price,
            instance.discount_percentage,
            instance.discount_value,
            instance.additional_charges,
        )
    ).amount


@receiver([post_save, post_delete], sender=BookingEntry)
def refresh_booking_total(sender, instance, **kwargs):
    """Recompute the owning booking's total when an entry changes."""
    additional_charges = (
        Booking.objects.filter(pk=instance.booking_id)
        .values_list("additional_charges", flat=True)
        .first()
    )
    if additional_charges is None:
        # booking itself is being deleted
        return
    lines = [
        _line(
            entry.list_price,
            entry.discount_percentage,
            entry.discount_value,
            entry.additional_charges,
        )
        for entry in BookingEntry.objects.filter(booking_id=instance.booking_id)
    ]
    total = _calculator().compute_booking_total(lines, additional_charges)
    Booking.objects.filter(pk=instance.booking_id).update(total_value=total)
    logger.debug("Booking %s total refreshed to %s", instance.booking_id, total)


@receiver(post_save, sender=Booking)
def refresh_total_on_charge_change(sender, instance, created, **kwargs):
    """Keep total_value consistent when only the booking-level charge changed."""
    if created:
        return
    lines = [
        _line(
            entry.list_price,
            entry.discount_percentage,
            entry.discount_value,
            entry.additional_charges,
        )
        for entry in instance.entries.all()
    ]
    total = _calculator().compute_booking_total(lines, instance.additional_charges)
    if total != instance.total_value:
        Booking.objects.filter(pk=instance.pk).update(total_value=total)
        instance.total_value = total
