"""Net value computation for booking entries and leaflet deliveries.

The discount is additive: the percentage is always taken from the original
base price, never from an already discounted amount.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum

from bookings.domain.errors import InvalidInputError
from bookings.domain.value_objects import Money, round_cents

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
# Largest operand the money columns hold once a charge is added to a price.
MAX_AMOUNT = Decimal("9999999.99")


class ValidationPolicy(Enum):
    """How the calculator treats operands outside their domain."""

    REJECT = "reject"
    COERCE = "coerce"


@dataclass(frozen=True)
class DiscountSpec:
    percentage: Decimal = ZERO
    absolute_value: Decimal = ZERO


@dataclass(frozen=True)
class PriceLine:
    """Raw pricing operands of one chargeable line."""

    base_price: Decimal
    discount: DiscountSpec = field(default_factory=DiscountSpec)
    additional_charges: Decimal = ZERO


class PriceCalculator:
    """Derives net values from list prices, discounts and charges."""

    def __init__(self, policy: ValidationPolicy = ValidationPolicy.REJECT) -> None:
        self.policy = policy

    def price_line(
        self,
        base_price: object,
        percentage: object = None,
        absolute_value: object = None,
        additional_charges: object = None,
    ) -> PriceLine:
        """Build a PriceLine from request values.

        Absent operands (``None`` or an empty string) take their zero default.
        Under the COERCE policy the returned line already has out-of-domain
        operands replaced by zero.
        """
        line = PriceLine(
            base_price=self.to_decimal(base_price, "basePrice"),
            discount=DiscountSpec(
                percentage=self.to_decimal(percentage, "discountPercentage"),
                absolute_value=self.to_decimal(absolute_value, "discountValue"),
            ),
            additional_charges=self.to_decimal(additional_charges, "additionalCharges"),
        )
        return self._validated(line)

    def compute_net_value(self, line: PriceLine) -> Money:
        """Return ``max(0, base - discount + charges)`` rounded to cents.

        Raises:
            InvalidInputError: Under the REJECT policy, for a negative base
                price or absolute discount, or a percentage outside 0..100.
        """
        line = self._validated(line)
        base = line.base_price
        percentage = line.discount.percentage
        absolute = line.discount.absolute_value

        discount_amount = ZERO
        if percentage > 0:
            discount_amount += base * percentage / HUNDRED
        if absolute > 0:
            discount_amount += absolute

        net = base - discount_amount + line.additional_charges
        return Money.of(max(ZERO, net))

    def compute_booking_total(
        self, lines: Iterable[PriceLine], additional_charges: Decimal = ZERO
    ) -> Decimal:
        """Sum entry net values and add the booking-level charge.

        Each entry is clamped at zero on its own; the total is not.
        """
        total = sum((self.compute_net_value(line).amount for line in lines), ZERO)
        charges = self.to_amount(additional_charges, "additionalCharges")
        return round_cents(total + charges)

    def _validated(self, line: PriceLine) -> PriceLine:
        base = self.to_amount(line.base_price, "basePrice")
        percentage = self.to_amount(line.discount.percentage, "discountPercentage")
        absolute = self.to_amount(line.discount.absolute_value, "discountValue")
        charges = self.to_amount(line.additional_charges, "additionalCharges")

        if base < 0:
            base = self._out_of_domain("basePrice", base, "must be a non-negative number")
        if not ZERO <= percentage <= HUNDRED:
            percentage = self._out_of_domain(
                "discountPercentage", percentage, "must be between 0 and 100"
            )
        if absolute < 0:
            absolute = self._out_of_domain(
                "discountValue", absolute, "must be a non-negative number"
            )
        return PriceLine(
            base_price=base,
            discount=DiscountSpec(percentage=percentage, absolute_value=absolute),
            additional_charges=charges,
        )

    def to_amount(self, value: object, name: str) -> Decimal:
        """Parse a request amount and round it to cents, the stored precision.

        Percentages are kept to two places as well, so a stored line always
        re-derives the net value it was priced at.
        """
        result = self.to_decimal(value, name)
        if abs(result) > MAX_AMOUNT:
            return self._out_of_domain(name, value, f"must not exceed {MAX_AMOUNT}")
        return round_cents(result)

    def to_decimal(self, value: object, name: str) -> Decimal:
        """Parse a request amount under the calculator's policy; absent is zero."""
        if value is None or value == "":
            return ZERO
        try:
            if isinstance(value, bool):
                raise TypeError("bool")
            if isinstance(value, Decimal):
                result = value
            elif isinstance(value, int):
                result = Decimal(value)
            elif isinstance(value, float):
                result = Decimal(str(value))
            elif isinstance(value, str):
                result = Decimal(value.strip())
            else:
                raise TypeError(type(value).__name__)
        except (InvalidOperation, TypeError, ValueError):
            return self._out_of_domain(name, value, "must be a number")
        if not result.is_finite():
            return self._out_of_domain(name, value, "must be a finite number")
        return result

    def _out_of_domain(self, name: str, value: object, reason: str) -> Decimal:
        if self.policy is ValidationPolicy.REJECT:
            raise InvalidInputError(name, reason)
        logger.debug("Coercing %s=%r to zero", name, value)
        return ZERO
