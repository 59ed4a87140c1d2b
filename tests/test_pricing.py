"""Unit tests for PriceCalculator.

Run with: pytest tests/test_pricing.py -v
"""

from decimal import Decimal

import pytest

from bookings.domain import DiscountSpec, Money, PriceCalculator, PriceLine, ValidationPolicy
from bookings.domain.errors import ErrorCode, InvalidInputError


def line(base, percentage="0", absolute="0", charges="0") -> PriceLine:
    return PriceLine(
        base_price=Decimal(base),
        discount=DiscountSpec(percentage=Decimal(percentage), absolute_value=Decimal(absolute)),
        additional_charges=Decimal(charges),
    )


@pytest.fixture
def calculator() -> PriceCalculator:
    return PriceCalculator()


class TestComputeNetValue:
    def test_percentage_and_absolute_discounts_are_additive(self, calculator):
        assert calculator.compute_net_value(line("100", "10", "5", "20")) == Money(Decimal("115"))

    def test_full_percentage_discount_is_free(self, calculator):
        assert calculator.compute_net_value(line("10", "100")).amount == Decimal("0")

    def test_discount_larger_than_price_clamps_to_zero(self, calculator):
        assert calculator.compute_net_value(line("50", absolute="1000")).amount == Decimal("0")

    def test_percentage_uses_original_base_price(self, calculator):
        # 200 - 50% of 200 - 20, not (200 - 20) * 50%
        assert calculator.compute_net_value(line("200", "50", "20")).amount == Decimal("80.00")

    def test_negative_additional_charge_is_a_rebate(self, calculator):
        assert calculator.compute_net_value(line("100", charges="-30")).amount == Decimal("70.00")

    def test_result_is_rounded_to_cents(self, calculator):
        assert calculator.compute_net_value(line("9.99", "33")).amount == Decimal("6.69")

    def test_no_float_drift(self, calculator):
        assert calculator.compute_net_value(line("0.1", charges="0.2")).amount == Decimal("0.30")

    def test_never_negative(self, calculator):
        for base in ("0", "1", "99.99", "1000"):
            for charges in ("-5000", "-1", "0", "25"):
                result = calculator.compute_net_value(line(base, "40", "15", charges))
                assert result.amount >= 0

    def test_monotonic_in_base_price(self, calculator):
        values = [
            calculator.compute_net_value(line(str(base), "12.5", "30", "-10")).amount
            for base in range(0, 500, 7)
        ]
        assert values == sorted(values)

    def test_idempotent(self, calculator):
        price = line("123.45", "7", "3.2", "1")
        assert calculator.compute_net_value(price) == calculator.compute_net_value(price)


class TestRejectPolicy:
    @pytest.mark.parametrize(
        "price, field",
        [
            (line("-1"), "basePrice"),
            (line("10", percentage="101"), "discountPercentage"),
            (line("10", percentage="-1"), "discountPercentage"),
            (line("10", absolute="-0.01"), "discountValue"),
        ],
    )
    def test_out_of_domain_operands_are_rejected(self, calculator, price, field):
        with pytest.raises(InvalidInputError) as excinfo:
            calculator.compute_net_value(price)
        assert excinfo.value.code == ErrorCode.INVALID_INPUT
        assert excinfo.value.field == field

    def test_non_numeric_request_value_is_rejected(self, calculator):
        with pytest.raises(InvalidInputError):
            calculator.price_line("abc")

    def test_non_finite_value_is_rejected(self, calculator):
        with pytest.raises(InvalidInputError):
            calculator.price_line("NaN")

    def test_absent_operands_default_to_zero(self, calculator):
        price = calculator.price_line("80", None, "", None)
        assert price == line("80")

    def test_request_values_of_mixed_types(self, calculator):
        price = calculator.price_line(100, "10", 5.5, Decimal("2"))
        assert calculator.compute_net_value(price).amount == Decimal("86.50")


class TestCoercePolicy:
    def test_garbage_becomes_zero(self):
        calculator = PriceCalculator(ValidationPolicy.COERCE)
        price = calculator.price_line("100", "lots", None, "oops")
        assert calculator.compute_net_value(price).amount == Decimal("100.00")

    def test_out_of_domain_becomes_zero(self):
        calculator = PriceCalculator(ValidationPolicy.COERCE)
        assert calculator.compute_net_value(line("100", "150", "-5")).amount == Decimal("100.00")
        assert calculator.compute_net_value(line("-100", charges="10")).amount == Decimal("10.00")


class TestComputeBookingTotal:
    def test_sums_entries_and_adds_booking_charge(self, calculator):
        total = calculator.compute_booking_total([line("100", "10"), line("50")], Decimal("25"))
        assert total == Decimal("165.00")

    def test_each_entry_is_clamped_before_summing(self, calculator):
        total = calculator.compute_booking_total([line("10", absolute="50"), line("40")])
        assert total == Decimal("40.00")

    def test_total_is_not_clamped(self, calculator):
        assert calculator.compute_booking_total([line("20")], Decimal("-50")) == Decimal("-30.00")

    def test_no_entries(self, calculator):
        assert calculator.compute_booking_total([], Decimal("12")) == Decimal("12.00")


class TestPriceLine:
    def test_coerce_policy_zeroes_operands_in_the_line(self):
        calculator = PriceCalculator(ValidationPolicy.COERCE)
        price = calculator.price_line("100", "120", "-3", "4")
        assert price == line("100", charges="4")

    def test_reject_policy_fails_while_building_the_line(self, calculator):
        with pytest.raises(InvalidInputError) as excinfo:
            calculator.price_line("100", "120")
        assert excinfo.value.field == "discountPercentage"


class TestOperandPrecision:
    def test_sub_cent_operands_are_rounded_before_pricing(self, calculator):
        price = calculator.price_line("1000", "0.005")
        assert price.discount.percentage == Decimal("0.01")
        assert calculator.compute_net_value(price).amount == Decimal("999.90")

    def test_stored_line_reprices_to_the_same_net_value(self, calculator):
        price = calculator.price_line("19.999", "12.345", "0.004", "1.005")
        assert price == line("20.00", "12.35", "0.00", "1.01")
        net = calculator.compute_net_value(price)
        assert calculator.compute_booking_total([price]) == net.amount

    def test_booking_charge_is_rounded_to_cents(self, calculator):
        assert calculator.compute_booking_total([line("10")], "0.005") == Decimal("10.01")


class TestOperandMagnitude:
    def test_amount_above_limit_is_rejected(self, calculator):
        with pytest.raises(InvalidInputError) as excinfo:
            calculator.price_line("10000000")
        assert excinfo.value.field == "basePrice"

    def test_large_negative_charge_is_rejected(self, calculator):
        with pytest.raises(InvalidInputError) as excinfo:
            calculator.compute_booking_total([line("10")], Decimal("-1e9"))
        assert excinfo.value.field == "additionalCharges"

    def test_limit_itself_is_accepted(self, calculator):
        price = calculator.price_line("9999999.99", None, None, "9999999.99")
        assert calculator.compute_net_value(price).amount == Decimal("19999999.98")

    def test_coerce_policy_zeroes_oversized_amount(self):
        calculator = PriceCalculator(ValidationPolicy.COERCE)
        assert calculator.price_line("1e12", None, None, "5").base_price == Decimal("0")
