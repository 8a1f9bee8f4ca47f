"""
Tests for lease pricing, booking pricing and the cancellation refund policy.
"""
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from models import Booking, Property, RentingType
from services.exceptions import InvalidStateError, NotFoundError
from services.pricing_service import (
    calculate_booking_price,
    calculate_refund_amount,
    calculate_rental_price,
    lease_months,
    refund_fraction,
)
from tests.conftest import TODAY


class TestLeaseMonths:
    """Partial months round up"""

    @pytest.mark.parametrize("days,months", [(30, 1), (31, 2), (60, 2), (180, 6), (190, 7), (365, 13)])
    def test_months_for_range(self, days, months):
        assert lease_months(TODAY, TODAY + timedelta(days=days)) == months


class TestCalculateRentalPrice:
    def test_one_month_two_guests(self, db, prop):
        total = calculate_rental_price(db, prop.id, TODAY, TODAY + timedelta(days=30), 2)

        assert total == Decimal("600.00")

    def test_extra_guest_surcharge(self, db, prop):
        """600*2 + (600*0.10)*2 extra guests*2 months"""
        total = calculate_rental_price(db, prop.id, TODAY, TODAY + timedelta(days=60), 4)

        assert total == Decimal("1440.00")

    def test_single_guest_pays_base_price(self, db, prop):
        total = calculate_rental_price(db, prop.id, TODAY, TODAY + timedelta(days=90), 1)

        assert total == Decimal("1800.00")

    def test_empty_range_is_rejected(self, db, prop):
        with pytest.raises(InvalidStateError, match="Invalid date range"):
            calculate_rental_price(db, prop.id, TODAY, TODAY, 2)

    def test_missing_property(self, db):
        with pytest.raises(NotFoundError):
            calculate_rental_price(db, 404, TODAY, TODAY + timedelta(days=30), 2)


class TestCalculateBookingPrice:
    def test_daily_property_is_priced_per_night(self):
        cabin = Property(price=Decimal("100.00"), renting_type=RentingType.DAILY, bedrooms=1)

        assert calculate_booking_price(cabin, TODAY, TODAY + timedelta(days=5), 2) == Decimal("500.00")

    def test_monthly_property_uses_lease_formula(self):
        flat = Property(price=Decimal("600.00"), renting_type=RentingType.MONTHLY, bedrooms=2)

        assert calculate_booking_price(flat, TODAY, TODAY + timedelta(days=60), 4) == Decimal("1440.00")

    def test_zero_nights_is_rejected(self):
        cabin = Property(price=Decimal("100.00"), renting_type=RentingType.DAILY, bedrooms=1)

        with pytest.raises(InvalidStateError):
            calculate_booking_price(cabin, TODAY, TODAY, 1)


class TestRefundPolicy:
    """100% at 7+ days, 50% at 1-6 days, nothing on the day"""

    @pytest.fixture
    def booking(self):
        return Booking(start_date=date(2026, 6, 20), total_price=Decimal("1000.00"))

    def test_full_refund_ten_days_out(self, booking):
        assert calculate_refund_amount(booking, date(2026, 6, 10)) == Decimal("1000.00")

    def test_full_refund_exactly_seven_days_out(self, booking):
        assert calculate_refund_amount(booking, date(2026, 6, 13)) == Decimal("1000.00")

    def test_half_refund_three_days_out(self, booking):
        assert calculate_refund_amount(booking, date(2026, 6, 17)) == Decimal("500.00")

    def test_no_refund_on_start_day(self, booking):
        assert calculate_refund_amount(booking, date(2026, 6, 20)) == Decimal("0.00")

    def test_no_refund_after_start(self, booking):
        assert calculate_refund_amount(booking, date(2026, 6, 25)) == Decimal("0.00")

    def test_partial_day_is_truncated(self, booking):
        """6 days 15 hours before the start counts as 6 days"""
        assert calculate_refund_amount(booking, datetime(2026, 6, 13, 9, 0)) == Decimal("500.00")

    def test_fraction_boundaries(self):
        assert refund_fraction(7) == Decimal("1.0")
        assert refund_fraction(6) == Decimal("0.5")
        assert refund_fraction(1) == Decimal("0.5")
        assert refund_fraction(0) == Decimal("0.0")
