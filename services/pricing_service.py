# services/pricing_service.py
"""
Pricing Service - rental price and cancellation refund calculations.

Rental price (monthly leases):
     months    = ceil(days / 30)
     total     = price * months
     surcharge = 10% of price per guest above two, per month

Refund policy (bookings):
     7+ days before start  -> 100%
     1-6 days before start -> 50%
     same day or later     -> 0%
"""
import logging
import math
from datetime import date, datetime, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from sqlalchemy.orm import Session

from models import Booking, Property, RentingType
from services.exceptions import InvalidStateError, NotFoundError

logger = logging.getLogger(__name__)

BASE_GUESTS = 2
EXTRA_GUEST_RATE = Decimal("0.10")
FULL_REFUND_DAYS = 7
PARTIAL_REFUND_DAYS = 1
CENT = Decimal("0.01")


def lease_months(start_date: date, end_date: date) -> int:
     """Whole billing months covering the range, rounding a partial month up."""
     return math.ceil((end_date - start_date).days / 30)


def _quantize(amount: Decimal) -> Decimal:
     return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def monthly_lease_price(price: Decimal, months: int, number_of_guests: int) -> Decimal:
     base_price = Decimal(price)
     total = base_price * months
     if number_of_guests > BASE_GUESTS:
          extra_guest_fee = base_price * EXTRA_GUEST_RATE
          total += extra_guest_fee * (number_of_guests - BASE_GUESTS) * months
     return _quantize(total)


def calculate_rental_price(
     db: Session,
     property_id: int,
     start_date: date,
     end_date: date,
     number_of_guests: int
) -> Decimal:
     """
     Total price of a lease on a property.

     Raises:
          NotFoundError: If the property doesn't exist
          InvalidStateError: If the range covers no billable month
     """
     prop = db.query(Property).filter(Property.id == property_id).first()
     if prop is None:
          raise NotFoundError.for_entity("Property", property_id)

     months = lease_months(start_date, end_date)
     if months <= 0:
          raise InvalidStateError("Invalid date range")

     total = monthly_lease_price(prop.price, months, number_of_guests)
     logger.info(
          "Rental price for property %s: %s months, %s guests = %s",
          property_id, months, number_of_guests, total
     )
     return total


def calculate_booking_price(prop: Property, start_date: date, end_date: date, number_of_guests: int) -> Decimal:
     """Daily properties charge per night; monthly ones use the lease formula."""
     if prop.renting_type == RentingType.DAILY:
          nights = (end_date - start_date).days
          if nights <= 0:
               raise InvalidStateError("Invalid date range")
          return _quantize(Decimal(prop.price) * nights)

     months = lease_months(start_date, end_date)
     if months <= 0:
          raise InvalidStateError("Invalid date range")
     return monthly_lease_price(prop.price, months, number_of_guests)


def refund_fraction(days_until_start: int) -> Decimal:
     if days_until_start >= FULL_REFUND_DAYS:
          return Decimal("1.0")
     if days_until_start >= PARTIAL_REFUND_DAYS:
          return Decimal("0.5")
     return Decimal("0.0")


def calculate_refund_amount(booking: Booking, cancelled_at: Union[date, datetime]) -> Decimal:
     """
     Refund owed when a booking is cancelled at `cancelled_at`.

     The booking starts at midnight of its start date; partial days are
     truncated, so cancelling on the start day itself refunds nothing.
     """
     if not isinstance(cancelled_at, datetime):
          cancelled_at = datetime.combine(cancelled_at, time.min)
     starts_at = datetime.combine(booking.start_date, time.min)
     days_until_start = (starts_at - cancelled_at).days

     return _quantize(Decimal(booking.total_price) * refund_fraction(days_until_start))
