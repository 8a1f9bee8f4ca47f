# services/availability_service.py
"""
Availability Service - date-range conflict checks for a property.

A property's dates are claimed by:
1. Approved rental requests  [proposed_start_date, proposed_end_date)
2. Upcoming/Active bookings  [start_date, end_date)

Intervals are half-open: a stay ending on the 15th does not conflict with
one starting on the 15th.

Checks are read-only. `is_property_available` fails closed: if the database
errors, the property is reported unavailable and the error is logged.
"""
import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from models import Booking, Property, RentalRequest, RentalRequestStatus, RentingType
from models.booking import BLOCKING_STATUSES
from services.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def has_overlap(existing_start: date, existing_end: date, new_start: date, new_end: date) -> bool:
     """Half-open overlap test for [existing_start, existing_end) and [new_start, new_end)."""
     return existing_start < new_end and existing_end > new_start


def conflicting_requests_query(
     db: Session,
     property_id: int,
     start_date: date,
     end_date: date,
     exclude_request_id: Optional[int] = None
) -> Query:
     """Approved rental requests on the property overlapping [start_date, end_date)."""
     query = db.query(RentalRequest).filter(
          RentalRequest.property_id == property_id,
          RentalRequest.status == RentalRequestStatus.APPROVED,
          RentalRequest.proposed_start_date < end_date,
          RentalRequest.proposed_end_date > start_date,
     )
     if exclude_request_id is not None:
          query = query.filter(RentalRequest.id != exclude_request_id)
     return query


def conflicting_bookings_query(
     db: Session,
     property_id: int,
     start_date: date,
     end_date: date,
     exclude_booking_id: Optional[int] = None
) -> Query:
     """Upcoming/Active bookings on the property overlapping [start_date, end_date)."""
     query = db.query(Booking).filter(
          Booking.property_id == property_id,
          Booking.status.in_(BLOCKING_STATUSES),
          Booking.start_date < end_date,
          Booking.end_date > start_date,
     )
     if exclude_booking_id is not None:
          query = query.filter(Booking.id != exclude_booking_id)
     return query


def is_property_available(
     db: Session,
     property_id: int,
     start_date: date,
     end_date: date,
     exclude_request_id: Optional[int] = None,
     exclude_booking_id: Optional[int] = None
) -> bool:
     """
     Return False iff an approved request or a live booking overlaps the range.

     Args:
          db: SQLAlchemy database session
          property_id: Property to check
          start_date: First day of the candidate range (inclusive)
          end_date: Last boundary of the candidate range (exclusive)
          exclude_request_id: Rental request to ignore (the one being approved)
          exclude_booking_id: Booking to ignore (the one being rescheduled)
     """
     try:
          request_conflict = conflicting_requests_query(
               db, property_id, start_date, end_date, exclude_request_id
          ).first()
          if request_conflict is not None:
               logger.info(
                    "Property %s unavailable %s..%s: overlaps approved rental request %s",
                    property_id, start_date, end_date, request_conflict.id
               )
               return False

          booking_conflict = conflicting_bookings_query(
               db, property_id, start_date, end_date, exclude_booking_id
          ).first()
          if booking_conflict is not None:
               logger.info(
                    "Property %s unavailable %s..%s: overlaps booking %s",
                    property_id, start_date, end_date, booking_conflict.id
               )
               return False
     except SQLAlchemyError:
          logger.exception("Error checking availability for property %s; treating as unavailable", property_id)
          return False

     return True


def check_property_availability(db: Session, property_id: int, start_date: date, end_date: date) -> dict:
     """
     Detailed availability report for a property and date window.

     Returns:
          Dictionary with the verdict, the ids of conflicting bookings and
          requests, and the blocked periods inside the window.

     Raises:
          NotFoundError: If the property doesn't exist
     """
     prop = db.query(Property).filter(Property.id == property_id).first()
     if prop is None:
          raise NotFoundError.for_entity("Property", property_id)

     bookings = (
          conflicting_bookings_query(db, property_id, start_date, end_date)
          .order_by(Booking.start_date)
          .all()
     )
     requests = (
          conflicting_requests_query(db, property_id, start_date, end_date)
          .order_by(RentalRequest.proposed_start_date)
          .all()
     )

     blocked_periods = [
          {"start_date": b.start_date, "end_date": b.end_date, "reason": "Booking"}
          for b in bookings
     ] + [
          {"start_date": r.proposed_start_date, "end_date": r.proposed_end_date, "reason": "Lease"}
          for r in requests
     ]
     blocked_periods.sort(key=lambda period: period["start_date"])

     return {
          "property_id": property_id,
          "start_date": start_date,
          "end_date": end_date,
          "is_available": not bookings and not requests,
          "is_daily_rental": prop.renting_type == RentingType.DAILY,
          "conflicting_booking_ids": [b.id for b in bookings],
          "conflicting_request_ids": [r.id for r in requests],
          "blocked_periods": blocked_periods,
     }
