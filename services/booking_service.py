# services/booking_service.py
"""
Booking Service - confirmed stays on a property.

Bookings move forward only:
     Upcoming -> Active -> Completed
     Upcoming | Active -> Cancelled
Completed and Cancelled bookings are never revived. Creating a booking or
moving its dates runs the same availability check as rental requests.
"""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Query, Session
from sqlalchemy.orm.exc import StaleDataError

from models import Booking, BookingStatus, Payment, PaymentStatus, PaymentType, Property, PropertyStatus, UserRole
from schemas.booking import BookingCreate, BookingUpdate
from services.availability_service import is_property_available
from services.context import CurrentUser, resolve_now, resolve_today
from services.exceptions import (
     ConcurrencyConflictError,
     InvalidStateError,
     NotFoundError,
     RentalValidationError,
     UnauthorizedError,
)
from services.notification_service import NotificationService
from services.pricing_service import calculate_booking_price, calculate_refund_amount

logger = logging.getLogger(__name__)


class BookingService:
     """Service class for booking business logic."""

     @staticmethod
     def _get_or_404(db: Session, booking_id: int) -> Booking:
          booking = db.query(Booking).filter(Booking.id == booking_id).first()
          if booking is None:
               raise NotFoundError.for_entity("Booking", booking_id)
          return booking

     @staticmethod
     def _is_party(booking: Booking, current_user: CurrentUser) -> bool:
          """The guest who booked, or the landlord who owns the property."""
          return booking.user_id == current_user.id or booking.property.owner_id == current_user.id

     @staticmethod
     def _get_authorized(db: Session, booking_id: int, current_user: CurrentUser, action: str) -> Booking:
          booking = BookingService._get_or_404(db, booking_id)
          if not (current_user.is_admin or BookingService._is_party(booking, current_user)):
               raise UnauthorizedError(f"You don't have permission to {action} this booking")
          return booking

     @staticmethod
     def _scope(query: Query, current_user: CurrentUser) -> Query:
          if current_user.is_admin:
               return query
          if current_user.role == UserRole.LANDLORD:
               return query.join(Property, Booking.property_id == Property.id).filter(
                    Property.owner_id == current_user.id
               )
          return query.filter(Booking.user_id == current_user.id)

     @staticmethod
     def _flush(db: Session, booking_id: Optional[int]) -> None:
          try:
               db.flush()
          except StaleDataError as e:
               logger.warning("Concurrent update while saving booking %s", booking_id)
               raise ConcurrencyConflictError(
                    "The property or booking was modified by another transaction; please retry"
               ) from e

     # ------------------------------------------------------------------
     # CRUD
     # ------------------------------------------------------------------

     @staticmethod
     def get(db: Session, booking_id: int, current_user: CurrentUser) -> Booking:
          return BookingService._get_authorized(db, booking_id, current_user, "view")

     @staticmethod
     def create(
          db: Session,
          data: BookingCreate,
          current_user: CurrentUser,
          today: Optional[date] = None
     ) -> Booking:
          """
          Reserve a stay for the current user.

          Raises:
               NotFoundError: If the property doesn't exist
               RentalValidationError: If the dates or guest count are invalid
               InvalidStateError: If the dates are already claimed
          """
          today = resolve_today(today)
          prop = db.query(Property).filter(Property.id == data.property_id).first()
          if prop is None:
               raise NotFoundError.for_entity("Property", data.property_id)

          errors = []
          if data.start_date >= data.end_date:
               errors.append("End date must be after start date")
          if data.start_date < today:
               errors.append("Start date cannot be in the past")
          if prop.status != PropertyStatus.AVAILABLE:
               errors.append("Property is not available for rental")
          if data.number_of_guests > prop.max_guests:
               errors.append(
                    f"Property accommodates maximum {prop.max_guests} guests based on {prop.bedrooms} bedrooms"
               )
          if errors:
               raise RentalValidationError(errors, "Invalid booking: " + ", ".join(errors))

          if not is_property_available(db, prop.id, data.start_date, data.end_date):
               raise InvalidStateError("Property is not available for the selected dates")

          total = data.total_price or calculate_booking_price(
               prop, data.start_date, data.end_date, data.number_of_guests
          )
          booking = Booking(
               property_id=prop.id,
               user_id=current_user.id,
               start_date=data.start_date,
               end_date=data.end_date,
               number_of_guests=data.number_of_guests,
               total_price=total,
               special_requests=data.special_requests,
               payment_status="Pending",
               status=BookingStatus.UPCOMING,
          )
          db.add(booking)
          # claims the dates: concurrent bookings on this property collide on its version
          prop.claim(resolve_now())
          BookingService._flush(db, None)

          NotificationService.create_notification(
               db,
               prop.owner_id,
               "New Booking",
               f"{prop.name} was booked from {data.start_date} to {data.end_date}.",
               "booking_created",
               booking.id,
          )
          logger.info("Created booking %s for property %s by user %s", booking.id, prop.id, current_user.id)
          return booking

     @staticmethod
     def update(
          db: Session,
          booking_id: int,
          data: BookingUpdate,
          current_user: CurrentUser,
          today: Optional[date] = None
     ) -> Booking:
          """
          Change a live booking's dates, guests, status or notes.

          New dates and guest counts are held to the same rules as `create`.
          The price is recomputed when either changes, unless one is supplied.

          Raises:
               RentalValidationError: If the new dates or guest count are invalid
               InvalidStateError: If the booking is closed, the new dates are
                    claimed, or the status change is not allowed
          """
          today = resolve_today(today)
          booking = BookingService._get_authorized(db, booking_id, current_user, "update")
          if booking.is_terminal:
               raise InvalidStateError(f"{booking.status.value} bookings cannot be modified")

          prop = booking.property
          start_date = data.start_date or booking.start_date
          end_date = data.end_date or booking.end_date
          number_of_guests = data.number_of_guests or booking.number_of_guests
          dates_changed = start_date != booking.start_date or end_date != booking.end_date
          guests_changed = number_of_guests != booking.number_of_guests

          errors = []
          if dates_changed and start_date >= end_date:
               errors.append("End date must be after start date")
          # an active stay keeps its past start date when only the end moves
          if start_date != booking.start_date and start_date < today:
               errors.append("Start date cannot be in the past")
          if guests_changed and number_of_guests > prop.max_guests:
               errors.append(
                    f"Property accommodates maximum {prop.max_guests} guests based on {prop.bedrooms} bedrooms"
               )
          if errors:
               raise RentalValidationError(errors, "Invalid booking: " + ", ".join(errors))

          if dates_changed:
               if not is_property_available(
                    db, booking.property_id, start_date, end_date, exclude_booking_id=booking.id
               ):
                    raise InvalidStateError("Property is not available for the selected dates")
               booking.start_date = start_date
               booking.end_date = end_date
               prop.claim(resolve_now())

          if data.status is not None and data.status != booking.status:
               if data.status == BookingStatus.CANCELLED:
                    raise InvalidStateError("Use the cancellation endpoint to cancel a booking")
               if not booking.can_transition_to(data.status):
                    raise InvalidStateError(
                         f"Cannot change booking status from {booking.status.value} to {data.status.value}"
                    )
               booking.status = data.status

          booking.number_of_guests = number_of_guests
          if data.total_price is not None:
               booking.total_price = data.total_price
          elif dates_changed or guests_changed:
               booking.total_price = calculate_booking_price(prop, start_date, end_date, number_of_guests)

          if data.payment_status is not None:
               booking.payment_status = data.payment_status
          if data.special_requests is not None:
               booking.special_requests = data.special_requests

          BookingService._flush(db, booking_id)
          logger.info("Updated booking %s", booking_id)
          return booking

     @staticmethod
     def cancel(
          db: Session,
          booking_id: int,
          current_user: CurrentUser,
          reason: str,
          additional_notes: Optional[str] = None,
          now: Optional[datetime] = None
     ) -> Tuple[Booking, Decimal]:
          """
          Cancel a booking and record the refund it earns.

          Returns:
               (cancelled booking, refund amount)
          """
          now = resolve_now(now)
          booking = BookingService._get_authorized(db, booking_id, current_user, "cancel")
          if not booking.can_transition_to(BookingStatus.CANCELLED):
               raise InvalidStateError(f"{booking.status.value} bookings cannot be cancelled")

          refund = calculate_refund_amount(booking, now)

          note = f"Cancelled: {reason}"
          if additional_notes:
               note += f" - {additional_notes}"
          booking.special_requests = f"{booking.special_requests}\n{note}" if booking.special_requests else note
          booking.status = BookingStatus.CANCELLED

          if refund > 0:
               db.add(Payment(
                    booking_id=booking.id,
                    amount=refund,
                    payment_type=PaymentType.REFUND,
                    status=PaymentStatus.PENDING,
               ))
               booking.payment_status = "Refunded"
          else:
               booking.payment_status = "Cancelled"

          BookingService._flush(db, booking_id)

          recipient = booking.property.owner_id if booking.user_id == current_user.id else booking.user_id
          NotificationService.create_notification(
               db,
               recipient,
               "Booking Cancelled",
               f"The booking for {booking.property.name} from {booking.start_date} was cancelled. Reason: {reason}",
               "booking_cancelled",
               booking.id,
          )
          logger.info("Booking %s cancelled by user %s, refund %s", booking_id, current_user.id, refund)
          return booking, refund

     @staticmethod
     def delete(db: Session, booking_id: int, current_user: CurrentUser) -> None:
          booking = BookingService._get_authorized(db, booking_id, current_user, "delete")
          if not booking.is_terminal:
               raise InvalidStateError("Only completed or cancelled bookings can be deleted")
          db.delete(booking)
          db.flush()
          logger.info("Deleted booking %s", booking_id)

     @staticmethod
     def calculate_refund(
          db: Session,
          booking_id: int,
          current_user: CurrentUser,
          cancelled_at: Optional[datetime] = None
     ) -> Decimal:
          booking = BookingService._get_authorized(db, booking_id, current_user, "view")
          return calculate_refund_amount(booking, resolve_now(cancelled_at))

     # ------------------------------------------------------------------
     # Queries
     # ------------------------------------------------------------------

     @staticmethod
     def list_bookings(
          db: Session,
          current_user: CurrentUser,
          property_id: Optional[int] = None,
          status: Optional[BookingStatus] = None,
          start_date: Optional[date] = None,
          end_date: Optional[date] = None,
          page: int = 1,
          page_size: int = 10
     ) -> Tuple[List[Booking], int]:
          query = BookingService._scope(db.query(Booking), current_user)

          if property_id is not None:
               query = query.filter(Booking.property_id == property_id)
          if status is not None:
               query = query.filter(Booking.status == status)
          if start_date is not None:
               query = query.filter(Booking.start_date >= start_date)
          if end_date is not None:
               query = query.filter(Booking.end_date <= end_date)

          total = query.count()
          offset = (page - 1) * page_size
          items = (
               query.order_by(Booking.start_date.desc(), Booking.id.desc())
               .offset(offset)
               .limit(page_size)
               .all()
          )
          return items, total

     @staticmethod
     def current_stays(db: Session, current_user: CurrentUser, today: Optional[date] = None) -> List[Booking]:
          today = resolve_today(today)
          query = BookingService._scope(db.query(Booking), current_user)
          return (
               query.filter(
                    Booking.start_date <= today,
                    Booking.end_date > today,
                    Booking.status != BookingStatus.CANCELLED,
               )
               .order_by(Booking.start_date)
               .all()
          )

     @staticmethod
     def upcoming_stays(db: Session, current_user: CurrentUser, today: Optional[date] = None) -> List[Booking]:
          today = resolve_today(today)
          query = BookingService._scope(db.query(Booking), current_user)
          return (
               query.filter(
                    Booking.start_date > today,
                    Booking.status != BookingStatus.CANCELLED,
               )
               .order_by(Booking.start_date)
               .all()
          )

     @staticmethod
     def refresh_statuses(db: Session, today: Optional[date] = None) -> dict:
          """
          Advance bookings whose dates have arrived or passed.

          Meant to run daily from a scheduler.

          Returns:
               Dictionary with the number of bookings activated and completed
          """
          today = resolve_today(today)

          starting = db.query(Booking).filter(
               Booking.status == BookingStatus.UPCOMING,
               Booking.start_date <= today,
          ).all()
          for booking in starting:
               booking.status = BookingStatus.ACTIVE
          db.flush()

          finished = db.query(Booking).filter(
               Booking.status == BookingStatus.ACTIVE,
               Booking.end_date <= today,
          ).all()
          for booking in finished:
               booking.status = BookingStatus.COMPLETED
          db.flush()

          logger.info("Booking status refresh: %d activated, %d completed", len(starting), len(finished))
          return {"activated": len(starting), "completed": len(finished)}
