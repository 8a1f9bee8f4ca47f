# services/rental_request_service.py
"""
Rental Request Service - lifecycle of annual/monthly lease proposals.

States:
     Pending -> Approved | Rejected | Cancelled
     Approved -> Cancelled (requester only)

Only the property owner approves or rejects; only the requester cancels.
Availability is checked when a request is created and again when it is
approved, excluding the request itself. Two overlapping requests can both be
pending, but only one of them can ever be approved.
"""
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Query, Session
from sqlalchemy.orm.exc import StaleDataError

from models import Property, PropertyStatus, RentalRequest, RentalRequestStatus, TenantStatus, User, UserRole
from models.rental_request import add_months
from schemas.rental_request import RentalRequestCreate, RentalRequestFilter, RentalRequestUpdate
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
from services.pricing_service import CENT, calculate_rental_price, lease_months

logger = logging.getLogger(__name__)

MIN_LEASE_DAYS = 180
MAX_ADVANCE_DAYS = 365
EXPIRY_DAYS = 30
DECIDED = {"approve": "approved", "reject": "rejected"}

SORT_COLUMNS = {
     "startdate": RentalRequest.proposed_start_date,
     "enddate": RentalRequest.proposed_end_date,
     "totalprice": RentalRequest.total_price,
     "status": RentalRequest.status,
     "createdat": RentalRequest.created_at,
}


def validate_rental_request(
     db: Session,
     property_id: int,
     start_date: date,
     end_date: date,
     number_of_guests: int,
     today: Optional[date] = None
) -> Tuple[bool, List[str]]:
     """
     Check a candidate lease against the rental rules.

     Every violation is collected; nothing short-circuits except a missing
     property, which makes the property-based rules meaningless.

     Returns:
          (is_valid: bool, errors: list of messages)
     """
     today = resolve_today(today)
     errors: List[str] = []

     if property_id <= 0:
          errors.append("Valid property ID is required")
     if start_date >= end_date:
          errors.append("End date must be after start date")
     if start_date < today:
          errors.append("Start date cannot be in the past")
     if number_of_guests < 1:
          errors.append("Number of guests must be at least 1")

     prop = db.query(Property).filter(Property.id == property_id).first()
     if prop is None:
          errors.append("Property not found")
          return False, errors

     if prop.status != PropertyStatus.AVAILABLE:
          errors.append("Property is not available for rental")

     if number_of_guests > prop.max_guests:
          errors.append(
               f"Property accommodates maximum {prop.max_guests} guests based on {prop.bedrooms} bedrooms"
          )

     if (end_date - start_date).days < MIN_LEASE_DAYS:
          errors.append("Minimum rental period is 6 months for annual leases")

     if (start_date - today).days > MAX_ADVANCE_DAYS:
          errors.append("Cannot book more than 1 year in advance")

     logger.debug("Rental request for property %s: %d validation errors", property_id, len(errors))
     return not errors, errors


class RentalRequestService:
     """Service class for rental request business logic."""

     # ------------------------------------------------------------------
     # Lookups and access control
     # ------------------------------------------------------------------

     @staticmethod
     def _get_or_404(db: Session, rental_request_id: int) -> RentalRequest:
          rental_request = db.query(RentalRequest).filter(RentalRequest.id == rental_request_id).first()
          if rental_request is None:
               raise NotFoundError.for_entity("Rental request", rental_request_id)
          return rental_request

     @staticmethod
     def _is_owner(rental_request: RentalRequest, user_id: int) -> bool:
          return rental_request.property is not None and rental_request.property.owner_id == user_id

     @staticmethod
     def _can_access(rental_request: RentalRequest, current_user: CurrentUser) -> bool:
          return (
               current_user.is_admin
               or rental_request.user_id == current_user.id
               or RentalRequestService._is_owner(rental_request, current_user.id)
          )

     @staticmethod
     def _scope(query: Query, current_user: CurrentUser) -> Query:
          """Restrict a RentalRequest query to what the caller may see."""
          if current_user.is_admin:
               return query
          if current_user.role == UserRole.LANDLORD:
               return query.join(Property, RentalRequest.property_id == Property.id).filter(
                    Property.owner_id == current_user.id
               )
          return query.filter(RentalRequest.user_id == current_user.id)

     @staticmethod
     def can_approve(db: Session, rental_request_id: int, user_id: int) -> bool:
          """Only the owner of the requested property may approve or reject."""
          rental_request = db.query(RentalRequest).filter(RentalRequest.id == rental_request_id).first()
          if rental_request is None:
               return False
          return RentalRequestService._is_owner(rental_request, user_id)

     # ------------------------------------------------------------------
     # CRUD
     # ------------------------------------------------------------------

     @staticmethod
     def get(db: Session, rental_request_id: int, current_user: CurrentUser) -> RentalRequest:
          rental_request = RentalRequestService._get_or_404(db, rental_request_id)
          if not RentalRequestService._can_access(rental_request, current_user):
               raise UnauthorizedError("You don't have permission to view this rental request")
          return rental_request

     @staticmethod
     def _price(
          db: Session,
          property_id: int,
          start_date: date,
          end_date: date,
          number_of_guests: int,
          proposed_total: Optional[Decimal]
     ) -> Tuple[int, Decimal, Decimal]:
          """(months, total price, monthly rent) for a lease proposal."""
          months = lease_months(start_date, end_date)
          if proposed_total:
               total = Decimal(proposed_total)
          else:
               total = calculate_rental_price(db, property_id, start_date, end_date, number_of_guests)
          monthly = (total / months).quantize(CENT)
          return months, total, monthly

     @staticmethod
     def create(
          db: Session,
          data: RentalRequestCreate,
          current_user: CurrentUser,
          today: Optional[date] = None
     ) -> RentalRequest:
          """
          Submit a rental request for a property.

          Raises:
               RentalValidationError: If any rental rule is violated (all listed)
               InvalidStateError: If the property is already claimed for the dates
          """
          is_valid, errors = validate_rental_request(
               db, data.property_id, data.start_date, data.end_date, data.number_of_guests, today
          )
          if not is_valid:
               raise RentalValidationError(errors)

          months, total, monthly = RentalRequestService._price(
               db, data.property_id, data.start_date, data.end_date, data.number_of_guests, data.total_price
          )
          end_date = add_months(data.start_date, months)

          if not is_property_available(db, data.property_id, data.start_date, end_date):
               raise InvalidStateError("Property is not available for the selected dates")

          rental_request = RentalRequest(
               property_id=data.property_id,
               user_id=current_user.id,
               number_of_guests=data.number_of_guests,
               proposed_monthly_rent=monthly,
               total_price=total,
               message=data.message or "",
               status=RentalRequestStatus.PENDING,
          )
          rental_request.set_lease_period(data.start_date, months)
          db.add(rental_request)
          db.flush()

          prop = rental_request.property
          NotificationService.create_notification(
               db,
               prop.owner_id,
               "New Rental Request",
               f"A new rental request was submitted for {prop.name} starting {data.start_date}.",
               "rental_request_created",
               rental_request.id,
          )

          logger.info(
               "Created rental request %s for property %s by user %s",
               rental_request.id, data.property_id, current_user.id
          )
          return rental_request

     @staticmethod
     def update(
          db: Session,
          rental_request_id: int,
          data: RentalRequestUpdate,
          current_user: CurrentUser,
          today: Optional[date] = None
     ) -> RentalRequest:
          """
          Change a pending request's dates, guests, price or message.

          Availability is not re-checked here; approval does that.
          """
          rental_request = RentalRequestService._get_or_404(db, rental_request_id)
          if not (
               rental_request.user_id == current_user.id
               or RentalRequestService._is_owner(rental_request, current_user.id)
          ):
               raise UnauthorizedError("You don't have permission to update this rental request")

          if rental_request.status != RentalRequestStatus.PENDING:
               raise InvalidStateError("Only pending rental requests can be updated")

          is_valid, errors = validate_rental_request(
               db, rental_request.property_id, data.start_date, data.end_date, data.number_of_guests, today
          )
          if not is_valid:
               raise RentalValidationError(errors)

          months, total, monthly = RentalRequestService._price(
               db,
               rental_request.property_id,
               data.start_date,
               data.end_date,
               data.number_of_guests,
               data.total_price,
          )
          rental_request.set_lease_period(data.start_date, months)
          rental_request.number_of_guests = data.number_of_guests
          rental_request.total_price = total
          rental_request.proposed_monthly_rent = monthly
          if data.message is not None:
               rental_request.message = data.message

          RentalRequestService._flush(db, rental_request_id)
          logger.info("Updated rental request %s", rental_request_id)
          return rental_request

     @staticmethod
     def delete(db: Session, rental_request_id: int, current_user: CurrentUser) -> None:
          rental_request = RentalRequestService._get_or_404(db, rental_request_id)
          if not (
               rental_request.user_id == current_user.id
               or RentalRequestService._is_owner(rental_request, current_user.id)
          ):
               raise UnauthorizedError("You don't have permission to delete this rental request")

          if rental_request.status not in (RentalRequestStatus.PENDING, RentalRequestStatus.REJECTED):
               raise InvalidStateError("Only pending or rejected rental requests can be deleted")

          db.delete(rental_request)
          db.flush()
          logger.info("Deleted rental request %s", rental_request_id)

     # ------------------------------------------------------------------
     # Approval workflow
     # ------------------------------------------------------------------

     @staticmethod
     def _flush(db: Session, rental_request_id: int) -> None:
          try:
               db.flush()
          except StaleDataError as e:
               logger.warning("Concurrent update while saving rental request %s", rental_request_id)
               raise ConcurrencyConflictError(
                    "The property or request was modified by another transaction; please retry"
               ) from e

     @staticmethod
     def _decide(
          db: Session,
          rental_request_id: int,
          current_user: CurrentUser,
          action: str
     ) -> RentalRequest:
          """Owner and Pending gates shared by approve and reject."""
          rental_request = RentalRequestService._get_or_404(db, rental_request_id)
          if not RentalRequestService._is_owner(rental_request, current_user.id):
               raise UnauthorizedError(f"You don't have permission to {action} this rental request")
          if rental_request.status != RentalRequestStatus.PENDING:
               raise InvalidStateError(f"Only pending rental requests can be {DECIDED[action]}")
          return rental_request

     @staticmethod
     def approve(
          db: Session,
          rental_request_id: int,
          current_user: CurrentUser,
          reason: Optional[str] = None,
          now: Optional[datetime] = None
     ) -> RentalRequest:
          """
          Approve a pending request after re-checking availability.

          The property row is touched in the same transaction; its version
          counter makes a concurrent approval on the same property fail at
          flush time instead of double-booking.

          Raises:
               NotFoundError, UnauthorizedError, InvalidStateError
          """
          now = resolve_now(now)
          rental_request = RentalRequestService._decide(db, rental_request_id, current_user, "approve")

          if not is_property_available(
               db,
               rental_request.property_id,
               rental_request.proposed_start_date,
               rental_request.proposed_end_date,
               exclude_request_id=rental_request.id,
          ):
               raise InvalidStateError("Property is no longer available for the requested dates")

          rental_request.status = RentalRequestStatus.APPROVED
          rental_request.response_date = now
          rental_request.landlord_response = reason
          rental_request.property.claim(now)
          RentalRequestService._flush(db, rental_request_id)

          NotificationService.create_notification(
               db,
               rental_request.user_id,
               "Rental Request Approved",
               f"Your rental request for {rental_request.property.name} was approved.",
               "rental_request_approved",
               rental_request.id,
          )
          logger.info("Approved rental request %s", rental_request_id)
          return rental_request

     @staticmethod
     def reject(
          db: Session,
          rental_request_id: int,
          current_user: CurrentUser,
          reason: Optional[str] = None,
          now: Optional[datetime] = None
     ) -> RentalRequest:
          now = resolve_now(now)
          rental_request = RentalRequestService._decide(db, rental_request_id, current_user, "reject")

          rental_request.status = RentalRequestStatus.REJECTED
          rental_request.response_date = now
          rental_request.landlord_response = reason
          RentalRequestService._flush(db, rental_request_id)

          NotificationService.create_notification(
               db,
               rental_request.user_id,
               "Rental Request Rejected",
               f"Your rental request for {rental_request.property.name} was rejected."
               + (f" Reason: {reason}" if reason else ""),
               "rental_request_rejected",
               rental_request.id,
          )
          logger.info("Rejected rental request %s", rental_request_id)
          return rental_request

     @staticmethod
     def cancel(
          db: Session,
          rental_request_id: int,
          current_user: CurrentUser,
          reason: Optional[str] = None,
          now: Optional[datetime] = None
     ) -> RentalRequest:
          now = resolve_now(now)
          rental_request = RentalRequestService._get_or_404(db, rental_request_id)

          if rental_request.user_id != current_user.id:
               raise UnauthorizedError("You can only cancel your own rental requests")

          if rental_request.status not in (RentalRequestStatus.PENDING, RentalRequestStatus.APPROVED):
               raise InvalidStateError("Only pending or approved rental requests can be cancelled")
          if rental_request.tenant is not None and rental_request.tenant.status == TenantStatus.ACTIVE:
               raise InvalidStateError("The lease has already started; the landlord must end it")

          rental_request.status = RentalRequestStatus.CANCELLED
          rental_request.response_date = now
          rental_request.landlord_response = reason or "Cancelled by requester"
          RentalRequestService._flush(db, rental_request_id)

          NotificationService.create_notification(
               db,
               rental_request.property.owner_id,
               "Rental Request Cancelled",
               f"A rental request for {rental_request.property.name} was cancelled by the requester.",
               "rental_request_cancelled",
               rental_request.id,
          )
          logger.info("Cancelled rental request %s", rental_request_id)
          return rental_request

     # ------------------------------------------------------------------
     # Queries
     # ------------------------------------------------------------------

     @staticmethod
     def list_requests(
          db: Session,
          filters: RentalRequestFilter,
          current_user: CurrentUser
     ) -> Tuple[List[RentalRequest], int]:
          """
          Paginated, role-scoped listing.

          Returns:
               (page of rental requests, total matching count)
          """
          query = RentalRequestService._scope(db.query(RentalRequest), current_user)

          if filters.property_id is not None:
               query = query.filter(RentalRequest.property_id == filters.property_id)
          if filters.status is not None:
               query = query.filter(RentalRequest.status == filters.status)
          if filters.start_date is not None:
               query = query.filter(RentalRequest.proposed_start_date >= filters.start_date)
          if filters.end_date is not None:
               query = query.filter(RentalRequest.proposed_end_date <= filters.end_date)
          if filters.min_price is not None:
               query = query.filter(RentalRequest.total_price >= filters.min_price)
          if filters.max_price is not None:
               query = query.filter(RentalRequest.total_price <= filters.max_price)

          total = query.count()

          column = SORT_COLUMNS.get((filters.sort_by or "").lower(), RentalRequest.created_at)
          descending = (filters.sort_order or "DESC").upper() == "DESC"
          ordering = column.desc() if descending else column.asc()
          offset = (filters.page - 1) * filters.page_size
          items = (
               query.order_by(ordering, RentalRequest.id.desc() if descending else RentalRequest.id.asc())
               .offset(offset)
               .limit(filters.page_size)
               .all()
          )
          return items, total

     @staticmethod
     def get_pending(db: Session, current_user: CurrentUser) -> List[RentalRequest]:
          query = RentalRequestService._scope(db.query(RentalRequest), current_user)
          return (
               query.filter(RentalRequest.status == RentalRequestStatus.PENDING)
               .order_by(RentalRequest.created_at, RentalRequest.id)
               .all()
          )

     @staticmethod
     def get_for_property(db: Session, property_id: int, current_user: CurrentUser) -> List[RentalRequest]:
          prop = db.query(Property).filter(Property.id == property_id).first()
          if prop is None:
               raise NotFoundError.for_entity("Property", property_id)
          if not (current_user.is_admin or prop.owner_id == current_user.id):
               raise UnauthorizedError("Only the property owner can list its rental requests")
          return (
               db.query(RentalRequest)
               .filter(RentalRequest.property_id == property_id)
               .order_by(RentalRequest.created_at.desc(), RentalRequest.id.desc())
               .all()
          )

     @staticmethod
     def get_expired(
          db: Session,
          current_user: CurrentUser,
          now: Optional[datetime] = None
     ) -> List[RentalRequest]:
          """Pending requests nobody acted on within EXPIRY_DAYS."""
          cutoff = resolve_now(now) - timedelta(days=EXPIRY_DAYS)
          query = RentalRequestService._scope(db.query(RentalRequest), current_user)
          return (
               query.filter(
                    RentalRequest.status == RentalRequestStatus.PENDING,
                    RentalRequest.created_at < cutoff,
               )
               .order_by(RentalRequest.proposed_end_date)
               .all()
          )

     @staticmethod
     def requester_name(db: Session, rental_request: RentalRequest) -> Optional[str]:
          user = db.query(User).filter(User.id == rental_request.user_id).first()
          return user.full_name if user else None
