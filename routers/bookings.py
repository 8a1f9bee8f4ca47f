# routers/bookings.py
"""
Booking API routes.

Both parties to a booking (the guest and the property owner) can view,
update and cancel it; admins can act on any booking.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from models import Booking, BookingStatus
from schemas.booking import (
     BookingCreate,
     BookingUpdate,
     BookingCancellationRequest,
     BookingCancellationResponse,
     BookingResponse,
     BookingListResponse,
     RefundQuoteResponse,
)
from security import get_current_user
from services.booking_service import BookingService
from services.context import CurrentUser, require_admin

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


def _build_booking_response(booking: Booking) -> BookingResponse:
     """Build BookingResponse with the property name."""
     response = BookingResponse.model_validate(booking)
     if booking.property is not None:
          response.property_name = booking.property.name
     return response


@router.post(
     "",
     response_model=BookingResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Book a stay"
)
def create_booking(
     booking_data: BookingCreate,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     """
     Reserve [start_date, end_date) on a property.

     Daily properties are priced per night, monthly ones with the lease
     formula, unless **total_price** is supplied.
     """
     booking = BookingService.create(db, booking_data, current_user)
     return _build_booking_response(booking)


@router.get("", response_model=BookingListResponse, summary="List bookings")
def list_bookings(
     property_id: Optional[int] = None,
     status_filter: Optional[BookingStatus] = Query(None, alias="status"),
     start_date: Optional[date] = None,
     end_date: Optional[date] = None,
     page: int = Query(1, ge=1),
     page_size: int = Query(10, ge=1, le=100),
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     items, total = BookingService.list_bookings(
          db,
          current_user,
          property_id=property_id,
          status=status_filter,
          start_date=start_date,
          end_date=end_date,
          page=page,
          page_size=page_size,
     )
     return BookingListResponse(
          items=[_build_booking_response(b) for b in items],
          total=total,
          page=page,
          page_size=page_size,
     )


@router.get("/current", response_model=List[BookingResponse], summary="Stays in progress")
def get_current_stays(
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     return [_build_booking_response(b) for b in BookingService.current_stays(db, current_user)]


@router.get("/upcoming", response_model=List[BookingResponse], summary="Future stays")
def get_upcoming_stays(
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     return [_build_booking_response(b) for b in BookingService.upcoming_stays(db, current_user)]


@router.post("/refresh-statuses", summary="Advance booking statuses (admin)")
def refresh_booking_statuses(
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     require_admin(current_user)
     return BookingService.refresh_statuses(db)


@router.get("/{booking_id}", response_model=BookingResponse, summary="Get booking by ID")
def get_booking(
     booking_id: int,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     return _build_booking_response(BookingService.get(db, booking_id, current_user))


@router.put("/{booking_id}", response_model=BookingResponse, summary="Update a booking")
def update_booking(
     booking_id: int,
     booking_data: BookingUpdate,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     """
     Change dates, guests, payment status or move the booking forward.
     New dates are checked against other bookings and approved leases.
     """
     booking = BookingService.update(db, booking_id, booking_data, current_user)
     return _build_booking_response(booking)


@router.post(
     "/{booking_id}/cancel",
     response_model=BookingCancellationResponse,
     summary="Cancel a booking"
)
def cancel_booking(
     booking_id: int,
     cancellation: BookingCancellationRequest,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     """
     Cancel and record the refund: full at 7+ days before check-in,
     half at 1-6 days, nothing on the day itself.
     """
     booking, refund = BookingService.cancel(
          db, booking_id, current_user, cancellation.reason, cancellation.additional_notes
     )
     return BookingCancellationResponse(booking=_build_booking_response(booking), refund_amount=refund)


@router.get("/{booking_id}/refund", response_model=RefundQuoteResponse, summary="Quote the refund")
def get_refund_quote(
     booking_id: int,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     refund = BookingService.calculate_refund(db, booking_id, current_user)
     return RefundQuoteResponse(booking_id=booking_id, refund_amount=refund)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a booking")
def delete_booking(
     booking_id: int,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     BookingService.delete(db, booking_id, current_user)
     return None
