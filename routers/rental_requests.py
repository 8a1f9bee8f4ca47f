# routers/rental_requests.py
"""
Rental request API routes.

Lifecycle of lease proposals:
- Tenant: submits, edits (while pending), cancels own requests
- Landlord: approves or rejects requests on own properties
- Admin: read access to every request
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from models import RentalRequest, RentalRequestStatus
from schemas.common import ValidationResultResponse
from schemas.rental_request import (
     RentalRequestCreate,
     RentalRequestUpdate,
     RentalDecisionRequest,
     RentalRequestFilter,
     RentalRequestResponse,
     RentalRequestListResponse,
     PriceQuoteRequest,
     PriceQuoteResponse,
)
from security import get_current_user
from services.context import CurrentUser
from services.pricing_service import calculate_rental_price, lease_months
from services.rental_request_service import RentalRequestService, validate_rental_request

router = APIRouter(prefix="/api/rental-requests", tags=["rental-requests"])


def _build_rental_request_response(db: Session, rental_request: RentalRequest) -> RentalRequestResponse:
     """Build RentalRequestResponse with related names."""
     response = RentalRequestResponse.model_validate(rental_request)
     if rental_request.property is not None:
          response.property_name = rental_request.property.name
     response.user_name = RentalRequestService.requester_name(db, rental_request)
     return response


@router.post(
     "",
     response_model=RentalRequestResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Submit a rental request"
)
def create_rental_request(
     request_data: RentalRequestCreate,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     """
     Propose a lease on a property.

     - **start_date / end_date**: requested period; the stored end date is
       rounded up to whole months
     - **number_of_guests**: at most two per bedroom
     - **total_price**: optional; computed from the property price when omitted

     Every rule violation is reported in a single 400 response.
     """
     rental_request = RentalRequestService.create(db, request_data, current_user)
     return _build_rental_request_response(db, rental_request)


@router.post("/validate", response_model=ValidationResultResponse, summary="Dry-run the rental rules")
def validate_rental_request_route(
     request_data: RentalRequestCreate,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     is_valid, errors = validate_rental_request(
          db,
          request_data.property_id,
          request_data.start_date,
          request_data.end_date,
          request_data.number_of_guests,
     )
     return ValidationResultResponse(is_valid=is_valid, errors=errors)


@router.post("/quote", response_model=PriceQuoteResponse, summary="Price a lease")
def quote_rental_price(
     quote: PriceQuoteRequest,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     total = calculate_rental_price(
          db, quote.property_id, quote.start_date, quote.end_date, quote.number_of_guests
     )
     return PriceQuoteResponse(
          property_id=quote.property_id,
          months=lease_months(quote.start_date, quote.end_date),
          total_price=total,
     )


@router.get("", response_model=RentalRequestListResponse, summary="List rental requests")
def list_rental_requests(
     property_id: Optional[int] = None,
     status_filter: Optional[RentalRequestStatus] = Query(None, alias="status"),
     start_date: Optional[date] = None,
     end_date: Optional[date] = None,
     min_price: Optional[Decimal] = Query(None, ge=0),
     max_price: Optional[Decimal] = Query(None, ge=0),
     sort_by: str = Query("createdat", description="startdate, enddate, totalprice, status or createdat"),
     sort_order: str = Query("DESC", description="ASC or DESC"),
     page: int = Query(1, ge=1),
     page_size: int = Query(10, ge=1, le=100),
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     """
     Role-scoped listing: tenants see their own requests, landlords the
     requests on their properties, admins everything.
     """
     filters = RentalRequestFilter(
          property_id=property_id,
          status=status_filter,
          start_date=start_date,
          end_date=end_date,
          min_price=min_price,
          max_price=max_price,
          sort_by=sort_by,
          sort_order=sort_order,
          page=page,
          page_size=page_size,
     )
     items, total = RentalRequestService.list_requests(db, filters, current_user)
     return RentalRequestListResponse(
          items=[_build_rental_request_response(db, r) for r in items],
          total=total,
          page=page,
          page_size=page_size,
     )


@router.get("/pending", response_model=List[RentalRequestResponse], summary="Pending requests")
def get_pending_rental_requests(
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     requests = RentalRequestService.get_pending(db, current_user)
     return [_build_rental_request_response(db, r) for r in requests]


@router.get("/expired", response_model=List[RentalRequestResponse], summary="Stale pending requests")
def get_expired_rental_requests(
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     requests = RentalRequestService.get_expired(db, current_user)
     return [_build_rental_request_response(db, r) for r in requests]


@router.get(
     "/property/{property_id}",
     response_model=List[RentalRequestResponse],
     summary="Requests for one property"
)
def get_property_rental_requests(
     property_id: int,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     requests = RentalRequestService.get_for_property(db, property_id, current_user)
     return [_build_rental_request_response(db, r) for r in requests]


@router.get("/{request_id}", response_model=RentalRequestResponse, summary="Get rental request by ID")
def get_rental_request(
     request_id: int,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     rental_request = RentalRequestService.get(db, request_id, current_user)
     return _build_rental_request_response(db, rental_request)


@router.get("/{request_id}/can-approve", summary="Whether the caller may decide this request")
def can_approve_rental_request(
     request_id: int,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     return {"can_approve": RentalRequestService.can_approve(db, request_id, current_user.id)}


@router.put("/{request_id}", response_model=RentalRequestResponse, summary="Update a pending request")
def update_rental_request(
     request_id: int,
     request_data: RentalRequestUpdate,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     rental_request = RentalRequestService.update(db, request_id, request_data, current_user)
     return _build_rental_request_response(db, rental_request)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a rental request")
def delete_rental_request(
     request_id: int,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     """Only pending or rejected requests can be deleted."""
     RentalRequestService.delete(db, request_id, current_user)
     return None


@router.post("/{request_id}/approve", response_model=RentalRequestResponse, summary="Approve a request")
def approve_rental_request(
     request_id: int,
     decision: Optional[RentalDecisionRequest] = None,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     """
     Approve a pending request. Availability is re-checked first; if another
     lease or booking has claimed the dates the request stays pending and a
     409 is returned.
     """
     reason = decision.reason if decision else None
     rental_request = RentalRequestService.approve(db, request_id, current_user, reason)
     return _build_rental_request_response(db, rental_request)


@router.post("/{request_id}/reject", response_model=RentalRequestResponse, summary="Reject a request")
def reject_rental_request(
     request_id: int,
     decision: Optional[RentalDecisionRequest] = None,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     reason = decision.reason if decision else None
     rental_request = RentalRequestService.reject(db, request_id, current_user, reason)
     return _build_rental_request_response(db, rental_request)


@router.post("/{request_id}/cancel", response_model=RentalRequestResponse, summary="Cancel own request")
def cancel_rental_request(
     request_id: int,
     decision: Optional[RentalDecisionRequest] = None,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     reason = decision.reason if decision else None
     rental_request = RentalRequestService.cancel(db, request_id, current_user, reason)
     return _build_rental_request_response(db, rental_request)
