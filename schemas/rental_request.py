# schemas/rental_request.py
"""
Pydantic schemas for RentalRequest API request/response validation.

Business rules (lease length, guest capacity, advance-booking cap, ...) are
checked by the service so that every violation is reported together; the
schemas only enforce shape.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models import RentalRequestStatus


class RentalRequestCreate(BaseModel):
     """Schema for submitting a new rental request."""
     property_id: int = Field(..., description="Property to lease")
     start_date: date = Field(..., description="Proposed lease start")
     end_date: date = Field(..., description="Proposed lease end")
     number_of_guests: int = Field(1, description="Number of occupants")
     total_price: Optional[Decimal] = Field(
          None, gt=0, max_digits=12, decimal_places=2,
          description="Proposed total; computed from the property price when omitted"
     )
     message: Optional[str] = Field(None, max_length=1000, description="Note for the landlord")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "property_id": 1,
                    "start_date": "2026-11-01",
                    "end_date": "2027-05-01",
                    "number_of_guests": 2,
                    "message": "Looking for a long-term lease."
               }
          }
     )


class RentalRequestUpdate(BaseModel):
     """Schema for changing a pending rental request."""
     start_date: date
     end_date: date
     number_of_guests: int = 1
     total_price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     message: Optional[str] = Field(None, max_length=1000)


class RentalDecisionRequest(BaseModel):
     """Landlord's approve/reject payload, or the requester's cancel reason."""
     reason: Optional[str] = Field(None, max_length=1000)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "reason": "Welcome aboard!"
               }
          }
     )


class PriceQuoteRequest(BaseModel):
     property_id: int = Field(..., gt=0)
     start_date: date
     end_date: date
     number_of_guests: int = Field(1, ge=1)


class PriceQuoteResponse(BaseModel):
     property_id: int
     months: int
     total_price: Decimal


class RentalRequestFilter(BaseModel):
     """Filters, sorting and paging for listing rental requests."""
     property_id: Optional[int] = None
     status: Optional[RentalRequestStatus] = None
     start_date: Optional[date] = None
     end_date: Optional[date] = None
     min_price: Optional[Decimal] = None
     max_price: Optional[Decimal] = None
     sort_by: Optional[str] = "createdat"
     sort_order: Optional[str] = "DESC"
     page: int = Field(1, ge=1)
     page_size: int = Field(10, ge=1, le=100)


class RentalRequestResponse(BaseModel):
     """Schema for rental request response."""
     id: int
     property_id: int
     user_id: int
     proposed_start_date: date
     proposed_end_date: date
     lease_duration_months: int
     number_of_guests: int
     proposed_monthly_rent: Decimal
     total_price: Decimal
     message: Optional[str] = None
     status: RentalRequestStatus
     response_date: Optional[datetime] = None
     landlord_response: Optional[str] = None
     created_at: datetime
     updated_at: datetime

     # Optional related data
     property_name: Optional[str] = None
     user_name: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)


class RentalRequestListResponse(BaseModel):
     """Schema for paginated rental request list response."""
     items: List[RentalRequestResponse]
     total: int
     page: int = 1
     page_size: int = 10
