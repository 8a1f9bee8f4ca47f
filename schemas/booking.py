# schemas/booking.py
"""
Pydantic schemas for Booking API request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models import BookingStatus


class BookingCreate(BaseModel):
     """Schema for reserving a stay."""
     property_id: int = Field(..., gt=0, description="Property to book")
     start_date: date = Field(..., description="Check-in date")
     end_date: date = Field(..., description="Check-out date (exclusive)")
     number_of_guests: int = Field(1, ge=1)
     total_price: Optional[Decimal] = Field(
          None, gt=0, max_digits=12, decimal_places=2,
          description="Agreed total; computed from the property price when omitted"
     )
     special_requests: Optional[str] = Field(None, max_length=1000)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "property_id": 3,
                    "start_date": "2026-12-20",
                    "end_date": "2026-12-27",
                    "number_of_guests": 2
               }
          }
     )


class BookingUpdate(BaseModel):
     """Schema for updating an existing booking; omitted fields are unchanged."""
     start_date: Optional[date] = None
     end_date: Optional[date] = None
     number_of_guests: Optional[int] = Field(None, ge=1)
     status: Optional[BookingStatus] = None
     total_price: Optional[Decimal] = Field(
          None, gt=0, max_digits=12, decimal_places=2,
          description="Agreed total; recomputed when dates or guests change and omitted"
     )
     payment_status: Optional[str] = Field(None, max_length=50)
     special_requests: Optional[str] = Field(None, max_length=1000)


class BookingCancellationRequest(BaseModel):
     reason: str = Field(..., min_length=1, max_length=500)
     additional_notes: Optional[str] = Field(None, max_length=1000)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "reason": "Change of plans",
                    "additional_notes": "Will rebook next month"
               }
          }
     )


class BookingResponse(BaseModel):
     """Schema for booking response."""
     id: int
     property_id: int
     user_id: int
     start_date: date
     end_date: date
     number_of_guests: int
     total_price: Decimal
     payment_status: str
     status: BookingStatus
     special_requests: Optional[str] = None
     created_at: datetime
     updated_at: datetime

     # Optional related data
     property_name: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)


class BookingCancellationResponse(BaseModel):
     booking: BookingResponse
     refund_amount: Decimal


class RefundQuoteResponse(BaseModel):
     booking_id: int
     refund_amount: Decimal


class BookingListResponse(BaseModel):
     """Schema for paginated booking list response."""
     items: List[BookingResponse]
     total: int
     page: int = 1
     page_size: int = 10


class BlockedPeriod(BaseModel):
     start_date: date
     end_date: date
     reason: str


class AvailabilityResponse(BaseModel):
     property_id: int
     start_date: date
     end_date: date
     is_available: bool
     is_daily_rental: bool
     conflicting_booking_ids: List[int]
     conflicting_request_ids: List[int]
     blocked_periods: List[BlockedPeriod]
